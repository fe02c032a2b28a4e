"""
Candle Provider Descriptors

Public kline endpoints used by the multi-source fetcher.
Descriptors are immutable; the fetcher decides the order they are tried in.
"""

from dataclasses import dataclass, field
from typing import Callable, Optional

from signal_engine.schemas.market import ResponseShape


@dataclass(frozen=True)
class ProviderRequest:
    """Transport-agnostic description of one HTTP GET."""

    url: str
    params: dict = field(default_factory=dict)
    headers: dict = field(default_factory=dict)


@dataclass(frozen=True)
class ProviderDescriptor:
    """
    One candle source.

    build_request(instrument, interval, limit) -> ProviderRequest
    shape selects the normalizer; envelope_path locates the candle list
    inside enveloped payloads. priority is only used for priority ordering.
    """

    name: str
    build_request: Callable[[str, str, int], ProviderRequest]
    shape: ResponseShape
    envelope_path: Optional[tuple[str, ...]] = None
    priority: int = 100


# =============================================================================
# SYMBOL / INTERVAL MAPPING
# =============================================================================


def compact_symbol(instrument: str) -> str:
    """'btc/usdt' -> 'BTCUSDT' (Binance, Bybit)."""
    return instrument.upper().replace("/", "").replace("-", "").strip()


def dashed_symbol(instrument: str) -> str:
    """'BTC/USDT' -> 'BTC-USDT' (OKX)."""
    return instrument.upper().replace("/", "-").strip()


BYBIT_INTERVAL_MAP = {
    "1m": "1",
    "5m": "5",
    "15m": "15",
    "30m": "30",
    "1h": "60",
    "4h": "240",
    "1d": "D",
}

OKX_INTERVAL_MAP = {
    "1m": "1m",
    "5m": "5m",
    "15m": "15m",
    "30m": "30m",
    "1h": "1H",
    "4h": "4H",
    "1d": "1D",
}

# OKX caps a single candles request at 300 rows
OKX_MAX_LIMIT = 300


# =============================================================================
# REQUEST BUILDERS
# =============================================================================


def _binance_futures_request(instrument: str, interval: str, limit: int) -> ProviderRequest:
    return ProviderRequest(
        url="https://fapi.binance.com/fapi/v1/klines",
        params={"symbol": compact_symbol(instrument), "interval": interval, "limit": limit},
    )


def _binance_spot_request(instrument: str, interval: str, limit: int) -> ProviderRequest:
    return ProviderRequest(
        url="https://api.binance.com/api/v3/klines",
        params={"symbol": compact_symbol(instrument), "interval": interval, "limit": limit},
    )


def _bybit_request(instrument: str, interval: str, limit: int) -> ProviderRequest:
    return ProviderRequest(
        url="https://api.bybit.com/v5/market/kline",
        params={
            "category": "linear",
            "symbol": compact_symbol(instrument),
            "interval": BYBIT_INTERVAL_MAP.get(interval, interval),
            "limit": limit,
        },
    )


def _okx_request(instrument: str, interval: str, limit: int) -> ProviderRequest:
    return ProviderRequest(
        url="https://www.okx.com/api/v5/market/candles",
        params={
            "instId": dashed_symbol(instrument),
            "bar": OKX_INTERVAL_MAP.get(interval, interval),
            "limit": min(limit, OKX_MAX_LIMIT),
        },
    )


DEFAULT_PROVIDERS: tuple[ProviderDescriptor, ...] = (
    ProviderDescriptor(
        name="Binance Futures",
        build_request=_binance_futures_request,
        shape=ResponseShape.ARRAY_OF_ARRAYS,
        priority=1,
    ),
    ProviderDescriptor(
        name="Binance Spot",
        build_request=_binance_spot_request,
        shape=ResponseShape.ARRAY_OF_ARRAYS,
        priority=2,
    ),
    ProviderDescriptor(
        name="Bybit",
        build_request=_bybit_request,
        shape=ResponseShape.ENVELOPED,
        envelope_path=("result", "list"),
        priority=3,
    ),
    ProviderDescriptor(
        name="OKX",
        build_request=_okx_request,
        shape=ResponseShape.ENVELOPED,
        envelope_path=("data",),
        priority=4,
    ),
)
