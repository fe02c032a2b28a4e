"""
Multi-Source Candle Fetcher

Tries candle providers one after another until one returns a usable
series. Any single exchange can rate-limit or go down; the fallback chain
is what keeps a scan pass alive.
"""

import logging
import random
from typing import Optional, Sequence

from signal_engine.core.config import settings
from signal_engine.schemas.market import CandleRequest
from signal_engine.services.base import AllSourcesExhausted
from signal_engine.services.data_ingestion.interface import (
    DataIngestionServiceInterface,
    FetchResult,
)
from signal_engine.services.data_ingestion.normalizer import normalize
from signal_engine.services.data_ingestion.providers import (
    DEFAULT_PROVIDERS,
    ProviderDescriptor,
)
from signal_engine.services.data_ingestion.transport import (
    AiohttpTransport,
    HttpTransport,
)

logger = logging.getLogger(__name__)

ORDER_RANDOM = "random"
ORDER_PRIORITY = "priority"


class InsufficientCandles(Exception):
    """Provider answered, but with too few usable candles."""


class MultiSourceFetcher(DataIngestionServiceInterface):
    """
    Sequential first-success-wins fetcher.

    Usage:
        fetcher = MultiSourceFetcher()
        result = await fetcher.fetch("BTC/USDT", "5m", 120)
    """

    def __init__(
        self,
        providers: Optional[Sequence[ProviderDescriptor]] = None,
        transport: Optional[HttpTransport] = None,
        timeout: Optional[float] = None,
        min_candles: Optional[int] = None,
        order: Optional[str] = None,
        user_agent: Optional[str] = None,
        rng: Optional[random.Random] = None,
    ):
        self._providers = tuple(providers if providers is not None else DEFAULT_PROVIDERS)
        self._transport = transport or AiohttpTransport()
        self._timeout = timeout if timeout is not None else settings.request_timeout_seconds
        self._min_candles = min_candles if min_candles is not None else settings.min_candles
        self._order = order or settings.provider_order
        self._user_agent = user_agent or settings.user_agent
        self._rng = rng or random.Random()

        if self._order not in (ORDER_RANDOM, ORDER_PRIORITY):
            raise ValueError(f"Unknown provider order: {self._order}")

    @property
    def providers(self) -> tuple[ProviderDescriptor, ...]:
        return self._providers

    @property
    def transport(self) -> HttpTransport:
        return self._transport

    def _ordered_providers(self) -> list[ProviderDescriptor]:
        """Fresh uniform shuffle per call, or stable priority order."""
        ordered = list(self._providers)
        if self._order == ORDER_PRIORITY:
            ordered.sort(key=lambda p: p.priority)
        else:
            self._rng.shuffle(ordered)
        return ordered

    async def _attempt(
        self,
        provider: ProviderDescriptor,
        instrument: str,
        interval: str,
        limit: int,
    ) -> FetchResult:
        request = provider.build_request(instrument, interval, limit)
        headers = {"User-Agent": self._user_agent, **request.headers}

        payload = await self._transport.get_json(
            request.url,
            params=request.params,
            headers=headers,
            timeout=self._timeout,
        )
        candles = normalize(payload, provider.shape, provider.envelope_path)

        if len(candles) < self._min_candles:
            raise InsufficientCandles(
                f"{len(candles)} usable candles, need {self._min_candles}"
            )

        return FetchResult(
            instrument=instrument,
            source=provider.name,
            candles=candles[-limit:],
        )

    async def fetch(self, instrument: str, interval: str, limit: int) -> FetchResult:
        """
        Fetch candles for one instrument.

        Every per-provider failure is logged and skipped.

        Raises:
            AllSourcesExhausted: no provider produced a usable series
        """
        if hasattr(interval, "value"):
            interval = interval.value

        failures: dict[str, str] = {}

        for provider in self._ordered_providers():
            try:
                result = await self._attempt(provider, instrument, interval, limit)
            except Exception as e:
                reason = f"{type(e).__name__}: {e}"
                failures[provider.name] = reason
                logger.warning(f"{provider.name} failed for {instrument}: {reason}")
                continue

            logger.info(
                f"{provider.name}: {instrument} {interval} -> {len(result.candles)} candles"
            )
            return result

        logger.error(f"No data available for {instrument} from any source")
        raise AllSourcesExhausted(instrument, failures)

    async def execute(self, input_data: CandleRequest) -> FetchResult:
        return await self.fetch(
            input_data.instrument,
            input_data.interval.value,
            input_data.limit,
        )

    async def health_check(self) -> bool:
        """Fetcher is usable as long as it has providers configured."""
        return len(self._providers) > 0

    async def close(self) -> None:
        """Release the transport's connections if it holds any."""
        close = getattr(self._transport, "close", None)
        if close is not None:
            await close()


# Singleton instance
_service_instance: Optional[MultiSourceFetcher] = None


def get_data_ingestion_service() -> MultiSourceFetcher:
    """Get or create the shared fetcher instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = MultiSourceFetcher()
    return _service_instance
