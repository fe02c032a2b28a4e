"""
Indicator Engine Service Implementation

Calculates the momentum indicator set from candle data.
All calculations are deterministic and reproducible.
"""

from typing import Optional
import numpy as np

from signal_engine.schemas.market import Candle
from signal_engine.services.indicators.interface import (
    IndicatorServiceInterface,
    IndicatorSeries,
)
from signal_engine.services.indicators.calculations import (
    rsi,
    atr,
    bollinger_bands,
    velocity_acceleration,
)

RSI_PERIOD = 14
ATR_PERIOD = 14
BB_PERIOD = 20
BB_STD_DEV = 2.0


def _candles_to_arrays(candles: list[Candle]) -> tuple:
    """Convert candle list to numpy arrays."""
    highs = np.array([c.high for c in candles], dtype=float)
    lows = np.array([c.low for c in candles], dtype=float)
    closes = np.array([c.close for c in candles], dtype=float)
    return highs, lows, closes


def compute_indicator_series(candles: list[Candle]) -> IndicatorSeries:
    """Run every indicator over the full candle series."""
    highs, lows, closes = _candles_to_arrays(candles)

    upper, middle, lower = bollinger_bands(closes, BB_PERIOD, BB_STD_DEV)
    velocity, acceleration = velocity_acceleration(closes)

    return IndicatorSeries(
        closes=closes,
        rsi=rsi(closes, RSI_PERIOD),
        bb_upper=upper,
        bb_middle=middle,
        bb_lower=lower,
        velocity=velocity,
        acceleration=acceleration,
        atr=atr(highs, lows, closes, ATR_PERIOD),
    )


class IndicatorService(IndicatorServiceInterface):
    """
    Indicator Engine Service.

    RSI(14) and ATR(14) use Wilder smoothing, Bollinger Bands are
    SMA(20) +/- 2 population standard deviations.
    """

    @property
    def name(self) -> str:
        return "IndicatorService"

    def calculate(self, candles: list[Candle]) -> IndicatorSeries:
        return compute_indicator_series(candles)

    async def execute(self, input_data: list[Candle]) -> IndicatorSeries:
        return self.calculate(input_data)


# Singleton instance
_service_instance: Optional[IndicatorService] = None


def get_indicator_service() -> IndicatorService:
    """Get or create indicator service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = IndicatorService()
    return _service_instance
