"""
Indicator Engine Service

CONTRACT:
    Input:  list[Candle]
    Output: IndicatorSeries

RESPONSIBILITIES:
    - RSI(14) and ATR(14) with Wilder smoothing
    - Bollinger Bands (20, 2)
    - Price velocity / acceleration

Uses NumPy for calculations.
All math is deterministic and reproducible.
"""

from signal_engine.services.indicators.interface import (
    IndicatorServiceInterface,
    IndicatorSeries,
)
from signal_engine.services.indicators.service import (
    IndicatorService,
    compute_indicator_series,
    get_indicator_service,
)

__all__ = [
    "IndicatorServiceInterface",
    "IndicatorSeries",
    "IndicatorService",
    "compute_indicator_series",
    "get_indicator_service",
]
