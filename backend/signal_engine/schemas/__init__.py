"""
Signal Engine Schema Contracts

This module defines the contracts between system components.
"""

from signal_engine.schemas.market import (
    Candle,
    CandleRequest,
    Interval,
    ResponseShape,
)
from signal_engine.schemas.signal import (
    Signal,
    SignalDiagnostics,
    SignalResponse,
    TradeSide,
)

__all__ = [
    # Market
    "Candle",
    "CandleRequest",
    "Interval",
    "ResponseShape",
    # Signal
    "Signal",
    "SignalDiagnostics",
    "SignalResponse",
    "TradeSide",
]
