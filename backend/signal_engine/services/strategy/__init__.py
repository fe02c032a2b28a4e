"""
Signal Evaluation Service

CONTRACT:
    Input:  Instrument + candle window
    Output: Signal | None

RESPONSIBILITIES:
    - Orchestrate fetch -> indicators -> decision for one instrument
    - Derive stop loss / take profit / risk-reward from ATR
    - Score confidence
    - Resolve every internal failure to "no signal"

This is the main entry point for evaluating an instrument.
"""

from signal_engine.services.strategy.decision import (
    decide,
    derive_levels,
    confidence_score,
    select_side,
)
from signal_engine.services.strategy.interface import (
    SignalServiceInterface,
    SignalRequest,
)
from signal_engine.services.strategy.service import SignalService, get_signal_service

__all__ = [
    "decide",
    "derive_levels",
    "confidence_score",
    "select_side",
    "SignalServiceInterface",
    "SignalRequest",
    "SignalService",
    "get_signal_service",
]
