"""
CONTRACT 2: Signal Decision Layer

Input: list[Candle]
Output: Signal (or no signal)

A Signal is produced fresh on every evaluation and is never persisted by
the engine. Deduplication and delivery belong to the scanner layer.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field


class TradeSide(str, Enum):
    LONG = "LONG"
    SHORT = "SHORT"


class SignalDiagnostics(BaseModel):
    """Indicator values at the latest candle that triggered the signal."""

    rsi: float
    bollinger_lower: float
    bollinger_upper: float
    acceleration: float
    atr: float
    close: float


class Signal(BaseModel):
    """
    Directional trade signal.

    Price levels are derived from the latest close and ATR:
    stop loss at 1.5 ATR, take profit at 3.0 ATR.
    """

    instrument: str
    side: TradeSide
    entry: float
    take_profit: float
    stop_loss: float
    risk_reward: Optional[float] = Field(
        default=None,
        description="Take-profit distance over stop-loss distance; None if stop distance is zero",
    )
    confidence: int = Field(
        ...,
        ge=30,
        le=95,
        description="Heuristic ranking score, not a calibrated probability",
    )
    diagnostics: SignalDiagnostics

    class Config:
        json_schema_extra = {
            "example": {
                "instrument": "BTC/USDT",
                "side": "LONG",
                "entry": 100.0,
                "take_profit": 106.0,
                "stop_loss": 97.0,
                "risk_reward": 2.0,
                "confidence": 82,
                "diagnostics": {
                    "rsi": 24.3,
                    "bollinger_lower": 100.8,
                    "bollinger_upper": 109.1,
                    "acceleration": 0.12,
                    "atr": 2.0,
                    "close": 100.0,
                },
            }
        }


class SignalResponse(BaseModel):
    """API response for an on-demand evaluation."""

    instrument: str
    signal: Optional[Signal] = None
