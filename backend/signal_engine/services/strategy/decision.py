"""
Signal Decision Engine

Reads the most recent indicator values and classifies the window as
LONG, SHORT or no signal. Never raises: every failure path ends in None.

Entry rules (latest candle only, LONG checked first):
    LONG:  RSI < 30 and close < lower band and acceleration > 0
    SHORT: RSI > 70 and close > upper band and acceleration < 0
"""

import logging
import math
from typing import Optional

from signal_engine.schemas.market import Candle
from signal_engine.schemas.signal import Signal, SignalDiagnostics, TradeSide
from signal_engine.services.indicators.calculations import latest
from signal_engine.services.indicators.service import compute_indicator_series

logger = logging.getLogger(__name__)

MIN_DECISION_CANDLES = 40

RSI_OVERSOLD = 30.0
RSI_OVERBOUGHT = 70.0

STOP_LOSS_ATR = 1.5
TAKE_PROFIT_ATR = 3.0

# Confidence heuristic; constants carried over unchanged, no calibration
BASE_CONFIDENCE = 70.0
RSI_BONUS_CAP = 15.0
ACCELERATION_BONUS_CAP = 10.0
ACCELERATION_SCALE = 1000.0
LOW_VOLATILITY_RATIO = 0.005
LOW_VOLATILITY_BONUS = 5.0
MIN_CONFIDENCE = 30
MAX_CONFIDENCE = 95


def select_side(
    rsi: float, close: float, lower: float, upper: float, acceleration: float
) -> Optional[TradeSide]:
    """Apply the entry rules. The two conditions cannot both hold."""
    if rsi < RSI_OVERSOLD and close < lower and acceleration > 0:
        return TradeSide.LONG
    if rsi > RSI_OVERBOUGHT and close > upper and acceleration < 0:
        return TradeSide.SHORT
    return None


def derive_levels(
    side: TradeSide, entry: float, atr: float
) -> tuple[float, float, Optional[float]]:
    """
    Stop loss, take profit and risk/reward from entry and ATR.

    Returns: (stop_loss, take_profit, risk_reward)
    """
    if side == TradeSide.LONG:
        stop_loss = entry - STOP_LOSS_ATR * atr
        take_profit = entry + TAKE_PROFIT_ATR * atr
    else:
        stop_loss = entry + STOP_LOSS_ATR * atr
        take_profit = entry - TAKE_PROFIT_ATR * atr

    risk = abs(entry - stop_loss)
    risk_reward = abs(take_profit - entry) / risk if risk != 0 else None
    return stop_loss, take_profit, risk_reward


def confidence_score(
    side: TradeSide, rsi: float, acceleration: float, atr: float, entry: float
) -> int:
    """
    Heuristic ranking score in [30, 95].

    Base 70, up to +15 for RSI extremity, up to +10 for acceleration
    relative to price, +5 when ATR is under 0.5% of price.
    """
    score = BASE_CONFIDENCE

    if side == TradeSide.LONG:
        score += min(RSI_BONUS_CAP, RSI_OVERSOLD - rsi)
    else:
        score += min(RSI_BONUS_CAP, rsi - RSI_OVERBOUGHT)

    if entry > 0:
        score += min(ACCELERATION_BONUS_CAP, abs(acceleration) / entry * ACCELERATION_SCALE)
        if atr / entry < LOW_VOLATILITY_RATIO:
            score += LOW_VOLATILITY_BONUS

    # Clamp first so infinities cannot reach the rounding step
    score = max(float(MIN_CONFIDENCE), min(float(MAX_CONFIDENCE), score))
    return int(math.floor(score + 0.5))


def decide(instrument: str, candles: list[Candle]) -> Optional[Signal]:
    """
    Evaluate the latest candle of a series.

    Returns None for short histories, undefined indicators, no matching
    rule, or any unexpected computation error.
    """
    if len(candles) < MIN_DECISION_CANDLES:
        logger.debug(
            f"{instrument}: insufficient history ({len(candles)} < {MIN_DECISION_CANDLES})"
        )
        return None

    try:
        series = compute_indicator_series(candles)

        close = latest(series.closes)
        last_rsi = latest(series.rsi)
        lower = latest(series.bb_lower)
        upper = latest(series.bb_upper)
        acceleration = latest(series.acceleration)
        last_atr = latest(series.atr)

        if not all(
            math.isfinite(x) for x in (last_rsi, lower, upper, acceleration, last_atr, close)
        ):
            logger.debug(f"{instrument}: indicator undefined at latest candle")
            return None

        side = select_side(last_rsi, close, lower, upper, acceleration)
        if side is None:
            logger.debug(f"{instrument}: no entry rule matched (RSI={last_rsi:.1f})")
            return None

        entry = close
        stop_loss, take_profit, risk_reward = derive_levels(side, entry, last_atr)

        return Signal(
            instrument=instrument,
            side=side,
            entry=entry,
            take_profit=take_profit,
            stop_loss=stop_loss,
            risk_reward=risk_reward,
            confidence=confidence_score(side, last_rsi, acceleration, last_atr, entry),
            diagnostics=SignalDiagnostics(
                rsi=last_rsi,
                bollinger_lower=lower,
                bollinger_upper=upper,
                acceleration=acceleration,
                atr=last_atr,
                close=close,
            ),
        )
    except Exception as e:
        logger.error(f"Decision failed for {instrument}: {e}")
        return None
