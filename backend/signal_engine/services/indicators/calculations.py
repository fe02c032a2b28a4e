"""
Technical Indicator Calculations

Pure NumPy implementations of the indicators used by the signal engine.
Every function returns an array as long as its input, with NaN wherever the
indicator is not yet computable. NaN is never replaced by zero.
"""

import numpy as np


def _nan_array(length: int) -> np.ndarray:
    return np.full(length, np.nan)


# =============================================================================
# ROLLING STATISTICS
# =============================================================================


def sma(data: np.ndarray, period: int) -> np.ndarray:
    """Simple Moving Average over a full trailing window."""
    data = np.asarray(data, dtype=float)
    if period < 1 or len(data) < period:
        return _nan_array(len(data))

    result = _nan_array(len(data))
    for i in range(period - 1, len(data)):
        result[i] = np.mean(data[i - period + 1 : i + 1])
    return result


def rolling_std(data: np.ndarray, period: int) -> np.ndarray:
    """Population standard deviation (ddof=0) over a full trailing window."""
    data = np.asarray(data, dtype=float)
    if period < 1 or len(data) < period:
        return _nan_array(len(data))

    result = _nan_array(len(data))
    for i in range(period - 1, len(data)):
        result[i] = np.std(data[i - period + 1 : i + 1])
    return result


# =============================================================================
# MOMENTUM INDICATORS
# =============================================================================


def _rsi_value(avg_gain: float, avg_loss: float) -> float:
    if avg_loss == 0:
        return 100.0
    rs = avg_gain / avg_loss
    return 100 - (100 / (1 + rs))


def rsi(closes: np.ndarray, period: int = 14) -> np.ndarray:
    """
    Relative Strength Index, Wilder's method.

    Seeded with the simple average gain/loss of the first `period` deltas,
    so index `period` is the first defined value. A zero average loss
    saturates at 100.
    """
    closes = np.asarray(closes, dtype=float)
    if len(closes) < period + 1:
        return _nan_array(len(closes))

    deltas = np.diff(closes)
    gains = np.where(deltas > 0, deltas, 0.0)
    losses = np.where(deltas < 0, -deltas, 0.0)

    avg_gain = float(np.mean(gains[:period]))
    avg_loss = float(np.mean(losses[:period]))

    result = _nan_array(len(closes))
    result[period] = _rsi_value(avg_gain, avg_loss)

    for i in range(period, len(deltas)):
        avg_gain = (avg_gain * (period - 1) + gains[i]) / period
        avg_loss = (avg_loss * (period - 1) + losses[i]) / period
        result[i + 1] = _rsi_value(avg_gain, avg_loss)

    return result


def velocity_acceleration(closes: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    """
    Price velocity and acceleration.

    change[0] is 0 (not NaN), so velocity is defined from index 2.
    velocity = SMA(3) of change; acceleration[0] = 0 and
    acceleration[i] = velocity[i] - velocity[i-1] otherwise.

    Returns: (velocity, acceleration)
    """
    closes = np.asarray(closes, dtype=float)
    if len(closes) == 0:
        return _nan_array(0), _nan_array(0)

    change = np.zeros(len(closes))
    change[1:] = np.diff(closes)

    velocity = sma(change, 3)

    acceleration = np.zeros(len(closes))
    acceleration[1:] = velocity[1:] - velocity[:-1]

    return velocity, acceleration


# =============================================================================
# VOLATILITY INDICATORS
# =============================================================================


def true_range(highs: np.ndarray, lows: np.ndarray, closes: np.ndarray) -> np.ndarray:
    """
    True Range for steps 1..n-1 (needs a previous close), length n-1.
    """
    highs = np.asarray(highs, dtype=float)
    lows = np.asarray(lows, dtype=float)
    closes = np.asarray(closes, dtype=float)
    if len(closes) < 2:
        return np.array([], dtype=float)

    prev_closes = closes[:-1]
    return np.maximum.reduce([
        highs[1:] - lows[1:],
        np.abs(highs[1:] - prev_closes),
        np.abs(lows[1:] - prev_closes),
    ])


def atr(
    highs: np.ndarray, lows: np.ndarray, closes: np.ndarray, period: int = 14
) -> np.ndarray:
    """
    Average True Range, Wilder's method.

    Seed is the mean of the first `period` true ranges, placed at index
    `period`. With fewer true ranges than `period`, their plain mean is
    broadcast to every index.
    """
    closes = np.asarray(closes, dtype=float)
    tr = true_range(highs, lows, closes)

    if len(tr) == 0:
        return _nan_array(len(closes))

    if len(tr) < period:
        return np.full(len(closes), float(np.mean(tr)))

    result = _nan_array(len(closes))
    prev_atr = float(np.mean(tr[:period]))
    result[period] = prev_atr

    for i in range(period + 1, len(closes)):
        prev_atr = (prev_atr * (period - 1) + tr[i - 1]) / period
        result[i] = prev_atr

    return result


def bollinger_bands(
    closes: np.ndarray, period: int = 20, std_dev: float = 2.0
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Bollinger Bands.

    Returns: (upper, middle, lower)
    """
    middle = sma(closes, period)
    std = rolling_std(closes, period)

    upper = middle + (std_dev * std)
    lower = middle - (std_dev * std)

    return upper, middle, lower


# =============================================================================
# UTILITY FUNCTIONS
# =============================================================================


def latest(arr: np.ndarray) -> float:
    """Value at the last index (NaN for an empty array)."""
    return float(arr[-1]) if len(arr) > 0 else float("nan")
