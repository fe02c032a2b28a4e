"""
CONTRACT 1: Data Ingestion Layer

Input: CandleRequest
Output: FetchResult (list of Candle)

This module defines the canonical candle representation every provider
payload is normalized into, and the request sent to the fetcher.
"""

from enum import Enum
from pydantic import BaseModel, Field


# =============================================================================
# ENUMS
# =============================================================================


class Interval(str, Enum):
    M1 = "1m"
    M5 = "5m"
    M15 = "15m"
    M30 = "30m"
    H1 = "1h"
    H4 = "4h"
    D1 = "1d"


class ResponseShape(str, Enum):
    """Payload layouts a provider can answer with."""

    ARRAY_OF_ARRAYS = "array_of_arrays"  # [[ts, o, h, l, c, v, ...], ...]
    ARRAY_OF_OBJECTS = "array_of_objects"  # [{"t": .., "o": .., ...}, ...]
    ENVELOPED = "enveloped"  # {"result": {"list": [...]}}


# =============================================================================
# INPUT: CandleRequest
# =============================================================================


class CandleRequest(BaseModel):
    """
    Request for a candle series.
    Sent by: Signal Service / API
    Received by: Multi-Source Fetcher
    """

    instrument: str = Field(
        ...,
        min_length=1,
        description="Instrument symbol (e.g., 'BTC/USDT')",
    )
    interval: Interval = Field(
        default=Interval.M5,
        description="Candle interval",
    )
    limit: int = Field(
        default=120,
        ge=1,
        le=1000,
        description="Number of most recent candles to keep",
    )


# =============================================================================
# OUTPUT: Candle
# =============================================================================


class Candle(BaseModel):
    """Single OHLCV observation. Timestamp is the open time in ms epoch."""

    timestamp: int
    open: float
    high: float
    low: float
    close: float
    volume: float
