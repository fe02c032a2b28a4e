"""
Signal API Endpoints

On-demand evaluation of a single instrument.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from signal_engine.core.config import settings
from signal_engine.schemas.market import Interval
from signal_engine.schemas.signal import SignalResponse
from signal_engine.services.base import AllSourcesExhausted
from signal_engine.services.strategy import get_signal_service

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/{instrument:path}", response_model=SignalResponse)
async def evaluate_instrument(
    instrument: str,
    interval: Optional[Interval] = Query(None, description="Candle interval (default from settings)"),
    limit: Optional[int] = Query(None, ge=40, le=1000, description="Number of candles"),
):
    """
    Evaluate an instrument now.

    Returns `signal: null` when no entry rule matches.
    Responds 503 when every data provider failed.

    Example:
    - `/signals/BTC/USDT`
    - `/signals/ETH/USDT?interval=15m&limit=200`
    """
    instrument = instrument.upper().strip()
    service = get_signal_service()

    try:
        signal = await service.evaluate(
            instrument,
            interval=interval.value if interval else settings.interval,
            limit=limit,
        )
    except AllSourcesExhausted as e:
        logger.warning(f"No data for {instrument}: {e.message}")
        raise HTTPException(status_code=503, detail=e.message)

    return SignalResponse(instrument=instrument, signal=signal)
