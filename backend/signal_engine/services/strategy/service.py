"""
Signal Evaluation Service Implementation

Entry point for evaluating an instrument:
    Multi-Source Fetch → Indicators → Decision

AllSourcesExhausted is the only error surfaced to callers; it means
"skip this instrument this cycle", never a fatal condition.
"""

import logging
from typing import Optional

from signal_engine.core.config import settings
from signal_engine.schemas.signal import Signal
from signal_engine.services.data_ingestion import (
    DataIngestionServiceInterface,
    get_data_ingestion_service,
)
from signal_engine.services.strategy.decision import decide
from signal_engine.services.strategy.interface import (
    SignalServiceInterface,
    SignalRequest,
)

logger = logging.getLogger(__name__)


class SignalService(SignalServiceInterface):
    """
    Signal Evaluation Service.

    Holds no per-instrument state, so distinct instruments may be
    evaluated concurrently.
    """

    def __init__(self, data_service: Optional[DataIngestionServiceInterface] = None):
        self._data_service = data_service

    @property
    def data_service(self) -> DataIngestionServiceInterface:
        """Lazy load data ingestion service."""
        if self._data_service is None:
            self._data_service = get_data_ingestion_service()
        return self._data_service

    @property
    def name(self) -> str:
        return "SignalService"

    async def evaluate(
        self,
        instrument: str,
        interval: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[Signal]:
        """
        Fetch candles and evaluate the latest one.

        Raises:
            AllSourcesExhausted: every provider failed
        """
        interval = interval or settings.interval
        limit = limit or settings.limit

        result = await self.data_service.fetch(instrument, interval, limit)
        signal = decide(instrument, result.candles)

        if signal is not None:
            logger.info(
                f"Signal {instrument} {signal.side.value} @ {signal.entry} "
                f"(confidence {signal.confidence}, source {result.source})"
            )
        return signal

    async def execute(self, input_data: SignalRequest) -> Optional[Signal]:
        return await self.evaluate(
            input_data.instrument,
            interval=input_data.interval,
            limit=input_data.limit,
        )

    async def health_check(self) -> bool:
        try:
            return await self.data_service.health_check()
        except Exception as e:
            logger.error(f"Health check failed: {e}")
            return False


# Singleton instance
_service_instance: Optional[SignalService] = None


def get_signal_service() -> SignalService:
    """Get or create signal service instance."""
    global _service_instance
    if _service_instance is None:
        _service_instance = SignalService()
    return _service_instance
