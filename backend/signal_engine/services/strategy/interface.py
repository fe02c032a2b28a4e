"""
Signal Evaluation Service Interface

Orchestrates the fetch -> indicators -> decision pipeline for one instrument.
"""

from abc import abstractmethod
from dataclasses import dataclass
from typing import Optional

from signal_engine.services.base import BaseService
from signal_engine.schemas.signal import Signal


@dataclass
class SignalRequest:
    """Request for a signal evaluation."""

    instrument: str
    interval: Optional[str] = None
    limit: Optional[int] = None


class SignalServiceInterface(BaseService[SignalRequest, Optional[Signal]]):
    """
    Signal Evaluation Service Contract.

    INPUT: SignalRequest
        - instrument: Symbol to evaluate
        - interval / limit: Candle window (defaults from settings)

    OUTPUT: Signal, or None when no rule matched or history is unusable

    PIPELINE:
        ┌───────────────┐
        │ SignalRequest │
        └───────┬───────┘
                │
                ▼
        ┌────────────────────┐
        │ Multi-Source Fetch │ → list[Candle]   (AllSourcesExhausted)
        └───────┬────────────┘
                │
                ▼
        ┌────────────────────┐
        │ Indicator Engine   │ → IndicatorSeries
        └───────┬────────────┘
                │
                ▼
        ┌────────────────────┐
        │ Decision Engine    │ → Signal | None
        └────────────────────┘
    """

    @property
    def name(self) -> str:
        return "SignalService"

    @abstractmethod
    async def execute(self, input_data: SignalRequest) -> Optional[Signal]:
        """Run the evaluation pipeline."""
        pass

    @abstractmethod
    async def evaluate(
        self,
        instrument: str,
        interval: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> Optional[Signal]:
        """Evaluate one instrument."""
        pass

    @abstractmethod
    async def health_check(self) -> bool:
        """Check health of all dependent services."""
        pass
