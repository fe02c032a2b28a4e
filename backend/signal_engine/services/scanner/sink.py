"""
Signal delivery sinks.

Formatting and chat delivery live outside the engine; the scanner only
needs something it can hand a Signal to.
"""

import logging
from typing import Protocol

from signal_engine.schemas.signal import Signal

logger = logging.getLogger(__name__)


class SignalSink(Protocol):
    async def deliver(self, signal: Signal) -> None:
        ...


class LoggingSink:
    """Default sink: writes each signal to the log as JSON."""

    async def deliver(self, signal: Signal) -> None:
        logger.info(f"SIGNAL {signal.model_dump_json()}")


class CollectingSink:
    """Keeps delivered signals in memory (useful for the API and tests)."""

    def __init__(self):
        self.delivered: list[Signal] = []

    async def deliver(self, signal: Signal) -> None:
        self.delivered.append(signal)
