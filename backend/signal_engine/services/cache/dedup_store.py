"""
Signal dedup store.

Remembers when a (instrument, side) pair was last delivered so the scanner
does not re-send the same signal every pass.

Contract:
- was_recently_sent(instrument, side, window_seconds) -> bool
- record_sent(instrument, side)
- prune_older_than(age_seconds) -> int (entries removed)
"""

import logging
import threading
import time
from typing import Callable, Dict, Optional, Protocol, Tuple

logger = logging.getLogger(__name__)

DedupKey = Tuple[str, str]


def _side_value(side) -> str:
    return getattr(side, "value", side)


class DedupStore(Protocol):
    def was_recently_sent(self, instrument: str, side: str, window_seconds: float) -> bool:
        ...

    def record_sent(self, instrument: str, side: str) -> None:
        ...

    def prune_older_than(self, age_seconds: float) -> int:
        ...


class InMemoryDedupStore:
    """
    Process-local dedup store.

    The clock is injectable (seconds, monotonic or wall) for tests.
    """

    def __init__(self, clock: Optional[Callable[[], float]] = None):
        self._clock = clock or time.time
        self._sent: Dict[DedupKey, float] = {}
        self._lock = threading.Lock()

    def was_recently_sent(self, instrument: str, side: str, window_seconds: float) -> bool:
        key = (instrument, _side_value(side))
        with self._lock:
            sent_at = self._sent.get(key)
        if sent_at is None:
            return False
        return (self._clock() - sent_at) <= window_seconds

    def record_sent(self, instrument: str, side: str) -> None:
        key = (instrument, _side_value(side))
        with self._lock:
            self._sent[key] = self._clock()

    def prune_older_than(self, age_seconds: float) -> int:
        now = self._clock()
        with self._lock:
            stale = [k for k, ts in self._sent.items() if now - ts >= age_seconds]
            for key in stale:
                del self._sent[key]
        if stale:
            logger.debug(f"Pruned {len(stale)} dedup entries")
        return len(stale)

    def __len__(self) -> int:
        return len(self._sent)
