"""
Signal Scanner

Runs the signal service over the configured instruments on a fixed cadence,
suppresses duplicates and hands fresh signals to a sink.
"""

import asyncio
import logging
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, List, Optional

from signal_engine.core.config import Settings, settings as default_settings
from signal_engine.services.base import AllSourcesExhausted
from signal_engine.services.cache.dedup_store import DedupStore, InMemoryDedupStore
from signal_engine.services.scanner.sink import LoggingSink, SignalSink
from signal_engine.services.strategy.interface import SignalServiceInterface

logger = logging.getLogger(__name__)


@dataclass
class ScanReport:
    """Outcome of one pass over the instrument list."""

    instruments_scanned: int = 0
    signals_delivered: List[str] = field(default_factory=list)
    duplicates_suppressed: List[str] = field(default_factory=list)
    failures: Dict[str, str] = field(default_factory=dict)
    started_at: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    finished_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


class SignalScanner:
    """
    Sequential scanner with dedup.

    Usage:
        scanner = SignalScanner(get_signal_service())
        report = await scanner.scan_once()
    """

    def __init__(
        self,
        signal_service: SignalServiceInterface,
        dedup_store: Optional[DedupStore] = None,
        sink: Optional[SignalSink] = None,
        config: Optional[Settings] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._signal_service = signal_service
        self._dedup = dedup_store or InMemoryDedupStore()
        self._sink = sink or LoggingSink()
        self._config = config or default_settings
        self._sleep = sleep
        self._scanning = False
        self._last_report: Optional[ScanReport] = None

    @property
    def is_scanning(self) -> bool:
        return self._scanning

    @property
    def last_report(self) -> Optional[ScanReport]:
        return self._last_report

    async def _scan_instrument(self, instrument: str, report: ScanReport) -> None:
        try:
            signal = await self._signal_service.evaluate(
                instrument,
                interval=self._config.interval,
                limit=self._config.limit,
            )
        except AllSourcesExhausted as e:
            report.failures[instrument] = e.message
            logger.warning(f"Skipping {instrument} this cycle: {e.message}")
            return
        except Exception as e:
            report.failures[instrument] = str(e)
            logger.error(f"Error scanning {instrument}: {e}")
            return

        if signal is None:
            logger.debug(f"No signal for {instrument}")
            return

        label = f"{instrument}:{signal.side.value}"
        if self._dedup.was_recently_sent(
            instrument, signal.side.value, self._config.dedup_window_seconds
        ):
            report.duplicates_suppressed.append(label)
            logger.info(f"Skip duplicate signal {instrument} {signal.side.value}")
            return

        self._dedup.record_sent(instrument, signal.side.value)
        try:
            await self._sink.deliver(signal)
        except Exception as e:
            report.failures[instrument] = f"delivery failed: {e}"
            logger.error(f"Delivery failed for {instrument}: {e}")
            return
        report.signals_delivered.append(label)

    async def scan_once(self) -> Optional[ScanReport]:
        """
        One pass over the configured instruments.

        Returns None if a pass is already running.
        """
        if self._scanning:
            logger.info("Scanner already running, skipping this tick")
            return None

        self._scanning = True
        instruments = list(self._config.instruments)
        report = ScanReport()
        logger.info(f"Starting scan pass for {len(instruments)} instruments")

        try:
            self._dedup.prune_older_than(self._config.dedup_retention_seconds)

            for i, instrument in enumerate(instruments):
                await self._scan_instrument(instrument, report)
                report.instruments_scanned += 1
                # polite delay between instruments
                if i < len(instruments) - 1 and self._config.per_instrument_delay_seconds > 0:
                    await self._sleep(self._config.per_instrument_delay_seconds)
        finally:
            self._scanning = False
            report.finished_at = datetime.now(timezone.utc).isoformat()
            self._last_report = report
            logger.info(
                f"Scan pass finished: {len(report.signals_delivered)} delivered, "
                f"{len(report.duplicates_suppressed)} duplicates, "
                f"{len(report.failures)} failures"
            )

        return report

    async def run_forever(self) -> None:
        """Initial delay, then one pass every scan interval until cancelled."""
        await self._sleep(self._config.scan_start_delay_seconds)
        while True:
            try:
                await self.scan_once()
            except Exception as e:
                logger.error(f"Scan pass failed: {e}")
            await self._sleep(self._config.scan_interval_seconds)
