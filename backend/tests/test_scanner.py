"""
Tests for the periodic signal scanner.
"""

import asyncio

import pytest

from signal_engine.core.config import Settings
from signal_engine.services.base import AllSourcesExhausted
from signal_engine.services.cache import InMemoryDedupStore
from signal_engine.services.scanner import CollectingSink, SignalScanner
from signal_engine.services.strategy.decision import decide


class FakeSignalService:
    """Maps instrument -> candles, or an exception to raise."""

    def __init__(self, series):
        self.series = series
        self.evaluated = []

    async def evaluate(self, instrument, interval=None, limit=None):
        self.evaluated.append(instrument)
        value = self.series[instrument]
        if isinstance(value, Exception):
            raise value
        return decide(instrument, value)


class RecordingSleep:
    def __init__(self):
        self.delays = []

    async def __call__(self, seconds):
        self.delays.append(seconds)


def _config(instruments, **overrides):
    values = dict(
        instruments=instruments,
        per_instrument_delay_seconds=2.0,
        dedup_window_seconds=3600,
        dedup_retention_seconds=86400,
    )
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def series(long_candles, short_candles, trending_candles):
    return {
        "BTC/USDT": long_candles,
        "ETH/USDT": short_candles,
        "SOL/USDT": trending_candles,
        "DOGE/USDT": AllSourcesExhausted("DOGE/USDT", {"OKX": "TransportError: HTTP 500"}),
    }


@pytest.mark.asyncio
async def test_scan_delivers_and_records_failures(series):
    sink = CollectingSink()
    sleep = RecordingSleep()
    scanner = SignalScanner(
        FakeSignalService(series),
        dedup_store=InMemoryDedupStore(),
        sink=sink,
        config=_config(list(series)),
        sleep=sleep,
    )

    report = await scanner.scan_once()

    assert report.instruments_scanned == 4
    assert report.signals_delivered == ["BTC/USDT:LONG", "ETH/USDT:SHORT"]
    assert list(report.failures) == ["DOGE/USDT"]
    assert [s.instrument for s in sink.delivered] == ["BTC/USDT", "ETH/USDT"]
    # delay between instruments, none after the last
    assert sleep.delays == [2.0, 2.0, 2.0]
    assert scanner.last_report is report


@pytest.mark.asyncio
async def test_second_pass_suppresses_duplicates(series):
    sink = CollectingSink()
    scanner = SignalScanner(
        FakeSignalService(series),
        sink=sink,
        config=_config(["BTC/USDT", "ETH/USDT"]),
        sleep=RecordingSleep(),
    )

    await scanner.scan_once()
    report = await scanner.scan_once()

    assert report.signals_delivered == []
    assert report.duplicates_suppressed == ["BTC/USDT:LONG", "ETH/USDT:SHORT"]
    assert len(sink.delivered) == 2


@pytest.mark.asyncio
async def test_unexpected_error_does_not_stop_pass(series):
    series["BTC/USDT"] = RuntimeError("boom")
    service = FakeSignalService(series)
    scanner = SignalScanner(
        service,
        sink=CollectingSink(),
        config=_config(["BTC/USDT", "ETH/USDT"]),
        sleep=RecordingSleep(),
    )

    report = await scanner.scan_once()

    assert service.evaluated == ["BTC/USDT", "ETH/USDT"]
    assert report.failures == {"BTC/USDT": "boom"}
    assert report.signals_delivered == ["ETH/USDT:SHORT"]


@pytest.mark.asyncio
async def test_failed_delivery_is_reported(series):
    class BrokenSink:
        async def deliver(self, signal):
            raise ConnectionError("chat api down")

    scanner = SignalScanner(
        FakeSignalService(series),
        sink=BrokenSink(),
        config=_config(["BTC/USDT"]),
        sleep=RecordingSleep(),
    )

    report = await scanner.scan_once()

    assert report.signals_delivered == []
    assert "delivery failed" in report.failures["BTC/USDT"]


@pytest.mark.asyncio
async def test_overlapping_pass_is_skipped(long_candles):
    release = asyncio.Event()

    class SlowService:
        async def evaluate(self, instrument, interval=None, limit=None):
            await release.wait()
            return decide(instrument, long_candles)

    scanner = SignalScanner(
        SlowService(),
        sink=CollectingSink(),
        config=_config(["BTC/USDT"]),
        sleep=RecordingSleep(),
    )

    first = asyncio.create_task(scanner.scan_once())
    await asyncio.sleep(0)
    assert scanner.is_scanning
    assert await scanner.scan_once() is None

    release.set()
    report = await first
    assert report.signals_delivered == ["BTC/USDT:LONG"]
    assert not scanner.is_scanning


@pytest.mark.asyncio
async def test_run_forever_waits_then_loops(series):
    class StopLoop(Exception):
        pass

    delays = []

    async def sleep(seconds):
        delays.append(seconds)
        if len(delays) == 3:
            raise StopLoop()

    scanner = SignalScanner(
        FakeSignalService(series),
        sink=CollectingSink(),
        config=_config(
            ["SOL/USDT"],
            scan_start_delay_seconds=5,
            scan_interval_seconds=300,
        ),
        sleep=sleep,
    )

    with pytest.raises(StopLoop):
        await scanner.run_forever()

    assert delays == [5, 300, 300]
    assert scanner.last_report.instruments_scanned == 1
