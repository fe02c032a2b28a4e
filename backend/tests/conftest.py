"""Shared fixtures: deterministic candle series and a fake HTTP transport."""

import pytest

from signal_engine.schemas.market import Candle

START_TS = 1_700_000_000_000
STEP_MS = 5 * 60 * 1000


def build_candles(closes, spread=0.5, start_ts=START_TS, step=STEP_MS):
    """Candles with high/low a fixed spread around each close."""
    return [
        Candle(
            timestamp=start_ts + i * step,
            open=close,
            high=close + spread,
            low=close - spread,
            close=close,
            volume=1000.0,
        )
        for i, close in enumerate(closes)
    ]


def capitulation_closes():
    """
    Slow decline, three sharp drops, then a smaller drop.

    RSI is 0, the last close sits below the lower band and the last change
    is smaller than three bars earlier, so acceleration is positive.
    """
    closes = [200.0 - i for i in range(56)]  # 200 .. 145
    closes += [139.0, 133.0, 127.0, 123.0]
    return closes


def blow_off_closes():
    """Mirror image of capitulation_closes: a SHORT setup."""
    closes = [100.0 + i for i in range(56)]  # 100 .. 155
    closes += [161.0, 167.0, 173.0, 177.0]
    return closes


class FakeTransport:
    """
    In-memory HttpTransport.

    responses maps url -> payload, or an Exception instance to raise.
    """

    def __init__(self, responses):
        self.responses = responses
        self.calls = []

    async def get_json(self, url, params=None, headers=None, timeout=10.0):
        self.calls.append(
            {"url": url, "params": params, "headers": headers, "timeout": timeout}
        )
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    @property
    def urls(self):
        return [c["url"] for c in self.calls]


def kline_rows(closes, start_ts=START_TS, step=STEP_MS, as_strings=True):
    """Binance-style rows: [ts, open, high, low, close, volume, ...]."""
    rows = []
    for i, close in enumerate(closes):
        row = [
            start_ts + i * step,
            close,
            close + 0.5,
            close - 0.5,
            close,
            1000.0,
            start_ts + (i + 1) * step - 1,
        ]
        if as_strings:
            row = [row[0]] + [str(x) for x in row[1:6]] + [row[6]]
        rows.append(row)
    return rows


@pytest.fixture
def long_candles():
    return build_candles(capitulation_closes())


@pytest.fixture
def short_candles():
    return build_candles(blow_off_closes())


@pytest.fixture
def trending_candles():
    """Steady uptrend: RSI pinned at 100 but price stays inside the bands."""
    return build_candles([100.0 + i for i in range(80)])


@pytest.fixture
def make_transport():
    return FakeTransport


@pytest.fixture
def make_rows():
    return kline_rows


@pytest.fixture
def make_candles():
    return build_candles
