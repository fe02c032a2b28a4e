"""
Tests for the candle normalizer.
Covers every response shape, per-row coercion and chronology correction.
"""

import pytest

from signal_engine.schemas.market import ResponseShape
from signal_engine.services.base import MalformedResponse
from signal_engine.services.data_ingestion.normalizer import normalize, ensure_ascending
from signal_engine.services.indicators.service import compute_indicator_series

import numpy as np


class TestArrayOfArrays:
    """Binance-style kline rows"""

    def test_string_fields_are_coerced(self, make_rows):
        """Numeric strings should become floats, timestamps ints"""
        candles = normalize(make_rows([100.0, 101.0]), ResponseShape.ARRAY_OF_ARRAYS)
        assert len(candles) == 2
        assert candles[0].close == 100.0
        assert candles[0].high == 100.5
        assert isinstance(candles[0].timestamp, int)

    def test_short_rows_are_dropped(self, make_rows):
        """Rows with fewer than six fields are skipped"""
        rows = make_rows([100.0, 101.0, 102.0])
        rows[1] = rows[1][:4]
        candles = normalize(rows, ResponseShape.ARRAY_OF_ARRAYS)
        assert [c.close for c in candles] == [100.0, 102.0]

    @pytest.mark.parametrize("bad", ["abc", None, "NaN", "inf", float("nan"), True])
    def test_unparsable_field_drops_only_that_candle(self, make_rows, bad):
        """One bad field invalidates a single candle, not the series"""
        rows = make_rows([100.0, 101.0, 102.0])
        rows[1][4] = bad
        candles = normalize(rows, ResponseShape.ARRAY_OF_ARRAYS)
        assert len(candles) == 2

    def test_bad_timestamp_drops_candle(self, make_rows):
        rows = make_rows([100.0, 101.0])
        rows[0][0] = "yesterday"
        candles = normalize(rows, ResponseShape.ARRAY_OF_ARRAYS)
        assert len(candles) == 1

    def test_non_list_payload_is_malformed(self):
        """An error object where rows were expected"""
        with pytest.raises(MalformedResponse):
            normalize({"code": -1121, "msg": "Invalid symbol."}, ResponseShape.ARRAY_OF_ARRAYS)


class TestArrayOfObjects:
    """Object rows with short or long key names"""

    def test_short_keys(self):
        payload = [
            {"t": 1000, "o": "1", "h": "2", "l": "0.5", "c": "1.5", "v": "10"},
            {"t": 2000, "o": "1.5", "h": "2.5", "l": "1", "c": "2", "v": "12"},
        ]
        candles = normalize(payload, ResponseShape.ARRAY_OF_OBJECTS)
        assert [c.close for c in candles] == [1.5, 2.0]
        assert candles[1].volume == 12.0

    def test_long_keys(self):
        payload = [
            {"open_time": 1000, "open": 1, "high": 2, "low": 0.5, "close": 1.5, "volume": 10},
        ]
        candles = normalize(payload, ResponseShape.ARRAY_OF_OBJECTS)
        assert candles[0].timestamp == 1000
        assert candles[0].low == 0.5

    def test_missing_field_drops_candle(self):
        payload = [
            {"t": 1000, "o": 1, "h": 2, "l": 0.5, "c": 1.5},
            {"t": 2000, "o": 1, "h": 2, "l": 0.5, "c": 1.5, "v": 3},
        ]
        assert len(normalize(payload, ResponseShape.ARRAY_OF_OBJECTS)) == 1


class TestEnveloped:
    """Payloads that wrap the rows in an envelope"""

    def test_bybit_v5_envelope_newest_first(self, make_rows):
        """Bybit returns result.list newest first; output must be ascending"""
        rows = make_rows([100.0, 101.0, 102.0])
        payload = {"retCode": 0, "result": {"category": "linear", "list": list(reversed(rows))}}
        candles = normalize(payload, ResponseShape.ENVELOPED, ("result", "list"))
        assert [c.close for c in candles] == [100.0, 101.0, 102.0]

    def test_default_key_search(self, make_rows):
        """Without a path, result/data/list are searched"""
        rows = make_rows([100.0, 101.0])
        assert len(normalize({"data": rows}, ResponseShape.ENVELOPED)) == 2
        assert len(normalize({"result": {"list": rows}}, ResponseShape.ENVELOPED)) == 2

    def test_envelope_with_object_rows(self):
        payload = {"result": [{"t": 1, "o": 1, "h": 1, "l": 1, "c": 1, "v": 1}]}
        candles = normalize(payload, ResponseShape.ENVELOPED)
        assert candles[0].close == 1.0

    def test_missing_path_is_malformed(self):
        with pytest.raises(MalformedResponse):
            normalize({"retCode": 10001, "retMsg": "params error"}, ResponseShape.ENVELOPED, ("result", "list"))

    def test_no_list_anywhere_is_malformed(self):
        with pytest.raises(MalformedResponse):
            normalize({"status": "ok"}, ResponseShape.ENVELOPED)

    def test_list_payload_is_malformed(self, make_rows):
        with pytest.raises(MalformedResponse):
            normalize(make_rows([1.0]), ResponseShape.ENVELOPED)

    def test_empty_list_is_not_malformed(self):
        assert normalize({"result": {"list": []}}, ResponseShape.ENVELOPED, ("result", "list")) == []


class TestChronology:
    """Reverse-chronological input is corrected"""

    def test_reversed_equals_ascending(self, make_rows):
        closes = [100.0 + (i % 7) - i * 0.3 for i in range(60)]
        rows = make_rows(closes)
        ascending = normalize(rows, ResponseShape.ARRAY_OF_ARRAYS)
        reversed_ = normalize(list(reversed(rows)), ResponseShape.ARRAY_OF_ARRAYS)
        assert reversed_ == ascending

    def test_reversed_input_gives_identical_indicators(self, make_rows):
        closes = [100.0 + ((i * 37) % 11) - i * 0.2 for i in range(80)]
        rows = make_rows(closes)
        a = compute_indicator_series(normalize(rows, ResponseShape.ARRAY_OF_ARRAYS))
        b = compute_indicator_series(normalize(list(reversed(rows)), ResponseShape.ARRAY_OF_ARRAYS))
        for name in ("rsi", "bb_upper", "bb_lower", "acceleration", "atr"):
            np.testing.assert_array_equal(getattr(a, name), getattr(b, name))

    def test_ensure_ascending_keeps_short_series(self, make_candles):
        single = make_candles([1.0])
        assert ensure_ascending(single) == single
        assert ensure_ascending([]) == []


def test_unknown_shape_is_malformed():
    with pytest.raises(MalformedResponse):
        normalize([], "csv")
