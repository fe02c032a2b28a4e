"""
Candle Normalizer

Converts provider payloads into an ascending list of Candle.
Each ResponseShape has exactly one normalization function; the provider
descriptor decides which one applies.
"""

import logging
import math
from typing import Any, Callable, Optional, Sequence

from signal_engine.schemas.market import Candle, ResponseShape
from signal_engine.services.base import MalformedResponse

logger = logging.getLogger(__name__)

# Keys searched (in order) when an enveloped payload has no explicit path
DEFAULT_ENVELOPE_KEYS = ("result", "data", "list")

# Accepted key aliases for object rows
TIMESTAMP_KEYS = ("t", "open_time", "openTime", "timestamp", "start")
FIELD_KEYS = {
    "open": ("o", "open"),
    "high": ("h", "high"),
    "low": ("l", "low"),
    "close": ("c", "close"),
    "volume": ("v", "volume"),
}


def _to_float(value: Any) -> Optional[float]:
    """Coerce to a finite float, or None."""
    if value is None or isinstance(value, bool):
        return None
    try:
        result = float(value)
    except (TypeError, ValueError):
        return None
    return result if math.isfinite(result) else None


def _to_timestamp(value: Any) -> Optional[int]:
    ts = _to_float(value)
    return int(ts) if ts is not None else None


def _build_candle(ts: Any, o: Any, h: Any, l: Any, c: Any, v: Any) -> Optional[Candle]:
    timestamp = _to_timestamp(ts)
    fields = [_to_float(x) for x in (o, h, l, c, v)]
    if timestamp is None or any(f is None for f in fields):
        return None
    open_, high, low, close, volume = fields
    return Candle(
        timestamp=timestamp,
        open=open_,
        high=high,
        low=low,
        close=close,
        volume=volume,
    )


def _first_present(row: dict, keys: Sequence[str]) -> Any:
    for key in keys:
        if key in row:
            return row[key]
    return None


# =============================================================================
# SHAPE NORMALIZERS
# =============================================================================


def _normalize_array_rows(payload: Any) -> list[Candle]:
    if not isinstance(payload, list):
        raise MalformedResponse(
            f"Expected array of arrays, got {type(payload).__name__}"
        )

    candles = []
    for row in payload:
        if not isinstance(row, (list, tuple)) or len(row) < 6:
            continue
        candle = _build_candle(*row[:6])
        if candle is not None:
            candles.append(candle)
    return candles


def _normalize_object_rows(payload: Any) -> list[Candle]:
    if not isinstance(payload, list):
        raise MalformedResponse(
            f"Expected array of objects, got {type(payload).__name__}"
        )

    candles = []
    for row in payload:
        if not isinstance(row, dict):
            continue
        candle = _build_candle(
            _first_present(row, TIMESTAMP_KEYS),
            *(_first_present(row, keys) for keys in FIELD_KEYS.values()),
        )
        if candle is not None:
            candles.append(candle)
    return candles


def _unwrap_envelope(payload: dict, path: Optional[Sequence[str]]) -> Any:
    if path:
        node: Any = payload
        for key in path:
            if not isinstance(node, dict) or key not in node:
                raise MalformedResponse(
                    f"Envelope path {'.'.join(path)} not found",
                    details={"missing": key},
                )
            node = node[key]
        return node

    # No explicit path: search the common keys, allowing one nested level
    node = payload
    for _ in range(2):
        if isinstance(node, list):
            return node
        if not isinstance(node, dict):
            break
        for key in DEFAULT_ENVELOPE_KEYS:
            if key in node:
                node = node[key]
                break
        else:
            break
    if isinstance(node, list):
        return node
    raise MalformedResponse("No candle list found in envelope")


def _normalize_enveloped(payload: Any, path: Optional[Sequence[str]] = None) -> list[Candle]:
    if not isinstance(payload, dict):
        raise MalformedResponse(
            f"Expected enveloped object, got {type(payload).__name__}"
        )

    rows = _unwrap_envelope(payload, path)
    if not isinstance(rows, list):
        raise MalformedResponse(
            f"Envelope holds {type(rows).__name__}, expected a list"
        )
    if not rows:
        return []
    if isinstance(rows[0], dict):
        return _normalize_object_rows(rows)
    if isinstance(rows[0], (list, tuple)):
        return _normalize_array_rows(rows)
    raise MalformedResponse(
        f"Unrecognized row type {type(rows[0]).__name__} in envelope"
    )


SHAPE_NORMALIZERS: dict[ResponseShape, Callable[..., list[Candle]]] = {
    ResponseShape.ARRAY_OF_ARRAYS: _normalize_array_rows,
    ResponseShape.ARRAY_OF_OBJECTS: _normalize_object_rows,
    ResponseShape.ENVELOPED: _normalize_enveloped,
}


# =============================================================================
# PUBLIC API
# =============================================================================


def ensure_ascending(candles: list[Candle]) -> list[Candle]:
    """Reverse a newest-first series so it runs oldest to newest."""
    if len(candles) > 1 and candles[0].timestamp > candles[-1].timestamp:
        return list(reversed(candles))
    return candles


def normalize(
    payload: Any,
    shape: ResponseShape,
    envelope_path: Optional[Sequence[str]] = None,
) -> list[Candle]:
    """
    Normalize a raw provider payload into an ascending candle list.

    Rows with a missing or non-finite field are dropped individually.

    Raises:
        MalformedResponse: payload does not match the declared shape
    """
    try:
        normalizer = SHAPE_NORMALIZERS[ResponseShape(shape)]
    except (KeyError, ValueError):
        raise MalformedResponse(f"Unknown response shape: {shape}")

    if shape == ResponseShape.ENVELOPED:
        candles = normalizer(payload, envelope_path)
    else:
        candles = normalizer(payload)

    dropped = len(payload) - len(candles) if isinstance(payload, list) else 0
    if dropped:
        logger.debug(f"Dropped {dropped} unparsable rows")

    return ensure_ascending(candles)
