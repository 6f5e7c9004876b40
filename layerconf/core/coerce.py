"""Coercion of loose values into declared field types."""

from __future__ import annotations

import json
import math
from typing import Any, Callable, Dict, Optional

from .inference import INT64_MAX, INT64_MIN, parse_float64, parse_int64
from .schema import FieldType
from .types import LooseValue


def _to_string(value: LooseValue) -> Optional[str]:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, dict)):
        return json.dumps(value, separators=(",", ":"))
    return str(value)


def _to_integer(value: LooseValue) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        truncated = int(value)
        if truncated < INT64_MIN or truncated > INT64_MAX:
            return None
        return truncated
    if isinstance(value, str):
        return parse_int64(value.strip())
    return None


def _to_float(value: LooseValue) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return float(value)
    if isinstance(value, str):
        return parse_float64(value.strip())
    return None


def _to_boolean(value: LooseValue) -> Optional[bool]:
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered == "true":
            return True
        if lowered == "false":
            return False
    return None


def _to_sequence(value: LooseValue) -> Optional[list]:
    if isinstance(value, (list, tuple)):
        return list(value)
    return None


def _to_mapping(value: LooseValue) -> Optional[dict]:
    if isinstance(value, dict):
        return dict(value)
    return None


def _passthrough(value: LooseValue) -> Any:
    return value


_COERCERS: Dict[FieldType, Callable[[LooseValue], Any]] = {
    FieldType.STRING: _to_string,
    FieldType.INTEGER: _to_integer,
    FieldType.FLOAT: _to_float,
    FieldType.BOOLEAN: _to_boolean,
    FieldType.SEQUENCE: _to_sequence,
    FieldType.MAPPING: _to_mapping,
    FieldType.NESTED: _passthrough,
}


def coerce(value: LooseValue, target: FieldType) -> Any:
    """Convert ``value`` to ``target``.

    Never raises: a value that cannot be converted yields None, which
    callers treat as "no value". Nested values pass through unchanged and
    are checked when the sub-schema is built.

    Args:
        value: Loose value from the merged configuration.
        target: Declared type of the field.

    Returns:
        The converted value, or None.
    """
    if value is None:
        return None
    return _COERCERS[target](value)
