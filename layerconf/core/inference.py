"""Turn raw tokens and decoded documents into loose values."""

from __future__ import annotations

import math
import re
from datetime import date, datetime, time
from typing import Any, Optional

from .types import LooseValue

INT64_MIN = -(2**63)
INT64_MAX = 2**63 - 1

_INT_RE = re.compile(r"-?[0-9]+")
_FLOAT_RE = re.compile(r"-?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)")


def parse_int64(text: str) -> Optional[int]:
    """Parse ``text`` as a signed 64-bit integer, or return None."""
    if not _INT_RE.fullmatch(text):
        return None
    value = int(text)
    if value < INT64_MIN or value > INT64_MAX:
        return None
    return value


def parse_float64(text: str) -> Optional[float]:
    """Parse ``text`` as a finite float, or return None."""
    if not _FLOAT_RE.fullmatch(text):
        return None
    value = float(text)
    if math.isinf(value):
        return None
    return value


def infer_scalar(text: str) -> LooseValue:
    """Guess the scalar type of a textual token.

    Booleans are matched case-insensitively, then integers, then floats.
    Anything else is returned unchanged.

    Args:
        text: Token from the command line, environment or properties.

    Returns:
        A bool, int, float or the original string.
    """
    lowered = text.lower()
    if lowered == "true":
        return True
    if lowered == "false":
        return False
    as_int = parse_int64(text)
    if as_int is not None:
        return as_int
    as_float = parse_float64(text)
    if as_float is not None:
        return as_float
    return text


def flatten_tree(tree: Any) -> LooseValue:
    """Convert a decoded JSON or TOML tree into loose values.

    Structure is preserved: objects stay mappings and arrays stay lists.
    Decoded strings stay strings; only numeric tokens become numbers.

    Args:
        tree: Output of a JSON or TOML decoder.

    Returns:
        The equivalent loose value.

    Raises:
        TypeError: If the tree holds a value outside the loose value space.
    """
    if tree is None or isinstance(tree, (bool, str)):
        return tree
    if isinstance(tree, int):
        if INT64_MIN <= tree <= INT64_MAX:
            return tree
        return float(tree)
    if isinstance(tree, float):
        return tree
    if isinstance(tree, (list, tuple)):
        return [flatten_tree(item) for item in tree]
    if isinstance(tree, dict):
        return {str(key): flatten_tree(value) for key, value in tree.items()}
    # TOML dates and times
    if isinstance(tree, (datetime, date, time)):
        return tree.isoformat()
    raise TypeError(f"Unsupported decoded value of type {type(tree).__name__}")
