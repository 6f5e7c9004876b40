"""Display-safe wrapper for sensitive configuration values."""

from __future__ import annotations

MASK = "****"


class MaskedValue:
    """Hold a secret string that never shows up in logs or reprs.

    The real value is only available through :meth:`reveal`.
    """

    __slots__ = ("_value",)

    def __init__(self, value: str):
        self._value = value

    def reveal(self) -> str:
        return self._value

    def __str__(self) -> str:
        return MASK

    def __repr__(self) -> str:
        return f"MaskedValue({MASK!r})"

    def __format__(self, format_spec: str) -> str:
        return format(MASK, format_spec)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, MaskedValue):
            return self._value == other._value
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)
