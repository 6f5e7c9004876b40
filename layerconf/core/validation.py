"""Field validators run after a configuration has been constructed."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Protocol, Union
from urllib.parse import urlparse

from .masked import MaskedValue


@dataclass(frozen=True)
class Valid:
    pass


@dataclass(frozen=True)
class Invalid:
    message: str


ValidationResult = Union[Valid, Invalid]

VALID = Valid()


class Validator(Protocol):
    """Check a resolved field value."""

    def validate(self, value: Any) -> ValidationResult:
        ...


def _text(value: Any) -> str:
    if isinstance(value, MaskedValue):
        return value.reveal()
    return str(value)


class NonEmptyStringValidator:
    def validate(self, value: Any) -> ValidationResult:
        if _text(value):
            return VALID
        return Invalid("String cannot be empty")


class PortRangeValidator:
    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, int) and not isinstance(value, bool) and 1 <= value <= 65535:
            return VALID
        return Invalid("Port must be between 1 and 65535")


class UrlValidator:
    """Accept absolute URLs with both a scheme and a location."""

    def validate(self, value: Any) -> ValidationResult:
        try:
            parsed = urlparse(_text(value))
        except ValueError:
            return Invalid("Invalid URL format")
        if parsed.scheme and parsed.netloc:
            return VALID
        return Invalid("Invalid URL format")


class PredicateValidator:
    """Adapt a plain ``value -> bool`` callable into a validator."""

    def __init__(self, predicate, message: str):
        self.predicate = predicate
        self.message = message

    def validate(self, value: Any) -> ValidationResult:
        return VALID if self.predicate(value) else Invalid(self.message)


STOCK_VALIDATORS = {
    "non_empty": NonEmptyStringValidator,
    "port": PortRangeValidator,
    "url": UrlValidator,
}
