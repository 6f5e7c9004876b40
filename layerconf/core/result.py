"""Outcome of a resolution run."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, FrozenSet, Generic, Mapping, Tuple, TypeVar, Union

from .errors import ConfigError, ConfigurationError
from .layers import ConfigLayer

T = TypeVar("T")
R = TypeVar("R")


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class ConfigMetadata:
    """Where a resolved configuration came from.

    Attributes:
        sources: Layer that supplied each merged key.
        loaded_layers: Layers that loaded successfully.
        timestamp: When resolution finished.
    """

    sources: Mapping[str, ConfigLayer]
    loaded_layers: FrozenSet[ConfigLayer]
    timestamp: datetime = field(default_factory=_utcnow)


@dataclass(frozen=True)
class Success(Generic[T]):
    """Resolution produced a value.

    ``errors`` holds problems that did not stop resolution, e.g. a
    malformed file in a layer no required field depended on.
    """

    value: T
    metadata: ConfigMetadata
    errors: Tuple[ConfigError, ...] = ()

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

    def map(self, transform: Callable[[T], R]) -> "Success[R]":
        return Success(transform(self.value), self.metadata, self.errors)

    def flat_map(self, transform: Callable[[T], "ResolutionResult[R]"]) -> "ResolutionResult[R]":
        return transform(self.value)

    def get_or_else(self, default: T) -> T:
        return self.value

    def get_or_raise(self) -> T:
        return self.value


@dataclass(frozen=True)
class Failure:
    """Resolution failed; ``errors`` lists every problem in order."""

    errors: Tuple[ConfigError, ...]

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

    def map(self, transform: Callable[[Any], Any]) -> "Failure":
        return self

    def flat_map(self, transform: Callable[[Any], Any]) -> "Failure":
        return self

    def get_or_else(self, default: T) -> T:
        return default

    def get_or_raise(self) -> Any:
        raise ConfigurationError(self.errors)


ResolutionResult = Union[Success[T], Failure]
