"""Error records accumulated during a resolution run."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence

from .layers import ConfigLayer


@dataclass(frozen=True)
class ConfigError:
    """A single problem found while resolving configuration.

    Attributes:
        layer: Layer the problem is attributed to.
        message: Human readable description.
        cause: Underlying exception, if any.
        path: Configuration key or file path involved, if known.
    """

    layer: ConfigLayer
    message: str
    cause: Optional[BaseException] = None
    path: Optional[str] = None

    @property
    def kind(self) -> str:
        return type(self).__name__

    def __str__(self) -> str:
        text = f"[{self.layer.name}]"
        if self.path is not None:
            text += f" at '{self.path}'"
        text += f": {self.message}"
        if self.cause is not None:
            text += f" ({self.cause})"
        return text


@dataclass(frozen=True)
class LayerLoadError(ConfigError):
    """A layer could not be read or decoded."""


@dataclass(frozen=True)
class MissingRequiredFieldError(ConfigError):
    """A required field was unset after all layers were merged."""


@dataclass(frozen=True)
class ConstructionError(ConfigError):
    """Coercion or assembly of the target value failed."""


@dataclass(frozen=True)
class ValidationError(ConfigError):
    """A validator rejected a constructed value."""


def is_missing_file(error: ConfigError) -> bool:
    return isinstance(error.cause, FileNotFoundError)


class ConfigurationError(Exception):
    """Raised when a failed resolution result is unwrapped."""

    def __init__(self, errors: Sequence[ConfigError]):
        self.errors: List[ConfigError] = list(errors)
        lines = "\n".join(f"  - {e}" for e in self.errors)
        super().__init__(
            f"Configuration failed with {len(self.errors)} error(s):\n{lines}"
        )
