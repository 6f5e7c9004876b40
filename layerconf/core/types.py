"""Type definitions for the layerconf resolution engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Union

from .errors import ConfigError
from .layers import ConfigLayer

# Values every layer hands to the merger before coercion.
LooseValue = Union[
    None, bool, int, float, str, List["LooseValue"], Dict[str, "LooseValue"]
]

LayerMapping = Dict[str, LooseValue]


@dataclass(frozen=True)
class Found:
    """A layer produced values.

    Attributes:
        values: Flat key to loose value mapping.
    """

    values: LayerMapping


@dataclass(frozen=True)
class Absent:
    """A layer was not applicable (not configured or nothing to read)."""


@dataclass(frozen=True)
class LayerFailure:
    """A layer could not be loaded.

    Attributes:
        error: The error describing why.
    """

    error: ConfigError


LayerResult = Union[Found, Absent, LayerFailure]

ABSENT = Absent()


@dataclass(frozen=True)
class MergedState:
    """Merged values plus the layer that supplied each key.

    Attributes:
        values: Winning loose value per key.
        provenance: Winning layer per key; same keys as ``values``.
    """

    values: Mapping[str, LooseValue] = field(default_factory=dict)
    provenance: Mapping[str, ConfigLayer] = field(default_factory=dict)

    def __post_init__(self) -> None:
        if set(self.values) != set(self.provenance):
            raise ValueError("merged values and provenance must share the same keys")
        object.__setattr__(self, "values", MappingProxyType(dict(self.values)))
        object.__setattr__(self, "provenance", MappingProxyType(dict(self.provenance)))

    def __contains__(self, key: object) -> bool:
        return key in self.values

    def get(self, key: str, default: Any = None) -> Any:
        return self.values.get(key, default)

    def source_of(self, key: str) -> Optional[ConfigLayer]:
        return self.provenance.get(key)
