"""Source protocol implemented by every layer extractor."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

from .layers import ConfigLayer
from .options import LoaderOptions
from .schema import Schema
from .types import LayerResult


@dataclass(frozen=True)
class ExtractionContext:
    """Everything a source may consult while loading.

    Attributes:
        options: Loader options for this run.
        schema: Target schema, used for defaults and unknown key checks.
    """

    options: LoaderOptions
    schema: Optional[Schema] = None


class Source(Protocol):
    """Protocol for configuration layer sources.

    A source reads one raw origin (arguments, environment, a file...) and
    returns its values as a flat mapping of keys to loose values.
    """

    layer: ConfigLayer
    name: str

    def load(self, context: ExtractionContext) -> LayerResult:
        """Load values for this layer.

        Args:
            context: Options and schema for the current run.

        Returns:
            Found with the values, Absent when the layer does not apply,
            or LayerFailure describing why loading failed.
        """
        ...
