"""Placeholders for fields whose defaults live in the schema."""

from __future__ import annotations

from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import Found, LayerMapping, LayerResult


class HardcodedDefaultsSource(Source):
    """Contribute a None entry for every optional schema field.

    The entry records that no external layer supplied the field; the builder
    substitutes the field's default. Required fields contribute nothing.
    """

    def __init__(self) -> None:
        self.layer = ConfigLayer.HARDCODED_DEFAULTS
        self.name = "defaults"

    def load(self, context: ExtractionContext) -> LayerResult:
        values: LayerMapping = {}
        if context.schema is not None:
            for f in context.schema.optional_fields():
                values[f.name] = None
        return Found(values)
