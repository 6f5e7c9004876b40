"""System property source.

Properties default to the interpreter's ``-X name=value`` options, so
``python -X myapp.port=8080`` behaves like a JVM ``-Dmyapp.port=8080``.
"""

from __future__ import annotations

from ..core.inference import flatten_tree, infer_scalar
from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import ABSENT, Found, LayerMapping, LayerResult


class SystemPropertiesSource(Source):
    def __init__(self) -> None:
        self.layer = ConfigLayer.SYSTEM_PROPERTIES
        self.name = "properties"

    def load(self, context: ExtractionContext) -> LayerResult:
        prefix = context.options.system_property_prefix
        if not prefix:
            return ABSENT
        values: LayerMapping = {}
        for key, value in context.options.properties().items():
            key = str(key)
            if not key.startswith(prefix):
                continue
            # ``-X flag`` without a value is recorded as True
            values[key[len(prefix):]] = infer_scalar(value) if isinstance(value, str) else flatten_tree(value)
        return Found(values) if values else ABSENT
