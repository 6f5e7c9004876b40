"""Resources bundled inside an installed package."""

from __future__ import annotations

from importlib import resources

from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import ABSENT, LayerResult
from .files import decode_document, missing_file


class PackagedResourceSource(Source):
    """``config.*`` or ``defaults.*`` shipped in ``resource_package``.

    The layer is disabled unless ``resource_package`` is set.
    """

    def __init__(self, layer: ConfigLayer, resource_name: str):
        self.layer = layer
        self.resource_name = resource_name
        self.name = f"resource:{resource_name}"

    def load(self, context: ExtractionContext) -> LayerResult:
        package = context.options.resource_package
        if not package:
            return ABSENT
        where = f"{package}/{self.resource_name}"
        resource = resources.files(package).joinpath(self.resource_name)
        if not resource.is_file():
            return missing_file(self.layer, self.resource_name, where)
        content = resource.read_text(encoding="utf-8")
        return decode_document(self.layer, self.resource_name, content, context, where)
