"""Configuration files read from the local and global directories."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..core.errors import LayerLoadError
from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import Found, LayerFailure, LayerMapping, LayerResult
from .parsers import PARSERS

logger = logging.getLogger(__name__)

CONFIG_STEM = "config"


def check_unknown_keys(
    layer: ConfigLayer, values: LayerMapping, context: ExtractionContext, where: str
) -> Optional[LayerFailure]:
    """Reject keys matching no schema field when unknown keys are not ignored."""
    if context.options.ignore_unknown_keys or context.schema is None:
        return None
    unknown = sorted(k for k in values if not context.schema.accepts_key(k))
    if not unknown:
        return None
    return LayerFailure(
        LayerLoadError(
            layer,
            f"Unknown key(s) in {where}: {', '.join(unknown)}",
            path=where,
        )
    )


def decode_document(
    layer: ConfigLayer, filename: str, content: str, context: ExtractionContext, where: str
) -> LayerResult:
    """Parse ``content`` with the decoder matching ``filename``'s suffix."""
    parser = PARSERS[Path(filename).suffix]
    try:
        values = parser(content, context.options.lenient_parsing)
    except ValueError as e:
        return LayerFailure(LayerLoadError(layer, f"Failed to parse {filename}", e, where))
    rejected = check_unknown_keys(layer, values, context, where)
    if rejected is not None:
        return rejected
    return Found(values)


def missing_file(layer: ConfigLayer, filename: str, where: str) -> LayerFailure:
    return LayerFailure(
        LayerLoadError(
            layer,
            f"{filename} not found",
            FileNotFoundError(f"No such file: {where}"),
            where,
        )
    )


class FileSource(Source, ABC):
    """A ``config.json`` or ``config.toml`` file in some directory.

    A missing file is reported with a FileNotFoundError cause, which the
    loader drops unless ``fail_on_missing_file`` is set. A file that exists
    but cannot be decoded is always reported.
    """

    def __init__(self, layer: ConfigLayer, extension: str):
        self.layer = layer
        self.extension = extension
        self.filename = f"{CONFIG_STEM}{extension}"
        self.name = f"file:{self.filename}"

    @abstractmethod
    def directory(self, context: ExtractionContext) -> Path:
        """Directory holding the file."""

    def path(self, context: ExtractionContext) -> Path:
        return self.directory(context) / self.filename

    def load(self, context: ExtractionContext) -> LayerResult:
        path = self.path(context)
        where = str(path.absolute())
        if not path.is_file():
            return missing_file(self.layer, self.filename, where)
        logger.debug("Reading %s for %s", where, self.layer)
        content = path.read_text(encoding="utf-8")
        return decode_document(self.layer, self.filename, content, context, where)


class LocalFileSource(FileSource):
    """File in ``local_config_directory``, the working directory by default."""

    def directory(self, context: ExtractionContext) -> Path:
        return context.options.local_directory()


class GlobalFileSource(FileSource):
    """File in ``global_config_directory``, ``~/.config/<app>`` by default."""

    def directory(self, context: ExtractionContext) -> Path:
        return context.options.global_directory()
