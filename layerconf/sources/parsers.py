"""JSON and TOML document decoders producing layer mappings."""

from __future__ import annotations

import json
import tomllib
from typing import Any, Callable, Dict

from ..core.inference import flatten_tree
from ..core.types import LayerMapping

Parser = Callable[[str, bool], LayerMapping]


class DocumentFormatError(ValueError):
    """A configuration document could not be decoded."""


def _to_mapping(data: Any, fmt: str) -> LayerMapping:
    if not isinstance(data, dict):
        raise DocumentFormatError(
            f"Invalid {fmt} format: top level must be an object, got {type(data).__name__}"
        )
    return {str(key): flatten_tree(value) for key, value in data.items()}


def parse_json(content: str, lenient: bool = True) -> LayerMapping:
    try:
        data = json.loads(content, strict=not lenient)
    except json.JSONDecodeError as e:
        raise DocumentFormatError(f"Invalid JSON format: {e}") from e
    return _to_mapping(data, "JSON")


def parse_toml(content: str, lenient: bool = True) -> LayerMapping:
    # tomllib has no lenient mode
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise DocumentFormatError(f"Invalid TOML format: {e}") from e
    return _to_mapping(data, "TOML")


PARSERS: Dict[str, Parser] = {
    ".json": parse_json,
    ".toml": parse_toml,
}
