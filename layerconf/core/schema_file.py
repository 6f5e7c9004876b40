"""Loader for layerconf.yaml schema description files."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union

import yaml

from .options import LoaderOptions
from .schema import Field, FieldType, Schema
from .validation import STOCK_VALIDATORS

logger = logging.getLogger(__name__)

SCHEMA_FILENAME = "layerconf.yaml"


class SchemaFile:
    """Reads a YAML document describing a schema and loader options.

    Example document::

        name: server
        options:
          env_var_prefix: SERVER_
          fail_fast: true
        fields:
          - name: host
            type: string
          - name: port
            type: integer
            default: 8080
            validators: [port]
          - name: db
            type: nested
            fields:
              - {name: url, type: string, validators: [url]}
    """

    def __init__(self, path: Optional[Union[str, Path]] = None):
        self.path = self._find_schema_file(path)
        self._document: Optional[Dict[str, Any]] = None

    def _find_schema_file(self, path: Optional[Union[str, Path]]) -> Optional[Path]:
        """Use ``path`` if given, else search the working directory and its parents."""
        if path is not None:
            candidate = Path(path)
            return candidate if candidate.exists() else None
        current = Path.cwd()
        for directory in (current, *current.parents):
            candidate = directory / SCHEMA_FILENAME
            if candidate.exists():
                return candidate
        return None

    def load(self) -> Dict[str, Any]:
        """Parse the YAML document.

        Raises:
            FileNotFoundError: If no schema file was found.
            ValueError: If the file is not valid YAML or not a mapping.
        """
        if self.path is None:
            raise FileNotFoundError(f"No {SCHEMA_FILENAME} found")
        if self._document is not None:
            return self._document
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                document = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid schema file at {self.path}: {e}") from e
        if not isinstance(document, dict):
            raise ValueError(f"Schema file {self.path} must contain a mapping")
        logger.debug("Loaded schema file %s", self.path)
        self._document = document
        return document

    def schema(self) -> Schema:
        document = self.load()
        name = document.get("name", "config")
        return parse_schema(document.get("fields") or [], name)

    def options(self, **overrides: Any) -> LoaderOptions:
        document = self.load()
        raw = dict(document.get("options") or {})
        raw.setdefault("app_name", document.get("name"))
        raw.update({k: v for k, v in overrides.items() if v is not None})
        return LoaderOptions.from_dict(raw)

    def read(self, **overrides: Any) -> Tuple[Schema, LoaderOptions]:
        return self.schema(), self.options(**overrides)


def parse_field(entry: Dict[str, Any]) -> Field:
    """Turn one ``fields`` entry into a Field."""
    if "name" not in entry:
        raise ValueError(f"Field entry without a name: {entry!r}")
    name = entry["name"]
    field_type = FieldType.parse(entry.get("type", "string"))
    nested = None
    if field_type is FieldType.NESTED:
        nested = parse_schema(entry.get("fields") or [], name)
    validators = []
    for validator_name in entry.get("validators") or []:
        if validator_name not in STOCK_VALIDATORS:
            raise ValueError(f"Unknown validator '{validator_name}' for field '{name}'")
        validators.append(STOCK_VALIDATORS[validator_name]())
    has_default = "default" in entry
    return Field(
        name=name,
        type=field_type,
        required=entry.get("required", not has_default),
        default=entry.get("default"),
        sensitive=bool(entry.get("sensitive", False)),
        validators=tuple(validators),
        schema=nested,
    )


def parse_schema(entries: List[Dict[str, Any]], name: str = "config") -> Schema:
    return Schema(fields=tuple(parse_field(entry) for entry in entries), name=name)
