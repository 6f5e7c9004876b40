"""Builder-style loaders bound to a schema or a dataclass.

Instead of generating a loader per configuration class, :class:`TypedLoader`
wraps a schema with default options derived from its name::

    @dataclass
    class Server:
        host: str
        port: int = 8080

    server = TypedLoader.for_dataclass(Server).load_or_raise()
"""

from __future__ import annotations

import dataclasses
import threading
import types
import typing
from pathlib import Path
from typing import Any, Dict, Generic, Optional, Sequence, Type, TypeVar

from .core.loader import ConfigLoader
from .core.masked import MaskedValue
from .core.options import LoaderOptions
from .core.result import ResolutionResult
from .core.schema import Field, FieldType, Schema

T = TypeVar("T")

_TYPE_TAGS: Dict[Any, FieldType] = {
    str: FieldType.STRING,
    int: FieldType.INTEGER,
    float: FieldType.FLOAT,
    bool: FieldType.BOOLEAN,
    list: FieldType.SEQUENCE,
    tuple: FieldType.SEQUENCE,
    dict: FieldType.MAPPING,
}


def _field_type(hint: Any) -> tuple:
    """Return ``(FieldType, nested schema or None, sensitive)`` for a type hint."""
    origin = typing.get_origin(hint)
    if origin in (typing.Union, types.UnionType):
        args = [a for a in typing.get_args(hint) if a is not type(None)]
        if len(args) == 1:
            return _field_type(args[0])
    if hint is MaskedValue:
        return FieldType.STRING, None, True
    if dataclasses.is_dataclass(hint):
        return FieldType.NESTED, schema_from_dataclass(hint), False
    tag = _TYPE_TAGS.get(origin or hint)
    if tag is None:
        raise ValueError(f"Unsupported field type: {hint!r}")
    return tag, None, False


def schema_from_dataclass(cls: type, name: Optional[str] = None) -> Schema:
    """Describe dataclass ``cls`` as a Schema.

    Fields without a default are required. Fields annotated ``MaskedValue``
    become sensitive strings; dataclass-typed fields become nested schemas.
    Per-field validators can be attached with
    ``field(metadata={"validators": [...]})`` and a custom key with
    ``field(metadata={"key": "..."})``.
    """
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls!r} is not a dataclass")
    hints = typing.get_type_hints(cls)
    fields = []
    renames: Dict[str, str] = {}
    for dc_field in dataclasses.fields(cls):
        if not dc_field.init:
            continue
        tag, nested, sensitive = _field_type(hints[dc_field.name])
        key = dc_field.metadata.get("key", dc_field.name)
        renames[key] = dc_field.name
        has_default = dc_field.default is not dataclasses.MISSING
        has_factory = dc_field.default_factory is not dataclasses.MISSING
        fields.append(
            Field(
                name=key,
                type=tag,
                required=not (has_default or has_factory),
                default=dc_field.default if has_default else None,
                default_factory=dc_field.default_factory if has_factory else None,
                sensitive=sensitive,
                validators=tuple(dc_field.metadata.get("validators", ())),
                schema=nested,
            )
        )

    def factory(values: Dict[str, Any]) -> Any:
        return cls(**{renames[key]: value for key, value in values.items()})

    return Schema(fields=tuple(fields), factory=factory, name=name or cls.__name__)


class TypedLoader(Generic[T]):
    """A loader with per-schema default options and a cached instance.

    Default options follow the schema name: app name ``server``, environment
    prefix ``SERVER_`` and property prefix ``server.``.
    """

    def __init__(self, schema: Schema, options: Optional[LoaderOptions] = None):
        self.schema = schema
        base = schema.name.lower()
        self.options = options or LoaderOptions(
            app_name=base,
            env_var_prefix=f"{base.upper()}_",
            system_property_prefix=f"{base}.",
        )
        self._instance: Optional[T] = None
        self._lock = threading.Lock()

    @classmethod
    def for_dataclass(cls, config_class: Type[T], options: Optional[LoaderOptions] = None) -> "TypedLoader[T]":
        return cls(schema_from_dataclass(config_class), options)

    def with_options(self, **changes: Any) -> "TypedLoader[T]":
        return TypedLoader(self.schema, self.options.replace(**changes))

    def load(
        self,
        command_line_args: Optional[Sequence[str]] = None,
        local_config_dir: Optional[Path] = None,
        global_config_dir: Optional[Path] = None,
    ) -> ResolutionResult:
        options = self.options
        if command_line_args is not None:
            options = options.replace(command_line_args=command_line_args)
        if local_config_dir is not None:
            options = options.replace(local_config_directory=local_config_dir)
        if global_config_dir is not None:
            options = options.replace(global_config_directory=global_config_dir)
        return ConfigLoader(self.schema, options).load()

    def load_or_raise(self, *args: Any, **kwargs: Any) -> T:
        return self.load(*args, **kwargs).get_or_raise()

    def load_or_default(self, default: T, *args: Any, **kwargs: Any) -> T:
        return self.load(*args, **kwargs).get_or_else(default)

    def instance(self) -> T:
        """Return a lazily loaded, shared configuration value."""
        with self._lock:
            if self._instance is None:
                self._instance = self.load_or_raise()
            return self._instance
