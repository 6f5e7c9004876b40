"""Target schema description: the fields a configuration is built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, Iterable, List, Optional, Tuple

from .validation import Validator


class FieldType(Enum):
    """Declared type of a schema field."""

    STRING = "string"
    INTEGER = "integer"
    FLOAT = "float"
    BOOLEAN = "boolean"
    SEQUENCE = "sequence"
    MAPPING = "mapping"
    NESTED = "nested"

    @classmethod
    def parse(cls, name: str) -> "FieldType":
        aliases = {"str": "string", "int": "integer", "bool": "boolean", "list": "sequence", "dict": "mapping"}
        key = name.strip().lower()
        try:
            return cls(aliases.get(key, key))
        except ValueError:
            raise ValueError(f"Unknown field type: {name}") from None


Factory = Callable[[Dict[str, Any]], Any]
SchemaValidator = Callable[[Any], List[str]]


@dataclass(frozen=True)
class Field:
    """One entry of a target schema.

    Attributes:
        name: Lookup key in the merged configuration.
        type: Declared type the raw value is coerced into.
        required: Whether resolution fails when no layer supplies the field.
        default: Value used for optional fields nobody supplied.
        default_factory: Callable producing the default, for mutable defaults.
        sensitive: Wrap the resolved string in a ``MaskedValue``.
        validators: Checks run against the resolved value.
        schema: Sub-schema for ``FieldType.NESTED`` fields.
    """

    name: str
    type: FieldType
    required: bool = True
    default: Any = None
    default_factory: Optional[Callable[[], Any]] = None
    sensitive: bool = False
    validators: Tuple[Validator, ...] = ()
    schema: Optional["Schema"] = None

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Field name must not be empty")
        if self.type is FieldType.NESTED and self.schema is None:
            raise ValueError(f"Nested field '{self.name}' needs a schema")
        if self.sensitive and self.type is not FieldType.STRING:
            raise ValueError(f"Only string fields can be sensitive: '{self.name}'")
        object.__setattr__(self, "validators", tuple(self.validators))

    def default_value(self) -> Any:
        if self.default_factory is not None:
            return self.default_factory()
        return self.default


@dataclass(frozen=True)
class Schema:
    """Ordered fields plus the factory that assembles the final value.

    The factory receives a ``{field name: resolved value}`` dict and returns
    the configuration object; the default returns the dict itself.
    """

    fields: Tuple[Field, ...]
    factory: Factory = dict
    validators: Tuple[SchemaValidator, ...] = ()
    name: str = "config"

    def __post_init__(self) -> None:
        object.__setattr__(self, "fields", tuple(self.fields))
        object.__setattr__(self, "validators", tuple(self.validators))
        seen = set()
        for f in self.fields:
            if f.name in seen:
                raise ValueError(f"Duplicate field name: {f.name}")
            seen.add(f.name)

    def field_names(self) -> List[str]:
        return [f.name for f in self.fields]

    def get(self, name: str) -> Optional[Field]:
        for f in self.fields:
            if f.name == name:
                return f
        return None

    def optional_fields(self) -> List[Field]:
        return [f for f in self.fields if not f.required]

    def accepts_key(self, key: str) -> bool:
        """Return True if ``key`` names a field or a dotted path into one."""
        head = key.split(".", 1)[0]
        return any(f.name == key or f.name == head for f in self.fields)


_MISSING = object()


class SchemaBuilder:
    """Fluent construction of a :class:`Schema`.

    A field is optional exactly when a default (or default factory) is given,
    unless ``required`` says otherwise.

    Example:
        schema = (
            SchemaBuilder("server")
            .string("host", default="localhost")
            .integer("port", validators=[PortRangeValidator()])
            .build()
        )
    """

    def __init__(self, name: str = "config"):
        self.name = name
        self._fields: List[Field] = []
        self._validators: List[SchemaValidator] = []

    def field(
        self,
        name: str,
        type: FieldType,
        *,
        default: Any = _MISSING,
        default_factory: Optional[Callable[[], Any]] = None,
        required: Optional[bool] = None,
        sensitive: bool = False,
        validators: Iterable[Validator] = (),
        schema: Optional[Schema] = None,
    ) -> "SchemaBuilder":
        has_default = default is not _MISSING or default_factory is not None
        self._fields.append(
            Field(
                name=name,
                type=type,
                required=(not has_default) if required is None else required,
                default=None if default is _MISSING else default,
                default_factory=default_factory,
                sensitive=sensitive,
                validators=tuple(validators),
                schema=schema,
            )
        )
        return self

    def string(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.STRING, **kwargs)

    def secret(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.STRING, sensitive=True, **kwargs)

    def integer(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.INTEGER, **kwargs)

    def floating(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.FLOAT, **kwargs)

    def boolean(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.BOOLEAN, **kwargs)

    def sequence(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.SEQUENCE, **kwargs)

    def mapping(self, name: str, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.MAPPING, **kwargs)

    def nested(self, name: str, schema: Schema, **kwargs: Any) -> "SchemaBuilder":
        return self.field(name, FieldType.NESTED, schema=schema, **kwargs)

    def validate_with(self, validator: SchemaValidator) -> "SchemaBuilder":
        self._validators.append(validator)
        return self

    def build(self, factory: Factory = dict) -> Schema:
        return Schema(
            fields=tuple(self._fields),
            factory=factory,
            validators=tuple(self._validators),
            name=self.name,
        )
