"""layerconf - layered configuration resolution.

Resolve configuration from command-line arguments, system properties,
environment variables, JSON/TOML files and defaults into one typed value,
with provenance for every key.
"""

from .core.errors import ConfigError, ConfigurationError
from .core.layers import ConfigLayer, all_layers
from .core.loader import ConfigLoader, resolve
from .core.masked import MaskedValue
from .core.options import LoaderOptions, MalformedValuePolicy
from .core.result import Failure, Success
from .core.schema import Field, FieldType, Schema, SchemaBuilder
from .core.validation import Invalid, Valid
from .typed import TypedLoader, schema_from_dataclass

__all__ = [
    "ConfigError",
    "ConfigLayer",
    "ConfigLoader",
    "ConfigurationError",
    "Failure",
    "Field",
    "FieldType",
    "Invalid",
    "LoaderOptions",
    "MalformedValuePolicy",
    "MaskedValue",
    "Schema",
    "SchemaBuilder",
    "Success",
    "TypedLoader",
    "Valid",
    "all_layers",
    "resolve",
    "schema_from_dataclass",
]
