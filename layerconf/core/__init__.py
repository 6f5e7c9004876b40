from .errors import (
    ConfigError,
    ConfigurationError,
    ConstructionError,
    LayerLoadError,
    MissingRequiredFieldError,
    ValidationError,
)
from .layers import ConfigLayer, all_layers
from .loader import ConfigLoader, resolve
from .masked import MaskedValue
from .options import LoaderOptions, MalformedValuePolicy
from .result import ConfigMetadata, Failure, Success
from .schema import Field, FieldType, Schema, SchemaBuilder

__all__ = [
    "ConfigError",
    "ConfigLayer",
    "ConfigLoader",
    "ConfigMetadata",
    "ConfigurationError",
    "ConstructionError",
    "Failure",
    "Field",
    "FieldType",
    "LayerLoadError",
    "LoaderOptions",
    "MalformedValuePolicy",
    "MaskedValue",
    "MissingRequiredFieldError",
    "Schema",
    "SchemaBuilder",
    "Success",
    "ValidationError",
    "all_layers",
    "resolve",
]
