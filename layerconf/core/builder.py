"""Build the target configuration object from merged values."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from .coerce import coerce
from .errors import ConfigError, ConstructionError, MissingRequiredFieldError, ValidationError
from .layers import ConfigLayer
from .masked import MaskedValue
from .options import MalformedValuePolicy
from .schema import Field, FieldType, Schema
from .types import LooseValue, MergedState
from .validation import Invalid

logger = logging.getLogger(__name__)

CONSTRUCTION_FAILED = "Failed to construct configuration object"


@dataclass(frozen=True)
class ResolvedField:
    """A field value after coercion, with the layer it came from."""

    field: Field
    value: Any
    layer: ConfigLayer


@dataclass
class BuildResult:
    """Outcome of :func:`build_instance`.

    Attributes:
        instance: Object returned by the schema factory, when construction succeeded.
        errors: Missing and invalid field errors, in schema order.
        resolved: Every leaf field that received a value, keyed by dotted path.
        instances: ``(path, schema, instance)`` for the root and each nested object.
    """

    instance: Any = None
    errors: List[ConfigError] = field(default_factory=list)
    resolved: Dict[str, ResolvedField] = field(default_factory=dict)
    instances: List[Tuple[str, Schema, Any]] = field(default_factory=list)
    succeeded: bool = False


def nested_state(merged: MergedState, name: str) -> Optional[MergedState]:
    """Collect the values belonging to nested field ``name``.

    Both a mapping stored under ``name`` and dotted ``name.*`` keys
    contribute. A dotted key wins over the mapping's entry only when its
    layer has higher precedence than the layer that supplied the mapping.

    Returns:
        The sub-state, or None if nothing was supplied for ``name``.
    """
    container = merged.values.get(name)
    container_layer = merged.provenance.get(name)
    values: Dict[str, LooseValue] = {}
    provenance: Dict[str, ConfigLayer] = {}
    if isinstance(container, dict):
        for key, value in container.items():
            values[key] = value
            provenance[key] = container_layer
    prefix = f"{name}."
    for key, value in merged.values.items():
        if not key.startswith(prefix):
            continue
        sub_key = key[len(prefix):]
        layer = merged.provenance[key]
        if sub_key in provenance and not layer.precedes(provenance[sub_key]):
            continue
        values[sub_key] = value
        provenance[sub_key] = layer
    if not values and not isinstance(container, dict):
        return None
    return MergedState(values=values, provenance=provenance)


def _describe(f: Field, raw: LooseValue) -> str:
    shown = "<masked>" if f.sensitive else repr(raw)
    return f"Cannot convert value {shown} to {f.type.value}"


def build_instance(
    merged: MergedState,
    schema: Schema,
    policy: MalformedValuePolicy = MalformedValuePolicy.FALLBACK,
    path_prefix: str = "",
) -> BuildResult:
    """Walk the schema fields in order and assemble the configuration.

    Absent optional fields take their default. Absent required fields
    produce a MissingRequiredFieldError. Present values that cannot be
    coerced produce a ConstructionError for required fields, and for
    optional fields under ``MalformedValuePolicy.ERROR``; otherwise the
    default is used. If any required field could not be filled, or the
    schema factory raises, no instance is produced.

    Args:
        merged: Merged values and provenance.
        schema: Target schema.
        policy: Handling of present but uncoercible optional values.
        path_prefix: Dotted prefix used in error paths for nested schemas.

    Returns:
        BuildResult with the instance (if any) and accumulated errors.
    """
    result = BuildResult()
    values: Dict[str, Any] = {}
    failed = False

    for f in schema.fields:
        path = f"{path_prefix}{f.name}"
        layer = merged.provenance.get(f.name, ConfigLayer.HARDCODED_DEFAULTS)

        if f.type is FieldType.NESTED:
            sub_state = nested_state(merged, f.name)
            if sub_state is not None:
                sub = build_instance(sub_state, f.schema, policy, f"{path}.")
                result.errors.extend(sub.errors)
                result.resolved.update(sub.resolved)
                result.instances.extend(sub.instances)
                if sub.succeeded:
                    values[f.name] = sub.instance
                else:
                    failed = True
                continue

        raw = merged.values.get(f.name)
        if raw is None:
            if f.required:
                result.errors.append(
                    MissingRequiredFieldError(
                        ConfigLayer.HARDCODED_DEFAULTS,
                        f"Required field '{path}' is missing",
                        path=path,
                    )
                )
                failed = True
            else:
                values[f.name] = f.default_value()
            continue

        value = None if f.type is FieldType.NESTED else coerce(raw, f.type)
        if value is None:
            if f.required or policy is MalformedValuePolicy.ERROR:
                result.errors.append(ConstructionError(layer, _describe(f, raw), path=path))
                failed = True
            else:
                logger.debug("Ignoring malformed value for %s from %s; using default", path, layer)
                values[f.name] = f.default_value()
            continue

        if f.sensitive:
            value = MaskedValue(value)
        values[f.name] = value
        result.resolved[path] = ResolvedField(f, value, layer)

    if failed:
        if not path_prefix:
            result.errors.append(ConstructionError(ConfigLayer.HARDCODED_DEFAULTS, CONSTRUCTION_FAILED))
        return result

    try:
        result.instance = schema.factory(values)
    except Exception as e:
        result.errors.append(
            ConstructionError(
                ConfigLayer.HARDCODED_DEFAULTS,
                CONSTRUCTION_FAILED,
                e,
                path_prefix.rstrip(".") or None,
            )
        )
        return result
    result.succeeded = True
    result.instances.append((path_prefix.rstrip("."), schema, result.instance))
    return result


def run_validators(result: BuildResult) -> List[ConfigError]:
    """Apply field and schema validators to a successfully built result."""
    errors: List[ConfigError] = []
    for path, resolved in result.resolved.items():
        for validator in resolved.field.validators:
            outcome = validator.validate(resolved.value)
            if isinstance(outcome, Invalid):
                errors.append(ValidationError(resolved.layer, outcome.message, path=path))
    for path, schema, instance in result.instances:
        for check in schema.validators:
            for message in check(instance) or ():
                errors.append(
                    ValidationError(ConfigLayer.HARDCODED_DEFAULTS, message, path=path or None)
                )
    return errors
