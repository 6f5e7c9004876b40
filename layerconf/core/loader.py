"""Resolve a schema against every configuration layer."""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Set, Tuple

from .builder import build_instance, run_validators
from .errors import ConfigError, is_missing_file
from .extract import default_sources, extract
from .layers import ConfigLayer, all_layers
from .merge import merge_layers
from .options import LoaderOptions
from .result import ConfigMetadata, Failure, ResolutionResult, Success
from .schema import Schema
from .source import ExtractionContext, Source
from .types import Found, LayerFailure, LayerMapping, MergedState

logger = logging.getLogger(__name__)


class ConfigLoader:
    """Load a configuration described by ``schema``.

    Every layer of the catalog is extracted in precedence order, the
    results are merged so higher-precedence layers win, and the schema's
    factory builds the final value.

    Args:
        schema: Target schema.
        options: Loader options; defaults enable only file and default layers.
        sources: Optional replacement sources keyed by layer.
    """

    def __init__(
        self,
        schema: Schema,
        options: Optional[LoaderOptions] = None,
        sources: Optional[Mapping[ConfigLayer, Source]] = None,
    ):
        self.schema = schema
        self.options = options or LoaderOptions()
        self._sources: Dict[ConfigLayer, Source] = default_sources()
        if sources:
            self._sources.update(sources)

    def extract_layers(self) -> Tuple[List[Tuple[ConfigLayer, LayerMapping]], List[ConfigError]]:
        """Run every layer's source, keeping values and reportable errors."""
        context = ExtractionContext(options=self.options, schema=self.schema)
        layer_values: List[Tuple[ConfigLayer, LayerMapping]] = []
        errors: List[ConfigError] = []
        for layer in all_layers():
            outcome = extract(layer, context, self._sources)
            if isinstance(outcome, Found):
                logger.debug("Loaded %d key(s) from %s", len(outcome.values), layer)
                layer_values.append((layer, outcome.values))
            elif isinstance(outcome, LayerFailure):
                if is_missing_file(outcome.error) and not self.options.fail_on_missing_file:
                    logger.debug("Skipping %s: %s", layer, outcome.error.message)
                    continue
                logger.warning("%s", outcome.error)
                errors.append(outcome.error)
            else:
                logger.debug("Layer %s not applicable", layer)
        return layer_values, errors

    def merged_state(self) -> Tuple[MergedState, Set[ConfigLayer], List[ConfigError]]:
        layer_values, errors = self.extract_layers()
        loaded = {layer for layer, _ in layer_values}
        return merge_layers(layer_values), loaded, errors

    def load(self) -> ResolutionResult:
        """Resolve the configuration.

        Returns:
            Success with the value and metadata, or Failure listing every
            error. Construction failures always fail; other errors fail the
            run only when ``fail_fast`` is set.
        """
        merged, loaded, errors = self.merged_state()
        built = build_instance(merged, self.schema, self.options.malformed_value_policy)
        errors.extend(built.errors)

        if not built.succeeded:
            logger.warning("Configuration %r failed with %d error(s)", self.schema.name, len(errors))
            return Failure(tuple(errors))

        for error in run_validators(built):
            logger.warning("%s", error)
            errors.append(error)

        if errors and self.options.fail_fast:
            logger.warning("Failing fast on %d configuration error(s)", len(errors))
            return Failure(tuple(errors))

        logger.info(
            "Resolved %r from %d layer(s)",
            self.schema.name,
            len(loaded),
        )
        metadata = ConfigMetadata(sources=dict(merged.provenance), loaded_layers=frozenset(loaded))
        return Success(built.instance, metadata, tuple(errors))


def resolve(schema: Schema, options: Optional[LoaderOptions] = None) -> ResolutionResult:
    """Resolve ``schema`` with ``options``; see :class:`ConfigLoader`."""
    return ConfigLoader(schema, options).load()
