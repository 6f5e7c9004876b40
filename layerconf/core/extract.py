"""Dispatch from each configuration layer to the source that reads it."""

from __future__ import annotations

import logging
from typing import Dict, Mapping, Optional

from .errors import LayerLoadError
from .layers import ConfigLayer
from .source import ExtractionContext, Source
from .types import LayerFailure, LayerResult

logger = logging.getLogger(__name__)


def default_sources() -> Dict[ConfigLayer, Source]:
    """Build the standard source for every layer in the catalog."""
    # Lazy import: the sources package depends on core modules
    from ..sources import (
        CommandLineSource,
        EnvironmentSource,
        GlobalFileSource,
        HardcodedDefaultsSource,
        LocalFileSource,
        PackagedResourceSource,
        SystemPropertiesSource,
    )

    return {
        ConfigLayer.COMMAND_LINE_ARGS: CommandLineSource(),
        ConfigLayer.SYSTEM_PROPERTIES: SystemPropertiesSource(),
        ConfigLayer.ENVIRONMENT_VARIABLES: EnvironmentSource(),
        ConfigLayer.LOCAL_CONFIG_JSON: LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json"),
        ConfigLayer.LOCAL_CONFIG_TOML: LocalFileSource(ConfigLayer.LOCAL_CONFIG_TOML, ".toml"),
        ConfigLayer.GLOBAL_CONFIG_JSON: GlobalFileSource(ConfigLayer.GLOBAL_CONFIG_JSON, ".json"),
        ConfigLayer.GLOBAL_CONFIG_TOML: GlobalFileSource(ConfigLayer.GLOBAL_CONFIG_TOML, ".toml"),
        ConfigLayer.PACKAGED_CONFIG_JSON: PackagedResourceSource(ConfigLayer.PACKAGED_CONFIG_JSON, "config.json"),
        ConfigLayer.PACKAGED_CONFIG_TOML: PackagedResourceSource(ConfigLayer.PACKAGED_CONFIG_TOML, "config.toml"),
        ConfigLayer.DEFAULTS_JSON: PackagedResourceSource(ConfigLayer.DEFAULTS_JSON, "defaults.json"),
        ConfigLayer.DEFAULTS_TOML: PackagedResourceSource(ConfigLayer.DEFAULTS_TOML, "defaults.toml"),
        ConfigLayer.HARDCODED_DEFAULTS: HardcodedDefaultsSource(),
    }


def extract(
    layer: ConfigLayer,
    context: ExtractionContext,
    sources: Optional[Mapping[ConfigLayer, Source]] = None,
) -> LayerResult:
    """Load one layer, converting any exception into a LayerFailure.

    Args:
        layer: Layer to load.
        context: Options and schema for the run.
        sources: Layer to source table; defaults to :func:`default_sources`.

    Returns:
        The layer's Found, Absent or LayerFailure result.
    """
    table = sources if sources is not None else default_sources()
    source = table[layer]
    try:
        return source.load(context)
    except Exception as e:
        logger.debug("Source %s raised while loading %s", source.name, layer, exc_info=True)
        return LayerFailure(LayerLoadError(layer, "Failed to load layer", e))
