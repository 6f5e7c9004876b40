"""Merging logic for layer mappings."""

from __future__ import annotations

import logging
from typing import Dict, Iterable, Tuple

from .layers import ConfigLayer
from .types import LayerMapping, LooseValue, MergedState

logger = logging.getLogger(__name__)


def merge_layers(
    layer_values: Iterable[Tuple[ConfigLayer, LayerMapping]],
) -> MergedState:
    """Merge per-layer mappings into a single configuration.

    Layers are walked highest precedence first; the first layer that
    defines a key wins it and later layers never override.

    Args:
        layer_values: ``(layer, mapping)`` pairs for every loaded layer,
            in any order.

    Returns:
        MergedState with the winning values and their provenance.
    """
    effective: Dict[str, LooseValue] = {}
    provenance: Dict[str, ConfigLayer] = {}

    for layer, values in sorted(layer_values, key=lambda item: item[0].priority):
        for key, value in values.items():
            if key in effective:
                logger.debug(
                    "Key %r from %s shadowed by %s", key, layer, provenance[key]
                )
                continue
            effective[key] = value
            provenance[key] = layer

    return MergedState(values=effective, provenance=provenance)
