"""Catalog of configuration layers and their precedence."""

from __future__ import annotations

from enum import Enum
from typing import List


class ConfigLayer(Enum):
    """A configuration source with a fixed priority.

    Lower priority numbers take precedence: a key defined by
    ``COMMAND_LINE_ARGS`` is never overridden by any file layer.
    """

    COMMAND_LINE_ARGS = (0, "command-line arguments")
    SYSTEM_PROPERTIES = (1, "system properties")
    ENVIRONMENT_VARIABLES = (2, "environment variables")
    LOCAL_CONFIG_JSON = (3, "local config.json")
    LOCAL_CONFIG_TOML = (4, "local config.toml")
    GLOBAL_CONFIG_JSON = (5, "global config.json")
    GLOBAL_CONFIG_TOML = (6, "global config.toml")
    PACKAGED_CONFIG_JSON = (7, "packaged config.json")
    PACKAGED_CONFIG_TOML = (8, "packaged config.toml")
    DEFAULTS_JSON = (9, "packaged defaults.json")
    DEFAULTS_TOML = (10, "packaged defaults.toml")
    HARDCODED_DEFAULTS = (11, "hardcoded defaults")

    def __init__(self, priority: int, label: str):
        self.priority = priority
        self.label = label

    def precedes(self, other: "ConfigLayer") -> bool:
        """Return True if this layer wins over ``other`` for the same key."""
        return self.priority < other.priority

    def __str__(self) -> str:
        return self.name


def all_layers() -> List[ConfigLayer]:
    """Return every layer, highest precedence first."""
    return sorted(ConfigLayer, key=lambda layer: layer.priority)
