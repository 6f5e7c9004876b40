"""Layer source implementations.

One source per kind of origin: command-line arguments, system properties,
environment variables, JSON/TOML files on disk, packaged resources and the
schema's own defaults.
"""

from .command_line import CommandLineSource
from .defaults import HardcodedDefaultsSource
from .environ import EnvironmentSource
from .files import GlobalFileSource, LocalFileSource
from .packaged import PackagedResourceSource
from .properties import SystemPropertiesSource

__all__ = [
    "CommandLineSource",
    "EnvironmentSource",
    "GlobalFileSource",
    "HardcodedDefaultsSource",
    "LocalFileSource",
    "PackagedResourceSource",
    "SystemPropertiesSource",
]
