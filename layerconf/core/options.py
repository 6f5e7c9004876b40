"""Tunables recognized by the configuration loader."""

from __future__ import annotations

import dataclasses
import os
import sys
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Sequence

DEFAULT_APP_NAME = "app"


class MalformedValuePolicy(Enum):
    """What to do when a key is present but cannot be coerced.

    ``FALLBACK`` treats the value as missing so optional fields take their
    default. ``ERROR`` reports a ConstructionError for the field.
    Required fields always report an error.
    """

    FALLBACK = "fallback"
    ERROR = "error"


@dataclass(frozen=True)
class LoaderOptions:
    """Options controlling where and how configuration is resolved.

    Attributes:
        app_name: Name used for the global directory ``~/.config/<app_name>``.
        local_config_directory: Overrides the current working directory.
        global_config_directory: Overrides ``~/.config/<app_name>``.
        env_var_prefix: Enables the environment layer, e.g. ``"APP_"``.
        system_property_prefix: Enables the system property layer.
        command_line_args: Enables the command-line layer.
        ignore_unknown_keys: Accept file keys that match no schema field.
        lenient_parsing: Allow control characters inside JSON strings.
        fail_on_missing_file: Report missing config files as errors.
        fail_fast: Turn any accumulated error into a failure.
        resource_package: Package holding packaged ``config.*``/``defaults.*``.
        environ: Environment to read instead of ``os.environ``.
        system_properties: Properties to read instead of ``sys._xoptions``.
        home: Home directory to use instead of ``Path.home()``.
        malformed_value_policy: Handling of present but uncoercible values.
    """

    app_name: Optional[str] = None
    local_config_directory: Optional[Path] = None
    global_config_directory: Optional[Path] = None
    env_var_prefix: Optional[str] = None
    system_property_prefix: Optional[str] = None
    command_line_args: Optional[Sequence[str]] = None
    ignore_unknown_keys: bool = True
    lenient_parsing: bool = True
    fail_on_missing_file: bool = False
    fail_fast: bool = False
    resource_package: Optional[str] = None
    environ: Optional[Mapping[str, str]] = None
    system_properties: Optional[Mapping[str, Any]] = None
    home: Optional[Path] = None
    malformed_value_policy: MalformedValuePolicy = MalformedValuePolicy.FALLBACK

    def __post_init__(self) -> None:
        for name in ("local_config_directory", "global_config_directory", "home"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, Path):
                object.__setattr__(self, name, Path(value))
        if self.command_line_args is not None:
            object.__setattr__(self, "command_line_args", tuple(self.command_line_args))
        if isinstance(self.malformed_value_policy, str):
            object.__setattr__(
                self, "malformed_value_policy", MalformedValuePolicy(self.malformed_value_policy)
            )

    def local_directory(self) -> Path:
        return self.local_config_directory or Path.cwd()

    def global_directory(self) -> Path:
        if self.global_config_directory is not None:
            return self.global_config_directory
        home = self.home or Path.home()
        return home / ".config" / (self.app_name or DEFAULT_APP_NAME)

    def environment(self) -> Mapping[str, str]:
        return os.environ if self.environ is None else self.environ

    def properties(self) -> Mapping[str, Any]:
        if self.system_properties is None:
            return sys._xoptions
        return self.system_properties

    def replace(self, **changes: Any) -> "LoaderOptions":
        return dataclasses.replace(self, **changes)

    @staticmethod
    def from_dict(d: Optional[Dict[str, Any]]) -> "LoaderOptions":
        """Create options from a plain mapping, e.g. a parsed YAML section.

        Args:
            d: Mapping of option names to values; unknown names are rejected.

        Returns:
            LoaderOptions instance.

        Raises:
            ValueError: If ``d`` holds an unknown option.
        """
        if not d:
            return LoaderOptions()
        known = {f.name for f in dataclasses.fields(LoaderOptions)}
        unknown = sorted(set(d) - known)
        if unknown:
            raise ValueError(f"Unknown loader option(s): {', '.join(unknown)}")
        return LoaderOptions(**d)
