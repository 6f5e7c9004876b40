"""Environment variable source."""

from __future__ import annotations

from typing import Mapping

from ..core.inference import infer_scalar
from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import ABSENT, Found, LayerMapping, LayerResult


def env_key_to_config_key(name: str, prefix: str) -> str:
    """Map ``<PREFIX>DB_HOST`` to ``db.host``."""
    return name[len(prefix):].lower().replace("_", ".")


def scan_environment(environ: Mapping[str, str], prefix: str) -> LayerMapping:
    return {
        env_key_to_config_key(name, prefix): infer_scalar(value)
        for name, value in environ.items()
        if name.startswith(prefix)
    }


class EnvironmentSource(Source):
    """Environment variables carrying a configured prefix.

    The layer is disabled unless ``env_var_prefix`` is set.
    """

    def __init__(self) -> None:
        self.layer = ConfigLayer.ENVIRONMENT_VARIABLES
        self.name = "env"

    def load(self, context: ExtractionContext) -> LayerResult:
        prefix = context.options.env_var_prefix
        if not prefix:
            return ABSENT
        values = scan_environment(context.options.environment(), prefix)
        return Found(values) if values else ABSENT
