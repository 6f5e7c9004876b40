"""Command-line argument source."""

from __future__ import annotations

from typing import Sequence

from ..core.inference import infer_scalar
from ..core.layers import ConfigLayer
from ..core.source import ExtractionContext, Source
from ..core.types import ABSENT, Found, LayerMapping, LayerResult

FLAG_PREFIX = "--"


def parse_args(args: Sequence[str]) -> LayerMapping:
    """Parse ``--key value`` pairs and bare ``--flag`` switches.

    A flag followed by another flag, or by nothing, is set to True.
    Tokens without the ``--`` prefix outside a value position are ignored.
    """
    values: LayerMapping = {}
    i = 0
    while i < len(args):
        arg = args[i]
        if not arg.startswith(FLAG_PREFIX):
            i += 1
            continue
        key = arg[len(FLAG_PREFIX):]
        if i + 1 < len(args) and not args[i + 1].startswith(FLAG_PREFIX):
            values[key] = infer_scalar(args[i + 1])
            i += 2
        else:
            values[key] = True
            i += 1
    return values


class CommandLineSource(Source):
    """Values passed as process arguments. Opt-in via ``command_line_args``."""

    def __init__(self) -> None:
        self.layer = ConfigLayer.COMMAND_LINE_ARGS
        self.name = "cli"

    def load(self, context: ExtractionContext) -> LayerResult:
        args = context.options.command_line_args
        if not args:
            return ABSENT
        values = parse_args(args)
        return Found(values) if values else ABSENT
