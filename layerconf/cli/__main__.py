from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Optional

import typer
import yaml

from ..core.layers import all_layers
from ..core.loader import ConfigLoader
from ..core.masked import MaskedValue
from ..core.schema import Field, Schema
from ..core.schema_file import SchemaFile

app = typer.Typer(help="layerconf CLI")

_EXTRA_ARGS = {"allow_extra_args": True, "ignore_unknown_options": True}


def _plain(value: Any) -> Any:
    if isinstance(value, MaskedValue):
        return str(value)
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    return value


def _field_at(schema: Schema, key: str) -> Optional[Field]:
    """Find the field named by dotted ``key``, descending into nested schemas."""
    found = None
    current: Optional[Schema] = schema
    for part in key.split("."):
        if current is None:
            return None
        found = current.get(part)
        if found is None:
            return None
        current = found.schema
    return found


def _masked(value: Any, target: Optional[Field]) -> Any:
    if value is None or target is None:
        return value
    if target.sensitive:
        return str(MaskedValue(value))
    if target.schema is not None and isinstance(value, dict):
        return {k: _masked(v, target.schema.get(k)) for k, v in value.items()}
    return value


def _dump(data: Any, fmt: str) -> str:
    if fmt == "yaml":
        return yaml.safe_dump(data, sort_keys=False).rstrip()
    return json.dumps(data, indent=2, default=str)


def _loader(
    schema: Optional[Path],
    args: list,
    env_prefix: Optional[str],
    prop_prefix: Optional[str],
    app_name: Optional[str],
    local_dir: Optional[Path],
    global_dir: Optional[Path],
    fail_fast: Optional[bool],
    fail_on_missing_file: Optional[bool],
) -> ConfigLoader:
    schema_file = SchemaFile(schema)
    if schema_file.path is None:
        raise typer.BadParameter("schema file not found", param_hint="--schema")
    target, options = schema_file.read(
        env_var_prefix=env_prefix,
        system_property_prefix=prop_prefix,
        app_name=app_name,
        local_config_directory=local_dir,
        global_config_directory=global_dir,
        fail_fast=fail_fast,
        fail_on_missing_file=fail_on_missing_file,
        command_line_args=args or None,
    )
    return ConfigLoader(target, options)


@app.callback()
def main(verbose: bool = typer.Option(False, "--verbose", "-v")):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )


@app.command()
def layers():
    """List configuration layers, highest precedence first."""
    typer.echo(json.dumps([
        {"priority": layer.priority, "layer": layer.name, "description": layer.label}
        for layer in all_layers()
    ], indent=2))


@app.command(context_settings=_EXTRA_ARGS)
def resolve(
    ctx: typer.Context,
    schema: Optional[Path] = typer.Option(None, "--schema", help="Schema file, defaults to layerconf.yaml"),
    env_prefix: Optional[str] = typer.Option(None, "--env-prefix"),
    prop_prefix: Optional[str] = typer.Option(None, "--prop-prefix"),
    app_name: Optional[str] = typer.Option(None, "--app-name"),
    local_dir: Optional[Path] = typer.Option(None, "--local-dir"),
    global_dir: Optional[Path] = typer.Option(None, "--global-dir"),
    fail_fast: Optional[bool] = typer.Option(None, "--fail-fast/--best-effort"),
    fail_on_missing_file: bool = typer.Option(False, "--fail-on-missing-file"),
    fmt: str = typer.Option("json", "--format", help="json or yaml"),
    show_sources: bool = typer.Option(False, "--sources", help="Include the layer of every key"),
):
    """Resolve the schema and print the configuration.

    Arguments after ``--`` are passed to the command-line layer.
    """
    loader = _loader(
        schema, ctx.args, env_prefix, prop_prefix, app_name,
        local_dir, global_dir, fail_fast, fail_on_missing_file or None,
    )
    result = loader.load()
    for error in result.errors:
        typer.echo(str(error), err=True)
    if result.is_failure():
        raise typer.Exit(code=1)
    output: Any = _plain(result.value)
    if show_sources:
        output = {
            "values": output,
            "sources": {k: v.name for k, v in result.metadata.sources.items()},
        }
    typer.echo(_dump(output, fmt))


@app.command(context_settings=_EXTRA_ARGS)
def explain(
    ctx: typer.Context,
    key: str,
    schema: Optional[Path] = typer.Option(None, "--schema"),
    env_prefix: Optional[str] = typer.Option(None, "--env-prefix"),
    prop_prefix: Optional[str] = typer.Option(None, "--prop-prefix"),
    local_dir: Optional[Path] = typer.Option(None, "--local-dir"),
    global_dir: Optional[Path] = typer.Option(None, "--global-dir"),
):
    """Show which layer supplied KEY and the raw value it supplied."""
    loader = _loader(
        schema, ctx.args, env_prefix, prop_prefix, None,
        local_dir, global_dir, None, None,
    )
    merged, _, _ = loader.merged_state()
    layer = merged.source_of(key)
    value = _masked(merged.get(key), _field_at(loader.schema, key))
    typer.echo(json.dumps({
        "key": key,
        "value": value,
        "layer": layer.name if layer else None,
    }, indent=2))


if __name__ == "__main__":
    app()
