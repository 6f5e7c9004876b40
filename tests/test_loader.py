"""End-to-end resolution tests."""

from __future__ import annotations

import json
from dataclasses import dataclass

from layerconf.core.errors import LayerLoadError, MissingRequiredFieldError, ValidationError
from layerconf.core.layers import ConfigLayer
from layerconf.core.loader import ConfigLoader, resolve
from layerconf.core.schema import SchemaBuilder
from layerconf.core.validation import PortRangeValidator


def _server_schema():
    return SchemaBuilder("server").string("host").integer("port").build()


class TestPrecedence:
    def test_command_line_scenario(self, make_options):
        schema = SchemaBuilder().integer("port").boolean("verbose", default=False).build()
        loader = ConfigLoader(schema, make_options(command_line_args=["--port", "8080", "--verbose"]))
        merged, loaded, errors = loader.merged_state()
        assert merged.get("port") == 8080 and isinstance(merged.get("port"), int)
        assert merged.get("verbose") is True
        assert ConfigLayer.COMMAND_LINE_ARGS in loaded
        assert errors == []

    def test_environment_beats_local_file(self, make_options):
        (make_options.local / "config.json").write_text(json.dumps({"host": "localhost", "port": 9090}))
        options = make_options(env_var_prefix="APP_", environ={"APP_PORT": "1234"})
        result = resolve(_server_schema(), options)
        assert result.is_success()
        assert result.value == {"host": "localhost", "port": 1234}
        assert result.metadata.sources["port"] is ConfigLayer.ENVIRONMENT_VARIABLES
        assert result.metadata.sources["host"] is ConfigLayer.LOCAL_CONFIG_JSON

    def test_json_beats_toml_and_global(self, make_options):
        (make_options.local / "config.json").write_text('{"a": "local-json"}')
        (make_options.local / "config.toml").write_text('a = "local-toml"\nb = "local-toml"\n')
        (make_options.global_dir / "config.json").write_text('{"b": "global", "c": "global"}')
        schema = SchemaBuilder().string("a").string("b").string("c").build()
        result = resolve(schema, make_options())
        assert result.value == {"a": "local-json", "b": "local-toml", "c": "global"}
        assert result.metadata.sources["c"] is ConfigLayer.GLOBAL_CONFIG_JSON
        assert result.metadata.loaded_layers == {
            ConfigLayer.LOCAL_CONFIG_JSON,
            ConfigLayer.LOCAL_CONFIG_TOML,
            ConfigLayer.GLOBAL_CONFIG_JSON,
            ConfigLayer.HARDCODED_DEFAULTS,
        }

    def test_environment_opt_in(self, make_options):
        schema = SchemaBuilder().integer("port", default=1).build()
        result = resolve(schema, make_options(environ={"APP_PORT": "99", "PORT": "98"}))
        assert result.value == {"port": 1}
        assert ConfigLayer.ENVIRONMENT_VARIABLES not in result.metadata.loaded_layers

    def test_dotted_environment_keys_fill_nested_fields(self, make_options):
        (make_options.local / "config.toml").write_text('[db]\nhost = "file"\nport = 5432\n')
        db = SchemaBuilder("db").string("host").integer("port").build()
        schema = SchemaBuilder().nested("db", db).build()
        options = make_options(env_var_prefix="APP_", environ={"APP_DB_HOST": "env-host"})
        result = resolve(schema, options)
        assert result.value == {"db": {"host": "env-host", "port": 5432}}


class TestMissingFiles:
    def test_missing_files_ignored_by_default(self, make_options):
        schema = SchemaBuilder().integer("port", default=1).build()
        result = resolve(schema, make_options())
        assert result.is_success()
        assert result.errors == ()

    def test_missing_files_reported_when_requested(self, make_options):
        schema = SchemaBuilder().integer("port", default=1).build()
        result = resolve(schema, make_options(fail_on_missing_file=True))
        assert result.is_success()
        layers = {e.layer for e in result.errors}
        assert layers == {
            ConfigLayer.LOCAL_CONFIG_JSON,
            ConfigLayer.LOCAL_CONFIG_TOML,
            ConfigLayer.GLOBAL_CONFIG_JSON,
            ConfigLayer.GLOBAL_CONFIG_TOML,
        }
        assert all(isinstance(e.cause, FileNotFoundError) for e in result.errors)

    def test_missing_files_fail_with_fail_fast(self, make_options):
        schema = SchemaBuilder().integer("port", default=1).build()
        result = resolve(schema, make_options(fail_on_missing_file=True, fail_fast=True))
        assert result.is_failure()


class TestDefaultsAndFailures:
    def test_all_defaults_no_external_layers(self, make_options):
        schema = SchemaBuilder().string("host", default="localhost").integer("port", default=80).build()
        result = resolve(schema, make_options())
        assert result.is_success()
        assert result.value == {"host": "localhost", "port": 80}
        assert result.metadata.loaded_layers == {ConfigLayer.HARDCODED_DEFAULTS}
        assert result.metadata.sources == {
            "host": ConfigLayer.HARDCODED_DEFAULTS,
            "port": ConfigLayer.HARDCODED_DEFAULTS,
        }

    def test_missing_required_field_fails(self, make_options):
        schema = SchemaBuilder().string("apiKey").integer("port", default=80).build()
        result = resolve(schema, make_options())
        assert result.is_failure()
        missing = [e for e in result.errors if isinstance(e, MissingRequiredFieldError)]
        assert len(missing) == 1
        assert missing[0].path == "apiKey"

    def test_construction_failure_ignores_fail_fast_setting(self, make_options):
        schema = SchemaBuilder().string("apiKey").build()
        assert resolve(schema, make_options(fail_fast=False)).is_failure()
        assert resolve(schema, make_options(fail_fast=True)).is_failure()

    def test_malformed_toml_is_best_effort(self, make_options):
        (make_options.local / "config.toml").write_text("broken = = toml")
        (make_options.local / "config.json").write_text('{"host": "h", "port": 1}')
        result = resolve(_server_schema(), make_options())
        assert result.is_success()
        assert result.value == {"host": "h", "port": 1}
        assert len(result.errors) == 1
        error = result.errors[0]
        assert isinstance(error, LayerLoadError)
        assert error.layer is ConfigLayer.LOCAL_CONFIG_TOML

    def test_malformed_toml_fails_fast(self, make_options):
        (make_options.local / "config.toml").write_text("broken = = toml")
        (make_options.local / "config.json").write_text('{"host": "h", "port": 1}')
        result = resolve(_server_schema(), make_options(fail_fast=True))
        assert result.is_failure()
        assert len(result.errors) == 1

    def test_validation_errors_obey_fail_fast(self, make_options):
        schema = SchemaBuilder().integer("port", validators=[PortRangeValidator()]).build()
        best_effort = resolve(schema, make_options(command_line_args=["--port", "0"]))
        assert best_effort.is_success()
        assert isinstance(best_effort.errors[0], ValidationError)
        assert best_effort.errors[0].layer is ConfigLayer.COMMAND_LINE_ARGS
        strict = resolve(schema, make_options(command_line_args=["--port", "0"], fail_fast=True))
        assert strict.is_failure()


class TestDeterminism:
    def test_idempotent(self, make_options):
        (make_options.local / "config.json").write_text('{"host": "localhost", "port": 9090}')
        options = make_options(env_var_prefix="APP_", environ={"APP_PORT": "1234"})
        first, _, _ = ConfigLoader(_server_schema(), options).merged_state()
        second, _, _ = ConfigLoader(_server_schema(), options).merged_state()
        assert dict(first.values) == dict(second.values)
        assert dict(first.provenance) == dict(second.provenance)

    def test_custom_source_replaces_layer(self, make_options):
        from layerconf.core.types import Found

        class Fixed:
            layer = ConfigLayer.GLOBAL_CONFIG_JSON
            name = "fixed"

            def load(self, context):
                return Found({"host": "remote", "port": 5})

        loader = ConfigLoader(_server_schema(), make_options(), {ConfigLayer.GLOBAL_CONFIG_JSON: Fixed()})
        result = loader.load()
        assert result.value == {"host": "remote", "port": 5}

    def test_dataclass_factory(self, make_options):
        @dataclass(frozen=True)
        class Server:
            host: str
            port: int

        schema = SchemaBuilder().string("host").integer("port").build(lambda v: Server(**v))
        result = resolve(schema, make_options(command_line_args=["--host", "h", "--port", "1"]))
        assert result.value == Server("h", 1)
