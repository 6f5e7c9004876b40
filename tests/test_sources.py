"""Tests for the per-layer sources."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from layerconf.core.errors import LayerLoadError
from layerconf.core.extract import extract
from layerconf.core.layers import ConfigLayer
from layerconf.core.schema import SchemaBuilder
from layerconf.core.source import ExtractionContext
from layerconf.core.types import ABSENT, Absent, Found, LayerFailure
from layerconf.sources import (
    CommandLineSource,
    EnvironmentSource,
    GlobalFileSource,
    HardcodedDefaultsSource,
    LocalFileSource,
    PackagedResourceSource,
    SystemPropertiesSource,
)
from layerconf.sources.command_line import parse_args
from layerconf.sources.environ import env_key_to_config_key
from layerconf.sources.files import FileSource


def _ctx(options, schema=None) -> ExtractionContext:
    return ExtractionContext(options=options, schema=schema)


class TestCommandLineSource:
    def test_key_values_and_flags(self, make_options):
        options = make_options(command_line_args=["--port", "8080", "--verbose"])
        result = CommandLineSource().load(_ctx(options))
        assert result == Found({"port": 8080, "verbose": True})
        assert isinstance(result.values["port"], int)

    def test_flag_followed_by_flag(self):
        assert parse_args(["--a", "--b", "x"]) == {"a": True, "b": "x"}

    def test_unprefixed_tokens_ignored(self):
        assert parse_args(["stray", "--name", "svc", "other"]) == {"name": "svc"}

    def test_empty_args_absent(self, make_options):
        assert CommandLineSource().load(_ctx(make_options(command_line_args=[]))) == ABSENT
        assert CommandLineSource().load(_ctx(make_options())) == ABSENT

    def test_no_keys_absent(self, make_options):
        result = CommandLineSource().load(_ctx(make_options(command_line_args=["a", "b"])))
        assert isinstance(result, Absent)


class TestEnvironmentSource:
    def test_prefix_required(self, make_options):
        options = make_options(environ={"APP_PORT": "1"})
        assert EnvironmentSource().load(_ctx(options)) == ABSENT

    def test_keys_mapped_and_inferred(self, make_options):
        options = make_options(
            env_var_prefix="APP_",
            environ={"APP_DB_HOST": "db.local", "APP_PORT": "1234", "OTHER": "x"},
        )
        result = EnvironmentSource().load(_ctx(options))
        assert result == Found({"db.host": "db.local", "port": 1234})

    def test_no_matches_absent(self, make_options):
        options = make_options(env_var_prefix="APP_", environ={"HOME": "/root"})
        assert EnvironmentSource().load(_ctx(options)) == ABSENT

    def test_reads_process_environment_by_default(self, make_options, monkeypatch):
        monkeypatch.setenv("LCTEST_FEATURE_ON", "true")
        options = make_options(env_var_prefix="LCTEST_", environ=None)
        result = EnvironmentSource().load(_ctx(options))
        assert result.values["feature.on"] is True

    def test_key_mapping(self):
        assert env_key_to_config_key("APP_DB_HOST", "APP_") == "db.host"


class TestSystemPropertiesSource:
    def test_prefix_required(self, make_options):
        options = make_options(system_properties={"app.port": "1"})
        assert SystemPropertiesSource().load(_ctx(options)) == ABSENT

    def test_prefix_stripped_without_case_change(self, make_options):
        options = make_options(
            system_property_prefix="app.",
            system_properties={"app.Db.Host": "h", "app.port": "99", "other": "x", "app.debug": True},
        )
        result = SystemPropertiesSource().load(_ctx(options))
        assert result == Found({"Db.Host": "h", "port": 99, "debug": True})


class TestFileSources:
    def test_local_json(self, make_options):
        (make_options.local / "config.json").write_text(json.dumps({"host": "localhost", "port": 9090}))
        result = LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json").load(_ctx(make_options()))
        assert result == Found({"host": "localhost", "port": 9090})

    def test_local_toml_nested(self, make_options):
        (make_options.local / "config.toml").write_text('name = "svc"\n[db]\nhost = "h"\nport = 5432\n')
        result = LocalFileSource(ConfigLayer.LOCAL_CONFIG_TOML, ".toml").load(_ctx(make_options()))
        assert result == Found({"name": "svc", "db": {"host": "h", "port": 5432}})

    def test_global_directory_default(self, tmp_path, make_options):
        home = tmp_path / "home"
        target = home / ".config" / "myapp"
        target.mkdir(parents=True)
        (target / "config.json").write_text('{"a": 1}')
        options = make_options(global_config_directory=None, home=home, app_name="myapp")
        result = GlobalFileSource(ConfigLayer.GLOBAL_CONFIG_JSON, ".json").load(_ctx(options))
        assert result == Found({"a": 1})

    def test_global_directory_defaults_to_app(self, tmp_path):
        from layerconf.core.options import LoaderOptions

        options = LoaderOptions(home=tmp_path)
        assert options.global_directory() == tmp_path / ".config" / "app"

    def test_file_source_requires_directory(self, tmp_path, make_options):
        with pytest.raises(TypeError):
            FileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json")

        class FixedDirectorySource(FileSource):
            def directory(self, context):
                return tmp_path

        (tmp_path / "config.json").write_text('{"a": 1}')
        source = FixedDirectorySource(ConfigLayer.LOCAL_CONFIG_JSON, ".json")
        assert source.load(_ctx(make_options())) == Found({"a": 1})

    def test_missing_file_reports_not_found_cause(self, make_options):
        result = LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json").load(_ctx(make_options()))
        assert isinstance(result, LayerFailure)
        assert isinstance(result.error.cause, FileNotFoundError)
        assert result.error.layer is ConfigLayer.LOCAL_CONFIG_JSON

    def test_malformed_file_is_error(self, make_options):
        (make_options.local / "config.toml").write_text("this is = = not toml")
        result = LocalFileSource(ConfigLayer.LOCAL_CONFIG_TOML, ".toml").load(_ctx(make_options()))
        assert isinstance(result, LayerFailure)
        assert isinstance(result.error, LayerLoadError)
        assert result.error.layer is ConfigLayer.LOCAL_CONFIG_TOML
        assert result.error.path.endswith("config.toml")
        assert not isinstance(result.error.cause, FileNotFoundError)

    def test_non_object_json_is_error(self, make_options):
        (make_options.local / "config.json").write_text("[1, 2]")
        result = LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json").load(_ctx(make_options()))
        assert isinstance(result, LayerFailure)

    def test_lenient_json_allows_control_characters(self, make_options):
        (make_options.local / "config.json").write_text('{"motd": "line1\nline2"}')
        source = LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json")
        assert source.load(_ctx(make_options())) == Found({"motd": "line1\nline2"})
        strict = source.load(_ctx(make_options(lenient_parsing=False)))
        assert isinstance(strict, LayerFailure)

    def test_unknown_keys_rejected_when_not_ignored(self, make_options):
        (make_options.local / "config.json").write_text('{"host": "h", "db": {"x": 1}, "typo": 1}')
        schema = SchemaBuilder().string("host").mapping("db").build()
        source = LocalFileSource(ConfigLayer.LOCAL_CONFIG_JSON, ".json")
        assert isinstance(source.load(_ctx(make_options(), schema)), Found)
        strict = source.load(_ctx(make_options(ignore_unknown_keys=False), schema))
        assert isinstance(strict, LayerFailure)
        assert "typo" in strict.error.message
        assert "host" not in strict.error.message


class TestPackagedResourceSource:
    def test_absent_without_package(self, make_options):
        source = PackagedResourceSource(ConfigLayer.PACKAGED_CONFIG_JSON, "config.json")
        assert source.load(_ctx(make_options())) == ABSENT

    def test_reads_package_resource(self, tmp_path, make_options, monkeypatch):
        pkg = tmp_path / "pkgroot" / "lc_testpkg"
        pkg.mkdir(parents=True)
        (pkg / "__init__.py").write_text("")
        (pkg / "defaults.toml").write_text("retries = 3\n")
        monkeypatch.syspath_prepend(str(tmp_path / "pkgroot"))
        options = make_options(resource_package="lc_testpkg")
        found = PackagedResourceSource(ConfigLayer.DEFAULTS_TOML, "defaults.toml").load(_ctx(options))
        assert found == Found({"retries": 3})
        missing = PackagedResourceSource(ConfigLayer.PACKAGED_CONFIG_JSON, "config.json").load(_ctx(options))
        assert isinstance(missing, LayerFailure)
        assert isinstance(missing.error.cause, FileNotFoundError)


class TestHardcodedDefaultsSource:
    def test_optional_fields_contribute_none(self, make_options):
        schema = SchemaBuilder().string("host").integer("port", default=80).boolean("debug", default=False).build()
        result = HardcodedDefaultsSource().load(_ctx(make_options(), schema))
        assert result == Found({"port": None, "debug": None})


class TestExtract:
    def test_exceptions_become_layer_failures(self, make_options):
        class Exploding:
            layer = ConfigLayer.LOCAL_CONFIG_JSON
            name = "boom"

            def load(self, context):
                raise RuntimeError("boom")

        result = extract(
            ConfigLayer.LOCAL_CONFIG_JSON,
            _ctx(make_options()),
            {ConfigLayer.LOCAL_CONFIG_JSON: Exploding()},
        )
        assert isinstance(result, LayerFailure)
        assert result.error.message == "Failed to load layer"
        assert isinstance(result.error.cause, RuntimeError)
