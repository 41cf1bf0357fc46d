# tests/plugins/test_config_base.py
"""Tests for plugin configuration models and file loading."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from signalk_plugin.plugins.config_base import (
    PluginConfig,
    PluginConfigError,
    PluginConfigFile,
    load_plugin_config,
)


class TestPluginConfig:
    """Tests for PluginConfig base class."""

    def test_rejects_extra_fields(self) -> None:
        class MyConfig(PluginConfig):
            min_depth: float

        with pytest.raises(ValidationError) as exc_info:
            MyConfig(min_depth=1.0, max_depth=9.0)  # type: ignore[call-arg]

        assert "Extra inputs are not permitted" in str(exc_info.value)

    def test_from_dict_wraps_validation_error(self) -> None:
        """from_dict should wrap ValidationError in PluginConfigError."""

        class MyConfig(PluginConfig):
            min_depth: float

        with pytest.raises(PluginConfigError) as exc_info:
            MyConfig.from_dict({})

        assert "Invalid configuration for MyConfig" in str(exc_info.value)
        assert isinstance(exc_info.value.__cause__, ValidationError)

    def test_from_dict_success(self) -> None:
        class MyConfig(PluginConfig):
            min_depth: float
            path: str = "notifications.depth"

        cfg = MyConfig.from_dict({"min_depth": 2})

        assert cfg.min_depth == 2.0
        assert cfg.path == "notifications.depth"


class TestPluginConfigFile:
    """The server's settings wrapper."""

    def test_camel_case_aliases(self) -> None:
        cfg = PluginConfigFile.from_dict(
            {"enabled": True, "enableLogging": True, "configuration": {"a": 1}}
        )

        assert cfg.enabled is True
        assert cfg.enable_logging is True
        assert cfg.enable_debug is False
        assert cfg.configuration == {"a": 1}

    def test_field_names_also_accepted(self) -> None:
        cfg = PluginConfigFile.from_dict({"enable_debug": True})

        assert cfg.enable_debug is True
        assert cfg.configuration == {}


class TestLoadPluginConfig:
    def test_plain_json_options(self, tmp_path: Path) -> None:
        path = tmp_path / "options.json"
        path.write_text(json.dumps({"min_depth": 3}))

        assert load_plugin_config(path) == {"min_depth": 3}

    def test_server_wrapper_unwrapped(self, tmp_path: Path) -> None:
        path = tmp_path / "signalk-depth-alarm.json"
        path.write_text(
            json.dumps(
                {
                    "enabled": True,
                    "enableLogging": False,
                    "configuration": {"min_depth": 3},
                }
            )
        )

        assert load_plugin_config(path) == {"min_depth": 3}

    def test_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yaml"
        path.write_text("min_depth: 3\nnotify:\n  path: notifications.depth\n")

        assert load_plugin_config(path) == {
            "min_depth": 3,
            "notify": {"path": "notifications.depth"},
        }

    def test_empty_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "options.yml"
        path.write_text("")

        assert load_plugin_config(path) == {}

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError, match="Config file not found"):
            load_plugin_config(tmp_path / "missing.json")

    def test_unparseable(self, tmp_path: Path) -> None:
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(PluginConfigError, match="Cannot parse"):
            load_plugin_config(path)

    def test_not_a_mapping(self, tmp_path: Path) -> None:
        path = tmp_path / "list.json"
        path.write_text("[1, 2]")

        with pytest.raises(PluginConfigError, match="Expected a mapping"):
            load_plugin_config(path)

    def test_bad_wrapper_rejected(self, tmp_path: Path) -> None:
        path = tmp_path / "wrapper.json"
        path.write_text(json.dumps({"configuration": {}, "enabeld": True}))

        with pytest.raises(PluginConfigError, match="Invalid configuration"):
            load_plugin_config(path)
