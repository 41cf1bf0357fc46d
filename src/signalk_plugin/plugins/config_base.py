# src/signalk_plugin/plugins/config_base.py
"""Typed models for persisted plugin configuration files.

The SignalK server stores each plugin's settings as a JSON document:

    {
        "enabled": true,
        "enableLogging": false,
        "enableDebug": false,
        "configuration": {"min_depth": 2.5}
    }

The "configuration" member is the options record handed to start(). This
module loads such files (JSON or YAML) so options can be checked against a
plugin's schema outside the server.
"""

import json
from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, Field, ValidationError


class PluginConfigError(Exception):
    """Raised when plugin configuration is invalid."""

    pass


class PluginConfig(BaseModel):
    """Base class for typed plugin configuration models.

    Rejects unknown fields so misspelt keys fail loudly.
    """

    model_config = {"extra": "forbid", "populate_by_name": True}

    @classmethod
    def from_dict(cls, config: dict[str, Any]) -> Self:
        """Create config from dict with clear error on validation failure.

        Raises:
            PluginConfigError: If configuration is invalid.
        """
        try:
            return cls(**config)
        except ValidationError as e:
            raise PluginConfigError(
                f"Invalid configuration for {cls.__name__}: {e}"
            ) from e


class PluginConfigFile(PluginConfig):
    """The server's per-plugin settings wrapper."""

    enabled: bool = False
    enable_logging: bool = Field(default=False, alias="enableLogging")
    enable_debug: bool = Field(default=False, alias="enableDebug")
    configuration: dict[str, Any] = Field(default_factory=dict)


def load_plugin_config(path: Path) -> dict[str, Any]:
    """Load an options record from a JSON or YAML file.

    A server settings wrapper (a document with a "configuration" member) is
    unwrapped; any other mapping is taken as the options record itself.

    Args:
        path: .json, .yaml or .yml file

    Returns:
        Options record

    Raises:
        FileNotFoundError: If the file doesn't exist
        PluginConfigError: If the file can't be parsed or isn't a mapping
    """
    if not path.exists():
        raise FileNotFoundError(f"Config file not found: {path}")

    text = path.read_text(encoding="utf-8")
    try:
        if path.suffix.lower() in (".yaml", ".yml"):
            data = yaml.safe_load(text)
        else:
            data = json.loads(text)
    except (json.JSONDecodeError, yaml.YAMLError) as e:
        raise PluginConfigError(f"Cannot parse {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise PluginConfigError(
            f"Expected a mapping in {path}, got {type(data).__name__}"
        )
    if "configuration" in data:
        return PluginConfigFile.from_dict(data).configuration
    return data
