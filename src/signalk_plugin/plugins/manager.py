# src/signalk_plugin/plugins/manager.py
"""Plugin manager for discovery, registration and instantiation.

Uses pluggy for hook-based plugin registration.
"""

import logging
from dataclasses import dataclass
from typing import Any

import pluggy

from signalk_plugin.contracts import ServerApp
from signalk_plugin.plugins.base import SignalKPlugin
from signalk_plugin.plugins.hookspecs import PROJECT_NAME, SignalKPluginSpec

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PluginSpec:
    """Registration record for a plugin class."""

    plugin_id: str
    name: str
    description: str
    version: str

    @classmethod
    def from_plugin(cls, plugin_cls: type[SignalKPlugin]) -> "PluginSpec":
        """Create spec from a plugin class.

        Raises:
            ValueError: If the class is missing 'plugin_id' or 'name'
        """
        for attr in ("plugin_id", "name"):
            if not getattr(plugin_cls, attr, None):
                raise ValueError(
                    f"Plugin {plugin_cls.__name__} must define '{attr}' attribute. "
                    f"Add: {attr} = '...' to the class."
                )

        return cls(
            plugin_id=plugin_cls.plugin_id,
            name=plugin_cls.name,
            description=plugin_cls.description,
            version=plugin_cls.plugin_version,
        )


class PluginManager:
    """Manages plugin discovery, registration, and lookup.

    Usage:
        manager = PluginManager()
        manager.load_entrypoints()

        plugin = manager.create("signalk-depth-alarm", app)
    """

    def __init__(self) -> None:
        self._pm = pluggy.PluginManager(PROJECT_NAME)
        self._pm.add_hookspecs(SignalKPluginSpec)

        # plugin_id -> plugin class, rebuilt on every registration
        self._plugins: dict[str, type[SignalKPlugin]] = {}

    def register(self, plugin: Any) -> None:
        """Register a hook implementer.

        Args:
            plugin: Object implementing signalk_get_plugins()

        Raises:
            ValueError: If it provides a plugin id that is already registered
        """
        self._pm.register(plugin)
        self._refresh_caches()

    def load_entrypoints(self) -> int:
        """Register hook implementers published under the entry point group.

        Returns:
            Number of entry points loaded
        """
        count = self._pm.load_setuptools_entrypoints(PROJECT_NAME)
        logger.debug("Loaded %d plugin entry point(s)", count)
        self._refresh_caches()
        return count

    def _refresh_caches(self) -> None:
        """Rebuild the id -> class map from hooks.

        Raises:
            ValueError: If two different classes claim the same plugin id
        """
        plugins: dict[str, type[SignalKPlugin]] = {}

        for provided in self._pm.hook.signalk_get_plugins():
            for cls in provided:
                if not (isinstance(cls, type) and issubclass(cls, SignalKPlugin)):
                    raise ValueError(
                        f"signalk_get_plugins() returned {cls!r}, "
                        f"which is not a SignalKPlugin subclass"
                    )
                spec = PluginSpec.from_plugin(cls)
                existing = plugins.get(spec.plugin_id)
                if existing is not None and existing is not cls:
                    raise ValueError(
                        f"Duplicate plugin id: '{spec.plugin_id}'. "
                        f"Already registered by {existing.__name__}"
                    )
                plugins[spec.plugin_id] = cls

        self._plugins = plugins

    def get_plugins(self) -> list[type[SignalKPlugin]]:
        """Registered plugin classes, sorted by plugin id."""
        return [self._plugins[k] for k in sorted(self._plugins)]

    def get_specs(self) -> list[PluginSpec]:
        return [PluginSpec.from_plugin(cls) for cls in self.get_plugins()]

    def get_plugin_by_id(self, plugin_id: str) -> type[SignalKPlugin] | None:
        return self._plugins.get(plugin_id)

    def create(self, plugin_id: str, app: ServerApp | None) -> SignalKPlugin:
        """Instantiate a registered plugin for a server app.

        This is the plugin factory the server calls once per plugin.

        Raises:
            ValueError: If no plugin with that id is registered
        """
        plugin_cls = self.get_plugin_by_id(plugin_id)
        if plugin_cls is None:
            raise ValueError(f"Unknown plugin: '{plugin_id}'")
        return plugin_cls(app)
