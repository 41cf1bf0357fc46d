"""Tests for pluggy-based plugin discovery."""

from typing import Any

import pytest

from signalk_plugin.plugins.base import SignalKPlugin
from signalk_plugin.plugins.hookspecs import hookimpl
from signalk_plugin.plugins.manager import PluginManager, PluginSpec


class AnchorWatch(SignalKPlugin):
    plugin_id = "signalk-anchor-watch"
    name = "Anchor watch"
    description = "Watches the anchor"
    plugin_version = "0.3.1"

    def on_plugin_started(self) -> None:
        pass


class BilgeMonitor(SignalKPlugin):
    plugin_id = "signalk-bilge-monitor"
    name = "Bilge monitor"

    def on_plugin_started(self) -> None:
        pass


class BoatPlugins:
    @hookimpl
    def signalk_get_plugins(self) -> list[type[SignalKPlugin]]:
        return [BilgeMonitor, AnchorWatch]


class TestPluginSpec:
    def test_from_plugin(self) -> None:
        spec = PluginSpec.from_plugin(AnchorWatch)

        assert spec == PluginSpec(
            plugin_id="signalk-anchor-watch",
            name="Anchor watch",
            description="Watches the anchor",
            version="0.3.1",
        )

    def test_missing_id_rejected(self) -> None:
        class Anonymous(SignalKPlugin):
            name = "Anonymous"

        with pytest.raises(ValueError, match="must define 'plugin_id'"):
            PluginSpec.from_plugin(Anonymous)


class TestPluginManager:
    """Registration through hook implementers."""

    def test_empty_manager(self) -> None:
        manager = PluginManager()

        assert manager.get_plugins() == []
        assert manager.get_plugin_by_id("signalk-anchor-watch") is None

    def test_register_discovers_classes(self) -> None:
        manager = PluginManager()
        manager.register(BoatPlugins())

        assert manager.get_plugins() == [AnchorWatch, BilgeMonitor]
        assert manager.get_plugin_by_id("signalk-bilge-monitor") is BilgeMonitor
        assert [s.plugin_id for s in manager.get_specs()] == [
            "signalk-anchor-watch",
            "signalk-bilge-monitor",
        ]

    def test_create_instantiates_with_app(self, server_app: Any) -> None:
        manager = PluginManager()
        manager.register(BoatPlugins())

        plugin = manager.create("signalk-anchor-watch", server_app)

        assert isinstance(plugin, AnchorWatch)
        assert plugin.app is server_app

    def test_create_unknown(self) -> None:
        manager = PluginManager()

        with pytest.raises(ValueError, match="Unknown plugin: 'nope'"):
            manager.create("nope", None)

    def test_duplicate_id_rejected(self) -> None:
        class Impostor(SignalKPlugin):
            plugin_id = "signalk-anchor-watch"
            name = "Impostor"

        class ImpostorPlugins:
            @hookimpl
            def signalk_get_plugins(self) -> list[type[SignalKPlugin]]:
                return [Impostor]

        manager = PluginManager()
        manager.register(BoatPlugins())

        with pytest.raises(ValueError, match="Duplicate plugin id"):
            manager.register(ImpostorPlugins())

    def test_same_class_from_two_providers_allowed(self) -> None:
        class MorePlugins:
            @hookimpl
            def signalk_get_plugins(self) -> list[type[SignalKPlugin]]:
                return [AnchorWatch]

        manager = PluginManager()
        manager.register(BoatPlugins())
        manager.register(MorePlugins())

        assert len(manager.get_plugins()) == 2

    def test_non_plugin_rejected(self) -> None:
        class NotAPlugin:
            plugin_id = "fake"
            name = "Fake"

        class BadPlugins:
            @hookimpl
            def signalk_get_plugins(self) -> list[Any]:
                return [NotAPlugin]

        manager = PluginManager()

        with pytest.raises(ValueError, match="not a SignalKPlugin subclass"):
            manager.register(BadPlugins())

    def test_load_entrypoints_without_installed_plugins(self) -> None:
        manager = PluginManager()

        count = manager.load_entrypoints()

        assert isinstance(count, int)
