# src/signalk_plugin/plugins/hookspecs.py
"""pluggy hook specifications for SignalK plugin discovery.

Distributions expose their plugin classes by implementing these hooks and
registering the implementer under the "signalk_plugin" entry point group.

Usage (implementing a plugin package):
    from signalk_plugin.plugins.hookspecs import hookimpl

    class DepthAlarmPlugins:
        @hookimpl  # NOT @hookspec - that's for defining specs
        def signalk_get_plugins(self):
            return [DepthAlarm]

    depth_alarm_plugins = DepthAlarmPlugins()

    # pyproject.toml
    [project.entry-points.signalk_plugin]
    depth_alarm = "depth_alarm.hooks:depth_alarm_plugins"
"""

from typing import TYPE_CHECKING

import pluggy

if TYPE_CHECKING:
    from signalk_plugin.plugins.base import SignalKPlugin

# Project name for pluggy, also the entry point group
PROJECT_NAME = "signalk_plugin"

hookspec = pluggy.HookspecMarker(PROJECT_NAME)
hookimpl = pluggy.HookimplMarker(PROJECT_NAME)


class SignalKPluginSpec:
    """Hook specifications for plugin providers."""

    @hookspec
    def signalk_get_plugins(self) -> list[type["SignalKPlugin"]]:  # type: ignore[empty-body]
        """Return plugin classes (not instances).

        Returns:
            List of SignalKPlugin subclasses
        """
