"""Plugin layer: base class, lifecycle engine and discovery via pluggy.

This module provides:

- Base class: SignalKPlugin, the extension point plugin authors subclass
- Lifecycle: Start/stop state machine with subscription tracking
- Config: Loading of persisted plugin configuration files
- Manager: Plugin discovery and registration
- Hookspecs: pluggy hook definitions
"""

from signalk_plugin.plugins.base import HostNotAttachedError, SignalKPlugin
from signalk_plugin.plugins.config_base import (
    PluginConfig,
    PluginConfigError,
    PluginConfigFile,
    load_plugin_config,
)
from signalk_plugin.plugins.hookspecs import hookimpl, hookspec
from signalk_plugin.plugins.lifecycle import (
    NOT_STARTED,
    LifecycleController,
    PluginError,
    PluginHooks,
    SubscriptionCleanupError,
)
from signalk_plugin.plugins.manager import PluginManager, PluginSpec
from signalk_plugin.plugins.matching import wildcard_eq

__all__ = [  # Grouped by category for readability
    # Base
    "HostNotAttachedError",
    "SignalKPlugin",
    # Config
    "PluginConfig",
    "PluginConfigError",
    "PluginConfigFile",
    "load_plugin_config",
    # Hookspecs
    "hookimpl",
    "hookspec",
    # Lifecycle
    "NOT_STARTED",
    "LifecycleController",
    "PluginError",
    "PluginHooks",
    "SubscriptionCleanupError",
    # Manager
    "PluginManager",
    "PluginSpec",
    # Matching
    "wildcard_eq",
]
