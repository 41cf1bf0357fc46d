"""signalk-plugin-base: base layer for SignalK server plugins.

Provides a declarative option-schema builder and a lifecycle engine that
releases every stream subscription when the server stops a plugin.
"""

__version__ = "0.1.0"

from signalk_plugin.contracts import OptionType, PluginState, ServerApp
from signalk_plugin.plugins import (
    NOT_STARTED,
    HostNotAttachedError,
    PluginError,
    SignalKPlugin,
    SubscriptionCleanupError,
    hookimpl,
    wildcard_eq,
)
from signalk_plugin.schema import (
    DuplicateOptionError,
    ObjectOption,
    ScalarOption,
    SchemaBuilder,
    SchemaBuilderError,
    UnbalancedObjectError,
)

__all__ = [
    "__version__",
    "NOT_STARTED",
    "DuplicateOptionError",
    "HostNotAttachedError",
    "ObjectOption",
    "OptionType",
    "PluginError",
    "PluginState",
    "ScalarOption",
    "SchemaBuilder",
    "SchemaBuilderError",
    "ServerApp",
    "SignalKPlugin",
    "SubscriptionCleanupError",
    "UnbalancedObjectError",
    "hookimpl",
    "wildcard_eq",
]
