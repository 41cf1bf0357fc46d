"""Shared contracts for cross-boundary data types.

Enums, TypedDicts and Protocols that cross the boundary between the base
layer, plugin subclasses and the SignalK server are defined here.

Import pattern:
    from signalk_plugin.contracts import PluginState, ServerApp, build_delta
"""

from signalk_plugin.contracts.delta import (
    Delta,
    DeltaSource,
    DeltaUpdate,
    PathValue,
    build_delta,
)
from signalk_plugin.contracts.enums import OptionType, PluginState
from signalk_plugin.contracts.host import (
    DebugLogger,
    DirectoryResolver,
    MessageSink,
    ServerApp,
    StatusSink,
    StreamBundle,
    StreamSource,
    Subscription,
)

__all__ = [
    # delta
    "Delta",
    "DeltaSource",
    "DeltaUpdate",
    "PathValue",
    "build_delta",
    # enums
    "OptionType",
    "PluginState",
    # host
    "DebugLogger",
    "DirectoryResolver",
    "MessageSink",
    "ServerApp",
    "StatusSink",
    "StreamBundle",
    "StreamSource",
    "Subscription",
]
