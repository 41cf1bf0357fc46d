"""Protocols for the SignalK server collaborators a plugin talks to.

These describe what the base layer consumes from the host. They're used for
type checking and for isinstance() checks at the plugin boundary; the host
supplies the concrete objects.

Collaborators:
- StatusSink: Status/error text shown in the server admin UI
- DirectoryResolver: Per-plugin data directory
- MessageSink: Delta publication onto the server's data bus
- DebugLogger: Debug output (visible when DEBUG matches the plugin id)
- StreamSource / Subscription: A subscribable value stream and its cancel handle
- StreamBundle: Lookup of value streams by SignalK path
"""

from collections.abc import Callable
from os import PathLike
from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from signalk_plugin.contracts.delta import Delta


@runtime_checkable
class Subscription(Protocol):
    """Capability returned by StreamSource.subscribe().

    Calling unsubscribe() detaches the handler from its source.
    """

    def unsubscribe(self) -> None:
        """Stop delivering values to the subscribed handler."""
        ...


@runtime_checkable
class StreamSource(Protocol):
    """A source of values that handlers can subscribe to."""

    def subscribe(self, handler: Callable[[Any], None]) -> Subscription:
        """Attach handler; it is called once per value produced.

        Args:
            handler: Callable receiving each value

        Returns:
            Subscription used to detach the handler
        """
        ...


@runtime_checkable
class StreamBundle(Protocol):
    """Server-side registry of value streams keyed by SignalK path.

    A path of None means "all paths".
    """

    def get_bus(self, path: str | None = None) -> StreamSource:
        """Deltas for path across ALL contexts (every vessel)."""
        ...

    def get_self_bus(self, path: str | None = None) -> StreamSource:
        """Deltas for path restricted to the "self" vessel context."""
        ...

    def get_self_stream(self, path: str | None = None) -> StreamSource:
        """Bare values (no delta wrapper) for path on the "self" vessel."""
        ...


@runtime_checkable
class StatusSink(Protocol):
    def set_provider_status(self, msg: str) -> None: ...

    def set_provider_error(self, msg: str) -> None: ...


@runtime_checkable
class DirectoryResolver(Protocol):
    def get_data_dir_path(self) -> str | PathLike[str]: ...


@runtime_checkable
class MessageSink(Protocol):
    def handle_message(self, plugin_id: str, delta: "Delta") -> None: ...


@runtime_checkable
class DebugLogger(Protocol):
    def debug(self, msg: str) -> None: ...


@runtime_checkable
class ServerApp(
    StatusSink, DirectoryResolver, MessageSink, DebugLogger, Protocol
):
    """Everything a plugin receives from the server's plugin factory call.

    Example:
        class MyPlugin(SignalKPlugin):
            plugin_id = "signalk-my-plugin"
            name = "My plugin"

        def plugin_factory(app: ServerApp) -> MyPlugin:
            return MyPlugin(app)
    """

    streambundle: StreamBundle
