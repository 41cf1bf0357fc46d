# src/signalk_plugin/plugins/base.py
"""Base class for SignalK server plugins.

Plugins subclass SignalKPlugin, declare their options in __init__ and set up
their streams in on_plugin_started(). Subscriptions made through
subscribe_val() are released automatically when the server stops the plugin.

Example:
    class DepthAlarm(SignalKPlugin):
        plugin_id = "signalk-depth-alarm"
        name = "Depth alarm"
        description = "Raises an alarm below a configured depth"

        def __init__(self, app: ServerApp | None = None) -> None:
            super().__init__(app)
            self.opt_num("min_depth", "Minimum depth (m)", 2.0)
            with self.opt_object("notify", "Notification"):
                self.opt_str("path", "Notification path", "notifications.depth")

        def on_plugin_started(self) -> None:
            self.subscribe_val(
                self.get_sk_values("environment.depth.belowTransducer"),
                self.on_depth,
            )

        def on_depth(self, depth: float) -> None:
            if depth < self.options["min_depth"]:
                self.send_sk(self.options["notify"]["path"], "alarm")
"""

import json
import time
from collections.abc import Callable
from contextlib import AbstractContextManager
from os import PathLike
from typing import Any

import structlog

from signalk_plugin.contracts import (
    OptionType,
    PathValue,
    PluginState,
    ServerApp,
    StreamSource,
    Subscription,
    build_delta,
)
from signalk_plugin.plugins.lifecycle import LifecycleController, PluginError
from signalk_plugin.plugins.matching import wildcard_eq
from signalk_plugin.schema import (
    ObjectOption,
    ScalarOption,
    SchemaBuilder,
    fill_defaults,
)

logger = structlog.get_logger()


class HostNotAttachedError(PluginError):
    """Raised when a plugin built without a server app talks to the server."""

    pass


class SignalKPlugin:
    """Base class providing lifecycle, option schema and server helpers.

    Required class attributes:
        plugin_id: Unique id, usually "signalk-some-plugin"
        name: Human readable name

    Optional class attributes:
        description: What the plugin does
        plugin_version: Version string reported by discovery
    """

    plugin_id: str
    name: str
    description: str = ""
    plugin_version: str = "0.0.0"

    def __init__(self, app: ServerApp | None = None) -> None:
        """Initialize with the server app passed to the plugin factory.

        app may be None to build the plugin only to inspect its schema;
        any server call then raises HostNotAttachedError.
        """
        for attr in ("plugin_id", "name"):
            if not getattr(self, attr, None):
                raise ValueError(
                    f"Plugin {type(self).__name__} must define '{attr}' attribute. "
                    f"Add: {attr} = '...' to the class."
                )

        self.app = app
        self._schema_builder = SchemaBuilder()
        self._lifecycle = LifecycleController(self)

    @property
    def _host(self) -> ServerApp:
        if self.app is None:
            raise HostNotAttachedError(
                f"Plugin '{self.plugin_id}' has no server app attached"
            )
        return self.app

    # === Lifecycle ===

    @property
    def state(self) -> PluginState:
        return self._lifecycle.state

    @property
    def running(self) -> bool:
        return self._lifecycle.running

    @property
    def started_on(self) -> int:
        return self._lifecycle.started_on

    @property
    def options(self) -> dict[str, Any] | None:
        """Options passed to the last start(), with defaults filled in."""
        return self._lifecycle.options

    @property
    def data_dir(self) -> str | PathLike[str] | None:
        return self._lifecycle.data_dir

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return self._lifecycle.subscriptions

    def get_time(self) -> int:
        """Current time in epoch milliseconds.

        Tests may override this to simulate the time of day.
        """
        return int(time.time() * 1000)

    def start(
        self,
        options: dict[str, Any],
        restart_plugin: Callable[[], Any] | None = None,
    ) -> None:
        """Called by the server to start the plugin.

        Overriding is normally unnecessary; put startup logic in
        on_plugin_started() instead.
        """
        self._lifecycle.start(options, restart_plugin)

    def stop(self) -> None:
        """Called by the server to stop the plugin. Safe to call repeatedly.

        Put cleanup logic in on_plugin_stopped() instead of overriding.
        """
        self._lifecycle.stop()

    def restart(self) -> None:
        """Ask the server to restart this plugin via the restart_plugin callback."""
        self._lifecycle.restart()

    def on_plugin_started(self) -> None:
        """Called once options are resolved. Override to create subscriptions."""
        logger.warning("No data streams defined", plugin_id=self.plugin_id)
        self.debug(
            "WARNING: No data streams defined. on_plugin_started() should be overridden."
        )

    def on_plugin_stopped(self) -> None:  # noqa: B027
        """Called after all subscriptions are released. Override for cleanup."""

    def subscribe_val(
        self,
        stream: StreamSource,
        handler: Callable[..., Any],
        bound_self: Any = None,
    ) -> Subscription:
        """Subscribe handler to stream; stop() will unsubscribe it.

        Args:
            stream: Stream to receive values from
            handler: Called with each value. Pass a bound method or closure,
                or a plain function together with bound_self.
            bound_self: Object passed as handler's first argument
        """
        return self._lifecycle.subscribe(stream, handler, bound_self)

    def fill_default_options(self, options: dict[str, Any]) -> dict[str, Any]:
        """Fill missing top-level options from schema() defaults, in place."""
        self._schema_builder.require_complete()
        return fill_defaults(options, self.schema())

    def data_dir_path(self) -> str | PathLike[str]:
        return self._host.get_data_dir_path()

    # === Server helpers ===

    def set_status(self, msg: str) -> None:
        """Show msg as this plugin's status in the server admin UI."""
        self._host.set_provider_status(msg)

    def set_error(self, msg: str) -> None:
        """Show msg as an error for this plugin in the server admin UI."""
        self._host.set_provider_error(msg)

    def debug(self, msg: str) -> None:
        """Debug output, visible when the server's DEBUG includes this plugin's id."""
        self._host.debug(msg)

    def get_sk_bus(
        self, path: str | None = None, all_contexts: bool = False
    ) -> StreamSource:
        """Stream of deltas for path.

        Args:
            path: SignalK path, or None for all data
            all_contexts: True for every vessel, False for "self" only
        """
        if all_contexts:
            return self._host.streambundle.get_bus(path)
        return self._host.streambundle.get_self_bus(path)

    def get_sk_values(self, path: str | None = None) -> StreamSource:
        """Stream of bare values (no delta wrapper) for path on "self"."""
        return self._host.streambundle.get_self_stream(path)

    def send_sk(self, path: str, value: Any) -> None:
        """Publish a single value. Use send_sk_values() for several at once."""
        self.send_sk_values([{"path": path, "value": value}])

    def send_sk_values(self, values: list[PathValue]) -> None:
        """Publish path/value pairs as one delta from this plugin."""
        delta = build_delta(self.plugin_id, values)
        rendered = json.dumps(delta, indent=2, default=str, skipkeys=True)
        self.debug(f"sending SignalK: {rendered}")
        self._host.handle_message(self.plugin_id, delta)

    # === Option schema ===

    @property
    def schema_builder(self) -> SchemaBuilder:
        return self._schema_builder

    def schema(self) -> dict[str, Any]:
        """JSON schema of the user configurable options.

        Built from the opt_*() declarations. Override to return a
        hand-written schema instead; default filling follows the override.
        """
        return self._schema_builder.schema()

    def _opt_scalar(
        self,
        option_type: OptionType,
        name: str,
        title: str,
        default: Any,
        is_array: bool,
        description: str | None,
        required: bool,
    ) -> None:
        self._schema_builder.declare_scalar(
            ScalarOption(
                type=option_type,
                name=name,
                title=title,
                default=default,
                is_array=is_array,
                description=description,
                required=required,
            )
        )

    def opt_str(
        self,
        name: str,
        title: str,
        default: str | list[str] | None = None,
        *,
        is_array: bool = False,
        description: str | None = None,
        required: bool = False,
    ) -> None:
        """Declare a string option (default ""). required means non-empty."""
        self._opt_scalar(
            OptionType.STRING, name, title, default, is_array, description, required
        )

    def opt_num(
        self,
        name: str,
        title: str,
        default: float | list[float] | None = None,
        *,
        is_array: bool = False,
        description: str | None = None,
        required: bool = False,
    ) -> None:
        """Declare a number option (default 0). required means >= 1."""
        self._opt_scalar(
            OptionType.NUMBER, name, title, default, is_array, description, required
        )

    def opt_int(
        self,
        name: str,
        title: str,
        default: int | list[int] | None = None,
        *,
        is_array: bool = False,
        description: str | None = None,
        required: bool = False,
    ) -> None:
        """Declare an integer option (default 0). required means >= 1."""
        self._opt_scalar(
            OptionType.INTEGER, name, title, default, is_array, description, required
        )

    def opt_bool(
        self,
        name: str,
        title: str,
        default: bool | list[bool] | None = None,
        *,
        is_array: bool = False,
        description: str | None = None,
    ) -> None:
        """Declare a boolean option (default False)."""
        self._opt_scalar(
            OptionType.BOOLEAN, name, title, default, is_array, description, False
        )

    def opt_obj(
        self,
        name: str,
        title: str,
        *,
        is_array: bool = False,
        description: str | None = None,
        item_title: str | None = None,
    ) -> None:
        """Open an object option; later opt_*() calls land inside it.

        Must be closed with opt_obj_end().
        """
        self._schema_builder.begin_object(
            ObjectOption(
                name=name,
                title=title,
                is_array=is_array,
                description=description,
                item_title=item_title,
            )
        )

    def opt_obj_end(self) -> None:
        """Close the object opened by the matching opt_obj()."""
        self._schema_builder.end_object()

    def opt_object(
        self,
        name: str,
        title: str,
        *,
        is_array: bool = False,
        description: str | None = None,
        item_title: str | None = None,
    ) -> AbstractContextManager[None]:
        """opt_obj()/opt_obj_end() as a with-block."""
        return self._schema_builder.nested(
            ObjectOption(
                name=name,
                title=title,
                is_array=is_array,
                description=description,
                item_title=item_title,
            )
        )

    @staticmethod
    def wildcard_eq(test_val: Any, match_val: Any) -> bool:
        """True if test_val == match_val, or if match_val is blank."""
        return wildcard_eq(test_val, match_val)
