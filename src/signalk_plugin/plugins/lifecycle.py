"""Plugin start/stop sequencing and subscription tracking.

The LifecycleController drives a plugin through

    STOPPED --start()--> STARTING --on_plugin_started() returns--> RUNNING
    RUNNING/STARTING --stop()--> STOPPED

and owns every subscription registered in between. stop() unsubscribes each
of them exactly once, in registration order, and leaves the tracked list
empty before on_plugin_stopped() runs.

Hook faults are never caught here: an exception from on_plugin_started() or
on_plugin_stopped() propagates to the server. A failed start leaves the
controller in STARTING with started_on at NOT_STARTED, and stop() still
cleans up whatever was subscribed before the fault.
"""

import functools
import json
from collections.abc import Callable
from os import PathLike
from typing import Any, Protocol

import structlog

from signalk_plugin.contracts import PluginState, StreamSource, Subscription

logger = structlog.get_logger()

# started_on value whenever the plugin is not (fully) started
NOT_STARTED = -1


class PluginError(Exception):
    """Base exception for plugin lifecycle errors."""

    pass


class SubscriptionCleanupError(PluginError):
    """Raised by stop() when one or more unsubscribe() calls failed.

    Every subscription was still attempted and stop() otherwise completed.
    The individual exceptions are available as `errors`.
    """

    def __init__(self, errors: list[Exception]) -> None:
        self.errors = errors
        super().__init__(
            f"{len(errors)} subscription(s) failed to unsubscribe: "
            + "; ".join(str(e) for e in errors)
        )


class PluginHooks(Protocol):
    """What the controller needs from the plugin it drives."""

    plugin_id: str
    name: str

    def on_plugin_started(self) -> None: ...

    def on_plugin_stopped(self) -> None: ...

    def get_time(self) -> int: ...

    def fill_default_options(self, options: dict[str, Any]) -> dict[str, Any]: ...

    def data_dir_path(self) -> str | PathLike[str]: ...

    def set_status(self, msg: str) -> None: ...

    def debug(self, msg: str) -> None: ...


class LifecycleController:
    """Start/stop state machine with exactly-once subscription teardown.

    Not thread-safe: the server calls start(), stop() and subscribe() from
    its single event loop.
    """

    def __init__(self, owner: PluginHooks) -> None:
        self._owner = owner
        self._state = PluginState.STOPPED
        self._started_on = NOT_STARTED
        self._subscriptions: list[Subscription] = []
        self._restart_callback: Callable[[], Any] | None = None
        self._options: dict[str, Any] | None = None
        self._data_dir: str | PathLike[str] | None = None

    @property
    def state(self) -> PluginState:
        return self._state

    @property
    def running(self) -> bool:
        """True from the start of start() until stop()."""
        return self._state is not PluginState.STOPPED

    @property
    def started_on(self) -> int:
        """Epoch milliseconds of the last successful start, or NOT_STARTED."""
        return self._started_on

    @property
    def subscriptions(self) -> tuple[Subscription, ...]:
        return tuple(self._subscriptions)

    @property
    def options(self) -> dict[str, Any] | None:
        return self._options

    @property
    def data_dir(self) -> str | PathLike[str] | None:
        return self._data_dir

    @property
    def restart_callback(self) -> Callable[[], Any] | None:
        return self._restart_callback

    def start(
        self,
        options: dict[str, Any],
        restart_callback: Callable[[], Any] | None = None,
    ) -> None:
        """Start the plugin.

        Args:
            options: Persisted user configuration; missing keys are filled
                in place from the schema defaults
            restart_callback: Server-supplied callable used by restart()
        """
        owner = self._owner

        if self.running:
            # Clean up the previous run rather than dropping its subscriptions
            logger.warning(
                "Plugin started while running, stopping it first",
                plugin_id=owner.plugin_id,
                subscriptions=len(self._subscriptions),
            )
            self.stop()

        self._started_on = NOT_STARTED
        self._subscriptions = []
        self._state = PluginState.STARTING
        self._restart_callback = restart_callback

        owner.debug(f"{owner.name} plugin starting...")
        owner.set_status("Starting...")

        owner.fill_default_options(options)
        owner.debug(f"Options: {json.dumps(options, default=str, skipkeys=True)}")
        self._options = options

        self._data_dir = owner.data_dir_path()
        owner.debug(f"Data dir path is {self._data_dir}")

        owner.on_plugin_started()

        owner.debug(f"{owner.name} started")
        self._state = PluginState.RUNNING
        self._started_on = owner.get_time()

    def stop(self) -> None:
        """Stop the plugin, releasing every tracked subscription.

        A no-op if the plugin is already stopped.

        Raises:
            SubscriptionCleanupError: If any unsubscribe() raised (after all
                were attempted and the rest of stop() completed)
        """
        if not self.running:
            return

        owner = self._owner
        self._state = PluginState.STOPPED
        owner.debug(f"{owner.name} stopping")

        # Detach the list first: an unsubscribe callback may re-enter
        # stop() or subscribe() and must not see the entries being released.
        subscriptions, self._subscriptions = self._subscriptions, []

        failures: list[Exception] = []
        for subscription in subscriptions:
            try:
                subscription.unsubscribe()
            except Exception as e:
                logger.warning(
                    "Unsubscribe failed",
                    plugin_id=owner.plugin_id,
                    error=str(e),
                )
                failures.append(e)

        owner.on_plugin_stopped()

        owner.set_status("Stopped")
        owner.debug(f"{owner.name} stopped")
        self._started_on = NOT_STARTED

        if failures:
            raise SubscriptionCleanupError(failures)

    def restart(self) -> None:
        """Ask the server to restart the plugin.

        Does not change state itself; the server drives stop()/start().
        A no-op if no restart callback was given to start().
        """
        if self._restart_callback is not None:
            self._restart_callback()

    def subscribe(
        self,
        source: StreamSource,
        handler: Callable[..., Any],
        bound_self: Any = None,
    ) -> Subscription:
        """Attach handler to source and track the subscription for stop().

        Args:
            source: Stream to subscribe to
            handler: Called with each value. Bound methods and closures are
                used as-is.
            bound_self: If given, handler is called as handler(bound_self, value)

        Returns:
            The tracked subscription
        """
        if not self.running:
            logger.warning(
                "Subscription registered while stopped; the next start() discards it",
                plugin_id=self._owner.plugin_id,
            )

        callback = handler if bound_self is None else functools.partial(handler, bound_self)
        subscription = source.subscribe(callback)
        self._subscriptions.append(subscription)
        return subscription
