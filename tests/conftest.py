"""Shared test fixtures and helpers.

This module provides in-memory stand-ins for the SignalK server side:
a push-style value stream and a server app that records everything a
plugin sends it.

Hypothesis Configuration:
- "ci" profile: Fast tests for CI (100 examples) - default
- "nightly" profile: Thorough tests (1000 examples)
- "debug" profile: Minimal tests with verbose output (10 examples)

Set profile via environment variable:
    HYPOTHESIS_PROFILE=nightly pytest tests/
"""

import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from hypothesis import Phase, Verbosity, settings

# =============================================================================
# Hypothesis Configuration
# =============================================================================

settings.register_profile(
    "ci",
    max_examples=100,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,  # Disable deadline for CI (timing varies)
)

settings.register_profile(
    "nightly",
    max_examples=1000,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.register_profile(
    "debug",
    max_examples=10,
    verbosity=Verbosity.verbose,
    phases=[Phase.explicit, Phase.reuse, Phase.generate, Phase.shrink],
    deadline=None,
)

settings.load_profile(os.getenv("HYPOTHESIS_PROFILE", "ci"))


# =============================================================================
# Server fakes
# =============================================================================


class StreamSubscription:
    """Subscription handle that counts unsubscribe() calls."""

    def __init__(self, stream: "ValueStream", handler: Callable[[Any], None]) -> None:
        self._stream = stream
        self.handler = handler
        self.unsubscribe_count = 0

    def unsubscribe(self) -> None:
        self.unsubscribe_count += 1
        self._stream.remove(self)


class ValueStream:
    """Minimal push stream: push() delivers a value to every subscriber.

    Delivery iterates a snapshot, so a handler may unsubscribe (or stop its
    plugin) while a value is being delivered.
    """

    def __init__(self, name: str = "stream") -> None:
        self.name = name
        self._subscribers: list[StreamSubscription] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def subscribe(self, handler: Callable[[Any], None]) -> StreamSubscription:
        subscription = StreamSubscription(self, handler)
        self._subscribers.append(subscription)
        return subscription

    def remove(self, subscription: StreamSubscription) -> None:
        if subscription in self._subscribers:
            self._subscribers.remove(subscription)

    def push(self, value: Any) -> None:
        for subscription in list(self._subscribers):
            subscription.handler(value)


class FakeStreamBundle:
    """Hands out one ValueStream per (kind, path) and remembers them."""

    def __init__(self) -> None:
        self.streams: dict[tuple[str, str | None], ValueStream] = {}

    def _get(self, kind: str, path: str | None) -> ValueStream:
        key = (kind, path)
        if key not in self.streams:
            self.streams[key] = ValueStream(f"{kind}:{path}")
        return self.streams[key]

    def get_bus(self, path: str | None = None) -> ValueStream:
        return self._get("bus", path)

    def get_self_bus(self, path: str | None = None) -> ValueStream:
        return self._get("self_bus", path)

    def get_self_stream(self, path: str | None = None) -> ValueStream:
        return self._get("self_stream", path)


class FakeServerApp:
    """Records status, errors, debug output and published deltas."""

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = data_dir
        self.streambundle = FakeStreamBundle()
        self.statuses: list[str] = []
        self.errors: list[str] = []
        self.debug_messages: list[str] = []
        self.messages: list[tuple[str, Any]] = []

    def set_provider_status(self, msg: str) -> None:
        self.statuses.append(msg)

    def set_provider_error(self, msg: str) -> None:
        self.errors.append(msg)

    def get_data_dir_path(self) -> str:
        return str(self.data_dir)

    def handle_message(self, plugin_id: str, delta: Any) -> None:
        self.messages.append((plugin_id, delta))

    def debug(self, msg: str) -> None:
        self.debug_messages.append(msg)


@pytest.fixture
def server_app(tmp_path: Path) -> FakeServerApp:
    """A fresh fake server app with a temporary data directory."""
    return FakeServerApp(tmp_path)


@pytest.fixture
def make_stream() -> Callable[..., ValueStream]:
    """Factory for standalone value streams."""
    return ValueStream


__all__ = [
    "FakeServerApp",
    "FakeStreamBundle",
    "StreamSubscription",
    "ValueStream",
]
