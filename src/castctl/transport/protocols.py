"""Narrow interfaces castctl consumes from the transport layer.

Asynchronous operations return ``concurrent.futures.Future`` objects. A
transport must complete them on the event loop thread so that done
callbacks run there, in arrival order, like every other event.
"""

from __future__ import annotations

from collections.abc import Callable
from concurrent.futures import Future
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from castctl.models import ConnectionState
    from castctl.protocols import DeviceObserver, PresenceObserver


class Cancellable(Protocol):
    """Handle returned by Scheduler.call_later."""

    def cancel(self) -> None:
        ...


class Scheduler(Protocol):
    """Runs callbacks on the event loop thread."""

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback(*args)``. Safe to call from any thread."""
        ...

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> Cancellable:
        """Queue ``callback(*args)`` after ``delay`` seconds."""
        ...


class Session(Protocol):
    """A namespaced message channel bound to one running application."""

    namespace: str | None

    def send(self, payload: Any) -> Future:
        """Transmit ``payload``; the future resolves on delivery acknowledgment."""
        ...

    def add_listener(self, listener: Callable[[Any], None]) -> None:
        """Receive every inbound message, in arrival order."""
        ...

    def stop(self) -> None:
        """End the session. Idempotent."""
        ...


class Application(Protocol):
    """A receiver application resolved on a connected device."""

    app_id: str

    def run(self, namespace: str | None) -> Future:
        """Launch the application and open ``namespace``; resolves to a Session."""
        ...

    def join(self, namespace: str) -> Future:
        """Attach to an already running session; resolves to a Session."""
        ...


class DeviceHandle(Protocol):
    """
    Client-side proxy for one device connection.

    Connecting starts at construction. The handle reports exactly one of
    CONNECTED, ERROR or DISCONNECTED before any other operation may be issued.
    """

    host: str
    port: int
    reconnect: bool

    @property
    def state(self) -> ConnectionState:
        ...

    def register_observer(self, observer: DeviceObserver) -> None:
        ...

    def status(self) -> Future:
        """Query receiver status; resolves to a mapping."""
        ...

    def application(self, app_id: str) -> Future:
        """Resolve ``app_id``; resolves to an Application."""
        ...

    def stop(self) -> None:
        """Tear the connection down. Idempotent, safe from any state."""
        ...


class DeviceScanner(Protocol):
    """Announces devices coming online and going offline."""

    def register_observer(self, observer: PresenceObserver) -> None:
        ...

    def start(self) -> None:
        ...

    def stop(self) -> None:
        ...


class Transport(Protocol):
    """Factory for device handles and scanners."""

    scheduler: Scheduler

    def connect(self, host: str, port: int, reconnect: bool = False) -> DeviceHandle:
        ...

    def scanner(self) -> DeviceScanner:
        ...
