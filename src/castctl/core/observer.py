"""Generic observer list manager.

Used wherever castctl fans one event out to several listeners: device
lifecycle events, discovery presence events, command state changes and
inbound session messages.
"""

import logging
from threading import Lock
from typing import Any

logger = logging.getLogger(__name__)


class ObserverManager[T: object]:
    """
    Observer list with thread-safe registration and ordered notification.

    Observers are notified in registration order. An observer that raises is
    logged and skipped; the remaining observers still receive the event.

    Registration may happen from any thread (the transport registers from
    its socket thread), so the list is guarded by a lock. The lock is released
    before callbacks run.

    Example:
        ```python
        class Device:
            def __init__(self):
                self._observers = ObserverManager[DeviceObserver](observer_type_name="device")

            def _emit(self, event, detail=None):
                self._observers.notify("on_device_event", event, detail)
        ```
    """

    def __init__(self, lock: Lock | None = None, observer_type_name: str = "observer"):
        """
        Initialize the observer manager.

        Args:
            lock: Optional threading lock to use. If None, creates a new lock.
            observer_type_name: Name of the observer type for logging (e.g., "device")
        """
        self._observers: list[T] = []
        self._lock = lock or Lock()
        self._observer_type_name = observer_type_name

    def register(self, observer: T) -> None:
        """Register an observer (idempotent - won't add duplicates)."""
        with self._lock:
            if observer not in self._observers:
                self._observers.append(observer)
                logger.debug(f"Registered {self._observer_type_name} observer: {observer}")
            else:
                logger.debug(f"{self._observer_type_name} observer already registered: {observer}")

    def unregister(self, observer: T) -> None:
        """Unregister an observer."""
        with self._lock:
            if observer in self._observers:
                self._observers.remove(observer)
                logger.debug(f"Unregistered {self._observer_type_name} observer: {observer}")
            else:
                logger.warning(
                    f"Attempted to unregister unknown {self._observer_type_name} observer: {observer}"
                )

    def notify(self, callback_name: str, *args: Any, **kwargs: Any) -> None:
        """
        Call ``callback_name`` on every observer.

        Args:
            callback_name: Name of the method to call (e.g., 'on_device_event')
            *args: Positional arguments to pass to the callback
            **kwargs: Keyword arguments to pass to the callback
        """
        for observer in self._snapshot():
            try:
                callback = getattr(observer, callback_name)
            except AttributeError:
                logger.error(
                    f"{self._observer_type_name} observer {observer} has no method '{callback_name}'"
                )
                continue
            self._invoke(observer, callback, args, kwargs)

    def call(self, *args: Any, **kwargs: Any) -> None:
        """Call every observer directly; for observers that are plain callables."""
        for observer in self._snapshot():
            self._invoke(observer, observer, args, kwargs)

    def clear(self) -> None:
        """Remove all registered observers."""
        with self._lock:
            count = len(self._observers)
            self._observers.clear()
        if count > 0:
            logger.debug(f"Cleared {count} {self._observer_type_name} observer(s)")

    def _snapshot(self) -> list[T]:
        with self._lock:
            return list(self._observers)

    def _invoke(self, observer: T, callback: Any, args: tuple, kwargs: dict) -> None:
        try:
            callback(*args, **kwargs)
        except Exception as e:
            logger.error(
                f"Error notifying {self._observer_type_name} observer {observer}: {e}",
                exc_info=True,
            )

    def __contains__(self, observer: T) -> bool:
        with self._lock:
            return observer in self._observers

    def __len__(self) -> int:
        with self._lock:
            return len(self._observers)
