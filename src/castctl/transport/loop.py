"""Single-threaded event loop that every castctl callback runs on."""

import logging
import queue
import threading
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)

_Call = tuple[Callable[..., Any], tuple[Any, ...]]


class _Timer:
    """Cancellable delayed call."""

    def __init__(self, loop: "EventLoop", delay: float, callback: Callable[..., Any], args: tuple):
        self._cancelled = False
        self._callback = callback
        self._args = args
        self._loop = loop
        self._thread = threading.Timer(delay, self._fire)
        self._thread.daemon = True

    def start(self) -> None:
        self._thread.start()

    def cancel(self) -> None:
        self._cancelled = True
        self._thread.cancel()
        self._loop._timers.discard(self)

    def _fire(self) -> None:
        self._loop.call_soon(self._run)

    def _run(self) -> None:
        self._loop._timers.discard(self)
        if not self._cancelled:
            self._callback(*self._args)


class EventLoop:
    """
    Queue-backed event loop.

    Transport threads post work with call_soon(); run() executes it on the
    calling thread one item at a time, so handlers never run concurrently and
    always run in the order the events arrived.

    Example:
        ```python
        loop = EventLoop()
        loop.call_soon(command.start)
        loop.run()  # returns after loop.stop()
        ```
    """

    def __init__(self, poll_interval: float = 0.1) -> None:
        """
        Initialize the loop.

        Args:
            poll_interval: How long run() blocks on an empty queue before
                checking for stop (keeps Ctrl+C responsive)
        """
        self._queue: queue.Queue[_Call] = queue.Queue()
        self._poll_interval = poll_interval
        self._running = False
        self._timers: set[_Timer] = set()

    @property
    def running(self) -> bool:
        return self._running

    def call_soon(self, callback: Callable[..., Any], *args: Any) -> None:
        """Queue ``callback(*args)``. Safe to call from any thread."""
        self._queue.put((callback, args))

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _Timer:
        """Queue ``callback(*args)`` after ``delay`` seconds."""
        timer = _Timer(self, delay, callback, args)
        self._timers.add(timer)
        timer.start()
        return timer

    def run(self) -> None:
        """Process queued callbacks until stop() is called."""
        self._running = True
        logger.debug("Event loop started")
        try:
            while self._running:
                try:
                    callback, args = self._queue.get(timeout=self._poll_interval)
                except queue.Empty:
                    continue
                callback(*args)
        finally:
            self._running = False
            for timer in list(self._timers):
                timer.cancel()
            logger.debug("Event loop stopped")

    def stop(self) -> None:
        """Make run() return after the current callback."""
        self._running = False
