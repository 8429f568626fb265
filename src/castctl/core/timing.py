"""Timeout policy for connect, resolve and join.

By default castctl waits forever for these steps. When a timeout is
configured, the pending future is failed with OperationTimeoutError once it
expires; the operation itself is not retried.
"""

import logging
from concurrent.futures import Future

from castctl.exceptions import OperationTimeoutError
from castctl.transport.protocols import Cancellable, Scheduler

logger = logging.getLogger(__name__)


def with_timeout(
    future: Future,
    timeout: float | None,
    scheduler: Scheduler,
    operation: str,
) -> Future:
    """
    Fail ``future`` with OperationTimeoutError if it is not done in time.

    Args:
        future: Pending result of a transport operation
        timeout: Seconds to wait, or None to wait forever
        scheduler: Loop used to run the expiry check
        operation: Description for the error message (e.g. "resolve CC1AD845")

    Returns:
        The same future, for chaining
    """
    if timeout is None or future.done():
        return future

    def expire() -> None:
        if not future.done():
            logger.debug(f"Timed out after {timeout}s: {operation}")
            future.set_exception(OperationTimeoutError(operation, timeout))

    timer = scheduler.call_later(timeout, expire)
    future.add_done_callback(lambda _f: timer.cancel())
    return future


class Deadline:
    """
    One-shot timer for waits that are not futures (the connected event).

    ``expired`` is called on the loop thread unless ``cancel()`` ran first.
    """

    def __init__(self, scheduler: Scheduler, timeout: float | None, expired) -> None:
        self._timer: Cancellable | None = None
        if timeout is not None:
            self._timer = scheduler.call_later(timeout, expired)

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
