"""Small helpers for composing transport futures."""

from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from castctl.exceptions import CastCtlError, wrap_transport_error


def failed(error: BaseException) -> Future:
    """A future that already failed with ``error``."""
    future: Future = Future()
    future.set_exception(error)
    return future


def start(operation: Callable[[], Future]) -> Future:
    """Run ``operation``; a synchronous transport exception becomes a failed future."""
    try:
        return operation()
    except CastCtlError:
        raise
    except Exception as e:
        return failed(e)


def chain(
    source: Future,
    on_result: Callable[[Any], Any],
    on_error: Callable[[str], CastCtlError],
) -> Future:
    """
    Derive a future from ``source``.

    A result is passed through ``on_result``. A failure that is not already a
    CastCtlError is converted with ``on_error(reason)``.
    """
    result: Future = Future()

    def done(f: Future) -> None:
        if result.done():
            return
        error = f.exception()
        if error is not None:
            result.set_exception(wrap_transport_error(error, on_error))
            return
        result.set_result(on_result(f.result()))

    source.add_done_callback(done)
    return result
