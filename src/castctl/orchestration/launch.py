"""Application launch and messaging commands: run, hello and URL launchers."""

import logging
from concurrent.futures import Future
from typing import Any

from castctl.orchestration.base import DeviceCommand
from castctl.session import ApplicationInstance, ManagedSession
from castctl.transport.protocols import Cancellable

logger = logging.getLogger(__name__)


class RunCommand(DeviceCommand):
    """
    Launch an application and disconnect.

    Without a namespace the launch is fire-and-forget: the device is stopped
    right after the request is issued. With a namespace the session is
    awaited, closed again if it started, and the device is stopped whatever
    the outcome.
    """

    name = "run"

    def on_connected(self) -> None:
        self.step(self.launcher.resolve(self.device, self.context.app_id), self._run)

    def _run(self, instance: ApplicationInstance) -> None:
        namespace = self.context.namespace
        pending = self.sessions.run(instance, namespace)

        if namespace is None:
            pending.add_done_callback(self._log_late_outcome)
            logger.info(f"Launch of {instance.app_id} requested")
            self.finish()
        else:
            self.step(pending, self._started)

    def _started(self, session: ManagedSession) -> None:
        logger.info(f"Started {session.instance.app_id} on {session.namespace}")
        session.stop()
        self.finish()

    def _log_late_outcome(self, future: Future) -> None:
        error = future.exception()
        if error is not None:
            logger.debug(f"Launch outcome after disconnect: {error}")


class SendCommand(DeviceCommand):
    """
    Launch a fixed application, open its namespace and send one message.

    With ``wait_for_ack`` the command waits for delivery, then keeps the
    connection open for ``grace_period`` seconds before stopping. Otherwise
    it stops as soon as the send has been issued.
    """

    name = "send"

    def __init__(self, *args, wait_for_ack: bool = False, grace_period: float = 0.0, **kwargs):
        super().__init__(*args, **kwargs)
        self.wait_for_ack = wait_for_ack
        self.grace_period = grace_period
        self._grace_timer: Cancellable | None = None

    def on_connected(self) -> None:
        self.step(self.launcher.resolve(self.device, self.context.app_id), self._run)

    def _run(self, instance: ApplicationInstance) -> None:
        self.step(self.sessions.run(instance, self.context.namespace), self._send)

    def _send(self, session: ManagedSession) -> None:
        pending = self.dispatcher.send(session, self.context.payload)

        if self.wait_for_ack:
            self.step(pending, self._delivered)
            return

        # Fire-and-forget: only a failure known at send time is reported
        if pending.done() and pending.exception() is not None:
            self.step(pending, lambda _ack: None)
            return
        logger.info(f"Sent to {self.context.app_id}: {self.context.payload!r}")
        self.finish()

    def _delivered(self, _ack: Any) -> None:
        logger.info(f"Delivered to {self.context.app_id}: {self.context.payload!r}")
        if self.grace_period > 0:
            logger.debug(f"Holding connection for {self.grace_period:g}s")
            self._grace_timer = self.scheduler.call_later(self.grace_period, self.finish)
        else:
            self.finish()

    def stop_device(self) -> None:
        if self._grace_timer is not None:
            self._grace_timer.cancel()
            self._grace_timer = None
        super().stop_device()
