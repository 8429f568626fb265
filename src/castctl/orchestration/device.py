"""Device-level commands: discover, status and watch."""

import logging
from typing import Any

from castctl.exceptions import CommandError
from castctl.models import CommandState, DeviceInfo
from castctl.orchestration.base import Command, DeviceCommand
from castctl.protocols import PresenceEvent
from castctl.session import ManagedSession
from castctl.session.futures import chain, start
from castctl.transport.protocols import Cancellable, DeviceScanner

logger = logging.getLogger(__name__)


def _status_failed(host: str):
    return lambda reason: CommandError(f"Status request to {host} failed: {reason}", host=host)


class DiscoverCommand(Command):
    """
    Log devices as they come online and go offline.

    Holds no device handle. Runs until cancelled, or until the configured
    discover timeout expires.
    """

    name = "discover"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.scanner: DeviceScanner | None = None
        self._timer: Cancellable | None = None

    def start(self) -> None:
        self.machine.transition(CommandState.WORKING)
        self.scanner = self.transport.scanner()
        self.scanner.register_observer(self)
        self.scanner.start()
        logger.info("Discovering devices (press Ctrl+C to stop)")

        timeout = self.config.discover_timeout
        if timeout is not None:
            self._timer = self.scheduler.call_later(timeout, self.cancel)

    def on_presence_event(self, event: PresenceEvent, device: DeviceInfo) -> None:
        if self.machine.is_terminal:
            return
        logger.info(f"{event.value}: {device.describe()}")

    def cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        if self.scanner is not None:
            self.scanner.stop()
        if not self.machine.is_terminal:
            self.machine.transition(CommandState.DONE)


class StatusCommand(DeviceCommand):
    """Query receiver status once, log it and disconnect."""

    name = "status"

    def on_connected(self) -> None:
        host = self.context.host
        pending = chain(start(self.device.status), lambda status: status, _status_failed(host))
        self.step(pending, self._on_status)

    def _on_status(self, status: Any) -> None:
        logger.info(f"Status of {self.context.target}: {status}")
        self.finish()


class WatchCommand(DeviceCommand):
    """
    Log messages from a device until interrupted.

    Without an app id: query status, then log every raw receiver message.
    With an app id: launch it without a namespace and log the session's
    messages. The device is only stopped on an initial failure or on cancel.
    """

    name = "watch"

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._watching = False

    def on_connected(self) -> None:
        if self.context.app_id is None:
            host = self.context.host
            pending = chain(start(self.device.status), lambda status: status, _status_failed(host))
            self.step(pending, self._watch_device)
        else:
            self.step(self.launcher.resolve(self.device, self.context.app_id), self._launch)

    def _watch_device(self, status: Any) -> None:
        logger.info(f"Status of {self.context.target}: {status}")
        self._watching = True
        logger.info("Watching device messages (press Ctrl+C to stop)")

    def on_device_message(self, message: Any) -> None:
        if self._watching:
            logger.info(f"Message: {message}")

    def _launch(self, instance) -> None:
        self.step(self.sessions.run(instance, None), self._watch_session)

    def _watch_session(self, session: ManagedSession) -> None:
        self.listen(session, self._log_message)
        logger.info(f"Watching {session.instance.app_id} (press Ctrl+C to stop)")

    def _log_message(self, message: Any) -> None:
        logger.info(f"Message: {message}")
