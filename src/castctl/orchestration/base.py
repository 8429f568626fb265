"""
Base classes for command orchestrators.

A command orchestrator sequences one interaction with a device::

    start()
      │  transport.connect()                       INIT → CONNECTING
      ▼
    on_device_event(CONNECTED)                     CONNECTING → CONNECTED → WORKING
      │  on_connected(): resolve → run/join → send ...
      ▼
    finish()  or  fail(error)                      WORKING → DONE / FAILED
      │
      └─ stop_device()  (at most once)

Nothing touches the device before CONNECTED. Any error raised while the
command works ends it, CommandError or not: the error is logged at error
level, the state becomes FAILED and the device is stopped. Once a command
is terminal, late events and future completions are ignored.
"""

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any, ClassVar

from castctl.core.state_machine import CommandStateMachine
from castctl.core.timing import Deadline
from castctl.exceptions import (
    CommandError,
    DeviceConnectionError,
    DeviceDisconnectedError,
    OperationTimeoutError,
)
from castctl.models import AppConfig, CommandContext, CommandState
from castctl.protocols import CommandObserver, DeviceEvent
from castctl.session import ApplicationLauncher, ManagedSession, MessageDispatcher, SessionManager
from castctl.transport.protocols import DeviceHandle, Transport

logger = logging.getLogger(__name__)


class Command(ABC):
    """An orchestrator for one command invocation."""

    name: ClassVar[str] = "command"

    def __init__(self, context: CommandContext, transport: Transport, config: AppConfig):
        self.context = context
        self.transport = transport
        self.config = config
        self.scheduler = transport.scheduler
        self.machine = CommandStateMachine(context.command)

    @property
    def state(self) -> CommandState:
        return self.machine.state

    def register_observer(self, observer: CommandObserver) -> None:
        self.machine.register_observer(observer)

    @abstractmethod
    def start(self) -> None:
        """Begin the interaction. Called once, on the event loop."""

    @abstractmethod
    def cancel(self) -> None:
        """External interruption (Ctrl+C): end the command without error."""


class DeviceCommand(Command):
    """Orchestrator that drives exactly one device handle."""

    def __init__(self, context: CommandContext, transport: Transport, config: AppConfig):
        super().__init__(context, transport, config)
        self.device: DeviceHandle | None = None
        self.launcher = ApplicationLauncher(self.scheduler, config.operation_timeout)
        self.sessions = SessionManager(self.scheduler, config.operation_timeout)
        self.dispatcher = MessageDispatcher()
        self._device_stopped = False
        self._connect_deadline: Deadline | None = None

    def start(self) -> None:
        self.machine.transition(CommandState.CONNECTING)
        logger.info(f"Connecting to {self.context.target}")
        self.device = self.transport.connect(self.context.host, self.context.port, reconnect=False)
        self.device.register_observer(self)
        self._connect_deadline = Deadline(
            self.scheduler, self.config.operation_timeout, self._connect_timed_out
        )

    def cancel(self) -> None:
        if not self.machine.is_terminal:
            logger.info(f"{self.context.command} interrupted")
            self.machine.transition(CommandState.DONE)
        self.stop_device()

    # Device events

    def on_device_event(self, event: DeviceEvent, detail: Any = None) -> None:
        if self.machine.is_terminal:
            logger.debug(f"Ignoring {event.value} after {self.state.value}")
            return

        if event == DeviceEvent.CONNECTED:
            self._cancel_deadline()
            self.machine.transition(CommandState.CONNECTED)
            logger.debug(f"Connected to {self.context.target}")
            self.machine.transition(CommandState.WORKING)
            self.guarded(self.on_connected)
        elif event == DeviceEvent.ERROR:
            self._cancel_deadline()
            self.fail(DeviceConnectionError(self.context.host, self.context.port, detail))
        elif event == DeviceEvent.DISCONNECTED:
            self.fail(DeviceDisconnectedError(self.context.host, self.context.port))
        elif event == DeviceEvent.MESSAGE:
            self.guarded(self.on_device_message, detail)

    @abstractmethod
    def on_connected(self) -> None:
        """Run the command's work. The device is CONNECTED, state is WORKING."""

    def on_device_message(self, message: Any) -> None:
        """Raw sessionless receiver message. Ignored unless a command watches them."""
        logger.debug(f"Device message: {message!r}")

    # Completion

    def step(self, future: Future, on_result: Callable[[Any], None]) -> None:
        """
        Continue with ``on_result(value)`` when ``future`` succeeds.

        A failure ends the command through fail(). Nothing runs once the
        command is terminal.
        """

        def done(f: Future) -> None:
            if self.machine.is_terminal:
                return
            error = f.exception()
            if error is None:
                self.guarded(on_result, f.result())
            elif isinstance(error, CommandError):
                self.fail(error)
            else:
                self.fail(self._unexpected(error))

        future.add_done_callback(done)

    def guarded(self, action: Callable[..., Any], *args: Any) -> None:
        """
        Run ``action(*args)`` on behalf of this command.

        Future callbacks and observer notifications discard what they raise,
        so anything ``action`` raises is turned into fail() here.
        """
        try:
            action(*args)
        except CommandError as e:
            self.fail(e)
        except Exception as e:
            self.fail(self._unexpected(e))

    def listen(self, session: ManagedSession, handler: Callable[[Any], None]) -> None:
        """Route inbound messages on ``session`` to ``handler`` through guarded()."""
        self.dispatcher.on_message(session, lambda message: self.guarded(handler, message))

    def _unexpected(self, error: BaseException) -> CommandError:
        logger.error(f"Unexpected error in {self.context.command}: {error}", exc_info=error)
        return CommandError(f"Unexpected error: {error}", host=self.context.host)

    def finish(self) -> None:
        """Successful end: DONE, then stop the device."""
        if self.machine.is_terminal:
            return
        self.machine.transition(CommandState.DONE)
        logger.debug(f"{self.context.command} finished")
        self.stop_device()

    def fail(self, error: CommandError) -> None:
        """Failed end: log, FAILED, then stop the device."""
        if self.machine.is_terminal:
            logger.debug(f"Ignoring error after {self.state.value}: {error.technical_message}")
            return
        logger.error(error.user_message)
        if error.technical_message != error.user_message:
            logger.debug(error.technical_message)
        self.machine.transition(CommandState.FAILED)
        self.stop_device()

    def stop_device(self) -> None:
        """Stop the device handle. Only the first call reaches the handle."""
        self._cancel_deadline()
        if self._device_stopped:
            return
        self._device_stopped = True
        if self.device is not None:
            self.device.stop()

    def _cancel_deadline(self) -> None:
        if self._connect_deadline is not None:
            self._connect_deadline.cancel()
            self._connect_deadline = None

    def _connect_timed_out(self) -> None:
        if self.state == CommandState.CONNECTING:
            self.fail(OperationTimeoutError(f"connect to {self.context.target}", self.config.operation_timeout))
