"""Runs one command on the event loop until it ends or is interrupted."""

import logging

from castctl.models import CommandState
from castctl.orchestration.base import Command
from castctl.transport.loop import EventLoop

logger = logging.getLogger(__name__)


class CommandRunner:
    """
    Drives a command on an EventLoop.

    The loop stops when the command reaches DONE or FAILED. Commands that run
    indefinitely (discover, watch) end on Ctrl+C, which cancels them.
    """

    def __init__(self, loop: EventLoop):
        self._loop = loop

    def run(self, command: Command) -> CommandState:
        """
        Start ``command`` and block until it is over.

        Returns:
            The final command state
        """
        command.register_observer(self)
        self._loop.call_soon(command.start)
        try:
            self._loop.run()
        except KeyboardInterrupt:
            logger.info("Interrupted by user")
            command.cancel()
        finally:
            # An error escaping the loop must still release the device
            if not command.state.is_terminal:
                command.cancel()
        return command.state

    def on_command_state(self, command: str, previous: CommandState, current: CommandState) -> None:
        if current.is_terminal:
            logger.debug(f"{command} ended in {current.value}")
            self._loop.stop()
