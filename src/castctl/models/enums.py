"""Enumerations for castctl."""

from enum import Enum


class ConnectionState(str, Enum):
    """Connection state of a device handle, driven by the transport."""

    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    ERRORED = "errored"


class CommandState(str, Enum):
    """Lifecycle of one command invocation."""

    INIT = "init"
    CONNECTING = "connecting"
    CONNECTED = "connected"
    WORKING = "working"
    DONE = "done"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (CommandState.DONE, CommandState.FAILED)
