"""Caller errors.

These signal misuse of the orchestration API (acting before the device is
connected, opening a second session, skipping a state). They propagate
instead of being turned into a failed command.
"""

from .base import CastCtlError


class CommandStateError(CastCtlError):
    """A command tried an invalid state transition."""

    def __init__(self, command: str, current: str, target: str):
        super().__init__(
            user_message=f"Command '{command}' cannot move from {current} to {target}",
        )
        self.command = command
        self.current = current
        self.target = target


class DeviceNotConnectedError(CastCtlError):
    """An operation was issued on a device handle that is not connected."""

    def __init__(self, host: str, state: str):
        super().__init__(
            user_message=f"Device {host} is not connected (state: {state})",
        )
        self.host = host
        self.state = state


class SessionStateError(CastCtlError):
    """A second run/join was issued on the same application instance."""

    def __init__(self, app_id: str, operation: str):
        super().__init__(
            user_message=f"Application '{app_id}' already has a session; cannot {operation} again",
        )
        self.app_id = app_id
        self.operation = operation
