"""Errors raised while a command talks to a device.

Every error in this module is fatal to the current command: the
orchestrator logs it and stops the device handle. None of them is retried.
"""

from typing import Optional

from .base import CastCtlError


class CommandError(CastCtlError):
    """A step of a device command failed."""

    def __init__(self, user_message: str, host: Optional[str] = None, **kwargs):
        super().__init__(user_message, **kwargs)
        self.host = host


class DeviceConnectionError(CommandError):
    """The transport failed to connect to the device."""

    def __init__(self, host: str, port: int, cause: Optional[str] = None):
        """
        Initialize connection error.

        Args:
            host: Device address
            port: Device port
            cause: Human-readable reason reported by the transport
        """
        user_msg = f"Could not connect to {host}:{port}"
        if cause:
            user_msg += f": {cause}"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Connection to {host}:{port} failed (cause={cause!r})",
            host=host,
            recovery_hint=(
                "Check that the device is powered on and reachable. "
                "Run 'castctl discover' to list devices on the network."
            ),
        )
        self.port = port
        self.cause = cause


class DeviceDisconnectedError(CommandError):
    """An established connection to the device was lost."""

    def __init__(self, host: str, port: int):
        super().__init__(
            user_message=f"Lost connection to {host}:{port}",
            host=host,
        )
        self.port = port


class OperationTimeoutError(CommandError):
    """A connect, resolve or join step did not finish in time."""

    def __init__(self, operation: str, timeout: float):
        super().__init__(
            user_message=f"Timed out after {timeout:g}s waiting to {operation}",
            recovery_hint="Raise 'operation_timeout' in the configuration, or set it to null to wait forever",
        )
        self.operation = operation
        self.timeout = timeout


class ApplicationNotFoundError(CommandError):
    """The device has no such application available or launchable."""

    def __init__(self, app_id: str, reason: Optional[str] = None):
        user_msg = f"Application '{app_id}' is not available on this device"
        super().__init__(
            user_message=user_msg,
            technical_message=f"{user_msg} (reason={reason!r})",
            recovery_hint="Check the application id. Unpublished receivers only run on registered devices.",
        )
        self.app_id = app_id
        self.reason = reason


class SessionStartError(CommandError):
    """A new session could not be started."""

    def __init__(self, app_id: str, namespace: Optional[str], reason: Optional[str] = None):
        where = f"'{app_id}'" if namespace is None else f"'{app_id}' on namespace '{namespace}'"
        user_msg = f"Failed to start a session for {where}"
        if reason:
            user_msg += f": {reason}"
        super().__init__(user_message=user_msg)
        self.app_id = app_id
        self.namespace = namespace
        self.reason = reason


class SessionNotFoundError(CommandError):
    """No running session matches the requested application and namespace."""

    def __init__(self, app_id: str, namespace: str):
        super().__init__(
            user_message=f"No running session of '{app_id}' on namespace '{namespace}'",
            recovery_hint="Start the receiver application first, e.g. with 'castctl run'.",
        )
        self.app_id = app_id
        self.namespace = namespace


class SendFailedError(CommandError):
    """A message could not be delivered on the session channel."""

    def __init__(self, namespace: Optional[str], reason: Optional[str] = None):
        user_msg = f"Failed to send message on '{namespace}'"
        if reason:
            user_msg += f": {reason}"
        super().__init__(user_message=user_msg)
        self.namespace = namespace
        self.reason = reason


class ProtocolError(CommandError):
    """The receiver application reported an error of its own."""

    def __init__(self, message: str, payload: Optional[dict] = None):
        super().__init__(
            user_message=f"Receiver reported an error: {message}",
            technical_message=f"Receiver error payload: {payload!r}",
        )
        self.payload = payload
