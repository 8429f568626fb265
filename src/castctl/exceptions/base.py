"""Root of the castctl exception tree."""

from typing import Optional


class CastCtlError(Exception):
    """
    An error castctl knows how to report.

    ``str(error)`` is the one-line message shown on the terminal. The CLI
    prints ``recovery_hint`` underneath it when there is one; the log gets
    ``technical_message``, which may carry pychromecast or pydantic detail
    the user does not need to see.

    ``recoverable`` marks errors the user can fix without touching the
    device, such as a broken configuration file. Command errors are never
    recoverable: the command has already stopped the device.
    """

    def __init__(
        self,
        user_message: str,
        technical_message: Optional[str] = None,
        recoverable: bool = False,
        recovery_hint: Optional[str] = None,
    ):
        super().__init__(user_message)
        self.user_message = user_message
        self.technical_message = technical_message or user_message
        self.recoverable = recoverable
        self.recovery_hint = recovery_hint

    def __str__(self) -> str:
        return self.user_message
