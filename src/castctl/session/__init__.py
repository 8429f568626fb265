"""Application, session and message layer on top of the transport."""

from .dispatcher import MessageDispatcher
from .launcher import ApplicationInstance, ApplicationLauncher
from .manager import ManagedSession, SessionManager

__all__ = [
    "ApplicationInstance",
    "ApplicationLauncher",
    "ManagedSession",
    "MessageDispatcher",
    "SessionManager",
]
