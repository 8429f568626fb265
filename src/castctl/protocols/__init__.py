"""Protocol definitions for castctl's observer patterns."""

from .events import DeviceEvent, PresenceEvent
from .observers import CommandObserver, DeviceObserver, PresenceObserver

__all__ = [
    "CommandObserver",
    # Events
    "DeviceEvent",
    # Observers
    "DeviceObserver",
    "PresenceEvent",
    "PresenceObserver",
]
