"""Transport layer: device connections, discovery and the event loop.

The pychromecast-backed implementation lives in
``castctl.transport.chromecast`` and is imported by the CLI on demand.
"""

from .loop import EventLoop
from .protocols import (
    Application,
    Cancellable,
    DeviceHandle,
    DeviceScanner,
    Scheduler,
    Session,
    Transport,
)

__all__ = [
    "Application",
    "Cancellable",
    "DeviceHandle",
    "DeviceScanner",
    "EventLoop",
    "Scheduler",
    "Session",
    "Transport",
]
