"""Observer protocol definitions.

- Device observers: react to a device handle's lifecycle and raw messages
- Presence observers: react to devices appearing/disappearing on the network
- Command observers: react to command state changes
"""

from typing import TYPE_CHECKING, Any, Protocol, runtime_checkable

if TYPE_CHECKING:
    from castctl.models import CommandState, DeviceInfo

from .events import DeviceEvent, PresenceEvent


@runtime_checkable
class DeviceObserver(Protocol):
    """Observer that receives events from one device handle."""

    def on_device_event(self, event: DeviceEvent, detail: Any = None) -> None:
        """
        Handle a device event.

        Args:
            event: CONNECTED, ERROR, DISCONNECTED or MESSAGE
            detail: Error cause (ERROR) or the raw message (MESSAGE)

        Note:
            Delivered on the event loop thread, in arrival order.
        """
        ...


@runtime_checkable
class PresenceObserver(Protocol):
    """Observer that receives discovery events."""

    def on_presence_event(self, event: PresenceEvent, device: "DeviceInfo") -> None:
        """
        Handle a device coming online or going offline.

        Args:
            event: ONLINE or OFFLINE
            device: The device the event is about
        """
        ...


@runtime_checkable
class CommandObserver(Protocol):
    """Observer that receives command state transitions."""

    def on_command_state(
        self, command: str, previous: "CommandState", current: "CommandState"
    ) -> None:
        """Handle a state transition of ``command``."""
        ...
