"""Event enums shared between the transport and the orchestrators."""

from enum import Enum


class DeviceEvent(str, Enum):
    """Lifecycle and message events emitted by a device handle."""

    CONNECTED = "connected"
    ERROR = "error"  # detail: human-readable cause
    DISCONNECTED = "disconnected"  # connection lost after CONNECTED
    MESSAGE = "message"  # detail: raw sessionless receiver message


class PresenceEvent(str, Enum):
    """Device presence events from discovery."""

    ONLINE = "online"
    OFFLINE = "offline"
