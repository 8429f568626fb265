"""Data models for castctl."""

from .config import AppConfig, HelloConfig, TicTacToeConfig, UrlLauncher
from .context import CommandContext
from .device import DeviceInfo
from .enums import CommandState, ConnectionState

__all__ = [
    # Config
    "AppConfig",
    # Models
    "CommandContext",
    # Enums
    "CommandState",
    "ConnectionState",
    "DeviceInfo",
    "HelloConfig",
    "TicTacToeConfig",
    "UrlLauncher",
]
