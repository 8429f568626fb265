"""
Command orchestrators.

Each orchestrator composes device connection, application launch, session
establishment and messaging into one interaction pattern and owns its
termination and error policy.
"""

from .base import Command, DeviceCommand
from .device import DiscoverCommand, StatusCommand, WatchCommand
from .launch import RunCommand, SendCommand
from .runner import CommandRunner
from .tictactoe import TicTacToeCommand

__all__ = [
    "Command",
    "CommandRunner",
    "DeviceCommand",
    "DiscoverCommand",
    "RunCommand",
    "SendCommand",
    "StatusCommand",
    "TicTacToeCommand",
    "WatchCommand",
]
