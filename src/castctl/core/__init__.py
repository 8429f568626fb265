"""Core building blocks shared by the command orchestrators."""

from .board import choose_move, free_cells, normalize_board
from .observer import ObserverManager
from .state_machine import CommandStateMachine
from .timing import Deadline, with_timeout

__all__ = [
    "CommandStateMachine",
    "Deadline",
    "ObserverManager",
    "choose_move",
    "free_cells",
    "normalize_board",
    "with_timeout",
]
