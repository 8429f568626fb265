"""State machine shared by every command orchestrator."""

import logging

from castctl.core.observer import ObserverManager
from castctl.exceptions import CommandStateError
from castctl.models import CommandState
from castctl.protocols import CommandObserver

logger = logging.getLogger(__name__)

_TRANSITIONS: dict[CommandState, frozenset[CommandState]] = {
    CommandState.INIT: frozenset({CommandState.CONNECTING, CommandState.WORKING, CommandState.FAILED}),
    CommandState.CONNECTING: frozenset({CommandState.CONNECTED, CommandState.FAILED, CommandState.DONE}),
    CommandState.CONNECTED: frozenset({CommandState.WORKING, CommandState.FAILED, CommandState.DONE}),
    CommandState.WORKING: frozenset({CommandState.DONE, CommandState.FAILED}),
    CommandState.DONE: frozenset(),
    CommandState.FAILED: frozenset(),
}


class CommandStateMachine:
    """
    Tracks the state of one command invocation.

    ::

        INIT → CONNECTING → CONNECTED → WORKING → DONE
                    │            │          └──→ FAILED
                    └────────────┴──→ FAILED / DONE

    ``CONNECTING → CONNECTED`` is driven by the device handle; every other
    transition is made by orchestrator logic. Commands without a device
    (discover) go straight from INIT to WORKING. DONE from CONNECTING
    covers an interrupt before the device answered.

    Terminal states are final. Invalid transitions raise CommandStateError.
    """

    def __init__(self, command: str) -> None:
        self.command = command
        self._state = CommandState.INIT
        self._observers = ObserverManager[CommandObserver](observer_type_name="command")

    @property
    def state(self) -> CommandState:
        return self._state

    @property
    def is_terminal(self) -> bool:
        return self._state.is_terminal

    def register_observer(self, observer: CommandObserver) -> None:
        self._observers.register(observer)

    def unregister_observer(self, observer: CommandObserver) -> None:
        self._observers.unregister(observer)

    def can_transition(self, target: CommandState) -> bool:
        return target in _TRANSITIONS[self._state]

    def transition(self, target: CommandState) -> None:
        """
        Move to ``target`` and notify observers.

        Raises:
            CommandStateError: If the transition is not allowed
        """
        if not self.can_transition(target):
            raise CommandStateError(self.command, self._state.value, target.value)

        previous = self._state
        self._state = target
        logger.debug(f"{self.command}: {previous.value} -> {target.value}")
        self._observers.notify("on_command_state", self.command, previous, target)
