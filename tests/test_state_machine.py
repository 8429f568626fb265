"""Tests for the command state machine."""

from unittest.mock import Mock

import pytest

from castctl.core.state_machine import CommandStateMachine
from castctl.exceptions import CommandStateError
from castctl.models import CommandState
from castctl.protocols import CommandObserver


@pytest.mark.unit
class TestCommandStateMachine:
    """Test state transitions and observer notification."""

    def test_starts_in_init(self):
        machine = CommandStateMachine("status")
        assert machine.state == CommandState.INIT
        assert not machine.is_terminal

    def test_device_command_path(self):
        """INIT → CONNECTING → CONNECTED → WORKING → DONE."""
        machine = CommandStateMachine("status")
        for state in (
            CommandState.CONNECTING,
            CommandState.CONNECTED,
            CommandState.WORKING,
            CommandState.DONE,
        ):
            machine.transition(state)
        assert machine.state == CommandState.DONE
        assert machine.is_terminal

    def test_discover_skips_connection_states(self):
        machine = CommandStateMachine("discover")
        machine.transition(CommandState.WORKING)
        assert machine.state == CommandState.WORKING

    def test_connect_failure(self):
        machine = CommandStateMachine("status")
        machine.transition(CommandState.CONNECTING)
        machine.transition(CommandState.FAILED)
        assert machine.is_terminal

    def test_cannot_work_before_connected(self):
        machine = CommandStateMachine("status")
        machine.transition(CommandState.CONNECTING)
        with pytest.raises(CommandStateError) as exc_info:
            machine.transition(CommandState.WORKING)
        assert "connecting" in str(exc_info.value).lower()
        assert machine.state == CommandState.CONNECTING

    @pytest.mark.parametrize("terminal", [CommandState.DONE, CommandState.FAILED])
    def test_terminal_states_are_final(self, terminal):
        machine = CommandStateMachine("run")
        machine.transition(CommandState.WORKING)
        machine.transition(terminal)

        for target in CommandState:
            assert not machine.can_transition(target)
        with pytest.raises(CommandStateError):
            machine.transition(CommandState.WORKING)

    def test_observer_notified_with_previous_and_current(self):
        machine = CommandStateMachine("hello")
        observer = Mock(spec=CommandObserver)
        machine.register_observer(observer)

        machine.transition(CommandState.CONNECTING)

        observer.on_command_state.assert_called_once_with(
            "hello", CommandState.INIT, CommandState.CONNECTING
        )

    def test_rejected_transition_does_not_notify(self):
        machine = CommandStateMachine("hello")
        observer = Mock(spec=CommandObserver)
        machine.register_observer(observer)

        with pytest.raises(CommandStateError):
            machine.transition(CommandState.DONE)

        observer.on_command_state.assert_not_called()

    def test_unregistered_observer_not_notified(self):
        machine = CommandStateMachine("hello")
        observer = Mock(spec=CommandObserver)
        machine.register_observer(observer)
        machine.unregister_observer(observer)

        machine.transition(CommandState.CONNECTING)

        observer.on_command_state.assert_not_called()
