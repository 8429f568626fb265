"""Tests for the EventLoop and CommandRunner."""

import threading
import time

import pytest

from castctl.models import CommandContext, CommandState
from castctl.orchestration import Command, CommandRunner
from castctl.transport import EventLoop

from tests.fakes import FakeTransport


def run_briefly(loop: EventLoop, timeout: float = 2.0) -> None:
    """Run the loop, stopping it from a watchdog if a test hangs."""
    watchdog = threading.Timer(timeout, loop.stop)
    watchdog.start()
    try:
        loop.run()
    finally:
        watchdog.cancel()


@pytest.mark.unit
class TestEventLoop:

    def test_callbacks_run_in_order(self):
        loop = EventLoop(poll_interval=0.01)
        calls = []
        for n in range(5):
            loop.call_soon(calls.append, n)
        loop.call_soon(loop.stop)

        run_briefly(loop)

        assert calls == [0, 1, 2, 3, 4]
        assert not loop.running

    def test_callbacks_from_other_threads_run_on_loop_thread(self):
        loop = EventLoop(poll_interval=0.01)
        seen = []

        def record():
            seen.append(threading.current_thread())
            loop.stop()

        threading.Thread(target=loop.call_soon, args=(record,)).start()
        run_briefly(loop)

        assert seen == [threading.current_thread()]

    def test_call_later(self):
        loop = EventLoop(poll_interval=0.01)
        fired = []
        started = time.monotonic()
        loop.call_later(0.05, lambda: (fired.append(time.monotonic() - started), loop.stop()))

        run_briefly(loop)

        assert len(fired) == 1
        assert fired[0] >= 0.05

    def test_cancelled_timer_never_fires(self):
        loop = EventLoop(poll_interval=0.01)
        fired = []
        timer = loop.call_later(0.02, fired.append, "late")
        timer.cancel()
        loop.call_later(0.1, loop.stop)

        run_briefly(loop)

        assert fired == []

    def test_cancelled_timers_are_released(self):
        loop = EventLoop(poll_interval=0.01)
        for _ in range(100):
            loop.call_later(60, loop.stop).cancel()

        assert len(loop._timers) == 0

    def test_fired_timer_is_released_before_its_callback(self):
        loop = EventLoop(poll_interval=0.01)
        pending = []
        loop.call_later(0.01, lambda: (pending.append(len(loop._timers)), loop.stop()))

        run_briefly(loop)

        assert pending == [0]


class _ScriptedCommand(Command):
    """Command whose start() runs a given script."""

    def __init__(self, script, **kwargs):
        super().__init__(CommandContext(command="scripted"), FakeTransport(), **kwargs)
        self.script = script
        self.cancelled = 0

    def start(self):
        self.script(self)

    def cancel(self):
        self.cancelled += 1
        if not self.machine.is_terminal:
            self.machine.transition(CommandState.DONE)


@pytest.mark.unit
class TestCommandRunner:

    def test_returns_when_command_finishes(self, config):
        def script(command):
            command.machine.transition(CommandState.WORKING)
            command.machine.transition(CommandState.DONE)

        command = _ScriptedCommand(script, config=config)
        loop = EventLoop(poll_interval=0.01)

        assert CommandRunner(loop).run(command) == CommandState.DONE
        assert not loop.running

    def test_failed_state_is_returned(self, config):
        def script(command):
            command.machine.transition(CommandState.FAILED)

        command = _ScriptedCommand(script, config=config)

        assert CommandRunner(EventLoop(poll_interval=0.01)).run(command) == CommandState.FAILED

    def test_interrupt_cancels_command(self, config):
        def script(command):
            command.machine.transition(CommandState.WORKING)
            raise KeyboardInterrupt

        command = _ScriptedCommand(script, config=config)

        assert CommandRunner(EventLoop(poll_interval=0.01)).run(command) == CommandState.DONE
        assert command.cancelled == 1

    def test_error_escaping_the_loop_cancels_command(self, config):
        def script(command):
            command.machine.transition(CommandState.WORKING)
            raise RuntimeError("loop callback crashed")

        command = _ScriptedCommand(script, config=config)

        with pytest.raises(RuntimeError):
            CommandRunner(EventLoop(poll_interval=0.01)).run(command)

        assert command.cancelled == 1
        assert command.state == CommandState.DONE

    def test_finished_command_is_not_cancelled(self, config):
        def script(command):
            command.machine.transition(CommandState.WORKING)
            command.machine.transition(CommandState.DONE)

        command = _ScriptedCommand(script, config=config)
        CommandRunner(EventLoop(poll_interval=0.01)).run(command)

        assert command.cancelled == 0
