"""Tests for ObserverManager."""

from unittest.mock import Mock

import pytest

from castctl.core.observer import ObserverManager
from castctl.models import DeviceInfo
from castctl.protocols import PresenceEvent, PresenceObserver


@pytest.mark.unit
class TestObserverManager:

    def test_notify_in_registration_order(self):
        calls = []
        manager = ObserverManager[PresenceObserver](observer_type_name="presence")

        class Recorder:
            def __init__(self, name):
                self.name = name

            def on_presence_event(self, event, device):
                calls.append((self.name, event))

        manager.register(Recorder("first"))
        manager.register(Recorder("second"))
        manager.notify("on_presence_event", PresenceEvent.ONLINE, DeviceInfo(name="tv", host="192.0.2.1", uuid="uuid-1"))

        assert calls == [("first", PresenceEvent.ONLINE), ("second", PresenceEvent.ONLINE)]

    def test_register_is_idempotent(self):
        manager = ObserverManager[PresenceObserver]()
        observer = Mock(spec=PresenceObserver)

        manager.register(observer)
        manager.register(observer)

        assert len(manager) == 1
        assert observer in manager

    def test_failing_observer_does_not_block_others(self):
        manager = ObserverManager[PresenceObserver]()
        broken = Mock(spec=PresenceObserver)
        broken.on_presence_event.side_effect = RuntimeError("boom")
        healthy = Mock(spec=PresenceObserver)
        manager.register(broken)
        manager.register(healthy)

        manager.notify("on_presence_event", PresenceEvent.OFFLINE, None)

        healthy.on_presence_event.assert_called_once_with(PresenceEvent.OFFLINE, None)

    def test_missing_callback_is_skipped(self):
        manager = ObserverManager()
        manager.register(object())
        healthy = Mock()
        manager.register(healthy)

        manager.notify("on_presence_event", PresenceEvent.ONLINE, None)

        healthy.on_presence_event.assert_called_once()

    def test_call_invokes_plain_callables(self):
        received = []
        manager = ObserverManager()
        manager.register(received.append)
        manager.register(lambda message: received.append(("again", message)))

        manager.call({"event": "moved"})

        assert received == [{"event": "moved"}, ("again", {"event": "moved"})]

    def test_unregister_and_clear(self):
        manager = ObserverManager()
        first, second = Mock(), Mock()
        manager.register(first)
        manager.register(second)

        manager.unregister(first)
        assert first not in manager
        manager.unregister(first)  # unknown: logged, no error

        manager.clear()
        assert len(manager) == 0
