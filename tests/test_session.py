"""Tests for the application launcher, session manager and message dispatcher."""

import pytest

from castctl.exceptions import (
    ApplicationNotFoundError,
    DeviceNotConnectedError,
    OperationTimeoutError,
    SendFailedError,
    SessionNotFoundError,
    SessionStartError,
    SessionStateError,
)
from castctl.session import (
    ApplicationInstance,
    ApplicationLauncher,
    ManagedSession,
    MessageDispatcher,
    SessionManager,
)

from tests.fakes import FakeApplication, FakeDevice, FakeSession


@pytest.fixture
def device():
    device = FakeDevice("192.0.2.1", 8009)
    device.connect_ok()
    return device


@pytest.fixture
def app(device):
    app = FakeApplication("CC1AD845")
    device.applications[app.app_id] = app
    return app


@pytest.fixture
def instance(device, app):
    return ApplicationInstance(device, app)


@pytest.mark.unit
class TestApplicationLauncher:

    def test_resolve(self, scheduler, device, app):
        future = ApplicationLauncher(scheduler).resolve(device, "CC1AD845")

        instance = future.result()
        assert isinstance(instance, ApplicationInstance)
        assert instance.app_id == "CC1AD845"
        assert instance.device is device
        assert instance.session is None
        assert instance.valid

    def test_unknown_application(self, scheduler, device):
        future = ApplicationLauncher(scheduler).resolve(device, "DEADBEEF")

        error = future.exception()
        assert isinstance(error, ApplicationNotFoundError)
        assert error.app_id == "DEADBEEF"
        assert "not available" in error.reason

    def test_requires_connected_device(self, scheduler):
        device = FakeDevice("192.0.2.1", 8009)
        with pytest.raises(DeviceNotConnectedError):
            ApplicationLauncher(scheduler).resolve(device, "CC1AD845")
        assert device.application_requests == []

    def test_no_timeout_by_default(self, scheduler, device):
        device.pending_application = True
        future = ApplicationLauncher(scheduler).resolve(device, "CC1AD845")

        scheduler.advance(3600)

        assert not future.done()

    def test_configured_timeout(self, scheduler, device):
        device.pending_application = True
        future = ApplicationLauncher(scheduler, timeout=5).resolve(device, "CC1AD845")

        scheduler.advance(5)

        assert isinstance(future.exception(), OperationTimeoutError)

    def test_instance_invalid_after_device_stops(self, device, app):
        instance = ApplicationInstance(device, app)
        device.stop()
        assert not instance.valid


@pytest.mark.unit
class TestSessionManager:

    def test_run_with_namespace(self, scheduler, instance, app):
        session = SessionManager(scheduler).run(instance, "urn:x-cast:test").result()

        assert isinstance(session, ManagedSession)
        assert session.namespace == "urn:x-cast:test"
        assert instance.session is session
        assert app.runs == ["urn:x-cast:test"]

    def test_run_without_namespace(self, scheduler, instance, app):
        session = SessionManager(scheduler).run(instance, None).result()
        assert session.namespace is None
        assert app.runs == [None]

    def test_run_failure(self, scheduler, device):
        app = FakeApplication("CC1AD845", run_error=RuntimeError("launch refused"))
        instance = ApplicationInstance(device, app)

        error = SessionManager(scheduler).run(instance, "urn:x-cast:test").exception()

        assert isinstance(error, SessionStartError)
        assert error.reason == "launch refused"
        assert instance.session is None

    def test_join(self, scheduler, instance, app):
        session = SessionManager(scheduler).join(instance, "urn:x-cast:game").result()
        assert session.namespace == "urn:x-cast:game"
        assert app.joins == ["urn:x-cast:game"]

    def test_join_failure(self, scheduler, device):
        app = FakeApplication("CC1AD845", join_error=LookupError("no session"))
        instance = ApplicationInstance(device, app)

        error = SessionManager(scheduler).join(instance, "urn:x-cast:game").exception()

        assert isinstance(error, SessionNotFoundError)
        assert error.namespace == "urn:x-cast:game"

    def test_join_timeout(self, scheduler, device):
        app = FakeApplication("CC1AD845", pending=True)
        instance = ApplicationInstance(device, app)
        future = SessionManager(scheduler, timeout=2).join(instance, "urn:x-cast:game")

        scheduler.advance(2)

        assert isinstance(future.exception(), OperationTimeoutError)

    def test_run_has_no_timeout(self, scheduler, device):
        app = FakeApplication("CC1AD845", pending=True)
        instance = ApplicationInstance(device, app)
        future = SessionManager(scheduler, timeout=2).run(instance, "urn:x-cast:test")

        scheduler.advance(60)

        assert not future.done()

    @pytest.mark.parametrize("second", ["run", "join"])
    def test_only_one_session_per_instance(self, scheduler, instance, second):
        manager = SessionManager(scheduler)
        manager.run(instance, "urn:x-cast:test")

        with pytest.raises(SessionStateError):
            getattr(manager, second)(instance, "urn:x-cast:test")

    def test_stop_is_idempotent(self, scheduler, instance, app):
        session = SessionManager(scheduler).run(instance, "urn:x-cast:test").result()

        session.stop()
        session.stop()

        assert app.session.stop_calls == 1
        assert not session.valid
        assert instance.session is None

    def test_session_invalid_when_device_stops(self, scheduler, device, instance):
        session = SessionManager(scheduler).run(instance, "urn:x-cast:test").result()
        device.stop()
        assert not session.valid


@pytest.mark.unit
class TestMessageDispatcher:

    @pytest.fixture
    def session(self, device, app, instance):
        channel = FakeSession("urn:x-cast:test")
        managed = ManagedSession(instance, channel)
        instance.session = managed
        return managed

    def test_send(self, session):
        callbacks = []
        future = MessageDispatcher().send(session, {"hello": 1}, callback=callbacks.append)

        assert future.result() is True
        assert session.channel.sent == [{"hello": 1}]
        assert callbacks == [future]

    def test_send_failure(self, session):
        session.channel.send_error = RuntimeError("socket closed")

        error = MessageDispatcher().send(session, "text").exception()

        assert isinstance(error, SendFailedError)
        assert error.reason == "socket closed"

    def test_send_on_stopped_session(self, session):
        session.stop()

        error = MessageDispatcher().send(session, "text").exception()

        assert isinstance(error, SendFailedError)
        assert session.channel.sent == []

    def test_every_handler_gets_every_message_in_order(self, session):
        dispatcher = MessageDispatcher()
        first, second = [], []
        dispatcher.on_message(session, first.append)
        dispatcher.on_message(session, second.append)

        for n in range(5):
            session.channel.deliver({"n": n})

        expected = [{"n": n} for n in range(5)]
        assert first == expected
        assert second == expected
        # one transport listener regardless of the number of handlers
        assert len(session.channel.listeners) == 1

    def test_failing_handler_does_not_stop_delivery(self, session):
        dispatcher = MessageDispatcher()
        received = []

        def broken(message):
            raise RuntimeError("handler bug")

        dispatcher.on_message(session, broken)
        dispatcher.on_message(session, received.append)
        session.channel.deliver("ping")

        assert received == ["ping"]

    def test_messages_dropped_after_stop(self, session):
        dispatcher = MessageDispatcher()
        received = []
        dispatcher.on_message(session, received.append)

        session.stop()
        session.channel.deliver("late")

        assert received == []
