"""In-memory stand-ins for the transport layer.

Futures are completed synchronously and timers only fire when a test calls
``FakeScheduler.advance()``, so orchestrator tests run without threads.
"""

from concurrent.futures import Future
from typing import Any

from castctl.models import ConnectionState, DeviceInfo
from castctl.protocols import DeviceEvent, PresenceEvent


def resolved(value: Any) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future


def rejected(error: BaseException) -> Future:
    future: Future = Future()
    future.set_exception(error)
    return future


class FakeTimer:
    def __init__(self, when: float, callback, args: tuple):
        self.when = when
        self.callback = callback
        self.args = args
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class FakeScheduler:
    """Manual clock: call_soon runs inline, call_later waits for advance()."""

    def __init__(self):
        self.now = 0.0
        self.timers: list[FakeTimer] = []

    def call_soon(self, callback, *args) -> None:
        callback(*args)

    def call_later(self, delay: float, callback, *args) -> FakeTimer:
        timer = FakeTimer(self.now + delay, callback, args)
        self.timers.append(timer)
        return timer

    @property
    def pending(self) -> list[FakeTimer]:
        return [t for t in self.timers if not t.cancelled]

    def advance(self, seconds: float) -> None:
        self.now += seconds
        for timer in sorted(self.pending, key=lambda t: t.when):
            if timer.when <= self.now and not timer.cancelled:
                self.timers.remove(timer)
                timer.callback(*timer.args)


class FakeSession:
    def __init__(self, namespace: str | None, auto_ack: bool = True, send_error: Exception | None = None):
        self.namespace = namespace
        self.auto_ack = auto_ack
        self.send_error = send_error
        self.sent: list[Any] = []
        self.acks: list[Future] = []
        self.listeners = []
        self.stop_calls = 0

    def send(self, payload: Any) -> Future:
        self.sent.append(payload)
        if self.send_error is not None:
            return rejected(self.send_error)
        future: Future = Future()
        if self.auto_ack:
            future.set_result(True)
        else:
            self.acks.append(future)
        return future

    def add_listener(self, listener) -> None:
        self.listeners.append(listener)

    def deliver(self, message: Any) -> None:
        for listener in list(self.listeners):
            listener(message)

    def stop(self) -> None:
        self.stop_calls += 1


class FakeApplication:
    def __init__(
        self,
        app_id: str,
        run_error: Exception | None = None,
        join_error: Exception | None = None,
        pending: bool = False,
        auto_ack: bool = True,
        send_error: Exception | None = None,
    ):
        self.app_id = app_id
        self.send_error = send_error
        self.run_error = run_error
        self.join_error = join_error
        self.pending = pending
        self.auto_ack = auto_ack
        self.runs: list[str | None] = []
        self.joins: list[str] = []
        self.sessions: list[FakeSession] = []
        self.futures: list[Future] = []

    def _open(self, namespace: str | None, error: Exception | None) -> Future:
        if error is not None:
            return rejected(error)
        session = FakeSession(namespace, auto_ack=self.auto_ack, send_error=self.send_error)
        self.sessions.append(session)
        future: Future = Future()
        if self.pending:
            self.futures.append(future)
        else:
            future.set_result(session)
        return future

    def run(self, namespace: str | None) -> Future:
        self.runs.append(namespace)
        return self._open(namespace, self.run_error)

    def join(self, namespace: str) -> Future:
        self.joins.append(namespace)
        return self._open(namespace, self.join_error)

    @property
    def session(self) -> FakeSession:
        return self.sessions[-1]


class FakeDevice:
    """Device handle that only changes state when a test tells it to."""

    def __init__(self, host: str, port: int, reconnect: bool = False):
        self.host = host
        self.port = port
        self.reconnect = reconnect
        self._state = ConnectionState.CONNECTING
        self.observers = []
        self.stop_calls = 0
        self.status_result: Any = {"app_id": None, "display_name": "Backdrop"}
        self.status_error: Exception | None = None
        self.status_calls = 0
        self.applications: dict[str, FakeApplication] = {}
        self.application_requests: list[str] = []
        self.pending_application = False
        self.application_futures: list[Future] = []

    @property
    def state(self) -> ConnectionState:
        return self._state

    def register_observer(self, observer) -> None:
        self.observers.append(observer)

    def emit(self, event: DeviceEvent, detail: Any = None) -> None:
        if self.stop_calls:
            return
        for observer in list(self.observers):
            observer.on_device_event(event, detail)

    def connect_ok(self) -> None:
        self._state = ConnectionState.CONNECTED
        self.emit(DeviceEvent.CONNECTED)

    def connect_fail(self, reason: str = "connection refused") -> None:
        self._state = ConnectionState.ERRORED
        self.emit(DeviceEvent.ERROR, reason)

    def drop(self) -> None:
        self._state = ConnectionState.DISCONNECTED
        self.emit(DeviceEvent.DISCONNECTED)

    def message(self, payload: Any) -> None:
        self.emit(DeviceEvent.MESSAGE, payload)

    def status(self) -> Future:
        self.status_calls += 1
        if self.status_error is not None:
            return rejected(self.status_error)
        return resolved(self.status_result)

    def application(self, app_id: str) -> Future:
        self.application_requests.append(app_id)
        if self.pending_application:
            future: Future = Future()
            self.application_futures.append(future)
            return future
        if app_id not in self.applications:
            return rejected(LookupError(f"{app_id} is not available"))
        return resolved(self.applications[app_id])

    def stop(self) -> None:
        self.stop_calls += 1
        self._state = ConnectionState.DISCONNECTED

    @property
    def operations(self) -> int:
        """Device operations issued so far (status and application requests)."""
        return self.status_calls + len(self.application_requests)


class FakeScanner:
    def __init__(self):
        self.observers = []
        self.started = False
        self.stop_calls = 0

    def register_observer(self, observer) -> None:
        self.observers.append(observer)

    def start(self) -> None:
        self.started = True

    def stop(self) -> None:
        self.stop_calls += 1

    def announce(self, event: PresenceEvent, device: DeviceInfo) -> None:
        for observer in list(self.observers):
            observer.on_presence_event(event, device)


class FakeTransport:
    """
    Transport that hands out FakeDevice handles.

    ``applications`` are installed on every device at connect time.
    """

    def __init__(self, scheduler: FakeScheduler | None = None):
        self.scheduler = scheduler or FakeScheduler()
        self.applications: dict[str, FakeApplication] = {}
        self.devices: list[FakeDevice] = []
        self.fake_scanner = FakeScanner()

    def add_application(self, app: FakeApplication) -> FakeApplication:
        self.applications[app.app_id] = app
        return app

    def connect(self, host: str, port: int, reconnect: bool = False) -> FakeDevice:
        device = FakeDevice(host, port, reconnect)
        device.applications = dict(self.applications)
        self.devices.append(device)
        return device

    def scanner(self) -> FakeScanner:
        return self.fake_scanner

    @property
    def device(self) -> FakeDevice:
        return self.devices[-1]
