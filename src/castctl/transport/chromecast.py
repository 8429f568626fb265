"""Transport implementation backed by pychromecast.

pychromecast runs one socket thread per device and calls listeners and
request callbacks from it. Every such callback is forwarded to the
EventLoop with call_soon, so castctl code only ever runs on the loop thread.

Architecture::

    ChromecastTransport
    ├── connect()  → ChromecastDevice      (pychromecast.Chromecast)
    │                 └── application() → ChromecastApplication
    │                                      └── run()/join() → ChromecastSession
    │                                                         (_NamespaceController)
    └── scanner()  → ChromecastScanner     (CastBrowser + zeroconf)
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

import pychromecast
import zeroconf
from pychromecast.controllers import BaseController
from pychromecast.discovery import CastBrowser, SimpleCastListener
from pychromecast.error import PyChromecastError
from pychromecast.socket_client import (
    CONNECTION_STATUS_CONNECTED,
    CONNECTION_STATUS_DISCONNECTED,
    CONNECTION_STATUS_FAILED,
    CONNECTION_STATUS_FAILED_RESOLVE,
    CONNECTION_STATUS_LOST,
)

from castctl.core.observer import ObserverManager
from castctl.exceptions import ApplicationNotFoundError, SessionNotFoundError
from castctl.models import ConnectionState, DeviceInfo
from castctl.protocols import DeviceEvent, DeviceObserver, PresenceEvent, PresenceObserver
from castctl.transport.loop import EventLoop

logger = logging.getLogger(__name__)

APP_AVAILABLE = "APP_AVAILABLE"
DISCONNECT_TIMEOUT = 2.0

_FAILURE_STATUSES = frozenset({
    CONNECTION_STATUS_FAILED,
    CONNECTION_STATUS_FAILED_RESOLVE,
    CONNECTION_STATUS_LOST,
    CONNECTION_STATUS_DISCONNECTED,
})


def _as_dict(status: Any) -> dict[str, Any]:
    """Convert a pychromecast status object (dataclass or NamedTuple) to a dict."""
    if status is None:
        return {}
    if dataclasses.is_dataclass(status):
        return dataclasses.asdict(status)
    if hasattr(status, "_asdict"):
        return dict(status._asdict())
    return dict(status)


class _NamespaceController(BaseController):
    """Forwards every message on one namespace to a callback."""

    def __init__(self, namespace: str, app_id: str, on_message: Callable[[Any], None]):
        super().__init__(namespace, supporting_app_id=app_id)
        self._on_message = on_message

    def receive_message(self, _message, data: dict) -> bool:
        self._on_message(data)
        return True


class ChromecastSession:
    """Session on one namespace of a running application."""

    def __init__(self, device: ChromecastDevice, app_id: str, namespace: str | None):
        self.namespace = namespace
        self.app_id = app_id
        self._device = device
        self._listeners = ObserverManager[Callable[[Any], None]](observer_type_name="session")
        self._controller: _NamespaceController | None = None
        self._stopped = False

        if namespace is not None:
            self._controller = _NamespaceController(
                namespace, app_id, lambda data: device.loop.call_soon(self._deliver, data)
            )
            device.cast.register_handler(self._controller)
        else:
            # Without a namespace the only traffic is receiver status for this app
            device.add_raw_listener(self._deliver_status)

    def send(self, payload: Any) -> Future:
        future: Future = Future()
        if self._controller is None:
            future.set_exception(RuntimeError(f"application '{self.app_id}' was started without a namespace"))
            return future

        def on_sent(msg_sent: bool, _response: Any) -> None:
            if msg_sent:
                self._device.resolve(future, True)
            else:
                self._device.reject(future, RuntimeError("message was not delivered"))

        try:
            self._controller.send_message(payload, no_add_request_id=True, callback_function=on_sent)
        except PyChromecastError as e:
            future.set_exception(e)
        return future

    def add_listener(self, listener: Callable[[Any], None]) -> None:
        self._listeners.register(listener)

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        if self._controller is not None:
            self._device.cast.unregister_handler(self._controller)
        self._listeners.clear()
        logger.debug(f"Session on {self.namespace or self.app_id} closed")

    def _deliver(self, data: Any) -> None:
        if not self._stopped and not self._device.stopped:
            self._listeners.call(data)

    def _deliver_status(self, status: dict[str, Any]) -> None:
        if status.get("app_id") == self.app_id:
            self._deliver(status)


class ChromecastApplication:
    """An application known to be available on a connected device."""

    def __init__(self, device: ChromecastDevice, app_id: str):
        self.app_id = app_id
        self._device = device

    def run(self, namespace: str | None) -> Future:
        future: Future = Future()

        def on_launched(success: bool, response: Any) -> None:
            if success:
                self._device.loop.call_soon(self._open, future, namespace)
            else:
                reason = (response or {}).get("reason", "launch failed")
                self._device.reject(future, RuntimeError(reason))

        self._device.cast.socket_client.receiver_controller.launch_app(
            self.app_id, callback_function=on_launched
        )
        return future

    def join(self, namespace: str) -> Future:
        future: Future = Future()

        def on_status(_sent: bool, _response: Any) -> None:
            self._device.loop.call_soon(self._join_running, future, namespace)

        self._device.cast.socket_client.receiver_controller.update_status(callback_function=on_status)
        return future

    def _open(self, future: Future, namespace: str | None) -> None:
        if not future.done():
            future.set_result(ChromecastSession(self._device, self.app_id, namespace))

    def _join_running(self, future: Future, namespace: str) -> None:
        if future.done():
            return
        status = self._device.cast.status
        running = status is not None and status.app_id == self.app_id
        if running and namespace in (status.namespaces or []):
            future.set_result(ChromecastSession(self._device, self.app_id, namespace))
        else:
            future.set_exception(SessionNotFoundError(self.app_id, namespace))


class ChromecastDevice:
    """Device handle over a pychromecast.Chromecast."""

    def __init__(self, loop: EventLoop, host: str, port: int, reconnect: bool = False):
        self.loop = loop
        self.host = host
        self.port = port
        self.reconnect = reconnect
        self._state = ConnectionState.CONNECTING
        self._stopped = False
        self._observers = ObserverManager[DeviceObserver](observer_type_name="device")
        self._raw_listeners = ObserverManager[Callable[[dict], None]](observer_type_name="raw message")

        self.cast: pychromecast.Chromecast | None = None

        logger.debug(f"Connecting to {host}:{port} (reconnect={reconnect})")
        try:
            self.cast = pychromecast.get_chromecast_from_host(
                (host, port, None, None, None),
                tries=None if reconnect else 1,
            )
            self.cast.register_connection_listener(self)
            self.cast.register_status_listener(self)
            self.cast.start()
        except PyChromecastError as e:
            # Observers register after construction, so report on the next loop turn
            self._state = ConnectionState.ERRORED
            self.loop.call_soon(self._report_error, str(e) or type(e).__name__)

    @property
    def state(self) -> ConnectionState:
        return self._state

    @property
    def stopped(self) -> bool:
        return self._stopped

    def register_observer(self, observer: DeviceObserver) -> None:
        self._observers.register(observer)

    def add_raw_listener(self, listener: Callable[[dict], None]) -> None:
        self._raw_listeners.register(listener)

    def status(self) -> Future:
        future: Future = Future()

        def on_status(sent: bool, response: Any) -> None:
            if not sent:
                self.reject(future, RuntimeError("status request was not delivered"))
            elif response and "status" in response:
                self.resolve(future, response["status"])
            else:
                self.loop.call_soon(self._resolve_cached_status, future)

        self.cast.socket_client.receiver_controller.update_status(callback_function=on_status)
        return future

    def application(self, app_id: str) -> Future:
        future: Future = Future()

        def on_availability(sent: bool, response: Any) -> None:
            availability = ((response or {}).get("availability") or {}).get(app_id)
            if sent and availability == APP_AVAILABLE:
                self.resolve(future, ChromecastApplication(self, app_id))
            else:
                self.reject(future, ApplicationNotFoundError(app_id, availability))

        self.cast.socket_client.receiver_controller.send_message(
            {"type": "GET_APP_AVAILABILITY", "appId": [app_id]},
            callback_function=on_availability,
        )
        return future

    def stop(self) -> None:
        if self._stopped:
            return
        self._stopped = True
        self._observers.clear()
        self._raw_listeners.clear()
        if self.cast is not None:
            try:
                self.cast.disconnect(timeout=DISCONNECT_TIMEOUT)
            except PyChromecastError as e:
                logger.debug(f"Ignoring error while disconnecting from {self.host}: {e}")
        logger.debug(f"Stopped device handle {self.host}:{self.port}")

    def resolve(self, future: Future, value: Any) -> None:
        """Complete ``future`` with ``value`` on the loop thread."""
        self.loop.call_soon(_set_result, future, value)

    def reject(self, future: Future, error: BaseException) -> None:
        """Fail ``future`` with ``error`` on the loop thread."""
        self.loop.call_soon(_set_exception, future, error)

    # pychromecast listener callbacks (socket thread)

    def new_connection_status(self, status) -> None:
        self.loop.call_soon(self._on_connection_status, status.status)

    def new_cast_status(self, status) -> None:
        self.loop.call_soon(self._on_cast_status, _as_dict(status))

    # loop thread

    def _on_connection_status(self, status: str) -> None:
        if self._stopped:
            return

        if status == CONNECTION_STATUS_CONNECTED:
            if self._state == ConnectionState.CONNECTING:
                self._state = ConnectionState.CONNECTED
                self._observers.notify("on_device_event", DeviceEvent.CONNECTED, None)
        elif status in _FAILURE_STATUSES:
            if self._state == ConnectionState.CONNECTING:
                self._report_error(f"connection {status.lower()}")
            elif self._state == ConnectionState.CONNECTED:
                self._state = ConnectionState.DISCONNECTED
                self._observers.notify("on_device_event", DeviceEvent.DISCONNECTED, None)

    def _report_error(self, cause: str) -> None:
        if self._stopped:
            return
        self._state = ConnectionState.ERRORED
        self._observers.notify("on_device_event", DeviceEvent.ERROR, cause)

    def _on_cast_status(self, status: dict[str, Any]) -> None:
        if self._stopped or self._state != ConnectionState.CONNECTED:
            return
        self._observers.notify("on_device_event", DeviceEvent.MESSAGE, status)
        self._raw_listeners.call(status)

    def _resolve_cached_status(self, future: Future) -> None:
        _set_result(future, _as_dict(self.cast.status))


def _set_result(future: Future, value: Any) -> None:
    if not future.done():
        future.set_result(value)


def _set_exception(future: Future, error: BaseException) -> None:
    if not future.done():
        future.set_exception(error)


def _device_info(info: Any) -> DeviceInfo:
    return DeviceInfo(
        name=info.friendly_name or str(info.uuid),
        host=info.host,
        port=info.port,
        uuid=str(info.uuid),
        model_name=info.model_name,
        cast_type=info.cast_type,
        manufacturer=info.manufacturer,
    )


class ChromecastScanner:
    """mDNS discovery of Cast devices."""

    def __init__(self, loop: EventLoop):
        self._loop = loop
        self._observers = ObserverManager[PresenceObserver](observer_type_name="presence")
        self._zeroconf: zeroconf.Zeroconf | None = None
        self._browser: CastBrowser | None = None

    def register_observer(self, observer: PresenceObserver) -> None:
        self._observers.register(observer)

    def start(self) -> None:
        if self._browser is not None:
            logger.warning("Discovery is already running")
            return
        self._zeroconf = zeroconf.Zeroconf()
        listener = SimpleCastListener(add_callback=self._added, remove_callback=self._removed)
        self._browser = CastBrowser(listener, self._zeroconf)
        self._browser.start_discovery()
        logger.debug("Discovery started")

    def stop(self) -> None:
        if self._browser is None:
            return
        self._browser.stop_discovery()
        self._zeroconf.close()
        self._browser = None
        self._zeroconf = None
        logger.debug("Discovery stopped")

    def _added(self, uuid, _service) -> None:
        info = self._browser.devices.get(uuid) if self._browser else None
        if info is not None:
            self._loop.call_soon(self._notify, PresenceEvent.ONLINE, _device_info(info))

    def _removed(self, _uuid, _service, cast_info) -> None:
        self._loop.call_soon(self._notify, PresenceEvent.OFFLINE, _device_info(cast_info))

    def _notify(self, event: PresenceEvent, device: DeviceInfo) -> None:
        self._observers.notify("on_presence_event", event, device)


class ChromecastTransport:
    """Transport factory bound to one event loop."""

    def __init__(self, loop: EventLoop):
        self.scheduler = loop
        self._loop = loop

    def connect(self, host: str, port: int, reconnect: bool = False) -> ChromecastDevice:
        return ChromecastDevice(self._loop, host, port, reconnect=reconnect)

    def scanner(self) -> ChromecastScanner:
        return ChromecastScanner(self._loop)
