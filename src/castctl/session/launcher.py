"""Application Launcher: resolve an application id on a connected device."""

import logging
from concurrent.futures import Future
from typing import TYPE_CHECKING, Optional

from castctl.core.timing import with_timeout
from castctl.exceptions import ApplicationNotFoundError, DeviceNotConnectedError
from castctl.models import ConnectionState
from castctl.session.futures import chain, start
from castctl.transport.protocols import Application, DeviceHandle, Scheduler

if TYPE_CHECKING:
    from castctl.session.manager import ManagedSession

logger = logging.getLogger(__name__)


class ApplicationInstance:
    """
    A receiver application resolved on one device.

    Holds a back-reference to its device (not ownership) and at most one
    session. It stops being valid when the device leaves the CONNECTED state.
    """

    def __init__(self, device: DeviceHandle, application: Application):
        self.device = device
        self.application = application
        self.session: Optional["ManagedSession"] = None
        self.session_requested = False

    @property
    def app_id(self) -> str:
        return self.application.app_id

    @property
    def valid(self) -> bool:
        return self.device.state == ConnectionState.CONNECTED

    def __repr__(self) -> str:
        return f"ApplicationInstance({self.app_id!r} on {self.device.host})"


class ApplicationLauncher:
    """Resolves application ids to ApplicationInstance objects."""

    def __init__(self, scheduler: Scheduler, timeout: float | None = None):
        """
        Args:
            scheduler: Loop used for the optional timeout
            timeout: Seconds to wait for the device to answer (None = forever)
        """
        self._scheduler = scheduler
        self._timeout = timeout

    def resolve(self, device: DeviceHandle, app_id: str) -> Future:
        """
        Resolve ``app_id`` on ``device``.

        Returns:
            Future resolving to an ApplicationInstance, or failing with
            ApplicationNotFoundError / OperationTimeoutError

        Raises:
            DeviceNotConnectedError: If the device has not reported CONNECTED
        """
        if device.state != ConnectionState.CONNECTED:
            raise DeviceNotConnectedError(device.host, device.state.value)

        logger.debug(f"Resolving application {app_id} on {device.host}")
        pending = with_timeout(
            start(lambda: device.application(app_id)),
            self._timeout,
            self._scheduler,
            f"resolve application {app_id}",
        )
        return chain(
            pending,
            lambda application: ApplicationInstance(device, application),
            lambda reason: ApplicationNotFoundError(app_id, reason),
        )
