"""Session Manager: start or join a session on an application instance."""

import logging
from concurrent.futures import Future

from castctl.core.timing import with_timeout
from castctl.exceptions import SessionNotFoundError, SessionStartError, SessionStateError
from castctl.session.futures import chain, start
from castctl.session.launcher import ApplicationInstance
from castctl.transport.protocols import Scheduler, Session

logger = logging.getLogger(__name__)


class ManagedSession:
    """A transport session tied to the application instance that owns it."""

    def __init__(self, instance: ApplicationInstance, channel: Session):
        self.instance = instance
        self.channel = channel
        self._stopped = False

    @property
    def namespace(self) -> str | None:
        return self.channel.namespace

    @property
    def valid(self) -> bool:
        """The channel is usable only while the owning application is."""
        return not self._stopped and self.instance.valid

    def stop(self) -> None:
        """Close the session. Idempotent."""
        if self._stopped:
            return
        self._stopped = True
        self.channel.stop()
        if self.instance.session is self:
            self.instance.session = None
        logger.debug(f"Stopped session {self.namespace} of {self.instance.app_id}")

    def __repr__(self) -> str:
        return f"ManagedSession({self.instance.app_id!r}, namespace={self.namespace!r})"


class SessionManager:
    """
    Opens the single session an application instance may have.

    ``run`` and ``join`` are single-attempt; only one of them may be issued
    per instance. A second call raises SessionStateError.
    """

    def __init__(self, scheduler: Scheduler, timeout: float | None = None):
        self._scheduler = scheduler
        self._timeout = timeout

    def run(self, instance: ApplicationInstance, namespace: str | None) -> Future:
        """
        Start a new session on ``namespace`` (None: launch only, no channel).

        Returns:
            Future resolving to a ManagedSession, or failing with SessionStartError
        """
        self._claim(instance, "run")
        logger.debug(f"Starting {instance.app_id} (namespace={namespace})")
        pending = start(lambda: instance.application.run(namespace))
        return chain(
            pending,
            lambda channel: self._attach(instance, channel),
            lambda reason: SessionStartError(instance.app_id, namespace, reason),
        )

    def join(self, instance: ApplicationInstance, namespace: str) -> Future:
        """
        Attach to the session already running on ``namespace``.

        Returns:
            Future resolving to a ManagedSession, or failing with
            SessionNotFoundError / OperationTimeoutError
        """
        self._claim(instance, "join")
        logger.debug(f"Joining {instance.app_id} on {namespace}")
        pending = with_timeout(
            start(lambda: instance.application.join(namespace)),
            self._timeout,
            self._scheduler,
            f"join {namespace}",
        )
        return chain(
            pending,
            lambda channel: self._attach(instance, channel),
            lambda _reason: SessionNotFoundError(instance.app_id, namespace),
        )

    def _claim(self, instance: ApplicationInstance, operation: str) -> None:
        if instance.session_requested:
            raise SessionStateError(instance.app_id, operation)
        instance.session_requested = True

    def _attach(self, instance: ApplicationInstance, channel: Session) -> ManagedSession:
        session = ManagedSession(instance, channel)
        instance.session = session
        return session
