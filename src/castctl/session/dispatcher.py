"""Message Dispatcher: send messages and fan inbound messages out to handlers."""

import logging
from collections.abc import Callable
from concurrent.futures import Future
from typing import Any

from castctl.core.observer import ObserverManager
from castctl.exceptions import SendFailedError
from castctl.session.futures import chain, failed, start
from castctl.session.manager import ManagedSession

logger = logging.getLogger(__name__)

MessageHandler = Callable[[Any], None]


class MessageDispatcher:
    """
    Sends on and listens to ManagedSession channels.

    Every handler registered for a session receives every inbound message,
    once, in the order the transport received them. Handlers are observers,
    not queue consumers.
    """

    def __init__(self) -> None:
        self._handlers: dict[ManagedSession, ObserverManager[MessageHandler]] = {}

    def send(
        self,
        session: ManagedSession,
        payload: Any,
        callback: Callable[[Future], None] | None = None,
    ) -> Future:
        """
        Transmit ``payload`` on ``session``.

        Args:
            session: Session to send on
            payload: JSON-serializable message
            callback: Called with the completed future (ack or SendFailedError)

        Returns:
            Future resolving on delivery acknowledgment
        """
        if not session.valid:
            result = failed(SendFailedError(session.namespace, "session is no longer valid"))
        else:
            logger.debug(f"Sending on {session.namespace}: {payload!r}")
            result = chain(
                start(lambda: session.channel.send(payload)),
                lambda ack: ack,
                lambda reason: SendFailedError(session.namespace, reason),
            )

        if callback is not None:
            result.add_done_callback(callback)
        return result

    def on_message(self, session: ManagedSession, handler: MessageHandler) -> None:
        """Call ``handler(message)`` for every inbound message on ``session``."""
        handlers = self._handlers.get(session)
        if handlers is None:
            handlers = ObserverManager[MessageHandler](observer_type_name="message")
            self._handlers[session] = handlers
            session.channel.add_listener(lambda message: self._dispatch(session, message))
        handlers.register(handler)

    def _dispatch(self, session: ManagedSession, message: Any) -> None:
        if not session.valid:
            logger.debug(f"Dropping message on closed session {session.namespace}")
            return
        self._handlers[session].call(message)
