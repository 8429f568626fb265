"""Tic-tac-toe client for the Cast tic-tac-toe receiver.

Protocol on the game namespace (JSON objects)::

    → {"command": "join", "name": ...}
    ← {"event": "joined", "player": "X"|"O", ...}
    → {"command": "board_layout_request"}
    ← {"event": "board_layout_response", "board": [...]}
    → {"command": "move", "row": r, "column": c}
    ← {"event": "moved", "player": ..., "row": r, "column": c, "game_over": bool}
    ← {"event": "endgame", ...}
    ← {"event": "error", "message": ...}

X moves first. Moves are picked uniformly at random among the free cells.
"""

import json
import logging
import random
from typing import Any

from castctl.core.board import cell_index, cell_position, choose_move, free_cells, normalize_board
from castctl.exceptions import ProtocolError
from castctl.orchestration.base import DeviceCommand
from castctl.session import ApplicationInstance, ManagedSession

logger = logging.getLogger(__name__)

FIRST_PLAYER = "X"


class TicTacToeCommand(DeviceCommand):
    """Join a running game and play until it is over or the receiver errors."""

    name = "tictactoe"

    def __init__(self, *args, player_name: str = "castctl", rng: random.Random | None = None, **kwargs):
        super().__init__(*args, **kwargs)
        self.player_name = player_name
        self.player: str | None = None
        self.board: list[Any] | None = None
        self.session: ManagedSession | None = None
        self._rng = rng
        self._handlers = {
            "joined": self._on_joined,
            "board_layout_response": self._on_board_layout,
            "moved": self._on_moved,
            "endgame": self._on_endgame,
            "error": self._on_error,
        }

    def on_connected(self) -> None:
        self.step(self.launcher.resolve(self.device, self.context.app_id), self._join)

    def _join(self, instance: ApplicationInstance) -> None:
        self.step(self.sessions.join(instance, self.context.namespace), self._joined_session)

    def _joined_session(self, session: ManagedSession) -> None:
        self.session = session
        self.listen(session, self.on_game_message)
        self._send({"command": "join", "name": self.player_name})

    # Game messages

    def on_game_message(self, message: Any) -> None:
        if self.machine.is_terminal:
            return
        if isinstance(message, str):
            try:
                message = json.loads(message)
            except ValueError:
                logger.debug(f"Ignoring non-JSON message: {message!r}")
                return
        if not isinstance(message, dict):
            logger.debug(f"Ignoring message: {message!r}")
            return

        handler = self._handlers.get(message.get("event"))
        if handler is None:
            logger.debug(f"Unhandled game event: {message!r}")
            return
        try:
            handler(message)
        except (KeyError, TypeError, ValueError) as e:
            self.fail(ProtocolError(f"malformed '{message.get('event')}' event ({e})", message))

    def _on_joined(self, message: dict) -> None:
        self.player = message["player"]
        logger.info(f"Joined as {self.player} against {message.get('opponent', 'unknown')}")
        self._send({"command": "board_layout_request"})

    def _on_board_layout(self, message: dict) -> None:
        self.board = normalize_board(message["board"])
        logger.debug(f"Board: {self.board}")
        if self.player == FIRST_PLAYER:
            self._play()

    def _on_moved(self, message: dict) -> None:
        mover = message["player"]
        row, column = int(message["row"]), int(message["column"])
        index = cell_index(row, column)
        if self.board is not None:
            self.board[index] = mover
        logger.info(f"{mover} played row {row}, column {column}")

        if message.get("game_over"):
            logger.info("Game over")
            self.finish()
        elif mover != self.player:
            self._play()

    def _on_endgame(self, message: dict) -> None:
        logger.info(f"End of game: {message.get('end_state', message)}")

    def _on_error(self, message: dict) -> None:
        self.fail(ProtocolError(str(message.get("message", "unknown error")), message))

    # Moves

    def _play(self) -> None:
        if self.board is None:
            logger.warning("Board layout not received yet; cannot move")
            return
        if not free_cells(self.board):
            logger.warning("No free cell left; waiting for the game to end")
            return
        row, column = cell_position(choose_move(self.board, self._rng))
        logger.info(f"Playing row {row}, column {column}")
        self._send({"command": "move", "row": row, "column": column})

    def _send(self, payload: dict) -> None:
        self.step(self.dispatcher.send(self.session, payload), lambda _ack: None)
