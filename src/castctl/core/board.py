"""Tic-tac-toe board helpers."""

import random
from collections.abc import Sequence
from typing import Any

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE


def normalize_board(layout: Any) -> list[Any]:
    """
    Flatten a board layout into a list of 9 cells.

    Accepts either 9 cells or 3 rows of 3.

    Raises:
        ValueError: If the layout does not describe a 3x3 board
    """
    if not isinstance(layout, Sequence) or isinstance(layout, (str, bytes)):
        raise ValueError(f"board layout must be a list, got {type(layout).__name__}")

    cells = list(layout)
    if len(cells) == BOARD_SIZE and all(isinstance(row, Sequence) and not isinstance(row, str) for row in cells):
        cells = [cell for row in cells for cell in row]

    if len(cells) != CELL_COUNT:
        raise ValueError(f"board layout must have {CELL_COUNT} cells, got {len(cells)}")
    return cells


def free_cells(board: Sequence[Any]) -> list[int]:
    """Indices of unoccupied cells (falsy: 0, None, "")."""
    return [index for index, cell in enumerate(board) if not cell]


def choose_move(board: Sequence[Any], rng: random.Random | None = None) -> int:
    """
    Pick an unoccupied cell uniformly at random.

    Raises:
        ValueError: If the board is full
    """
    candidates = free_cells(board)
    if not candidates:
        raise ValueError("no free cell on a full board")
    return (rng or random).choice(candidates)


def cell_index(row: int, column: int) -> int:
    """
    Flat index of the cell at (row, column).

    Raises:
        ValueError: If row or column is outside the board
    """
    if not (0 <= row < BOARD_SIZE and 0 <= column < BOARD_SIZE):
        raise ValueError(f"cell ({row}, {column}) is outside the {BOARD_SIZE}x{BOARD_SIZE} board")
    return row * BOARD_SIZE + column


def cell_position(index: int) -> tuple[int, int]:
    """(row, column) of a cell index."""
    return divmod(index, BOARD_SIZE)
