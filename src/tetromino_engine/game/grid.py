from __future__ import annotations

from dataclasses import dataclass
from typing import List, NamedTuple, Tuple

import numpy as np

from .pieces import Piece


BOARD_WIDTH = 10
BOARD_HEIGHT = 20

Grid = np.ndarray
Coordinate = Tuple[int, int]


class Position(NamedTuple):
    row: int
    col: int

    def shifted(self, drow: int = 0, dcol: int = 0) -> "Position":
        return Position(self.row + drow, self.col + dcol)


@dataclass(frozen=True, eq=False)
class ClearResult:
    board: Grid
    lines_cleared: int
    cleared_rows: Tuple[int, ...]


def _freeze(grid: Grid) -> Grid:
    grid.flags.writeable = False
    return grid


def empty_board(width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> Grid:
    return _freeze(np.zeros((int(height), int(width)), dtype=np.int8))


def cell_at(board: Grid, row: int, col: int) -> int:
    """Checked read of a single cell.

    Unlike numpy indexing, negative indices are rejected instead of wrapping.
    """
    height, width = board.shape
    if not (0 <= row < height and 0 <= col < width):
        raise IndexError(f"cell ({row}, {col}) outside {height}x{width} board")
    return int(board[row, col])


def piece_cells(piece: Piece, position: Position) -> List[Coordinate]:
    """Absolute (row, col) of every filled cell of `piece` at `position`."""
    rows, cols = np.nonzero(piece.shape)
    return [(position.row + int(r), position.col + int(c)) for r, c in zip(rows, cols)]


def is_valid_move(board: Grid, piece: Piece, position: Position) -> bool:
    height, width = board.shape
    for row, col in piece_cells(piece, position):
        if not (0 <= row < height and 0 <= col < width):
            return False
        if board[row, col] != 0:
            return False
    return True


def drop_position(board: Grid, piece: Piece, position: Position) -> Position:
    """Lowest position reachable from `position` by straight descent."""
    while is_valid_move(board, piece, position.shifted(drow=1)):
        position = position.shifted(drow=1)
    return position


def merge_piece_with_board(board: Grid, piece: Piece, position: Position) -> Grid:
    height, width = board.shape
    merged = board.copy()
    for row, col in piece_cells(piece, position):
        # Out-of-range cells are skipped, merges follow a validated position
        if 0 <= row < height and 0 <= col < width:
            merged[row, col] = 1
    return _freeze(merged)


def full_rows(board: Grid) -> Tuple[int, ...]:
    return tuple(int(r) for r in np.where(np.all(board != 0, axis=1))[0])


def clear_lines(board: Grid) -> ClearResult:
    """Remove full rows and pad the top with empty ones.

    `cleared_rows` are indices into the board as passed in, top to bottom.
    """
    rows = full_rows(board)
    if not rows:
        return ClearResult(board=_freeze(board.copy()), lines_cleared=0, cleared_rows=())
    num = len(rows)
    kept = np.delete(board, list(rows), axis=0)
    new_rows = np.zeros((num, board.shape[1]), dtype=board.dtype)
    collapsed = np.vstack((new_rows, kept))
    assert collapsed.shape == board.shape
    return ClearResult(board=_freeze(collapsed), lines_cleared=num, cleared_rows=rows)
