"""Game module for the tetromino engine.

Exports the rules engine and its pure primitives:
- grid helpers: empty board, collision, merge and line clearing
- Piece / TetrominoType: shape catalog and clockwise rotation
- ScoringRules: flat per-line scoring
- GameEngine: session state machine and command surface
"""

from .grid import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    ClearResult,
    Position,
    cell_at,
    clear_lines,
    drop_position,
    empty_board,
    full_rows,
    is_valid_move,
    merge_piece_with_board,
    piece_cells,
)
from .pieces import TETROMINOES, Piece, ShapeError, TetrominoType, piece_of, random_piece, rotate_piece
from .rules import ScoringRules
from .core import Command, GameConfig, GameEngine, GameState, Scheduler, ThreadingScheduler

__all__ = [
    "BOARD_HEIGHT",
    "BOARD_WIDTH",
    "ClearResult",
    "Position",
    "cell_at",
    "clear_lines",
    "drop_position",
    "empty_board",
    "full_rows",
    "is_valid_move",
    "merge_piece_with_board",
    "piece_cells",
    "TETROMINOES",
    "Piece",
    "ShapeError",
    "TetrominoType",
    "piece_of",
    "random_piece",
    "rotate_piece",
    "ScoringRules",
    "Command",
    "GameConfig",
    "GameEngine",
    "GameState",
    "Scheduler",
    "ThreadingScheduler",
]
