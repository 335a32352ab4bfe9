from __future__ import annotations

import random
from dataclasses import dataclass
from enum import IntEnum
from typing import Dict

import numpy as np


class TetrominoType(IntEnum):
    I = 1
    O = 2
    T = 3
    S = 4
    Z = 5
    J = 6
    L = 7


Shape = np.ndarray


class ShapeError(ValueError):
    """Raised when a shape matrix violates the catalog invariants."""


def _frozen(rows) -> Shape:
    shape = np.array(rows, dtype=np.int8)
    shape.flags.writeable = False
    return shape


@dataclass(frozen=True, eq=False)
class Piece:
    kind: TetrominoType
    shape: Shape
    color: str

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Piece):
            return NotImplemented
        return (
            self.kind == other.kind
            and self.color == other.color
            and np.array_equal(self.shape, other.shape)
        )

    def __hash__(self) -> int:
        return hash((self.kind, self.color, self.shape.tobytes(), self.shape.shape))

    @property
    def size(self) -> int:
        return int(self.shape.shape[0])

    def copy(self) -> "Piece":
        return Piece(self.kind, _frozen(self.shape.copy()), self.color)


TETROMINOES: Dict[TetrominoType, Piece] = {
    TetrominoType.I: Piece(
        TetrominoType.I,
        _frozen([[0, 0, 0, 0], [1, 1, 1, 1], [0, 0, 0, 0], [0, 0, 0, 0]]),
        "#00f0f0",
    ),
    TetrominoType.O: Piece(TetrominoType.O, _frozen([[1, 1], [1, 1]]), "#f0f000"),
    TetrominoType.T: Piece(TetrominoType.T, _frozen([[0, 1, 0], [1, 1, 1], [0, 0, 0]]), "#a000f0"),
    TetrominoType.S: Piece(TetrominoType.S, _frozen([[0, 1, 1], [1, 1, 0], [0, 0, 0]]), "#00f000"),
    TetrominoType.Z: Piece(TetrominoType.Z, _frozen([[1, 1, 0], [0, 1, 1], [0, 0, 0]]), "#f00000"),
    TetrominoType.J: Piece(TetrominoType.J, _frozen([[1, 0, 0], [1, 1, 1], [0, 0, 0]]), "#0000f0"),
    TetrominoType.L: Piece(TetrominoType.L, _frozen([[0, 0, 1], [1, 1, 1], [0, 0, 0]]), "#f0a000"),
}


def piece_of(kind: TetrominoType) -> Piece:
    """Fresh copy of the catalog piece for `kind` (never aliases the catalog)."""
    return TETROMINOES[TetrominoType(kind)].copy()


def random_piece(rng: random.Random) -> Piece:
    kind = rng.choice(list(TetrominoType))
    return piece_of(kind)


def rotate_piece(piece: Piece) -> Piece:
    """Return `piece` turned 90 degrees clockwise.

    new[c][n - 1 - r] == old[r][c]; only square shapes can be rotated in place
    of their own bounding box, anything else is corrupted catalog data.
    """
    h, w = piece.shape.shape
    if h != w:
        raise ShapeError(f"cannot rotate non-square {h}x{w} shape of piece {piece.kind.name}")
    rotated = np.rot90(piece.shape, 1, axes=(1, 0))  # clockwise
    return Piece(piece.kind, _frozen(rotated.copy()), piece.color)
