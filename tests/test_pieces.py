from __future__ import annotations

import random

import numpy as np
import pytest

from tetromino_engine.game import TETROMINOES, Piece, ShapeError, TetrominoType, piece_of, random_piece, rotate_piece


def test_catalog_has_seven_square_four_cell_pieces():
    assert set(TETROMINOES) == set(TetrominoType)
    for kind, piece in TETROMINOES.items():
        h, w = piece.shape.shape
        assert h == w
        assert int(piece.shape.sum()) == 4
        assert piece.kind == kind


@pytest.mark.parametrize("kind", list(TetrominoType))
def test_four_rotations_return_original(kind):
    piece = piece_of(kind)
    rotated = piece
    for _ in range(4):
        rotated = rotate_piece(rotated)
    assert rotated == piece


def test_rotation_is_clockwise_and_pure():
    t = piece_of(TetrominoType.T)
    before = t.shape.copy()
    rotated = rotate_piece(t)
    assert np.array_equal(rotated.shape, [[0, 1, 0], [0, 1, 1], [0, 1, 0]])
    assert np.array_equal(t.shape, before)
    assert rotated.kind == t.kind and rotated.color == t.color


def test_i_piece_rotates_into_a_column():
    rotated = rotate_piece(piece_of(TetrominoType.I))
    assert np.array_equal(rotated.shape[:, 2], [1, 1, 1, 1])
    assert int(rotated.shape.sum()) == 4


def test_non_square_shape_is_rejected():
    bad = Piece(TetrominoType.I, np.array([[1, 1, 1, 1]], dtype=np.int8), "#00f0f0")
    with pytest.raises(ShapeError):
        rotate_piece(bad)
    assert issubclass(ShapeError, ValueError)


def test_random_piece_does_not_alias_catalog():
    piece = random_piece(random.Random(3))
    catalog = TETROMINOES[piece.kind]
    assert piece == catalog
    assert not np.shares_memory(piece.shape, catalog.shape)
    with pytest.raises(ValueError):
        piece.shape[0, 0] = 1


def test_random_piece_covers_all_kinds():
    rng = random.Random(0)
    kinds = {random_piece(rng).kind for _ in range(200)}
    assert kinds == set(TetrominoType)
