from __future__ import annotations

from typing import Callable, List, Optional

import numpy as np
import pytest

from tetromino_engine.game import GameConfig, GameEngine, TetrominoType


class FixedRng:
    """Stands in for random.Random: `choice` yields queued kinds, then repeats the last."""

    def __init__(self, *kinds: TetrominoType) -> None:
        self.kinds: List[TetrominoType] = list(kinds) or [TetrominoType.O]
        self.last = self.kinds[0]

    def choice(self, seq):
        if self.kinds:
            self.last = self.kinds.pop(0)
        return self.last

    def seed(self, value=None) -> None:
        pass


class _Handle:
    def __init__(self, delay: float, callback: Callable[[], None]) -> None:
        self.delay = delay
        self.callback = callback
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class ManualScheduler:
    """Collects scheduled callbacks; tests fire them explicitly."""

    def __init__(self) -> None:
        self.handles: List[_Handle] = []

    def schedule(self, delay: float, callback: Callable[[], None]) -> _Handle:
        handle = _Handle(delay, callback)
        self.handles.append(handle)
        return handle

    def fire_all(self, include_cancelled: bool = False) -> None:
        handles, self.handles = self.handles, []
        for handle in handles:
            if include_cancelled or not handle.cancelled:
                handle.callback()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def make_engine(scheduler):
    def factory(*kinds: TetrominoType, config: Optional[GameConfig] = None) -> GameEngine:
        return GameEngine(config, rng=FixedRng(*kinds), scheduler=scheduler)

    return factory


def board_from_rows(height: int = 20, width: int = 10, **rows: List[int]) -> np.ndarray:
    """Build a board; keyword `r<N>` gives the filled columns of row N."""
    board = np.zeros((height, width), dtype=np.int8)
    for key, cols in rows.items():
        board[int(key[1:]), list(cols)] = 1
    return board
