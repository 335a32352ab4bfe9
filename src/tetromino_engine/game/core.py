from __future__ import annotations

import logging
import random
import threading
from dataclasses import dataclass, replace
from enum import IntEnum
from functools import partial
from typing import Callable, List, Optional, Protocol, Tuple

import numpy as np

from .grid import (
    ClearResult,
    Grid,
    Position,
    clear_lines,
    drop_position,
    empty_board,
    full_rows,
    is_valid_move,
    merge_piece_with_board,
    piece_cells,
)
from .pieces import Piece, random_piece, rotate_piece
from .rules import ScoringRules


logger = logging.getLogger(__name__)


class Command(IntEnum):
    NONE = 0
    MOVE_LEFT = 1
    MOVE_RIGHT = 2
    MOVE_DOWN = 3
    ROTATE = 4
    HARD_DROP = 5
    TOGGLE_PAUSE = 6
    RESET = 7


@dataclass
class GameConfig:
    width: int = 10
    height: int = 20
    random_seed: Optional[int] = None
    clear_delay: float = 0.8  # seconds between showing full rows and collapsing them
    gravity_interval: float = 1.0  # seconds, read by drivers

    def __post_init__(self) -> None:
        if self.width < 4 or self.height < 4:
            raise ValueError(f"board must be at least 4x4, got {self.width}x{self.height}")
        if self.clear_delay < 0:
            raise ValueError(f"clear_delay must be >= 0, got {self.clear_delay}")
        if self.gravity_interval <= 0:
            raise ValueError(f"gravity_interval must be > 0, got {self.gravity_interval}")


@dataclass(frozen=True, eq=False)
class GameState:
    """Snapshot of a session. Never mutated; the engine swaps whole snapshots."""

    board: Grid
    current_piece: Piece
    current_position: Position
    next_piece: Piece
    score: int = 0
    is_game_over: bool = False
    is_paused: bool = False
    lines_cleared: int = 0

    @property
    def clearing_rows(self) -> Tuple[int, ...]:
        return full_rows(self.board)

    def overlay(self) -> np.ndarray:
        """Board copy with the falling piece painted in as 2."""
        state = self.board.astype(np.int8)
        if self.is_game_over:
            return state
        height, width = state.shape
        for row, col in piece_cells(self.current_piece, self.current_position):
            if 0 <= row < height and 0 <= col < width:
                state[row, col] = 2
        return state


class Cancellable(Protocol):
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> Cancellable: ...


class ThreadingScheduler:
    """Runs callbacks on daemon `threading.Timer` threads."""

    def schedule(self, delay: float, callback: Callable[[], None]) -> threading.Timer:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer


@dataclass
class _PendingClear:
    generation: int
    settle_id: int
    result: ClearResult
    handle: Optional[Cancellable] = None


class GameEngine:
    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        rng: Optional[random.Random] = None,
        scheduler: Optional[Scheduler] = None,
    ) -> None:
        self.config = config or GameConfig()
        self.rules = rules or ScoringRules()
        self.rng = rng if rng is not None else random.Random(self.config.random_seed)
        self.scheduler = scheduler or ThreadingScheduler()
        self._lock = threading.RLock()
        self._listeners: List[Callable[[GameState], None]] = []
        self._generation = 0
        self._settles = 0
        self._pending: Optional[_PendingClear] = None
        self._state = self._initial_state()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> GameState:
        return self._state

    @property
    def pending_clear(self) -> bool:
        return self._pending is not None

    @property
    def spawn_position(self) -> Position:
        return Position(0, self.config.width // 2 - 1)

    def subscribe(self, callback: Callable[[GameState], None]) -> Callable[[], None]:
        """Call `callback` with every published snapshot. Returns an unsubscribe function."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------
    def move_left(self) -> None:
        with self._lock:
            if self._accepts_moves():
                self._shift(0, -1)

    def move_right(self) -> None:
        with self._lock:
            if self._accepts_moves():
                self._shift(0, 1)

    def move_down(self) -> None:
        with self._lock:
            if not self._accepts_moves():
                return
            if not self._shift(1, 0):
                self._settle()

    def rotate(self) -> None:
        with self._lock:
            if not self._accepts_moves():
                return
            s = self._state
            rotated = rotate_piece(s.current_piece)
            if is_valid_move(s.board, rotated, s.current_position):
                self._publish(replace(s, current_piece=rotated))

    def hard_drop(self) -> None:
        with self._lock:
            if not self._accepts_moves():
                return
            s = self._state
            landing = drop_position(s.board, s.current_piece, s.current_position)
            if landing != s.current_position:
                self._publish(replace(s, current_position=landing))
            self._settle()

    def toggle_pause(self) -> None:
        with self._lock:
            s = self._state
            if s.is_game_over:
                return
            logger.debug("pause %s", "off" if s.is_paused else "on")
            self._publish(replace(s, is_paused=not s.is_paused))

    def reset(self) -> None:
        with self._lock:
            self._supersede()
            logger.debug("reset (generation %d)", self._generation)
            self._publish(self._initial_state())

    def load(self, state: GameState) -> None:
        """Replace the whole session, e.g. to replay or set up a position."""
        expected = (self.config.height, self.config.width)
        if state.board.shape != expected:
            raise ValueError(f"board shape {state.board.shape} does not match {expected}")
        board = state.board
        if board.flags.writeable:
            board = board.astype(np.int8)
            board.flags.writeable = False
        if not state.is_game_over and not is_valid_move(board, state.current_piece, state.current_position):
            raise ValueError(
                f"piece {state.current_piece.kind.name} does not fit at {tuple(state.current_position)}"
            )
        with self._lock:
            self._supersede()
            self._publish(replace(state, board=board))

    def step(self, command: Command) -> GameState:
        handlers = {
            Command.NONE: lambda: None,
            Command.MOVE_LEFT: self.move_left,
            Command.MOVE_RIGHT: self.move_right,
            Command.MOVE_DOWN: self.move_down,
            Command.ROTATE: self.rotate,
            Command.HARD_DROP: self.hard_drop,
            Command.TOGGLE_PAUSE: self.toggle_pause,
            Command.RESET: self.reset,
        }
        handlers[Command(command)]()
        return self._state

    # ------------------------------------------------------------------
    # Internals (callers hold the lock)
    # ------------------------------------------------------------------
    def _initial_state(self) -> GameState:
        return GameState(
            board=empty_board(self.config.width, self.config.height),
            current_piece=random_piece(self.rng),
            current_position=self.spawn_position,
            next_piece=random_piece(self.rng),
        )

    def _accepts_moves(self) -> bool:
        s = self._state
        # A landed piece waiting for its clear commit is frozen
        return not (s.is_game_over or s.is_paused or self._pending is not None)

    def _publish(self, state: GameState) -> None:
        self._state = state
        for callback in list(self._listeners):
            callback(state)

    def _shift(self, drow: int, dcol: int) -> bool:
        s = self._state
        candidate = s.current_position.shifted(drow, dcol)
        if not is_valid_move(s.board, s.current_piece, candidate):
            return False
        self._publish(replace(s, current_position=candidate))
        return True

    def _supersede(self) -> None:
        self._generation += 1
        pending, self._pending = self._pending, None
        if pending is not None and pending.handle is not None:
            pending.handle.cancel()
            logger.debug("cancelled pending clear of settle %d", pending.settle_id)

    def _settle(self) -> None:
        s = self._state
        merged = merge_piece_with_board(s.board, s.current_piece, s.current_position)
        result = clear_lines(merged)
        self._settles += 1
        logger.debug(
            "settled %s at %s, %d line(s) full",
            s.current_piece.kind.name, tuple(s.current_position), result.lines_cleared,
        )
        if result.lines_cleared == 0 or self.config.clear_delay <= 0:
            self._commit(result)
            return

        # Show the full rows now, collapse them once the delay has passed
        self._publish(replace(s, board=merged))
        pending = _PendingClear(self._generation, self._settles, result)
        self._pending = pending
        pending.handle = self.scheduler.schedule(
            self.config.clear_delay,
            partial(self._complete_clear, pending.generation, pending.settle_id),
        )
        logger.debug("clear of rows %s scheduled in %.3fs", result.cleared_rows, self.config.clear_delay)

    def _complete_clear(self, generation: int, settle_id: int) -> None:
        with self._lock:
            pending = self._pending
            if (
                pending is None
                or generation != self._generation
                or pending.generation != generation
                or pending.settle_id != settle_id
            ):
                logger.debug("discarding stale clear commit of settle %d", settle_id)
                return
            self._pending = None
            self._commit(pending.result)

    def _commit(self, result: ClearResult) -> None:
        s = self._state
        spawn = self.spawn_position
        current = s.next_piece
        game_over = not is_valid_move(result.board, current, spawn)
        self._publish(
            replace(
                s,
                board=result.board,
                current_piece=current,
                current_position=spawn,
                next_piece=random_piece(self.rng),
                score=s.score + self.rules.score_for_lines(result.lines_cleared),
                lines_cleared=s.lines_cleared + result.lines_cleared,
                is_game_over=game_over,
            )
        )
        if game_over:
            logger.info("game over with score %d", self._state.score)
