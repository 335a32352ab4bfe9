from __future__ import annotations

import threading

from tetromino_engine.driver import KEY_BINDINGS, GameDriver
from tetromino_engine.game import Command, GameConfig, Position, TetrominoType


def test_key_bindings():
    assert KEY_BINDINGS == {
        "ArrowLeft": Command.MOVE_LEFT,
        "ArrowRight": Command.MOVE_RIGHT,
        "ArrowDown": Command.MOVE_DOWN,
        "ArrowUp": Command.ROTATE,
        " ": Command.HARD_DROP,
        "Enter": Command.TOGGLE_PAUSE,
    }


def test_handle_key_moves_and_ignores_unknown(make_engine):
    engine = make_engine(TetrominoType.O)
    driver = GameDriver(engine)
    driver.handle_key("ArrowLeft")
    driver.handle_key("ArrowDown")
    driver.handle_key("q")
    assert engine.state.current_position == Position(1, 3)


def test_keys_ignored_while_paused_except_enter(make_engine):
    engine = make_engine(TetrominoType.O)
    driver = GameDriver(engine)
    driver.handle_key("Enter")
    driver.handle_key("ArrowLeft")
    driver.handle_key(" ")
    assert engine.state.is_paused
    assert engine.state.current_position == Position(0, 4)
    driver.handle_key("Enter")
    driver.handle_key("ArrowLeft")
    assert engine.state.current_position == Position(0, 3)


def test_tick_is_gated_by_pause(make_engine):
    engine = make_engine(TetrominoType.O)
    driver = GameDriver(engine)
    driver.tick()
    assert engine.state.current_position == Position(1, 4)
    engine.toggle_pause()
    driver.tick()
    assert engine.state.current_position == Position(1, 4)


def test_gravity_thread_descends(make_engine):
    engine = make_engine(TetrominoType.O, config=GameConfig(gravity_interval=0.005))
    moved = threading.Event()
    engine.subscribe(lambda s: moved.set() if s.current_position.row >= 2 else None)
    driver = GameDriver(engine)
    assert driver.interval == 0.005
    driver.start()
    try:
        assert moved.wait(timeout=5)
    finally:
        driver.stop()
    assert not driver.running
