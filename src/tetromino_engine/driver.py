from __future__ import annotations

import logging
import threading
from typing import Dict, Optional

from .game import Command, GameEngine


logger = logging.getLogger(__name__)


KEY_BINDINGS: Dict[str, Command] = {
    "ArrowLeft": Command.MOVE_LEFT,
    "ArrowRight": Command.MOVE_RIGHT,
    "ArrowDown": Command.MOVE_DOWN,
    "ArrowUp": Command.ROTATE,
    " ": Command.HARD_DROP,
    "Enter": Command.TOGGLE_PAUSE,
}


class GameDriver:
    """Headless driver: gravity on a fixed period plus key dispatch.

    Presentation layers feed key names in and read `engine.state` back out.
    """

    def __init__(self, engine: GameEngine, interval: Optional[float] = None) -> None:
        self.engine = engine
        self.interval = engine.config.gravity_interval if interval is None else float(interval)
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    def handle_key(self, key: str) -> None:
        command = KEY_BINDINGS.get(key)
        if command is None:
            return
        if command == Command.TOGGLE_PAUSE:
            self.engine.toggle_pause()
            return
        if self.engine.state.is_paused:
            return
        self.engine.step(command)

    def tick(self) -> None:
        s = self.engine.state
        if s.is_game_over or s.is_paused:
            return
        self.engine.move_down()

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            self.tick()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="gravity", daemon=True)
        self._thread.start()
        logger.debug("gravity started every %.3fs", self.interval)

    def stop(self) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join()
            self._thread = None
        logger.debug("gravity stopped")
