"""Rules engine for a falling-block puzzle game."""

from .game import Command, GameConfig, GameEngine, GameState

__all__ = ["Command", "GameConfig", "GameEngine", "GameState"]
