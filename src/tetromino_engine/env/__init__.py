"""Gymnasium environment for the tetromino engine."""

from __future__ import annotations

from gymnasium.envs.registration import register

from .tetromino_env import TetrominoEnv

register(
    id="TetrominoEngine-10x20-v0",
    entry_point="tetromino_engine.env.tetromino_env:TetrominoEnv",
)

__all__ = ["TetrominoEnv"]
