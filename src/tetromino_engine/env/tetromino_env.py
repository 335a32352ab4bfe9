from __future__ import annotations

from dataclasses import replace
from typing import Any, Dict, Optional, Tuple

import numpy as np
import gymnasium as gym
from gymnasium import spaces

from tetromino_engine.game import Command, GameConfig, GameEngine, ScoringRules


class TetrominoEnv(gym.Env):
    """
    Step-driven environment over `GameEngine`.

    Actions (6 total):
      0: No-op
      1: Move Left
      2: Move Right
      3: Move Down (settles the piece when it cannot fall)
      4: Rotate CW
      5: Hard Drop

    Notes:
    - Line clears commit synchronously; there is no animation window between steps.
    - The board observation paints the falling piece as 2 over settled cells (1).
    - Reward is the engine score gained by the step.
    """

    metadata = {"render_modes": []}

    def __init__(
        self,
        config: Optional[GameConfig] = None,
        rules: Optional[ScoringRules] = None,
        max_episode_steps: int = 10000,
    ) -> None:
        super().__init__()
        config = replace(config or GameConfig(), clear_delay=0.0)
        self.engine = GameEngine(config, rules)
        self.max_episode_steps = int(max_episode_steps)
        self._steps = 0

        h, w = config.height, config.width
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0, high=2, shape=(h, w), dtype=np.int8),
                "next_piece": spaces.Discrete(8),
            }
        )
        self.action_space = spaces.Discrete(6)

    def _get_obs(self) -> Dict[str, Any]:
        s = self.engine.state
        return {
            "board": s.overlay(),
            "next_piece": int(s.next_piece.kind),
        }

    def _get_info(self) -> Dict[str, Any]:
        s = self.engine.state
        return {
            "score": s.score,
            "lines_cleared": s.lines_cleared,
        }

    def reset(self, *, seed: Optional[int] = None, options: Optional[dict] = None) -> Tuple[Dict[str, Any], Dict[str, Any]]:
        super().reset(seed=seed)
        if seed is not None:
            self.engine.rng.seed(seed)
        self.engine.reset()
        self._steps = 0
        return self._get_obs(), self._get_info()

    def step(self, action: int):
        action = int(action)
        if not self.action_space.contains(action):
            raise ValueError(f"invalid action {action!r}")

        before = self.engine.state.score
        state = self.engine.step(Command(action))
        self._steps += 1

        reward = float(state.score - before)
        terminated = bool(state.is_game_over)
        truncated = self._steps >= self.max_episode_steps
        return self._get_obs(), reward, terminated, truncated, self._get_info()

    def close(self) -> None:
        pass
