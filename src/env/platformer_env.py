# src/env/platformer_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from src.platformer.config import WIDTH, HEIGHT, TOTAL_LEVELS
from src.platformer.entities import Difficulty
from src.platformer.physics import LevelCompleted, PlayerDied
from src.platformer.player import Intent
from src.platformer.progress import MemoryProgressStore
from src.platformer.render import draw_world
from src.platformer.session import Session
from src.env.observations import build_observation, OBS_LOW, OBS_HIGH

# 0 noop, 1 left, 2 right, 3 jump, 4 left+jump, 5 right+jump
ACTIONS = (
    Intent(),
    Intent(left=True),
    Intent(right=True),
    Intent(jump=True),
    Intent(left=True, jump=True),
    Intent(right=True, jump=True),
)

PROGRESS_SCALE_PX = 100.0
DEATH_PENALTY = -1.0
COMPLETION_BONUS = 10.0


class PlatformerEnv(gym.Env):
    """
    Procedural platformer as a Gymnasium environment (vector observations).
    - Simulation runs at a fixed 60 frames per second.
    - Agent acts every `frame_skip` frames (default 4) -> 15 decisions/sec.
    - One episode = one attempt at one level: it ends on death or on the door.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": 60}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 difficulty: str = "hard",
                 time_limit_seconds: Optional[float] = 60.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"]
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)
        self.difficulty = Difficulty.parse(difficulty)

        self.sim_fps = 60
        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(self.sim_fps * time_limit_seconds / self.frame_skip)

        self.action_space = gym.spaces.Discrete(len(ACTIONS))
        self.observation_space = gym.spaces.Box(low=OBS_LOW, high=OBS_HIGH, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[Session] = None
        self.level_index: int = 0
        self.timestep: int = 0
        self.death_cause: Optional[str] = None
        self.completed: bool = False
        self.jumps: int = 0

        # Rendering
        self.screen = None
        self.canvas = None
        self.clock = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)
        options = options or {}

        # Seed picks the level; no seed keeps the current one (levels are fully deterministic).
        if seed is not None:
            self.level_index = int(seed) % TOTAL_LEVELS
        if "level" in options:
            self.level_index = int(options["level"]) % TOTAL_LEVELS
        if "difficulty" in options:
            self.difficulty = Difficulty.parse(options["difficulty"])

        store = MemoryProgressStore(self.difficulty, unlocked_levels=TOTAL_LEVELS)
        self.session = Session(store, level_index=self.level_index)

        self.timestep = 0
        self.death_cause = None
        self.completed = False
        self.jumps = 0

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), self._info()

    def step(self, action):
        assert self.session is not None, "call reset() before step()"
        if not self.action_space.contains(action):
            raise ValueError(f"Invalid action {action!r}")
        intent = ACTIONS[int(action)]

        reward = 0.0
        for _ in range(self.frame_skip):
            before_x = self.session.player.x
            result = self.session.step(intent)

            if result.of_type(LevelCompleted):
                self.completed = True
                reward += COMPLETION_BONUS
                break

            reward += (self.session.player.x - before_x) / PROGRESS_SCALE_PX
            if result.jumped:
                self.jumps += 1
            if result.died:
                self.death_cause = result.of_type(PlayerDied)[0].cause
                reward += DEATH_PENALTY
                break

        self.timestep += 1
        terminated = self.completed or not self.session.player.alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        if self.render_mode == "human":
            self.render()
        return self._get_obs(), float(reward), terminated, truncated, self._info()

    # -------------------- Helpers --------------------

    def _get_obs(self) -> np.ndarray:
        assert self.session is not None
        return build_observation(self.session.level, self.session.player)

    def _info(self) -> Dict[str, Any]:
        assert self.session is not None
        return {
            "level": self.level_index,
            "difficulty": self.difficulty.value,
            "timestep": self.timestep,
            "x": float(self.session.player.x),
            "completed": self.completed,
            "death_cause": self.death_cause,
            "jumps": self.jumps,
        }

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return None

        if self.render_mode == "human":
            if self.screen is None:
                pygame.init()
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Neon Platformer — Gym Env")
                self.clock = pygame.time.Clock()
            # Pump minimal event queue so the OS doesn't think we're hung
            pygame.event.pump()
            draw_world(self.screen, self.session.level, self.session.player)
            pygame.display.flip()
            self.clock.tick(self.metadata["render_fps"])
            return None

        if self.canvas is None:
            self.canvas = pygame.Surface((WIDTH, HEIGHT))
        draw_world(self.canvas, self.session.level, self.session.player)
        arr = pygame.surfarray.array3d(self.canvas)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
        self.canvas = None
