# dartline/env/dodge_env.py
from __future__ import annotations
from typing import Optional, Dict, Any
import numpy as np
import gymnasium as gym
import pygame

from ..game.config import WIDTH, HEIGHT, FPS
from ..game.controls import UP_TIERS, DOWN_TIERS, SPEED_UP_KEYS, SPEED_DOWN_KEYS
from ..game.render import draw_frame
from ..game.session import GameSession, Phase
from .observations import build_observation, OBS_SIZE

# action -> movement key to hold (None releases movement)
_MOVE_KEYS = {
    0: None,
    1: min(UP_TIERS[2][0]),     # up x1
    2: min(UP_TIERS[1][0]),     # up x1.5
    3: min(UP_TIERS[0][0]),     # up x2
    4: min(DOWN_TIERS[2][0]),   # down x1
    5: min(DOWN_TIERS[1][0]),   # down x1.5
    6: min(DOWN_TIERS[0][0]),   # down x2
}
ACTION_SPEED_UP = 7
ACTION_SPEED_DOWN = 8
_START_KEY = pygame.K_SPACE


class DodgeEnv(gym.Env):
    """
    Dartline Gymnasium environment (vector observations).
    - Simulation at 60 Hz (one TickDriver pump per tick).
    - Agent acts every `frame_skip` ticks (default 4) -> 15 decisions/sec.
    - Actions are fed through the same key handlers a human player uses.
    """
    metadata = {"render_modes": ["human", "rgb_array"], "render_fps": FPS}

    def __init__(self,
                 render_mode: Optional[str] = None,
                 frame_skip: int = 4,
                 time_limit_seconds: Optional[float] = 30.0):
        super().__init__()
        assert frame_skip >= 1, "frame_skip must be >= 1"
        assert render_mode is None or render_mode in self.metadata["render_modes"], \
            f"unknown render_mode {render_mode}"
        self.render_mode = render_mode
        self.frame_skip = int(frame_skip)

        self.time_limit_decisions = None
        if time_limit_seconds is not None:
            self.time_limit_decisions = int(FPS * time_limit_seconds / self.frame_skip)

        # 0 release, 1-3 up tiers, 4-6 down tiers, 7 speed up, 8 speed down
        self.action_space = gym.spaces.Discrete(9)

        low = np.zeros(OBS_SIZE, dtype=np.float32)
        low[1] = -1.0
        high = np.ones(OBS_SIZE, dtype=np.float32)
        self.observation_space = gym.spaces.Box(low=low, high=high, dtype=np.float32)

        # --- Runtime state ---
        self.session: Optional[GameSession] = None
        self.held_key: Optional[int] = None
        self.timestep: int = 0
        self.current_seed: Optional[int] = None

        # Rendering
        self.screen = None
        self.clock = None
        self.font = None

    # -------------------- Core API --------------------

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict[str, Any]] = None):
        super().reset(seed=seed)  # initializes self.np_random

        # Strict reproducibility with an explicit seed; otherwise draw from np_random
        self.current_seed = int(seed) if seed is not None else int(self.np_random.integers(0, 2**31 - 1))
        self.session = GameSession(seed=self.current_seed)
        self.session.key_down(_START_KEY)
        self.session.key_up(_START_KEY)
        self.held_key = None
        self.timestep = 0

        obs = build_observation(self.session.snapshot())
        info = {"seed": self.current_seed, "score": 0, "speed_level": 0}
        return obs, info

    def step(self, action: int):
        assert self.action_space.contains(action), f"Invalid action {action}"
        assert self.session is not None, "call reset() first"
        s = self.session

        # Episode already over: actions must not restart the game
        was_alive = s.phase is Phase.RUNNING
        score_before = s.sim.score
        if was_alive:
            self._apply_action(int(action))
            for _ in range(self.frame_skip):
                if not s.driver.pump():
                    break

        alive = s.phase is Phase.RUNNING
        if alive:
            reward = 1.0 + float(s.sim.score - score_before)
        else:
            reward = -1.0 if was_alive else 0.0

        self.timestep += 1
        terminated = not alive
        truncated = False
        if (self.time_limit_decisions is not None) and (self.timestep >= self.time_limit_decisions):
            truncated = True

        obs = build_observation(s.snapshot())
        info = {
            "seed": self.current_seed,
            "timestep": self.timestep,
            "score": s.sim.score,
            "speed_level": s.sim.speed_level,
            "ticks": s.sim.tick_count,
        }

        if self.render_mode == "human":
            self.render()

        return obs, reward, terminated, truncated, info

    def _apply_action(self, action: int):
        s = self.session
        if action == ACTION_SPEED_UP:
            key = min(SPEED_UP_KEYS)
            s.key_down(key); s.key_up(key)
            return
        if action == ACTION_SPEED_DOWN:
            key = min(SPEED_DOWN_KEYS)
            s.key_down(key); s.key_up(key)
            return

        key = _MOVE_KEYS[action]
        if key == self.held_key:
            return
        if self.held_key is not None:
            s.key_up(self.held_key)
        self.held_key = key
        if key is not None:
            s.key_down(key)

    # -------------------- Rendering --------------------

    def render(self):
        if self.render_mode is None or self.session is None:
            return

        if self.screen is None:
            pygame.init()
            if self.render_mode == "human":
                self.screen = pygame.display.set_mode((WIDTH, HEIGHT))
                pygame.display.set_caption("Dartline - Gym Env")
                self.clock = pygame.time.Clock()
            else:
                self.screen = pygame.Surface((WIDTH, HEIGHT))
            self.font = pygame.font.SysFont("jetbrainsmono", 18)

        if self.render_mode == "human":
            for _ in pygame.event.get():
                pass

        draw_frame(self.screen, self.session.snapshot(), self.session.hud, self.font)

        if self.render_mode == "human":
            pygame.display.flip()
            if self.clock is not None:
                self.clock.tick(self.metadata["render_fps"])
            return None

        # (H, W, 3) uint8
        arr = pygame.surfarray.array3d(self.screen)  # (W, H, 3)
        return np.transpose(arr, (1, 0, 2))

    def close(self):
        if self.screen is not None:
            if self.render_mode == "human":
                pygame.display.quit()
            pygame.quit()
            self.screen = None
            self.clock = None
            self.font = None
