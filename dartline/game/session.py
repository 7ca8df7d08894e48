# dartline/game/session.py
from __future__ import annotations
import enum
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from .clock import TickDriver
from .controls import InputState, speed_step
from .simulation import Simulation, Snapshot


class Phase(enum.Enum):
    IDLE = "idle"
    RUNNING = "running"
    GAME_OVER = "game_over"


@dataclass
class Hud:
    """Text fields shown around the play field."""
    score_text: str = "Score: 0"
    speed_text: str = "Speed Lvl: 0"
    message: Optional[str] = None      # only set while GAME_OVER


def game_over_message(score: int) -> str:
    return f"Game Over! Your Score: {score}\nPress any key to Restart."


class GameSession:
    """
    Idle -> Running -> GameOver -> Running ...

    Any key press outside RUNNING starts a fresh game. While RUNNING, the
    speed keys change the speed level and every other key feeds the movement
    intent. A collision stops the driver and shows the final score.
    """

    def __init__(self, sim: Optional[Simulation] = None,
                 driver: Optional[TickDriver] = None,
                 seed: Optional[int] = None):
        self.sim = sim if sim is not None else Simulation(rng=random.Random(seed))
        self.driver = driver if driver is not None else TickDriver()
        self.inputs = InputState()
        self.phase = Phase.IDLE
        self.hud = Hud()
        self.games_played = 0
        self._listeners: List[Callable[[Hud], None]] = []
        self._last_score = 0
        self._last_level = 0

    # -------------------- Observers --------------------

    def add_listener(self, cb: Callable[[Hud], None]):
        self._listeners.append(cb)

    def _notify(self):
        for cb in self._listeners:
            cb(self.hud)

    def _sync_hud(self):
        changed = False
        if self.sim.score != self._last_score:
            self._last_score = self.sim.score
            self.hud.score_text = f"Score: {self.sim.score}"
            changed = True
        if self.sim.speed_level != self._last_level:
            self._last_level = self.sim.speed_level
            self.hud.speed_text = f"Speed Lvl: {self.sim.speed_level}"
            changed = True
        if changed:
            self._notify()

    @property
    def running(self) -> bool:
        return self.phase is Phase.RUNNING

    def snapshot(self) -> Snapshot:
        return self.sim.snapshot()

    # -------------------- Transitions --------------------

    def start(self):
        """Fresh game. No-op while a game is already running."""
        if self.running:
            return
        self.sim.reset()
        self.phase = Phase.RUNNING
        self.games_played += 1

        self._last_score = 0
        self._last_level = 0
        self.hud.score_text = "Score: 0"
        self.hud.speed_text = "Speed Lvl: 0"
        self.hud.message = None
        self._notify()

        self.driver.request_tick(self._frame)

    def end(self):
        self.driver.cancel()
        if not self.running:
            return
        self.phase = Phase.GAME_OVER
        self.hud.message = game_over_message(self.sim.score)
        self._notify()

    def _frame(self):
        if not self.running:
            return
        collided = self.sim.step()
        self._sync_hud()
        if collided:
            self.end()
            return
        self.driver.request_tick(self._frame)

    # -------------------- Input --------------------

    def key_down(self, key: int):
        step = speed_step(key)
        if step and self.running:
            if self.sim.change_speed(step):
                self._sync_hud()
            return

        if not self.running:
            self.start()
            return

        self.inputs.press(key)
        self.sim.player.vy = self.inputs.intent(self.sim.player.base_move_speed)

    def key_up(self, key: int):
        self.inputs.release(key)
        self.sim.player.vy = self.inputs.intent(self.sim.player.base_move_speed)
