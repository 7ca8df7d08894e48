# dartline/game/simulation.py
from __future__ import annotations
import random
import copy
from dataclasses import dataclass
from typing import List, Tuple
from .config import (
    WIDTH, HEIGHT, FPS, INITIAL_SPEED, MAX_SPEED, MAX_SPEED_LEVEL,
    OBSTACLE_SPAWN_INTERVAL, OBSTACLE_MAX_COUNT, OBSTACLE_PADDING,
    OBSTACLE_MIN_H, OBSTACLE_H_SPREAD, OBSTACLE_MIN_W, OBSTACLE_W_SPREAD,
    SCORE_TICKS_PER_SECOND,
)
from .entities import Player, Particle, Obstacle


def speed_for_level(level: int, max_speed: float = MAX_SPEED) -> float:
    """Linear map: level 0 -> INITIAL_SPEED, level MAX_SPEED_LEVEL -> max_speed."""
    return INITIAL_SPEED + (max_speed - INITIAL_SPEED) * (level / MAX_SPEED_LEVEL)


@dataclass(frozen=True)
class Snapshot:
    """Read-only copy of the world after a tick, for renderers and observers."""
    player: Player
    particles: Tuple[Particle, ...]
    obstacles: Tuple[Obstacle, ...]
    score: int
    speed_level: int
    game_speed: float
    tick: int
    width: int
    height: int


class Simulation:
    """
    Owns every piece of entity state for one game session and advances it one
    tick at a time. reset() brings everything back to the start-of-game values.
    """

    def __init__(self, width: int = WIDTH, height: int = HEIGHT,
                 rng: random.Random | None = None):
        assert width > 0 and height > 0, "field dimensions must be positive"
        assert height - OBSTACLE_MIN_H - OBSTACLE_H_SPREAD - 2 * OBSTACLE_PADDING >= 0, \
            "field too short for padded obstacles"
        self.width = width
        self.height = height
        self.max_speed = width / (0.25 * FPS)
        self.rng = rng if rng is not None else random.Random()

        self.player = Player()
        self.particles: List[Particle] = []
        self.obstacles: List[Obstacle] = []
        self.spawn_timer: int = 0
        self.score: int = 0
        self.score_acc: float = 0.0
        self.speed_level: int = 0
        self.game_speed: float = INITIAL_SPEED
        self.tick_count: int = 0
        self.reset()

    def reset(self):
        self.player.y = self.height / 2
        self.player.vy = 0.0
        self.particles = []
        self.obstacles = []
        self.spawn_timer = 0
        self.score = 0
        self.score_acc = 0.0
        self.speed_level = 0
        self.game_speed = INITIAL_SPEED
        self.tick_count = 0

    # -------------------- Speed --------------------

    def change_speed(self, step: int) -> bool:
        """
        +1 raises the level up to MAX_SPEED_LEVEL, -1 lowers it but never
        below 1. Returns True if the level changed.
        """
        if step > 0 and self.speed_level < MAX_SPEED_LEVEL:
            self.speed_level += 1
        elif step < 0 and self.speed_level > 1:
            self.speed_level -= 1
        else:
            return False
        self.game_speed = speed_for_level(self.speed_level, self.max_speed)
        return True

    # -------------------- Tick --------------------

    def step(self) -> bool:
        """Advance one tick. Returns True if the player hit an obstacle."""
        self.tick_count += 1
        self._update_player()
        self._update_particles()
        self._update_obstacles()
        self._update_score()
        return self.check_collision()

    def _update_player(self):
        self.player.update_motion(self.height)
        # tail: one particle per tick, at the post-repulsion position
        self.particles.append(Particle.emit(self.player.x, self.player.y, self.rng))

    def _update_particles(self):
        for p in self.particles:
            p.update(self.game_speed)
        self.particles = [p for p in self.particles if not p.dead]

    def _update_obstacles(self):
        self.spawn_timer += 1
        if self.spawn_timer > OBSTACLE_SPAWN_INTERVAL:
            if len(self.obstacles) < OBSTACLE_MAX_COUNT:
                self.obstacles.append(self._spawn_obstacle())
            # reset even when the cap blocked the spawn
            self.spawn_timer = 0

        for ob in self.obstacles:
            ob.x -= self.game_speed
        self.obstacles = [ob for ob in self.obstacles if not ob.off_screen]

    def _spawn_obstacle(self) -> Obstacle:
        h = self.rng.random() * OBSTACLE_H_SPREAD + OBSTACLE_MIN_H
        w = self.rng.random() * OBSTACLE_W_SPREAD + OBSTACLE_MIN_W
        y = self.rng.random() * (self.height - h - OBSTACLE_PADDING * 2) + OBSTACLE_PADDING
        return Obstacle(x=float(self.width), y=y, width=w, height=h)

    def _update_score(self):
        # points per second = level**2
        self.score_acc += (self.speed_level * self.speed_level) / SCORE_TICKS_PER_SECOND
        if self.score_acc >= 1:
            pts = int(self.score_acc)
            self.score += pts
            self.score_acc -= pts

    def check_collision(self) -> bool:
        return any(self.player.overlaps(ob) for ob in self.obstacles)

    # -------------------- Read-only view --------------------

    def snapshot(self) -> Snapshot:
        return Snapshot(
            player=copy.copy(self.player),
            particles=tuple(copy.copy(p) for p in self.particles),
            obstacles=tuple(copy.copy(ob) for ob in self.obstacles),
            score=self.score,
            speed_level=self.speed_level,
            game_speed=self.game_speed,
            tick=self.tick_count,
            width=self.width,
            height=self.height,
        )
