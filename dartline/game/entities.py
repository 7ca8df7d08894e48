# dartline/game/entities.py
from __future__ import annotations
import random
from dataclasses import dataclass
import pygame
from .config import (
    PLAYER_X, PLAYER_W, PLAYER_H, BASE_MOVE_SPEED, REPULSE_PUSH, REPULSE_NUDGE,
    PARTICLE_MIN_SIZE, PARTICLE_SIZE_SPREAD, PARTICLE_FADE, PARTICLE_SHRINK,
)


@dataclass
class Particle:
    """One dot of the player's tail. Drifts left with the world and fades out."""
    x: float
    y: float
    size: float
    opacity: float = 1.0

    @classmethod
    def emit(cls, x: float, y: float, rng: random.Random) -> "Particle":
        return cls(x=x, y=y, size=rng.random() * PARTICLE_SIZE_SPREAD + PARTICLE_MIN_SIZE)

    def update(self, game_speed: float):
        self.x -= game_speed
        self.opacity -= PARTICLE_FADE
        self.size *= PARTICLE_SHRINK

    @property
    def dead(self) -> bool:
        return self.opacity <= 0


@dataclass
class Obstacle:
    """Axis-aligned block; (x, y) is its top-left corner."""
    x: float
    y: float
    width: float
    height: float

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    @property
    def off_screen(self) -> bool:
        return self.x + self.width <= 0

    @property
    def rect(self) -> pygame.Rect:
        return pygame.Rect(round(self.x), round(self.y), round(self.width), round(self.height))


@dataclass
class Player:
    """
    Arrow glyph at a fixed x. y is the CENTRE of the glyph (not its top),
    vy is the signed vertical velocity in px/tick.
    """
    x: float = float(PLAYER_X)
    y: float = 0.0
    vy: float = 0.0
    width: float = float(PLAYER_W)
    height: float = float(PLAYER_H)
    base_move_speed: float = BASE_MOVE_SPEED

    @property
    def top(self) -> float:
        return self.y - self.height / 2

    @property
    def bottom(self) -> float:
        return self.y + self.height / 2

    def update_motion(self, field_height: float):
        """
        Integrate one tick of motion, then apply boundary repulsion.
        A breach is not clamped: the glyph is thrown back 1.5 heights past
        the edge and gets a small velocity towards the middle.
        Both edges are checked every tick.
        """
        self.y += self.vy

        if self.top <= 0:
            self.y += self.height * REPULSE_PUSH
            self.vy = self.base_move_speed * REPULSE_NUDGE
        if self.bottom >= field_height:
            self.y -= self.height * REPULSE_PUSH
            self.vy = -self.base_move_speed * REPULSE_NUDGE

    def overlaps(self, ob: Obstacle) -> bool:
        """Strict AABB overlap; touching edges do not count."""
        return (
            self.x < ob.right and
            self.x + self.width > ob.x and
            self.top < ob.bottom and
            self.bottom > ob.y
        )
