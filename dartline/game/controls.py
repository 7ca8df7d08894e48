# dartline/game/controls.py
"""
Key bindings and the vertical-movement intent.

Movement keys come in two groups of three tiers (digit row or keypad):
    up:   9 -> x2,  8 -> x1.5,  7 -> x1   (negative vy)
    down: 1 -> x2,  2 -> x1.5,  3 -> x1   (positive vy)
The strongest held tier of a group wins. The down group is evaluated last,
so it overrides the up group when both are held.
"""
from __future__ import annotations
from typing import Iterable, Set, Tuple
import pygame

SPEED_UP_KEYS = frozenset({pygame.K_6})
SPEED_DOWN_KEYS = frozenset({pygame.K_4})

# (keys, multiplier of base_move_speed), strongest tier first
UP_TIERS: Tuple[Tuple[frozenset, float], ...] = (
    (frozenset({pygame.K_9, pygame.K_KP9}), 2.0),
    (frozenset({pygame.K_8, pygame.K_KP8}), 1.5),
    (frozenset({pygame.K_7, pygame.K_KP7}), 1.0),
)
DOWN_TIERS: Tuple[Tuple[frozenset, float], ...] = (
    (frozenset({pygame.K_1, pygame.K_KP1}), 2.0),
    (frozenset({pygame.K_2, pygame.K_KP2}), 1.5),
    (frozenset({pygame.K_3, pygame.K_KP3}), 1.0),
)


def _strongest(tiers, held: Set[int]) -> float | None:
    for keys, mult in tiers:
        if keys & held:
            return mult
    return None


def velocity_intent(held: Iterable[int], base_move_speed: float) -> float:
    """Signed vy for the given set of held keys (0.0 when no movement key is held)."""
    held = set(held)
    vy = 0.0
    up = _strongest(UP_TIERS, held)
    if up is not None:
        vy = -base_move_speed * up
    down = _strongest(DOWN_TIERS, held)
    if down is not None:
        vy = base_move_speed * down
    return vy


def speed_step(key: int) -> int:
    """+1 / -1 for the speed keys, 0 for anything else."""
    if key in SPEED_UP_KEYS:
        return 1
    if key in SPEED_DOWN_KEYS:
        return -1
    return 0


class InputState:
    """Currently held keys. Lives for the whole session, across restarts."""

    def __init__(self):
        self.held: Set[int] = set()

    def press(self, key: int):
        self.held.add(key)

    def release(self, key: int):
        self.held.discard(key)

    def intent(self, base_move_speed: float) -> float:
        return velocity_intent(self.held, base_move_speed)
