# dartline/env/observations.py
"""
Observation vector for DodgeEnv, shape (19,), float32:

    [y_norm, vy_norm, speed_norm,
     slot0: present, dx_norm, top_norm, bottom_norm,
     ...
     slot3: present, dx_norm, top_norm, bottom_norm]

Slots hold the obstacles sorted by x (nearest first). Empty slots are all
zeros. dx is measured from the player's nose (x + width) and clipped at 0,
so an obstacle already alongside the player reads 0.
"""
from __future__ import annotations
import numpy as np

from ..game.config import OBSTACLE_MAX_COUNT, MAX_SPEED_LEVEL
from ..game.simulation import Snapshot

SLOT_SIZE = 4
OBS_SIZE = 3 + SLOT_SIZE * OBSTACLE_MAX_COUNT


def _clip01(v: float) -> float:
    return max(0.0, min(1.0, v))


def build_observation(snap: Snapshot) -> np.ndarray:
    pl = snap.player
    max_vy = 2.0 * pl.base_move_speed     # fastest movement tier

    obs = np.zeros(OBS_SIZE, dtype=np.float32)
    obs[0] = _clip01(pl.y / snap.height)
    obs[1] = max(-1.0, min(1.0, pl.vy / max_vy))
    obs[2] = _clip01(snap.speed_level / MAX_SPEED_LEVEL)

    nose = pl.x + pl.width
    ahead = sorted(snap.obstacles, key=lambda ob: ob.x)[:OBSTACLE_MAX_COUNT]
    for i, ob in enumerate(ahead):
        b = 3 + SLOT_SIZE * i
        obs[b] = 1.0
        obs[b + 1] = _clip01((ob.x - nose) / snap.width)
        obs[b + 2] = _clip01(ob.y / snap.height)
        obs[b + 3] = _clip01(ob.bottom / snap.height)
    return obs
