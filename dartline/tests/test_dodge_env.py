# dartline/tests/test_dodge_env.py
"""
Quick tests for DodgeEnv (Gymnasium environment).

Usage (from repo root):
  python -m dartline.tests.test_dodge_env
  python -m dartline.tests.test_dodge_env --render
  python -m dartline.tests.test_dodge_env --no-api-check --no-determinism
"""

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Tuple

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
from gymnasium.utils.env_checker import check_env

from dartline.env.dodge_env import DodgeEnv, ACTION_SPEED_UP, ACTION_SPEED_DOWN
from dartline.env.observations import OBS_SIZE
from dartline.game.config import HEIGHT, WIDTH
from dartline.game.entities import Obstacle
from dartline.game.session import Phase

SEED = 123
STEPS = 300


def api_check(frame_skip: int = 4) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = DodgeEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def smoke_test(steps: int = STEPS, seed: int = SEED, frame_skip: int = 4) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = DodgeEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        assert env.observation_space.contains(obs), "Initial observation not in space"
        assert obs.shape == (OBS_SIZE,) and obs.dtype == np.float32

        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert r == -1.0, "crash reward"
            if term or trunc:
                break
    finally:
        env.close()


def determinism_test(steps: int = STEPS, seed: int = SEED, frame_skip: int = 4) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = DodgeEnv(frame_skip=frame_skip)
        traj: List[Tuple[np.ndarray, float, bool, bool]] = []
        try:
            obs, _ = env.reset(seed=seed_val)
            for a in action_seq:
                obs, r, term, trunc, _ = env.step(int(a))
                traj.append((obs.copy(), float(r), bool(term), bool(trunc)))
                if term or trunc:
                    break
        finally:
            env.close()
        return traj

    rng = np.random.RandomState(42)
    action_seq = [int(rng.randint(0, 9)) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        if not np.allclose(o1, o2):
            raise AssertionError(f"Determinism: obs mismatch at step {i}")
        if not (r1 == r2 and te1 == te2 and tr1 == tr2):
            raise AssertionError(f"Determinism: transition mismatch at step {i}")


def speed_actions_test() -> None:
    env = DodgeEnv(frame_skip=1)
    try:
        env.reset(seed=SEED)
        for _ in range(3):
            _, _, _, _, info = env.step(ACTION_SPEED_UP)
        assert info["speed_level"] == 3
        _, _, _, _, info = env.step(ACTION_SPEED_DOWN)
        assert info["speed_level"] == 2
    finally:
        env.close()


def movement_actions_test() -> None:
    env = DodgeEnv(frame_skip=1)
    try:
        obs, _ = env.reset(seed=SEED)
        y0 = obs[0]
        obs, *_ = env.step(3)         # up x2
        assert obs[0] < y0 and obs[1] == -1.0
        obs, *_ = env.step(0)         # release
        assert obs[1] == 0.0
        obs, *_ = env.step(4)         # down x1
        assert obs[1] == 0.5
    finally:
        env.close()


def truncation_test() -> None:
    env = DodgeEnv(frame_skip=4, time_limit_seconds=1.0)
    try:
        env.reset(seed=SEED)
        trunc = False
        n = 0
        while not trunc:
            _, _, term, trunc, _ = env.step(0)
            n += 1
            assert not term, "no obstacle can reach the player within one second"
        assert n == 15, f"expected 15 decisions in one second, got {n}"
    finally:
        env.close()


def after_crash_test() -> None:
    """Stepping a finished episode keeps it finished and never restarts the game."""
    env = DodgeEnv(frame_skip=1)
    try:
        env.reset(seed=SEED)
        sim = env.session.sim
        sim.obstacles = [Obstacle(x=110.0, y=sim.player.y - 10, width=30.0, height=30.0)]
        _, r, term, _, info = env.step(0)
        assert term and r == -1.0, "crash ends the episode with -1"
        ticks = info["ticks"]

        for a in (4, 4, ACTION_SPEED_UP, 0):
            _, r, term, _, info = env.step(a)
            assert term, "a finished episode must stay terminated"
            assert r == 0.0, "no reward after the crash"
            assert info["ticks"] == ticks, "the world must not advance after the crash"
        assert env.session.phase is Phase.GAME_OVER
        assert env.session.games_played == 1, "no new game was started"
    finally:
        env.close()


def rgb_array_test() -> None:
    env = DodgeEnv(render_mode="rgb_array")
    try:
        env.reset(seed=SEED)
        env.step(0)
        frame = env.render()
        assert frame.shape == (HEIGHT, WIDTH, 3) and frame.dtype == np.uint8
    finally:
        env.close()


def render_demo(steps: int, seed: int, frame_skip: int) -> None:
    """Open a window and run a short demo so you can visually verify behavior."""
    env = DodgeEnv(render_mode="human", frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps):
            obs, r, term, trunc, info = env.step(env.action_space.sample())
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Render demo finished")


# pytest entry points
def test_api():
    api_check()

def test_smoke():
    smoke_test()

def test_determinism():
    determinism_test()

def test_speed_actions():
    speed_actions_test()

def test_movement_actions():
    movement_actions_test()

def test_truncation():
    truncation_test()

def test_step_after_crash():
    after_crash_test()

def test_rgb_array():
    rgb_array_test()


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=SEED, help="Episode seed for tests")
    ap.add_argument("--steps", type=int, default=STEPS, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim ticks per decision step")
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    ap.add_argument("--no-smoke", action="store_true", help="Skip smoke test")
    ap.add_argument("--no-determinism", action="store_true", help="Skip determinism test")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            api_check(frame_skip=args.frame_skip)
            print("✓ API check ok")
        if not args.no_smoke:
            smoke_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Smoke test ok")
        if not args.no_determinism:
            determinism_test(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip)
            print("✓ Determinism ok")
        speed_actions_test()
        movement_actions_test()
        truncation_test()
        after_crash_test()
        print("✓ Action mapping ok")
        if args.render:
            os.environ.pop("SDL_VIDEODRIVER", None)
            render_demo(steps=min(args.steps, 600), seed=args.seed, frame_skip=args.frame_skip)
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
