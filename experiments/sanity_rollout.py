# /experiments/sanity_rollout.py
"""
Sanity rollouts for DodgeEnv:
- Runs RANDOM and/or TINY-HEURISTIC policies over fixed seeds
- Prints one summary line per episode, then per-policy means

Usage examples (from repo root):
  # Both policies over 20 default seeds, frame_skip=4:
  python -m experiments.sanity_rollout --policies both

  # Only heuristic, custom seeds, aiming for speed level 5:
  python -m experiments.sanity_rollout --policies heuristic --seeds 111,222,333 --target-level 5

  # Quick random-only smoke with fewer steps:
  python -m experiments.sanity_rollout --policies random --steps 300
"""

from __future__ import annotations
import argparse
from typing import Dict, List, Tuple

import numpy as np

from dartline.env.dodge_env import DodgeEnv, ACTION_SPEED_UP
from dartline.env.observations import SLOT_SIZE
from dartline.game.config import OBSTACLE_MAX_COUNT, MAX_SPEED_LEVEL, PLAYER_H, HEIGHT


# ------------------------ Policies ------------------------

def random_policy_init(action_seed: int):
    rng = np.random.RandomState(action_seed)
    def act(_obs: np.ndarray) -> int:
        return int(rng.randint(0, 9))
    return act

def tiny_heuristic_policy_init(target_level: int):
    """
    Very small rule:
      - Raise the speed level until it reaches `target_level`.
      - Look at the nearest obstacle within a short horizon; if it covers the
        player's row, steer to whichever side of it has more room.
      - Otherwise drift back towards the middle of the field.
    """
    half_h = (PLAYER_H / 2) / HEIGHT
    margin = 0.04

    def act(obs: np.ndarray) -> int:
        y, speed = float(obs[0]), float(obs[2])
        if round(speed * MAX_SPEED_LEVEL) < target_level:
            return ACTION_SPEED_UP

        for i in range(OBSTACLE_MAX_COUNT):
            b = 3 + SLOT_SIZE * i
            present, dx, top, bottom = obs[b:b + 4]
            if present < 0.5 or dx > 0.35:
                continue
            if y + half_h + margin > top and y - half_h - margin < bottom:
                room_above = top
                room_below = 1.0 - bottom
                return 3 if room_above > room_below else 6
            break

        if y < 0.45:
            return 4
        if y > 0.55:
            return 1
        return 0
    return act


# ------------------------ Rollout core ------------------------

def run_one_episode(policy_name: str,
                    seed: int,
                    frame_skip: int,
                    steps_limit: int,
                    target_level: int) -> Tuple[int, float, int, int, bool, bool]:
    """
    Returns: (ep_len, ret_sum, score, speed_level, terminated, truncated)
    """
    env = DodgeEnv(frame_skip=frame_skip)

    if policy_name == "random":
        # action RNG seed derived from the episode seed for determinism
        policy = random_policy_init(10_000 + seed)
    elif policy_name == "heuristic":
        policy = tiny_heuristic_policy_init(target_level)
    else:
        raise ValueError(f"Unknown policy {policy_name!r}")

    ret_sum = 0.0
    ep_len = 0
    term = trunc = False
    info: Dict = {}

    try:
        obs, info = env.reset(seed=seed)
        for _ in range(steps_limit):
            obs, r, term, trunc, info = env.step(policy(obs))
            ret_sum += float(r)
            ep_len += 1
            if term or trunc:
                break
    finally:
        env.close()

    return ep_len, ret_sum, int(info.get("score", 0)), int(info.get("speed_level", 0)), bool(term), bool(trunc)


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--policies", type=str, default="both",
                    choices=["random", "heuristic", "both"],
                    help="Which policy to run")
    ap.add_argument("--seeds", type=str, default="",
                    help="Comma-separated seeds. If empty, uses 20 defaults: 101..120")
    ap.add_argument("--frame-skip", type=int, default=4,
                    help="Sim ticks per decision step")
    ap.add_argument("--steps", type=int, default=10_000,
                    help="Hard cap on decision steps (env may truncate earlier)")
    ap.add_argument("--target-level", type=int, default=3,
                    help="Speed level the heuristic climbs to")
    args = ap.parse_args()

    if args.seeds.strip():
        seeds = [int(s) for s in args.seeds.split(",") if s.strip()]
    else:
        seeds = list(range(101, 121))  # 20 fixed eval seeds by default

    to_run = ["random", "heuristic"] if args.policies == "both" else [args.policies]
    decision_hz = 60 / max(1, args.frame_skip)

    print(f"Running policies={to_run} on {len(seeds)} seeds "
          f"(frame_skip={args.frame_skip}, decision_hz≈{decision_hz:.1f})")

    for policy_name in to_run:
        lens: List[int] = []
        scores: List[int] = []
        for seed in seeds:
            ep_len, ret_sum, score, level, terminated, truncated = run_one_episode(
                policy_name=policy_name,
                seed=seed,
                frame_skip=args.frame_skip,
                steps_limit=args.steps,
                target_level=args.target_level,
            )
            lens.append(ep_len)
            scores.append(score)
            print(f"[{policy_name}] seed={seed}  len={ep_len}  score={score}  lvl={level}  "
                  f"ret={ret_sum:.1f}  term={terminated} trunc={truncated}")

        print(f"[{policy_name}] mean len={np.mean(lens):.1f}  mean score={np.mean(scores):.1f}")

    print("✓ Sanity rollouts complete")


if __name__ == "__main__":
    main()
