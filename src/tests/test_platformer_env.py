# src/tests/test_platformer_env.py
"""
Quick tests for PlatformerEnv (Gymnasium environment).

Usage (from repo root):
  python -m src.tests.test_platformer_env
  python -m src.tests.test_platformer_env --render
  pytest src/tests/test_platformer_env.py
"""

from __future__ import annotations
import argparse
import os
import sys
from typing import List, Tuple

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import numpy as np
from gymnasium.utils.env_checker import check_env

from src.env.platformer_env import PlatformerEnv, ACTIONS
from src.env.observations import OBS_DIM
from src.platformer.config import WIDTH, HEIGHT, TOTAL_LEVELS
from src.platformer.level import build_level


def test_api_check(frame_skip: int = 4) -> None:
    """Verify Gym API contract (spaces, step/reset signatures, types)."""
    env = PlatformerEnv(frame_skip=frame_skip)
    try:
        check_env(env, skip_render_check=True)
    finally:
        env.close()


def test_smoke(steps: int = 300, seed: int = 3, frame_skip: int = 4) -> None:
    """Short random rollout: no crashes, obs in space, reward type, proper terminations."""
    env = PlatformerEnv(frame_skip=frame_skip)
    try:
        obs, info = env.reset(seed=seed)
        assert obs.shape == (OBS_DIM,) and obs.dtype == np.float32
        assert env.observation_space.contains(obs), "Initial observation not in space"
        env.action_space.seed(seed)

        for t in range(steps):
            a = env.action_space.sample()
            obs, r, term, trunc, info = env.step(a)
            assert isinstance(r, float), "Reward must be a float"
            assert env.observation_space.contains(obs), f"Step {t}: observation out of bounds"
            if term:
                assert info["completed"] or info["death_cause"] is not None
            if term or trunc:
                break
    finally:
        env.close()


def test_determinism(steps: int = 200, seed: int = 11, frame_skip: int = 4) -> None:
    """Same seed + same action sequence => identical obs/reward/terminal flags."""
    def rollout(seed_val: int, action_seq: List[int]) -> List[Tuple[np.ndarray, float, bool, bool]]:
        env = PlatformerEnv(frame_skip=frame_skip)
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
    action_seq = [int(rng.randint(0, len(ACTIONS))) for _ in range(steps)]

    t1 = rollout(seed, action_seq)
    t2 = rollout(seed, action_seq)

    assert len(t1) == len(t2), "Determinism: trajectory length mismatch"
    for i, ((o1, r1, te1, tr1), (o2, r2, te2, tr2)) in enumerate(zip(t1, t2)):
        assert np.array_equal(o1, o2), f"Determinism: obs mismatch at step {i}"
        assert (r1, te1, tr1) == (r2, te2, tr2), f"Determinism: transition mismatch at step {i}"


def test_seed_selects_level() -> None:
    env = PlatformerEnv(difficulty="easy")
    try:
        env.reset(seed=TOTAL_LEVELS + 5)
        assert env.session.level_index == 5
        assert env.session.level == build_level(5, "easy")

        env.reset(options={"level": 9, "difficulty": "hard"})
        assert env.session.level == build_level(9, "hard")
        # no seed, no options: same level again
        _, info = env.reset()
        assert info["level"] == 9 and info["difficulty"] == "hard"
    finally:
        env.close()


def test_rgb_array_render() -> None:
    env = PlatformerEnv(render_mode="rgb_array")
    try:
        env.reset(seed=0)
        frame = env.render()
        assert frame.shape == (HEIGHT, WIDTH, 3) and frame.dtype == np.uint8
        assert frame.any()
    finally:
        env.close()


def test_jumps_counted_in_info() -> None:
    env = PlatformerEnv(difficulty="easy")
    try:
        _, info = env.reset(seed=0)
        assert info["jumps"] == 0
        for _ in range(40):
            _, _, term, trunc, info = env.step(3)   # jump in place on the spawn pad
            assert not (term or trunc)
        assert info["jumps"] >= 2
        _, info = env.reset(seed=0)
        assert info["jumps"] == 0
    finally:
        env.close()


def render_demo(steps: int, seed: int, frame_skip: int) -> None:
    """Open a window and hold RIGHT so you can visually verify behavior."""
    env = PlatformerEnv(render_mode="human", frame_skip=frame_skip)
    try:
        env.reset(seed=seed)
        for _ in range(steps):
            _, _, term, trunc, _ = env.step(2)
            if term or trunc:
                break
    finally:
        env.close()
    print("✓ Render demo finished")


def main():
    ap = argparse.ArgumentParser()
    ap.add_argument("--seed", type=int, default=7, help="Episode seed (= level) for tests")
    ap.add_argument("--steps", type=int, default=300, help="Max decision steps per test")
    ap.add_argument("--frame-skip", type=int, default=4, help="Sim frames per decision step")
    ap.add_argument("--render", action="store_true", help="Run a short visual demo")
    ap.add_argument("--no-api-check", action="store_true", help="Skip Gym API compliance check")
    args = ap.parse_args()

    try:
        if not args.no_api_check:
            test_api_check(frame_skip=args.frame_skip); print("✓ API check ok")
        test_smoke(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip); print("✓ Smoke test ok")
        test_determinism(steps=args.steps, seed=args.seed, frame_skip=args.frame_skip); print("✓ Determinism ok")
        test_seed_selects_level(); print("✓ Seed -> level ok")
        test_rgb_array_render(); print("✓ rgb_array render ok")
        test_jumps_counted_in_info(); print("✓ Jump counter ok")
        if args.render:
            render_demo(steps=min(args.steps, 600), seed=args.seed, frame_skip=args.frame_skip)
    except AssertionError as e:
        print(f"✗ Test failed: {e}", file=sys.stderr)
        sys.exit(1)
    else:
        print("🎉 All selected tests passed")


if __name__ == "__main__":
    main()
