# experiments/replay.py
"""
Replay tool for PlatformerEnv — quick command cheat sheet

# Typical usage (run from REPO ROOT so `src/...` imports work)

# Replay a HEURISTIC episode by level seed (uses experiments/runs/traces/heuristic/<seed>_actions.npy)
python -m experiments.replay --policy heuristic --seed 5

# Replay by pointing directly to a specific actions file (bypasses --policy/--seed lookup)
python -m experiments.replay --trace experiments/runs/traces/random/3_actions.npy --frame-skip 4

# Slow the display to ~decision rate (~15 fps) for readability
python -m experiments.replay --policy heuristic --seed 5 --slow

# Controls during replay
SPACE = pause/resume
N     = single step (when paused)
R     = restart episode
ESC   = quit

# Notes
- Deterministic: given the same level seed, difficulty, frame_skip and action
  sequence, replay matches the original run.
- With --trace the meta sidecar is not read; pass --frame-skip / --difficulty if they differ.
"""

from __future__ import annotations
import argparse
from pathlib import Path
from typing import Optional, List

import numpy as np
import pygame

from src.env.platformer_env import PlatformerEnv
from src.env.observations import PROBE_OFFSETS

DEFAULT_OUT_DIR = "experiments/runs"
ACTION_NAMES = ("NOOP", "LEFT", "RIGHT", "JUMP", "LEFT+JUMP", "RIGHT+JUMP")


def _find_trace(out_dir: Path, policy: str, seed: int) -> Path:
    p = out_dir / "traces" / policy / f"{seed}_actions.npy"
    if not p.exists():
        raise FileNotFoundError(f"Trace not found: {p}")
    return p

def _read_meta(out_dir: Path, policy: str, seed: int) -> dict:
    meta_path = out_dir / "traces" / policy / f"{seed}_meta.txt"
    meta = {}
    if meta_path.exists():
        for line in meta_path.read_text(encoding="utf-8").splitlines():
            if "=" in line:
                k, v = line.split("=", 1)
                meta[k.strip()] = v.strip()
    return meta

def _draw_overlay(env: PlatformerEnv, step_idx: int, action: Optional[int]):
    surf = pygame.display.get_surface()
    if surf is None or env.session is None:
        return
    font = pygame.font.SysFont("jetbrainsmono", 16)
    obs = env._get_obs()
    player = env.session.player

    lines: List[str] = []
    lines.append(f"Level={env.level_index + 1}  Step={step_idx}  "
                 f"Action={ACTION_NAMES[action] if action is not None else '-'}")
    lines.append(f"x={player.x:.1f}  Cause={env.death_cause or '—'}  Done={env.completed}")
    lines.append(f"vx={obs[2]:+.2f}  vy={obs[3]:+.2f}  ground={int(obs[4])}")
    for i, dx in enumerate(PROBE_OFFSETS):
        support, danger = obs[5 + 2*i], obs[6 + 2*i]
        lines.append(f"+{dx:>3}: support={support:.2f}  danger={int(danger)}")

    panel = pygame.Surface((360, 20 * (len(lines) + 1)), pygame.SRCALPHA)
    panel.fill((10, 20, 35, 160))
    surf.blit(panel, (12, 12))
    for i, txt in enumerate(lines):
        surf.blit(font.render(txt, True, (210, 230, 255)), (20, 18 + i*20))
    pygame.display.flip()

def replay_episode(seed: int, actions: np.ndarray, frame_skip: int,
                   difficulty: str = "hard", slow: bool = False):
    """
    Replays an episode deterministically with on-screen overlay.
    Controls:
      SPACE: pause/resume   N: single-step when paused
      R: restart episode    ESC: quit
    """
    env = PlatformerEnv(render_mode="human", frame_skip=frame_skip, difficulty=difficulty)
    env.reset(seed=seed)

    paused = False
    step_once = False
    step_idx = 0
    action: Optional[int] = None
    clock = pygame.time.Clock()

    try:
        running = True
        while running and step_idx < len(actions):
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                    elif event.key == pygame.K_SPACE:
                        paused = not paused
                    elif event.key == pygame.K_n and paused:
                        step_once = True
                    elif event.key == pygame.K_r:
                        env.reset(seed=seed)
                        step_idx = 0
                        paused = False

            if paused and not step_once:
                env.render()
                _draw_overlay(env, step_idx, action=None)
                clock.tick(60)
                continue
            step_once = False

            action = int(actions[step_idx])
            _, _, term, trunc, _ = env.step(action)
            _draw_overlay(env, step_idx, action)
            step_idx += 1

            clock.tick(15 if slow else 60)

            if term or trunc:
                pygame.time.delay(600)
                break
    finally:
        env.close()

def main():
    ap = argparse.ArgumentParser(description="Replay a recorded PlatformerEnv episode with overlay.")
    ap.add_argument("--seed", type=int, help="Episode (level) seed")
    ap.add_argument("--policy", type=str, default="random",
                    help="Trace subfolder name, e.g. random / heuristic / rl")
    ap.add_argument("--trace", type=str, default="",
                    help="Optional explicit path to a .npy action file")
    ap.add_argument("--out-dir", type=str, default=DEFAULT_OUT_DIR,
                    help="Base directory where experiments/runs live")
    ap.add_argument("--frame-skip", type=int, default=-1,
                    help="Override frame_skip. If <0, use meta or default=4")
    ap.add_argument("--difficulty", type=str, default="",
                    help="Override difficulty. If empty, use meta or default=hard")
    ap.add_argument("--slow", action="store_true", help="Slow display (~15 fps) for readability")
    args = ap.parse_args()

    out_dir = Path(args.out_dir)

    meta = {}
    if args.trace:
        trace_path = Path(args.trace)
        if not trace_path.exists():
            raise FileNotFoundError(f"Trace file not found: {trace_path}")
        if args.seed is None:
            stem = trace_path.stem.split("_")[0]
            if not stem.isdigit():
                raise SystemExit("Cannot infer the seed from the trace name; pass --seed")
            args.seed = int(stem)
    else:
        if args.seed is None:
            raise SystemExit("Please provide --seed or --trace")
        trace_path = _find_trace(out_dir, args.policy, args.seed)
        meta = _read_meta(out_dir, args.policy, args.seed)

    actions = np.load(trace_path)
    if actions.ndim != 1:
        raise ValueError(f"Expected 1D action array, got shape {actions.shape}")

    fs = args.frame_skip if args.frame_skip > 0 else int(meta.get("frame_skip", 4))
    difficulty = args.difficulty or meta.get("difficulty", "hard")

    print(f"Replaying level={args.seed}  policy={args.policy}  steps={len(actions)}  "
          f"frame_skip={fs}  difficulty={difficulty}")
    print("Controls: SPACE pause/resume | N step (when paused) | R restart | ESC quit")

    replay_episode(seed=args.seed, actions=actions, frame_skip=fs, difficulty=difficulty, slow=args.slow)

if __name__ == "__main__":
    main()
