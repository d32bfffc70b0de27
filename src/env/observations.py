# src/env/observations.py
from __future__ import annotations
from typing import Optional, Tuple
import numpy as np

from src.platformer.config import HEIGHT, MAXVX, MAXVY, EPS
from src.platformer.entities import Level, FakePlatform
from src.platformer.player import Player

# Look-ahead columns measured from the player's centre (world space)
PROBE_OFFSETS: Tuple[int, int, int] = (80, 160, 280)
# Half-width of a probe column
PROBE_HALF_W: int = 16
# Vertical slack above/below the player inside which a hazard counts as "in the way"
DANGER_BAND_PX: int = 80

OBS_DIM = 5 + 2 * len(PROBE_OFFSETS) + 1
OBS_LOW = np.array([0.0, 0.0, -1.0, -1.0, 0.0] + [0.0, 0.0] * len(PROBE_OFFSETS) + [-1.0], dtype=np.float32)
OBS_HIGH = np.ones(OBS_DIM, dtype=np.float32)


def _clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else (hi if x > hi else x)


def _support_below(level: Level, x: float, feet_y: float) -> Optional[float]:
    """Top of the highest platform covering column x at or below the player's feet."""
    best: Optional[float] = None
    for s in level.solids:
        if isinstance(s, FakePlatform) and s.removed:
            continue
        if s.x <= x < s.x + s.w and s.y >= feet_y - EPS:
            if best is None or s.y < best:
                best = s.y
    return best


def _spans(a0: float, a1: float, b0: float, b1: float) -> bool:
    return a0 < b1 and a1 > b0


def _danger_near(level: Level, x: float, player: Player) -> int:
    x0, x1 = x - PROBE_HALF_W, x + PROBE_HALF_W
    y0, y1 = player.y - DANGER_BAND_PX, player.bottom + DANGER_BAND_PX

    boxes = [(e.x, e.y, e.w, e.h) for e in level.spikes]
    boxes += [(e.x, e.y, e.w, e.h) for e in level.moving_spikes]
    boxes += [(e.x, e.y, e.w, e.h) for e in level.crusher_walls]
    boxes += [(s.x - s.r, s.y - s.r, 2 * s.r, 2 * s.r) for s in level.saws]
    boxes += [d.collision_box() for d in level.doors if d.fake]

    for bx, by, bw, bh in boxes:
        if _spans(x0, x1, bx, bx + bw) and _spans(y0, y1, by, by + bh):
            return 1
    return 0


def build_observation(level: Level, player: Player,
                      probe_offsets: Tuple[int, ...] = PROBE_OFFSETS) -> np.ndarray:
    """
    Returns a fixed (12,) float32 vector:
      [ x_progress, y_norm, vx_norm, vy_norm, on_ground,
        support@80,  danger@80,
        support@160, danger@160,
        support@280, danger@280,
        door_dx ]
    - support is the platform top under the probe / HEIGHT; 1.0 = nothing below
    - danger flags are 0.0/1.0
    - door_dx is (door.x - player.x) / level width, clipped to [-1, 1]
    """
    width = float(max(1, level.width))
    feats = [
        _clamp(player.x / width, 0.0, 1.0),
        _clamp(player.y / max(1.0, HEIGHT - player.h), 0.0, 1.0),
        _clamp(player.vx / MAXVX, -1.0, 1.0),
        _clamp(player.vy / MAXVY, -1.0, 1.0),
        1.0 if player.on_ground else 0.0,
    ]

    for dx in probe_offsets:
        px = player.center_x + dx
        top = _support_below(level, px, player.bottom)
        feats.append(1.0 if top is None else _clamp(top / float(HEIGHT), 0.0, 1.0))
        feats.append(float(_danger_near(level, px, player)))

    door = level.door
    feats.append(0.0 if door is None else _clamp((door.x - player.x) / width, -1.0, 1.0))
    return np.asarray(feats, dtype=np.float32)
