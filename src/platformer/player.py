# src/platformer/player.py
from __future__ import annotations
from dataclasses import dataclass
from typing import Tuple
from .config import PLAYER_W, PLAYER_H, SPAWN_X, SPAWN_Y, BLINK_FRAMES


@dataclass(frozen=True)
class Intent:
    """Held-button state for one frame (level-triggered, not edge-triggered)."""
    left: bool = False
    right: bool = False
    jump: bool = False


@dataclass
class Player:
    """
    Top-left anchored box with per-frame velocity.
    Replaced wholesale on death/restart; never patched back to life.
    """
    x: float
    y: float
    vx: float = 0.0
    vy: float = 0.0
    w: float = PLAYER_W
    h: float = PLAYER_H
    on_ground: bool = False
    alive: bool = True
    spawn: Tuple[float, float] = (SPAWN_X, SPAWN_Y)
    blink_timer: int = 0

    @classmethod
    def at(cls, spawn: Tuple[float, float]) -> "Player":
        sx, sy = spawn
        return cls(x=float(sx), y=float(sy), spawn=(float(sx), float(sy)))

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center_x(self) -> float:
        return self.x + self.w / 2

    @property
    def blinking(self) -> bool:
        return self.blink_timer < BLINK_FRAMES
