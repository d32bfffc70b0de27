# src/platformer/entities.py
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, List, Optional, Tuple
from .config import DOOR_W, DOOR_H, CHECKPOINT_R


class Axis(str, Enum):
    X = "x"
    Y = "y"


class Difficulty(str, Enum):
    EASY = "easy"
    HARD = "hard"

    @classmethod
    def parse(cls, value) -> "Difficulty":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty {value!r} (expected 'easy' or 'hard')") from None


@dataclass
class Oscillator:
    """
    Back-and-forth motion along one axis.
    `t` is the offset from the centre; it is kept within [-range, range] and
    the direction reverses on the frame it would leave that interval.
    """
    axis: Axis = Axis.X
    speed: float = 0.0
    range: float = 0.0
    t: float = 0.0
    direction: int = 1

    def advance(self) -> float:
        """Move one frame; returns the positional delta along `axis`."""
        t = self.t + self.speed * self.direction
        if abs(t) > self.range:
            self.direction = -self.direction
            t = max(-self.range, min(self.range, t))
        delta = t - self.t
        self.t = t
        return delta


def _apply(motion: Oscillator, ent) -> None:
    delta = motion.advance()
    if motion.axis is Axis.X:
        ent.x += delta
    else:
        ent.y += delta


# ---------------------------------------------------------------- platforms

@dataclass
class Platform:
    x: float
    y: float
    w: float
    h: float
    falls: bool = False       # drops away once the player touches it
    fall_vy: float = 0.0


@dataclass
class StaticPlatform(Platform):
    pass


@dataclass
class FakePlatform(Platform):
    removed: bool = False     # once triggered it never collides again


@dataclass
class MovingPlatform(Platform):
    motion: Oscillator = field(default_factory=Oscillator)

    def advance(self) -> None:
        _apply(self.motion, self)


# ------------------------------------------------------------------ hazards

@dataclass
class Spike:
    x: float
    y: float
    w: float
    h: float
    hidden: bool = False      # drawn near-invisible, still lethal


@dataclass
class MovingSpike:
    x: float
    y: float
    w: float
    h: float
    motion: Oscillator = field(default_factory=lambda: Oscillator(Axis.Y))

    def advance(self) -> None:
        _apply(self.motion, self)


@dataclass
class Saw:
    x: float                  # centre
    y: float
    r: float
    motion: Oscillator = field(default_factory=Oscillator)

    def advance(self) -> None:
        _apply(self.motion, self)


@dataclass
class CrusherWall:
    x: float
    y: float
    w: float
    h: float
    motion: Oscillator = field(default_factory=Oscillator)

    def advance(self) -> None:
        _apply(self.motion, self)


# ------------------------------------------------------------ interactables

@dataclass
class Door:
    x: float                  # anchor: bottom-left corner
    y: float
    fake: bool = False
    open: bool = False
    w: float = DOOR_W
    h: float = DOOR_H

    def collision_box(self) -> Tuple[float, float, float, float]:
        return (self.x, self.y - self.h, self.w, self.h)


@dataclass
class Checkpoint:
    x: float
    y: float
    r: float = CHECKPOINT_R
    active: bool = False


@dataclass
class Level:
    index: int
    difficulty: Difficulty
    width: int
    spawn: Tuple[float, float]
    solids: List[Platform] = field(default_factory=list)
    spikes: List[Spike] = field(default_factory=list)
    moving_spikes: List[MovingSpike] = field(default_factory=list)
    saws: List[Saw] = field(default_factory=list)
    crusher_walls: List[CrusherWall] = field(default_factory=list)
    doors: List[Door] = field(default_factory=list)
    checkpoints: List[Checkpoint] = field(default_factory=list)

    @property
    def door(self) -> Optional[Door]:
        return self.doors[0] if self.doors else None

    def oscillators(self) -> Iterator[Oscillator]:
        for s in self.solids:
            if isinstance(s, MovingPlatform):
                yield s.motion
        for group in (self.moving_spikes, self.saws, self.crusher_walls):
            for ent in group:
                yield ent.motion
