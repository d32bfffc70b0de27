# src/platformer/level.py
from __future__ import annotations
from .config import (
    HEIGHT, SPAWN_X, SPAWN_Y, PLAYER_H, SPAWN_PAD_W, SPAWN_PAD_H,
    TOTAL_LEVELS, SEED_BASE, SEED_LEVEL_STRIDE, SEED_HARD_OFFSET, FLOOR_MARGIN,
)
from .entities import (
    Axis, Difficulty, Level, Oscillator,
    StaticPlatform, FakePlatform, MovingPlatform,
    Spike, MovingSpike, Saw, CrusherWall, Door, Checkpoint,
)
from .rng import SeededStream, create_stream


def normalize_level_index(index: int) -> int:
    """Out-of-range indices wrap instead of failing (-1 -> last level)."""
    return int(index) % TOTAL_LEVELS


def level_seed(index: int, difficulty) -> int:
    difficulty = Difficulty.parse(difficulty)
    bonus = SEED_HARD_OFFSET if difficulty is Difficulty.HARD else 0
    return SEED_BASE + index * SEED_LEVEL_STRIDE + bonus


class LevelBuilder:
    """
    Builds one level from a single seeded stream.
    Every stage draws from the same stream, so stage order and the number of
    draws per stage (including the hard-only ones) fix the whole layout.
    """
    def __init__(self, index: int, difficulty):
        self.index = normalize_level_index(index)
        self.difficulty = Difficulty.parse(difficulty)
        self.hard = self.difficulty is Difficulty.HARD
        self.rng: SeededStream = create_stream(level_seed(self.index, self.difficulty))

    def build(self) -> Level:
        r = self.rng
        width = 2000 + r.below(700)
        level = Level(index=self.index, difficulty=self.difficulty,
                      width=width, spawn=(SPAWN_X, SPAWN_Y))

        level.solids.append(StaticPlatform(0, HEIGHT - 60, width + FLOOR_MARGIN, 60))
        self._spawn_pad(level)
        self._platforms(level)
        self._spikes(level)
        self._saws(level)
        self._spike_bars(level)
        self._crushers(level)
        door_x = self._door(level)
        self._checkpoints(level)
        # safety net just before the door
        level.solids.append(StaticPlatform(door_x - 60, HEIGHT - 140, 120, 18))
        return level

    # ------------------------------------------------------------- stages

    def _spawn_pad(self, level: Level):
        sx, sy = level.spawn
        level.solids.append(StaticPlatform(sx - 10, sy + PLAYER_H + 2, SPAWN_PAD_W, SPAWN_PAD_H))

    def _platforms(self, level: Level):
        r = self.rng
        count = 8 + r.below(6) + (4 if self.hard else 0)
        thickness = 16 if self.hard else 18
        x = 260
        for _ in range(count):
            y = HEIGHT - (160 + r.below(140))
            if self.hard and r.chance(0.35):
                y -= r.below(80)
            w = 80 + r.below(120)
            roll = r.next()
            if roll < 0.18:
                plat = FakePlatform(x, y, w, thickness)
            elif roll < 0.36:
                plat = MovingPlatform(x, y, w, thickness, motion=self._platform_motion())
            else:
                plat = StaticPlatform(x, y, w, thickness)
            plat.falls = r.chance(0.24)
            level.solids.append(plat)
            x += w + 110 + r.below(140)

    def _platform_motion(self) -> Oscillator:
        r = self.rng
        if r.chance(0.5):
            speed = 2.2 + r.next() * 2.6
            return Oscillator(Axis.X, speed, 150 + r.next() * 180)
        speed = 2.0 + r.next() * 2.6
        return Oscillator(Axis.Y, speed, 130 + r.next() * 180)

    def _spikes(self, level: Level):
        r = self.rng
        count = 6 + r.below(6) + (4 if self.hard else 0)
        for _ in range(count):
            sx = 420 + r.below(level.width - 600)
            sw = 30 + r.below(60)
            hidden = r.chance(0.25)
            level.spikes.append(Spike(sx, HEIGHT - 78, sw, 18, hidden))

    def _axis(self) -> Axis:
        return Axis.X if self.rng.chance(0.5) else Axis.Y

    def _saws(self, level: Level):
        r = self.rng
        count = 3 + r.below(3) + (2 if self.hard else 0)
        for _ in range(count):
            axis = self._axis()
            cx = 400 + r.below(level.width - 500)
            cy = HEIGHT - (160 + r.below(240))
            speed = (4.1 if self.hard else 3.4) + r.next() * 1.8
            rng_ = 160 + r.next() * 240
            radius = 16 + r.next() * 6
            level.saws.append(Saw(cx, cy, radius, Oscillator(axis, speed, rng_)))

    def _spike_bars(self, level: Level):
        r = self.rng
        count = 2 + r.below(3) + (2 if self.hard else 0)
        for _ in range(count):
            axis = self._axis()
            bx = 600 + r.below(level.width - 700)
            by = HEIGHT - (140 + r.below(260))
            w = 40 + r.below(40)
            speed = (3.8 if self.hard else 3.0) + r.next() * 1.6
            rng_ = 130 + r.next() * 180
            level.moving_spikes.append(MovingSpike(bx, by, w, 18, Oscillator(axis, speed, rng_)))

    def _crushers(self, level: Level):
        r = self.rng
        if r.chance(0.75):
            motion = Oscillator(Axis.Y, 4.0 if self.hard else 3.2, 240 + r.next() * 100)
            level.solids.append(MovingPlatform(1100, 60, 120, 20, motion=motion))
        if r.chance(0.65):
            x = 300 + r.next() * 500
            motion = Oscillator(Axis.X, 3.4 if self.hard else 2.6, 740 + r.next() * 600)
            level.crusher_walls.append(CrusherWall(x, HEIGHT - 280, 24, 320, motion))

    def _door(self, level: Level) -> float:
        door_x = level.width - 120
        level.doors.append(Door(door_x, HEIGHT - 220, fake=self.rng.chance(0.22)))
        return door_x

    def _checkpoints(self, level: Level):
        r = self.rng
        count = 1 + (1 if r.chance(0.5) else 0)
        for _ in range(count):
            cx = 450 + r.below(level.width - 700)
            cy = HEIGHT - (220 + r.below(160))
            level.checkpoints.append(Checkpoint(cx, cy))


def build_level(index: int, difficulty) -> Level:
    """Pure: the same (index, difficulty) always yields an equal Level."""
    return LevelBuilder(index, difficulty).build()
