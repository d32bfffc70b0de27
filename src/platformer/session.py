# src/platformer/session.py
from __future__ import annotations
from enum import Enum
from typing import Optional, Tuple
from .config import TOTAL_LEVELS
from .entities import Difficulty, Level
from .level import build_level, normalize_level_index
from .physics import CheckpointActivated, LevelCompleted, StepResult, step
from .player import Intent, Player
from .progress import MemoryProgressStore, ProgressStore


class SelectResult(str, Enum):
    OK = "ok"
    LOCKED = "locked"


class Session:
    """
    Everything one play-through owns: the current level, the player, and
    progress counters. The host calls `step()` once per frame and may call
    `restart()`, `select_level()` or `set_difficulty()` between frames.
    """
    def __init__(self, store: Optional[ProgressStore] = None, level_index: int = 0):
        self.store: ProgressStore = store if store is not None else MemoryProgressStore()
        self.difficulty, self.unlocked_levels = self.store.load()
        index = normalize_level_index(level_index)
        # a locked starting level falls back to the first one
        self.level_index = index if self.is_unlocked(index) else 0
        self.deaths = 0
        self.checkpoint: Optional[Tuple[float, float]] = None
        self.level: Level = build_level(self.level_index, self.difficulty)
        self.player: Player = Player.at(self.level.spawn)

    # ------------------------------------------------------------ helpers

    def respawn_point(self) -> Tuple[float, float]:
        """Level spawn, or the spot physics re-pointed at the last checkpoint."""
        return self.player.spawn

    def _load_level(self, index: int) -> None:
        self.level_index = normalize_level_index(index)
        self.level = build_level(self.level_index, self.difficulty)
        self.checkpoint = None
        self.player = Player.at(self.level.spawn)

    def _persist(self) -> None:
        self.store.save(self.difficulty, self.unlocked_levels)

    # -------------------------------------------------------- transitions

    def step(self, intent: Optional[Intent] = None) -> StepResult:
        result = step(self.level, self.player, intent)
        for ev in result.of_type(CheckpointActivated):
            self.checkpoint = ev.position
        if result.door_opened:
            result.events.append(self.next_level())
        return result

    def restart(self) -> Player:
        """Counts a death and puts a brand-new player at the respawn anchor."""
        self.deaths += 1
        self.player = Player.at(self.respawn_point())
        return self.player

    def next_level(self) -> LevelCompleted:
        nxt = self.level_index + 1
        if nxt >= TOTAL_LEVELS:
            nxt = 0
        self._load_level(nxt)
        need = self.level_index + 1
        if self.unlocked_levels < need:
            self.unlocked_levels = need
            self._persist()
        return LevelCompleted(self.level_index)

    def is_unlocked(self, index: int) -> bool:
        return normalize_level_index(index) < self.unlocked_levels

    def select_level(self, index: int) -> SelectResult:
        index = normalize_level_index(index)
        if not self.is_unlocked(index):
            return SelectResult.LOCKED
        self._load_level(index)
        return SelectResult.OK

    def set_difficulty(self, difficulty) -> None:
        """Persist the choice and rebuild the current level under it."""
        difficulty = Difficulty.parse(difficulty)
        if difficulty is self.difficulty:
            return
        self.difficulty = difficulty
        self._persist()
        self._load_level(self.level_index)
