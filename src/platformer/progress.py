# src/platformer/progress.py
"""
The only persisted state: difficulty and the unlocked-levels high-water mark.
The session receives a store; where the values live is the store's business.
"""
from __future__ import annotations
from pathlib import Path
from typing import Dict, Protocol, Tuple, Union
from .entities import Difficulty

DEFAULT_DIFFICULTY = Difficulty.HARD
DEFAULT_UNLOCKED = 1


class ProgressStore(Protocol):
    def load(self) -> Tuple[Difficulty, int]: ...
    def save(self, difficulty: Difficulty, unlocked_levels: int) -> None: ...


def _sanitize(difficulty, unlocked) -> Tuple[Difficulty, int]:
    try:
        diff = Difficulty.parse(difficulty)
    except ValueError:
        diff = DEFAULT_DIFFICULTY
    try:
        n = int(unlocked)
    except (TypeError, ValueError):
        n = DEFAULT_UNLOCKED
    return diff, max(DEFAULT_UNLOCKED, n)


class MemoryProgressStore:
    def __init__(self, difficulty=DEFAULT_DIFFICULTY, unlocked_levels: int = DEFAULT_UNLOCKED):
        self.difficulty, self.unlocked_levels = _sanitize(difficulty, unlocked_levels)
        self.saves = 0

    def load(self) -> Tuple[Difficulty, int]:
        return self.difficulty, self.unlocked_levels

    def save(self, difficulty: Difficulty, unlocked_levels: int) -> None:
        self.difficulty, self.unlocked_levels = _sanitize(difficulty, unlocked_levels)
        self.saves += 1


class FileProgressStore:
    """
    Plain `key=value` text file:
        difficulty=hard
        unlocked_levels=4
    Missing file or junk values -> defaults.
    """
    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read(self) -> Dict[str, str]:
        data: Dict[str, str] = {}
        if self.path.exists():
            for line in self.path.read_text(encoding="utf-8").splitlines():
                if "=" in line:
                    k, v = line.split("=", 1)
                    data[k.strip()] = v.strip()
        return data

    def load(self) -> Tuple[Difficulty, int]:
        data = self._read()
        return _sanitize(data.get("difficulty", DEFAULT_DIFFICULTY.value),
                         data.get("unlocked_levels", DEFAULT_UNLOCKED))

    def save(self, difficulty: Difficulty, unlocked_levels: int) -> None:
        diff, n = _sanitize(difficulty, unlocked_levels)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        lines = [f"difficulty={diff.value}", f"unlocked_levels={n}"]
        # write-then-rename: readers see either the old file or the new one
        tmp = self.path.with_name(self.path.name + ".tmp")
        tmp.write_text("\n".join(lines) + "\n", encoding="utf-8")
        tmp.replace(self.path)
