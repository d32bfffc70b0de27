# src/tests/test_session.py
"""
Session transitions: door -> next level, restart, level select, difficulty,
and the persisted progress surface.

Usage (from repo root):
  python -m src.tests.test_session
"""
from __future__ import annotations
import tempfile
from pathlib import Path

from src.platformer.config import HEIGHT, TOTAL_LEVELS, PLAYER_H
from src.platformer.entities import Difficulty, Level, Door, Checkpoint, Spike
from src.platformer.level import build_level
from src.platformer.physics import LevelCompleted, LevelFailed, PlayerDied, CheckpointActivated
from src.platformer.player import Intent, Player
from src.platformer.progress import FileProgressStore, MemoryProgressStore
from src.platformer.session import Session, SelectResult


def door_level(index: int, fake: bool = False, difficulty=Difficulty.HARD) -> Level:
    return Level(index=index, difficulty=difficulty, width=2000,
                 spawn=(80, HEIGHT - 260), doors=[Door(500, 400, fake=fake)])


def put_player_in_door(session: Session, fake: bool = False) -> None:
    session.level = door_level(session.level_index, fake, session.difficulty)
    session.player = Player.at((505, 350))


def test_defaults_from_store():
    s = Session()
    assert s.difficulty is Difficulty.HARD and s.unlocked_levels == 1
    assert s.level_index == 0 and s.deaths == 0
    assert s.level == build_level(0, Difficulty.HARD)
    assert (s.player.x, s.player.y) == s.level.spawn and s.player.alive


def test_real_door_advances_level():
    store = MemoryProgressStore()
    s = Session(store)
    put_player_in_door(s)
    result = s.step(Intent())
    assert result.of_type(LevelCompleted) == [LevelCompleted(1)]
    assert s.level_index == 1
    assert s.level == build_level(1, s.difficulty)
    assert s.unlocked_levels == 2 and store.unlocked_levels == 2
    assert s.checkpoint is None
    assert (s.player.x, s.player.y) == s.level.spawn and s.player.vx == 0.0


def test_fake_door_kills_without_advancing():
    s = Session()
    put_player_in_door(s, fake=True)
    result = s.step(Intent())
    assert result.of_type(PlayerDied) and result.of_type(LevelFailed)
    assert not result.of_type(LevelCompleted)
    assert s.level_index == 0 and s.unlocked_levels == 1


def test_last_level_wraps_to_zero():
    store = MemoryProgressStore(unlocked_levels=TOTAL_LEVELS)
    s = Session(store, level_index=TOTAL_LEVELS - 1)
    put_player_in_door(s)
    result = s.step(Intent())
    assert result.of_type(LevelCompleted) == [LevelCompleted(0)]
    assert s.level_index == 0
    assert s.unlocked_levels == TOTAL_LEVELS


def test_unlocks_never_decrease():
    store = MemoryProgressStore()
    s = Session(store)
    seen = [s.unlocked_levels]
    for _ in range(5):
        s.next_level()
        seen.append(s.unlocked_levels)
    assert seen == [1, 2, 3, 4, 5, 6]
    assert s.select_level(2) is SelectResult.OK
    s.next_level()
    assert s.level_index == 3 and s.unlocked_levels == 6
    assert store.unlocked_levels == 6


def test_locked_level_is_rejected():
    s = Session()
    before = s.level
    assert s.select_level(1) is SelectResult.LOCKED
    assert s.level is before and s.level_index == 0
    assert s.select_level(0) is SelectResult.OK
    assert s.level is not before and s.level == before


def test_locked_starting_level_falls_back_to_first():
    store = MemoryProgressStore(unlocked_levels=1)
    s = Session(store, level_index=5)
    assert s.level_index == 0 and s.level == build_level(0, s.difficulty)
    assert Session(store, level_index=-1).level_index == 0

    store = MemoryProgressStore(unlocked_levels=6)
    assert Session(store, level_index=5).level_index == 5
    assert Session(store, level_index=6).level_index == 0


def test_select_wraps_negative_index():
    s = Session(MemoryProgressStore(unlocked_levels=TOTAL_LEVELS))
    assert s.select_level(-1) is SelectResult.OK
    assert s.level_index == TOTAL_LEVELS - 1
    assert Session(s.store, level_index=-1).level_index == TOTAL_LEVELS - 1
    # wrapped index is still subject to the lock
    assert Session().select_level(-1) is SelectResult.LOCKED


def test_restart_replaces_player_by_value():
    s = Session()
    old = s.player
    old.x, old.vx, old.alive = 999.0, 3.0, False
    new = s.restart()
    assert new is s.player and new is not old
    assert new.alive and new.vx == 0.0 and new.vy == 0.0
    assert (new.x, new.y) == s.level.spawn
    assert s.deaths == 1
    assert old.x == 999.0


def test_checkpoint_moves_respawn_until_next_level():
    s = Session()
    s.level = Level(index=0, difficulty=s.difficulty, width=2000, spawn=(80, HEIGHT - 260),
                    checkpoints=[Checkpoint(400, 300)], spikes=[Spike(1000, 300, 50, 18)])
    s.player = Player.at((390, 290))
    result = s.step(Intent())
    assert result.of_type(CheckpointActivated)
    assert s.checkpoint == (400, 300)

    s.player.x, s.player.y = 1000, 280     # die on the spike
    assert s.step(Intent()).of_type(PlayerDied)
    p = s.restart()
    assert (p.x, p.y) == (380, 300 - PLAYER_H - 6) and p.alive
    assert s.respawn_point() == p.spawn == (380, 300 - PLAYER_H - 6)
    # a second restart still uses the checkpoint
    p = s.restart()
    assert (p.x, p.y) == (380, 300 - PLAYER_H - 6) and s.deaths == 2

    s.next_level()
    assert s.checkpoint is None
    assert (s.player.x, s.player.y) == s.level.spawn


def test_set_difficulty_persists_and_rebuilds():
    store = MemoryProgressStore()
    s = Session(store)
    s.set_difficulty("easy")
    assert s.difficulty is Difficulty.EASY and store.difficulty is Difficulty.EASY
    assert s.level == build_level(0, Difficulty.EASY)
    saves = store.saves
    s.set_difficulty(Difficulty.EASY)
    assert store.saves == saves


def test_file_store_round_trip():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "progress.txt"
        store = FileProgressStore(path)
        assert store.load() == (Difficulty.HARD, 1)          # missing file -> defaults

        s = Session(store)
        s.set_difficulty("easy")
        s.next_level(); s.next_level()
        assert FileProgressStore(path).load() == (Difficulty.EASY, 3)
        assert "unlocked_levels=3" in path.read_text(encoding="utf-8")

        # a new session picks the persisted values up
        again = Session(FileProgressStore(path))
        assert again.difficulty is Difficulty.EASY and again.unlocked_levels == 3


def test_file_store_save_replaces_whole_file():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "progress.txt"
        path.write_text("difficulty=easy\nunlocked_levels=9\nstale=1\n", encoding="utf-8")
        FileProgressStore(path).save(Difficulty.HARD, 4)
        assert path.read_text(encoding="utf-8") == "difficulty=hard\nunlocked_levels=4\n"
        assert sorted(p.name for p in Path(tmp).iterdir()) == ["progress.txt"]


def test_file_store_tolerates_junk():
    with tempfile.TemporaryDirectory() as tmp:
        path = Path(tmp) / "progress.txt"
        path.write_text("difficulty=nightmare\nunlocked_levels=lots\n", encoding="utf-8")
        assert FileProgressStore(path).load() == (Difficulty.HARD, 1)
        path.write_text("unlocked_levels=0\n", encoding="utf-8")
        assert FileProgressStore(path).load() == (Difficulty.HARD, 1)


def main():
    tests = [v for k, v in sorted(globals().items()) if k.startswith("test_") and callable(v)]
    for t in tests:
        t()
        print(f"✓ {t.__name__}")
    print("🎉 All session tests passed")


if __name__ == "__main__":
    main()
