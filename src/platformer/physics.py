# src/platformer/physics.py
"""
One fixed frame of simulation.

`step()` mutates the level's moving entities and the player in place and
reports what happened through `StepResult.events`. It never swaps the level:
when the real door opens it only sets `door_opened`, and the owner of the
level (the session) rebuilds between frames.
"""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Tuple
from .config import (
    GRAV, FRICTION, MOVE, JUMP, MAXVX, MAXVY, EPS, SAFETY_LINE,
    FAKE_BOUNCE, FALL_SPEED, CHECKPOINT_MARGIN,
    CHECKPOINT_SPAWN_DX, CHECKPOINT_SPAWN_DY, BLINK_PERIOD,
)
from .collision import Box, boxes_overlap, box_hits_circle
from .entities import Level, Platform, FakePlatform, MovingPlatform
from .player import Intent, Player


# --- events surfaced to the host ---

@dataclass(frozen=True)
class PlayerDied:
    cause: str                      # "spike" | "spike_bar" | "saw" | "crusher" | "fake_door"


@dataclass(frozen=True)
class CheckpointActivated:
    position: Tuple[float, float]


@dataclass(frozen=True)
class LevelCompleted:
    next_index: int


@dataclass(frozen=True)
class LevelFailed:
    """The door the player walked into was fake."""


@dataclass
class StepResult:
    events: List[object] = field(default_factory=list)
    door_opened: bool = False
    jumped: bool = False

    @property
    def died(self) -> bool:
        return any(isinstance(e, PlayerDied) for e in self.events)

    def of_type(self, kind) -> list:
        return [e for e in self.events if isinstance(e, kind)]


def kill(player: Player, result: StepResult, cause: str) -> None:
    """alive -> dead, once. Further lethal contacts while dead are ignored."""
    if not player.alive:
        return
    player.alive = False
    if cause == "fake_door":
        result.events.append(LevelFailed())
    result.events.append(PlayerDied(cause))


def _player_box(player: Player) -> Box:
    return Box(player.x, player.y, player.w, player.h)


# ------------------------------------------------------------------ stages

def _integrate(player: Player, intent: Intent, result: StepResult) -> None:
    if player.alive:
        if intent.left:
            player.vx -= MOVE
        if intent.right:
            player.vx += MOVE
        if intent.jump and player.on_ground:
            player.vy = -JUMP
            player.on_ground = False
            result.jumped = True

    player.vx = max(-MAXVX, min(MAXVX, player.vx))
    player.vy = min(player.vy + GRAV, MAXVY)
    player.x += player.vx
    player.y += player.vy

    # friction only while still standing (a jump this frame clears it)
    if player.on_ground:
        player.vx *= FRICTION
    player.on_ground = False


def _advance_solids(level: Level, player: Player) -> None:
    """Kinematics for every platform, decided against one snapshot of the player."""
    for solid in level.solids:
        if isinstance(solid, MovingPlatform):
            solid.advance()

    snapshot = _player_box(player)
    touched = [s for s in level.solids if s.falls and boxes_overlap(snapshot, s)]
    for solid in touched:
        solid.fall_vy = FALL_SPEED
    for solid in level.solids:
        solid.y += solid.fall_vy


def _resolve_against(player: Player, solid: Platform) -> None:
    if player.bottom <= solid.y + EPS:
        player.y = solid.y - player.h
        player.vy = 0.0
        player.on_ground = True
    elif player.y >= solid.y + solid.h - EPS:
        player.y = solid.y + solid.h
        player.vy = 0.0
    elif player.center_x < solid.x + solid.w / 2:
        player.x = solid.x - player.w
        player.vx = 0.0
    else:
        player.x = solid.x + solid.w
        player.vx = 0.0


def _collide_solids(level: Level, player: Player) -> None:
    for solid in level.solids:
        if isinstance(solid, FakePlatform):
            if solid.removed or not boxes_overlap(player, solid):
                continue
            solid.removed = True
            player.vy = -FAKE_BOUNCE
        elif boxes_overlap(player, solid):
            _resolve_against(player, solid)


def _collide_hazards(level: Level, player: Player, result: StepResult) -> None:
    for bar in level.moving_spikes:
        bar.advance()
        if boxes_overlap(player, bar):
            kill(player, result, "spike_bar")

    for saw in level.saws:
        saw.advance()
        if box_hits_circle(player, saw.x, saw.y, saw.r):
            kill(player, result, "saw")

    for wall in level.crusher_walls:
        wall.advance()
        if boxes_overlap(player, wall):
            kill(player, result, "crusher")

    # hidden spikes are only a rendering difference
    for spike in level.spikes:
        if boxes_overlap(player, spike):
            kill(player, result, "spike")


def _doors(level: Level, player: Player, result: StepResult) -> None:
    if not player.alive:
        return
    for door in level.doors:
        if door.open or not boxes_overlap(player, Box(*door.collision_box())):
            continue
        if door.fake:
            kill(player, result, "fake_door")
        else:
            door.open = True
            result.door_opened = True
        return


def _checkpoints(level: Level, player: Player, result: StepResult) -> None:
    if not player.alive:
        return
    for cp in level.checkpoints:
        if cp.active:
            continue
        if box_hits_circle(player, cp.x, cp.y, cp.r + CHECKPOINT_MARGIN):
            cp.active = True
            player.spawn = (cp.x - CHECKPOINT_SPAWN_DX, cp.y - player.h - CHECKPOINT_SPAWN_DY)
            result.events.append(CheckpointActivated((cp.x, cp.y)))


def _safety_clamp(player: Player) -> None:
    if player.bottom > SAFETY_LINE:
        player.y = SAFETY_LINE - player.h
        player.vy = 0.0
        player.on_ground = True


def step(level: Level, player: Player, intent: Optional[Intent] = None) -> StepResult:
    """Advance `level` and `player` by one frame."""
    intent = intent or Intent()
    result = StepResult()

    _integrate(player, intent, result)
    _advance_solids(level, player)
    _collide_solids(level, player)
    _collide_hazards(level, player, result)
    _doors(level, player, result)
    _checkpoints(level, player, result)
    _safety_clamp(player)

    player.blink_timer += 1
    if player.blink_timer > BLINK_PERIOD:
        player.blink_timer = 0
    return result
