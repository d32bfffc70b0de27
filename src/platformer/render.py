# src/platformer/render.py
from __future__ import annotations
import math
import pygame
from .config import (
    WIDTH, HEIGHT,
    COLOR_BG, COLOR_SOLID, COLOR_FAKE, COLOR_MOVE, COLOR_SPIKE, HIDDEN_SPIKE_ALPHA,
    COLOR_DOOR, COLOR_DOOR_OPEN, COLOR_DOOR_FAKE, COLOR_SAW, COLOR_SAW_TEETH,
    COLOR_WALL, COLOR_CHECKPOINT, COLOR_CHECKPOINT_ON, COLOR_GRASS,
    COLOR_PLAYER, COLOR_PLAYER_LEGS, COLOR_EYES,
)
from .entities import Level, FakePlatform, MovingPlatform
from .player import Player


def camera_x(level: Level, player: Player) -> float:
    return max(0.0, min(player.x - WIDTH * 0.4, float(level.width)))


def _rect(x, y, w, h, cam: float) -> pygame.Rect:
    return pygame.Rect(int(x - cam), int(y), int(w), int(h))


def _draw_saw(surf: pygame.Surface, cx: int, cy: int, r: float):
    pygame.draw.circle(surf, COLOR_SAW, (cx, cy), int(r))
    for i in range(8):
        a = (i / 8) * math.tau
        tooth = [
            (cx + math.cos(a) * r, cy + math.sin(a) * r),
            (cx + math.cos(a + 0.2) * (r + 6), cy + math.sin(a + 0.2) * (r + 6)),
            (cx + math.cos(a + 0.4) * r, cy + math.sin(a + 0.4) * r),
        ]
        pygame.draw.polygon(surf, COLOR_SAW_TEETH, tooth)


def _draw_player(surf: pygame.Surface, player: Player, cam: float):
    body = _rect(player.x, player.y, player.w, player.h, cam)
    pygame.draw.rect(surf, COLOR_PLAYER, body)
    legs_h = player.h * 0.42
    pygame.draw.rect(surf, COLOR_PLAYER_LEGS,
                     _rect(player.x, player.y + player.h - legs_h, player.w, legs_h, cam))
    eye_y = body.top + player.h * 0.22
    if player.blinking:
        for fx in (0.22, 0.58):
            pygame.draw.rect(surf, COLOR_EYES, (int(body.left + player.w * fx), int(eye_y), int(player.w * 0.2), 3))
    else:
        ew, eh = player.w * 0.32, player.h * 0.24
        for fx in (0.32, 0.68):
            ex = body.left + player.w * fx - ew / 2
            pygame.draw.ellipse(surf, COLOR_EYES, (int(ex), int(eye_y - eh / 2), int(ew), int(eh)))


def draw_world(surf: pygame.Surface, level: Level, player: Player) -> float:
    """Paint one frame. Returns the camera offset used."""
    cam = camera_x(level, player)
    surf.fill(COLOR_BG)

    pygame.draw.rect(surf, COLOR_GRASS, _rect(-400, HEIGHT - 30, level.width + 800, 30, cam))

    for s in level.solids:
        if isinstance(s, FakePlatform):
            if s.removed:
                continue
            color = COLOR_FAKE
        elif isinstance(s, MovingPlatform):
            color = COLOR_MOVE
        else:
            color = COLOR_SOLID
        pygame.draw.rect(surf, color, _rect(s.x, s.y, s.w, s.h, cam))

    for sp in level.spikes:
        r = _rect(sp.x, sp.y, sp.w, sp.h, cam)
        if sp.hidden:
            ghost = pygame.Surface(r.size, pygame.SRCALPHA)
            ghost.fill((*COLOR_SPIKE, HIDDEN_SPIKE_ALPHA))
            surf.blit(ghost, r.topleft)
        else:
            pygame.draw.rect(surf, COLOR_SPIKE, r)

    for ms in level.moving_spikes:
        pygame.draw.rect(surf, COLOR_SPIKE, _rect(ms.x, ms.y, ms.w, ms.h, cam))

    for saw in level.saws:
        _draw_saw(surf, int(saw.x - cam), int(saw.y), saw.r)

    for wall in level.crusher_walls:
        pygame.draw.rect(surf, COLOR_WALL, _rect(wall.x, wall.y, wall.w, wall.h, cam))

    for d in level.doors:
        color = COLOR_DOOR_OPEN if d.open else (COLOR_DOOR_FAKE if d.fake else COLOR_DOOR)
        pygame.draw.rect(surf, color, _rect(*d.collision_box(), cam))

    for cp in level.checkpoints:
        color = COLOR_CHECKPOINT_ON if cp.active else COLOR_CHECKPOINT
        pygame.draw.circle(surf, color, (int(cp.x - cam), int(cp.y)), int(cp.r))

    _draw_player(surf, player, cam)
    return cam
