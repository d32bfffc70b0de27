# src/platformer/collision.py
from __future__ import annotations
from typing import NamedTuple


class Box(NamedTuple):
    x: float
    y: float
    w: float
    h: float


def boxes_overlap(a, b) -> bool:
    """
    Open-interval AABB test on anything with x/y/w/h.
    Touching edges do not overlap; a zero-size box never overlaps anything.
    """
    if a.w <= 0 or a.h <= 0 or b.w <= 0 or b.h <= 0:
        return False
    return (a.x < b.x + b.w and a.x + a.w > b.x and
            a.y < b.y + b.h and a.y + a.h > b.y)


def box_circle_overlap(px: float, py: float, pw: float, ph: float,
                       cx: float, cy: float, cr: float) -> bool:
    """Clamp the circle centre into the box, then compare squared distances."""
    if pw <= 0 or ph <= 0:
        return False
    nx = max(px, min(cx, px + pw))
    ny = max(py, min(cy, py + ph))
    dx, dy = cx - nx, cy - ny
    return dx * dx + dy * dy <= cr * cr


def box_hits_circle(box, cx: float, cy: float, cr: float) -> bool:
    return box_circle_overlap(box.x, box.y, box.w, box.h, cx, cy, cr)
