# src/platformer/rng.py
"""Seeded linear-congruential stream used by the level builder.

Same seed -> same sequence, on every platform and every run. Nothing here
touches Python's global `random` state.
"""
from __future__ import annotations
from dataclasses import dataclass

LCG_A = 1664525
LCG_C = 1013904223
MASK_32 = 0xFFFFFFFF
TWO_32 = 4294967296.0


@dataclass
class SeededStream:
    state: int

    def __post_init__(self):
        self.state &= MASK_32

    def next(self) -> float:
        """Advance the state once and return a float in [0, 1)."""
        self.state = (self.state * LCG_A + LCG_C) & MASK_32
        return self.state / TWO_32

    __call__ = next

    def below(self, n: int) -> int:
        """Integer in [0, n), i.e. floor(next() * n)."""
        return int(self.next() * n)

    def chance(self, p: float) -> bool:
        return self.next() < p


def create_stream(seed: int) -> SeededStream:
    return SeededStream(int(seed))
