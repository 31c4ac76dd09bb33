"""Seeded randomness for deterministic race simulation.

mulberry32 over 32-bit unsigned integers. Every value the core draws comes from
a generator built here, so the same seed always reproduces the same roster,
program and results, bit for bit, on any platform.

Sub-streams are derived by plain seed arithmetic (``seed + offset``); this is
an ad hoc mixing scheme with no statistical guarantees. Changing it alters
every derived sequence.
"""
from __future__ import annotations

import time
from typing import Callable

UINT32_MASK = 0xFFFFFFFF
UINT32_SCALE = 4294967296.0
MULBERRY_INCREMENT = 0x6D2B79F5


def _imul(a: int, b: int) -> int:
    # Low 32 bits of the product, kept unsigned.
    return (a * b) & UINT32_MASK


def normalize_seed(seed: int) -> int:
    """Map any integer seed (negative, zero, wider than 32 bits) into [0, 2**32)."""
    if isinstance(seed, bool):
        raise TypeError("seed must be an integer, not bool")
    return int(seed) & UINT32_MASK


def mulberry32(seed: int) -> Callable[[], float]:
    """Return a generator yielding the mulberry32 sequence for ``seed``.

    Each call returns the next float in [0, 1). The only state is the
    generator's own 32-bit counter.
    """
    state = normalize_seed(seed)

    def next_float() -> float:
        nonlocal state
        state = (state + MULBERRY_INCREMENT) & UINT32_MASK
        t = _imul(state ^ (state >> 15), state | 1)
        t ^= (t + _imul(t ^ (t >> 7), t | 61)) & UINT32_MASK
        return ((t ^ (t >> 14)) & UINT32_MASK) / UINT32_SCALE

    return next_float


def derive_seed(seed: int, offset: int) -> int:
    """Seed of a sub-stream: the base seed shifted by ``offset``."""
    return int(seed) + int(offset)


def wall_clock_seed(clock: Callable[[], float] = time.time) -> int:
    """Fresh session seed: milliseconds since the epoch.

    The one non-reproducible input of the core; pass ``clock`` to pin it.
    """
    return int(clock() * 1000)
