# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# variates.py
# -----------------------------------------------------------------------------
# Purpose:
#   Uniform random source and exponential variates for interarrival and
#   service durations.
#
# Design notes:
#   - The engine only needs next_uniform() in [0, 1); any object with that
#     method can drive a run, which is how tests replay fixed draws.
#   - RandomSource scales a 53-bit integer so the largest draw stays below 1.
#
# Usage:
#   rng = RandomSource(seed=7)
#   dt = draw_exponential(rng, rate=2.0)
# -----------------------------------------------------------------------------

from __future__ import annotations
import math, random
from typing import Optional, Protocol

_BITS = 53
_SCALE = 1.0 / (1 << _BITS)


class UniformSource(Protocol):
    def next_uniform(self) -> float: ...


class RandomSource:
    """Seeded uniform source backed by random.Random.

    Attributes
    ----------
    seed : int | None
        Seed handed to random.Random (None seeds from the OS).
    draws : int
        Number of uniforms served so far.
    """
    def __init__(self, seed: Optional[int] = None):
        self.seed = seed
        self.draws = 0
        self._rng = random.Random(seed)

    def next_uniform(self) -> float:
        self.draws += 1
        return self._rng.getrandbits(_BITS) * _SCALE


def exponential(rate: float, u: float) -> float:
    """Inverse-CDF exponential draw with mean 1/rate from a uniform u in [0, 1)."""
    if not rate > 0:
        raise ValueError(f"rate must be positive, got {rate!r}")
    if not 0.0 <= u < 1.0:
        raise ValueError(f"uniform draw must lie in [0, 1), got {u!r}")
    return -math.log(1.0 - u) / rate


def draw_exponential(source: UniformSource, rate: float) -> float:
    return exponential(rate, source.next_uniform())
