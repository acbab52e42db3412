# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# policies.py
# -----------------------------------------------------------------------------
# Purpose:
#   Capacity policies for the growable containers: event heap, stage waiting
#   queues and occupancy histograms.
#
# Design notes:
#   - Keep pure functions to ease testing (sizes in -> new capacity out).
#   - Shrink policies return None when the container should keep its size.
#
# Usage:
#   from tandem.policies import grow_capacity, SHRINK_POLICIES
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Callable, Dict, Optional

MIN_CAPACITY = 16


def grow_capacity(capacity: int) -> int:
    """Capacity after an overflow: doubles, never below MIN_CAPACITY."""
    return max(MIN_CAPACITY, capacity * 2)


def histogram_capacity(index: int) -> int:
    """Slots needed so that `index` becomes addressable in a histogram."""
    return max(MIN_CAPACITY, 2 * index)


def shrink_quarter(length: int, capacity: int) -> Optional[int]:
    """
    Shrink to a quarter as soon as the queue is less than a quarter full.
    Can thrash when the length oscillates around capacity/4.
    """
    if length < capacity / 4:
        return capacity // 4
    return None


def shrink_hysteresis(length: int, capacity: int) -> Optional[int]:
    """Same trigger as shrink_quarter but only halves, leaving room to regrow."""
    if length < capacity / 4:
        return capacity // 2
    return None


SHRINK_POLICIES: Dict[str, Callable[[int, int], Optional[int]]] = {
    "quarter": shrink_quarter,
    "hysteresis": shrink_hysteresis,
}
