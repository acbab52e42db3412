# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# queues.py
# -----------------------------------------------------------------------------
# Purpose:
#   Discrete-event containers: Event, the Future Event List (a binary
#   min-heap keyed by event time), and the per-stage FIFO waiting queue.
#
# Design notes:
#   - Both containers manage explicit slot arrays so the growth and shrink
#     thresholds from policies.py are observable (capacity, resizes).
#   - Events with equal times leave the FEL in insertion order (seq).
#
# Usage:
#   from tandem.queues import Event, EventType, EventQueue, StageQueue
# -----------------------------------------------------------------------------

from __future__ import annotations
from enum import Enum
from typing import Callable, Iterator, List, Optional

from .errors import EmptyQueueError
from .policies import grow_capacity, shrink_quarter


class EventType(Enum):
    ARRIVAL = "arrival"
    COMPLETE = "complete"


class Event:
    """Scheduled occurrence on the Future Event List (FEL).

    `stage` is only meaningful for COMPLETE events. `seq` is stamped by the
    EventQueue on insertion and breaks ties between equal times.
    """
    __slots__ = ("t", "kind", "job_id", "stage", "seq")

    def __init__(self, t: float, kind: EventType, job_id: int, stage: int = -1):
        self.t = t; self.kind = kind; self.job_id = job_id; self.stage = stage
        self.seq = -1

    def __lt__(self, other: "Event"):
        return (self.t, self.seq) < (other.t, other.seq)

    def __repr__(self):
        kind = getattr(self.kind, "value", self.kind)
        return f"Event(t={self.t!r}, kind={kind}, job_id={self.job_id}, stage={self.stage})"


class EventQueue:
    """Binary min-heap of events stored in a growable slot array.

    Attributes
    ----------
    capacity : int
        Number of allocated slots; doubles when full and never shrinks.
    """
    def __init__(self):
        self._slots: List[Optional[Event]] = []
        self._size = 0
        self._next_seq = 0

    def __len__(self) -> int:
        return self._size

    def __bool__(self) -> bool:
        return self._size > 0

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def insert(self, ev: Event):
        if self._size == len(self._slots):
            self._slots.extend([None] * (grow_capacity(len(self._slots)) - len(self._slots)))
        ev.seq = self._next_seq
        self._next_seq += 1
        self._slots[self._size] = ev
        self._size += 1
        self._sift_up(self._size - 1)

    def peek(self) -> Event:
        if self._size == 0:
            raise EmptyQueueError("peek on empty event queue")
        return self._slots[0]

    def extract_min(self) -> Event:
        if self._size == 0:
            raise EmptyQueueError("extract_min on empty event queue")
        heap = self._slots
        top = heap[0]
        self._size -= 1
        last = heap[self._size]
        heap[self._size] = None
        if self._size:
            heap[0] = last
            self._sift_down(0)
        return top

    def _sift_up(self, i: int):
        heap = self._slots
        ev = heap[i]
        while i > 0:
            parent = (i - 1) >> 1
            if not ev < heap[parent]:
                break
            heap[i] = heap[parent]
            i = parent
        heap[i] = ev

    def _sift_down(self, i: int):
        heap, n = self._slots, self._size
        ev = heap[i]
        while True:
            child = 2 * i + 1
            if child >= n:
                break
            if child + 1 < n and heap[child + 1] < heap[child]:
                child += 1
            if not heap[child] < ev:
                break
            heap[i] = heap[child]
            i = child
        heap[i] = ev


class StageQueue:
    """FIFO of waiting job ids backed by a circular buffer.

    Parameters
    ----------
    shrink : callable
        (length, capacity) -> new capacity or None, consulted after each pop.
        Defaults to shrinking to a quarter once less than a quarter full.

    Notes
    -----
    - Capacity starts at 0 and grows to max(16, 2*capacity) on overflow.
    - Every resize copies the live jobs to offset 0 in head-to-tail order.
    """
    def __init__(self, shrink: Callable[[int, int], Optional[int]] = shrink_quarter):
        self._buf: List[Optional[int]] = []
        self._start = 0
        self._len = 0
        self._shrink = shrink
        self.resizes = 0

    def __len__(self) -> int:
        return self._len

    def __bool__(self) -> bool:
        return self._len > 0

    def __iter__(self) -> Iterator[int]:
        cap = len(self._buf)
        for k in range(self._len):
            yield self._buf[(self._start + k) % cap]

    def __repr__(self):
        return f"StageQueue({list(self)!r}, capacity={self.capacity})"

    @property
    def capacity(self) -> int:
        return len(self._buf)

    def add(self, job_id: int):
        if self._len == len(self._buf):
            self._resize(grow_capacity(len(self._buf)))
        self._buf[(self._start + self._len) % len(self._buf)] = job_id
        self._len += 1

    def peek(self) -> int:
        if self._len == 0:
            raise EmptyQueueError("peek on empty stage queue")
        return self._buf[self._start]

    def pop(self) -> int:
        if self._len == 0:
            raise EmptyQueueError("pop on empty stage queue")
        job_id = self._buf[self._start]
        self._buf[self._start] = None
        self._start = (self._start + 1) % len(self._buf)
        self._len -= 1
        new_cap = self._shrink(self._len, len(self._buf))
        if new_cap is not None and new_cap != len(self._buf):
            self._resize(new_cap)
        return job_id

    def _resize(self, new_cap: int):
        # Caller guarantees the live jobs fit into new_cap.
        live = list(self)
        self._buf = live + [None] * (new_cap - len(live))
        self._start = 0
        self.resizes += 1
