# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# metrics.py
# -----------------------------------------------------------------------------
# Purpose:
#   Time-weighted occupancy histograms per stage and for the whole network,
#   plus the run counters summarized at the end of a replication.
#
# Design notes:
#   - Keep side-effect methods (note_*) for instrumentation from the router.
#   - Histograms hold accumulated time until normalized into a pmf.
#   - Summaries return JSON-serializable dicts for easy tabulation.
#
# Usage:
#   M = Metrics(stage_count); M.observe(dt, levels, total); M.summary(t)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Sequence

from .errors import ZeroMassError
from .policies import histogram_capacity


class OccupancyDistribution:
    """Growable histogram mapping occupancy level n -> accumulated time.

    After normalize() each slot holds the fraction of time spent with exactly
    n jobs present, and the slots sum to 1.
    """
    def __init__(self):
        self._slots: List[float] = []

    def __len__(self) -> int:
        return len(self._slots)

    def __getitem__(self, n: int) -> float:
        if n < 0:
            raise IndexError(n)
        return self._slots[n] if n < len(self._slots) else 0.0

    def __repr__(self):
        return f"OccupancyDistribution({self.pmf()!r})"

    @property
    def capacity(self) -> int:
        return len(self._slots)

    def add(self, index: int, amount: float):
        if index < 0:
            raise ValueError(f"occupancy level must be non-negative, got {index}")
        if amount < 0:
            raise ValueError(f"accumulated time must be non-negative, got {amount}")
        if index >= len(self._slots):
            self._slots.extend([0.0] * (histogram_capacity(index) - len(self._slots)))
        self._slots[index] += amount

    def total(self) -> float:
        return sum(self._slots)

    def normalize(self) -> "OccupancyDistribution":
        total = self.total()
        if total <= 0.0:
            raise ZeroMassError("cannot normalize a distribution with no accumulated time")
        self._slots = [v / total for v in self._slots]
        return self

    def pmf(self) -> List[float]:
        """Slot values with trailing empty levels dropped."""
        end = len(self._slots)
        while end and self._slots[end - 1] == 0.0:
            end -= 1
        return self._slots[:end]

    def mean(self) -> float:
        """Mean level; on an un-normalized histogram this is the time integral."""
        return sum(n * p for n, p in enumerate(self._slots))

    def copy(self) -> "OccupancyDistribution":
        dup = OccupancyDistribution()
        dup._slots = list(self._slots)
        return dup


class Metrics:
    def __init__(self, stage_count: int):
        self.stage_count = stage_count
        self.stage_hist = [OccupancyDistribution() for _ in range(stage_count)]
        self.aggregate_hist = OccupancyDistribution()
        self.arrivals = 0
        self.departures = 0
        self.events = 0
        self.served = [0] * stage_count      # completions per stage

    def observe(self, dt: float, levels: Sequence[int], total: int):
        """Credit dt of simulated time to the levels held before the event."""
        for s, n in enumerate(levels):
            self.stage_hist[s].add(n, dt)
        self.aggregate_hist.add(total, dt)

    def note_event(self):
        self.events += 1

    def note_arrival(self, job_id: int, t: float):
        self.arrivals += 1

    def note_complete(self, stage: int, job_id: int, t: float):
        self.served[stage] += 1

    def note_departure(self, job_id: int, t: float):
        self.departures += 1

    def distributions(self):
        """Normalized copies of the per-stage and aggregate histograms."""
        return (
            [h.copy().normalize() for h in self.stage_hist],
            self.aggregate_hist.copy().normalize(),
        )

    def summary(self, sim_time: float) -> Dict:
        per_stage, aggregate = self.distributions()
        return {
            "sim_time": sim_time,
            "stage_count": self.stage_count,
            "arrivals": self.arrivals,
            "departures": self.departures,
            "events": self.events,
            "served": list(self.served),
            "stage_pmf": [d.pmf() for d in per_stage],
            "aggregate_pmf": aggregate.pmf(),
            "mean_occupancy": [d.mean() for d in per_stage],
            "mean_aggregate_occupancy": aggregate.mean(),
            # P(n > 0) is the fraction of time the single server was busy
            "utilization": [1.0 - d[0] for d in per_stage],
            "throughput": self.departures / sim_time if sim_time > 0 else 0.0,
        }
