# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# simulation.py
# -----------------------------------------------------------------------------
# Purpose:
#   Simulate a single replication: build stages, router and metrics, seed
#   the arrival stream, run the event loop, and return occupancy results.
#
# Design notes:
#   - Env is the whole simulation context; nothing outside a run mutates it.
#   - Before each event the elapsed time is credited to the occupancy levels
#     that held since the previous event (no warm-up truncation).
#   - Output formatting and plots live in experiments/.
#
# Usage:
#   from tandem.simulation import run, run_one
#   result = run(TandemConfig.from_dict(cfg))
#   summary = run_one(cfg)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import Dict, List, Optional, Tuple

from .arrivals import schedule_arrivals
from .entities import SimulationResult, TandemConfig
from .errors import InvariantError
from .metrics import Metrics
from .network import Router
from .queues import Event, EventQueue
from .stations import make_stages
from .variates import RandomSource, UniformSource


class Env:
    """Simulation context holding the clock, FEL, stages and job counters.

    Attributes
    ----------
    t : float
        Simulation clock; never decreases.
    FEL : EventQueue
        Min-heap of scheduled events.
    stages : list[Stage]
        Stage records in line order (shared with the router).
    total_jobs : int
        Jobs admitted so far; also the id of the next arrival.
    jobs_in_system : int
        Jobs admitted but not yet departed from the last stage.
    trace : list | None
        (t, kind, job_id, stage) per processed event when tracing.
    """
    def __init__(self, config: TandemConfig, router: Router, rng: UniformSource):
        self.config = config
        self.router = router
        self.rng = rng
        self.stages = router.S
        self.metrics = router.M
        self.t: float = 0.0
        self.FEL = EventQueue()
        self.total_jobs = 0
        self.jobs_in_system = 0
        self.trace: Optional[List[Tuple[float, str, int, int]]] = [] if config.trace else None

    def schedule(self, ev: Event):
        self.FEL.insert(ev)

    def levels(self) -> List[int]:
        return [st.occupancy for st in self.stages]

    def run_until(self, horizon: float):
        while self.FEL and self.t < horizon:
            ev = self.FEL.extract_min()
            levels = self.levels()
            if sum(levels) != self.jobs_in_system:
                raise InvariantError(
                    f"t={self.t}: stage occupancies {levels} do not add up to {self.jobs_in_system} jobs"
                )
            self.metrics.observe(ev.t - self.t, levels, self.jobs_in_system)
            self.t = ev.t
            self.metrics.note_event()
            if self.trace is not None:
                self.trace.append((ev.t, ev.kind.value, ev.job_id, ev.stage))
            self.router.dispatch(self, ev)


def run(config: TandemConfig, rng: Optional[UniformSource] = None) -> SimulationResult:
    """Run one replication and return normalized per-stage/aggregate pmfs."""
    if rng is None:
        rng = RandomSource(config.seed)
    stages = make_stages(config)
    M = Metrics(config.stage_count)
    router = Router(stages, M)
    env = Env(config, router, rng)

    schedule_arrivals(env)
    env.run_until(config.horizon)

    per_stage, aggregate = M.distributions()
    return SimulationResult(
        per_stage=per_stage,
        aggregate=aggregate,
        raw_per_stage=[h.copy() for h in M.stage_hist],
        raw_aggregate=M.aggregate_hist.copy(),
        summary=M.summary(env.t),
        trace=env.trace or [],
    )


def run_one(cfg: Dict) -> Dict:
    config = TandemConfig.from_dict(cfg)
    summary = run(config, RandomSource(config.seed)).summary
    summary["seed"] = config.seed
    return summary
