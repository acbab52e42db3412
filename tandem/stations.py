# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# stations.py
# -----------------------------------------------------------------------------
# Purpose:
#   Per-stage records of the tandem line: one exponential single server plus
#   its FIFO waiting queue.
#
# Design notes:
#   - A stage holds at most one job in service; `busy` and `current_job`
#     change together in start_service()/finish_service().
#   - Routing between stages lives in network.Router; a Stage only knows
#     how to seize/release its own server.
#
# Usage:
#   from tandem.stations import make_stages
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import List, Optional

from .errors import InvariantError
from .entities import TandemConfig
from .policies import SHRINK_POLICIES
from .queues import Event, EventType, StageQueue
from .variates import draw_exponential


class Stage:
    """Single-server station with an unbounded FIFO buffer.

    Parameters
    ----------
    index : int
        Position in the line (0 receives external arrivals).
    service_rate : float
        Exponential service rate mu; mean service time is 1/mu.
    queue : StageQueue
        Waiting jobs, excluding the one in service.
    """
    def __init__(self, index: int, service_rate: float, queue: Optional[StageQueue] = None):
        self.index = index
        self.service_rate = service_rate
        self.queue = queue if queue is not None else StageQueue()
        self.busy = False
        self.current_job: Optional[int] = None
        self.served = 0

    def __repr__(self):
        return f"Stage({self.index}, mu={self.service_rate}, busy={self.busy}, waiting={len(self.queue)})"

    @property
    def occupancy(self) -> int:
        return len(self.queue) + (1 if self.busy else 0)

    def start_service(self, env, job_id: int):
        """Seize the server for job_id and schedule its completion."""
        if self.busy:
            raise InvariantError(f"stage {self.index} already serving job {self.current_job}")
        self.busy = True
        self.current_job = job_id
        st = draw_exponential(env.rng, self.service_rate)
        env.schedule(Event(env.t + st, EventType.COMPLETE, job_id, stage=self.index))

    def finish_service(self, job_id: int):
        """Release the server; job_id must be the job currently in service."""
        if not self.busy or self.current_job != job_id:
            raise InvariantError(
                f"completion of job {job_id} at stage {self.index} but in service: {self.current_job}"
            )
        self.busy = False
        self.current_job = None
        self.served += 1


def make_stages(config: TandemConfig) -> List[Stage]:
    """Create one Stage per configured service rate, in line order."""
    shrink = SHRINK_POLICIES[config.shrink_policy]
    return [
        Stage(s, mu, StageQueue(shrink=shrink))
        for s, mu in enumerate(config.service_rates)
    ]
