# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# network.py
# -----------------------------------------------------------------------------
# Purpose:
#   Router for the tandem line. Applies the stage transitions for each popped
#   event: arrival at stage 0, completion, hand-off to the next stage, and
#   backfill from the stage's own queue.
#
# Design notes:
#   - The hand-off to stage s+1 and the backfill of stage s concern two
#     different servers, so both can happen in one completion.
#   - A stage schedules a Complete event only when it goes busy, so at most
#     one Complete per stage is ever pending and no cancellation is needed.
#
# Usage:
#   router = Router(stages, metrics)
#   env = Env(config, router, rng)
# -----------------------------------------------------------------------------

from __future__ import annotations
from typing import List

from .arrivals import admit_arrival, schedule_next_arrival
from .errors import UnknownEventError
from .queues import Event, EventType
from .stations import Stage


class Router:
    def __init__(self, stages: List[Stage], metrics):
        self.S = stages
        self.M = metrics

    def dispatch(self, env, ev: Event):
        if ev.kind is EventType.ARRIVAL:
            self.on_arrival(env)
        elif ev.kind is EventType.COMPLETE:
            self.on_complete(env, ev.stage, ev.job_id)
        else:
            raise UnknownEventError(f"no transition for event {ev!r}")

    def on_arrival(self, env) -> int:
        job_id = admit_arrival(env)
        self.M.note_arrival(job_id, env.t)
        self.enqueue(env, 0, job_id)
        schedule_next_arrival(env)
        return job_id

    def enqueue(self, env, stage: int, job_id: int):
        """Start job_id at an idle stage, otherwise append it to the stage queue."""
        st = self.S[stage]
        if st.busy:
            st.queue.add(job_id)
        else:
            st.start_service(env, job_id)

    def on_complete(self, env, stage: int, job_id: int):
        st = self.S[stage]
        st.finish_service(job_id)
        self.M.note_complete(stage, job_id, env.t)
        # Forward hand-off (or departure from the last stage)
        if stage + 1 < len(self.S):
            self.enqueue(env, stage + 1, job_id)
        else:
            env.jobs_in_system -= 1
            self.M.note_departure(job_id, env.t)
        # Local backfill
        if st.queue:
            st.start_service(env, st.queue.pop())
