# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# arrivals.py
# -----------------------------------------------------------------------------
# Purpose:
#   Exogenous Poisson arrivals into stage 0.
#
# Design notes:
#   - Arrivals self-perpetuate: each Arrival schedules the next one, so only
#     a single future Arrival sits on the FEL at any time.
#   - The first Arrival fires at t=0, before any time is accumulated.
#   - Stage 0 draws its service time before the next interarrival gap.
#   - An optional max_arrivals cap stops the stream so the line can drain.
#
# Usage:
#   schedule_arrivals(env)            # once, before env.run_until()
#   job_id = admit_arrival(env)       # from Router.on_arrival, then
#   schedule_next_arrival(env)        # once stage 0 has drawn its service
# -----------------------------------------------------------------------------

from __future__ import annotations
from .queues import Event, EventType
from .variates import draw_exponential


def _arrivals_open(env) -> bool:
    cap = env.config.max_arrivals
    return cap is None or env.total_jobs < cap


def schedule_arrivals(env):
    if _arrivals_open(env):
        env.schedule(Event(env.t, EventType.ARRIVAL, env.total_jobs))


def admit_arrival(env) -> int:
    """Assign the next job id; the job is now in the network."""
    job_id = env.total_jobs
    env.total_jobs += 1
    env.jobs_in_system += 1
    return job_id


def schedule_next_arrival(env):
    """Put the following Arrival on the FEL unless the stream is capped."""
    if _arrivals_open(env):
        gap = draw_exponential(env.rng, env.config.arrival_rate)
        env.schedule(Event(env.t + gap, EventType.ARRIVAL, env.total_jobs))
