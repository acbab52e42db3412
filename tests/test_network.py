import math

import pytest

from tandem.errors import InvariantError, UnknownEventError
from tandem.metrics import Metrics
from tandem.network import Router
from tandem.queues import Event, EventType
from tandem.simulation import Env
from tandem.stations import make_stages
from tandem.variates import RandomSource

from .conftest import ListSource


def _env(config):
    stages = make_stages(config)
    router = Router(stages, Metrics(config.stage_count))
    return Env(config, router, RandomSource(config.seed))


def _pending(env):
    return sorted(
        (ev.kind.value, ev.job_id, ev.stage)
        for ev in env.FEL._slots[: len(env.FEL)]
    )


def _arrive(env, t):
    env.t = t
    env.router.dispatch(env, Event(t, EventType.ARRIVAL, env.total_jobs))


def _complete(env, t, stage, job_id):
    env.t = t
    env.router.dispatch(env, Event(t, EventType.COMPLETE, job_id, stage=stage))


def test_arrival_to_idle_stage_starts_service(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    s0 = env.stages[0]
    assert s0.busy and s0.current_job == 0
    assert env.total_jobs == 1 and env.jobs_in_system == 1
    assert _pending(env) == [("arrival", 1, -1), ("complete", 0, 0)]


def test_arrival_to_busy_stage_waits(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    env.FEL = type(env.FEL)()
    _arrive(env, 0.5)
    assert list(env.stages[0].queue) == [1]
    assert env.stages[0].current_job == 0
    assert _pending(env) == [("arrival", 2, -1)]


def test_completion_hands_off_and_backfills(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    _arrive(env, 0.1)
    env.FEL = type(env.FEL)()
    _complete(env, 0.4, 0, 0)
    s0, s1 = env.stages
    assert s1.busy and s1.current_job == 0
    assert s0.busy and s0.current_job == 1
    assert len(s0.queue) == 0
    assert _pending(env) == [("complete", 0, 1), ("complete", 1, 0)]


def test_handoff_to_busy_next_stage_queues(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    _complete(env, 0.2, 0, 0)
    _arrive(env, 0.3)
    env.FEL = type(env.FEL)()
    _complete(env, 0.4, 0, 1)
    s0, s1 = env.stages
    assert not s0.busy
    assert s1.current_job == 0
    assert list(s1.queue) == [1]
    assert _pending(env) == []


def test_last_stage_completion_departs(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    _complete(env, 0.2, 0, 0)
    _complete(env, 0.9, 1, 0)
    assert not env.stages[1].busy
    assert env.jobs_in_system == 0
    assert env.metrics.departures == 1
    assert env.metrics.served == [1, 1]


def test_completion_for_job_not_in_service_is_fatal(two_stage_config):
    env = _env(two_stage_config)
    _arrive(env, 0.0)
    with pytest.raises(InvariantError):
        _complete(env, 0.2, 0, 7)
    with pytest.raises(InvariantError):
        _complete(env, 0.2, 1, 0)


def test_unknown_event_kind_is_fatal(two_stage_config):
    env = _env(two_stage_config)
    with pytest.raises(UnknownEventError):
        env.router.dispatch(env, Event(0.0, "departure", 0))


def test_arrival_draws_service_before_next_gap(two_stage_config):
    stages = make_stages(two_stage_config)
    router = Router(stages, Metrics(two_stage_config.stage_count))
    env = Env(two_stage_config, router, ListSource([0.5, 0.9]))
    _arrive(env, 0.0)
    complete = [ev for ev in env.FEL._slots[: len(env.FEL)] if ev.kind is EventType.COMPLETE]
    arrival = [ev for ev in env.FEL._slots[: len(env.FEL)] if ev.kind is EventType.ARRIVAL]
    assert complete[0].t == pytest.approx(-math.log(1.0 - 0.5) / 3.0)
    assert arrival[0].t == pytest.approx(-math.log(1.0 - 0.9) / 2.0)
