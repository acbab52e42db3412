# Copyright (c) 2025
# MIT License
# -----------------------------------------------------------------------------
# entities.py
# -----------------------------------------------------------------------------
# Purpose:
#   Value objects for a tandem run: the validated configuration and the
#   result bundle handed back to callers.
#
# Design notes:
#   - Jobs carry no state of their own; a job is an integer id whose place
#     in the network is whichever stage queue or server currently holds it.
#   - TandemConfig.from_dict reads the YAML-shaped config used by
#     experiments/ (sections: sim, network, queues).
#
# Usage:
#   from tandem.entities import TandemConfig, SimulationResult
# -----------------------------------------------------------------------------

from __future__ import annotations
import math
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .errors import ConfigError
from .metrics import OccupancyDistribution
from .policies import SHRINK_POLICIES


def _positive(name: str, value) -> float:
    try:
        val = float(value)
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be a number, got {value!r}") from None
    if not val > 0 or math.isinf(val):
        raise ConfigError(f"{name} must be a positive finite number, got {value!r}")
    return val


@dataclass(frozen=True)
class TandemConfig:
    arrival_rate: float
    service_rates: Tuple[float, ...]
    horizon: float
    seed: Optional[int] = 0
    max_arrivals: Optional[int] = None     # None -> arrivals never stop; else >= 1
    shrink_policy: str = "quarter"         # key into policies.SHRINK_POLICIES
    trace: bool = False                    # keep every popped event in Env.trace

    def __post_init__(self):
        object.__setattr__(self, "arrival_rate", _positive("arrival_rate", self.arrival_rate))
        object.__setattr__(self, "horizon", _positive("horizon", self.horizon))
        rates = tuple(self.service_rates)
        if not rates:
            raise ConfigError("at least one stage (service rate) is required")
        object.__setattr__(self, "service_rates", tuple(
            _positive(f"service_rates[{s}]", mu) for s, mu in enumerate(rates)
        ))
        cap = self.max_arrivals
        if cap is not None and (isinstance(cap, bool) or not isinstance(cap, int) or cap < 1):
            raise ConfigError(f"max_arrivals must be a positive integer, got {cap!r}")
        if self.shrink_policy not in SHRINK_POLICIES:
            raise ConfigError(
                f"unknown shrink_policy {self.shrink_policy!r}; choose from {sorted(SHRINK_POLICIES)}"
            )

    @property
    def stage_count(self) -> int:
        return len(self.service_rates)

    @classmethod
    def from_dict(cls, cfg: Dict) -> "TandemConfig":
        """
        Build a config from the nested dict layout of config/baseline.yaml.

        Parameters
        ----------
        cfg : dict
            Must contain network.arrival_rate, network.service_rates and
            sim.horizon. Optional: network.stages (checked against the number
            of service rates), sim.seed, sim.max_arrivals, sim.trace and
            queues.shrink_policy.
        """
        sim = cfg.get("sim", {}) or {}
        net = cfg.get("network", {}) or {}
        queues = cfg.get("queues", {}) or {}
        for key in ("arrival_rate", "service_rates"):
            if key not in net:
                raise ConfigError(f"missing network.{key}")
        if "horizon" not in sim:
            raise ConfigError("missing sim.horizon")
        rates = net["service_rates"]
        if isinstance(rates, (int, float)):
            rates = [rates]
        stages = net.get("stages")
        if stages is not None:
            try:
                stages = int(stages)
            except (TypeError, ValueError):
                raise ConfigError(f"network.stages must be an integer, got {stages!r}") from None
        if stages is not None and stages != len(rates):
            raise ConfigError(f"network.stages={stages} but {len(rates)} service rates given")
        return cls(
            arrival_rate=net["arrival_rate"],
            service_rates=tuple(rates),
            horizon=sim["horizon"],
            seed=sim.get("seed", 0),
            max_arrivals=sim.get("max_arrivals"),
            shrink_policy=queues.get("shrink_policy", "quarter"),
            trace=bool(sim.get("trace", False)),
        )


@dataclass
class SimulationResult:
    """Outputs of one replication.

    per_stage / aggregate are normalized pmfs; raw_* keep accumulated time.
    trace holds (t, kind, job_id, stage) tuples when tracing was enabled.
    """
    per_stage: List[OccupancyDistribution]
    aggregate: OccupancyDistribution
    raw_per_stage: List[OccupancyDistribution]
    raw_aggregate: OccupancyDistribution
    summary: Dict
    trace: List[Tuple[float, str, int, int]] = field(default_factory=list)
