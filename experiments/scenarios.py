"""
experiments/scenarios.py

Holds scenario definitions (line layouts and rates) to sweep during
experiments. Each scenario overrides keys of config/baseline.yaml.
"""

from __future__ import annotations

SINGLE_STAGE = {
    "name": "single_stage",
    "overrides": {
        # M/M/1 with rho = 2/3
        "network": {"arrival_rate": 2.0, "service_rates": [3.0]},
    },
}

TWO_STAGE = {
    "name": "two_stage",
    "overrides": {},  # baseline line: lambda=2, mu=[3, 5]
}

THREE_STAGE = {
    "name": "three_stage",
    "overrides": {
        "network": {"arrival_rate": 2.0, "service_rates": [3.0, 5.0, 4.0]},
    },
}

BOTTLENECK = {
    "name": "bottleneck",
    "overrides": {
        # First stage near saturation (rho ~ 0.91) feeding a fast second stage
        "network": {"arrival_rate": 2.0, "service_rates": [2.2, 5.0]},
        "sim": {"horizon": 50000.0},
    },
}

SCENARIOS = [SINGLE_STAGE, TWO_STAGE, THREE_STAGE, BOTTLENECK]
