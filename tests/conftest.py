import random

import pytest

from tandem.entities import TandemConfig


class ListSource:
    """Uniform source replaying a fixed list of draws."""
    def __init__(self, draws):
        self.draws = list(draws)
        self.pos = 0

    def next_uniform(self):
        u = self.draws[self.pos]
        self.pos += 1
        return u


@pytest.fixture
def uniform_draws():
    rng = random.Random(5)
    return [rng.random() for _ in range(50000)]


@pytest.fixture
def two_stage_config():
    return TandemConfig(arrival_rate=2.0, service_rates=(3.0, 5.0), horizon=500.0, seed=3)
