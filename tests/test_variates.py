import math

import pytest

from tandem.variates import RandomSource, draw_exponential, exponential


def test_exponential_inverse_cdf():
    assert exponential(2.0, 0.0) == 0.0
    assert exponential(2.0, 0.5) == pytest.approx(math.log(2.0) / 2.0)
    assert exponential(1.0, 1.0 - 2 ** -53) == pytest.approx(53 * math.log(2.0))


@pytest.mark.parametrize("rate,u", [(0.0, 0.5), (-1.0, 0.5), (1.0, 1.0), (1.0, -0.1)])
def test_exponential_rejects_bad_arguments(rate, u):
    with pytest.raises(ValueError):
        exponential(rate, u)


def test_random_source_is_seeded_and_half_open():
    a, b = RandomSource(42), RandomSource(42)
    draws = [a.next_uniform() for _ in range(10000)]
    assert draws == [b.next_uniform() for _ in range(10000)]
    assert all(0.0 <= u < 1.0 for u in draws)
    assert a.draws == 10000


def test_exponential_mean_matches_rate():
    src = RandomSource(7)
    n = 100000
    mean = sum(draw_exponential(src, 4.0) for _ in range(n)) / n
    assert mean == pytest.approx(0.25, rel=0.02)
