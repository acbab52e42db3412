import pytest

from tandem.entities import TandemConfig
from tandem.errors import ConfigError

BASE = {
    "sim": {"horizon": 100.0, "seed": 1},
    "network": {"arrival_rate": 2.0, "service_rates": [3.0, 5.0]},
}


def _with(section, **values):
    cfg = {k: dict(v) for k, v in BASE.items()}
    cfg.setdefault(section, {}).update(values)
    return cfg


def test_from_dict_reads_sections():
    config = TandemConfig.from_dict(_with("queues", shrink_policy="hysteresis"))
    assert config.arrival_rate == 2.0
    assert config.service_rates == (3.0, 5.0)
    assert config.stage_count == 2
    assert config.horizon == 100.0
    assert config.seed == 1
    assert config.max_arrivals is None
    assert config.shrink_policy == "hysteresis"
    assert config.trace is False


def test_scalar_service_rate_is_one_stage():
    config = TandemConfig.from_dict(_with("network", service_rates=4))
    assert config.service_rates == (4.0,)


@pytest.mark.parametrize("cfg", [
    _with("network", arrival_rate=0.0),
    _with("network", arrival_rate="fast"),
    _with("network", service_rates=[3.0, -5.0]),
    _with("network", service_rates=[]),
    _with("network", stages=3),
    _with("sim", horizon=0),
    _with("sim", horizon=float("inf")),
    _with("sim", max_arrivals=-1),
    _with("sim", max_arrivals=0),
    _with("network", stages="three"),
    _with("sim", max_arrivals=2.5),
    _with("queues", shrink_policy="lazy"),
    {"network": {"arrival_rate": 2.0, "service_rates": [3.0]}},
    {"sim": {"horizon": 10.0}, "network": {"service_rates": [3.0]}},
])
def test_invalid_configs_are_rejected(cfg):
    with pytest.raises(ConfigError):
        TandemConfig.from_dict(cfg)


def test_config_error_is_value_error():
    assert issubclass(ConfigError, ValueError)


def test_zero_arrival_cap_is_rejected_before_running():
    with pytest.raises(ConfigError):
        TandemConfig(arrival_rate=2.0, service_rates=(3.0,), horizon=10.0, max_arrivals=0)
    config = TandemConfig(arrival_rate=2.0, service_rates=(3.0,), horizon=10.0, max_arrivals=1)
    assert config.max_arrivals == 1
