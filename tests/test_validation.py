import pytest

from asian_impact import (
    AsianImpactError,
    BinomialParameters,
    EnumerationConfig,
    InvalidParameterError,
    OptionType,
    SamplingConfig,
    arithmetic_asian_bounds,
    price_geometric_asian,
)
from asian_impact.config import RandomConfig
from asian_impact.payoffs import payoff


@pytest.mark.parametrize(
    "overrides",
    [
        {"S0": 0.0},
        {"S0": -100.0},
        {"K": 0.0},
        {"r": -1.05},
        {"u": 0.0},
        {"d": -0.8},
        {"u": 0.8, "d": 1.2},
        {"lam": -0.1},
        {"v_u": -1.0},
        {"v_d": -1.0},
        {"n": 0},
        {"n": -3},
        {"n": 2.5},
        {"n": True},
        {"n": "3"},
    ],
)
def test_invalid_parameters_fail_fast(base_params, overrides):
    kwargs = {**base_params, **overrides}
    with pytest.raises(InvalidParameterError):
        price_geometric_asian(**kwargs)
    with pytest.raises(InvalidParameterError):
        arithmetic_asian_bounds(**kwargs, path_specific=True)


def test_invalid_parameter_is_a_value_error_and_library_error(base_params):
    with pytest.raises(ValueError):
        BinomialParameters(**{**base_params, "S0": 0.0})
    with pytest.raises(AsianImpactError):
        BinomialParameters(**{**base_params, "S0": 0.0})


def test_unknown_option_type_is_rejected(base_params):
    with pytest.raises(InvalidParameterError, match="option_type"):
        price_geometric_asian(**base_params, option_type="straddle")


def test_parameters_are_coerced(base_params):
    p = BinomialParameters(**{**base_params, "S0": 100, "n": 3}, option_type="Put")
    assert isinstance(p.S0, float)
    assert p.option_type is OptionType.PUT
    assert p.n_paths == 8


def test_shared_payoff_dispatches_on_option_type():
    assert float(payoff(110.0, 100.0, OptionType.CALL)) == 10.0
    assert float(payoff(110.0, 100.0, "put")) == 0.0
    assert float(payoff(90.0, 100.0, "put")) == 10.0


@pytest.mark.parametrize(
    "factory",
    [
        lambda: EnumerationConfig(max_steps=0),
        lambda: EnumerationConfig(chunk_size=0),
        lambda: EnumerationConfig(n_jobs=0),
        lambda: EnumerationConfig(n_jobs=-2),
        lambda: SamplingConfig(sample_fraction=0.0),
        lambda: SamplingConfig(sample_fraction=1.5),
        lambda: SamplingConfig(max_sample_size=0),
        lambda: RandomConfig(rng_type="sobol"),
    ],
)
def test_config_validation(factory):
    with pytest.raises(ValueError):
        factory()
