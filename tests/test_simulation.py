from __future__ import annotations

import pytest

from registry import ValidationError
from simulation import SimInputs, run_simulation

FORM = dict(initial_investment="10000", expected_return="7", volatility="15",
            years="10", trials="1000")


def test_same_seed_reproduces_results(run):
    first = run("monte_carlo", seed="7", **FORM).values
    second = run("monte_carlo", seed="7", **FORM).values
    assert first["average"] == second["average"]
    assert first["p10"] == second["p10"]


def test_different_seeds_differ(run):
    assert run("monte_carlo", seed="1", **FORM).values["average"] != \
        run("monte_carlo", seed="2", **FORM).values["average"]


def test_outcomes_are_ordered(run):
    v = run("monte_carlo", **FORM).values
    assert v["minimum"] <= v["p10"] <= v["average"] <= v["p90"] <= v["maximum"]
    assert len(v["outcomes"]) == 1000
    assert v["initial"] == 10_000


def test_zero_volatility_is_deterministic():
    results = run_simulation(SimInputs(initial=1000, mean_return=0.05, volatility=0.0,
                                       years=3, trials=100))
    expected = 1000 * 1.05 ** 3
    assert results.minimum == pytest.approx(expected)
    assert results.maximum == pytest.approx(expected)
    assert results.p10 == pytest.approx(expected)


def test_trials_out_of_range(reject):
    errors = reject("monte_carlo", **{**FORM, "trials": "50"})
    assert set(errors) == {"trials"}


@pytest.mark.parametrize(
    "overrides, field",
    [({"initial": 0}, "initial_investment"), ({"volatility": -0.1}, "volatility"),
     ({"years": 0}, "years"), ({"years": 101}, "years"), ({"trials": 200_000}, "trials")],
)
def test_sim_inputs_validate(overrides, field):
    kwargs = dict(initial=1000, mean_return=0.05, volatility=0.1, years=5, trials=1000)
    kwargs.update(overrides)
    with pytest.raises(ValidationError) as excinfo:
        SimInputs(**kwargs)
    assert excinfo.value.field == field


def test_horizon_beyond_a_century_is_refused(reject):
    assert set(reject("monte_carlo", **{**FORM, "years": "100000000"})) == {"years"}
