from __future__ import annotations

import pytest

from growth import compound
from registry import evaluate


def test_compound_interest_matches_formula(run):
    v = run("compound_interest", principal="10,000", interest_rate="5", years="10",
            compounding="12").values
    assert v["future_value"] == pytest.approx(10_000 * (1 + 0.05 / 12) ** 120)
    assert v["total_interest"] == pytest.approx(v["future_value"] - 10_000)
    assert v["periods_per_year"] == 12


def test_compound_interest_defaults_to_monthly(run):
    v = run("compound_interest", principal="1000", interest_rate="6", years="1").values
    assert v["periods_per_year"] == 12


def test_compound_interest_grows_with_rate():
    values = [compound(1000, r, 12, 10) for r in (0.0, 0.01, 0.05, 0.10)]
    assert values[0] == 1000
    assert values == sorted(values)


def test_compound_interest_rejects_negative_rate(reject):
    errors = reject("compound_interest", principal="1000", interest_rate="-1", years="5")
    assert set(errors) == {"interest_rate"}


def test_compound_interest_overflow_is_a_failure():
    outcome = evaluate("compound_interest", {"principal": "1000", "interest_rate": "5", "years": "100000"})
    assert not outcome.ok
    assert set(outcome.errors) == {"future_value"}


# ─── Staking ─────────────────────────────────────────────────────────

def test_staking_reward_rates_agree(run):
    v = run("staking_rewards", amount="5000", apy="8", days="200", frequency="weekly").values
    assert v["total_rewards"] == pytest.approx(v["final_amount"] - 5000)
    assert v["daily_rewards"] == pytest.approx(v["total_rewards"] / 200)
    assert v["yearly_rewards"] == pytest.approx(v["daily_rewards"] * 365)


def test_staking_needs_at_least_a_day(reject):
    assert set(reject("staking_rewards", amount="5000", apy="8", days="0")) == {"days"}


# ─── Time value of money ─────────────────────────────────────────────

def test_tvm_present_to_future_and_back(run):
    fv = run("time_value_of_money", present_value="1000", interest_rate="7",
             years="10").values["future_value"]
    assert fv == pytest.approx(1000 * 1.07 ** 10)
    pv = run("time_value_of_money", future_value=str(fv), interest_rate="7",
             years="10").values["present_value"]
    assert pv == pytest.approx(1000, abs=0.01)


def test_tvm_needs_one_of_the_values(reject):
    errors = reject("time_value_of_money", interest_rate="7", years="10")
    assert set(errors) == {"present_value"}


def test_tvm_rejects_zero_rate(reject):
    errors = reject("time_value_of_money", present_value="1000", interest_rate="0", years="10")
    assert set(errors) == {"interest_rate"}


def test_tvm_rejects_rate_below_minus_one_period(reject):
    errors = reject("time_value_of_money", present_value="100", interest_rate="-150", years="0.5")
    assert set(errors) == {"interest_rate"}


def test_tvm_weekly_compounding(run):
    v = run("time_value_of_money", present_value="1000", interest_rate="5.2", years="1",
            frequency="weekly").values
    assert v["future_value"] == pytest.approx(1000 * 1.001 ** 52)


# ─── CD & ROI ────────────────────────────────────────────────────────

def test_cd_apy_for_monthly_compounding(run):
    view = run("cd", deposit="10000", interest_rate="5", years="1", frequency="monthly")
    assert view.values["apy"] == pytest.approx(5.116, abs=1e-3)
    assert view.display["apy"] == "5.116%"


def test_cd_annual_compounding_apy_equals_rate(run):
    v = run("cd", deposit="10000", interest_rate="4", years="3", frequency="annually").values
    assert v["apy"] == pytest.approx(4.0)


def test_roi_without_period_is_not_annualized(run):
    view = run("roi", investment="1000", final_value="1500")
    assert view.values["roi"] == pytest.approx(50.0)
    assert view.values["annualized_roi"] == pytest.approx(50.0)
    assert view.flag == "healthy"


def test_roi_annualized(run):
    view = run("roi", investment="1000", final_value="1210", period="2")
    assert view.values["annualized_roi"] == pytest.approx(10.0)


def test_roi_loss_is_flagged(run):
    view = run("roi", investment="1000", final_value="800", period="1")
    assert view.label == "Loss"
    assert view.flag == "danger"


# ─── Retirement ──────────────────────────────────────────────────────

def test_retirement_one_year(run):
    v = run("retirement", current_age="64", retirement_age="65", current_savings="10000",
            annual_contribution="5000", employer_match="50", match_limit="6",
            annual_return="10", inflation="0").values
    match = 5000 * 0.06
    assert v["employer_total"] == pytest.approx(match)
    assert v["future_value"] == pytest.approx((10_000 + 5000 + match) * 1.1)
    assert v["real_value"] == pytest.approx(v["future_value"])
    assert v["years"] == 1


def test_retirement_age_must_be_ahead(reject):
    errors = reject("retirement", current_age="65", retirement_age="60", current_savings="0",
                    annual_contribution="0", employer_match="0", match_limit="0",
                    annual_return="5", inflation="2")
    assert set(errors) == {"retirement_age"}


def test_retirement_horizon_is_capped(reject):
    errors = reject("retirement", current_age="20", retirement_age="1000000", current_savings="0",
                    annual_contribution="1000", employer_match="0", match_limit="0",
                    annual_return="5", inflation="2")
    assert set(errors) == {"retirement_age"}


def test_pension_horizon_is_capped(reject):
    errors = reject("pension_planning", current_age="30", retirement_age="200", current_savings="0",
                    monthly_contribution="100", annual_return="5", inflation="2")
    assert set(errors) == {"retirement_age"}


def test_pension_without_return_is_plain_saving(run):
    v = run("pension_planning", current_age="30", retirement_age="40", current_savings="1000",
            monthly_contribution="100", annual_return="0", inflation="0").values
    assert v["future_value"] == pytest.approx(1000 + 100 * 120)
    assert v["investment_growth"] == pytest.approx(0.0)


# ─── Crypto ──────────────────────────────────────────────────────────

def test_crypto_requires_an_initial_investment(reject):
    assert set(reject("crypto_investment", initial_investment="0")) == {"initial_investment"}


def test_crypto_falls_back_to_defaults(run):
    v = run("crypto_investment", initial_investment="1000", years="0").values
    assert v["future_value"] == pytest.approx(1000 * 2.0 ** 5)
    assert v["optimistic"] == pytest.approx(v["future_value"] * 1.7)


def test_crypto_volatility_is_capped(run):
    v = run("crypto_investment", initial_investment="1000", years="1",
            expected_return="10", volatility="500").values
    assert v["pessimistic"] == 0.0
    assert v["optimistic"] == pytest.approx(v["future_value"] * 4)


# ─── PPF ─────────────────────────────────────────────────────────────

def test_ppf_defaults(run):
    v = run("ppf").values
    assert v["total_investment"] == 90_000
    assert v["maturity_value"] == pytest.approx(6000 * 1.071 * (1.071 ** 15 - 1) / 0.071)
    assert v["total_interest"] == pytest.approx(v["maturity_value"] - 90_000)
    assert len(v["yearly_balance"]) == 15


def test_ppf_monthly_deposits(run):
    v = run("ppf", yearly_investment="1200", interest_rate="12", years="1", frequency="monthly").values
    assert v["maturity_value"] == pytest.approx(100 * 1.01 * (1.01 ** 12 - 1) / 0.01)
    assert v["yearly_contributed"] == [1200]


def test_ppf_period_is_capped(run):
    assert run("ppf", years="80").values["years"] == 50


def test_ppf_rejects_negative_rate(reject):
    assert set(reject("ppf", interest_rate="-1")) == {"interest_rate"}


# ─── Education cost ──────────────────────────────────────────────────

def test_education_cost_without_savings(run):
    view = run("education_cost", current_cost="10000", years_until="10")
    future = 10_000 * 1.05 ** 10
    assert view.values["future_annual_cost"] == pytest.approx(future)
    assert view.values["total_cost"] == pytest.approx(future * 4)
    assert view.values["shortfall"] == pytest.approx(future * 4)
    assert view.flag == "warning"


def test_education_cost_covered_by_savings(run):
    view = run("education_cost", current_cost="10000", current_savings="1,000,000")
    assert view.values["shortfall"] == 0.0
    assert view.label == "On track"


def test_education_cost_monthly_contributions(run):
    v = run("education_cost", current_cost="10000", years_until="1", expected_return="12",
            monthly_contribution="100").values
    assert v["projected_savings"] == pytest.approx(100 * (1.01 ** 12 - 1) / 0.01)


def test_education_cost_needs_a_cost(reject):
    assert set(reject("education_cost", current_cost="")) == {"current_cost"}
