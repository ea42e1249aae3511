from __future__ import annotations

import math

import numpy as np
import pytest

from investments import discount, norm_cdf


def test_discount_is_one_period_out():
    pv = discount([110.0, 121.0], 0.10)
    assert isinstance(pv, np.ndarray)
    assert pv == pytest.approx([100.0, 100.0])


# ─── NPV ─────────────────────────────────────────────────────────────

def test_npv_five_level_flows(run):
    view = run("npv", initial_investment="50000", discount_rate="8",
               cash_flows="15000; 15000; 15000; 15000; 15000")
    assert view.values["npv"] == pytest.approx(9890.65, abs=0.01)
    assert view.label == "Profitable investment"
    assert view.flag == "healthy"


def test_npv_fractional_and_percent_rates_agree(run):
    flows = "1000; 2000; 3000"
    as_pct = run("npv", initial_investment="5000", discount_rate="8", cash_flows=flows)
    as_fraction = run("npv", initial_investment="5000", discount_rate="0.08", cash_flows=flows)
    assert as_pct.values["npv"] == pytest.approx(as_fraction.values["npv"])


def test_npv_zero_rate_is_plain_sum(run):
    view = run("npv", initial_investment="10000", discount_rate="0", cash_flows="3000; 3000; 3000")
    assert view.values["npv"] == pytest.approx(-1000.0)
    assert view.label == "Not profitable"


def test_npv_caps_the_number_of_years(reject):
    errors = reject("npv", initial_investment="1", discount_rate="5", cash_flows=";".join(["100"] * 11))
    assert set(errors) == {"cash_flows"}


# ─── DCF ─────────────────────────────────────────────────────────────

def test_dcf_names_the_negative_year(reject):
    errors = reject("dcf", discount_rate="10", cash_flows="100; -50; 100")
    assert errors["cash_flows"] == "Cash flow for year 2 must be non-negative."


def test_dcf_terminal_value_only_when_included(run):
    base = dict(discount_rate="10", cash_flows="110; 121", terminal_value="1210")
    without = run("dcf", **base).values
    assert without["dcf_value"] == pytest.approx(200.0)
    assert without["discounted_terminal"] == 0.0

    with_tv = run("dcf", include_terminal="on", **base).values
    assert with_tv["discounted_terminal"] == pytest.approx(1000.0)
    assert with_tv["dcf_value"] == pytest.approx(1200.0)


# ─── Bonds ───────────────────────────────────────────────────────────

def test_bond_at_par_when_coupon_equals_yield(run):
    view = run("government_bond", face_value="1000", coupon_rate="5", years="10", market_yield="5")
    assert view.values["price"] == pytest.approx(1000.0)
    assert view.label == "Trading at par"


def test_bond_price_falls_when_yield_rises(run):
    view = run("government_bond", face_value="1000", coupon_rate="3", years="10", market_yield="6")
    assert view.values["price"] < 1000
    assert view.label == "Trading at a discount"


def test_zero_coupon_duration_is_maturity(run):
    v = run("duration_convexity", face_value="1000", coupon_rate="0", market_yield="5",
            years="7", frequency="semiannually").values
    assert v["macaulay_duration"] == pytest.approx(7.0)
    assert v["modified_duration"] == pytest.approx(7.0 / 1.025)
    assert v["convexity"] == pytest.approx(49.0 / 1.025 ** 2)


def test_coupon_bond_duration_is_shorter_than_maturity(run):
    v = run("duration_convexity", face_value="1000", coupon_rate="6", market_yield="5",
            years="10", frequency="annually").values
    assert 0 < v["macaulay_duration"] < 10
    assert v["modified_duration"] < v["macaulay_duration"]


# ─── Options ─────────────────────────────────────────────────────────

def test_norm_cdf_symmetry():
    assert norm_cdf(0) == pytest.approx(0.5, abs=1e-6)
    assert norm_cdf(1.5) + norm_cdf(-1.5) == pytest.approx(1.0)
    assert norm_cdf(1.96) == pytest.approx(0.975, abs=1e-4)


def test_put_call_parity(run):
    v = run("option_pricing", stock_price="100", strike_price="95", time_to_expiry="0.5",
            risk_free_rate="4", volatility="25").values
    assert v["call_price"] - v["put_price"] == pytest.approx(100 - 95 * math.exp(-0.04 * 0.5), abs=1e-4)
    assert v["delta_call"] - v["delta_put"] == pytest.approx(1.0)


def test_option_needs_volatility(reject):
    errors = reject("option_pricing", stock_price="100", strike_price="95", time_to_expiry="1",
                    risk_free_rate="4", volatility="0")
    assert set(errors) == {"volatility"}


# ─── Purchasing power parity ─────────────────────────────────────────

def test_purchasing_power_parity(run):
    view = run("purchasing_power_parity", price_a="5", exchange_rate="0.92")
    assert view.values["price_b"] == pytest.approx(4.6)
    assert view.display["exchange_rate"] == "0.9200"


def test_purchasing_power_parity_needs_a_rate(reject):
    assert set(reject("purchasing_power_parity", price_a="5", exchange_rate="0")) == {"exchange_rate"}
