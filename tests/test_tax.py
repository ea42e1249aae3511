from __future__ import annotations

import numpy as np
import pytest

import config as cfg
from tax import bracket_tax, claiming_factor, marginal_rate


# ─── Bracket walk ────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "income, expected",
    [(0, 0.0), (11_600, 1_160.0), (47_150, 5_426.0), (50_000, 5_426.0 + 2_850 * 0.22)],
)
def test_single_filer_tax(run, income, expected):
    v = run("income_tax", income=str(income), filing_status="single").values
    assert v["tax"] == pytest.approx(expected)


def test_effective_rate_stays_below_top_rate(run):
    v = run("income_tax", income="10M", filing_status="married").values
    assert 0 < v["effective_rate"] <= 37
    assert v["after_tax_income"] == pytest.approx(10_000_000 - v["tax"])


def test_zero_income_has_zero_effective_rate(run):
    assert run("income_tax", income="0").values["effective_rate"] == 0.0


def test_bracket_tax_accepts_arrays():
    incomes = np.array([0.0, 11_600.0, 47_150.0])
    tax, breakdown = bracket_tax(incomes, cfg.INCOME_TAX_BANDS["single"])
    assert tax == pytest.approx([0.0, 1_160.0, 5_426.0])
    assert len(breakdown) == len(cfg.INCOME_TAX_BANDS["single"])


def test_bracket_bands_have_no_gaps():
    _, breakdown = bracket_tax(1_000_000.0, cfg.INCOME_TAX_BANDS["single"])
    for (_, upper, _, _), (lower, _, _, _) in zip(breakdown, breakdown[1:]):
        assert upper == lower


def test_marginal_rate_upper_limit_is_inclusive():
    bands = cfg.BRACKET_TABLE_BANDS["hoh"]
    assert marginal_rate(59_950, bands) == 0.12
    assert marginal_rate(59_951, bands) == 0.22


def test_tax_bracket_hoh(run):
    view = run("tax_bracket", income="59951", filing_status="hoh")
    assert view.values["marginal_rate"] == pytest.approx(22.0)
    assert view.display["marginal_rate"] == "22%"
    assert view.label == "Head of Household"
    assert "at 22%" in view.values["breakdown"]


def test_tax_bracket_needs_positive_income(reject):
    errors = reject("tax_bracket", income="0", filing_status="single")
    assert errors == {"income": "Please enter a valid positive income amount."}


# ─── Property tax & payroll ──────────────────────────────────────────

def test_property_tax_defaults(run):
    v = run("property_tax").values
    assert v["annual_tax"] == pytest.approx(3_600.0)
    assert v["monthly_tax"] == pytest.approx(300.0)


def test_payroll_caps_regular_hours(run):
    v = run("payroll", hourly_rate="20", hours_worked="45", overtime_hours="5",
            overtime_rate="30", tax_rate="10", deductions="50").values
    assert v["regular_pay"] == 800
    assert v["overtime_pay"] == 150
    assert v["gross_pay"] == 950
    assert v["net_pay"] == pytest.approx(950 - 95 - 50)


def test_payroll_rejects_negative_hours(reject):
    errors = reject("payroll", hourly_rate="20", hours_worked="-1", overtime_hours="0",
                    overtime_rate="0", tax_rate="0", deductions="0")
    assert set(errors) == {"hours_worked"}


# ─── Social Security ─────────────────────────────────────────────────

def test_claiming_factor():
    assert claiming_factor(67, 67) == 1
    assert claiming_factor(62, 67) == pytest.approx(0.6976)
    assert claiming_factor(70, 67) == pytest.approx(1.2412)


def test_social_security_early_claim(run):
    v = run("social_security", birth_year="1962", current_age="62", retirement_age="67",
            annual_income="60000", current_year="2024").values
    assert v["monthly_benefit"] == pytest.approx(1464.96, abs=0.01)
    assert v["annual_benefit"] == pytest.approx(v["monthly_benefit"] * 12)
    assert v["lifetime_benefit"] == pytest.approx(v["annual_benefit"] * 21.6)


def test_social_security_income_is_capped(run):
    capped = run("social_security", current_age="67", annual_income="500000").values
    at_base = run("social_security", current_age="67", annual_income="142800").values
    assert capped["monthly_benefit"] == pytest.approx(at_base["monthly_benefit"])


def test_social_security_retirement_year(run):
    view = run("social_security", birth_year="1990", current_year="2030")
    assert view.values["retirement_year"] == "2057"
    assert view.values["years_to_retirement"] == 27


def test_social_security_all_blank_uses_defaults(run):
    view = run("social_security")
    # claiming at 40 against a full retirement age of 67 reduces the benefit to nothing
    assert view.values["monthly_benefit"] == 0
    assert view.values["years_to_retirement"] == 27


def test_social_security_blank_birth_year_follows_current_year(run):
    view = run("social_security", current_year="2030")
    assert view.values["retirement_year"] == "2057"
    assert view.inputs["birth_year"] is None


def test_social_security_zero_birth_year_uses_default(run):
    view = run("social_security", birth_year="0", current_year="2031")
    assert view.values["retirement_year"] == "2058"
