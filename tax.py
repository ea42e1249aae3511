"""
U.S. federal tax, payroll and Social Security calculators.

The progressive bracket walk clips income into each band with numpy, so
:func:`bracket_tax` also accepts an array of incomes.
"""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Tuple

import numpy as np

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

TAX = "Tax & Payroll"


# ─── Bracket walk ────────────────────────────────────────────────────

def bracket_tax(
    income: np.ndarray,
    bands: List[Tuple[float, float]],
) -> Tuple[np.ndarray, List[Tuple[float, float, float, np.ndarray]]]:
    """Allocate *income* across contiguous tax bands.

    Parameters
    ----------
    income : array_like
        Taxable income.
    bands : list of (upper, rate)
        Band upper limits in ascending order; the last one is ``inf``.

    Returns
    -------
    tax : np.ndarray
        Total tax for each income value.
    breakdown : list of (lower, upper, rate, tax_in_band)
        One entry per band.  A band is ``(lower, upper]`` and the next one
        starts exactly where it ends.
    """
    income = np.asarray(income, dtype=float)
    tax = np.zeros_like(income)
    breakdown = []
    lower = 0.0
    for upper, rate in bands:
        in_band = np.clip(income - lower, 0.0, upper - lower)
        band_tax = in_band * rate
        tax += band_tax
        breakdown.append((lower, upper, rate, band_tax))
        lower = upper
    return tax, breakdown


def marginal_rate(income: float, bands: List[Tuple[float, float]]) -> float:
    """Rate of the band containing *income* (band upper limits inclusive)."""
    for upper, rate in bands:
        if income <= upper:
            return rate
    return bands[-1][1]


def _band_label(lower: float, upper: float) -> str:
    if np.isinf(upper):
        return f"Over ${lower:,.0f}"
    return f"${lower:,.0f} – ${upper:,.0f}"


# ─── Income tax ──────────────────────────────────────────────────────

@register(
    "income_tax",
    title="Income Tax Calculator",
    category=TAX,
    summary="Estimate 2024 federal income tax from taxable income and filing status.",
    fields=(
        Field("income", "Taxable Income ($)"),
        Field("filing_status", "Filing Status", kind=Kind.CHOICE, default="single",
              choices=(("single", "Single"), ("married", "Married Filing Jointly"),
                       ("head", "Head of Household"))),
    ),
    outputs=(
        Output("tax", "Federal Income Tax", highlight=True),
        Output("effective_rate", "Effective Tax Rate", kind="percent"),
        Output("after_tax_income", "After-Tax Income"),
    ),
    formula="Tax = Σ (income in bracket × bracket rate)",
    tips=(
        "Only the income inside each bracket is taxed at that bracket's rate.",
        "Pre-tax retirement contributions lower taxable income.",
    ),
)
def income_tax(x: Dict[str, Any]) -> Dict[str, Any]:
    income = x["income"]
    if income < 0:
        raise ValidationError("income", "Income cannot be negative.")

    tax, _ = bracket_tax(income, cfg.INCOME_TAX_BANDS[x["filing_status"]])
    tax = float(tax)
    return {
        "tax": tax,
        "effective_rate": tax / income * 100 if income > 0 else 0.0,
        "after_tax_income": income - tax,
    }


@register(
    "tax_bracket",
    title="Tax Bracket Calculator",
    category=TAX,
    summary="See which bracket you are in and how much tax each bracket contributes.",
    fields=(
        Field("income", "Annual Taxable Income ($)", signed=False),
        Field("filing_status", "Filing Status", kind=Kind.CHOICE, default="single",
              choices=(("single", "Single"), ("married", "Married Filing Jointly"),
                       ("hoh", "Head of Household"))),
    ),
    outputs=(
        Output("tax", "Total Tax", highlight=True),
        Output("marginal_rate", "Marginal Tax Rate", kind="percent", decimals=0),
        Output("effective_rate", "Effective Tax Rate", kind="percent"),
        Output("breakdown", "Breakdown by Bracket", kind="text"),
    ),
    formula="Tax = Σ (income in bracket × bracket rate)",
    tips=(
        "Moving into a higher bracket only affects income above the threshold.",
        "Deductions reduce income taxed at your marginal rate.",
    ),
)
def tax_bracket(x: Dict[str, Any]) -> Dict[str, Any]:
    income = x["income"]
    if income <= 0:
        raise ValidationError("income", "Please enter a valid positive income amount.")

    bands = cfg.BRACKET_TABLE_BANDS[x["filing_status"]]
    tax, breakdown = bracket_tax(income, bands)
    tax = float(tax)

    lines = [
        f"{_band_label(lower, upper)} at {rate:.0%}: ${float(band_tax):,.2f}"
        for lower, upper, rate, band_tax in breakdown
        if band_tax > 0
    ]
    return {
        "tax": tax,
        "marginal_rate": marginal_rate(income, bands) * 100,
        "effective_rate": tax / income * 100,
        "breakdown": "; ".join(lines) or None,
        "brackets": [(lower, upper, rate, float(band_tax)) for lower, upper, rate, band_tax in breakdown],
        "label": cfg.FILING_STATUS_LABELS[x["filing_status"]],
    }


# ─── Property tax ────────────────────────────────────────────────────

@register(
    "property_tax",
    title="Property Tax Calculator",
    category=TAX,
    summary="Annual and monthly property tax from assessed value and local rate.",
    fields=(
        Field("property_value", "Assessed Property Value ($)", policy=Policy.FALLBACK,
              default=cfg.PROPERTY_TAX_DEFAULT_VALUE),
        Field("tax_rate", "Property Tax Rate (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.PROPERTY_TAX_DEFAULT_RATE),
    ),
    outputs=(
        Output("annual_tax", "Annual Property Tax", highlight=True),
        Output("monthly_tax", "Monthly Property Tax"),
    ),
    formula="Annual tax = assessed value × rate",
    tips=(
        "Check whether your area offers a homestead exemption.",
        "You can appeal an assessment that looks too high.",
    ),
)
def property_tax(x: Dict[str, Any]) -> Dict[str, Any]:
    annual = x["property_value"] * x["tax_rate"] / 100
    return {"annual_tax": annual, "monthly_tax": annual / 12}


# ─── Payroll ─────────────────────────────────────────────────────────

@register(
    "payroll",
    title="Payroll Calculator",
    category=TAX,
    summary="Gross to net pay for one pay period, including overtime.",
    fields=(
        Field("hourly_rate", "Hourly Rate ($)"),
        Field("hours_worked", "Regular Hours Worked", kind=Kind.NUMBER),
        Field("overtime_hours", "Overtime Hours", kind=Kind.NUMBER),
        Field("overtime_rate", "Overtime Rate ($/hour)"),
        Field("tax_rate", "Tax Rate (%)", kind=Kind.PERCENT),
        Field("deductions", "Other Deductions ($)"),
    ),
    outputs=(
        Output("regular_pay", "Regular Pay"),
        Output("overtime_pay", "Overtime Pay"),
        Output("gross_pay", "Gross Pay"),
        Output("tax_amount", "Tax Withheld"),
        Output("deductions", "Deductions"),
        Output("net_pay", "Net Pay", highlight=True),
    ),
    formula="Net = rate × min(hours, 40) + overtime − tax − deductions",
    tips=("Overtime is usually paid at 1.5× the regular rate.",),
)
def payroll(x: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("hourly_rate", "hours_worked", "overtime_hours", "overtime_rate",
                 "tax_rate", "deductions"):
        if x[name] < 0:
            raise ValidationError(name, "Value cannot be negative.")

    regular = x["hourly_rate"] * min(x["hours_worked"], cfg.PAYROLL_REGULAR_HOURS)
    overtime = x["overtime_hours"] * x["overtime_rate"]
    gross = regular + overtime
    tax = gross * x["tax_rate"] / 100
    return {
        "regular_pay": regular,
        "overtime_pay": overtime,
        "gross_pay": gross,
        "tax_amount": tax,
        "deductions": x["deductions"],
        "net_pay": gross - tax - x["deductions"],
    }


# ─── Social Security ─────────────────────────────────────────────────

def claiming_factor(claim_age: float, full_retirement_age: float) -> float:
    """Benefit multiplier for claiming before or after full retirement age."""
    tier = cfg.SS_ADJUSTMENT_TIER_MONTHS
    if claim_age < full_retirement_age:
        months = (full_retirement_age - claim_age) * 12
        return (1 - cfg.SS_EARLY_RATE_FIRST_36 * min(months, tier)
                - cfg.SS_EARLY_RATE_AFTER_36 * max(months - tier, 0))
    months = (claim_age - full_retirement_age) * 12
    return (1 + cfg.SS_LATE_RATE_FIRST_36 * min(months, tier)
            + cfg.SS_LATE_RATE_AFTER_36 * max(months - tier, 0))


@register(
    "social_security",
    title="Social Security Benefits Calculator",
    category=TAX,
    summary="Rough estimate of your monthly Social Security retirement benefit.",
    fields=(
        Field("birth_year", "Birth Year", kind=Kind.INTEGER, policy=Policy.OPTIONAL,
              placeholder="e.g. 1985"),
        Field("current_age", "Current Age", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.SS_DEFAULT_AGE),
        Field("retirement_age", "Full Retirement Age", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.SS_DEFAULT_RETIREMENT_AGE),
        Field("annual_income", "Annual Income ($)", policy=Policy.FALLBACK,
              default=cfg.SS_DEFAULT_INCOME),
        Field("current_year", "Current Year", kind=Kind.INTEGER, policy=Policy.OPTIONAL),
    ),
    outputs=(
        Output("monthly_benefit", "Estimated Monthly Benefit", highlight=True),
        Output("annual_benefit", "Annual Benefit"),
        Output("lifetime_benefit", "Estimated Lifetime Benefits"),
        Output("retirement_year", "Retirement Year", kind="text"),
        Output("years_to_retirement", "Years Until Retirement", kind="integer"),
    ),
    formula="Benefit = min(income, wage base) / 12 × multiplier × claiming adjustment",
    tips=(
        "Each year you delay past full retirement age raises the benefit until 70.",
        "Check your earnings record for errors.",
    ),
)
def social_security(x: Dict[str, Any]) -> Dict[str, Any]:
    current_year = x.get("current_year") or datetime.date.today().year
    age = x["current_age"]
    fra = x["retirement_age"]

    birth_year = x.get("birth_year") or current_year - cfg.SS_DEFAULT_AGE
    retirement_year = birth_year + fra
    aime = min(max(x["annual_income"], 0), cfg.SS_WAGE_BASE) / 12
    benefit = aime * cfg.SS_BENEFIT_MULTIPLIER.get(fra, cfg.SS_BENEFIT_MULTIPLIER_OTHER)

    monthly = max(0.0, benefit * claiming_factor(age, fra))
    annual = monthly * 12
    return {
        "monthly_benefit": monthly,
        "annual_benefit": annual,
        "lifetime_benefit": annual * max(0, cfg.SS_LIFETIME_YEARS_FROM_62 - (age - 62)),
        "retirement_year": str(retirement_year),
        "years_to_retirement": max(0, retirement_year - current_year),
    }
