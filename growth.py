"""
Savings, compounding and retirement-growth calculators.
"""

from __future__ import annotations

from typing import Any, Dict

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

GROWTH = "Savings & Growth"

_FREQUENCY_CHOICES = (
    ("annually", "Annually"),
    ("semiannually", "Semi-annually"),
    ("quarterly", "Quarterly"),
    ("monthly", "Monthly"),
    ("weekly", "Weekly"),
    ("daily", "Daily"),
)


def compound(principal: float, annual_rate: float, periods_per_year: float, years: float) -> float:
    """``P(1 + r/n)^(n·t)`` with *annual_rate* as a fraction."""
    return principal * (1 + annual_rate / periods_per_year) ** (periods_per_year * years)


# ─── Compound interest ───────────────────────────────────────────────

@register(
    "compound_interest",
    title="Compound Interest Calculator",
    category=GROWTH,
    summary="See how an investment grows when interest earns interest.",
    fields=(
        Field("principal", "Initial Investment ($)", placeholder="e.g. 10,000"),
        Field("interest_rate", "Annual Interest Rate (%)", kind=Kind.PERCENT),
        Field("years", "Time Period (years)", kind=Kind.NUMBER),
        Field("compounding", "Compounding Frequency", kind=Kind.CHOICE, default=12,
              choices=((1, "Annually"), (2, "Semi-annually"), (4, "Quarterly"),
                       (12, "Monthly"), (365, "Daily"))),
    ),
    outputs=(
        Output("future_value", "Future Value", highlight=True),
        Output("principal", "Initial Investment"),
        Output("total_interest", "Interest Earned"),
        Output("growth_pct", "Total Growth", kind="percent"),
    ),
    formula="A = P(1 + r/n)^(nt)",
    tips=(
        "Start early: time matters more than the rate.",
        "More frequent compounding helps, but only slightly.",
        "Reinvest dividends and interest.",
    ),
    chart="growth",
)
def compound_interest(x: Dict[str, Any]) -> Dict[str, Any]:
    p, rate, years = x["principal"], x["interest_rate"], x["years"]
    if p <= 0:
        raise ValidationError("principal", "Initial investment must be greater than zero.")
    if rate < 0:
        raise ValidationError("interest_rate", "Interest rate cannot be negative.")
    if years < 0:
        raise ValidationError("years", "Time period cannot be negative.")

    n = x["compounding"]
    amount = compound(p, rate / 100, n, years)
    return {
        "future_value": amount,
        "principal": p,
        "total_interest": amount - p,
        "growth_pct": (amount / p - 1) * 100,
        "annual_rate": rate,
        "years": years,
        "periods_per_year": n,
    }


# ─── Staking rewards ─────────────────────────────────────────────────

@register(
    "staking_rewards",
    title="Crypto Staking Rewards Calculator",
    category=GROWTH,
    summary="Project staking rewards from an APY and a compounding schedule.",
    fields=(
        Field("amount", "Staked Amount ($)"),
        Field("apy", "APY (%)", kind=Kind.PERCENT),
        Field("days", "Staking Period (days)", kind=Kind.INTEGER),
        Field("frequency", "Compounding", kind=Kind.CHOICE, default="daily",
              choices=(("daily", "Daily"), ("weekly", "Weekly"),
                       ("monthly", "Monthly"), ("yearly", "Yearly"))),
    ),
    outputs=(
        Output("final_amount", "Final Amount", highlight=True),
        Output("total_rewards", "Total Rewards"),
        Output("daily_rewards", "Average Daily Rewards"),
        Output("monthly_rewards", "Rewards per 30 Days"),
        Output("yearly_rewards", "Rewards per 365 Days"),
    ),
    formula="A = P(1 + APY/n)^(n × days/365)",
    tips=(
        "Advertised APYs often already assume compounding.",
        "Lock-up periods limit access to your coins.",
        "Rewards are usually taxable when received.",
    ),
)
def staking_rewards(x: Dict[str, Any]) -> Dict[str, Any]:
    amount, apy, days = x["amount"], x["apy"], x["days"]
    if amount <= 0:
        raise ValidationError("amount", "Staked amount must be greater than zero.")
    if apy < 0:
        raise ValidationError("apy", "APY cannot be negative.")
    if days <= 0:
        raise ValidationError("days", "Staking period must be at least one day.")

    n = cfg.STAKING_COMPOUNDING[x["frequency"]]
    final = compound(amount, apy / 100, n, days / 365)
    total = final - amount
    daily = total / days
    return {
        "final_amount": final,
        "total_rewards": total,
        "daily_rewards": daily,
        "monthly_rewards": daily * 30,
        "yearly_rewards": daily * 365,
    }


# ─── Time value of money ─────────────────────────────────────────────

@register(
    "time_value_of_money",
    title="Time Value of Money Calculator",
    category=GROWTH,
    summary="Convert between present and future value at a given rate.",
    fields=(
        Field("present_value", "Present Value ($)", policy=Policy.OPTIONAL),
        Field("future_value", "Future Value ($)", policy=Policy.OPTIONAL),
        Field("interest_rate", "Annual Interest Rate (%)", kind=Kind.PERCENT),
        Field("years", "Number of Years", kind=Kind.NUMBER),
        Field("frequency", "Compounding", kind=Kind.CHOICE, default="annually",
              choices=_FREQUENCY_CHOICES),
    ),
    outputs=(
        Output("present_value", "Present Value", highlight=True),
        Output("future_value", "Future Value", highlight=True),
    ),
    formula="FV = PV(1 + r/n)^(nt), PV = FV / (1 + r/n)^(nt)",
    tips=(
        "A dollar today is worth more than a dollar tomorrow.",
        "Use your expected return as the discount rate.",
    ),
)
def time_value_of_money(x: Dict[str, Any]) -> Dict[str, Any]:
    pv, fv = x.get("present_value"), x.get("future_value")
    rate, years = x["interest_rate"], x["years"]
    if pv is None and fv is None:
        raise ValidationError("present_value", "Enter either a present value or a future value.")
    if rate == 0:
        raise ValidationError("interest_rate", "Interest rate must not be zero.")
    if years == 0:
        raise ValidationError("years", "Number of years must not be zero.")

    n = cfg.COMPOUNDING_PER_YEAR[x["frequency"]]
    base = 1 + rate / 100 / n
    if base <= 0:
        raise ValidationError("interest_rate", "Interest rate is too low for this compounding frequency.")
    factor = base ** (n * years)

    result_fv = pv * factor if pv is not None else None
    result_pv = fv / factor if fv is not None else None
    return {
        "present_value": result_pv if result_pv is not None else pv,
        "future_value": result_fv if result_fv is not None else fv,
        "factor": factor,
    }


# ─── Certificate of deposit ──────────────────────────────────────────

@register(
    "cd",
    title="CD Calculator",
    category=GROWTH,
    summary="Work out what a certificate of deposit is worth at maturity.",
    fields=(
        Field("deposit", "Initial Deposit ($)"),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT),
        Field("years", "Term (years)", kind=Kind.NUMBER),
        Field("frequency", "Compounding", kind=Kind.CHOICE, default="monthly",
              choices=_FREQUENCY_CHOICES),
    ),
    outputs=(
        Output("maturity_value", "Value at Maturity", highlight=True),
        Output("interest_earned", "Interest Earned"),
        Output("apy", "Annual Percentage Yield", kind="percent", decimals=3),
    ),
    formula="A = P(1 + r/n)^(nt), APY = (A/P)^(1/t) − 1",
    tips=(
        "Early withdrawals usually cost several months of interest.",
        "Ladder CDs to keep some money accessible.",
    ),
    chart="growth",
)
def cd(x: Dict[str, Any]) -> Dict[str, Any]:
    p, rate, years = x["deposit"], x["interest_rate"], x["years"]
    if p <= 0:
        raise ValidationError("deposit", "Deposit must be greater than zero.")
    if rate < 0:
        raise ValidationError("interest_rate", "Interest rate cannot be negative.")
    if years <= 0:
        raise ValidationError("years", "Term must be greater than zero.")

    n = cfg.COMPOUNDING_PER_YEAR[x["frequency"]]
    amount = compound(p, rate / 100, n, years)
    return {
        "maturity_value": amount,
        "interest_earned": amount - p,
        "apy": ((amount / p) ** (1 / years) - 1) * 100,
        "principal": p,
        "annual_rate": rate,
        "years": years,
        "periods_per_year": n,
    }


# ─── ROI ─────────────────────────────────────────────────────────────

@register(
    "roi",
    title="ROI Calculator",
    category=GROWTH,
    summary="Measure the return on an investment, in total and per year.",
    fields=(
        Field("investment", "Initial Investment ($)"),
        Field("final_value", "Final Value ($)"),
        Field("period", "Investment Period (years)", kind=Kind.NUMBER, policy=Policy.ZERO),
    ),
    outputs=(
        Output("net_profit", "Net Profit"),
        Output("roi", "ROI", kind="percent", highlight=True),
        Output("annualized_roi", "Annualized ROI", kind="percent"),
    ),
    formula="ROI = (final − initial) / initial × 100; annualized = (1 + ROI)^(1/years) − 1",
    tips=(
        "Compare annualized returns when holding periods differ.",
        "Include fees and taxes in the final value.",
    ),
)
def roi(x: Dict[str, Any]) -> Dict[str, Any]:
    inv, final, period = x["investment"], x["final_value"], x["period"]
    if inv <= 0:
        raise ValidationError("investment", "Investment must be greater than zero.")
    if final < 0:
        raise ValidationError("final_value", "Final value cannot be negative.")
    if period < 0:
        raise ValidationError("period", "Investment period cannot be negative.")

    net = final - inv
    roi_pct = net / inv * 100
    annualized = ((1 + net / inv) ** (1 / period) - 1) * 100 if period > 0 else roi_pct
    profitable = net >= 0
    return {
        "net_profit": net,
        "roi": roi_pct,
        "annualized_roi": annualized,
        "label": "Profitable" if profitable else "Loss",
        "flag": "healthy" if profitable else "danger",
    }


# ─── 401(k) retirement ───────────────────────────────────────────────

@register(
    "retirement",
    title="401(k) Retirement Calculator",
    category=GROWTH,
    summary="Project your 401(k) balance with employer matching and inflation.",
    fields=(
        Field("current_age", "Current Age", kind=Kind.INTEGER),
        Field("retirement_age", "Retirement Age", kind=Kind.INTEGER),
        Field("current_savings", "Current 401(k) Balance ($)"),
        Field("annual_contribution", "Annual Contribution ($)"),
        Field("employer_match", "Employer Match (%)", kind=Kind.PERCENT),
        Field("match_limit", "Match Limit (% of contribution)", kind=Kind.PERCENT),
        Field("annual_return", "Expected Annual Return (%)", kind=Kind.PERCENT),
        Field("inflation", "Inflation Rate (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("future_value", "Balance at Retirement", highlight=True),
        Output("real_value", "In Today's Dollars"),
        Output("total_contributions", "Total Contributions"),
        Output("employer_total", "Employer Match Total"),
        Output("monthly_income", "Monthly Withdrawal (real return)"),
        Output("years", "Years to Retirement", kind="integer"),
    ),
    formula="Each year: balance = (balance + contribution + match) × (1 + r)",
    tips=(
        "Contribute at least enough to get the full employer match.",
        "Raise your contribution with every pay rise.",
        "Check fund expense ratios.",
    ),
)
def retirement(x: Dict[str, Any]) -> Dict[str, Any]:
    years = x["retirement_age"] - x["current_age"]
    if years <= 0:
        raise ValidationError("retirement_age", "Retirement age must be greater than current age.")
    if years > cfg.MAX_PROJECTION_YEARS:
        raise ValidationError("retirement_age", f"Plan at most {cfg.MAX_PROJECTION_YEARS} years ahead.")

    r = x["annual_return"] / 100
    inflation = x["inflation"] / 100
    contribution = x["annual_contribution"]
    match = min(contribution * x["employer_match"] / 100, contribution * x["match_limit"] / 100)

    balance = x["current_savings"]
    for _ in range(years):
        balance = (balance + contribution + match) * (1 + r)

    real_value = balance / (1 + inflation) ** years
    real_return = (1 + r) / (1 + inflation) - 1
    return {
        "future_value": balance,
        "real_value": real_value,
        "total_contributions": (contribution + match) * years,
        "employer_total": match * years,
        "monthly_income": balance * real_return / 12,
        "years": years,
    }


# ─── Pension planning ────────────────────────────────────────────────

@register(
    "pension_planning",
    title="Pension Planning Calculator",
    category=GROWTH,
    summary="Estimate your pension pot from monthly contributions and expected returns.",
    fields=(
        Field("current_age", "Current Age", kind=Kind.INTEGER),
        Field("retirement_age", "Retirement Age", kind=Kind.INTEGER),
        Field("current_savings", "Current Savings ($)", policy=Policy.ZERO),
        Field("monthly_contribution", "Monthly Contribution ($)"),
        Field("annual_return", "Expected Annual Return (%)", kind=Kind.PERCENT),
        Field("inflation", "Inflation Rate (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("future_value", "Projected Pension Pot", highlight=True),
        Output("inflation_adjusted", "In Today's Dollars"),
        Output("total_contributions", "Total Contributions"),
        Output("investment_growth", "Investment Growth"),
        Output("years", "Years to Retirement", kind="integer"),
    ),
    formula="FV = S(1+i)^m + C × [((1+i)^m − 1)/i] × (1+i), i = r/12",
    tips=(
        "Small increases to monthly contributions compound over decades.",
        "Review your plan every year.",
    ),
)
def pension_planning(x: Dict[str, Any]) -> Dict[str, Any]:
    years = x["retirement_age"] - x["current_age"]
    if years <= 0:
        raise ValidationError("retirement_age", "Retirement age must be greater than current age.")
    if years > cfg.MAX_PROJECTION_YEARS:
        raise ValidationError("retirement_age", f"Plan at most {cfg.MAX_PROJECTION_YEARS} years ahead.")

    savings, monthly = x["current_savings"], x["monthly_contribution"]
    i = x["annual_return"] / 100 / 12
    months = years * 12

    fv = savings * (1 + i) ** months
    if i > 0 and monthly > 0:
        fv += monthly * ((1 + i) ** months - 1) / i * (1 + i)
    elif monthly > 0:
        fv += monthly * months

    contributions = savings + monthly * months
    return {
        "future_value": fv,
        "inflation_adjusted": fv / (1 + x["inflation"] / 100) ** years,
        "total_contributions": contributions,
        "investment_growth": fv - contributions,
        "years": years,
    }


# ─── Crypto investment ───────────────────────────────────────────────

@register(
    "crypto_investment",
    title="Crypto Investment Calculator",
    category=GROWTH,
    summary="Project a crypto position with monthly buys and a volatility band.",
    fields=(
        Field("initial_investment", "Initial Investment ($)", policy=Policy.ZERO),
        Field("monthly_investment", "Monthly Investment ($)", policy=Policy.ZERO, clamp=(0, None)),
        Field("years", "Investment Period (years)", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.CRYPTO_DEFAULT_YEARS, clamp=(1, 50)),
        Field("expected_return", "Expected Annual Return (%)", kind=Kind.PERCENT,
              policy=Policy.FALLBACK, default=cfg.CRYPTO_DEFAULT_RETURN),
        Field("volatility", "Volatility (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.CRYPTO_DEFAULT_VOLATILITY, clamp=(0, cfg.CRYPTO_MAX_VOLATILITY)),
    ),
    outputs=(
        Output("future_value", "Projected Value", highlight=True),
        Output("total_invested", "Total Invested"),
        Output("total_gain", "Projected Gain"),
        Output("optimistic", "Optimistic Scenario"),
        Output("pessimistic", "Pessimistic Scenario"),
    ),
    formula="FV = P(1+R)^t + M × [((1+m)^n − 1)/m], m = (1+R)^(1/12) − 1",
    tips=(
        "Only invest what you can afford to lose.",
        "Dollar-cost averaging smooths out entry prices.",
        "Past crypto returns are no guide to future ones.",
    ),
)
def crypto_investment(x: Dict[str, Any]) -> Dict[str, Any]:
    initial, monthly = x["initial_investment"], x["monthly_investment"]
    if initial <= 0:
        raise ValidationError("initial_investment", "Please enter a valid initial investment.")
    annual = x["expected_return"] / 100
    if annual <= -1:
        raise ValidationError("expected_return", "Expected return must be greater than -100%.")

    years = x["years"]
    months = years * 12
    vol = x["volatility"] / 100
    monthly_rate = (1 + annual) ** (1 / 12) - 1

    fv = initial * (1 + annual) ** years
    if monthly > 0:
        if monthly_rate > 0:
            fv += monthly * ((1 + monthly_rate) ** months - 1) / monthly_rate
        elif monthly_rate == 0:
            fv += monthly * months

    invested = initial + monthly * months
    return {
        "future_value": fv,
        "total_invested": invested,
        "total_gain": fv - invested,
        "optimistic": fv * (1 + vol),
        "pessimistic": fv * max(0.0, 1 - vol),
    }


# ─── PPF ─────────────────────────────────────────────────────────────

@register(
    "ppf",
    title="PPF Calculator",
    category=GROWTH,
    summary="Maturity value of a Public Provident Fund account with regular deposits.",
    fields=(
        Field("yearly_investment", "Yearly Investment ($)", policy=Policy.FALLBACK,
              default=cfg.PPF_DEFAULT_YEARLY),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.PPF_DEFAULT_RATE),
        Field("years", "Investment Period (years)", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.PPF_DEFAULT_YEARS),
        Field("frequency", "Deposit Frequency", kind=Kind.CHOICE, default="yearly",
              choices=(("yearly", "Yearly"), ("monthly", "Monthly"), ("quarterly", "Quarterly"))),
    ),
    outputs=(
        Output("maturity_value", "Maturity Value", highlight=True),
        Output("total_investment", "Total Investment"),
        Output("total_interest", "Total Interest"),
        Output("years", "Investment Period", kind="years", decimals=0),
    ),
    formula="Each deposit period: interest = (balance + deposit) × r / n; balance += deposit + interest",
    tips=(
        "Deposit early in the period so the whole deposit earns interest.",
        "The account locks in for its full term.",
    ),
    chart="contributions",
)
def ppf(x: Dict[str, Any]) -> Dict[str, Any]:
    yearly, rate = x["yearly_investment"], x["interest_rate"]
    if yearly <= 0:
        raise ValidationError("yearly_investment", "Yearly investment must be greater than zero.")
    if rate <= 0:
        raise ValidationError("interest_rate", "Interest rate must be greater than zero.")
    if x["years"] <= 0:
        raise ValidationError("years", "Investment period must be at least one year.")

    years = min(x["years"], cfg.PPF_MAX_YEARS)
    n = cfg.PPF_DEPOSITS_PER_YEAR[x["frequency"]]
    deposit = yearly / n
    period_rate = rate / 100 / n

    balance = 0.0
    balances, contributed = [], []
    for year in range(1, years + 1):
        for _ in range(n):
            balance += deposit + (balance + deposit) * period_rate
        balances.append(balance)
        contributed.append(yearly * year)

    invested = yearly * years
    return {
        "maturity_value": balance,
        "total_investment": invested,
        "total_interest": balance - invested,
        "years": years,
        "yearly_balance": balances,
        "yearly_contributed": contributed,
    }


# ─── Education cost ──────────────────────────────────────────────────

@register(
    "education_cost",
    title="Education Cost Calculator",
    category=GROWTH,
    summary="Project future tuition and whether your savings plan will cover it.",
    fields=(
        Field("current_cost", "Current Annual Cost ($)", policy=Policy.ZERO, signed=False),
        Field("years_until", "Years Until Enrollment", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.EDUCATION_DEFAULT_YEARS_UNTIL, clamp=(1, 50)),
        Field("inflation", "Education Inflation (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.EDUCATION_DEFAULT_INFLATION, signed=False, clamp=(0, 50)),
        Field("education_years", "Years of Education", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.EDUCATION_DEFAULT_YEARS, clamp=(1, 12)),
        Field("current_savings", "Current Savings ($)", policy=Policy.ZERO, signed=False),
        Field("expected_return", "Expected Return (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.EDUCATION_DEFAULT_RETURN, signed=False, clamp=(0, 30)),
        Field("monthly_contribution", "Monthly Contribution ($)", policy=Policy.ZERO, signed=False),
    ),
    outputs=(
        Output("future_annual_cost", "Annual Cost at Enrollment"),
        Output("total_cost", "Total Education Cost", highlight=True),
        Output("projected_savings", "Projected Savings"),
        Output("shortfall", "Shortfall", highlight=True),
    ),
    formula="Cost = C(1 + inflation)^t × years; savings = S(1 + r)^t + M × [((1 + r/12)^(12t) − 1) / (r/12)]",
    tips=(
        "Tuition has historically risen faster than general inflation.",
        "Tax-advantaged college savings plans stretch each dollar further.",
    ),
)
def education_cost(x: Dict[str, Any]) -> Dict[str, Any]:
    cost = x["current_cost"]
    if cost <= 0:
        raise ValidationError("current_cost", "Please enter a valid current annual cost.")

    years = x["years_until"]
    future_cost = cost * (1 + x["inflation"] / 100) ** years
    total = future_cost * x["education_years"]

    annual = x["expected_return"] / 100
    monthly_rate = annual / 12
    monthly = x["monthly_contribution"]
    savings = x["current_savings"] * (1 + annual) ** years
    if monthly > 0 and monthly_rate > 0:
        savings += monthly * ((1 + monthly_rate) ** (years * 12) - 1) / monthly_rate
    elif monthly > 0:
        savings += monthly * years * 12

    shortfall = max(0.0, total - savings)
    return {
        "future_annual_cost": future_cost,
        "total_cost": total,
        "projected_savings": savings,
        "shortfall": shortfall,
        "label": "Savings gap" if shortfall > 0 else "On track",
        "flag": "warning" if shortfall > 0 else "healthy",
    }
