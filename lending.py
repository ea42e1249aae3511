"""
Loan, mortgage and debt calculators.

All amortized payments go through :func:`amortized_payment`, which falls back
to straight-line division when the rate is zero.
"""

from __future__ import annotations

import math
from typing import Any, Dict, List

import numpy as np

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

LENDING = "Lending"


# ─── Helpers ─────────────────────────────────────────────────────────

def amortized_payment(principal: float, monthly_rate: float, months: float) -> float:
    """Level payment that retires *principal* over *months*.

    ``M = P·i(1+i)^n / ((1+i)^n − 1)``; with ``i == 0`` this is ``P / n``.
    """
    if months <= 0:
        raise ValueError("months must be positive")
    if monthly_rate == 0:
        return principal / months
    growth = (1 + monthly_rate) ** months
    return principal * monthly_rate * growth / (growth - 1)


def remaining_balance(principal: float, monthly_rate: float, months: int) -> np.ndarray:
    """Outstanding balance after each payment, index 0 = before the first."""
    payment = amortized_payment(principal, monthly_rate, months)
    k = np.arange(months + 1, dtype=float)
    if monthly_rate == 0:
        balance = principal - payment * k
    else:
        growth = (1 + monthly_rate) ** k
        balance = principal * growth - payment * (growth - 1) / monthly_rate
    return np.maximum(balance, 0.0)


def _schedule_values(principal: float, annual_rate_pct: float, months: float) -> Dict[str, Any]:
    """Values every amortizing calculator exposes for the balance chart.

    The chart needs a whole number of payments, so a partial final month
    counts as one and a term shorter than a month still gets one payment.
    """
    return {
        "principal": principal,
        "annual_rate": annual_rate_pct,
        "months": max(1, math.ceil(round(months, 9))),
    }


# ─── Loan ────────────────────────────────────────────────────────────

@register(
    "loan",
    title="Loan Calculator",
    category=LENDING,
    summary="Estimate your monthly payment, total interest, and total cost of a loan.",
    fields=(
        Field("loan_amount", "Loan Amount ($)", placeholder="e.g. 25,000"),
        Field("interest_rate", "Annual Interest Rate (%)", kind=Kind.PERCENT, placeholder="e.g. 5.5"),
        Field("loan_term", "Loan Term (Years)", kind=Kind.NUMBER, placeholder="e.g. 5"),
    ),
    outputs=(
        Output("monthly_payment", "Monthly Payment", highlight=True),
        Output("total_interest", "Total Interest"),
        Output("total_payment", "Total Paid"),
        Output("principal", "Principal"),
    ),
    formula="M = P × [i(1+i)^n] / [(1+i)^n − 1]",
    tips=(
        "Improve your credit score for lower rates.",
        "Make extra payments to cut total interest.",
        "A shorter term costs more per month but far less overall.",
        "Compare APRs, not just headline rates.",
    ),
    chart="balance",
)
def loan(x: Dict[str, Any]) -> Dict[str, Any]:
    principal = x["loan_amount"]
    if principal <= 0:
        raise ValidationError("loan_amount", "Loan amount must be greater than zero.")
    if x["interest_rate"] < 0:
        raise ValidationError("interest_rate", "Interest rate cannot be negative.")
    if x["loan_term"] <= 0:
        raise ValidationError("loan_term", "Loan term must be greater than zero.")

    months = x["loan_term"] * 12
    monthly = amortized_payment(principal, x["interest_rate"] / 100 / 12, months)
    total = monthly * months
    return {
        "monthly_payment": monthly,
        "total_payment": total,
        "total_interest": total - principal,
        **_schedule_values(principal, x["interest_rate"], months),
    }


# ─── Mortgage ────────────────────────────────────────────────────────

@register(
    "mortgage",
    title="Mortgage Calculator",
    category=LENDING,
    summary="Calculate your monthly mortgage payments and total loan cost.",
    fields=(
        Field("home_value", "Home Value ($)", placeholder="e.g. 300,000 or $300K"),
        Field("down_payment", "Down Payment ($)", placeholder="e.g. 60,000 or $60K"),
        Field("loan_term", "Loan Term (years)", kind=Kind.NUMBER, placeholder="e.g. 30 or 15"),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT, placeholder="e.g. 3.5 or 4.25"),
    ),
    outputs=(
        Output("home_value", "Home Value"),
        Output("down_payment", "Down Payment"),
        Output("loan_amount", "Loan Amount"),
        Output("monthly_payment", "Monthly Payment", highlight=True),
        Output("interest_rate", "Interest Rate", kind="percent"),
        Output("loan_term", "Loan Term", kind="years", decimals=0),
        Output("total_interest", "Total Interest"),
        Output("total_cost", "Total Cost"),
    ),
    formula="M = P [ i(1 + i)^n ] / [ (1 + i)^n – 1 ], P = home value − down payment",
    tips=(
        "Save for a larger down payment to reduce monthly payments.",
        "Improve your credit score to qualify for better rates.",
        "Consider different loan terms (15-year vs 30-year).",
        "Factor in all homeownership costs (maintenance, taxes, insurance).",
    ),
    chart="balance",
)
def mortgage(x: Dict[str, Any]) -> Dict[str, Any]:
    home, down = x["home_value"], x["down_payment"]
    if down < 0:
        raise ValidationError("down_payment", "Down payment cannot be negative.")
    loan_amount = home - down
    if loan_amount <= 0:
        raise ValidationError("down_payment", "Down payment must be less than the home value.")
    if x["loan_term"] <= 0:
        raise ValidationError("loan_term", "Loan term must be greater than zero.")
    if x["interest_rate"] < 0:
        raise ValidationError("interest_rate", "Interest rate cannot be negative.")

    payments = x["loan_term"] * 12
    monthly = amortized_payment(loan_amount, x["interest_rate"] / 100 / 12, payments)
    total_interest = monthly * payments - loan_amount
    return {
        "home_value": home,
        "down_payment": down,
        "loan_amount": loan_amount,
        "monthly_payment": monthly,
        "interest_rate": x["interest_rate"],
        "loan_term": x["loan_term"],
        "total_interest": total_interest,
        "total_cost": home + total_interest,
        **_schedule_values(loan_amount, x["interest_rate"], payments),
    }


# ─── Car loan ────────────────────────────────────────────────────────

@register(
    "car_loan",
    title="Car Loan Calculator",
    category=LENDING,
    summary="Work out the monthly payment on an auto loan after down payment and trade-in.",
    fields=(
        Field("car_price", "Car Price ($)", policy=Policy.FALLBACK,
              default=cfg.CAR_LOAN_DEFAULT_PRICE, clamp=(0, None)),
        Field("down_payment", "Down Payment ($)", policy=Policy.ZERO, clamp=(0, None)),
        Field("trade_in", "Trade-in Value ($)", policy=Policy.ZERO, clamp=(0, None)),
        Field("loan_term", "Loan Term (months)", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.CAR_LOAN_DEFAULT_TERM_MONTHS, clamp=(1, None)),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT, policy=Policy.FALLBACK,
              default=cfg.CAR_LOAN_DEFAULT_RATE, clamp=(0, None)),
    ),
    outputs=(
        Output("car_price", "Car Price"),
        Output("down_payment", "Down Payment"),
        Output("trade_in", "Trade-in"),
        Output("loan_amount", "Loan Amount"),
        Output("monthly_payment", "Monthly Payment", highlight=True),
        Output("total_interest", "Total Interest"),
        Output("total_payment", "Total Paid"),
        Output("loan_term", "Loan Term", kind="months", decimals=0),
        Output("interest_rate", "Interest Rate", kind="percent"),
    ),
    formula="M = P [i(1+i)^n] / [(1+i)^n − 1], P = price − down payment − trade-in",
    tips=(
        "Keep the term at or under 60 months to avoid owing more than the car is worth.",
        "Get pre-approved before visiting the dealer.",
        "Negotiate the price first, then the financing.",
    ),
    chart="balance",
)
def car_loan(x: Dict[str, Any]) -> Dict[str, Any]:
    price, down, trade = x["car_price"], x["down_payment"], x["trade_in"]
    months = x["loan_term"]
    loan_amount = max(0.0, price - down - trade)

    monthly = amortized_payment(loan_amount, x["interest_rate"] / 100 / 12, months)
    total = monthly * months
    return {
        "car_price": price,
        "down_payment": down,
        "trade_in": trade,
        "loan_amount": loan_amount,
        "monthly_payment": monthly,
        "total_payment": total,
        "total_interest": max(0.0, total - loan_amount),
        "loan_term": months,
        "interest_rate": x["interest_rate"],
        **_schedule_values(loan_amount, x["interest_rate"], months),
    }


# ─── HELOC ───────────────────────────────────────────────────────────

@register(
    "heloc",
    title="HELOC Calculator",
    category=LENDING,
    summary="Estimate your home equity line of credit and its draw and repayment payments.",
    fields=(
        Field("home_value", "Home Value ($)", policy=Policy.ZERO),
        Field("mortgage_balance", "Mortgage Balance ($)", policy=Policy.ZERO),
        Field("credit_limit", "Max Combined LTV (%)", kind=Kind.PERCENT, policy=Policy.ZERO),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT, policy=Policy.ZERO),
        Field("draw_period", "Draw Period (years)", kind=Kind.NUMBER, policy=Policy.FALLBACK,
              default=cfg.HELOC_DEFAULT_DRAW_YEARS),
        Field("repayment_period", "Repayment Period (years)", kind=Kind.NUMBER, policy=Policy.FALLBACK,
              default=cfg.HELOC_DEFAULT_REPAYMENT_YEARS),
    ),
    outputs=(
        Output("ltv", "Combined LTV", kind="percent", decimals=1),
        Output("available_credit", "Available Credit", highlight=True),
        Output("interest_only_payment", "Interest-Only Payment (draw period)"),
        Output("amortizing_payment", "Amortizing Payment (repayment period)"),
        Output("draw_period", "Draw Period", kind="years", decimals=0),
        Output("repayment_period", "Repayment Period", kind="years", decimals=0),
    ),
    formula="Available credit = home value × LTV − mortgage balance",
    tips=(
        "Most lenders cap combined LTV at 80-85%.",
        "Payments jump when the draw period ends and principal is due.",
        "HELOC rates are usually variable.",
    ),
)
def heloc(x: Dict[str, Any]) -> Dict[str, Any]:
    ltv = x["credit_limit"] / 100
    rate = x["interest_rate"] / 100
    available = max(x["home_value"] * ltv - x["mortgage_balance"], 0.0)

    interest_only = 0.0
    amortizing = 0.0
    if available > 0 and rate > 0:
        monthly_rate = rate / 12
        interest_only = available * monthly_rate
        months = x["repayment_period"] * 12
        if months > 0:
            amortizing = amortized_payment(available, monthly_rate, months)

    return {
        "ltv": ltv * 100,
        "available_credit": available,
        "interest_only_payment": interest_only,
        "amortizing_payment": amortizing,
        "draw_period": x["draw_period"],
        "repayment_period": x["repayment_period"],
    }


# ─── Refinance break-even ────────────────────────────────────────────

@register(
    "refinance_break_even",
    title="Mortgage Refinance Break-Even Calculator",
    category=LENDING,
    summary="Find out how many months of savings it takes to recover refinancing costs.",
    fields=(
        Field("loan_balance", "Current Loan Balance ($)"),
        Field("current_rate", "Current Rate (%)", kind=Kind.PERCENT),
        Field("new_rate", "New Rate (%)", kind=Kind.PERCENT),
        Field("remaining_term", "Remaining Term (years)", kind=Kind.INTEGER),
        Field("closing_costs", "Closing Costs ($)", policy=Policy.ZERO),
        Field("discount_points", "Discount Points (%)", kind=Kind.PERCENT, policy=Policy.ZERO),
    ),
    outputs=(
        Output("current_payment", "Current Monthly Interest"),
        Output("new_payment", "New Monthly Interest"),
        Output("monthly_savings", "Monthly Savings", highlight=True),
        Output("total_cost", "Total Refinance Cost"),
        Output("break_even_months", "Break-Even", kind="months", decimals=1),
        Output("break_even_years", "Break-Even", kind="years", decimals=1),
    ),
    formula="Break-even months = (closing costs + points) ÷ monthly savings",
    tips=(
        "Refinance only if you plan to stay past the break-even point.",
        "Each discount point costs 1% of the loan balance.",
    ),
)
def refinance_break_even(x: Dict[str, Any]) -> Dict[str, Any]:
    balance = x["loan_balance"]
    total_cost = x["closing_costs"] + balance * (x["discount_points"] / 100)

    current_payment = balance * x["current_rate"] / 100 / 12
    new_payment = balance * x["new_rate"] / 100 / 12
    savings = current_payment - new_payment

    if savings <= 0:
        return {
            "current_payment": current_payment,
            "new_payment": new_payment,
            "monthly_savings": 0.0,
            "total_cost": total_cost,
            "break_even_months": None,
            "break_even_years": None,
            "label": "Refinancing is not beneficial: the new rate is not lower.",
            "flag": "danger",
        }

    months = total_cost / savings
    years = months / 12
    if years < x["remaining_term"]:
        label = "Refinancing is recommended. You will break even before the loan ends."
        flag = "healthy"
    else:
        label = "Refinancing may not be worth it. Break-even occurs after the loan term."
        flag = "warning"
    return {
        "current_payment": current_payment,
        "new_payment": new_payment,
        "monthly_savings": savings,
        "total_cost": total_cost,
        "break_even_months": months,
        "break_even_years": years,
        "label": label,
        "flag": flag,
    }


# ─── Credit card payoff ──────────────────────────────────────────────

@register(
    "credit_card_payoff",
    title="Credit Card Payoff Calculator",
    category=LENDING,
    summary="See how long it takes to clear a card balance with a fixed monthly payment.",
    fields=(
        Field("balance", "Current Balance ($)", signed=False),
        Field("interest_rate", "APR (%)", kind=Kind.PERCENT, signed=False),
        Field("monthly_payment", "Monthly Payment ($)", signed=False),
    ),
    outputs=(
        Output("months", "Months to Pay Off", kind="count", highlight=True),
        Output("years", "Years", kind="integer"),
        Output("remaining_months", "Remaining Months", kind="integer"),
        Output("total_interest", "Total Interest"),
        Output("total_payments", "Total Payments"),
    ),
    formula="n = ln(P ÷ (P − B·i)) ÷ ln(1 + i)",
    tips=(
        "Paying just above the interest charge can take decades.",
        "Move the balance to a 0% transfer card if the fee is low.",
    ),
)
def credit_card_payoff(x: Dict[str, Any]) -> Dict[str, Any]:
    balance, payment = x["balance"], x["monthly_payment"]
    if balance <= 0:
        raise ValidationError("balance", "Please enter a valid current balance.")
    if x["interest_rate"] < 0:
        raise ValidationError("interest_rate", "Please enter a valid interest rate.")
    if payment <= 0:
        raise ValidationError("monthly_payment", "Please enter a valid monthly payment.")

    monthly_rate = x["interest_rate"] / 100 / 12
    if payment <= balance * monthly_rate:
        raise ValidationError(
            "monthly_payment",
            "Your monthly payment is too low to cover the interest. Please increase it.",
        )

    if monthly_rate == 0:
        months = balance / payment
    else:
        months = math.log(payment / (payment - balance * monthly_rate)) / math.log(1 + monthly_rate)
    total = payment * months
    return {
        "months": months,
        "years": math.floor(months / 12),
        "remaining_months": math.ceil(months % 12),
        "total_interest": total - balance,
        "total_payments": total,
    }


# ─── Debt snowball / avalanche ───────────────────────────────────────

def _payoff_plan(debts: List[Dict[str, Any]], extra: float) -> Dict[str, Any]:
    """Month-by-month payoff, target debt first, minimums on the rest."""
    month = 0
    total_interest = 0.0
    rolled_extra = extra
    schedule = []

    while debts:
        month += 1
        interest_month = 0.0
        principal_month = 0.0

        i = 1
        while i < len(debts):
            debt = debts[i]
            interest = debt["balance"] * debt["rate"] / 12
            payment = min(debt["min_payment"], debt["balance"] + interest)
            debt["balance"] -= payment - interest
            debt["interest_paid"] += interest
            interest_month += interest
            principal_month += payment - interest
            if debt["balance"] <= cfg.DEBT_PAID_TOLERANCE:
                debt["paid_month"] = month
                debts.pop(i)
            else:
                i += 1

        if debts:
            target = debts[0]
            interest = target["balance"] * target["rate"] / 12
            payment = min(target["min_payment"] + rolled_extra, target["balance"] + interest)
            target["balance"] -= payment - interest
            target["interest_paid"] += interest
            interest_month += interest
            principal_month += payment - interest
            if target["balance"] <= cfg.DEBT_PAID_TOLERANCE:
                target["paid_month"] = month
                rolled_extra += target["min_payment"]
                debts.pop(0)

        total_interest += interest_month
        schedule.append((month, interest_month, principal_month, len(debts)))
        if month > cfg.DEBT_SNOWBALL_MAX_MONTHS:
            break

    return {"months": month, "total_interest": total_interest, "schedule": schedule}


@register(
    "debt_snowball",
    title="Debt Snowball Calculator",
    category=LENDING,
    summary="Plan a debt payoff with the snowball (smallest balance) or avalanche (highest rate) method.",
    fields=(
        Field("debt_names", "Debt Names", kind=Kind.LABELS, policy=Policy.OPTIONAL),
        Field("balances", "Balances ($)", kind=Kind.SERIES, policy=Policy.ZERO),
        Field("interest_rates", "Interest Rates (%)", kind=Kind.SERIES, policy=Policy.ZERO),
        Field("min_payments", "Minimum Payments ($)", kind=Kind.SERIES, policy=Policy.ZERO),
        Field("extra_payment", "Extra Monthly Payment ($)", policy=Policy.ZERO),
        Field("strategy", "Strategy", kind=Kind.CHOICE, default="snowball",
              choices=(("snowball", "Snowball (smallest balance first)"),
                       ("avalanche", "Avalanche (highest rate first)"))),
    ),
    outputs=(
        Output("total_months", "Months to Debt-Free", kind="integer", highlight=True),
        Output("total_interest", "Total Interest Paid"),
        Output("payoff_order", "Payoff Order", kind="text"),
    ),
    formula="Each month: minimums on all debts, minimum + extra on the target debt; "
            "a paid-off target's minimum rolls into the extra.",
    tips=(
        "Snowball builds momentum with quick wins.",
        "Avalanche minimizes total interest.",
        "Never skip minimum payments on the other debts.",
    ),
)
def debt_snowball(x: Dict[str, Any]) -> Dict[str, Any]:
    balances = x["balances"]
    rates = x["interest_rates"]
    minimums = x["min_payments"]
    names = x.get("debt_names") or []

    debts = []
    for idx, balance in enumerate(balances):
        if balance <= 0:
            continue
        debts.append({
            "name": names[idx] if idx < len(names) and names[idx] else f"Debt {idx + 1}",
            "balance": balance,
            "rate": (rates[idx] if idx < len(rates) else 0.0) / 100,
            "min_payment": minimums[idx] if idx < len(minimums) else 0.0,
            "interest_paid": 0.0,
            "paid_month": None,
        })
    if not debts:
        raise ValidationError("balances", "Enter at least one debt with a balance.")

    if x["strategy"] == "snowball":
        debts.sort(key=lambda d: d["balance"])
    else:
        debts.sort(key=lambda d: d["rate"], reverse=True)

    order = list(debts)
    plan = _payoff_plan(debts, x["extra_payment"])

    finished = sorted(
        (d for d in order if d["paid_month"] is not None),
        key=lambda d: d["paid_month"],
    )
    payoff_order = ", ".join(f"{d['name']} (month {d['paid_month']})" for d in finished)

    values: Dict[str, Any] = {
        "total_months": plan["months"],
        "total_interest": plan["total_interest"],
        "payoff_order": payoff_order or None,
        "schedule": plan["schedule"],
        "strategy": x["strategy"],
    }
    if plan["months"] > cfg.DEBT_SNOWBALL_MAX_MONTHS:
        values["label"] = "Debts are not repaid within 50 years. Increase your payments."
        values["flag"] = "danger"
    return values


# ─── Lease vs buy ────────────────────────────────────────────────────

@register(
    "lease_vs_buy",
    title="Lease vs Buy Calculator",
    category=LENDING,
    summary="Compare the after-tax cost of leasing an asset against financing a purchase.",
    fields=(
        Field("asset_cost", "Asset Cost ($)", policy=Policy.ZERO, signed=False),
        Field("lease_term", "Lease Term (months)", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.LEASE_DEFAULT_TERM_MONTHS),
        Field("monthly_lease", "Monthly Lease Payment ($)", policy=Policy.ZERO, signed=False),
        Field("down_payment", "Down Payment ($)", policy=Policy.ZERO, signed=False),
        Field("loan_term", "Loan Term (months)", kind=Kind.INTEGER, policy=Policy.FALLBACK,
              default=cfg.LEASE_DEFAULT_LOAN_TERM_MONTHS),
        Field("interest_rate", "Interest Rate (%)", kind=Kind.PERCENT, policy=Policy.ZERO, signed=False),
        Field("residual_value", "Residual Value ($)", policy=Policy.ZERO, signed=False),
        Field("tax_rate", "Tax Rate (%)", kind=Kind.PERCENT, policy=Policy.ZERO,
              signed=False, clamp=(0, 100)),
    ),
    outputs=(
        Output("total_lease_payments", "Total Lease Payments"),
        Output("lease_tax_savings", "Lease Tax Savings"),
        Output("net_lease_cost", "Net Lease Cost", highlight=True),
        Output("monthly_loan_payment", "Monthly Loan Payment"),
        Output("total_loan_payments", "Total Loan Payments"),
        Output("interest_payments", "Interest Paid"),
        Output("tax_savings", "Purchase Tax Savings"),
        Output("net_purchase_cost", "Net Purchase Cost", highlight=True),
        Output("cost_difference", "Difference"),
        Output("recommendation", "Recommendation", kind="text"),
    ),
    formula="Net purchase = cost + interest − (interest + depreciation) × tax − residual; "
            "net lease = payments × (1 − tax)",
    tips=(
        "Leasing suits assets that become obsolete quickly.",
        "Buying wins when the asset holds its value.",
    ),
)
def lease_vs_buy(x: Dict[str, Any]) -> Dict[str, Any]:
    cost, lease_monthly = x["asset_cost"], x["monthly_lease"]
    if cost == 0:
        raise ValidationError("asset_cost", "Please enter a valid value for Asset Cost.")
    if lease_monthly == 0:
        raise ValidationError("monthly_lease", "Please enter a valid value for Monthly Lease Payment.")
    if x["lease_term"] <= 0 or x["loan_term"] <= 0:
        raise ValidationError("loan_term", "Lease and loan terms must be at least one month.")

    tax = x["tax_rate"] / 100

    total_lease = lease_monthly * x["lease_term"]
    lease_tax_savings = total_lease * tax
    net_lease = total_lease - lease_tax_savings

    loan_amount = max(0.0, cost - x["down_payment"])
    months = x["loan_term"]
    monthly_loan = amortized_payment(loan_amount, x["interest_rate"] / 100 / 12, months) if loan_amount > 0 else 0.0
    total_loan = monthly_loan * months
    interest_paid = total_loan - loan_amount
    depreciation = cost - x["residual_value"]
    tax_savings = (interest_paid + depreciation) * tax
    net_purchase = cost + interest_paid - tax_savings - x["residual_value"]

    leasing_wins = net_lease < net_purchase
    return {
        "total_lease_payments": total_lease,
        "lease_tax_savings": lease_tax_savings,
        "net_lease_cost": net_lease,
        "monthly_loan_payment": monthly_loan,
        "total_loan_payments": total_loan,
        "interest_payments": interest_paid,
        "tax_savings": tax_savings,
        "net_purchase_cost": net_purchase,
        "cost_difference": abs(net_lease - net_purchase),
        "recommendation": "Leasing" if leasing_wins else "Buying",
    }
