"""
Discounted cash flow, bond and option pricing calculators.

Discounting is vectorised with numpy: a cash-flow series is divided by
``(1 + r) ** t`` for ``t = 1..n`` in a single expression.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Sequence

import numpy as np

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

INVESTMENTS = "Investments"


def discount(cash_flows: Sequence[float], rate: float) -> np.ndarray:
    """Present value of each flow, the first received one period from now."""
    flows = np.asarray(cash_flows, dtype=float)
    periods = np.arange(1, len(flows) + 1)
    return flows / (1 + rate) ** periods


# ─── NPV ─────────────────────────────────────────────────────────────

@register(
    "npv",
    title="NPV Calculator",
    category=INVESTMENTS,
    summary="Net present value of a project from its yearly cash flows.",
    fields=(
        Field("initial_investment", "Initial Investment ($)", policy=Policy.ZERO),
        Field("discount_rate", "Discount Rate (%)", kind=Kind.PERCENT, policy=Policy.ZERO),
        Field("cash_flows", "Cash Flows (one per year)", kind=Kind.SERIES, policy=Policy.ZERO,
              max_items=cfg.NPV_MAX_YEARS, placeholder="15000; 15000; 15000"),
    ),
    outputs=(
        Output("npv", "Net Present Value", highlight=True),
        Output("present_value", "Present Value of Cash Flows"),
        Output("discount_rate", "Discount Rate", kind="percent"),
    ),
    formula="NPV = Σ CFₜ / (1 + r)^t − initial investment",
    tips=(
        "A positive NPV means the project beats your required return.",
        "Rates above 1 are read as percentages, 0.08 and 8 both mean 8%.",
    ),
)
def npv(x: Dict[str, Any]) -> Dict[str, Any]:
    flows = x["cash_flows"]
    if not flows:
        raise ValidationError("cash_flows", "Enter at least one cash flow.")
    rate = x["discount_rate"]
    if rate > 1:
        rate = rate / 100
    if rate <= -1:
        raise ValidationError("discount_rate", "Discount rate must be greater than -100%.")

    pv = float(discount(flows, rate).sum())
    value = pv - x["initial_investment"]
    if value > 0:
        verdict = {"label": "Profitable investment", "flag": "healthy"}
    else:
        verdict = {"label": "Not profitable", "flag": "danger"}
    return {
        "npv": value,
        "present_value": pv,
        "discount_rate": rate * 100,
        **verdict,
    }


# ─── DCF ─────────────────────────────────────────────────────────────

@register(
    "dcf",
    title="Discounted Cash Flow Calculator",
    category=INVESTMENTS,
    summary="Intrinsic value from projected cash flows and an optional terminal value.",
    fields=(
        Field("discount_rate", "Discount Rate (%)", kind=Kind.PERCENT),
        Field("cash_flows", "Annual Cash Flows", kind=Kind.SERIES, policy=Policy.ZERO,
              max_items=cfg.DCF_MAX_YEARS, placeholder="20000; 20000; 20000"),
        Field("include_terminal", "Include Terminal Value", kind=Kind.BOOLEAN, default=False),
        Field("terminal_value", "Terminal Value ($)", policy=Policy.OPTIONAL),
    ),
    outputs=(
        Output("dcf_value", "DCF Value", highlight=True),
        Output("terminal_value", "Terminal Value"),
        Output("discounted_terminal", "Discounted Terminal Value"),
    ),
    formula="DCF = Σ CFₜ / (1 + r)^t + TV / (1 + r)^n",
    tips=(
        "Use a higher discount rate for riskier cash flows.",
        "Terminal values often dominate the total; keep growth assumptions modest.",
    ),
)
def dcf(x: Dict[str, Any]) -> Dict[str, Any]:
    rate_pct, flows = x["discount_rate"], x["cash_flows"]
    if rate_pct < 0:
        raise ValidationError("discount_rate", "Discount rate must be non-negative.")
    if not flows:
        raise ValidationError("cash_flows", "Enter at least one cash flow.")
    for year, cf in enumerate(flows, start=1):
        if cf < 0:
            raise ValidationError("cash_flows", f"Cash flow for year {year} must be non-negative.")

    rate = rate_pct / 100
    total = float(discount(flows, rate).sum())

    terminal = (x.get("terminal_value") or 0.0) if x["include_terminal"] else 0.0
    discounted_terminal = 0.0
    if terminal > 0:
        discounted_terminal = terminal / (1 + rate) ** len(flows)
        total += discounted_terminal
    return {
        "dcf_value": total,
        "terminal_value": terminal,
        "discounted_terminal": discounted_terminal,
    }


# ─── Bonds ───────────────────────────────────────────────────────────

@register(
    "government_bond",
    title="Government Bond Calculator",
    category=INVESTMENTS,
    summary="Price a bond from its coupon, maturity and market yield.",
    fields=(
        Field("face_value", "Face Value ($)", signed=False),
        Field("coupon_rate", "Coupon Rate (%)", kind=Kind.PERCENT, signed=False),
        Field("years", "Years to Maturity", kind=Kind.NUMBER, signed=False),
        Field("market_yield", "Market Yield (%)", kind=Kind.PERCENT, signed=False),
        Field("payments_per_year", "Payments per Year", kind=Kind.INTEGER, policy=Policy.DEFAULT,
              default=2, signed=False),
    ),
    outputs=(
        Output("price", "Bond Price", highlight=True),
        Output("coupon_payment", "Coupon Payment"),
        Output("annual_income", "Annual Coupon Income"),
        Output("current_yield", "Current Yield", kind="percent"),
    ),
    formula="Price = Σ C/(1 + y/m)^t + F/(1 + y/m)^(n·m)",
    tips=(
        "Bond prices fall when market yields rise.",
        "Current yield ignores the gain or loss at maturity.",
    ),
)
def government_bond(x: Dict[str, Any]) -> Dict[str, Any]:
    face, coupon, years = x["face_value"], x["coupon_rate"], x["years"]
    ytm, m = x["market_yield"], x["payments_per_year"]
    if face <= 0:
        raise ValidationError("face_value", "Face value must be greater than zero.")
    if years <= 0:
        raise ValidationError("years", "Years to maturity must be greater than zero.")
    if m <= 0:
        raise ValidationError("payments_per_year", "Payments per year must be at least one.")

    periodic_yield = ytm / 100 / m
    payment = face * coupon / 100 / m
    periods = int(years * m)
    coupons = discount(np.full(periods, payment), periodic_yield).sum()
    price = float(coupons + face / (1 + periodic_yield) ** (years * m))

    annual_income = face * coupon / 100
    if abs(price - face) < 0.01:
        verdict = {"label": "Trading at par", "flag": "healthy"}
    elif price > face:
        verdict = {"label": "Trading at a premium", "flag": "warning"}
    else:
        verdict = {"label": "Trading at a discount", "flag": "warning"}
    return {
        "price": price,
        "coupon_payment": payment,
        "annual_income": annual_income,
        "current_yield": annual_income / price * 100,
        **verdict,
    }


@register(
    "duration_convexity",
    title="Bond Duration & Convexity Calculator",
    category=INVESTMENTS,
    summary="Interest-rate sensitivity of a bond: Macaulay and modified duration, convexity.",
    fields=(
        Field("face_value", "Face Value ($)"),
        Field("coupon_rate", "Coupon Rate (%)", kind=Kind.PERCENT),
        Field("market_yield", "Yield to Maturity (%)", kind=Kind.PERCENT),
        Field("years", "Years to Maturity", kind=Kind.NUMBER),
        Field("frequency", "Coupon Frequency", kind=Kind.CHOICE, default="semiannually",
              choices=(("annually", "Annual"), ("semiannually", "Semi-annual"))),
    ),
    outputs=(
        Output("price", "Bond Price"),
        Output("macaulay_duration", "Macaulay Duration (years)", kind="number", decimals=3, highlight=True),
        Output("modified_duration", "Modified Duration", kind="number", decimals=3),
        Output("convexity", "Convexity", kind="number", decimals=3),
    ),
    formula="D = Σ t·PV(CFₜ) / price; D* = D / (1 + y/m); C = Σ t²·PV(CFₜ) / (price·(1 + y/m)²)",
    tips=(
        "Higher duration means more price risk when rates move.",
        "Convexity improves the duration estimate for large rate changes.",
    ),
)
def duration_convexity(x: Dict[str, Any]) -> Dict[str, Any]:
    face, coupon, ytm, years = x["face_value"], x["coupon_rate"], x["market_yield"], x["years"]
    if face <= 0:
        raise ValidationError("face_value", "Face value must be greater than zero.")
    if coupon < 0:
        raise ValidationError("coupon_rate", "Coupon rate cannot be negative.")
    if ytm < 0:
        raise ValidationError("market_yield", "Yield cannot be negative.")
    if years <= 0:
        raise ValidationError("years", "Years to maturity must be greater than zero.")

    m = cfg.BOND_FREQUENCY[x["frequency"]]
    y = ytm / 100 / m
    n = years * m
    payment = face * coupon / 100 / m

    t = np.arange(1, math.floor(n) + 1, dtype=float)
    pv_coupons = payment / (1 + y) ** t
    pv_principal = face / (1 + y) ** n

    # Time is measured in years; the principal arrives at maturity.
    times = t / m
    price = float(pv_coupons.sum() + pv_principal)
    weighted = float((times * pv_coupons).sum() + years * pv_principal)
    weighted_sq = float((times ** 2 * pv_coupons).sum() + years ** 2 * pv_principal)

    macaulay = weighted / price
    return {
        "price": price,
        "macaulay_duration": macaulay,
        "modified_duration": macaulay / (1 + y),
        "convexity": (weighted_sq / price) / (1 + y) ** 2,
    }


# ─── Options ─────────────────────────────────────────────────────────

def norm_cdf(x: float) -> float:
    """Standard normal CDF, Abramowitz-Stegun polynomial approximation."""
    t = 1 / (1 + 0.2316419 * abs(x))
    d = 0.3989423 * math.exp(-x * x / 2)
    prob = d * t * (0.3193815 + t * (-0.3565638 + t * (1.781478 + t * (-1.821256 + t * 1.330274))))
    return 1 - prob if x > 0 else prob


def norm_pdf(x: float) -> float:
    return math.exp(-0.5 * x * x) / math.sqrt(2 * math.pi)


@register(
    "option_pricing",
    title="Options Pricing Calculator (Black-Scholes)",
    category=INVESTMENTS,
    summary="European call and put prices with delta, gamma and vega.",
    fields=(
        Field("stock_price", "Stock Price ($)"),
        Field("strike_price", "Strike Price ($)"),
        Field("time_to_expiry", "Time to Expiration (years)", kind=Kind.NUMBER),
        Field("risk_free_rate", "Risk-Free Rate (%)", kind=Kind.PERCENT),
        Field("volatility", "Volatility (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("call_price", "Call Price", highlight=True),
        Output("put_price", "Put Price", highlight=True),
        Output("delta_call", "Call Delta", kind="number", decimals=4),
        Output("delta_put", "Put Delta", kind="number", decimals=4),
        Output("gamma", "Gamma", kind="number", decimals=4),
        Output("vega", "Vega (per 1% vol)", kind="number", decimals=4),
    ),
    formula="C = S·N(d1) − K·e^(−rT)·N(d2), P = K·e^(−rT)·N(−d2) − S·N(−d1)",
    tips=(
        "Black-Scholes assumes constant volatility and no early exercise.",
        "Implied volatility is usually more useful than historical.",
    ),
)
def option_pricing(x: Dict[str, Any]) -> Dict[str, Any]:
    s, k, t = x["stock_price"], x["strike_price"], x["time_to_expiry"]
    r, sigma = x["risk_free_rate"] / 100, x["volatility"] / 100
    if s <= 0:
        raise ValidationError("stock_price", "Stock price must be greater than zero.")
    if k <= 0:
        raise ValidationError("strike_price", "Strike price must be greater than zero.")
    if t <= 0:
        raise ValidationError("time_to_expiry", "Time to expiration must be greater than zero.")
    if sigma <= 0:
        raise ValidationError("volatility", "Volatility must be greater than zero.")

    root_t = math.sqrt(t)
    d1 = (math.log(s / k) + (r + sigma ** 2 / 2) * t) / (sigma * root_t)
    d2 = d1 - sigma * root_t
    discounted_strike = k * math.exp(-r * t)
    return {
        "call_price": s * norm_cdf(d1) - discounted_strike * norm_cdf(d2),
        "put_price": discounted_strike * norm_cdf(-d2) - s * norm_cdf(-d1),
        "delta_call": norm_cdf(d1),
        "delta_put": norm_cdf(d1) - 1,
        "gamma": norm_pdf(d1) / (s * sigma * root_t),
        "vega": s * norm_pdf(d1) * root_t / 100,
        "d1": d1,
        "d2": d2,
    }


# ─── Purchasing power parity ─────────────────────────────────────────

@register(
    "purchasing_power_parity",
    title="Purchasing Power Parity Calculator",
    category=INVESTMENTS,
    summary="What a basket priced in one country should cost in another at parity.",
    fields=(
        Field("price_a", "Price in Country A ($)", placeholder="e.g. 5.00"),
        Field("exchange_rate", "Exchange Rate (B per A)", kind=Kind.NUMBER, placeholder="e.g. 0.92"),
    ),
    outputs=(
        Output("price_b", "Equivalent Price in Country B", kind="number", highlight=True),
        Output("exchange_rate", "Exchange Rate Used", kind="number", decimals=4),
    ),
    formula="Price B = price A × exchange rate (units of B per unit of A)",
    tips=(
        "Parity holds only roughly for goods that trade freely.",
        "Compare against the market rate to judge over- or under-valuation.",
    ),
)
def purchasing_power_parity(x: Dict[str, Any]) -> Dict[str, Any]:
    price, rate = x["price_a"], x["exchange_rate"]
    if price <= 0:
        raise ValidationError("price_a", "Price must be greater than zero.")
    if rate <= 0:
        raise ValidationError("exchange_rate", "Exchange rate must be greater than zero.")
    return {"price_b": price * rate, "exchange_rate": rate}
