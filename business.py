"""
Business ratio, profitability and valuation calculators.
"""

from __future__ import annotations

import math
from typing import Any, Dict, Tuple

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

BUSINESS = "Business"


def _healthy_range(value: float, bounds: Tuple[float, float]) -> Dict[str, str]:
    lo, hi = bounds
    if lo <= value <= hi:
        return {"label": "Healthy", "flag": "healthy"}
    return {"label": "Needs Attention", "flag": "warning"}


def _banded(value: float, bands) -> Dict[str, str]:
    for upper, label, flag in bands:
        if value < upper:
            return {"label": label, "flag": flag}
    _, label, flag = bands[-1]
    return {"label": label, "flag": flag}


def _profitable(amount: float) -> Dict[str, str]:
    if amount >= 0:
        return {"label": "Profitable", "flag": "healthy"}
    return {"label": "Loss", "flag": "danger"}


# ─── Break-even ──────────────────────────────────────────────────────

@register(
    "break_even",
    title="Break-Even Calculator",
    category=BUSINESS,
    summary="Find how many units you must sell to cover your fixed costs.",
    fields=(
        Field("fixed_costs", "Fixed Costs ($)"),
        Field("variable_cost", "Variable Cost per Unit ($)"),
        Field("price", "Selling Price per Unit ($)"),
    ),
    outputs=(
        Output("units", "Break-Even Units", kind="count", highlight=True),
        Output("revenue", "Break-Even Revenue"),
        Output("contribution_margin", "Contribution Margin per Unit"),
        Output("contribution_margin_pct", "Contribution Margin Ratio", kind="percent"),
    ),
    formula="Units = ⌈fixed costs ÷ (price − variable cost)⌉",
    tips=(
        "Raising price or cutting variable cost lowers the break-even point.",
        "Revisit the analysis whenever costs change.",
    ),
)
def break_even(x: Dict[str, Any]) -> Dict[str, Any]:
    fixed, variable, price = x["fixed_costs"], x["variable_cost"], x["price"]
    if fixed < 0:
        raise ValidationError("fixed_costs", "Fixed costs cannot be negative.")
    if variable < 0:
        raise ValidationError("variable_cost", "Variable cost cannot be negative.")
    if price <= 0:
        raise ValidationError("price", "Selling price must be greater than zero.")
    if price <= variable:
        raise ValidationError("price", "Selling price must be greater than the variable cost per unit.")

    margin = price - variable
    units = math.ceil(fixed / margin)
    return {
        "units": units,
        "revenue": units * price,
        "contribution_margin": margin,
        "contribution_margin_pct": margin / price * 100,
    }


# ─── Liquidity ───────────────────────────────────────────────────────

@register(
    "current_ratio",
    title="Current Ratio Calculator",
    category=BUSINESS,
    summary="Check whether current assets cover short-term obligations.",
    fields=(
        Field("current_assets", "Current Assets ($)", signed=False),
        Field("current_liabilities", "Current Liabilities ($)", signed=False),
    ),
    outputs=(
        Output("ratio", "Current Ratio", kind="number", highlight=True),
        Output("working_capital", "Working Capital"),
    ),
    formula="Current ratio = current assets ÷ current liabilities",
    tips=(
        "A ratio between 1.2 and 2.0 is generally considered healthy.",
        "Too high a ratio can mean idle cash.",
    ),
)
def current_ratio(x: Dict[str, Any]) -> Dict[str, Any]:
    assets, liabilities = x["current_assets"], x["current_liabilities"]
    if liabilities <= 0:
        raise ValidationError("current_liabilities", "Current liabilities must be greater than zero.")

    ratio = assets / liabilities
    return {
        "ratio": ratio,
        "working_capital": assets - liabilities,
        **_healthy_range(ratio, cfg.HEALTHY_CURRENT_RATIO),
    }


@register(
    "working_capital",
    title="Working Capital Calculator",
    category=BUSINESS,
    summary="Measure the cushion between current assets and current liabilities.",
    fields=(
        Field("current_assets", "Current Assets ($)"),
        Field("current_liabilities", "Current Liabilities ($)"),
    ),
    outputs=(
        Output("working_capital", "Working Capital", highlight=True),
        Output("ratio", "Current Ratio", kind="number"),
    ),
    formula="Working capital = current assets − current liabilities",
    tips=(
        "Negative working capital can signal liquidity trouble.",
        "Speed up receivables to free cash.",
    ),
)
def working_capital(x: Dict[str, Any]) -> Dict[str, Any]:
    assets, liabilities = x["current_assets"], x["current_liabilities"]
    if assets < 0:
        raise ValidationError("current_assets", "Current assets cannot be negative.")
    if liabilities < 0:
        raise ValidationError("current_liabilities", "Current liabilities cannot be negative.")

    values: Dict[str, Any] = {"working_capital": assets - liabilities, "ratio": None}
    if liabilities > 0:
        values["ratio"] = assets / liabilities
        values.update(_healthy_range(values["ratio"], cfg.HEALTHY_CURRENT_RATIO))
    return values


# ─── Leverage ────────────────────────────────────────────────────────

@register(
    "debt_to_equity",
    title="Debt-to-Equity Ratio Calculator",
    category=BUSINESS,
    summary="Compare what a company owes with what its owners have put in.",
    fields=(
        Field("total_liabilities", "Total Liabilities ($)"),
        Field("shareholder_equity", "Shareholder Equity ($)"),
    ),
    outputs=(
        Output("ratio", "Debt-to-Equity Ratio", kind="number", highlight=True),
    ),
    formula="D/E = total liabilities ÷ shareholder equity",
    tips=(
        "Capital-heavy industries tolerate higher ratios.",
        "Compare against peers, not an absolute number.",
    ),
)
def debt_to_equity(x: Dict[str, Any]) -> Dict[str, Any]:
    liabilities, equity = x["total_liabilities"], x["shareholder_equity"]
    if liabilities < 0:
        raise ValidationError("total_liabilities", "Total liabilities cannot be negative.")
    if equity <= 0:
        raise ValidationError("shareholder_equity", "Shareholder equity must be greater than zero.")

    ratio = liabilities / equity
    return {"ratio": ratio, **_banded(ratio, cfg.DEBT_TO_EQUITY_BANDS)}


@register(
    "leverage",
    title="Leverage Ratio Calculator",
    category=BUSINESS,
    summary="Debt-to-equity, debt-to-assets, equity multiplier and interest coverage in one place.",
    fields=(
        Field("total_assets", "Total Assets ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("total_equity", "Total Equity ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("ebit", "EBIT ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("interest_expense", "Interest Expense ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
    ),
    outputs=(
        Output("total_debt", "Total Debt"),
        Output("debt_to_equity", "Debt-to-Equity", kind="number", highlight=True),
        Output("debt_to_assets", "Debt-to-Assets", kind="percent"),
        Output("equity_multiplier", "Equity Multiplier", kind="number"),
        Output("interest_coverage", "Interest Coverage", kind="number"),
    ),
    formula="Debt = assets − equity; coverage = EBIT ÷ interest expense",
    tips=(
        "Interest coverage below 1.5 is a warning sign.",
        "A high equity multiplier amplifies both gains and losses.",
    ),
)
def leverage(x: Dict[str, Any]) -> Dict[str, Any]:
    assets, equity = x["total_assets"], x["total_equity"]
    interest = x["interest_expense"]
    if assets == 0:
        raise ValidationError("total_assets", "Please enter a valid value for Total Assets.")
    if equity == 0:
        raise ValidationError("total_equity", "Please enter a valid value for Total Equity.")
    if interest == 0:
        raise ValidationError("interest_expense", "Please enter a valid value for Interest Expense.")

    debt = assets - equity
    return {
        "total_debt": debt,
        "debt_to_equity": debt / equity,
        "debt_to_assets": debt / assets * 100,
        "equity_multiplier": assets / equity,
        "interest_coverage": x["ebit"] / interest,
    }


# ─── Profitability ───────────────────────────────────────────────────

@register(
    "ebitda",
    title="EBITDA Calculator",
    category=BUSINESS,
    summary="Earnings before interest, taxes, depreciation and amortization.",
    fields=(
        Field("revenue", "Revenue ($)", policy=Policy.ZERO),
        Field("cogs", "Cost of Goods Sold ($)", policy=Policy.ZERO),
        Field("operating_expenses", "Operating Expenses ($)", policy=Policy.ZERO),
    ),
    outputs=(
        Output("gross_profit", "Gross Profit"),
        Output("ebitda", "EBITDA", highlight=True),
        Output("margin", "EBITDA Margin", kind="percent"),
    ),
    formula="EBITDA = revenue − COGS − operating expenses",
    tips=(
        "EBITDA ignores capital spending, so pair it with cash flow.",
        "Compare margins within the same industry.",
    ),
)
def ebitda(x: Dict[str, Any]) -> Dict[str, Any]:
    revenue = x["revenue"]
    gross = revenue - x["cogs"]
    value = gross - x["operating_expenses"]
    margin = value / revenue * 100 if revenue > 0 else 0.0
    return {"gross_profit": gross, "ebitda": value, "margin": margin, **_profitable(value)}


@register(
    "gross_profit",
    title="Gross Profit Calculator",
    category=BUSINESS,
    summary="Walk from revenue down to net profit.",
    fields=(
        Field("revenue", "Revenue ($)"),
        Field("cogs", "Cost of Goods Sold ($)"),
        Field("operating_expenses", "Operating Expenses ($)"),
        Field("tax_rate", "Tax Rate (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("gross_profit", "Gross Profit", highlight=True),
        Output("gross_margin", "Gross Margin", kind="percent"),
        Output("operating_profit", "Operating Profit"),
        Output("taxes", "Taxes"),
        Output("net_profit", "Net Profit"),
        Output("net_margin", "Net Margin", kind="percent"),
    ),
    formula="Gross profit = revenue − COGS; net = (gross − opex) × (1 − tax)",
    tips=(
        "Gross margin shows pricing power.",
        "Watch operating expenses as you scale.",
    ),
)
def gross_profit(x: Dict[str, Any]) -> Dict[str, Any]:
    revenue, cogs, opex, tax = x["revenue"], x["cogs"], x["operating_expenses"], x["tax_rate"]
    for name in ("cogs", "operating_expenses"):
        if x[name] < 0:
            raise ValidationError(name, "Value cannot be negative.")
    if revenue <= 0:
        raise ValidationError("revenue", "Revenue must be greater than zero.")
    if not 0 <= tax <= 100:
        raise ValidationError("tax_rate", "Tax rate must be between 0 and 100.")

    gross = revenue - cogs
    operating = gross - opex
    taxes = operating * tax / 100
    net = operating - taxes
    return {
        "gross_profit": gross,
        "gross_margin": gross / revenue * 100,
        "operating_profit": operating,
        "taxes": taxes,
        "net_profit": net,
        "net_margin": net / revenue * 100,
        **_profitable(net),
    }


@register(
    "markup",
    title="Markup Calculator",
    category=BUSINESS,
    summary="Set a selling price from cost and a markup percentage.",
    fields=(
        Field("cost", "Cost ($)"),
        Field("markup", "Markup (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("selling_price", "Selling Price", highlight=True),
        Output("markup_amount", "Markup Amount"),
        Output("gross_profit", "Gross Profit"),
        Output("margin", "Profit Margin", kind="percent"),
    ),
    formula="Price = cost × (1 + markup); margin = profit ÷ price",
    tips=(
        "Markup and margin are not the same number.",
        "A 100% markup is a 50% margin.",
    ),
)
def markup(x: Dict[str, Any]) -> Dict[str, Any]:
    cost, pct = x["cost"], x["markup"]
    if cost <= 0:
        raise ValidationError("cost", "Cost must be greater than zero.")
    if pct < 0:
        raise ValidationError("markup", "Markup cannot be negative.")

    amount = cost * pct / 100
    price = cost + amount
    return {
        "selling_price": price,
        "markup_amount": amount,
        "gross_profit": amount,
        "margin": amount / price * 100,
    }


@register(
    "profit_margin",
    title="Profit Margin Calculator",
    category=BUSINESS,
    summary="Margin and markup from revenue and cost.",
    fields=(
        Field("revenue", "Revenue ($)"),
        Field("cost", "Cost ($)"),
    ),
    outputs=(
        Output("gross_profit", "Gross Profit"),
        Output("margin", "Profit Margin", kind="percent", highlight=True),
        Output("markup", "Markup", kind="percent"),
    ),
    formula="Margin = (revenue − cost) ÷ revenue",
    tips=("Track margin per product, not only in total.",),
)
def profit_margin(x: Dict[str, Any]) -> Dict[str, Any]:
    revenue, cost = x["revenue"], x["cost"]
    if revenue <= 0:
        raise ValidationError("revenue", "Revenue must be greater than zero.")
    if cost < 0:
        raise ValidationError("cost", "Cost cannot be negative.")

    gross = revenue - cost
    return {
        "gross_profit": gross,
        "margin": gross / revenue * 100,
        "markup": gross / cost * 100 if cost > 0 else None,
        **_profitable(gross),
    }


@register(
    "roe",
    title="Return on Equity Calculator",
    category=BUSINESS,
    summary="How much profit a company generates from shareholders' money.",
    fields=(
        Field("net_income", "Net Income ($)", signed=False),
        Field("shareholder_equity", "Shareholder Equity ($)", signed=False),
    ),
    outputs=(
        Output("roe", "Return on Equity", kind="percent", highlight=True),
    ),
    formula="ROE = net income ÷ shareholder equity × 100",
    tips=(
        "ROE above 15% is generally considered strong.",
        "High leverage can inflate ROE.",
    ),
)
def roe(x: Dict[str, Any]) -> Dict[str, Any]:
    equity = x["shareholder_equity"]
    if equity <= 0:
        raise ValidationError("shareholder_equity", "Shareholder equity must be greater than zero.")

    value = x["net_income"] / equity * 100
    if value >= cfg.STRONG_ROE_PCT:
        verdict = {"label": "Strong", "flag": "healthy"}
    else:
        verdict = {"label": "Below Benchmark", "flag": "warning"}
    return {"roe": value, **verdict}


@register(
    "cac",
    title="Customer Acquisition Cost Calculator",
    category=BUSINESS,
    summary="What you spend on sales and marketing to win each new customer.",
    fields=(
        Field("marketing_costs", "Marketing Costs ($)"),
        Field("sales_costs", "Sales Costs ($)"),
        Field("new_customers", "New Customers", kind=Kind.INTEGER),
    ),
    outputs=(
        Output("total_costs", "Total Acquisition Spend"),
        Output("cac", "Cost per Customer", highlight=True),
    ),
    formula="CAC = (marketing + sales costs) ÷ new customers",
    tips=(
        "Compare CAC with customer lifetime value.",
        "Track CAC per channel.",
    ),
)
def cac(x: Dict[str, Any]) -> Dict[str, Any]:
    marketing, sales, customers = x["marketing_costs"], x["sales_costs"], x["new_customers"]
    if marketing < 0:
        raise ValidationError("marketing_costs", "Marketing costs cannot be negative.")
    if sales < 0:
        raise ValidationError("sales_costs", "Sales costs cannot be negative.")
    if customers <= 0:
        raise ValidationError("new_customers", "Number of new customers must be greater than zero.")

    total = marketing + sales
    value = total / customers
    return {"total_costs": total, "cac": value, **_banded(value, cfg.CAC_BANDS)}


@register(
    "free_cash_flow",
    title="Free Cash Flow Calculator",
    category=BUSINESS,
    summary="From revenue through EBIT and taxes to operating cash flow.",
    fields=(
        Field("revenue", "Revenue ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("cogs", "Cost of Goods Sold ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("operating_expenses", "Operating Expenses ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("depreciation", "Depreciation ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("interest", "Interest Expense ($)", policy=Policy.ZERO, signed=False, clamp=(0, None)),
        Field("tax_rate", "Tax Rate (%)", kind=Kind.PERCENT, policy=Policy.ZERO,
              signed=False, clamp=(0, 100)),
    ),
    outputs=(
        Output("gross_profit", "Gross Profit"),
        Output("ebit", "EBIT"),
        Output("ebt", "Earnings Before Tax"),
        Output("taxes", "Taxes"),
        Output("net_income", "Net Income"),
        Output("operating_cash_flow", "Operating Cash Flow", highlight=True),
    ),
    formula="OCF = net income + depreciation; taxes apply only to positive EBT",
    tips=("Depreciation is added back because it is not a cash expense.",),
)
def free_cash_flow(x: Dict[str, Any]) -> Dict[str, Any]:
    revenue = x["revenue"]
    if revenue == 0:
        raise ValidationError("revenue", "Please enter a valid value for Revenue.")

    gross = revenue - x["cogs"]
    ebit = gross - x["operating_expenses"] - x["depreciation"]
    ebt = ebit - x["interest"]
    taxes = ebt * x["tax_rate"] / 100 if ebt > 0 else 0.0
    net = ebt - taxes
    return {
        "gross_profit": gross,
        "ebit": ebit,
        "ebt": ebt,
        "taxes": taxes,
        "net_income": net,
        "operating_cash_flow": net + x["depreciation"],
    }


# ─── Efficiency ──────────────────────────────────────────────────────

@register(
    "ar_turnover",
    title="Accounts Receivable Turnover Calculator",
    category=BUSINESS,
    summary="How quickly customers pay what they owe.",
    fields=(
        Field("net_credit_sales", "Net Credit Sales ($)"),
        Field("beginning_ar", "Beginning Receivables ($)"),
        Field("ending_ar", "Ending Receivables ($)"),
    ),
    outputs=(
        Output("average_ar", "Average Receivables"),
        Output("turnover", "Turnover Ratio", kind="number", highlight=True),
        Output("collection_days", "Average Collection Period (days)", kind="number", decimals=1),
    ),
    formula="Turnover = net credit sales ÷ average receivables; days = 365 ÷ turnover",
    tips=("Tighten credit terms if the collection period keeps growing.",),
)
def ar_turnover(x: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("net_credit_sales", "beginning_ar", "ending_ar"):
        if x[name] < 0:
            raise ValidationError(name, "Value cannot be negative.")
    average = (x["beginning_ar"] + x["ending_ar"]) / 2
    if average == 0:
        raise ValidationError("ending_ar", "Average receivables must be greater than zero.")

    turnover = x["net_credit_sales"] / average
    return {
        "average_ar": average,
        "turnover": turnover,
        "collection_days": 365 / turnover if turnover > 0 else None,
    }


@register(
    "inventory_turnover",
    title="Inventory Turnover Calculator",
    category=BUSINESS,
    summary="How many times inventory sells through in a year.",
    fields=(
        Field("beginning_inventory", "Beginning Inventory ($)", policy=Policy.ZERO),
        Field("purchases", "Purchases ($)", policy=Policy.ZERO),
        Field("ending_inventory", "Ending Inventory ($)", policy=Policy.ZERO),
        Field("revenue", "Revenue ($)", policy=Policy.ZERO),
    ),
    outputs=(
        Output("cogs", "Cost of Goods Sold"),
        Output("average_inventory", "Average Inventory"),
        Output("turnover", "Turnover Ratio", kind="number", highlight=True),
        Output("days_in_inventory", "Days in Inventory", kind="number", decimals=1),
        Output("gross_profit", "Gross Profit"),
        Output("gross_margin", "Gross Margin", kind="percent"),
    ),
    formula="COGS = beginning + purchases − ending; turnover = COGS ÷ average inventory",
    tips=(
        "A turnover between 4 and 12 is typical for healthy retailers.",
        "Slow-moving stock ties up cash.",
    ),
)
def inventory_turnover(x: Dict[str, Any]) -> Dict[str, Any]:
    beginning, ending = x["beginning_inventory"], x["ending_inventory"]
    cogs = beginning + x["purchases"] - ending
    average = (beginning + ending) / 2
    turnover = cogs / average if average > 0 else 0.0
    revenue = x["revenue"]
    gross = revenue - cogs
    return {
        "cogs": cogs,
        "average_inventory": average,
        "turnover": turnover,
        "days_in_inventory": 365 / turnover if turnover > 0 else 0.0,
        "gross_profit": gross,
        "gross_margin": gross / revenue * 100 if revenue > 0 else None,
        **_healthy_range(turnover, cfg.HEALTHY_INVENTORY_TURNOVER),
    }


# ─── Cost of capital and value ───────────────────────────────────────

@register(
    "eva",
    title="Economic Value Added Calculator",
    category=BUSINESS,
    summary="Profit left over after charging for the capital the business uses.",
    fields=(
        Field("nopat", "NOPAT ($)"),
        Field("invested_capital", "Invested Capital ($)"),
        Field("wacc", "WACC (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("capital_charge", "Capital Charge"),
        Output("eva", "Economic Value Added", highlight=True),
    ),
    formula="EVA = NOPAT − invested capital × WACC",
    tips=("Positive EVA means returns beat the cost of capital.",),
)
def eva(x: Dict[str, Any]) -> Dict[str, Any]:
    capital, wacc_pct = x["invested_capital"], x["wacc"]
    if capital <= 0:
        raise ValidationError("invested_capital", "Invested capital must be greater than zero.")
    if not 0 <= wacc_pct <= 100:
        raise ValidationError("wacc", "WACC must be between 0 and 100.")

    charge = capital * wacc_pct / 100
    value = x["nopat"] - charge
    if value >= 0:
        verdict = {"label": "Creating Value", "flag": "healthy"}
    else:
        verdict = {"label": "Destroying Value", "flag": "danger"}
    return {"capital_charge": charge, "eva": value, **verdict}


@register(
    "wacc",
    title="WACC Calculator",
    category=BUSINESS,
    summary="Blend the cost of equity and after-tax cost of debt by their weights.",
    fields=(
        Field("equity_value", "Market Value of Equity ($)"),
        Field("debt_value", "Market Value of Debt ($)"),
        Field("cost_of_equity", "Cost of Equity (%)", kind=Kind.PERCENT),
        Field("cost_of_debt", "Cost of Debt (%)", kind=Kind.PERCENT),
        Field("tax_rate", "Corporate Tax Rate (%)", kind=Kind.PERCENT),
    ),
    outputs=(
        Output("wacc", "WACC", kind="percent", highlight=True),
        Output("equity_weight", "Equity Weight", kind="percent"),
        Output("debt_weight", "Debt Weight", kind="percent"),
        Output("after_tax_cost_of_debt", "After-Tax Cost of Debt", kind="percent"),
    ),
    formula="WACC = E/V × Re + D/V × Rd × (1 − Tc)",
    tips=("Debt is cheaper than equity because interest is tax-deductible.",),
)
def wacc(x: Dict[str, Any]) -> Dict[str, Any]:
    equity, debt = x["equity_value"], x["debt_value"]
    if equity <= 0:
        raise ValidationError("equity_value", "Equity value must be greater than zero.")
    if debt <= 0:
        raise ValidationError("debt_value", "Debt value must be greater than zero.")

    total = equity + debt
    we, wd = equity / total, debt / total
    after_tax_debt = x["cost_of_debt"] * (1 - x["tax_rate"] / 100)
    return {
        "wacc": we * x["cost_of_equity"] + wd * after_tax_debt,
        "equity_weight": we * 100,
        "debt_weight": wd * 100,
        "after_tax_cost_of_debt": after_tax_debt,
    }


@register(
    "business_valuation",
    title="Business Valuation Calculator",
    category=BUSINESS,
    summary="Quick valuation from a revenue or profit multiple.",
    fields=(
        Field("method", "Valuation Method", kind=Kind.CHOICE, default="revenue",
              choices=(("revenue", "Revenue Multiple"), ("profit", "Profit Multiple"))),
        Field("annual_revenue", "Annual Revenue ($)", policy=Policy.ZERO),
        Field("annual_profit", "Annual Profit ($)", policy=Policy.ZERO),
        Field("multiplier", "Industry Multiplier", kind=Kind.NUMBER, policy=Policy.FALLBACK,
              default=cfg.VALUATION_DEFAULT_MULTIPLIER),
    ),
    outputs=(
        Output("valuation", "Estimated Valuation", highlight=True),
        Output("method_label", "Method", kind="text"),
    ),
    formula="Valuation = base × industry multiplier",
    tips=(
        "Multiples vary widely by industry and growth rate.",
        "Use several methods and compare.",
    ),
)
def business_valuation(x: Dict[str, Any]) -> Dict[str, Any]:
    multiplier = x["multiplier"]
    if multiplier <= 0:
        multiplier = cfg.VALUATION_DEFAULT_MULTIPLIER

    if x["method"] == "profit":
        base, name = x["annual_profit"], "Profit Multiple"
    else:
        base, name = x["annual_revenue"], "Revenue Multiple"
    return {
        "valuation": base * multiplier,
        "method_label": f"{name} ({multiplier:g}x)",
        "multiplier": multiplier,
    }


# ─── Cash flow ───────────────────────────────────────────────────────

@register(
    "cashflow",
    title="Operating Cash Flow Calculator",
    category=BUSINESS,
    summary="Walk from revenue to net income and operating cash flow.",
    fields=(
        Field("revenue", "Revenue ($)"),
        Field("cogs", "Cost of Goods Sold ($)"),
        Field("operating_expenses", "Operating Expenses ($)"),
        Field("depreciation", "Depreciation ($)", policy=Policy.ZERO, placeholder="e.g. 10,000"),
        Field("interest", "Interest Expense ($)", policy=Policy.ZERO, placeholder="e.g. 5,000"),
        Field("tax_rate", "Tax Rate (%)", kind=Kind.PERCENT, placeholder="e.g. 25"),
    ),
    outputs=(
        Output("gross_profit", "Gross Profit"),
        Output("ebit", "EBIT"),
        Output("taxes", "Taxes"),
        Output("net_income", "Net Income"),
        Output("operating_cash_flow", "Operating Cash Flow", highlight=True),
    ),
    formula="EBIT = revenue − COGS − opex − depreciation; OCF = (EBIT − interest)(1 − t) + depreciation",
    tips=(
        "Depreciation lowers taxable income but is not a cash outflow.",
        "Profitable companies can still run short of cash.",
    ),
)
def cashflow(x: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("revenue", "cogs", "operating_expenses", "depreciation", "interest", "tax_rate"):
        if x[name] < 0:
            raise ValidationError(name, "Values cannot be negative.")
    tax = x["tax_rate"]
    if tax > cfg.CASHFLOW_MAX_TAX_RATE:
        raise ValidationError("tax_rate", f"Tax rate cannot exceed {cfg.CASHFLOW_MAX_TAX_RATE:g}%.")

    gross = x["revenue"] - x["cogs"]
    ebit = gross - x["operating_expenses"] - x["depreciation"]
    ebt = ebit - x["interest"]
    taxes = max(0.0, ebt) * tax / 100
    net = ebt - taxes
    ocf = net + x["depreciation"]
    return {
        "gross_profit": gross,
        "ebit": ebit,
        "taxes": taxes,
        "net_income": net,
        "operating_cash_flow": ocf,
        **_profitable(ocf),
    }


# ─── Real estate ─────────────────────────────────────────────────────

@register(
    "occupancy_cost",
    title="Occupancy Cost Calculator",
    category=BUSINESS,
    summary="Total monthly and annual cost of occupying a space.",
    fields=(
        Field("rent", "Monthly Rent ($)", policy=Policy.ZERO),
        Field("utilities", "Monthly Utilities ($)", policy=Policy.ZERO),
        Field("maintenance", "Maintenance ($/month)", policy=Policy.ZERO),
        Field("insurance", "Insurance ($/year)", policy=Policy.ZERO),
        Field("property_tax", "Property Tax ($/year)", policy=Policy.ZERO),
    ),
    outputs=(
        Output("monthly_cost", "Monthly Occupancy Cost", highlight=True),
        Output("annual_cost", "Annual Occupancy Cost"),
    ),
    formula="Monthly = rent + utilities + maintenance + (insurance + property tax) ÷ 12",
    tips=(
        "Keep occupancy costs in proportion to the revenue a location brings in.",
        "Ask whether common-area charges are included in the rent.",
    ),
)
def occupancy_cost(x: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("rent", "utilities", "maintenance", "insurance", "property_tax"):
        if x[name] < 0:
            raise ValidationError(name, "Values cannot be negative.")

    monthly = (x["rent"] + x["utilities"] + x["maintenance"]
               + x["insurance"] / 12 + x["property_tax"] / 12)
    return {"monthly_cost": monthly, "annual_cost": monthly * 12}


@register(
    "flipping_profit",
    title="House Flipping Profit Calculator",
    category=BUSINESS,
    summary="Profit and return on a buy, renovate and sell project.",
    fields=(
        Field("purchase_price", "Purchase Price ($)", policy=Policy.ZERO, placeholder="e.g. 150,000"),
        Field("repair_costs", "Repair Costs ($)", policy=Policy.ZERO, placeholder="e.g. 30,000"),
        Field("holding_months", "Holding Period (months)", kind=Kind.NUMBER, policy=Policy.ZERO,
              placeholder="e.g. 6"),
        Field("monthly_holding_cost", "Monthly Holding Cost ($)", policy=Policy.ZERO,
              placeholder="e.g. 1,500"),
        Field("selling_price", "Selling Price ($)", policy=Policy.ZERO, placeholder="e.g. 220,000"),
        Field("selling_fees", "Selling Fees (%)", kind=Kind.PERCENT, policy=Policy.ZERO,
              placeholder="e.g. 6"),
    ),
    outputs=(
        Output("total_holding_cost", "Holding Costs"),
        Output("total_cost", "Total Investment"),
        Output("selling_fees_amount", "Selling Fees"),
        Output("net_proceeds", "Net Proceeds"),
        Output("profit", "Profit", highlight=True),
        Output("roi", "ROI", kind="percent"),
        Output("profit_per_month", "Profit per Month"),
    ),
    formula="Profit = sale × (1 − fees) − (purchase + repairs + months × holding cost)",
    tips=(
        "Every extra month of holding eats into the margin.",
        "Budget a contingency on top of the repair estimate.",
    ),
)
def flipping_profit(x: Dict[str, Any]) -> Dict[str, Any]:
    for name in ("purchase_price", "repair_costs", "monthly_holding_cost", "selling_price", "selling_fees"):
        if x[name] < 0:
            raise ValidationError(name, "Values cannot be negative.")
    months = x["holding_months"]
    if months < 1:
        raise ValidationError("holding_months", "Holding period must be at least 1 month.")

    holding = months * x["monthly_holding_cost"]
    total = x["purchase_price"] + x["repair_costs"] + holding
    fees = x["selling_price"] * x["selling_fees"] / 100
    proceeds = x["selling_price"] - fees
    profit = proceeds - total
    return {
        "total_holding_cost": holding,
        "total_cost": total,
        "selling_fees_amount": fees,
        "net_proceeds": proceeds,
        "profit": profit,
        "roi": profit / total * 100 if total > 0 else 0.0,
        "profit_per_month": profit / months,
        **_profitable(profit),
    }


def _feasibility_npv_score(npv: float) -> float:
    scaled = npv / cfg.FEASIBILITY_NPV_SCALE + 1
    if scaled <= 0:
        return 1.0
    return min(10.0, max(1.0, math.log10(scaled) * 2))


@register(
    "development_feasibility",
    title="Development Feasibility Calculator",
    category=BUSINESS,
    summary="Score a development project from its NPV, ROI and market demand.",
    fields=(
        Field("npv", "Project NPV ($)"),
        Field("roi", "Expected ROI (%)", kind=Kind.PERCENT),
        Field("market_score", "Market Demand (1-10)", kind=Kind.NUMBER),
    ),
    outputs=(
        Output("score", "Feasibility Score", kind="number", highlight=True),
        Output("npv_score", "NPV Score", kind="number"),
        Output("roi_score", "ROI Score", kind="number"),
        Output("market_score", "Market Score", kind="number"),
        Output("recommendation", "Recommendation", kind="text"),
    ),
    formula="Score = mean(clamp(2·log10(NPV/10,000 + 1)), clamp(ROI/5), market), each on 1-10",
    tips=(
        "A strong NPV cannot rescue a project with no demand.",
        "Stress-test the ROI against cost overruns.",
    ),
)
def development_feasibility(x: Dict[str, Any]) -> Dict[str, Any]:
    market = x["market_score"]
    if not 1 <= market <= 10:
        raise ValidationError("market_score", "Market demand must be between 1 and 10.")

    npv_score = _feasibility_npv_score(x["npv"])
    roi_score = min(10.0, max(1.0, x["roi"] / cfg.FEASIBILITY_ROI_PER_POINT))
    score = round((npv_score + roi_score + market) / 3, 2)
    for floor, label, flag in cfg.FEASIBILITY_BANDS:
        if score >= floor:
            break
    return {
        "score": score,
        "npv_score": npv_score,
        "roi_score": roi_score,
        "market_score": market,
        "recommendation": label,
        "label": label,
        "flag": flag,
    }
