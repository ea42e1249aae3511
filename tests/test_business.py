from __future__ import annotations

import pytest


# ─── Break-even ──────────────────────────────────────────────────────

def test_break_even_rounds_units_up(run):
    view = run("break_even", fixed_costs="10000", price="12.99", variable_cost="5.50")
    assert view.values["units"] == 1336
    assert view.display["units"] == "1,336"
    assert view.values["revenue"] == pytest.approx(1336 * 12.99)


def test_break_even_exact_division_is_not_bumped(run):
    assert run("break_even", fixed_costs="1000", price="15", variable_cost="5").values["units"] == 100


def test_break_even_needs_a_positive_margin(reject):
    errors = reject("break_even", fixed_costs="10000", price="5", variable_cost="5")
    assert set(errors) == {"price"}


def test_break_even_rejects_negative_costs(reject):
    errors = reject("break_even", fixed_costs="-1", price="10", variable_cost="5")
    assert set(errors) == {"fixed_costs"}


# ─── Liquidity ───────────────────────────────────────────────────────

def test_current_ratio_healthy(run):
    view = run("current_ratio", current_assets="150000", current_liabilities="100000")
    assert view.values["ratio"] == 1.5
    assert view.display["ratio"] == "1.50"
    assert view.label == "Healthy"
    assert view.flag == "healthy"


def test_current_ratio_needs_attention(run):
    view = run("current_ratio", current_assets="300000", current_liabilities="100000")
    assert view.label == "Needs Attention"


def test_current_ratio_just_below_the_healthy_band(run):
    view = run("current_ratio", current_assets="119999", current_liabilities="100000")
    assert view.values["ratio"] == pytest.approx(1.19999)
    assert view.display["ratio"] == "1.20"
    assert view.label == "Needs Attention"


def test_current_ratio_zero_liabilities(reject):
    errors = reject("current_ratio", current_assets="150000", current_liabilities="0")
    assert set(errors) == {"current_liabilities"}


@pytest.mark.parametrize("assets, liabilities", [("50000", "80000"), ("80000", "50000"), ("1", "1")])
def test_working_capital_sign_matches_ratio(run, assets, liabilities):
    v = run("working_capital", current_assets=assets, current_liabilities=liabilities).values
    assert (v["working_capital"] > 0) == (v["ratio"] > 1)
    assert (v["working_capital"] == 0) == (v["ratio"] == 1)


def test_working_capital_without_liabilities_has_no_ratio(run):
    view = run("working_capital", current_assets="50000", current_liabilities="0")
    assert view.values["working_capital"] == 50_000
    assert view.values["ratio"] is None
    assert view.display["ratio"] == "—"


# ─── Leverage ────────────────────────────────────────────────────────

@pytest.mark.parametrize(
    "liabilities, label, flag",
    [("40000", "Low Risk", "healthy"), ("100000", "Moderate Risk", "warning"),
     ("200000", "High Risk", "danger")],
)
def test_debt_to_equity_bands(run, liabilities, label, flag):
    view = run("debt_to_equity", total_liabilities=liabilities, shareholder_equity="100000")
    assert view.label == label
    assert view.flag == flag


def test_debt_to_equity_just_below_a_band_edge(run):
    view = run("debt_to_equity", total_liabilities="49999", shareholder_equity="100000")
    assert view.values["ratio"] < 0.5
    assert view.label == "Low Risk"


def test_leverage_ratios(run):
    v = run("leverage", total_assets="500000", total_equity="200000", ebit="60000",
            interest_expense="20000").values
    assert v["total_debt"] == 300_000
    assert v["debt_to_equity"] == pytest.approx(1.5)
    assert v["debt_to_assets"] == pytest.approx(60.0)
    assert v["equity_multiplier"] == pytest.approx(2.5)
    assert v["interest_coverage"] == pytest.approx(3.0)


def test_leverage_requires_interest_expense(reject):
    errors = reject("leverage", total_assets="500000", total_equity="200000", ebit="60000",
                    interest_expense="0")
    assert set(errors) == {"interest_expense"}


# ─── Profitability ───────────────────────────────────────────────────

def test_ebitda(run):
    view = run("ebitda", revenue="1.2M", cogs="500k", operating_expenses="250,000")
    assert view.values["ebitda"] == 450_000
    assert view.values["margin"] == pytest.approx(37.5)
    assert view.label == "Profitable"


def test_ebitda_without_revenue_has_zero_margin(run):
    view = run("ebitda", revenue="", cogs="100", operating_expenses="")
    assert view.values["margin"] == 0.0
    assert view.flag == "danger"


def test_gross_profit_walk(run):
    v = run("gross_profit", revenue="100000", cogs="40000", operating_expenses="20000",
            tax_rate="25").values
    assert v["gross_profit"] == 60_000
    assert v["operating_profit"] == 40_000
    assert v["net_profit"] == pytest.approx(30_000)
    assert v["net_margin"] == pytest.approx(30.0)


def test_markup_and_margin_are_related(run):
    v = run("markup", cost="50", markup="100").values
    assert v["selling_price"] == 100
    assert v["margin"] == pytest.approx(50.0)


def test_profit_margin_without_cost_has_no_markup(run):
    v = run("profit_margin", revenue="1000", cost="0").values
    assert v["margin"] == pytest.approx(100.0)
    assert v["markup"] is None


def test_roe(run):
    assert run("roe", net_income="20000", shareholder_equity="100000").label == "Strong"
    assert run("roe", net_income="10000", shareholder_equity="100000").label == "Below Benchmark"


@pytest.mark.parametrize(
    "marketing, label",
    [("5000", "High Efficiency"), ("10000", "Moderate Cost"), ("40000", "High Cost")],
)
def test_cac_bands(run, marketing, label):
    view = run("cac", marketing_costs=marketing, sales_costs="0", new_customers="100")
    assert view.label == label


def test_cac_needs_customers(reject):
    errors = reject("cac", marketing_costs="1000", sales_costs="0", new_customers="0")
    assert set(errors) == {"new_customers"}


def test_free_cash_flow_skips_tax_on_losses(run):
    v = run("free_cash_flow", revenue="1000", cogs="800", operating_expenses="300",
            depreciation="50", tax_rate="30").values
    assert v["ebt"] == pytest.approx(-150.0)
    assert v["taxes"] == 0.0
    assert v["operating_cash_flow"] == pytest.approx(-100.0)


# ─── Efficiency ──────────────────────────────────────────────────────

def test_ar_turnover(run):
    v = run("ar_turnover", net_credit_sales="365000", beginning_ar="30000", ending_ar="43000").values
    assert v["average_ar"] == 36_500
    assert v["turnover"] == pytest.approx(10.0)
    assert v["collection_days"] == pytest.approx(36.5)


def test_inventory_turnover(run):
    view = run("inventory_turnover", beginning_inventory="20000", purchases="100000",
               ending_inventory="30000", revenue="150000")
    assert view.values["cogs"] == 90_000
    assert view.values["turnover"] == pytest.approx(3.6)
    assert view.label == "Needs Attention"


# ─── Cost of capital and value ───────────────────────────────────────

def test_eva(run):
    view = run("eva", nopat="120000", invested_capital="1000000", wacc="10")
    assert view.values["eva"] == pytest.approx(20_000)
    assert view.label == "Creating Value"


def test_eva_rejects_out_of_range_wacc(reject):
    errors = reject("eva", nopat="120000", invested_capital="1000000", wacc="150")
    assert set(errors) == {"wacc"}


def test_wacc(run):
    v = run("wacc", equity_value="600000", debt_value="400000", cost_of_equity="10",
            cost_of_debt="5", tax_rate="20").values
    assert v["after_tax_cost_of_debt"] == pytest.approx(4.0)
    assert v["wacc"] == pytest.approx(0.6 * 10 + 0.4 * 4)


def test_business_valuation_defaults(run):
    view = run("business_valuation", annual_revenue="1000000")
    assert view.values["valuation"] == pytest.approx(2_500_000)
    assert view.display["method_label"] == "Revenue Multiple (2.5x)"


def test_business_valuation_profit_multiple(run):
    view = run("business_valuation", method="profit", annual_profit="200000", multiplier="8")
    assert view.values["valuation"] == 1_600_000
    assert view.display["method_label"] == "Profit Multiple (8x)"


# ─── Cash flow and real estate ───────────────────────────────────────

def test_operating_cash_flow(run):
    v = run("cashflow", revenue="500000", cogs="200000", operating_expenses="100000",
            depreciation="10000", interest="5000", tax_rate="25").values
    assert v["gross_profit"] == 300_000
    assert v["ebit"] == 190_000
    assert v["taxes"] == pytest.approx(46_250)
    assert v["net_income"] == pytest.approx(138_750)
    assert v["operating_cash_flow"] == pytest.approx(148_750)


def test_operating_loss_pays_no_tax(run):
    view = run("cashflow", revenue="1000", cogs="2000", operating_expenses="0", tax_rate="25")
    assert view.values["taxes"] == 0.0
    assert view.values["operating_cash_flow"] == -1000
    assert view.label == "Loss"


def test_cash_flow_tax_rate_cap(reject):
    errors = reject("cashflow", revenue="1000", cogs="0", operating_expenses="0", tax_rate="60")
    assert set(errors) == {"tax_rate"}


def test_occupancy_cost(run):
    v = run("occupancy_cost", rent="2000", utilities="300", maintenance="100",
            insurance="1200", property_tax="2400").values
    assert v["monthly_cost"] == pytest.approx(2700)
    assert v["annual_cost"] == pytest.approx(32_400)


def test_occupancy_cost_rejects_negative_rent(reject):
    assert set(reject("occupancy_cost", rent="-5")) == {"rent"}


def test_flipping_profit(run):
    view = run("flipping_profit", purchase_price="150000", repair_costs="30000", holding_months="6",
               monthly_holding_cost="1500", selling_price="220000", selling_fees="6")
    v = view.values
    assert v["total_holding_cost"] == 9000
    assert v["total_cost"] == 189_000
    assert v["selling_fees_amount"] == pytest.approx(13_200)
    assert v["profit"] == pytest.approx(17_800)
    assert v["roi"] == pytest.approx(17_800 / 189_000 * 100)
    assert v["profit_per_month"] == pytest.approx(17_800 / 6)
    assert view.flag == "healthy"


def test_flipping_needs_a_holding_period(reject):
    assert set(reject("flipping_profit", purchase_price="150000", selling_price="200000")) == {"holding_months"}


@pytest.mark.parametrize(
    "npv, roi, market, score, label",
    [("990000", "25", "6", 5.0, "Marginal"),
     ("-50000", "0", "1", 1.0, "Not Feasible"),
     ("1000000000", "60", "10", 10.0, "Highly Feasible")],
)
def test_development_feasibility(run, npv, roi, market, score, label):
    view = run("development_feasibility", npv=npv, roi=roi, market_score=market)
    assert view.values["score"] == pytest.approx(score, abs=0.01)
    assert view.label == label


def test_development_feasibility_market_range(reject):
    errors = reject("development_feasibility", npv="100000", roi="10", market_score="11")
    assert set(errors) == {"market_score"}
