from __future__ import annotations

import base64

import report
from registry import get_spec

PNG_MAGIC = b"\x89PNG"


def test_no_chart_for_plain_calculators(run):
    view = run("ebitda", revenue="1000", cogs="400", operating_expenses="100")
    assert report.render_chart(get_spec("ebitda"), view) is None


def test_balance_chart(run):
    view = run("loan", loan_amount="25000", interest_rate="5.5", loan_term="5")
    png = base64.b64decode(report.render_chart(get_spec("loan"), view))
    assert png.startswith(PNG_MAGIC)


def test_growth_chart(run):
    view = run("cd", deposit="10000", interest_rate="4", years="2.5")
    assert report.render_chart(get_spec("cd"), view)


def test_distribution_chart_survives_zero_volatility(run):
    view = run("monte_carlo", initial_investment="1000", expected_return="5", volatility="0",
               years="3", trials="100")
    png = base64.b64decode(report.render_chart(get_spec("monte_carlo"), view))
    assert png.startswith(PNG_MAGIC)


def test_pdf_summary(run):
    view = run("tax_bracket", income="85000", filing_status="single")
    pdf = report.generate_pdf(get_spec("tax_bracket"), view)
    assert pdf.startswith(b"%PDF")


def test_pdf_summary_with_chart(run):
    view = run("mortgage", home_value="$300K", down_payment="60,000", loan_term="30",
               interest_rate="3.5")
    assert report.generate_pdf(get_spec("mortgage"), view).startswith(b"%PDF")


def test_pdf_summary_with_text_inputs(run):
    view = run("debt_snowball", debt_names="Visa; Car", balances="1000; 3000",
               interest_rates="19; 7", min_payments="40; 120")
    assert report.generate_pdf(get_spec("debt_snowball"), view).startswith(b"%PDF")


def test_balance_chart_for_partial_month_terms(run):
    view = run("loan", loan_amount="1000", interest_rate="5", loan_term="0.01")
    assert view.values["months"] == 1
    assert report.render_chart(get_spec("loan"), view)

    view = run("loan", loan_amount="1000", interest_rate="5", loan_term="1.01")
    assert view.values["months"] == 13


def test_contributions_chart(run):
    view = run("ppf", years="3")
    png = base64.b64decode(report.render_chart(get_spec("ppf"), view))
    assert png.startswith(PNG_MAGIC)
