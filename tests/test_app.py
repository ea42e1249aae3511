from __future__ import annotations

from werkzeug.datastructures import MultiDict

from app import parse_form
from registry import get_spec

MORTGAGE = {"home_value": "$300K", "down_payment": "60,000", "loan_term": "30", "interest_rate": "3.5"}


def test_index_lists_every_category(client):
    resp = client.get("/")
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    for title in ("Lending", "Business", "Tax &amp; Payroll", "Mortgage Calculator"):
        assert title in body


def test_calculator_page(client):
    resp = client.get("/mortgage")
    assert resp.status_code == 200
    assert "Home Value ($)" in resp.get_data(as_text=True)


def test_unknown_calculator_page(client):
    assert client.get("/no_such_calculator").status_code == 404


def test_submit_form(client):
    resp = client.post("/mortgage", data=MORTGAGE)
    assert resp.status_code == 200
    body = resp.get_data(as_text=True)
    assert "$1,077.71" in body
    assert "data:image/png;base64," in body


def test_submit_loan_shorter_than_a_month(client):
    resp = client.post("/loan", data={"loan_amount": "1000", "interest_rate": "5", "loan_term": "0.01"})
    assert resp.status_code == 200
    assert "data:image/png;base64," in resp.get_data(as_text=True)


def test_submit_bad_form(client):
    resp = client.post("/mortgage", data={**MORTGAGE, "home_value": "a lot"})
    assert resp.status_code == 422
    assert "Please enter a valid number." in resp.get_data(as_text=True)


def test_badge_is_rendered(client):
    resp = client.post("/current_ratio", data={"current_assets": "150000", "current_liabilities": "100000"})
    assert 'class="badge healthy"' in resp.get_data(as_text=True)


def test_parse_form_repeated_series_inputs():
    form = MultiDict([("balances", "1000"), ("balances", "3000"), ("extra_payment", "50")])
    raw = parse_form(get_spec("debt_snowball"), form)
    assert raw["balances"] == ["1000", "3000"]
    assert raw["extra_payment"] == "50"
    assert raw["interest_rates"] == []


# ─── JSON API ────────────────────────────────────────────────────────

def test_api_success(client):
    resp = client.post("/api/mortgage", json=MORTGAGE)
    assert resp.status_code == 200
    data = resp.get_json()
    assert data["ok"] is True
    assert data["display"]["monthly_payment"] == "$1,077.71"
    assert data["values"]["loan_amount"] == 240_000


def test_api_validation_failure(client):
    resp = client.post("/api/break_even", json={"fixed_costs": "10000", "price": "5", "variable_cost": "5"})
    assert resp.status_code == 422
    data = resp.get_json()
    assert data["ok"] is False
    assert "price" in data["errors"]


def test_api_unknown_calculator(client):
    resp = client.post("/api/nope", json={})
    assert resp.status_code == 404
    assert "error" in resp.get_json()


def test_api_requires_json_object(client):
    resp = client.post("/api/mortgage", json=[1, 2, 3])
    assert resp.status_code == 400


# ─── PDF download ────────────────────────────────────────────────────

def test_pdf_download(client):
    resp = client.post("/mortgage/report.pdf", data=MORTGAGE)
    assert resp.status_code == 200
    assert resp.mimetype == "application/pdf"
    assert resp.data.startswith(b"%PDF")
    assert "mortgage_report.pdf" in resp.headers["Content-Disposition"]


def test_pdf_download_with_bad_input(client):
    resp = client.post("/mortgage/report.pdf", data={**MORTGAGE, "loan_term": ""})
    assert resp.status_code == 422
