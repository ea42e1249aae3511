from __future__ import annotations

import pytest


# ─── Retainer ────────────────────────────────────────────────────────

def test_hourly_retainer_covers_the_estimate(run):
    v = run("legal_retainer", attorney_rate="250", estimated_hours="20").values
    assert v["estimated_total"] == 5000
    assert v["required_retainer"] == 5000
    assert v["coverage"] == pytest.approx(100.0)


def test_upfront_retainer_coverage(run):
    view = run("legal_retainer", mode="upfront", attorney_rate="250", estimated_hours="20",
               upfront_payment="2000")
    assert view.values["required_retainer"] == 2000
    assert view.values["coverage"] == pytest.approx(40.0)
    assert view.display["coverage"] == "40.0%"


def test_flat_fee_must_be_positive(reject):
    assert set(reject("legal_retainer", mode="flat", flat_fee="")) == {"flat_fee"}


def test_blank_hourly_retainer_has_no_coverage(run):
    assert run("legal_retainer").values["coverage"] == 0.0


# ─── Litigation ──────────────────────────────────────────────────────

def test_litigation_total(run):
    v = run("litigation_cost", attorney_hours="10", hourly_rate="300", court_fees="500",
            expert_fees="2000", discovery_costs="1500", admin_costs="200").values
    assert v["attorney_cost"] == 3000
    assert v["other_costs"] == 4200
    assert v["total_cost"] == 7200


def test_litigation_rejects_negative_costs(reject):
    assert set(reject("litigation_cost", court_fees="-100")) == {"court_fees"}


# ─── Worker classification ───────────────────────────────────────────

def test_control_points_to_employee(run):
    view = run("worker_classification", f1="yes", f2="yes", f3="yes")
    assert view.values["employee_pct"] == 100.0
    assert view.values["answered"] == 3
    assert view.label == "Strong indication of Employee status."


def test_independent_business_points_to_contractor(run):
    view = run("worker_classification", f4="yes", f5="yes", f11="yes", f1="no")
    assert view.values["contractor_pct"] == 100.0
    assert view.label == "Strong indication of Independent Contractor status."


def test_mixed_answers(run):
    view = run("worker_classification", f1="yes", f4="yes")
    assert view.values["employee_pct"] == 50.0
    assert view.label.startswith("Mixed factors")


def test_classification_needs_an_answer(reject):
    assert set(reject("worker_classification")) == {"f1"}


def test_classification_rejects_unknown_answer(reject):
    assert set(reject("worker_classification", f1="maybe")) == {"f1"}
