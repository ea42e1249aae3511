"""
Legal fee estimates and the employee/contractor classification check.
"""

from __future__ import annotations

from typing import Any, Dict

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

LEGAL = "Legal & Employment"


def _non_negative(x: Dict[str, Any], *names: str) -> None:
    for name in names:
        if x[name] < 0:
            raise ValidationError(name, "Please enter a non-negative value.")


# ─── Retainer ────────────────────────────────────────────────────────

@register(
    "legal_retainer",
    title="Legal Retainer Calculator",
    category=LEGAL,
    summary="Estimate the retainer an attorney will ask for under hourly, flat or upfront billing.",
    fields=(
        Field("mode", "Billing Arrangement", kind=Kind.CHOICE, default="hourly",
              choices=(("hourly", "Hourly"), ("flat", "Flat Fee"), ("upfront", "Upfront Payment"))),
        Field("attorney_rate", "Attorney Hourly Rate ($)", policy=Policy.ZERO, placeholder="e.g. 250"),
        Field("estimated_hours", "Estimated Hours", kind=Kind.NUMBER, policy=Policy.ZERO,
              placeholder="e.g. 20"),
        Field("flat_fee", "Flat Fee ($)", policy=Policy.ZERO),
        Field("upfront_payment", "Upfront Payment ($)", policy=Policy.ZERO, placeholder="e.g. 5,000"),
    ),
    outputs=(
        Output("estimated_total", "Estimated Total Fees"),
        Output("required_retainer", "Required Retainer", highlight=True),
        Output("coverage", "Retainer Coverage", kind="percent", decimals=1),
    ),
    formula="Hourly: retainer = rate × hours; flat: retainer = fee; upfront: retainer = upfront payment",
    tips=(
        "Unused retainer funds are normally refundable.",
        "Ask how often the retainer must be replenished.",
    ),
)
def legal_retainer(x: Dict[str, Any]) -> Dict[str, Any]:
    _non_negative(x, "attorney_rate", "estimated_hours", "flat_fee", "upfront_payment")
    hourly_total = x["attorney_rate"] * x["estimated_hours"]

    mode = x["mode"]
    if mode == "flat":
        if x["flat_fee"] <= 0:
            raise ValidationError("flat_fee", "Flat fee must be greater than $0.")
        total = retainer = x["flat_fee"]
    elif mode == "upfront":
        if x["upfront_payment"] <= 0:
            raise ValidationError("upfront_payment", "Upfront payment must be greater than $0.")
        total, retainer = hourly_total, x["upfront_payment"]
    else:
        total = retainer = hourly_total

    return {
        "estimated_total": total,
        "required_retainer": retainer,
        "coverage": retainer / total * 100 if total > 0 else 0.0,
    }


# ─── Litigation ──────────────────────────────────────────────────────

@register(
    "litigation_cost",
    title="Litigation Cost Calculator",
    category=LEGAL,
    summary="Add up attorney time and the out-of-pocket costs of a lawsuit.",
    fields=(
        Field("attorney_hours", "Attorney Hours", kind=Kind.NUMBER, policy=Policy.ZERO),
        Field("hourly_rate", "Hourly Rate ($)", policy=Policy.ZERO),
        Field("court_fees", "Court Fees ($)", policy=Policy.ZERO),
        Field("expert_fees", "Expert Witness Fees ($)", policy=Policy.ZERO),
        Field("discovery_costs", "Discovery Costs ($)", policy=Policy.ZERO),
        Field("admin_costs", "Administrative Costs ($)", policy=Policy.ZERO),
    ),
    outputs=(
        Output("attorney_cost", "Attorney Fees"),
        Output("other_costs", "Other Costs"),
        Output("total_cost", "Total Litigation Cost", highlight=True),
    ),
    formula="Total = hours × rate + court + expert + discovery + administrative costs",
    tips=(
        "Discovery is often the largest cost in a contested case.",
        "Weigh the total against the amount in dispute before filing.",
    ),
)
def litigation_cost(x: Dict[str, Any]) -> Dict[str, Any]:
    costs = ("court_fees", "expert_fees", "discovery_costs", "admin_costs")
    _non_negative(x, "attorney_hours", "hourly_rate", *costs)

    attorney = x["attorney_hours"] * x["hourly_rate"]
    other = sum(x[name] for name in costs)
    return {
        "attorney_cost": attorney,
        "other_costs": other,
        "total_cost": attorney + other,
    }


# ─── Worker classification ───────────────────────────────────────────

def _factor_fields() -> tuple:
    return tuple(
        Field(f"f{i}", f"{text} ({category})", kind=Kind.CHOICE, policy=Policy.OPTIONAL,
              choices=(("yes", "Yes"), ("no", "No")))
        for i, (text, category, _) in enumerate(cfg.WORKER_FACTORS, start=1)
    )


@register(
    "worker_classification",
    title="Worker Classification Calculator",
    category=LEGAL,
    summary="Weigh the behavioral, financial and relationship factors for employee status.",
    fields=_factor_fields(),
    outputs=(
        Output("employee_pct", "Employee Indicators", kind="percent", decimals=1, highlight=True),
        Output("contractor_pct", "Contractor Indicators", kind="percent", decimals=1),
        Output("answered", "Questions Answered", kind="integer"),
        Output("recommendation", "Recommendation", kind="text"),
    ),
    formula="Employee % = answers pointing to employee status ÷ questions answered × 100",
    tips=(
        "No single factor decides the classification.",
        "Misclassification can bring back taxes and penalties.",
    ),
)
def worker_classification(x: Dict[str, Any]) -> Dict[str, Any]:
    employee = contractor = 0
    for i, (_, _, yes_means_employee) in enumerate(cfg.WORKER_FACTORS, start=1):
        answer = x.get(f"f{i}")
        if answer is None:
            continue
        if (answer == "yes") == yes_means_employee:
            employee += 1
        else:
            contractor += 1

    answered = employee + contractor
    if answered == 0:
        raise ValidationError("f1", "Please answer at least one question.")

    employee_pct = employee / answered * 100
    contractor_pct = 100 - employee_pct
    if employee_pct >= cfg.WORKER_STRONG_PCT:
        recommendation = "Strong indication of Employee status."
    elif contractor_pct >= cfg.WORKER_STRONG_PCT:
        recommendation = "Strong indication of Independent Contractor status."
    else:
        recommendation = "Mixed factors. Consult a tax professional or attorney."
    return {
        "employee_pct": employee_pct,
        "contractor_pct": contractor_pct,
        "answered": answered,
        "recommendation": recommendation,
        "label": recommendation,
    }
