"""
Static reference data for the finance calculator suite.

All monetary values in USD. Tax tables are the 2024 U.S. federal brackets.
Every constant here is compiled in; nothing is read from the environment.
"""

# ── Compounding frequencies ──────────────────────────────────────────
COMPOUNDING_PER_YEAR = {
    "annually": 1,
    "semiannually": 2,
    "quarterly": 4,
    "monthly": 12,
    "weekly": 52,
    "daily": 365,
}

PPF_DEPOSITS_PER_YEAR = {
    "yearly": 1,
    "quarterly": 4,
    "monthly": 12,
}

STAKING_COMPOUNDING = {
    "daily": 365,
    "weekly": 52,
    "monthly": 12,
    "yearly": 1,
}

BOND_FREQUENCY = {
    "annually": 1,
    "semiannually": 2,
}

# ── Income Tax (U.S. federal, 2024) ──────────────────────────────────
# Bands: (upper limit, rate). Last band has no upper limit (use inf).
# Table A: standard brackets used by the income tax calculator.
INCOME_TAX_BANDS = {
    "single": [
        (11_600, 0.10),
        (47_150, 0.12),
        (100_525, 0.22),
        (191_950, 0.24),
        (243_725, 0.32),
        (609_350, 0.35),
        (float("inf"), 0.37),
    ],
    "married": [
        (23_200, 0.10),
        (94_300, 0.12),
        (201_050, 0.22),
        (383_900, 0.24),
        (487_450, 0.32),
        (731_200, 0.35),
        (float("inf"), 0.37),
    ],
    "head": [
        (16_550, 0.10),
        (63_100, 0.12),
        (100_500, 0.22),
        (191_950, 0.24),
        (243_700, 0.32),
        (609_350, 0.35),
        (float("inf"), 0.37),
    ],
}

# Table B: bracket explorer (head of household second band ends at 59,950).
BRACKET_TABLE_BANDS = {
    "single": INCOME_TAX_BANDS["single"],
    "married": INCOME_TAX_BANDS["married"],
    "hoh": [
        (16_550, 0.10),
        (59_950, 0.12),
        (100_500, 0.22),
        (191_950, 0.24),
        (243_700, 0.32),
        (609_350, 0.35),
        (float("inf"), 0.37),
    ],
}

FILING_STATUS_LABELS = {
    "single": "Single",
    "married": "Married Filing Jointly",
    "head": "Head of Household",
    "hoh": "Head of Household",
}

# ── Social Security (simplified estimate) ────────────────────────────
SS_WAGE_BASE = 142_800             # income capped here before AIME
SS_DEFAULT_AGE = 40
SS_DEFAULT_RETIREMENT_AGE = 67
SS_DEFAULT_INCOME = 50_000

# Flat AIME multiplier by full retirement age (no bend points).
SS_BENEFIT_MULTIPLIER = {
    67: 0.42,
    66: 0.44,
}
SS_BENEFIT_MULTIPLIER_OTHER = 0.40

SS_EARLY_RATE_FIRST_36 = 0.0056    # per month early, first 36 months
SS_EARLY_RATE_AFTER_36 = 0.0042    # per month early, beyond 36 months
SS_LATE_RATE_FIRST_36 = 0.0067     # per month late, first 36 months
SS_LATE_RATE_AFTER_36 = 0.0042     # per month late, beyond 36 months
SS_ADJUSTMENT_TIER_MONTHS = 36
SS_LIFETIME_YEARS_FROM_62 = 21.6

# ── Liquidity / leverage benchmarks ──────────────────────────────────
HEALTHY_CURRENT_RATIO = (1.2, 2.0)
DEBT_TO_EQUITY_BANDS = [
    (0.5, "Low Risk", "healthy"),
    (1.5, "Moderate Risk", "warning"),
    (float("inf"), "High Risk", "danger"),
]
STRONG_ROE_PCT = 15.0
CAC_BANDS = [
    (100.0, "High Efficiency", "healthy"),
    (300.0, "Moderate Cost", "warning"),
    (float("inf"), "High Cost", "danger"),
]
HEALTHY_INVENTORY_TURNOVER = (4.0, 12.0)

# ── Form defaults (pages that fall back when a field is blank) ───────
CAR_LOAN_DEFAULT_PRICE = 30_000
CAR_LOAN_DEFAULT_TERM_MONTHS = 60
CAR_LOAN_DEFAULT_RATE = 5.5
HELOC_DEFAULT_DRAW_YEARS = 10
HELOC_DEFAULT_REPAYMENT_YEARS = 15
LEASE_DEFAULT_TERM_MONTHS = 36
LEASE_DEFAULT_LOAN_TERM_MONTHS = 60
CRYPTO_DEFAULT_YEARS = 5
CRYPTO_DEFAULT_RETURN = 100.0
CRYPTO_DEFAULT_VOLATILITY = 70.0
CRYPTO_MAX_VOLATILITY = 300.0
PROPERTY_TAX_DEFAULT_VALUE = 300_000
PROPERTY_TAX_DEFAULT_RATE = 1.2
VALUATION_DEFAULT_MULTIPLIER = 2.5
PPF_DEFAULT_YEARLY = 6000
PPF_DEFAULT_RATE = 7.1
PPF_DEFAULT_YEARS = 15
EDUCATION_DEFAULT_YEARS_UNTIL = 5
EDUCATION_DEFAULT_INFLATION = 5.0
EDUCATION_DEFAULT_YEARS = 4
EDUCATION_DEFAULT_RETURN = 7.0

# ── Limits ───────────────────────────────────────────────────────────
NPV_MAX_YEARS = 10
DCF_MAX_YEARS = 10
DEBT_SNOWBALL_MAX_MONTHS = 600
DEBT_PAID_TOLERANCE = 0.01
PAYROLL_REGULAR_HOURS = 40
MONTE_CARLO_MIN_TRIALS = 100
MONTE_CARLO_MAX_TRIALS = 100_000
MONTE_CARLO_DEFAULT_SEED = 42
MAX_PROJECTION_YEARS = 100
PPF_MAX_YEARS = 50

# ── Game theory (prisoner's dilemma defaults) ────────────────────────
# Cells: TL = (C, C), TR = (C, D), BL = (D, C), BR = (D, D).
DEFAULT_PAYOFFS = {
    "tl": (3, 3),
    "tr": (0, 5),
    "bl": (5, 0),
    "br": (1, 1),
}

# ── Financial literacy quiz ──────────────────────────────────────────
# (question, options, index of the correct option)
QUIZ_QUESTIONS = [
    (
        "If you save $100 with a 5% annual interest rate, how much will you "
        "have after two years with compound interest?",
        ("$105", "$110", "$110.25", "I don't know"),
        2,
    ),
    (
        "If inflation is 3% and your savings account earns 2%, what happens "
        "to your purchasing power?",
        ("Increases", "Decreases", "Stays the same", "I don't know"),
        1,
    ),
    (
        "What is diversification in investing?",
        (
            "Putting all money in one stock",
            "Spreading investments across different assets",
            "Only investing in real estate",
            "I don't know",
        ),
        1,
    ),
    (
        "What does an emergency fund typically cover?",
        ("Vacation costs", "3-6 months of living expenses", "Luxury purchases", "I don't know"),
        1,
    ),
    (
        "Which is generally riskier over the long term?",
        ("Stocks", "Savings accounts", "Government bonds", "I don't know"),
        0,
    ),
    (
        "What does APR stand for?",
        ("Annual Payment Rate", "Accrued Profit Return", "Annual Percentage Rate", "I don't know"),
        2,
    ),
    (
        "What is a budget?",
        ("A limit on spending", "A plan for income and expenses", "A credit card limit", "I don't know"),
        1,
    ),
    (
        "What is compound interest?",
        (
            "Interest earned only on principal",
            "Interest earned on principal and previous interest",
            "Interest that decreases over time",
            "I don't know",
        ),
        1,
    ),
    (
        "What is a credit score used for?",
        (
            "Measuring investment returns",
            "Determining loan eligibility and interest rates",
            "Tracking bank fees",
            "I don't know",
        ),
        1,
    ),
    (
        "What is the main benefit of contributing to a 401(k) or IRA?",
        ("Immediate cashback", "Tax advantages and retirement growth", "Free insurance", "I don't know"),
        1,
    ),
]

# Letter grade thresholds on the percentage score.
QUIZ_GRADES = [(90, "A"), (80, "B"), (70, "C"), (60, "D")]
QUIZ_FAIL_GRADE = "F"

# ── Development feasibility ──────────────────────────────────────────
# Each input is scored 1-10; NPV is scaled as 2·log10(NPV / scale + 1).
FEASIBILITY_NPV_SCALE = 10_000
FEASIBILITY_ROI_PER_POINT = 5.0
FEASIBILITY_BANDS = [
    (8.0, "Highly Feasible", "healthy"),
    (6.0, "Feasible", "healthy"),
    (4.0, "Marginal", "warning"),
    (float("-inf"), "Not Feasible", "danger"),
]

CASHFLOW_MAX_TAX_RATE = 50.0

# ── Worker classification (IRS common-law factors) ───────────────────
# (question, category, True when a "yes" points to employee status)
WORKER_FACTORS = [
    ("Do you control how, when, and where the work is performed?", "Behavioral", True),
    ("Do you provide training to the worker?", "Behavioral", True),
    ("Are the worker's services integral to your business operations?", "Relationship", True),
    ("Does the worker make a significant investment in tools or equipment?", "Financial", False),
    ("Can the worker realize a profit or loss based on performance?", "Financial", False),
    ("Is the worker available to provide services to the general public?", "Relationship", False),
    ("Do you set the worker's schedule or hours?", "Behavioral", True),
    ("Do you provide the tools, materials, or workspace?", "Financial", False),
    ("Is the relationship indefinite rather than project-based?", "Relationship", True),
    ("Do you pay the worker regularly (hourly/salary) instead of per project?", "Financial", True),
    ("Can the worker hire assistants or subcontractors?", "Financial", False),
    ("Is the worker subject to disciplinary actions?", "Behavioral", True),
]
WORKER_STRONG_PCT = 70.0
