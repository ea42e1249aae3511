from __future__ import annotations

import pytest

from games import letter_grade

ALL_CORRECT = {f"q{i}": str(a) for i, a in enumerate([2, 1, 1, 1, 0, 2, 1, 1, 1, 1], start=1)}


# ─── Nash equilibrium ────────────────────────────────────────────────

def test_default_prisoners_dilemma_has_no_pure_equilibrium(run):
    view = run("nash_equilibrium")
    assert view.values["count"] == 0
    assert view.label == "No pure-strategy Nash equilibrium"
    assert view.display["equilibria"] == "—"


def test_coordination_game(run):
    view = run("nash_equilibrium", tl_a="5", tl_b="5", tr_a="0", tr_b="0",
               bl_a="0", bl_b="0", br_a="1", br_b="1")
    assert view.values["count"] == 1
    assert view.values["equilibria"] == "Cooperate vs Cooperate (A: 5, B: 5)"
    assert view.label is None


# ─── Financial literacy ──────────────────────────────────────────────

def test_quiz_all_correct(run):
    view = run("financial_literacy", **ALL_CORRECT)
    assert view.values["score"] == 100
    assert view.values["grade"] == "A"
    assert view.flag == "healthy"


def test_quiz_unanswered_scores_zero(run):
    view = run("financial_literacy")
    assert view.values["correct"] == 0
    assert view.values["grade"] == "F"
    assert view.flag == "danger"


def test_quiz_seven_correct(run):
    answers = dict(ALL_CORRECT, q1="0", q2="0", q3="0")
    view = run("financial_literacy", **answers)
    assert view.values["correct"] == 7
    assert view.values["grade"] == "C"
    assert view.display["score"] == "70%"


def test_quiz_accepts_integer_answers(run):
    answers = {key: int(value) for key, value in ALL_CORRECT.items()}
    assert run("financial_literacy", **answers).values["correct"] == 10


def test_quiz_rejects_unknown_option(reject):
    assert set(reject("financial_literacy", q1="9")) == {"q1"}


@pytest.mark.parametrize(
    "pct, grade",
    [(100, "A"), (90, "A"), (89.9, "B"), (80, "B"), (70, "C"), (60, "D"), (59, "F"), (0, "F")],
)
def test_letter_grade(pct, grade):
    assert letter_grade(pct) == grade
