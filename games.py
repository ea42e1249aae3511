"""
Game theory payoff matrix and the financial literacy quiz.
"""

from __future__ import annotations

from typing import Any, Dict, List

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, register

GAMES = "Games & Quizzes"

_MOVE_NAMES = {"C": "Cooperate", "D": "Defect"}

# Cell -> (row player's move, column player's move)
_CELLS = (
    ("tl", "C", "C"),
    ("tr", "C", "D"),
    ("bl", "D", "C"),
    ("br", "D", "D"),
)


# ─── Nash equilibrium ────────────────────────────────────────────────

def _payoff_fields() -> tuple:
    fields = []
    for cell, a_move, b_move in _CELLS:
        default_a, default_b = cfg.DEFAULT_PAYOFFS[cell]
        where = f"{_MOVE_NAMES[a_move]}/{_MOVE_NAMES[b_move]}"
        fields.append(Field(f"{cell}_a", f"{where}: Player A", kind=Kind.NUMBER,
                            policy=Policy.DEFAULT, default=default_a))
        fields.append(Field(f"{cell}_b", f"{where}: Player B", kind=Kind.NUMBER,
                            policy=Policy.DEFAULT, default=default_b))
    return tuple(fields)


def pure_equilibria(payoffs: Dict[str, Any]) -> List[Dict[str, Any]]:
    """Cells where neither player gains by switching to their other move.

    Player A's alternative to a Cooperate row is always compared against
    the bottom-left cell, and to a Defect row against the top-left cell;
    player B's alternatives are the top-right cell (from Cooperate) and
    the bottom-right cell (from Defect).
    """
    found = []
    for cell, a_move, b_move in _CELLS:
        pa, pb = payoffs[f"{cell}_a"], payoffs[f"{cell}_b"]
        a_alternative = payoffs["bl_a"] if a_move == "C" else payoffs["tl_a"]
        b_alternative = payoffs["tr_b"] if b_move == "C" else payoffs["br_b"]
        if not (a_alternative > pa or b_alternative > pb):
            found.append({
                "strategy": f"{_MOVE_NAMES[a_move]} vs {_MOVE_NAMES[b_move]}",
                "payoff_a": pa,
                "payoff_b": pb,
            })
    return found


@register(
    "nash_equilibrium",
    title="Game Theory Payoff Calculator",
    category=GAMES,
    summary="Enter a 2×2 payoff matrix and find its pure-strategy Nash equilibria.",
    fields=_payoff_fields(),
    outputs=(
        Output("equilibria", "Nash Equilibria", kind="text", highlight=True),
        Output("count", "Number of Equilibria", kind="integer"),
    ),
    formula="A cell is an equilibrium when neither player can gain by switching alone.",
    tips=(
        "The default matrix is the prisoner's dilemma.",
        "Some games have several equilibria, others have none in pure strategies.",
    ),
)
def nash_equilibrium(x: Dict[str, Any]) -> Dict[str, Any]:
    found = pure_equilibria(x)
    if not found:
        return {
            "equilibria": None,
            "count": 0,
            "cells": [],
            "label": "No pure-strategy Nash equilibrium",
            "flag": "warning",
        }
    text = "; ".join(
        f"{eq['strategy']} (A: {eq['payoff_a']:g}, B: {eq['payoff_b']:g})" for eq in found
    )
    return {"equilibria": text, "count": len(found), "cells": found}


# ─── Financial literacy quiz ─────────────────────────────────────────

def letter_grade(percentage: float) -> str:
    for threshold, grade in cfg.QUIZ_GRADES:
        if percentage >= threshold:
            return grade
    return cfg.QUIZ_FAIL_GRADE


def _question_fields() -> tuple:
    return tuple(
        Field(f"q{i}", text, kind=Kind.CHOICE, policy=Policy.OPTIONAL,
              choices=tuple(enumerate(options)))
        for i, (text, options, _) in enumerate(cfg.QUIZ_QUESTIONS, start=1)
    )


@register(
    "financial_literacy",
    title="Financial Literacy Score Calculator",
    category=GAMES,
    summary="Ten multiple-choice questions; get a percentage score and a letter grade.",
    fields=_question_fields(),
    outputs=(
        Output("score", "Score", kind="percent", decimals=0, highlight=True),
        Output("grade", "Grade", kind="text"),
        Output("correct", "Correct Answers", kind="integer"),
    ),
    formula="Score = correct answers ÷ 10 × 100; A ≥ 90, B ≥ 80, C ≥ 70, D ≥ 60, else F",
    tips=(
        "Review the questions you missed before retaking the quiz.",
        "Unanswered questions count as wrong.",
    ),
)
def financial_literacy(x: Dict[str, Any]) -> Dict[str, Any]:
    correct = sum(
        1
        for i, (_, _, answer) in enumerate(cfg.QUIZ_QUESTIONS, start=1)
        if x.get(f"q{i}") == answer
    )
    percentage = correct / len(cfg.QUIZ_QUESTIONS) * 100
    score = round(percentage)
    if score >= 80:
        flag = "healthy"
    elif score >= 60:
        flag = "warning"
    else:
        flag = "danger"
    return {
        "score": score,
        "grade": letter_grade(percentage),
        "correct": correct,
        "flag": flag,
    }
