"""
Monte Carlo simulation of a lump-sum investment.

Each trial compounds ``years`` normally distributed annual returns.  All
trials are drawn and compounded in one vectorised numpy step.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict

import numpy as np

import config as cfg
from normalize import Kind, Policy
from registry import Field, Output, ValidationError, register

logger = logging.getLogger(__name__)


# ─── Data Classes ─────────────────────────────────────────────────────

@dataclass
class SimInputs:
    """Inputs for one simulation run (rates as fractions)."""

    initial: float               # starting investment
    mean_return: float           # expected annual return
    volatility: float            # std dev of annual return
    years: int                   # investment horizon
    trials: int = 10_000         # number of Monte Carlo trials
    seed: int = cfg.MONTE_CARLO_DEFAULT_SEED

    def __post_init__(self) -> None:
        if self.initial <= 0:
            raise ValidationError("initial_investment", "Initial investment must be greater than zero.")
        if self.mean_return < 0:
            raise ValidationError("expected_return", "Expected return cannot be negative.")
        if self.volatility < 0:
            raise ValidationError("volatility", "Volatility cannot be negative.")
        if self.years <= 0:
            raise ValidationError("years", "Investment period must be at least one year.")
        if self.years > cfg.MAX_PROJECTION_YEARS:
            raise ValidationError("years", f"Investment period must be at most {cfg.MAX_PROJECTION_YEARS} years.")
        if not cfg.MONTE_CARLO_MIN_TRIALS <= self.trials <= cfg.MONTE_CARLO_MAX_TRIALS:
            raise ValidationError(
                "trials",
                f"Number of simulations must be between {cfg.MONTE_CARLO_MIN_TRIALS:,} "
                f"and {cfg.MONTE_CARLO_MAX_TRIALS:,}.",
            )


@dataclass
class SimResults:
    """Sorted final values plus the summary statistics shown to the user."""

    outcomes: np.ndarray = field(repr=False)
    average: float
    minimum: float
    maximum: float
    p10: float
    p90: float


# ─── Core Simulation ─────────────────────────────────────────────────

def run_simulation(inputs: SimInputs) -> SimResults:
    """Run the Monte Carlo simulation.

    Parameters
    ----------
    inputs : SimInputs
        Validated simulation inputs.

    Returns
    -------
    SimResults
        Final portfolio values for every trial, sorted ascending, with the
        mean, extremes and the 10th and 90th percentile trials.
    """
    rng = np.random.default_rng(inputs.seed)
    returns = rng.normal(inputs.mean_return, inputs.volatility, (inputs.trials, inputs.years))
    outcomes = np.sort(inputs.initial * np.prod(1 + returns, axis=1))

    n = len(outcomes)
    logger.debug("Simulated %d trials over %d years", n, inputs.years)
    return SimResults(
        outcomes=outcomes,
        average=float(outcomes.mean()),
        minimum=float(outcomes[0]),
        maximum=float(outcomes[-1]),
        p10=float(outcomes[math.floor(0.1 * n)]),
        p90=float(outcomes[math.floor(0.9 * n)]),
    )


@register(
    "monte_carlo",
    title="Monte Carlo Simulation Calculator",
    category="Investments",
    summary="Simulate thousands of market paths to see the range of outcomes for an investment.",
    fields=(
        Field("initial_investment", "Initial Investment ($)"),
        Field("expected_return", "Expected Annual Return (%)", kind=Kind.PERCENT),
        Field("volatility", "Annual Volatility (%)", kind=Kind.PERCENT),
        Field("years", "Investment Period (years)", kind=Kind.INTEGER),
        Field("trials", "Number of Simulations", kind=Kind.INTEGER),
        Field("seed", "Random Seed", kind=Kind.INTEGER, policy=Policy.DEFAULT,
              default=cfg.MONTE_CARLO_DEFAULT_SEED, signed=False),
    ),
    outputs=(
        Output("average", "Average Outcome", highlight=True),
        Output("p10", "10th Percentile (bad case)"),
        Output("p90", "90th Percentile (good case)"),
        Output("minimum", "Worst Outcome"),
        Output("maximum", "Best Outcome"),
    ),
    formula="Final value = initial × Π(1 + rₜ), rₜ ~ Normal(μ, σ)",
    tips=(
        "The spread between P10 and P90 shows how much luck matters.",
        "Higher volatility widens outcomes even with the same average return.",
        "Use the same seed to reproduce a run.",
    ),
    chart="distribution",
)
def monte_carlo(x: Dict[str, Any]) -> Dict[str, Any]:
    results = run_simulation(SimInputs(
        initial=x["initial_investment"],
        mean_return=x["expected_return"] / 100,
        volatility=x["volatility"] / 100,
        years=x["years"],
        trials=x["trials"],
        seed=x["seed"],
    ))
    return {
        "average": results.average,
        "minimum": results.minimum,
        "maximum": results.maximum,
        "p10": results.p10,
        "p90": results.p90,
        "outcomes": results.outcomes,
        "initial": x["initial_investment"],
    }
