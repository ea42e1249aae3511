"""
Chart rendering and PDF summaries for the finance calculators.

Provides:
  - Base64-encoded chart images for web embedding (render_chart)
  - One-page in-memory PDF summary of a result (generate_pdf)

Calculators name their chart by key (``FormulaSpec.chart``); the drawing
functions read what they need from the result values.
"""

from __future__ import annotations

import base64
import io
import logging
from typing import Any, Callable, Dict, Optional

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
from matplotlib.backends.backend_pdf import PdfPages
from matplotlib.ticker import FuncFormatter
import numpy as np
from scipy.stats import gaussian_kde

from formatting import fmt, format_value
from lending import remaining_balance
from normalize import Kind
from registry import FormulaSpec, ResultView

logger = logging.getLogger(__name__)

# ═══════════════════════════════════════════════════════════════════
# Style constants
# ═══════════════════════════════════════════════════════════════════

BG = "#0a101f"
CARD = "#131b2e"
TEXT = "#f1f5f9"
TEXT2 = "#cbd5e1"
INDIGO = "#818cf8"
EMERALD = "#34d399"
AMBER = "#fbbf24"
RED = "#f87171"
SLATE = "#94a3b8"
BORDER = "#1e293b"

FLAG_COLORS = {"healthy": EMERALD, "warning": AMBER, "danger": RED}

A4W, A4H = 8.27, 11.69
WEB_W, WEB_H = 10, 6


# ═══════════════════════════════════════════════════════════════════
# Axis formatters
# ═══════════════════════════════════════════════════════════════════

def _usd_fmt(x, _):
    if abs(x) >= 1e6:
        return f"${x / 1e6:.1f}M"
    if abs(x) >= 1e3:
        return f"${x / 1e3:.0f}k"
    return f"${x:.0f}"


USD_FMT = FuncFormatter(_usd_fmt)


# ═══════════════════════════════════════════════════════════════════
# Style helpers
# ═══════════════════════════════════════════════════════════════════

def _style(fig, *axes):
    """Apply dark theme to figure and all axes."""
    fig.patch.set_facecolor(BG)
    for ax in axes:
        ax.set_facecolor(CARD)
        ax.tick_params(colors=TEXT, labelsize=8)
        ax.xaxis.label.set_color(TEXT)
        ax.yaxis.label.set_color(TEXT)
        ax.title.set_color(TEXT)
        for spine in ax.spines.values():
            spine.set_color(BORDER)
        ax.grid(True, alpha=0.15, color=SLATE)


def _legend(ax, loc="upper right"):
    ax.legend(loc=loc, fontsize=8, facecolor=CARD, edgecolor=BORDER, labelcolor=TEXT)


# ═══════════════════════════════════════════════════════════════════
# Charts
# ═══════════════════════════════════════════════════════════════════

def _draw_balance(ax, values: Dict[str, Any]) -> None:
    """Outstanding principal after each monthly payment."""
    months = int(values["months"])
    balance = remaining_balance(values["principal"], values["annual_rate"] / 100 / 12, months)
    x = np.arange(months + 1)

    ax.fill_between(x, balance, color=INDIGO, alpha=0.15)
    ax.plot(x, balance, color=INDIGO, linewidth=2.2, label="Remaining balance")
    if months >= 24:
        ticks = np.arange(0, months + 1, 12 * max(1, months // 120))
        ax.set_xticks(ticks)
        ax.set_xticklabels([f"Yr {t // 12}" for t in ticks])
        ax.set_xlabel("Year")
    else:
        ax.set_xlabel("Month")
    ax.set_xlim(0, months)
    ax.set_ylim(bottom=0)
    ax.yaxis.set_major_formatter(USD_FMT)
    ax.set_title("Loan Balance Over Time", fontsize=13, pad=12)
    _legend(ax)


def _draw_growth(ax, values: Dict[str, Any]) -> None:
    """Year-end value against the original principal."""
    p = values["principal"]
    n = values["periods_per_year"]
    rate = values["annual_rate"] / 100
    years = values["years"]
    t = np.linspace(0, years, max(2, int(np.ceil(years)) + 1)) if years > 0 else np.array([0.0])
    balance = p * (1 + rate / n) ** (n * t)

    ax.fill_between(t, p, balance, color=EMERALD, alpha=0.18, label="Interest earned")
    ax.plot(t, balance, color=EMERALD, linewidth=2.2, marker="o", markersize=3, label="Balance")
    ax.axhline(p, color=SLATE, linewidth=1.2, linestyle="--", label="Principal")
    ax.set_xlabel("Year")
    ax.yaxis.set_major_formatter(USD_FMT)
    ax.set_title("Growth of Your Investment", fontsize=13, pad=12)
    _legend(ax, loc="upper left")


def _draw_contributions(ax, values: Dict[str, Any]) -> None:
    """Year-end balance split into money paid in and interest earned."""
    balance = np.asarray(values["yearly_balance"], dtype=float)
    paid_in = np.asarray(values["yearly_contributed"], dtype=float)
    x = np.arange(1, len(balance) + 1)

    ax.bar(x, paid_in, 0.7, color=INDIGO, label="Deposits")
    ax.bar(x, balance - paid_in, 0.7, bottom=paid_in, color=EMERALD, label="Interest")
    ax.set_xlabel("Year")
    ax.yaxis.set_major_formatter(USD_FMT)
    ax.set_title("Balance by Year", fontsize=13, pad=12)
    _legend(ax, loc="upper left")


def _draw_distribution(ax, values: Dict[str, Any]) -> None:
    """Histogram of simulated final values with a KDE and P10/P90 markers."""
    outcomes = np.asarray(values["outcomes"], dtype=float)
    lo, hi = outcomes.min(), outcomes.max()
    margin = (hi - lo) * 0.05 or max(abs(hi) * 0.05, 1.0)
    bins = np.linspace(lo - margin, hi + margin, 60)

    ax.hist(outcomes, bins=bins, alpha=0.25, color=INDIGO, density=True)
    if np.ptp(outcomes) > 0:
        x_range = np.linspace(lo - margin, hi + margin, 300)
        density = gaussian_kde(outcomes)(x_range)
        ax.fill_between(x_range, density, alpha=0.12, color=INDIGO)
        ax.plot(x_range, density, color=INDIGO, linewidth=2.2, label="Outcomes")

    ax.axvline(values["p10"], color=RED, linewidth=1.4, linestyle="--", label="10th percentile")
    ax.axvline(values["p90"], color=EMERALD, linewidth=1.4, linestyle="--", label="90th percentile")
    ax.axvline(values["initial"], color=SLATE, linewidth=1.2, linestyle=":", label="Initial investment")

    ax.xaxis.set_major_formatter(USD_FMT)
    ax.set_xlabel("Final Value")
    ax.set_yticks([])
    ax.set_title("Distribution of Outcomes", fontsize=13, pad=12)
    _legend(ax)


CHARTS: Dict[str, Callable[[Any, Dict[str, Any]], None]] = {
    "balance": _draw_balance,
    "growth": _draw_growth,
    "contributions": _draw_contributions,
    "distribution": _draw_distribution,
}


# ═══════════════════════════════════════════════════════════════════
# PDF summary page
# ═══════════════════════════════════════════════════════════════════

def _plain(text: str) -> str:
    """Escape dollar signs so matplotlib does not read them as mathtext."""
    return text.replace("$", r"\$")


def _input_text(field, value: Any) -> str:
    if value is None:
        return format_value(None)
    if field.kind is Kind.CHOICE:
        return dict(field.choices).get(value, str(value))
    if field.kind is Kind.BOOLEAN:
        return format_value(bool(value), "bool")
    if field.kind in (Kind.SERIES, Kind.LABELS):
        return ", ".join(fmt(v) if field.kind is Kind.SERIES else str(v) for v in value) or "—"
    if field.kind is Kind.MONEY:
        return fmt(value)
    return f"{value:,g}"


def _summary_page(spec: FormulaSpec, view: ResultView) -> plt.Figure:
    fig = plt.figure(figsize=(A4W, A4H))
    fig.patch.set_facecolor(BG)

    fig.text(0.50, 0.94, _plain(spec.title), ha="center", fontsize=18, color=TEXT, fontweight="bold")
    fig.text(0.50, 0.915, _plain(spec.summary), ha="center", fontsize=9.5, color=TEXT2)

    y = 0.87
    fig.text(0.08, y, "Inputs", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.026
    for field in spec.fields:
        fig.text(0.10, y, _plain(f"{field.label}: {_input_text(field, view.inputs.get(field.name))}"),
                 fontsize=8.5, color=TEXT2)
        y -= 0.019

    y -= 0.02
    fig.text(0.08, y, "Results", fontsize=13, color=TEXT, fontweight="bold")
    y -= 0.028
    for out in spec.outputs:
        color = INDIGO if out.highlight else TEXT2
        weight = "bold" if out.highlight else "normal"
        fig.text(0.10, y, _plain(f"{out.label}: {view.display[out.name]}"),
                 fontsize=9.5, color=color, fontweight=weight)
        y -= 0.022

    if view.label:
        y -= 0.01
        fig.text(0.10, y, _plain(view.label), fontsize=11, fontweight="bold",
                 color=FLAG_COLORS.get(view.flag, TEXT))
        y -= 0.03

    if spec.formula:
        y -= 0.01
        fig.text(0.08, y, "Formula", fontsize=11, color=TEXT, fontweight="bold")
        y -= 0.022
        fig.text(0.10, y, _plain(spec.formula), fontsize=8.5, color=TEXT2, wrap=True)
        y -= 0.03

    draw = CHARTS.get(spec.chart) if spec.chart else None
    if draw is not None:
        height = min(0.36, y - 0.06)
        if height > 0.15:
            ax = fig.add_axes([0.12, 0.05, 0.80, height])
            _style(fig, ax)
            draw(ax, view.values)
    return fig


# ═══════════════════════════════════════════════════════════════════
# Public API
# ═══════════════════════════════════════════════════════════════════

def figure_to_base64(fig: plt.Figure) -> str:
    """Convert a matplotlib figure to a base64-encoded PNG string."""
    buf = io.BytesIO()
    fig.savefig(buf, format="png", facecolor=fig.get_facecolor(),
                dpi=150, bbox_inches="tight")
    buf.seek(0)
    b64 = base64.b64encode(buf.read()).decode()
    buf.close()
    return b64


def render_chart(spec: FormulaSpec, view: ResultView) -> Optional[str]:
    """Base64 PNG of the calculator's chart, or ``None`` if it has none."""
    draw = CHARTS.get(spec.chart) if spec.chart else None
    if draw is None:
        return None
    fig, ax = plt.subplots(figsize=(WEB_W, WEB_H), constrained_layout=True)
    try:
        _style(fig, ax)
        draw(ax, view.values)
        return figure_to_base64(fig)
    finally:
        plt.close(fig)


def generate_pdf(spec: FormulaSpec, view: ResultView) -> bytes:
    """Render a one-page PDF summary of *view* and return its bytes."""
    fig = _summary_page(spec, view)
    buf = io.BytesIO()
    try:
        with PdfPages(buf) as pdf:
            pdf.savefig(fig, facecolor=fig.get_facecolor())
    finally:
        plt.close(fig)
    logger.debug("Rendered PDF summary for %s", spec.key)
    return buf.getvalue()
