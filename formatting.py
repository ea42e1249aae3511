"""
Display formatting for calculator results (en-US grouping, USD).
"""

from __future__ import annotations

import math
from typing import Any

PLACEHOLDER = "—"


def fmt(val: float, decimals: int = 2) -> str:
    """Format number as $X,XXX.XX (sign before the symbol)."""
    sign = "-" if val < 0 else ""
    return f"{sign}${abs(val):,.{decimals}f}"


def pct(val: float, decimals: int = 2) -> str:
    return f"{val:,.{decimals}f}%"


def number(val: float, decimals: int = 2) -> str:
    return f"{val:,.{decimals}f}"


def count(val: float) -> str:
    """Whole units, always rounded up so the count is sufficient."""
    return f"{math.ceil(val):,d}"


def format_value(value: Any, kind: str = "money", decimals: int = 2) -> str:
    """Render one output value according to its kind.

    ``None`` (an output that does not apply to these inputs) renders as an
    em dash; non-numeric values are shown as text.
    """
    if value is None:
        return PLACEHOLDER
    if kind == "text" or isinstance(value, str):
        return str(value)
    if isinstance(value, bool):
        return "Yes" if value else "No"
    if isinstance(value, (list, tuple)):
        return ", ".join(format_value(v, kind, decimals) for v in value)
    if not math.isfinite(value):
        raise ValueError(f"cannot display non-finite value {value!r}")

    if kind == "money":
        return fmt(value, decimals)
    if kind == "percent":
        return pct(value, decimals)
    if kind == "count":
        return count(value)
    if kind == "integer":
        return f"{int(value):,d}"
    if kind == "years":
        return f"{number(value, decimals)} years"
    if kind == "months":
        return f"{number(value, decimals)} months"
    return number(value, decimals)
