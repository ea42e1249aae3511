"""
Tolerant number parsing for free-form form input.

``parse_number`` is total: it never raises and returns ``None`` when the
text holds no usable number.  ``normalize_inputs`` applies each calculator's
per-field policy on top of it (reject, default to zero, fall back to a form
default, or omit).
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional, Tuple

_NUMBER = re.compile(r"[-+]?\d*\.?\d+")
_UNSIGNED_NUMBER = re.compile(r"\d*\.?\d+")
_MAGNITUDE = re.compile(r"\s*(thousand|million|billion|k|m|b)\b", re.IGNORECASE)
_SERIES_SPLIT = re.compile(r"[;\n|]+")
_STRIP = str.maketrans("", "", ",$£€")

MAGNITUDES = {
    "k": 1e3,
    "thousand": 1e3,
    "m": 1e6,
    "million": 1e6,
    "b": 1e9,
    "billion": 1e9,
}

TRUTHY = {"true", "1", "yes", "on", "y"}


class Policy(str, Enum):
    """What a field does when its text yields no number."""

    REQUIRED = "required"   # reject the submission
    ZERO = "zero"           # treat as 0
    DEFAULT = "default"     # use the field default
    FALLBACK = "fallback"   # use the field default, also when the value is 0
    OPTIONAL = "optional"   # leave the field out (None)


class Kind(str, Enum):
    MONEY = "money"
    NUMBER = "number"
    PERCENT = "percent"
    INTEGER = "integer"
    CHOICE = "choice"
    BOOLEAN = "boolean"
    SERIES = "series"
    LABELS = "labels"


MISSING_MESSAGE = "Please enter a valid number."


# ─── Scalar parsing ──────────────────────────────────────────────────

def parse_number(text: Any, magnitude: bool = True, signed: bool = True) -> Optional[float]:
    """Extract the first number from *text*.

    Thousands separators and currency symbols are dropped, the first
    decimal number is taken, and a single magnitude suffix directly after
    it (``k``, ``m``, ``b`` or the spelled-out words) multiplies it once.

    Examples
    --------
    >>> parse_number("$12,345.67")
    12345.67
    >>> parse_number("10k")
    10000.0
    >>> parse_number("abc123def")
    123.0
    >>> parse_number("xyz") is None
    True
    """
    if isinstance(text, bool):
        return None
    if isinstance(text, (int, float)):
        value = float(text)
        if not signed:
            value = abs(value)
        return value if math.isfinite(value) else None
    if not isinstance(text, str):
        return None

    cleaned = text.translate(_STRIP)
    pattern = _NUMBER if signed else _UNSIGNED_NUMBER
    m = pattern.search(cleaned)
    if not m:
        return None
    try:
        value = float(m.group(0))
    except ValueError:
        return None

    if magnitude:
        suffix = _MAGNITUDE.match(cleaned, m.end())
        if suffix:
            value *= MAGNITUDES[suffix.group(1).lower()]

    return value if math.isfinite(value) else None


def as_bool(x: Any) -> bool:
    if isinstance(x, bool):
        return x
    if isinstance(x, str):
        return x.strip().lower() in TRUTHY
    return bool(x)


def split_series(raw: Any) -> List[Any]:
    """Turn a list, or a newline/semicolon/pipe separated string, into items."""
    if raw is None:
        return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    if isinstance(raw, str):
        parts = [p.strip() for p in _SERIES_SPLIT.split(raw)]
        return [p for p in parts if p]
    return [raw]


# ─── Field policies ──────────────────────────────────────────────────

def _apply_policy(field, value: Optional[float]) -> Tuple[Any, Optional[str]]:
    """Resolve a parsed scalar against the field's policy.

    Returns ``(value, error)``; exactly one of them is meaningful.
    """
    if value is None:
        if field.policy is Policy.REQUIRED:
            return None, MISSING_MESSAGE
        if field.policy is Policy.ZERO:
            value = 0.0
        elif field.policy in (Policy.DEFAULT, Policy.FALLBACK):
            value = field.default
        else:
            return None, None
    elif value == 0 and field.policy is Policy.FALLBACK:
        value = field.default

    if value is None:
        return None, None
    if field.kind is Kind.INTEGER:
        value = int(value)
    if field.clamp is not None:
        lo, hi = field.clamp
        if lo is not None:
            value = max(lo, value)
        if hi is not None:
            value = min(hi, value)
    return value, None


def _normalize_choice(field, raw: Any) -> Tuple[Any, Optional[str]]:
    keys = [key for key, _ in field.choices]
    text = str(raw).strip().lower() if raw is not None else ""
    for key in keys:
        if text == str(key).lower():
            return key, None
    if field.policy is Policy.OPTIONAL and not text:
        return None, None
    if field.default is not None and (not text or field.policy is not Policy.REQUIRED):
        return field.default, None
    return None, "Choose one of: " + ", ".join(str(k) for k in keys) + "."


def normalize_field(field, raw: Any) -> Tuple[Any, Optional[str]]:
    """Normalize one raw form value for *field*."""
    if field.kind is Kind.CHOICE:
        return _normalize_choice(field, raw)
    if field.kind is Kind.BOOLEAN:
        if raw is None or raw == "":
            return bool(field.default), None
        return as_bool(raw), None
    if field.kind is Kind.LABELS:
        return [str(item).strip() for item in split_series(raw)], None
    if field.kind is Kind.SERIES:
        items = split_series(raw)
        if not items and field.policy is Policy.REQUIRED:
            return None, "Enter at least one value."
        if field.max_items is not None and len(items) > field.max_items:
            return None, f"Enter at most {field.max_items} values."
        values = []
        for item in items:
            parsed = parse_number(item, magnitude=True, signed=field.signed)
            value, error = _apply_policy(field, parsed)
            if error:
                return None, error
            values.append(value)
        return values, None

    if isinstance(raw, (list, tuple)):
        raw = raw[0] if raw else None
    parsed = parse_number(raw, magnitude=field.kind is Kind.MONEY, signed=field.signed)
    return _apply_policy(field, parsed)


def normalize_inputs(fields: Iterable, raw: Dict[str, Any]) -> Tuple[Dict[str, Any], Dict[str, str]]:
    """Normalize a raw form mapping.

    Returns ``(inputs, errors)`` where *errors* maps field name to message
    for every field that could not be resolved.
    """
    inputs: Dict[str, Any] = {}
    errors: Dict[str, str] = {}
    for field in fields:
        value, error = normalize_field(field, raw.get(field.name))
        if error:
            errors[field.name] = error
        else:
            inputs[field.name] = value
    return inputs, errors
