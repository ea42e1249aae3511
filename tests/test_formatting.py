from __future__ import annotations

import pytest

from formatting import count, fmt, format_value, pct


def test_fmt():
    assert fmt(1234.5) == "$1,234.50"
    assert fmt(-1234.56) == "-$1,234.56"
    assert fmt(1234.567, 0) == "$1,235"


def test_pct():
    assert pct(37.5, 1) == "37.5%"
    assert pct(5.1162) == "5.12%"


def test_count_rounds_up():
    assert count(1335.11) == "1,336"
    assert count(12.0) == "12"


@pytest.mark.parametrize(
    "value, kind, decimals, expected",
    [
        (None, "money", 2, "—"),
        (450000, "money", 2, "$450,000.00"),
        (1.5, "number", 2, "1.50"),
        (30, "years", 0, "30 years"),
        (15.2, "months", 1, "15.2 months"),
        (7, "integer", 2, "7"),
        ("Buying", "text", 2, "Buying"),
        (True, "bool", 2, "Yes"),
        ([1000, 2500], "money", 0, "$1,000, $2,500"),
    ],
)
def test_format_value(value, kind, decimals, expected):
    assert format_value(value, kind, decimals) == expected


@pytest.mark.parametrize("bad", [float("nan"), float("inf"), float("-inf")])
def test_format_value_refuses_non_finite(bad):
    with pytest.raises(ValueError):
        format_value(bad)
