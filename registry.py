"""
Calculator registry and the single evaluation entry point.

Every calculator is a plain function ``compute(inputs) -> values`` decorated
with :func:`register`, which attaches a :class:`FormulaSpec` describing its
input fields, output fields and reference text.  :func:`evaluate` runs the
whole pipeline for one submission:

    raw strings -> normalize_inputs -> compute -> finiteness check -> format

User mistakes never raise out of :func:`evaluate`; they come back as a
:class:`Failure`.
"""

from __future__ import annotations

import importlib
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from formatting import format_value
from normalize import Kind, Policy, normalize_inputs

logger = logging.getLogger(__name__)

# Modules holding @register-ed calculators, imported on first lookup.
CALCULATOR_MODULES = (
    "lending",
    "growth",
    "business",
    "investments",
    "tax",
    "simulation",
    "legal",
    "games",
)

CATEGORY_ORDER = (
    "Lending",
    "Savings & Growth",
    "Business",
    "Investments",
    "Tax & Payroll",
    "Legal & Employment",
    "Games & Quizzes",
)


# ─── Errors ──────────────────────────────────────────────────────────

class ValidationError(ValueError):
    """A domain rule rejected the submission."""

    def __init__(self, field: str, message: str) -> None:
        super().__init__(f"{field}: {message}")
        self.field = field
        self.message = message


class UnknownCalculatorError(KeyError):
    """No calculator is registered under the requested key."""


# ─── Spec types ──────────────────────────────────────────────────────

@dataclass(frozen=True)
class Field:
    """One form input."""

    name: str
    label: str
    kind: Kind = Kind.MONEY
    policy: Policy = Policy.REQUIRED
    default: Any = None
    signed: bool = True
    clamp: Optional[Tuple[Optional[float], Optional[float]]] = None
    choices: Tuple[Tuple[Any, str], ...] = ()
    max_items: Optional[int] = None
    placeholder: str = ""


@dataclass(frozen=True)
class Output:
    """One displayed result value."""

    name: str
    label: str
    kind: str = "money"
    decimals: int = 2
    highlight: bool = False


@dataclass(frozen=True)
class FormulaSpec:
    key: str
    title: str
    category: str
    fields: Tuple[Field, ...]
    outputs: Tuple[Output, ...]
    compute: Callable[[Dict[str, Any]], Dict[str, Any]]
    summary: str = ""
    formula: str = ""
    tips: Tuple[str, ...] = ()
    chart: Optional[str] = None


@dataclass
class ResultView:
    """A successful evaluation."""

    key: str
    inputs: Dict[str, Any]
    values: Dict[str, Any]
    display: Dict[str, str]
    label: Optional[str] = None
    flag: Optional[str] = None
    note: Optional[str] = None
    ok: bool = field(default=True, init=False)


@dataclass
class Failure:
    """A rejected submission; *errors* maps field name to message."""

    key: str
    errors: Dict[str, str]
    ok: bool = field(default=False, init=False)


Outcome = Union[ResultView, Failure]

UNDEFINED_MESSAGE = "Result is undefined for these inputs."
OVERFLOW_MESSAGE = "Result is too large to compute for these inputs."

_REGISTRY: Dict[str, FormulaSpec] = {}
_loaded = False


# ─── Registration ────────────────────────────────────────────────────

def register(
    key: str,
    *,
    title: str,
    category: str,
    fields: Tuple[Field, ...],
    outputs: Tuple[Output, ...],
    summary: str = "",
    formula: str = "",
    tips: Tuple[str, ...] = (),
    chart: Optional[str] = None,
) -> Callable:
    """Decorator adding a compute function to the registry.

    The function itself is returned unchanged so it stays directly callable
    with already-normalized inputs.
    """

    def decorator(fn: Callable[[Dict[str, Any]], Dict[str, Any]]) -> Callable:
        if key in _REGISTRY:
            raise ValueError(f"Calculator {key!r} is already registered")
        _REGISTRY[key] = FormulaSpec(
            key=key,
            title=title,
            category=category,
            fields=fields,
            outputs=outputs,
            compute=fn,
            summary=summary,
            formula=formula,
            tips=tips,
            chart=chart,
        )
        return fn

    return decorator


def _ensure_loaded() -> None:
    global _loaded
    if _loaded:
        return
    for name in CALCULATOR_MODULES:
        importlib.import_module(name)
    _loaded = True


def get_spec(key: str) -> FormulaSpec:
    _ensure_loaded()
    try:
        return _REGISTRY[key]
    except KeyError:
        raise UnknownCalculatorError(key) from None


def all_specs() -> List[FormulaSpec]:
    _ensure_loaded()
    return list(_REGISTRY.values())


def specs_by_category() -> List[Tuple[str, List[FormulaSpec]]]:
    """Group calculators for the index page, in display order."""
    groups: Dict[str, List[FormulaSpec]] = {}
    for spec in all_specs():
        groups.setdefault(spec.category, []).append(spec)
    ordered = [c for c in CATEGORY_ORDER if c in groups]
    ordered += sorted(c for c in groups if c not in CATEGORY_ORDER)
    return [(c, sorted(groups[c], key=lambda s: s.title)) for c in ordered]


# ─── Evaluation ──────────────────────────────────────────────────────

def _non_finite(values: Dict[str, Any], outputs: Tuple[Output, ...]) -> List[str]:
    bad = []
    for out in outputs:
        v = values.get(out.name)
        if isinstance(v, float) and not math.isfinite(v):
            bad.append(out.name)
    return bad


def _result_fields(spec: FormulaSpec) -> List[str]:
    highlighted = [out.name for out in spec.outputs if out.highlight]
    return highlighted or [out.name for out in spec.outputs[:1]]


def format_outputs(spec: FormulaSpec, values: Dict[str, Any]) -> Dict[str, str]:
    return {
        out.name: format_value(values.get(out.name), out.kind, out.decimals)
        for out in spec.outputs
    }


def evaluate(key: str, raw: Dict[str, Any]) -> Outcome:
    """Normalize, compute and format one submission.

    Raises
    ------
    UnknownCalculatorError
        If *key* is not a registered calculator.
    """
    spec = get_spec(key)
    inputs, errors = normalize_inputs(spec.fields, raw)
    if errors:
        logger.info("%s: rejected input fields %s", key, sorted(errors))
        return Failure(key, errors)

    try:
        values = spec.compute(inputs)
    except ValidationError as exc:
        logger.info("%s: %s", key, exc)
        return Failure(key, {exc.field: exc.message})
    except ArithmeticError as exc:
        logger.warning("%s: %s with inputs %r", key, exc, inputs)
        return Failure(key, {name: OVERFLOW_MESSAGE for name in _result_fields(spec)})

    bad = _non_finite(values, spec.outputs)
    if bad:
        logger.warning("%s: non-finite result for %s with inputs %r", key, bad, inputs)
        return Failure(key, {name: UNDEFINED_MESSAGE for name in bad})

    logger.debug("%s: evaluated %r", key, inputs)
    return ResultView(
        key=key,
        inputs=inputs,
        values=values,
        display=format_outputs(spec, values),
        label=values.get("label"),
        flag=values.get("flag"),
        note=values.get("note"),
    )
