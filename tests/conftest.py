from __future__ import annotations

import pytest

from app import app as flask_app
from registry import evaluate


@pytest.fixture()
def client():
    flask_app.config.update(TESTING=True)
    with flask_app.test_client() as c:
        yield c


@pytest.fixture()
def run():
    """Evaluate a calculator and insist that it succeeded."""

    def _run(key, **raw):
        outcome = evaluate(key, raw)
        assert outcome.ok, getattr(outcome, "errors", None)
        return outcome

    return _run


@pytest.fixture()
def reject():
    """Evaluate a calculator and return the error mapping of its Failure."""

    def _reject(key, **raw):
        outcome = evaluate(key, raw)
        assert not outcome.ok, outcome.display
        return outcome.errors

    return _reject
