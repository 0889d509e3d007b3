"""
Test configuration for stable local/CI execution.
"""
from __future__ import annotations

import asyncio
import inspect
import os
from datetime import date

import pytest


# Keep tests offline and quiet.
os.environ.setdefault("LANGSMITH_TRACING", "false")
os.environ.setdefault("ENVIRONMENT", "test")
os.environ.setdefault("UPSTAGE_API_KEY", "")
os.environ.setdefault("LOG_DIR", "/tmp/risklens-test-logs")


def pytest_pyfunc_call(pyfuncitem):
    """
    Minimal asyncio runner to support async test functions without extra plugins.
    """
    testfunction = pyfuncitem.obj
    if not inspect.iscoroutinefunction(testfunction):
        return None

    kwargs = {
        argname: pyfuncitem.funcargs[argname]
        for argname in pyfuncitem._fixtureinfo.argnames
    }
    asyncio.run(testfunction(**kwargs))
    return True


@pytest.fixture
def make_risk():
    """Factory for Risk records with sensible defaults."""
    from risklens.schemas.risk import Risk

    counter = {"n": 0}

    def _make(**overrides) -> Risk:
        counter["n"] += 1
        fields = {
            "id": f"R-{counter['n']}",
            "title": f"Risk {counter['n']}",
            "description": "",
            "business_unit": "IT",
            "likelihood": 3,
            "impact": 3,
        }
        fields.update(overrides)
        return Risk(**fields)

    return _make


@pytest.fixture
def sample_day():
    return date(2025, 3, 10)
