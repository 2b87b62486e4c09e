"""
Pytest fixtures for the restoration kernel test suite.

Provides:
- Structured log capture
- A fresh in-memory store per test
- A fresh SQLite-backed SQL store per test
- ``store``: parametrized over both backends for contract tests

Environment Variables:
- DATABASE_URL: if set to a PostgreSQL URL, tests marked ``postgres`` run
  against it; otherwise they are skipped.
"""

import json
import logging
import os
from io import StringIO

import pytest

from restoration_kernel.domain.policy import StrictPolicy
from restoration_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from restoration_kernel.store.memory import InMemoryLedgerStore
from restoration_kernel.store.sql import SqlLedgerStore

MONA_LISA = ("Mona Lisa Restoration", "Restoring the famous painting", 1000000)
OWNER = "MOCK_OWNER"


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture restoration_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, memory_store):
            memory_store.create_project(...)
            logs = captured_logs()
            assert any(r["message"] == "project_created" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("restoration_kernel")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Store fixtures
# =============================================================================


@pytest.fixture
def memory_store() -> InMemoryLedgerStore:
    return InMemoryLedgerStore()


@pytest.fixture
def sql_store() -> SqlLedgerStore:
    return SqlLedgerStore.from_url("sqlite://")


@pytest.fixture(params=["memory", "sql"])
def store(request):
    """Each contract test runs once per backend."""
    if request.param == "memory":
        return InMemoryLedgerStore()
    return SqlLedgerStore.from_url("sqlite://")


@pytest.fixture(params=["memory", "sql"])
def strict_store(request):
    policy = StrictPolicy(cap_at_goal=True, owner_only_minting=True)
    if request.param == "memory":
        return InMemoryLedgerStore(policy)
    return SqlLedgerStore.from_url("sqlite://", policy)


@pytest.fixture
def mona_lisa(store) -> int:
    """Project 1 in ``store``, created by MOCK_OWNER."""
    return store.create_project(*MONA_LISA, OWNER).unwrap()


@pytest.fixture
def postgres_url():
    url = os.environ.get("DATABASE_URL", "")
    if not url.startswith("postgresql"):
        pytest.skip("DATABASE_URL does not point at PostgreSQL")
    return url


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "postgres: mark test as requiring PostgreSQL"
    )
