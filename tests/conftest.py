"""Pytest configuration and shared fixtures for DebtSage tests.

This module provides database fixtures, test data factories, and helper utilities
for testing the payoff engine, repositories, and CLI without touching a real database.
"""

from __future__ import annotations

import logging
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import Session, SQLModel, create_engine

from debtsage.logging_config import ROOT_LOGGER_NAME
from debtsage.models import Liability
from debtsage.services.debts import DebtAccount

TEST_USER_ID = 1


# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database for each test.

    Yields:
        Engine: SQLModel engine connected to test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


@pytest.fixture(scope="function")
def db_session(db_engine):
    """Create a database session for a single test."""
    session = Session(db_engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the Callable[[], Session] repositories expect."""

    def factory():
        return Session(db_engine, expire_on_commit=False)

    return factory


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging so streams don't leak between tests."""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    """Point the CLI configuration at a throwaway data directory."""

    data_dir = tmp_path / "data"
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(data_dir))
    monkeypatch.setenv("DEBTSAGE_DATABASE_URL", f"sqlite:///{tmp_path / 'cli.db'}")
    monkeypatch.delenv("DEBTSAGE_EXTRA_PAYMENT", raising=False)
    monkeypatch.delenv("DEBTSAGE_USER_ID", raising=False)
    return data_dir


# =============================================================================
# Test Data Factories
# =============================================================================


@pytest.fixture
def liability_factory(db_session):
    """Factory for creating test liabilities (debts).

    Returns:
        Callable: Function that creates and persists Liability instances
    """

    def _create_liability(
        name: str = "Test Debt",
        current_balance: float = 1000.00,
        interest_rate: float | None = 18.0,
        minimum_payment: float | None = 25.00,
        category: str = "credit_card",
        user_id: int = TEST_USER_ID,
        **extra,
    ) -> Liability:
        liability = Liability(
            user_id=user_id,
            name=name,
            category=category,
            original_amount=current_balance,
            current_balance=current_balance,
            interest_rate=interest_rate,
            minimum_payment=minimum_payment,
            **extra,
        )
        db_session.add(liability)
        db_session.commit()
        db_session.refresh(liability)
        # Detached: repositories open their own sessions.
        db_session.expunge(liability)
        return liability

    return _create_liability


@pytest.fixture
def start_date() -> date:
    """Fixed simulation start so payoff dates are deterministic."""
    return date(2025, 1, 15)


@pytest.fixture
def sample_debts() -> list[DebtAccount]:
    """Three debts where avalanche and snowball pick different targets."""
    return [
        DebtAccount(id="card", name="Credit Card", category="credit_card",
                    balance=5000.0, interest_rate=20.0, minimum_payment=100.0),
        DebtAccount(id="store", name="Store Card", category="credit_card",
                    balance=500.0, interest_rate=10.0, minimum_payment=25.0),
        DebtAccount(id="car", name="Car Loan", category="auto",
                    balance=3000.0, interest_rate=6.0, minimum_payment=90.0),
    ]


# =============================================================================
# Helpers
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01):
    """Assert that two floats are equal within a tolerance.

    Args:
        actual: Actual value
        expected: Expected value
        tolerance: Maximum allowed difference (default 0.01 = 1 cent)

    Raises:
        AssertionError: If values differ by more than tolerance
    """
    assert (
        abs(actual - expected) < tolerance
    ), f"Expected {expected}, got {actual} (difference: {abs(actual - expected)})"
