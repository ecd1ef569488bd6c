"""Pytest configuration and shared fixtures for Finboard tests.

Provides an isolated SQLite database per test, a ``session_factory`` shaped
like the one the app hands to services, entity factories built on the
services themselves, and Flask app/client fixtures.
"""

from __future__ import annotations

import itertools
import tempfile
from datetime import date
from pathlib import Path

import pytest
from sqlmodel import SQLModel, create_engine

from finboard import models  # noqa: F401  (registers tables on the metadata)
from finboard.infra.database import create_session_factory
from finboard.models import User
from finboard.services import accounts, cashflow, debts, investments

# =============================================================================
# Database Fixtures
# =============================================================================


@pytest.fixture(scope="function")
def db_engine():
    """Create an isolated SQLite database file for each test.

    Yields:
        Engine: SQLModel engine connected to the test database
    """
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    engine = create_engine(f"sqlite:///{db_path}", echo=False)
    SQLModel.metadata.create_all(engine)

    yield engine

    engine.dispose()
    db_path.unlink(missing_ok=True)


def _make_user(factory, username: str) -> User:
    with factory() as session:
        user = User(username=username, password_hash="dummy-hash", role="user")
        session.add(user)
        session.flush()
        return user


@pytest.fixture(scope="function")
def session_factory(db_engine):
    """Session factory matching the app's: commits on exit, rolls back on error.

    A default user is bootstrapped and exposed as ``factory.user``.
    """

    factory = create_session_factory(db_engine)
    factory.user = _make_user(factory, "tester")  # type: ignore[attr-defined]
    return factory


@pytest.fixture
def user(session_factory) -> User:
    return session_factory.user


@pytest.fixture
def user_id(user) -> int:
    return user.id


@pytest.fixture
def other_user_id(session_factory) -> int:
    """A second user for ownership checks."""

    return _make_user(session_factory, "intruder").id


# =============================================================================
# Test Data Factories
# =============================================================================

_account_numbers = itertools.count(1000)


@pytest.fixture
def account_factory(session_factory, user_id):
    """Factory for creating accounts through the accounts service."""

    def _create_account(
        balance: float = 1000.0,
        bank_name: str = "Test Bank",
        owner_id: int | None = None,
        **overrides,
    ):
        data = {
            "holder_name": "Test Holder",
            "account_number": f"ACC{next(_account_numbers)}",
            "bank_name": bank_name,
            "account_type": "SAVINGS",
            "balance": balance,
        }
        data.update(overrides)
        return accounts.create_account(
            data, user_id=owner_id or user_id, session_factory=session_factory
        )

    return _create_account


@pytest.fixture
def expense_factory(session_factory, user_id):
    def _create_expense(amount: float = 25.0, category: str = "Food", **overrides):
        data = {
            "amount": amount,
            "category": category,
            "description": "Test expense",
            "occurred_on": date(2024, 1, 15),
        }
        data.update(overrides)
        return cashflow.create_record(
            cashflow.EXPENSE, data, user_id=user_id, session_factory=session_factory
        )

    return _create_expense


@pytest.fixture
def income_factory(session_factory, user_id):
    def _create_income(amount: float = 100.0, category: str = "Salary", **overrides):
        data = {
            "amount": amount,
            "category": category,
            "description": "Test income",
            "received_on": date(2024, 1, 1),
        }
        data.update(overrides)
        return cashflow.create_record(
            cashflow.INCOME, data, user_id=user_id, session_factory=session_factory
        )

    return _create_income


@pytest.fixture
def investment_factory(session_factory, user_id):
    def _create_investment(
        quantity: float = 10.0,
        purchase_price: float = 10.0,
        current_price: float | None = None,
        investment_type: str = "STOCKS",
        **overrides,
    ):
        data = {
            "name": "Test Holding",
            "investment_type": investment_type,
            "quantity": quantity,
            "purchase_price": purchase_price,
            "current_price": purchase_price if current_price is None else current_price,
            "purchase_date": date(2024, 1, 2),
        }
        data.update(overrides)
        return investments.create_investment(
            data, user_id=user_id, session_factory=session_factory
        )

    return _create_investment


@pytest.fixture
def debt_factory(session_factory, user_id):
    def _create_debt(amount: float = 1000.0, interest_rate: float = 0.0, **overrides):
        data = {
            "borrower_name": "Alice",
            "amount": amount,
            "interest_rate": interest_rate,
            "lent_date": date(2024, 1, 1),
        }
        data.update(overrides)
        return debts.create_debt(data, user_id=user_id, session_factory=session_factory)

    return _create_debt


@pytest.fixture
def loan_factory(session_factory, user_id):
    def _create_loan(amount: float = 1000.0, interest_rate: float = 0.0, **overrides):
        data = {
            "lender_name": "Bank of Bob",
            "amount": amount,
            "interest_rate": interest_rate,
            "loan_date": date(2024, 1, 1),
        }
        data.update(overrides)
        return debts.create_loan(data, user_id=user_id, session_factory=session_factory)

    return _create_loan


def account_balance(session_factory, account_id: int, user_id: int) -> float:
    account = accounts.get_account(account_id, user_id=user_id, session_factory=session_factory)
    assert account is not None
    return account.balance


# =============================================================================
# Flask Fixtures
# =============================================================================


@pytest.fixture()
def app(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("FINBOARD_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("FINBOARD_DATABASE_URL", f"sqlite:///{tmp_path / 'finboard.db'}")
    monkeypatch.delenv("FINBOARD_USE_SQLCIPHER", raising=False)

    from finboard import create_app

    return create_app("testing")


@pytest.fixture()
def client(app):
    with app.test_client() as client:
        yield client


def register(client, username: str = "alice", password: str = "s3cret-pass"):
    return client.post(
        "/auth/register",
        json={"username": username, "password": password, "confirm_password": password},
    )


@pytest.fixture()
def auth_client(client):
    """Client with a registered, logged-in user."""

    response = register(client)
    assert response.status_code == 201
    return client


# =============================================================================
# Helpers
# =============================================================================


def assert_float_equal(actual: float, expected: float, tolerance: float = 0.01) -> None:
    """Assert two floats are equal within tolerance."""

    assert abs(actual - expected) < tolerance, f"Expected {expected}, got {actual}"
