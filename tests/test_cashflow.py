"""Expense and income service tests."""

from __future__ import annotations

from datetime import date

import pytest

from finboard.services import cashflow
from tests.conftest import account_balance


def test_expense_debits_and_income_credits(
    account_factory, expense_factory, income_factory, session_factory, user_id
):
    account = account_factory(balance=100.0)

    expense_factory(amount=30.0, account_id=account.id)
    income_factory(amount=45.5, account_id=account.id)

    assert account_balance(session_factory, account.id, user_id) == 115.5


def test_update_adjusts_by_difference(account_factory, expense_factory, session_factory, user_id):
    account = account_factory(balance=100.0)
    expense = expense_factory(amount=30.0, account_id=account.id)

    cashflow.update_record(
        cashflow.EXPENSE, expense.id, {"amount": 50.0}, user_id=user_id, session_factory=session_factory
    )

    assert account_balance(session_factory, account.id, user_id) == 50.0


def test_update_moves_between_accounts(account_factory, income_factory, session_factory, user_id):
    first = account_factory(balance=0.0)
    second = account_factory(balance=0.0)
    income = income_factory(amount=80.0, account_id=first.id)

    cashflow.update_record(
        cashflow.INCOME,
        income.id,
        {"account_id": second.id, "amount": 90.0},
        user_id=user_id,
        session_factory=session_factory,
    )

    assert account_balance(session_factory, first.id, user_id) == 0.0
    assert account_balance(session_factory, second.id, user_id) == 90.0


def test_delete_restores_balance(account_factory, expense_factory, session_factory, user_id):
    account = account_factory(balance=100.0)
    expense = expense_factory(amount=40.0, account_id=account.id)

    deleted = cashflow.delete_records(
        cashflow.EXPENSE, [expense.id], user_id=user_id, session_factory=session_factory
    )

    assert deleted == 1
    assert account_balance(session_factory, account.id, user_id) == 100.0


def test_foreign_account_is_rejected(account_factory, session_factory, user_id, other_user_id):
    theirs = account_factory(owner_id=other_user_id)

    with pytest.raises(ValueError, match="account not found"):
        cashflow.create_record(
            cashflow.EXPENSE,
            {"amount": 5.0, "occurred_on": date(2024, 1, 1), "account_id": theirs.id},
            user_id=user_id,
            session_factory=session_factory,
        )

    assert cashflow.list_records(cashflow.EXPENSE, user_id=user_id, session_factory=session_factory) == []


def test_list_filters_by_date_and_category(expense_factory, session_factory, user_id):
    expense_factory(amount=10.0, category="Food", occurred_on=date(2024, 1, 5))
    expense_factory(amount=20.0, category="Rent", occurred_on=date(2024, 2, 1))
    expense_factory(amount=30.0, category="Food", occurred_on=date(2024, 3, 10))

    february_on = cashflow.list_records(
        cashflow.EXPENSE, user_id=user_id, session_factory=session_factory, start=date(2024, 2, 1)
    )
    food = cashflow.list_records(
        cashflow.EXPENSE, user_id=user_id, session_factory=session_factory, category="Food"
    )

    assert [e.amount for e in february_on] == [30.0, 20.0]
    assert cashflow.total_for(food) == 40.0


def test_totals_by_category_largest_first(expense_factory, session_factory, user_id):
    expense_factory(amount=10.0, category="Food")
    expense_factory(amount=70.0, category="Rent")
    expense_factory(amount=15.0, category="Food")

    records = cashflow.list_records(cashflow.EXPENSE, user_id=user_id, session_factory=session_factory)

    assert cashflow.totals_by_category(records) == [
        {"category": "Rent", "amount": 70.0},
        {"category": "Food", "amount": 25.0},
    ]


def test_bulk_delete_with_unknown_id_changes_nothing(
    account_factory, income_factory, session_factory, user_id
):
    account = account_factory(balance=0.0)
    income = income_factory(amount=50.0, account_id=account.id)

    with pytest.raises(ValueError):
        cashflow.delete_records(
            cashflow.INCOME, [income.id, 12345], user_id=user_id, session_factory=session_factory
        )

    assert account_balance(session_factory, account.id, user_id) == 50.0
