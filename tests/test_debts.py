"""Debt and loan service tests: status, balances, filtering and summaries."""

from __future__ import annotations

from datetime import date

import pytest

from finboard.models.debt import STATUS_ACTIVE, STATUS_FULLY_PAID, STATUS_PARTIALLY_PAID
from finboard.services import debts
from tests.conftest import account_balance, assert_float_equal


def test_lending_takes_principal_out_of_account(session_factory, user_id, account_factory, debt_factory):
    account = account_factory(balance=1000.0)

    debt = debt_factory(amount=300.0, account_id=account.id)

    assert debt.status == STATUS_ACTIVE
    assert debt.repayments == []
    assert account_balance(session_factory, account.id, user_id) == 700.0


def test_repayments_update_status_and_credit_account(
    session_factory, user_id, account_factory, debt_factory
):
    account = account_factory(balance=1000.0)
    debt = debt_factory(amount=300.0, account_id=account.id)

    partial = debts.add_debt_repayment(
        debt.id,
        amount=100.0,
        repayment_date=date(2024, 2, 1),
        user_id=user_id,
        session_factory=session_factory,
    )
    assert partial.status == STATUS_PARTIALLY_PAID
    assert account_balance(session_factory, account.id, user_id) == 800.0

    paid = debts.add_debt_repayment(
        debt.id,
        amount=200.0,
        repayment_date=date(2024, 3, 1),
        user_id=user_id,
        session_factory=session_factory,
    )
    assert paid.status == STATUS_FULLY_PAID
    assert [r.amount for r in paid.repayments] == [100.0, 200.0]
    assert account_balance(session_factory, account.id, user_id) == 1000.0


def test_deleting_repayment_reverts_status_and_balance(
    session_factory, user_id, account_factory, debt_factory
):
    account = account_factory(balance=500.0)
    debt = debt_factory(amount=200.0, account_id=account.id)
    debt = debts.add_debt_repayment(
        debt.id,
        amount=200.0,
        repayment_date=date(2024, 1, 10),
        user_id=user_id,
        session_factory=session_factory,
    )
    assert debt.status == STATUS_FULLY_PAID

    updated = debts.delete_debt_repayment(
        debt.id, debt.repayments[0].id, user_id=user_id, session_factory=session_factory
    )

    assert updated.status == STATUS_ACTIVE
    assert updated.repayments == []
    assert account_balance(session_factory, account.id, user_id) == 300.0


def test_delete_reverses_net_movement(session_factory, user_id, account_factory, debt_factory):
    account = account_factory(balance=1000.0)
    debt = debt_factory(amount=300.0, account_id=account.id)
    debts.add_debt_repayment(
        debt.id,
        amount=100.0,
        repayment_date=date(2024, 2, 1),
        user_id=user_id,
        session_factory=session_factory,
    )

    assert debts.delete_debts([debt.id], user_id=user_id, session_factory=session_factory) == 1

    assert account_balance(session_factory, account.id, user_id) == 1000.0
    assert debts.get_debt(debt.id, user_id=user_id, session_factory=session_factory) is None


def test_update_moves_principal_difference_and_account(
    session_factory, user_id, account_factory, debt_factory
):
    first = account_factory(balance=1000.0)
    second = account_factory(balance=1000.0)
    debt = debt_factory(amount=300.0, account_id=first.id)
    debts.add_debt_repayment(
        debt.id,
        amount=50.0,
        repayment_date=date(2024, 2, 1),
        user_id=user_id,
        session_factory=session_factory,
    )

    debts.update_debt(debt.id, {"amount": 400.0}, user_id=user_id, session_factory=session_factory)
    assert account_balance(session_factory, first.id, user_id) == 650.0

    debts.update_debt(debt.id, {"account_id": second.id}, user_id=user_id, session_factory=session_factory)
    assert account_balance(session_factory, first.id, user_id) == 1000.0
    assert account_balance(session_factory, second.id, user_id) == 650.0


def test_other_users_cannot_touch_records(session_factory, other_user_id, debt_factory):
    debt = debt_factory()

    assert debts.get_debt(debt.id, user_id=other_user_id, session_factory=session_factory) is None
    assert (
        debts.add_debt_repayment(
            debt.id,
            amount=10.0,
            repayment_date=date(2024, 1, 2),
            user_id=other_user_id,
            session_factory=session_factory,
        )
        is None
    )
    assert debts.delete_debts([debt.id], user_id=other_user_id, session_factory=session_factory) == 0


def test_bulk_delete_requires_every_id(session_factory, user_id, debt_factory):
    first = debt_factory()
    second = debt_factory()

    with pytest.raises(ValueError):
        debts.delete_debts([first.id, 9999], user_id=user_id, session_factory=session_factory)

    assert debts.delete_debts([first.id, second.id], user_id=user_id, session_factory=session_factory) == 2
    assert debts.list_debts(user_id=user_id, session_factory=session_factory) == []


def test_loans_mirror_debts(session_factory, user_id, account_factory, loan_factory):
    account = account_factory(balance=100.0)

    loan = loan_factory(amount=500.0, account_id=account.id)
    assert account_balance(session_factory, account.id, user_id) == 600.0

    loan = debts.add_loan_repayment(
        loan.id,
        amount=150.0,
        repayment_date=date(2024, 2, 1),
        user_id=user_id,
        session_factory=session_factory,
    )
    assert loan.status == STATUS_PARTIALLY_PAID
    assert account_balance(session_factory, account.id, user_id) == 450.0

    debts.delete_loans([loan.id], user_id=user_id, session_factory=session_factory)
    assert account_balance(session_factory, account.id, user_id) == 100.0


def test_summarize_totals_and_counts(debt_factory, session_factory, user_id):
    as_of = date(2025, 1, 1)
    debt_factory(amount=1000.0, interest_rate=12.0, lent_date=date(2024, 1, 1), due_date=date(2024, 7, 1))
    paid = debt_factory(amount=200.0)
    debts.add_debt_repayment(
        paid.id,
        amount=200.0,
        repayment_date=date(2024, 2, 1),
        user_id=user_id,
        session_factory=session_factory,
    )
    records = debts.list_debts(user_id=user_id, session_factory=session_factory)

    summary = debts.summarize(records, as_of=as_of)

    # 1000 * 0.12 * 182 / 365 = 59.84 accrued before the due date
    assert summary["principal"] == 1200.0
    assert summary["repaid"] == 200.0
    assert_float_equal(summary["total_with_interest"], 1259.84)
    assert_float_equal(summary["remaining"], 1059.84)
    assert_float_equal(summary["interest_accrued"], 59.84)
    assert summary["active_count"] == 1
    assert summary["overdue_count"] == 1


def test_filter_records_by_text_and_status(debt_factory, session_factory, user_id):
    debt_factory(borrower_name="Alice Smith", purpose="Car repair")
    debt_factory(borrower_name="Bob", borrower_email="bob@example.com")
    paid = debt_factory(borrower_name="Carol", amount=50.0)
    debts.add_debt_repayment(
        paid.id, amount=50.0, repayment_date=date(2024, 1, 5), user_id=user_id, session_factory=session_factory
    )
    records = debts.list_debts(user_id=user_id, session_factory=session_factory)

    assert [r.borrower_name for r in debts.filter_records(debts.DEBT, records, text="REPAIR")] == ["Alice Smith"]
    assert [r.borrower_name for r in debts.filter_records(debts.DEBT, records, text="EXAMPLE")] == ["Bob"]
    assert [
        r.borrower_name for r in debts.filter_records(debts.DEBT, records, status="fully_paid")
    ] == ["Carol"]
    assert len(debts.filter_records(debts.DEBT, records)) == 3
    with pytest.raises(ValueError):
        debts.filter_records(debts.DEBT, records, status="LOST")


def test_describe_includes_breakdown_and_overdue_flag(debt_factory):
    debt = debt_factory(amount=1000.0, interest_rate=12.0, lent_date=date(2023, 1, 1), due_date=date(2023, 6, 1))

    payload = debts.describe(debts.DEBT, debt, as_of=date(2024, 1, 1))

    assert payload["borrower_name"] == "Alice"
    assert payload["lent_date"] == "2023-01-01"
    assert payload["is_overdue"] is True
    assert payload["remaining_amount"] == payload["total_with_interest"]
    assert payload["repayments"] == []


def test_describe_at_past_date_ignores_later_repayments(debt_factory, session_factory, user_id):
    debt = debt_factory(amount=300.0, lent_date=date(2023, 1, 1), due_date=date(2023, 6, 1))
    debt = debts.add_debt_repayment(
        debt.id, amount=300.0, repayment_date=date(2023, 9, 1), user_id=user_id, session_factory=session_factory
    )

    before = debts.describe(debts.DEBT, debt, as_of=date(2023, 7, 1))
    after = debts.describe(debts.DEBT, debt, as_of=date(2024, 1, 1))

    assert before["remaining_amount"] == 300.0
    assert before["is_overdue"] is True
    assert after["remaining_amount"] == 0.0
    assert after["is_overdue"] is False
    assert debts.summarize([debt], as_of=date(2023, 7, 1))["overdue_count"] == 1


def test_over_repayment_is_accepted(debt_factory, session_factory, user_id):
    debt = debt_factory(amount=100.0)

    debt = debts.add_debt_repayment(
        debt.id, amount=130.0, repayment_date=date(2024, 1, 5), user_id=user_id, session_factory=session_factory
    )

    assert debt.status == STATUS_FULLY_PAID
    assert debts.breakdown_for(debt, as_of=date(2024, 2, 1)).remaining_amount == -30.0


def test_single_delete_wrappers(session_factory, user_id, other_user_id, debt_factory, loan_factory):
    debt = debt_factory()
    loan = loan_factory()

    assert debts.delete_debt(debt.id, user_id=other_user_id, session_factory=session_factory) is False
    assert debts.delete_debt(debt.id, user_id=user_id, session_factory=session_factory) is True
    assert debts.delete_loan(loan.id, user_id=user_id, session_factory=session_factory) is True
    assert debts.list_loans(user_id=user_id, session_factory=session_factory) == []


def test_loan_update_and_repayment_removal(session_factory, user_id, account_factory, loan_factory):
    account = account_factory(balance=0.0)
    loan = loan_factory(amount=400.0, account_id=account.id)
    loan = debts.add_loan_repayment(
        loan.id, amount=400.0, repayment_date=date(2024, 3, 1), user_id=user_id, session_factory=session_factory
    )
    assert loan.status == STATUS_FULLY_PAID

    debts.update_loan(loan.id, {"amount": 600.0}, user_id=user_id, session_factory=session_factory)
    reloaded = debts.get_loan(loan.id, user_id=user_id, session_factory=session_factory)
    assert reloaded.status == STATUS_PARTIALLY_PAID
    assert account_balance(session_factory, account.id, user_id) == 200.0

    cleared = debts.delete_loan_repayment(
        loan.id, reloaded.repayments[0].id, user_id=user_id, session_factory=session_factory
    )
    assert cleared.status == STATUS_ACTIVE
    assert account_balance(session_factory, account.id, user_id) == 600.0
