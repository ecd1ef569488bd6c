"""Account service tests."""

from __future__ import annotations

import pytest

from finboard.errors import AccountInUseError, DuplicateAccountNumberError
from finboard.services import accounts


def test_create_and_list_accounts_sorted_by_bank(account_factory, session_factory, user_id):
    account_factory(bank_name="Zeta Bank", balance=10.0)
    account_factory(bank_name="Alpha Bank", balance=20.5)

    listed = accounts.list_accounts(user_id=user_id, session_factory=session_factory)

    assert [a.bank_name for a in listed] == ["Alpha Bank", "Zeta Bank"]
    assert accounts.total_balance(user_id=user_id, session_factory=session_factory) == 30.5


def test_account_number_is_unique_across_users(account_factory, other_user_id):
    account_factory(account_number="DUP-001")

    with pytest.raises(DuplicateAccountNumberError):
        account_factory(account_number="DUP-001", owner_id=other_user_id)


def test_update_keeps_own_number_and_rejects_taken_one(account_factory, session_factory, user_id):
    first = account_factory(account_number="N-1")
    account_factory(account_number="N-2")

    updated = accounts.update_account(
        first.id,
        {"account_number": "N-1", "nickname": "Main"},
        user_id=user_id,
        session_factory=session_factory,
    )
    assert updated.nickname == "Main"

    with pytest.raises(DuplicateAccountNumberError):
        accounts.update_account(
            first.id, {"account_number": "N-2"}, user_id=user_id, session_factory=session_factory
        )


def test_delete_refused_while_referenced(account_factory, expense_factory, session_factory, user_id):
    account = account_factory(balance=100.0)
    expense_factory(amount=10.0, account_id=account.id)

    with pytest.raises(AccountInUseError):
        accounts.delete_account(account.id, user_id=user_id, session_factory=session_factory)

    assert accounts.get_account(account.id, user_id=user_id, session_factory=session_factory) is not None


def test_delete_unreferenced_account(account_factory, session_factory, user_id):
    account = account_factory()

    assert accounts.delete_account(account.id, user_id=user_id, session_factory=session_factory) is True
    assert accounts.delete_account(account.id, user_id=user_id, session_factory=session_factory) is False


def test_bulk_delete_rejects_foreign_ids(account_factory, session_factory, user_id, other_user_id):
    mine = account_factory()
    theirs = account_factory(owner_id=other_user_id)

    with pytest.raises(ValueError):
        accounts.bulk_delete_accounts(
            [mine.id, theirs.id], user_id=user_id, session_factory=session_factory
        )

    assert accounts.get_account(mine.id, user_id=user_id, session_factory=session_factory) is not None
    assert accounts.get_account(theirs.id, user_id=user_id, session_factory=session_factory) is None
