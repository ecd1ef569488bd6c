"""Bank account management."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from sqlalchemy import func
from sqlmodel import Session, col, select

from ..errors import AccountInUseError, DuplicateAccountNumberError
from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Account, Debt, Expense, Income, Investment, Loan

logger = get_logger(__name__)

ACCOUNT_FIELDS = (
    "holder_name",
    "account_number",
    "bank_name",
    "branch_name",
    "branch_code",
    "account_type",
    "balance",
    "opening_date",
    "nickname",
    "notes",
)

# Tables whose rows pin an account in place
_REFERENCING_MODELS = (Expense, Income, Investment, Debt, Loan)


def _ensure_unique_number(session: Session, number: str, *, exclude_id: int | None = None) -> None:
    existing = session.exec(select(Account).where(Account.account_number == number)).first()
    if existing is not None and existing.id != exclude_id:
        raise DuplicateAccountNumberError(
            f"Account number {number} is already in use. Please use a different account number."
        )


def list_accounts(*, user_id: int, session_factory: SessionFactory) -> list[Account]:
    """Return the user's accounts ordered by bank name."""
    with session_factory() as session:
        return list(
            session.exec(
                select(Account).where(Account.user_id == user_id).order_by(Account.bank_name)
            ).all()
        )


def get_account(
    account_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[Account]:
    with session_factory() as session:
        return session.exec(
            select(Account).where(Account.id == account_id, Account.user_id == user_id)
        ).first()


def create_account(
    data: Mapping[str, Any], *, user_id: int, session_factory: SessionFactory
) -> Account:
    """Create an account; the account number must be unique across all users."""

    with session_factory() as session:
        _ensure_unique_number(session, data["account_number"])
        values = {key: data[key] for key in ACCOUNT_FIELDS if key in data}
        values["balance"] = values.get("balance") or 0.0
        account = Account(user_id=user_id, **values)
        session.add(account)
        session.flush()
        logger.info(
            "Account created",
            extra={"user_id": user_id, "account_id": account.id, "bank": account.bank_name},
        )
        return account


def update_account(
    account_id: int,
    data: Mapping[str, Any],
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[Account]:
    with session_factory() as session:
        account = session.exec(
            select(Account).where(Account.id == account_id, Account.user_id == user_id)
        ).first()
        if account is None:
            return None
        number = data.get("account_number")
        if number and number != account.account_number:
            _ensure_unique_number(session, number, exclude_id=account.id)
        for key in ACCOUNT_FIELDS:
            if key in data:
                setattr(account, key, data[key])
        session.add(account)
        logger.info("Account updated", extra={"user_id": user_id, "account_id": account_id})
        return account


def _reference_count(session: Session, account_ids: Iterable[int]) -> int:
    ids = list(account_ids)
    total = 0
    for model in _REFERENCING_MODELS:
        total += session.exec(
            select(func.count()).select_from(model).where(col(model.account_id).in_(ids))
        ).one()
    return total


def delete_account(account_id: int, *, user_id: int, session_factory: SessionFactory) -> bool:
    """Delete an account unless records still reference it."""

    return bulk_delete_accounts([account_id], user_id=user_id, session_factory=session_factory) == 1


def bulk_delete_accounts(
    account_ids: Iterable[int], *, user_id: int, session_factory: SessionFactory
) -> int:
    """Delete every listed account; all must belong to the user and be unreferenced."""

    ids = list(dict.fromkeys(account_ids))
    with session_factory() as session:
        accounts = list(
            session.exec(
                select(Account).where(col(Account.id).in_(ids), Account.user_id == user_id)
            ).all()
        )
        if len(accounts) != len(ids):
            if len(ids) == 1:
                return 0
            raise ValueError("Some accounts not found or unauthorized")
        if _reference_count(session, ids):
            logger.warning(
                "Account deletion refused; still referenced",
                extra={"user_id": user_id, "account_ids": ids},
            )
            raise AccountInUseError(
                "Cannot delete accounts that are referenced by transactions. "
                "Please delete associated transactions first."
            )
        for account in accounts:
            session.delete(account)
        logger.info("Accounts deleted", extra={"user_id": user_id, "account_ids": ids})
        return len(accounts)


def total_balance(*, user_id: int, session_factory: SessionFactory) -> float:
    with session_factory() as session:
        balances = session.exec(select(Account.balance).where(Account.user_id == user_id)).all()
        return round(sum(balances), 2)
