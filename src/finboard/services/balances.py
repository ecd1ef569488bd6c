"""Account balance adjustments shared by every money-moving service.

Callers pass the session they are already using for the record mutation so
the balance change commits or rolls back together with it.
"""

from __future__ import annotations

from typing import Optional

from sqlmodel import Session, select

from ..errors import InsufficientBalanceError
from ..logging_config import get_logger
from ..models.account import Account

logger = get_logger(__name__)


def load_owned_account(session: Session, account_id: int, *, user_id: int) -> Account:
    """Fetch an account owned by ``user_id`` or raise ``ValueError``."""

    account = session.exec(
        select(Account).where(Account.id == account_id, Account.user_id == user_id)
    ).first()
    if account is None:
        raise ValueError("Selected account not found")
    return account


def apply_delta(
    session: Session,
    account_id: Optional[int],
    delta: float,
    *,
    user_id: int,
    require_funds: bool = False,
) -> Optional[Account]:
    """Add ``delta`` (negative to withdraw) to the linked account, if any."""

    if account_id is None or delta == 0:
        return None
    account = load_owned_account(session, account_id, user_id=user_id)
    if require_funds and delta < 0 and account.balance < -delta:
        logger.warning(
            "Insufficient balance",
            extra={"account_id": account_id, "available": account.balance, "required": -delta},
        )
        raise InsufficientBalanceError(
            f"Insufficient balance in {account.bank_name}. "
            f"Available: {account.balance:.2f}, Required: {-delta:.2f}"
        )
    account.balance = round(account.balance + delta, 2)
    session.add(account)
    return account


def move_amount(
    session: Session,
    *,
    old_account_id: Optional[int],
    old_amount: float,
    new_account_id: Optional[int],
    new_amount: float,
    sign: int,
    user_id: int,
) -> None:
    """Re-point an existing movement of ``sign * amount`` to new values.

    ``sign`` is +1 for money that entered the account (income) and -1 for
    money that left it (expense, investment).
    """

    if old_account_id == new_account_id:
        apply_delta(session, new_account_id, sign * (new_amount - old_amount), user_id=user_id)
        return
    apply_delta(session, old_account_id, -sign * old_amount, user_id=user_id)
    apply_delta(session, new_account_id, sign * new_amount, user_id=user_id)
