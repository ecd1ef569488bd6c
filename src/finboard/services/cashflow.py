"""Expenses and incomes; every mutation moves the linked account balance."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Type, Union

from sqlmodel import col, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Expense, Income
from .balances import apply_delta, move_amount

logger = get_logger(__name__)

CashflowRecord = Union[Expense, Income]


@dataclass(frozen=True, slots=True)
class _Kind:
    model: Type[CashflowRecord]
    date_field: str
    fields: tuple[str, ...]
    # +1 when the money lands in the account, -1 when it leaves
    sign: int
    label: str


EXPENSE = _Kind(
    model=Expense,
    date_field="occurred_on",
    fields=("account_id", "category", "amount", "description", "occurred_on", "payment_method"),
    sign=-1,
    label="expense",
)
INCOME = _Kind(
    model=Income,
    date_field="received_on",
    fields=("account_id", "category", "amount", "description", "received_on", "source"),
    sign=1,
    label="income",
)


def _owned(session, kind: _Kind, record_id: int, user_id: int) -> Optional[CashflowRecord]:
    model = kind.model
    return session.exec(
        select(model).where(model.id == record_id, model.user_id == user_id)
    ).first()


def list_records(
    kind: _Kind,
    *,
    user_id: int,
    session_factory: SessionFactory,
    start: date | None = None,
    end: date | None = None,
    category: str | None = None,
) -> list[CashflowRecord]:
    """Return records newest first, optionally bounded by date and category."""

    model = kind.model
    date_col = col(getattr(model, kind.date_field))
    statement = select(model).where(model.user_id == user_id)
    if start is not None:
        statement = statement.where(date_col >= start)
    if end is not None:
        statement = statement.where(date_col <= end)
    if category:
        statement = statement.where(model.category == category)
    with session_factory() as session:
        return list(session.exec(statement.order_by(date_col.desc(), col(model.id).desc())).all())


def get_record(
    kind: _Kind, record_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[CashflowRecord]:
    with session_factory() as session:
        return _owned(session, kind, record_id, user_id)


def create_record(
    kind: _Kind, data: Mapping[str, Any], *, user_id: int, session_factory: SessionFactory
) -> CashflowRecord:
    with session_factory() as session:
        values = {key: data[key] for key in kind.fields if key in data}
        record = kind.model(user_id=user_id, **values)
        apply_delta(session, record.account_id, kind.sign * record.amount, user_id=user_id)
        session.add(record)
        session.flush()
        logger.info(
            "%s created",
            kind.label.capitalize(),
            extra={"user_id": user_id, "record_id": record.id, "amount": record.amount},
        )
        return record


def update_record(
    kind: _Kind,
    record_id: int,
    data: Mapping[str, Any],
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[CashflowRecord]:
    with session_factory() as session:
        record = _owned(session, kind, record_id, user_id)
        if record is None:
            return None
        old_account, old_amount = record.account_id, record.amount
        for key in kind.fields:
            if key in data:
                setattr(record, key, data[key])
        move_amount(
            session,
            old_account_id=old_account,
            old_amount=old_amount,
            new_account_id=record.account_id,
            new_amount=record.amount,
            sign=kind.sign,
            user_id=user_id,
        )
        session.add(record)
        logger.info("%s updated", kind.label.capitalize(), extra={"record_id": record_id})
        return record


def delete_records(
    kind: _Kind, record_ids: Iterable[int], *, user_id: int, session_factory: SessionFactory
) -> int:
    """Delete records and reverse their effect on linked accounts."""

    ids = list(dict.fromkeys(record_ids))
    model = kind.model
    with session_factory() as session:
        records = list(
            session.exec(
                select(model).where(col(model.id).in_(ids), model.user_id == user_id)
            ).all()
        )
        if len(records) != len(ids):
            if len(ids) == 1:
                return 0
            raise ValueError(f"Some {kind.label} records not found or unauthorized")
        for record in records:
            apply_delta(session, record.account_id, -kind.sign * record.amount, user_id=user_id)
            session.delete(record)
        logger.info(
            "%s records deleted", kind.label.capitalize(), extra={"user_id": user_id, "ids": ids}
        )
        return len(records)


def total_for(records: Iterable[CashflowRecord]) -> float:
    return round(sum(r.amount for r in records), 2)


def totals_by_category(records: Iterable[CashflowRecord]) -> list[dict[str, object]]:
    """Roll up amounts by category, largest first."""

    totals: dict[str, float] = {}
    for record in records:
        name = record.category or "Uncategorized"
        totals[name] = totals.get(name, 0.0) + record.amount
    breakdown = [{"category": name, "amount": round(amount, 2)} for name, amount in totals.items()]
    breakdown.sort(key=lambda entry: entry["amount"], reverse=True)
    return breakdown
