"""Debts (money lent) and loans (money borrowed) with their repayments.

Both share one shape: a principal at simple interest plus dated repayments.
Amounts owed come from :mod:`finboard.services.interest`; the stored
``status`` is refreshed from it whenever the record or its repayments change.

Account bookkeeping: lending takes the principal out of the linked account
and repayments bring money back in; borrowing is the mirror image.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from functools import partial
from typing import Any, Iterable, Mapping, Optional, Type, Union

from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Debt, DebtRepayment, Loan, LoanRepayment
from ..models.debt import (
    STATUS_ACTIVE,
    STATUS_FULLY_PAID,
    STATUS_PARTIALLY_PAID,
    STATUSES,
)
from .balances import apply_delta, move_amount
from .interest import InterestBreakdown, calculate_remaining_with_interest

logger = get_logger(__name__)

Record = Union[Debt, Loan]
Repayment = Union[DebtRepayment, LoanRepayment]


@dataclass(frozen=True, slots=True)
class _Kind:
    model: Type[Record]
    repayment_model: Type[Repayment]
    parent_key: str
    fields: tuple[str, ...]
    search_fields: tuple[str, ...]
    # direction of the principal on the linked account; repayments go the other way
    principal_sign: int
    label: str


DEBT = _Kind(
    model=Debt,
    repayment_model=DebtRepayment,
    parent_key="debt_id",
    fields=(
        "account_id",
        "borrower_name",
        "borrower_contact",
        "borrower_email",
        "amount",
        "interest_rate",
        "lent_date",
        "due_date",
        "purpose",
        "notes",
    ),
    search_fields=("borrower_name", "purpose", "borrower_contact", "borrower_email"),
    principal_sign=-1,
    label="debt",
)

LOAN = _Kind(
    model=Loan,
    repayment_model=LoanRepayment,
    parent_key="loan_id",
    fields=(
        "account_id",
        "lender_name",
        "lender_contact",
        "lender_email",
        "amount",
        "interest_rate",
        "loan_date",
        "due_date",
        "purpose",
        "notes",
    ),
    search_fields=("lender_name", "purpose", "lender_contact", "lender_email"),
    principal_sign=1,
    label="loan",
)


def breakdown_for(record: Record, *, as_of: date | None = None) -> InterestBreakdown:
    """Run the interest calculator over a persisted debt or loan."""

    return calculate_remaining_with_interest(
        record.amount,
        record.interest_rate,
        record.start_date,
        record.due_date,
        record.repayments,
        as_of=as_of,
    )


def derive_status(record: Record, breakdown: InterestBreakdown) -> str:
    if breakdown.remaining_amount <= 0:
        return STATUS_FULLY_PAID
    if record.repayments:
        return STATUS_PARTIALLY_PAID
    return STATUS_ACTIVE


def is_overdue(record: Record, breakdown: InterestBreakdown, *, as_of: date | None = None) -> bool:
    today = as_of or date.today()
    return (
        record.due_date is not None
        and today > record.due_date
        and breakdown.remaining_amount > 0
    )


def _refresh_status(record: Record) -> InterestBreakdown:
    breakdown = breakdown_for(record)
    record.status = derive_status(record, breakdown)
    if breakdown.remaining_amount < 0:
        logger.warning(
            "Repayments exceed amount owed",
            extra={"record_id": record.id, "remaining": breakdown.remaining_amount},
        )
    return breakdown


def _owned(session: Session, kind: _Kind, record_id: int, user_id: int) -> Optional[Record]:
    model = kind.model
    return session.exec(
        select(model)
        .where(model.id == record_id, model.user_id == user_id)
        .options(selectinload(model.repayments))  # type: ignore[arg-type]
    ).first()


def list_records(kind: _Kind, *, user_id: int, session_factory: SessionFactory) -> list[Record]:
    """Return the user's records with repayments loaded, newest first."""

    model = kind.model
    with session_factory() as session:
        return list(
            session.exec(
                select(model)
                .where(model.user_id == user_id)
                .options(selectinload(model.repayments))  # type: ignore[arg-type]
                .order_by(col(model.created_at).desc())
            ).all()
        )


def get_record(
    kind: _Kind, record_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[Record]:
    with session_factory() as session:
        return _owned(session, kind, record_id, user_id)


def create_record(
    kind: _Kind, data: Mapping[str, Any], *, user_id: int, session_factory: SessionFactory
) -> Record:
    with session_factory() as session:
        values = {key: data[key] for key in kind.fields if key in data}
        record = kind.model(user_id=user_id, status=STATUS_ACTIVE, **values)
        apply_delta(session, record.account_id, kind.principal_sign * record.amount, user_id=user_id)
        session.add(record)
        session.flush()
        logger.info(
            "%s created",
            kind.label.capitalize(),
            extra={"user_id": user_id, "record_id": record.id, "amount": record.amount},
        )
        # load the (empty) collection so the detached instance stays usable
        session.refresh(record, attribute_names=["repayments"])
        return record


def update_record(
    kind: _Kind,
    record_id: int,
    data: Mapping[str, Any],
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[Record]:
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
            sign=kind.principal_sign,
            user_id=user_id,
        )
        if old_account != record.account_id:
            repaid = sum(r.amount for r in record.repayments)
            apply_delta(session, old_account, kind.principal_sign * repaid, user_id=user_id)
            apply_delta(session, record.account_id, -kind.principal_sign * repaid, user_id=user_id)
        _refresh_status(record)
        session.add(record)
        logger.info("%s updated", kind.label.capitalize(), extra={"record_id": record_id})
        return record


def delete_records(
    kind: _Kind, record_ids: Iterable[int], *, user_id: int, session_factory: SessionFactory
) -> int:
    """Delete records with their repayments, reversing the net account movement."""

    ids = list(dict.fromkeys(record_ids))
    model = kind.model
    with session_factory() as session:
        records = list(
            session.exec(
                select(model)
                .where(col(model.id).in_(ids), model.user_id == user_id)
                .options(selectinload(model.repayments))  # type: ignore[arg-type]
            ).all()
        )
        if len(records) != len(ids):
            if len(ids) == 1:
                return 0
            raise ValueError(f"Some {kind.label}s not found or unauthorized")
        for record in records:
            repaid = sum(r.amount for r in record.repayments)
            net = kind.principal_sign * (record.amount - repaid)
            apply_delta(session, record.account_id, -net, user_id=user_id)
            session.delete(record)
        logger.info("%s records deleted", kind.label.capitalize(), extra={"ids": ids})
        return len(records)


def delete_record(
    kind: _Kind, record_id: int, *, user_id: int, session_factory: SessionFactory
) -> bool:
    return delete_records(kind, [record_id], user_id=user_id, session_factory=session_factory) == 1


def add_repayment(
    kind: _Kind,
    record_id: int,
    *,
    amount: float,
    repayment_date: date,
    notes: str | None = None,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[Record]:
    """Attach a repayment and refresh the record's status.

    Over-repayment is accepted; the remaining amount simply goes negative.
    """

    with session_factory() as session:
        record = _owned(session, kind, record_id, user_id)
        if record is None:
            return None
        repayment = kind.repayment_model(amount=amount, repayment_date=repayment_date, notes=notes)
        record.repayments.append(repayment)
        apply_delta(session, record.account_id, -kind.principal_sign * amount, user_id=user_id)
        _refresh_status(record)
        session.add(record)
        session.flush()
        logger.info(
            "Repayment recorded",
            extra={"kind": kind.label, "record_id": record_id, "amount": amount},
        )
        return record


def delete_repayment(
    kind: _Kind,
    record_id: int,
    repayment_id: int,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[Record]:
    with session_factory() as session:
        record = _owned(session, kind, record_id, user_id)
        if record is None:
            return None
        repayment = next((r for r in record.repayments if r.id == repayment_id), None)
        if repayment is None:
            return None
        record.repayments.remove(repayment)
        apply_delta(
            session, record.account_id, kind.principal_sign * repayment.amount, user_id=user_id
        )
        _refresh_status(record)
        session.add(record)
        logger.info(
            "Repayment deleted",
            extra={"kind": kind.label, "record_id": record_id, "repayment_id": repayment_id},
        )
        return record


def filter_records(
    kind: _Kind,
    records: Iterable[Record],
    *,
    text: str | None = None,
    status: str | None = None,
) -> list[Record]:
    """Case-insensitive search over counterparty details plus a status filter."""

    needle = (text or "").strip().lower()
    wanted = (status or "").strip().upper()
    if wanted and wanted not in STATUSES:
        raise ValueError(f"Unknown status: {status}")
    matches: list[Record] = []
    for record in records:
        if wanted and record.status != wanted:
            continue
        if needle:
            haystack = (getattr(record, name, None) or "" for name in kind.search_fields)
            if not any(needle in value.lower() for value in haystack):
                continue
        matches.append(record)
    return matches


def summarize(records: Iterable[Record], *, as_of: date | None = None) -> dict[str, float | int]:
    """Portfolio-level totals used by the dashboard cards."""

    totals = {
        "principal": 0.0,
        "repaid": 0.0,
        "total_with_interest": 0.0,
        "remaining": 0.0,
        "interest_accrued": 0.0,
    }
    active = overdue = 0
    for record in records:
        breakdown = breakdown_for(record, as_of=as_of)
        totals["principal"] += record.amount
        totals["repaid"] += breakdown.total_repaid
        totals["total_with_interest"] += breakdown.total_with_interest
        totals["remaining"] += breakdown.remaining_amount
        if record.status in (STATUS_ACTIVE, STATUS_PARTIALLY_PAID):
            active += 1
        if is_overdue(record, breakdown, as_of=as_of):
            overdue += 1
    totals["interest_accrued"] = totals["total_with_interest"] - totals["principal"]
    summary: dict[str, float | int] = {key: round(value, 2) for key, value in totals.items()}
    summary["active_count"] = active
    summary["overdue_count"] = overdue
    return summary


def describe(kind: _Kind, record: Record, *, as_of: date | None = None) -> dict[str, Any]:
    """Flatten a record, its repayments and its interest breakdown."""

    breakdown = breakdown_for(record, as_of=as_of)
    payload: dict[str, Any] = {"id": record.id, "status": record.status}
    for key in kind.fields:
        value = getattr(record, key)
        payload[key] = value.isoformat() if isinstance(value, date) else value
    payload.update(breakdown.to_dict())
    payload["is_overdue"] = is_overdue(record, breakdown, as_of=as_of)
    payload["repayments"] = [
        {
            "id": r.id,
            "amount": r.amount,
            "repayment_date": r.repayment_date.isoformat(),
            "notes": r.notes,
        }
        for r in sorted(record.repayments, key=lambda r: r.repayment_date)
    ]
    return payload


list_debts = partial(list_records, DEBT)
get_debt = partial(get_record, DEBT)
create_debt = partial(create_record, DEBT)
update_debt = partial(update_record, DEBT)
delete_debt = partial(delete_record, DEBT)
delete_debts = partial(delete_records, DEBT)
add_debt_repayment = partial(add_repayment, DEBT)
delete_debt_repayment = partial(delete_repayment, DEBT)

list_loans = partial(list_records, LOAN)
get_loan = partial(get_record, LOAN)
create_loan = partial(create_record, LOAN)
update_loan = partial(update_record, LOAN)
delete_loan = partial(delete_record, LOAN)
delete_loans = partial(delete_records, LOAN)
add_loan_repayment = partial(add_repayment, LOAN)
delete_loan_repayment = partial(delete_repayment, LOAN)
