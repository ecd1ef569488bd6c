"""Remaining-balance-with-interest calculator for debts and loans.

Interest is simple (never compounded) and accrues day by day on the principal
still outstanding::

    interest = outstanding * rate / 100 * days / 365

Repayments are applied in date order. Each one settles the interest accrued
so far before reducing the principal, so later interest accrues on the
smaller balance while interest already accrued stays as it was. Accrual stops
at the evaluation date, or at the due date when that comes first.

Inputs are not validated here; forms reject bad values before they reach
this module.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Iterable

DAYS_IN_YEAR = Decimal(365)
_CENT = Decimal("0.01")
_HUNDRED = Decimal(100)
_ZERO = Decimal(0)


@dataclass(frozen=True, slots=True)
class InterestBreakdown:
    """Amounts owed on a single debt or loan at the evaluation date."""

    total_with_interest: float
    remaining_amount: float
    accrued_interest: float
    total_repaid: float

    def to_dict(self) -> dict[str, float]:
        return asdict(self)


def quantize_money(value: Decimal) -> Decimal:
    return value.quantize(_CENT, rounding=ROUND_HALF_UP)


def _to_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def _as_date(value: date | datetime) -> date:
    if isinstance(value, datetime):
        return value.date()
    return value


def _repayment_fields(repayment: Any) -> tuple[Decimal, date]:
    """Accept ORM rows, simple objects or mappings with amount + date."""

    if isinstance(repayment, Mapping):
        amount = repayment["amount"]
        when = repayment.get("repayment_date") or repayment["date"]
    else:
        amount = repayment.amount
        when = getattr(repayment, "repayment_date", None) or repayment.date
    return _to_decimal(amount), _as_date(when)


def accrual_end(due_date: date | None, as_of: date) -> date:
    """Interest stops at the due date once it has passed."""

    if due_date is not None and _as_date(due_date) < as_of:
        return _as_date(due_date)
    return as_of


def simple_interest(principal: Any, annual_rate: Any, days: int) -> Decimal:
    """Interest on ``principal`` over ``days`` at an annual percentage rate."""

    if days <= 0:
        return _ZERO
    return _to_decimal(principal) * _to_decimal(annual_rate) / _HUNDRED * Decimal(days) / DAYS_IN_YEAR


def calculate_remaining_with_interest(
    principal: Any,
    annual_rate: Any,
    start_date: date | datetime,
    due_date: date | datetime | None = None,
    repayments: Iterable[Any] = (),
    *,
    as_of: date | datetime | None = None,
) -> InterestBreakdown:
    """Return total owed (principal + accrued interest) and what is left after repayments.

    ``remaining_amount`` goes negative when repayments exceed the total owed.
    Repayments dated after the evaluation date are ignored.
    """

    evaluation_date = _as_date(as_of) if as_of is not None else date.today()
    stop = accrual_end(due_date, evaluation_date)
    principal_d = _to_decimal(principal)
    rate = _to_decimal(annual_rate)

    outstanding = principal_d
    unpaid_interest = _ZERO
    accrued = _ZERO
    repaid = _ZERO
    cursor = _as_date(start_date)

    for amount, when in sorted((_repayment_fields(r) for r in repayments), key=lambda r: r[1]):
        if when > evaluation_date:
            # not yet made at the evaluation date
            break
        segment_end = min(when, stop)
        if segment_end > cursor:
            interest = simple_interest(max(outstanding, _ZERO), rate, (segment_end - cursor).days)
            accrued += interest
            unpaid_interest += interest
            cursor = segment_end

        repaid += amount
        towards_interest = min(amount, unpaid_interest)
        unpaid_interest -= towards_interest
        outstanding -= amount - towards_interest

    if stop > cursor:
        accrued += simple_interest(max(outstanding, _ZERO), rate, (stop - cursor).days)

    total = quantize_money(principal_d + accrued)
    repaid_q = quantize_money(repaid)
    return InterestBreakdown(
        total_with_interest=float(total),
        remaining_amount=float(total - repaid_q),
        accrued_interest=float(total - quantize_money(principal_d)),
        total_repaid=float(repaid_q),
    )
