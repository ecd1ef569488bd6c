"""Investment positions and per-type targets."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Iterable, Mapping, Optional

from sqlmodel import col, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Investment, InvestmentTarget
from ..models.investment import INVESTMENT_TYPES
from .balances import apply_delta, move_amount

logger = get_logger(__name__)

INVESTMENT_FIELDS = (
    "account_id",
    "name",
    "investment_type",
    "symbol",
    "quantity",
    "purchase_price",
    "current_price",
    "purchase_date",
    "interest_rate",
    "maturity_date",
    "notes",
)


@dataclass(slots=True)
class TargetProgress:
    """Progress of current holdings towards an investment-type target."""

    target_id: int
    investment_type: str
    target_amount: float
    current_amount: float
    progress: float  # percentage, capped at 100
    is_complete: bool

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _owned(session, investment_id: int, user_id: int) -> Optional[Investment]:
    return session.exec(
        select(Investment).where(Investment.id == investment_id, Investment.user_id == user_id)
    ).first()


def list_investments(*, user_id: int, session_factory: SessionFactory) -> list[Investment]:
    with session_factory() as session:
        return list(
            session.exec(
                select(Investment)
                .where(Investment.user_id == user_id)
                .order_by(col(Investment.purchase_date).desc())
            ).all()
        )


def get_investment(
    investment_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[Investment]:
    with session_factory() as session:
        return _owned(session, investment_id, user_id)


def create_investment(
    data: Mapping[str, Any], *, user_id: int, session_factory: SessionFactory
) -> Investment:
    """Record a purchase; the funding account must cover the cost."""

    with session_factory() as session:
        values = {key: data[key] for key in INVESTMENT_FIELDS if key in data}
        investment = Investment(user_id=user_id, **values)
        apply_delta(
            session,
            investment.account_id,
            -investment.cost_basis,
            user_id=user_id,
            require_funds=True,
        )
        session.add(investment)
        session.flush()
        logger.info(
            "Investment created",
            extra={
                "user_id": user_id,
                "investment_id": investment.id,
                "cost": investment.cost_basis,
            },
        )
        return investment


def update_investment(
    investment_id: int,
    data: Mapping[str, Any],
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[Investment]:
    """Apply changes, moving any cost difference on the funding account(s)."""

    with session_factory() as session:
        investment = _owned(session, investment_id, user_id)
        if investment is None:
            return None
        old_account, old_cost = investment.account_id, investment.cost_basis
        for key in INVESTMENT_FIELDS:
            if key in data:
                setattr(investment, key, data[key])
        move_amount(
            session,
            old_account_id=old_account,
            old_amount=old_cost,
            new_account_id=investment.account_id,
            new_amount=investment.cost_basis,
            sign=-1,
            user_id=user_id,
        )
        session.add(investment)
        logger.info("Investment updated", extra={"investment_id": investment_id})
        return investment


def delete_investments(
    investment_ids: Iterable[int], *, user_id: int, session_factory: SessionFactory
) -> int:
    """Delete investments and return their cost to the funding accounts."""

    ids = list(dict.fromkeys(investment_ids))
    with session_factory() as session:
        investments = list(
            session.exec(
                select(Investment).where(
                    col(Investment.id).in_(ids), Investment.user_id == user_id
                )
            ).all()
        )
        if len(investments) != len(ids):
            if len(ids) == 1:
                return 0
            raise ValueError("Some investments not found or unauthorized")
        for investment in investments:
            apply_delta(session, investment.account_id, investment.cost_basis, user_id=user_id)
            session.delete(investment)
        logger.info("Investments deleted", extra={"user_id": user_id, "ids": ids})
        return len(investments)


def portfolio_totals(investments: Iterable[Investment]) -> dict[str, float]:
    """Invested amount, current value and gain across positions."""

    items = list(investments)
    invested = round(sum(i.cost_basis for i in items), 2)
    value = round(sum(i.current_value for i in items), 2)
    gain = round(value - invested, 2)
    gain_pct = round(gain / invested * 100, 2) if invested else 0.0
    return {"invested": invested, "current_value": value, "gain": gain, "gain_percent": gain_pct}


def value_by_type(investments: Iterable[Investment]) -> dict[str, float]:
    totals: dict[str, float] = {}
    for investment in investments:
        key = investment.investment_type
        totals[key] = round(totals.get(key, 0.0) + investment.current_value, 2)
    return totals


# -- targets ---------------------------------------------------------------


def list_targets(*, user_id: int, session_factory: SessionFactory) -> list[InvestmentTarget]:
    with session_factory() as session:
        return list(
            session.exec(
                select(InvestmentTarget)
                .where(InvestmentTarget.user_id == user_id)
                .order_by(InvestmentTarget.investment_type)
            ).all()
        )


def upsert_target(
    investment_type: str,
    target_amount: float,
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> InvestmentTarget:
    """Create the target for a type, or update it when one exists."""

    if investment_type not in INVESTMENT_TYPES:
        raise ValueError(f"Unknown investment type: {investment_type}")
    if target_amount <= 0:
        raise ValueError("Target amount must be greater than 0")
    with session_factory() as session:
        target = session.exec(
            select(InvestmentTarget).where(
                InvestmentTarget.user_id == user_id,
                InvestmentTarget.investment_type == investment_type,
            )
        ).first()
        if target is None:
            target = InvestmentTarget(
                user_id=user_id, investment_type=investment_type, target_amount=target_amount
            )
        else:
            target.target_amount = target_amount
        session.add(target)
        session.flush()
        logger.info(
            "Investment target saved",
            extra={"user_id": user_id, "investment_type": investment_type},
        )
        return target


def delete_target(target_id: int, *, user_id: int, session_factory: SessionFactory) -> bool:
    with session_factory() as session:
        target = session.exec(
            select(InvestmentTarget).where(
                InvestmentTarget.id == target_id, InvestmentTarget.user_id == user_id
            )
        ).first()
        if target is None:
            return False
        session.delete(target)
        return True


def target_progress(
    targets: Iterable[InvestmentTarget], investments: Iterable[Investment]
) -> list[TargetProgress]:
    """Compare each target with the current value held in that type."""

    current = value_by_type(investments)
    progress: list[TargetProgress] = []
    for target in targets:
        amount = current.get(target.investment_type, 0.0)
        pct = amount / target.target_amount * 100 if target.target_amount > 0 else 0.0
        progress.append(
            TargetProgress(
                target_id=target.id or 0,
                investment_type=target.investment_type,
                target_amount=target.target_amount,
                current_amount=amount,
                progress=round(min(pct, 100.0), 2),
                is_complete=amount >= target.target_amount,
            )
        )
    return progress
