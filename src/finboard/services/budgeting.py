"""Budget periods and planned-versus-actual spend."""

from __future__ import annotations

from calendar import monthrange
from dataclasses import dataclass
from datetime import date
from typing import Any, Iterable, Mapping, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import selectinload
from sqlmodel import Session, col, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import Budget, BudgetLine, Expense

logger = get_logger(__name__)


@dataclass(slots=True)
class BudgetVariance:
    """Planned and actual spend for one category."""

    category: str
    planned: float
    actual: float

    @property
    def delta(self) -> float:
        return round(self.actual - self.planned, 2)

    @property
    def over_budget(self) -> bool:
        return self.actual > self.planned

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "planned": self.planned,
            "actual": self.actual,
            "delta": self.delta,
            "over_budget": self.over_budget,
        }


def month_bounds(year: int, month: int) -> tuple[date, date]:
    return date(year, month, 1), date(year, month, monthrange(year, month)[1])


def _owned(session: Session, budget_id: int, user_id: int) -> Optional[Budget]:
    return session.exec(
        select(Budget)
        .options(selectinload(Budget.lines))  # type: ignore[arg-type]
        .where(Budget.id == budget_id, Budget.user_id == user_id)
    ).first()


def _build_lines(lines: Sequence[Mapping[str, Any]], user_id: int) -> list[BudgetLine]:
    seen: set[str] = set()
    built = []
    for line in lines:
        category = line["category"].strip()
        if category.lower() in seen:
            raise ValueError(f"Duplicate budget category: {category}")
        seen.add(category.lower())
        built.append(
            BudgetLine(
                user_id=user_id,
                category=category,
                planned_amount=float(line["planned_amount"]),
                rollover_enabled=bool(line.get("rollover_enabled", False)),
            )
        )
    return built


def list_budgets(*, user_id: int, session_factory: SessionFactory) -> list[Budget]:
    with session_factory() as session:
        return list(
            session.exec(
                select(Budget)
                .where(Budget.user_id == user_id)
                .options(selectinload(Budget.lines))  # type: ignore[arg-type]
                .order_by(col(Budget.period_start).desc())
            ).all()
        )


def get_budget(budget_id: int, *, user_id: int, session_factory: SessionFactory) -> Optional[Budget]:
    with session_factory() as session:
        return _owned(session, budget_id, user_id)


def create_budget(
    *,
    period_start: date,
    period_end: date,
    label: str = "",
    lines: Sequence[Mapping[str, Any]] = (),
    user_id: int,
    session_factory: SessionFactory,
) -> Budget:
    """Create a budget with its category lines."""

    if period_end < period_start:
        raise ValueError("Budget period must end on or after its start")
    with session_factory() as session:
        overlapping = session.exec(
            select(Budget).where(
                Budget.user_id == user_id,
                Budget.period_start == period_start,
                Budget.period_end == period_end,
            )
        ).first()
        if overlapping is not None:
            raise ValueError("A budget already exists for this period")
        budget = Budget(
            user_id=user_id, period_start=period_start, period_end=period_end, label=label
        )
        budget.lines = _build_lines(lines, user_id)
        session.add(budget)
        session.flush()
        logger.info(
            "Budget created",
            extra={"user_id": user_id, "budget_id": budget.id, "lines": len(budget.lines)},
        )
        return budget


def replace_lines(
    budget_id: int,
    lines: Sequence[Mapping[str, Any]],
    *,
    user_id: int,
    session_factory: SessionFactory,
    label: str | None = None,
) -> Optional[Budget]:
    """Swap a budget's lines for a new set."""

    with session_factory() as session:
        budget = _owned(session, budget_id, user_id)
        if budget is None:
            return None
        budget.lines = _build_lines(lines, user_id)
        if label is not None:
            budget.label = label
        session.add(budget)
        session.flush()
        logger.info("Budget lines replaced", extra={"budget_id": budget_id})
        return budget


def delete_budget(budget_id: int, *, user_id: int, session_factory: SessionFactory) -> bool:
    with session_factory() as session:
        budget = _owned(session, budget_id, user_id)
        if budget is None:
            return False
        session.delete(budget)
        logger.info("Budget deleted", extra={"budget_id": budget_id})
        return True


def actual_spend(
    session: Session, *, user_id: int, start: date, end: date
) -> dict[str, float]:
    """Sum expenses per category within ``[start, end]``."""

    rows = session.exec(
        select(Expense.category, func.sum(Expense.amount))
        .where(
            Expense.user_id == user_id,
            col(Expense.occurred_on) >= start,
            col(Expense.occurred_on) <= end,
        )
        .group_by(Expense.category)
    ).all()
    return {category: float(total or 0.0) for category, total in rows}


def compute_variances(
    *, planned: Iterable[tuple[str, float]], actual: Mapping[str, float]
) -> list[BudgetVariance]:
    """Merge planned lines with actual spend; unplanned categories show up too."""

    planned_map: dict[str, float] = {}
    for category, amount in planned:
        planned_map[category] = planned_map.get(category, 0.0) + amount
    all_categories = set(planned_map) | set(actual)

    variances = []
    for category in sorted(all_categories):
        variances.append(
            BudgetVariance(
                category=category,
                planned=round(planned_map.get(category, 0.0), 2),
                actual=round(actual.get(category, 0.0), 2),
            )
        )
    return variances


def budget_variances(
    budget_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[list[BudgetVariance]]:
    with session_factory() as session:
        budget = _owned(session, budget_id, user_id)
        if budget is None:
            return None
        actual = actual_spend(
            session, user_id=user_id, start=budget.period_start, end=budget.period_end
        )
        return compute_variances(
            planned=[(line.category, line.planned_amount) for line in budget.lines],
            actual=actual,
        )
