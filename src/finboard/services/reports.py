"""Reporting utilities: dashboard totals, monthly trend, charts and the PDF report."""

from __future__ import annotations

from datetime import date, datetime
from pathlib import Path
from typing import Any, Iterable, Protocol

import matplotlib

matplotlib.use("Agg")

import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
from matplotlib.backends.backend_pdf import PdfPages  # noqa: E402
from matplotlib.figure import Figure  # noqa: E402

from ..infra.database import SessionFactory  # noqa: E402
from ..logging_config import get_logger  # noqa: E402
from ..models import Expense, Income  # noqa: E402
from . import accounts, cashflow, debts, investments  # noqa: E402
from .budgeting import month_bounds  # noqa: E402

logger = get_logger(__name__)

_PALETTE = "tab20c"
_MUTED = "#6B7280"
_INK = "#1F2937"


class ReportRenderer(Protocol):
    """Anything that can write a finished figure to ``output_path``."""

    def render(self, figure: Figure, *, output_path: Path) -> None: ...


def financial_summary(
    *, user_id: int, session_factory: SessionFactory, today: date | None = None
) -> dict[str, float]:
    """Headline figures for the dashboard.

    Net worth counts account balances, the current value of investments and
    what others still owe, less what is still owed on loans.
    """

    today = today or date.today()
    start, end = month_bounds(today.year, today.month)

    balance = accounts.total_balance(user_id=user_id, session_factory=session_factory)
    portfolio = investments.portfolio_totals(
        investments.list_investments(user_id=user_id, session_factory=session_factory)
    )
    receivable = debts.summarize(
        debts.list_debts(user_id=user_id, session_factory=session_factory), as_of=today
    )
    payable = debts.summarize(
        debts.list_loans(user_id=user_id, session_factory=session_factory), as_of=today
    )
    month_income = cashflow.total_for(
        cashflow.list_records(
            cashflow.INCOME, user_id=user_id, session_factory=session_factory, start=start, end=end
        )
    )
    month_expenses = cashflow.total_for(
        cashflow.list_records(
            cashflow.EXPENSE, user_id=user_id, session_factory=session_factory, start=start, end=end
        )
    )
    net_worth = balance + portfolio["current_value"] + receivable["remaining"] - payable["remaining"]
    return {
        "total_balance": balance,
        "investments_invested": portfolio["invested"],
        "investments_value": portfolio["current_value"],
        "investments_gain": portfolio["gain"],
        "debts_receivable": float(receivable["remaining"]),
        "loans_payable": float(payable["remaining"]),
        "month_income": month_income,
        "month_expenses": month_expenses,
        "month_net": round(month_income - month_expenses, 2),
        "net_worth": round(net_worth, 2),
    }


def _monthly_totals(records: Iterable[Any], date_field: str, index: pd.PeriodIndex) -> pd.Series:
    rows = [(getattr(record, date_field), record.amount) for record in records]
    if not rows:
        return pd.Series(0.0, index=index)
    data = pd.DataFrame(rows, columns=["date", "amount"])
    periods = pd.to_datetime(data["date"]).dt.to_period("M")
    return data.groupby(periods)["amount"].sum().reindex(index, fill_value=0.0)


def monthly_trend(
    *,
    expenses: Iterable[Expense],
    incomes: Iterable[Income],
    months: int = 6,
    today: date | None = None,
) -> pd.DataFrame:
    """Income, expenses and net per calendar month, oldest first.

    Months without activity are present with zeros.
    """

    if months < 1:
        raise ValueError("months must be at least 1")
    today = today or date.today()
    index = pd.period_range(
        end=pd.Period(year=today.year, month=today.month, freq="M"), periods=months, freq="M"
    )
    frame = pd.DataFrame(index=index)
    frame["income"] = _monthly_totals(incomes, "received_on", index)
    frame["expenses"] = _monthly_totals(expenses, "occurred_on", index)
    frame["net"] = frame["income"] - frame["expenses"]
    frame.index.name = "month"
    return frame.round(2)


def trend_records(frame: pd.DataFrame) -> list[dict[str, Any]]:
    return [
        {
            "month": str(period),
            "income": float(row["income"]),
            "expenses": float(row["expenses"]),
            "net": float(row["net"]),
        }
        for period, row in frame.iterrows()
    ]


def _draw_donut(ax, labels: list[str], sizes: list[float]) -> None:
    # tab20c has 20 shades; pie() cycles them when there are more categories
    wedges, _, _ = ax.pie(
        sizes,
        colors=plt.get_cmap(_PALETTE).colors,
        startangle=90,
        counterclock=False,
        autopct=lambda pct: f"{pct:.0f}%" if pct >= 5 else "",
        pctdistance=0.8,
        wedgeprops={"width": 0.4, "edgecolor": "white"},
        textprops={"color": "white", "fontsize": 8},
    )
    ax.annotate(f"{sum(sizes):,.2f}", (0, 0), ha="center", va="center", fontsize=17, weight="bold", color=_INK)
    ax.annotate("spent", (0, -0.15), ha="center", va="center", fontsize=10, color=_MUTED)
    rows = [f"{label}  {size:,.2f}" for label, size in zip(labels, sizes)]
    ax.legend(wedges, rows, frameon=False, loc="upper left", bbox_to_anchor=(1.0, 1.0))
    ax.set_aspect("equal")


def build_spending_chart(*, expenses: Iterable[Expense]) -> Figure:
    """Donut of expense totals by category, grand total in the hole."""

    breakdown = cashflow.totals_by_category(expenses)
    fig, ax = plt.subplots(figsize=(9, 6))
    ax.set_title("Spending by Category", fontsize=15, weight="bold")
    if breakdown:
        _draw_donut(ax, [row["category"] for row in breakdown], [float(row["amount"]) for row in breakdown])
    else:
        ax.set_axis_off()
        ax.text(0.5, 0.5, "Nothing spent yet", transform=ax.transAxes, ha="center", color=_MUTED)
    fig.tight_layout()
    return fig


def build_trend_chart(frame: pd.DataFrame) -> Figure:
    """Grouped income/expense bars with the net as a line."""

    fig, ax = plt.subplots(figsize=(10, 5))
    labels = [str(period) for period in frame.index]
    positions = range(len(labels))
    width = 0.4
    ax.bar([p - width / 2 for p in positions], frame["income"], width, label="Income", color="#10B981")
    ax.bar([p + width / 2 for p in positions], frame["expenses"], width, label="Expenses", color="#EF4444")
    ax.plot(list(positions), frame["net"], marker="o", color=_INK, label="Net")
    ax.axhline(0, color="#9CA3AF", linewidth=0.8)
    ax.set_xticks(list(positions))
    ax.set_xticklabels(labels, rotation=45, ha="right")
    ax.set_title("Monthly Cash Flow", fontsize=14, fontweight="bold")
    ax.legend()
    fig.tight_layout()
    return fig


class _PngRenderer:
    def render(self, figure: Figure, *, output_path: Path) -> None:
        figure.savefig(output_path, format="png", dpi=120, bbox_inches="tight")


def export_spending_png(
    *, expenses: Iterable[Expense], output_path: Path, renderer: ReportRenderer | None = None
) -> Path:
    fig = build_spending_chart(expenses=expenses)
    try:
        output_path.parent.mkdir(parents=True, exist_ok=True)
        (renderer or _PngRenderer()).render(fig, output_path=output_path)
    finally:
        plt.close(fig)
    return output_path


def _summary_page(summary: dict[str, float], generated: datetime) -> Figure:
    fig = plt.figure(figsize=(8.27, 11.69))
    fig.text(0.1, 0.92, "Finboard Financial Report", fontsize=20, fontweight="bold")
    fig.text(0.1, 0.88, f"Generated {generated:%Y-%m-%d %H:%M}", fontsize=10, color="#666")
    y = 0.8
    for key, value in summary.items():
        fig.text(0.1, y, key.replace("_", " ").title(), fontsize=12)
        fig.text(0.7, y, f"{value:,.2f}", fontsize=12, ha="right")
        y -= 0.04
    return fig


def export_pdf_report(
    *,
    user_id: int,
    session_factory: SessionFactory,
    output_path: Path,
    months: int = 6,
    today: date | None = None,
) -> Path:
    """Write a multi-page PDF: summary figures, spending breakdown and monthly trend."""

    today = today or date.today()
    summary = financial_summary(user_id=user_id, session_factory=session_factory, today=today)
    expenses = cashflow.list_records(cashflow.EXPENSE, user_id=user_id, session_factory=session_factory)
    incomes = cashflow.list_records(cashflow.INCOME, user_id=user_id, session_factory=session_factory)
    frame = monthly_trend(expenses=expenses, incomes=incomes, months=months, today=today)

    output_path.parent.mkdir(parents=True, exist_ok=True)
    figures = [
        _summary_page(summary, datetime.now()),
        build_spending_chart(expenses=expenses),
        build_trend_chart(frame),
    ]
    with PdfPages(output_path) as pdf:
        for fig in figures:
            pdf.savefig(fig)
            plt.close(fig)
        info = pdf.infodict()
        info["Title"] = "Finboard Financial Report"
    logger.info("PDF report written", extra={"user_id": user_id, "path": str(output_path)})
    return output_path
