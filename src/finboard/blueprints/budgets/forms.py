"""Budget forms with nested category lines."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ...services.budgeting import month_bounds
from ..forms import FormMixin


def _clean_lines(form: FormMixin, raw_lines: Any) -> list[dict[str, Any]]:
    if not isinstance(raw_lines, list):
        form._add_error("lines", "Lines must be a list.")
        return []
    cleaned: list[dict[str, Any]] = []
    seen: set[str] = set()
    for index, raw in enumerate(raw_lines):
        key = f"lines.{index}"
        if not isinstance(raw, dict):
            form._add_error(key, "Each line must be an object.")
            continue
        category = form._text(key, raw.get("category"), required=True, max_length=64, label="Category")
        if category.lower() in seen:
            form._add_error(key, f"Category {category} appears more than once.")
        seen.add(category.lower())
        planned = form._parse_currency(key, raw.get("planned_amount"), minimum=Decimal("0"))
        cleaned.append(
            {
                "category": category,
                "planned_amount": planned,
                "rollover_enabled": bool(raw.get("rollover_enabled", False)),
            }
        )
    return cleaned


@dataclass(slots=True)
class BudgetForm(FormMixin):
    """A budget period given either as explicit dates or as ``month: YYYY-MM``."""

    period_start: Any = None
    period_end: Any = None
    month: Any = None
    label: Any = ""
    lines: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.label = self._text("label", self.label, max_length=64)

        if self.month and not self.period_start and not self.period_end:
            try:
                year, month = (int(part) for part in str(self.month).split("-", 1))
                self.period_start, self.period_end = month_bounds(year, month)
            except ValueError:
                self._add_error("month", "Enter a valid month (YYYY-MM).")
        else:
            self.period_start = self._parse_date("period_start", self.period_start)
            self.period_end = self._parse_date("period_end", self.period_end)
        if isinstance(self.period_start, date) and isinstance(self.period_end, date):
            if self.period_end < self.period_start:
                self._add_error("period_end", "Period end cannot be before its start.")

        self.lines = _clean_lines(self, self.lines or [])
        return not self.errors


@dataclass(slots=True)
class BudgetLinesForm(FormMixin):
    """Replacement lines (and optionally a new label) for an existing budget."""

    label: Any = None
    lines: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.label = self._text("label", self.label, max_length=64) or None
        self.lines = _clean_lines(self, self.lines or [])
        return not self.errors
