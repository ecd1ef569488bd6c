"""Debt, loan and repayment forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ..forms import FormMixin


def _clean_terms(form: Any, start_field: str) -> None:
    """Validate amount, rate and dates shared by debts and loans."""

    form.account_id = form._parse_id("account_id", form.account_id)
    form.amount = form._parse_currency("amount", form.amount)
    rate = form._parse_currency(
        "interest_rate",
        form.interest_rate,
        minimum=Decimal("0"),
        maximum=Decimal("100"),
        required=False,
    )
    form.interest_rate = 0.0 if rate is None else rate
    start = form._parse_date(start_field, getattr(form, start_field))
    setattr(form, start_field, start)
    form.due_date = form._parse_date("due_date", form.due_date, required=False)
    if isinstance(start, date) and isinstance(form.due_date, date) and form.due_date < start:
        form._add_error("due_date", "Due date cannot be before the start date.")
    form.purpose = form._text("purpose", form.purpose, max_length=255) or None
    form.notes = form._text("notes", form.notes, max_length=500) or None


@dataclass(slots=True)
class DebtForm(FormMixin):
    """Money lent to someone else."""

    account_id: Any = None
    borrower_name: Any = ""
    borrower_contact: Any = None
    borrower_email: Any = None
    amount: Any = None
    interest_rate: Any = None
    lent_date: Any = None
    due_date: Any = None
    purpose: Any = None
    notes: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.borrower_name = self._text(
            "borrower_name", self.borrower_name, required=True, max_length=128, label="Borrower name"
        )
        self.borrower_contact = self._text("borrower_contact", self.borrower_contact, max_length=64) or None
        self.borrower_email = self._text("borrower_email", self.borrower_email, max_length=128) or None
        self._check_email("borrower_email", self.borrower_email or "")
        _clean_terms(self, "lent_date")
        return not self.errors


@dataclass(slots=True)
class LoanForm(FormMixin):
    """Money borrowed from someone else."""

    account_id: Any = None
    lender_name: Any = ""
    lender_contact: Any = None
    lender_email: Any = None
    amount: Any = None
    interest_rate: Any = None
    loan_date: Any = None
    due_date: Any = None
    purpose: Any = None
    notes: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.lender_name = self._text(
            "lender_name", self.lender_name, required=True, max_length=128, label="Lender name"
        )
        self.lender_contact = self._text("lender_contact", self.lender_contact, max_length=64) or None
        self.lender_email = self._text("lender_email", self.lender_email, max_length=128) or None
        self._check_email("lender_email", self.lender_email or "")
        _clean_terms(self, "loan_date")
        return not self.errors


@dataclass(slots=True)
class RepaymentForm(FormMixin):
    amount: Any = None
    repayment_date: Any = None
    notes: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.amount = self._parse_currency("amount", self.amount)
        self.repayment_date = self._parse_date("repayment_date", self.repayment_date)
        self.notes = self._text("notes", self.notes, max_length=255) or None
        return not self.errors
