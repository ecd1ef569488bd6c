"""Expense and income forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Dict, List

from ..forms import FormMixin

PAYMENT_METHODS = ("", "CASH", "CARD", "BANK_TRANSFER", "UPI", "CHEQUE", "OTHER")


def _check_not_future(form: FormMixin, field_name: str, value: Any) -> None:
    # one day of slack for timezone differences between client and server
    if isinstance(value, date) and value > date.today() + timedelta(days=1):
        form._add_error(field_name, "Date cannot be in the future.")


@dataclass(slots=True)
class ExpenseForm(FormMixin):
    account_id: Any = None
    category: Any = ""
    amount: Any = None
    description: Any = ""
    occurred_on: Any = None
    payment_method: Any = ""
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.account_id = self._parse_id("account_id", self.account_id)
        self.category = self._text("category", self.category, max_length=64) or "Uncategorized"
        self.amount = self._parse_currency("amount", self.amount)
        self.description = self._text("description", self.description, max_length=255)
        self.occurred_on = self._parse_date("occurred_on", self.occurred_on)
        _check_not_future(self, "occurred_on", self.occurred_on)
        method = (str(self.payment_method or "").strip().upper())
        if method not in PAYMENT_METHODS:
            self._add_error("payment_method", "Choose a valid payment method.")
        self.payment_method = method
        return not self.errors


@dataclass(slots=True)
class IncomeForm(FormMixin):
    account_id: Any = None
    category: Any = ""
    amount: Any = None
    description: Any = ""
    received_on: Any = None
    source: Any = ""
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.account_id = self._parse_id("account_id", self.account_id)
        self.category = self._text("category", self.category, max_length=64) or "Uncategorized"
        self.amount = self._parse_currency("amount", self.amount)
        self.description = self._text("description", self.description, max_length=255)
        self.received_on = self._parse_date("received_on", self.received_on)
        _check_not_future(self, "received_on", self.received_on)
        self.source = self._text("source", self.source, max_length=128)
        return not self.errors
