"""Bank account form."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ...models.account import ACCOUNT_TYPES
from ..forms import FormMixin


@dataclass(slots=True)
class AccountForm(FormMixin):
    """Represents account inputs and associated validation errors."""

    holder_name: Any = ""
    account_number: Any = ""
    bank_name: Any = ""
    branch_name: Any = ""
    branch_code: Any = ""
    account_type: Any = "SAVINGS"
    balance: Any = None
    opening_date: Any = None
    nickname: Any = None
    notes: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()

        self.holder_name = self._text(
            "holder_name", self.holder_name, required=True, max_length=128, label="Holder name"
        )
        self.account_number = self._text(
            "account_number", self.account_number, required=True, max_length=64, label="Account number"
        ).replace(" ", "")
        if self.account_number and not self.account_number.replace("-", "").isalnum():
            self._add_error("account_number", "Account number may only contain letters, digits and dashes.")
        self.bank_name = self._text("bank_name", self.bank_name, required=True, max_length=128, label="Bank name")
        self.branch_name = self._text("branch_name", self.branch_name, max_length=128)
        self.branch_code = self._text("branch_code", self.branch_code, max_length=32)
        self.account_type = self._choice("account_type", self.account_type, ACCOUNT_TYPES, default="SAVINGS")

        balance = self._parse_currency("balance", self.balance, minimum=Decimal("0"), required=False)
        self.balance = 0.0 if balance is None else balance
        self.opening_date = self._parse_date("opening_date", self.opening_date, required=False)
        if isinstance(self.opening_date, date) and self.opening_date > date.today():
            self._add_error("opening_date", "Opening date cannot be in the future.")

        self.nickname = self._text("nickname", self.nickname, max_length=64) or None
        self.notes = self._text("notes", self.notes, max_length=500) or None
        return not self.errors
