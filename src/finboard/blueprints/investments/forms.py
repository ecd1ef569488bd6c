"""Investment and investment-target forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from ...models.investment import INVESTMENT_TYPES, LUMP_SUM_TYPES
from ..forms import FormMixin


@dataclass(slots=True)
class InvestmentForm(FormMixin):
    """Represents investment inputs and associated validation errors."""

    account_id: Any = None
    name: Any = ""
    investment_type: Any = "STOCKS"
    symbol: Any = None
    quantity: Any = None
    purchase_price: Any = None
    current_price: Any = None
    purchase_date: Any = None
    interest_rate: Any = None
    maturity_date: Any = None
    notes: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()

        self.account_id = self._parse_id("account_id", self.account_id)
        self.name = self._text("name", self.name, required=True, max_length=128, label="Name")
        self.investment_type = self._choice(
            "investment_type", self.investment_type, INVESTMENT_TYPES, default="STOCKS"
        )
        self.symbol = (self._text("symbol", self.symbol, max_length=32).upper()) or None

        # lump-sum holdings have no meaningful unit count
        if self.investment_type in LUMP_SUM_TYPES and self.quantity in (None, ""):
            self.quantity = 1
        quantity = self._parse_currency("quantity", self.quantity, minimum=Decimal("0.00000001"))
        self.quantity = quantity
        self.purchase_price = self._parse_currency("purchase_price", self.purchase_price)
        current = self._parse_currency(
            "current_price", self.current_price, minimum=Decimal("0"), required=False
        )
        self.current_price = self.purchase_price if current is None else current

        self.purchase_date = self._parse_date("purchase_date", self.purchase_date)
        self.interest_rate = self._parse_currency(
            "interest_rate",
            self.interest_rate,
            minimum=Decimal("0"),
            maximum=Decimal("100"),
            required=False,
        )
        self.maturity_date = self._parse_date("maturity_date", self.maturity_date, required=False)
        if isinstance(self.maturity_date, date) and isinstance(self.purchase_date, date):
            if self.maturity_date < self.purchase_date:
                self._add_error("maturity_date", "Maturity date cannot be before the purchase date.")
        self.notes = self._text("notes", self.notes, max_length=500) or None
        return not self.errors


@dataclass(slots=True)
class TargetForm(FormMixin):
    investment_type: Any = ""
    target_amount: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.investment_type = self._choice(
            "investment_type", self.investment_type, INVESTMENT_TYPES, default=""
        )
        self.target_amount = self._parse_currency("target_amount", self.target_amount)
        return not self.errors
