"""Portfolio models."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, SQLModel

INVESTMENT_TYPES = (
    "STOCKS",
    "CRYPTO",
    "MUTUAL_FUNDS",
    "BONDS",
    "REAL_ESTATE",
    "GOLD",
    "FIXED_DEPOSIT",
    "PROVIDENT_FUNDS",
    "SAFE_KEEPINGS",
    "OTHER",
)

# Types recorded as a single lump sum; quantity is informational only.
LUMP_SUM_TYPES = frozenset({"FIXED_DEPOSIT", "PROVIDENT_FUNDS", "SAFE_KEEPINGS"})


class Investment(SQLModel, table=True):
    """A position bought from (optionally) a tracked account."""

    __tablename__: ClassVar[str] = "investment"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    name: str = Field(nullable=False, max_length=128)
    investment_type: str = Field(default="STOCKS", max_length=32, index=True)
    symbol: Optional[str] = Field(default=None, max_length=32)
    quantity: float = Field(default=1.0, nullable=False)
    purchase_price: float = Field(nullable=False)
    current_price: float = Field(nullable=False)
    purchase_date: date = Field(nullable=False)
    interest_rate: Optional[float] = Field(default=None)
    maturity_date: Optional[date] = Field(default=None)
    notes: Optional[str] = Field(default=None, max_length=500)

    @property
    def cost_basis(self) -> float:
        """Amount that left the funding account when the position was opened."""
        if self.investment_type in LUMP_SUM_TYPES:
            return float(self.purchase_price)
        return float(self.quantity) * float(self.purchase_price)

    @property
    def current_value(self) -> float:
        if self.investment_type in LUMP_SUM_TYPES:
            return float(self.current_price)
        return float(self.quantity) * float(self.current_price)


class InvestmentTarget(SQLModel, table=True):
    """Savings goal for one investment type."""

    __tablename__: ClassVar[str] = "investment_target"
    __table_args__ = (UniqueConstraint("user_id", "investment_type"),)

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    investment_type: str = Field(nullable=False, max_length=32)
    target_amount: float = Field(nullable=False)
