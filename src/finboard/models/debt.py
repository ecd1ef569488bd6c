"""Money lent to someone else, and the repayments received for it."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

STATUS_ACTIVE = "ACTIVE"
STATUS_PARTIALLY_PAID = "PARTIALLY_PAID"
STATUS_FULLY_PAID = "FULLY_PAID"
STATUSES = (STATUS_ACTIVE, STATUS_PARTIALLY_PAID, STATUS_FULLY_PAID)


class Debt(SQLModel, table=True):
    """A receivable: principal lent out at simple interest."""

    __tablename__: ClassVar[str] = "debt"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    borrower_name: str = Field(nullable=False, max_length=128, index=True)
    borrower_contact: Optional[str] = Field(default=None, max_length=64)
    borrower_email: Optional[str] = Field(default=None, max_length=128)
    amount: float = Field(nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False, description="Annual, percent")
    lent_date: date = Field(nullable=False)
    due_date: Optional[date] = Field(default=None)
    status: str = Field(default=STATUS_ACTIVE, max_length=16, index=True)
    purpose: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )

    repayments: list["DebtRepayment"] = Relationship(
        back_populates="debt",
        sa_relationship=relationship(
            "DebtRepayment",
            back_populates="debt",
            cascade="all, delete-orphan",
            order_by="DebtRepayment.repayment_date",
        ),
    )

    @property
    def counterparty(self) -> str:
        return self.borrower_name

    @property
    def start_date(self) -> date:
        return self.lent_date


class DebtRepayment(SQLModel, table=True):
    __tablename__: ClassVar[str] = "debt_repayment"

    id: Optional[int] = Field(default=None, primary_key=True)
    debt_id: int = Field(foreign_key="debt.id", nullable=False, index=True)
    amount: float = Field(nullable=False)
    repayment_date: date = Field(nullable=False)
    notes: Optional[str] = Field(default=None, max_length=255)

    debt: Optional["Debt"] = Relationship(
        back_populates="repayments",
        sa_relationship=relationship("Debt", back_populates="repayments"),
    )
