"""Money borrowed from a lender, and the repayments made against it."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlalchemy.orm import relationship
from sqlmodel import Field, Relationship, SQLModel

from .debt import STATUS_ACTIVE


class Loan(SQLModel, table=True):
    """A payable: principal borrowed at simple interest."""

    __tablename__: ClassVar[str] = "loan"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    lender_name: str = Field(nullable=False, max_length=128, index=True)
    lender_contact: Optional[str] = Field(default=None, max_length=64)
    lender_email: Optional[str] = Field(default=None, max_length=128)
    amount: float = Field(nullable=False)
    interest_rate: float = Field(default=0.0, nullable=False, description="Annual, percent")
    loan_date: date = Field(nullable=False)
    due_date: Optional[date] = Field(default=None)
    status: str = Field(default=STATUS_ACTIVE, max_length=16, index=True)
    purpose: Optional[str] = Field(default=None, max_length=255)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )

    repayments: list["LoanRepayment"] = Relationship(
        back_populates="loan",
        sa_relationship=relationship(
            "LoanRepayment",
            back_populates="loan",
            cascade="all, delete-orphan",
            order_by="LoanRepayment.repayment_date",
        ),
    )

    @property
    def counterparty(self) -> str:
        return self.lender_name

    @property
    def start_date(self) -> date:
        return self.loan_date


class LoanRepayment(SQLModel, table=True):
    __tablename__: ClassVar[str] = "loan_repayment"

    id: Optional[int] = Field(default=None, primary_key=True)
    loan_id: int = Field(foreign_key="loan.id", nullable=False, index=True)
    amount: float = Field(nullable=False)
    repayment_date: date = Field(nullable=False)
    notes: Optional[str] = Field(default=None, max_length=255)

    loan: Optional["Loan"] = Relationship(
        back_populates="repayments",
        sa_relationship=relationship("Loan", back_populates="repayments"),
    )
