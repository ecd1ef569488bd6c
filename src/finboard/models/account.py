"""Bank account model; the balance is kept in step with linked records."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel

ACCOUNT_TYPES = ("SAVINGS", "CURRENT", "SALARY", "FIXED", "OTHER")


class Account(SQLModel, table=True):
    __tablename__: ClassVar[str] = "account"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    holder_name: str = Field(nullable=False, max_length=128)
    account_number: str = Field(nullable=False, unique=True, index=True, max_length=64)
    bank_name: str = Field(nullable=False, max_length=128)
    branch_name: str = Field(default="", max_length=128)
    branch_code: str = Field(default="", max_length=32)
    account_type: str = Field(default="SAVINGS", max_length=16)
    balance: float = Field(default=0.0, nullable=False)
    opening_date: Optional[date] = Field(default=None)
    nickname: Optional[str] = Field(default=None, max_length=64)
    notes: Optional[str] = Field(default=None, max_length=500)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
