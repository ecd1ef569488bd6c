"""Money received into (optionally) a tracked account."""

from __future__ import annotations

from datetime import date
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class Income(SQLModel, table=True):
    __tablename__: ClassVar[str] = "income"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    account_id: Optional[int] = Field(default=None, foreign_key="account.id", index=True)
    category: str = Field(default="Uncategorized", max_length=64, index=True)
    amount: float = Field(nullable=False)
    description: str = Field(default="", max_length=255)
    received_on: date = Field(nullable=False, index=True)
    source: str = Field(default="", max_length=128)
