"""Stored website/app credentials."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class PasswordEntry(SQLModel, table=True):
    """Credential record; at-rest protection comes from the SQLCipher toggle."""

    __tablename__: ClassVar[str] = "password_entry"

    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", nullable=False, index=True)
    website_name: str = Field(nullable=False, max_length=128)
    website_url: Optional[str] = Field(default=None, max_length=255)
    username: str = Field(nullable=False, max_length=128)
    password: str = Field(nullable=False, max_length=255)
    transaction_pin: Optional[str] = Field(default=None, max_length=32)
    category: Optional[str] = Field(default=None, max_length=64, index=True)
    notes: Optional[str] = Field(default=None, max_length=500)
    validity: Optional[date] = Field(default=None)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
