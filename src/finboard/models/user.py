"""Login accounts; every other table hangs off ``user.id``."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import ClassVar, Optional

from sqlmodel import Field, SQLModel


class User(SQLModel, table=True):
    __tablename__: ClassVar[str] = "user"

    id: Optional[int] = Field(default=None, primary_key=True)
    username: str = Field(nullable=False, unique=True, index=True, max_length=64)
    # argon2 encoded hash, parameters included
    password_hash: str = Field(nullable=False, max_length=255)
    role: str = Field(default="user", max_length=16)
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc), nullable=False
    )
    last_login: Optional[datetime] = None
