"""Password vault entries."""

from __future__ import annotations

from typing import Any, Iterable, Mapping, Optional

from sqlmodel import col, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models import PasswordEntry

logger = get_logger(__name__)

UNCATEGORIZED = "Uncategorized"
PASSWORD_FIELDS = (
    "website_name",
    "website_url",
    "username",
    "password",
    "transaction_pin",
    "category",
    "notes",
    "validity",
)


def _owned(session, entry_id: int, user_id: int) -> Optional[PasswordEntry]:
    return session.exec(
        select(PasswordEntry).where(PasswordEntry.id == entry_id, PasswordEntry.user_id == user_id)
    ).first()


def list_entries(
    *, user_id: int, session_factory: SessionFactory, search: str | None = None
) -> list[PasswordEntry]:
    statement = select(PasswordEntry).where(PasswordEntry.user_id == user_id)
    if search:
        pattern = f"%{search.strip()}%"
        statement = statement.where(
            col(PasswordEntry.website_name).ilike(pattern)
            | col(PasswordEntry.username).ilike(pattern)
            | col(PasswordEntry.website_url).ilike(pattern)
        )
    with session_factory() as session:
        return list(session.exec(statement.order_by(PasswordEntry.website_name)).all())


def get_entry(
    entry_id: int, *, user_id: int, session_factory: SessionFactory
) -> Optional[PasswordEntry]:
    with session_factory() as session:
        return _owned(session, entry_id, user_id)


def create_entry(
    data: Mapping[str, Any], *, user_id: int, session_factory: SessionFactory
) -> PasswordEntry:
    with session_factory() as session:
        values = {key: data[key] for key in PASSWORD_FIELDS if key in data}
        entry = PasswordEntry(user_id=user_id, **values)
        session.add(entry)
        session.flush()
        # never log the secret itself
        logger.info("Vault entry created", extra={"user_id": user_id, "entry_id": entry.id})
        return entry


def update_entry(
    entry_id: int,
    data: Mapping[str, Any],
    *,
    user_id: int,
    session_factory: SessionFactory,
) -> Optional[PasswordEntry]:
    with session_factory() as session:
        entry = _owned(session, entry_id, user_id)
        if entry is None:
            return None
        for key in PASSWORD_FIELDS:
            if key in data:
                setattr(entry, key, data[key])
        session.add(entry)
        logger.info("Vault entry updated", extra={"user_id": user_id, "entry_id": entry_id})
        return entry


def delete_entries(
    entry_ids: Iterable[int], *, user_id: int, session_factory: SessionFactory
) -> int:
    ids = list(dict.fromkeys(entry_ids))
    with session_factory() as session:
        entries = list(
            session.exec(
                select(PasswordEntry).where(
                    col(PasswordEntry.id).in_(ids), PasswordEntry.user_id == user_id
                )
            ).all()
        )
        if len(entries) != len(ids):
            if len(ids) == 1:
                return 0
            raise ValueError("Some password entries not found or unauthorized")
        for entry in entries:
            session.delete(entry)
        logger.info("Vault entries deleted", extra={"user_id": user_id, "ids": ids})
        return len(entries)


def group_by_category(entries: Iterable[PasswordEntry]) -> dict[str, list[PasswordEntry]]:
    """Group entries by category: alphabetical, with ``Uncategorized`` last."""

    groups: dict[str, list[PasswordEntry]] = {}
    for entry in entries:
        groups.setdefault(entry.category or UNCATEGORIZED, []).append(entry)
    ordered = sorted(
        groups, key=lambda name: (name == UNCATEGORIZED, name.lower())
    )
    return {name: groups[name] for name in ordered}
