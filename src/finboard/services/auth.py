"""User registration and credential checks.

Passwords are stored as argon2 hashes. Hashes created with older argon2
parameters are upgraded transparently on the next successful login.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional

from argon2 import PasswordHasher
from argon2.exceptions import InvalidHash, VerificationError
from sqlmodel import Session, select

from ..infra.database import SessionFactory
from ..logging_config import get_logger
from ..models.user import User

logger = get_logger(__name__)

ROLES = ("user", "admin")
MIN_PASSWORD_LENGTH = 8

_argon2 = PasswordHasher()


def _checked_hash(password: str) -> str:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    return _argon2.hash(password)


def _by_username(session: Session, username: str) -> Optional[User]:
    return session.exec(select(User).where(User.username == username)).first()


def get_user(user_id: int, *, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        return session.get(User, user_id)


def get_user_by_username(username: str, *, session_factory: SessionFactory) -> Optional[User]:
    with session_factory() as session:
        return _by_username(session, username.strip())


def create_user(
    *,
    username: str,
    password: str,
    role: str = "user",
    session_factory: SessionFactory,
) -> User:
    """Register ``username``; raises ``ValueError`` on a taken name or weak password."""

    name = username.strip()
    if not name:
        raise ValueError("Username is required")
    role = (role or "user").lower()
    if role not in ROLES:
        raise ValueError(f"Invalid role: {role}")
    digest = _checked_hash(password)

    with session_factory() as session:
        if _by_username(session, name) is not None:
            raise ValueError("Username already exists")
        user = User(username=name, password_hash=digest, role=role)
        session.add(user)
        session.flush()
        logger.info("User created", extra={"user_id": user.id, "role": role})
    return user


def authenticate(*, username: str, password: str, session_factory: SessionFactory) -> Optional[User]:
    """Return the matching user and stamp ``last_login``, or None on bad credentials."""

    name = username.strip()
    if not name:
        return None

    with session_factory() as session:
        user = _by_username(session, name)
        if user is None:
            logger.warning("Login failed: unknown user")
            return None
        try:
            _argon2.verify(user.password_hash, password)
        except (VerificationError, InvalidHash):
            logger.warning("Login failed: bad password", extra={"user_id": user.id})
            return None

        if _argon2.check_needs_rehash(user.password_hash):
            user.password_hash = _argon2.hash(password)
        user.last_login = datetime.now(timezone.utc)
        session.add(user)
    return user


def reset_password(*, user_id: int, password: str, session_factory: SessionFactory) -> User:
    digest = _checked_hash(password)
    with session_factory() as session:
        user = session.get(User, user_id)
        if user is None:
            raise ValueError("User not found")
        user.password_hash = digest
        session.add(user)
    logger.info("Password reset", extra={"user_id": user_id})
    return user
