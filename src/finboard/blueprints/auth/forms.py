"""Registration and login forms."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List

from ...services.auth import MIN_PASSWORD_LENGTH
from ..forms import FormMixin


@dataclass(slots=True)
class LoginForm(FormMixin):
    username: str = ""
    password: str = ""
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.username = self._text("username", self.username, required=True, label="Username")
        if not self.password:
            self._add_error("password", "Password is required.")
        return not self.errors


@dataclass(slots=True)
class RegistrationForm(FormMixin):
    """New user details; the password is confirmed before hashing."""

    username: str = ""
    password: str = ""
    confirm_password: str = ""
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.username = self._text(
            "username", self.username, required=True, max_length=64, label="Username"
        )
        if len(self.password or "") < MIN_PASSWORD_LENGTH:
            self._add_error(
                "password", f"Password must be at least {MIN_PASSWORD_LENGTH} characters."
            )
        if self.password != self.confirm_password:
            self._add_error("confirm_password", "Passwords do not match.")
        return not self.errors
