"""Vault entry form."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..forms import FormMixin


@dataclass(slots=True)
class PasswordEntryForm(FormMixin):
    website_name: Any = ""
    website_url: Any = None
    username: Any = ""
    password: Any = ""
    transaction_pin: Any = None
    category: Any = None
    notes: Any = None
    validity: Any = None
    errors: Dict[str, List[str]] = field(default_factory=dict, init=False)

    def validate(self) -> bool:
        self.errors.clear()
        self.website_name = self._text(
            "website_name", self.website_name, required=True, max_length=128, label="Website name"
        )
        url = self._text("website_url", self.website_url, max_length=255)
        if url and not url.lower().startswith(("http://", "https://")):
            url = f"https://{url}"
        self.website_url = url or None
        self.username = self._text("username", self.username, required=True, max_length=128, label="Username")
        # secrets are stored exactly as typed
        if not self.password:
            self._add_error("password", "Password is required.")
        elif len(str(self.password)) > 255:
            self._add_error("password", "Password must be at most 255 characters.")
        pin = self._text("transaction_pin", self.transaction_pin, max_length=32)
        if pin and not pin.isdigit():
            self._add_error("transaction_pin", "PIN must contain digits only.")
        self.transaction_pin = pin or None
        self.category = self._text("category", self.category, max_length=64) or None
        self.notes = self._text("notes", self.notes, max_length=500) or None
        self.validity = self._parse_date("validity", self.validity, required=False)
        return not self.errors
