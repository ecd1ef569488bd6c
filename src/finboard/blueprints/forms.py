"""Parsing helpers shared by the blueprint forms."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import fields
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Iterable, List, Sequence


class FormMixin:
    """Validation helpers for dataclass forms.

    Subclasses are ``@dataclass(slots=True)`` with an ``errors`` field and a
    ``validate()`` method that replaces raw attribute values with parsed ones.
    """

    __slots__ = ()

    errors: Dict[str, List[str]]

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]):
        """Create a form populated from request data; unknown keys are ignored."""

        names = {f.name for f in fields(cls) if f.init}  # type: ignore[arg-type]
        return cls(**{key: value for key, value in data.items() if key in names})

    def cleaned(self) -> dict[str, Any]:
        """Return parsed values keyed by field name (call after ``validate``)."""

        return {f.name: getattr(self, f.name) for f in fields(self) if f.init}  # type: ignore[arg-type]

    def _add_error(self, field: str, message: str) -> None:
        self.errors.setdefault(field, []).append(message)

    def _text(
        self,
        field: str,
        value: Any,
        *,
        required: bool = False,
        max_length: int | None = None,
        label: str = "This field",
    ) -> str:
        text = "" if value is None else str(value).strip()
        if required and not text:
            self._add_error(field, f"{label} is required.")
        elif max_length is not None and len(text) > max_length:
            self._add_error(field, f"{label} must be at most {max_length} characters.")
        return text

    def _parse_currency(
        self,
        field: str,
        value: Any,
        *,
        minimum: Decimal = Decimal("0.01"),
        maximum: Decimal | None = None,
        required: bool = True,
    ) -> float | None:
        """Parse a money or percentage value, storing errors when parsing fails."""

        if value is None or value == "":
            if required:
                self._add_error(field, "This field is required.")
            return None
        if isinstance(value, bool):
            self._add_error(field, "Enter a valid number.")
            return None
        try:
            parsed = Decimal(str(value).replace(",", "").strip())
        except (InvalidOperation, TypeError, ValueError):
            self._add_error(field, "Enter a valid number.")
            return None
        if not parsed.is_finite():
            self._add_error(field, "Enter a valid number.")
            return None
        if parsed < minimum:
            message = (
                "Amount must be greater than zero."
                if minimum > 0
                else "Amount must be at least zero."
            )
            self._add_error(field, message)
            return None
        if maximum is not None and parsed > maximum:
            self._add_error(field, f"Value must not exceed {maximum}.")
            return None
        return float(parsed)

    def _parse_date(self, field: str, value: Any, *, required: bool = True) -> date | None:
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        raw = "" if value is None else str(value).strip()
        if not raw:
            if required:
                self._add_error(field, "Date is required.")
            return None
        try:
            return date.fromisoformat(raw[:10])
        except ValueError:
            self._add_error(field, "Enter a valid date (YYYY-MM-DD).")
            return None

    def _parse_id(self, field: str, value: Any, *, required: bool = False) -> int | None:
        if value is None or value == "":
            if required:
                self._add_error(field, "This field is required.")
            return None
        try:
            parsed = int(value)
        except (TypeError, ValueError):
            self._add_error(field, "Choose a valid option.")
            return None
        if parsed <= 0:
            self._add_error(field, "Choose a valid option.")
            return None
        return parsed

    def _choice(self, field: str, value: Any, choices: Sequence[str], *, default: str) -> str:
        choice = (str(value).strip().upper() if value else "") or default
        if choice not in choices:
            self._add_error(field, f"Choose one of: {', '.join(choices)}.")
        return choice

    def _check_email(self, field: str, value: str) -> None:
        if value and ("@" not in value or value.startswith("@") or value.endswith("@")):
            self._add_error(field, "Enter a valid email address.")

    @property
    def error_messages(self) -> Iterable[str]:
        """Flattened iterable of error strings for summaries."""

        for messages in self.errors.values():
            yield from messages
