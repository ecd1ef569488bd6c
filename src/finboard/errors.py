"""Domain-specific exceptions."""

from __future__ import annotations


class FinboardError(ValueError):
    """Base exception for rejected domain operations."""


class ValidationError(FinboardError):
    """Input failed form validation."""

    def __init__(self, errors: dict[str, list[str]]):
        self.errors = errors
        super().__init__("Invalid input")


class InsufficientBalanceError(FinboardError):
    """Linked account cannot cover the requested amount."""


class AccountInUseError(FinboardError):
    """Account is still referenced by expenses, incomes or investments."""


class DuplicateAccountNumberError(FinboardError):
    """Account number already registered."""
