"""Expense and income blueprints; both share the cashflow routes module."""

from __future__ import annotations

from flask import Blueprint

expenses_bp = Blueprint("expenses", __name__, url_prefix="/expenses")
incomes_bp = Blueprint("incomes", __name__, url_prefix="/incomes")

from . import routes  # noqa: E402,F401

__all__ = ["expenses_bp", "incomes_bp"]
