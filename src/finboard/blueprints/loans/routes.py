"""Loan routes."""

from __future__ import annotations

from ...services import debts as debt_service
from ..debts.forms import LoanForm
from ..debts.routes import register_routes
from . import bp

register_routes(bp, debt_service.LOAN, LoanForm)
