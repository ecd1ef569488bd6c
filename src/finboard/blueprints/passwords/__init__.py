"""Passwords blueprint package."""

from __future__ import annotations

from flask import Blueprint

bp = Blueprint("passwords", __name__, url_prefix="/passwords")

from . import routes  # noqa: E402,F401

__all__ = ["bp"]
