"""Database wiring for the Flask application."""

from __future__ import annotations

from flask import Flask, current_app

from .config import BaseConfig
from .infra.database import SessionFactory, bootstrap_database

_EXTENSION_KEY = "finboard.db"


def init_db(app: Flask) -> None:
    """Create the engine for the app's configuration and make sure tables exist."""

    config: BaseConfig = app.config["FINBOARD_CONFIG"]
    engine, session_factory = bootstrap_database(config)
    app.extensions[_EXTENSION_KEY] = {"engine": engine, "session_factory": session_factory}


def get_session_factory() -> SessionFactory:
    """Return the session factory services expect."""

    state = current_app.extensions.get(_EXTENSION_KEY)
    if state is None:  # pragma: no cover - exercised via app factory
        raise RuntimeError("Database engine not initialized")
    return state["session_factory"]
