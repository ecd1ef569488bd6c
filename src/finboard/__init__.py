"""Finboard application factory."""

from __future__ import annotations

from importlib import import_module
from typing import Iterable

from flask import Flask, jsonify
from werkzeug.exceptions import HTTPException

from . import cli as _cli
from .config import BaseConfig, DevConfig, TestConfig
from .errors import ValidationError

_CONFIG_MAP = {
    "development": DevConfig,
    "testing": TestConfig,
    "default": BaseConfig,
}


def _resolve_config(name: str | None) -> type[BaseConfig]:
    """Return the config class for the provided environment name."""

    if not name:
        return BaseConfig
    return _CONFIG_MAP.get(name.lower(), BaseConfig)


def _blueprint_paths() -> Iterable[tuple[str, str]]:
    """Yield (module, attribute) pairs for every blueprint."""

    yield "finboard.blueprints.auth", "bp"
    yield "finboard.blueprints.accounts", "bp"
    yield "finboard.blueprints.cashflow", "expenses_bp"
    yield "finboard.blueprints.cashflow", "incomes_bp"
    yield "finboard.blueprints.investments", "bp"
    yield "finboard.blueprints.debts", "bp"
    yield "finboard.blueprints.loans", "bp"
    yield "finboard.blueprints.passwords", "bp"
    yield "finboard.blueprints.budgets", "bp"
    yield "finboard.blueprints.reports", "bp"


def create_app(config_name: str | None = None) -> Flask:
    """Create and configure the Flask application instance."""

    app = Flask(__name__, instance_relative_config=True)
    config_obj = _resolve_config(config_name)()
    app.config.from_object(config_obj)
    app.config["SECRET_KEY"] = config_obj.SECRET_KEY
    app.config["FINBOARD_CONFIG"] = config_obj

    from .logging_config import setup_logging

    setup_logging(config_obj)

    # Deferred so importing the package does not configure SQLModel mappers.
    from .extensions import init_db

    init_db(app)
    _register_blueprints(app)
    _register_error_handlers(app)
    _cli.init_app(app)
    return app


def _register_blueprints(app: Flask) -> None:
    """Import and register all blueprints declared in `_blueprint_paths`."""

    for dotted_path, attribute in _blueprint_paths():
        module = import_module(dotted_path)
        app.register_blueprint(getattr(module, attribute))


def _register_error_handlers(app: Flask) -> None:
    from .logging_config import get_logger

    logger = get_logger("finboard.errors")

    @app.errorhandler(ValidationError)
    def handle_validation_error(exc: ValidationError):
        return jsonify({"error": "validation_failed", "details": exc.errors}), 400

    @app.errorhandler(ValueError)
    def handle_value_error(exc: ValueError):
        logger.warning("Request rejected", extra={"reason": str(exc)})
        return jsonify({"error": str(exc), "details": {}}), 400

    @app.errorhandler(HTTPException)
    def handle_http_error(exc: HTTPException):
        payload = {"error": (exc.name or "error").lower().replace(" ", "_"), "details": {}}
        if exc.description and exc.code == 400:
            payload["details"] = {"message": exc.description}
        return jsonify(payload), exc.code or 500
