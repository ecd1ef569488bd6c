"""Application logging: readable console output plus a rotating JSON log file."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path

from .config import BaseConfig

APP_LOGGER = "finboard"
LOG_FILENAME = "finboard.log"
MAX_LOG_BYTES = 10 * 1024 * 1024
LOG_BACKUPS = 5

# Everything a bare LogRecord carries; anything else arrived through ``extra=``.
_RECORD_FIELDS = frozenset(vars(logging.LogRecord("", 0, "", 0, "", None, None))) | {
    "message",
    "asctime",
}

_DEV_CONSOLE = ("[%(asctime)s] %(levelname)-8s %(name)s:%(lineno)d %(message)s", "%H:%M:%S")
_PROD_CONSOLE = ("%(asctime)s %(levelname)s %(name)s: %(message)s", "%Y-%m-%d %H:%M:%S")


class JSONFormatter(logging.Formatter):
    """One JSON object per line, with ``extra`` fields nested under ``"extra"``."""

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "location": f"{record.module}.{record.funcName}:{record.lineno}",
        }

        extra = {k: v for k, v in vars(record).items() if k not in _RECORD_FIELDS}
        if extra:
            payload["extra"] = extra

        if record.exc_info and record.exc_info[0] is not None:
            exc_type, exc, _ = record.exc_info
            payload["exception"] = {
                "type": exc_type.__name__,
                "message": str(exc),
                "traceback": self.formatException(record.exc_info),
            }

        return json.dumps(payload, default=str)


def _console_handler(dev_mode: bool) -> logging.Handler:
    fmt, datefmt = _DEV_CONSOLE if dev_mode else _PROD_CONSOLE
    handler = logging.StreamHandler()
    handler.setLevel(logging.INFO if dev_mode else logging.WARNING)
    handler.setFormatter(logging.Formatter(fmt, datefmt))
    return handler


def _file_handler(path: Path) -> logging.Handler:
    handler = RotatingFileHandler(path, maxBytes=MAX_LOG_BYTES, backupCount=LOG_BACKUPS, encoding="utf-8")
    handler.setLevel(logging.INFO)
    handler.setFormatter(JSONFormatter())
    return handler


def setup_logging(config: BaseConfig) -> logging.Logger:
    """Attach console and JSON file handlers to the ``finboard`` logger.

    Safe to call repeatedly: handlers from an earlier call are closed and
    replaced, so building several apps in one process does not duplicate
    output.
    """
    log_dir = Path(config.DATA_DIR) / "logs"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / LOG_FILENAME

    app_logger = logging.getLogger(APP_LOGGER)
    app_logger.setLevel(logging.INFO)
    while app_logger.handlers:
        stale = app_logger.handlers[0]
        app_logger.removeHandler(stale)
        stale.close()

    app_logger.addHandler(_console_handler(config.DEV_MODE))
    app_logger.addHandler(_file_handler(log_path))

    app_logger.info(
        "Logging initialized",
        extra={"dev_mode": config.DEV_MODE, "log_file": str(log_path), "data_dir": str(config.DATA_DIR)},
    )
    return app_logger


def get_logger(name: str) -> logging.Logger:
    """Return ``name`` as a child of the ``finboard`` logger (``__name__`` works as-is)."""
    if name == APP_LOGGER or name.startswith(APP_LOGGER + "."):
        return logging.getLogger(name)
    return logging.getLogger(f"{APP_LOGGER}.{name}")
