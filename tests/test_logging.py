"""Logging setup tests."""

from __future__ import annotations

import json
import logging
import sys
from types import SimpleNamespace

from finboard.logging_config import JSONFormatter, get_logger, setup_logging


def test_get_logger_nests_under_app_logger():
    assert get_logger("finboard.services.debts").name == "finboard.services.debts"
    assert get_logger("finboard").name == "finboard"
    assert get_logger("plugins.thing").name == "finboard.plugins.thing"


def test_json_formatter_includes_extra_fields():
    record = logging.LogRecord("finboard.test", logging.INFO, __file__, 10, "hello %s", ("world",), None)
    record.user_id = 7

    payload = json.loads(JSONFormatter().format(record))

    assert payload["message"] == "hello world"
    assert payload["level"] == "INFO"
    assert payload["extra"] == {"user_id": 7}


def test_json_formatter_captures_exceptions():
    try:
        raise RuntimeError("boom")
    except RuntimeError:
        record = logging.LogRecord("finboard.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info())

    payload = json.loads(JSONFormatter().format(record))

    assert payload["exception"]["type"] == "RuntimeError"
    assert "boom" in payload["exception"]["traceback"]


def test_setup_logging_writes_json_file(tmp_path):
    config = SimpleNamespace(DATA_DIR=tmp_path, DEV_MODE=False)

    logger = setup_logging(config)
    get_logger(__name__).warning("disk almost full", extra={"free_mb": 12})
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "finboard.log").read_text(encoding="utf-8").splitlines()
    entries = [json.loads(line) for line in lines]
    assert entries[0]["message"] == "Logging initialized"
    assert entries[-1]["message"] == "disk almost full"
    assert entries[-1]["extra"] == {"free_mb": 12}


def test_setup_logging_does_not_stack_handlers(tmp_path):
    config = SimpleNamespace(DATA_DIR=tmp_path, DEV_MODE=True)

    setup_logging(config)
    logger = setup_logging(config)

    assert len(logger.handlers) == 2
