"""Application configuration objects.

Every setting is read from a ``FINBOARD_*`` environment variable; a ``.env``
file in the working directory is loaded first when present.
"""

from __future__ import annotations

import importlib
import os
from pathlib import Path
from typing import Any, Optional

from dotenv import load_dotenv

load_dotenv()

ENV_PREFIX = "FINBOARD_"
PLACEHOLDER_SECRET = "replace-me"
_TRUTHY = frozenset({"1", "true", "yes", "on"})


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(ENV_PREFIX + name, default)


def _env_flag(name: str, default: bool = False) -> bool:
    raw = _env(name)
    return default if raw is None else raw.strip().lower() in _TRUTHY


class BaseConfig:
    """Settings shared by every environment."""

    APP_NAME = "Finboard"
    DB_FILENAME = "finboard.db"
    EXPORT_RETENTION = 5
    DEBUG = False
    TESTING = False

    def __init__(self) -> None:
        self.DEV_MODE = _env_flag("DEV_MODE", default=True)
        self.SECRET_KEY = _env("SECRET_KEY", PLACEHOLDER_SECRET)
        if self.SECRET_KEY == PLACEHOLDER_SECRET and not self.DEV_MODE:
            raise ValueError(f"{ENV_PREFIX}SECRET_KEY must be set when dev mode is off.")

        self.DATA_DIR = Path(_env("DATA_DIR", "instance")).expanduser().resolve()
        self.DATA_DIR.mkdir(parents=True, exist_ok=True)

        self.USE_SQLCIPHER = _env_flag("USE_SQLCIPHER")
        self.SQLCIPHER_KEY = _env("SQLCIPHER_KEY")
        self.DATABASE_URL = _env("DATABASE_URL") or self._default_database_url()

    @property
    def exports_dir(self) -> Path:
        return self.DATA_DIR / "exports"

    def _default_database_url(self) -> str:
        path = self.DATA_DIR / self.DB_FILENAME
        if not self.USE_SQLCIPHER:
            return f"sqlite:///{path}"
        self._ensure_sqlcipher_available()
        return f"sqlite+pysqlcipher://:{self.SQLCIPHER_KEY}@/{path}"

    def _ensure_sqlcipher_available(self) -> None:
        """Fail early when encryption is switched on without a key or driver."""
        if not self.SQLCIPHER_KEY:
            raise ValueError(
                f"{ENV_PREFIX}USE_SQLCIPHER is on but {ENV_PREFIX}SQLCIPHER_KEY is empty."
            )
        try:
            importlib.import_module("sqlcipher3")
        except ImportError as exc:
            raise ImportError(
                "Encrypted storage needs the sqlcipher3 driver: pip install 'finboard[sqlcipher]'"
            ) from exc

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Keyword arguments for ``create_engine``."""
        connect_args: dict[str, Any] = {"check_same_thread": False}
        if self.USE_SQLCIPHER:
            connect_args["timeout"] = 30
        return {"connect_args": connect_args}


class DevConfig(BaseConfig):
    DEBUG = True


class TestConfig(BaseConfig):
    """Used by the test-suite; always runs in dev mode."""

    TESTING = True
    __test__ = False

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = True
