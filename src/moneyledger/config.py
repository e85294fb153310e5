"""Library configuration objects and helpers."""

from __future__ import annotations

import os
from decimal import Decimal
from pathlib import Path
from typing import Any

from dotenv import load_dotenv

load_dotenv()


def _env_bool(name: str, default: bool = False) -> bool:
    """Interpret environment variable values as booleans."""

    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise ValueError(f"{name} must be an integer, got {value!r}") from exc


def _env_decimal(name: str, default: str) -> Decimal:
    value = os.getenv(name)
    if value is None or not value.strip():
        return Decimal(default)
    try:
        return Decimal(value.strip())
    except ArithmeticError as exc:
        raise ValueError(f"{name} must be a decimal number, got {value!r}") from exc


class BaseConfig:
    """Base configuration shared across environments."""

    APP_NAME = "moneyledger"
    DB_FILENAME = "moneyledger.db"
    SQLITE_PRAGMAS = {"journal_mode": "wal", "foreign_keys": "on"}

    def __init__(self) -> None:
        self.DEV_MODE = _env_bool("MONEYLEDGER_DEV_MODE", default=True)
        self.DATA_DIR = self._resolve_data_dir()
        self.DATABASE_URL = os.getenv("MONEYLEDGER_DATABASE_URL", self._build_sqlite_url())
        self.MAX_PAYOFF_MONTHS = _env_int("MONEYLEDGER_MAX_PAYOFF_MONTHS", 1000)
        self.LOW_BALANCE_WARNING = _env_decimal("MONEYLEDGER_LOW_BALANCE_WARNING", "100")
        self.LOW_BALANCE_CRITICAL = _env_decimal("MONEYLEDGER_LOW_BALANCE_CRITICAL", "50")
        if self.MAX_PAYOFF_MONTHS <= 0:
            raise ValueError("MONEYLEDGER_MAX_PAYOFF_MONTHS must be positive.")
        if self.LOW_BALANCE_CRITICAL > self.LOW_BALANCE_WARNING:
            raise ValueError(
                "MONEYLEDGER_LOW_BALANCE_CRITICAL must not exceed MONEYLEDGER_LOW_BALANCE_WARNING."
            )

    def _resolve_data_dir(self) -> Path:
        """Return the directory where the SQLite file and logs live."""

        data_root = os.getenv("MONEYLEDGER_DATA_DIR", "instance")
        path = Path(data_root).expanduser().resolve()
        path.mkdir(parents=True, exist_ok=True)
        return path

    def _build_sqlite_url(self) -> str:
        db_path = self.DATA_DIR / self.DB_FILENAME
        return f"sqlite:///{db_path}"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        """Expose engine kwargs for SQLModel to consume."""

        if self.DATABASE_URL.startswith("sqlite"):
            return {"connect_args": {"check_same_thread": False}}
        return {"pool_pre_ping": True}


class DevConfig(BaseConfig):
    """Development configuration using local SQLite."""

    DEBUG = True
    TESTING = False


class TestingConfig(BaseConfig):
    """Configuration for the test-suite: in-memory database, quiet logging."""

    __test__ = False  # not a pytest test class

    DEBUG = False
    TESTING = True

    def __init__(self) -> None:
        super().__init__()
        self.DEV_MODE = False
        self.DATABASE_URL = "sqlite://"

    def sqlalchemy_engine_options(self) -> dict[str, Any]:
        from sqlalchemy.pool import StaticPool

        # A single shared connection keeps the in-memory database alive.
        return {"connect_args": {"check_same_thread": False}, "poolclass": StaticPool}
