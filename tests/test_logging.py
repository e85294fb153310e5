"""Tests for structured logging functionality."""

from __future__ import annotations

import json
import logging
import sys
from decimal import Decimal

import pytest

from moneyledger.config import BaseConfig
from moneyledger.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def log_config(monkeypatch, tmp_path):
    monkeypatch.setenv("MONEYLEDGER_DATA_DIR", str(tmp_path))
    config = BaseConfig()
    config.DEV_MODE = True
    yield config
    root = logging.getLogger("moneyledger")
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()


def _record(msg: str = "Test message", level: int = logging.INFO, exc_info=None) -> logging.LogRecord:
    record = logging.LogRecord(
        name="test.logger",
        level=level,
        pathname="test.py",
        lineno=42,
        msg=msg,
        args=(),
        exc_info=exc_info,
    )
    record.module = "test_module"
    record.funcName = "test_function"
    return record


def test_json_formatter():
    """Test that JSONFormatter correctly formats log records."""
    log_data = json.loads(JSONFormatter().format(_record()))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "test.logger"
    assert log_data["message"] == "Test message"
    assert log_data["module"] == "test_module"
    assert log_data["function"] == "test_function"
    assert log_data["line"] == 42
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    """Test that JSONFormatter correctly handles exceptions."""
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    log_data = json.loads(JSONFormatter().format(_record("Error occurred", logging.ERROR, exc_info)))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"] is not None


def test_json_formatter_keeps_decimal_extras_exact():
    record = _record()
    record.amount = Decimal("1234.50")
    record.entry_id = "abc"

    log_data = json.loads(JSONFormatter().format(record))

    assert log_data["extra"]["amount"] == "1234.50"
    assert log_data["extra"]["entry_id"] == "abc"


def test_setup_logging(log_config, tmp_path):
    """Test that logging setup creates a JSON log file."""
    logger = setup_logging(log_config)

    assert logger.name == "moneyledger"
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2  # Console + File

    log_file = tmp_path / "logs" / "moneyledger.log"
    assert log_file.exists()

    logger.warning("Test warning message", extra={"asset_id": "a1"})
    for handler in logger.handlers:
        handler.flush()

    lines = [line for line in log_file.read_text().splitlines() if line.strip()]
    assert len(lines) >= 2
    for line in lines:
        entry = json.loads(line)
        assert "timestamp" in entry
        assert "level" in entry
        assert "message" in entry
    assert json.loads(lines[-1])["extra"]["asset_id"] == "a1"


def test_setup_logging_is_idempotent(log_config):
    setup_logging(log_config)
    logger = setup_logging(log_config)

    assert len(logger.handlers) == 2


def test_production_level(log_config):
    log_config.DEV_MODE = False

    logger = setup_logging(log_config)

    assert logger.level == logging.INFO


def test_get_logger():
    """Test that get_logger nests names under the package logger."""
    assert get_logger("test_module").name == "moneyledger.test_module"
    assert get_logger("moneyledger.services.balance").name == "moneyledger.services.balance"
    assert get_logger("moneyledger").name == "moneyledger"


def test_service_logs_reach_file(log_config, tmp_path):
    from moneyledger.services.alerts import dispatch
    from moneyledger.domain.models import Notification, Severity

    logger = setup_logging(log_config)

    def broken(notification):
        raise RuntimeError("notifier down")

    dispatch(broken, Notification(message="low", severity=Severity.CRITICAL))
    for handler in logger.handlers:
        handler.flush()

    lines = (tmp_path / "logs" / "moneyledger.log").read_text().splitlines()
    last = json.loads(lines[-1])
    assert last["logger"] == "moneyledger.services.alerts"
    assert last["exception"]["type"] == "RuntimeError"
