"""Tests for configuration loading and structured logging."""

from __future__ import annotations

import json
import logging
import sys

import pytest

from debtsage.config import BaseConfig
from debtsage.logging_config import JSONFormatter, get_logger, setup_logging


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    for name in (
        "DEBTSAGE_DATABASE_URL",
        "DEBTSAGE_DEV_MODE",
        "DEBTSAGE_EXTRA_PAYMENT",
        "DEBTSAGE_USER_ID",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("DEBTSAGE_DATA_DIR", str(tmp_path / "instance"))
    return tmp_path / "instance"


def test_defaults(clean_env):
    config = BaseConfig()

    assert config.DATA_DIR == clean_env.resolve()
    assert config.DATA_DIR.exists()
    assert config.DATABASE_URL == f"sqlite:///{clean_env.resolve() / 'debtsage.db'}"
    assert config.DEV_MODE is True
    assert config.USER_ID == 1
    assert config.EXTRA_PAYMENT == 0.0
    assert config.sqlalchemy_engine_options() == {"connect_args": {"check_same_thread": False}}


def test_environment_overrides(clean_env, monkeypatch):
    monkeypatch.setenv("DEBTSAGE_DEV_MODE", "off")
    monkeypatch.setenv("DEBTSAGE_EXTRA_PAYMENT", "1,250.50")
    monkeypatch.setenv("DEBTSAGE_USER_ID", "7")
    monkeypatch.setenv("DEBTSAGE_DATABASE_URL", "postgresql://localhost/debts")

    config = BaseConfig()
    assert config.DEV_MODE is False
    assert config.EXTRA_PAYMENT == 1250.5
    assert config.USER_ID == 7
    assert config.sqlalchemy_engine_options() == {}


def test_invalid_extra_payment(clean_env, monkeypatch):
    monkeypatch.setenv("DEBTSAGE_EXTRA_PAYMENT", "lots")
    with pytest.raises(ValueError, match="DEBTSAGE_EXTRA_PAYMENT must be a number"):
        BaseConfig()


def test_negative_extra_payment(clean_env, monkeypatch):
    monkeypatch.setenv("DEBTSAGE_EXTRA_PAYMENT", "-10")
    with pytest.raises(ValueError, match="cannot be negative"):
        BaseConfig()


def test_json_formatter():
    formatter = JSONFormatter()
    record = logging.LogRecord(
        name="debtsage.test",
        level=logging.INFO,
        pathname="test.py",
        lineno=42,
        msg="Simulated %s strategy",
        args=("avalanche",),
        exc_info=None,
    )
    record.months = 18

    log_data = json.loads(formatter.format(record))

    assert log_data["level"] == "INFO"
    assert log_data["logger"] == "debtsage.test"
    assert log_data["message"] == "Simulated avalanche strategy"
    assert log_data["line"] == 42
    assert log_data["extra"] == {"months": 18}
    assert "timestamp" in log_data


def test_json_formatter_with_exception():
    formatter = JSONFormatter()
    try:
        raise ValueError("Test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = logging.LogRecord(
        name="debtsage.test",
        level=logging.ERROR,
        pathname="test.py",
        lineno=1,
        msg="Error occurred",
        args=(),
        exc_info=exc_info,
    )
    log_data = json.loads(formatter.format(record))

    assert log_data["exception"]["type"] == "ValueError"
    assert "Test error" in log_data["exception"]["message"]
    assert log_data["exception"]["traceback"]


def test_setup_logging_writes_json_file(clean_env):
    config = BaseConfig()
    logger = setup_logging(config)

    assert logger.name == "debtsage"
    assert len(logger.handlers) == 2  # console + rotating file

    get_logger("debtsage.services.debts").warning("Clamped negative balance to zero")
    for handler in logger.handlers:
        handler.flush()

    log_file = config.DATA_DIR / "logs" / "debtsage.log"
    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines() if line]
    messages = [line["message"] for line in lines]
    assert "Logging initialized" in messages
    assert "Clamped negative balance to zero" in messages


def test_setup_logging_is_idempotent(clean_env):
    config = BaseConfig()
    setup_logging(config)
    logger = setup_logging(config)
    assert len(logger.handlers) == 2


def test_get_logger_namespacing():
    assert get_logger("debtsage.cli").name == "debtsage.cli"
    assert get_logger("scripts").name == "debtsage.scripts"
