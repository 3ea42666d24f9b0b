# tests/unit/logging/test_logger.py — v2
"""Tests for logging/logger.py — formatters and setup."""

from __future__ import annotations

import json
import logging
import sys
from logging.handlers import RotatingFileHandler

import pytest

from spamsentinel.config.settings import Settings
from spamsentinel.logging.context import set_request_context, set_strategy_context
from spamsentinel.logging.logger import (
    ROOT_LOGGER_NAME,
    JsonFormatter,
    TextFormatter,
    setup_logging,
    setup_logging_from_settings,
)


def _record(msg: str = "hello %s", args: tuple = ("world",), **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="spamsentinel.test", level=logging.INFO, pathname=__file__,
        lineno=1, msg=msg, args=args, exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger(ROOT_LOGGER_NAME)
    handlers, level = list(root.handlers), root.level
    yield root
    for handler in root.handlers:
        handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJsonFormatter:
    def test_basic_fields(self):
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["level"] == "INFO"
        assert entry["logger"] == "spamsentinel.test"
        assert entry["message"] == "hello world"
        assert "context" not in entry

    def test_includes_context(self):
        set_request_context("req42", "f" * 64)
        set_strategy_context("advanced")
        entry = json.loads(JsonFormatter().format(_record()))
        assert entry["context"] == {
            "request_id": "req42",
            "fingerprint": "f" * 12,
            "strategy": "advanced",
        }

    def test_includes_data(self):
        entry = json.loads(JsonFormatter().format(_record(data={"hits": 3})))
        assert entry["data"] == {"hits": 3}

    def test_includes_exception(self):
        try:
            raise RuntimeError("boom")
        except RuntimeError:
            record = _record()
            record.exc_info = sys.exc_info()
        entry = json.loads(JsonFormatter().format(record))
        assert "RuntimeError: boom" in entry["exception"]

    def test_uses_record_time(self):
        record = _record()
        record.created = 0.0
        entry = json.loads(JsonFormatter().format(record))
        assert entry["timestamp"].startswith("1970-01-01T00:00:00")


class TestTextFormatter:
    def test_plain(self):
        line = TextFormatter().format(_record())
        assert "[INFO    ]" in line
        assert line.endswith("- hello world")

    def test_with_context(self):
        set_request_context("req7")
        set_strategy_context("memory")
        line = TextFormatter().format(_record())
        assert "<req7>" in line
        assert "[memory]" in line


class TestSetup:
    def test_setup_replaces_handlers(self, restore_root_logger):
        setup_logging(level="DEBUG", log_format="text")
        setup_logging(level="WARNING", log_format="json")
        root = restore_root_logger
        assert len(root.handlers) == 1
        assert root.level == logging.WARNING
        assert isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_file_handler(self, restore_root_logger, tmp_path):
        log_file = tmp_path / "logs" / "app.log"
        setup_logging(log_file=log_file, rotation="1KB", retention=2)
        handlers = restore_root_logger.handlers
        assert any(isinstance(h, RotatingFileHandler) for h in handlers)
        assert log_file.parent.exists()

    def test_from_settings(self, restore_root_logger):
        setup_logging_from_settings(Settings(_env_file=None, log_level="ERROR", log_format="text"))
        root = restore_root_logger
        assert root.level == logging.ERROR
        assert isinstance(root.handlers[0].formatter, TextFormatter)

    def test_unknown_format_falls_back_to_text(self, restore_root_logger):
        setup_logging(log_format="xml")
        assert isinstance(restore_root_logger.handlers[0].formatter, TextFormatter)
