"""Tests for structured logging helpers."""
import json
import logging
from unittest.mock import Mock

import pytest

from app.core.logging import ContextLogger, JSONFormatter, LogTimer, get_logger


def _record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("dashboard", logging.INFO, __file__, 10, "Roster loaded", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJSONFormatter:
    """Test JSONFormatter output."""

    def test_basic_fields(self):
        payload = json.loads(JSONFormatter().format(_record()))

        assert payload["level"] == "INFO"
        assert payload["message"] == "Roster loaded"
        assert payload["logger"] == "dashboard"

    def test_context_fields(self):
        payload = json.loads(JSONFormatter().format(_record(session_id="abc", record_count=8)))

        assert payload["session_id"] == "abc"
        assert payload["record_count"] == 8


class TestGetLogger:
    """Test get_logger function."""

    def test_plain_logger(self):
        assert isinstance(get_logger("dashboard"), logging.Logger)

    def test_context_logger(self):
        logger = get_logger("dashboard", {"session_id": "abc"})
        assert isinstance(logger, ContextLogger)
        _, kwargs = logger.process("hello", {})
        assert kwargs["extra"]["session_id"] == "abc"


class TestLogTimer:
    """Test LogTimer context manager."""

    def test_logs_completion(self):
        logger = Mock()
        with LogTimer(logger, "derive_view") as timer:
            pass

        assert timer.duration_ms is not None
        level, message = logger.log.call_args.args
        assert level == logging.INFO
        assert message.startswith("derive_view completed")

    def test_logs_failure(self):
        logger = Mock()
        with pytest.raises(RuntimeError):
            with LogTimer(logger, "load_records"):
                raise RuntimeError("boom")

        assert logger.error.called
        assert "load_records failed" in logger.error.call_args.args[0]
