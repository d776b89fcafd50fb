"""Tests for logging setup."""

import json
import logging
import sys
from collections.abc import Iterator

import pytest

from banknoti.logging_config import JsonFormatter, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """setup_logging() replaces the root handlers; undo it after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


def _record(msg: str, *args: object) -> logging.LogRecord:
    return logging.LogRecord("banknoti.parser", logging.WARNING, __file__, 1, msg, args, None)


class TestJsonFormatter:
    """Tests for JsonFormatter."""

    def test_quoted_message_is_valid_json(self) -> None:
        """Test that quotes from %r arguments are escaped."""
        line = JsonFormatter().format(_record("Could not parse notification from %r", 'com."odd"'))

        entry = json.loads(line)
        assert entry["message"] == "Could not parse notification from 'com.\"odd\"'"
        assert entry["level"] == "WARNING"
        assert entry["module"] == "banknoti.parser"

    def test_keeps_hangul(self) -> None:
        """Test that Korean text is written unescaped."""
        line = JsonFormatter().format(_record("입금 %s", "홍길동"))
        assert "입금 홍길동" in line

    def test_includes_exception(self) -> None:
        """Test that tracebacks are carried in their own field."""
        try:
            raise ValueError("boom")
        except ValueError:
            record = logging.LogRecord(
                "banknoti.cli", logging.ERROR, __file__, 1, "failed", (), sys.exc_info()
            )

        entry = json.loads(JsonFormatter().format(record))
        assert "ValueError: boom" in entry["exception"]


class TestSetupLogging:
    """Tests for setup_logging function."""

    def test_single_stderr_handler(self) -> None:
        """Test that repeated setup does not stack handlers."""
        setup_logging(logging.DEBUG)
        setup_logging(logging.DEBUG)

        root = logging.getLogger()
        assert len(root.handlers) == 1
        assert root.level == logging.DEBUG
        assert not isinstance(root.handlers[0].formatter, JsonFormatter)

    def test_json_format(self, capsys: pytest.CaptureFixture[str]) -> None:
        """Test that json_format emits one JSON object per line."""
        setup_logging(logging.INFO, json_format=True)

        logging.getLogger("banknoti.test").info('rule "kb/samsung" applied')

        entry = json.loads(capsys.readouterr().err.strip())
        assert entry["message"] == 'rule "kb/samsung" applied'
