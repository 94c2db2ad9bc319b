"""Unit tests for logging configuration and formatters."""
from __future__ import annotations

import json
import logging
import sys

import pytest

from search_pager.core.settings import LoggingSettings
from search_pager.infra.logging import JSONFormatter, configure_logging, setup_logging
from search_pager.infra.logging import config as logging_config


def make_record(msg: str = "Fetched search page", **extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="search_pager.core.pagination.paginator",
        level=logging.INFO,
        pathname=__file__,
        lineno=1,
        msg=msg,
        args=(),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


@pytest.fixture
def restore_logging():
    """Restore root logger handlers and level after reconfiguration."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    initialized = logging_config._LOGGING_INITIALIZED
    yield
    root.handlers[:] = handlers
    root.setLevel(level)
    logging_config._LOGGING_INITIALIZED = initialized


@pytest.mark.unit
class TestJSONFormatter:
    """Test suite for JSONFormatter."""

    def test_single_line_json_with_extras(self):
        formatter = JSONFormatter(static={"service": "search-pager"})

        line = formatter.format(make_record(index="findings", hits=100))
        data = json.loads(line)

        assert "\n" not in line
        assert data["level"] == "INFO"
        assert data["logger"] == "search_pager.core.pagination.paginator"
        assert data["message"] == "Fetched search page"
        assert data["service"] == "search-pager"
        assert data["index"] == "findings"
        assert data["hits"] == 100
        assert data["timestamp"].endswith("Z")

    def test_no_trace_fields_without_span(self):
        data = json.loads(JSONFormatter().format(make_record()))

        assert "trace_id" not in data
        assert "span_id" not in data

    def test_exception_kept_on_one_line(self):
        try:
            raise ValueError("bad response")
        except ValueError:
            record = make_record()
            record.exc_info = sys.exc_info()

        line = JSONFormatter().format(record)

        assert "\n" not in line
        assert "ValueError: bad response" in json.loads(line)["exception"]

    def test_unserializable_extra_falls_back_to_str(self):
        data = json.loads(JSONFormatter().format(make_record(payload=object())))

        assert data["payload"].startswith("<object object")

    def test_custom_keys(self):
        formatter = JSONFormatter(fmt_keys={"lvl": "levelname", "msg": "message"})

        data = json.loads(formatter.format(make_record()))

        assert data["lvl"] == "INFO"
        assert data["msg"] == "Fetched search page"


@pytest.mark.unit
class TestConfigureLogging:
    """Test suite for dictConfig setup."""

    def test_console_json_handler(self, restore_logging):
        configure_logging(log_level="debug", json_logs=True)

        root = logging.getLogger()
        assert root.level == logging.DEBUG
        assert len(root.handlers) == 1
        assert isinstance(root.handlers[0].formatter, JSONFormatter)
        assert logging.getLogger("httpx").level == logging.WARNING

    def test_rotating_file_handler(self, restore_logging, tmp_path):
        log_file = tmp_path / "logs" / "search-pager.log"

        configure_logging(json_logs=False, file_path=log_file, console_enabled=False)
        logging.getLogger("search_pager.test").warning("written to file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert log_file.exists()
        assert "written to file" in log_file.read_text()

    def test_setup_logging_runs_once(self, restore_logging, monkeypatch):
        calls = []
        monkeypatch.setattr(logging_config, "_LOGGING_INITIALIZED", False)
        monkeypatch.setattr(logging_config, "configure_logging", lambda **kw: calls.append(kw))

        setup_logging(LoggingSettings(level="WARNING", json_logs=False))
        setup_logging(LoggingSettings(level="DEBUG"))

        assert len(calls) == 1
        assert calls[0]["log_level"] == "WARNING"
        assert calls[0]["json_logs"] is False

    def test_setup_logging_overrides(self, restore_logging, monkeypatch):
        calls = []
        monkeypatch.setattr(logging_config, "configure_logging", lambda **kw: calls.append(kw))

        setup_logging(LoggingSettings(), force=True, log_level="ERROR")

        assert calls[0]["log_level"] == "ERROR"
