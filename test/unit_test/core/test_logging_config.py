"""Tests for logging setup and formatters."""

import json
import logging

import pytest

from grant_portal.core import logging_config
from grant_portal.core.logging_config import JsonFormatter, build_formatter, setup_logging


def _is_pytest_handler(handler: logging.Handler) -> bool:
    return type(handler).__module__.startswith("_pytest")


@pytest.fixture
def restore_root_logger():
    """Undo ``setup_logging`` on the root logger; pytest's capture handlers are left alone."""
    root = logging.getLogger()
    before, level = list(root.handlers), root.level
    yield root
    for handler in list(root.handlers):
        if not _is_pytest_handler(handler):
            root.removeHandler(handler)
            handler.close()
    for handler in before:
        if not _is_pytest_handler(handler) and handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord("grant_portal.test", logging.INFO, "mod.py", 12, "Submitted %s", ("p-1",), None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestJsonFormatter:
    def test_formats_one_object(self):
        payload = json.loads(JsonFormatter().format(make_record()))

        assert payload["level"] == "INFO"
        assert payload["logger"] == "grant_portal.test"
        assert payload["message"] == "Submitted p-1"
        assert payload["location"] == "mod.py:12"

    def test_keeps_extra_fields(self):
        payload = json.loads(JsonFormatter().format(make_record(request_id="req-1", status_code=409)))

        assert payload["request_id"] == "req-1"
        assert payload["status_code"] == 409

    def test_message_with_quotes_stays_valid_json(self):
        record = make_record()
        record.msg, record.args = 'Title "Ocean" saved', ()
        assert json.loads(JsonFormatter().format(record))["message"] == 'Title "Ocean" saved'


@pytest.mark.parametrize("fmt, expected", [("json", JsonFormatter), ("simple", logging.Formatter)])
def test_build_formatter(fmt, expected):
    assert isinstance(build_formatter(fmt), expected)


def test_setup_logging_replaces_handlers(restore_root_logger, monkeypatch):
    monkeypatch.setattr(logging_config, "ENABLE_FILE_LOGGING", False)

    setup_logging(log_level="warning", log_format="simple")
    setup_logging(log_level="warning", log_format="simple")

    assert len(restore_root_logger.handlers) == 1
    assert restore_root_logger.handlers[0].level == logging.WARNING
    assert logging.getLogger("sqlalchemy").level == logging.WARNING


def test_file_logging(restore_root_logger, monkeypatch, tmp_path):
    monkeypatch.setattr(logging_config, "ENABLE_FILE_LOGGING", True)
    monkeypatch.setattr(logging_config, "LOG_FILE_DIR", str(tmp_path / "logs"))

    setup_logging(log_level="INFO", log_format="detailed")
    for handler in restore_root_logger.handlers:
        handler.flush()

    assert (tmp_path / "logs" / "grant_portal.log").exists()
