"""Tests for the JSON log formatter and setup_logging."""

import json
import logging

from trialengage.infrastructure.observability import JSONFormatter, setup_logging


def _record(**extra):
    record = logging.LogRecord("trialengage.test", logging.INFO, __file__, 1, "hello", None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_includes_known_extras():
    line = JSONFormatter().format(_record(company_id="acme", status_code=200, other="x"))
    data = json.loads(line)
    assert data["message"] == "hello"
    assert data["level"] == "INFO"
    assert data["company_id"] == "acme"
    assert data["status_code"] == 200
    assert "other" not in data


def test_setup_logging_does_not_stack_handlers():
    setup_logging("DEBUG", "json")
    setup_logging("INFO", "text")
    named = [h for h in logging.root.handlers if h.get_name() == "trialengage"]
    assert len(named) == 1
    assert logging.root.level == logging.INFO
