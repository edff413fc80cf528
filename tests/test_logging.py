"""Log line formatting."""
import json
import logging
import sys

from backend.app.core.logging_config import JsonFormatter


def make_record(message, *args, exc_info=None):
    return logging.LogRecord("backend.test", logging.WARNING, __file__, 1, message, args, exc_info)


def test_json_line_escapes_quotes_and_newlines():
    formatter = JsonFormatter(datefmt="%Y-%m-%dT%H:%M:%S")

    line = formatter.format(make_record('user "%s" said\nhello', "alice"))

    assert "\n" not in line
    payload = json.loads(line)
    assert payload["message"] == 'user "alice" said\nhello'
    assert payload["level"] == "WARNING"
    assert payload["logger"] == "backend.test"


def test_json_line_carries_exception():
    formatter = JsonFormatter()
    try:
        raise ValueError("boom")
    except ValueError:
        record = make_record("failed", exc_info=sys.exc_info())

    payload = json.loads(formatter.format(record))

    assert "ValueError: boom" in payload["exc_info"]
