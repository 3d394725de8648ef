"""Tests for JSON structured logging."""
import json
import logging
import sys

from story_forge.core.logging import JSONFormatter, setup_logging


def _record(**extra: object) -> logging.LogRecord:
    record = logging.LogRecord(
        name="forge",
        level=logging.WARNING,
        pathname="",
        lineno=0,
        msg="something %s",
        args=("happened",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_json_formatter_has_required_fields() -> None:
    """Log output must contain timestamp, level, service, message fields."""
    parsed = json.loads(JSONFormatter().format(_record()))

    assert "timestamp" in parsed
    assert parsed["level"] == "WARNING"
    assert parsed["service"] == "forge"
    assert parsed["message"] == "something happened"


def test_json_formatter_copies_extra_fields() -> None:
    parsed = json.loads(JSONFormatter().format(_record(flow="scene", collection="scenes", unrelated="x")))
    assert parsed["flow"] == "scene"
    assert parsed["collection"] == "scenes"
    assert "unrelated" not in parsed


def test_json_formatter_includes_error_type_on_exception() -> None:
    """Log output should include error_type field when an exception is attached."""
    try:
        raise ValueError("test error")
    except ValueError:
        exc_info = sys.exc_info()

    record = _record()
    record.exc_info = exc_info
    parsed = json.loads(JSONFormatter().format(record))

    assert parsed["error_type"] == "ValueError"
    assert "test error" in parsed["error_detail"]


def test_json_formatter_keeps_non_ascii() -> None:
    record = _record()
    record.msg = "café"
    record.args = ()
    assert "café" in JSONFormatter().format(record)


def test_setup_logging_returns_logger() -> None:
    """setup_logging() should return a configured Logger instance."""
    logger = setup_logging("test-app")
    assert isinstance(logger, logging.Logger)
    assert logger.name == "test-app"
    assert len(logger.handlers) == 1
    setup_logging("test-app")
    assert len(logger.handlers) == 1


def test_json_formatter_ignores_unlisted_extras() -> None:
    parsed = json.loads(JSONFormatter().format(_record(attempt=2)))
    assert "attempt" not in parsed
