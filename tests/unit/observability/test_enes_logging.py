"""
enes unit tests for structured logging

File: tests/unit/observability/test_enes_logging.py

Purpose
- Validate handler wiring, JSON-lines and text formatting, correlation and redaction.

What this test file should cover
- JSON lines on the stream and in an optional log file.
- Correlation fields bound with set_correlation_fields and reset by token.
- Sensitive keys masked in extra fields; other fields preserved.
- Level filtering and idempotent shutdown.
"""

from __future__ import annotations

import io
import json
import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from enes.observability import (
    LoggingConfig,
    default_log_redactor,
    get_correlation_context,
    reset_correlation_fields,
    set_correlation_fields,
    setup_logging,
    setup_structured_logging,
    shutdown_logging,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def _cleanup_logging() -> Iterator[None]:
    yield
    shutdown_logging()


def test_json_lines_go_to_stream_and_file(tmp_path: Path) -> None:
    stream = io.StringIO()
    log_file = tmp_path / "nested" / "enes.log"
    handle = setup_structured_logging(
        LoggingConfig(level="INFO", log_format="json", log_file=log_file, stream=stream)
    )

    logging.getLogger("enes.engine").info("estimation finished", extra={"record_count": 2})
    handle.flush()

    stream_event = json.loads(stream.getvalue().strip())
    file_event = json.loads(log_file.read_text(encoding="utf-8").strip())
    assert stream_event == file_event
    assert stream_event["level"] == "INFO"
    assert stream_event["logger"] == "enes.engine"
    assert stream_event["message"] == "estimation finished"
    assert stream_event["fields"] == {"record_count": 2}
    assert stream_event["timestamp"].endswith("Z")


def test_text_format_renders_correlation_and_fields() -> None:
    stream = io.StringIO()
    setup_logging({"log_level": "info", "log_format": "text"}, stream=stream)

    token = set_correlation_fields(method="text_entropy", input_path="pw.txt")
    try:
        logging.getLogger("enes.parsing.parser").info(
            "password file parsed", extra={"record_count": 3}
        )
    finally:
        reset_correlation_fields(token)

    assert stream.getvalue() == (
        "INFO enes.parsing.parser: password file parsed "
        "input_path=pw.txt method=text_entropy record_count=3\n"
    )


def test_correlation_fields_are_reset_by_token() -> None:
    assert get_correlation_context() == {}

    token = set_correlation_fields(run_id="r-1", method=" gp_click_guesswork ", input_path=None)
    assert get_correlation_context() == {"run_id": "r-1", "method": "gp_click_guesswork"}
    reset_correlation_fields(token)

    assert get_correlation_context() == {}


def test_sensitive_fields_are_redacted() -> None:
    stream = io.StringIO()
    setup_structured_logging(LoggingConfig(level="DEBUG", log_format="json", stream=stream))

    logging.getLogger("enes").debug(
        "record rejected", extra={"raw_line": "hunter2", "line_count": 7}
    )

    event = json.loads(stream.getvalue())
    assert event["fields"] == {"raw_line": "***REDACTED***", "line_count": 7}


def test_default_redactor_masks_nested_keys() -> None:
    payload = {"outer": {"Password": "x", "ok": [1, {"token": "t"}]}}

    assert default_log_redactor(payload) == {
        "outer": {"Password": "***REDACTED***", "ok": [1, {"token": "***REDACTED***"}]}
    }


def test_records_below_level_are_dropped() -> None:
    stream = io.StringIO()
    setup_logging({"log_level": "WARNING", "log_format": "text"}, stream=stream)

    logging.getLogger("enes.engine").info("estimation finished")
    logging.getLogger("enes.engine").warning("something odd")

    assert stream.getvalue() == "WARNING enes.engine: something odd\n"


def test_shutdown_detaches_handlers_and_is_idempotent() -> None:
    stream = io.StringIO()
    handle = setup_structured_logging(LoggingConfig(stream=stream))
    logger = logging.getLogger("enes")

    shutdown_logging()
    shutdown_logging()

    assert handle.is_shutdown
    assert all(handler not in logger.handlers for handler in handle.handlers)
    assert not stream.closed


def test_invalid_level_is_rejected() -> None:
    with pytest.raises(ValueError, match="unsupported logging level"):
        setup_structured_logging(LoggingConfig(level="LOUD", stream=io.StringIO()))
