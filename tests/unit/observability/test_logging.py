"""
jsonv8n - unit tests for structured logging setup

File: tests/unit/observability/test_logging.py

Purpose
- Validate that structlog events and plain stdlib records share one set of handlers.

What this test file should cover
- JSON line validity and level filtering.
- File handler creation relative to missing directories.
- Replacing and shutting down the active setup.
"""

from __future__ import annotations

import io
import json
import logging
from typing import TYPE_CHECKING
from uuid import uuid4

import pytest
import structlog

from jsonv8n.observability.logging import (
    LoggingConfig,
    get_active_logging_handle,
    parse_log_level,
    setup_logging,
    shutdown_logging,
)

if TYPE_CHECKING:
    from pathlib import Path


def _logger_name() -> str:
    return f"jsonv8n_tests.logging.{uuid4().hex}"


def _json_lines(text: str) -> list[dict[str, object]]:
    return [json.loads(line) for line in text.splitlines() if line.strip()]


def test_json_format_renders_structlog_events_above_level() -> None:
    name = _logger_name()
    stream = io.StringIO()
    setup_logging(LoggingConfig(level="info", format="json", logger_name=name, stream=stream))
    logger = structlog.get_logger(name)

    logger.debug("compile_cache_hit", record="Order")
    logger.info("record_validated", record="Order", violations=2)
    shutdown_logging()

    parsed = _json_lines(stream.getvalue())
    assert len(parsed) == 1
    first = parsed[0]
    assert first["event"] == "record_validated"
    assert first["violations"] == 2
    assert first["level"] == "info"
    assert first["logger"] == name
    assert "timestamp" in first


def test_stdlib_records_use_the_same_renderer() -> None:
    name = _logger_name()
    stream = io.StringIO()
    setup_logging(LoggingConfig(level="DEBUG", format="json", logger_name=name, stream=stream))

    logging.getLogger(f"{name}.child").warning("plain %s", "message")
    shutdown_logging()

    parsed = _json_lines(stream.getvalue())
    assert [(item["event"], item["level"]) for item in parsed] == [("plain message", "warning")]


def test_console_format_without_colors() -> None:
    name = _logger_name()
    stream = io.StringIO()
    setup_logging(LoggingConfig(level="INFO", logger_name=name, colors=False, stream=stream))

    structlog.get_logger(name).info("descriptor_loaded", records=3)
    shutdown_logging()

    output = stream.getvalue()
    assert "descriptor_loaded" in output
    assert "records=3" in output
    assert "\x1b[" not in output


def test_file_handler_creates_parent_directories(tmp_path: Path) -> None:
    name = _logger_name()
    log_file = tmp_path / "logs" / "nested" / "run.log"
    handle = setup_logging(
        LoggingConfig(
            level="INFO", format="json", file=log_file, logger_name=name, stream=io.StringIO()
        )
    )

    structlog.get_logger(name).info("validation_finished", ok=True)
    shutdown_logging(handle)

    parsed = _json_lines(log_file.read_text(encoding="utf-8"))
    assert [item["event"] for item in parsed] == ["validation_finished"]
    assert parsed[0]["ok"] is True


def test_setup_replaces_active_handle_and_shutdown_is_idempotent() -> None:
    name = _logger_name()
    first = setup_logging(LoggingConfig(logger_name=name, stream=io.StringIO()))
    second = setup_logging(LoggingConfig(logger_name=name, stream=io.StringIO()))

    assert first.is_shutdown
    assert get_active_logging_handle() is second
    assert logging.getLogger(name).handlers == list(second.handlers)
    assert logging.getLogger(name).propagate is False

    shutdown_logging()
    shutdown_logging()

    assert second.is_shutdown
    assert get_active_logging_handle() is None
    assert logging.getLogger(name).handlers == []


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        ("debug", logging.DEBUG),
        (" Warning ", logging.WARNING),
        ("CRITICAL", logging.CRITICAL),
        (15, 15),
    ],
)
def test_parse_log_level_accepts_names_and_numbers(value: int | str, expected: int) -> None:
    assert parse_log_level(value) == expected


@pytest.mark.parametrize("value", ["verbose", "", True])
def test_parse_log_level_rejects_unknown_values(value: int | str) -> None:
    with pytest.raises(ValueError, match="invalid log level"):
        parse_log_level(value)
