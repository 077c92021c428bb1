"""Structured logging setup: structlog over stdlib handlers, JSON-lines or console output.

Library modules only call ``structlog.get_logger(__name__)``; the command line front end is
the one place that calls :func:`setup_logging`.
"""

from __future__ import annotations

import logging
import sys
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import IO, Final, Literal

import structlog

from jsonv8n.constants import DEFAULT_LOGGER_NAME

LogFormat = Literal["json", "console"]

_LEVELS: Final[dict[str, int]] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}

_ACTIVE_HANDLE_LOCK = threading.Lock()
_ACTIVE_HANDLE: LoggingHandle | None = None


@dataclass(frozen=True, slots=True)
class LoggingConfig:
    """Where and how log events are rendered."""

    level: int | str = "WARNING"
    format: LogFormat = "console"
    file: Path | str | None = None
    logger_name: str = DEFAULT_LOGGER_NAME
    colors: bool = True
    stream: IO[str] | None = None


class LoggingHandle:
    """Handlers installed by one :func:`setup_logging` call."""

    def __init__(self, *, logger: logging.Logger, handlers: tuple[logging.Handler, ...]) -> None:
        self.logger = logger
        self.handlers = handlers
        self._shutdown_lock = threading.Lock()
        self._is_shutdown = False

    @property
    def is_shutdown(self) -> bool:
        return self._is_shutdown

    def shutdown(self) -> None:
        with self._shutdown_lock:
            if self._is_shutdown:
                return
            for handler in self.handlers:
                self.logger.removeHandler(handler)
                handler.flush()
                handler.close()
            self._is_shutdown = True


def setup_logging(config: LoggingConfig | None = None) -> LoggingHandle:
    """Configure structlog and the package logger; replaces any previous setup."""

    config = config or LoggingConfig()
    _shutdown_active_handle()
    level = parse_log_level(config.level)

    shared: list[structlog.typing.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    renderer: structlog.typing.Processor
    if config.format == "json":
        renderer = structlog.processors.JSONRenderer(sort_keys=True)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=config.colors)
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=shared,
        processors=[structlog.stdlib.ProcessorFormatter.remove_processors_meta, renderer],
    )

    handlers: list[logging.Handler] = [logging.StreamHandler(config.stream or sys.stderr)]
    if config.file is not None:
        path = Path(config.file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handlers.append(logging.FileHandler(path, encoding="utf-8"))

    logger = logging.getLogger(config.logger_name)
    logger.setLevel(level)
    logger.propagate = False
    for existing in list(logger.handlers):
        logger.removeHandler(existing)
        existing.close()
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        logger.addHandler(handler)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            *shared,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=False,
    )

    handle = LoggingHandle(logger=logger, handlers=tuple(handlers))
    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        _ACTIVE_HANDLE = handle
    return handle


def shutdown_logging(handle: LoggingHandle | None = None) -> None:
    """Close the handlers of ``handle`` (default: the active one) and restore structlog defaults."""

    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        resolved = handle if handle is not None else _ACTIVE_HANDLE
        if resolved is None:
            return
        if _ACTIVE_HANDLE is resolved:
            _ACTIVE_HANDLE = None
    resolved.shutdown()
    structlog.reset_defaults()


def get_active_logging_handle() -> LoggingHandle | None:
    with _ACTIVE_HANDLE_LOCK:
        return _ACTIVE_HANDLE


def parse_log_level(value: int | str) -> int:
    if isinstance(value, bool):
        raise ValueError(f"invalid log level {value!r}")
    if isinstance(value, int):
        return value
    normalized = value.strip().upper()
    if normalized not in _LEVELS:
        raise ValueError(f"invalid log level {value!r}; expected one of {sorted(_LEVELS)}")
    return _LEVELS[normalized]


def _shutdown_active_handle() -> None:
    with _ACTIVE_HANDLE_LOCK:
        global _ACTIVE_HANDLE
        previous = _ACTIVE_HANDLE
        _ACTIVE_HANDLE = None
    if previous is not None:
        previous.shutdown()


__all__ = [
    "LogFormat",
    "LoggingConfig",
    "LoggingHandle",
    "get_active_logging_handle",
    "parse_log_level",
    "setup_logging",
    "shutdown_logging",
]
