"""Public observability primitives: structured logging setup."""

from jsonv8n.observability.logging import (
    LoggingConfig,
    LoggingHandle,
    get_active_logging_handle,
    parse_log_level,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "LoggingConfig",
    "LoggingHandle",
    "get_active_logging_handle",
    "parse_log_level",
    "setup_logging",
    "shutdown_logging",
]
