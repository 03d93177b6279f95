"""Structured logging configuration.

This module provides logging configuration for pretty-stack:
- Configurable log levels and output formats (JSON/console)
- Service name and version on every entry
- File and console output support

The library modules only ever call ``structlog.get_logger()``; configuring
output is left to the application (the CLI calls ``configure_logging``).
"""

from __future__ import annotations

import logging
import sys
from collections.abc import MutableMapping
from enum import StrEnum
from pathlib import Path
from typing import Any

import structlog


class LogFormat(StrEnum):
    """Log output format options."""

    JSON = "json"
    CONSOLE = "console"


class LogLevel(StrEnum):
    """Log level options."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


def add_context_processor(
    logger: logging.Logger,
    method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Add contextual information to all log entries.

    Adds standard fields for correlation and debugging:
    - service: Always "pretty-stack"
    - version: Current package version (if available)

    Args:
        logger: Logger instance (unused)
        method_name: Log method name (unused)
        event_dict: Event dictionary to process

    Returns:
        Event dictionary with added context
    """
    event_dict["service"] = "pretty-stack"

    try:
        from pretty_stack._version import __version__

        event_dict["version"] = __version__
    except (ImportError, RuntimeError):
        pass

    return event_dict


def configure_logging(
    level: LogLevel | str = LogLevel.WARNING,
    log_format: LogFormat | str = LogFormat.CONSOLE,
    file_path: Path | str | None = None,
    file_enabled: bool = False,
) -> None:
    """Configure structured logging for the application.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Output format (json or console)
        file_path: Path to log file (if file logging enabled)
        file_enabled: Whether to enable file logging

    Example:
        # While debugging frame filters
        configure_logging(level="DEBUG", log_format="console")
    """
    if isinstance(level, str):
        level = LogLevel(level.upper())
    if isinstance(log_format, str):
        log_format = LogFormat(log_format.lower())

    numeric_level = getattr(logging, level.value)

    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        add_context_processor,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == LogFormat.JSON:
        shared_processors.append(structlog.processors.JSONRenderer())
    else:
        shared_processors.append(
            structlog.dev.ConsoleRenderer(
                colors=True, exception_formatter=structlog.dev.plain_traceback
            )
        )

    structlog.configure(
        processors=shared_processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    handlers: list[logging.Handler] = []

    # Logs go to stderr so they never mix with the rendered trace on stdout
    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(numeric_level)
    handlers.append(console_handler)

    if file_enabled and file_path:
        try:
            file_path = Path(file_path)
            file_path.parent.mkdir(parents=True, exist_ok=True)

            file_handler = logging.FileHandler(file_path)
            file_handler.setLevel(numeric_level)
            handlers.append(file_handler)
        except OSError as e:
            console_logger = logging.getLogger("pretty_stack.logging")
            console_logger.warning(f"Could not create log file {file_path}: {e}")

    logging.basicConfig(
        format="%(message)s",
        level=numeric_level,
        handlers=handlers,
        force=True,
    )


class LogEventNames:
    """Standard log event names for consistency."""

    # Frame location
    FRAME_PARSE_ERROR = "frame_parse_error"
    FRAME_SKIPPED = "frame_skipped"

    # Source excerpts
    SOURCE_UNREADABLE = "source_unreadable"
    SOURCE_LINE_MISSING = "source_line_missing"

    # Hook lifecycle
    HOOK_INSTALLED = "hook_installed"
    HOOK_RESTORED = "hook_restored"
    HOOK_FALLBACK = "hook_fallback"
    WRAPPED_CALL_FAILED = "wrapped_call_failed"

    # Configuration
    CONFIG_LOADING = "config_loading"
    CONFIG_LOADED = "config_loaded"
