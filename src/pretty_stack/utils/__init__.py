"""Utility functions and helpers.

- errors: Exception hierarchy
- logging: Structured logging configuration
"""

from pretty_stack.utils.errors import (
    FrameParseError,
    MalformedStackError,
    PrettyStackError,
)
from pretty_stack.utils.logging import (
    LogEventNames,
    LogFormat,
    LogLevel,
    configure_logging,
)

__all__ = [
    # Errors
    "FrameParseError",
    "MalformedStackError",
    "PrettyStackError",
    # Logging
    "LogEventNames",
    "LogFormat",
    "LogLevel",
    "configure_logging",
]
