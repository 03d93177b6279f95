"""Exceptions raised while locating and rendering stack frames.

Unreadable source files are not an error: the affected frame is rendered
without its excerpt. Everything else propagates to the caller.
"""

from __future__ import annotations


class PrettyStackError(Exception):
    """Base exception for all pretty-stack errors."""


class MalformedStackError(PrettyStackError):
    """The error carries no usable stack text."""


class FrameParseError(PrettyStackError, ValueError):
    """A stack frame's location could not be parsed.

    Attributes:
        line: The raw trace line that failed to parse.
    """

    def __init__(self, message: str, line: str | None = None) -> None:
        super().__init__(message)
        self.line = line
