"""Pretty-printing for runtime error stack traces."""

from pretty_stack.config.schema import Options
from pretty_stack.core import (
    StackFrameLocator,
    TraceFormatter,
    get_prettified,
    install,
    is_installed,
    pretty_errors,
    restore,
)
from pretty_stack.models import ErrorRecord, RenderedFrame, StackFrame
from pretty_stack.utils.errors import FrameParseError, MalformedStackError, PrettyStackError

__all__ = [
    "ErrorRecord",
    "FrameParseError",
    "MalformedStackError",
    "Options",
    "PrettyStackError",
    "RenderedFrame",
    "StackFrame",
    "StackFrameLocator",
    "TraceFormatter",
    "get_prettified",
    "install",
    "is_installed",
    "pretty_errors",
    "restore",
]
