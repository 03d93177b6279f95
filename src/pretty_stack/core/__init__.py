"""Core components.

This module exports the main building blocks:
- StackFrameLocator: Parses one stack trace line into a StackFrame
- TraceFormatter: Assembles the prettified trace
- get_prettified / pretty_errors / install / restore: Entry points
"""

from pretty_stack.core.formatter import TraceFormatter, get_prettified
from pretty_stack.core.highlighter import highlight_stream, tokenize_line
from pretty_stack.core.hooks import install, is_installed, pretty_errors, restore
from pretty_stack.core.locator import StackFrameLocator, split_location
from pretty_stack.core.underline import select_underline_length

__all__ = [
    "StackFrameLocator",
    "TraceFormatter",
    "get_prettified",
    "highlight_stream",
    "install",
    "is_installed",
    "pretty_errors",
    "restore",
    "select_underline_length",
    "split_location",
    "tokenize_line",
]
