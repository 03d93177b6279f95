"""Normalized error records.

Anything that can be prettified is turned into an ``ErrorRecord`` first:
objects exposing ``name``/``message``/``stack`` (the shape of a JavaScript
error), Python exceptions, or trace text captured from a process's output.
"""

from __future__ import annotations

import linecache
import re
import traceback
from dataclasses import dataclass
from typing import Any

from pretty_stack.utils.errors import MalformedStackError

FRAME_PREFIX = "at "

# "TypeError: msg", "TypeError [ERR_INVALID_ARG_TYPE]: msg", "Uncaught Error: msg"
ERROR_HEADER_PATTERN = re.compile(
    r"^(?:Uncaught )?([A-Za-z_$][\w$]*(?:\.[A-Za-z_$][\w$]*)*(?: \[[A-Z0-9_]+\])?)(?::\s?(.*))?$"
)


def is_frame_line(line: str) -> bool:
    """Check if a line of stack text is an ``at <site>`` frame line."""
    return line.strip().startswith(FRAME_PREFIX)


def _character_column(summary: traceback.FrameSummary) -> int:
    """0-based character offset of a frame's failing expression.

    ``FrameSummary.colno`` counts UTF-8 bytes into the unstripped source
    line, so it is converted back to characters using that line.
    """
    colno = getattr(summary, "colno", None)
    if not colno or summary.lineno is None:
        return 0

    source_line = linecache.getline(summary.filename, summary.lineno)
    if not source_line:
        return colno
    return len(source_line.encode("utf-8")[:colno].decode("utf-8", errors="replace"))


@dataclass(frozen=True)
class ErrorRecord:
    """An error reduced to its name, message and V8-style stack text."""

    name: str
    message: str
    stack: str | None

    @property
    def frame_lines(self) -> tuple[str, ...]:
        """The stack's frame lines, innermost (throw site) first."""
        if not self.stack:
            return ()
        return tuple(line for line in self.stack.splitlines() if is_frame_line(line))

    @classmethod
    def from_error(cls, err: Any) -> ErrorRecord:
        """Normalize any supported error value.

        Objects with a string ``stack`` attribute are taken at face value;
        other Python exceptions have their traceback converted.
        """
        if isinstance(err, ErrorRecord):
            return err

        stack = getattr(err, "stack", None)
        is_exception = isinstance(err, BaseException)
        if isinstance(stack, str) or (stack is None and not is_exception):
            message = getattr(err, "message", None)
            if message is None:
                message = str(err) if is_exception else ""
            return cls(
                name=str(getattr(err, "name", None) or type(err).__name__),
                message=str(message),
                stack=stack,
            )

        return cls.from_exception(err)

    @classmethod
    def from_exception(cls, exc: BaseException) -> ErrorRecord:
        """Build a record from a Python exception and its traceback.

        Frames are written in the V8 ``at func (path:line:col)`` form with
        the innermost frame first and 1-based columns.
        """
        name = type(exc).__name__
        message = str(exc)
        lines = [f"{name}: {message}" if message else name]

        for summary in reversed(traceback.extract_tb(exc.__traceback__)):
            if not summary.lineno:
                continue
            column = _character_column(summary) + 1
            lines.append(
                f"    {FRAME_PREFIX}{summary.name} ({summary.filename}:{summary.lineno}:{column})"
            )

        return cls(name=name, message=message, stack="\n".join(lines))

    @classmethod
    def from_text(cls, text: str) -> ErrorRecord:
        """Parse trace text captured from a JavaScript runtime.

        Handles the plain ``err.stack`` form as well as Node's crash output,
        where the source echo and caret precede the error header.

        Raises:
            MalformedStackError: If the text contains no frame lines
        """
        lines = text.splitlines()
        first_frame = next((i for i, line in enumerate(lines) if is_frame_line(line)), None)
        if first_frame is None:
            raise MalformedStackError("No stack frames found in trace text")

        # The header is the paragraph directly above the first frame
        start = first_frame
        while start > 0 and lines[start - 1].strip():
            start -= 1
        header = [line.rstrip() for line in lines[start:first_frame]]

        frames = []
        for line in lines[first_frame:]:
            if not is_frame_line(line):
                break
            frames.append(line.rstrip())

        name, message = "Error", ""
        if header:
            match = ERROR_HEADER_PATTERN.match(header[0].strip())
            if match:
                name = match.group(1)
                message = "\n".join([match.group(2) or "", *header[1:]]).strip()
            else:
                message = "\n".join(header).strip()

        return cls(name=name, message=message, stack="\n".join([*header, *frames]))
