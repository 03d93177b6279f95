"""Assembly of the prettified trace.

This module implements the TraceFormatter class that walks an error's
stack, filters frames, highlights each frame's source line and joins the
blocks into the final output. The output is a pure function of the error
and the options (plus the files on disk and the working directory).
"""

from __future__ import annotations

import os
from typing import Any

import structlog

from pretty_stack.config.schema import Options
from pretty_stack.core.highlighter import (
    ERROR_STYLE,
    THEME,
    highlight_stream,
    paint,
    read_source_line,
    tokenize_line,
)
from pretty_stack.core.locator import StackFrameLocator
from pretty_stack.core.underline import select_underline_length
from pretty_stack.models.error import ErrorRecord
from pretty_stack.models.frame import RenderedFrame, StackFrame, UnlocatedFrame
from pretty_stack.utils.errors import MalformedStackError
from pretty_stack.utils.logging import LogEventNames

log = structlog.get_logger()

NODE_MODULES = "node_modules"
GUTTER_DELIMITER = "│"
SUMMARY_MARKER = "╰──"


def display_path(filename: str) -> str:
    """Path relative to the working directory, or unchanged if impossible."""
    try:
        return os.path.relpath(filename)
    except ValueError:
        # Different drive on Windows
        return filename


class TraceFormatter:
    """Formatter turning an error into an annotated, colorized trace.

    Example:
        formatter = TraceFormatter(Options(no_trace=True))
        print(formatter.format(err))
    """

    def __init__(
        self,
        options: Options | None = None,
        locator: StackFrameLocator | None = None,
    ) -> None:
        """Initialize the formatter.

        Args:
            options: Rendering options (defaults used if None)
            locator: Frame line parser
        """
        self._options = options or Options()
        self._locator = locator or StackFrameLocator()

    def format(self, err: Any) -> str:
        """Render an error and its stack.

        Args:
            err: Error-like object, Python exception or ErrorRecord

        Returns:
            The formatted trace

        Raises:
            MalformedStackError: If the error has no stack text
        """
        record = ErrorRecord.from_error(err)
        if not record.stack:
            raise MalformedStackError(f"{record.name} has no stack trace")

        frame_lines = record.frame_lines
        if self._options.no_trace:
            frame_lines = frame_lines[:1]

        # Outermost call first, so the throw site ends up above the summary
        frames = [self._locator.resolve(line) for line in reversed(frame_lines)]
        kept = [frame for frame in frames if self._keep(frame)]

        gutter_width = max(
            (len(str(frame.line)) for frame in kept if isinstance(frame, StackFrame)),
            default=0,
        )
        blocks = [
            self._format_frame(self.render_frame(frame), gutter_width)
            if isinstance(frame, StackFrame)
            else self._format_header(frame.filename, frame.function_name)
            for frame in kept
        ]
        blocks.append(self._format_summary(record, gutter_width))

        return "\n".join(blocks)

    def render_frame(self, frame: StackFrame) -> RenderedFrame:
        """Highlight a frame's source line and size its underline.

        Frames whose source cannot be read are returned without content.
        """
        source_line = read_source_line(frame.filename, frame.line)
        if source_line is None:
            return RenderedFrame(
                frame=frame,
                highlighted_line="",
                underline_length=1,
                has_source_content=False,
            )

        tokens = tokenize_line(source_line, frame.filename)
        return RenderedFrame(
            frame=frame,
            highlighted_line=highlight_stream(tokens, colors=self._options.colors),
            underline_length=select_underline_length(
                tokens, frame.column, smart=self._options.smart_underline
            ),
            has_source_content=True,
        )

    def _keep(self, frame: StackFrame | UnlocatedFrame) -> bool:
        """Apply the frame filters from the options."""
        if self._options.skip_node_files and frame.is_runtime_internal:
            log.debug(LogEventNames.FRAME_SKIPPED, filename=frame.filename, reason="node_internal")
            return False

        for module in self._options.skip_modules:
            if f"{NODE_MODULES}{os.sep}{module}" in frame.filename:
                log.debug(
                    LogEventNames.FRAME_SKIPPED,
                    filename=frame.filename,
                    reason="skipped_module",
                    module=module,
                )
                return False

        return True

    def _paint(self, text: str, key: str) -> str:
        return paint(text, THEME[key], self._options.colors)

    def _format_header(self, location: str, function_name: str | None) -> str:
        parts = [self._paint("at", "comment"), self._paint(location, "symbol")]
        if function_name:
            parts += [
                self._paint("in", "comment"),
                self._paint("function", "keyword"),
                self._paint(function_name, "function"),
            ]
        return " ".join(parts)

    def _format_frame(self, rendered: RenderedFrame, gutter_width: int) -> str:
        frame = rendered.frame
        header = self._format_header(
            f"{display_path(frame.filename)}:{frame.line}:{frame.column}",
            frame.function_name,
        )

        if not rendered.has_source_content:
            return header

        delimiter = self._paint(GUTTER_DELIMITER, "comment")
        line_start = f"{' ' * gutter_width} {delimiter} "
        line_number = self._paint(str(frame.line).rjust(gutter_width), "number")
        underline = paint(
            self._options.underline * rendered.underline_length,
            ERROR_STYLE,
            self._options.colors,
        )

        return "\n".join(
            [
                header,
                line_start,
                f"{line_number} {delimiter} {rendered.highlighted_line}",
                f"{line_start}{' ' * (frame.column - 1)}{underline}",
            ]
        )

    def _format_summary(self, record: ErrorRecord, gutter_width: int) -> str:
        return (
            f"{' ' * gutter_width} {self._paint(SUMMARY_MARKER, 'comment')} "
            f"{paint(record.name, ERROR_STYLE, self._options.colors)}"
            f"{self._paint(':', 'comment')} {self._paint(record.message, 'symbol')}"
        )


def get_prettified(err: Any, options: Options | None = None) -> str:
    """Get a prettified version of an error.

    Args:
        err: Error-like object, Python exception or ErrorRecord
        options: Rendering options

    Returns:
        The formatted trace
    """
    return TraceFormatter(options).format(err)
