"""Locator for V8-style stack frame lines.

This module turns one ``at <site>`` line of a stack trace into a
``StackFrame``. It supports:
- Named call sites: ``at foo (/abs/path/file.js:12:5)``
- Bare locations: ``at /abs/path/file.js:12:5``
- ``file://`` URLs, converted to plain filesystem paths
- Windows paths, whose drive letter colon stays in the filename
"""

from __future__ import annotations

from enum import Enum, auto
from urllib.parse import urlsplit
from urllib.request import url2pathname

import structlog

from pretty_stack.models.frame import StackFrame, UnlocatedFrame
from pretty_stack.utils.errors import FrameParseError
from pretty_stack.utils.logging import LogEventNames

log = structlog.get_logger()

DIGITS = "0123456789"
LOCATION_SEPARATOR = ":"
FILE_URL_SCHEME = "file://"
# Length of the "at " marker that opens every frame line
FRAME_PREFIX_LENGTH = 3


class ScanState(Enum):
    """States of the right-to-left location scanner."""

    SCANNING_COLUMN = auto()
    SCANNING_LINE = auto()
    REMAINDER_IS_FILENAME = auto()


def split_location(location: str) -> tuple[str, int, int]:
    """Split ``path:line:column`` into its parts, scanning from the end.

    Only the two trailing digit runs are consumed, so colons inside the
    path (``C:\\dir\\file.js:4:2``) are left alone.

    Args:
        location: Location string of a frame

    Returns:
        Tuple of (filename, line, column)

    Raises:
        FrameParseError: If the trailing ``:line:column`` is missing
    """
    state = ScanState.SCANNING_COLUMN
    digits = {ScanState.SCANNING_COLUMN: "", ScanState.SCANNING_LINE: ""}
    i = len(location) - 1

    while state is not ScanState.REMAINDER_IS_FILENAME:
        char = location[i] if i >= 0 else ""

        if char and char in DIGITS:
            digits[state] = char + digits[state]
        elif char == LOCATION_SEPARATOR and digits[state]:
            state = (
                ScanState.SCANNING_LINE
                if state is ScanState.SCANNING_COLUMN
                else ScanState.REMAINDER_IS_FILENAME
            )
        else:
            part = "column" if state is ScanState.SCANNING_COLUMN else "line"
            raise FrameParseError(f"Could not parse {part} number in location {location!r}")
        i -= 1

    filename = location[: i + 1]
    line = int(digits[ScanState.SCANNING_LINE])
    column = int(digits[ScanState.SCANNING_COLUMN])

    if not filename:
        raise FrameParseError(f"Location {location!r} has no filename")
    if line < 1 or column < 1:
        raise FrameParseError(f"Location {location!r} has a zero line or column")

    return filename, line, column


def file_url_to_path(url: str) -> str:
    """Convert a ``file://`` URL to a filesystem path for this platform."""
    parts = urlsplit(url)
    path = url2pathname(parts.path)
    if parts.netloc and parts.netloc != "localhost":
        # UNC share
        return f"//{parts.netloc}{path}"
    return path


class StackFrameLocator:
    """Locator for single stack trace lines.

    Example:
        locator = StackFrameLocator()
        frame = locator.locate("    at foo (/app/index.js:12:5)")
        print(frame.function_name, frame.line, frame.column)
    """

    def locate(self, line: str) -> StackFrame:
        """Parse one frame line.

        Args:
            line: Raw ``at <site>`` line from a stack trace

        Returns:
            StackFrame for the call site

        Raises:
            FrameParseError: If the location cannot be parsed
        """
        function_name, location = self._split_call_site(line)

        is_file_url = location.startswith(FILE_URL_SCHEME)
        try:
            filename, line_number, column = split_location(location)
        except FrameParseError as e:
            log.debug(LogEventNames.FRAME_PARSE_ERROR, line=line, error=str(e))
            raise FrameParseError(str(e), line=line) from e

        if is_file_url:
            filename = file_url_to_path(filename)

        return StackFrame(
            filename=filename,
            function_name=function_name,
            line=line_number,
            column=column,
        )

    def resolve(self, line: str) -> StackFrame | UnlocatedFrame:
        """Parse one frame line, keeping call sites that have no position.

        Native and engine-internal frames such as ``at new Promise (<anonymous>)``
        carry no ``:line:column``; they come back as an ``UnlocatedFrame``
        instead of raising.
        """
        try:
            return self.locate(line)
        except FrameParseError:
            function_name, location = self._split_call_site(line)
            return UnlocatedFrame(filename=location, function_name=function_name)

    def _split_call_site(self, line: str) -> tuple[str | None, str]:
        """Separate the function name from the location string.

        Args:
            line: Raw frame line

        Returns:
            Tuple of (function_name or None, location)
        """
        text = line.strip()[FRAME_PREFIX_LENGTH:]

        open_paren = line.find("(")
        if open_paren == -1:
            return None, text

        paren_in_text = text.find("(")
        function_name = (text[:paren_in_text] if paren_in_text != -1 else text).strip()

        close_paren = line.rfind(")")
        if close_paren > open_paren:
            location = line[open_paren + 1 : close_paren]
        else:
            location = line[open_paren + 1 :].strip()

        return function_name or None, location
