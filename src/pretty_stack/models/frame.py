"""Data models for stack frames."""

from dataclasses import dataclass

RUNTIME_INTERNAL_PREFIX = "node:"


@dataclass(frozen=True)
class StackFrame:
    """A single call site parsed from one line of a stack trace."""

    filename: str
    function_name: str | None
    line: int
    column: int

    @property
    def is_runtime_internal(self) -> bool:
        """Check if this frame is from the Node.js runtime itself."""
        return self.filename.startswith(RUNTIME_INTERNAL_PREFIX)


@dataclass(frozen=True)
class UnlocatedFrame:
    """A call site without a line and column.

    V8 writes these for native and engine-internal calls, e.g.
    ``at new Promise (<anonymous>)`` or ``at async Promise.all (index 0)``.
    ``filename`` holds the text V8 printed in place of the location.
    """

    filename: str
    function_name: str | None

    @property
    def is_runtime_internal(self) -> bool:
        return self.filename.startswith(RUNTIME_INTERNAL_PREFIX)


@dataclass(frozen=True)
class RenderedFrame:
    """A stack frame together with its highlighted source excerpt."""

    frame: StackFrame
    highlighted_line: str  # ANSI-colored, empty without source
    underline_length: int
    has_source_content: bool = False
