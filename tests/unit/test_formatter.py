"""Tests for TraceFormatter and get_prettified."""

import os
import re
from pathlib import Path
from types import SimpleNamespace

import pytest

from pretty_stack.config.schema import Options
from pretty_stack.core.formatter import TraceFormatter, display_path, get_prettified
from pretty_stack.models.error import ErrorRecord
from pretty_stack.models.frame import StackFrame
from pretty_stack.utils.errors import MalformedStackError

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

PLAIN = Options(colors=False)


class TestNoTrace:
    """Tests for rendering only the throw site."""

    def test_single_frame_block(self, app_error: SimpleNamespace) -> None:
        """Test the exact output for the throwing frame alone."""
        output = get_prettified(app_error, Options(no_trace=True, colors=False))

        assert output == "\n".join(
            [
                "at app.js:3:11 in function loadUser",
                "  │ ",
                '3 │     throw new Error("user not found");',
                "  │           ‾‾‾",
                "  ╰── Error: user not found",
            ]
        )

    def test_exactly_one_header(self, app_error: SimpleNamespace) -> None:
        """Test that only one frame header precedes the summary."""
        output = get_prettified(app_error, Options(no_trace=True, colors=False))
        lines = output.splitlines()

        assert sum(line.startswith("at ") for line in lines) == 1
        assert lines[-1].strip().startswith("╰── Error")


class TestFullTrace:
    """Tests for rendering every frame."""

    def test_frames_outermost_first(self, app_error: SimpleNamespace) -> None:
        """Test that the throw site is the last frame before the summary."""
        output = get_prettified(app_error, PLAIN)
        headers = [line for line in output.splitlines() if line.startswith("at ")]

        assert headers == [
            "at node:internal/main/run_main_module:28:49",
            "at node:internal/modules/cjs/loader:1364:14 in function Module._compile",
            "at app.js:9:1 in function Object.<anonymous>",
            "at app.js:3:11 in function loadUser",
        ]

    def test_gutter_uses_widest_line_number(self, app_error: SimpleNamespace) -> None:
        """Test that the gutter is sized for the largest kept line number."""
        output = get_prettified(app_error, PLAIN)

        assert "   3 │     throw" in output
        assert "     ╰── Error: user not found" in output

    def test_unreadable_frames_keep_header_only(self, app_error: SimpleNamespace) -> None:
        """Test that internal frames render without excerpts."""
        lines = get_prettified(app_error, PLAIN).splitlines()

        first = lines.index("at node:internal/main/run_main_module:28:49")
        assert lines[first + 1].startswith("at node:internal/modules/cjs/loader")

    def test_skip_node_files(self, app_error: SimpleNamespace) -> None:
        """Test that node: frames are filtered out."""
        output = get_prettified(app_error, Options(skip_node_files=True, colors=False))

        assert "node:internal" not in output
        assert output.splitlines()[0] == "at app.js:9:1 in function Object.<anonymous>"
        assert output.endswith(" ╰── Error: user not found")
        # Only single-digit lines remain
        assert '3 │     throw new Error("user not found");' in output.splitlines()

    def test_skip_modules(self, project_dir: Path) -> None:
        """Test that frames from excluded node_modules packages are dropped."""
        lib = os.sep.join(["", "srv", "app", "node_modules", "express", "lib", "router.js"])
        other = os.sep.join(["", "srv", "app", "node_modules", "lodash", "index.js"])
        err = SimpleNamespace(
            name="TypeError",
            message="x is not a function",
            stack=(
                "TypeError: x is not a function\n"
                f"    at handle ({lib}:10:3)\n"
                f"    at map ({other}:5:7)"
            ),
        )

        output = get_prettified(err, Options(skip_modules=("express",), colors=False))

        assert "express" not in output
        assert "lodash" in output

    def test_smart_underline_disabled(self, app_error: SimpleNamespace) -> None:
        """Test that a plain underline is one character wide."""
        output = get_prettified(
            app_error, Options(no_trace=True, smart_underline=False, colors=False)
        )

        assert "  │           ‾\n" in output

    def test_custom_underline_character(self, app_error: SimpleNamespace) -> None:
        """Test overriding the underline character."""
        output = get_prettified(app_error, Options(no_trace=True, underline="^", colors=False))

        assert "  │           ^^^" in output

    def test_plain_text_frame_underline(self, app_error: SimpleNamespace) -> None:
        """Test underlining an identifier at the start of a line."""
        output = get_prettified(app_error, PLAIN)

        assert "   9 │ loadUser(null);\n     │ ‾‾‾‾‾‾‾‾\n" in output


class TestAsyncFrames:
    """Tests for engine frames that carry no position."""

    def test_promise_frames_do_not_abort(self, project_dir: Path) -> None:
        """Test an async crash mixing located and unlocated frames."""
        app = project_dir / "app.js"
        err = SimpleNamespace(
            name="Error",
            message="user not found",
            stack=(
                "Error: user not found\n"
                f"    at loadUser ({app}:3:11)\n"
                "    at new Promise (<anonymous>)\n"
                "    at async Promise.all (index 0)"
            ),
        )

        lines = get_prettified(err, PLAIN).splitlines()

        assert lines[0] == "at index 0 in function async Promise.all"
        assert lines[1] == "at <anonymous> in function new Promise"
        assert lines[2] == "at app.js:3:11 in function loadUser"
        assert lines[4] == '3 │     throw new Error("user not found");'
        assert lines[-1] == "  ╰── Error: user not found"

    def test_unlocated_frames_do_not_widen_gutter(self) -> None:
        """Test that only located frames size the gutter."""
        err = SimpleNamespace(
            name="Error",
            message="x",
            stack="Error: x\n    at new Promise (<anonymous>)\n    at async Promise.all (index 0)",
        )

        assert get_prettified(err, PLAIN).splitlines()[-1] == " ╰── Error: x"


class TestColors:
    """Tests for colored output."""

    def test_colored_output_matches_plain(self, app_error: SimpleNamespace) -> None:
        """Test that stripping escapes gives the uncolored rendering."""
        colored = get_prettified(app_error, Options(no_trace=True))
        plain = get_prettified(app_error, Options(no_trace=True, colors=False))

        assert colored != plain
        assert ANSI_RE.sub("", colored) == plain

    def test_error_name_is_red(self, app_error: SimpleNamespace) -> None:
        """Test that the summary shows the error name in red."""
        colored = get_prettified(app_error, Options(no_trace=True))

        assert "\x1b[31mError\x1b[0m" in colored


class TestPurity:
    """Tests that formatting is a pure function of its inputs."""

    def test_repeatable(self, app_error: SimpleNamespace) -> None:
        """Test that identical inputs give byte-identical output."""
        options = Options(skip_node_files=True)

        assert get_prettified(app_error, options) == get_prettified(app_error, options)

    def test_formatter_reuse(self, app_error: SimpleNamespace) -> None:
        """Test that a formatter instance can be reused."""
        formatter = TraceFormatter(PLAIN)

        assert formatter.format(app_error) == formatter.format(app_error)


class TestErrors:
    """Tests for failure handling."""

    def test_missing_stack_raises(self) -> None:
        """Test that an error without stack text is rejected."""
        with pytest.raises(MalformedStackError):
            get_prettified(SimpleNamespace(name="Error", message="boom", stack=None))

    def test_empty_stack_raises(self) -> None:
        """Test that an empty stack string is rejected."""
        with pytest.raises(MalformedStackError):
            get_prettified(SimpleNamespace(name="Error", message="boom", stack=""))

    def test_native_frame_renders_header_only(self) -> None:
        """Test that a frame without line and column keeps its header."""
        err = SimpleNamespace(name="Error", message="boom", stack="Error: boom\n    at foo (native)")

        assert get_prettified(err, PLAIN) == "at native in function foo\n ╰── Error: boom"

    def test_stack_without_frames(self) -> None:
        """Test that a header-only stack renders just the summary."""
        err = SimpleNamespace(name="RangeError", message="too deep", stack="RangeError: too deep")

        assert get_prettified(err, PLAIN) == " ╰── RangeError: too deep"

    def test_missing_source_never_raises(self, tmp_path: Path) -> None:
        """Test that a deleted source file degrades to the header."""
        missing = tmp_path / "gone.js"
        err = SimpleNamespace(name="Error", message="x", stack=f"Error: x\n    at f ({missing}:2:3)")

        output = get_prettified(err, PLAIN)

        assert output.splitlines()[0].endswith("gone.js:2:3 in function f")
        assert "│ " not in output
        assert output.splitlines()[1] == "  ╰── Error: x"


class TestPythonExceptions:
    """Tests for formatting native Python exceptions."""

    def test_exception_traceback(self) -> None:
        """Test that a raised exception renders its own source line."""

        def explode() -> None:
            raise ValueError("boom")

        try:
            explode()
        except ValueError as e:
            output = get_prettified(e, Options(no_trace=True, colors=False))

        lines = output.splitlines()
        assert lines[0].endswith("in function explode")
        assert 'raise ValueError("boom")' in lines[2]
        assert lines[-1].endswith("╰── ValueError: boom")

    def test_record_passthrough(self) -> None:
        """Test that an ErrorRecord is formatted as is."""
        record = ErrorRecord(name="Error", message="m", stack="Error: m")

        assert get_prettified(record, PLAIN) == " ╰── Error: m"


class TestRenderFrame:
    """Tests for the per-frame rendering step."""

    def test_has_content(self, project_dir: Path) -> None:
        """Test a frame whose source is readable."""
        frame = StackFrame(str(project_dir / "app.js"), "loadUser", 3, 21)

        rendered = TraceFormatter(PLAIN).render_frame(frame)

        assert rendered.has_source_content
        assert rendered.underline_length == 16
        assert rendered.highlighted_line == '    throw new Error("user not found");'

    def test_without_content(self) -> None:
        """Test a frame whose source is missing."""
        frame = StackFrame("node:events", None, 1, 1)

        rendered = TraceFormatter(PLAIN).render_frame(frame)

        assert not rendered.has_source_content
        assert rendered.highlighted_line == ""


class TestDisplayPath:
    """Tests for header paths."""

    def test_relative_to_cwd(self, project_dir: Path) -> None:
        """Test that absolute paths under the cwd become relative."""
        assert display_path(str(project_dir / "app.js")) == "app.js"
