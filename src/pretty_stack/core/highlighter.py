"""Syntax highlighting for single source lines.

Lines are tokenized with Pygments and rebuilt into a small token tree
(``Text`` fragments and typed ``Token`` nodes) so that string literals with
interpolations nest the way the source reads. The tree is then colorized
with a fixed theme, rendered to ANSI escapes by rich.
"""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path

import structlog
from pygments.lexer import Lexer
from pygments.lexers import JavascriptLexer, get_lexer_for_filename
from pygments.token import (
    Comment,
    Generic,
    Keyword,
    Name,
    Number,
    Operator,
    Punctuation,
    String,
    _TokenType,
)
from pygments.util import ClassNotFound
from rich.color import ColorSystem
from rich.style import Style

from pretty_stack.models.tokens import Node, Text, Token, TokenStream, stream_text
from pretty_stack.utils.logging import LogEventNames

log = structlog.get_logger()

# Theme keys follow the token names of the Prism "tomorrow" palette
THEME: dict[str, Style] = {
    "keyword": Style(color="#cc99cd"),
    "builtin": Style(color="#cc99cd"),
    "class-name": Style(color="#f8c555"),
    "function": Style(color="#f08d49"),
    "boolean": Style(color="#f08d49"),
    "number": Style(color="#f08d49"),
    "string": Style(color="#7ec699"),
    "char": Style(color="#7ec699"),
    "symbol": Style(color="#f8c555"),
    "regex": Style(color="#7ec699"),
    "url": Style(color="#67cdcc"),
    "operator": Style(color="#67cdcc"),
    "variable": Style(color="#7ec699"),
    "constant": Style(color="#f8c555"),
    "property": Style(color="#f8c555"),
    "punctuation": Style.null(),
    "important": Style(color="#cc99cd", bold=True),
    "comment": Style(color="#999999"),
}

ERROR_STYLE = Style(color="red")

# First match wins, so subtypes come before their parents
TOKEN_TYPES: tuple[tuple[_TokenType, str], ...] = (
    (Keyword.Constant, "boolean"),
    (Keyword, "keyword"),
    (Operator.Word, "keyword"),
    (Name.Builtin, "builtin"),
    (Name.Exception, "class-name"),
    (Name.Class, "class-name"),
    (Name.Function, "function"),
    (Name.Decorator, "function"),
    (Name.Constant, "constant"),
    (Name.Variable, "variable"),
    (Name.Attribute, "property"),
    (Name.Property, "property"),
    (Name.Tag, "symbol"),
    (String.Regex, "regex"),
    (String.Char, "char"),
    (String.Symbol, "symbol"),
    (String.Interpol, "interpolation-punctuation"),
    (String, "string"),
    (Number, "number"),
    (Operator, "operator"),
    (Punctuation, "punctuation"),
    (Comment, "comment"),
    (Generic.Strong, "important"),
)

STRING = "string"
INTERPOLATION = "interpolation"
INTERPOLATION_PUNCTUATION = "interpolation-punctuation"

LEXER_OPTIONS = {"stripnl": False, "ensurenl": False}


def classify_token_type(ttype: _TokenType) -> str | None:
    """Map a Pygments token type to a theme key, or None for plain text."""
    for parent, name in TOKEN_TYPES:
        if ttype in parent:
            return name
    return None


def lexer_for(filename: str | None) -> Lexer:
    """Pick a lexer by file extension, defaulting to JavaScript."""
    if filename:
        try:
            return get_lexer_for_filename(filename, **LEXER_OPTIONS)
        except ClassNotFound:
            pass
    return JavascriptLexer(**LEXER_OPTIONS)


def _append(children: list[Node], node: Node) -> None:
    if isinstance(node, Text) and children and isinstance(children[-1], Text):
        children[-1] = Text(children[-1].value + node.value)
    else:
        children.append(node)


def _collapse(children: list[Node]) -> TokenStream:
    if len(children) == 1 and isinstance(children[0], Text):
        return children[0]
    return tuple(children)


class _TreeBuilder:
    """Folds a flat Pygments token stream into a token tree."""

    def __init__(self) -> None:
        self._root: list[Node] = []
        self._groups: list[tuple[str, list[Node]]] = []

    @property
    def _top(self) -> str | None:
        return self._groups[-1][0] if self._groups else None

    def feed(self, ttype: _TokenType, value: str) -> None:
        if not value:
            return
        kind = classify_token_type(ttype)

        if kind == INTERPOLATION_PUNCTUATION:
            if value.endswith("{"):
                self._open(INTERPOLATION)
                self._add(Token(kind, Text(value)))
            elif any(group == INTERPOLATION for group, _ in self._groups):
                while self._top != INTERPOLATION:
                    self._close()
                self._add(Token(kind, Text(value)))
                self._close()
            else:
                self._add(Token(kind, Text(value)))
            return

        if kind == STRING:
            if self._top != STRING:
                self._open(STRING)
            self._add(Text(value))
            return

        self._close_strings()
        self._add(Text(value) if kind is None else Token(kind, Text(value)))

    def finish(self) -> tuple[Node, ...]:
        while self._groups:
            self._close()
        return tuple(self._root)

    def _open(self, kind: str) -> None:
        self._groups.append((kind, []))

    def _add(self, node: Node) -> None:
        _append(self._groups[-1][1] if self._groups else self._root, node)

    def _close(self) -> None:
        kind, children = self._groups.pop()
        self._add(Token(kind, _collapse(children)))

    def _close_strings(self) -> None:
        while self._top == STRING:
            self._close()


def tokenize_line(source_line: str, filename: str | None = None) -> tuple[Node, ...]:
    """Tokenize one line of source into a token tree.

    Args:
        source_line: The line, without its line terminator
        filename: Source file name, used to pick the grammar

    Returns:
        Top-level token stream in source order
    """
    builder = _TreeBuilder()
    for ttype, value in lexer_for(filename).get_tokens(source_line):
        builder.feed(ttype, value)
    return builder.finish()


def paint(text: str, style: Style | None, colors: bool = True) -> str:
    """Wrap text in the ANSI escapes for a style."""
    if not colors or style is None or not text:
        return text
    return style.render(text, color_system=ColorSystem.TRUECOLOR)


def highlight_stream(
    stream: TokenStream | Iterable[Node],
    style: Style | None = None,
    *,
    colors: bool = True,
) -> str:
    """Render a token stream to a colorized string.

    Each token takes its color from ``THEME``; unknown types render without
    color. Nested content is rendered depth-first in source order.
    """
    if not colors:
        if not isinstance(stream, (Text, Token, tuple)):
            stream = tuple(stream)
        return stream_text(stream)
    if isinstance(stream, Text):
        return paint(stream.value, style, colors)
    if isinstance(stream, Token):
        return highlight_stream(stream.content, THEME.get(stream.type), colors=colors)
    return "".join(highlight_stream(node, style, colors=colors) for node in stream)


def read_source_line(filename: str, line: int) -> str | None:
    """Read one line of a source file.

    Args:
        filename: Path of the source file
        line: 1-based line number

    Returns:
        The line without its terminator, or None if it is unavailable
    """
    try:
        content = Path(filename).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError, ValueError) as e:
        log.debug(LogEventNames.SOURCE_UNREADABLE, filename=filename, error=str(e))
        return None

    lines = content.split("\n")
    if not 1 <= line <= len(lines):
        log.debug(LogEventNames.SOURCE_LINE_MISSING, filename=filename, line=line)
        return None

    return lines[line - 1].rstrip("\r")
