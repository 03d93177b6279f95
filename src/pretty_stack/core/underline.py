"""Underline width selection for the failing token."""

from __future__ import annotations

from collections.abc import Sequence

from pretty_stack.models.tokens import Node, Text


def select_underline_length(
    tokens: Sequence[Node],
    column: int,
    smart: bool = True,
) -> int:
    """Compute how many characters to underline at ``column``.

    Walks the top-level tokens left to right and returns the length of the
    first one that ends at or after the column. Plain text fragments are
    measured without their surrounding whitespace.

    Args:
        tokens: Top-level token stream of the source line
        column: 1-based column of the failure
        smart: If False, always underline a single character

    Returns:
        Underline width, at least 1
    """
    if not smart:
        return 1

    consumed = 0
    for token in tokens:
        consumed += len(token)
        if column <= consumed:
            length = len(token.value.strip()) if isinstance(token, Text) else len(token)
            return max(length, 1)

    return 1
