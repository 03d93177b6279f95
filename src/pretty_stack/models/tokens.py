"""Token tree produced by the source-line highlighter.

A highlighted line is a stream of nodes. A node is either a plain ``Text``
fragment or a typed ``Token`` whose content is itself a stream, so string
literals can carry nested interpolations.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeAlias


@dataclass(frozen=True)
class Text:
    """An untyped run of source text."""

    value: str

    def __len__(self) -> int:
        return len(self.value)

    @property
    def plain(self) -> str:
        return self.value


@dataclass(frozen=True)
class Token:
    """A typed token; ``type`` is a theme key such as ``"keyword"``."""

    type: str
    content: TokenStream

    def __len__(self) -> int:
        return stream_length(self.content)

    @property
    def plain(self) -> str:
        return stream_text(self.content)


Node: TypeAlias = Text | Token
TokenStream: TypeAlias = Text | Token | tuple[Node, ...]


def stream_length(stream: TokenStream) -> int:
    """Number of source characters covered by a stream."""
    if isinstance(stream, tuple):
        return sum(len(node) for node in stream)
    return len(stream)


def stream_text(stream: TokenStream) -> str:
    """Source text of a stream with all typing removed."""
    if isinstance(stream, tuple):
        return "".join(node.plain for node in stream)
    return stream.plain
