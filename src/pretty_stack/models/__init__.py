"""Data models and transfer objects."""

from .error import ErrorRecord
from .frame import RenderedFrame, StackFrame, UnlocatedFrame
from .tokens import Node, Text, Token, TokenStream

__all__ = [
    # Error models
    "ErrorRecord",
    # Frame models
    "StackFrame",
    "RenderedFrame",
    "UnlocatedFrame",
    # Token tree
    "Node",
    "Text",
    "Token",
    "TokenStream",
]
