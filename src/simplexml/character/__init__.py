"""Character processing layer for simplexml.

This module provides incremental UTF-8 decoding with position tracking for
the tokenizer.
"""

from .stream import (
    CharacterReader,
    InputType,
    Position,
    as_binary_stream,
)

__all__ = [
    "CharacterReader",
    "InputType",
    "Position",
    "as_binary_stream",
]
