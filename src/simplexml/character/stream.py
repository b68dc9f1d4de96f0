"""Character stream reading for the tokenizer.

:class:`CharacterReader` pulls bytes from a binary stream in fixed-size chunks,
decodes them incrementally as UTF-8 (whatever the XML prolog claims) and keeps
track of line, column and offset for error reporting.
"""

import codecs
import io
from dataclasses import dataclass
from typing import BinaryIO, Optional, Union

from simplexml.shared.config import DEFAULT_CHUNK_SIZE
from simplexml.shared.errors import XMLSyntaxError

# Type definitions for input data
InputType = Union[bytes, str, BinaryIO]

_BOM = "\ufeff"


@dataclass(frozen=True)
class Position:
    """Line and column are 1-based, offset is a 0-based character count."""

    line: int
    column: int
    offset: int


def as_binary_stream(source: InputType) -> BinaryIO:
    """Wrap bytes or text in a binary stream; pass streams through."""
    if isinstance(source, str):
        return io.BytesIO(source.encode("utf-8"))
    if isinstance(source, (bytes, bytearray, memoryview)):
        return io.BytesIO(bytes(source))
    if hasattr(source, "read"):
        return source
    raise TypeError(f"Cannot read XML from {type(source).__name__}")


class CharacterReader:
    """Buffered, position-tracking UTF-8 character reader."""

    def __init__(self, source: InputType, chunk_size: int = DEFAULT_CHUNK_SIZE) -> None:
        """Initialize the reader.

        Args:
            source: bytes, str or a binary file-like object
            chunk_size: Number of bytes requested from the stream per read
        """
        self._stream = as_binary_stream(source)
        self._chunk_size = chunk_size
        self._decoder = codecs.getincrementaldecoder("utf-8")()
        self._buffer = ""
        self._index = 0
        self._eof = False
        self._started = False

        self.line = 1
        self.column = 1
        self.offset = 0

    @property
    def position(self) -> Position:
        return Position(self.line, self.column, self.offset)

    def _fill(self) -> bool:
        """Read one more chunk. Returns False once the stream is exhausted."""
        if self._eof:
            return False
        chunk = self._stream.read(self._chunk_size)
        if isinstance(chunk, str):
            # Text streams are accepted for convenience.
            chunk = chunk.encode("utf-8")
        final = not chunk
        try:
            text = self._decoder.decode(chunk or b"", final)
        except UnicodeDecodeError as e:
            raise XMLSyntaxError(
                f"invalid UTF-8: {e.reason}", self.line, self.column
            ) from e
        if final:
            self._eof = True
        if not self._started and text:
            self._started = True
            if text.startswith(_BOM):
                text = text[1:]
        # Drop the consumed prefix before appending.
        self._buffer = self._buffer[self._index:] + text
        self._index = 0
        return bool(text) or not self._eof

    def _ensure(self, count: int) -> bool:
        while len(self._buffer) - self._index < count:
            if not self._fill():
                return False
        return True

    def peek(self, count: int = 1) -> str:
        """Up to ``count`` upcoming characters, without consuming them."""
        self._ensure(count)
        return self._buffer[self._index:self._index + count]

    def at_eof(self) -> bool:
        return not self._ensure(1)

    def startswith(self, prefix: str) -> bool:
        return self.peek(len(prefix)) == prefix

    def read(self, count: int = 1) -> str:
        """Consume and return up to ``count`` characters."""
        self._ensure(count)
        text = self._buffer[self._index:self._index + count]
        self._index += len(text)
        self._advance(text)
        return text

    def read_char(self) -> Optional[str]:
        """Consume one character, or return None at end of input."""
        if not self._ensure(1):
            return None
        char = self._buffer[self._index]
        self._index += 1
        self._advance(char)
        return char

    def read_until(self, terminator: str) -> Optional[str]:
        """Consume text up to and including ``terminator``.

        Returns the text before the terminator, or None if the input ends
        first (in which case everything left has been consumed).
        """
        start = self._index
        search_from = start
        while True:
            found = self._buffer.find(terminator, search_from)
            if found >= 0:
                text = self._buffer[start:found]
                consumed = self._buffer[start:found + len(terminator)]
                self._index = found + len(terminator)
                self._advance(consumed)
                return text
            # _fill rebases the buffer at the current index.
            pending = len(self._buffer) - start
            self._index = start
            more = self._fill()
            start = self._index
            if not more:
                rest = self._buffer[start:]
                self._index = len(self._buffer)
                self._advance(rest)
                return None
            search_from = max(start, start + pending - len(terminator) + 1)

    def read_while(self, predicate) -> str:
        """Consume characters while ``predicate(char)`` holds."""
        parts = []
        while self._ensure(1):
            char = self._buffer[self._index]
            if not predicate(char):
                break
            self._index += 1
            self._advance(char)
            parts.append(char)
        return "".join(parts)

    def _advance(self, text: str) -> None:
        if not text:
            return
        self.offset += len(text)
        newlines = text.count("\n")
        if newlines:
            self.line += newlines
            self.column = len(text) - text.rfind("\n")
        else:
            self.column += len(text)
