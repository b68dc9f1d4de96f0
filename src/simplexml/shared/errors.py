"""Exception hierarchy shared by every simplexml layer.

Parse failures come in two flavours that callers are expected to tell apart:
syntax errors reported by the tokenizer, and the structural
:class:`TooManyRootElementsError` raised when a document has more than one
top-level element.
"""

from typing import TYPE_CHECKING, List, Optional, Sequence

if TYPE_CHECKING:
    from simplexml.tree.element import Element


class SimpleXMLError(Exception):
    """Base class for all simplexml errors."""


class TreeStructureError(SimpleXMLError, ValueError):
    """Raised when a mutation would break the element tree."""


class ParseError(SimpleXMLError):
    """Base class for parse failures.

    Attributes:
        elements: Top-level elements fully parsed before the failure.
    """

    def __init__(
        self,
        message: str,
        elements: Optional[Sequence["Element"]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.elements: List["Element"] = list(elements or [])


class XMLSyntaxError(ParseError):
    """Malformed input reported by the tokenizer."""

    def __init__(
        self,
        message: str,
        line: int = 0,
        column: int = 0,
        elements: Optional[Sequence["Element"]] = None
    ) -> None:
        super().__init__(message, elements)
        self.line = line
        self.column = column

    def __str__(self) -> str:
        if self.line:
            return f"XML syntax error on line {self.line}, column {self.column}: {self.message}"
        return f"XML syntax error: {self.message}"


class TooManyRootElementsError(ParseError):
    """A document-level parse found more than one top-level element."""

    def __init__(self, elements: Optional[Sequence["Element"]] = None) -> None:
        super().__init__("no more than one root element is allowed", elements)


class NestingTooDeepError(ParseError):
    """Element nesting exceeded the configured maximum depth."""

    def __init__(
        self,
        max_depth: int,
        elements: Optional[Sequence["Element"]] = None
    ) -> None:
        super().__init__(f"element nesting exceeds maximum depth of {max_depth}", elements)
        self.max_depth = max_depth
