"""Strict XML tokenizer.

Converts a UTF-8 byte stream into a flat sequence of tokens: start tags, end
tags, character data, and the "other" kinds (comments, processing
instructions, directives) that the tree builder skips. Tokens are produced
lazily, one at a time, as the builder asks for them.

The tokenizer never repairs its input. Anything that is not well-formed
raises :class:`~simplexml.shared.errors.XMLSyntaxError` at the point where it
is detected. Several top-level elements are accepted so that element lists
can be parsed; whether that is an error is decided by the caller.
"""

import re
from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Deque, Dict, Iterator, List, Optional, Tuple

from simplexml.character.stream import CharacterReader, InputType, Position
from simplexml.shared.config import ParserConfig
from simplexml.shared.errors import XMLSyntaxError
from simplexml.shared.logging import get_logger
from simplexml.tree.element import (
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
    Attribute,
    QName,
)

_WHITESPACE = " \t\r\n"

_NAME_START_RANGES = (
    r":A-Z_a-z\xC0-\xD6\xD8-\xF6\xF8-\u02FF\u0370-\u037D\u037F-\u1FFF"
    r"\u200C-\u200D\u2070-\u218F\u2C00-\u2FEF\u3001-\uD7FF\uF900-\uFDCF"
    r"\uFDF0-\uFFFD\U00010000-\U000EFFFF"
)
_NAME_START_RE = re.compile(f"[{_NAME_START_RANGES}]")
_NAME_CHAR_RE = re.compile(f"[{_NAME_START_RANGES}" r"\-.0-9\xB7\u0300-\u036F\u203F-\u2040]")
_INVALID_CHAR_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

_PREDEFINED_ENTITIES = {
    "lt": "<",
    "gt": ">",
    "amp": "&",
    "apos": "'",
    "quot": '"',
}

_MAX_REFERENCE_LENGTH = 32
_DECIMAL_REFERENCE_RE = re.compile(r"[0-9]+")
_HEX_REFERENCE_RE = re.compile(r"x[0-9a-fA-F]+")


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    START_ELEMENT = auto()          # <name attr="value"> or the start of <name/>
    END_ELEMENT = auto()            # </name> or the end of <name/>
    CHARACTER_DATA = auto()         # Text run or CDATA section
    COMMENT = auto()                # <!-- ... -->
    PROCESSING_INSTRUCTION = auto() # <?target ... ?>, including the XML declaration
    DIRECTIVE = auto()              # <!DOCTYPE ...> and other <! declarations


@dataclass(frozen=True)
class Token:
    """A single XML token.

    ``name`` and ``attributes`` are set for element tokens, ``data`` for
    everything else.
    """

    type: TokenType
    position: Position
    name: Optional[QName] = None
    attributes: Tuple[Attribute, ...] = ()
    data: str = ""


def _is_whitespace(char: str) -> bool:
    return char in _WHITESPACE


def _is_name_char(char: str) -> bool:
    return _NAME_CHAR_RE.match(char) is not None


def _normalize_newlines(text: str) -> str:
    if "\r" not in text:
        return text
    return text.replace("\r\n", "\n").replace("\r", "\n")


class XMLTokenizer:
    """Pull tokenizer over a byte stream.

    Iterating the tokenizer yields :class:`Token` objects until the input is
    exhausted. Malformed input raises :class:`XMLSyntaxError`.

    Examples:
        >>> [t.type.name for t in XMLTokenizer(b"<a>hi</a>")]
        ['START_ELEMENT', 'CHARACTER_DATA', 'END_ELEMENT']
    """

    def __init__(
        self,
        source: InputType,
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            source: XML input as bytes, str or a binary file-like object
            config: Parser configuration (chunk size)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")

        self._reader = CharacterReader(source, self.config.chunk_size)
        self._pending: Deque[Token] = deque()
        # One entry per open element: raw tag, resolved name, declared prefixes.
        self._open: List[Tuple[str, QName, Dict[str, str]]] = []
        self._done = False

        self.token_count = 0

    def __iter__(self) -> Iterator[Token]:
        return self

    def __next__(self) -> Token:
        token = self.next_token()
        if token is None:
            raise StopIteration
        return token

    @property
    def depth(self) -> int:
        """Number of currently open elements."""
        return len(self._open)

    def next_token(self) -> Optional[Token]:
        """Return the next token, or None at the end of the input."""
        if self._pending:
            token = self._pending.popleft()
        elif self._done:
            return None
        else:
            token = self._scan()
            if token is None:
                self._done = True
                self.logger.debug(
                    "Tokenization completed",
                    extra={"token_count": self.token_count},
                )
                return None
        self.token_count += 1
        return token

    def _error(self, message: str) -> XMLSyntaxError:
        self._done = True
        self._pending.clear()
        return XMLSyntaxError(message, self._reader.line, self._reader.column)

    def _scan(self) -> Optional[Token]:
        reader = self._reader
        position = reader.position
        if reader.at_eof():
            if self._open:
                raise self._error(f"unexpected EOF: element <{self._open[-1][0]}> not closed")
            return None
        if reader.peek() == "<":
            reader.read()
            return self._scan_markup(position)
        return self._scan_text(position)

    # Character data

    def _check_chars(self, text: str) -> None:
        match = _INVALID_CHAR_RE.search(text)
        if match:
            raise self._error(f"illegal character code U+{ord(match.group()):04X}")

    def _scan_text(self, position: Position) -> Token:
        reader = self._reader
        parts = []
        while True:
            literal = reader.read_while(lambda char: char not in "<&")
            if literal:
                self._check_chars(literal)
                parts.append(_normalize_newlines(literal))
            if reader.peek() != "&":
                break
            reader.read()
            parts.append(self._scan_reference())
        return Token(TokenType.CHARACTER_DATA, position, data="".join(parts))

    def _scan_reference(self) -> str:
        """Decode an entity or character reference; the '&' is already consumed."""
        reader = self._reader
        name = reader.read_while(
            lambda char: char not in ";<&\"'" and not _is_whitespace(char)
        )
        if reader.read_char() != ";" or not name or len(name) > _MAX_REFERENCE_LENGTH:
            raise self._error("invalid character entity &" + name[:_MAX_REFERENCE_LENGTH])

        if name.startswith("#"):
            digits = name[1:]
            if _HEX_REFERENCE_RE.fullmatch(digits):
                code = int(digits[1:], 16)
            elif _DECIMAL_REFERENCE_RE.fullmatch(digits):
                code = int(digits, 10)
            else:
                raise self._error(f"invalid character entity &{name};")
            if code > 0x10FFFF or _INVALID_CHAR_RE.match(chr(code)):
                raise self._error(f"invalid character entity &{name};")
            return chr(code)

        if name not in _PREDEFINED_ENTITIES:
            raise self._error(f"invalid character entity &{name};")
        return _PREDEFINED_ENTITIES[name]

    # Markup

    def _scan_markup(self, position: Position) -> Token:
        reader = self._reader
        char = reader.peek()
        if char == "/":
            reader.read()
            return self._scan_end_tag(position)
        if char == "?":
            reader.read()
            return self._scan_processing_instruction(position)
        if char == "!":
            reader.read()
            if reader.startswith("--"):
                reader.read(2)
                return self._scan_comment(position)
            if reader.startswith("[CDATA["):
                reader.read(7)
                return self._scan_cdata(position)
            return self._scan_directive(position)
        return self._scan_start_tag(position)

    def _scan_name(self) -> str:
        reader = self._reader
        first = reader.peek()
        if not first or _NAME_START_RE.match(first) is None:
            return ""
        return reader.read_while(_is_name_char)

    def _scan_processing_instruction(self, position: Position) -> Token:
        target = self._scan_name()
        if not target:
            raise self._error("expected target name after <?")
        body = self._reader.read_until("?>")
        if body is None:
            raise self._error("unexpected EOF in processing instruction")
        if body and not _is_whitespace(body[0]):
            raise self._error(f"invalid processing instruction <?{target}{body[:10]}")
        self._check_chars(body)
        return Token(
            TokenType.PROCESSING_INSTRUCTION,
            position,
            data=f"{target}{body}",
        )

    def _scan_comment(self, position: Position) -> Token:
        body = self._reader.read_until("--")
        if body is None:
            raise self._error("unexpected EOF in comment")
        if self._reader.read_char() != ">":
            raise self._error('invalid sequence "--" not allowed in comments')
        self._check_chars(body)
        return Token(TokenType.COMMENT, position, data=body)

    def _scan_cdata(self, position: Position) -> Token:
        body = self._reader.read_until("]]>")
        if body is None:
            raise self._error("unexpected EOF in CDATA section")
        self._check_chars(body)
        return Token(
            TokenType.CHARACTER_DATA,
            position,
            data=_normalize_newlines(body),
        )

    def _scan_directive(self, position: Position) -> Token:
        reader = self._reader
        parts = []
        depth = 1
        quote = None
        while True:
            char = reader.read_char()
            if char is None:
                raise self._error("unexpected EOF in directive")
            if quote:
                if char == quote:
                    quote = None
            elif char in "\"'":
                quote = char
            elif char == "<":
                if reader.startswith("!--"):
                    # Comments may hold unbalanced quotes; drop them whole.
                    reader.read(3)
                    body = reader.read_until("-->")
                    if body is None:
                        raise self._error("unexpected EOF in comment")
                    self._check_chars(body)
                    parts.append(" ")
                    continue
                depth += 1
            elif char == ">":
                depth -= 1
                if depth == 0:
                    break
            parts.append(char)
        return Token(TokenType.DIRECTIVE, position, data="".join(parts))

    def _scan_start_tag(self, position: Position) -> Token:
        reader = self._reader
        raw_name = self._scan_name()
        if not raw_name:
            raise self._error("expected element name after <")

        raw_attributes: List[Tuple[str, str]] = []
        self_closing = False
        while True:
            spaced = reader.read_while(_is_whitespace)
            char = reader.peek()
            if not char:
                raise self._error(f"unexpected EOF in element <{raw_name}>")
            if char == ">":
                reader.read()
                break
            if char == "/":
                reader.read()
                if reader.read_char() != ">":
                    raise self._error(f"expected /> in element <{raw_name}>")
                self_closing = True
                break
            if not spaced:
                raise self._error(f"expected whitespace before attribute in element <{raw_name}>")

            attr_name = self._scan_name()
            if not attr_name:
                raise self._error(f"expected attribute name in element <{raw_name}>")

            reader.read_while(_is_whitespace)
            if reader.read_char() != "=":
                raise self._error(f"attribute name without = in element <{raw_name}>")
            reader.read_while(_is_whitespace)
            quote = reader.read_char()
            if quote not in ("\"", "'"):
                raise self._error(f"unquoted or missing attribute value in element <{raw_name}>")
            raw_attributes.append((attr_name, self._scan_attribute_value(quote)))

        name, attributes, scope = self._resolve_start(raw_name, raw_attributes)
        token = Token(TokenType.START_ELEMENT, position, name=name, attributes=attributes)
        if self_closing:
            self._pending.append(Token(TokenType.END_ELEMENT, position, name=name))
        else:
            self._open.append((raw_name, name, scope))
        return token

    def _scan_attribute_value(self, quote: str) -> str:
        reader = self._reader
        stop = quote + "<&"
        parts = []
        while True:
            literal = reader.read_while(lambda char: char not in stop)
            if literal:
                self._check_chars(literal)
                # Attribute-value normalization of literal whitespace.
                literal = literal.replace("\r\n", " ")
                parts.append(literal.translate(_ATTRIBUTE_WHITESPACE))
            char = reader.read_char()
            if char is None:
                raise self._error("unexpected EOF in attribute value")
            if char == quote:
                return "".join(parts)
            if char == "<":
                raise self._error("unescaped < inside quoted string")
            parts.append(self._scan_reference())

    def _scan_end_tag(self, position: Position) -> Token:
        reader = self._reader
        raw_name = self._scan_name()
        if not raw_name:
            raise self._error("expected element name after </")
        reader.read_while(_is_whitespace)
        if reader.read_char() != ">":
            raise self._error(f"invalid characters between </{raw_name} and >")
        if not self._open:
            raise self._error(f"unexpected end element </{raw_name}>")
        open_name, name, _ = self._open[-1]
        if open_name != raw_name:
            raise self._error(f"element <{open_name}> closed by </{raw_name}>")
        self._open.pop()
        return Token(TokenType.END_ELEMENT, position, name=name)

    # Namespaces

    def _lookup(self, prefix: str, scope: Dict[str, str]) -> Optional[str]:
        if prefix in scope:
            return scope[prefix]
        for _, _, outer in reversed(self._open):
            if prefix in outer:
                return outer[prefix]
        if prefix == "xml":
            return XML_NAMESPACE
        if prefix == "":
            return ""
        return None

    def _split(self, raw: str) -> Tuple[str, str]:
        prefix, sep, local = raw.partition(":")
        if not sep:
            return "", raw
        if not prefix or not local or ":" in local:
            raise self._error(f"invalid qualified name {raw!r}")
        return prefix, local

    def _resolve_start(
        self, raw_name: str, raw_attributes: List[Tuple[str, str]]
    ) -> Tuple[QName, Tuple[Attribute, ...], Dict[str, str]]:
        scope: Dict[str, str] = {}
        for attr_name, value in raw_attributes:
            if attr_name == "xmlns":
                scope[""] = value
            elif attr_name.startswith("xmlns:"):
                prefix = attr_name[len("xmlns:"):]
                if not value:
                    raise self._error(f"namespace prefix {prefix!r} bound to empty URI")
                scope[prefix] = value

        prefix, local = self._split(raw_name)
        namespace = self._lookup(prefix, scope)
        if namespace is None:
            raise self._error(f"unbound namespace prefix {prefix!r} in element <{raw_name}>")
        name = QName(local, namespace)

        attributes = []
        for attr_name, value in raw_attributes:
            if attr_name == "xmlns":
                attributes.append(Attribute(QName("xmlns"), value))
                continue
            attr_prefix, attr_local = self._split(attr_name)
            if attr_prefix == "xmlns":
                attr_namespace: Optional[str] = XMLNS_NAMESPACE
            elif attr_prefix:
                attr_namespace = self._lookup(attr_prefix, scope)
                if attr_namespace is None:
                    raise self._error(
                        f"unbound namespace prefix {attr_prefix!r} in attribute {attr_name}"
                    )
            else:
                attr_namespace = ""
            attributes.append(Attribute(QName(attr_local, attr_namespace), value))

        return name, tuple(attributes), scope


_ATTRIBUTE_WHITESPACE = str.maketrans({"\t": " ", "\n": " ", "\r": " "})
