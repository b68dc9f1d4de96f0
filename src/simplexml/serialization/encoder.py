"""XML serialization of element trees.

The output is deterministic: a document prolog, one element per line with
children indented by a configurable string, and every namespace binding
hoisted onto the outermost element. Prefixes are chosen per call, so encoding
the same tree twice always produces the same bytes.
"""

import re
from typing import BinaryIO, Dict, List, Optional

from simplexml.shared.config import EncoderConfig
from simplexml.shared.logging import get_logger
from simplexml.tree.element import (
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
    Attribute,
    Document,
    Element,
    QName,
)

XML_DECLARATION = '<?xml version="1.0" encoding="UTF-8"?>'

# Characters XML 1.0 cannot carry, lone surrogates included.
_ILLEGAL_CHAR_RE = re.compile(r"[^\t\n\r\x20-\uD7FF\uE000-\uFFFD\U00010000-\U0010FFFF]")

_TEXT_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\r": "&#xD;",
})

_ATTRIBUTE_ESCAPES = str.maketrans({
    "&": "&amp;",
    "<": "&lt;",
    ">": "&gt;",
    "\"": "&quot;",
    "\r": "&#xD;",
    "\n": "&#xA;",
    "\t": "&#x9;",
})


def escape_text(text: str) -> str:
    """Escape character data for use between tags.

    Characters that XML 1.0 does not allow are replaced with U+FFFD.
    """
    return _ILLEGAL_CHAR_RE.sub("\uFFFD", text).translate(_TEXT_ESCAPES)


def escape_attribute(value: str) -> str:
    """Escape a value for use inside a double-quoted attribute.

    Illegal characters become U+FFFD, as in :func:`escape_text`.
    """
    return _ILLEGAL_CHAR_RE.sub("\uFFFD", value).translate(_ATTRIBUTE_ESCAPES)


class _PrefixMap:
    """Namespace URI to prefix assignments for a single encode call."""

    def __init__(self) -> None:
        self.prefixes: Dict[str, str] = {XML_NAMESPACE: "xml"}
        self.generated: List[str] = []
        self._taken = {"xml", "xmlns"}
        self._counter = 0

    def declare(self, prefix: str, namespace: str) -> None:
        """Record a declaration already present on the outermost element."""
        self._taken.add(prefix)
        self.prefixes.setdefault(namespace, prefix)

    def assign(self, namespace: str) -> None:
        if not namespace or namespace in self.prefixes:
            return
        while True:
            prefix = f"ns{self._counter}"
            self._counter += 1
            if prefix not in self._taken:
                break
        self._taken.add(prefix)
        self.prefixes[namespace] = prefix
        self.generated.append(namespace)

    def render(self, name: QName) -> str:
        if not name.namespace:
            return name.local
        return f"{self.prefixes[name.namespace]}:{name.local}"


class Encoder:
    """Writes elements and documents as UTF-8 XML to a binary stream.

    Examples:
        >>> import io
        >>> from simplexml.tree import elem
        >>> buffer = io.BytesIO()
        >>> Encoder(buffer).encode_element(elem("foo"))
        >>> buffer.getvalue()
        b'<foo/>\\n'
    """

    def __init__(
        self,
        stream: BinaryIO,
        indentation: str = "",
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the encoder.

        Args:
            stream: Binary destination; receives UTF-8 bytes
            indentation: String repeated once per nesting level (XML whitespace only)
            correlation_id: Optional correlation ID for request tracking

        Raises:
            ValueError: If indentation contains anything but XML whitespace
        """
        self.config = EncoderConfig(indentation=indentation)
        self.stream = stream
        self.logger = get_logger(__name__, correlation_id, "encoder")

    @classmethod
    def from_config(
        cls,
        stream: BinaryIO,
        config: EncoderConfig,
        correlation_id: Optional[str] = None
    ) -> "Encoder":
        return cls(stream, config.indentation, correlation_id)

    @property
    def indentation(self) -> str:
        return self.config.indentation

    def encode_document(self, document: Document) -> None:
        """Write the prolog line followed by the root element, if any."""
        parts = [XML_DECLARATION, "\n"]
        if document.root is not None:
            self._encode_tree(document.root, parts)
        self._write(parts)

    def encode_element(self, element: Element) -> None:
        """Write ``element`` and its subtree as a standalone fragment."""
        parts: List[str] = []
        self._encode_tree(element, parts)
        self._write(parts)

    def flush(self) -> None:
        """Flush the underlying stream, when it supports flushing."""
        flush = getattr(self.stream, "flush", None)
        if flush is not None:
            flush()

    def _write(self, parts: List[str]) -> None:
        data = "".join(parts).encode("utf-8")
        self.stream.write(data)
        self.logger.debug("Encoded XML", extra={"byte_count": len(data)})

    def _collect_prefixes(self, outermost: Element) -> _PrefixMap:
        prefixes = _PrefixMap()
        for attr in outermost.attributes:
            if attr.name.namespace == XMLNS_NAMESPACE:
                prefixes.declare(attr.name.local, attr.value)

        for node in outermost.all():
            prefixes.assign(node.name.namespace)
            for attr in node.attributes:
                if not attr.is_namespace_declaration:
                    prefixes.assign(attr.name.namespace)
        return prefixes

    def _render_attribute(self, attr: Attribute, prefixes: _PrefixMap) -> str:
        if attr.name.namespace == XMLNS_NAMESPACE:
            name = f"xmlns:{attr.name.local}"
        else:
            name = prefixes.render(attr.name)
        return f' {name}="{escape_attribute(attr.value)}"'

    def _open_tag(self, node: Element, prefixes: _PrefixMap, outermost: bool) -> str:
        parts = ["<", prefixes.render(node.name)]
        if outermost:
            for namespace in prefixes.generated:
                prefix = prefixes.prefixes[namespace]
                parts.append(f' xmlns:{prefix}="{escape_attribute(namespace)}"')
        for attr in node.attributes:
            # Bindings are hoisted, so only the outermost prefixed declarations survive.
            if attr.is_namespace_declaration:
                if not outermost or attr.name.namespace != XMLNS_NAMESPACE:
                    continue
            parts.append(self._render_attribute(attr, prefixes))
        return "".join(parts)

    def _encode_tree(self, outermost: Element, parts: List[str]) -> None:
        prefixes = self._collect_prefixes(outermost)
        indentation = self.indentation

        # Entries are (element, depth, closing); children are pushed in reverse.
        stack = [(outermost, 0, False)]
        while stack:
            node, depth, closing = stack.pop()
            indent = indentation * depth
            name = prefixes.render(node.name)
            if closing:
                parts.append(f"\n{indent}</{name}>")
                continue

            if depth:
                parts.append("\n")
            parts.append(indent)
            parts.append(self._open_tag(node, prefixes, node is outermost))

            children = node.children
            if not children and not node.content:
                parts.append("/>")
                continue
            parts.append(">")
            if node.content:
                parts.append(escape_text(node.content))
            if not children:
                parts.append(f"</{name}>")
                continue

            stack.append((node, depth, True))
            for child in reversed(children):
                stack.append((child, depth + 1, False))

        parts.append("\n")
