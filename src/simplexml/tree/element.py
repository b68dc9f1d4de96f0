"""Element and Document model.

The tree is owned top-down: an :class:`Element` owns its children list, and
each child keeps a plain back reference to its parent that is updated in
lock-step with that list. Every mutation that attaches an element detaches it
from its previous owner first, so an element is never in two places at once.
"""

import io
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List, NamedTuple, Optional, Tuple, Union

from simplexml.shared.errors import TreeStructureError

if TYPE_CHECKING:
    from simplexml.serialization.encoder import Encoder

XML_NAMESPACE = "http://www.w3.org/XML/1998/namespace"
XMLNS_NAMESPACE = "http://www.w3.org/2000/xmlns/"

_PRETTY_INDENTATION = "  "


class QName(NamedTuple):
    """Qualified name: a local name plus a namespace URI (empty for none)."""

    local: str
    namespace: str = ""

    def __str__(self) -> str:
        if self.namespace:
            return f"{{{self.namespace}}}{self.local}"
        return self.local


class Attribute(NamedTuple):
    """A single attribute: qualified name and value."""

    name: QName
    value: str

    @property
    def is_namespace_declaration(self) -> bool:
        """True for ``xmlns`` and ``xmlns:prefix`` attributes."""
        return self.name.namespace == XMLNS_NAMESPACE or self.name == ("xmlns", "")


NameLike = Union[QName, str, Tuple[str, str]]


def _to_qname(name: NameLike) -> QName:
    if isinstance(name, QName):
        return name
    if isinstance(name, str):
        return QName(name)
    if isinstance(name, tuple) and len(name) == 2:
        return QName(*name)
    raise TypeError(f"Cannot use {type(name).__name__} as an element name")


@dataclass(eq=False)
class Element:
    """A node of the XML tree.

    Elements compare by identity. ``content`` is ``None`` when the element has
    no text; an empty string is kept as present-but-empty content.
    """

    name: QName
    attributes: List[Attribute] = field(default_factory=list)
    content: Optional[str] = None

    _parent: Optional["Element"] = field(default=None, init=False, repr=False)
    _children: List["Element"] = field(default_factory=list, init=False, repr=False)
    _document: Optional["Document"] = field(default=None, init=False, repr=False)

    def __post_init__(self) -> None:
        """Normalize the name and attribute list."""
        self.name = _to_qname(self.name)
        if not self.name.local:
            raise ValueError("Element name cannot be empty")
        self.attributes = [
            attr if isinstance(attr, Attribute) else Attribute(_to_qname(attr[0]), attr[1])
            for attr in self.attributes
        ]

    # Navigation

    @property
    def parent(self) -> Optional["Element"]:
        """The containing element, or None for a root."""
        return self._parent

    @property
    def children(self) -> Tuple["Element", ...]:
        """Read-only view of the ordered children."""
        return tuple(self._children)

    @property
    def depth(self) -> int:
        """Number of ancestors; zero for a root."""
        depth = 0
        node = self._parent
        while node is not None:
            depth += 1
            node = node._parent
        return depth

    def ancestors(self) -> List["Element"]:
        """Ancestors from the immediate parent up to the root."""
        result = []
        node = self._parent
        while node is not None:
            result.append(node)
            node = node._parent
        return result

    def all(self) -> List["Element"]:
        """This element and its whole subtree in document (pre-)order."""
        result = []
        stack = [self]
        while stack:
            node = stack.pop()
            result.append(node)
            stack.extend(reversed(node._children))
        return result

    # Attributes

    def add_attr(self, attr: Attribute) -> "Element":
        """Append an attribute, keeping any existing one with the same name."""
        if not isinstance(attr, Attribute):
            attr = Attribute(_to_qname(attr[0]), attr[1])
        self.attributes.append(attr)
        return self

    def set_attr(self, name: str, namespace: str, value: str) -> "Element":
        """Set the first attribute called (name, namespace), appending if absent."""
        qname = QName(name, namespace)
        for i, attr in enumerate(self.attributes):
            if attr.name == qname:
                self.attributes[i] = Attribute(qname, value)
                return self
        self.attributes.append(Attribute(qname, value))
        return self

    def get_attr(self, name: str, namespace: str = "") -> Optional[str]:
        """Value of the first attribute called (name, namespace), if any."""
        qname = QName(name, namespace)
        for attr in self.attributes:
            if attr.name == qname:
                return attr.value
        return None

    # Structure

    def add_child(self, child: "Element") -> "Element":
        """Append ``child``, moving it out of wherever it currently lives.

        Raises:
            TypeError: If child is not an Element
            TreeStructureError: If child is this element or one of its ancestors
        """
        if not isinstance(child, Element):
            raise TypeError("Child must be an Element instance")
        if child is self or any(node is child for node in self.ancestors()):
            raise TreeStructureError(
                f"Cannot add <{child.name.local}> beneath itself"
            )
        child._detach()
        self._children.append(child)
        child._parent = self
        return self

    def add_children(self, *children: "Element") -> "Element":
        """Append several children in order."""
        for child in children:
            self.add_child(child)
        return self

    def set_parent(self, parent: "Element") -> "Element":
        """Move this element to the end of ``parent``'s children."""
        parent.add_child(self)
        return self

    def remove_child(self, child: "Element") -> Optional["Element"]:
        """Remove ``child`` and return it, or return None if it is not a child."""
        for i, candidate in enumerate(self._children):
            if candidate is child:
                del self._children[i]
                child._parent = None
                return child
        return None

    def _detach(self) -> None:
        if self._parent is not None:
            self._parent.remove_child(self)
        if self._document is not None:
            self._document._root = None
            self._document = None

    # Serialization

    def encode(self, encoder: "Encoder") -> None:
        """Write this subtree, without a prolog, through ``encoder``."""
        encoder.encode_element(self)

    def to_bytes(self, indentation: str = "") -> bytes:
        """Serialize this subtree to UTF-8 bytes."""
        return _render(self, indentation).getvalue()

    def reader(self, indentation: str = "") -> io.BytesIO:
        """A readable stream over the serialized subtree."""
        return _render(self, indentation)

    def __str__(self) -> str:
        return self.to_bytes(_PRETTY_INDENTATION).decode("utf-8")


class Document:
    """An XML document holding at most one root element."""

    def __init__(self, root: Optional[Element] = None) -> None:
        self._root: Optional[Element] = None
        if root is not None:
            self.set_root(root)

    @property
    def root(self) -> Optional[Element]:
        return self._root

    def set_root(self, node: Optional[Element]) -> None:
        """Replace the root element.

        The new root is detached from its parent (or from another document);
        the previous root is released and stays usable as a standalone tree.
        """
        if node is self._root:
            return
        if node is not None and not isinstance(node, Element):
            raise TypeError("Root must be an Element instance")
        if self._root is not None:
            self._root._document = None
        if node is not None:
            node._detach()
            node._document = self
        self._root = node

    def all(self) -> List[Element]:
        """Every element of the document in document order."""
        if self._root is None:
            return []
        return self._root.all()

    def encode(self, encoder: "Encoder") -> None:
        """Write the whole document, prolog included, through ``encoder``."""
        encoder.encode_document(self)

    def to_bytes(self, indentation: str = "") -> bytes:
        """Serialize the document to UTF-8 bytes."""
        return _render(self, indentation).getvalue()

    def reader(self, indentation: str = "") -> io.BytesIO:
        """A readable stream over the serialized document."""
        return _render(self, indentation)

    def __str__(self) -> str:
        return self.to_bytes(_PRETTY_INDENTATION).decode("utf-8")

    def __repr__(self) -> str:
        root = self._root.name if self._root is not None else None
        return f"Document(root={root!r})"


def _render(node: Union[Element, Document], indentation: str) -> io.BytesIO:
    # Imported here to avoid a circular dependency with the encoder.
    from simplexml.serialization.encoder import Encoder

    buffer = io.BytesIO()
    encoder = Encoder(buffer, indentation)
    node.encode(encoder)
    encoder.flush()
    buffer.seek(0)
    return buffer


def create_element(name: NameLike) -> Element:
    """Create a parentless, childless, attribute-less, content-less element."""
    return Element(_to_qname(name))


def elem(local: str, namespace: str = "", content: Optional[str] = None) -> Element:
    """Shorthand for building an element from its parts."""
    return Element(QName(local, namespace), content=content)


def create_document(root: Optional[Element] = None) -> Document:
    """Create a new document, optionally with a root element."""
    return Document(root)


def iter_tree(elements: Iterable[Element]) -> List[Element]:
    """Flatten several trees into one document-ordered list."""
    result: List[Element] = []
    for element in elements:
        result.extend(element.all())
    return result
