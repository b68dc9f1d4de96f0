"""Tree model and tree building for simplexml.

Key Components:
    Element: A node with a qualified name, attributes, optional text and children
    Document: Container holding at most one root element
    QName: Qualified name (local name plus namespace URI)
    Attribute: Qualified name and value
    TreeBuilder: Assembles elements from a token stream
"""

from .element import (
    XML_NAMESPACE,
    XMLNS_NAMESPACE,
    Attribute,
    Document,
    Element,
    QName,
    create_document,
    create_element,
    elem,
    iter_tree,
)
from .builder import TreeBuilder

__all__ = [
    "XML_NAMESPACE",
    "XMLNS_NAMESPACE",
    "Attribute",
    "Document",
    "Element",
    "QName",
    "create_document",
    "create_element",
    "elem",
    "iter_tree",
    "TreeBuilder",
]
