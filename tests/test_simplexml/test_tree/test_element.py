"""Tests for the element tree model.

Covers construction, attribute handling, ownership and move semantics,
navigation order and stringification.
"""

import pytest

from simplexml.api import parse_string
from simplexml.shared import TreeStructureError
from simplexml.tree import (
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

TEST_DOC = """<?xml version="1.0" encoding="UTF-8"?>
<a:root idx="0" xmlns:a="http://schemas.xmlsoap.org/ws/2004/08/addressing">
  <node1 foo="bar" idx="1">
    <sub idx="4"/>
  </node1>
  <node2 order="0" idx="2">I am Node 2
    <node2 order="2" idx="5">I am Groot</node2>
  </node2>
  <node2 order="1" idx="3">I am a different Node 2</node2>
</a:root>
"""

ADDRESSING = "http://schemas.xmlsoap.org/ws/2004/08/addressing"


@pytest.fixture
def doc() -> Document:
    return parse_string(TEST_DOC)


class TestQName:
    """Test qualified names."""

    def test_defaults_to_no_namespace(self) -> None:
        """Test a bare local name has an empty namespace."""
        name = QName("foo")
        assert name.namespace == ""
        assert str(name) == "foo"

    def test_str_uses_clark_notation(self) -> None:
        """Test namespaced names render as {uri}local."""
        assert str(QName("root", ADDRESSING)) == f"{{{ADDRESSING}}}root"

    def test_equality_is_by_value(self) -> None:
        """Test two names with equal parts are equal."""
        assert QName("a", "urn:x") == QName("a", "urn:x")
        assert QName("a", "urn:x") != QName("a")


class TestElementCreation:
    """Test element construction helpers."""

    def test_create_element_is_bare(self) -> None:
        """Test a new element has no parent, children, attributes or content."""
        element = create_element(QName("node", "urn:x"))
        assert element.name == QName("node", "urn:x")
        assert element.parent is None
        assert element.children == ()
        assert element.attributes == []
        assert element.content is None

    def test_name_accepts_string_and_tuple(self) -> None:
        """Test names are normalized to QName."""
        assert Element("foo").name == QName("foo")
        assert Element(("foo", "urn:x")).name == QName("foo", "urn:x")

    def test_empty_name_raises_error(self) -> None:
        """Test that an empty local name raises ValueError."""
        with pytest.raises(ValueError, match="Element name cannot be empty"):
            Element(QName(""))

    def test_invalid_name_type_raises_error(self) -> None:
        """Test that a non-name raises TypeError."""
        with pytest.raises(TypeError):
            Element(42)  # type: ignore

    def test_elem_shorthand(self) -> None:
        """Test elem builds name and content in one call."""
        element = elem("node1", ADDRESSING, "text")
        assert element.name == QName("node1", ADDRESSING)
        assert element.content == "text"

    def test_attribute_tuples_are_normalized(self) -> None:
        """Test attribute pairs passed at construction become Attributes."""
        element = Element("foo", [(("id", ""), "1")])
        assert element.attributes == [Attribute(QName("id"), "1")]

    def test_elements_compare_by_identity(self) -> None:
        """Test two structurally equal elements are still distinct."""
        assert elem("foo") != elem("foo")


class TestAttributes:
    """Test attribute manipulation."""

    def test_add_attr_appends_duplicates(self) -> None:
        """Test add_attr keeps earlier attributes with the same name."""
        element = elem("foo")
        element.add_attr(Attribute(QName("a"), "1")).add_attr(Attribute(QName("a"), "2"))
        assert [a.value for a in element.attributes] == ["1", "2"]

    def test_set_attr_replaces_first_match(self) -> None:
        """Test set_attr updates the first attribute with that name in place."""
        element = elem("foo")
        element.add_attr(Attribute(QName("a"), "1"))
        element.add_attr(Attribute(QName("b"), "2"))
        element.add_attr(Attribute(QName("a"), "3"))

        element.set_attr("a", "", "x")

        assert [(a.name.local, a.value) for a in element.attributes] == [
            ("a", "x"), ("b", "2"), ("a", "3")
        ]

    def test_set_attr_appends_when_absent(self) -> None:
        """Test set_attr adds a missing attribute at the end."""
        element = elem("foo")
        element.set_attr("a", "", "1").set_attr("b", "urn:x", "2")
        assert element.attributes[-1] == Attribute(QName("b", "urn:x"), "2")

    def test_set_attr_distinguishes_namespaces(self) -> None:
        """Test names in different namespaces are different attributes."""
        element = elem("foo")
        element.set_attr("a", "", "1")
        element.set_attr("a", "urn:x", "2")
        assert len(element.attributes) == 2
        assert element.get_attr("a") == "1"
        assert element.get_attr("a", "urn:x") == "2"

    def test_get_attr_missing_returns_none(self) -> None:
        """Test lookup of an absent attribute."""
        assert elem("foo").get_attr("nope") is None

    def test_namespace_declaration_detection(self) -> None:
        """Test prefixed and default declarations are recognized."""
        assert Attribute(QName("a", XMLNS_NAMESPACE), "urn:x").is_namespace_declaration
        assert Attribute(QName("xmlns"), "urn:x").is_namespace_declaration
        assert not Attribute(QName("idx"), "0").is_namespace_declaration


class TestStructure:
    """Test parent/child ownership."""

    def test_add_child_sets_parent(self) -> None:
        """Test adding a child links both directions."""
        parent, child = elem("parent"), elem("child")
        assert parent.add_child(child) is parent
        assert child.parent is parent
        assert parent.children == (child,)

    def test_add_children_preserves_order(self) -> None:
        """Test several children are appended in argument order."""
        parent = elem("parent")
        a, b, c = elem("a"), elem("b"), elem("c")
        parent.add_children(a, b, c)
        assert parent.children == (a, b, c)

    def test_add_child_moves_from_previous_parent(self) -> None:
        """Test an element is never owned by two parents."""
        first, second, child = elem("first"), elem("second"), elem("child")
        first.add_child(child)
        second.add_child(child)
        assert first.children == ()
        assert second.children == (child,)
        assert child.parent is second

    def test_readding_child_moves_it_to_the_end(self) -> None:
        """Test re-adding an existing child does not duplicate it."""
        parent = elem("parent")
        a, b = elem("a"), elem("b")
        parent.add_children(a, b)
        parent.add_child(a)
        assert parent.children == (b, a)

    def test_add_child_with_invalid_type_raises_error(self) -> None:
        """Test adding a non-Element raises TypeError."""
        with pytest.raises(TypeError, match="Child must be an Element instance"):
            elem("parent").add_child("not an element")  # type: ignore

    def test_add_self_raises_error(self) -> None:
        """Test an element cannot contain itself."""
        node = elem("node")
        with pytest.raises(TreeStructureError):
            node.add_child(node)

    def test_add_ancestor_raises_error(self) -> None:
        """Test adding an ancestor beneath its descendant is refused."""
        root, middle, leaf = elem("root"), elem("middle"), elem("leaf")
        root.add_child(middle)
        middle.add_child(leaf)
        with pytest.raises(ValueError):
            leaf.add_child(root)
        assert leaf.children == ()
        assert root.parent is None

    def test_remove_child_returns_child(self) -> None:
        """Test removing a child clears its parent."""
        parent, child = elem("parent"), elem("child")
        parent.add_child(child)
        assert parent.remove_child(child) is child
        assert child.parent is None
        assert parent.children == ()

    def test_remove_non_child_returns_none(self) -> None:
        """Test removing an element that is not a child is a no-op."""
        parent, stranger = elem("parent"), elem("stranger")
        assert parent.remove_child(stranger) is None

    def test_children_view_is_read_only(self) -> None:
        """Test mutating the returned tuple is impossible."""
        parent = elem("parent").add_child(elem("child"))
        with pytest.raises(AttributeError):
            parent.children.append(elem("other"))  # type: ignore

    def test_move_child_with_set_parent(self, doc: Document) -> None:
        """Test set_parent moves an element and detaches it from its old parent."""
        root = doc.root
        node1 = root.children[0]
        sub = node1.children[0]

        assert sub.set_parent(root) is sub

        assert root.children[3] is sub
        assert sub.parent is root
        assert node1.children == ()
        assert node1.remove_child(sub) is None


class TestNavigation:
    """Test ancestors, depth and traversal order."""

    def test_ancestor_order(self, doc: Document) -> None:
        """Test ancestors run from the immediate parent to the root."""
        root = doc.root
        node1 = root.children[0]
        sub = node1.children[0]

        assert sub.parent is node1
        assert sub.ancestors() == [node1, root]
        assert root.ancestors() == []

    def test_depth_matches_ancestor_count(self, doc: Document) -> None:
        """Test depth equals the number of ancestors for every element."""
        for element in doc.all():
            assert element.depth == len(element.ancestors())

    def test_all_is_pre_order(self, doc: Document) -> None:
        """Test all() visits each element before its children."""
        indexes = [e.get_attr("idx") for e in doc.root.all()]
        assert indexes == ["0", "1", "4", "2", "5", "3"]

    def test_all_starts_with_self(self) -> None:
        """Test a leaf's traversal holds only itself."""
        leaf = elem("leaf")
        assert leaf.all() == [leaf]

    def test_all_handles_deep_trees(self) -> None:
        """Test traversal does not recurse per level."""
        root = node = elem("n")
        for _ in range(5000):
            child = elem("n")
            node._children.append(child)
            child._parent = node
            node = child
        assert len(root.all()) == 5001

    def test_iter_tree_concatenates(self) -> None:
        """Test several trees flatten in order."""
        a = elem("a").add_child(elem("a1"))
        b = elem("b")
        assert [e.name.local for e in iter_tree([a, b])] == ["a", "a1", "b"]


class TestDocument:
    """Test the document container."""

    def test_empty_document(self) -> None:
        """Test a new document has no root and no elements."""
        document = create_document()
        assert document.root is None
        assert document.all() == []

    def test_set_root_detaches_from_parent(self) -> None:
        """Test a nested element promoted to root leaves its old parent."""
        parent, child = elem("parent"), elem("child")
        parent.add_child(child)
        document = Document()
        document.set_root(child)
        assert document.root is child
        assert child.parent is None
        assert parent.children == ()

    def test_root_moved_into_tree_leaves_document(self) -> None:
        """Test adding the root as a child removes it from the document."""
        root = elem("root")
        document = Document(root)
        elem("other").add_child(root)
        assert document.root is None

    def test_set_root_replaces_previous(self) -> None:
        """Test the previous root is released."""
        first, second = elem("first"), elem("second")
        document = Document(first)
        document.set_root(second)
        assert document.root is second
        elem("holder").add_child(first)
        assert document.root is second

    def test_set_root_rejects_non_element(self) -> None:
        """Test only elements may become roots."""
        with pytest.raises(TypeError):
            Document().set_root("root")  # type: ignore

    def test_repr_names_root(self) -> None:
        """Test repr shows the root name."""
        assert "foo" in repr(Document(elem("foo")))


class TestStringification:
    """Test str() and byte rendering of trees."""

    def test_element_string(self) -> None:
        """Test a bare element renders self-closed with a trailing newline."""
        assert str(elem("foo")) == "<foo/>\n"

    def test_element_string_has_no_prolog(self) -> None:
        """Test element rendering omits the XML declaration."""
        root = elem("root").add_child(elem("child", content="x"))
        assert str(root) == "<root>\n  <child>x</child>\n</root>\n"

    def test_document_string_round_trips(self, doc: Document) -> None:
        """Test str(document) uses two-space indentation."""
        assert str(doc) == TEST_DOC

    def test_to_bytes_defaults_to_no_indentation(self) -> None:
        """Test the default byte rendering keeps newlines but no indent."""
        root = elem("root").add_child(elem("child"))
        assert root.to_bytes() == b"<root>\n<child/>\n</root>\n"

    def test_reader_yields_same_bytes(self, doc: Document) -> None:
        """Test reader() streams the same bytes as to_bytes()."""
        assert doc.reader("  ").read() == doc.to_bytes("  ")
