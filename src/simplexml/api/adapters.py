"""Integration adapters for ElementTree-compatible XML libraries.

Both :mod:`xml.etree.ElementTree` and :mod:`lxml.etree` name elements and
attributes in Clark notation (``{namespace}local``), which is exactly how
:class:`~simplexml.tree.element.QName` prints, so conversion is a direct
walk over the tree in either direction.

Conversions report failures as values in a :class:`ConversionResult`, like
:meth:`simplexml.api.parser.XMLParser.check` does for parsing.

Examples:
    >>> from simplexml.api import parse_string
    >>> adapter = get_adapter("elementtree")
    >>> result = adapter.to_target(parse_string('<r><a n="1"/></r>').root)
    >>> result.converted_data.find("a").get("n")
    '1'
"""

import importlib
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Type, Union

from simplexml.shared import get_logger
from simplexml.tree.element import Attribute, Document, Element, QName

MS_PER_SECOND = 1000


@dataclass
class AdapterMetadata:
    """Metadata about an integration adapter."""

    name: str
    target_library: str
    description: str


@dataclass
class ConversionResult:
    """Result of a conversion operation."""

    success: bool
    converted_data: Any
    original_data: Any
    conversion_time_ms: float
    errors: List[str] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


def _split_clark(name: str) -> QName:
    if name.startswith("{"):
        namespace, _, local = name[1:].partition("}")
        return QName(local, namespace)
    return QName(name)


class IntegrationAdapter(ABC):
    """Abstract base class for all integration adapters.

    Subclasses convert between simplexml trees and a target library's
    representation in both directions.
    """

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        """Initialize the integration adapter.

        Args:
            correlation_id: Optional correlation ID for request tracking
        """
        self.correlation_id = correlation_id
        self._logger = get_logger(__name__, correlation_id, self.__class__.__name__)
        self.conversion_count = 0

    @property
    @abstractmethod
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""

    @abstractmethod
    def is_available(self) -> bool:
        """Check if the target library can be imported."""

    @abstractmethod
    def to_target(self, source: Union[Element, Document]) -> ConversionResult:
        """Convert an element (or a document's root) to the target format."""

    @abstractmethod
    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert target data to a parentless simplexml Element."""

    def _create_error_result(
        self,
        error_message: str,
        original_data: Any,
        start_time: float
    ) -> ConversionResult:
        """Create a ConversionResult for error conditions."""
        self._logger.warning(
            "Conversion failed",
            extra={"adapter": self.metadata.name, "error": error_message},
        )
        return ConversionResult(
            success=False,
            converted_data=None,
            original_data=original_data,
            conversion_time_ms=(time.time() - start_time) * MS_PER_SECOND,
            errors=[error_message],
        )

    def _create_result(
        self,
        converted: Any,
        original_data: Any,
        start_time: float,
        element_count: int
    ) -> ConversionResult:
        self.conversion_count += 1
        processing_time = (time.time() - start_time) * MS_PER_SECOND
        self._logger.debug(
            "Conversion completed",
            extra={"adapter": self.metadata.name, "element_count": element_count},
        )
        return ConversionResult(
            success=True,
            converted_data=converted,
            original_data=original_data,
            conversion_time_ms=processing_time,
            metadata={"element_count": element_count},
        )


class EtreeAdapter(IntegrationAdapter):
    """Shared conversion logic for libraries with the ElementTree API.

    Namespace declaration attributes are not copied to the target, since
    ElementTree-style libraries manage namespace bindings themselves. Comments
    and processing instructions in target trees are skipped, and text is
    trimmed with the last non-blank run kept, as the parser does.
    """

    module_name = ""

    def _module(self) -> Any:
        return importlib.import_module(self.module_name)

    def is_available(self) -> bool:
        """Check if the target library can be imported."""
        try:
            self._module()
        except ImportError:
            return False
        return True

    def to_target(self, source: Union[Element, Document]) -> ConversionResult:
        """Convert an element, or a document's root, to a target element.

        Args:
            source: Element or Document to convert

        Returns:
            ConversionResult holding the target root element
        """
        start_time = time.time()
        root = source.root if isinstance(source, Document) else source
        if root is None:
            return self._create_error_result("Document has no root element", source, start_time)
        if not self.is_available():
            return self._create_error_result(
                f"{self.metadata.target_library} is not installed", source, start_time
            )

        etree = self._module()
        try:
            converted = self._build_target(etree, root)
        except (TypeError, ValueError) as e:
            return self._create_error_result(
                f"Failed to convert to {self.metadata.target_library}: {e}", source, start_time
            )
        return self._create_result(converted, source, start_time, len(root.all()))

    def _build_target(self, etree: Any, root: Element) -> Any:
        def convert(element: Element, parent: Any) -> Any:
            attrib = {
                str(a.name): a.value
                for a in element.attributes
                if not a.is_namespace_declaration
            }
            if parent is None:
                node = etree.Element(str(element.name), attrib)
            else:
                node = etree.SubElement(parent, str(element.name), attrib)
            if element.content is not None:
                node.text = element.content
            return node

        target_root = convert(root, None)
        stack = [(child, target_root) for child in reversed(root.children)]
        while stack:
            element, parent = stack.pop()
            node = convert(element, parent)
            stack.extend((child, node) for child in reversed(element.children))
        return target_root

    def from_target(self, target_data: Any) -> ConversionResult:
        """Convert a target element or element tree to a simplexml Element.

        Args:
            target_data: Target element, or an object with ``getroot()``

        Returns:
            ConversionResult holding a parentless Element
        """
        start_time = time.time()
        node = target_data.getroot() if hasattr(target_data, "getroot") else target_data
        if not isinstance(getattr(node, "tag", None), str):
            return self._create_error_result(
                f"Target data is not a {self.metadata.target_library} element",
                target_data,
                start_time,
            )

        root = self._convert_node(node)
        stack = [(child, root) for child in reversed(list(node))]
        count = 1
        while stack:
            child, parent = stack.pop()
            if not isinstance(child.tag, str):
                continue
            element = self._convert_node(child)
            parent.add_child(element)
            count += 1
            stack.extend((grandchild, element) for grandchild in reversed(list(child)))
        return self._create_result(root, target_data, start_time, count)

    @staticmethod
    def _convert_node(node: Any) -> Element:
        element = Element(
            _split_clark(node.tag),
            [Attribute(_split_clark(name), value) for name, value in node.attrib.items()],
        )
        runs = [node.text] + [child.tail for child in node]
        for run in runs:
            text = (run or "").strip()
            if text:
                element.content = text
        return element


class ElementTreeAdapter(EtreeAdapter):
    """Adapter for bidirectional conversion with xml.etree.ElementTree."""

    module_name = "xml.etree.ElementTree"

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="elementtree",
            target_library="xml.etree.ElementTree",
            description="Bidirectional conversion between simplexml and ElementTree",
        )


class LxmlAdapter(EtreeAdapter):
    """Adapter for bidirectional conversion with lxml.etree."""

    module_name = "lxml.etree"

    @property
    def metadata(self) -> AdapterMetadata:
        """Get adapter metadata."""
        return AdapterMetadata(
            name="lxml",
            target_library="lxml",
            description="Bidirectional conversion between simplexml and lxml.etree",
        )


class AdapterRegistry:
    """Registry for managing integration adapters."""

    def __init__(self) -> None:
        self._adapters: Dict[str, Type[IntegrationAdapter]] = {}

    def register(self, adapter_class: Type[IntegrationAdapter]) -> None:
        """Register an adapter class under its metadata name."""
        self._adapters[adapter_class().metadata.name] = adapter_class

    def get_adapter(
        self,
        adapter_name: str,
        correlation_id: Optional[str] = None
    ) -> Optional[IntegrationAdapter]:
        """Get an adapter instance by name.

        Returns:
            Adapter instance if registered and its library is installed, None otherwise
        """
        adapter_class = self._adapters.get(adapter_name)
        if adapter_class is None:
            return None
        adapter = adapter_class(correlation_id)
        return adapter if adapter.is_available() else None

    def list_available_adapters(self) -> List[AdapterMetadata]:
        """List metadata of every registered adapter whose library is installed."""
        available = []
        for adapter_class in self._adapters.values():
            adapter = adapter_class()
            if adapter.is_available():
                available.append(adapter.metadata)
        return available


_registry = AdapterRegistry()
_registry.register(ElementTreeAdapter)
_registry.register(LxmlAdapter)


def get_adapter(
    adapter_name: str,
    correlation_id: Optional[str] = None
) -> Optional[IntegrationAdapter]:
    """Get an adapter from the global registry."""
    return _registry.get_adapter(adapter_name, correlation_id)


def list_available_adapters() -> List[AdapterMetadata]:
    """List adapters from the global registry whose library is installed."""
    return _registry.list_available_adapters()
