"""Parsing API for simplexml.

Key Components:
    parse / parse_string / parse_file: Parse a single-root document
    parse_elements / parse_element_string: Parse a list of top-level elements
    parse_with_tokenizer / parse_elements_with_tokenizer: Parse from a
        caller-supplied token source
    XMLParser: Reusable configured parser with statistics and a non-raising check
    get_adapter: Conversion to and from ElementTree and lxml trees
"""

from .adapters import (
    AdapterMetadata,
    AdapterRegistry,
    ConversionResult,
    ElementTreeAdapter,
    IntegrationAdapter,
    LxmlAdapter,
    get_adapter,
    list_available_adapters,
)
from .parser import (
    InputType,
    XMLParser,
    parse,
    parse_element_string,
    parse_elements,
    parse_elements_with_tokenizer,
    parse_file,
    parse_string,
    parse_with_tokenizer,
)

__all__ = [
    "AdapterMetadata",
    "AdapterRegistry",
    "ConversionResult",
    "ElementTreeAdapter",
    "IntegrationAdapter",
    "LxmlAdapter",
    "get_adapter",
    "list_available_adapters",
    "InputType",
    "XMLParser",
    "parse",
    "parse_element_string",
    "parse_elements",
    "parse_elements_with_tokenizer",
    "parse_file",
    "parse_string",
    "parse_with_tokenizer",
]
