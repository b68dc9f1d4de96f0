"""simplexml.

A minimal XML document object model for RPC-style payloads: an element tree
with parent/child navigation, a namespace-aware encoder that re-encodes trees
deterministically, a strict parser, and composable search predicates.

Progressive API Disclosure:
- Level 1: Simple functions - parse(), parse_string(), parse_file(), parse_elements()
- Level 2: Configured parser - XMLParser class
- Level 3: Building blocks - XMLTokenizer, TreeBuilder, Encoder
"""

__version__ = "0.1.0"
__author__ = "simplexml developers"

# The tree package must load before tokenization, which builds tree names.
from .tree import (
    Attribute,
    Document,
    Element,
    QName,
    TreeBuilder,
    create_document,
    create_element,
    elem,
)
from .tokenization import Token, TokenType, XMLTokenizer
from .serialization import Encoder

# Level 1 and Level 2 parsing entry points
from .api import (
    XMLParser,
    parse,
    parse_element_string,
    parse_elements,
    parse_elements_with_tokenizer,
    parse_file,
    parse_string,
    parse_with_tokenizer,
)

# Configuration, errors and results
from .shared import (
    EncoderConfig,
    NestingTooDeepError,
    ParseError,
    ParseResult,
    ParserConfig,
    SimpleXMLConfig,
    SimpleXMLError,
    TooManyRootElementsError,
    TreeStructureError,
    XMLSyntaxError,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Tree model
    "Attribute",
    "Document",
    "Element",
    "QName",
    "create_document",
    "create_element",
    "elem",

    # Level 1: Simple parsing functions
    "parse",
    "parse_string",
    "parse_file",
    "parse_elements",
    "parse_element_string",
    "parse_with_tokenizer",
    "parse_elements_with_tokenizer",

    # Level 2: Configured parser
    "XMLParser",

    # Level 3: Building blocks
    "XMLTokenizer",
    "Token",
    "TokenType",
    "TreeBuilder",
    "Encoder",

    # Configuration, errors and results
    "EncoderConfig",
    "ParserConfig",
    "SimpleXMLConfig",
    "ParseResult",
    "SimpleXMLError",
    "ParseError",
    "XMLSyntaxError",
    "TooManyRootElementsError",
    "NestingTooDeepError",
    "TreeStructureError",
]
