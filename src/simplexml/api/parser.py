"""Parser API for simplexml.

Module-level functions cover the common cases: parse a document or a list of
top-level elements from bytes, text, a path or a stream. :class:`XMLParser`
holds a configuration for reuse, keeps usage statistics, and offers
:meth:`XMLParser.check`, which reports failures as values instead of raising.

All functions are strict: malformed input raises
:class:`~simplexml.shared.errors.XMLSyntaxError`, and a document-level parse
of input holding several top-level elements raises
:class:`~simplexml.shared.errors.TooManyRootElementsError`.
"""

import time
from pathlib import Path
from typing import Any, BinaryIO, Dict, Iterable, List, Optional, TextIO, Union

from simplexml.shared import (
    DiagnosticSeverity,
    ParseError,
    ParseResult,
    ParserConfig,
    SimpleXMLConfig,
    XMLSyntaxError,
    get_logger,
)
from simplexml.tokenization import Token, XMLTokenizer
from simplexml.tree import Document, Element, TreeBuilder

# Type definitions for input data
InputType = Union[str, bytes, BinaryIO, TextIO, Path]

MS_PER_SECOND = 1000


def _elapsed_ms(start_time: float) -> float:
    return (time.time() - start_time) * MS_PER_SECOND


def _tokenizer_for(
    source: Union[str, bytes, BinaryIO, TextIO],
    config: Optional[ParserConfig],
    correlation_id: Optional[str]
) -> XMLTokenizer:
    return XMLTokenizer(source, config, correlation_id)


def _build(
    tokens: Iterable[Token],
    config: Optional[ParserConfig],
    correlation_id: Optional[str],
    document: bool
) -> Union[Document, List[Element]]:
    builder = TreeBuilder(tokens, config, correlation_id)
    if document:
        return builder.build_document()
    return builder.build_elements()


def _parse_source(
    source: InputType,
    config: Optional[ParserConfig],
    correlation_id: Optional[str],
    document: bool
) -> Union[Document, List[Element]]:
    operation = "parse" if document else "parse_elements"
    logger = get_logger(__name__, correlation_id, operation)
    start_time = time.time()

    logger.info(
        "Starting parse operation",
        extra={"input_type": type(source).__name__, "document": document},
    )

    try:
        if isinstance(source, Path):
            with source.open("rb") as stream:
                result = _build(
                    _tokenizer_for(stream, config, correlation_id),
                    config, correlation_id, document,
                )
        else:
            result = _build(
                _tokenizer_for(source, config, correlation_id),
                config, correlation_id, document,
            )
    except ParseError as e:
        logger.warning(
            "Parse operation failed",
            extra={
                "error": str(e),
                "error_type": type(e).__name__,
                "completed_roots": len(e.elements),
                "processing_time_ms": _elapsed_ms(start_time),
            },
        )
        raise

    logger.info(
        "Parse operation completed",
        extra={"processing_time_ms": _elapsed_ms(start_time)},
    )
    return result


def parse(
    source: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse a complete XML document.

    Args:
        source: XML as bytes, str, a Path, or a binary or text file-like object
        config: Optional parser configuration
        correlation_id: Optional correlation ID for request tracking

    Returns:
        The document; it has no root when the input holds no element

    Raises:
        XMLSyntaxError: If the input is malformed
        TooManyRootElementsError: If the input holds more than one top-level element

    Examples:
        >>> doc = parse(b'<root><item id="1">Hello</item></root>')
        >>> doc.root.children[0].content
        'Hello'
    """
    return _parse_source(source, config, correlation_id, document=True)


def parse_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse a complete XML document held in a string."""
    if not isinstance(xml_string, str):
        raise TypeError("parse_string expects a str")
    return parse(xml_string, config, correlation_id)


def parse_file(
    file_path: Union[str, Path],
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> Document:
    """Parse a complete XML document from a file.

    Raises:
        OSError: If the file cannot be opened
        ParseError: If the content is not a well-formed single-root document
    """
    return parse(Path(file_path), config, correlation_id)


def parse_elements(
    source: InputType,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> List[Element]:
    """Parse every top-level element of the input, in order.

    Unlike :func:`parse`, several top-level elements are accepted.

    Raises:
        XMLSyntaxError: If the input is malformed; its ``elements`` holds the
            top-level elements completed before the error

    Examples:
        >>> [e.name.local for e in parse_elements("<foo/>\\n<bar/>\\n")]
        ['foo', 'bar']
    """
    return _parse_source(source, config, correlation_id, document=False)


def parse_element_string(
    xml_string: str,
    config: Optional[ParserConfig] = None,
    correlation_id: Optional[str] = None
) -> List[Element]:
    """Parse every top-level element held in a string."""
    if not isinstance(xml_string, str):
        raise TypeError("parse_element_string expects a str")
    return parse_elements(xml_string, config, correlation_id)


def parse_with_tokenizer(
    tokenizer: Iterable[Token],
    config: Optional[ParserConfig] = None
) -> Document:
    """Build a document from a caller-supplied token source.

    Lets callers configure the tokenizer themselves, or feed tokens from
    somewhere else entirely.
    """
    correlation_id = getattr(tokenizer, "correlation_id", None)
    return _build(tokenizer, config, correlation_id, document=True)


def parse_elements_with_tokenizer(
    tokenizer: Iterable[Token],
    config: Optional[ParserConfig] = None
) -> List[Element]:
    """Build every top-level element from a caller-supplied token source."""
    correlation_id = getattr(tokenizer, "correlation_id", None)
    return _build(tokenizer, config, correlation_id, document=False)


class XMLParser:
    """Reusable, configured XML parser.

    Attributes:
        config: Parser configuration shared by every call
        correlation_id: Correlation ID attached to every log record

    Examples:
        >>> parser = XMLParser(ParserConfig(max_depth=64))
        >>> parser.parse("<root/>").root.name.local
        'root'
        >>> result = parser.check("<root><open></root>")
        >>> result.success, result.is_syntax_error
        (False, True)
    """

    def __init__(
        self,
        config: Optional[Union[ParserConfig, SimpleXMLConfig]] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the parser.

        Args:
            config: Parser configuration, or a full SimpleXMLConfig whose
                parser section (and correlation ID) is used
            correlation_id: Optional correlation ID for request tracking
        """
        if isinstance(config, SimpleXMLConfig):
            correlation_id = correlation_id or config.correlation_id
            config = config.parser
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id

        self.logger = get_logger(__name__, self.correlation_id, "xml_parser")

        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info(
            "XMLParser initialized",
            extra={
                "chunk_size": self.config.chunk_size,
                "max_depth": self.config.max_depth,
            },
        )

    def _record(self, start_time: float, success: bool) -> float:
        processing_time = _elapsed_ms(start_time)
        self._parse_count += 1
        self._total_processing_time += processing_time
        if success:
            self._successful_parses += 1
        return processing_time

    def _run(self, source: InputType, document: bool) -> Union[Document, List[Element]]:
        start_time = time.time()
        try:
            result = _parse_source(source, self.config, self.correlation_id, document)
        except ParseError:
            self._record(start_time, success=False)
            raise
        self._record(start_time, success=True)
        return result

    def parse(self, source: InputType) -> Document:
        """Parse a complete document; see :func:`parse`."""
        return self._run(source, document=True)

    def parse_elements(self, source: InputType) -> List[Element]:
        """Parse every top-level element; see :func:`parse_elements`."""
        return self._run(source, document=False)

    def check(self, source: InputType, fragment: bool = False) -> ParseResult:
        """Parse without raising for malformed input.

        Args:
            source: XML input, as for :func:`parse`
            fragment: Accept several top-level elements

        Returns:
            ParseResult holding either the parsed tree or the failure

        Raises:
            OSError: If ``source`` is a path that cannot be opened
        """
        start_time = time.time()
        result = ParseResult(correlation_id=self.correlation_id)
        try:
            parsed = _parse_source(source, self.config, self.correlation_id, not fragment)
        except ParseError as e:
            result.error = e
            result.elements = list(e.elements)
            position = None
            if isinstance(e, XMLSyntaxError) and e.line:
                position = {"line": e.line, "column": e.column}
            result.add_diagnostic(DiagnosticSeverity.ERROR, str(e), "xml_parser", position)
            result.processing_time_ms = self._record(start_time, success=False)
            return result

        if isinstance(parsed, Document):
            result.document = parsed
            result.elements = [parsed.root] if parsed.root is not None else []
        else:
            result.elements = parsed
        if not result.elements:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Input contains no elements",
                "xml_parser",
            )
        result.processing_time_ms = self._record(start_time, success=True)
        return result

    @property
    def statistics(self) -> Dict[str, Any]:
        """Usage statistics across every call made through this parser."""
        return {
            "total_parses": self._parse_count,
            "successful_parses": self._successful_parses,
            "failed_parses": self._parse_count - self._successful_parses,
            "success_rate": (
                self._successful_parses / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._parse_count
                if self._parse_count > 0 else 0.0
            ),
            "correlation_id": self.correlation_id,
        }

    def reset_statistics(self) -> None:
        """Reset parser usage statistics."""
        self._parse_count = 0
        self._successful_parses = 0
        self._total_processing_time = 0.0

        self.logger.info("Parser statistics reset")
