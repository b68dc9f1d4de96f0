"""Tree construction from a token stream.

:class:`TreeBuilder` pulls tokens one at a time and assembles
:class:`~simplexml.tree.element.Element` trees. Only elements, attributes and
trimmed text survive; comments, processing instructions and directives are
dropped. Tokenizer failures propagate unchanged, carrying the top-level
elements completed so far.
"""

from typing import Iterable, Iterator, List, Optional

from simplexml.shared.config import ParserConfig
from simplexml.shared.errors import NestingTooDeepError, ParseError, TooManyRootElementsError
from simplexml.shared.logging import get_logger
from simplexml.tokenization.tokenizer import Token, TokenType

from .element import Document, Element


class TreeBuilder:
    """Builds elements and documents from tokens.

    Examples:
        >>> from simplexml.tokenization import XMLTokenizer
        >>> builder = TreeBuilder(XMLTokenizer(b"<a><b>hi</b></a>"))
        >>> root = builder.build_element()
        >>> root.children[0].content
        'hi'
    """

    def __init__(
        self,
        tokens: Iterable[Token],
        config: Optional[ParserConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize tree builder.

        Args:
            tokens: Token source, usually an XMLTokenizer
            config: Parser configuration (maximum nesting depth)
            correlation_id: Optional correlation ID for request tracking
        """
        self.config = config or ParserConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "tree_builder")

        self._tokens: Iterator[Token] = iter(tokens)
        self.elements_created = 0

    def build_element(self) -> Optional[Element]:
        """Build the next top-level element.

        Text and other tokens before the element are skipped.

        Returns:
            The element, or None when the token stream is exhausted
        """
        for token in self._tokens:
            if token.type is TokenType.START_ELEMENT:
                return self._build(token)
        return None

    def build_elements(self) -> List[Element]:
        """Build every remaining top-level element, in order.

        Raises:
            ParseError: On malformed input; ``elements`` holds the top-level
                elements completed before the failure
        """
        elements: List[Element] = []
        try:
            while True:
                element = self.build_element()
                if element is None:
                    break
                elements.append(element)
        except ParseError as e:
            e.elements = list(elements)
            self.logger.debug(
                "Tree building stopped on error",
                extra={"completed_roots": len(elements), "error": str(e)},
            )
            raise

        self.logger.debug(
            "Tree building completed",
            extra={"root_count": len(elements), "elements_created": self.elements_created},
        )
        return elements

    def build_document(self) -> Document:
        """Build a document; input must hold at most one top-level element.

        Raises:
            TooManyRootElementsError: More than one top-level element was found
            ParseError: On malformed input
        """
        elements = self.build_elements()
        if len(elements) > 1:
            raise TooManyRootElementsError(elements)
        return Document(elements[0] if elements else None)

    def _new_element(self, token: Token) -> Element:
        self.elements_created += 1
        return Element(token.name, list(token.attributes))

    def _build(self, start: Token) -> Element:
        root = self._new_element(start)
        stack = [root]
        max_depth = self.config.max_depth

        for token in self._tokens:
            if token.type is TokenType.START_ELEMENT:
                if max_depth is not None and len(stack) >= max_depth:
                    raise NestingTooDeepError(max_depth)
                child = self._new_element(token)
                stack[-1].add_child(child)
                stack.append(child)
            elif token.type is TokenType.END_ELEMENT:
                stack.pop()
                if not stack:
                    return root
            elif token.type is TokenType.CHARACTER_DATA:
                # Last non-blank run wins.
                text = token.data.strip()
                if text:
                    stack[-1].content = text

        # A well-behaved tokenizer reports the unclosed element itself.
        raise ParseError(f"unexpected end of tokens inside <{stack[-1].name.local}>")
