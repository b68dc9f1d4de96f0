"""Composable element predicates.

A :data:`Matcher` is any callable taking an :class:`Element` and returning a
bool. The factories below build the common ones and the combinators compose
them; user-defined functions mix in freely. :func:`find_all` and
:func:`find_first` apply a matcher over any sequence of elements, typically
``root.all()``.

Examples:
    >>> from simplexml.api import parse_string
    >>> doc = parse_string('<r><a id="1"/><a id="2">x</a></r>')
    >>> [e.get_attr("id") for e in find_all(tag("a"), doc.all())]
    ['1', '2']
    >>> find_first(and_(tag("a"), content_exists()), doc.all()).get_attr("id")
    '2'
"""

import re
from typing import Callable, Iterable, List, Optional, Pattern, Union

from simplexml.tree.element import Element

Matcher = Callable[[Element], bool]
RegexLike = Union[str, Pattern[str], None]

WILDCARD = "*"


def _compile(pattern: RegexLike) -> Optional[Pattern[str]]:
    if pattern is None or isinstance(pattern, re.Pattern):
        return pattern
    return re.compile(pattern)


def _matches(pattern: Optional[Pattern[str]], text: str) -> bool:
    return pattern is None or pattern.search(text) is not None


def _equals(expected: str, actual: str) -> bool:
    return expected == WILDCARD or expected == actual


def always() -> Matcher:
    """Matches every element."""
    return lambda element: True


def never() -> Matcher:
    """Matches no element."""
    return lambda element: False


def tag(local: str, namespace: str = "") -> Matcher:
    """Matches on the element's qualified name.

    Either part may be :data:`WILDCARD`. An empty namespace only matches
    elements that have no namespace.
    """
    def match(element: Element) -> bool:
        return _equals(local, element.name.local) and _equals(namespace, element.name.namespace)
    return match


def tag_re(local_re: RegexLike = None, namespace_re: RegexLike = None) -> Matcher:
    """Matches when the local name and namespace match the given patterns.

    Patterns use :func:`re.search` semantics; a missing pattern matches
    anything.
    """
    local_pattern = _compile(local_re)
    namespace_pattern = _compile(namespace_re)

    def match(element: Element) -> bool:
        return (
            _matches(local_pattern, element.name.local)
            and _matches(namespace_pattern, element.name.namespace)
        )
    return match


def attr(name: str, namespace: str = "", value: str = WILDCARD) -> Matcher:
    """Matches elements carrying an attribute with the given name and value.

    Any of the three parts may be :data:`WILDCARD`.
    """
    def match(element: Element) -> bool:
        return any(
            _equals(name, a.name.local)
            and _equals(namespace, a.name.namespace)
            and _equals(value, a.value)
            for a in element.attributes
        )
    return match


def attr_re(
    name_re: RegexLike = None,
    namespace_re: RegexLike = None,
    value_re: RegexLike = None
) -> Matcher:
    """Regex counterpart of :func:`attr`; a missing pattern matches anything."""
    name_pattern = _compile(name_re)
    namespace_pattern = _compile(namespace_re)
    value_pattern = _compile(value_re)

    def match(element: Element) -> bool:
        return any(
            _matches(name_pattern, a.name.local)
            and _matches(namespace_pattern, a.name.namespace)
            and _matches(value_pattern, a.value)
            for a in element.attributes
        )
    return match


def content_exists() -> Matcher:
    """Matches elements with non-empty text content."""
    return lambda element: bool(element.content)


def content_re(pattern: RegexLike) -> Matcher:
    """Matches elements whose content matches ``pattern``.

    Elements without content are matched as the empty string.
    """
    compiled = _compile(pattern)
    return lambda element: _matches(compiled, element.content or "")


def no_parent() -> Matcher:
    """Matches root elements."""
    return lambda element: element.parent is None


def parent(matcher: Matcher) -> Matcher:
    """Matches when the immediate parent exists and satisfies ``matcher``."""
    def match(element: Element) -> bool:
        up = element.parent
        return up is not None and matcher(up)
    return match


def ancestor(matcher: Matcher) -> Matcher:
    """Matches when any ancestor, excluding the element itself, satisfies ``matcher``."""
    def match(element: Element) -> bool:
        up = element.parent
        while up is not None:
            if matcher(up):
                return True
            up = up.parent
        return False
    return match


def ancestor_n(matcher: Matcher, n: int) -> Matcher:
    """Matches when the ancestor exactly ``n`` levels up satisfies ``matcher``.

    ``n=0`` is the immediate parent, so ``ancestor_n(m, 0)`` behaves like
    ``parent(m)``.

    Raises:
        ValueError: If n is negative
    """
    if n < 0:
        raise ValueError("ancestor_n requires n >= 0")

    def match(element: Element) -> bool:
        up = element.parent
        for _ in range(n):
            if up is None:
                return False
            up = up.parent
        return up is not None and matcher(up)
    return match


def not_(matcher: Matcher) -> Matcher:
    """Logical negation."""
    return lambda element: not matcher(element)


def and_(*matchers: Matcher) -> Matcher:
    """Short-circuiting conjunction; with no matchers it always matches."""
    return lambda element: all(m(element) for m in matchers)


def or_(*matchers: Matcher) -> Matcher:
    """Short-circuiting disjunction; with no matchers it never matches."""
    return lambda element: any(m(element) for m in matchers)


def find_all(matcher: Matcher, elements: Iterable[Element]) -> List[Element]:
    """Every element of ``elements`` satisfying ``matcher``, in input order."""
    return [element for element in elements if matcher(element)]


def find_first(matcher: Matcher, elements: Iterable[Element]) -> Optional[Element]:
    """The first element satisfying ``matcher``, or None.

    Stops consuming ``elements`` at the first match.
    """
    for element in elements:
        if matcher(element):
            return element
    return None
