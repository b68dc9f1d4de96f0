"""Predicate-based element search for simplexml."""

from .matchers import (
    WILDCARD,
    Matcher,
    always,
    ancestor,
    ancestor_n,
    and_,
    attr,
    attr_re,
    content_exists,
    content_re,
    find_all,
    find_first,
    never,
    no_parent,
    not_,
    or_,
    parent,
    tag,
    tag_re,
)

__all__ = [
    "WILDCARD",
    "Matcher",
    "always",
    "ancestor",
    "ancestor_n",
    "and_",
    "attr",
    "attr_re",
    "content_exists",
    "content_re",
    "find_all",
    "find_first",
    "never",
    "no_parent",
    "not_",
    "or_",
    "parent",
    "tag",
    "tag_re",
]
