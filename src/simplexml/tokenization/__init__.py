"""Tokenization engine for simplexml.

Key Components:
    XMLTokenizer: Strict pull tokenizer over a UTF-8 byte stream
    Token: A single token with its kind, position, name, attributes and data
    TokenType: Enumeration of the token kinds
"""

from .tokenizer import (
    Token,
    TokenType,
    XMLTokenizer,
)

__all__ = [
    "Token",
    "TokenType",
    "XMLTokenizer",
]
