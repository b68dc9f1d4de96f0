"""XML serialization for simplexml trees."""

from .encoder import (
    XML_DECLARATION,
    Encoder,
    escape_attribute,
    escape_text,
)

__all__ = [
    "XML_DECLARATION",
    "Encoder",
    "escape_attribute",
    "escape_text",
]
