"""Shared utilities for simplexml.

This module provides the configuration objects, error hierarchy, result types
and logging helpers used across all processing layers.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    EncoderConfig,
    ParserConfig,
    SimpleXMLConfig,
)
from .errors import (
    NestingTooDeepError,
    ParseError,
    SimpleXMLError,
    TooManyRootElementsError,
    TreeStructureError,
    XMLSyntaxError,
)
from .logging import (
    CorrelationLogger,
    get_logger,
)
from .result import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ParseResult,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "EncoderConfig",
    "ParserConfig",
    "SimpleXMLConfig",
    "NestingTooDeepError",
    "ParseError",
    "SimpleXMLError",
    "TooManyRootElementsError",
    "TreeStructureError",
    "XMLSyntaxError",
    "CorrelationLogger",
    "get_logger",
    "DiagnosticEntry",
    "DiagnosticSeverity",
    "ParseResult",
]
