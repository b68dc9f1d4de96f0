"""Result objects and diagnostic types for simplexml.

:class:`ParseResult` is the value-returning counterpart of the raising parse
functions: it carries either the parsed tree or the failure, never both
silently.
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any, Dict, List, Optional

from .errors import ParseError, TooManyRootElementsError, XMLSyntaxError

if TYPE_CHECKING:
    from simplexml.tree.element import Document, Element


class DiagnosticSeverity(Enum):
    """Severity levels for diagnostic entries."""

    INFO = auto()
    WARNING = auto()
    ERROR = auto()


@dataclass
class DiagnosticEntry:
    """Single diagnostic entry with context information."""

    severity: DiagnosticSeverity
    message: str
    component: str
    position: Optional[Dict[str, int]] = None
    timestamp: float = field(default_factory=time.time)

    def __post_init__(self) -> None:
        """Validate diagnostic entry."""
        if not self.message:
            raise ValueError("Diagnostic message cannot be empty")
        if not self.component:
            raise ValueError("Diagnostic component cannot be empty")

    def to_dict(self) -> Dict[str, Any]:
        """Convert diagnostic to dictionary representation."""
        result: Dict[str, Any] = {
            "severity": self.severity.name,
            "message": self.message,
            "component": self.component,
        }
        if self.position:
            result["position"] = dict(self.position)
        return result


@dataclass
class ParseResult:
    """Outcome of a parse that reports failures as values."""

    document: Optional["Document"] = None
    elements: List["Element"] = field(default_factory=list)
    error: Optional[ParseError] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        """True when the input parsed without error."""
        return self.error is None

    @property
    def is_syntax_error(self) -> bool:
        return isinstance(self.error, XMLSyntaxError)

    @property
    def is_too_many_roots(self) -> bool:
        return isinstance(self.error, TooManyRootElementsError)

    @property
    def element_count(self) -> int:
        """Total number of elements across all parsed top-level trees."""
        return sum(len(element.all()) for element in self.elements)

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        position: Optional[Dict[str, int]] = None
    ) -> None:
        """Add diagnostic entry to result."""
        self.diagnostics.append(
            DiagnosticEntry(
                severity=severity,
                message=message,
                component=component,
                position=position,
            )
        )

    def has_errors(self) -> bool:
        """Check if result contains any error diagnostics."""
        return any(
            diag.severity == DiagnosticSeverity.ERROR for diag in self.diagnostics
        )

    def summary(self) -> Dict[str, Any]:
        """Get summary statistics for the parse result."""
        summary: Dict[str, Any] = {
            "success": self.success,
            "root_count": len(self.elements),
            "element_count": self.element_count,
            "processing_time_ms": self.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.error is not None:
            summary["error"] = str(self.error)
            summary["error_type"] = type(self.error).__name__
        return summary
