"""Correlation-aware logging for simplexml.

Parse, encode and conversion calls each log through a :class:`CorrelationLogger`
bound to the component doing the work. Every record carries ``component`` and
``correlation_id`` extras, so one request can be followed across the
tokenizer, the tree builder and the API layer.
"""

import logging
from typing import Any, Dict, Optional


class CorrelationLogger:
    """Thin wrapper over a stdlib logger that stamps correlation extras."""

    def __init__(
        self,
        name: str,
        correlation_id: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Bind a logger to a component.

        Args:
            name: Logger name, usually the calling module's ``__name__``
            correlation_id: Request identifier copied onto every record
            component: Component label; defaults to the last dotted part of ``name``
        """
        self.logger = logging.getLogger(name)
        self.correlation_id = correlation_id
        self.component = component or name.rpartition(".")[2]

    def _extra(self, extra: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        context: Dict[str, Any] = {
            "component": self.component,
            "correlation_id": self.correlation_id,
        }
        if extra:
            context.update(extra)
        return context

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log a milestone; the extras are only built when DEBUG is enabled."""
        if self.logger.isEnabledFor(logging.DEBUG):
            self.logger.debug(message, extra=self._extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.info(message, extra=self._extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        self.logger.warning(message, extra=self._extra(extra))


def get_logger(
    name: str,
    correlation_id: Optional[str] = None,
    component: Optional[str] = None
) -> CorrelationLogger:
    """Return a :class:`CorrelationLogger` for ``name``."""
    return CorrelationLogger(name, correlation_id, component)
