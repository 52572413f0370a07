"""Structured logging utilities for kra_reader.

Every record carries the component that emitted it and, when known, the
archive member (``maindoc.xml``, ``documentinfo.xml``) or archive path it
concerns.
"""

import logging
from typing import Any, Dict, Optional


class DocumentLogger:
    """Logger that automatically includes document and component information."""

    def __init__(
        self,
        name: str,
        document: Optional[str] = None,
        component: Optional[str] = None
    ) -> None:
        """Initialize document logger.

        Args:
            name: Logger name (typically __name__)
            document: Archive or archive member the messages refer to
            component: Component name for structured logging
        """
        self.logger = logging.getLogger(name)
        self.document = document
        self.component = component or name.split('.')[-1]

    def bind(self, document: str) -> "DocumentLogger":
        """Return a logger for the same component that refers to another document."""
        bound = DocumentLogger(self.logger.name, document, self.component)
        bound.logger = self.logger
        return bound

    def _get_extra(self, extra: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        combined_extra = {
            "component": self.component,
            "document": self.document,
        }

        if extra:
            combined_extra.update(extra)

        return combined_extra

    def is_enabled_for(self, level: int) -> bool:
        """Check whether a message at ``level`` would be emitted."""
        return self.logger.isEnabledFor(level)

    def debug(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log debug message with document info."""
        self.logger.debug(message, extra=self._get_extra(extra))

    def info(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log info message with document info."""
        self.logger.info(message, extra=self._get_extra(extra))

    def warning(self, message: str, extra: Optional[Dict[str, Any]] = None) -> None:
        """Log warning message with document info."""
        self.logger.warning(message, extra=self._get_extra(extra))

    def error(
        self,
        message: str,
        extra: Optional[Dict[str, Any]] = None,
        exc_info: bool = False
    ) -> None:
        """Log error message with document info."""
        self.logger.error(message, extra=self._get_extra(extra), exc_info=exc_info)


def get_logger(
    name: str,
    document: Optional[str] = None,
    component: Optional[str] = None
) -> DocumentLogger:
    """Get a document-aware logger instance.

    Args:
        name: Logger name (typically __name__)
        document: Archive or archive member the messages refer to
        component: Component name for structured logging

    Returns:
        DocumentLogger instance
    """
    return DocumentLogger(name, document, component)
