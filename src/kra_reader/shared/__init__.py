"""Shared utilities for kra_reader.

This module provides the configuration objects and logging helpers used by
every processing layer.
"""

from .config import (
    ConfigError,
    ConfigValidationError,
    ParsingConfiguration,
    ShouldLoadFiles,
)
from .logging import (
    DocumentLogger,
    get_logger,
)

__all__ = [
    "ConfigError",
    "ConfigValidationError",
    "ParsingConfiguration",
    "ShouldLoadFiles",
    "DocumentLogger",
    "get_logger",
]
