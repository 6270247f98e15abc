"""Observability module for TEOS.

Structured logging (structlog) with console output for development and JSON
output for production.

Example:
    >>> from teos.observability import get_logger
    >>>
    >>> logger = get_logger(__name__)
    >>> logger.info("teos.mls.created", identifier="2f0c...", suite="MLS_128_...")
"""

from teos.observability.logging import (
    bind_context,
    clear_context,
    configure_logging,
    get_logger,
    is_debug_mode,
    sanitize_for_logging,
)

__all__ = [
    "bind_context",
    "clear_context",
    "configure_logging",
    "get_logger",
    "is_debug_mode",
    "sanitize_for_logging",
]
