"""Structured logging for the pipeline, built on structlog.

Public API:
    - configure_logging(): Initialize logging for the process
    - get_module_logger(): Get a logger for the calling module
    - bind_request_context(): Context manager for request-scoped logging
    - get_request_id(): Current request ID from context
    - clear_request_context(): Clear all request context
"""

from intake.logging.context import (
    bind_request_context,
    clear_request_context,
    get_request_id,
)
from intake.logging.setup import configure_logging, get_module_logger

__all__ = [
    "configure_logging",
    "get_module_logger",
    "bind_request_context",
    "get_request_id",
    "clear_request_context",
]
