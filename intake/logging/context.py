"""Request context binding for structured logging.

Binds request-scoped identifiers (request ID, batch ID, caller) to every log
entry emitted inside the block, including entries from the orchestrator and
batch coordinator running within the same asyncio task.

Usage:
    from intake.logging import bind_request_context

    with bind_request_context(request_id="batch_123", caller_key="10.0.0.1"):
        report = await pipeline.submit_batch(...)
"""

import uuid
from contextlib import contextmanager
from typing import Any, Generator, Optional

import structlog


@contextmanager
def bind_request_context(
    request_id: Optional[str] = None,
    caller_key: Optional[str] = None,
    batch_id: Optional[str] = None,
    **extra_context: Any,
) -> Generator[str, None, None]:
    """Bind request-scoped context to all logs within the context manager.

    Args:
        request_id: Unique request identifier. Auto-generated if not provided.
        caller_key: Rate-limiting key of the caller (e.g. network origin).
        batch_id: Client-supplied batch identifier, if any.
        **extra_context: Additional key-value pairs to include in logs.

    Yields:
        The request ID bound for the block.
    """
    context: dict[str, Any] = {"request_id": request_id or str(uuid.uuid4())}

    if caller_key is not None:
        context["caller_key"] = caller_key

    if batch_id is not None:
        context["batch_id"] = batch_id

    context.update(extra_context)

    structlog.contextvars.bind_contextvars(**context)
    try:
        yield context["request_id"]
    finally:
        structlog.contextvars.unbind_contextvars(*context.keys())


def get_request_id() -> Optional[str]:
    """Return the request ID bound in the current context, if any."""
    return structlog.contextvars.get_contextvars().get("request_id")


def clear_request_context() -> None:
    """Clear all request-scoped context from the logging context."""
    structlog.contextvars.clear_contextvars()
