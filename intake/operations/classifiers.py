"""Error classification for pipeline operations.

Decides whether a failure is worth retrying and converts arbitrary exceptions
into standardized OperationResult objects for reporting.

Key Functions:
- extract_error_code(): Pull a status/machine code off an exception
- is_retryable(): Retry decision used by the orchestrator
- classify_error(): Exception -> OperationResult with a machine error code

Classification order:
1. Request defects (validation, authorization, not found, 400/401/403/404/422)
   are never retryable, whatever their message says.
2. An attached code matched against the caller's allow-list.
3. A named category ("network", "timeout") or a connection/timeout exception.
4. A case-insensitive match against known transient phrases.

Usage:
    from intake.operations.classifiers import is_retryable

    try:
        record_id = await store.create(record)
    except Exception as exc:
        if not is_retryable(exc):
            raise
"""

import asyncio
from typing import Any, Collection, Optional

from intake.errors import (
    AuthorizationError,
    NotFoundError,
    OrchestrationError,
    ValidationError,
)
from intake.operations.result import OperationResult
from intake.operations.status import OperationStatus

DEFAULT_RETRYABLE_CODES: frozenset = frozenset(
    {
        "NETWORK_ERROR",
        "TIMEOUT_ERROR",
        "SERVER_ERROR",
        "500",
        "502",
        "503",
        "504",
        "408",
        "429",
    }
)

NON_RETRYABLE_STATUS_CODES: frozenset = frozenset({"400", "401", "403", "404", "422"})

TRANSIENT_CATEGORIES: frozenset = frozenset({"network", "timeout"})

TRANSIENT_MESSAGES = (
    "network error",
    "connection failed",
    "timeout",
    "rate limit",
    "service unavailable",
    "internal server error",
    "bad gateway",
    "gateway timeout",
)

_TIMEOUT_TYPES = (TimeoutError, asyncio.TimeoutError)


def extract_error_code(error: BaseException) -> Optional[str]:
    """Extract a status or machine code from an exception.

    Looks at ``code``, ``status``, ``status_code`` and the same attributes on
    an attached ``response`` object, in that order.

    Returns:
        The code as a string, or None when no code is attached.
    """
    for attr in ("code", "status", "status_code"):
        value = getattr(error, attr, None)
        if value is not None and not callable(value):
            return str(value)

    response = getattr(error, "response", None)
    if response is not None:
        for attr in ("status", "status_code"):
            value = getattr(response, attr, None)
            if value is not None and not callable(value):
                return str(value)

    return None


def _is_request_defect(error: BaseException, code: Optional[str]) -> bool:
    if isinstance(error, (ValidationError, AuthorizationError, NotFoundError)):
        return True
    return code in NON_RETRYABLE_STATUS_CODES


def _category(error: BaseException) -> Optional[str]:
    category = getattr(error, "category", None)
    if isinstance(category, str):
        return category.lower()
    if isinstance(error, _TIMEOUT_TYPES) or type(error).__name__ == "TimeoutError":
        return "timeout"
    if isinstance(error, ConnectionError) or type(error).__name__ == "NetworkError":
        return "network"
    return None


def _matching_phrase(error: BaseException) -> Optional[str]:
    message = str(error).lower()
    for phrase in TRANSIENT_MESSAGES:
        if phrase in message:
            return phrase
    return None


def is_retryable(
    error: BaseException,
    retryable_codes: Optional[Collection[Any]] = None,
) -> bool:
    """Decide whether a failed attempt should be retried.

    Args:
        error: Exception raised by the operation
        retryable_codes: Allow-list of codes (ints or strings). Defaults to
            DEFAULT_RETRYABLE_CODES.

    Returns:
        True if the failure looks transient, False otherwise
    """
    codes = DEFAULT_RETRYABLE_CODES if retryable_codes is None else retryable_codes
    allowed = {str(c) for c in codes}

    code = extract_error_code(error)
    if _is_request_defect(error, code):
        return False

    if code is not None and code in allowed:
        return True

    if _category(error) in TRANSIENT_CATEGORIES:
        return True

    return _matching_phrase(error) is not None


def classify_error(
    error: BaseException,
    retryable_codes: Optional[Collection[Any]] = None,
) -> OperationResult:
    """Classify an exception into an OperationResult.

    OrchestrationError wrappers are unwrapped so that the classification
    reflects the underlying cause.

    Error Code Mapping:
    - ValidationError, 400, 422: PERMANENT_ERROR / VALIDATION_FAILED or INVALID_REQUEST
    - AuthorizationError, 401, 403: UNAUTHORIZED / UNAUTHORIZED
    - NotFoundError, 404: NOT_FOUND / NOT_FOUND
    - 429 or rate limit: TRANSIENT_ERROR / RATE_LIMITED
    - timeouts: TRANSIENT_ERROR / TIMEOUT
    - connection failures: TRANSIENT_ERROR / NETWORK_ERROR
    - 5xx: TRANSIENT_ERROR / SERVER_ERROR
    - Other retryable: TRANSIENT_ERROR / TRANSIENT_ERROR
    - Anything else: PERMANENT_ERROR / PROCESSING_ERROR

    Args:
        error: Exception to classify
        retryable_codes: Allow-list forwarded to is_retryable()

    Returns:
        OperationResult with status, message and error_code
    """
    if isinstance(error, OrchestrationError):
        error = error.cause

    code = extract_error_code(error)
    message = str(error) or type(error).__name__

    if isinstance(error, ValidationError):
        return OperationResult.permanent_error(
            message, error_code="VALIDATION_FAILED", data=error.errors or None
        )
    if isinstance(error, AuthorizationError) or code in ("401", "403"):
        return OperationResult.error(
            OperationStatus.UNAUTHORIZED, message, error_code="UNAUTHORIZED"
        )
    if isinstance(error, NotFoundError) or code == "404":
        return OperationResult.error(
            OperationStatus.NOT_FOUND, message, error_code="NOT_FOUND"
        )
    if code in NON_RETRYABLE_STATUS_CODES:
        return OperationResult.permanent_error(message, error_code="INVALID_REQUEST")

    if not is_retryable(error, retryable_codes):
        return OperationResult.permanent_error(message, error_code="PROCESSING_ERROR")

    category = _category(error)
    phrase = _matching_phrase(error)

    if code in ("429", "RATE_LIMIT_EXCEEDED") or phrase == "rate limit":
        return OperationResult.transient_error(message, error_code="RATE_LIMITED")
    if category == "timeout" or code in ("408", "TIMEOUT_ERROR"):
        return OperationResult.transient_error(message, error_code="TIMEOUT")
    if category == "network" or code == "NETWORK_ERROR":
        return OperationResult.transient_error(message, error_code="NETWORK_ERROR")
    if (code is not None and code.isdigit() and 500 <= int(code) < 600) or (
        code == "SERVER_ERROR"
    ):
        return OperationResult.transient_error(message, error_code="SERVER_ERROR")

    return OperationResult.transient_error(message, error_code="TRANSIENT_ERROR")
