"""Outcome categories for pipeline operations."""

from enum import Enum


class OperationStatus(Enum):
    """Status codes for operation outcomes.

    Attributes:
        SUCCESS: Operation completed (including idempotent replays)
        TRANSIENT_ERROR: Retryable failure (network, timeout, 429, 5xx)
        PERMANENT_ERROR: Request defect that will fail again (validation)
        UNAUTHORIZED: Authentication or authorization failure
        NOT_FOUND: Target resource does not exist
    """

    SUCCESS = "success"
    TRANSIENT_ERROR = "transient_error"
    PERMANENT_ERROR = "permanent_error"
    UNAUTHORIZED = "unauthorized"
    NOT_FOUND = "not_found"

    @property
    def is_retryable(self) -> bool:
        return self is OperationStatus.TRANSIENT_ERROR
