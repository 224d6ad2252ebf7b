"""Exceptions raised by the submission pipeline.

Request defects (ValidationError, AuthorizationError, NotFoundError) are never
retried. TransientError marks conditions that may succeed on a later attempt.
The orchestrator only ever surfaces OrchestrationError subclasses to its
callers; the batch coordinator never raises per-item errors at all.
"""

from typing import TYPE_CHECKING, Any, Dict, List, Optional

if TYPE_CHECKING:
    from intake.rate_limiting.models import RateLimitDecision
    from intake.resilience.models import RetryAttempt


class PipelineError(Exception):
    """Base exception for all pipeline errors.

    Example:
        try:
            await pipeline.submit(submission, caller_id="volunteer-1")
        except PipelineError as e:
            logger.error("submission_failed", error=str(e))
    """

    pass


class ValidationError(PipelineError):
    """Raised when a submission is malformed or fails validation.

    Attributes:
        message: human-friendly message
        errors: field name -> list of validation messages
    """

    def __init__(self, message: str, errors: Optional[Dict[str, List[str]]] = None):
        super().__init__(message)
        self.errors = errors or {}


class AuthorizationError(PipelineError):
    """Raised when the caller may not perform the operation."""

    pass


class NotFoundError(PipelineError):
    """Raised when the target resource does not exist."""

    pass


class TransientError(PipelineError):
    """Raised for failures that may succeed on retry.

    Attributes:
        code: optional status or machine code (e.g. 503, "NETWORK_ERROR")
        category: optional category name ("network", "timeout", ...)
    """

    def __init__(
        self,
        message: str,
        code: Optional[Any] = None,
        category: Optional[str] = None,
    ):
        super().__init__(message)
        self.code = code
        self.category = category


class OrchestrationError(PipelineError):
    """Raised by the retry orchestrator when an operation cannot complete.

    Carries enough context for the caller to log or surface the failure
    without re-deriving it.

    Attributes:
        cause: the last exception raised by the operation
        attempts: number of times the operation was invoked
        elapsed_seconds: wall time spent across all attempts
        request_id: identifier used in the orchestrator's log events
        attempt_log: one RetryAttempt per invocation
    """

    def __init__(
        self,
        message: str,
        cause: BaseException,
        attempts: int,
        elapsed_seconds: float,
        request_id: Optional[str] = None,
        attempt_log: Optional[List["RetryAttempt"]] = None,
    ):
        super().__init__(message)
        self.cause = cause
        self.attempts = attempts
        self.elapsed_seconds = elapsed_seconds
        self.request_id = request_id
        self.attempt_log = attempt_log or []

    @property
    def retryable(self) -> bool:
        return False


class RetriesExhaustedError(OrchestrationError):
    """Raised when every allowed attempt failed with a retryable error."""

    @property
    def retryable(self) -> bool:
        return True


class NonRetryableOperationError(OrchestrationError):
    """Raised immediately when an attempt fails with a non-retryable error."""

    pass


class BatchBoundsError(PipelineError):
    """Raised when a batch is empty or larger than the configured maximum."""

    def __init__(self, size: int, max_items: int):
        if size == 0:
            message = "Empty batch: no submissions provided"
        else:
            message = f"Batch too large: {size} items (maximum {max_items})"
        super().__init__(message)
        self.size = size
        self.max_items = max_items


class RateLimitExceededError(PipelineError):
    """Raised when a caller exceeds its request quota."""

    def __init__(self, decision: "RateLimitDecision", scope: str = "submission"):
        super().__init__(
            f"Rate limit exceeded for {scope}; retry after {decision.retry_after}s"
        )
        self.decision = decision
        self.scope = scope
