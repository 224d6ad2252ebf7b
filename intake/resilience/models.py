"""Retry orchestration models."""

from dataclasses import dataclass, field
from typing import Generic, List, Optional, TypeVar

T = TypeVar("T")


@dataclass
class RetryAttempt:
    """One invocation of an operation.

    Fields:
        attempt_number: 1-based attempt index
        started_at: Monotonic clock reading when the attempt started
        error: Exception raised by the attempt, None on success
        delay_seconds: Backoff slept after this attempt, if any
    """

    attempt_number: int
    started_at: float
    error: Optional[BaseException] = None
    delay_seconds: Optional[float] = None


@dataclass
class RetryOutcome(Generic[T]):
    """Successful result of an orchestrated operation.

    Fields:
        value: Result produced by the operation (or replayed from the cache)
        attempts: Invocations made; 0 when the result came from the cache
        elapsed_seconds: Wall time spent in execute
        from_cache: True when an idempotency cache hit short-circuited execution
        attempt_log: One RetryAttempt per invocation
    """

    value: T
    attempts: int
    elapsed_seconds: float
    from_cache: bool = False
    attempt_log: List[RetryAttempt] = field(default_factory=list)
