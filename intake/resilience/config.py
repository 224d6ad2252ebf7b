"""Retry orchestrator configuration.

Defines the runtime RetryConfig and the presets used for the different kinds
of submissions. Call sites pick a preset or build their own; nothing in the
orchestrator hard-codes these numbers.
"""

from dataclasses import dataclass, field, replace
from typing import Any, FrozenSet, Optional

from intake.operations.classifiers import DEFAULT_RETRYABLE_CODES


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retrying a single logical operation.

    Attributes:
        max_attempts: Total invocations allowed, first attempt included
        base_delay_seconds: Delay before the second attempt
        max_delay_seconds: Ceiling for the exponential delay
        multiplier: Growth factor applied per attempt
        retryable_codes: Status/machine codes treated as transient
        attempt_timeout_seconds: Optional timeout for each individual attempt

    Example:
        # Defaults: 3 attempts, 1s base, 30s ceiling, doubling
        config = RetryConfig()

        # Higher-value operation
        config = RetryConfig(max_attempts=5, max_delay_seconds=60)
    """

    max_attempts: int = 3
    base_delay_seconds: float = 1.0
    max_delay_seconds: float = 30.0
    multiplier: float = 2.0
    retryable_codes: FrozenSet[str] = field(default=DEFAULT_RETRYABLE_CODES)
    attempt_timeout_seconds: Optional[float] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        if self.base_delay_seconds < 0:
            raise ValueError("base_delay_seconds must be >= 0")
        if self.max_delay_seconds < self.base_delay_seconds:
            raise ValueError("max_delay_seconds must be >= base_delay_seconds")
        if self.multiplier < 1:
            raise ValueError("multiplier must be at least 1")
        if self.attempt_timeout_seconds is not None and self.attempt_timeout_seconds <= 0:
            raise ValueError("attempt_timeout_seconds must be positive")
        object.__setattr__(
            self, "retryable_codes", frozenset(str(c) for c in self.retryable_codes)
        )

    def with_overrides(self, **overrides: Any) -> "RetryConfig":
        """Return a copy with the given fields replaced."""
        return replace(self, **overrides)


# Final submissions carry the most valuable data: more attempts, longer ceiling.
SUBMISSION_RETRY_CONFIG = RetryConfig(
    max_attempts=5,
    base_delay_seconds=2.0,
    max_delay_seconds=60.0,
    retryable_codes=DEFAULT_RETRYABLE_CODES | {"RATE_LIMIT_EXCEEDED"},
)

# Drafts are saved again soon anyway; a 429 status is not retried. A message
# naming a rate limit still matches the transient phrase list.
DRAFT_RETRY_CONFIG = RetryConfig(
    max_attempts=3,
    base_delay_seconds=1.0,
    max_delay_seconds=15.0,
    retryable_codes=DEFAULT_RETRYABLE_CODES - {"429"},
)

# Items inside a batch share the request's time budget with their siblings.
BATCH_ITEM_RETRY_CONFIG = RetryConfig(
    max_attempts=2,
    base_delay_seconds=0.5,
    max_delay_seconds=30.0,
)
