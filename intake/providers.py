"""
Factory functions for process-scoped pipeline state.

The idempotency cache and rate limiters must be shared by every request in
the process, so they are created once here and injected into each
SubmissionPipeline. Tests build their own instances instead.
"""

from functools import lru_cache
from typing import Dict, Optional

from intake.configuration import Settings
from intake.idempotency.memory import InMemoryIdempotencyCache
from intake.pipeline import (
    SubmissionPipeline,
    build_idempotency_cache,
    build_rate_limiters,
)
from intake.rate_limiting.limiter import RateLimiter
from intake.submissions.protocols import SubmissionStore, SubmissionValidator


@lru_cache
def get_settings() -> Settings:
    """
    Get process-scoped settings singleton.

    Returns:
        Settings: Cached settings instance loaded from environment.
    """
    return Settings()


@lru_cache
def get_idempotency_cache() -> InMemoryIdempotencyCache:
    """Get the process-wide idempotency cache."""
    return build_idempotency_cache(get_settings())


@lru_cache
def get_rate_limiters() -> Dict[str, RateLimiter]:
    """Get the process-wide rate limiters, keyed by scope."""
    return build_rate_limiters(get_settings())


def get_pipeline(
    store: SubmissionStore, validator: Optional[SubmissionValidator] = None
) -> SubmissionPipeline:
    """Build a pipeline around the given collaborators and the shared state.

    Usage:
        pipeline = get_pipeline(store=request_store, validator=validator)
        receipt = await pipeline.submit(submission, caller_id=user_id)
    """
    return SubmissionPipeline(
        get_settings(),
        store=store,
        validator=validator,
        cache=get_idempotency_cache(),
        rate_limiters=get_rate_limiters(),
    )


def reset_providers() -> None:
    """Drop cached singletons (for testing only)."""
    get_settings.cache_clear()
    get_idempotency_cache.cache_clear()
    get_rate_limiters.cache_clear()
