"""Retry orchestration with exponential backoff.

Usage:
    from intake.resilience import RetryConfig, RetryOrchestrator

    orchestrator = RetryOrchestrator()
    result = await orchestrator.execute(call_store, RetryConfig(max_attempts=5))
"""

from intake.resilience.backoff import compute_delay
from intake.resilience.config import (
    BATCH_ITEM_RETRY_CONFIG,
    DRAFT_RETRY_CONFIG,
    SUBMISSION_RETRY_CONFIG,
    RetryConfig,
)
from intake.resilience.models import RetryAttempt, RetryOutcome
from intake.resilience.orchestrator import RetryOrchestrator

__all__ = [
    "BATCH_ITEM_RETRY_CONFIG",
    "DRAFT_RETRY_CONFIG",
    "SUBMISSION_RETRY_CONFIG",
    "RetryAttempt",
    "RetryConfig",
    "RetryOrchestrator",
    "RetryOutcome",
    "compute_delay",
]
