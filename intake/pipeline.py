"""Submission pipeline facade.

Wires the rate limiters, idempotency cache, retry orchestrator and batch
coordinator around a persistence collaborator, and exposes the call surfaces
used by the request boundary:

- check_and_consume(): admission control, once per inbound request
- execute(): one operation with retries and idempotent replay
- process_batch(): many independent operations with per-item results
- submit() / submit_batch(): the three above applied to Submission payloads

All shared state (cache, limiters) is owned by the pipeline instance and
injected through the constructor; nothing lives in module globals.
"""

import asyncio
from typing import Any, Dict, Optional, Sequence

from intake.batch.config import BatchConfig
from intake.batch.coordinator import BatchCoordinator, KeyFunction, OperationFactory
from intake.batch.models import BatchReport
from intake.configuration import Settings
from intake.errors import RateLimitExceededError
from intake.idempotency.cache import IdempotencyCache
from intake.idempotency.memory import InMemoryIdempotencyCache
from intake.logging import bind_request_context
from intake.rate_limiting.limiter import FixedWindowRateLimiter, RateLimiter
from intake.rate_limiting.models import RateLimitDecision
from intake.resilience.config import (
    BATCH_ITEM_RETRY_CONFIG,
    DRAFT_RETRY_CONFIG,
    SUBMISSION_RETRY_CONFIG,
    RetryConfig,
)
from intake.resilience.orchestrator import Operation, RetryOrchestrator, Sleeper
from intake.submissions.keys import SubmissionKeyPolicy
from intake.submissions.models import Submission, SubmissionReceipt
from intake.submissions.operations import SubmissionOperationFactory
from intake.submissions.protocols import SubmissionStore, SubmissionValidator

SUBMISSION_SCOPE = "submission"
DRAFT_SCOPE = "draft"
BATCH_SCOPE = "batch"


def build_rate_limiters(settings: Settings) -> Dict[str, RateLimiter]:
    """Create one fixed-window limiter per scope from settings."""
    limits = settings.rate_limit
    return {
        SUBMISSION_SCOPE: FixedWindowRateLimiter(
            limit=limits.submission_max,
            window_seconds=limits.submission_window_seconds,
            name=SUBMISSION_SCOPE,
            sweep_interval_seconds=limits.sweep_interval_seconds,
        ),
        DRAFT_SCOPE: FixedWindowRateLimiter(
            limit=limits.draft_max,
            window_seconds=limits.draft_window_seconds,
            name=DRAFT_SCOPE,
            sweep_interval_seconds=limits.sweep_interval_seconds,
        ),
        BATCH_SCOPE: FixedWindowRateLimiter(
            limit=limits.batch_max,
            window_seconds=limits.batch_window_seconds,
            name=BATCH_SCOPE,
            sweep_interval_seconds=limits.sweep_interval_seconds,
        ),
    }


def build_idempotency_cache(settings: Settings) -> InMemoryIdempotencyCache:
    """Create the idempotency cache from settings."""
    return InMemoryIdempotencyCache(
        default_ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS,
        sweep_interval_seconds=settings.idempotency.IDEMPOTENCY_SWEEP_INTERVAL_SECONDS,
    )


class SubmissionPipeline:
    """Resilient, idempotent submission pipeline.

    Attributes:
        settings: Settings the pipeline was built from
        cache: IdempotencyCache shared by every operation of this pipeline
        rate_limiters: Scope name -> RateLimiter
        orchestrator: RetryOrchestrator for single operations
        coordinator: BatchCoordinator for lists of operations
        operations: SubmissionOperationFactory bound to the store
        key_policy: SubmissionKeyPolicy deriving per-submission keys

    Example:
        pipeline = SubmissionPipeline(settings, store=supabase_store)

        try:
            receipt = await pipeline.submit(
                submission, caller_id=user_id, rate_limit_key=client_ip
            )
        except RateLimitExceededError as e:
            return 429, {"retry_after": e.decision.retry_after}
        except OrchestrationError as e:
            return 502, {"error": str(e.cause), "attempts": e.attempts}
    """

    def __init__(
        self,
        settings: Settings,
        store: SubmissionStore,
        validator: Optional[SubmissionValidator] = None,
        cache: Optional[IdempotencyCache] = None,
        rate_limiters: Optional[Dict[str, RateLimiter]] = None,
        key_policy: Optional[SubmissionKeyPolicy] = None,
        submission_retry: Optional[RetryConfig] = None,
        draft_retry: Optional[RetryConfig] = None,
        batch_item_retry: Optional[RetryConfig] = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self.settings = settings
        self.cache = cache if cache is not None else build_idempotency_cache(settings)
        self.rate_limiters = (
            rate_limiters if rate_limiters is not None else build_rate_limiters(settings)
        )
        self.orchestrator = RetryOrchestrator(
            cache=self.cache,
            default_config=settings.retry.to_config(),
            idempotency_ttl_seconds=settings.idempotency.IDEMPOTENCY_TTL_SECONDS,
            sleep=sleep,
        )
        self.coordinator = BatchCoordinator(
            self.orchestrator,
            default_config=settings.batch.to_config(),
            sleep=sleep,
        )
        self.operations = SubmissionOperationFactory(
            store,
            validator=validator,
            answer_chunk_size=settings.batch.answer_chunk_size,
        )
        self.key_policy = key_policy or SubmissionKeyPolicy()
        # Presets with the configured RETRY_* values laid over them
        self.submission_retry = submission_retry or settings.retry.apply_to(
            SUBMISSION_RETRY_CONFIG
        )
        self.draft_retry = draft_retry or settings.retry.apply_to(DRAFT_RETRY_CONFIG)
        self.batch_item_retry = batch_item_retry or settings.retry.apply_to(
            BATCH_ITEM_RETRY_CONFIG
        )

    def check_and_consume(
        self, caller_key: str, scope: str = SUBMISSION_SCOPE
    ) -> RateLimitDecision:
        """Count one inbound request for the caller in the given scope.

        Raises:
            ValueError: If no limiter is configured for the scope
        """
        limiter = self.rate_limiters.get(scope)
        if limiter is None:
            raise ValueError(f"No rate limiter configured for scope '{scope}'")
        return limiter.check_and_consume(caller_key)

    async def execute(
        self,
        operation: Operation,
        config: Optional[RetryConfig] = None,
        idempotency_key: Optional[str] = None,
    ) -> Any:
        """Run one operation through the retry orchestrator."""
        return await self.orchestrator.execute(operation, config, idempotency_key)

    async def process_batch(
        self,
        items: Sequence[Any],
        operation_factory: OperationFactory,
        config: Optional[BatchConfig] = None,
        key_for: Optional[KeyFunction] = None,
        batch_id: Optional[str] = None,
    ) -> BatchReport:
        """Run a batch of operations through the batch coordinator."""
        return await self.coordinator.process_batch(
            items, operation_factory, config, key_for=key_for, batch_id=batch_id
        )

    def retry_config_for(self, submission: Submission) -> RetryConfig:
        return self.draft_retry if submission.is_draft else self.submission_retry

    def idempotency_key_for(self, submission: Submission, caller_id: str) -> str:
        return self.key_policy.key_for(submission, caller_id)

    async def submit(
        self,
        submission: Submission,
        caller_id: str,
        rate_limit_key: Optional[str] = None,
    ) -> SubmissionReceipt:
        """Admit, persist and deduplicate one submission.

        Args:
            submission: Parsed and sanitized submission
            caller_id: Identity of the authenticated caller
            rate_limit_key: Admission key (e.g. network origin); caller_id if None

        Raises:
            RateLimitExceededError: If the caller is over quota
            OrchestrationError: If the submission could not be persisted
        """
        scope = DRAFT_SCOPE if submission.is_draft else SUBMISSION_SCOPE
        caller_key = rate_limit_key or caller_id
        decision = self.check_and_consume(caller_key, scope)
        if not decision.allowed:
            raise RateLimitExceededError(decision, scope=scope)

        key = self.idempotency_key_for(submission, caller_id)
        with bind_request_context(caller_key=caller_key, client_id=submission.client_id):
            return await self.orchestrator.execute(
                self.operations.for_submission(submission, caller_id),
                self.retry_config_for(submission),
                idempotency_key=key,
            )

    async def submit_batch(
        self,
        submissions: Sequence[Submission],
        caller_id: str,
        rate_limit_key: Optional[str] = None,
        batch_id: Optional[str] = None,
        config: Optional[BatchConfig] = None,
    ) -> BatchReport:
        """Admit a batch request and persist every submission in it.

        Raises:
            RateLimitExceededError: If the caller is over its batch quota
            BatchBoundsError: If the batch is empty or too large
        """
        caller_key = rate_limit_key or caller_id
        decision = self.check_and_consume(caller_key, BATCH_SCOPE)
        if not decision.allowed:
            raise RateLimitExceededError(decision, scope=BATCH_SCOPE)

        if config is None:
            batch = self.settings.batch
            config = BatchConfig(
                max_items=batch.max_items,
                max_concurrency=batch.max_concurrency,
                inter_chunk_delay_seconds=batch.inter_chunk_delay_seconds,
                retry=self.batch_item_retry,
            )

        with bind_request_context(caller_key=caller_key, batch_id=batch_id):
            return await self.coordinator.process_batch(
                submissions,
                lambda submission: self.operations.for_submission(submission, caller_id),
                config,
                key_for=lambda submission: self.idempotency_key_for(submission, caller_id),
                batch_id=batch_id,
            )

    def sweep(self) -> Dict[str, int]:
        """Drop expired cache entries and elapsed rate-limit windows."""
        removed = {"idempotency": self.cache.sweep()}
        for scope, limiter in self.rate_limiters.items():
            removed[f"rate_limit.{scope}"] = limiter.sweep()
        return removed

    def get_stats(self) -> Dict[str, Any]:
        return {
            "idempotency": self.cache.get_stats(),
            "rate_limits": {
                scope: limiter.get_stats()
                for scope, limiter in self.rate_limiters.items()
            },
        }
