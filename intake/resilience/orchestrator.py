"""Retry orchestrator.

Drives one logical operation through bounded retry attempts. Transient
failures are retried with exponential backoff; request defects surface
immediately. When an idempotency key is supplied, a previously cached result
is replayed without invoking the operation, and the first successful result
is recorded for later replays.

The orchestrator performs no I/O of its own. Its only suspension points are
the backoff sleep and whatever the caller-supplied operation awaits.
"""

import asyncio
import inspect
import random
import time
import uuid
from typing import Any, Awaitable, Callable, List, Optional, TypeVar, Union

from intake.errors import NonRetryableOperationError, RetriesExhaustedError
from intake.idempotency.cache import IdempotencyCache
from intake.idempotency.memory import InMemoryIdempotencyCache
from intake.logging import get_module_logger
from intake.operations.classifiers import extract_error_code, is_retryable
from intake.resilience.backoff import JitterSource, compute_delay
from intake.resilience.config import RetryConfig
from intake.resilience.models import RetryAttempt, RetryOutcome

logger = get_module_logger()

T = TypeVar("T")

Operation = Callable[[], Union[Awaitable[T], T]]
RetryCallback = Callable[[int, BaseException], None]
Sleeper = Callable[[float], Awaitable[Any]]


class RetryOrchestrator:
    """Execute operations with retries, backoff and idempotent replay.

    Attributes:
        cache: IdempotencyCache consulted and populated for keyed operations
        default_config: RetryConfig used when execute() gets none
        idempotency_ttl_seconds: TTL for recorded results (cache default if None)

    Example:
        orchestrator = RetryOrchestrator(cache=InMemoryIdempotencyCache())

        record_id = await orchestrator.execute(
            lambda: store.create(record),
            RetryConfig(max_attempts=5),
            idempotency_key=key,
        )
    """

    def __init__(
        self,
        cache: Optional[IdempotencyCache] = None,
        default_config: Optional[RetryConfig] = None,
        idempotency_ttl_seconds: Optional[float] = None,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
        jitter: JitterSource = random.uniform,
    ) -> None:
        self.cache = cache if cache is not None else InMemoryIdempotencyCache()
        self.default_config = default_config or RetryConfig()
        self.idempotency_ttl_seconds = idempotency_ttl_seconds
        self._sleep = sleep
        self._clock = clock
        self._jitter = jitter

    async def execute(
        self,
        operation: Operation,
        config: Optional[RetryConfig] = None,
        idempotency_key: Optional[str] = None,
        on_retry: Optional[RetryCallback] = None,
    ) -> Any:
        """Run ``operation`` with retries and return its result.

        Args:
            operation: Zero-argument callable returning an awaitable (or a value)
            config: RetryConfig for this call; default_config if None
            idempotency_key: Key identifying the logical operation, if any
            on_retry: Called with (attempt, error) before each backoff sleep

        Returns:
            The operation's result, or the cached result for the key

        Raises:
            NonRetryableOperationError: An attempt failed with a request defect
            RetriesExhaustedError: Every attempt failed with a transient error
        """
        outcome = await self.execute_with_outcome(
            operation, config, idempotency_key, on_retry
        )
        return outcome.value

    async def execute_with_outcome(
        self,
        operation: Operation,
        config: Optional[RetryConfig] = None,
        idempotency_key: Optional[str] = None,
        on_retry: Optional[RetryCallback] = None,
    ) -> RetryOutcome:
        """Same as execute(), returning the result with attempt metadata."""
        config = config or self.default_config
        started = self._clock()
        request_id = idempotency_key or f"req_{uuid.uuid4().hex[:12]}"
        log = logger.bind(request_id=request_id)

        if idempotency_key is not None:
            entry = self.cache.get(idempotency_key)
            if entry is not None:
                log.info(
                    "idempotent_result_replayed",
                    cache_age_seconds=round(time.time() - entry.created_at, 3),
                )
                return RetryOutcome(
                    value=entry.result,
                    attempts=0,
                    elapsed_seconds=self._clock() - started,
                    from_cache=True,
                )

        attempt_log: List[RetryAttempt] = []

        for attempt_number in range(1, config.max_attempts + 1):
            attempt = RetryAttempt(attempt_number=attempt_number, started_at=self._clock())
            attempt_log.append(attempt)

            log.debug(
                "operation_attempt_started",
                attempt=attempt_number,
                max_attempts=config.max_attempts,
            )

            try:
                value = await self._invoke(operation, config)
            except Exception as error:
                attempt.error = error
                retryable = is_retryable(error, config.retryable_codes)
                is_last_attempt = attempt_number >= config.max_attempts

                log.warning(
                    "operation_attempt_failed",
                    attempt=attempt_number,
                    max_attempts=config.max_attempts,
                    error=str(error) or type(error).__name__,
                    error_code=extract_error_code(error),
                    retryable=retryable,
                    last_attempt=is_last_attempt,
                )

                if not retryable or is_last_attempt:
                    elapsed = self._clock() - started
                    log.error(
                        "operation_failed_permanently",
                        attempts=attempt_number,
                        elapsed_seconds=round(elapsed, 3),
                        retryable=retryable,
                        error=str(error) or type(error).__name__,
                    )
                    error_class = (
                        RetriesExhaustedError if retryable else NonRetryableOperationError
                    )
                    raise error_class(
                        f"Operation failed after {attempt_number} attempt(s): {error}",
                        cause=error,
                        attempts=attempt_number,
                        elapsed_seconds=elapsed,
                        request_id=request_id,
                        attempt_log=attempt_log,
                    ) from error

                delay = compute_delay(attempt_number, config, self._jitter)
                attempt.delay_seconds = delay
                log.info(
                    "operation_retry_scheduled",
                    attempt=attempt_number,
                    next_attempt=attempt_number + 1,
                    delay_seconds=round(delay, 3),
                )
                if on_retry is not None:
                    on_retry(attempt_number, error)
                await self._sleep(delay)
                continue

            if idempotency_key is not None:
                stored = self.cache.put(
                    idempotency_key, value, self.idempotency_ttl_seconds
                )
                if not stored:
                    # A concurrent completion of the same logical operation won.
                    log.debug("idempotent_result_already_recorded")

            elapsed = self._clock() - started
            if attempt_number > 1:
                log.info(
                    "operation_succeeded_after_retries",
                    attempts=attempt_number,
                    elapsed_seconds=round(elapsed, 3),
                )
            return RetryOutcome(
                value=value,
                attempts=attempt_number,
                elapsed_seconds=elapsed,
                attempt_log=attempt_log,
            )

        raise AssertionError("unreachable: loop always returns or raises")

    async def _invoke(self, operation: Operation, config: RetryConfig) -> Any:
        result = operation()
        if not inspect.isawaitable(result):
            return result
        if config.attempt_timeout_seconds is None:
            return await result
        return await asyncio.wait_for(result, timeout=config.attempt_timeout_seconds)
