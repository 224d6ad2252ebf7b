"""Batch coordinator.

Processes a bounded list of independent items with controlled concurrency.
Items are split into chunks of ``max_concurrency``; the items of a chunk run
concurrently through the retry orchestrator, and every item settles before
the next chunk starts. One item's failure never cancels or blocks its
siblings: it is captured in that item's result and the batch continues.
"""

import asyncio
import time
from typing import Any, Awaitable, Callable, List, Optional, Sequence, TypeVar

from intake.batch.config import BatchConfig
from intake.batch.models import BatchItemResult, BatchReport
from intake.errors import BatchBoundsError, OrchestrationError
from intake.logging import get_module_logger
from intake.operations.classifiers import classify_error
from intake.resilience.orchestrator import Operation, RetryOrchestrator, Sleeper

logger = get_module_logger()

ItemT = TypeVar("ItemT")

OperationFactory = Callable[[ItemT], Operation]
KeyFunction = Callable[[ItemT], Optional[str]]


def chunked(items: Sequence[ItemT], size: int) -> List[List[ItemT]]:
    """Split items into consecutive chunks of at most ``size`` items."""
    return [list(items[i : i + size]) for i in range(0, len(items), size)]


class BatchCoordinator:
    """Drive a batch of items through the retry orchestrator.

    Attributes:
        orchestrator: RetryOrchestrator used for every item
        default_config: BatchConfig used when process_batch() gets none

    Example:
        coordinator = BatchCoordinator(orchestrator)

        report = await coordinator.process_batch(
            submissions,
            lambda submission: (lambda: store.create(submission.record())),
            key_for=lambda submission: submission.client_id,
        )
        if report.status is BatchStatus.PARTIAL:
            retry_later(report.failed_client_ids)
    """

    def __init__(
        self,
        orchestrator: RetryOrchestrator,
        default_config: Optional[BatchConfig] = None,
        sleep: Sleeper = asyncio.sleep,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.orchestrator = orchestrator
        self.default_config = default_config or BatchConfig()
        self._sleep = sleep
        self._clock = clock

    def validate_bounds(self, items: Sequence[Any], config: BatchConfig) -> None:
        """Reject an empty or oversized batch.

        Raises:
            BatchBoundsError: If the batch is empty or exceeds config.max_items
        """
        if len(items) == 0 or len(items) > config.max_items:
            logger.warning(
                "batch_rejected",
                item_count=len(items),
                max_items=config.max_items,
            )
            raise BatchBoundsError(size=len(items), max_items=config.max_items)

    async def process_batch(
        self,
        items: Sequence[ItemT],
        operation_factory: OperationFactory,
        config: Optional[BatchConfig] = None,
        key_for: Optional[KeyFunction] = None,
        batch_id: Optional[str] = None,
    ) -> BatchReport:
        """Process every item and report per-item outcomes.

        Args:
            items: Independent items to process, in order
            operation_factory: Builds the operation for one item
            config: BatchConfig for this call; default_config if None
            key_for: Derives the item's idempotency key from its stable fields
            batch_id: Client-supplied batch identifier, echoed in the report

        Returns:
            BatchReport with exactly one result per item, in input order

        Raises:
            BatchBoundsError: If the batch is empty or too large. Nothing is
                attempted in that case.
        """
        config = config or self.default_config
        self.validate_bounds(items, config)

        started = self._clock()
        chunks = chunked(items, config.max_concurrency)
        log = logger.bind(batch_id=batch_id)
        log.info(
            "batch_started",
            item_count=len(items),
            chunk_count=len(chunks),
            max_concurrency=config.max_concurrency,
        )

        results: List[BatchItemResult] = []
        for chunk_index, chunk in enumerate(chunks):
            offset = chunk_index * config.max_concurrency
            chunk_results = await asyncio.gather(
                *(
                    self._process_item(
                        offset + position, item, operation_factory, config, key_for
                    )
                    for position, item in enumerate(chunk)
                )
            )
            results.extend(chunk_results)

            log.debug(
                "batch_chunk_completed",
                chunk=chunk_index + 1,
                chunk_count=len(chunks),
                succeeded=sum(1 for r in chunk_results if r.success),
                failed=sum(1 for r in chunk_results if not r.success),
            )

            if chunk_index < len(chunks) - 1 and config.inter_chunk_delay_seconds > 0:
                await self._sleep(config.inter_chunk_delay_seconds)

        report = BatchReport.from_results(
            results, elapsed_seconds=self._clock() - started, batch_id=batch_id
        )
        log.info(
            "batch_completed",
            total=report.total,
            succeeded=report.succeeded,
            failed=report.failed,
            status=report.status.value,
            elapsed_seconds=round(report.elapsed_seconds, 3),
        )
        return report

    async def _process_item(
        self,
        index: int,
        item: ItemT,
        operation_factory: OperationFactory,
        config: BatchConfig,
        key_for: Optional[KeyFunction],
    ) -> BatchItemResult:
        client_id = getattr(item, "client_id", None)
        result = BatchItemResult(index=index, client_id=client_id)

        try:
            key = key_for(item) if key_for is not None else None
            result.idempotency_key = key
            operation = operation_factory(item)
            outcome = await self.orchestrator.execute_with_outcome(
                operation, config.retry, key
            )
        except OrchestrationError as error:
            classification = classify_error(error)
            result.error = str(error.cause) or type(error.cause).__name__
            result.error_code = classification.error_code
            result.attempts = error.attempts
            result.retryable = error.retryable
        except Exception as error:
            # Failure while building the item's key or operation.
            classification = classify_error(error)
            result.error = str(error) or type(error).__name__
            result.error_code = classification.error_code
            result.retryable = classification.is_retryable
        else:
            result.success = True
            result.value = outcome.value
            result.attempts = outcome.attempts
            return result

        logger.error(
            "batch_item_failed",
            index=index,
            client_id=client_id,
            error=result.error,
            error_code=result.error_code,
            attempts=result.attempts,
        )
        return result
