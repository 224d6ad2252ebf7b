"""Batch result models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class BatchStatus(Enum):
    """Overall outcome of a batch.

    Values:
        SUCCESS: Every item succeeded
        PARTIAL: Some items succeeded and some failed
        FAILURE: No item succeeded
    """

    SUCCESS = "success"
    PARTIAL = "partial"
    FAILURE = "failure"


@dataclass
class BatchItemResult:
    """Outcome of one batch item.

    Fields:
        index: Position of the item in the input list
        client_id: Client-supplied identifier of the item, if it carried one
        success: True if the item's operation completed
        value: Result of the operation (success only)
        error: Human-friendly error message (failure only)
        error_code: Machine error code (failure only)
        attempts: Invocations of the item's operation; 0 for a cache replay
        retryable: True if resubmitting the item later may succeed
        idempotency_key: Key the item ran under, for targeted client retries
    """

    index: int
    client_id: Optional[str] = None
    success: bool = False
    value: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    attempts: int = 0
    retryable: bool = False
    idempotency_key: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "index": self.index,
            "client_id": self.client_id,
            "success": self.success,
            "attempts": self.attempts,
        }
        if self.success:
            data["value"] = self.value
        else:
            data["error"] = self.error
            data["error_code"] = self.error_code
            data["retryable"] = self.retryable
        return data


@dataclass
class BatchReport:
    """Aggregated outcome of a batch.

    Fields:
        total: Number of input items
        succeeded: Items that succeeded
        failed: Items that failed
        results: One BatchItemResult per input item, in input order
        status: SUCCESS, PARTIAL or FAILURE
        elapsed_seconds: Wall time spent processing the batch
        batch_id: Client-supplied batch identifier, if any
    """

    total: int
    succeeded: int
    failed: int
    results: List[BatchItemResult]
    status: BatchStatus
    elapsed_seconds: float = 0.0
    batch_id: Optional[str] = None

    @classmethod
    def from_results(
        cls,
        results: List[BatchItemResult],
        elapsed_seconds: float = 0.0,
        batch_id: Optional[str] = None,
    ) -> "BatchReport":
        succeeded = sum(1 for r in results if r.success)
        failed = len(results) - succeeded
        if failed == 0:
            status = BatchStatus.SUCCESS
        elif succeeded == 0:
            status = BatchStatus.FAILURE
        else:
            status = BatchStatus.PARTIAL
        return cls(
            total=len(results),
            succeeded=succeeded,
            failed=failed,
            results=results,
            status=status,
            elapsed_seconds=elapsed_seconds,
            batch_id=batch_id,
        )

    @property
    def success_rate(self) -> float:
        return self.succeeded / self.total if self.total else 0.0

    @property
    def failed_results(self) -> List[BatchItemResult]:
        return [r for r in self.results if not r.success]

    @property
    def failed_client_ids(self) -> List[str]:
        """Client IDs of failed items, for a client-side retry of that subset."""
        return [r.client_id for r in self.failed_results if r.client_id is not None]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "batch_id": self.batch_id,
            "status": self.status.value,
            "total": self.total,
            "succeeded": self.succeeded,
            "failed": self.failed,
            "success_rate": round(self.success_rate, 4),
            "elapsed_seconds": round(self.elapsed_seconds, 3),
            "results": [r.to_dict() for r in self.results],
        }
