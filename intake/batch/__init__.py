"""Concurrency-bounded batch processing with per-item result isolation."""

from intake.batch.config import BatchConfig
from intake.batch.coordinator import BatchCoordinator, chunked
from intake.batch.models import BatchItemResult, BatchReport, BatchStatus

__all__ = [
    "BatchConfig",
    "BatchCoordinator",
    "BatchItemResult",
    "BatchReport",
    "BatchStatus",
    "chunked",
]
