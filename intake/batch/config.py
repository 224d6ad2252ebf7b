"""Batch coordinator configuration."""

from dataclasses import dataclass
from typing import Optional

from intake.resilience.config import RetryConfig


@dataclass(frozen=True)
class BatchConfig:
    """Parameters of one batch invocation.

    Attributes:
        max_items: Largest accepted batch; larger batches are rejected up front
        max_concurrency: Items driven concurrently within one chunk
        inter_chunk_delay_seconds: Pause between consecutive chunks
        retry: RetryConfig applied to every item (orchestrator default if None)

    Example:
        config = BatchConfig(max_concurrency=10, inter_chunk_delay_seconds=0)
    """

    max_items: int = 50
    max_concurrency: int = 5
    inter_chunk_delay_seconds: float = 0.5
    retry: Optional[RetryConfig] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if self.max_items < 1:
            raise ValueError("max_items must be at least 1")
        if self.max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        if self.inter_chunk_delay_seconds < 0:
            raise ValueError("inter_chunk_delay_seconds must be >= 0")
