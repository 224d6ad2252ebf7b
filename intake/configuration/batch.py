"""Batch coordinator settings."""

from typing import TYPE_CHECKING

from pydantic import Field

from intake.configuration.base import PipelineSettings

if TYPE_CHECKING:
    from intake.batch.config import BatchConfig


class BatchSettings(PipelineSettings):
    """Batch processing configuration.

    Environment Variables:
        BATCH_MAX_ITEMS: Largest accepted batch (default: 50)
        BATCH_MAX_CONCURRENCY: Items processed concurrently per chunk (default: 5)
        BATCH_INTER_CHUNK_DELAY_SECONDS: Pause between chunks (default: 0.5s)
        BATCH_ANSWER_CHUNK_SIZE: Answers written per store call (default: 15)
    """

    max_items: int = Field(default=50, alias="BATCH_MAX_ITEMS")
    max_concurrency: int = Field(default=5, alias="BATCH_MAX_CONCURRENCY")
    inter_chunk_delay_seconds: float = Field(
        default=0.5, alias="BATCH_INTER_CHUNK_DELAY_SECONDS"
    )
    answer_chunk_size: int = Field(default=15, alias="BATCH_ANSWER_CHUNK_SIZE")

    def to_config(self) -> "BatchConfig":
        """Build the runtime BatchConfig from these settings."""
        from intake.batch.config import BatchConfig

        return BatchConfig(
            max_items=self.max_items,
            max_concurrency=self.max_concurrency,
            inter_chunk_delay_seconds=self.inter_chunk_delay_seconds,
        )
