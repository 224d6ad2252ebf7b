"""Idempotency cache settings."""

from pydantic import Field

from intake.configuration.base import PipelineSettings


class IdempotencySettings(PipelineSettings):
    """Idempotency cache configuration for suppressing duplicate operations.

    Environment Variables:
        IDEMPOTENCY_TTL_SECONDS: Lifetime of a cached result (default: 600s = 10min)
        IDEMPOTENCY_SWEEP_INTERVAL_SECONDS: Minimum time between sweeps of
            expired entries (default: 60s)
    """

    IDEMPOTENCY_TTL_SECONDS: float = Field(default=600, alias="IDEMPOTENCY_TTL_SECONDS")
    IDEMPOTENCY_SWEEP_INTERVAL_SECONDS: float = Field(
        default=60, alias="IDEMPOTENCY_SWEEP_INTERVAL_SECONDS"
    )
