"""Rate limiting settings."""

from pydantic import Field

from intake.configuration.base import PipelineSettings


class RateLimitSettings(PipelineSettings):
    """Per-caller admission limits, one fixed window per scope.

    Environment Variables:
        RATE_LIMIT_SUBMISSION_MAX: Final submissions per window (default: 50)
        RATE_LIMIT_SUBMISSION_WINDOW_SECONDS: Window length (default: 900s = 15min)
        RATE_LIMIT_DRAFT_MAX: Draft saves per window (default: 100)
        RATE_LIMIT_DRAFT_WINDOW_SECONDS: Window length (default: 300s = 5min)
        RATE_LIMIT_BATCH_MAX: Batch requests per window (default: 5)
        RATE_LIMIT_BATCH_WINDOW_SECONDS: Window length (default: 1800s = 30min)
        RATE_LIMIT_SWEEP_INTERVAL_SECONDS: Minimum time between sweeps of
            elapsed windows (default: 60s)
    """

    submission_max: int = Field(default=50, alias="RATE_LIMIT_SUBMISSION_MAX")
    submission_window_seconds: float = Field(
        default=900, alias="RATE_LIMIT_SUBMISSION_WINDOW_SECONDS"
    )
    draft_max: int = Field(default=100, alias="RATE_LIMIT_DRAFT_MAX")
    draft_window_seconds: float = Field(
        default=300, alias="RATE_LIMIT_DRAFT_WINDOW_SECONDS"
    )
    batch_max: int = Field(default=5, alias="RATE_LIMIT_BATCH_MAX")
    batch_window_seconds: float = Field(
        default=1800, alias="RATE_LIMIT_BATCH_WINDOW_SECONDS"
    )
    sweep_interval_seconds: float = Field(
        default=60, alias="RATE_LIMIT_SWEEP_INTERVAL_SECONDS"
    )
