"""Retry orchestrator settings."""

from typing import TYPE_CHECKING, Optional

from pydantic import Field

from intake.configuration.base import PipelineSettings

if TYPE_CHECKING:
    from intake.resilience.config import RetryConfig


class RetrySettings(PipelineSettings):
    """Default retry behaviour for single operations.

    Environment Variables:
        RETRY_MAX_ATTEMPTS: Attempts per operation, first try included (default: 3)
        RETRY_BASE_DELAY_SECONDS: Delay before the second attempt (default: 1.0)
        RETRY_MAX_DELAY_SECONDS: Ceiling for the exponential delay (default: 30.0)
        RETRY_BACKOFF_MULTIPLIER: Growth factor between attempts (default: 2.0)
        RETRY_ATTEMPT_TIMEOUT_SECONDS: Optional timeout for a single attempt

    Exponential Backoff:
        Delay calculation: min(base * multiplier ^ (attempt - 1), max) +/- 25% jitter

        Example with defaults (base=1s, multiplier=2, max=30s):
            After attempt 1: ~1s
            After attempt 2: ~2s
            After attempt 3: ~4s
    """

    max_attempts: int = Field(default=3, alias="RETRY_MAX_ATTEMPTS")
    base_delay_seconds: float = Field(default=1.0, alias="RETRY_BASE_DELAY_SECONDS")
    max_delay_seconds: float = Field(default=30.0, alias="RETRY_MAX_DELAY_SECONDS")
    backoff_multiplier: float = Field(default=2.0, alias="RETRY_BACKOFF_MULTIPLIER")
    attempt_timeout_seconds: Optional[float] = Field(
        default=None,
        alias="RETRY_ATTEMPT_TIMEOUT_SECONDS",
        description="Timeout applied to each individual attempt (None disables)",
    )

    def to_config(self) -> "RetryConfig":
        """Build the runtime RetryConfig from these settings."""
        from intake.resilience.config import RetryConfig

        return RetryConfig(
            max_attempts=self.max_attempts,
            base_delay_seconds=self.base_delay_seconds,
            max_delay_seconds=self.max_delay_seconds,
            multiplier=self.backoff_multiplier,
            attempt_timeout_seconds=self.attempt_timeout_seconds,
        )

    def apply_to(self, config: "RetryConfig") -> "RetryConfig":
        """Overlay explicitly configured values onto a preset.

        Only fields set through the environment (or passed to the
        constructor) replace the preset's values; defaults leave it unchanged.

        Example:
            # RETRY_ATTEMPT_TIMEOUT_SECONDS=10 applies to every preset
            config = settings.retry.apply_to(SUBMISSION_RETRY_CONFIG)
        """
        overrides = {
            config_field: getattr(self, name)
            for name, config_field in _CONFIG_FIELDS.items()
            if name in self.model_fields_set
        }
        if not overrides:
            return config
        return config.with_overrides(**overrides)


# RetrySettings field -> RetryConfig field
_CONFIG_FIELDS = {
    "max_attempts": "max_attempts",
    "base_delay_seconds": "base_delay_seconds",
    "max_delay_seconds": "max_delay_seconds",
    "backoff_multiplier": "multiplier",
    "attempt_timeout_seconds": "attempt_timeout_seconds",
}
