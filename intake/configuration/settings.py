"""Pipeline configuration settings - main aggregator."""

from pydantic_settings import BaseSettings, SettingsConfigDict

from intake.configuration.batch import BatchSettings
from intake.configuration.idempotency import IdempotencySettings
from intake.configuration.rate_limiting import RateLimitSettings
from intake.configuration.retry import RetrySettings


class Settings(BaseSettings):
    """Pipeline configuration settings - main aggregator.

    Aggregates the per-component settings into a single configuration object
    supplied by the request boundary at construction time.

    Environment Variables:
        PREFIX: Environment prefix for non-production deployments
        LOG_LEVEL: Logging level (DEBUG, INFO, WARNING, ERROR)

    Example:
        ```python
        from intake.providers import get_settings

        settings = get_settings()

        max_attempts = settings.retry.max_attempts
        batch_limit = settings.rate_limit.batch_max
        ttl = settings.idempotency.IDEMPOTENCY_TTL_SECONDS
        ```
    """

    PREFIX: str = ""
    LOG_LEVEL: str = "INFO"

    retry: RetrySettings
    idempotency: IdempotencySettings
    rate_limit: RateLimitSettings
    batch: BatchSettings

    @property
    def is_production(self) -> bool:
        """True if PREFIX is empty (production), False otherwise."""
        return not bool(self.PREFIX)

    def __init__(self, **kwargs):
        """Initialize Settings with automatic subsettings instantiation.

        Args:
            **kwargs: Optional overrides for specific settings sections.
        """
        settings_map = {
            "retry": RetrySettings,
            "idempotency": IdempotencySettings,
            "rate_limit": RateLimitSettings,
            "batch": BatchSettings,
        }

        for setting_name, setting_class in settings_map.items():
            if setting_name not in kwargs:
                kwargs[setting_name] = setting_class()

        super().__init__(**kwargs)

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        extra="ignore",
    )


settings = Settings()
