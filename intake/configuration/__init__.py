"""Pipeline configuration - public API.

Configuration is managed with Pydantic BaseSettings, one settings class per
pipeline component, aggregated by Settings.

Exports:
    settings: Module-level Settings instance used by logging setup
    Settings: Main settings class (for testing/overrides)
    RetrySettings, IdempotencySettings, RateLimitSettings, BatchSettings
"""

from intake.configuration.batch import BatchSettings
from intake.configuration.idempotency import IdempotencySettings
from intake.configuration.rate_limiting import RateLimitSettings
from intake.configuration.retry import RetrySettings
from intake.configuration.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
    "RetrySettings",
    "IdempotencySettings",
    "RateLimitSettings",
    "BatchSettings",
]
