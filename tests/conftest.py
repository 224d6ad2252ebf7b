"""Shared fixtures for pipeline tests."""

import pytest
import structlog

from intake.configuration import Settings
from intake.idempotency.memory import InMemoryIdempotencyCache
from intake.resilience.config import RetryConfig
from intake.resilience.orchestrator import RetryOrchestrator
from tests.factories.submissions import (
    FakeClock,
    FakeSubmissionStore,
    FakeValidator,
    RecordingSleeper,
    make_submission,
)


@pytest.fixture(autouse=True)
def clear_log_context():
    """Keep structlog context from leaking between tests."""
    structlog.contextvars.clear_contextvars()
    yield
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def recording_sleep(fake_clock):
    """Sleep replacement that records delays and advances fake_clock."""
    return RecordingSleeper(fake_clock)


@pytest.fixture
def no_jitter():
    """Jitter source returning the midpoint (no perturbation)."""
    return lambda low, high: 0.0


@pytest.fixture
def retry_config_factory():
    """Factory for creating RetryConfig instances."""

    def _factory(
        max_attempts: int = 3,
        base_delay_seconds: float = 1.0,
        max_delay_seconds: float = 30.0,
        multiplier: float = 2.0,
        **kwargs,
    ) -> RetryConfig:
        return RetryConfig(
            max_attempts=max_attempts,
            base_delay_seconds=base_delay_seconds,
            max_delay_seconds=max_delay_seconds,
            multiplier=multiplier,
            **kwargs,
        )

    return _factory


@pytest.fixture
def idempotency_cache(fake_clock):
    """Fresh InMemoryIdempotencyCache driven by fake_clock."""
    return InMemoryIdempotencyCache(
        default_ttl_seconds=600, sweep_interval_seconds=60, clock=fake_clock
    )


@pytest.fixture
def orchestrator(idempotency_cache, recording_sleep, fake_clock, no_jitter):
    """RetryOrchestrator that never really sleeps."""
    return RetryOrchestrator(
        cache=idempotency_cache,
        sleep=recording_sleep,
        clock=fake_clock,
        jitter=no_jitter,
    )


@pytest.fixture
def submission_store():
    return FakeSubmissionStore()


@pytest.fixture
def submission_validator():
    return FakeValidator()


@pytest.fixture
def submission_factory():
    """Factory for creating Submission instances."""
    return make_submission


@pytest.fixture
def settings_factory():
    """Factory for Settings with per-section overrides.

    Example:
        settings = settings_factory(batch={"BATCH_MAX_ITEMS": 3})
    """
    from intake.configuration import (
        BatchSettings,
        IdempotencySettings,
        RateLimitSettings,
        RetrySettings,
    )

    def _factory(
        retry=None, idempotency=None, rate_limit=None, batch=None, **kwargs
    ) -> Settings:
        return Settings(
            retry=RetrySettings(**(retry or {})),
            idempotency=IdempotencySettings(**(idempotency or {})),
            rate_limit=RateLimitSettings(**(rate_limit or {})),
            batch=BatchSettings(**(batch or {})),
            **kwargs,
        )

    return _factory
