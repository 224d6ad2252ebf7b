"""Tests for process-scoped providers."""

import pytest

from intake import providers
from intake.pipeline import SubmissionPipeline
from tests.factories.submissions import FakeSubmissionStore

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def reset_provider_singletons():
    """Reset cached providers before and after each test."""
    providers.reset_providers()
    yield
    providers.reset_providers()


class TestProviders:
    def test_settings_cached(self):
        assert providers.get_settings() is providers.get_settings()

    def test_pipelines_share_process_state(self):
        first = providers.get_pipeline(FakeSubmissionStore())
        second = providers.get_pipeline(FakeSubmissionStore())

        assert isinstance(first, SubmissionPipeline)
        assert first.cache is second.cache
        assert first.rate_limiters is second.rate_limiters

    def test_rate_limits_span_pipelines(self, monkeypatch):
        monkeypatch.setenv("RATE_LIMIT_BATCH_MAX", "1")
        first = providers.get_pipeline(FakeSubmissionStore())
        second = providers.get_pipeline(FakeSubmissionStore())

        assert first.check_and_consume("10.0.0.1", "batch").allowed
        assert not second.check_and_consume("10.0.0.1", "batch").allowed

    def test_reset_providers(self):
        cache = providers.get_idempotency_cache()

        providers.reset_providers()

        assert providers.get_idempotency_cache() is not cache
