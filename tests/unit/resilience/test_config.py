"""Unit tests for RetryConfig and its presets."""

import pytest

from intake.operations.classifiers import DEFAULT_RETRYABLE_CODES, is_retryable
from intake.resilience.config import (
    BATCH_ITEM_RETRY_CONFIG,
    DRAFT_RETRY_CONFIG,
    SUBMISSION_RETRY_CONFIG,
    RetryConfig,
)
from tests.factories.submissions import StatusError

pytestmark = pytest.mark.unit


class TestRetryConfig:
    def test_defaults(self):
        config = RetryConfig()

        assert config.max_attempts == 3
        assert config.base_delay_seconds == 1.0
        assert config.max_delay_seconds == 30.0
        assert config.multiplier == 2.0
        assert config.retryable_codes == DEFAULT_RETRYABLE_CODES
        assert config.attempt_timeout_seconds is None

    def test_retryable_codes_normalized_to_strings(self):
        config = RetryConfig(retryable_codes=[503, "NETWORK_ERROR"])

        assert config.retryable_codes == frozenset({"503", "NETWORK_ERROR"})

    @pytest.mark.parametrize(
        "kwargs,message",
        [
            ({"max_attempts": 0}, "max_attempts"),
            ({"base_delay_seconds": -1}, "base_delay_seconds"),
            ({"base_delay_seconds": 10, "max_delay_seconds": 5}, "max_delay_seconds"),
            ({"multiplier": 0.5}, "multiplier"),
            ({"attempt_timeout_seconds": 0}, "attempt_timeout_seconds"),
        ],
    )
    def test_invalid_values_rejected(self, kwargs, message):
        with pytest.raises(ValueError, match=message):
            RetryConfig(**kwargs)

    def test_is_immutable(self):
        config = RetryConfig()

        with pytest.raises(AttributeError):
            config.max_attempts = 10

    def test_with_overrides_returns_copy(self):
        config = RetryConfig()

        overridden = config.with_overrides(max_attempts=7)

        assert overridden.max_attempts == 7
        assert overridden.base_delay_seconds == config.base_delay_seconds
        assert config.max_attempts == 3

    def test_with_overrides_validates(self):
        with pytest.raises(ValueError):
            RetryConfig().with_overrides(max_attempts=0)


class TestPresets:
    def test_submissions_get_more_attempts_than_drafts(self):
        assert SUBMISSION_RETRY_CONFIG.max_attempts > DRAFT_RETRY_CONFIG.max_attempts
        assert (
            SUBMISSION_RETRY_CONFIG.max_delay_seconds
            > DRAFT_RETRY_CONFIG.max_delay_seconds
        )

    def test_submission_preset_retries_throttling(self):
        assert "429" in SUBMISSION_RETRY_CONFIG.retryable_codes
        assert "RATE_LIMIT_EXCEEDED" in SUBMISSION_RETRY_CONFIG.retryable_codes

    def test_draft_preset_does_not_retry_throttling(self):
        assert "429" not in DRAFT_RETRY_CONFIG.retryable_codes
        assert "503" in DRAFT_RETRY_CONFIG.retryable_codes

    def test_draft_preset_still_matches_rate_limit_message(self):
        codes = DRAFT_RETRY_CONFIG.retryable_codes

        assert not is_retryable(StatusError("too many requests", 429), codes)
        assert is_retryable(RuntimeError("Rate limit reached, slow down"), codes)

    def test_batch_item_preset(self):
        assert BATCH_ITEM_RETRY_CONFIG.max_attempts == 2
        assert BATCH_ITEM_RETRY_CONFIG.base_delay_seconds == 0.5
