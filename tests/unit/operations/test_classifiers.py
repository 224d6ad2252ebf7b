"""Unit tests for error classifiers.

Tests cover:
- Error code extraction from exceptions and attached responses
- Retry decisions (request defects, allow-listed codes, categories, phrases)
- Error code mapping for batch reports
"""

import asyncio
from types import SimpleNamespace

import pytest

from intake.errors import (
    AuthorizationError,
    NonRetryableOperationError,
    NotFoundError,
    RetriesExhaustedError,
    TransientError,
    ValidationError,
)
from intake.operations.classifiers import (
    DEFAULT_RETRYABLE_CODES,
    classify_error,
    extract_error_code,
    is_retryable,
)
from intake.operations.status import OperationStatus
from intake.resilience.config import DRAFT_RETRY_CONFIG
from tests.factories.submissions import StatusError

pytestmark = pytest.mark.unit


class ResponseError(Exception):
    """Exception exposing its status only through an attached response."""

    def __init__(self, message: str, status: int):
        super().__init__(message)
        self.response = SimpleNamespace(status=status)


class NetworkError(Exception):
    pass


class TestExtractErrorCode:
    """Tests for extract_error_code()."""

    def test_reads_code_attribute(self):
        assert extract_error_code(TransientError("x", code=503)) == "503"

    def test_reads_status_code_attribute(self):
        assert extract_error_code(StatusError("x", 429)) == "429"

    def test_reads_attached_response_status(self):
        assert extract_error_code(ResponseError("x", 502)) == "502"

    def test_returns_none_without_code(self):
        assert extract_error_code(RuntimeError("boom")) is None

    def test_machine_codes_are_kept_as_strings(self):
        error = TransientError("offline", code="NETWORK_ERROR")

        assert extract_error_code(error) == "NETWORK_ERROR"


class TestIsRetryable:
    """Tests for is_retryable()."""

    @pytest.mark.parametrize("status", [408, 429, 500, 502, 503, 504])
    def test_allow_listed_status_codes_are_retryable(self, status):
        assert is_retryable(StatusError("upstream said no", status)) is True

    @pytest.mark.parametrize("status", [400, 401, 403, 404, 422])
    def test_request_defect_status_codes_are_not_retryable(self, status):
        assert is_retryable(StatusError("rejected", status)) is False

    def test_request_defect_wins_over_transient_message(self):
        """A 400 mentioning a timeout is still a request defect."""
        error = StatusError("field timeout must be positive", 400)

        assert is_retryable(error) is False

    @pytest.mark.parametrize(
        "error",
        [
            ValidationError("network error in field"),
            AuthorizationError("service unavailable for you"),
            NotFoundError("record gone"),
        ],
    )
    def test_request_defect_exceptions_are_not_retryable(self, error):
        assert is_retryable(error) is False

    def test_connection_errors_are_retryable(self):
        assert is_retryable(ConnectionResetError("peer reset")) is True

    def test_timeout_errors_are_retryable(self):
        assert is_retryable(asyncio.TimeoutError()) is True

    def test_network_error_by_class_name_is_retryable(self):
        assert is_retryable(NetworkError("socket closed")) is True

    def test_category_attribute_is_retryable(self):
        assert is_retryable(TransientError("x", category="network")) is True

    @pytest.mark.parametrize(
        "message",
        [
            "Network error while saving",
            "Connection failed",
            "Gateway Timeout",
            "Rate limit reached",
            "Service Unavailable",
            "Internal Server Error",
            "Bad Gateway",
        ],
    )
    def test_transient_messages_are_retryable(self, message):
        assert is_retryable(RuntimeError(message)) is True

    def test_unknown_errors_are_not_retryable(self):
        assert is_retryable(RuntimeError("duplicate key value")) is False

    def test_custom_allow_list_replaces_defaults(self):
        error = TransientError("teapot", code=418)

        assert is_retryable(error) is False
        assert is_retryable(error, retryable_codes=[418]) is True
        assert is_retryable(TransientError("x", code=503), retryable_codes=[418]) is False

    def test_draft_allow_list_excludes_throttling(self):
        error = StatusError("throttled", 429)

        assert is_retryable(error) is True
        assert is_retryable(error, DRAFT_RETRY_CONFIG.retryable_codes) is False

    def test_default_allow_list_contents(self):
        assert {"NETWORK_ERROR", "TIMEOUT_ERROR", "SERVER_ERROR"} <= DEFAULT_RETRYABLE_CODES
        assert "400" not in DEFAULT_RETRYABLE_CODES


class TestClassifyError:
    """Tests for classify_error() error code mapping."""

    def test_validation_error_carries_field_errors(self):
        error = ValidationError("invalid", errors={"age": ["required"]})

        result = classify_error(error)

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "VALIDATION_FAILED"
        assert result.data == {"age": ["required"]}
        assert result.is_retryable is False

    def test_authorization_error(self):
        result = classify_error(AuthorizationError("not yours"))

        assert result.status == OperationStatus.UNAUTHORIZED
        assert result.error_code == "UNAUTHORIZED"

    def test_forbidden_status(self):
        assert classify_error(StatusError("forbidden", 403)).error_code == "UNAUTHORIZED"

    def test_not_found(self):
        result = classify_error(StatusError("missing", 404))

        assert result.status == OperationStatus.NOT_FOUND
        assert result.error_code == "NOT_FOUND"

    def test_unprocessable_status_is_invalid_request(self):
        result = classify_error(StatusError("bad body", 422))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "INVALID_REQUEST"

    def test_unknown_error_is_processing_error(self):
        result = classify_error(RuntimeError("duplicate key value"))

        assert result.status == OperationStatus.PERMANENT_ERROR
        assert result.error_code == "PROCESSING_ERROR"
        assert result.message == "duplicate key value"

    def test_throttling_is_rate_limited(self):
        result = classify_error(StatusError("too many requests", 429))

        assert result.status == OperationStatus.TRANSIENT_ERROR
        assert result.error_code == "RATE_LIMITED"

    def test_timeout_uses_class_name_as_message(self):
        result = classify_error(TimeoutError())

        assert result.error_code == "TIMEOUT"
        assert result.message == "TimeoutError"

    def test_connection_error_is_network_error(self):
        assert classify_error(ConnectionError("reset")).error_code == "NETWORK_ERROR"

    def test_5xx_is_server_error(self):
        result = classify_error(StatusError("upstream failure", 503))

        assert result.error_code == "SERVER_ERROR"
        assert result.is_retryable is True

    def test_transient_phrase_without_code(self):
        result = classify_error(RuntimeError("service unavailable"))

        assert result.error_code == "TRANSIENT_ERROR"

    def test_unwraps_orchestration_errors(self):
        cause = StatusError("upstream failure", 503)
        wrapped = RetriesExhaustedError(
            "failed", cause=cause, attempts=3, elapsed_seconds=1.0
        )

        assert classify_error(wrapped).error_code == "SERVER_ERROR"

    def test_unwraps_non_retryable_orchestration_errors(self):
        cause = ValidationError("invalid", errors={"age": ["required"]})
        wrapped = NonRetryableOperationError(
            "failed", cause=cause, attempts=1, elapsed_seconds=0.0
        )

        assert classify_error(wrapped).error_code == "VALIDATION_FAILED"
