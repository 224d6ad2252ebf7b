"""Operation result types, status enums and error classifiers."""

from intake.operations.classifiers import (
    DEFAULT_RETRYABLE_CODES,
    classify_error,
    extract_error_code,
    is_retryable,
)
from intake.operations.result import OperationResult
from intake.operations.status import OperationStatus

__all__ = [
    "DEFAULT_RETRYABLE_CODES",
    "OperationResult",
    "OperationStatus",
    "classify_error",
    "extract_error_code",
    "is_retryable",
]
