"""Error classification utilities for service and store errors."""

from enum import Enum
from typing import Literal

from pydantic import BaseModel


class ErrorCategory(Enum):
    """Categories of errors that can occur while serving a request or job."""

    STORE_UNAVAILABLE = "store_unavailable"
    RECORD_NOT_FOUND = "record_not_found"
    PERMISSION_DENIED = "permission_denied"
    INVALID_RECURRENCE = "invalid_recurrence"
    INVALID_STATE_TRANSITION = "invalid_state_transition"
    DUPLICATE_RECORD = "duplicate_record"
    INVALID_INPUT = "invalid_input"
    UNKNOWN = "unknown"


class ErrorSeverity(Enum):
    """Severity levels for errors."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ErrorCode:
    """Error codes for specific error conditions."""

    # Store errors
    ERR_STORE_UNAVAILABLE = "ERR_STORE_UNAVAILABLE"

    # Record errors
    ERR_RECORD_NOT_FOUND = "ERR_RECORD_NOT_FOUND"
    ERR_DUPLICATE_RECORD = "ERR_DUPLICATE_RECORD"

    # Task errors
    ERR_INVALID_RECURRENCE = "ERR_INVALID_RECURRENCE"
    ERR_INVALID_STATE_TRANSITION = "ERR_INVALID_STATE_TRANSITION"

    # Permission errors
    ERR_PERMISSION_DENIED = "ERR_PERMISSION_DENIED"

    # Generic errors
    ERR_INVALID_INPUT = "ERR_INVALID_INPUT"
    ERR_UNKNOWN = "ERR_UNKNOWN"


class ErrorResponse(BaseModel):
    """Structured error response with user-friendly messaging."""

    code: str
    message: str
    suggestion: str
    severity: ErrorSeverity
    category: ErrorCategory


_ERROR_PATTERNS: dict[
    Literal["transient", "duplicate"],
    dict[str, list[str] | set[str]],
] = {
    "transient": {
        "phrases": [
            "database is locked",
            "database is busy",
            "disk i/o error",
            "unable to open database",
            "connection",
            "timeout",
            "timed out",
            "unavailable",
        ],
        "exception_types": {"ConnectionError", "TimeoutError", "OperationalError"},
    },
    "duplicate": {
        "phrases": [
            "already exists",
            "already pending",
            "unique constraint",
        ],
        "exception_types": {"IntegrityError"},
    },
}


def _match_error_pattern(
    *,
    error_str: str,
    exception_type: str,
    pattern_type: Literal["transient", "duplicate"],
) -> bool:
    """Return True if the error matches the configured pattern type."""
    patterns = _ERROR_PATTERNS[pattern_type]
    return any(phrase in error_str for phrase in patterns["phrases"]) or exception_type in patterns["exception_types"]


def _exception_chain(exception: BaseException) -> list[BaseException]:
    """Return the exception followed by its causes, innermost last."""
    chain: list[BaseException] = []
    current: BaseException | None = exception
    while current is not None and current not in chain:
        chain.append(current)
        current = current.__cause__
    return chain


def is_transient_store_error(exception: BaseException) -> bool:
    """Check whether a store failure is transient (network, timeout, locked database).

    Transient failures are logged and left for the next natural trigger to retry.
    """
    return any(
        _match_error_pattern(error_str=str(exc).lower(), exception_type=type(exc).__name__, pattern_type="transient")
        for exc in _exception_chain(exception)
    )


def classify_error_with_response(exception: Exception) -> ErrorResponse:  # noqa: PLR0911
    """Classify an error and return a structured response with recovery suggestions.

    Args:
        exception: The exception raised during execution

    Returns:
        ErrorResponse with code, message, suggestion, and severity
    """
    error_str = str(exception).lower()
    exception_type = type(exception).__name__

    if isinstance(exception, PermissionError) or "only the home owner" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_PERMISSION_DENIED,
            message="You don't have permission for this action.",
            suggestion="Ask the home owner to perform this action.",
            severity=ErrorSeverity.MEDIUM,
            category=ErrorCategory.PERMISSION_DENIED,
        )

    if isinstance(exception, KeyError) or "not found" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_RECORD_NOT_FOUND,
            message="The requested item could not be found.",
            suggestion="Refresh the page; it may have been deleted by another member.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.RECORD_NOT_FOUND,
        )

    if isinstance(exception, ValueError) and "recurrence" in error_str:
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_RECURRENCE,
            message="Invalid recurrence interval.",
            suggestion="Use a whole number of days greater than zero, and set a due date first.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.INVALID_RECURRENCE,
        )

    if _match_error_pattern(error_str=error_str, exception_type=exception_type, pattern_type="duplicate"):
        return ErrorResponse(
            code=ErrorCode.ERR_DUPLICATE_RECORD,
            message="This item already exists.",
            suggestion="Pick a different name or wait for the pending invitation to be answered.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.DUPLICATE_RECORD,
        )

    if isinstance(exception, ValueError) and ("cannot" in error_str or "no longer pending" in error_str):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_STATE_TRANSITION,
            message="This action cannot be performed in the current state.",
            suggestion="Refresh and check the current status before trying again.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.INVALID_STATE_TRANSITION,
        )

    if is_transient_store_error(exception):
        return ErrorResponse(
            code=ErrorCode.ERR_STORE_UNAVAILABLE,
            message="The data store is temporarily unavailable.",
            suggestion="Please try again in a moment.",
            severity=ErrorSeverity.HIGH,
            category=ErrorCategory.STORE_UNAVAILABLE,
        )

    if isinstance(exception, ValueError):
        return ErrorResponse(
            code=ErrorCode.ERR_INVALID_INPUT,
            message="The request contained invalid data.",
            suggestion="Check the submitted values and try again.",
            severity=ErrorSeverity.LOW,
            category=ErrorCategory.INVALID_INPUT,
        )

    return ErrorResponse(
        code=ErrorCode.ERR_UNKNOWN,
        message="An unexpected error occurred.",
        suggestion="Please try again later. If the problem persists, contact support.",
        severity=ErrorSeverity.MEDIUM,
        category=ErrorCategory.UNKNOWN,
    )
