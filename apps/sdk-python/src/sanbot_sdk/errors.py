"""Translation of backend error codes into kiosk-facing messages."""

from __future__ import annotations

from enum import Enum
from typing import Optional

from .models import ApiError

VALIDATION_ERROR = "VALIDATION_ERROR"
NETWORK_ERROR = "NETWORK_ERROR"
HTTP_ERROR = "HTTP_ERROR"
UNKNOWN_ERROR = "UNKNOWN_ERROR"

RETRYABLE_STATUSES = frozenset({408, 429, 500, 502, 503, 504})
RETRYABLE_CODES = frozenset({"RATE_LIMIT_EXCEEDED", "SERVER_ERROR", "SERVICE_UNAVAILABLE", NETWORK_ERROR})


class ErrorCategory(str, Enum):
    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    RATE_LIMIT = "rate_limit"
    SERVER_ERROR = "server_error"
    NETWORK_ERROR = "network_error"
    UNKNOWN = "unknown"


_CATEGORIES = {
    "INVALID_API_KEY": ErrorCategory.AUTHENTICATION,
    "INVALID_REQUEST": ErrorCategory.VALIDATION,
    "MISSING_FIELD": ErrorCategory.VALIDATION,
    "INVALID_PHONE": ErrorCategory.VALIDATION,
    "INVALID_EMAIL": ErrorCategory.VALIDATION,
    VALIDATION_ERROR: ErrorCategory.VALIDATION,
    "PACKAGE_NOT_FOUND": ErrorCategory.NOT_FOUND,
    "LEAD_NOT_FOUND": ErrorCategory.NOT_FOUND,
    "RATE_LIMIT_EXCEEDED": ErrorCategory.RATE_LIMIT,
    "SERVER_ERROR": ErrorCategory.SERVER_ERROR,
    "SERVICE_UNAVAILABLE": ErrorCategory.SERVER_ERROR,
    NETWORK_ERROR: ErrorCategory.NETWORK_ERROR,
}

_SUGGESTIONS = {
    "INVALID_API_KEY": "Go to Settings and verify your API key.",
    "RATE_LIMIT_EXCEEDED": "Wait a few moments before trying again.",
    "SERVER_ERROR": "Please try again later.",
    "SERVICE_UNAVAILABLE": "Please try again later.",
    NETWORK_ERROR: "Check your internet connection and try again.",
    "INVALID_PHONE": "Please enter a valid contact information.",
    "INVALID_EMAIL": "Please enter a valid contact information.",
    VALIDATION_ERROR: "Please enter a valid contact information.",
}


def describe_error(error: Optional[ApiError]) -> str:
    if error is None:
        return "An unknown error occurred"
    code = error.code
    if code == "INVALID_API_KEY":
        return "API authentication failed. Please check your API key."
    if code == "INVALID_REQUEST":
        return f"Invalid request format: {error.message}"
    if code == "MISSING_FIELD":
        return f"Missing required field: {error.field}"
    if code == "INVALID_PHONE":
        return "Phone number format is invalid. Use international format (e.g., +971501234567)"
    if code == "INVALID_EMAIL":
        return "Email address format is invalid."
    if code == "PACKAGE_NOT_FOUND":
        return "Package not found. Please select a valid package."
    if code == "LEAD_NOT_FOUND":
        return "Lead not found. Please create a new lead first."
    if code == "RATE_LIMIT_EXCEEDED":
        return "Too many requests. Please try again in a few minutes."
    if code == "SERVER_ERROR":
        return f"Server error: {error.message}"
    if code == "SERVICE_UNAVAILABLE":
        return "Service is temporarily unavailable. Please try again later."
    if code == "AUDIO_TOO_LARGE":
        return "Audio file is too large (max 5MB). Please record a shorter audio."
    return f"Error: {error.message}"


def error_code(error: Optional[ApiError]) -> str:
    return error.code if error is not None else UNKNOWN_ERROR


def recovery_suggestion(code: str) -> str:
    return _SUGGESTIONS.get(code, "Please try again.")


def categorize(code: str) -> ErrorCategory:
    return _CATEGORIES.get(code, ErrorCategory.UNKNOWN)


def is_retryable_status(status_code: int) -> bool:
    """Whether a "try again" prompt makes sense for this status.

    This is a hint for the kiosk UI only. It includes 408, which
    :class:`~sanbot_sdk.backoff.BackoffPolicy` does not retry on its own.
    """
    return status_code in RETRYABLE_STATUSES


def is_retryable_error(code: str) -> bool:
    return code in RETRYABLE_CODES


__all__ = [
    "ErrorCategory",
    "HTTP_ERROR",
    "NETWORK_ERROR",
    "UNKNOWN_ERROR",
    "VALIDATION_ERROR",
    "categorize",
    "describe_error",
    "error_code",
    "is_retryable_error",
    "is_retryable_status",
    "recovery_suggestion",
]
