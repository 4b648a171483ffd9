from __future__ import annotations

import httpx
import pytest

from sanbot_sdk import errors
from sanbot_sdk.backoff import BackoffPolicy
from sanbot_sdk.errors import ErrorCategory
from sanbot_sdk.exchange import ResponseOutcome
from sanbot_sdk.models import ApiError
from sanbot_sdk.results import Error, Success


@pytest.mark.parametrize(
    "code, message, field, expected",
    [
        ("INVALID_API_KEY", "nope", None, "API authentication failed. Please check your API key."),
        ("INVALID_REQUEST", "bad json", None, "Invalid request format: bad json"),
        ("MISSING_FIELD", "required", "phone", "Missing required field: phone"),
        ("PACKAGE_NOT_FOUND", "gone", None, "Package not found. Please select a valid package."),
        ("LEAD_NOT_FOUND", "gone", None, "Lead not found. Please create a new lead first."),
        ("SERVER_ERROR", "db down", None, "Server error: db down"),
        ("AUDIO_TOO_LARGE", "6MB", None, "Audio file is too large (max 5MB). Please record a shorter audio."),
        ("SOMETHING_NEW", "teapot", None, "Error: teapot"),
    ],
)
def test_describe_error(code: str, message: str, field, expected: str) -> None:
    assert errors.describe_error(ApiError(code=code, message=message, field=field)) == expected


def test_describe_missing_error() -> None:
    assert errors.describe_error(None) == "An unknown error occurred"
    assert errors.error_code(None) == errors.UNKNOWN_ERROR


def test_categories_and_suggestions() -> None:
    assert errors.categorize("INVALID_API_KEY") is ErrorCategory.AUTHENTICATION
    assert errors.categorize("MISSING_FIELD") is ErrorCategory.VALIDATION
    assert errors.categorize("LEAD_NOT_FOUND") is ErrorCategory.NOT_FOUND
    assert errors.categorize("SERVICE_UNAVAILABLE") is ErrorCategory.SERVER_ERROR
    assert errors.categorize("AUDIO_TOO_LARGE") is ErrorCategory.UNKNOWN
    assert errors.recovery_suggestion(errors.NETWORK_ERROR) == "Check your internet connection and try again."
    assert errors.recovery_suggestion("PACKAGE_NOT_FOUND") == "Please try again."


def test_retryability() -> None:
    assert all(errors.is_retryable_status(status) for status in (408, 429, 500, 502, 503, 504))
    assert not errors.is_retryable_status(404)
    assert errors.is_retryable_error("RATE_LIMIT_EXCEEDED")
    assert errors.is_retryable_error(errors.NETWORK_ERROR)
    assert not errors.is_retryable_error("INVALID_API_KEY")


def test_error_result_prefers_backend_code() -> None:
    result = Error("Lead not found.", ApiError(code="LEAD_NOT_FOUND", message="x"), kind=errors.HTTP_ERROR)
    assert result.code == "LEAD_NOT_FOUND"
    assert result.category is ErrorCategory.NOT_FOUND
    assert not result.ok


def test_error_result_without_backend_error_uses_kind() -> None:
    result = Error("Network error: boom", kind=errors.NETWORK_ERROR)
    assert result.code == errors.NETWORK_ERROR
    assert result.category is ErrorCategory.NETWORK_ERROR
    assert Success(data=1).ok


def test_status_hint_is_broader_than_backoff_policy() -> None:
    policy = BackoffPolicy(max_retries=3)
    assert errors.is_retryable_status(408)
    assert not policy.decide(0, ResponseOutcome(response=httpx.Response(408))).should_retry
