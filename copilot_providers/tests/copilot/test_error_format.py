"""OpenAI error envelopes produced for continue-on-fail items."""
from __future__ import annotations

import pytest

from copilot_providers.base.errors import ErrorCode, ProviderError, RequestValidationError
from copilot_providers.copilot.error_format import clean_error_message, format_error_payload
from copilot_providers.tests.utils import assert_true


def test_clean_error_message() -> None:
    raw = "GitHub Copilot API error:   429   Too Many [Token used: gho_...] [Attempt: 2/4]"
    assert_true(clean_error_message(raw) == "429 Too Many", clean_error_message(raw))


def test_upstream_error_body_wins() -> None:
    exc = ProviderError(
        code=ErrorCode.RATE_LIMIT,
        message="GitHub Copilot API error: 429 Too Many Requests",
        status=429,
        details={"error": {"message": "slow down", "type": "rate_limit_error", "code": "rate_limited"}},
    )
    err = format_error_payload(exc)["error"]
    expected = {"message": "slow down", "type": "rate_limit_error", "param": None, "code": "rate_limited"}
    assert_true(err == expected, f"{err}")


@pytest.mark.parametrize(
    ("message", "code"),
    [
        ("403 Forbidden: no access to model", "insufficient_quota"),
        ("max_tokens is too large for this token budget", "context_length_exceeded"),
        ("401 Unauthorized", "invalid_api_key"),
        ("rate limit exceeded", "rate_limit_exceeded"),
        ("upstream timeout after 60s", "timeout"),
        ("something odd", "internal_error"),
    ],
)
def test_heuristic_codes(message: str, code: str) -> None:
    err = format_error_payload(RuntimeError(message))["error"]
    assert_true(err["code"] == code, f"{message!r} -> {err}")


def test_status_matching_uses_word_boundaries() -> None:
    err = format_error_payload(RuntimeError("context of 4000 items"))["error"]
    assert_true(err["code"] == "internal_error", f"4000 must not look like a 400: {err}")


@pytest.mark.parametrize(
    "exc",
    [
        ProviderError(code=ErrorCode.VALIDATION, message="bad input", status=400),
        RuntimeError("Bad Request: messages missing"),
        ProviderError(
            code=ErrorCode.UNKNOWN, message="nope", details={"error": {"code": "invalid_request_body"}}
        ),
    ],
)
def test_bad_requests_are_raised(exc) -> None:
    with pytest.raises(RequestValidationError) as ei:
        format_error_payload(exc, item_index=2)
    assert_true(ei.value.message.startswith("Bad Request (400): "), ei.value.message)
    assert_true(ei.value.item_index == 2, "item index kept")
