"""OpenAI-style error payloads for items that fail with continue-on-fail enabled.

The payload mirrors the OpenAI error envelope::

    {"error": {"message": ..., "type": ..., "param": ..., "code": ...}}

Bad requests are not converted: retrying or continuing cannot fix a
malformed request, so they are re-raised as ``RequestValidationError``.
"""

from __future__ import annotations

import re
from typing import Any, Dict, Optional

from ..base.errors import ProviderError, RequestValidationError

_TOKEN_NOTE = re.compile(r"\[Token used: [^\]]+\]")
_ATTEMPT_NOTE = re.compile(r"\[Attempt: \d+/\d+\]")
_API_PREFIX = re.compile(r"^GitHub Copilot API error:\s*", re.IGNORECASE)
_WHITESPACE = re.compile(r"\s+")


def _has_status(lower: str, status: int) -> bool:
    return re.search(rf"\b{status}\b", lower) is not None


QUOTA_MESSAGE = "You exceeded your current quota, please check your plan and billing details."
CONTEXT_MESSAGE = (
    "This model's maximum context length is exceeded. "
    "Please reduce the length of the messages or completion."
)
API_KEY_MESSAGE = "Incorrect API key provided. Check the GitHub Copilot token configured for this workflow."
RATE_LIMIT_MESSAGE = "Rate limit reached. Please wait before making more requests."
TIMEOUT_MESSAGE = "Request timeout. Please try again."


def clean_error_message(message: str) -> str:
    """Strip token notes, attempt counters, the API prefix and extra whitespace."""
    text = _TOKEN_NOTE.sub("", message).strip()
    text = _ATTEMPT_NOTE.sub("", text).strip()
    text = _API_PREFIX.sub("", text).strip()
    return _WHITESPACE.sub(" ", text).strip()


def _message_of(exc: BaseException) -> str:
    if isinstance(exc, ProviderError):
        return exc.message
    return str(exc) or exc.__class__.__name__


def _api_error_of(exc: BaseException) -> Optional[Dict[str, Any]]:
    details = exc.details if isinstance(exc, ProviderError) else None
    if isinstance(details, dict) and isinstance(details.get("error"), dict):
        return details["error"]
    return None


def _is_bad_request(exc: BaseException, lower: str, api_error: Optional[Dict[str, Any]]) -> bool:
    if isinstance(exc, ProviderError) and exc.status == 400:
        return True
    if _has_status(lower, 400) or "bad request" in lower:
        return True
    return bool(api_error and api_error.get("code") == "invalid_request_body")


def _heuristic_error(clean: str) -> Dict[str, Any]:
    lower = clean.lower()
    if _has_status(lower, 403) or "forbidden" in lower:
        message = QUOTA_MESSAGE if "access" in lower else clean
        return {"message": message, "type": "invalid_request_error", "param": None, "code": "insufficient_quota"}
    if "max" in lower and "token" in lower:
        return {
            "message": CONTEXT_MESSAGE,
            "type": "invalid_request_error",
            "param": "max_tokens",
            "code": "context_length_exceeded",
        }
    if _has_status(lower, 401) or "unauthorized" in lower:
        return {"message": API_KEY_MESSAGE, "type": "invalid_request_error", "param": None, "code": "invalid_api_key"}
    if _has_status(lower, 429) or "rate limit" in lower:
        return {"message": RATE_LIMIT_MESSAGE, "type": "rate_limit_error", "param": None, "code": "rate_limit_exceeded"}
    if "timeout" in lower:
        return {"message": TIMEOUT_MESSAGE, "type": "api_error", "param": None, "code": "timeout"}
    return {"message": clean, "type": "api_error", "param": None, "code": "internal_error"}


def format_error_payload(exc: BaseException, *, item_index: Optional[int] = None) -> Dict[str, Any]:
    """Convert ``exc`` into an OpenAI error envelope.

    An upstream ``{"error": {...}}`` body attached to the exception wins;
    otherwise the type and code are inferred from the cleaned message.

    Raises:
        RequestValidationError: ``exc`` describes a bad request (HTTP 400,
            "bad request" in the message, or ``invalid_request_body``).
    """
    clean = clean_error_message(_message_of(exc))
    api_error = _api_error_of(exc)
    if _is_bad_request(exc, clean.lower(), api_error):
        raise RequestValidationError(f"Bad Request (400): {clean}", item_index=item_index) from exc
    if api_error is not None:
        return {
            "error": {
                "message": api_error.get("message") or clean,
                "type": api_error.get("type") or "invalid_request_error",
                "param": api_error.get("param"),
                "code": api_error.get("code"),
            }
        }
    return {"error": _heuristic_error(clean)}


__all__ = ["clean_error_message", "format_error_payload"]
