"""
Structured provider error exception type.

Every failure raised out of this package is a :class:`ProviderError` (or a
subclass) carrying a normalized :class:`ErrorCode`, so callers can catch one
type and branch on ``code``.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .error_code import ErrorCode


@dataclass
class ProviderError(Exception):
    """Represents a structured provider error with a normalized error code.

    Attributes:
        code: Normalized :class:`ErrorCode` classification for the failure.
        message: Human-readable error message suitable for logging.
        provider: Provider key where the error originated (``"copilot"``).
        model: Optional model id associated with the failure.
        retryable: Hint for the HTTP retry wrapper (not authoritative).
        raw: Optional original exception for diagnostics.
        status: Optional upstream HTTP status code.
        details: Optional parsed upstream error body (e.g. ``{"error": {...}}``).
    """

    code: ErrorCode
    message: str
    provider: str = "copilot"
    model: Optional[str] = None
    retryable: bool = False
    raw: Optional[Exception] = None
    status: Optional[int] = None
    details: Optional[Dict[str, Any]] = None

    def __str__(self) -> str:  # pragma: no cover - trivial
        return f"{self.provider}:{self.model or '-'} {self.code.value}: {self.message}"


__all__ = ["ProviderError"]
