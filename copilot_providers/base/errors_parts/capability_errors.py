"""
Domain errors raised by the capability cache, the vision resolver and the
request builder.

They subclass :class:`ProviderError` so a single ``except ProviderError``
catches every failure this package produces; the subclass tells the caller
which contract was violated.
"""
from __future__ import annotations

from typing import Optional

from .error_code import ErrorCode
from .provider_error import ProviderError


class ProviderUnavailableError(ProviderError):
    """Model listing fetch failed and no cached listing (even stale) exists."""

    def __init__(self, message: str, *, raw: Optional[Exception] = None, status: Optional[int] = None) -> None:
        super().__init__(
            code=ErrorCode.UNAVAILABLE,
            message=message,
            provider="copilot",
            retryable=False,
            raw=raw,
            status=status,
        )


class VisionUnsupportedError(ProviderError):
    """Requested model cannot process images and no usable fallback is configured."""

    def __init__(self, model: str, message: Optional[str] = None) -> None:
        super().__init__(
            code=ErrorCode.UNSUPPORTED,
            message=message
            or (
                f"Model {model} does not support vision/image processing. Enable "
                '"Vision Fallback" in Advanced Options and select a vision-capable '
                "model, or choose a model with vision capabilities."
            ),
            provider="copilot",
            model=model,
            retryable=False,
        )


class InvalidCredentialError(ProviderError):
    """Degenerate (empty or non-string) credential used where a fetch is required."""

    def __init__(self, message: str = "Empty or invalid Copilot credential") -> None:
        super().__init__(code=ErrorCode.AUTH, message=message, provider="copilot", retryable=False)


class RequestValidationError(ProviderError):
    """Node parameters could not be turned into a valid chat request."""

    def __init__(self, message: str, *, model: Optional[str] = None, item_index: Optional[int] = None) -> None:
        super().__init__(code=ErrorCode.VALIDATION, message=message, provider="copilot", model=model)
        self.item_index = item_index


__all__ = [
    "ProviderUnavailableError",
    "VisionUnsupportedError",
    "InvalidCredentialError",
    "RequestValidationError",
]
