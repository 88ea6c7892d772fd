"""Errors parts package public surface.

Prefer importing from `copilot_providers.base.errors` for the stable surface.
"""

from .error_code import ErrorCode
from .provider_error import ProviderError
from .capability_errors import (
    InvalidCredentialError,
    ProviderUnavailableError,
    RequestValidationError,
    VisionUnsupportedError,
)
from .classification import classify_exception, code_for_status

__all__ = [
    "ErrorCode",
    "ProviderError",
    "ProviderUnavailableError",
    "VisionUnsupportedError",
    "InvalidCredentialError",
    "RequestValidationError",
    "classify_exception",
    "code_for_status",
]
