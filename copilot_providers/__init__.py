"""copilot_providers package

GitHub Copilot chat provider with a per-credential model capability cache.

Public API (re-exported):
    - Version: ``__version__``
    - Provider: :class:`CopilotChatProvider`
    - Cache: :class:`CapabilityCache`, :func:`credential_cache_key`
    - Exceptions: :class:`ProviderError`, :class:`ErrorCode` and the
      capability errors
"""

from .base.errors import (
    ErrorCode,
    InvalidCredentialError,
    ProviderError,
    ProviderUnavailableError,
    RequestValidationError,
    VisionUnsupportedError,
)
from .base.repositories.model_cache import CapabilityCache, credential_cache_key
from .copilot import CopilotChatProvider

__version__ = "0.1.0"

__all__ = [
    "__version__",
    "CopilotChatProvider",
    "CapabilityCache",
    "credential_cache_key",
    "ErrorCode",
    "ProviderError",
    "ProviderUnavailableError",
    "VisionUnsupportedError",
    "InvalidCredentialError",
    "RequestValidationError",
]
