"""DTO validation package."""

from .chat import (
    DEFAULT_MAX_TOKENS,
    MANUAL_MODEL_MARKER,
    AdvancedOptions,
    ChatItemParams,
    VisionPolicy,
)

__all__ = [
    "DEFAULT_MAX_TOKENS",
    "MANUAL_MODEL_MARKER",
    "AdvancedOptions",
    "ChatItemParams",
    "VisionPolicy",
]
