"""Bundled capability table for well-known Copilot model ids.

Consulted only when the live listing has no answer (credential not cached
yet, or model absent from the listing). Live data always wins.
"""

from __future__ import annotations

from types import MappingProxyType
from typing import FrozenSet, Mapping, Optional

from .core import (
    CAP_PARALLEL_TOOL_CALLS,
    CAP_REASONING,
    CAP_STREAMING,
    CAP_STRUCTURED_OUTPUTS,
    CAP_TOOL_CALLS,
    CAP_VISION,
    KNOWN_CAPABILITIES,
)

_CHAT = frozenset({CAP_STREAMING, CAP_TOOL_CALLS})
_CHAT_PLUS = _CHAT | {CAP_PARALLEL_TOOL_CALLS, CAP_STRUCTURED_OUTPUTS}
_VISION_CHAT = _CHAT_PLUS | {CAP_VISION}

STATIC_CAPABILITIES: Mapping[str, FrozenSet[str]] = MappingProxyType(
    {
        "gpt-3.5-turbo": _CHAT,
        "gpt-4": _CHAT,
        "gpt-4-0613": _CHAT,
        "gpt-4o": _VISION_CHAT,
        "gpt-4o-2024-11-20": _VISION_CHAT,
        "gpt-4o-mini": _CHAT_PLUS,
        "gpt-4.1": _VISION_CHAT,
        "gpt-5": _VISION_CHAT | {CAP_REASONING},
        "gpt-5-mini": _VISION_CHAT | {CAP_REASONING},
        "gpt-5-codex": _VISION_CHAT | {CAP_REASONING},
        "o3-mini": _CHAT | {CAP_STRUCTURED_OUTPUTS, CAP_REASONING},
        "o4-mini": _VISION_CHAT | {CAP_REASONING},
        "claude-3.5-sonnet": _CHAT | {CAP_VISION},
        "claude-3.7-sonnet": _CHAT | {CAP_VISION},
        "claude-3.7-sonnet-thought": _CHAT | {CAP_VISION, CAP_REASONING},
        "claude-sonnet-4": _CHAT | {CAP_VISION, CAP_PARALLEL_TOOL_CALLS},
        "claude-sonnet-4.5": _CHAT | {CAP_VISION, CAP_PARALLEL_TOOL_CALLS},
        "claude-haiku-4.5": _CHAT | {CAP_VISION},
        "claude-opus-4.1": _CHAT | {CAP_VISION},
        "gemini-2.0-flash-001": _CHAT | {CAP_VISION},
        "gemini-2.5-pro": _CHAT | {CAP_VISION, CAP_REASONING},
        "grok-code-fast-1": _CHAT,
    }
)


def static_capability(model_id: str, capability: str) -> Optional[bool]:
    """Tri-state answer from the bundled table.

    ``None`` when the model id is not in the table or the capability name
    is not recognized.
    """
    caps = STATIC_CAPABILITIES.get(model_id)
    if caps is None or capability not in KNOWN_CAPABILITIES:
        return None
    return capability in caps


__all__ = ["STATIC_CAPABILITIES", "static_capability"]
