"""Capability names and tri-state lookup over model descriptors.

Lookups answer ``True``/``False`` for a known model and a known capability
name and ``None`` ("unknown") otherwise. ``None`` is a value, never an
error: callers decide how to treat an unknown answer.
"""

from __future__ import annotations

from typing import Callable, Dict, Iterable, Optional

from ..models import ModelDescriptor

CAP_VISION = "vision"
CAP_TOOL_CALLS = "tool_calls"
CAP_STREAMING = "streaming"
CAP_STRUCTURED_OUTPUTS = "structured_outputs"
CAP_PARALLEL_TOOL_CALLS = "parallel_tool_calls"
CAP_REASONING = "reasoning"

_ACCESSORS: Dict[str, Callable[[ModelDescriptor], bool]] = {
    CAP_VISION: lambda m: m.capabilities.supports_vision,
    CAP_TOOL_CALLS: lambda m: m.capabilities.supports_tool_calls,
    CAP_STREAMING: lambda m: m.capabilities.supports_streaming,
    CAP_STRUCTURED_OUTPUTS: lambda m: m.capabilities.supports_structured_outputs,
    CAP_PARALLEL_TOOL_CALLS: lambda m: m.capabilities.supports_parallel_tool_calls,
    CAP_REASONING: lambda m: m.capabilities.supports_reasoning,
}

KNOWN_CAPABILITIES = frozenset(_ACCESSORS)


def find_model(models: Iterable[ModelDescriptor], model_id: str) -> Optional[ModelDescriptor]:
    """Return the first descriptor with ``id == model_id`` or ``None``."""
    return next((m for m in models if m.id == model_id), None)


def capability_of(model: Optional[ModelDescriptor], capability: str) -> Optional[bool]:
    """Answer a capability question for one descriptor.

    Parameters:
        model: Descriptor or ``None`` when the model is not in the listing.
        capability: One of :data:`KNOWN_CAPABILITIES`.

    Returns:
        ``True``/``False`` for a known model and capability name, ``None``
        when either is unknown.
    """
    if model is None:
        return None
    accessor = _ACCESSORS.get(capability)
    if accessor is None:
        return None
    return bool(accessor(model))


__all__ = [
    "CAP_VISION",
    "CAP_TOOL_CALLS",
    "CAP_STREAMING",
    "CAP_STRUCTURED_OUTPUTS",
    "CAP_PARALLEL_TOOL_CALLS",
    "CAP_REASONING",
    "KNOWN_CAPABILITIES",
    "find_model",
    "capability_of",
]
