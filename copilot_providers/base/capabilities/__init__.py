"""Capability lookup, static fallback table and billing helpers."""

from .core import (
    CAP_PARALLEL_TOOL_CALLS,
    CAP_REASONING,
    CAP_STREAMING,
    CAP_STRUCTURED_OUTPUTS,
    CAP_TOOL_CALLS,
    CAP_VISION,
    KNOWN_CAPABILITIES,
    capability_of,
    find_model,
)
from .static_table import STATIC_CAPABILITIES, static_capability
from .billing import billing_tier, cost_multiplier, format_multiplier, multiplier_value

__all__ = [
    "CAP_PARALLEL_TOOL_CALLS",
    "CAP_REASONING",
    "CAP_STREAMING",
    "CAP_STRUCTURED_OUTPUTS",
    "CAP_TOOL_CALLS",
    "CAP_VISION",
    "KNOWN_CAPABILITIES",
    "capability_of",
    "find_model",
    "STATIC_CAPABILITIES",
    "static_capability",
    "billing_tier",
    "cost_multiplier",
    "format_multiplier",
    "multiplier_value",
]
