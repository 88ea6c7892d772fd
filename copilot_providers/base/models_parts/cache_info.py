"""Read-only views over a capability cache entry."""
from __future__ import annotations

from dataclasses import dataclass, asdict
from typing import Any, Dict


@dataclass(frozen=True)
class CacheInfo:
    """Diagnostics for one credential's cache entry.

    ``expires_in_seconds`` is clamped at zero once the entry is stale;
    ``fetched_at`` is ISO-8601 UTC.
    """

    cache_key: str
    models_count: int
    expires_in_seconds: float
    fetched_at: str
    stale: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ModelCapabilitiesSummary:
    """Flattened capability view with defaults applied for missing limits."""

    vision: bool
    tools: bool
    streaming: bool
    max_context_tokens: int
    max_output_tokens: int
    is_premium: bool

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


__all__ = ["CacheInfo", "ModelCapabilitiesSummary"]
