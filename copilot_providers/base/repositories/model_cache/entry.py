"""Capability cache entry."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from ...models import ModelDescriptor


@dataclass
class CacheEntry:
    """Listing cached for one credential key.

    ``last_attempt_at`` moves on every fetch attempt (success or failure)
    and gates the refresh cooldown; ``fetched_at``/``expires_at`` only move
    on success.
    """

    cache_key: str
    models: Tuple[ModelDescriptor, ...]
    fetched_at: float
    expires_at: float
    last_attempt_at: float

    def is_fresh(self, now: float) -> bool:
        return self.expires_at > now

    def cooldown_remaining(self, now: float, cooldown_seconds: float) -> float:
        return max(0.0, cooldown_seconds - (now - self.last_attempt_at))


__all__ = ["CacheEntry"]
