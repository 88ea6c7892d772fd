"""In-memory capability cache keyed by credential hash."""

from .cache import (
    DEFAULT_REFRESH_COOLDOWN_SECONDS,
    DEFAULT_TTL_SECONDS,
    CapabilityCache,
    ModelsFetcher,
)
from .entry import CacheEntry
from .keys import DEFAULT_CACHE_KEY, credential_cache_key, is_valid_credential
from .parsing import descriptors_from_listing, model_from_dict

__all__ = [
    "CapabilityCache",
    "ModelsFetcher",
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_REFRESH_COOLDOWN_SECONDS",
    "CacheEntry",
    "DEFAULT_CACHE_KEY",
    "credential_cache_key",
    "is_valid_credential",
    "descriptors_from_listing",
    "model_from_dict",
]
