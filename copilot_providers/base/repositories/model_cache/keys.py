"""
Credential to cache-key hashing.

The key is a 32-bit rolling hash of the credential rendered in base36 with a
``models_`` prefix. It only partitions the in-memory capability cache:
collisions are tolerated and the value must never be used for anything
security related. Degenerate credentials share the fixed sentinel key so
lookups degrade to "unknown" instead of raising.
"""

from __future__ import annotations

from typing import Any

DEFAULT_CACHE_KEY = "models_default"
_KEY_PREFIX = "models_"
_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


def is_valid_credential(credential: Any) -> bool:
    """Return True for a non-empty string credential."""
    return isinstance(credential, str) and len(credential) > 0


def _to_int32(value: int) -> int:
    value &= 0xFFFFFFFF
    return value - 0x100000000 if value & 0x80000000 else value


def _utf16_units(text: str):
    data = text.encode("utf-16-le", errors="surrogatepass")
    for i in range(0, len(data), 2):
        yield data[i] | (data[i + 1] << 8)


def _base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def credential_cache_key(credential: Any) -> str:
    """Hash ``credential`` into a cache key.

    Iterates UTF-16 code units applying ``h = h * 31 + unit`` with 32-bit
    signed wraparound, then renders ``abs(h)`` in base36.

    Examples:
        >>> credential_cache_key("")
        'models_default'
        >>> credential_cache_key("a")
        'models_2p'
    """
    if not is_valid_credential(credential):
        return DEFAULT_CACHE_KEY
    h = 0
    for unit in _utf16_units(credential):
        h = _to_int32((h << 5) - h + unit)
    return f"{_KEY_PREFIX}{_base36(abs(h))}"


__all__ = ["DEFAULT_CACHE_KEY", "is_valid_credential", "credential_cache_key"]
