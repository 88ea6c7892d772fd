"""copilot_providers.config.env
============================

Environment variable names for the Copilot credential and helpers to read
them.

Design Notes
------------
- ``ENV_MAP`` holds the canonical variable per provider key; ``ENV_ALIASES``
  lists accepted names in priority order (canonical first).
- Placeholder values (``placeholder``, ``changeme``, ``example``, ``test_``
  prefix) count as unset so sample ``.env`` files never reach the API.
- Helpers never raise; callers decide how to handle a missing credential.
"""

from __future__ import annotations

import os
from typing import Dict, Iterable, Optional, Tuple

ENV_MAP: Dict[str, str] = {
    "copilot": "COPILOT_OAUTH_TOKEN",
}

ENV_ALIASES: Dict[str, Tuple[str, ...]] = {
    "copilot": ("COPILOT_OAUTH_TOKEN", "GITHUB_COPILOT_TOKEN", "GH_COPILOT_TOKEN"),
}


def is_placeholder(val: Optional[str]) -> bool:
    """Return True if ``val`` looks like a placeholder or test value.

    The check is case-insensitive and ignores surrounding whitespace.
    """
    if val is None:
        return False
    v = str(val).strip().lower()
    return "placeholder" in v or "changeme" in v or "example" in v or v.startswith("test_")


def get_env_var_candidates(provider: str) -> Iterable[str]:
    """Yield acceptable environment variable names, canonical first."""
    p = (provider or "").lower()
    canonical = ENV_MAP.get(p)
    if canonical:
        yield canonical
    for alias in ENV_ALIASES.get(p, ()):
        if alias != canonical:
            yield alias


def resolve_provider_key(provider: str = "copilot") -> Tuple[Optional[str], Optional[str]]:
    """Resolve the credential from the environment.

    Returns
    -------
    Tuple[Optional[str], Optional[str]]
        ``(value, env_var_used)`` for the first non-empty, non-placeholder
        candidate, or ``(None, None)``.
    """
    for name in get_env_var_candidates(provider):
        val = os.environ.get(name)
        if val and val.strip() and not is_placeholder(val):
            return val.strip(), name
    return None, None


__all__ = [
    "ENV_MAP",
    "ENV_ALIASES",
    "is_placeholder",
    "get_env_var_candidates",
    "resolve_provider_key",
]
