"""Timeout configuration for Copilot HTTP calls.

Values are read from the environment once and cached for the process;
the cache is rebuilt when the relevant environment variables change so
tests can adjust them with ``monkeypatch``.

Supported environment variables (all optional, seconds):
    COPILOT_TIMEOUT_HTTP_SECONDS     per-request timeout for pooled clients
    COPILOT_TIMEOUT_CONNECT_SECONDS  connect phase timeout
    COPILOT_TIMEOUT_AUTH_SECONDS     device-flow requests against github.com
"""
from __future__ import annotations

import os
from dataclasses import dataclass


@dataclass(frozen=True)
class TimeoutConfig:
    """Normalized timeout values in seconds.

    Attributes:
        http_timeout_seconds: Default read/write timeout for API calls. The
            chat pipeline overrides it per request from its options.
        connect_timeout_seconds: Connection establishment timeout.
        auth_timeout_seconds: Timeout for device-flow calls.
    """

    http_timeout_seconds: float = 60.0
    connect_timeout_seconds: float = 10.0
    auth_timeout_seconds: float = 30.0


_ENV_NAMES = (
    "COPILOT_TIMEOUT_HTTP_SECONDS",
    "COPILOT_TIMEOUT_CONNECT_SECONDS",
    "COPILOT_TIMEOUT_AUTH_SECONDS",
)

_CACHED: TimeoutConfig | None = None
_ENV_GUARD: str | None = None


def _parse_env_float(name: str, default: float) -> float:
    """Read ``name`` as a positive float, falling back to ``default``."""
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        val = float(raw)
    except ValueError:
        return default
    return val if val > 0 else default


def get_timeout_config() -> TimeoutConfig:
    """Return the process-cached :class:`TimeoutConfig`."""
    global _CACHED, _ENV_GUARD  # noqa: PLW0603 - module cache
    guard = "/".join(os.getenv(n, "") for n in _ENV_NAMES)
    if _CACHED is not None and _ENV_GUARD == guard:
        return _CACHED
    defaults = TimeoutConfig()
    _CACHED = TimeoutConfig(
        http_timeout_seconds=_parse_env_float(_ENV_NAMES[0], defaults.http_timeout_seconds),
        connect_timeout_seconds=_parse_env_float(_ENV_NAMES[1], defaults.connect_timeout_seconds),
        auth_timeout_seconds=_parse_env_float(_ENV_NAMES[2], defaults.auth_timeout_seconds),
    )
    _ENV_GUARD = guard
    return _CACHED


def ms_to_seconds(value_ms: float | int | None, default: float) -> float:
    """Convert a millisecond option to seconds; non-positive values use ``default``."""
    if value_ms is None:
        return default
    try:
        ms = float(value_ms)
    except (TypeError, ValueError):
        return default
    return ms / 1000.0 if ms > 0 else default


__all__ = ["TimeoutConfig", "get_timeout_config", "ms_to_seconds"]
