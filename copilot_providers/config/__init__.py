"""Configuration layer for the Copilot provider.

Merge order (later wins):
    1. Built-in defaults (``config.defaults``)
    2. Optional external file named by ``COPILOT_PROVIDERS_CONFIG_FILE``
       (JSON first, then YAML), section ``copilot``
    3. Environment variables (``COPILOT_MODEL``, ``COPILOT_BASE_URL``, ...)
    4. Credential from ``COPILOT_OAUTH_TOKEN`` or its aliases, when still unset
    5. In-code overrides

External file example::

    copilot:
      model: claude-sonnet-4
      models_cache_ttl_seconds: 1800

Unknown keys pass through untouched.
"""
from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from .defaults import (
    COPILOT_DEFAULT_BASE_URL,
    COPILOT_DEFAULT_MODEL,
    COPILOT_MODELS_API_VERSION,
    MODELS_CACHE_TTL_SECONDS,
    MODELS_REFRESH_COOLDOWN_SECONDS,
    VISION_BASE64_MIN_CHARS,
)
from .env import is_placeholder, resolve_provider_key

CONFIG_FILE_ENV = "COPILOT_PROVIDERS_CONFIG_FILE"

DEFAULTS: Dict[str, Dict[str, Any]] = {
    "copilot": {
        "model": COPILOT_DEFAULT_MODEL,
        "base_url": COPILOT_DEFAULT_BASE_URL,
        "models_api_version": COPILOT_MODELS_API_VERSION,
        "models_cache_ttl_seconds": MODELS_CACHE_TTL_SECONDS,
        "models_refresh_cooldown_seconds": MODELS_REFRESH_COOLDOWN_SECONDS,
        "vision_base64_min_chars": VISION_BASE64_MIN_CHARS,
    },
}

ENV_FIELD_MAP = {
    "model": ("MODEL", str),
    "base_url": ("BASE_URL", str),
    "models_cache_ttl_seconds": ("MODELS_CACHE_TTL_SECONDS", float),
    "models_refresh_cooldown_seconds": ("MODELS_REFRESH_COOLDOWN_SECONDS", float),
}

_FILE_CACHE: Optional[Dict[str, Any]] = None
_FILE_CACHE_PATH: Optional[str] = None


def _load_external_config() -> Dict[str, Any]:
    """Load (once per path) the optional JSON/YAML config file."""
    global _FILE_CACHE, _FILE_CACHE_PATH  # noqa: PLW0603 - module cache
    path = os.getenv(CONFIG_FILE_ENV) or ""
    if _FILE_CACHE is not None and _FILE_CACHE_PATH == path:
        return _FILE_CACHE
    data: Any = {}
    p = Path(path) if path else None
    if p is not None and p.is_file():
        text = p.read_text(encoding="utf-8")
        try:
            data = json.loads(text)
        except ValueError:
            data = yaml.safe_load(text) or {}
    _FILE_CACHE = data if isinstance(data, dict) else {}
    _FILE_CACHE_PATH = path
    return _FILE_CACHE


def _env_overrides(provider: str) -> Dict[str, Any]:
    out: Dict[str, Any] = {}
    prefix = provider.upper()
    for field, (suffix, cast) in ENV_FIELD_MAP.items():
        raw = os.getenv(f"{prefix}_{suffix}")
        if raw is None or not raw.strip():
            continue
        try:
            out[field] = cast(raw.strip())
        except ValueError:
            continue
    return out


def get_provider_config(provider: str = "copilot", overrides: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
    """Return merged configuration for ``provider`` (see module docstring)."""
    name = (provider or "").lower().strip()
    cfg: Dict[str, Any] = {}
    cfg |= DEFAULTS.get(name, {})

    file_cfg = _load_external_config().get(name)
    if isinstance(file_cfg, dict):
        cfg |= file_cfg

    cfg |= _env_overrides(name)

    if not cfg.get("api_key") or is_placeholder(cfg.get("api_key")):
        key, _ = resolve_provider_key(name)
        cfg["api_key"] = key

    if overrides:
        cfg |= {k: v for k, v in overrides.items() if v is not None}
    return cfg


__all__ = [
    "CONFIG_FILE_ENV",
    "DEFAULTS",
    "get_provider_config",
]
