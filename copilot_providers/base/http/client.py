"""Shared HTTP client pool.

Provides a thread-safe pool of reusable ``httpx.Client`` instances keyed by
``(base_url, purpose)`` so the model listing, chat and device-flow call
sites reuse connections instead of allocating a client per request.

Timeouts derive from :func:`get_timeout_config`; per-request overrides are
passed by the caller (``client.post(..., timeout=...)``).

Tests swap the pool for ``httpx.MockTransport``-backed clients through
:func:`set_httpx_client`. All pooled clients are closed at interpreter exit.
"""

from __future__ import annotations

import atexit
import threading
from typing import Dict, Optional, Tuple

import httpx

from ..timeouts import get_timeout_config

_CLIENTS: Dict[Tuple[Optional[str], str], httpx.Client] = {}
_LOCK = threading.RLock()


def get_httpx_client(base_url: Optional[str], purpose: str) -> httpx.Client:
    """Return a pooled ``httpx.Client`` for the given base URL and purpose.

    Parameters:
        base_url: API base URL set on the client so callers can issue
            relative requests. ``None`` groups clients under a shared key.
        purpose: Short discriminator for separate pools (``"models"``,
            ``"chat"``, ``"auth"``).

    Returns:
        A reusable ``httpx.Client`` instance.
    """
    key = (base_url, purpose)
    client = _CLIENTS.get(key)
    if client is not None:
        return client

    with _LOCK:
        client = _CLIENTS.get(key)
        if client is not None:
            return client
        cfg = get_timeout_config()
        timeout = httpx.Timeout(cfg.http_timeout_seconds, connect=cfg.connect_timeout_seconds)
        client = httpx.Client(base_url=base_url, timeout=timeout) if base_url else httpx.Client(timeout=timeout)
        _CLIENTS[key] = client
        return client


def set_httpx_client(base_url: Optional[str], purpose: str, client: httpx.Client) -> None:
    """Install ``client`` in the pool (used by tests and embedding hosts)."""
    with _LOCK:
        previous = _CLIENTS.get((base_url, purpose))
        _CLIENTS[(base_url, purpose)] = client
    if previous is not None and previous is not client:
        previous.close()


def close_all_clients() -> None:
    """Close and clear all pooled HTTP clients."""
    with _LOCK:
        clients = list(_CLIENTS.values())
        _CLIENTS.clear()
    for c in clients:
        c.close()


atexit.register(close_all_clients)

__all__ = ["get_httpx_client", "set_httpx_client", "close_all_clients"]
