"""Per-credential model capability cache.

:class:`CapabilityCache` keeps the model listing for each credential in
memory, keyed by :func:`credential_cache_key`. It is an explicit object
(owned by whoever composes the request pipeline) with an injectable clock
and fetch function; there is no module-level instance.

Freshness policy
----------------
- An entry is fresh for ``ttl_seconds`` after a successful fetch.
- A stale read triggers at most one fetch, and only when
  ``refresh_cooldown_seconds`` have passed since the last fetch *attempt*
  for that key. Inside the cooldown the stale listing is returned without
  network access.
- A failed fetch never evicts an entry: the stale listing is served. Only a
  failure with no entry at all raises :class:`ProviderUnavailableError`.

Concurrent callers may both observe a stale entry and both fetch; the
second write simply replaces the first. No lock is held across the fetch.
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ...capabilities import CAP_VISION, capability_of, find_model
from ...errors import InvalidCredentialError, ProviderUnavailableError, classify_exception
from ...logging import LogContext, get_logger, log_event, normalized_log_event, redact_token
from ...models import CacheInfo, ModelCapabilitiesSummary, ModelDescriptor
from .entry import CacheEntry
from .keys import credential_cache_key, is_valid_credential
from .parsing import iso_from_epoch

ModelsFetcher = Callable[[str], Sequence[ModelDescriptor]]

DEFAULT_TTL_SECONDS = 3600.0
DEFAULT_REFRESH_COOLDOWN_SECONDS = 300.0
DEFAULT_CONTEXT_TOKENS = 128000
DEFAULT_OUTPUT_TOKENS = 4096


class CapabilityCache:
    """Cache of model listings per credential.

    Parameters:
        fetcher: Callable performing one outbound listing fetch for a
            credential. It may raise any exception; failures are absorbed
            whenever cached data exists.
        ttl_seconds: Freshness window after a successful fetch.
        refresh_cooldown_seconds: Minimum spacing between fetch attempts
            for one credential once an entry exists.
        clock: Returns the current time in seconds (``time.time`` by default).
        logger: Optional logger; defaults to ``copilot.cache``.
    """

    def __init__(
        self,
        fetcher: ModelsFetcher,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        refresh_cooldown_seconds: float = DEFAULT_REFRESH_COOLDOWN_SECONDS,
        clock: Callable[[], float] = time.time,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._fetcher = fetcher
        self.ttl_seconds = float(ttl_seconds)
        self.refresh_cooldown_seconds = float(refresh_cooldown_seconds)
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}
        self._logger = logger or get_logger("copilot.cache")

    # ------------------------------------------------------------------ reads
    def get_available_models(self, credential: str) -> Tuple[ModelDescriptor, ...]:
        """Return the freshest known listing for ``credential``.

        Returns:
            The cached (possibly stale) or freshly fetched descriptors in
            upstream order. Repeated calls inside the TTL return the same
            tuple object.

        Raises:
            InvalidCredentialError: ``credential`` is empty or not a string.
                No fetch is attempted and no cooldown is consumed.
            ProviderUnavailableError: the fetch failed and nothing is cached.
        """
        if not is_valid_credential(credential):
            raise InvalidCredentialError()
        key = credential_cache_key(credential)
        ctx = LogContext(cache_key=key, credential=redact_token(credential))
        now = self._clock()
        entry = self._entries.get(key)

        if entry is not None and entry.is_fresh(now):
            log_event(
                self._logger,
                "cache.hit",
                ctx,
                level=logging.DEBUG,
                models=len(entry.models),
                expires_in_s=round(entry.expires_at - now, 1),
            )
            return entry.models

        if entry is not None:
            wait = entry.cooldown_remaining(now, self.refresh_cooldown_seconds)
            if wait > 0:
                log_event(self._logger, "cache.cooldown", ctx, models=len(entry.models), retry_in_s=round(wait, 1))
                return entry.models
            entry.last_attempt_at = now

        return self._refresh(credential, key, entry, now, ctx)

    def _refresh(
        self,
        credential: str,
        key: str,
        entry: Optional[CacheEntry],
        now: float,
        ctx: LogContext,
    ) -> Tuple[ModelDescriptor, ...]:
        normalized_log_event(self._logger, "cache.fetch.start", ctx, phase="fetch", attempt=1, stale=entry is not None)
        try:
            models = tuple(self._fetcher(credential))
        except Exception as exc:
            code = classify_exception(exc).value
            normalized_log_event(
                self._logger,
                "cache.fetch.error",
                ctx,
                phase="fetch",
                attempt=1,
                error_code=code,
                level=logging.WARNING,
                error=str(exc),
            )
            if entry is None:
                raise ProviderUnavailableError(
                    f"Failed to fetch Copilot models and no cached listing exists: {exc}",
                    raw=exc,
                    status=getattr(exc, "status", None),
                ) from exc
            log_event(
                self._logger,
                "cache.stale_fallback",
                ctx,
                level=logging.WARNING,
                models=len(entry.models),
                stale_for_s=round(now - entry.expires_at, 1),
            )
            return entry.models

        self._entries[key] = CacheEntry(
            cache_key=key,
            models=models,
            fetched_at=now,
            expires_at=now + self.ttl_seconds,
            last_attempt_at=now,
        )
        normalized_log_event(
            self._logger, "cache.fetch.ok", ctx, phase="fetch", attempt=1, emitted=True, models=len(models)
        )
        return models

    def get_model(self, credential: str, model_id: str) -> Optional[ModelDescriptor]:
        """Return the cached descriptor for ``model_id`` (never fetches)."""
        entry = self._entries.get(credential_cache_key(credential))
        if entry is None:
            return None
        return find_model(entry.models, model_id)

    def lookup_capability(self, credential: str, model_id: str, capability: str) -> Optional[bool]:
        """Tri-state capability answer from cached data only.

        ``None`` when the credential has no entry, the model is not in the
        cached listing, or the capability name is unknown.
        """
        return capability_of(self.get_model(credential, model_id), capability)

    def supports_vision(self, credential: str, model_id: str) -> Optional[bool]:
        return self.lookup_capability(credential, model_id, CAP_VISION)

    def get_model_capabilities(self, credential: str, model_id: str) -> Optional[ModelCapabilitiesSummary]:
        """Flattened capability view with default limits, or ``None`` when not cached."""
        model = self.get_model(credential, model_id)
        if model is None:
            return None
        caps = model.capabilities
        return ModelCapabilitiesSummary(
            vision=caps.supports_vision,
            tools=caps.supports_tool_calls,
            streaming=caps.supports_streaming,
            max_context_tokens=caps.max_context_tokens or DEFAULT_CONTEXT_TOKENS,
            max_output_tokens=caps.max_output_tokens or DEFAULT_OUTPUT_TOKENS,
            is_premium=bool(model.billing and model.billing.is_premium),
        )

    def get_cache_info(self, credential: str) -> Optional[CacheInfo]:
        entry = self._entries.get(credential_cache_key(credential))
        if entry is None:
            return None
        now = self._clock()
        return CacheInfo(
            cache_key=entry.cache_key,
            models_count=len(entry.models),
            expires_in_seconds=max(0.0, entry.expires_at - now),
            fetched_at=iso_from_epoch(entry.fetched_at),
            stale=not entry.is_fresh(now),
        )

    def cached_keys(self) -> List[str]:
        return list(self._entries)

    # ------------------------------------------------------------- eviction
    def invalidate(self, credential: str) -> None:
        """Drop the entry for ``credential`` (no-op when absent)."""
        key = credential_cache_key(credential)
        removed = self._entries.pop(key, None) is not None
        log_event(self._logger, "cache.invalidate", LogContext(cache_key=key), removed=removed)

    def invalidate_all(self) -> None:
        count = len(self._entries)
        self._entries.clear()
        log_event(self._logger, "cache.invalidate", LogContext(cache_key="*"), removed=count)


__all__ = [
    "ModelsFetcher",
    "CapabilityCache",
    "DEFAULT_TTL_SECONDS",
    "DEFAULT_REFRESH_COOLDOWN_SECONDS",
    "DEFAULT_CONTEXT_TOKENS",
    "DEFAULT_OUTPUT_TOKENS",
]
