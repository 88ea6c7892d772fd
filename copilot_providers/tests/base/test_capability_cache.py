"""Capability cache freshness, cooldown and failure semantics.

Covers:
- Fresh entries are served without fetching (same tuple object).
- Stale entries refresh once the cooldown has elapsed since the last attempt.
- Inside the cooldown the stale listing is served without network access.
- Fetch failures serve stale data; with no entry they raise.
- Invalid credentials raise before any fetch.
- Tri-state lookups, capability summaries, cache info and invalidation.
"""
from __future__ import annotations

import pytest

from copilot_providers.base.errors import ErrorCode, InvalidCredentialError, ProviderError, ProviderUnavailableError
from copilot_providers.base.repositories.model_cache import CapabilityCache, credential_cache_key
from copilot_providers.tests.utils import TOKEN, assert_true


def _cache(fetcher, clock, **kw) -> CapabilityCache:
    return CapabilityCache(fetcher, clock=clock, **kw)


def test_first_read_fetches_and_second_read_hits(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    first = cache.get_available_models(TOKEN)
    clock.advance(10)
    second = cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 1, f"expected one fetch, got {len(fetcher.calls)}")
    assert_true(first is second, "fresh read should return the cached tuple")
    assert_true([m.id for m in first][:2] == ["gpt-4o", "gpt-4o-mini"], "listing order must be preserved")


def test_stale_entry_refreshes_after_cooldown(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    cache.get_available_models(TOKEN)
    clock.advance(3601)
    cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 2, "stale entry past cooldown should refetch")


def test_cooldown_serves_stale_without_fetch(fetcher, clock) -> None:
    cache = _cache(fetcher, clock, ttl_seconds=100, refresh_cooldown_seconds=300)
    first = cache.get_available_models(TOKEN)
    clock.advance(150)
    again = cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 1, "inside cooldown no fetch may happen")
    assert_true(again is first, "stale listing should be served unchanged")
    clock.advance(151)
    cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 2, "cooldown elapsed: one refresh expected")


def test_failed_refresh_serves_stale_and_consumes_cooldown(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    first = cache.get_available_models(TOKEN)
    clock.advance(3601)
    fetcher.error = RuntimeError("network down")
    stale = cache.get_available_models(TOKEN)
    assert_true(stale is first, "failure must serve the stale listing")
    clock.advance(60)
    cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 2, "failed attempt should start the cooldown")
    info = cache.get_cache_info(TOKEN)
    assert_true(info is not None and info.stale, "entry should report stale after a failed refresh")


def test_failure_without_entry_raises_unavailable(fetcher, clock) -> None:
    fetcher.error = ProviderError(code=ErrorCode.AUTH, message="401 Unauthorized", status=401)
    cache = _cache(fetcher, clock)
    with pytest.raises(ProviderUnavailableError) as ei:
        cache.get_available_models(TOKEN)
    assert_true(ei.value.code is ErrorCode.UNAVAILABLE, "unavailable code expected")
    assert_true(ei.value.status == 401, "upstream status should be preserved")
    assert_true(cache.cached_keys() == [], "failed first fetch must not create an entry")
    with pytest.raises(ProviderUnavailableError):
        cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 2, "no entry means no cooldown: every call fetches")


@pytest.mark.parametrize("credential", ["", None, 123])
def test_invalid_credential_raises_without_fetch(fetcher, clock, credential) -> None:
    cache = _cache(fetcher, clock)
    with pytest.raises(InvalidCredentialError):
        cache.get_available_models(credential)  # type: ignore[arg-type]
    assert_true(fetcher.calls == [], "no fetch may happen for a degenerate credential")


def test_credentials_are_partitioned(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    cache.get_available_models(TOKEN)
    cache.get_available_models("another-token")
    assert_true(len(fetcher.calls) == 2, "each credential has its own entry")
    assert_true(
        sorted(cache.cached_keys()) == sorted([credential_cache_key(TOKEN), credential_cache_key("another-token")]),
        "cache keys should be hashed credentials",
    )
    assert_true(all(TOKEN not in k for k in cache.cached_keys()), "raw token must never be a key")


def test_lookup_capability_is_tri_state(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    assert_true(cache.supports_vision(TOKEN, "gpt-4o") is None, "nothing cached yet: unknown")
    cache.get_available_models(TOKEN)
    assert_true(cache.supports_vision(TOKEN, "gpt-4o") is True, "gpt-4o supports vision")
    assert_true(cache.supports_vision(TOKEN, "gpt-4o-mini") is False, "gpt-4o-mini lacks vision")
    assert_true(cache.supports_vision(TOKEN, "no-such-model") is None, "unknown model: unknown")
    assert_true(cache.lookup_capability(TOKEN, "gpt-4o", "teleport") is None, "unknown capability: unknown")
    assert_true(cache.lookup_capability(TOKEN, "gpt-4o", "tool_calls") is True, "tool calls supported")
    assert_true(len(fetcher.calls) == 1, "lookups never fetch")


def test_model_capabilities_summary_defaults(clock) -> None:
    from copilot_providers.tests.utils import RecordingFetcher

    bare = RecordingFetcher({"data": [{"id": "bare-model"}]})
    cache = _cache(bare, clock)
    cache.get_available_models(TOKEN)
    summary = cache.get_model_capabilities(TOKEN, "bare-model")
    assert_true(summary is not None, "summary expected for a cached model")
    assert_true(summary.max_context_tokens == 128000, "default context window")
    assert_true(summary.max_output_tokens == 4096, "default output limit")
    assert_true(summary.vision is False and summary.is_premium is False, "flags default to false")
    assert_true(cache.get_model_capabilities(TOKEN, "missing") is None, "uncached model gives None")


def test_cache_info_and_invalidate(fetcher, clock) -> None:
    cache = _cache(fetcher, clock)
    assert_true(cache.get_cache_info(TOKEN) is None, "no info before the first fetch")
    cache.get_available_models(TOKEN)
    clock.advance(600)
    info = cache.get_cache_info(TOKEN)
    assert_true(info is not None, "info expected")
    assert_true(info.models_count == 4, f"unexpected count {info.models_count}")
    assert_true(info.expires_in_seconds == pytest.approx(3000.0), "expiry countdown")
    assert_true(info.fetched_at.endswith("Z"), "ISO UTC timestamp expected")
    assert_true(not info.stale, "fresh entry")

    cache.invalidate(TOKEN)
    assert_true(cache.get_cache_info(TOKEN) is None, "entry removed")
    cache.get_available_models(TOKEN)
    assert_true(len(fetcher.calls) == 2, "invalidated entry refetches immediately")
    cache.invalidate_all()
    assert_true(cache.cached_keys() == [], "all entries removed")
