"""Vision detection and fallback model resolution."""
from __future__ import annotations

import pytest

from copilot_providers.base.dto import VisionPolicy
from copilot_providers.base.errors import VisionUnsupportedError
from copilot_providers.base.models import Message
from copilot_providers.base.repositories.model_cache import CapabilityCache
from copilot_providers.copilot.error_format import format_error_payload
from copilot_providers.copilot.vision import VisionFallbackResolver, contains_image_data_url, requires_vision
from copilot_providers.tests.utils import IMAGE_DATA_URL, TOKEN, assert_true


def _msg(content, **extra) -> Message:
    return Message.from_wire({"role": "user", "content": content, **extra})


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (f"please describe {IMAGE_DATA_URL} thanks", True),
        ("data:image/png;base64,AAAA", False),
        ("I attached an image of a cat", False),
        ("data:text/plain;base64," + "A" * 80, False),
        ("", False),
    ],
)
def test_contains_image_data_url(text: str, expected: bool) -> None:
    assert_true(contains_image_data_url(text) is expected, f"{text[:40]!r} -> {not expected}")


def test_threshold_is_configurable() -> None:
    assert_true(contains_image_data_url("data:image/png;base64,AAAA", min_chars=4), "4 chars >= 4")


@pytest.mark.parametrize(("length", "expected"), [(49, False), (50, True), (60, True)])
def test_default_threshold_boundary(length: int, expected: bool) -> None:
    text = "data:image/png;base64," + "A" * length
    assert_true(contains_image_data_url(text) is expected, f"{length} chars -> {not expected}")


def test_plain_and_json_like_strings() -> None:
    image = [Message.from_wire({"role": "user", "content": "data:image/png;base64," + "A" * 60})]
    assert_true(requires_vision(image), "bare data URL message")
    wordy = [Message.from_wire({"role": "user", "content": "this json has the word image in it"})]
    assert_true(not requires_vision(wordy), "mentioning image is not an image")


def test_requires_vision_triggers() -> None:
    assert_true(not requires_vision([_msg("hello")]), "plain text")
    assert_true(requires_vision([_msg("x", type="file")]), "message-level file type")
    assert_true(requires_vision([_msg("x", type="image_url")]), "message-level image_url type")
    parts = [{"type": "text", "text": "what is this"}, {"type": "image_url", "image_url": {"url": "https://a/b.png"}}]
    assert_true(requires_vision([_msg("hi"), _msg(parts)]), "structured image part")
    assert_true(requires_vision([_msg([{"type": "text", "text": IMAGE_DATA_URL}])]), "data URL inside a text part")


@pytest.fixture()
def cache(fetcher, clock) -> CapabilityCache:
    return CapabilityCache(fetcher, clock=clock)


def _image_messages():
    return [_msg([{"type": "image_url", "image_url": {"url": IMAGE_DATA_URL}}])]


def test_capable_model_is_kept(cache) -> None:
    cache.get_available_models(TOKEN)
    resolver = VisionFallbackResolver(cache)
    chosen = resolver.resolve_model("claude-sonnet-4", _image_messages(), TOKEN)
    assert_true(chosen == "claude-sonnet-4", chosen)


def test_text_only_request_never_substitutes(cache) -> None:
    resolver = VisionFallbackResolver(cache)
    policy = VisionPolicy(enabled=True, fallback_model="gpt-4o")
    assert_true(resolver.resolve_model("gpt-4o-mini", [_msg("hi")], TOKEN, policy) == "gpt-4o-mini", "kept")


def test_fallback_substitutes_incapable_model(cache) -> None:
    cache.get_available_models(TOKEN)
    resolver = VisionFallbackResolver(cache)
    policy = VisionPolicy(enabled=True, fallback_model="gpt-4o")
    assert_true(resolver.resolve_model("gpt-4o-mini", _image_messages(), TOKEN, policy) == "gpt-4o", "fallback")


def test_disabled_fallback_raises(cache) -> None:
    cache.get_available_models(TOKEN)
    resolver = VisionFallbackResolver(cache)
    with pytest.raises(VisionUnsupportedError) as ei:
        resolver.resolve_model("gpt-4o-mini", _image_messages(), TOKEN, VisionPolicy(enabled=False))
    assert_true(ei.value.model == "gpt-4o-mini", "model recorded on the error")


def test_enabled_fallback_without_model_raises(cache) -> None:
    resolver = VisionFallbackResolver(cache)
    with pytest.raises(VisionUnsupportedError) as ei:
        resolver.resolve_model("gpt-4o-mini", _image_messages(), TOKEN, VisionPolicy(enabled=True))
    assert_true("no fallback model" in ei.value.message, ei.value.message)
    assert_true("gpt-4o-mini" in ei.value.message, "requested model named in the explanation")
    payload = format_error_payload(ei.value)
    assert_true("gpt-4o-mini" in payload["error"]["message"], f"{payload}")


def test_static_table_used_when_cache_is_empty(cache, fetcher) -> None:
    resolver = VisionFallbackResolver(cache)
    assert_true(resolver.supports_vision(TOKEN, "gpt-4o") is True, "static table says yes")
    assert_true(resolver.supports_vision(TOKEN, "gpt-4o-mini") is False, "static table says no")
    assert_true(resolver.supports_vision(TOKEN, "mystery-model") is False, "unknown means no vision")
    assert_true(fetcher.calls == [], "resolver never fetches")


def test_live_listing_beats_static_table(clock) -> None:
    from copilot_providers.tests.utils import RecordingFetcher

    # Listing claims gpt-4o-mini gained vision; the bundled table says otherwise.
    listing = {"data": [{"id": "gpt-4o-mini", "capabilities": {"supports": {"vision": True}}}]}
    cache = CapabilityCache(RecordingFetcher(listing), clock=clock)
    cache.get_available_models(TOKEN)
    assert_true(VisionFallbackResolver(cache).supports_vision(TOKEN, "gpt-4o-mini"), "live data wins")
