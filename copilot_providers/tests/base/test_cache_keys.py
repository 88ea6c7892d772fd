"""Credential hashing into capability cache keys."""
from __future__ import annotations

import re

import pytest

from copilot_providers.base.repositories.model_cache import DEFAULT_CACHE_KEY, credential_cache_key
from copilot_providers.tests.utils import assert_true


@pytest.mark.parametrize(
    ("credential", "expected"),
    [
        ("a", "models_2p"),
        ("ab", "models_2e9"),
        ("é", "models_6h"),
        # Astral characters hash as two UTF-16 surrogate units.
        ("\U0001F600", "models_11zz7"),
    ],
)
def test_known_keys(credential: str, expected: str) -> None:
    got = credential_cache_key(credential)
    assert_true(got == expected, f"{credential!r}: expected {expected}, got {got}")


@pytest.mark.parametrize("credential", ["", None, 42, b"bytes"])
def test_degenerate_credentials_use_sentinel(credential) -> None:
    assert_true(credential_cache_key(credential) == DEFAULT_CACHE_KEY, "sentinel key expected")


def test_long_tokens_wrap_to_base36() -> None:
    token = "gho_" + "x" * 200
    key = credential_cache_key(token)
    assert_true(re.fullmatch(r"models_[0-9a-z]+", key) is not None, f"unexpected key shape {key}")
    assert_true(key == credential_cache_key(token), "hash must be deterministic")
    assert_true(key != credential_cache_key(token + "y"), "different tokens should differ")


def test_whitespace_token_is_not_the_sentinel() -> None:
    key = credential_cache_key("   ")
    assert_true(key == "models_oio", key)
    assert_true(key != DEFAULT_CACHE_KEY, "only empty credentials share the sentinel")
