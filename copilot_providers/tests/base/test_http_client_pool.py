"""Shared httpx client pool."""
from __future__ import annotations

import httpx

from copilot_providers.base.http import close_all_clients, get_httpx_client, set_httpx_client
from copilot_providers.tests.utils import assert_true


def test_same_key_returns_same_instance() -> None:
    c1 = get_httpx_client("https://api.example.com", purpose="chat")
    c2 = get_httpx_client("https://api.example.com", purpose="chat")
    assert_true(c1 is c2, "pooled clients should be reused for the same key")


def test_purpose_and_base_url_partition_the_pool() -> None:
    chat = get_httpx_client("https://api.example.com", purpose="chat")
    assert_true(chat is not get_httpx_client("https://api.example.com", purpose="models"), "purpose")
    assert_true(chat is not get_httpx_client("https://api.other.com", purpose="chat"), "base url")


def test_set_httpx_client_replaces_and_closes_previous() -> None:
    old = get_httpx_client(None, "auth")
    new = httpx.Client()
    set_httpx_client(None, "auth", new)
    assert_true(get_httpx_client(None, "auth") is new, "installed client returned")
    assert_true(old.is_closed, "replaced client closed")
    close_all_clients()
    assert_true(new.is_closed, "close_all_clients closes pooled clients")
