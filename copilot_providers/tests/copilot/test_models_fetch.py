"""``GET /models`` over a mock transport."""
from __future__ import annotations

import httpx
import pytest

from copilot_providers.base.errors import ErrorCode, ProviderError
from copilot_providers.copilot.get_copilot_models import fetch_models_via_http, make_models_fetcher
from copilot_providers.tests.utils import LISTING, TOKEN, assert_true, mock_client


def test_fetch_sends_model_access_headers() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=LISTING)

    models = fetch_models_via_http(TOKEN, base_url="https://copilot.test/", client=mock_client(handler))
    assert_true(len(models) == 4, "listing parsed")
    req = seen[0]
    assert_true(str(req.url) == "https://copilot.test/models", str(req.url))
    assert_true(req.headers["Authorization"] == f"Bearer {TOKEN}", "bearer auth")
    assert_true(req.headers["X-GitHub-Api-Version"] == "2025-05-01", "api version header")
    assert_true(req.headers["OpenAI-Intent"] == "model-access", "intent header")


@pytest.mark.parametrize(("status", "code"), [(401, ErrorCode.AUTH), (503, ErrorCode.UNAVAILABLE)])
def test_http_errors_are_classified(status: int, code: ErrorCode) -> None:
    client = mock_client(lambda _r: httpx.Response(status, text="nope"))
    with pytest.raises(ProviderError) as ei:
        make_models_fetcher(base_url="https://copilot.test", client=client)(TOKEN)
    assert_true(ei.value.code is code and ei.value.status == status, f"unexpected {ei.value}")
    assert_true(TOKEN not in ei.value.message, "token must not leak into errors")


def test_transport_failure_is_transient() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProviderError) as ei:
        fetch_models_via_http(TOKEN, base_url="https://copilot.test", client=mock_client(handler))
    assert_true(ei.value.code is ErrorCode.TRANSIENT, f"unexpected {ei.value.code}")


def test_non_json_body() -> None:
    client = mock_client(lambda _r: httpx.Response(200, text="<html>"))
    with pytest.raises(ProviderError) as ei:
        fetch_models_via_http(TOKEN, base_url="https://copilot.test", client=client)
    assert_true(ei.value.code is ErrorCode.INTERNAL, "non-JSON body is an internal error")
