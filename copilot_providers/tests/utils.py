"""Shared helpers for the Copilot provider tests.

Exports:
    - assert_true(condition, message): explicit assertion helper
    - LISTING / TOKEN: sample ``GET /models`` payload and credential
    - FakeClock, RecordingFetcher, CopilotApi: test doubles
    - mock_client(handler): ``httpx.Client`` over ``httpx.MockTransport``
"""
from __future__ import annotations

import json
from typing import Any, Callable, Dict, List, Optional

import httpx

from copilot_providers.base.repositories.model_cache import descriptors_from_listing

TOKEN = "gho_test_token_123"

LISTING: Dict[str, Any] = {
    "object": "list",
    "data": [
        {
            "id": "gpt-4o",
            "name": "GPT-4o",
            "vendor": "Azure OpenAI",
            "version": "gpt-4o-2024-11-20",
            "model_picker_enabled": True,
            "model_picker_category": "versatile",
            "capabilities": {
                "type": "chat",
                "family": "gpt-4o",
                "supports": {"vision": True, "tool_calls": True, "streaming": True, "parallel_tool_calls": True},
                "limits": {"max_context_window_tokens": 128000, "max_output_tokens": 16384},
            },
            "billing": {"is_premium": False, "multiplier": 0},
        },
        {
            "id": "gpt-4o-mini",
            "name": "GPT-4o mini",
            "vendor": "Azure OpenAI",
            "capabilities": {
                "type": "chat",
                "supports": {"tool_calls": True, "streaming": True},
                "limits": {"max_context_window_tokens": 128000, "max_output_tokens": 4096},
            },
        },
        {
            "id": "claude-sonnet-4",
            "name": "Claude Sonnet 4",
            "vendor": "Anthropic",
            "model_picker_enabled": True,
            "model_picker_category": "powerful",
            "capabilities": {
                "type": "chat",
                "supports": {"vision": True, "tool_calls": True, "streaming": True},
                "limits": {"max_context_window_tokens": 200000, "max_output_tokens": 16000},
            },
            "billing": {"is_premium": True, "multiplier": 1},
        },
        {
            "id": "text-embedding-3-small",
            "name": "Embedding V3 small",
            "capabilities": {"type": "embeddings", "supports": {}},
        },
    ],
}

# 60 base64 characters, above the detection threshold.
IMAGE_DATA_URL = "data:image/png;base64,iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mNk"


def assert_true(condition: bool, message: str) -> None:
    """Raise AssertionError with ``message`` if ``condition`` is false."""
    if not condition:
        raise AssertionError(message)


class FakeClock:
    """Manually advanced time source (seconds)."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RecordingFetcher:
    """Fetcher double: records calls, returns the listing or raises ``error``."""

    def __init__(self, payload: Any = None) -> None:
        self.payload = LISTING if payload is None else payload
        self.calls: List[str] = []
        self.error: Optional[Exception] = None

    def __call__(self, token: str):
        self.calls.append(token)
        if self.error is not None:
            raise self.error
        return descriptors_from_listing(self.payload)


Handler = Callable[[httpx.Request], httpx.Response]


def mock_client(handler: Handler) -> httpx.Client:
    return httpx.Client(transport=httpx.MockTransport(handler))


def chat_completion(content: str = "Hello there", model: str = "gpt-4o") -> Dict[str, Any]:
    return {
        "id": "chatcmpl-abc",
        "object": "chat.completion",
        "created": 1700000000,
        "model": model,
        "choices": [{"index": 0, "message": {"role": "assistant", "content": content}, "finish_reason": "stop"}],
        "usage": {"prompt_tokens": 5, "completion_tokens": 2, "total_tokens": 7},
    }


class CopilotApi:
    """Routes ``/models`` and ``/chat/completions``; records chat requests.

    ``chat_responses`` is consumed in order before falling back to a
    successful completion echoing the requested model.
    """

    def __init__(self) -> None:
        self.chat_bodies: List[Dict[str, Any]] = []
        self.chat_headers: List[httpx.Headers] = []
        self.chat_responses: List[httpx.Response] = []
        self.models_calls = 0
        self.models_status = 200

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.url.path.endswith("/models"):
            self.models_calls += 1
            if self.models_status != 200:
                return httpx.Response(self.models_status, text="models down")
            return httpx.Response(200, json=LISTING)
        if request.url.path.endswith("/chat/completions"):
            body = json.loads(request.content)
            self.chat_bodies.append(body)
            self.chat_headers.append(request.headers)
            if self.chat_responses:
                return self.chat_responses.pop(0)
            return httpx.Response(200, json=chat_completion(model=body["model"]))
        return httpx.Response(404, text="not found")
