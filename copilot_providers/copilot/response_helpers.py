"""Shape upstream chat completions into the OpenAI ``chat.completion`` format."""

from __future__ import annotations

import json
import re
import time
from typing import Any, Callable, Dict, List, Optional

_JSON_FENCE = re.compile(r"^```(?:json)?\s*\n([\s\S]*?)\n```\s*$")

DEFAULT_USAGE = {"prompt_tokens": 0, "completion_tokens": 0, "total_tokens": 0}


def strip_json_fence(content: Any) -> Any:
    """Return the payload of a ```json fenced block, trimmed.

    Content without a fence is returned trimmed; non-strings pass through.
    """
    if not isinstance(content, str):
        return content
    trimmed = content.strip()
    match = _JSON_FENCE.match(trimmed)
    if match and match.group(1):
        return match.group(1).strip()
    return trimmed


def _shape_choice(choice: Dict[str, Any], idx: int, unwrap_json: bool) -> Dict[str, Any]:
    message = choice.get("message") or {}
    content = message.get("content")
    if content is not None and unwrap_json:
        content = strip_json_fence(content)
    shaped_message: Dict[str, Any] = {
        "role": message.get("role", "assistant"),
        "content": content,
        "refusal": message.get("refusal") or None,
        "annotations": message.get("annotations") or [],
    }
    tool_calls = message.get("tool_calls")
    if tool_calls:
        shaped_message["tool_calls"] = tool_calls
    return {
        "index": choice.get("index", idx),
        "message": shaped_message,
        "logprobs": choice.get("logprobs") or None,
        "finish_reason": choice.get("finish_reason"),
    }


def build_openai_response(
    upstream: Dict[str, Any],
    *,
    requested_model: str,
    response_format: Optional[Dict[str, Any]] = None,
    clock: Callable[[], float] = time.time,
) -> Dict[str, Any]:
    """Build the item output from an upstream completion.

    Parameters:
        upstream: Parsed JSON body returned by ``/chat/completions``.
        requested_model: Model name the caller asked for; echoed back even
            when an alias or vision fallback changed the upstream model.
        response_format: Effective response format; ``json_object`` unwraps
            fenced JSON in message content (content stays a string).
        clock: Time source for generated ``id``/``created`` values.
    """
    now = clock()
    unwrap = bool(response_format and response_format.get("type") == "json_object")
    choices: List[Dict[str, Any]] = [
        _shape_choice(c, i, unwrap) for i, c in enumerate(upstream.get("choices") or []) if isinstance(c, dict)
    ]
    out: Dict[str, Any] = {
        "id": upstream.get("id") or f"chatcmpl-{int(now * 1000)}",
        "object": upstream.get("object") or "chat.completion",
        "created": upstream.get("created") or int(now),
        "model": requested_model,
        "choices": choices,
        "usage": upstream.get("usage") or dict(DEFAULT_USAGE),
    }
    if upstream.get("system_fingerprint"):
        out["system_fingerprint"] = upstream["system_fingerprint"]
    return out


def aggregate_sse_completion(text: str) -> Dict[str, Any]:
    """Fold a ``text/event-stream`` body into one completion object.

    Content and tool-call deltas are concatenated per choice index; the
    last ``finish_reason``, ``usage`` and ids seen win.
    """
    result: Dict[str, Any] = {"object": "chat.completion", "choices": []}
    choices: Dict[int, Dict[str, Any]] = {}
    for line in text.splitlines():
        line = line.strip()
        if not line.startswith("data:"):
            continue
        data = line[len("data:"):].strip()
        if not data or data == "[DONE]":
            continue
        try:
            chunk = json.loads(data)
        except ValueError:
            continue
        if not isinstance(chunk, dict):
            continue
        for key in ("id", "created", "system_fingerprint", "usage"):
            if chunk.get(key):
                result[key] = chunk[key]
        for raw in chunk.get("choices") or []:
            if isinstance(raw, dict):
                _merge_delta(choices, raw)
    result["choices"] = [choices[i] for i in sorted(choices)]
    return result


def _merge_delta(choices: Dict[int, Dict[str, Any]], raw: Dict[str, Any]) -> None:
    idx = int(raw.get("index", 0) or 0)
    choice = choices.setdefault(
        idx, {"index": idx, "message": {"role": "assistant", "content": None}, "finish_reason": None}
    )
    delta = raw.get("delta") or {}
    message = choice["message"]
    if delta.get("role"):
        message["role"] = delta["role"]
    if isinstance(delta.get("content"), str):
        message["content"] = (message["content"] or "") + delta["content"]
    for call in delta.get("tool_calls") or []:
        _merge_tool_call(message.setdefault("tool_calls", []), call)
    if raw.get("finish_reason"):
        choice["finish_reason"] = raw["finish_reason"]


def _merge_tool_call(calls: List[Dict[str, Any]], call: Dict[str, Any]) -> None:
    pos = int(call.get("index", len(calls)) or 0)
    while len(calls) <= pos:
        calls.append({"id": None, "type": "function", "function": {"name": "", "arguments": ""}})
    target = calls[pos]
    if call.get("id"):
        target["id"] = call["id"]
    fn = call.get("function") or {}
    if fn.get("name"):
        target["function"]["name"] += fn["name"]
    if fn.get("arguments"):
        target["function"]["arguments"] += fn["arguments"]


__all__ = ["DEFAULT_USAGE", "strip_json_fence", "build_openai_response", "aggregate_sse_completion"]
