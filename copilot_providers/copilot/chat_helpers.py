"""
Helpers turning one chat item's parameters into an upstream request body.

Each helper covers one step of the pipeline (model selection, message
parsing, validation, body assembly) so the provider class reads as a short
sequence of calls and every rule can be tested on its own.

Failure modes
-------------
Malformed parameters raise :class:`RequestValidationError`; nothing here
performs I/O.
"""

from __future__ import annotations

import json
from typing import Any, Dict, List, Optional, Tuple

from ..base.dto import MANUAL_MODEL_MARKER, AdvancedOptions, ChatItemParams
from ..base.errors import RequestValidationError
from ..base.logging import get_logger, log_event
from ..base.models import Message
from ..config.defaults import CHAT_DEFAULT_MESSAGE

_logger = get_logger("copilot.chat")

# Legacy OpenAI names rewritten to the Copilot model id actually sent upstream.
MODEL_ALIASES: Dict[str, str] = {
    "gpt-4": "gpt-4o",
    "gpt-4-turbo": "gpt-4o",
    "claude-3-5-sonnet": "claude-3.5-sonnet",
    "claude-3.5-sonnet-20241022": "claude-3.5-sonnet",
}

# Message-level ``type`` values kept from the manual input form.
MANUAL_MESSAGE_TYPES = ("text", "image_url")

FILE_PART_ERROR = (
    "File attachments cannot be used inside the 'content' array. Send the file as its own "
    'message with a message-level type instead, e.g. {"role": "user", "content": '
    '"data:image/png;base64,...", "type": "file"}.'
)


def select_model(params: ChatItemParams) -> str:
    """Return the model id the caller asked for (before alias mapping).

    Raises:
        RequestValidationError: custom entry selected but ``custom_model`` empty.
    """
    if params.model_source == "custom":
        return _require_custom(params.custom_model, "Custom model name is required when using custom model entry")
    if params.model == MANUAL_MODEL_MARKER:
        return _require_custom(
            params.custom_model, "Custom model name is required when selecting manual model entry"
        )
    if not params.model or not params.model.strip():
        raise RequestValidationError("A model must be selected")
    return params.model.strip()


def _require_custom(value: Optional[str], message: str) -> str:
    if value is None or not value.strip():
        raise RequestValidationError(message)
    return value.strip()


def map_model_alias(model: str) -> str:
    return MODEL_ALIASES.get(model, model)


def _manual_messages(params: ChatItemParams) -> List[Dict[str, Any]]:
    out: List[Dict[str, Any]] = []
    for row in params.messages:
        msg: Dict[str, Any] = {"role": row.get("role") or "user", "content": row.get("content", "")}
        if row.get("type") in MANUAL_MESSAGE_TYPES:
            msg["type"] = row["type"]
        out.append(msg)
    return out


def _json_messages(raw: Any) -> Tuple[List[Any], Optional[Dict[str, Any]]]:
    parsed = raw
    if isinstance(raw, str):
        try:
            parsed = json.loads(raw) if raw.strip() else []
        except ValueError as e:
            raise RequestValidationError(f"Failed to parse messages JSON: {e}") from e
    if isinstance(parsed, list):
        return parsed, None
    if isinstance(parsed, dict) and isinstance(parsed.get("messages"), list):
        return parsed["messages"], parsed
    raise RequestValidationError(
        "Messages JSON must be an array of messages or a request body with a 'messages' array"
    )


def parse_messages(params: ChatItemParams) -> Tuple[List[Dict[str, Any]], Optional[Dict[str, Any]]]:
    """Collect wire messages for the item.

    Returns:
        ``(messages, request_body)`` where ``request_body`` is the full JSON
        body when one was supplied in json mode. An empty message list is
        replaced with a single default user message.
    """
    body: Optional[Dict[str, Any]] = None
    if params.messages_input_mode == "json":
        messages, body = _json_messages(params.messages_json)
    else:
        messages = _manual_messages(params)
    if not messages:
        messages = [{"role": "user", "content": CHAT_DEFAULT_MESSAGE}]
    for idx, msg in enumerate(messages):
        if not isinstance(msg, dict):
            raise RequestValidationError(f"Message {idx} must be an object with 'role' and 'content'")
    return messages, body


def validate_content_parts(messages: List[Dict[str, Any]]) -> None:
    """Reject ``{"type": "file"}`` parts inside a content array."""
    for msg in messages:
        content = msg.get("content")
        if isinstance(content, list) and any(isinstance(p, dict) and p.get("type") == "file" for p in content):
            raise RequestValidationError(FILE_PART_ERROR)


def normalize_messages(messages: List[Dict[str, Any]]) -> List[Message]:
    validate_content_parts(messages)
    return [Message.from_wire(m) for m in messages]


def parse_tools(tools: Any) -> List[Dict[str, Any]]:
    """Return the tool list, or ``[]`` when absent or unparseable.

    Unparseable strings are logged and ignored.
    """
    if isinstance(tools, list):
        return [t for t in tools if isinstance(t, dict)]
    if not isinstance(tools, str) or not tools.strip():
        return []
    try:
        parsed = json.loads(tools)
    except ValueError as e:
        log_event(_logger, "chat.tools_ignored", reason=str(e))
        return []
    return [t for t in parsed if isinstance(t, dict)] if isinstance(parsed, list) else []


def resolve_response_format(
    opts: AdvancedOptions, request_body: Optional[Dict[str, Any]]
) -> Optional[Dict[str, Any]]:
    """Pick ``response_format``: JSON request body, then the options value.

    An options value of ``"text"`` means no explicit format. A JSON object
    string is accepted for older configurations; an unparseable one is
    ignored.
    """
    if request_body and isinstance(request_body.get("response_format"), dict):
        return request_body["response_format"]
    value = opts.response_format
    if isinstance(value, dict):
        return value
    if not value or value == "text":
        return None
    text = value.strip()
    if text.startswith("{"):
        try:
            parsed = json.loads(text)
        except ValueError:
            log_event(_logger, "chat.response_format_ignored", value=text[:80])
            return None
        return parsed if isinstance(parsed, dict) else None
    return {"type": text}


def _parse_stop(stop: str) -> Any:
    try:
        return json.loads(stop)
    except ValueError:
        return stop


def build_request_body(
    model: str,
    messages: List[Message],
    opts: AdvancedOptions,
    *,
    response_format: Optional[Dict[str, Any]] = None,
) -> Dict[str, Any]:
    """Assemble the ``/chat/completions`` body.

    ``model, messages, stream, temperature, max_tokens`` are always sent;
    optional sampling parameters only when they differ from the API default.
    """
    body: Dict[str, Any] = {
        "model": model,
        "messages": [m.to_wire() for m in messages],
        "stream": opts.stream,
        "temperature": opts.temperature,
        "max_tokens": opts.effective_max_tokens(),
    }
    if opts.top_p != 1:
        body["top_p"] = opts.top_p
    if opts.frequency_penalty != 0:
        body["frequency_penalty"] = opts.frequency_penalty
    if opts.presence_penalty != 0:
        body["presence_penalty"] = opts.presence_penalty
    if opts.user:
        body["user"] = opts.user
    if opts.stop:
        body["stop"] = _parse_stop(opts.stop)
    tools = parse_tools(opts.tools)
    if tools:
        body["tools"] = tools
        if opts.tool_choice != "auto":
            body["tool_choice"] = opts.tool_choice
    if response_format:
        body["response_format"] = response_format
    if opts.seed and opts.seed > 0:
        body["seed"] = opts.seed
    return body


__all__ = [
    "MODEL_ALIASES",
    "FILE_PART_ERROR",
    "select_model",
    "map_model_alias",
    "parse_messages",
    "validate_content_parts",
    "normalize_messages",
    "parse_tools",
    "resolve_response_format",
    "build_request_body",
]
