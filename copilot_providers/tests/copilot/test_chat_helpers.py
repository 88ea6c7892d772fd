"""Model selection, message parsing and request body assembly."""
from __future__ import annotations

import pytest

from copilot_providers.base.dto import AdvancedOptions, ChatItemParams
from copilot_providers.base.errors import RequestValidationError
from copilot_providers.copilot.chat_helpers import (
    FILE_PART_ERROR,
    build_request_body,
    map_model_alias,
    normalize_messages,
    parse_messages,
    parse_tools,
    resolve_response_format,
    select_model,
)
from copilot_providers.tests.utils import assert_true


def _params(**kw) -> ChatItemParams:
    return ChatItemParams.model_validate(kw)


def test_select_model_sources() -> None:
    assert_true(select_model(_params(model=" gpt-4o ")) == "gpt-4o", "list model trimmed")
    assert_true(select_model(_params(modelSource="custom", customModel="o3-mini")) == "o3-mini", "custom")
    assert_true(select_model(_params(model="__manual__", customModel="gpt-5")) == "gpt-5", "manual marker")
    with pytest.raises(RequestValidationError):
        select_model(_params(modelSource="custom", customModel="  "))
    with pytest.raises(RequestValidationError):
        select_model(_params(model=None))


def test_aliases() -> None:
    assert_true(map_model_alias("gpt-4") == "gpt-4o", "legacy alias mapped")
    assert_true(map_model_alias("claude-sonnet-4") == "claude-sonnet-4", "unknown ids pass through")


def test_manual_messages_and_default() -> None:
    msgs, body = parse_messages(_params(model="m"))
    assert_true(msgs == [{"role": "user", "content": "Hello! How can you help me?"}] and body is None, "default")
    msgs, _ = parse_messages(
        _params(model="m", messages=[{"role": "system", "content": "be brief", "type": "bogus"}, {"content": "hi"}])
    )
    assert_true(msgs[0] == {"role": "system", "content": "be brief"}, "unknown manual type dropped")
    assert_true(msgs[1]["role"] == "user", "role defaults to user")


def test_json_messages_modes() -> None:
    raw = '[{"role": "user", "content": "x"}]'
    msgs, body = parse_messages(_params(model="m", messagesInputMode="json", messagesJson=raw))
    assert_true(msgs == [{"role": "user", "content": "x"}] and body is None, "array form")
    full = {"messages": [{"role": "user", "content": "y"}], "response_format": {"type": "json_object"}}
    msgs, body = parse_messages(_params(model="m", messagesInputMode="json", messagesJson=full))
    assert_true(body is full or body == full, "request body form returned")
    with pytest.raises(RequestValidationError):
        parse_messages(_params(model="m", messagesInputMode="json", messagesJson="{not json"))
    with pytest.raises(RequestValidationError):
        parse_messages(_params(model="m", messagesInputMode="json", messagesJson='["just a string"]'))


def test_file_parts_inside_content_rejected() -> None:
    with pytest.raises(RequestValidationError) as ei:
        normalize_messages([{"role": "user", "content": [{"type": "file", "file": {}}]}])
    assert_true(ei.value.message == FILE_PART_ERROR, "guidance message")


def test_parse_tools() -> None:
    tools = [{"type": "function", "function": {"name": "f"}}]
    assert_true(parse_tools(tools) == tools, "list passes")
    assert_true(parse_tools('[{"type": "function"}]') == [{"type": "function"}], "json string parsed")
    assert_true(parse_tools("not json") == [] and parse_tools(None) == [], "garbage ignored")


def test_response_format_priority() -> None:
    opts = AdvancedOptions(response_format="json_object")
    assert_true(
        resolve_response_format(opts, {"response_format": {"type": "json_schema"}}) == {"type": "json_schema"},
        "request body wins",
    )
    assert_true(resolve_response_format(opts, None) == {"type": "json_object"}, "option string")
    assert_true(resolve_response_format(AdvancedOptions(), None) is None, "text means unset")
    assert_true(
        resolve_response_format(AdvancedOptions(response_format='{"type": "json_object"}'), None)
        == {"type": "json_object"},
        "JSON object string accepted",
    )


def test_build_request_body_omits_defaults() -> None:
    msgs = normalize_messages([{"role": "user", "content": "hi"}])
    body = build_request_body("gpt-4o", msgs, AdvancedOptions())
    assert_true(
        set(body) == {"model", "messages", "stream", "temperature", "max_tokens"},
        f"unexpected keys {sorted(body)}",
    )
    assert_true(body["max_tokens"] == 4096 and body["stream"] is False, "defaults")
    opts = AdvancedOptions(
        top_p=0.5,
        frequency_penalty=0.2,
        presence_penalty=-0.2,
        stop='["END"]',
        seed=7,
        user="u1",
        tools='[{"type": "function", "function": {"name": "f"}}]',
        tool_choice="required",
    )
    body = build_request_body("gpt-4o", msgs, opts, response_format={"type": "json_object"})
    assert_true(body["stop"] == ["END"] and body["seed"] == 7 and body["tool_choice"] == "required", "extras")
    assert_true(body["response_format"] == {"type": "json_object"}, "response format included")
