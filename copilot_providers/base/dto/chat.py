"""
Pydantic DTOs validating per-item chat parameters.

Purpose
-------
Validate the parameters of one chat item (model selection, messages input
and advanced options) before the request builder turns them into an
upstream ``/chat/completions`` body. Field names accept both snake_case and
the camelCase spelling used by workflow hosts (``maxRetries``,
``enableVisionFallback``).

External dependencies: Pydantic only. Validation either succeeds or raises a
``pydantic.ValidationError``; the chat pipeline converts that into a
``RequestValidationError``.
"""

from __future__ import annotations

from typing import Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from pydantic.alias_generators import to_camel

from ...config.defaults import CHAT_ENABLE_RETRY, CHAT_MAX_RETRIES, CHAT_RETRY_DELAY_MS, CHAT_TIMEOUT_MS

MANUAL_MODEL_MARKER = "__manual__"
DEFAULT_MAX_TOKENS = 4096


class _HostModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class VisionPolicy(_HostModel):
    """Fallback policy consulted when a request carries image content.

    Attributes:
        enabled: Substitute a fallback model instead of failing.
        fallback_model: Fallback model id, or ``"__manual__"`` to use
            ``custom_model``.
        custom_model: Explicit model id used with the manual marker.
    """

    enabled: bool = False
    fallback_model: Optional[str] = None
    custom_model: Optional[str] = None

    def resolved_fallback(self) -> Optional[str]:
        """Return the effective fallback id (stripped), or ``None`` when unset."""
        chosen = self.custom_model if self.fallback_model == MANUAL_MODEL_MARKER else self.fallback_model
        if chosen is None or not chosen.strip():
            return None
        return chosen.strip()


class AdvancedOptions(_HostModel):
    """OpenAI-style generation parameters plus retry and vision settings.

    Defaults match the upstream API defaults so the request builder can omit
    parameters equal to their default value.
    """

    response_format: Optional[Union[str, Dict[str, Any]]] = "text"
    temperature: float = Field(default=1.0, ge=0.0, le=2.0)
    max_tokens: Optional[float] = DEFAULT_MAX_TOKENS
    top_p: float = Field(default=1.0, ge=0.0, le=1.0)
    frequency_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    presence_penalty: float = Field(default=0.0, ge=-2.0, le=2.0)
    stop: Optional[str] = None
    stream: bool = False
    seed: Optional[int] = 0
    user: Optional[str] = None
    tools: Optional[Union[str, List[Dict[str, Any]]]] = None
    tool_choice: Literal["auto", "none", "required"] = "auto"
    enable_retry: bool = CHAT_ENABLE_RETRY
    max_retries: int = Field(default=CHAT_MAX_RETRIES, ge=0)
    retry_delay: float = Field(default=CHAT_RETRY_DELAY_MS, ge=0)
    timeout: float = Field(default=CHAT_TIMEOUT_MS, gt=0)
    debug_mode: bool = False
    enable_vision_fallback: bool = False
    vision_fallback_model: Optional[str] = None
    vision_fallback_custom_model: Optional[str] = None

    @model_validator(mode="after")
    def _normalize_max_tokens(self) -> "AdvancedOptions":
        """Replace a missing or non-positive ``max_tokens`` with the default."""
        if self.max_tokens is None or self.max_tokens <= 0:
            self.max_tokens = DEFAULT_MAX_TOKENS
        return self

    def effective_max_tokens(self) -> int:
        return int(self.max_tokens or DEFAULT_MAX_TOKENS)

    def vision_policy(self) -> VisionPolicy:
        return VisionPolicy(
            enabled=self.enable_vision_fallback,
            fallback_model=self.vision_fallback_model,
            custom_model=self.vision_fallback_custom_model,
        )


class ChatItemParams(_HostModel):
    """Parameters of one chat item.

    Rules:
        - ``model_source`` is ``from_list`` (``fromList`` accepted) or ``custom``.
        - ``messages`` accepts either a list of message dicts or the host's
          ``{"message": [...]}`` collection shape.
        - ``messages_json`` is a JSON string, a list of messages, or a full
          request body containing ``messages``.
    """

    model_source: Literal["from_list", "custom"] = "from_list"
    model: Optional[str] = None
    custom_model: Optional[str] = None
    messages_input_mode: Literal["manual", "json"] = "manual"
    messages: List[Dict[str, Any]] = Field(default_factory=list)
    messages_json: Any = "[]"
    advanced_options: AdvancedOptions = Field(default_factory=AdvancedOptions)

    @field_validator("model_source", mode="before")
    @classmethod
    def _normalize_source(cls, value: Any) -> Any:
        return "from_list" if value == "fromList" else value

    @field_validator("messages", mode="before")
    @classmethod
    def _unwrap_collection(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, dict):
            inner = value.get("message")
            return inner if isinstance(inner, list) else []
        return value


__all__ = [
    "MANUAL_MODEL_MARKER",
    "DEFAULT_MAX_TOKENS",
    "VisionPolicy",
    "AdvancedOptions",
    "ChatItemParams",
]
