"""GitHub Copilot chat provider (OpenAI-style over HTTP).

Summary:
- Processes chat items sequentially: model selection, message parsing,
  vision fallback resolution, request body assembly, one POST per item
- Owns one :class:`CapabilityCache` (no module-level state) and exposes the
  model picker helpers on top of it

Timeouts & Retries:
- Per-request timeout from the item's ``timeout`` option (ms)
- Retry only around the chat POST, driven by ``enable_retry``,
  ``max_retries`` and ``retry_delay``; the model listing is never retried

Errors & Observability:
- Failures are :class:`ProviderError` subclasses; with ``continue_on_fail``
  an item yields an OpenAI error envelope instead of raising
- Structured ``chat.start``/``chat.end``/``retry.attempt`` events; tokens are
  logged only through ``redact_token``
"""

from __future__ import annotations

import time
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence, Tuple, Union

import httpx
from pydantic import ValidationError

from ..base.dto import AdvancedOptions, ChatItemParams
from ..base.errors import (
    ErrorCode,
    InvalidCredentialError,
    ProviderError,
    RequestValidationError,
    classify_exception,
    code_for_status,
)
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, log_event, normalized_log_event, redact_token
from ..base.models import ModelDescriptor
from ..base.repositories.model_cache import CapabilityCache, is_valid_credential
from ..base.resilience import RetryConfig, run_with_retry
from ..base.timeouts import ms_to_seconds
from ..config import get_provider_config
from ..config.defaults import COPILOT_DEFAULT_BASE_URL, COPILOT_DEFAULT_MODEL, COPILOT_MODELS_API_VERSION
from .chat_helpers import (
    build_request_body,
    map_model_alias,
    normalize_messages,
    parse_messages,
    resolve_response_format,
    select_model,
)
from .endpoints import CHAT_COMPLETIONS_PATH, chat_headers
from .error_format import format_error_payload
from .get_copilot_models import make_models_fetcher
from .model_options import ModelOption, filter_models_by_type, models_to_options, vision_model_options
from .response_helpers import aggregate_sse_completion, build_openai_response
from .vision import VisionFallbackResolver

ChatItem = Union[ChatItemParams, Mapping[str, Any]]

_RETRYABLE = RetryConfig().retryable_codes


class CopilotChatProvider:
    """Chat completions against the GitHub Copilot API.

    Parameters:
        credential: Copilot OAuth token; resolved from configuration when
            omitted.
        base_url: API base URL override.
        cache: Capability cache to use; one is built from configuration
            when omitted.
        client: ``httpx.Client`` for chat and model calls; pooled clients
            are used when omitted.
        continue_on_fail: Default for :meth:`execute`.
        clock: Time source shared with the cache and response ids.
        sleep: Backoff sleeper used between retries.
        config_overrides: Extra values merged last into the configuration.
    """

    def __init__(
        self,
        credential: Optional[str] = None,
        *,
        base_url: Optional[str] = None,
        cache: Optional[CapabilityCache] = None,
        client: Optional[httpx.Client] = None,
        continue_on_fail: bool = False,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], None] = time.sleep,
        config_overrides: Optional[Dict[str, Any]] = None,
    ) -> None:
        cfg = get_provider_config("copilot", config_overrides)
        self._credential = credential or cfg.get("api_key")
        self._base_url = str(base_url or cfg.get("base_url") or COPILOT_DEFAULT_BASE_URL).rstrip("/")
        self._model = cfg.get("model") or COPILOT_DEFAULT_MODEL
        self._client = client
        self._clock = clock
        self._sleep = sleep
        self.continue_on_fail = continue_on_fail
        self._logger = get_logger("copilot.chat")
        self.cache = cache or CapabilityCache(
            make_models_fetcher(
                base_url=self._base_url,
                api_version=cfg.get("models_api_version") or COPILOT_MODELS_API_VERSION,
                client=client,
            ),
            ttl_seconds=float(cfg["models_cache_ttl_seconds"]),
            refresh_cooldown_seconds=float(cfg["models_refresh_cooldown_seconds"]),
            clock=clock,
        )
        self.resolver = VisionFallbackResolver(self.cache, min_base64_chars=int(cfg["vision_base64_min_chars"]))

    @property
    def provider_name(self) -> str:
        return "copilot"

    def default_model(self) -> str:
        return self._model

    def has_credential(self) -> bool:
        return is_valid_credential(self._credential)

    def _require_credential(self, credential: Optional[str] = None) -> str:
        token = credential or self._credential
        if not is_valid_credential(token):
            raise InvalidCredentialError("No GitHub Copilot token configured (set COPILOT_OAUTH_TOKEN)")
        return token

    # ---- model listing ----
    def list_models(self, credential: Optional[str] = None) -> Tuple[ModelDescriptor, ...]:
        """Return the cached (or freshly fetched) listing for the credential."""
        return self.cache.get_available_models(self._require_credential(credential))

    def model_options(self, credential: Optional[str] = None, *, model_type: Optional[str] = None) -> List[ModelOption]:
        models: Sequence[ModelDescriptor] = self.list_models(credential)
        if model_type:
            models = filter_models_by_type(models, model_type)
        return models_to_options(models)

    def vision_model_options(self, credential: Optional[str] = None) -> List[ModelOption]:
        return vision_model_options(self.list_models(credential))

    # ---- chat ----
    def execute(self, items: Sequence[ChatItem], *, continue_on_fail: Optional[bool] = None) -> List[Dict[str, Any]]:
        """Run every item in order and return one output dict per item.

        With ``continue_on_fail`` a failing item yields
        ``{"error": {...}}``; bad requests still raise.
        """
        keep_going = self.continue_on_fail if continue_on_fail is None else continue_on_fail
        results: List[Dict[str, Any]] = []
        for index, item in enumerate(items):
            try:
                results.append(self.execute_item(item, index=index))
            except Exception as exc:
                if not keep_going:
                    raise
                log_event(
                    self._logger,
                    "chat.item_failed",
                    LogContext(item_index=index),
                    error_code=classify_exception(exc).value,
                    error=str(exc),
                )
                results.append(format_error_payload(exc, item_index=index))
        return results

    def execute_item(self, item: ChatItem, *, index: int = 0) -> Dict[str, Any]:
        """Run one chat item and return the OpenAI-shaped completion."""
        params = self._validate(item, index)
        token = self._require_credential()
        requested = select_model(params)
        copilot_model = map_model_alias(requested)
        raw_messages, request_body = parse_messages(params)
        messages = normalize_messages(raw_messages)
        opts = params.advanced_options

        vision = self.resolver.requires_vision(messages)
        if vision:
            self._warm_cache(token)
            copilot_model = self.resolver.resolve_model(copilot_model, messages, token, opts.vision_policy())

        response_format = resolve_response_format(opts, request_body)
        body = build_request_body(copilot_model, messages, opts, response_format=response_format)
        ctx = LogContext(model=copilot_model, credential=redact_token(token), item_index=index)
        if opts.debug_mode:
            log_event(self._logger, "chat.debug", ctx, body_keys=sorted(body), messages=len(messages), vision=vision)

        normalized_log_event(self._logger, "chat.start", ctx, phase="start", vision=vision, requested_model=requested)
        t0 = time.perf_counter()
        upstream, retries = self._post_chat(body, token=token, vision=vision, opts=opts, ctx=ctx)
        result = build_openai_response(
            upstream, requested_model=requested, response_format=response_format, clock=self._clock
        )
        normalized_log_event(
            self._logger,
            "chat.end",
            ctx,
            phase="finalize",
            attempt=retries + 1,
            emitted=True,
            tokens=upstream.get("usage"),
            retries=retries,
            latency_ms=round((time.perf_counter() - t0) * 1000.0, 1),
        )
        return result

    def _validate(self, item: ChatItem, index: int) -> ChatItemParams:
        if isinstance(item, ChatItemParams):
            return item
        try:
            return ChatItemParams.model_validate(dict(item))
        except ValidationError as e:
            raise RequestValidationError(f"Invalid chat parameters: {e}", item_index=index) from e

    def _warm_cache(self, token: str) -> None:
        """Populate the capability cache so vision checks can use live data.

        A failed listing only downgrades the check to the bundled table.
        """
        try:
            self.cache.get_available_models(token)
        except ProviderError as e:
            log_event(self._logger, "vision.cache_unavailable", error_code=e.code.value, error=e.message)

    def _http(self) -> httpx.Client:
        return self._client or get_httpx_client(self._base_url, "chat")

    def _post_chat(
        self,
        body: Dict[str, Any],
        *,
        token: str,
        vision: bool,
        opts: AdvancedOptions,
        ctx: LogContext,
    ) -> Tuple[Dict[str, Any], int]:
        """POST the body under the item's retry policy; return ``(json, retries)``."""
        url = self._base_url + CHAT_COMPLETIONS_PATH
        headers = chat_headers(token, vision=vision)
        timeout = ms_to_seconds(opts.timeout, 60.0)
        model = body["model"]

        def _invoke() -> Dict[str, Any]:
            try:
                resp = self._http().post(url, json=body, headers=headers, timeout=timeout)
            except httpx.HTTPError as e:
                code = classify_exception(e)
                raise ProviderError(
                    code=code,
                    message=f"GitHub Copilot API error: {e}",
                    model=model,
                    retryable=code in _RETRYABLE,
                    raw=e,
                ) from e
            if resp.status_code >= 400:
                raise self._error_from_response(resp, model)
            return self._decode(resp, model)

        def _log_attempt(*, attempt: int, max_attempts: int, delay: float | None, error: ProviderError | None) -> None:
            if error is None:
                return
            normalized_log_event(
                self._logger,
                "retry.attempt",
                ctx,
                phase="retry",
                attempt=attempt + 1,
                error_code=error.code.value,
                max_attempts=max_attempts,
                delay_s=delay,
            )

        config = RetryConfig.from_options(
            enable_retry=opts.enable_retry,
            max_retries=opts.max_retries,
            retry_delay_ms=opts.retry_delay,
            attempt_logger=_log_attempt,
            sleep=self._sleep,
        )
        return run_with_retry(_invoke, config)

    @staticmethod
    def _decode(resp: httpx.Response, model: str) -> Dict[str, Any]:
        if "text/event-stream" in resp.headers.get("content-type", ""):
            return aggregate_sse_completion(resp.text)
        try:
            data = resp.json()
        except ValueError as e:
            raise ProviderError(
                code=ErrorCode.INTERNAL,
                message="GitHub Copilot API error: response is not JSON",
                model=model,
                raw=e,
                status=resp.status_code,
            ) from e
        if not isinstance(data, dict):
            raise ProviderError(
                code=ErrorCode.INTERNAL,
                message="GitHub Copilot API error: unexpected response shape",
                model=model,
                status=resp.status_code,
            )
        return data

    @staticmethod
    def _error_from_response(resp: httpx.Response, model: str) -> ProviderError:
        details: Optional[Dict[str, Any]] = None
        try:
            parsed = resp.json()
        except ValueError:
            parsed = None
        if isinstance(parsed, dict):
            details = parsed
        code = code_for_status(resp.status_code)
        text = resp.text[:500] if resp.text else ""
        return ProviderError(
            code=code,
            message=f"GitHub Copilot API error: {resp.status_code} {resp.reason_phrase} {text}".strip(),
            model=model,
            retryable=code in _RETRYABLE,
            status=resp.status_code,
            details=details,
        )


__all__ = ["CopilotChatProvider", "ChatItem"]
