"""
Copilot: fetch the model listing

Behavior
- ``GET {base_url}/models`` with bearer auth and the model-access headers.
- One attempt per call; the capability cache decides when to call and what
  to serve when the call fails.
- Non-2xx responses and transport failures raise a classified
  :class:`ProviderError`; the response body is kept in the message for
  diagnostics (never the token).
"""

from __future__ import annotations

from typing import Callable, List, Optional

import httpx

from ..base.errors import ErrorCode, ProviderError, classify_exception, code_for_status
from ..base.http import get_httpx_client
from ..base.logging import LogContext, get_logger, log_event, redact_token
from ..base.models import ModelDescriptor
from ..base.repositories.model_cache import descriptors_from_listing
from ..config.defaults import COPILOT_DEFAULT_BASE_URL, COPILOT_MODELS_API_VERSION
from .endpoints import MODELS_PATH, models_headers

PROVIDER = "copilot"
_logger = get_logger("copilot.models")


def _error_from_response(resp: httpx.Response) -> ProviderError:
    detail = resp.text[:500] if resp.text else ""
    code = code_for_status(resp.status_code)
    return ProviderError(
        code=code,
        message=f"Failed to fetch models: {resp.status_code} {resp.reason_phrase}. {detail}".strip(),
        provider=PROVIDER,
        status=resp.status_code,
        retryable=code in (ErrorCode.TRANSIENT, ErrorCode.RATE_LIMIT, ErrorCode.TIMEOUT),
    )


def fetch_models_via_http(
    token: str,
    *,
    base_url: str = COPILOT_DEFAULT_BASE_URL,
    api_version: str = COPILOT_MODELS_API_VERSION,
    client: Optional[httpx.Client] = None,
) -> List[ModelDescriptor]:
    """Fetch and normalize the models visible to ``token``.

    Args:
        token: Copilot OAuth token.
        base_url: API base URL.
        api_version: ``X-GitHub-Api-Version`` header value.
        client: Optional client; the pooled ``models`` client by default.

    Returns:
        Descriptors in upstream order.

    Raises:
        ProviderError: HTTP or transport failure, or a body that is not JSON.
    """
    http = client or get_httpx_client(base_url.rstrip("/"), "models")
    ctx = LogContext(credential=redact_token(token))
    try:
        resp = http.get(base_url.rstrip("/") + MODELS_PATH, headers=models_headers(token, api_version))
    except httpx.HTTPError as e:
        raise ProviderError(
            code=classify_exception(e),
            message=f"Failed to fetch models: {e}",
            provider=PROVIDER,
            retryable=True,
            raw=e,
        ) from e
    if resp.status_code >= 400:
        raise _error_from_response(resp)
    try:
        payload = resp.json()
    except ValueError as e:
        raise ProviderError(
            code=ErrorCode.INTERNAL,
            message="Failed to fetch models: response is not JSON",
            provider=PROVIDER,
            raw=e,
            status=resp.status_code,
        ) from e
    models = descriptors_from_listing(payload)
    log_event(_logger, "models.fetched", ctx, count=len(models), status=resp.status_code)
    return models


def make_models_fetcher(
    *,
    base_url: str = COPILOT_DEFAULT_BASE_URL,
    api_version: str = COPILOT_MODELS_API_VERSION,
    client: Optional[httpx.Client] = None,
) -> Callable[[str], List[ModelDescriptor]]:
    """Bind endpoint settings into a ``fetcher(token)`` for :class:`CapabilityCache`."""

    def _fetch(token: str) -> List[ModelDescriptor]:
        return fetch_models_via_http(token, base_url=base_url, api_version=api_version, client=client)

    return _fetch


__all__ = ["fetch_models_via_http", "make_models_fetcher"]
