"""GitHub OAuth device flow yielding a Copilot-capable token.

Flow
----
1. ``request_device_code`` posts the client id and scope and returns the
   user code plus the verification URL to show the user.
2. ``poll_access_token`` polls the token endpoint every ``interval`` seconds
   until GitHub returns an ``access_token``. ``authorization_pending`` keeps
   polling; ``slow_down`` adds five seconds to the interval; any other
   error, or the device code expiring, raises an AUTH ``ProviderError``.

``sleep`` and ``clock`` are injectable so tests run without waiting.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

import httpx

from ..base.errors import ErrorCode, ProviderError, classify_exception
from ..base.http import get_httpx_client
from ..base.logging import get_logger, log_event, normalized_log_event, redact_token
from ..base.timeouts import get_timeout_config
from ..config.defaults import (
    DEVICE_FLOW_SLOW_DOWN_SECONDS,
    GITHUB_BASE_URL,
    GITHUB_DEVICE_CLIENT_ID,
    GITHUB_DEVICE_SCOPE,
)
from .endpoints import ACCESS_TOKEN_PATH, DEVICE_CODE_GRANT, DEVICE_CODE_PATH

_logger = get_logger("copilot.auth")
_PENDING_ERRORS = frozenset({"authorization_pending", "slow_down"})


@dataclass(frozen=True)
class DeviceCodeResponse:
    device_code: str
    user_code: str
    verification_uri: str
    expires_in: int
    interval: int


def _auth_error(message: str, raw: Optional[Exception] = None) -> ProviderError:
    return ProviderError(code=ErrorCode.AUTH, message=message, provider="github", raw=raw)


def _post_json(client: httpx.Client, url: str, body: Dict[str, Any]) -> Dict[str, Any]:
    try:
        resp = client.post(
            url,
            json=body,
            headers={"Accept": "application/json", "Content-Type": "application/json"},
            timeout=get_timeout_config().auth_timeout_seconds,
        )
        resp.raise_for_status()
    except httpx.HTTPError as e:
        raise ProviderError(
            code=classify_exception(e),
            message=f"GitHub device flow request failed: {e}",
            provider="github",
            raw=e,
        ) from e
    try:
        data = resp.json()
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def request_device_code(
    client_id: str = GITHUB_DEVICE_CLIENT_ID,
    scope: str = GITHUB_DEVICE_SCOPE,
    *,
    base_url: str = GITHUB_BASE_URL,
    client: Optional[httpx.Client] = None,
) -> DeviceCodeResponse:
    """Start the device flow.

    Raises:
        ProviderError: request failure, or a response without a user code
            or verification URL.
    """
    http = client or get_httpx_client(None, "auth")
    data = _post_json(http, base_url.rstrip("/") + DEVICE_CODE_PATH, {"client_id": client_id, "scope": scope})
    code = DeviceCodeResponse(
        device_code=str(data.get("device_code", "")),
        user_code=str(data.get("user_code", "")),
        verification_uri=str(data.get("verification_uri", "")),
        expires_in=int(data.get("expires_in", 0) or 0),
        interval=int(data.get("interval", 5) or 5),
    )
    if not code.device_code or not code.user_code or not code.verification_uri:
        raise _auth_error("GitHub device code flow returned an invalid response")
    log_event(_logger, "auth.device_code", verification_uri=code.verification_uri, expires_in=code.expires_in)
    return code


def poll_access_token(
    device_code: DeviceCodeResponse,
    *,
    client_id: str = GITHUB_DEVICE_CLIENT_ID,
    base_url: str = GITHUB_BASE_URL,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> str:
    """Poll until the user authorizes the device and return the access token.

    Raises:
        ProviderError: code ``AUTH`` on a terminal OAuth error or expiry.
    """
    http = client or get_httpx_client(None, "auth")
    url = base_url.rstrip("/") + ACCESS_TOKEN_PATH
    body = {"client_id": client_id, "device_code": device_code.device_code, "grant_type": DEVICE_CODE_GRANT}
    started = clock()
    interval = max(1, device_code.interval)
    attempt = 0
    while True:
        if device_code.expires_in > 0 and clock() - started > device_code.expires_in:
            raise _auth_error("GitHub device code expired before authorization completed")
        attempt += 1
        data = _post_json(http, url, body)
        token = str(data.get("access_token", "") or "").strip()
        if token:
            normalized_log_event(
                _logger, "auth.poll", phase="authorized", attempt=attempt, emitted=True, token=redact_token(token)
            )
            return token
        error = str(data.get("error", "") or "").strip()
        if error and error not in _PENDING_ERRORS:
            description = data.get("error_description") or error
            normalized_log_event(_logger, "auth.poll", phase="failed", attempt=attempt, error_code=error)
            raise _auth_error(f"GitHub device auth failed: {description}")
        if error == "slow_down":
            interval += DEVICE_FLOW_SLOW_DOWN_SECONDS
        normalized_log_event(_logger, "auth.poll", phase="pending", attempt=attempt, status=error or "pending")
        sleep(interval)


def run_device_flow(
    *,
    on_code: Optional[Callable[[DeviceCodeResponse], None]] = None,
    client: Optional[httpx.Client] = None,
    sleep: Callable[[float], None] = time.sleep,
) -> str:
    """Run both steps; ``on_code`` receives the code to display to the user."""
    code = request_device_code(client=client)
    if on_code is not None:
        on_code(code)
    return poll_access_token(code, client=client, sleep=sleep)


__all__ = [
    "DeviceCodeResponse",
    "request_device_code",
    "poll_access_token",
    "run_device_flow",
]
