"""Copilot API paths and request header builders."""

from __future__ import annotations

from typing import Dict

from ..config.defaults import (
    COPILOT_EDITOR_PLUGIN_VERSION,
    COPILOT_EDITOR_VERSION,
    COPILOT_INTEGRATION_ID,
    COPILOT_MODELS_API_VERSION,
    COPILOT_USER_AGENT,
)

MODELS_PATH = "/models"
CHAT_COMPLETIONS_PATH = "/chat/completions"
DEVICE_CODE_PATH = "/login/device/code"
ACCESS_TOKEN_PATH = "/login/oauth/access_token"

DEVICE_CODE_GRANT = "urn:ietf:params:oauth:grant-type:device_code"


def _base_headers(token: str) -> Dict[str, str]:
    return {
        "Authorization": f"Bearer {token}",
        "Accept": "application/json",
        "Content-Type": "application/json",
        "User-Agent": COPILOT_USER_AGENT,
        "Editor-Version": COPILOT_EDITOR_VERSION,
        "Editor-Plugin-Version": COPILOT_EDITOR_PLUGIN_VERSION,
        "Copilot-Integration-Id": COPILOT_INTEGRATION_ID,
    }


def models_headers(token: str, api_version: str = COPILOT_MODELS_API_VERSION) -> Dict[str, str]:
    """Headers for ``GET /models``; the API version unlocks ``billing`` data."""
    headers = _base_headers(token)
    headers["X-GitHub-Api-Version"] = api_version
    headers["X-Interaction-Type"] = "model-access"
    headers["OpenAI-Intent"] = "model-access"
    return headers


def chat_headers(token: str, *, vision: bool = False) -> Dict[str, str]:
    """Headers for ``POST /chat/completions``.

    ``Copilot-Vision-Request`` must be set whenever the messages carry image
    content or the API rejects them.
    """
    headers = _base_headers(token)
    headers["OpenAI-Intent"] = "conversation-panel"
    if vision:
        headers["Copilot-Vision-Request"] = "true"
    return headers


__all__ = [
    "MODELS_PATH",
    "CHAT_COMPLETIONS_PATH",
    "DEVICE_CODE_PATH",
    "ACCESS_TOKEN_PATH",
    "DEVICE_CODE_GRANT",
    "models_headers",
    "chat_headers",
]
