"""copilot_providers.config.defaults
=================================

Plain default constants for the Copilot provider layer. No I/O and no
imports from other package modules so every layer can depend on it.
"""

from __future__ import annotations

# ---- Copilot API ----
COPILOT_DEFAULT_BASE_URL = "https://api.githubcopilot.com"
COPILOT_DEFAULT_MODEL = "gpt-4o"
# Version header that makes /models include the billing block.
COPILOT_MODELS_API_VERSION = "2025-05-01"
COPILOT_INTEGRATION_ID = "vscode-chat"
COPILOT_USER_AGENT = "GitHubCopilotChat/0.35.0"
COPILOT_EDITOR_VERSION = "vscode/1.96.0"
COPILOT_EDITOR_PLUGIN_VERSION = "copilot-chat/0.35.0"

# ---- Capability cache ----
MODELS_CACHE_TTL_SECONDS = 3600
MODELS_REFRESH_COOLDOWN_SECONDS = 300

# ---- Vision detection ----
# Minimum base64 characters after a data:image prefix before text counts as an image.
VISION_BASE64_MIN_CHARS = 50

# ---- Chat request ----
CHAT_DEFAULT_MESSAGE = "Hello! How can you help me?"
CHAT_ENABLE_RETRY = True
CHAT_MAX_RETRIES = 3
CHAT_RETRY_DELAY_MS = 1000
CHAT_TIMEOUT_MS = 60000

# ---- GitHub device flow ----
GITHUB_BASE_URL = "https://github.com"
GITHUB_DEVICE_CLIENT_ID = "Iv1.b507a08c87ecfe98"
GITHUB_DEVICE_SCOPE = "read:user"
DEVICE_FLOW_SLOW_DOWN_SECONDS = 5

__all__ = [
    "COPILOT_DEFAULT_BASE_URL",
    "COPILOT_DEFAULT_MODEL",
    "COPILOT_MODELS_API_VERSION",
    "COPILOT_INTEGRATION_ID",
    "COPILOT_USER_AGENT",
    "COPILOT_EDITOR_VERSION",
    "COPILOT_EDITOR_PLUGIN_VERSION",
    "MODELS_CACHE_TTL_SECONDS",
    "MODELS_REFRESH_COOLDOWN_SECONDS",
    "VISION_BASE64_MIN_CHARS",
    "CHAT_DEFAULT_MESSAGE",
    "CHAT_ENABLE_RETRY",
    "CHAT_MAX_RETRIES",
    "CHAT_RETRY_DELAY_MS",
    "CHAT_TIMEOUT_MS",
    "GITHUB_BASE_URL",
    "GITHUB_DEVICE_CLIENT_ID",
    "GITHUB_DEVICE_SCOPE",
    "DEVICE_FLOW_SLOW_DOWN_SECONDS",
]
