"""Pytest fixtures shared by the Copilot provider tests.

Every test runs with the Copilot environment variables removed and the
HTTP client pool closed afterwards, so no test reads a real token or
touches the network.
"""

from __future__ import annotations

from typing import Iterator

import pytest

from copilot_providers.base.http import close_all_clients
from copilot_providers.tests.utils import CopilotApi, FakeClock, RecordingFetcher

_COPILOT_ENV = (
    "COPILOT_OAUTH_TOKEN",
    "GITHUB_COPILOT_TOKEN",
    "GH_COPILOT_TOKEN",
    "COPILOT_MODEL",
    "COPILOT_BASE_URL",
    "COPILOT_MODELS_CACHE_TTL_SECONDS",
    "COPILOT_MODELS_REFRESH_COOLDOWN_SECONDS",
    "COPILOT_PROVIDERS_CONFIG_FILE",
)


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch) -> Iterator[None]:
    for name in _COPILOT_ENV:
        monkeypatch.delenv(name, raising=False)
    yield
    close_all_clients()


@pytest.fixture()
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture()
def fetcher() -> RecordingFetcher:
    return RecordingFetcher()


@pytest.fixture()
def copilot_api() -> CopilotApi:
    return CopilotApi()
