"""Timeout configuration and millisecond option conversion."""
from __future__ import annotations

from copilot_providers.base.timeouts import TimeoutConfig, get_timeout_config, ms_to_seconds
from copilot_providers.tests.utils import assert_true


def test_defaults_without_env(monkeypatch) -> None:
    for name in (
        "COPILOT_TIMEOUT_HTTP_SECONDS",
        "COPILOT_TIMEOUT_CONNECT_SECONDS",
        "COPILOT_TIMEOUT_AUTH_SECONDS",
    ):
        monkeypatch.delenv(name, raising=False)
    assert_true(get_timeout_config() == TimeoutConfig(), "defaults")


def test_env_changes_rebuild_the_cache(monkeypatch) -> None:
    monkeypatch.setenv("COPILOT_TIMEOUT_HTTP_SECONDS", "12.5")
    monkeypatch.setenv("COPILOT_TIMEOUT_CONNECT_SECONDS", "not-a-number")
    monkeypatch.setenv("COPILOT_TIMEOUT_AUTH_SECONDS", "-3")
    cfg = get_timeout_config()
    assert_true(cfg.http_timeout_seconds == 12.5, cfg)
    assert_true(cfg.connect_timeout_seconds == 10.0, "unparseable falls back")
    assert_true(cfg.auth_timeout_seconds == 30.0, "non-positive falls back")
    assert_true(get_timeout_config() is cfg, "cached while env is unchanged")

    monkeypatch.setenv("COPILOT_TIMEOUT_HTTP_SECONDS", "5")
    assert_true(get_timeout_config().http_timeout_seconds == 5.0, "rebuilt after env change")


def test_ms_to_seconds() -> None:
    assert_true(ms_to_seconds(1500, 60.0) == 1.5, "ms converted")
    assert_true(ms_to_seconds("2000", 60.0) == 2.0, "numeric strings accepted")
    assert_true(ms_to_seconds(0, 60.0) == 60.0, "zero uses default")
    assert_true(ms_to_seconds(None, 7.0) == 7.0, "None uses default")
    assert_true(ms_to_seconds("soon", 7.0) == 7.0, "garbage uses default")
