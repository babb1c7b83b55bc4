# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from memoboard.api.request_models import RetryPolicy
from memoboard.cli.bootstrap import create_initial_state, retry_policy_from_settings
from memoboard.config import Settings

_VARS = (
    "MEMO_APP_NAME",
    "MEMO_LOG_LEVEL",
    "MEMO_DATA_DIR",
    "MEMO_CONSOLE_ENABLED",
    "MEMO_BASE_API_URL",
    "MEMO_ORIGIN_URL",
    "MEMO_REQUEST_TIMEOUT_SECONDS",
    "MEMO_RETRY_TIMES",
    "MEMO_RETRY_DELAY_SECONDS",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "memoboard"
    assert s.base_api_url == "http://localhost:8000"
    assert s.origin_url == "memoboard://console"
    assert s.data_dir == Path(".local/memoboard")
    assert s.console_enabled is True
    assert s.retry_times == 0
    assert s.retry_delay_seconds is None


def test_env_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("MEMO_BASE_API_URL", "https://memo.example")
    monkeypatch.setenv("MEMO_DATA_DIR", str(tmp_path))
    monkeypatch.setenv("MEMO_CONSOLE_ENABLED", "off")
    monkeypatch.setenv("MEMO_RETRY_TIMES", "3")
    monkeypatch.setenv("MEMO_REQUEST_TIMEOUT_SECONDS", "0")

    s = Settings.from_env()
    assert s.base_api_url == "https://memo.example"
    assert s.data_dir == tmp_path
    assert s.console_enabled is False
    assert s.retry_times == 3
    assert s.request_timeout_seconds == 0.1


@pytest.mark.parametrize(("raw", "expected"), [("", None), ("junk", None), ("0", 0.0), ("2.5", 2.5), ("-1", 0.0)])
def test_retry_delay_keeps_zero_distinct_from_unset(
    monkeypatch: pytest.MonkeyPatch, raw: str, expected: float | None
) -> None:
    monkeypatch.setenv("MEMO_RETRY_DELAY_SECONDS", raw)
    assert Settings.from_env().retry_delay_seconds == expected


def test_bootstrap_wires_policy_and_creates_data_dir(settings) -> None:
    settings.retry_times = 2
    settings.retry_delay_seconds = 0.0

    assert retry_policy_from_settings(settings) == RetryPolicy(retry_times=2, retry_delay=0.0)

    state = create_initial_state(settings=settings)
    assert settings.data_dir.is_dir()
    assert state.api.fetch.default_policy.retry_delay == 0.0
    assert state.board.api is state.api
    assert state.api.tokens is state.tokens
