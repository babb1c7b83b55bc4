# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import httpx
import pytest

from memoboard.api import AccessTokenStore, ApiClient, FetchApi
from memoboard.api.request_models import RetryPolicy
from memoboard.cli.bootstrap import create_initial_state
from memoboard.core.board import MemoBoard
from memoboard.core.state import AppState

from .fakes import FakeSleep, fixed_random

BASE_URL = "http://memo.test"
TOKEN = "0f8fad5b-d9cb-469f-a165-70867728950e"


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and commands.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="memoboard",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=True,
        base_api_url=BASE_URL,
        origin_url="memoboard://test",
        request_timeout_seconds=5.0,
        retry_times=0,
        retry_delay_seconds=None,
    )


@pytest.fixture()
def fake_sleep() -> FakeSleep:
    return FakeSleep()


@pytest.fixture()
def tokens() -> AccessTokenStore:
    return AccessTokenStore()


@pytest.fixture()
def fetch(tokens: AccessTokenStore, fake_sleep: FakeSleep) -> FetchApi:
    """FetchApi over a plain httpx.AsyncClient; route it with respx in the test."""
    return FetchApi(
        base_url=BASE_URL,
        credentials=tokens,
        client=httpx.AsyncClient(),
        origin_url="memoboard://test",
        default_policy=RetryPolicy(),
        sleep=fake_sleep,
        random_fn=fixed_random(0.5),
    )


@pytest.fixture()
def api(fetch: FetchApi, tokens: AccessTokenStore) -> ApiClient:
    return ApiClient(fetch, tokens)


@pytest.fixture()
def board(api: ApiClient) -> MemoBoard:
    return MemoBoard(api)


@pytest.fixture()
def state(settings: SimpleNamespace) -> AppState:
    return create_initial_state(settings=settings, client=httpx.AsyncClient())
