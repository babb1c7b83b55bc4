# src/memoboard/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the token store, the fetch layer, the endpoint groups and the board into AppState.
"""

from __future__ import annotations

import logging
from pathlib import Path

import httpx

from ..api import AccessTokenStore, ApiClient, FetchApi
from ..api.request_models import RetryPolicy
from ..config import get_settings
from ..core.board import MemoBoard
from ..core.state import AppState

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    Path(settings.data_dir).mkdir(parents=True, exist_ok=True)


def retry_policy_from_settings(settings) -> RetryPolicy:
    return RetryPolicy(
        retry_times=int(getattr(settings, "retry_times", 0)),
        retry_delay=getattr(settings, "retry_delay_seconds", None),
    )


def create_initial_state(*, settings=None, client: httpx.AsyncClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    settings falls back to get_settings(). client lets tests hand in an
    httpx.AsyncClient (e.g. one routed through respx); when omitted FetchApi
    creates and owns its own.
    """
    if settings is None:
        settings = get_settings()

    _ensure_local_dirs(settings)

    tokens = AccessTokenStore()
    fetch = FetchApi(
        base_url=settings.base_api_url,
        credentials=tokens,
        client=client,
        origin_url=getattr(settings, "origin_url", ""),
        timeout_seconds=float(getattr(settings, "request_timeout_seconds", 10.0)),
        default_policy=retry_policy_from_settings(settings),
    )
    api = ApiClient(fetch, tokens)

    logger.debug(
        "API wired: base_url=%s retry_times=%s retry_delay=%s",
        settings.base_api_url,
        fetch.default_policy.retry_times,
        fetch.default_policy.retry_delay,
    )

    return AppState(settings=settings, tokens=tokens, api=api, board=MemoBoard(api))


async def shutdown_state(state: AppState) -> None:
    """Close the board session, then the HTTP client; failures are logged, not raised."""
    try:
        await state.board.close()
    except Exception:
        logger.exception("Failed to close board session.")
    try:
        await state.api.aclose()
    except Exception:
        logger.exception("Failed to close API client.")
