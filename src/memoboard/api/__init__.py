"""
Backend API layer.

Components:
- request_models.py: RequestDescriptor, RetryPolicy, HandlerConfig
- errors.py: failure taxonomy (ClientError, ServerOrTransportError, PolicyExhausted)
- retry.py: retry eligibility + backoff computation
- request_handler.py: the resilient request executor (one call chain per handler)
- fetch.py: base URL + injected headers around the executor
- auth.py / category.py / memo.py: endpoint wrappers
"""

from __future__ import annotations

from .auth import AccessTokenStore, AuthApi
from .category import CategoryApi
from .fetch import FetchApi
from .memo import MemoApi


class ApiClient:
    """All endpoint groups over one shared FetchApi."""

    def __init__(self, fetch: FetchApi, tokens: AccessTokenStore) -> None:
        self.fetch = fetch
        self.tokens = tokens
        self.auth = AuthApi(tokens)
        self.category = CategoryApi(fetch)
        self.memo = MemoApi(fetch)

    async def aclose(self) -> None:
        await self.fetch.aclose()

    async def __aenter__(self) -> ApiClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


__all__ = ["AccessTokenStore", "ApiClient", "AuthApi", "CategoryApi", "FetchApi", "MemoApi"]
