# src/memoboard/api/fetch.py

from __future__ import annotations

import asyncio
import logging
import random
from typing import Any

import httpx

from ..core.ports import CredentialProvider, ErrorHandler, RandomFn, SleepFn
from .request import request
from .request_models import HandlerConfig, RequestDescriptor, RetryPolicy

logger = logging.getLogger(__name__)


class FetchApi:
    """
    Application-level entry to the request executor.

    Merges the base URL, the caller's descriptor and the injected headers
    (access token, JSON content type), then runs one RequestHandler chain.
    The httpx.AsyncClient is shared across calls; close it with aclose().
    """

    def __init__(
        self,
        *,
        base_url: str,
        credentials: CredentialProvider,
        client: httpx.AsyncClient | None = None,
        origin_url: str = "",
        timeout_seconds: float = 10.0,
        default_policy: RetryPolicy | None = None,
        error_handler: ErrorHandler | None = None,
        sleep: SleepFn = asyncio.sleep,
        random_fn: RandomFn = random.random,
    ) -> None:
        self.base_url = base_url
        self.origin_url = origin_url
        self.credentials = credentials
        self.default_policy = default_policy or RetryPolicy()
        self.error_handler = error_handler

        self._owns_client = client is None
        self.client = client if client is not None else httpx.AsyncClient(timeout=timeout_seconds)

        self._sleep = sleep
        self._random = random_fn

    def injected_headers(self) -> dict[str, str]:
        headers = {"Content-Type": "application/json"}
        token = self.credentials.access_token()
        if token:
            headers["X-ACCESS-TOKEN"] = token
        return headers

    async def fetch(
        self,
        descriptor: RequestDescriptor,
        *,
        policy: RetryPolicy | None = None,
        error_handler: ErrorHandler | None = None,
    ) -> Any:
        """
        policy:        overrides the default retry policy for this call chain.
        error_handler: overrides the application-wide classification hook.
        """
        config = HandlerConfig(
            descriptor=descriptor,
            client=self.client,
            policy=policy or self.default_policy,
            base_url=self.base_url,
            origin_url=self.origin_url,
            error_handler=error_handler or self.error_handler,
            header_factory=self.injected_headers,
        )
        logger.debug("fetch %s %s", descriptor.method, descriptor.url)
        return await request(config, sleep=self._sleep, random_fn=self._random)

    async def aclose(self) -> None:
        if self._owns_client:
            await self.client.aclose()
