# src/memoboard/api/request_handler.py

from __future__ import annotations

"""
Resilient request executor.

One RequestHandler owns one logical call chain: the original attempt plus all
of its retries. The attempt counter lives on the handler, so exhaustion is
tracked across the whole chain.

Per attempt:
- build the request (descriptor + injected headers, token read right now),
- dispatch it through the shared httpx.AsyncClient,
- on success return the decoded JSON body,
- on failure classify it, give the custom error handler a chance, then apply
  the default policy: 4xx -> raise, exhausted -> raise, else wait and retry.
"""

import asyncio
import inspect
import logging
import random
from typing import Any

import httpx

from ..core.ports import RandomFn, SleepFn
from .errors import PolicyExhausted, RequestFailure, classify_failure
from .request_models import HandlerConfig, RequestDescriptor, RetryPolicy
from .retry import retry_delay_for

logger = logging.getLogger(__name__)

_RETRY = object()


def join_url(base_url: str, url: str) -> str:
    if url.startswith(("http://", "https://")) or not base_url:
        return url
    return f"{base_url.rstrip('/')}/{url.lstrip('/')}"


def decode_body(response: httpx.Response) -> Any:
    """
    JSON body, None for empty responses (e.g. 204 on delete), and the raw text
    for a body that is not JSON (HTML error page from a proxy, text/plain).
    """
    if response.status_code == 204 or not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return response.text


class RequestHandler:
    def __init__(
        self,
        config: HandlerConfig,
        *,
        sleep: SleepFn = asyncio.sleep,
        random_fn: RandomFn = random.random,
    ) -> None:
        self.base_url = config.base_url or ""
        self.origin_url = config.origin_url or ""
        self.policy: RetryPolicy = config.policy
        self.descriptor: RequestDescriptor = config.descriptor
        self.client = config.client
        self.error_handler = config.error_handler
        self.header_factory = config.header_factory

        self.tried = 0

        self._sleep = sleep
        self._random = random_fn

    @property
    def retry_times(self) -> int:
        return self.policy.retry_times

    def build_request(self) -> httpx.Request:
        headers: dict[str, str] = dict(self.descriptor.headers)
        if self.header_factory is not None:
            headers.update(self.header_factory())
        if self.origin_url:
            headers["origin-url"] = self.origin_url
        headers["Access-Control-Allow-Origin"] = "*"

        return self.client.build_request(
            self.descriptor.method,
            join_url(self.base_url, self.descriptor.url),
            headers=headers,
            json=self.descriptor.body,
            params=self.descriptor.params,
        )

    async def _attempt(self) -> Any:
        request = self.build_request()
        response = await self.client.send(request)
        response.raise_for_status()
        return decode_body(response)

    async def run(self) -> Any:
        while True:
            try:
                return await self._attempt()
            except httpx.HTTPError as exc:
                failure = classify_failure(exc)

            outcome = await self._handle_failure(failure)
            if outcome is _RETRY:
                continue
            return outcome

    async def _handle_failure(self, failure: RequestFailure) -> Any:
        if self.error_handler is None:
            return await self.default_error_handler(failure)

        escalated = False

        def do_default() -> None:
            nonlocal escalated
            escalated = True

        result = self.error_handler(failure, do_default)
        if inspect.isawaitable(result):
            result = await result

        if escalated:
            return await self.default_error_handler(failure)

        logger.debug(
            "Custom error handler settled %s %s (status=%s)",
            self.descriptor.method,
            self.descriptor.url,
            failure.status_code,
        )
        return result

    async def default_error_handler(self, failure: RequestFailure) -> Any:
        method, url = self.descriptor.method, self.descriptor.url

        if not failure.retryable:
            logger.warning("%s %s: client error status=%s, not retrying", method, url, failure.status_code)
            raise failure

        if self.tried >= self.retry_times:
            if self.retry_times:
                logger.warning("%s %s: giving up after %d attempts", method, url, self.tried + 1)
            raise PolicyExhausted(failure, attempts=self.tried + 1) from failure

        self.tried += 1
        delay = retry_delay_for(self.policy, self.tried, self._random)
        logger.info(
            "%s %s failed (%s); retry %d/%d in %.3fs",
            method,
            url,
            failure,
            self.tried,
            self.retry_times,
            delay,
        )
        await self._sleep(delay)
        return _RETRY
