# src/memoboard/api/request_models.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

import httpx

from ..core.ports import ErrorHandler


@dataclass(frozen=True, slots=True)
class RequestDescriptor:
    """What to call: method, URL (relative to the base URL), headers, JSON body, query."""

    url: str
    method: str = "GET"
    headers: Mapping[str, str] = field(default_factory=dict)
    body: Any = None
    params: Mapping[str, Any] | None = None

    def __post_init__(self) -> None:
        method = (self.method or "").strip().upper()
        if not method:
            raise ValueError("RequestDescriptor.method cannot be empty")
        object.__setattr__(self, "method", method)
        object.__setattr__(self, "headers", dict(self.headers or {}))


@dataclass(frozen=True, slots=True)
class RetryPolicy:
    """
    retry_times: additional attempts after the first one (0 = no retries).
    retry_delay: seconds between attempts. None -> exponential backoff with jitter;
                 any number (including 0) -> that constant delay for every retry.
    """

    retry_times: int = 0
    retry_delay: float | None = None

    def __post_init__(self) -> None:
        if int(self.retry_times) < 0:
            raise ValueError("RetryPolicy.retry_times must be >= 0")
        object.__setattr__(self, "retry_times", int(self.retry_times))
        if self.retry_delay is not None:
            if float(self.retry_delay) < 0:
                raise ValueError("RetryPolicy.retry_delay must be >= 0")
            object.__setattr__(self, "retry_delay", float(self.retry_delay))


@dataclass(slots=True)
class HandlerConfig:
    """Everything one RequestHandler needs for a single call chain."""

    descriptor: RequestDescriptor
    client: httpx.AsyncClient
    policy: RetryPolicy = field(default_factory=RetryPolicy)
    base_url: str = ""
    origin_url: str = ""
    error_handler: ErrorHandler | None = None
    # Called for every attempt; returns headers merged over the descriptor's own.
    header_factory: Callable[[], Mapping[str, str]] | None = None
