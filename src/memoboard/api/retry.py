# src/memoboard/api/retry.py

from __future__ import annotations

import random

from ..core.ports import RandomFn
from .request_models import RetryPolicy


def is_client_error_status(status: int | None) -> bool:
    """4xx is a correct server response: the request itself is wrong, retrying won't help."""
    return status is not None and 400 <= status < 500


def compute_backoff(tried_count: int, random_fn: RandomFn = random.random) -> float:
    """
    Exponential backoff with jitter, in seconds.

    `tried_count` is the attempt counter after it was incremented for this retry,
    so the first retry waits ~9s, the second ~27s, and so on. The value is
    rounded to whole milliseconds.
    """
    ms = round((3 ** (tried_count + 1) + random_fn()) * 1000)
    return ms / 1000.0


def retry_delay_for(
    policy: RetryPolicy,
    tried_count: int,
    random_fn: RandomFn = random.random,
) -> float:
    if policy.retry_delay is not None:
        return policy.retry_delay
    return compute_backoff(tried_count, random_fn)
