# src/memoboard/api/request.py

from __future__ import annotations

import asyncio
import random
from typing import Any

from ..core.ports import RandomFn, SleepFn
from .request_handler import RequestHandler
from .request_models import HandlerConfig


async def request(
    config: HandlerConfig,
    *,
    sleep: SleepFn = asyncio.sleep,
    random_fn: RandomFn = random.random,
) -> Any:
    """Run one call chain (first attempt + retries) with a fresh handler."""
    return await RequestHandler(config, sleep=sleep, random_fn=random_fn).run()
