# src/memoboard/tasks/task_api.py

from __future__ import annotations

import contextlib
import logging
from collections.abc import AsyncIterator, Awaitable
from typing import Any, TypeVar

from .task_controller import AsyncTaskController

logger = logging.getLogger(__name__)

T = TypeVar("T")


@contextlib.asynccontextmanager
async def controller_scope(*controllers: AsyncTaskController[Any]) -> AsyncIterator[None]:
    """
    Tie controllers to one owning scope (a screen, a console session).

    On enter every controller is mounted (resolve_on_mounted ones start
    loading); on exit every one is unmounted, so nothing started inside the
    scope can commit after it is gone.
    """
    for c in controllers:
        c.mount()
    try:
        yield
    finally:
        for c in controllers:
            c.unmount()


async def settle_quietly(awaitable: Awaitable[T], *, what: str) -> tuple[bool, T | None]:
    """
    For fire-and-forget UI handlers: await, log a failure instead of raising.

    Returns (ok, value). The controller has already counted the failure, so
    this only decides that the caller does not care about the exception.
    """
    try:
        return True, await awaitable
    except Exception as e:
        logger.warning("%s failed: %s", what, e)
        return False, None
