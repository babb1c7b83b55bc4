# src/memoboard/tasks/task_controller.py

from __future__ import annotations

"""
Async task controller.

Owns one "slot" of asynchronous work: the last committed value, a resolving
flag and lifetime success/failure counters. Only the most recently started
operation may commit a success; older ones still settle for their own caller
but cannot touch shared state.

Staleness is a plain generation counter compared at each commit point.
Nothing in flight is ever aborted: cancel() only makes the eventual success
irrelevant and drops `resolving` right away.

Failures are NOT generation-gated: any failure clears `resolving` and bumps
`rejected_count`, even when it belongs to a superseded call. Callers that
display errors must be ready to see one from an operation they already
replaced.
"""

import asyncio
import inspect
import logging
from dataclasses import replace
from typing import Any, Awaitable, Callable, Generic, TypeVar

from .task_models import ControllerState, ResolveOutcome, ResolvePhase

logger = logging.getLogger(__name__)

T = TypeVar("T")


class AsyncTaskController(Generic[T]):
    def __init__(
        self,
        fn: Callable[..., Awaitable[T]],
        *,
        initial_value: T | None = None,
        resolve_on_mounted: bool = False,
        delay: float = 0.0,
        no_concurrency: bool = True,
        reset_at_resolve: bool = False,
        name: str | None = None,
    ) -> None:
        """
        fn:                 the async function to run; arguments are passed through untouched.
        initial_value:      value before the first commit and after reset().
        resolve_on_mounted: mount() starts one resolve() with no arguments.
        delay:              seconds to wait before invoking fn; a newer resolve()/cancel()
                            during the wait drops this call.
        no_concurrency:     while resolving, resolve() is a no-op returning None.
        reset_at_resolve:   value goes back to initial_value when fn is about to run.
        """
        if delay < 0:
            raise ValueError("delay must be >= 0")

        self._fn = fn
        self.initial_value = initial_value
        self.resolve_on_mounted = resolve_on_mounted
        self.delay = float(delay)
        self.no_concurrency = no_concurrency
        self.reset_at_resolve = reset_at_resolve
        self.name = name or getattr(fn, "__qualname__", None) or "task"

        self._state: ControllerState[T] = ControllerState(value=initial_value)
        self._generation = 0

        self._timer: asyncio.TimerHandle | None = None
        self._timer_waiter: asyncio.Future[None] | None = None
        self._mount_task: asyncio.Task[Any] | None = None

    # ---- state ----

    @property
    def value(self) -> T | None:
        return self._state.value

    @property
    def resolving(self) -> bool:
        return self._state.resolving

    @property
    def resolved_count(self) -> int:
        return self._state.resolved_count

    @property
    def rejected_count(self) -> int:
        return self._state.rejected_count

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def has_pending_timer(self) -> bool:
        return self._timer is not None

    @property
    def mount_task(self) -> asyncio.Task[Any] | None:
        """Background resolve() started by the last mount(), if any."""
        return self._mount_task

    def snapshot(self) -> ControllerState[T]:
        return replace(self._state)

    def _next_generation(self) -> int:
        self._generation += 1
        return self._generation

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation

    # ---- delayed start ----

    def _clear_timer(self) -> None:
        timer, waiter = self._timer, self._timer_waiter
        self._timer = None
        self._timer_waiter = None
        if timer is not None:
            timer.cancel()
        # Wake the waiting resolve() so it settles as a no-op instead of hanging.
        if waiter is not None and not waiter.done():
            waiter.set_result(None)

    async def _wait_delay(self, delay: float) -> None:
        self._clear_timer()
        loop = asyncio.get_running_loop()
        waiter: asyncio.Future[None] = loop.create_future()
        self._timer_waiter = waiter
        self._timer = loop.call_later(delay, _settle, waiter)
        try:
            await waiter
        finally:
            if self._timer_waiter is waiter:
                if self._timer is not None:
                    self._timer.cancel()
                self._timer = None
                self._timer_waiter = None

    # ---- operations ----

    async def resolve(self, *args: Any, **kwargs: Any) -> T | None:
        outcome = await self.run(args, kwargs, delay=self.delay)
        return outcome.value

    async def instant_resolve(self, *args: Any, **kwargs: Any) -> T | None:
        outcome = await self.run(args, kwargs, delay=0.0)
        return outcome.value

    async def run(
        self,
        args: tuple[Any, ...] = (),
        kwargs: dict[str, Any] | None = None,
        *,
        delay: float | None = None,
    ) -> ResolveOutcome:
        """Lower-level resolve(): reports which terminal phase the call reached."""
        if self.no_concurrency and self._state.resolving:
            logger.debug("%s: resolve ignored, already resolving (gen=%d)", self.name, self._generation)
            return ResolveOutcome(ResolvePhase.GATE_REJECTED, self._generation)

        generation = self._next_generation()
        wait = self.delay if delay is None else delay

        if wait > 0:
            logger.debug("%s: gen=%d scheduled in %.3fs", self.name, generation, wait)
            await self._wait_delay(wait)
            if not self._is_current(generation):
                logger.debug("%s: gen=%d superseded before start", self.name, generation)
                return ResolveOutcome(ResolvePhase.DISCARDED_STALE, generation)
        else:
            # A newer call supersedes an older one still waiting on its delay.
            self._clear_timer()

        if self.reset_at_resolve:
            self._state.value = self.initial_value
        self._state.resolving = True
        logger.debug("%s: gen=%d resolving", self.name, generation)

        try:
            result = self._fn(*args, **(kwargs or {}))
            value = await result if inspect.isawaitable(result) else result
        except asyncio.CancelledError:
            if self._is_current(generation):
                self._state.resolving = False
            raise
        except Exception as e:
            self._state.resolving = False
            self._state.rejected_count += 1
            logger.debug(
                "%s: gen=%d rejected (%s), current=%s",
                self.name,
                generation,
                e.__class__.__name__,
                self._is_current(generation),
            )
            raise

        if not self._is_current(generation):
            logger.debug("%s: gen=%d settled stale (live gen=%d)", self.name, generation, self._generation)
            return ResolveOutcome(ResolvePhase.DISCARDED_STALE, generation, value, invoked=True)

        self._state.value = value
        self._state.resolving = False
        self._state.resolved_count += 1
        logger.debug("%s: gen=%d committed", self.name, generation)
        return ResolveOutcome(ResolvePhase.COMMITTED, generation, value, invoked=True)

    def cancel(self, keep_resolving: bool = False) -> None:
        self._next_generation()
        self._clear_timer()
        if keep_resolving:
            return
        self._state.resolving = False

    def set_value(self, value: T | None | Callable[[T | None], T | None]) -> None:
        """
        Overwrite `value` directly; a callable is treated as an updater of the
        previous value. Does not advance the generation, so a still-running
        current operation will overwrite this when it commits.
        """
        if callable(value):
            value = value(self._state.value)
        self._state.value = value

    def reset(self) -> None:
        self.cancel()
        self._state.value = self.initial_value
        self._state.resolving = False
        self._state.resolved_count = 0
        self._state.rejected_count = 0

    # ---- owner scope ----

    def mount(self) -> asyncio.Task[Any] | None:
        """
        Attach to the owning scope. With resolve_on_mounted, starts one
        resolve() in the background and returns its task.
        Must be called from a running event loop.
        """
        if not self.resolve_on_mounted:
            return None
        task = asyncio.get_running_loop().create_task(self.resolve())
        task.add_done_callback(self._log_mount_result)
        self._mount_task = task
        return task

    def unmount(self) -> None:
        """Detach from the owning scope: nothing started so far may commit afterwards."""
        self.cancel()
        self._mount_task = None

    def _log_mount_result(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            return
        # Retrieve the exception so an unawaited mount task does not warn at GC.
        exc = task.exception()
        if exc is not None:
            logger.debug("%s: resolve on mount failed: %s", self.name, exc)

    async def __aenter__(self) -> AsyncTaskController[T]:
        self.mount()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.unmount()


def _settle(waiter: asyncio.Future[None]) -> None:
    if not waiter.done():
        waiter.set_result(None)
