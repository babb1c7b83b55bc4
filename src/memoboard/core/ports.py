# src/memoboard/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The request executor and the task controllers depend on these Protocols and
aliases instead of concrete implementations, so token storage, timing and
randomness stay swappable in tests.
"""

from typing import Any, Awaitable, Callable, Protocol, TypeAlias

SleepFn: TypeAlias = Callable[[float], Awaitable[None]]
RandomFn: TypeAlias = Callable[[], float]

# (failure, do_default) -> substitute settlement (plain value or awaitable).
# Calling do_default() hands the failure back to the default retry logic.
ErrorHandler: TypeAlias = Callable[[Exception, Callable[[], None]], Any]


class CredentialProvider(Protocol):
    """
    Source of the access token injected into every outgoing request.

    Read when each request attempt is built: a token change is visible to
    attempts built afterwards, never to ones already dispatched.
    Empty string / None means "no token header".
    """

    def access_token(self) -> str | None: ...
