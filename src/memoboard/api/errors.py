# src/memoboard/api/errors.py

"""
Request failure taxonomy.

- ClientError:            HTTP 4xx, a correct server answer; never retried.
- ServerOrTransportError: HTTP 5xx or no response at all (connect/read errors);
                          retried while the policy allows it.
- PolicyExhausted:        the same kind of failure, surfaced after retries ran out.

The raw httpx exception is always kept as __cause__.
"""

from __future__ import annotations

import httpx

from .retry import is_client_error_status


class RequestFailure(Exception):
    """Base for every failure surfaced by the request executor."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        request: httpx.Request | None = None,
        response: httpx.Response | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.request = request
        self.response = response

    @property
    def retryable(self) -> bool:
        return False


class ClientError(RequestFailure):
    pass


class ServerOrTransportError(RequestFailure):
    @property
    def retryable(self) -> bool:
        return True


class PolicyExhausted(ServerOrTransportError):
    def __init__(self, failure: RequestFailure, *, attempts: int) -> None:
        super().__init__(
            f"{failure} (gave up after {attempts} attempt{'s' if attempts != 1 else ''})",
            status_code=failure.status_code,
            request=failure.request,
            response=failure.response,
        )
        self.failure = failure
        self.attempts = attempts

    @property
    def retryable(self) -> bool:
        return False


def _request_of(exc: httpx.HTTPError) -> httpx.Request | None:
    # httpx raises RuntimeError from .request when the error was built without one.
    try:
        return exc.request
    except RuntimeError:
        return None


def classify_failure(exc: httpx.HTTPError | RequestFailure) -> RequestFailure:
    """
    Map a transport exception onto the taxonomy.

    Anything that already is a RequestFailure is returned as-is.
    """
    if isinstance(exc, RequestFailure):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        status = exc.response.status_code
        method = exc.request.method
        url = exc.request.url
        message = f"{method} {url} -> HTTP {status}"
        cls = ClientError if is_client_error_status(status) else ServerOrTransportError
        failure: RequestFailure = cls(
            message,
            status_code=status,
            request=exc.request,
            response=exc.response,
        )
    else:
        request = _request_of(exc)
        where = f"{request.method} {request.url}" if request is not None else "request"
        detail = f": {exc}" if str(exc) else ""
        failure = ServerOrTransportError(
            f"{where} failed: {exc.__class__.__name__}{detail}",
            request=request,
        )
    failure.__cause__ = exc
    return failure


class UnexpectedResponse(RequestFailure):
    """2xx answer whose body does not have the expected shape (e.g. an HTML page)."""
