# src/memoboard/api/auth.py

from __future__ import annotations

import logging
import re

logger = logging.getLogger(__name__)

UUID_V4_REGEX = re.compile(r"^[0-9a-f]{8}-[0-9a-f]{4}-4[0-9a-f]{3}-[89ab][0-9a-f]{3}-[0-9a-f]{12}$")


def is_valid_token(token: str | None) -> bool:
    """Access tokens are lowercase UUID v4 strings."""
    return bool(token) and UUID_V4_REGEX.match(token or "") is not None


class AccessTokenStore:
    """
    Settable CredentialProvider.

    The most recent non-empty token wins; empty values are ignored so a blank
    login never wipes a working session. Use clear() to log out explicitly.
    """

    def __init__(self, token: str | None = None) -> None:
        self._token = ""
        self.set(token)

    def set(self, token: str | None) -> None:
        if not token:
            return
        self._token = token

    def clear(self) -> None:
        self._token = ""

    def access_token(self) -> str | None:
        return self._token or None

    @property
    def has_token(self) -> bool:
        return bool(self._token)


class AuthApi:
    """Login is local-only: the backend authenticates each request by its X-ACCESS-TOKEN header."""

    def __init__(self, tokens: AccessTokenStore) -> None:
        self._tokens = tokens

    async def login(self, token: str) -> None:
        self._tokens.set(token)
        logger.info("Access token set (%d chars).", len(token or ""))

    async def logout(self) -> None:
        self._tokens.clear()
        logger.info("Access token cleared.")
