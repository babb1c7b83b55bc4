# src/memoboard/core/state.py

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from ..api import AccessTokenStore, ApiClient
    from .board import MemoBoard


@dataclass
class AppState:
    """
    Shared application state passed to connectors and command handlers.

    Built once by cli/bootstrap.py; settings is any object with the Settings
    attributes (tests pass a SimpleNamespace).
    """

    settings: Any
    tokens: AccessTokenStore
    api: ApiClient
    board: MemoBoard
