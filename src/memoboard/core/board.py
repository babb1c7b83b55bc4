# src/memoboard/core/board.py

from __future__ import annotations

"""
Board: the category list + memo editor interaction model.

Every remote operation runs through its own AsyncTaskController, so each one
has its own loading flag, last value and counters:

- categories:    loads once the session opens (resolve_on_mounted)
- memos:         memo list of the expanded category; no concurrency gate, the
                 last clicked category wins
- new_memo:      create; gated, a second "new" while creating is ignored
- selected_memo: full memo shown in the editor; edited locally via set_value
- updated_memo / deleted_memo: save / delete of the selected memo

Data controllers are mounted only after login, inside one controller scope.
"""

import contextlib
import logging
from dataclasses import replace

from ..api import ApiClient
from ..api.auth import is_valid_token
from ..api.types import BLANK_MEMO, CategoryResponse, MemoParams, MemoResponse, MemoSearchResponse
from ..tasks.task_api import controller_scope, settle_quietly
from ..tasks.task_controller import AsyncTaskController

logger = logging.getLogger(__name__)

NEW_MEMO_TITLE = "New Memo"


class BoardError(ValueError):
    """Operation not possible in the current board state (nothing selected, etc.)."""


class MemoBoard:
    def __init__(self, api: ApiClient) -> None:
        self.api = api

        self.login_control: AsyncTaskController[None] = AsyncTaskController(api.auth.login, name="login")

        self.categories: AsyncTaskController[list[CategoryResponse]] = AsyncTaskController(
            api.category.get_categories,
            initial_value=[],
            resolve_on_mounted=True,
            name="categories",
        )
        self.memos: AsyncTaskController[list[MemoSearchResponse]] = AsyncTaskController(
            api.memo.search_memos,
            no_concurrency=False,
            name="memos",
        )
        self.new_memo: AsyncTaskController[MemoResponse] = AsyncTaskController(
            api.memo.create_memo,
            name="new_memo",
        )
        self.selected_memo: AsyncTaskController[MemoResponse] = AsyncTaskController(
            api.memo.get_selected_memo,
            initial_value=BLANK_MEMO,
            name="selected_memo",
        )
        self.updated_memo: AsyncTaskController[MemoResponse] = AsyncTaskController(
            api.memo.update_memo,
            name="updated_memo",
        )
        self.deleted_memo: AsyncTaskController[None] = AsyncTaskController(
            api.memo.delete_memo,
            name="deleted_memo",
        )

        self.expanded_category_id: int | None = None
        self.active_memo_id: int | None = None

        self._session: contextlib.AsyncExitStack | None = None

    @property
    def data_controllers(self) -> tuple[AsyncTaskController, ...]:
        return (
            self.categories,
            self.memos,
            self.new_memo,
            self.selected_memo,
            self.updated_memo,
            self.deleted_memo,
        )

    @property
    def is_open(self) -> bool:
        return self._session is not None

    @property
    def is_busy(self) -> bool:
        """Editor is locked while a save or delete is in flight."""
        return self.updated_memo.resolving or self.deleted_memo.resolving

    @property
    def selected(self) -> MemoResponse | None:
        memo = self.selected_memo.value
        if self.active_memo_id is None or memo is None or memo.id == 0:
            return None
        return memo

    # ---- session ----

    async def login(self, token: str) -> bool:
        """
        Store the token and open the data session (categories start loading).
        Returns False if the login call was ignored because one is running.
        """
        if not is_valid_token(token):
            raise BoardError("Token must be a UUID v4.")

        outcome = await self.login_control.run((token,))
        if not outcome.invoked:
            return False

        await self.open()
        return True

    async def open(self) -> None:
        if self._session is not None:
            return
        stack = contextlib.AsyncExitStack()
        await stack.enter_async_context(controller_scope(*self.data_controllers))
        self._session = stack
        logger.info("Board session opened.")

        task = self.categories.mount_task
        if task is not None:
            # Failure is already counted by the controller; /categories retries.
            await settle_quietly(task, what="Loading categories")

    async def close(self) -> None:
        if self._session is None:
            return
        stack, self._session = self._session, None
        await stack.aclose()
        self.expanded_category_id = None
        self.active_memo_id = None
        logger.info("Board session closed.")

    async def refresh_categories(self) -> list[CategoryResponse] | None:
        return await self.categories.instant_resolve()

    # ---- category list ----

    async def toggle_category(self, category_id: int) -> bool:
        """Expand (and load memos of) a category, or collapse it if already expanded."""
        was_expanded = self.expanded_category_id == category_id
        self.expanded_category_id = None if was_expanded else category_id
        self.active_memo_id = None
        if was_expanded:
            return False
        await self.memos.resolve(category_id)
        return True

    async def create_memo(self, title: str = NEW_MEMO_TITLE) -> MemoResponse | None:
        category_id = self.expanded_category_id
        if category_id is None:
            raise BoardError("Open a category first.")

        memo = await self.new_memo.resolve(MemoParams(category_id=category_id, title=title, content=""))
        await self.memos.resolve(category_id)
        if memo is not None:
            await self.select_memo(memo.id)
        return memo

    # ---- editor ----

    async def select_memo(self, memo_id: int) -> MemoResponse | None:
        self.active_memo_id = memo_id
        return await self.selected_memo.resolve(memo_id)

    def _require_selected(self) -> MemoResponse:
        memo = self.selected
        if memo is None:
            raise BoardError("Select a memo to edit.")
        return memo

    def edit_selected(self, *, title: str | None = None, content: str | None = None) -> MemoResponse:
        """Local edit only; nothing is sent until save_selected()."""
        self._require_selected()
        if self.is_busy:
            raise BoardError("Memo is being saved or deleted.")

        def apply(prev: MemoResponse | None) -> MemoResponse | None:
            if prev is None:
                return prev
            return replace(
                prev,
                title=prev.title if title is None else title,
                content=prev.content if content is None else content,
            )

        self.selected_memo.set_value(apply)
        return self._require_selected()

    async def save_selected(self) -> MemoResponse | None:
        memo = self._require_selected()
        updated = await self.updated_memo.resolve(memo.id, memo.to_params())
        if updated is not None:
            self.selected_memo.set_value(updated)
        return updated

    async def delete_selected(self) -> bool:
        memo = self._require_selected()
        outcome = await self.deleted_memo.run((memo.id,))
        if not outcome.invoked:
            return False

        self.active_memo_id = None
        self.selected_memo.reset()
        if self.expanded_category_id == memo.category_id:
            await self.memos.resolve(memo.category_id)
        return True
