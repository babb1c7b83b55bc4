# tests/test_board.py

from __future__ import annotations

import json

import httpx
import pytest
import respx

from memoboard.api.errors import ClientError
from memoboard.api.types import BLANK_MEMO, CategoryResponse, MemoSearchResponse
from memoboard.core.board import BoardError

from .conftest import BASE_URL, TOKEN

CATEGORIES = [{"id": 1, "name": "Work"}, {"id": 2, "name": "Home"}]
MEMO = {"id": 11, "category_id": 2, "title": "Groceries", "content": "milk"}


def _mock_backend(router: respx.MockRouter) -> None:
    router.get("/category").mock(return_value=httpx.Response(200, json=CATEGORIES))
    router.get("/memo").mock(return_value=httpx.Response(200, json=[{"id": 11, "title": "Groceries"}]))
    router.get("/memo/11").mock(return_value=httpx.Response(200, json=MEMO))


@pytest.mark.asyncio
async def test_login_rejects_malformed_token(board) -> None:
    with pytest.raises(BoardError):
        await board.login("abc")
    assert not board.is_open
    assert board.api.tokens.access_token() is None


@pytest.mark.asyncio
async def test_login_opens_session_and_loads_categories(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        assert await board.login(TOKEN) is True

        assert board.is_open
        assert board.api.tokens.access_token() == TOKEN
        assert board.categories.value == [CategoryResponse(1, "Work"), CategoryResponse(2, "Home")]
        assert router.calls.last.request.headers["X-ACCESS-TOKEN"] == TOKEN

        await board.close()
    assert not board.is_open


@pytest.mark.asyncio
async def test_category_load_failure_is_counted_not_raised(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        router.get("/category").mock(return_value=httpx.Response(500))
        assert await board.login(TOKEN) is True
        await board.close()

    assert board.categories.rejected_count == 1
    assert board.categories.value == []


@pytest.mark.asyncio
async def test_toggle_category_expands_and_collapses(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        await board.login(TOKEN)

        assert await board.toggle_category(2) is True
        assert board.expanded_category_id == 2
        assert board.memos.value == [MemoSearchResponse(11, "Groceries")]

        assert await board.toggle_category(2) is False
        assert board.expanded_category_id is None
        await board.close()


@pytest.mark.asyncio
async def test_create_memo_requires_expanded_category(board) -> None:
    with pytest.raises(BoardError, match="Open a category"):
        await board.create_memo()


@pytest.mark.asyncio
async def test_create_memo_refreshes_list_and_selects_it(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        create = router.post("/memo").mock(
            return_value=httpx.Response(201, json={**MEMO, "title": "New Memo", "content": ""})
        )
        await board.login(TOKEN)
        await board.toggle_category(2)

        memo = await board.create_memo()
        await board.close()

    assert memo is not None and memo.id == 11
    assert json.loads(create.calls.last.request.read()) == {"category_id": 2, "title": "New Memo", "content": ""}
    assert board.memos.resolved_count == 2


@pytest.mark.asyncio
async def test_edit_and_save_selected_memo(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        update = router.put("/memo/11").mock(
            return_value=httpx.Response(200, json={**MEMO, "title": "Shopping"})
        )
        await board.login(TOKEN)
        await board.toggle_category(2)
        await board.select_memo(11)

        edited = board.edit_selected(title="Shopping")
        assert edited.title == "Shopping"
        assert update.call_count == 0

        saved = await board.save_selected()
        await board.close()

    assert saved is not None and saved.title == "Shopping"
    assert json.loads(update.calls.last.request.read()) == {
        "category_id": 2,
        "title": "Shopping",
        "content": "milk",
    }


@pytest.mark.asyncio
async def test_edit_without_selection_fails(board) -> None:
    with pytest.raises(BoardError, match="Select a memo"):
        board.edit_selected(title="x")


@pytest.mark.asyncio
async def test_delete_selected_clears_editor_and_reloads_list(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        delete = router.delete("/memo/11").mock(return_value=httpx.Response(204))
        await board.login(TOKEN)
        await board.toggle_category(2)
        await board.select_memo(11)

        assert await board.delete_selected() is True
        await board.close()

    assert delete.call_count == 1
    assert board.selected is None
    assert board.selected_memo.value == BLANK_MEMO
    assert board.memos.resolved_count == 2


@pytest.mark.asyncio
async def test_save_failure_propagates_and_is_counted(board) -> None:
    with respx.mock(base_url=BASE_URL, assert_all_called=False) as router:
        _mock_backend(router)
        router.put("/memo/11").mock(return_value=httpx.Response(400))
        await board.login(TOKEN)
        await board.select_memo(11)

        with pytest.raises(ClientError):
            await board.save_selected()
        await board.close()

    assert board.updated_memo.rejected_count == 1
    assert board.is_busy is False
