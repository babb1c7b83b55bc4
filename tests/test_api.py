# tests/test_api.py

from __future__ import annotations

import json

import httpx
import pytest
import respx

from memoboard.api import ApiClient, FetchApi
from memoboard.api.auth import AccessTokenStore, is_valid_token
from memoboard.api.errors import UnexpectedResponse
from memoboard.api.types import CategoryResponse, MemoParams, MemoResponse, MemoSearchResponse

from .conftest import BASE_URL, TOKEN
from .fakes import FakeCredentials

MEMO = {"id": 11, "category_id": 2, "title": "Groceries", "content": "milk"}


def test_token_validation() -> None:
    assert is_valid_token(TOKEN)
    assert not is_valid_token("")
    assert not is_valid_token(None)
    assert not is_valid_token("not-a-uuid")
    # version nibble must be 4
    assert not is_valid_token("0f8fad5b-d9cb-169f-a165-70867728950e")


def test_token_store_ignores_empty_values() -> None:
    store = AccessTokenStore(TOKEN)
    store.set("")
    store.set(None)
    assert store.access_token() == TOKEN
    store.clear()
    assert store.access_token() is None
    assert not store.has_token


@pytest.mark.asyncio
async def test_auth_login_and_logout(api) -> None:
    await api.auth.login(TOKEN)
    assert api.tokens.access_token() == TOKEN
    await api.auth.logout()
    assert api.tokens.access_token() is None


def test_memo_response_parsing() -> None:
    memo = MemoResponse.from_dict({**MEMO, "title": None})
    assert memo == MemoResponse(id=11, category_id=2, title="", content="milk")
    assert memo.to_params() == MemoParams(category_id=2, title="", content="milk")

    with pytest.raises(ValueError, match="missing field: category_id"):
        MemoResponse.from_dict({"id": 1})
    with pytest.raises(ValueError, match="must be an integer"):
        CategoryResponse.from_dict({"id": "abc", "name": "x"})


@pytest.mark.asyncio
async def test_get_categories(api) -> None:
    with respx.mock(base_url=BASE_URL) as router:
        router.get("/category").mock(
            return_value=httpx.Response(200, json=[{"id": 1, "name": "Work"}, {"id": 2, "name": "Home"}])
        )
        cats = await api.category.get_categories()

    assert cats == [CategoryResponse(1, "Work"), CategoryResponse(2, "Home")]


@pytest.mark.asyncio
async def test_search_memos_sends_category_query(api) -> None:
    with respx.mock(base_url=BASE_URL) as router:
        route = router.get("/memo").mock(return_value=httpx.Response(200, json=[{"id": 11, "title": "Groceries"}]))
        memos = await api.memo.search_memos(2)

    assert memos == [MemoSearchResponse(11, "Groceries")]
    assert route.calls.last.request.url.params["category_id"] == "2"


@pytest.mark.asyncio
async def test_create_update_get_delete_memo(api) -> None:
    params = MemoParams(category_id=2, title="Groceries", content="milk")

    with respx.mock(base_url=BASE_URL) as router:
        create = router.post("/memo").mock(return_value=httpx.Response(201, json=MEMO))
        get = router.get("/memo/11").mock(return_value=httpx.Response(200, json=MEMO))
        update = router.put("/memo/11").mock(
            return_value=httpx.Response(200, json={**MEMO, "content": "milk, eggs"})
        )
        delete = router.delete("/memo/11").mock(return_value=httpx.Response(204))

        created = await api.memo.create_memo(params)
        fetched = await api.memo.get_selected_memo(11)
        updated = await api.memo.update_memo(11, MemoParams(2, "Groceries", "milk, eggs"))
        assert await api.memo.delete_memo(11) is None

    assert created == fetched == MemoResponse.from_dict(MEMO)
    assert updated.content == "milk, eggs"
    assert json.loads(create.calls.last.request.read()) == params.to_dict()
    assert json.loads(update.calls.last.request.read())["content"] == "milk, eggs"
    assert get.call_count == 1
    assert delete.call_count == 1


@pytest.mark.asyncio
async def test_api_client_closes_owned_client(tokens) -> None:
    fetch = FetchApi(base_url=BASE_URL, credentials=tokens)
    async with ApiClient(fetch, tokens):
        assert not fetch.client.is_closed
    assert fetch.client.is_closed


@pytest.mark.asyncio
async def test_fetch_accepts_any_credential_provider() -> None:
    creds = FakeCredentials()
    fetch = FetchApi(base_url=BASE_URL, credentials=creds, client=httpx.AsyncClient())
    assert fetch.injected_headers() == {"Content-Type": "application/json"}

    creds.token = TOKEN
    assert fetch.injected_headers()["X-ACCESS-TOKEN"] == TOKEN

    await fetch.aclose()
    # not owned: the caller closes it
    assert not fetch.client.is_closed
    await fetch.client.aclose()


@pytest.mark.asyncio
async def test_unexpected_payload_shape_is_a_request_failure(api) -> None:
    with respx.mock(base_url=BASE_URL) as router:
        router.get("/category").mock(return_value=httpx.Response(200, text="<html>proxy</html>"))
        router.get("/memo/1").mock(return_value=httpx.Response(200, json=[1, 2]))

        with pytest.raises(UnexpectedResponse, match="GET /category: expected a JSON array"):
            await api.category.get_categories()
        with pytest.raises(UnexpectedResponse, match="expected a JSON object, got list"):
            await api.memo.get_selected_memo(1)
