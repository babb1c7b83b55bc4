# src/memoboard/api/memo.py

from __future__ import annotations

from .fetch import FetchApi
from .request_models import RequestDescriptor
from .types import MemoParams, MemoResponse, MemoSearchResponse, expect_list, expect_object


class MemoApi:
    """Thin wrappers over the /memo endpoints."""

    def __init__(self, fetch: FetchApi) -> None:
        self._fetch = fetch

    async def search_memos(self, category_id: int) -> list[MemoSearchResponse]:
        data = await self._fetch.fetch(
            RequestDescriptor(url="/memo", method="GET", params={"category_id": category_id})
        )
        return [MemoSearchResponse.from_dict(item) for item in expect_list(data, "GET /memo")]

    async def create_memo(self, params: MemoParams) -> MemoResponse:
        data = await self._fetch.fetch(RequestDescriptor(url="/memo", method="POST", body=params.to_dict()))
        return MemoResponse.from_dict(expect_object(data, "POST /memo"))

    async def get_selected_memo(self, memo_id: int) -> MemoResponse:
        data = await self._fetch.fetch(RequestDescriptor(url=f"/memo/{memo_id}", method="GET"))
        return MemoResponse.from_dict(expect_object(data, f"GET /memo/{memo_id}"))

    async def update_memo(self, memo_id: int, params: MemoParams) -> MemoResponse:
        data = await self._fetch.fetch(
            RequestDescriptor(url=f"/memo/{memo_id}", method="PUT", body=params.to_dict())
        )
        return MemoResponse.from_dict(expect_object(data, f"PUT /memo/{memo_id}"))

    async def delete_memo(self, memo_id: int) -> None:
        await self._fetch.fetch(RequestDescriptor(url=f"/memo/{memo_id}", method="DELETE"))
