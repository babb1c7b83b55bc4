# src/memoboard/api/category.py

from __future__ import annotations

from .fetch import FetchApi
from .request_models import RequestDescriptor
from .types import CategoryResponse, expect_list


class CategoryApi:
    def __init__(self, fetch: FetchApi) -> None:
        self._fetch = fetch

    async def get_categories(self) -> list[CategoryResponse]:
        data = await self._fetch.fetch(RequestDescriptor(url="/category", method="GET"))
        return [CategoryResponse.from_dict(item) for item in expect_list(data, "GET /category")]
