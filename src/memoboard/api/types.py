# src/memoboard/api/types.py

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping

from .errors import UnexpectedResponse


def _int(data: Mapping[str, Any], key: str) -> int:
    if key not in data:
        raise ValueError(f"missing field: {key}")
    raw = data[key]
    try:
        return int(raw)
    except (TypeError, ValueError):
        raise ValueError(f"field {key} must be an integer, got {raw!r}") from None


def _str(data: Mapping[str, Any], key: str) -> str:
    raw = data.get(key)
    return "" if raw is None else str(raw)


def expect_object(data: Any, what: str) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise UnexpectedResponse(f"{what}: expected a JSON object, got {type(data).__name__}")
    return data


def expect_list(data: Any, what: str) -> list[Mapping[str, Any]]:
    if data is None:
        return []
    if not isinstance(data, list):
        raise UnexpectedResponse(f"{what}: expected a JSON array, got {type(data).__name__}")
    return [expect_object(item, what) for item in data]


@dataclass(frozen=True, slots=True)
class CategoryResponse:
    id: int
    name: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> CategoryResponse:
        return cls(id=_int(data, "id"), name=_str(data, "name"))


@dataclass(frozen=True, slots=True)
class MemoSearchResponse:
    """Light memo for list views: id + title only."""

    id: int
    title: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MemoSearchResponse:
        return cls(id=_int(data, "id"), title=_str(data, "title"))


@dataclass(frozen=True, slots=True)
class MemoParams:
    """Payload for creating / updating a memo."""

    category_id: int
    title: str
    content: str

    def to_dict(self) -> dict[str, Any]:
        return {"category_id": self.category_id, "title": self.title, "content": self.content}


@dataclass(frozen=True, slots=True)
class MemoResponse:
    id: int
    category_id: int
    title: str
    content: str

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> MemoResponse:
        return cls(
            id=_int(data, "id"),
            category_id=_int(data, "category_id"),
            title=_str(data, "title"),
            content=_str(data, "content"),
        )

    def to_params(self) -> MemoParams:
        return MemoParams(category_id=self.category_id, title=self.title, content=self.content)


BLANK_MEMO = MemoResponse(id=0, category_id=0, title="", content="")
