from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
from datetime import date
from typing import Any
from urllib.parse import urlencode

DEFAULT_PAGE_SIZE = 10
PAGE_SIZE_OPTIONS = (10, 25, 50, 100)

Pairs = tuple[tuple[str, Any], ...]


@dataclass(frozen=True)
class QueryState:
    """Everything that decides what a listing request looks like.

    Mappings are kept as insertion-ordered pairs so the state is hashable and
    two equal states always encode to the same query string.
    """

    page_index: int = 0
    page_size: int = DEFAULT_PAGE_SIZE
    search_term: str = ""
    filter_values: Pairs = ()
    extra_params: Pairs = ()

    @classmethod
    def create(
        cls,
        *,
        page_index: int = 0,
        page_size: int = DEFAULT_PAGE_SIZE,
        search_term: str = "",
        filter_values: Mapping[str, Any] | None = None,
        extra_params: Mapping[str, Any] | None = None,
    ) -> "QueryState":
        if page_index < 0:
            raise ValueError("page_index must be >= 0")
        if page_size <= 0:
            raise ValueError("page_size must be > 0")
        return cls(
            page_index=page_index,
            page_size=page_size,
            search_term=search_term or "",
            filter_values=tuple((filter_values or {}).items()),
            extra_params=tuple((extra_params or {}).items()),
        )

    @property
    def filters(self) -> dict[str, Any]:
        return dict(self.filter_values)

    @property
    def extras(self) -> dict[str, Any]:
        return dict(self.extra_params)

    def with_filter(self, key: str, value: Any) -> "QueryState":
        updated = dict(self.filter_values)
        updated[key] = value
        return replace(self, filter_values=tuple(updated.items()))

    def with_extra_params(self, extra_params: Mapping[str, Any] | None) -> "QueryState":
        return replace(self, extra_params=tuple((extra_params or {}).items()))


def build_query_params(state: QueryState) -> list[tuple[str, str]]:
    params: list[tuple[str, str]] = [
        ("pageNumber", str(state.page_index + 1)),
        ("pageSize", str(state.page_size)),
    ]
    if state.search_term:
        params.append(("keyword", state.search_term))

    for key, value in state.filter_values:
        if value:
            params.append((key, encode_value(value)))

    for key, value in state.extra_params:
        if value not in (None, ""):
            params.append((key, encode_value(value)))
    return params


def build_query_string(state: QueryState) -> str:
    return urlencode(build_query_params(state))


def encode_value(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, date):
        return value.isoformat()
    return str(value)
