from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import replace
from typing import Any

from clients.pharmadist_sdk.query_params import QueryState
from pharmadist_console.app.ui.pagination import validate_page_size


class QueryStateController:
    """Single writer of a table's QueryState.

    Changing the search term, a filter value or the page size always sends
    the table back to the first page.
    """

    def __init__(self, initial: QueryState, on_commit: Callable[[QueryState], None] | None = None) -> None:
        self._state = initial
        self._on_commit = on_commit

    @property
    def state(self) -> QueryState:
        return self._state

    def set_page(self, page_index: int) -> QueryState:
        return self._commit(replace(self._state, page_index=max(0, page_index)))

    def set_page_size(self, page_size: int) -> QueryState:
        validate_page_size(page_size)
        return self._commit(replace(self._state, page_size=page_size, page_index=0))

    def set_search(self, search_term: str) -> QueryState:
        return self._commit(replace(self._state, search_term=search_term or "", page_index=0))

    def set_filter(self, key: str, value: Any) -> QueryState:
        return self._commit(replace(self._state.with_filter(key, value), page_index=0))

    def clear_filters(self) -> QueryState:
        return self._commit(replace(self._state, filter_values=(), page_index=0))

    def set_extra_params(self, extra_params: Mapping[str, Any] | None) -> QueryState:
        return self._commit(self._state.with_extra_params(extra_params))

    def _commit(self, new_state: QueryState) -> QueryState:
        if new_state == self._state:
            return self._state
        self._state = new_state
        if self._on_commit:
            self._on_commit(new_state)
        return new_state
