from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Mapping, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from clients.pharmadist_sdk.http_client import HttpClient
from clients.pharmadist_sdk.normalizers import RowsTransform
from clients.pharmadist_sdk.query_params import DEFAULT_PAGE_SIZE, PAGE_SIZE_OPTIONS, QueryState
from pharmadist_console.app.data_source import FetchResult, FetchStatus, RemoteDataSource
from pharmadist_console.app.error_presenter import card_error_message
from pharmadist_console.app.export.csv_exporter import export_current_view
from pharmadist_console.app.infrastructure.logging.logger import get_logger, log_event
from pharmadist_console.app.listing_registry import ListingRegistry
from pharmadist_console.app.ui.debounce import Debouncer, Scheduler
from pharmadist_console.app.ui.filters import FilterPanel
from pharmadist_console.app.ui.pagination import (
    PaginationView,
    clamp_page,
    is_out_of_range,
    last_page,
    next_page,
    page_count,
    prev_page,
    validate_page_size,
)
from pharmadist_console.app.ui.query_state import QueryStateController
from pharmadist_console.app.ui.row_model import (
    SELECT_COLUMN_ID,
    BodyRow,
    ClickOrigin,
    ColumnDefinition,
    HeaderCell,
    RowModel,
    SortDirection,
)

EMPTY_MESSAGE = "No data available"

ColumnsTransform = Callable[[list[ColumnDefinition]], list[ColumnDefinition]]


@dataclass(frozen=True)
class TableOptions:
    api_path: str
    cache_namespace: str
    columns: Sequence[ColumnDefinition]
    filters: FilterPanel | None = None
    title: str = ""
    enable_selection: bool = False
    enable_search: bool = True
    enable_export: bool = True
    default_page_size: int = DEFAULT_PAGE_SIZE
    on_row_click: Callable[[Any], None] | None = None
    extra_query_params: Mapping[str, Any] = field(default_factory=dict)
    transform_rows: RowsTransform | None = None
    transform_columns: ColumnsTransform | None = None


@dataclass(frozen=True)
class TableView:
    title: str
    status: FetchStatus
    headers: tuple[HeaderCell, ...]
    rows: tuple[BodyRow, ...]
    pagination: PaginationView
    search_term: str
    filters_heading: str
    filters: tuple[tuple[str, Any], ...]
    error_message: str | None = None
    empty_message: str = EMPTY_MESSAGE
    enable_search: bool = True
    enable_export: bool = True
    page_size_options: tuple[int, ...] = PAGE_SIZE_OPTIONS

    @property
    def loading(self) -> bool:
        return self.status is FetchStatus.LOADING


class RemoteTable:
    """Paginated, searchable, filterable listing backed by the REST API.

    Every change of page, page size, search or filter commits a new
    QueryState and fetches it. While a fetch is loading no rows are shown;
    once it lands, rows and totals come from that one response.
    """

    def __init__(
        self,
        options: TableOptions,
        http_client: HttpClient,
        access_token: str | None = None,
        *,
        executor: Executor | None = None,
        registry: ListingRegistry | None = None,
        debounce_ms: int = 500,
        scheduler: Scheduler | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.options = options
        self._logger = logger or get_logger("pharmadist.table")
        self._lock = threading.RLock()
        self._executor = executor
        self._registry = registry
        self._mounted = False
        self._debounce_ms = debounce_ms
        self._scheduler = scheduler
        # the FetchResult whose rows the row model currently holds
        self._rows_result: FetchResult | None = None

        columns = list(options.columns)
        if options.transform_columns:
            columns = list(options.transform_columns(columns))
        self._row_model = RowModel(columns, enable_selection=options.enable_selection, on_row_click=options.on_row_click)

        self._source = RemoteDataSource(
            http_client,
            api_path=options.api_path,
            cache_namespace=options.cache_namespace,
            access_token=access_token,
            transform_rows=options.transform_rows,
            executor=executor,
            on_change=self._on_result,
            logger=self._logger,
        )
        initial = QueryState.create(
            page_size=validate_page_size(options.default_page_size),
            extra_params=options.extra_query_params,
        )
        self._controller = QueryStateController(initial, on_commit=self._on_commit)
        self._debouncer = self._new_debouncer()

    @property
    def state(self) -> QueryState:
        return self._controller.state

    @property
    def result(self) -> FetchResult:
        return self._source.result

    @property
    def source(self) -> RemoteDataSource:
        return self._source

    @property
    def row_model(self) -> RowModel:
        return self._row_model

    def mount(self) -> None:
        with self._lock:
            if self._mounted:
                return
            self._mounted = True
            self._source.attach()
            if self._debouncer.closed:
                self._debouncer = self._new_debouncer()
            if self._registry is not None:
                self._registry.register(self._source)
            self._fetch(self._controller.state)

    def unmount(self) -> None:
        with self._lock:
            self._debouncer.close()
            self._source.detach()
            if self._registry is not None:
                self._registry.unregister(self._source)
            self._mounted = False

    def set_access_token(self, access_token: str | None) -> None:
        self._source.set_access_token(access_token)

    def type_search(self, text: str) -> None:
        if self.options.enable_search:
            self._debouncer.push(text)

    def set_search(self, text: str) -> None:
        with self._lock:
            self._controller.set_search(text)

    def set_filter(self, key: str, value: Any) -> None:
        with self._lock:
            definition = self.options.filters.get(key) if self.options.filters else None
            if definition is not None and definition.on_change_hook is not None:
                definition.on_change_hook(value)
            self._controller.set_filter(key, value)

    def clear_filters(self) -> None:
        with self._lock:
            self._controller.clear_filters()

    def set_page(self, page_index: int) -> None:
        with self._lock:
            self._controller.set_page(clamp_page(page_index, self._page_count()))

    def next_page(self) -> None:
        self.set_page(next_page(self.snapshot().pagination))

    def prev_page(self) -> None:
        self.set_page(prev_page(self.snapshot().pagination))

    def first_page(self) -> None:
        self.set_page(0)

    def last_page(self) -> None:
        self.set_page(last_page(self.snapshot().pagination))

    def set_page_size(self, page_size: int) -> None:
        with self._lock:
            self._controller.set_page_size(page_size)

    def set_extra_params(self, extra_params: Mapping[str, Any] | None) -> None:
        with self._lock:
            self._controller.set_extra_params(extra_params)

    def refetch(self) -> None:
        with self._lock:
            self._fetch(self._controller.state)

    def toggle_sort(self, column_id: str) -> SortDirection | None:
        with self._lock:
            return self._row_model.toggle_sort(column_id)

    def set_sort(self, column_id: str | None, direction: SortDirection | None) -> None:
        with self._lock:
            self._row_model.set_sort(column_id, direction)

    def toggle_row(self, row_id: str) -> bool:
        with self._lock:
            return self._row_model.toggle_row(row_id)

    def toggle_all(self) -> bool:
        with self._lock:
            return self._row_model.toggle_all()

    def selected_rows(self) -> list[Any]:
        with self._lock:
            return self._row_model.selected_rows()

    def click_row(self, row_id: str, origin: ClickOrigin = ClickOrigin.ROW) -> bool:
        with self._lock:
            return self._row_model.click_row(row_id, origin)

    def export(self, output_dir: str = "out/exports") -> Path | None:
        if not self.options.enable_export:
            return None
        with self._lock:
            view = self.snapshot()
            if view.status is not FetchStatus.SUCCESS:
                return None
            columns = [(cell.column_id, str(cell.label)) for cell in view.headers if cell.column_id != SELECT_COLUMN_ID]
            rows = [
                {cell.column_id: cell.value for cell in row.cells if cell.column_id != SELECT_COLUMN_ID}
                for row in view.rows
            ]
            path = export_current_view(
                namespace=self.options.cache_namespace,
                columns=columns,
                rows=rows,
                output_dir=output_dir,
                state=self._controller.state,
            )
        log_event(self._logger, self.options.cache_namespace, "export", "success", path=str(path), rows=len(rows))
        return path

    def snapshot(self) -> TableView:
        with self._lock:
            state = self._controller.state
            result = self._source.result
            if result.status is FetchStatus.SUCCESS and self._rows_result is not result:
                # the response landed but its rows have not reached the row model yet
                result = FetchResult(status=FetchStatus.LOADING, query_key=result.query_key)
            showing_rows = result.status is FetchStatus.SUCCESS
            panel = self.options.filters
            return TableView(
                title=self.options.title,
                status=result.status,
                headers=tuple(self._row_model.header_cells()),
                rows=tuple(self._row_model.body_rows()) if showing_rows else (),
                pagination=PaginationView(
                    current_page=state.page_index,
                    page_size=state.page_size,
                    total_items=result.total_items if showing_rows else 0,
                    total_pages=page_count(result.total_items, state.page_size, result.total_pages) if showing_rows else 0,
                ),
                search_term=state.search_term,
                filters_heading=panel.heading if panel else "Filters",
                filters=_filter_summary(panel, state.filters) if panel else (),
                error_message=card_error_message(result.error_detail) if result.status is FetchStatus.ERROR else None,
                enable_search=self.options.enable_search,
                enable_export=self.options.enable_export,
            )

    def _new_debouncer(self) -> Debouncer:
        return Debouncer(self.set_search, wait_ms=self._debounce_ms, scheduler=self._scheduler)

    def _page_count(self) -> int:
        result = self._source.result
        return page_count(result.total_items, self._controller.state.page_size, result.total_pages)

    def _on_commit(self, state: QueryState) -> None:
        if self._mounted:
            self._fetch(state)

    def _fetch(self, state: QueryState) -> None:
        if self._executor is not None:
            self._source.submit(state)
        else:
            self._source.load(state)

    def _on_result(self, result: FetchResult) -> None:
        with self._lock:
            if result is not self._source.result:
                return
            if result.status is not FetchStatus.SUCCESS:
                self._row_model.set_rows([])
                self._rows_result = result
                return
            state = self._controller.state
            if is_out_of_range(state.page_index, result.total_pages, result.total_items, state.page_size):
                # the result set shrank under the current page: move to the last valid page
                pages = page_count(result.total_items, state.page_size, result.total_pages)
                log_event(
                    self._logger,
                    self.options.cache_namespace,
                    "pagination",
                    "clamped",
                    requested=state.page_index,
                    total_pages=pages,
                )
                self._row_model.set_rows([])
                self._rows_result = None
                self._controller.set_page(max(0, pages - 1))
                return
            self._row_model.set_rows(result.rows)
            self._rows_result = result


def _filter_summary(panel: FilterPanel, values: Mapping[str, Any]) -> tuple[tuple[str, Any], ...]:
    # selected options are shown by their label, free values as entered
    summary: list[tuple[str, Any]] = []
    for item in panel.filters:
        value = values.get(item.key)
        summary.append((item.label, item.option_label(value) or value))
    return tuple(summary)
