from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any

EMPTY_VALUE = "—"
SENSITIVE_KEYS = {"token", "refresh_token", "secret", "password", "access_token"}
SELECT_COLUMN_ID = "select"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ClickOrigin(str, Enum):
    ROW = "row"
    CHECKBOX = "checkbox"
    BUTTON = "button"


@dataclass(frozen=True)
class ColumnDefinition:
    id: str
    header: str | Callable[[], Any]
    cell_renderer: Callable[[Any], Any] | None = None
    sortable: bool = True
    accessor: str | Callable[[Any], Any] | None = None

    def header_label(self) -> Any:
        return self.header() if callable(self.header) else self.header

    def value(self, row: Any) -> Any:
        accessor = self.accessor or self.id
        if callable(accessor):
            return accessor(row)
        return lookup_path(row, accessor)

    def render(self, row: Any) -> Any:
        if self.cell_renderer is not None:
            return self.cell_renderer(row)
        return self.value(row)


@dataclass(frozen=True)
class HeaderCell:
    column_id: str
    label: Any
    sortable: bool
    sort: SortDirection | None = None
    checked: bool | None = None
    indeterminate: bool = False


@dataclass(frozen=True)
class Cell:
    column_id: str
    value: Any


@dataclass(frozen=True)
class BodyRow:
    row_id: str
    original: Any
    cells: tuple[Cell, ...]
    selected: bool = False


def default_row_id(row: Any, index: int) -> str:
    if isinstance(row, dict):
        for key in ("id", "_id"):
            if row.get(key) not in (None, ""):
                return str(row[key])
    return str(index)


class RowModel:
    """Header/body structures for one fetched page plus sort and selection.

    Sorting reorders the rows already held; it never asks for another page.
    Selection belongs to the current row set and is dropped by `set_rows`.
    """

    def __init__(
        self,
        columns: Sequence[ColumnDefinition],
        enable_selection: bool = False,
        on_row_click: Callable[[Any], None] | None = None,
        row_id: Callable[[Any, int], str] = default_row_id,
    ) -> None:
        ids = [column.id for column in columns]
        if len(ids) != len(set(ids)):
            raise ValueError("column ids must be unique")
        if enable_selection and SELECT_COLUMN_ID in ids:
            raise ValueError(f"column id '{SELECT_COLUMN_ID}' is reserved for row selection")
        self.columns = tuple(columns)
        self.enable_selection = enable_selection
        self._on_row_click = on_row_click
        self._row_id = row_id
        self._rows: list[Any] = []
        self._ids: list[str] = []
        self._selection: dict[str, bool] = {}
        self._sort_by: str | None = None
        self._sort_dir: SortDirection | None = None

    @property
    def rows(self) -> list[Any]:
        return list(self._rows)

    @property
    def sort_state(self) -> tuple[str | None, SortDirection | None]:
        return self._sort_by, self._sort_dir

    @property
    def selection(self) -> dict[str, bool]:
        return dict(self._selection)

    def set_rows(self, rows: Sequence[Any]) -> None:
        self._rows = list(rows)
        self._ids = [self._row_id(row, index) for index, row in enumerate(self._rows)]
        self._selection = {}

    def toggle_sort(self, column_id: str) -> SortDirection | None:
        column = self._column(column_id)
        if not column.sortable:
            return self._sort_dir if self._sort_by == column_id else None
        if self._sort_by != column_id:
            self._sort_by, self._sort_dir = column_id, SortDirection.ASC
        elif self._sort_dir is SortDirection.ASC:
            self._sort_dir = SortDirection.DESC
        else:
            self._sort_by, self._sort_dir = None, None
        return self._sort_dir

    def set_sort(self, column_id: str | None, direction: SortDirection | None) -> None:
        if column_id is None or direction is None:
            self._sort_by, self._sort_dir = None, None
            return
        column = self._column(column_id)
        if not column.sortable:
            raise ValueError(f"column '{column_id}' is not sortable")
        self._sort_by, self._sort_dir = column_id, direction

    def toggle_row(self, row_id: str) -> bool:
        if not self.enable_selection:
            return False
        if row_id not in self._ids:
            raise KeyError(row_id)
        selected = not self._selection.get(row_id, False)
        if selected:
            self._selection[row_id] = True
        else:
            self._selection.pop(row_id, None)
        return selected

    def toggle_all(self) -> bool:
        """Select every visible row, or clear them all when already selected."""
        if not self.enable_selection:
            return False
        if self.all_selected():
            self._selection = {}
            return False
        self._selection = {row_id: True for row_id in self._ids}
        return True

    def all_selected(self) -> bool:
        return bool(self._ids) and all(self._selection.get(row_id) for row_id in self._ids)

    def some_selected(self) -> bool:
        return any(self._selection.values()) and not self.all_selected()

    def selected_rows(self) -> list[Any]:
        return [row for row_id, row in zip(self._ids, self._rows) if self._selection.get(row_id)]

    def click_row(self, row_id: str, origin: ClickOrigin = ClickOrigin.ROW) -> bool:
        # clicks on nested controls stop at the control
        if origin is not ClickOrigin.ROW or self._on_row_click is None:
            return False
        for candidate_id, row in zip(self._ids, self._rows):
            if candidate_id == row_id:
                self._on_row_click(row)
                return True
        raise KeyError(row_id)

    def header_cells(self) -> list[HeaderCell]:
        headers: list[HeaderCell] = []
        if self.enable_selection:
            headers.append(
                HeaderCell(
                    column_id=SELECT_COLUMN_ID,
                    label="",
                    sortable=False,
                    checked=self.all_selected(),
                    indeterminate=self.some_selected(),
                )
            )
        for column in self.columns:
            headers.append(
                HeaderCell(
                    column_id=column.id,
                    label=column.header_label(),
                    sortable=column.sortable,
                    sort=self._sort_dir if self._sort_by == column.id else None,
                )
            )
        return headers

    def body_rows(self) -> list[BodyRow]:
        ordered = self._ordered()
        body: list[BodyRow] = []
        for row_id, row in ordered:
            selected = bool(self._selection.get(row_id))
            cells = [Cell(column_id=column.id, value=column.render(row)) for column in self.columns]
            if self.enable_selection:
                cells.insert(0, Cell(column_id=SELECT_COLUMN_ID, value=selected))
            body.append(BodyRow(row_id=row_id, original=row, cells=tuple(cells), selected=selected))
        return body

    def _ordered(self) -> list[tuple[str, Any]]:
        pairs = list(zip(self._ids, self._rows))
        if not self._sort_by or self._sort_dir is None:
            return pairs
        column = self._column(self._sort_by)
        filled = [pair for pair in pairs if not _is_empty(column.value(pair[1]))]
        empty = [pair for pair in pairs if _is_empty(column.value(pair[1]))]
        filled.sort(key=lambda pair: _sort_key(column.value(pair[1])), reverse=self._sort_dir is SortDirection.DESC)
        return filled + empty

    def _column(self, column_id: str) -> ColumnDefinition:
        for column in self.columns:
            if column.id == column_id:
                return column
        raise KeyError(column_id)


def lookup_path(row: Any, path: str) -> Any:
    """Resolve dotted accessors such as `brandId.brandName`."""
    value = row
    for part in path.split("."):
        if not isinstance(value, dict):
            return None
        value = value.get(part)
    return value


def normalize_value(value: Any) -> str:
    if value is None:
        return EMPTY_VALUE
    if isinstance(value, str):
        clean = value.strip()
        return clean or EMPTY_VALUE
    if isinstance(value, bool):
        return "Active" if value else "Inactive"
    if isinstance(value, datetime):
        return value.astimezone().strftime("%Y-%m-%d %H:%M:%S %z")
    return str(value)


def sanitize_row(row: dict[str, Any], headers: list[str]) -> dict[str, str]:
    sanitized: dict[str, str] = {}
    for header in headers:
        if any(token in header.lower() for token in SENSITIVE_KEYS):
            sanitized[header] = EMPTY_VALUE
            continue
        sanitized[header] = normalize_value(row.get(header))
    return sanitized


def _is_empty(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _sort_key(value: Any) -> tuple[int, Any]:
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, (int, float)):
        return (0, value)
    return (1, normalize_value(value).lower())
