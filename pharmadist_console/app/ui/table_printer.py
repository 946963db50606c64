from __future__ import annotations

from typing import TYPE_CHECKING

from pharmadist_console.app.ui.pagination import PaginationView, last_page, next_page, prev_page
from pharmadist_console.app.ui.row_model import SELECT_COLUMN_ID, SortDirection, normalize_value

if TYPE_CHECKING:
    from pharmadist_console.app.remote_table import TableView

_SORT_MARKERS = {SortDirection.ASC: " ^", SortDirection.DESC: " v"}


def format_table(view: "TableView") -> str:
    lines: list[str] = []
    if view.title:
        lines.append(view.title)

    if view.filters:
        applied = ", ".join(f"{label}={value}" for label, value in view.filters if value not in (None, ""))
        lines.append(f"{view.filters_heading}: {applied or 'none'}")
    if view.search_term:
        lines.append(f"Search: {view.search_term}")

    if view.error_message:
        lines.append(view.error_message)
        return "\n".join(lines)
    if view.loading:
        lines.append("Loading...")
        return "\n".join(lines)

    headers = [_header_text(cell) for cell in view.headers]
    body = [[_cell_text(cell.column_id, cell.value) for cell in row.cells] for row in view.rows]

    if not body:
        lines.append(" | ".join(headers))
        lines.append(view.empty_message)
    else:
        widths = [max(len(headers[idx]), *(len(line[idx]) for line in body)) for idx in range(len(headers))]
        lines.append(" | ".join(header.ljust(widths[idx]) for idx, header in enumerate(headers)))
        lines.append("-+-".join("-" * width for width in widths))
        for line in body:
            lines.append(" | ".join(value.ljust(widths[idx]) for idx, value in enumerate(line)))

    pagination = view.pagination
    lines.append(pagination.range_text)
    if pagination.total_pages:
        lines.append(f"Page {pagination.current_page + 1} of {pagination.total_pages}{_page_hints(pagination)}")
    return "\n".join(lines)


def _page_hints(pagination: PaginationView) -> str:
    # 1-based, matching the CLI --page flag
    hints: list[str] = []
    if pagination.has_prev:
        hints.append(f"prev --page {prev_page(pagination) + 1}")
    if pagination.has_next:
        hints.append(f"next --page {next_page(pagination) + 1}")
        hints.append(f"last --page {last_page(pagination) + 1}")
    return f" ({', '.join(hints)})" if hints else ""


def _header_text(cell) -> str:
    if cell.column_id == SELECT_COLUMN_ID:
        return "[x]" if cell.checked else "[-]" if cell.indeterminate else "[ ]"
    return f"{normalize_value(cell.label)}{_SORT_MARKERS.get(cell.sort, '')}"


def _cell_text(column_id: str, value) -> str:
    if column_id == SELECT_COLUMN_ID:
        return "[x]" if value else "[ ]"
    return normalize_value(value)
