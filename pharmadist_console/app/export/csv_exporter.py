from __future__ import annotations

import csv
from collections.abc import Sequence
from datetime import datetime
from pathlib import Path
from typing import Any

from clients.pharmadist_sdk.query_params import QueryState
from pharmadist_console.app.ui.row_model import sanitize_row

NAMESPACE_PREFIX = "get-all-"


def export_filename(namespace: str, now: datetime) -> str:
    stem = namespace.removeprefix(NAMESPACE_PREFIX) or "listing"
    return f"{stem}_{now:%Y%m%d_%H%M%S}.csv"


def export_current_view(
    *,
    namespace: str,
    columns: Sequence[tuple[str, str]],
    rows: Sequence[dict[str, Any]],
    output_dir: str = "out/exports",
    state: QueryState | None = None,
) -> Path:
    """Write one listing page to CSV below a block of `#` metadata lines.

    `columns` are `(column_id, header_label)` pairs; rows are keyed by column
    id and pass through `sanitize_row`, so sensitive columns are masked.
    """
    destination = Path(output_dir)
    destination.mkdir(parents=True, exist_ok=True)
    now = datetime.now().astimezone()
    path = destination / export_filename(namespace, now)
    column_ids = [column_id for column_id, _ in columns]

    with path.open("w", newline="", encoding="utf-8-sig") as handle:
        for key, value in _metadata(namespace, now, state or QueryState(), len(rows)):
            handle.write(f"# {key}: {value}\n")
        writer = csv.writer(handle)
        writer.writerow([label for _, label in columns])
        for row in rows:
            cleaned = sanitize_row(row, headers=column_ids)
            writer.writerow([cleaned[column_id] for column_id in column_ids])

    return path


def _metadata(namespace: str, now: datetime, state: QueryState, row_count: int) -> list[tuple[str, Any]]:
    applied = ", ".join(f"{key}={value}" for key, value in state.filter_values if value not in (None, ""))
    return [
        ("exported_at", now.isoformat()),
        ("listing", namespace),
        ("page", f"{state.page_index + 1} (size {state.page_size})"),
        ("rows", row_count),
        ("search", state.search_term),
        ("filters", applied or "none"),
    ]
