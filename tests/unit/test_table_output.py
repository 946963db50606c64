from clients.pharmadist_sdk.errors import ApiError
from clients.pharmadist_sdk.query_params import QueryState
from pharmadist_console.app.data_source import FetchStatus
from pharmadist_console.app.error_presenter import build_error_payload, format_error_banner, mutation_toast
from pharmadist_console.app.export.csv_exporter import export_current_view
from pharmadist_console.app.remote_table import TableView
from pharmadist_console.app.ui.pagination import PaginationView
from pharmadist_console.app.ui.row_model import BodyRow, Cell, HeaderCell, SortDirection
from pharmadist_console.app.ui.table_printer import format_table


def _view(**overrides) -> TableView:
    values = dict(
        title="Brands",
        status=FetchStatus.SUCCESS,
        headers=(
            HeaderCell(column_id="select", label="", sortable=False, checked=False),
            HeaderCell(column_id="brandName", label="Brand", sortable=True, sort=SortDirection.ASC),
        ),
        rows=(
            BodyRow(row_id="b1", original={}, cells=(Cell("select", True), Cell("brandName", "Getz")), selected=True),
        ),
        pagination=PaginationView(current_page=0, page_size=10, total_items=1, total_pages=1),
        search_term="ge",
        filters_heading="Filters",
        filters=(("Status", "Active"), ("Brand", None)),
    )
    values.update(overrides)
    return TableView(**values)


def test_format_table_renders_rows_and_footer() -> None:
    text = format_table(_view())

    assert "Filters: Status=Active" in text
    assert "Search: ge" in text
    assert "Brand ^" in text
    assert "[x] | Getz" in text
    assert "Showing 1 to 1 of 1 entries" in text
    assert "Page 1 of 1" in text


def test_format_table_footer_offers_page_navigation() -> None:
    middle = format_table(_view(pagination=PaginationView(current_page=1, page_size=10, total_items=25, total_pages=3)))
    first = format_table(_view(pagination=PaginationView(current_page=0, page_size=10, total_items=25, total_pages=3)))
    last = format_table(_view(pagination=PaginationView(current_page=2, page_size=10, total_items=25, total_pages=3)))

    assert "Page 2 of 3 (prev --page 1, next --page 3, last --page 3)" in middle
    assert "Page 1 of 3 (next --page 2, last --page 3)" in first
    assert "Page 3 of 3 (prev --page 2)" in last


def test_format_table_empty_loading_and_error_states() -> None:
    empty = format_table(_view(rows=(), pagination=PaginationView(0, 10, 0, 0)))
    loading = format_table(_view(status=FetchStatus.LOADING, rows=()))
    failed = format_table(_view(status=FetchStatus.ERROR, rows=(), error_message="Error loading data: boom"))

    assert "No data available" in empty
    assert "Showing 0 to 0 of 0 entries" in empty
    assert "Loading..." in loading
    assert "Getz" not in loading
    assert failed.endswith("Error loading data: boom")


def test_csv_exporter_writes_metadata_and_masks_secrets(tmp_path) -> None:
    path = export_current_view(
        namespace="get-all-employees",
        columns=[("employeeName", "Employee"), ("password", "Password")],
        rows=[{"employeeName": "Asif", "password": "x"}],
        output_dir=str(tmp_path / "exports"),
        state=QueryState.create(page_index=1, search_term="as", filter_values={"status": "Active", "designation": ""}),
    )

    content = path.read_text(encoding="utf-8-sig")
    assert path.name.startswith("employees_")
    assert "# page: 2 (size 10)" in content
    assert "# rows: 1" in content
    assert "# search: as" in content
    assert "# filters: status=Active" in content
    assert "Employee,Password" in content
    assert "Asif,—" in content


def test_error_payload_categories() -> None:
    network = build_error_payload(ApiError(code="NETWORK_ERROR", message="offline"))
    auth = build_error_payload(ApiError(code="HTTP_ERROR", message="Not authorized", status_code=401))
    internal = build_error_payload(RuntimeError("boom"))

    assert (network["category"], network["action"]) == ("network", "Retry")
    assert (auth["category"], auth["action"]) == ("auth", "Sign in again")
    assert internal["code"] == "INTERNAL_ERROR"
    assert "trace_id=n/a" in format_error_banner(auth)


def test_mutation_toast_levels() -> None:
    assert mutation_toast("Brand updated").level == "success"
    failed = mutation_toast("Brand updated", ApiError(code="HTTP_ERROR", message="Brand exists", status_code=409))
    assert (failed.level, failed.message) == ("error", "Brand exists")
