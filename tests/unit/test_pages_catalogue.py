import pytest

from clients.pharmadist_sdk import api_paths
from pharmadist_console.app.pages import PAGES, delivery_logs, get_page, products


@pytest.mark.parametrize("name", sorted(PAGES))
def test_every_page_builds_valid_options(name: str) -> None:
    options = get_page(name)

    assert options.api_path.startswith("/")
    assert options.cache_namespace.startswith("get-all-")
    assert len({column.id for column in options.columns}) == len(options.columns)


def test_unknown_page_lists_valid_names() -> None:
    with pytest.raises(KeyError, match="customers"):
        get_page("prescriptions")


def test_status_transform_promotes_id_and_labels_status() -> None:
    rows = products().transform_rows([{"_id": "p1", "isActive": False, "brandId": {"brandName": "Getz"}}])

    assert rows[0]["id"] == "p1"
    assert rows[0]["status"] == "Inactive"
    brand_column = next(column for column in products().columns if column.id == "brand")
    assert brand_column.render(rows[0]) == "Getz"
    assert brand_column.render({"brandId": None}) == "N/A"


def test_delivery_logs_flatten_salesman() -> None:
    options = delivery_logs()
    rows = options.transform_rows([{"_id": "d1", "salesmanId": {"employeeName": "Asif"}, "invoiceNumbers": [101, 102]}, {"_id": "d2"}])

    assert options.api_path == api_paths.DELIVERY_LOGS
    assert [row["salesmanName"] for row in rows] == ["Asif", "Unknown"]
    invoices = next(column for column in options.columns if column.id == "invoiceNumbers")
    assert invoices.render(rows[0]) == "101, 102"
