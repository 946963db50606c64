import json

import httpx
import pytest

from clients.pharmadist_sdk.errors import ApiError
from clients.pharmadist_sdk.normalizers import EnvelopeKind
from clients.pharmadist_sdk.query_params import QueryState
from clients.pharmadist_sdk.resources_client import ResourceClient
from clients.pharmadist_sdk.sync_client import SyncClient


def test_resource_client_crud_paths(http_factory) -> None:
    seen: list[tuple[str, str, bytes]] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path, request.content))
        return httpx.Response(200, json={"success": True})

    brands = ResourceClient(http_factory(handler), "/brands")
    brands.get("tok", "b1")
    brands.create("tok", {"brandName": "Getz"})
    brands.update("tok", "b1", {"brandName": "Getz Pharma"})
    brands.toggle_status("tok", "b1")
    brands.delete("tok", "b1")

    assert [(method, path) for method, path, _ in seen] == [
        ("GET", "/api/brands/b1"),
        ("POST", "/api/brands"),
        ("PUT", "/api/brands/b1"),
        ("PATCH", "/api/brands/b1/toggle-status"),
        ("DELETE", "/api/brands/b1"),
    ]
    assert json.loads(seen[1][2]) == {"brandName": "Getz"}


def test_resource_client_list_normalizes(http_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.params["keyword"] == "getz"
        return httpx.Response(200, json={"docs": [{"_id": "b1"}], "totalDocs": 1, "totalPages": 1})

    page = ResourceClient(http_factory(handler), "/brands").list("tok", QueryState.create(search_term="getz"))

    assert page.rows == [{"_id": "b1"}]
    assert page.envelope is EnvelopeKind.DOCS


def test_sync_client_parses_started_job(http_factory) -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "POST"
        if request.url.path.endswith("/ledger/sync-data"):
            return httpx.Response(200, json={"syncId": "s-9", "result": {"totalInvoices": 12}})
        return httpx.Response(200, json={"message": "started"})

    client = SyncClient(http_factory(handler))

    ledger = client.start_ledger_sync("tok")
    delivery = client.start_delivery_log_sync("tok")

    assert ledger.sync_id == "s-9"
    assert ledger.stats == {"totalInvoices": 12}
    assert delivery.sync_id is None
    assert delivery.raw == {"message": "started"}


def test_rejected_mutation_raises(http_factory) -> None:
    client = ResourceClient(http_factory(lambda request: httpx.Response(200, json={"success": False, "message": "Brand in use"})), "/brands")

    with pytest.raises(ApiError) as exc_info:
        client.delete("tok", "b1")

    assert exc_info.value.message == "Brand in use"
