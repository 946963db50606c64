from __future__ import annotations

from typing import Any

from clients.pharmadist_sdk.api_paths import item_path, toggle_status_path
from clients.pharmadist_sdk.errors import ensure_success
from clients.pharmadist_sdk.http_client import HttpClient
from clients.pharmadist_sdk.normalizers import NormalizedPage, RowsTransform, normalize_listing
from clients.pharmadist_sdk.query_params import QueryState, build_query_params


class ResourceClient:
    """CRUD calls for one backend collection such as `/brands`.

    Mutations raise ApiError for `{success: false}` bodies even when the
    status code is 2xx.
    """

    def __init__(self, http_client: HttpClient, path: str) -> None:
        self.http_client = http_client
        self.path = path

    def list(
        self,
        access_token: str,
        state: QueryState | None = None,
        transform: RowsTransform | None = None,
    ) -> NormalizedPage:
        payload = self.http_client.request(
            "GET",
            self.path,
            token=access_token,
            params=build_query_params(state or QueryState()),
            retry=False,
        )
        return normalize_listing(payload, transform=transform)

    def get(self, access_token: str, item_id: str) -> Any:
        return self.http_client.request("GET", item_path(self.path, item_id), token=access_token)

    def create(self, access_token: str, payload: dict[str, Any]) -> Any:
        return ensure_success(self.http_client.request("POST", self.path, token=access_token, json_body=payload))

    def update(self, access_token: str, item_id: str, payload: dict[str, Any]) -> Any:
        return ensure_success(
            self.http_client.request("PUT", item_path(self.path, item_id), token=access_token, json_body=payload)
        )

    def delete(self, access_token: str, item_id: str) -> Any:
        return ensure_success(self.http_client.request("DELETE", item_path(self.path, item_id), token=access_token))

    def toggle_status(self, access_token: str, item_id: str) -> Any:
        return ensure_success(self.http_client.request("PATCH", toggle_status_path(self.path, item_id), token=access_token))
