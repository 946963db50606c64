from clients.pharmadist_sdk.config import SDKConfig
from clients.pharmadist_sdk.errors import ApiError, ensure_success
from clients.pharmadist_sdk.http_client import HttpClient
from clients.pharmadist_sdk.normalizers import EnvelopeKind, NormalizedPage, normalize_listing, promote_id
from clients.pharmadist_sdk.query_params import (
    DEFAULT_PAGE_SIZE,
    PAGE_SIZE_OPTIONS,
    QueryState,
    build_query_params,
    build_query_string,
)
from clients.pharmadist_sdk.resources_client import ResourceClient
from clients.pharmadist_sdk.sync_client import SyncClient, SyncStarted

__all__ = [
    "SDKConfig",
    "ApiError",
    "ensure_success",
    "HttpClient",
    "EnvelopeKind",
    "NormalizedPage",
    "normalize_listing",
    "promote_id",
    "DEFAULT_PAGE_SIZE",
    "PAGE_SIZE_OPTIONS",
    "QueryState",
    "build_query_params",
    "build_query_string",
    "ResourceClient",
    "SyncClient",
    "SyncStarted",
]
