from __future__ import annotations

import time
from collections.abc import Callable
from typing import Any

import httpx

from clients.pharmadist_sdk.config import SDKConfig
from clients.pharmadist_sdk.errors import NO_RESPONSE_MESSAGE, ApiError

RETRYABLE_METHODS = frozenset({"GET"})

Params = list[tuple[str, str]] | dict[str, Any]


class HttpClient:
    """httpx wrapper for the PharmaDist API.

    Adds the bearer token, turns transport and HTTP failures into ApiError
    and retries reads on transient failures when the caller allows it.
    """

    def __init__(
        self,
        config: SDKConfig | None = None,
        client: httpx.Client | None = None,
    ) -> None:
        self.config = config or SDKConfig.from_env()
        self._client = client or httpx.Client(
            base_url=self.config.base_url,
            timeout=self.config.timeout_seconds,
            verify=self.config.verify_ssl,
        )
        self._auth_error_handler: Callable[[ApiError], None] | None = None

    def register_auth_error_handler(self, handler: Callable[[ApiError], None] | None) -> None:
        self._auth_error_handler = handler

    def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        json_body: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        params: Params | None = None,
        retry: bool = True,
    ) -> Any:
        """Send a request and return the decoded JSON body as-is.

        List bodies are not wrapped: listing endpoints answer with several
        envelope shapes and the normalizer needs to see the original one.
        """
        method = method.upper()
        attempts = self.config.retry_max_attempts if retry and method in RETRYABLE_METHODS else 1
        attempt = 1
        while True:
            try:
                response = self._send(method, path, token, json_body, headers, params)
                if response.status_code >= 400:
                    raise ApiError.from_http_response(response)
            except ApiError as error:
                if attempt < attempts and error.is_transient:
                    self._sleep_before_retry(attempt)
                    attempt += 1
                    continue
                if error.is_auth_error and self._auth_error_handler:
                    self._auth_error_handler(error)
                raise
            return decode_body(response)

    def close(self) -> None:
        self._client.close()

    def _send(
        self,
        method: str,
        path: str,
        token: str | None,
        json_body: dict[str, Any] | None,
        headers: dict[str, str] | None,
        params: Params | None,
    ) -> httpx.Response:
        request_headers = {"Accept": "application/json", **(headers or {})}
        if token:
            request_headers["Authorization"] = f"Bearer {token}"
        try:
            return self._client.request(
                method,
                path if path.startswith("/") else f"/{path}",
                json=json_body,
                headers=request_headers,
                params=params,
            )
        except httpx.TimeoutException as exc:
            raise ApiError(code="TIMEOUT_ERROR", message=str(exc) or "Request timed out") from exc
        except httpx.TransportError as exc:
            raise ApiError(code="NETWORK_ERROR", message=NO_RESPONSE_MESSAGE, details=str(exc)) from exc

    def _sleep_before_retry(self, attempt: int) -> None:
        time.sleep(max(0, self.config.retry_backoff_ms) * attempt / 1000)


def decode_body(response: httpx.Response) -> Any:
    if not response.content:
        return None
    try:
        return response.json()
    except ValueError:
        return None
