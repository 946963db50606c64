from __future__ import annotations

from dataclasses import dataclass
from typing import Any

import httpx

SERVER_ERROR_MESSAGE = "Server error"
NO_RESPONSE_MESSAGE = "No response from server. Please check your connection."


@dataclass
class ApiError(Exception):
    code: str
    message: str
    details: dict[str, Any] | list[Any] | str | None = None
    trace_id: str | None = None
    status_code: int | None = None

    def __str__(self) -> str:
        return f"{self.code}: {self.message}"

    @property
    def is_auth_error(self) -> bool:
        return self.status_code in (401, 403)

    @property
    def is_transient(self) -> bool:
        return self.code in ("TIMEOUT_ERROR", "NETWORK_ERROR") or (self.status_code or 0) >= 500

    @classmethod
    def from_http_response(cls, response: httpx.Response) -> "ApiError":
        try:
            body = response.json()
        except ValueError:
            body = None
        payload = body if isinstance(body, dict) else {}
        return cls(
            code=str(payload.get("code") or "HTTP_ERROR"),
            message=backend_message(payload) or response.text.strip() or SERVER_ERROR_MESSAGE,
            details=payload.get("errors") or payload.get("details") or (body if isinstance(body, list) else None),
            trace_id=response.headers.get("X-Trace-ID") or response.headers.get("X-Request-ID"),
            status_code=response.status_code,
        )

    @classmethod
    def rejected(cls, payload: dict[str, Any]) -> "ApiError":
        """A `{success: false, message}` body answered with a 2xx status."""
        return cls(
            code="REQUEST_REJECTED",
            message=backend_message(payload) or "Request was rejected",
            details=payload.get("errors"),
        )


def backend_message(payload: Any) -> str | None:
    """Human readable text of a backend body; it uses `message` or `error`."""
    if not isinstance(payload, dict):
        return None
    message = payload.get("message") or payload.get("error")
    return str(message) if message else None


def ensure_success(payload: Any) -> Any:
    if isinstance(payload, dict) and payload.get("success") is False:
        raise ApiError.rejected(payload)
    return payload
