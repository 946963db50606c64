from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from clients.pharmadist_sdk.errors import ApiError


@dataclass(frozen=True)
class Toast:
    level: str
    message: str


def build_error_payload(error: Exception) -> dict[str, Any]:
    if isinstance(error, ApiError):
        category = _classify_api_error(error)
        return {
            "category": category,
            "code": error.code,
            "message": error.message,
            "trace_id": error.trace_id,
            "status_code": error.status_code,
            "action": _suggest_action(category),
        }
    return {
        "category": "internal",
        "code": "INTERNAL_ERROR",
        "message": str(error) or "An unexpected error occurred",
        "trace_id": None,
        "status_code": None,
        "action": "Contact support",
    }


def card_error_message(detail: str | None) -> str:
    return f"Error loading data: {detail or 'An unexpected error occurred'}"


def mutation_toast(success_message: str, error: Exception | None = None, fallback: str = "Operation failed") -> Toast:
    """Result of a per-row mutation (edit, toggle) as a transient notification."""
    if error is None:
        return Toast(level="success", message=success_message)
    message = error.message if isinstance(error, ApiError) else str(error)
    return Toast(level="error", message=message or fallback)


def format_error_banner(payload: dict[str, Any]) -> str:
    trace_id = payload.get("trace_id") or "n/a"
    return (
        "[ERROR] "
        f"code={payload.get('code')} "
        f"message={payload.get('message')} "
        f"trace_id={trace_id} "
        f"category={payload.get('category')} "
        f"action={payload.get('action')}"
    )


def _classify_api_error(error: ApiError) -> str:
    if error.code in {"NETWORK_ERROR", "TIMEOUT_ERROR"}:
        return "network"
    if error.status_code in {401, 403}:
        return "auth"
    if error.status_code in {400, 404, 422}:
        return "validation"
    if error.status_code == 409:
        return "conflict"
    if error.status_code and error.status_code >= 500:
        return "server"
    return "api"


def _suggest_action(category: str) -> str:
    if category in {"network", "server", "conflict"}:
        return "Retry"
    if category == "auth":
        return "Sign in again"
    if category == "validation":
        return "Review the submitted values"
    return "Contact support"
