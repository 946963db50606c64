from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

RowsTransform = Callable[[list[Any]], list[Any]]


class EnvelopeKind(str, Enum):
    RESULT_DOCS = "result_docs"
    DOCS = "docs"
    BARE_LIST = "bare_list"
    UNRECOGNIZED = "unrecognized"


class DocsPage(BaseModel):
    """`{docs: [...], totalDocs, totalPages}` as produced by mongoose-paginate."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    docs: list[Any]
    total_docs: int | None = Field(default=None, alias="totalDocs")
    total_pages: int | None = Field(default=None, alias="totalPages")

    @field_validator("total_docs", "total_pages", mode="before")
    @classmethod
    def _soft_int(cls, value: Any) -> int | None:
        return _to_int(value)


class ResultEnvelope(BaseModel):
    model_config = ConfigDict(extra="ignore")

    result: DocsPage


@dataclass(frozen=True)
class NormalizedPage:
    rows: list[Any] = field(default_factory=list)
    total_items: int = 0
    total_pages: int = 0
    envelope: EnvelopeKind = EnvelopeKind.UNRECOGNIZED


def detect_envelope(payload: Any) -> tuple[EnvelopeKind, DocsPage | list[Any] | None]:
    if isinstance(payload, list):
        return EnvelopeKind.BARE_LIST, payload
    if not isinstance(payload, dict):
        return EnvelopeKind.UNRECOGNIZED, None

    if isinstance(payload.get("result"), dict):
        try:
            return EnvelopeKind.RESULT_DOCS, ResultEnvelope.model_validate(payload).result
        except ValidationError:
            pass
    if "docs" in payload:
        try:
            return EnvelopeKind.DOCS, DocsPage.model_validate(payload)
        except ValidationError:
            pass
    return EnvelopeKind.UNRECOGNIZED, None


def normalize_listing(payload: Any, transform: RowsTransform | None = None) -> NormalizedPage:
    kind, parsed = detect_envelope(payload)

    if kind in (EnvelopeKind.RESULT_DOCS, EnvelopeKind.DOCS) and isinstance(parsed, DocsPage):
        rows = list(parsed.docs)
        total_items = parsed.total_docs or 0
        total_pages = parsed.total_pages or 0
    elif kind is EnvelopeKind.BARE_LIST and isinstance(parsed, list):
        rows = list(parsed)
        total_items = len(rows)
        total_pages = 1
    else:
        return NormalizedPage(envelope=EnvelopeKind.UNRECOGNIZED)

    if transform is not None:
        rows = list(transform(rows))

    return NormalizedPage(
        rows=rows,
        total_items=max(total_items, len(rows)),
        total_pages=max(total_pages, 0),
        envelope=kind,
    )


def promote_id(rows: list[Any]) -> list[Any]:
    """Expose mongo `_id` as `id` on every dict row that lacks one."""
    promoted: list[Any] = []
    for row in rows:
        if isinstance(row, dict) and "id" not in row and "_id" in row:
            row = {**row, "id": row["_id"]}
        promoted.append(row)
    return promoted


def _to_int(value: Any) -> int | None:
    try:
        if value is None or value == "" or isinstance(value, bool):
            return None
        return int(value)
    except (TypeError, ValueError, OverflowError):
        return None
