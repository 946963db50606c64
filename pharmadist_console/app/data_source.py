from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from concurrent.futures import Executor, Future
from dataclasses import dataclass
from enum import Enum
from typing import Any

from clients.pharmadist_sdk.errors import ApiError
from clients.pharmadist_sdk.http_client import HttpClient
from clients.pharmadist_sdk.normalizers import EnvelopeKind, RowsTransform, normalize_listing
from clients.pharmadist_sdk.query_params import Pairs, QueryState, build_query_params
from pharmadist_console.app.infrastructure.logging.logger import get_logger, log_event


class FetchStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class QueryKey:
    namespace: str
    page_index: int
    page_size: int
    search_term: str
    filter_values: Pairs
    extra_params: Pairs

    @classmethod
    def from_state(cls, namespace: str, state: QueryState) -> "QueryKey":
        return cls(
            namespace=namespace,
            page_index=state.page_index,
            page_size=state.page_size,
            search_term=state.search_term,
            filter_values=state.filter_values,
            extra_params=state.extra_params,
        )


@dataclass(frozen=True)
class FetchResult:
    status: FetchStatus = FetchStatus.IDLE
    rows: tuple[Any, ...] = ()
    total_items: int = 0
    total_pages: int = 0
    error_detail: str | None = None
    query_key: QueryKey | None = None
    envelope: EnvelopeKind | None = None


@dataclass(frozen=True)
class FetchTicket:
    seq: int
    key: QueryKey
    state: QueryState


class RemoteDataSource:
    """Fetches one page of a listing for the latest committed QueryState.

    Every commit issues a new ticket; a completion is applied only when its
    ticket is still the newest one, whatever order responses arrive in.
    Nothing is served from cache: each commit goes to the network.
    """

    def __init__(
        self,
        http_client: HttpClient,
        api_path: str,
        cache_namespace: str,
        access_token: str | None = None,
        transform_rows: RowsTransform | None = None,
        executor: Executor | None = None,
        on_change: Callable[[FetchResult], None] | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.http_client = http_client
        self.api_path = api_path
        self.cache_namespace = cache_namespace
        self._access_token = access_token
        self._transform_rows = transform_rows
        self._executor = executor
        self._on_change = on_change
        self._logger = logger or get_logger("pharmadist.table")
        self._lock = threading.Lock()
        self._seq = 0
        self._latest: FetchTicket | None = None
        self._last_state: QueryState | None = None
        self._result = FetchResult()
        self._detached = False

    @property
    def result(self) -> FetchResult:
        return self._result

    @property
    def current_key(self) -> QueryKey | None:
        return QueryKey.from_state(self.cache_namespace, self._last_state) if self._last_state else None

    @property
    def can_fetch(self) -> bool:
        return bool(self.api_path) and bool(self._access_token) and not self._detached

    def set_access_token(self, access_token: str | None) -> None:
        self._access_token = access_token

    def commit(self, state: QueryState) -> FetchTicket | None:
        """Record `state` as current and return the ticket to fetch it with.

        Returns None when the fetch must not be issued (no api path, no
        token, or detached); the result then stays idle.
        """
        key = QueryKey.from_state(self.cache_namespace, state)
        with self._lock:
            self._seq += 1
            self._last_state = state
            if not self.can_fetch:
                self._latest = None
                result = FetchResult(status=FetchStatus.IDLE, query_key=key)
                ticket = None
            else:
                ticket = FetchTicket(seq=self._seq, key=key, state=state)
                self._latest = ticket
                result = FetchResult(status=FetchStatus.LOADING, query_key=key)
            self._result = result
        if ticket is None:
            log_event(self._logger, self.cache_namespace, "fetch", "skipped", reason="precondition")
        self._notify(result)
        return ticket

    def load(self, state: QueryState) -> FetchResult:
        ticket = self.commit(state)
        if ticket is None:
            return self._result
        return self.run(ticket)

    def submit(self, state: QueryState) -> Future | None:
        if self._executor is None:
            raise RuntimeError("submit() needs an executor; use load() for synchronous fetches")
        ticket = self.commit(state)
        if ticket is None:
            return None
        return self._executor.submit(self.run, ticket)

    def refetch(self) -> FetchResult | Future | None:
        if self._last_state is None:
            return None
        if self._executor is not None:
            return self.submit(self._last_state)
        return self.load(self._last_state)

    def run(self, ticket: FetchTicket) -> FetchResult:
        log_event(self._logger, self.cache_namespace, "fetch", "issued", seq=ticket.seq, page=ticket.state.page_index)
        try:
            payload = self.http_client.request(
                "GET",
                self.api_path,
                token=self._access_token,
                params=build_query_params(ticket.state),
                retry=False,
            )
            page = normalize_listing(payload, transform=self._transform_rows)
        except ApiError as error:
            return self.complete(ticket, FetchResult(status=FetchStatus.ERROR, error_detail=error.message, query_key=ticket.key))
        except Exception as error:  # noqa: BLE001
            return self.complete(ticket, FetchResult(status=FetchStatus.ERROR, error_detail=str(error), query_key=ticket.key))

        if page.envelope is EnvelopeKind.UNRECOGNIZED:
            log_event(self._logger, self.cache_namespace, "normalize", "unrecognized_envelope", level=logging.WARNING, seq=ticket.seq)
        return self.complete(
            ticket,
            FetchResult(
                status=FetchStatus.SUCCESS,
                rows=tuple(page.rows),
                total_items=page.total_items,
                total_pages=page.total_pages,
                query_key=ticket.key,
                envelope=page.envelope,
            ),
        )

    def complete(self, ticket: FetchTicket, result: FetchResult) -> FetchResult:
        """Apply `result` if `ticket` is still current; return what is shown."""
        with self._lock:
            applied = not self._detached and self._latest is not None and self._latest.seq == ticket.seq
            if applied:
                self._result = result
            current = self._result
        if not applied:
            log_event(self._logger, self.cache_namespace, "fetch", "discarded_stale", seq=ticket.seq)
            return current
        if result.status is FetchStatus.ERROR:
            log_event(self._logger, self.cache_namespace, "fetch", "error", level=logging.WARNING, seq=ticket.seq, detail=result.error_detail)
        else:
            log_event(self._logger, self.cache_namespace, "fetch", "applied", seq=ticket.seq, rows=len(result.rows), total_items=result.total_items)
        self._notify(result)
        return result

    def detach(self) -> None:
        with self._lock:
            self._detached = True
            self._latest = None

    def attach(self) -> None:
        with self._lock:
            self._detached = False

    def _notify(self, result: FetchResult) -> None:
        if self._on_change:
            self._on_change(result)
