from __future__ import annotations

import threading

from pharmadist_console.app.data_source import RemoteDataSource


class ListingRegistry:
    """Mounted listing sources by cache namespace.

    Listings keep no stale data, so invalidating a namespace means refetching
    every mounted source under it (e.g. after a create/update/toggle).
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._sources: list[RemoteDataSource] = []

    def register(self, source: RemoteDataSource) -> None:
        with self._lock:
            if source not in self._sources:
                self._sources.append(source)

    def unregister(self, source: RemoteDataSource) -> None:
        with self._lock:
            if source in self._sources:
                self._sources.remove(source)

    def sources(self, prefix: str = "") -> list[RemoteDataSource]:
        with self._lock:
            return [source for source in self._sources if source.cache_namespace.startswith(prefix)]

    def invalidate(self, prefix: str) -> int:
        stale = self.sources(prefix)
        for source in stale:
            source.refetch()
        return len(stale)
