"""Cache of match results per chunk and query."""

from __future__ import annotations

import threading
from collections.abc import Sequence
from typing import Any

from .chunklist import Chunk
from .constants import QUERY_CACHE_MAX


class ChunkCache:
    """Maps a full chunk and a query string to that query's results."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._cache: dict[Chunk, dict[str, Sequence[Any]]] = {}

    def add(self, chunk: Chunk, key: str, results: Sequence[Any]) -> None:
        """Remember ``results``; only full chunks and selective queries are kept."""
        if not key or not chunk.is_full() or len(results) > QUERY_CACHE_MAX:
            return
        with self._lock:
            self._cache.setdefault(chunk, {})[key] = results

    def lookup(self, chunk: Chunk, key: str) -> Sequence[Any] | None:
        """Return the results stored for exactly ``key``, or None."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            return queries.get(key)

    def search(self, chunk: Chunk, key: str) -> Sequence[Any] | None:
        """Return the results of the longest cached prefix or suffix of ``key``."""
        if not key or not chunk.is_full():
            return None
        with self._lock:
            queries = self._cache.get(chunk)
            if queries is None:
                return None
            for cut in range(1, len(key)):
                for sub in (key[: len(key) - cut], key[cut:]):
                    if sub in queries:
                        return queries[sub]
        return None

    def clear(self) -> None:
        """Forget everything."""
        with self._lock:
            self._cache.clear()