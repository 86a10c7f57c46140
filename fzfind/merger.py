"""A single ordered view over several partial lists of results."""

from __future__ import annotations

import heapq
from collections.abc import Callable, Sequence
from typing import Any

from .chunklist import Chunk
from .constants import CHUNK_SIZE, MERGER_CACHE_MAX
from .item import Item


def _identity(value: Any) -> Any:
    return value


def _item_of(result: Any) -> Item:
    return result if isinstance(result, Item) else result.item


class Merger:
    """Presents locally ordered result lists as one list.

    With ``sorted`` set, each list must already be ordered by ``key`` and
    the merger yields results in global ``key`` order, merging lazily. Ties
    go to the earlier list. Otherwise the lists are concatenated, reversed
    when ``tac`` is set. A merger made by :func:`pass_merger` yields the
    items of its chunks in input order.
    """

    def __init__(
        self,
        lists: Sequence[Sequence[Any]],
        sorted: bool = False,
        tac: bool = False,
        revision: int = 0,
        pattern: Any = None,
        key: Callable[[Any], Any] | None = None,
    ) -> None:
        self.pattern = pattern
        self.lists = [list(lst) for lst in lists]
        self.sorted = sorted
        self.tac = tac
        self.revision = revision
        self.final = False
        self.key = key if key is not None else _identity
        self.chunks: list[Chunk] | None = None
        self.pass_through = False
        self.count = sum(len(lst) for lst in self.lists)
        self._merged: list[Any] = []
        self._heap: list[tuple[Any, int, int]] | None = None

    @classmethod
    def _over_chunks(cls, chunks: Sequence[Chunk], tac: bool, revision: int) -> Merger:
        merger = cls([], tac=tac, revision=revision)
        merger.chunks = list(chunks)
        merger.pass_through = True
        merger.count = sum(chunk.count for chunk in merger.chunks)
        return merger

    def __len__(self) -> int:
        return self.count

    def __getitem__(self, idx: int) -> Any:
        return self.get(idx)

    def get(self, idx: int) -> Any:
        """Return the result at position ``idx``; raise IndexError when out of range."""
        if not 0 <= idx < self.count:
            raise IndexError(f"index out of bounds ({idx}/{self.count})")

        if self.chunks is not None:
            if self.tac:
                idx = self.count - idx - 1
            return self.chunks[idx // CHUNK_SIZE].items[idx % CHUNK_SIZE]

        if self.sorted:
            return self._merged_get(idx)

        if self.tac:
            idx = self.count - idx - 1
        for lst in self.lists:
            if idx < len(lst):
                return lst[idx]
            idx -= len(lst)
        raise IndexError(f"index out of bounds ({idx}/{self.count})")

    def first(self) -> Any:
        """Return the result shown first."""
        if self.tac and not self.sorted:
            return self.get(self.count - 1)
        return self.get(0)

    def find_index(self, item_index: int) -> int:
        """Return the position of the item with ``item_index``, or -1."""
        if self.pass_through:
            return self.count - item_index - 1 if self.tac else item_index
        for position in range(self.count):
            if _item_of(self.get(position)).index == item_index:
                return position
        return -1

    def cacheable(self) -> bool:
        """Whether the merger is small enough to be cached."""
        return self.count < MERGER_CACHE_MAX

    def _merged_get(self, idx: int) -> Any:
        if self._heap is None:
            self._heap = [
                (self.key(lst[0]), list_idx, 0)
                for list_idx, lst in enumerate(self.lists)
                if lst
            ]
            heapq.heapify(self._heap)
        while len(self._merged) <= idx:
            if not self._heap:
                raise IndexError(f"index out of bounds ({idx}/{self.count})")
            _, list_idx, cursor = heapq.heappop(self._heap)
            lst = self.lists[list_idx]
            self._merged.append(lst[cursor])
            cursor += 1
            if cursor < len(lst):
                heapq.heappush(self._heap, (self.key(lst[cursor]), list_idx, cursor))
        return self._merged[idx]


def empty_merger(revision: int) -> Merger:
    """Return a merger with no results."""
    return Merger([], revision=revision)


def pass_merger(chunks: Sequence[Chunk], tac: bool, revision: int) -> Merger:
    """Return a merger that yields the items of ``chunks`` in input order."""
    return Merger._over_chunks(chunks, tac, revision)