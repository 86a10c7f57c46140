"""Items grouped into fixed-size chunks that can be snapshotted cheaply."""

from __future__ import annotations

import threading
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass, field

from .constants import CHUNK_SIZE
from .item import Item

ItemBuilder = Callable[[str], "Item | None"]


@dataclass(eq=False)
class Chunk:
    """Up to CHUNK_SIZE items. Chunks compare and hash by identity."""

    items: list[Item] = field(default_factory=list)

    @property
    def count(self) -> int:
        return len(self.items)

    def is_full(self) -> bool:
        """Whether the chunk holds CHUNK_SIZE items."""
        return len(self.items) == CHUNK_SIZE

    def __len__(self) -> int:
        return len(self.items)

    def __iter__(self) -> Iterator[Item]:
        return iter(self.items)


def count_items(chunks: Sequence[Chunk]) -> int:
    """Total number of items in a list of chunks where only the last may be partial."""
    if not chunks:
        return 0
    return CHUNK_SIZE * (len(chunks) - 1) + chunks[-1].count


class ChunkList:
    """A thread-safe, growing list of chunks.

    ``builder`` turns a line of input into an Item, or returns None when
    the line is not to be kept.
    """

    def __init__(self, builder: ItemBuilder) -> None:
        self._builder = builder
        self._chunks: list[Chunk] = []
        self._lock = threading.Lock()

    @property
    def builder(self) -> ItemBuilder:
        return self._builder

    def push(self, data: str) -> bool:
        """Build an item from ``data`` and add it; return whether it was kept."""
        with self._lock:
            if not self._chunks or self._chunks[-1].is_full():
                self._chunks.append(Chunk())
            item = self._builder(data)
            if item is None:
                return False
            self._chunks[-1].items.append(item)
            return True

    def clear(self) -> None:
        """Drop every chunk."""
        with self._lock:
            self._chunks = []

    def snapshot(self) -> tuple[list[Chunk], int]:
        """Return an unchanging view of the chunks and the item count."""
        with self._lock:
            chunks = list(self._chunks)
            if chunks:
                chunks[-1] = Chunk(list(chunks[-1].items))
        return chunks, count_items(chunks)