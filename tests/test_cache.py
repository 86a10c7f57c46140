import pytest

from fzfind.cache import ChunkCache
from fzfind.chunklist import Chunk
from fzfind.constants import CHUNK_SIZE, QUERY_CACHE_MAX
from fzfind.item import Item


@pytest.fixture
def full_chunk():
    return Chunk([Item(str(i), index=i) for i in range(CHUNK_SIZE)])


def test_chunk_cache(full_chunk):
    cache = ChunkCache()
    chunk1 = Chunk()
    chunk2 = full_chunk
    items1 = ["r1"]
    items2 = ["r1", "r2"]
    cache.add(chunk1, "foo", items1)
    cache.add(chunk2, "foo", items1)
    cache.add(chunk2, "bar", items2)

    assert cache.lookup(chunk1, "foo") is None
    assert cache.lookup(chunk2, "foo") == items1
    assert cache.lookup(chunk2, "bar") == items2
    assert cache.lookup(chunk1, "foobar") is None
    assert cache.lookup(chunk2, "foobar") is None


def test_empty_key_is_not_cached(full_chunk):
    cache = ChunkCache()
    cache.add(full_chunk, "", ["x"])
    assert cache.lookup(full_chunk, "") is None


def test_low_selectivity_is_not_cached(full_chunk):
    cache = ChunkCache()
    cache.add(full_chunk, "a", ["x"] * (QUERY_CACHE_MAX + 1))
    assert cache.lookup(full_chunk, "a") is None
    cache.add(full_chunk, "b", ["x"] * QUERY_CACHE_MAX)
    assert len(cache.lookup(full_chunk, "b")) == QUERY_CACHE_MAX


def test_search_finds_prefix_and_suffix(full_chunk):
    cache = ChunkCache()
    cache.add(full_chunk, "foo", ["prefix"])
    cache.add(full_chunk, "bar", ["suffix"])
    assert cache.search(full_chunk, "foox") == ["prefix"]
    assert cache.search(full_chunk, "xbar") == ["suffix"]
    assert cache.search(full_chunk, "zzzz") is None


def test_search_prefers_longest(full_chunk):
    cache = ChunkCache()
    cache.add(full_chunk, "fo", ["short"])
    cache.add(full_chunk, "foo", ["long"])
    assert cache.search(full_chunk, "foob") == ["long"]


def test_clear(full_chunk):
    cache = ChunkCache()
    cache.add(full_chunk, "foo", ["x"])
    cache.clear()
    assert cache.lookup(full_chunk, "foo") is None