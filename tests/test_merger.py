import random
from dataclasses import dataclass

import pytest

from fzfind.chunklist import Chunk
from fzfind.constants import CHUNK_SIZE, MERGER_CACHE_MAX
from fzfind.item import Item
from fzfind.merger import Merger, empty_merger, pass_merger


@dataclass(eq=False)
class Ranked:
    rank: int
    item: Item


def _rank(result):
    return result.rank


def _build_lists(rng, partially_sorted):
    ranks = iter(rng.sample(range(1_000_000), 80))
    lists = []
    for _ in range(4):
        size = rng.randrange(20)
        lst = [
            Ranked(rank, Item(str(rank), index=rank))
            for rank in (next(ranks) for _ in range(size))
        ]
        if partially_sorted:
            lst.sort(key=_rank)
        lists.append(lst)
    items = [result for lst in lists for result in lst]
    return lists, items


def test_empty_merger():
    merger = empty_merger(0)
    assert len(merger) == 0
    assert merger.count == 0
    assert merger.lists == []
    with pytest.raises(IndexError):
        merger.get(0)


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_merger_unsorted(seed):
    lists, items = _build_lists(random.Random(seed), False)
    merger = Merger(lists, sorted=False, tac=False, revision=0, key=_rank)
    assert len(merger) == len(items)
    assert [merger.get(i) for i in range(len(items))] == items


@pytest.mark.parametrize("seed", [1, 2, 3])
def test_merger_sorted(seed):
    lists, items = _build_lists(random.Random(seed), True)
    merger = Merger(lists, sorted=True, key=_rank)
    assert len(merger) == len(items)
    items.sort(key=_rank)
    assert [merger.get(i) for i in range(len(items))] == items

    # Inverse order of access
    merger2 = Merger(lists, sorted=True, key=_rank)
    for i in reversed(range(len(items))):
        assert merger2.get(i) is items[i]


def test_sorted_ties_go_to_earlier_list():
    a = Ranked(1, Item("a", index=0))
    b = Ranked(1, Item("b", index=1))
    merger = Merger([[a], [b]], sorted=True, key=_rank)
    assert merger.get(0) is a
    assert merger.get(1) is b


def test_out_of_bounds():
    merger = Merger([[Ranked(1, Item("x"))]], sorted=True, key=_rank)
    with pytest.raises(IndexError):
        merger.get(1)
    with pytest.raises(IndexError):
        merger.get(-1)


def _chunks(total):
    items = [Item(f"item {i}", index=i) for i in range(total)]
    return [Chunk(items[i : i + CHUNK_SIZE]) for i in range(0, total, CHUNK_SIZE)]


def test_pass_merger():
    chunks = _chunks(CHUNK_SIZE + 5)
    merger = pass_merger(chunks, False, 3)
    assert len(merger) == CHUNK_SIZE + 5
    assert merger.revision == 3
    assert merger.get(0).text == "item 0"
    assert merger.get(CHUNK_SIZE + 1).text == f"item {CHUNK_SIZE + 1}"
    assert merger.first().index == 0
    assert merger.find_index(7) == 7


def test_pass_merger_tac():
    chunks = _chunks(CHUNK_SIZE + 5)
    merger = pass_merger(chunks, True, 0)
    assert merger.get(0).index == CHUNK_SIZE + 4
    assert merger.get(CHUNK_SIZE + 4).index == 0
    assert merger.first().index == 0
    assert merger.find_index(0) == CHUNK_SIZE + 4


def test_cacheable():
    small = Merger([[1, 2, 3]])
    assert small.cacheable()
    large = Merger([range(MERGER_CACHE_MAX)])
    assert not large.cacheable()