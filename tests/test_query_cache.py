# tests/test_query_cache.py
from concurrent.futures import ThreadPoolExecutor

import pytest

from utils.query_cache import QueryCache


@pytest.fixture
def clock():
    return {"now": 1000.0}


@pytest.fixture
def cache(clock):
    return QueryCache(stale_seconds=300, max_entries=3, clock=lambda: clock["now"])


def test_fresh_then_stale_by_age(cache, clock):
    cache.set(("venues", "details", "1"), {"id": 1})
    assert not cache.is_stale(("venues", "details", "1"))

    clock["now"] += 301

    assert cache.is_stale(("venues", "details", "1"))
    assert cache.get(("venues", "details", "1")) == {"id": 1}


def test_absent_key_is_stale(cache):
    assert cache.get(("nope",)) is None
    assert cache.is_stale(("nope",))


def test_invalidate_prefix_keeps_values(cache):
    cache.set(("venues", "details", "1"), 1)
    cache.set(("venues", "details", "2"), 2)
    cache.set(("classes", "list"), 3)

    assert cache.invalidate(("venues",)) == 2

    assert cache.is_stale(("venues", "details", "1"))
    assert cache.get(("venues", "details", "2")) == 2
    assert not cache.is_stale(("classes", "list"))


def test_remove_prefix(cache):
    cache.set(("venues", "details", "1"), 1)
    cache.set(("classes", "list"), 2)

    assert cache.remove(("venues",)) == 1
    assert cache.keys() == [("classes", "list")]


def test_oldest_entries_evicted(cache):
    for i in range(4):
        cache.set(("item", i), i)

    assert len(cache) == 3
    assert cache.get(("item", 0)) is None
    assert cache.keys() == [("item", 1), ("item", 2), ("item", 3)]


def test_identity_scoped_data():
    cache = QueryCache()
    cache.set(("user", "data"), {"id": 7})
    cache.set(("payment", "methods", "card"), ["visa"])
    cache.set(("venues", "list"), ["gym"])

    assert cache.invalidate_identity_scoped() == 2
    assert cache.get(("user", "data")) == {"id": 7}
    assert cache.is_stale(("user", "data"))
    assert not cache.is_stale(("venues", "list"))

    assert cache.drop_identity_scoped() == 2
    assert cache.keys() == [("venues", "list")]


def test_concurrent_readers_and_writers():
    cache = QueryCache(max_entries=50)

    def work(worker):
        for i in range(200):
            cache.set(("item", worker, i), i)
            cache.get(("item", worker, i - 1))
            cache.is_stale(("item", worker, i))
            len(cache)
        cache.invalidate(("item", worker))

    with ThreadPoolExecutor(max_workers=4) as pool:
        list(pool.map(work, range(4)))

    assert len(cache) == 50
    assert len(cache.keys()) == 50
