"""Tests for DedupCache."""

from concurrent.futures import ThreadPoolExecutor

from app.core.dedup_cache import DedupCache


def test_has_is_false_until_marked():
    cache = DedupCache()
    assert cache.has("123") is False
    cache.mark("123")
    assert cache.has("123") is True
    assert cache.has("456") is False


def test_mark_is_idempotent():
    cache = DedupCache()
    cache.mark("123")
    cache.mark("123")
    assert cache.has("123") is True


def test_instances_do_not_share_keys():
    first = DedupCache()
    second = DedupCache()
    first.mark("1")
    assert second.has("1") is False


def test_concurrent_marks():
    cache = DedupCache()
    keys = [str(i % 50) for i in range(1000)]
    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(cache.mark, keys))
    assert all(cache.has(str(i)) for i in range(50))
    assert cache.has("50") is False
