"""Tests for TTLCacheStore freshness and stale retention."""
from datetime import timedelta

from app.services.intelligence.ttl_cache import TTLCacheStore


def test_get_returns_value_inside_freshness_window(clock):
    store = TTLCacheStore(clock=clock)
    store.set("k", {"v": 1}, timedelta(seconds=60))

    clock.advance(59.9)
    assert store.get("k") == {"v": 1}


def test_get_misses_at_and_after_expiry(clock):
    store = TTLCacheStore(clock=clock)
    store.set("k", "value", 60)

    clock.advance(60)
    assert store.get("k") is None
    clock.advance(1000)
    assert store.get("k") is None


def test_stale_read_survives_expiry(clock):
    store = TTLCacheStore(clock=clock)
    store.set("k", "value", 60)

    clock.advance(3600)
    assert store.get("k") is None
    assert store.get_stale("k") == "value"


def test_set_overwrites_both_tiers_and_resets_window(clock):
    store = TTLCacheStore(clock=clock)
    store.set("k", "old", 60)
    clock.advance(120)

    store.set("k", "new", 60)
    assert store.get("k") == "new"
    assert store.get_stale("k") == "new"

    entry = store.entry("k")
    assert entry.stored_at == clock.now
    assert entry.fresh_until == clock.now + 60


def test_missing_key_misses_both_tiers(clock):
    store = TTLCacheStore(clock=clock)
    assert store.get("missing") is None
    assert store.get_stale("missing") is None


def test_clear_and_len(clock):
    store = TTLCacheStore(clock=clock)
    store.set("a", 1, 60)
    store.set("b", 2, 60)
    assert len(store) == 2

    store.clear()
    assert len(store) == 0
    assert store.get_stale("a") is None


def test_maxsize_evicts_least_recently_used(clock):
    store = TTLCacheStore(maxsize=2, clock=clock)
    store.set("a", 1, 60)
    store.set("b", 2, 60)
    store.get("a")  # touch
    store.set("c", 3, 60)

    assert store.get_stale("a") == 1
    assert store.get_stale("b") is None
    assert store.get_stale("c") == 3
