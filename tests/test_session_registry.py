from __future__ import annotations

from tasklens.core.cache.ttl import SlidingTTLCache
from tasklens.core.sessions.registry import SHARED_SESSION_ID, SessionRegistry


def test_sessions_get_isolated_stores() -> None:
    registry = SessionRegistry(mode="session")

    first = registry.get("tab-1")
    assert registry.get("tab-1") is first
    assert registry.get("tab-2") is not first

    first.store.create_task("Write the release notes")
    assert registry.get("tab-2").store.tasks == []


def test_missing_session_key_gets_fresh_store() -> None:
    registry = SessionRegistry(mode="session")

    assert registry.get(None) is not registry.get("")
    assert len(registry) == 2


def test_shared_mode_uses_one_store() -> None:
    registry = SessionRegistry(mode="shared")

    assert registry.get("tab-1") is registry.get("tab-2")
    assert registry.get("tab-1").session_id == SHARED_SESSION_ID


def test_sliding_cache_extends_on_access_and_prunes() -> None:
    now = {"t": 0.0}
    cache: SlidingTTLCache[str] = SlidingTTLCache(ttl_s=10, clock=lambda: now["t"])

    cache.get_or_set("a", lambda: "first")
    cache.get_or_set("b", lambda: "second")
    now["t"] = 8.0
    assert cache.get("a") == "first"

    now["t"] = 15.0
    assert cache.prune() == ["b"]
    assert cache.get("a") == "first"
    assert cache.get_or_set("b", lambda: "recreated") == "recreated"

    now["t"] = 40.0
    assert cache.get("a") is None
    assert len(cache) == 1


def test_registry_prune_drops_idle_sessions() -> None:
    registry = SessionRegistry(mode="session", ttl_s=1)
    registry.get("idle")
    registry._sessions._clock = lambda: 10_000_000_000.0

    assert registry.prune() == 1
    assert len(registry) == 0


def test_touch_extends_only_live_entries() -> None:
    now = {"t": 0.0}
    cache: SlidingTTLCache[str] = SlidingTTLCache(ttl_s=10, clock=lambda: now["t"])
    cache.set("a", "first")

    now["t"] = 8.0
    assert cache.touch("a") is True
    now["t"] = 15.0
    assert cache.prune() == []

    now["t"] = 30.0
    assert cache.touch("a") is False
    assert cache.touch("missing") is False


def test_keep_alive_restores_pruned_session() -> None:
    now = {"t": 0.0}
    registry = SessionRegistry(mode="session", ttl_s=10)
    registry._sessions._clock = lambda: now["t"]
    dispatcher = registry.get("tab-1")
    dispatcher.store.create_task("Write the release notes")

    now["t"] = 20.0
    assert registry.prune() == 1
    registry.keep_alive(dispatcher)

    assert registry.get("tab-1") is dispatcher
    assert len(registry.get("tab-1").store.tasks) == 1
