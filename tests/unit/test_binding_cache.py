"""Tests for cache keys, the in-memory cache and the context binding store."""

import pytest

from coder_workspace.domain.entities import ChangeContext, ContextBinding, WorkspaceRecord
from coder_workspace.domain.enums import BindingScope
from coder_workspace.infrastructure.cache import (
    ContextBindingStore,
    InMemoryCache,
    binding_meta_key,
    binding_url_key,
)
from coder_workspace.infrastructure.cache.keys import scope_slot

_CTX = ChangeContext(repo="r", branch="main", change="1", patchset="2")
_WS = WorkspaceRecord(id="ws-1", name="r-1-2", owner_name="alice")


class TestKeys:
    def test_global_slot(self) -> None:
        assert binding_url_key() == "coder-workspace:last-url"
        assert binding_meta_key() == "coder-workspace:last-meta"

    def test_session_slot(self) -> None:
        assert binding_url_key("tab-1") == "coder-workspace:last-url:tab-1"

    def test_separator_rejected(self) -> None:
        with pytest.raises(ValueError, match="separator"):
            binding_meta_key("a:b")

    def test_scope_slots(self) -> None:
        assert scope_slot(BindingScope.SESSION, _CTX) is None
        assert scope_slot(BindingScope.CONTEXT, _CTX) == "context=r|main"
        assert scope_slot(BindingScope.CHANGE, _CTX) == "change=r|1|2"
        key = binding_url_key("tab-1", scope_slot(BindingScope.CONTEXT, _CTX))
        assert key == "coder-workspace:last-url:context=r|main:tab-1"

    def test_slot_parts_are_encoded(self) -> None:
        ctx = ChangeContext(repo="a:b|c", branch="refs/heads/x")
        assert scope_slot(BindingScope.CONTEXT, ctx) == "context=a%3Ab%7Cc|refs%2Fheads%2Fx"


class TestInMemoryCache:
    async def test_values_are_copied(self) -> None:
        cache = InMemoryCache()
        value = {"a": [1]}
        await cache.set("k", value)
        value["a"].append(2)
        assert await cache.get("k") == {"a": [1]}

    async def test_ttl_expiry(self) -> None:
        now = {"t": 100.0}
        cache = InMemoryCache(clock=lambda: now["t"])
        await cache.set("k", "v", ttl=10)
        assert await cache.get("k") == "v"
        now["t"] = 111.0
        assert await cache.get("k") is None

    async def test_delete(self) -> None:
        cache = InMemoryCache()
        await cache.set("k", "v")
        assert await cache.delete("k")
        assert await cache.get("k") is None


class TestContextBindingStore:
    async def test_save_load_clear(self) -> None:
        store = ContextBindingStore(InMemoryCache())
        await store.save(ContextBinding.for_workspace(_CTX, _WS, "https://u"), "s1")
        binding = await store.load("s1")
        assert binding.url == "https://u"
        assert binding.meta.workspace_owner == "alice"
        assert binding.matches(_CTX)
        await store.clear("s1")
        assert await store.load("s1") is None

    async def test_sessions_are_isolated(self) -> None:
        store = ContextBindingStore(InMemoryCache())
        await store.save(ContextBinding.for_workspace(_CTX, _WS, "https://u"), "s1")
        assert await store.load("s2") is None
        assert await store.load() is None

    async def test_half_binding_is_absent(self) -> None:
        cache = InMemoryCache()
        await cache.set(binding_url_key(), "https://u")
        assert await ContextBindingStore(cache).load() is None

    async def test_save_replaces_previous(self) -> None:
        store = ContextBindingStore(InMemoryCache())
        await store.save(ContextBinding.for_workspace(_CTX, _WS, "https://old"))
        other = WorkspaceRecord(id="ws-2", name="r-1-3")
        await store.save(ContextBinding.for_workspace(_CTX, other, "https://new"))
        binding = await store.load()
        assert binding.url == "https://new"
        assert binding.meta.workspace_name == "r-1-3"

    async def test_scoped_slots_keyed_by_context(self) -> None:
        store = ContextBindingStore(InMemoryCache())
        binding = ContextBinding.for_workspace(_CTX, _WS, "https://u")
        await store.save(binding, "s1", BindingScope.CHANGE)
        assert await store.load("s1") is None
        assert (await store.load("s1", BindingScope.CHANGE, _CTX)).url == "https://u"
        later = ChangeContext(repo="r", branch="main", change="1", patchset="3")
        assert await store.load("s1", BindingScope.CHANGE, later) is None
        await store.clear("s1", BindingScope.CHANGE, _CTX)
        assert await store.load("s1", BindingScope.CHANGE, _CTX) is None
