"""Tests for readiness polling, workspace URLs and in-flight coalescing."""

import asyncio
from dataclasses import replace

import pytest

from coder_workspace.application.services import readiness_poller
from coder_workspace.application.services.inflight import InFlightOperations
from coder_workspace.application.services.readiness_poller import wait_for_ready
from coder_workspace.application.services.workspace_links import (
    build_workspace_url,
    deep_link,
    url_to_open,
    with_token,
)
from coder_workspace.domain.entities import AppStatus, WorkspaceRecord
from coder_workspace.domain.value_objects import WorkspaceConfig

_CONFIG = WorkspaceConfig(server_url="https://coder.example.com/", api_key="tok")
_PENDING = WorkspaceRecord(id="1", name="ws", owner_name="alice")
_READY = WorkspaceRecord(
    id="1", name="ws", owner_name="alice", latest_app_status=AppStatus("https://app.example.com/")
)


@pytest.fixture
def no_sleep(monkeypatch: pytest.MonkeyPatch) -> list[float]:
    """Replace asyncio.sleep in the poller; record requested delays."""
    delays: list[float] = []

    async def fake_sleep(seconds: float) -> None:
        delays.append(seconds)

    monkeypatch.setattr(readiness_poller.asyncio, "sleep", fake_sleep)
    return delays


class TestWaitForReady:
    async def test_returns_first_ready_record(self, no_sleep: list[float]) -> None:
        results = iter([_PENDING, None, _READY])

        async def lookup(name: str) -> WorkspaceRecord | None:
            return next(results)

        assert await wait_for_ready(lookup, "ws", 10_000, 500) is _READY
        assert no_sleep == [0.5, 0.5]

    async def test_interval_has_floor(self, no_sleep: list[float]) -> None:
        results = iter([_PENDING, _READY])

        async def lookup(name: str) -> WorkspaceRecord | None:
            return next(results)

        await wait_for_ready(lookup, "ws", 10_000, 1)
        assert no_sleep == [0.1]

    async def test_lookup_errors_are_not_fatal(self, no_sleep: list[float]) -> None:
        calls = {"n": 0}

        async def lookup(name: str) -> WorkspaceRecord | None:
            calls["n"] += 1
            if calls["n"] == 1:
                raise RuntimeError("flaky")
            return _READY

        assert await wait_for_ready(lookup, "ws", 10_000, 100) is _READY

    async def test_timeout_returns_last_seen(self, monkeypatch: pytest.MonkeyPatch) -> None:
        clock = iter(range(0, 100_000, 400))
        monkeypatch.setattr(readiness_poller, "monotonic_ms", lambda: next(clock))

        async def fake_sleep(seconds: float) -> None:
            return None

        monkeypatch.setattr(readiness_poller.asyncio, "sleep", fake_sleep)

        async def lookup(name: str) -> WorkspaceRecord | None:
            return _PENDING

        assert await wait_for_ready(lookup, "ws", 1_000, 100, seed=None) is _PENDING

    async def test_zero_timeout_returns_seed(self) -> None:
        async def lookup(name: str) -> WorkspaceRecord | None:
            raise AssertionError("must not poll")

        assert await wait_for_ready(lookup, "ws", 0, 100, seed=_PENDING) is _PENDING

    async def test_ready_seed_returned_without_lookup(self, no_sleep: list[float]) -> None:
        async def lookup(name: str) -> WorkspaceRecord | None:
            raise AssertionError("must not poll")

        assert await wait_for_ready(lookup, "ws", 10_000, 100, seed=_READY) is _READY
        assert no_sleep == []

    async def test_pending_seed_then_ready(self, no_sleep: list[float]) -> None:
        async def lookup(name: str) -> WorkspaceRecord | None:
            return _READY

        assert await wait_for_ready(lookup, "ws", 10_000, 200, seed=_PENDING) is _READY
        assert no_sleep == [0.2]


class TestWorkspaceLinks:
    def test_deep_link(self) -> None:
        assert deep_link(_PENDING, _CONFIG) == "https://coder.example.com/@alice/ws"

    def test_deep_link_with_app_slug(self) -> None:
        config = replace(_CONFIG, app_slug="code-server")
        assert deep_link(_PENDING, config) == "https://coder.example.com/@alice/ws/apps/code-server/"

    def test_deep_link_falls_back_to_configured_user(self) -> None:
        workspace = WorkspaceRecord(id="1", name="ws")
        assert deep_link(workspace, _CONFIG) == "https://coder.example.com/@me/ws"

    def test_app_uri_wins(self) -> None:
        assert build_workspace_url(_READY, _CONFIG) == "https://app.example.com/"

    def test_token_appended_when_enabled(self) -> None:
        config = replace(_CONFIG, append_token_to_app_url=True)
        url = build_workspace_url(_READY, config)
        assert url == "https://app.example.com/"
        assert url_to_open(url, config) == "https://app.example.com/?coder_session_token=tok"
        assert url_to_open(url, _CONFIG) == url

    def test_with_token_replaces_existing(self) -> None:
        url = with_token("https://a/?x=1&coder_session_token=old", _CONFIG)
        assert url == "https://a/?x=1&coder_session_token=tok"


class TestInFlightOperations:
    async def test_same_key_shares_one_task(self) -> None:
        ops = InFlightOperations()
        gate = asyncio.Event()
        calls = {"n": 0}

        async def work() -> str:
            calls["n"] += 1
            await gate.wait()
            return "done"

        first = asyncio.ensure_future(ops.run("k", work))
        second = asyncio.ensure_future(ops.run("k", work))
        await asyncio.sleep(0)
        assert len(ops) == 1
        gate.set()
        assert await asyncio.gather(first, second) == ["done", "done"]
        assert calls["n"] == 1
        assert len(ops) == 0

    async def test_different_keys_run_separately(self) -> None:
        ops = InFlightOperations()

        async def work() -> int:
            return 1

        assert await asyncio.gather(ops.run("a", work), ops.run("b", work)) == [1, 1]

    async def test_failure_reaches_every_waiter_and_is_forgotten(self) -> None:
        ops = InFlightOperations()

        async def boom() -> None:
            await asyncio.sleep(0)
            raise ValueError("nope")

        results = await asyncio.gather(
            ops.run("k", boom), ops.run("k", boom), return_exceptions=True
        )
        assert all(isinstance(r, ValueError) for r in results)
        assert len(ops) == 0
