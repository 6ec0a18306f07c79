"""Tests for workspace lookup across endpoint shapes."""

import httpx
from conftest import FakeCoder, workspace_json

from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.infrastructure.coder import CoderRESTClient, WorkspaceLookup
from coder_workspace.infrastructure.coder.lookup import pick_exact, pick_prefixed
from coder_workspace.domain.entities import WorkspaceRecord


class TestPickers:
    def test_pick_exact_prefers_owner(self) -> None:
        records = [
            WorkspaceRecord(id="1", name="ws", owner_name="bob"),
            WorkspaceRecord(id="2", name="ws", owner_name="alice"),
        ]
        assert pick_exact(records, "ws", "alice").id == "2"
        assert pick_exact(records, "ws").id == "1"
        assert pick_exact(records, "other") is None

    def test_pick_prefixed_respects_candidate_order(self) -> None:
        records = [
            WorkspaceRecord(id="1", name="repo-1.feature"),
            WorkspaceRecord(id="2", name="repo-1-2"),
        ]
        assert pick_prefixed(records, ["repo-1-2", "repo-1"]).id == "2"
        assert pick_prefixed(records, ["repo-1"]).id == "1"
        assert pick_prefixed(records, ["repo"]) is None


class TestWorkspaceLookup:
    async def test_found_by_name(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on(
            "GET", "/users/me/workspace/ws-a", httpx.Response(200, json=workspace_json("ws-a"))
        )
        record = await WorkspaceLookup(coder_client).lookup_by_name("ws-a")
        assert record.name == "ws-a"
        assert record.owner_name == "alice"
        assert len(fake_coder.requests) == 1

    async def test_falls_back_to_owner_search(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on(
            "GET",
            "/workspaces",
            httpx.Response(200, json={"workspaces": [workspace_json("ws-a")], "count": 1}),
        )
        record = await WorkspaceLookup(coder_client).lookup_by_name("ws-a")
        assert record.id == "ws-1"
        assert fake_coder.calls() == [
            ("GET", "/users/me/workspace/ws-a"),
            ("GET", "/workspaces"),
        ]
        params = fake_coder.requests[1].url.params
        assert params["q"] == "owner:me name:ws-a"
        assert params["limit"] == "10"

    async def test_search_is_exact_name_only(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on(
            "GET",
            "/workspaces",
            httpx.Response(200, json={"workspaces": [workspace_json("ws-a-2")]}),
        )
        assert await WorkspaceLookup(coder_client).lookup_by_name("ws-a") is None
        # by-name, owner search, name-only search
        assert len(fake_coder.requests) == 3
        assert fake_coder.requests[2].url.params["q"] == "name:ws-a"

    async def test_organization_scopes_owner_search(self, fake_coder: FakeCoder) -> None:
        config = WorkspaceConfig(
            server_url="https://coder.example.com", organization="acme", user="alice"
        )
        fake_coder.on("GET", "/workspaces", httpx.Response(200, json={"workspaces": []}))
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_coder)) as http:
            lookup = WorkspaceLookup(CoderRESTClient(config, http_client=http))
            assert await lookup.lookup_by_name("ws-a") is None
        assert fake_coder.calls()[0] == ("GET", "/users/alice/workspace/ws-a")
        assert fake_coder.requests[1].url.params["q"] == "owner:alice name:ws-a organization:acme"

    async def test_server_errors_advance(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on("GET", "/users/me/workspace/ws-a", httpx.Response(500, text="boom"))
        fake_coder.on("GET", "/workspaces", httpx.Response(200, json=[workspace_json("ws-a")]))
        record = await WorkspaceLookup(coder_client).lookup_by_name("ws-a")
        assert record is not None

    async def test_unreachable_returns_none(self, coder_config: WorkspaceConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("down", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            lookup = WorkspaceLookup(CoderRESTClient(coder_config, http_client=http))
            assert await lookup.lookup_by_name("ws-a") is None

    async def test_find_first_stops_at_first_hit(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on("GET", "/workspaces", httpx.Response(200, json={"workspaces": []}))
        fake_coder.on(
            "GET", "/users/me/workspace/second", httpx.Response(200, json=workspace_json("second"))
        )
        fake_coder.on(
            "GET", "/users/me/workspace/third", httpx.Response(200, json=workspace_json("third"))
        )
        record = await WorkspaceLookup(coder_client).find_first(["first", "second", "third"])
        assert record.name == "second"
        assert ("GET", "/users/me/workspace/third") not in fake_coder.calls()

    async def test_prefix_search(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on(
            "GET",
            "/workspaces",
            httpx.Response(
                200,
                json={"workspaces": [workspace_json("other"), workspace_json("repo-42.main")]},
            ),
        )
        record = await WorkspaceLookup(coder_client).prefix_search(["repo-42-1", "repo-42"])
        assert record.name == "repo-42.main"
        params = fake_coder.requests[0].url.params
        assert params["q"] == "owner:me"
        assert params["limit"] == "100"
