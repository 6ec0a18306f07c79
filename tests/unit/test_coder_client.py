"""Tests for CoderRESTClient credential transport and retries."""

import httpx
import pytest
from conftest import FakeCoder

from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.infrastructure.coder import CoderRESTClient
from coder_workspace.infrastructure.exceptions import CoderTransportError


class TestCoderRESTClient:
    async def test_token_sent_in_header(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on("GET", "/users/me", httpx.Response(200, json={"username": "alice"}))
        response = await coder_client.request("GET", "/users/me")
        assert response.status_code == 200
        sent = fake_coder.requests[0]
        assert sent.headers["Coder-Session-Token"] == "test-token"
        assert "coder_session_token" not in sent.url.params
        assert str(sent.url).startswith("https://coder.example.com/api/v2/users/me")

    async def test_401_retried_once_with_query_param(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if request.url.params.get("coder_session_token") == "test-token":
                return httpx.Response(200, json={"ok": True})
            return httpx.Response(401, text="unauthorized")

        fake_coder.on("GET", "/workspaces", handler)
        response = await coder_client.request("GET", "/workspaces", params={"q": "name:x"})
        assert response.status_code == 200
        assert len(fake_coder.requests) == 2
        retry = fake_coder.requests[1]
        assert "Coder-Session-Token" not in retry.headers
        assert retry.url.params["q"] == "name:x"

    async def test_401_not_retried_when_disabled(self, fake_coder: FakeCoder) -> None:
        fake_coder.on("GET", "/workspaces", httpx.Response(401, text="unauthorized"))
        config = WorkspaceConfig(
            server_url="https://coder.example.com",
            api_key="test-token",
            retry_auth_with_query_param=False,
        )
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_coder)) as http:
            response = await CoderRESTClient(config, http_client=http).request("GET", "/workspaces")
        assert response.status_code == 401
        assert len(fake_coder.requests) == 1

    async def test_credential_conflict_retried_without_header(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            if "Coder-Session-Token" in request.headers:
                return httpx.Response(400, text="Cookie and header both set")
            return httpx.Response(200, json={})

        fake_coder.on("GET", "/workspaces", handler)
        response = await coder_client.request("GET", "/workspaces")
        assert response.status_code == 200
        assert len(fake_coder.requests) == 2

    async def test_retry_happens_at_most_once(
        self, coder_client: CoderRESTClient, fake_coder: FakeCoder
    ) -> None:
        fake_coder.on("GET", "/workspaces", httpx.Response(401, text="nope"))
        response = await coder_client.request("GET", "/workspaces")
        assert response.status_code == 401
        assert len(fake_coder.requests) == 2

    async def test_no_token_means_no_retry(self, fake_coder: FakeCoder) -> None:
        fake_coder.on("GET", "/workspaces", httpx.Response(401, text="nope"))
        config = WorkspaceConfig(server_url="https://coder.example.com/")
        async with httpx.AsyncClient(transport=httpx.MockTransport(fake_coder)) as http:
            client = CoderRESTClient(config, http_client=http)
            response = await client.request("GET", "/workspaces")
        assert response.status_code == 401
        assert len(fake_coder.requests) == 1
        assert "Coder-Session-Token" not in fake_coder.requests[0].headers

    async def test_transport_error_wrapped(self, coder_config: WorkspaceConfig) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused", request=request)

        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            client = CoderRESTClient(coder_config, http_client=http)
            with pytest.raises(CoderTransportError) as exc_info:
                await client.request("GET", "/workspaces")
        assert exc_info.value.error_code == "CODER_UNREACHABLE"
