"""Pytest configuration and fixtures for the Coder workspace service.

Environment is set before coder_workspace.main is imported so the app is
built with test settings (no Redis, a fake Coder server URL). HTTP tests run
the app lifespan, then swap the shared Coder HTTP client for one backed by
a FakeCoder handler so no request leaves the process.
"""

import os

os.environ["CODER_SERVER_URL"] = "https://coder.example.com"
os.environ["CODER_API_KEY"] = "test-token"
os.environ["TEMPLATE_ID"] = "tmpl-1"
os.environ["REDIS_ENABLED"] = "false"

import json  # noqa: E402
from collections.abc import Callable  # noqa: E402
from typing import Any  # noqa: E402

import httpx  # noqa: E402
import pytest  # noqa: E402
from httpx import ASGITransport, AsyncClient  # noqa: E402

from coder_workspace.core.config import get_settings  # noqa: E402
from coder_workspace.core.lifespan import create_lifespan  # noqa: E402
from coder_workspace.domain.value_objects import WorkspaceConfig  # noqa: E402
from coder_workspace.infrastructure.coder import CoderRESTClient  # noqa: E402
from coder_workspace.main import app  # noqa: E402

Route = Callable[[httpx.Request], httpx.Response]


class FakeCoder:
    """Programmable Coder server for httpx.MockTransport.

    Routes are keyed by (method, path below /api/v2); a route value is either
    an httpx.Response or a callable returning one. Unrouted requests get 404.
    Every request is recorded in `requests`.
    """

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response | Route] = {}
        self.requests: list[httpx.Request] = []

    def on(self, method: str, path: str, response: httpx.Response | Route) -> None:
        self.routes[(method, path)] = response

    def calls(self, method: str | None = None) -> list[tuple[str, str]]:
        """(method, path) of every request, optionally filtered by method."""
        return [
            (r.method, r.url.path.removeprefix("/api/v2"))
            for r in self.requests
            if method is None or r.method == method
        ]

    def json_body(self, index: int = -1) -> Any:
        return json.loads(self.requests[index].content)

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path.removeprefix("/api/v2")))
        if route is None:
            return httpx.Response(404, json={"message": "Route not found"})
        return route(request) if callable(route) else route


def workspace_json(
    name: str, workspace_id: str = "ws-1", owner: str = "alice", app_uri: str = ""
) -> dict[str, Any]:
    data: dict[str, Any] = {"id": workspace_id, "name": name, "owner_name": owner}
    if app_uri:
        data["latest_app_status"] = {"uri": app_uri}
    return data


@pytest.fixture
def fake_coder() -> FakeCoder:
    return FakeCoder()


@pytest.fixture
def coder_config() -> WorkspaceConfig:
    return WorkspaceConfig(
        server_url="https://coder.example.com",
        api_key="test-token",
        template_id="tmpl-1",
    )


@pytest.fixture
async def coder_client(fake_coder: FakeCoder, coder_config: WorkspaceConfig) -> CoderRESTClient:
    """CoderRESTClient whose HTTP traffic is served by fake_coder."""
    async with httpx.AsyncClient(transport=httpx.MockTransport(fake_coder)) as http:
        yield CoderRESTClient(coder_config, http_client=http)


@pytest.fixture
async def client(fake_coder: FakeCoder) -> AsyncClient:
    """Async HTTP client against the FastAPI app (ASGI), lifespan included."""
    get_settings.cache_clear()
    async with create_lifespan(app):
        await app.state.coder_http_client.aclose()
        app.state.coder_http_client = httpx.AsyncClient(
            transport=httpx.MockTransport(fake_coder)
        )
        transport = ASGITransport(app=app)
        async with AsyncClient(transport=transport, base_url="http://test") as ac:
            yield ac
    get_settings.cache_clear()
