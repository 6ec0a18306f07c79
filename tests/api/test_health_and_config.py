"""Smoke tests for health, readiness and public configuration."""

from httpx import AsyncClient


async def test_health_returns_ok(client: AsyncClient) -> None:
    """GET /api/v1/health returns 200 and status ok."""
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json().get("status") == "ok"


async def test_ready_reports_backends(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health/ready")
    assert response.status_code == 200
    data = response.json()
    assert data["coder_configured"] is True
    assert data["cache_backend"] == "memory"


async def test_request_id_echoed(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health", headers={"X-Request-ID": "req-1"})
    assert response.headers.get("X-Request-ID") == "req-1"


async def test_request_id_generated(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.headers.get("X-Request-ID")


async def test_config_hides_api_key(client: AsyncClient) -> None:
    response = await client.get("/api/v1/config")
    assert response.status_code == 200
    data = response.json()
    assert data["server_url"] == "https://coder.example.com"
    assert data["api_key_configured"] is True
    assert data["template_id"] == "tmpl-1"
    assert data["workspace_name_template"] == "{repo}-{change}-{patchset}"
    assert "test-token" not in response.text


async def test_error_body_carries_request_id(client: AsyncClient) -> None:
    response = await client.get("/api/v1/workspaces/last", headers={"X-Request-ID": "req-9"})
    assert response.status_code == 404
    assert response.json()["request_id"] == "req-9"


async def test_health_reports_version(client: AsyncClient) -> None:
    response = await client.get("/api/v1/health")
    assert response.json()["version"] == "1.0.0"
