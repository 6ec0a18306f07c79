"""Liveness and readiness checks. No Coder calls."""

from fastapi import APIRouter, Request

from coder_workspace.core.config import get_settings
from coder_workspace.infrastructure.cache import CacheService
from coder_workspace.schemas.health import HealthResponse, ReadinessResponse

router = APIRouter()


@router.get("", response_model=HealthResponse)
def health_check() -> HealthResponse:
    return HealthResponse(version=get_settings().app_version)


@router.get("/ready", response_model=ReadinessResponse)
def readiness_check(request: Request) -> ReadinessResponse:
    """Report the Coder configuration and which binding backend the lifespan chose."""
    backend = "redis" if isinstance(getattr(request.app.state, "cache", None), CacheService) else "memory"
    return ReadinessResponse(
        coder_configured=bool(get_settings().coder_server_url),
        cache_backend=backend,
    )
