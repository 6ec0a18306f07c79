"""Mounts the v1 endpoint modules; main.py adds the /api/v1 prefix."""

from fastapi import APIRouter

from coder_workspace.api.v1.endpoints import config, health, workspaces

api_router = APIRouter()

# Health routes first so they never shadow /workspaces/{name}
api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(config.router, prefix="/config", tags=["config"])
api_router.include_router(workspaces.router, prefix="/workspaces", tags=["workspaces"])
