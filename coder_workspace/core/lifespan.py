"""Startup and shutdown of the process-wide resources stored on app.state.

app.state.coder_http_client: pooled httpx client shared by every Coder call.
app.state.cache: Redis CacheService, or InMemoryCache when Redis is off or down.
app.state.inflight: open operations being coalesced by fingerprint.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx
from fastapi import FastAPI

from coder_workspace.application.services.inflight import InFlightOperations
from coder_workspace.core.config import Settings, get_settings
from coder_workspace.infrastructure.cache import CacheProtocol, CacheService, InMemoryCache
from coder_workspace.shared.telemetry.logging import setup_logging

logger = logging.getLogger(__name__)


async def _open_binding_cache(settings: Settings) -> CacheProtocol:
    if settings.redis_enabled:
        redis_cache = CacheService(settings=settings)
        await redis_cache.connect()
        if redis_cache.is_available():
            return redis_cache
        logger.warning("Redis unreachable; bindings fall back to process memory")
    return InMemoryCache()


@asynccontextmanager
async def create_lifespan(app: FastAPI) -> AsyncIterator[None]:
    settings = get_settings()
    setup_logging()

    if not settings.coder_server_url:
        logger.warning("CODER_SERVER_URL is not set; workspace actions will fail")

    app.state.coder_http_client = httpx.AsyncClient(timeout=settings.coder_http_timeout_seconds)
    app.state.inflight = InFlightOperations()
    app.state.cache = await _open_binding_cache(settings)
    logger.info("Binding cache backend: %s", type(app.state.cache).__name__)

    try:
        yield
    finally:
        client = app.state.coder_http_client
        if client is not None:
            await client.aclose()
            app.state.coder_http_client = None
        if isinstance(app.state.cache, CacheService):
            await app.state.cache.disconnect()
        logger.info("Shutdown complete")
