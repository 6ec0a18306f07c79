"""Health check responses. Neither check calls the Coder server."""

from typing import Literal

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    status: str = "ok"
    version: str = Field(..., description="Running service version")


class ReadinessResponse(BaseModel):
    """Whether open/delete can work: a Coder URL is set; where bindings live."""

    status: str = "ok"
    coder_configured: bool
    cache_backend: Literal["redis", "memory"]
