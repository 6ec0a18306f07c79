"""API version 1."""

from coder_workspace.api.v1.router import api_router

__all__ = ["api_router"]
