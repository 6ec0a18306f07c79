"""ASGI middleware installed by coder_workspace.main.create_app()."""

from coder_workspace.middleware.request_id import RequestIDMiddleware, current_request_id

__all__ = ["RequestIDMiddleware", "current_request_id"]
