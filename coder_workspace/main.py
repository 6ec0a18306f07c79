"""ASGI entry point: `uvicorn coder_workspace.main:app`.

create_app() only wires pieces together (lifespan, error handlers,
middleware, the v1 router). Settings are read when it is called, so tests set
their environment before importing this module.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from coder_workspace.api.v1 import api_router
from coder_workspace.core.config import get_settings
from coder_workspace.core.exception_handlers import register_exception_handlers
from coder_workspace.core.lifespan import create_lifespan
from coder_workspace.middleware import RequestIDMiddleware


def create_app() -> FastAPI:
    """Build the FastAPI application for the current settings."""
    settings = get_settings()
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        debug=settings.debug,
        lifespan=create_lifespan,
    )
    register_exception_handlers(app)

    # The review UI calls from the review host's origin and reads the request id
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "DELETE"],
        allow_headers=["Content-Type", settings.session_header_name, settings.request_id_header],
        expose_headers=[settings.request_id_header],
    )
    # Added last so it is outermost and also tags CORS preflight responses
    app.add_middleware(RequestIDMiddleware, header_name=settings.request_id_header)

    app.include_router(api_router, prefix="/api/v1")
    return app


app = create_app()
