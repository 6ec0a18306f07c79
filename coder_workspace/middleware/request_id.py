"""Request correlation id.

Each HTTP request gets an id: the client's header value when it is a short
token of [A-Za-z0-9_-], a fresh UUID otherwise. The id is echoed on the
response, stored in scope["state"] and published through a context variable
that the log filter and the error handlers read.
"""

import re
import uuid
from contextvars import ContextVar
from typing import Any, Callable

_VALID_REQUEST_ID = re.compile(r"[A-Za-z0-9_-]{1,64}")

_request_id: ContextVar[str | None] = ContextVar("request_id", default=None)


def current_request_id() -> str | None:
    """Id of the request being served, or None outside a request."""
    return _request_id.get()


class RequestIDMiddleware:
    """Raw ASGI middleware; streaming responses pass through untouched."""

    def __init__(self, app: Callable, header_name: str = "X-Request-ID") -> None:
        self.app = app
        self.header_name = header_name
        self._header_key = header_name.lower().encode("latin-1")

    def _incoming_id(self, scope: dict[str, Any]) -> str:
        for key, value in scope.get("headers", []):
            if key.lower() == self._header_key:
                candidate = value.decode("latin-1").strip()
                if _VALID_REQUEST_ID.fullmatch(candidate):
                    return candidate
                break
        return str(uuid.uuid4())

    async def __call__(self, scope: dict[str, Any], receive: Callable, send: Callable) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request_id = self._incoming_id(scope)
        scope.setdefault("state", {})["request_id"] = request_id

        async def send_with_id(message: dict[str, Any]) -> None:
            if message["type"] == "http.response.start":
                message["headers"] = [
                    (k, v) for k, v in message.get("headers", []) if k.lower() != self._header_key
                ] + [(self._header_key, request_id.encode("latin-1"))]
            await send(message)

        token = _request_id.set(request_id)
        try:
            await self.app(scope, receive, send_with_id)
        finally:
            _request_id.reset(token)
