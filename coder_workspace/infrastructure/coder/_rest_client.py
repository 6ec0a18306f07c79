"""Thin Coder REST API client.

All HTTP calls use httpx.AsyncClient so they do not block the event loop.
The session token travels in the Coder-Session-Token header. On 401 (or when
the server reports a cookie/header credential conflict) the same request is
retried once with the token moved into a query parameter and cookies dropped.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

import httpx

from coder_workspace.domain.value_objects import WorkspaceConfig
from coder_workspace.infrastructure.exceptions import CoderTransportError

logger = logging.getLogger(__name__)

_API_PREFIX = "/api/v2"
SESSION_TOKEN_HEADER = "Coder-Session-Token"


def _is_credential_conflict(response: httpx.Response) -> bool:
    """True when the server rejected a request because cookie and header both carried a token."""
    if response.status_code not in (400, 401, 403):
        return False
    text = response.text.lower()
    return "cookie" in text and ("header" in text or "both" in text)


class CoderRESTClient:
    """Lightweight Coder client; returns raw responses and leaves status handling to callers."""

    def __init__(
        self,
        config: WorkspaceConfig,
        *,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._config = config
        self._http = http_client if http_client is not None else httpx.AsyncClient(timeout=30.0)
        self._owns_http = http_client is None

    @property
    def config(self) -> WorkspaceConfig:
        return self._config

    async def aclose(self) -> None:
        """Close the HTTP client only if we created it (do not close injected client)."""
        if self._owns_http:
            await self._http.aclose()

    def url(self, path: str) -> str:
        """Absolute API URL for a path below /api/v2."""
        return f"{self._config.base_url}{_API_PREFIX}{path}"

    async def request(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None = None,
        json: Any = None,
    ) -> httpx.Response:
        """Send one logical request, retrying once with the alternate credential transport.

        Raises:
            CoderTransportError: If the server could not be reached.
        """
        response = await self._send(method, path, params=params, json=json, token_in_query=False)
        if not self._config.api_key:
            return response
        if response.status_code == 401 and self._config.retry_auth_with_query_param:
            logger.info(
                "Coder %s %s returned 401; retrying with token as query parameter", method, path
            )
        elif _is_credential_conflict(response):
            logger.info(
                "Coder %s %s reported a cookie/header credential conflict; retrying without header",
                method,
                path,
            )
        else:
            return response
        return await self._send(method, path, params=params, json=json, token_in_query=True)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: Mapping[str, str] | None,
        json: Any,
        token_in_query: bool,
    ) -> httpx.Response:
        url = self.url(path)
        headers = {"Accept": "application/json"}
        query = dict(params or {})
        if json is not None:
            headers["Content-Type"] = "application/json"
        if self._config.api_key:
            if token_in_query:
                query[self._config.api_key_query_param_name] = self._config.api_key
            else:
                headers[SESSION_TOKEN_HEADER] = self._config.api_key
        request = self._http.build_request(
            method, url, params=query or None, json=json, headers=headers
        )
        if token_in_query:
            request.headers.pop("Cookie", None)
        try:
            return await self._http.send(request)
        except httpx.HTTPError as e:
            raise CoderTransportError(method, url, str(e)) from e
