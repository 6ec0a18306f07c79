"""Infrastructure exceptions for Coder API and transport operations.

API errors extend CoderWorkspaceException so presentation can map them
to HTTP responses consistently. The original status and response text are
always preserved in the message and details.
"""

import httpx

from coder_workspace.domain.exceptions import CoderWorkspaceException

# Statuses that mean "wrong endpoint shape for this deployment", not a rejection.
ROUTE_UNSUPPORTED_STATUSES = frozenset({400, 404, 405})


def _is_conflict(status: int, text: str) -> bool:
    return status == 409 or "already exists" in (text or "").lower()


class CoderApiError(CoderWorkspaceException):
    """Non-2xx response from the Coder API (fatal unless a subclass is handled)."""

    def __init__(self, status: int, text: str, error_code: str = "CODER_API_ERROR") -> None:
        self.status = status
        self.text = text
        super().__init__(
            f"Coder API error {status}: {text}",
            error_code,
            {"status": status, "text": text},
        )

    @classmethod
    def from_response(cls, response: httpx.Response) -> "CoderApiError":
        """Return the most specific error type for a failed response."""
        status = response.status_code
        text = response.text
        if status == 401:
            return UnauthorizedError(status, text)
        if _is_conflict(status, text):
            return WorkspaceConflictError(status, text)
        if status in ROUTE_UNSUPPORTED_STATUSES:
            return RouteUnsupportedError(status, text)
        return cls(status, text)


class RouteUnsupportedError(CoderApiError):
    """400/404/405 signalling the endpoint shape is not served here."""

    def __init__(self, status: int, text: str) -> None:
        super().__init__(status, text, "CODER_ROUTE_UNSUPPORTED")


class WorkspaceConflictError(CoderApiError):
    """Create request rejected because the workspace name is taken."""

    def __init__(self, status: int, text: str) -> None:
        super().__init__(status, text, "WORKSPACE_CONFLICT")


class UnauthorizedError(CoderApiError):
    """Credential rejected even after the alternate transport retry."""

    def __init__(self, status: int, text: str) -> None:
        super().__init__(status, text, "CODER_UNAUTHORIZED")


class CoderTransportError(CoderWorkspaceException):
    """Network failure talking to the Coder server (no HTTP response)."""

    def __init__(self, method: str, url: str, reason: str) -> None:
        super().__init__(
            f"Coder request failed: {method} {url}: {reason}",
            "CODER_UNREACHABLE",
            {"method": method, "url": url, "reason": reason},
        )


class WorkspaceDeletionError(CoderWorkspaceException):
    """Every hard-delete route and both soft-decommission steps failed."""

    def __init__(self, name: str, last_status: int | None, last_text: str) -> None:
        super().__init__(
            f"Unable to delete workspace {name}: last status {last_status} {last_text}".rstrip(),
            "WORKSPACE_DELETE_FAILED",
            {"workspace_name": name, "last_status": last_status, "last_text": last_text},
        )
