"""Errors a workspace action can end in, independent of HTTP and Coder.

core.exception_handlers turns error_code into a status code; Coder-side
failures live in infrastructure.exceptions and share the same base.
"""

from typing import Any


class CoderWorkspaceException(Exception):
    """Base for every error the service reports to the review UI.

    Attributes:
        message: Text shown to the user.
        error_code: Stable code the UI and handlers switch on.
        details: Extra fields such as the workspace name or upstream status.
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code or type(self).__name__
        self.details = dict(details) if details else {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        return {"error": self.error_code, "message": self.message, "details": self.details}


class ValidationException(CoderWorkspaceException):
    """Missing change context, bad session header or unusable configuration."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message, "VALIDATION_ERROR", {"field": field} if field else None)


class WorkspaceNotFoundException(CoderWorkspaceException):
    """No workspace visible to the credential under `name`."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Workspace not found: {name}", "WORKSPACE_NOT_FOUND", {"workspace_name": name})


class BindingNotFoundException(CoderWorkspaceException):
    """The session has not opened a workspace yet (or its binding expired)."""

    def __init__(self) -> None:
        super().__init__("No recent Coder workspace link found", "BINDING_NOT_FOUND")
