"""Workspace record entity.

Read-only view of a workspace owned by the Coder server. This service never
mutates these fields; it only requests transitions (create, delete, dormant, ttl).
"""

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class AppStatus:
    """Latest application status reported for a workspace."""

    uri: str = ""


@dataclass(frozen=True)
class WorkspaceRecord:
    """Remote workspace identity plus its reported application endpoint."""

    id: str
    name: str
    owner_name: str = ""
    latest_app_status: AppStatus | None = None

    @classmethod
    def from_api(cls, data: dict[str, Any]) -> "WorkspaceRecord":
        """Build from a Coder workspace JSON object."""
        status = data.get("latest_app_status")
        app_status = None
        if isinstance(status, dict):
            app_status = AppStatus(uri=str(status.get("uri") or ""))
        return cls(
            id=str(data.get("id") or ""),
            name=str(data.get("name") or ""),
            owner_name=str(data.get("owner_name") or ""),
            latest_app_status=app_status,
        )

    @property
    def app_uri(self) -> str:
        """Application URI when the workspace reports one, else empty string."""
        return self.latest_app_status.uri if self.latest_app_status else ""

    def is_ready(self) -> bool:
        return bool(self.app_uri)
