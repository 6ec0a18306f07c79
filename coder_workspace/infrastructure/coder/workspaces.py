"""Workspace create endpoint.

Conflicts are surfaced as WorkspaceConflictError so the resolver can decide
between adopting the existing workspace and retrying with a unique name.
"""

import logging

from coder_workspace.domain.entities import WorkspaceRecord
from coder_workspace.domain.value_objects import CreateWorkspaceRequest
from coder_workspace.infrastructure.coder import paths
from coder_workspace.infrastructure.coder._rest_client import CoderRESTClient
from coder_workspace.infrastructure.exceptions import CoderApiError
from coder_workspace.shared.telemetry.tracing import traced

logger = logging.getLogger(__name__)


@traced("coder.create_workspace")
async def create_workspace(
    client: CoderRESTClient, request: CreateWorkspaceRequest
) -> WorkspaceRecord:
    """POST a create request to the configured collection.

    Returns:
        The created workspace. The requested name is used when the server
        omits it from the response body.

    Raises:
        WorkspaceConflictError: The name is already taken (409 or "already exists").
        CoderApiError: Any other non-2xx response.
        CoderTransportError: The server could not be reached.
    """
    path = paths.create_path(client.config)
    response = await client.request("POST", path, json=request.to_payload())
    if not response.is_success:
        error = CoderApiError.from_response(response)
        logger.warning("Create workspace %s failed: %s", request.name, error.message)
        raise error
    try:
        data = response.json()
    except ValueError as e:
        raise CoderApiError(response.status_code, "Create response is not JSON") from e
    record = WorkspaceRecord.from_api(data if isinstance(data, dict) else {})
    if not record.name:
        record = WorkspaceRecord(
            id=record.id,
            name=request.name,
            owner_name=record.owner_name,
            latest_app_status=record.latest_app_status,
        )
    logger.info("Created workspace %s (id=%s)", record.name, record.id)
    return record
