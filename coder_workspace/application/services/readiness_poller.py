"""Bounded polling until a workspace reports an application URI."""

import asyncio
import logging
from collections.abc import Awaitable, Callable

from coder_workspace.core.constants import MIN_POLL_INTERVAL_MS
from coder_workspace.domain.entities import WorkspaceRecord
from coder_workspace.shared.utils.datetime import monotonic_ms

logger = logging.getLogger(__name__)

LookupFn = Callable[[str], Awaitable[WorkspaceRecord | None]]


async def wait_for_ready(
    lookup: LookupFn,
    name: str,
    timeout_ms: int,
    interval_ms: int,
    seed: WorkspaceRecord | None = None,
) -> WorkspaceRecord | None:
    """Poll `lookup(name)` until the workspace reports an app URI or time runs out.

    The seed counts as the first poll result: a seed that already reports
    an app URI is returned without fetching. Returns the first ready record,
    otherwise the last record seen (the seed when no poll returned one).
    Lookup failures count as "not ready yet"; this function never raises for
    them.
    """
    if timeout_ms <= 0:
        return seed
    deadline = monotonic_ms() + timeout_ms
    sleep_s = max(MIN_POLL_INTERVAL_MS, interval_ms) / 1000
    last_seen = seed
    current = seed
    while True:
        if current is None:
            try:
                current = await lookup(name)
            except Exception:
                logger.debug("Readiness poll for %s failed; retrying", name, exc_info=True)
        if current is not None:
            last_seen = current
            if current.is_ready():
                logger.info("Workspace %s reports app at %s", name, current.app_uri)
                return current
        if monotonic_ms() >= deadline:
            break
        await asyncio.sleep(sleep_s)
        current = None
    logger.info("Workspace %s not ready after %d ms; using last known state", name, timeout_ms)
    return last_seen
