"""Logging configuration for the application.

Each record carries the id of the HTTP request being served (or "-"), so one
open or delete action can be followed through its whole fallback cascade.
"""

import logging
import sys

from coder_workspace.core.config import get_settings
from coder_workspace.middleware.request_id import current_request_id

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - [%(request_id)s] %(message)s"


class RequestIdFilter(logging.Filter):
    """Attach the current request id to every record as `request_id`."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = current_request_id() or "-"
        return True


def setup_logging() -> None:
    """Configure root logging once per process.

    DEBUG when settings.debug, otherwise INFO. httpx logs one line per
    request, which for a delete cascade is a dozen lines, so it stays at
    WARNING unless debugging.
    """
    debug = get_settings().debug
    handler = logging.StreamHandler(sys.stdout)
    handler.addFilter(RequestIdFilter())
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root = logging.getLogger()
    if not any(isinstance(f, RequestIdFilter) for h in root.handlers for f in h.filters):
        root.addHandler(handler)
    root.setLevel(logging.DEBUG if debug else logging.INFO)
    logging.getLogger("httpx").setLevel(logging.DEBUG if debug else logging.WARNING)
