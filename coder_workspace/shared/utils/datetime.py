"""Clock helpers. Name stamps use the wall clock, poll deadlines the monotonic one."""

import time
from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def epoch_ms() -> int:
    """Wall-clock milliseconds; feeds the {ts} name template token."""
    return int(utc_now().timestamp() * 1000)


def monotonic_ms() -> int:
    """Milliseconds that never jump backwards, for readiness deadlines."""
    return int(time.monotonic() * 1000)
