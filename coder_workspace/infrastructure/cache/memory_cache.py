"""Process-local cache used when Redis is disabled or unreachable.

Bindings then live only as long as the process, which matches a single
reviewer's browser session closely enough for local and test setups.
"""

import copy
import logging
import time
from collections.abc import Callable
from typing import Any

logger = logging.getLogger(__name__)


class InMemoryCache:
    """Dict-backed CacheProtocol implementation with lazy TTL expiry."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        self._entries: dict[str, tuple[Any, float | None]] = {}
        self._clock = clock

    def is_available(self) -> bool:
        return True

    async def get(self, key: str) -> Any | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, expires_at = entry
        if expires_at is not None and self._clock() >= expires_at:
            del self._entries[key]
            return None
        return copy.deepcopy(value)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        expires_at = self._clock() + ttl if ttl else None
        self._entries[key] = (copy.deepcopy(value), expires_at)
        logger.debug("Memory cache SET: %s", key)
        return True

    async def delete(self, key: str) -> bool:
        self._entries.pop(key, None)
        return True
