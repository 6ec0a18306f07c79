"""Key-value backend contract used by the context binding store (DIP)."""

from typing import Any, Protocol


class CacheProtocol(Protocol):
    """Backend for bindings: Redis (CacheService) or the process-local InMemoryCache.

    Values are JSON-compatible. Backends degrade instead of raising: a read
    from an unavailable backend is a miss, a write reports False.
    """

    def is_available(self) -> bool: ...

    async def get(self, key: str) -> Any | None: ...

    async def set(self, key: str, value: Any, ttl: int | None = None) -> bool:
        """Store value; `ttl` in seconds, None keeps it until replaced."""
        ...

    async def delete(self, key: str) -> bool: ...
