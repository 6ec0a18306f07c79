"""Cache: Redis service, in-memory fallback and the context binding store.

CacheService uses coder_workspace.core.config; key format is in keys.py (DRY).
"""

from coder_workspace.infrastructure.cache.binding_store import ContextBindingStore
from coder_workspace.infrastructure.cache.cache_protocol import CacheProtocol
from coder_workspace.infrastructure.cache.keys import binding_meta_key, binding_url_key
from coder_workspace.infrastructure.cache.memory_cache import InMemoryCache
from coder_workspace.infrastructure.cache.redis_cache import CacheService

__all__ = [
    "CacheProtocol",
    "CacheService",
    "ContextBindingStore",
    "InMemoryCache",
    "binding_meta_key",
    "binding_url_key",
]
