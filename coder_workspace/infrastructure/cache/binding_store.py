"""Context binding store over the key-value cache.

Each binding is kept as two keys: the URL string and the JSON metadata. A
binding with either half missing is treated as absent. Besides the session's
own slot, opens also record the last workspace per repository/branch and per
change/patchset (see BindingScope).
"""

import logging

from coder_workspace.domain.entities import BindingMeta, ChangeContext, ContextBinding
from coder_workspace.domain.enums import BindingScope
from coder_workspace.infrastructure.cache.cache_protocol import CacheProtocol
from coder_workspace.infrastructure.cache.keys import (
    binding_meta_key,
    binding_url_key,
    scope_slot,
)

logger = logging.getLogger(__name__)


class ContextBindingStore:
    """Load, replace and clear context bindings.

    For the CONTEXT and CHANGE scopes `ctx` selects the slot on load and
    clear; save derives it from the binding's own metadata.
    """

    def __init__(self, cache: CacheProtocol, ttl_seconds: int | None = None) -> None:
        self._cache = cache
        self._ttl = ttl_seconds or None

    async def load(
        self,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
        ctx: ChangeContext | None = None,
    ) -> ContextBinding | None:
        slot = scope_slot(scope, ctx)
        url = await self._cache.get(binding_url_key(session_id, slot))
        meta = await self._cache.get(binding_meta_key(session_id, slot))
        if not isinstance(url, str) or not url or not isinstance(meta, dict):
            return None
        return ContextBinding(url=url, meta=BindingMeta.from_dict(meta))

    async def save(
        self,
        binding: ContextBinding,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
    ) -> None:
        slot = scope_slot(scope, binding.meta.context())
        await self._cache.set(binding_url_key(session_id, slot), binding.url, ttl=self._ttl)
        await self._cache.set(
            binding_meta_key(session_id, slot), binding.meta.to_dict(), ttl=self._ttl
        )
        logger.debug(
            "Bound workspace %s (%s) for session %s",
            binding.meta.workspace_name,
            scope.value,
            session_id,
        )

    async def clear(
        self,
        session_id: str | None = None,
        scope: BindingScope = BindingScope.SESSION,
        ctx: ChangeContext | None = None,
    ) -> None:
        slot = scope_slot(scope, ctx)
        await self._cache.delete(binding_url_key(session_id, slot))
        await self._cache.delete(binding_meta_key(session_id, slot))
