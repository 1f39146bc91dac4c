"""Stores — implementações concretas de persistência.

Módulos disponíveis:
    - memory_conversation_store: Conversas/mensagens em memória (dev/test)
    - memory_stores: Dedupe em memória (dev/test)
    - redis_dedupe_store: Dedupe usando Redis
"""

from __future__ import annotations

from app.infra.stores.memory_conversation_store import MemoryConversationStore
from app.infra.stores.memory_stores import MemoryDedupeStore
from app.infra.stores.redis_dedupe_store import RedisDedupeStore

__all__ = [
    "MemoryConversationStore",
    "MemoryDedupeStore",
    "RedisDedupeStore",
]
