"""Dedupe em memória para ids sintéticos (desenvolvimento e testes).

Não compartilha estado entre processos: com mais de uma réplica, use
DEDUPE_BACKEND=redis.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol

if TYPE_CHECKING:
    from collections.abc import Callable


class MemoryDedupeStore(AsyncDedupeProtocol):
    """Chaves de dedupe com expiração, avaliadas pelo relógio injetado."""

    def __init__(self, *, clock: Callable[[], float] = time.monotonic) -> None:
        self._clock = clock
        self._expires_at: dict[str, float] = {}

    def _purge(self) -> None:
        now = self._clock()
        for key in [key for key, expires_at in self._expires_at.items() if expires_at <= now]:
            del self._expires_at[key]

    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        self._purge()
        return key in self._expires_at

    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        self._expires_at[key] = self._clock() + ttl

    def __len__(self) -> int:
        self._purge()
        return len(self._expires_at)
