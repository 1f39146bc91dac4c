"""Contrato do store de dedupe de mensagens sem id do gateway.

Só é consultado com INBOUND_FALLBACK_ID_POLICY=fingerprint; as chaves
têm a forma ``wuzapi:{tenant_id}:{id_sintético}`` e nunca contêm
telefone.
"""

from __future__ import annotations

from abc import ABC, abstractmethod


class AsyncDedupeProtocol(ABC):
    """Store assíncrono de chaves já processadas, com TTL."""

    @abstractmethod
    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        """True se a chave foi marcada e ainda não expirou.

        Args:
            key: Chave de dedupe do evento
            ttl: Janela de dedupe em segundos (INBOUND_DEDUPE_TTL_SECONDS)
        """

    @abstractmethod
    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        """Marca a chave depois que a mensagem foi persistida."""
