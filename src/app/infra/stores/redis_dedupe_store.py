"""Redis Dedupe Store — descarte de reentregas com id sintetizado.

Usado apenas pela política ``fingerprint``: o id por fingerprint é um
hash SHA-256, nunca telefone ou conteúdo em claro.

Contrato de Keys:
    As keys devem ser IDs opacos ou hashes.
    Keys são logadas parcialmente em DEBUG.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.dedupe import AsyncDedupeProtocol
from config.logging import mask_identifier
from utils.errors import RedisConnectionError

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

# Prefixo para namespace de dedupe
DEDUPE_PREFIX = "dedupe:"


class RedisDedupeStore(AsyncDedupeProtocol):
    """Store de dedupe usando Redis assíncrono.

    Args:
        async_redis_client: Cliente ``redis.asyncio.Redis``
    """

    def __init__(self, async_redis_client: AsyncRedis) -> None:
        self._redis = async_redis_client

    def _key(self, key: str) -> str:
        """Gera chave Redis com namespace."""
        return f"{DEDUPE_PREFIX}{key}"

    async def is_duplicate(self, key: str, ttl: int = 86400) -> bool:
        """Verifica se chave já foi processada.

        Raises:
            RedisConnectionError: Falha ao consultar o Redis
        """
        try:
            exists = await self._redis.exists(self._key(key))
        except Exception as exc:
            raise RedisConnectionError("Falha ao consultar dedupe no Redis") from exc
        if exists:
            logger.debug("dedupe_duplicate_detected", extra={"key": mask_identifier(key, 16)})
        return bool(exists)

    async def mark_processed(self, key: str, ttl: int = 86400) -> None:
        """Marca chave como processada com TTL (SET EX).

        Raises:
            RedisConnectionError: Falha ao gravar no Redis
        """
        try:
            await self._redis.set(self._key(key), "1", ex=ttl)
        except Exception as exc:
            raise RedisConnectionError("Falha ao marcar dedupe no Redis") from exc
        logger.debug("dedupe_marked", extra={"key": mask_identifier(key, 16), "ttl": ttl})
