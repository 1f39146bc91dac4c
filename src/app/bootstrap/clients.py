"""Cliente Redis compartilhado pelo dedupe distribuído e pelo /ready."""

from __future__ import annotations

import logging
from functools import lru_cache
from typing import TYPE_CHECKING
from urllib.parse import urlsplit

from config.settings import get_base_settings

if TYPE_CHECKING:
    from redis.asyncio import Redis as AsyncRedis

logger = logging.getLogger(__name__)

REDIS_SOCKET_TIMEOUT_SECONDS = 2.0
REDIS_HEALTH_CHECK_INTERVAL_SECONDS = 30


@lru_cache(maxsize=1)
def create_async_redis_client() -> AsyncRedis:
    """Cria o cliente ``redis.asyncio`` a partir de REDIS_URL.

    Raises:
        ValueError: REDIS_URL não configurado
    """
    from redis.asyncio import Redis as AsyncRedis

    redis_url = get_base_settings().redis_url
    if not redis_url:
        raise ValueError("REDIS_URL não configurado")

    client: AsyncRedis = AsyncRedis.from_url(
        redis_url,
        socket_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        socket_connect_timeout=REDIS_SOCKET_TIMEOUT_SECONDS,
        health_check_interval=REDIS_HEALTH_CHECK_INTERVAL_SECONDS,
    )
    logger.info("async_redis_client_created", extra={"host": urlsplit(redis_url).hostname or ""})
    return client
