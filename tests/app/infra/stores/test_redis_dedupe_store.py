"""Testes do RedisDedupeStore com mock."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest

from app.infra.stores.redis_dedupe_store import RedisDedupeStore
from utils.errors import RedisConnectionError


class TestRedisDedupeStore:
    """Testes do RedisDedupeStore."""

    @pytest.mark.anyio
    async def test_is_duplicate_false_for_new_key(self) -> None:
        """Deve retornar False quando a chave não existe."""
        redis = MagicMock()
        redis.exists = AsyncMock(return_value=0)
        store = RedisDedupeStore(redis)

        assert await store.is_duplicate("wuzapi:t1:wuzapi_fp_abc") is False
        redis.exists.assert_awaited_once_with("dedupe:wuzapi:t1:wuzapi_fp_abc")

    @pytest.mark.anyio
    async def test_is_duplicate_true_for_existing_key(self) -> None:
        """Deve retornar True quando a chave já existe."""
        redis = MagicMock()
        redis.exists = AsyncMock(return_value=1)

        assert await RedisDedupeStore(redis).is_duplicate("k") is True

    @pytest.mark.anyio
    async def test_mark_processed_sets_ttl(self) -> None:
        """Deve gravar a chave com namespace e TTL."""
        redis = MagicMock()
        redis.set = AsyncMock(return_value=True)

        await RedisDedupeStore(redis).mark_processed("k", ttl=600)

        redis.set.assert_awaited_once_with("dedupe:k", "1", ex=600)

    @pytest.mark.anyio
    async def test_is_duplicate_wraps_errors(self) -> None:
        """Deve converter falhas do Redis em RedisConnectionError."""
        redis = MagicMock()
        redis.exists = AsyncMock(side_effect=OSError("connection refused"))

        with pytest.raises(RedisConnectionError):
            await RedisDedupeStore(redis).is_duplicate("k")

    @pytest.mark.anyio
    async def test_mark_processed_wraps_errors(self) -> None:
        """Deve converter falhas de escrita em RedisConnectionError."""
        redis = MagicMock()
        redis.set = AsyncMock(side_effect=TimeoutError())

        with pytest.raises(RedisConnectionError):
            await RedisDedupeStore(redis).mark_processed("k")
