"""Testes do StaticTenantDirectory."""

from __future__ import annotations

import pytest

from app.infra.tenants import StaticTenantDirectory


class TestStaticTenantDirectory:
    @pytest.mark.asyncio
    async def test_known_token(self) -> None:
        directory = StaticTenantDirectory([("tok-1", "tenant-a")])

        tenant = await directory.resolve("tok-1")

        assert tenant is not None
        assert tenant.tenant_id == "tenant-a"
        assert tenant.credential == "tok-1"
        assert tenant.instance_name == "tenant-a"

    @pytest.mark.asyncio
    async def test_unknown_token_rejected(self) -> None:
        assert await StaticTenantDirectory([("tok-1", "tenant-a")]).resolve("tok-2") is None

    @pytest.mark.asyncio
    async def test_unknown_token_passthrough(self) -> None:
        tenant = await StaticTenantDirectory(allow_unknown=True).resolve("tok-2")

        assert tenant.tenant_id == "tok-2"

    @pytest.mark.asyncio
    async def test_empty_credential(self) -> None:
        assert await StaticTenantDirectory(allow_unknown=True).resolve("") is None

    @pytest.mark.asyncio
    async def test_incomplete_pairs_are_ignored(self) -> None:
        directory = StaticTenantDirectory([("tok-1", ""), ("", "tenant-b")])

        assert await directory.resolve("tok-1") is None
