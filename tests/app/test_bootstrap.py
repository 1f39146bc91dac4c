"""Testes do composition root (settings, factories e getters)."""

from __future__ import annotations

import pytest

from app import bootstrap
from app.bootstrap.dependencies import (
    create_async_dedupe_store,
    create_route_inbound_event_use_case,
    create_tenant_directory,
)
from app.infra.stores import MemoryConversationStore, MemoryDedupeStore
from app.use_cases.wuzapi import RouteInboundEventUseCase
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_inbound_settings,
    get_relay_settings,
    get_wuzapi_settings,
)

_SETTINGS_GETTERS = (
    get_base_settings,
    get_dedupe_settings,
    get_inbound_settings,
    get_relay_settings,
    get_wuzapi_settings,
)

_ENV_KEYS = (
    "ENVIRONMENT",
    "LOG_LEVEL",
    "REDIS_URL",
    "DEDUPE_BACKEND",
    "WUZAPI_BASE_URL",
    "WUZAPI_TENANT_TOKENS",
    "OUTGOING_WEBHOOK_URL",
    "INBOUND_FALLBACK_ID_POLICY",
)


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch: pytest.MonkeyPatch):
    for key in _ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()
    yield
    for getter in _SETTINGS_GETTERS:
        getter.cache_clear()


class TestValidateRuntimeSettings:
    def test_defaults_are_valid(self) -> None:
        assert bootstrap.collect_settings_errors() == []
        bootstrap.validate_runtime_settings()

    def test_errors_are_prefixed_by_domain(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WUZAPI_BASE_URL", "gw.local")
        monkeypatch.setenv("OUTGOING_WEBHOOK_URL", "ftp://crm")

        errors = bootstrap.collect_settings_errors()

        assert any(error.startswith("wuzapi: WUZAPI_BASE_URL") for error in errors)
        assert any(error.startswith("relay: OUTGOING_WEBHOOK_URL") for error in errors)

    def test_development_only_warns(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WUZAPI_BASE_URL", "gw.local")

        bootstrap.validate_runtime_settings()

    def test_production_fails_fast(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")

        with pytest.raises(RuntimeError, match="DEDUPE_BACKEND=memory"):
            bootstrap.validate_runtime_settings()


class TestFactories:
    def test_memory_dedupe_by_default(self) -> None:
        assert isinstance(create_async_dedupe_store(), MemoryDedupeStore)

    @pytest.mark.asyncio
    async def test_tenant_directory_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "production")
        monkeypatch.setenv("WUZAPI_TENANT_TOKENS", "tok-a:tenant-a, tok-b:tenant-b")

        directory = create_tenant_directory()

        tenant = await directory.resolve("tok-b")
        assert tenant is not None
        assert tenant.tenant_id == "tenant-b"
        assert await directory.resolve("tok-x") is None

    @pytest.mark.asyncio
    async def test_development_allows_unknown_tokens(self) -> None:
        directory = create_tenant_directory()

        tenant = await directory.resolve("tok-x")

        assert tenant is not None
        assert tenant.tenant_id == "tok-x"

    def test_use_case_wiring(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INBOUND_FALLBACK_ID_POLICY", "fingerprint")

        use_case = create_route_inbound_event_use_case(store=MemoryConversationStore())

        assert isinstance(use_case, RouteInboundEventUseCase)
        assert use_case.presence_cache is not None


class TestGetters:
    def test_use_case_is_singleton(self) -> None:
        bootstrap.get_route_inbound_event_use_case.cache_clear()
        bootstrap.get_async_dedupe_store.cache_clear()
        try:
            first = bootstrap.get_route_inbound_event_use_case()
            assert bootstrap.get_route_inbound_event_use_case() is first
        finally:
            bootstrap.get_route_inbound_event_use_case.cache_clear()
            bootstrap.get_async_dedupe_store.cache_clear()
