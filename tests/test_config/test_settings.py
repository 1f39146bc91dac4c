"""Testes das settings do motor de inbox."""

from __future__ import annotations

import pytest

from config.settings import (
    BaseSettings,
    DedupeSettings,
    InboundSettings,
    RelaySettings,
    WuzapiSettings,
)
from config.settings.base.core import _load_base_from_env
from config.settings.inbound import _load_from_env as load_inbound
from config.settings.relay import _load_from_env as load_relay
from config.settings.wuzapi import _load_from_env as load_wuzapi
from config.settings.wuzapi import _parse_tenant_tokens


class TestBaseSettings:
    def test_defaults_are_valid(self) -> None:
        settings = BaseSettings()

        assert settings.validate() == []
        assert settings.is_development is True

    def test_environment_aliases(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("ENVIRONMENT", "prod")

        assert _load_base_from_env().is_production is True

    def test_empty_service_name(self) -> None:
        assert BaseSettings(service_name="").validate() == ["SERVICE_NAME não pode ser vazio"]

    def test_log_level_and_redis_url(self) -> None:
        errors = BaseSettings(log_level="VERBOSE", redis_url="localhost:6379").validate()

        assert errors == [
            "LOG_LEVEL inválido: VERBOSE",
            "REDIS_URL deve começar com redis://, rediss:// ou unix://",
        ]

    def test_log_level_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert _load_base_from_env().log_level == "DEBUG"


class TestDedupeSettings:
    def test_memory_forbidden_in_production(self) -> None:
        errors = DedupeSettings(backend="memory").validate(BaseSettings(environment="production"))

        assert any("proibido em production" in error for error in errors)

    def test_redis_requires_url(self) -> None:
        errors = DedupeSettings(backend="redis").validate(BaseSettings())

        assert errors == ["DEDUPE_BACKEND=redis requer REDIS_URL configurado"]

    def test_redis_with_url(self) -> None:
        base = BaseSettings(environment="production", redis_url="redis://localhost:6379/0")

        assert DedupeSettings(backend="redis").validate(base) == []


class TestWuzapiSettings:
    def test_endpoint_joins_paths(self) -> None:
        settings = WuzapiSettings(base_url="https://gw.example.com/")

        assert settings.endpoint("/user/lid/123") == "https://gw.example.com/user/lid/123"

    def test_parse_tenant_tokens(self) -> None:
        assert _parse_tenant_tokens(" tok1:tenant-a , tok2:tenant-b,") == (
            ("tok1", "tenant-a"),
            ("tok2", "tenant-b"),
        )

    def test_invalid_tenant_tokens(self) -> None:
        settings = WuzapiSettings(tenant_tokens=_parse_tenant_tokens("sem-tenant"))

        assert settings.validate() == ["WUZAPI_TENANT_TOKENS deve usar o formato token:tenant,..."]

    def test_invalid_values(self) -> None:
        settings = WuzapiSettings(base_url="ftp://x", max_retries=-1, max_concurrent_lookups=0)

        errors = settings.validate()

        assert len(errors) == 3

    def test_load_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("WUZAPI_BASE_URL", "http://localhost:8080")
        monkeypatch.setenv("WUZAPI_MAX_RETRIES", "4")
        monkeypatch.setenv("WUZAPI_TENANT_TOKENS", "abc:t1")

        settings = load_wuzapi()

        assert settings.base_url == "http://localhost:8080"
        assert settings.max_retries == 4
        assert settings.tenant_tokens == (("abc", "t1"),)


class TestInboundSettings:
    def test_defaults_are_valid(self) -> None:
        assert InboundSettings().validate() == []

    def test_invalid_timezone(self) -> None:
        errors = InboundSettings(local_timezone="Marte/Olympus").validate()

        assert errors == ["INBOUND_LOCAL_TIMEZONE inválido: Marte/Olympus"]

    def test_unknown_policy_falls_back_to_unique(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INBOUND_FALLBACK_ID_POLICY", "qualquer")

        assert load_inbound().fallback_id_policy == "unique"

    def test_fingerprint_policy(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INBOUND_FALLBACK_ID_POLICY", "FINGERPRINT")

        assert load_inbound().fallback_id_policy == "fingerprint"


class TestRelaySettings:
    def test_disabled_without_url(self) -> None:
        assert RelaySettings().enabled is False

    def test_invalid_url(self) -> None:
        errors = RelaySettings(url="ftp://relay").validate()

        assert errors == ["OUTGOING_WEBHOOK_URL deve começar com http:// ou https://"]

    def test_load_secret_from_env(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OUTGOING_WEBHOOK_URL", "https://crm.example.com/hook")
        monkeypatch.setenv("OUTGOING_WEBHOOK_SECRET", "s3cr3t")

        settings = load_relay()

        assert settings.enabled is True
        assert settings.secret == "s3cr3t"
