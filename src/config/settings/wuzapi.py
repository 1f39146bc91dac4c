"""Settings específicas do gateway WUZAPI.

Configurações da API REST do gateway (consulta de LID, info de grupo,
envio de respostas do bot).
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

WUZAPI_DEFAULT_BASE_URL: str = "https://wzapi.wasend.com.br"


@dataclass(frozen=True)
class WuzapiSettings:
    """Configurações do gateway WUZAPI.

    Attributes:
        base_url: URL base da API do gateway
        request_timeout_seconds: Timeout das consultas (LID, grupo)
        reply_timeout_seconds: Timeout do envio de texto
        max_retries: Tentativas extras na consulta de info de grupo
        retry_base_seconds: Base do backoff exponencial
        max_concurrent_lookups: Limite de consultas de grupo simultâneas
        lid_cache_ttl_seconds: TTL do cache LID -> telefone
        tenant_tokens: Pares (token, tenant_id) aceitos no webhook
    """

    base_url: str = WUZAPI_DEFAULT_BASE_URL
    request_timeout_seconds: float = 10.0
    reply_timeout_seconds: float = 15.0
    max_retries: int = 2
    retry_base_seconds: float = 1.0
    max_concurrent_lookups: int = 5
    lid_cache_ttl_seconds: int = 24 * 60 * 60
    tenant_tokens: tuple[tuple[str, str], ...] = ()

    def endpoint(self, path: str) -> str:
        """Monta URL absoluta para um path da API."""
        return f"{self.base_url.rstrip('/')}/{path.lstrip('/')}"

    def validate(self) -> list[str]:
        """Valida configurações do gateway.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.base_url.startswith(("http://", "https://")):
            errors.append("WUZAPI_BASE_URL deve começar com http:// ou https://")

        if self.request_timeout_seconds <= 0:
            errors.append("WUZAPI_REQUEST_TIMEOUT_SECONDS deve ser > 0")

        if self.reply_timeout_seconds <= 0:
            errors.append("WUZAPI_REPLY_TIMEOUT_SECONDS deve ser > 0")

        if self.max_retries < 0:
            errors.append("WUZAPI_MAX_RETRIES deve ser >= 0")

        if self.max_concurrent_lookups < 1:
            errors.append("WUZAPI_MAX_CONCURRENT_LOOKUPS deve ser >= 1")

        if self.lid_cache_ttl_seconds <= 0:
            errors.append("WUZAPI_LID_CACHE_TTL_SECONDS deve ser > 0")

        for token, tenant_id in self.tenant_tokens:
            if not token or not tenant_id:
                errors.append("WUZAPI_TENANT_TOKENS deve usar o formato token:tenant,...")
                break

        return errors


def _parse_tenant_tokens(raw: str) -> tuple[tuple[str, str], ...]:
    """Converte "token:tenant,token2:tenant2" em pares."""
    pairs: list[tuple[str, str]] = []
    for item in raw.split(","):
        item = item.strip()
        if not item:
            continue
        token, _, tenant_id = item.partition(":")
        pairs.append((token.strip(), tenant_id.strip()))
    return tuple(pairs)


def _load_from_env() -> WuzapiSettings:
    """Carrega WuzapiSettings a partir de variáveis de ambiente."""
    return WuzapiSettings(
        base_url=os.getenv("WUZAPI_BASE_URL", WUZAPI_DEFAULT_BASE_URL),
        request_timeout_seconds=float(os.getenv("WUZAPI_REQUEST_TIMEOUT_SECONDS", "10")),
        reply_timeout_seconds=float(os.getenv("WUZAPI_REPLY_TIMEOUT_SECONDS", "15")),
        max_retries=int(os.getenv("WUZAPI_MAX_RETRIES", "2")),
        retry_base_seconds=float(os.getenv("WUZAPI_RETRY_BASE_SECONDS", "1")),
        max_concurrent_lookups=int(os.getenv("WUZAPI_MAX_CONCURRENT_LOOKUPS", "5")),
        lid_cache_ttl_seconds=int(os.getenv("WUZAPI_LID_CACHE_TTL_SECONDS", "86400")),
        tenant_tokens=_parse_tenant_tokens(os.getenv("WUZAPI_TENANT_TOKENS", "")),
    )


@lru_cache(maxsize=1)
def get_wuzapi_settings() -> WuzapiSettings:
    """Retorna instância cacheada de WuzapiSettings."""
    return _load_from_env()
