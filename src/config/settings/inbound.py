"""Settings do processamento inbound (normalização e roteamento)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

FallbackIdPolicy = Literal["unique", "fingerprint"]


@dataclass(frozen=True)
class InboundSettings:
    """Configurações do motor inbound.

    Attributes:
        fallback_id_policy: Como sintetizar id quando o gateway não envia
            (unique = sempre novo; fingerprint = hash determinístico + dedupe)
        dedupe_ttl_seconds: Janela de dedupe para ids por fingerprint
        presence_cache_max_entries: Limite do cache de presença (LRU)
        local_timezone: Fuso usado para timestamps persistidos
    """

    fallback_id_policy: FallbackIdPolicy = "unique"
    dedupe_ttl_seconds: int = 86400
    presence_cache_max_entries: int = 10_000
    local_timezone: str = "America/Sao_Paulo"

    def validate(self) -> list[str]:
        """Valida configurações inbound.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if self.fallback_id_policy not in ("unique", "fingerprint"):
            errors.append(
                "INBOUND_FALLBACK_ID_POLICY deve ser 'unique' ou 'fingerprint'"
            )

        if self.dedupe_ttl_seconds <= 0:
            errors.append("INBOUND_DEDUPE_TTL_SECONDS deve ser > 0")

        if self.presence_cache_max_entries < 1:
            errors.append("INBOUND_PRESENCE_CACHE_MAX_ENTRIES deve ser >= 1")

        try:
            ZoneInfo(self.local_timezone)
        except (ZoneInfoNotFoundError, ValueError):
            errors.append(f"INBOUND_LOCAL_TIMEZONE inválido: {self.local_timezone}")

        return errors


def _load_from_env() -> InboundSettings:
    """Carrega InboundSettings a partir de variáveis de ambiente."""
    policy_str = os.getenv("INBOUND_FALLBACK_ID_POLICY", "unique").lower()
    policy: FallbackIdPolicy = "fingerprint" if policy_str == "fingerprint" else "unique"
    return InboundSettings(
        fallback_id_policy=policy,
        dedupe_ttl_seconds=int(os.getenv("INBOUND_DEDUPE_TTL_SECONDS", "86400")),
        presence_cache_max_entries=int(
            os.getenv("INBOUND_PRESENCE_CACHE_MAX_ENTRIES", "10000")
        ),
        local_timezone=os.getenv("INBOUND_LOCAL_TIMEZONE", "America/Sao_Paulo"),
    )


@lru_cache(maxsize=1)
def get_inbound_settings() -> InboundSettings:
    """Retorna instância cacheada de InboundSettings."""
    return _load_from_env()
