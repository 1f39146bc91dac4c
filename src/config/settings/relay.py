"""Settings do relay de webhooks de saída."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


@dataclass(frozen=True)
class RelaySettings:
    """Configurações do relay de eventos para webhooks do tenant.

    Attributes:
        url: Endpoint que recebe os eventos (vazio = relay desabilitado)
        timeout_seconds: Timeout do POST
        max_retries: Tentativas extras em 429/5xx
        secret: Segredo HMAC do header X-Webhook-Signature (vazio = sem assinatura)
    """

    url: str = ""
    timeout_seconds: float = 10.0
    max_retries: int = 1
    secret: str = ""

    @property
    def enabled(self) -> bool:
        """True quando há endpoint configurado."""
        return bool(self.url)

    def validate(self) -> list[str]:
        """Valida configurações do relay."""
        errors: list[str] = []
        if self.url and not self.url.startswith(("http://", "https://")):
            errors.append("OUTGOING_WEBHOOK_URL deve começar com http:// ou https://")
        if self.timeout_seconds <= 0:
            errors.append("OUTGOING_WEBHOOK_TIMEOUT_SECONDS deve ser > 0")
        if self.max_retries < 0:
            errors.append("OUTGOING_WEBHOOK_MAX_RETRIES deve ser >= 0")
        return errors


def _load_from_env() -> RelaySettings:
    """Carrega RelaySettings a partir de variáveis de ambiente."""
    return RelaySettings(
        url=os.getenv("OUTGOING_WEBHOOK_URL", ""),
        timeout_seconds=float(os.getenv("OUTGOING_WEBHOOK_TIMEOUT_SECONDS", "10")),
        max_retries=int(os.getenv("OUTGOING_WEBHOOK_MAX_RETRIES", "1")),
        secret=os.getenv("OUTGOING_WEBHOOK_SECRET", ""),
    )


@lru_cache(maxsize=1)
def get_relay_settings() -> RelaySettings:
    """Retorna instância cacheada de RelaySettings."""
    return _load_from_env()
