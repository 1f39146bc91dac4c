"""Exceções para falhas recuperáveis de infraestrutura e colaboradores."""

from __future__ import annotations


class InfrastructureError(RuntimeError):
    """Base para falhas de infraestrutura transitórias."""


class RedisConnectionError(InfrastructureError):
    """Falha de conexão/timeout ao acessar Redis."""


class GatewayLookupError(InfrastructureError):
    """Falha ao consultar a API do gateway (LID, info de grupo, envio)."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConversationStoreError(InfrastructureError):
    """Falha do colaborador de armazenamento de conversas/mensagens."""
