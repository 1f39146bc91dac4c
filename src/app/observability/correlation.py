"""Contexto de log por webhook: correlation id e tenant.

Cada task asyncio enxerga os próprios valores (ContextVar); o
RequestContextFilter copia os dois para todos os registros de log.
"""

from __future__ import annotations

import uuid
from contextvars import ContextVar, Token

_correlation_id: ContextVar[str] = ContextVar("correlation_id", default="")
_tenant_id: ContextVar[str] = ContextVar("tenant_id", default="")


def get_correlation_id() -> str:
    return _correlation_id.get()


def set_correlation_id(correlation_id: str | None = None) -> Token[str]:
    """Define o correlation_id da entrega; header ausente gera um UUID4.

    Returns:
        Token para reset via reset_correlation_id().
    """
    return _correlation_id.set(correlation_id or generate_correlation_id())


def reset_correlation_id(token: Token[str]) -> None:
    _correlation_id.reset(token)


def generate_correlation_id() -> str:
    return str(uuid.uuid4())


def get_tenant_id() -> str:
    """Tenant da entrega em processamento ("" antes da resolução)."""
    return _tenant_id.get()


def bind_tenant(tenant_id: str) -> Token[str]:
    return _tenant_id.set(tenant_id)


def reset_tenant(token: Token[str]) -> None:
    _tenant_id.reset(token)
