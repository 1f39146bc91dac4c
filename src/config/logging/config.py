"""Configuração centralizada de logging estruturado.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização (app/bootstrap/)
    configure_logging(level="INFO", service_name="wuzapi-inbox-engine")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("group_name_resolved", extra={"source": "webhook"})
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging.filters import RequestContextFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "wuzapi-inbox-engine"


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    tenant_id_getter: Callable[[], str] | None = None,
) -> None:
    """Configura logging JSON no root logger.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço injetado em todo registro.
        correlation_id_getter: Função que devolve o correlation_id do
            contexto atual (ex.: app.observability.get_correlation_id).
        tenant_id_getter: Função que devolve o tenant vinculado à entrega.

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler()
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(
        RequestContextFilter(
            service_name,
            correlation_id_getter=correlation_id_getter,
            tenant_id_getter=tenant_id_getter,
        )
    )

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    # httpx loga cada request em INFO com a URL completa (inclui JIDs)
    logging.getLogger("httpx").setLevel(logging.WARNING)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger do módulo (service, tenant e correlation_id vêm do filter)."""
    return logging.getLogger(name)


def mask_identifier(value: str | None, keep: int = 8) -> str:
    """Trunca ids de contato, tokens e wire ids para uso em logs.

    Exemplo:
        mask_identifier("5531994975641@s.whatsapp.net") -> "55319949..."
    """
    if not value:
        return ""
    return value[:keep] + "..." if len(value) > keep else value


def log_fallback(
    logger: logging.Logger,
    component: str,
    reason: str | None = None,
    elapsed_ms: float | None = None,
) -> None:
    """Registra uso de um fallback (resolução degradada), sem PII.

    Args:
        logger: Logger do módulo chamador.
        component: Componente que degradou (ex.: "contact_identity").
        reason: Motivo (ex.: "lid_unresolved").
        elapsed_ms: Tempo decorrido, quando aplicável.
    """
    extra: dict[str, object] = {
        "fallback_used": True,
        "component": component,
    }
    if reason:
        extra["reason"] = reason
    if elapsed_ms is not None:
        extra["elapsed_ms"] = round(elapsed_ms, 2)

    logger.info("fallback_applied", extra=extra)
