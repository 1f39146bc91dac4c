"""Métricas do motor inbound registradas como logs estruturados.

Os registros são agregados fora do serviço (ex.: consultas sobre os logs
JSON). Nenhum conteúdo de mensagem ou telefone entra nos campos.

Métricas:
- metric_latency: tempo de processamento por componente/operação
- metric_event_outcome: contador de eventos por tipo e resultado
- metric_quota_denied: bloqueio de automação por cota
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex.: "inbound_router")
        operation: Nome da operação (ex.: "Message")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação para rastreamento
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id,
        },
    )


def record_event_outcome(
    event_type: str,
    outcome: str,
    reason: str | None = None,
) -> None:
    """Conta um evento processado.

    Args:
        event_type: Tipo do evento no fio (ex.: "Message", "ReadReceipt")
        outcome: handled | ignored | unhandled | failed
        reason: Motivo curto quando não tratado/ignorado
    """
    logger.info(
        "metric_event_outcome",
        extra={
            "metric_type": "counter",
            "event_type": event_type,
            "outcome": outcome,
            "reason": reason,
        },
    )


def record_quota_denied(tenant_id: str, quota_type: str) -> None:
    """Registra bloqueio do caminho de bot por cota esgotada."""
    logger.info(
        "metric_quota_denied",
        extra={
            "metric_type": "counter",
            "tenant_id": tenant_id,
            "quota_type": quota_type,
        },
    )
