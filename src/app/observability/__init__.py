"""Observabilidade: contexto de log (correlation id, tenant) e métricas.

Uso:
    from app.observability import bind_tenant, set_correlation_id
    from app.observability import record_latency, record_event_outcome
"""

from app.observability.correlation import (
    bind_tenant,
    generate_correlation_id,
    get_correlation_id,
    get_tenant_id,
    reset_correlation_id,
    reset_tenant,
    set_correlation_id,
)
from app.observability.metrics import (
    record_event_outcome,
    record_latency,
    record_quota_denied,
)

__all__ = [
    "bind_tenant",
    "generate_correlation_id",
    "get_correlation_id",
    "get_tenant_id",
    "record_event_outcome",
    "record_latency",
    "record_quota_denied",
    "reset_correlation_id",
    "reset_tenant",
    "set_correlation_id",
]
