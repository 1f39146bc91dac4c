"""Formatter JSON dos logs do serviço.

Todo registro sai como um objeto JSON com os campos de REQUIRED_LOG_FIELDS.
Conteúdo de mensagens, telefones e tokens nunca entram nos logs.
"""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "tenant_id",
    "service",
)

FIELD_RENAME_MAP = {
    "asctime": "timestamp",
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria formatter JSON com campos padronizados.

    Exemplo de output:
        {
            "timestamp": "2026-03-02 10:30:00,120",
            "level": "INFO",
            "logger": "app.use_cases.wuzapi.route_inbound_event",
            "message": "inbound_event_routed",
            "correlation_id": "abc-123",
            "tenant_id": "tenant-1",
            "service": "wuzapi-inbox-engine",
            "event_type": "Message"
        }
    """
    format_string = " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS)
    return JsonFormatter(
        format_string,
        rename_fields=FIELD_RENAME_MAP,
        json_ensure_ascii=False,
    )
