"""Logging estruturado (JSON) do serviço.

Campos obrigatórios em todo log: timestamp, level, logger, message,
correlation_id, tenant_id e service.
"""

from config.logging.config import (
    configure_logging,
    get_logger,
    log_fallback,
    mask_identifier,
)
from config.logging.filters import RequestContextFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REQUIRED_LOG_FIELDS",
    "RequestContextFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
    "log_fallback",
    "mask_identifier",
]
