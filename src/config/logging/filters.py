"""Filter que anexa o contexto da entrega a cada registro de log."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable


def _empty() -> str:
    return ""


class RequestContextFilter(logging.Filter):
    """Injeta ``correlation_id``, ``tenant_id`` e ``service``.

    Valores passados em ``extra`` prevalecem sobre os do contexto; assim o
    log de um tenant ainda não vinculado pode informar o próprio id.
    """

    def __init__(
        self,
        service_name: str,
        *,
        correlation_id_getter: Callable[[], str] | None = None,
        tenant_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._correlation_id = correlation_id_getter or _empty
        self._tenant_id = tenant_id_getter or _empty

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = getattr(record, "correlation_id", None) or self._correlation_id()
        record.tenant_id = getattr(record, "tenant_id", None) or self._tenant_id()
        record.service = self._service_name
        return True
