"""Protocolo de relay de webhooks de saída."""

from __future__ import annotations

from typing import Any, Protocol


class RelayProtocol(Protocol):
    """Repassa eventos para o webhook configurado pelo tenant (fire-and-forget)."""

    async def send_event(self, tenant_id: str, event_type: str, payload: dict[str, Any]) -> None: ...
