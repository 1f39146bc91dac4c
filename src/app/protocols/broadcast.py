"""Protocolo do canal de tempo real (WebSocket) consumido pelo inbox."""

from __future__ import annotations

from typing import Any, Protocol


class BroadcastProtocol(Protocol):
    """Notificações enviadas aos clientes conectados do tenant."""

    async def broadcast_new_message(
        self,
        conversation_id: str,
        message: dict[str, Any],
        *,
        is_muted: bool = False,
    ) -> None: ...

    async def broadcast_message_update(
        self,
        conversation_id: str,
        fields: dict[str, Any],
    ) -> None: ...

    async def broadcast_conversation_update(self, fields: dict[str, Any]) -> None: ...

    async def broadcast_message_status(
        self,
        conversation_id: str,
        message_id: str,
        status: str,
        timestamp: str | int | float | None = None,
    ) -> None: ...

    async def broadcast_presence(self, conversation_id: str, presence: dict[str, Any]) -> None: ...
