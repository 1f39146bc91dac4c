"""Broadcaster em memória — registra eventos de tempo real.

O transporte real (WebSocket) fica fora deste serviço. Esta implementação
guarda cada emissão para inspeção e registra um log estruturado, servindo
desenvolvimento e testes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class BroadcastEvent:
    """Uma emissão: nome do evento, sala e payload."""

    name: str
    room: str
    payload: dict[str, Any]
    notify: bool = True


class MemoryBroadcaster:
    """BroadcastProtocol que acumula eventos em lista."""

    def __init__(self, max_events: int = 10_000) -> None:
        self._events: list[BroadcastEvent] = []
        self._max_events = max_events

    @property
    def events(self) -> list[BroadcastEvent]:
        return list(self._events)

    def named(self, name: str) -> list[BroadcastEvent]:
        return [event for event in self._events if event.name == name]

    def _emit(self, name: str, room: str, payload: dict[str, Any], *, notify: bool = True) -> None:
        self._events.append(BroadcastEvent(name, room, payload, notify))
        if len(self._events) > self._max_events:
            self._events = self._events[-self._max_events :]
        logger.debug("broadcast_emitted", extra={"event": name, "room": room, "notify": notify})

    async def broadcast_new_message(
        self,
        conversation_id: str,
        message: dict[str, Any],
        *,
        is_muted: bool = False,
    ) -> None:
        self._emit("new_message", f"conversation:{conversation_id}", message, notify=not is_muted)

    async def broadcast_message_update(self, conversation_id: str, fields: dict[str, Any]) -> None:
        self._emit("message_update", f"conversation:{conversation_id}", fields)

    async def broadcast_conversation_update(self, fields: dict[str, Any]) -> None:
        self._emit("conversation_update", f"conversation:{fields.get('id', '')}", fields)

    async def broadcast_message_status(
        self,
        conversation_id: str,
        message_id: str,
        status: str,
        timestamp: str | int | float | None = None,
    ) -> None:
        self._emit(
            "message_status_update",
            f"conversation:{conversation_id}",
            {"messageId": message_id, "status": status, "timestamp": timestamp},
        )

    async def broadcast_presence(self, conversation_id: str, presence: dict[str, Any]) -> None:
        self._emit("presence_update", f"conversation:{conversation_id}", presence)
