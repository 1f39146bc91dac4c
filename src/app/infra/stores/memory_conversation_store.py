"""Conversation store em memória — desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import uuid
from dataclasses import replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.protocols.conversation_store import (
    Conversation,
    ConversationStoreProtocol,
    PersistedMessage,
)
from utils.errors import ConversationStoreError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.constants.wuzapi import NameSource
    from app.domain.inbound_message import NormalizedMessage

_MUTABLE_MESSAGE_FIELDS = frozenset({"content", "is_edited", "is_deleted", "status"})
_MEDIA_PREVIEW = "[Media]"


class MemoryConversationStore(ConversationStoreProtocol):
    """Conversas e mensagens em dicionários, indexadas como o banco real.

    Índices:
        (tenant_id, contact_id) -> conversa
        (conversation_id, wire_message_id) -> primeira mensagem com o id
    """

    def __init__(self) -> None:
        self._conversations: dict[str, Conversation] = {}
        self._by_contact: dict[tuple[str, str], str] = {}
        self._messages: dict[str, PersistedMessage] = {}
        self._by_wire_id: dict[tuple[str, str], str] = {}

    async def find_conversation(self, tenant_id: str, contact_id: str) -> Conversation | None:
        conversation_id = self._by_contact.get((tenant_id, contact_id))
        if conversation_id is None:
            return None
        return self._conversations[conversation_id]

    async def create_conversation(
        self,
        tenant_id: str,
        contact_id: str,
        initial_name: str | None,
        *,
        name_source: NameSource | None = None,
    ) -> Conversation:
        existing = await self.find_conversation(tenant_id, contact_id)
        if existing is not None:
            return existing
        conversation = Conversation(
            id=uuid.uuid4().hex,
            tenant_id=tenant_id,
            contact_id=contact_id,
            contact_name=initial_name,
            name_source=name_source,
            name_updated_at=_now() if initial_name else None,
        )
        self._conversations[conversation.id] = conversation
        self._by_contact[(tenant_id, contact_id)] = conversation.id
        return conversation

    async def update_conversation_name(
        self,
        conversation_id: str,
        name: str,
        name_source: NameSource,
        updated_at: str,
    ) -> None:
        conversation = self._get_conversation(conversation_id)
        self._conversations[conversation_id] = replace(
            conversation,
            contact_name=name,
            name_source=name_source,
            name_updated_at=updated_at,
        )

    async def store_message(
        self,
        conversation_id: str,
        wire_message_id: str,
        message: NormalizedMessage,
        *,
        timestamp: str | None = None,
        is_external_bot: bool = False,
    ) -> PersistedMessage:
        conversation = self._get_conversation(conversation_id)
        persisted = PersistedMessage(
            id=uuid.uuid4().hex,
            conversation_id=conversation_id,
            wire_message_id=wire_message_id,
            message=message,
            content=message.text_content or "",
            timestamp=timestamp or _now(),
            is_external_bot=is_external_bot,
        )
        self._messages[persisted.id] = persisted
        self._by_wire_id.setdefault((conversation_id, wire_message_id), persisted.id)

        unread = conversation.unread_count + (1 if message.direction == "incoming" else 0)
        self._conversations[conversation_id] = replace(
            conversation,
            last_message_at=persisted.timestamp,
            last_message_preview=persisted.content or _MEDIA_PREVIEW,
            unread_count=unread,
        )
        return persisted

    async def update_message(self, message_id: str, fields: Mapping[str, Any]) -> None:
        current = self._messages.get(message_id)
        if current is None:
            raise ConversationStoreError(f"message_not_found:{message_id}")
        known = {key: value for key, value in fields.items() if key in _MUTABLE_MESSAGE_FIELDS}
        extra = {key: value for key, value in fields.items() if key not in _MUTABLE_MESSAGE_FIELDS}
        metadata = {**current.metadata, **extra} if extra else current.metadata
        self._messages[message_id] = replace(current, metadata=metadata, **known)

    async def find_message_by_wire_id(
        self,
        conversation_id: str,
        wire_message_id: str,
    ) -> PersistedMessage | None:
        message_id = self._by_wire_id.get((conversation_id, wire_message_id))
        return self._messages.get(message_id) if message_id else None

    async def find_tenant_message_by_wire_id(
        self,
        tenant_id: str,
        wire_message_id: str,
    ) -> PersistedMessage | None:
        for (conversation_id, wire_id), message_id in self._by_wire_id.items():
            if wire_id != wire_message_id:
                continue
            if self._conversations[conversation_id].tenant_id == tenant_id:
                return self._messages[message_id]
        return None

    # Helpers de inspeção (apenas testes)
    def get_conversation(self, conversation_id: str) -> Conversation | None:
        return self._conversations.get(conversation_id)

    def get_message(self, message_id: str) -> PersistedMessage | None:
        return self._messages.get(message_id)

    def list_messages(self, conversation_id: str) -> list[PersistedMessage]:
        return [msg for msg in self._messages.values() if msg.conversation_id == conversation_id]

    def set_assigned_bot(self, conversation_id: str, bot_id: str | None) -> None:
        conversation = self._get_conversation(conversation_id)
        self._conversations[conversation_id] = replace(conversation, assigned_bot_id=bot_id)

    def _get_conversation(self, conversation_id: str) -> Conversation:
        conversation = self._conversations.get(conversation_id)
        if conversation is None:
            raise ConversationStoreError(f"conversation_not_found:{conversation_id}")
        return conversation


def _now() -> str:
    return datetime.now(UTC).isoformat()
