"""Protocolos de domínio para Conversation Store.

Define o contrato de persistência de conversas e mensagens do inbox.
A implementação real (banco relacional) fica fora deste serviço; aqui há
apenas o contrato e os registros trocados com ele.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from app.constants.wuzapi import MessageStatus, NameSource

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.inbound_message import NormalizedMessage


@dataclass(frozen=True, slots=True)
class Conversation:
    """Conversa de um tenant com um contato ou grupo.

    Uma por (tenant_id, contact_id); nunca removida por este serviço.
    """

    id: str
    tenant_id: str
    contact_id: str
    contact_name: str | None = None
    name_source: NameSource | None = None
    name_updated_at: str | None = None
    assigned_bot_id: str | None = None
    is_muted: bool = False
    unread_count: int = 0
    last_message_at: str | None = None
    last_message_preview: str | None = None

    @property
    def has_bot(self) -> bool:
        return bool(self.assigned_bot_id)


@dataclass(frozen=True, slots=True)
class PersistedMessage:
    """Mensagem persistida (id interno + id do fio + estado mutável).

    content/is_edited/is_deleted/status mudam por edição, remoção e
    recibos; o NormalizedMessage original é mantido como foi recebido.
    """

    id: str
    conversation_id: str
    wire_message_id: str
    message: NormalizedMessage
    content: str = ""
    timestamp: str | None = None
    is_edited: bool = False
    is_deleted: bool = False
    is_external_bot: bool = False
    status: str = MessageStatus.SENT
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def direction(self) -> str:
        return self.message.direction

    def to_broadcast(self) -> dict[str, Any]:
        """Formato enviado ao canal de tempo real."""
        msg = self.message
        return {
            "id": self.id,
            "conversation_id": self.conversation_id,
            "message_id": self.wire_message_id,
            "direction": msg.direction,
            "message_type": str(msg.type),
            "content": self.content,
            "media_url": msg.media.url if msg.media else None,
            "media_mime_type": msg.media_mime_type,
            "media_filename": msg.media_filename,
            "reply_to_message_id": msg.reply_to_internal_id,
            "participant_jid": msg.participant_id,
            "participant_name": msg.participant_name,
            "is_edited": self.is_edited,
            "is_deleted": self.is_deleted,
            "is_external_bot": self.is_external_bot,
            "status": self.status,
            "timestamp": self.timestamp,
        }


class ConversationStoreProtocol(ABC):
    """Contrato para armazenamento de conversas e mensagens.

    Responsabilidades:
        - Localizar/criar conversa por (tenant, contato)
        - Persistir mensagens normalizadas
        - Localizar mensagens pelo id do gateway (edição, remoção, reply,
          recibos)

    Invariantes:
        - Cada chamada é atômica por si; não há transação entre chamadas
        - Sem PII em logs
    """

    @abstractmethod
    async def find_conversation(self, tenant_id: str, contact_id: str) -> Conversation | None:
        """Retorna a conversa do contato no tenant, ou None."""

    @abstractmethod
    async def create_conversation(
        self,
        tenant_id: str,
        contact_id: str,
        initial_name: str | None,
        *,
        name_source: NameSource | None = None,
    ) -> Conversation:
        """Cria a conversa.

        Raises:
            ConversationStoreError: Erro de persistência
        """

    @abstractmethod
    async def update_conversation_name(
        self,
        conversation_id: str,
        name: str,
        name_source: NameSource,
        updated_at: str,
    ) -> None:
        """Atualiza nome exibido e origem do nome."""

    @abstractmethod
    async def store_message(
        self,
        conversation_id: str,
        wire_message_id: str,
        message: NormalizedMessage,
        *,
        timestamp: str | None = None,
        is_external_bot: bool = False,
    ) -> PersistedMessage:
        """Persiste mensagem normalizada e atualiza o resumo da conversa.

        Raises:
            ConversationStoreError: Erro de persistência
        """

    @abstractmethod
    async def update_message(self, message_id: str, fields: Mapping[str, Any]) -> None:
        """Atualiza campos mutáveis (content, is_edited, is_deleted, status)."""

    @abstractmethod
    async def find_message_by_wire_id(
        self,
        conversation_id: str,
        wire_message_id: str,
    ) -> PersistedMessage | None:
        """Mensagem da conversa com o id do gateway, ou None."""

    @abstractmethod
    async def find_tenant_message_by_wire_id(
        self,
        tenant_id: str,
        wire_message_id: str,
    ) -> PersistedMessage | None:
        """Mensagem do tenant com o id do gateway (recibos não trazem conversa)."""
