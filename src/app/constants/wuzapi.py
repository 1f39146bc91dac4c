"""Enums e constantes de domínio do gateway WUZAPI."""

from __future__ import annotations

from enum import StrEnum


class WireEventType(StrEnum):
    """Tipos de evento entregues pelo webhook do gateway."""

    MESSAGE = "Message"
    READ_RECEIPT = "ReadReceipt"
    CHAT_PRESENCE = "ChatPresence"
    MESSAGE_STATUS = "MessageStatus"
    GROUP_INFO = "GroupInfo"
    JOINED_GROUP = "JoinedGroup"


class MessageKind(StrEnum):
    """Variantes de conteúdo normalizado (conjunto fechado)."""

    TEXT = "text"
    IMAGE = "image"
    VIDEO = "video"
    AUDIO = "audio"
    DOCUMENT = "document"
    LOCATION = "location"
    CONTACT = "contact"
    STICKER = "sticker"
    REACTION = "reaction"
    POLL = "poll"
    POLL_VOTE = "poll_vote"
    VIEW_ONCE = "view_once"
    INTERACTIVE = "interactive"
    TEMPLATE = "template"
    CHANNEL_COMMENT = "channel_comment"
    PROTOCOL_EDIT = "protocol_edit"
    PROTOCOL_DELETE = "protocol_delete"
    UNKNOWN = "unknown"
    SYSTEM = "system"


class InteractiveKind(StrEnum):
    """Subtipos de mensagens interativas (botões/listas)."""

    BUTTONS = "buttons"
    BUTTONS_RESPONSE = "buttons_response"
    LIST = "list"
    LIST_RESPONSE = "list_response"


class NameSource(StrEnum):
    """Origem do nome exibido de uma conversa, do mais ao menos autoritativo."""

    WEBHOOK = "webhook"
    STORED = "stored"
    GATEWAY_API = "gatewayApi"
    FALLBACK = "fallback"


class MessageStatus(StrEnum):
    """Status de entrega de mensagem."""

    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
    FAILED = "failed"


class PresenceState(StrEnum):
    """Estados de presença/digitação de um contato."""

    COMPOSING = "composing"
    PAUSED = "paused"
    RECORDING = "recording"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


# Sufixos de JID
CONTACT_DOMAIN = "s.whatsapp.net"
LEGACY_CONTACT_DOMAIN = "c.us"
GROUP_SUFFIX = "@g.us"
LID_SUFFIX = "@lid"

# Conteúdo fixo de mensagens apagadas
DELETED_MESSAGE_TOMBSTONE = "🚫 Esta mensagem foi apagada"

# Discriminantes de ProtocolMessage
PROTOCOL_TYPE_REVOKE = 0
PROTOCOL_TYPE_MESSAGE_EDIT = 14

# Eventos do relay de webhooks de saída
RELAY_EVENT_MESSAGE_RECEIVED = "message.received"
RELAY_EVENT_MESSAGE_SENT = "message.sent"
