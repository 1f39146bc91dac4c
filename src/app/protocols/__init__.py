"""Protocolos e contratos do core da aplicação."""

from .bot_automation import BotAutomationProtocol
from .broadcast import BroadcastProtocol
from .conversation_store import Conversation, ConversationStoreProtocol, PersistedMessage
from .dedupe import AsyncDedupeProtocol
from .identity_lookup import IdentityLookupProtocol
from .relay import RelayProtocol
from .reply_sender import ReplySenderProtocol
from .tenant_directory import TenantContext, TenantDirectoryProtocol

__all__ = [
    "AsyncDedupeProtocol",
    "BotAutomationProtocol",
    "BroadcastProtocol",
    "Conversation",
    "ConversationStoreProtocol",
    "IdentityLookupProtocol",
    "PersistedMessage",
    "RelayProtocol",
    "ReplySenderProtocol",
    "TenantContext",
    "TenantDirectoryProtocol",
]
