"""Protocolo de automação por bot e ledger de cotas.

O ledger é externo: este serviço apenas consulta e incrementa.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.automation import BotResponse, QuotaGate
    from app.protocols.conversation_store import Conversation, PersistedMessage


class BotAutomationProtocol(Protocol):
    """Cotas de chamadas/mensagens de bot e encaminhamento ao bot."""

    async def check_call_quota(self, tenant_id: str) -> QuotaGate: ...

    async def increment_call_usage(self, tenant_id: str) -> None: ...

    async def forward(
        self,
        bot_id: str,
        message: PersistedMessage,
        conversation: Conversation,
        context: Mapping[str, Any],
    ) -> BotResponse: ...

    async def check_message_quota(self, tenant_id: str) -> QuotaGate: ...

    async def increment_message_usage(self, tenant_id: str) -> None: ...

    async def track_token_usage(self, tenant_id: str, tokens: int) -> None: ...
