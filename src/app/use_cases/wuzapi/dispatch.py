"""DownstreamDispatcher — persistência e efeitos de uma mensagem normalizada.

Sequência fixa (cada etapa depende do id persistido):

1. persistir a mensagem (falha aqui encerra o evento como não tratado)
2. broadcast da nova mensagem e do resumo da conversa
3. relay ``message.received`` / ``message.sent``
4. bot (só mensagens recebidas em conversa com bot): cota de chamadas,
   incremento, encaminhamento, tokens, cota de mensagens, resposta

Falhas das etapas 2-4 viram DispatchStep(status="failed") e nunca
desfazem a persistência. Cota negada não é erro: o resultado recebe
``bot_skipped`` e o payload da cota.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.constants.wuzapi import (
    RELAY_EVENT_MESSAGE_RECEIVED,
    RELAY_EVENT_MESSAGE_SENT,
    WireEventType,
)
from app.domain.jid import phone_from_jid
from app.observability import record_quota_denied
from app.use_cases.wuzapi.results import DispatchStep, InboundEventResult
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.automation import QuotaGate
    from app.domain.inbound_message import NormalizedMessage
    from app.protocols.bot_automation import BotAutomationProtocol
    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import (
        Conversation,
        ConversationStoreProtocol,
        PersistedMessage,
    )
    from app.protocols.relay import RelayProtocol
    from app.protocols.reply_sender import ReplySenderProtocol
    from app.protocols.tenant_directory import TenantContext

logger = logging.getLogger(__name__)

MEDIA_PREVIEW = "[Media]"


@dataclass(frozen=True, slots=True)
class MessageDelivery:
    """Mensagem pronta para persistir, com o contexto do evento."""

    conversation: Conversation
    wire_message_id: str
    message: NormalizedMessage
    timestamp: str
    is_external_bot: bool
    raw_event: Mapping[str, Any]


class DownstreamDispatcher:
    """Persiste a mensagem e aciona broadcast, relay e bot."""

    def __init__(
        self,
        *,
        store: ConversationStoreProtocol,
        broadcaster: BroadcastProtocol | None = None,
        relay: RelayProtocol | None = None,
        bot_automation: BotAutomationProtocol | None = None,
        reply_sender: ReplySenderProtocol | None = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster
        self._relay = relay
        self._bot = bot_automation
        self._reply_sender = reply_sender

    async def dispatch(self, delivery: MessageDelivery, tenant: TenantContext) -> InboundEventResult:
        conversation = delivery.conversation
        try:
            persisted = await self._store.store_message(
                conversation.id,
                delivery.wire_message_id,
                delivery.message,
                timestamp=delivery.timestamp,
                is_external_bot=delivery.is_external_bot,
            )
        except Exception as exc:
            logger.exception(
                "message_store_failed",
                extra={"conversation_id": conversation.id, "error_type": type(exc).__name__},
            )
            return InboundEventResult(
                handled=False,
                conversation_id=conversation.id,
                error="store_failed",
                steps=(DispatchStep("store_message", "failed", type(exc).__name__),),
            )

        steps = [DispatchStep("store_message", "ok")]
        logger.info(
            "inbound_message_stored",
            extra={
                "conversation_id": conversation.id,
                "message_id": persisted.id,
                "message_type": str(delivery.message.type),
                "direction": delivery.message.direction,
                "contact": mask_identifier(conversation.contact_id, 10),
            },
        )

        steps.append(await self._broadcast(conversation, persisted))
        steps.append(await self._relay_event(delivery, tenant))

        result = InboundEventResult(
            handled=True,
            conversation_id=conversation.id,
            message_id=persisted.id,
        )
        if delivery.message.direction != "incoming" or not conversation.has_bot:
            return replace(result, steps=tuple(steps))

        gate, bot_steps = await self._run_bot(delivery, persisted, tenant)
        steps.extend(bot_steps)
        if gate is not None and not gate.allowed:
            result = InboundEventResult(
                handled=True,
                conversation_id=conversation.id,
                message_id=persisted.id,
                bot_skipped=True,
                quota_exceeded=gate.to_payload(),
            )
        return replace(result, steps=tuple(steps))

    async def _broadcast(self, conversation: Conversation, persisted: PersistedMessage) -> DispatchStep:
        if self._broadcaster is None:
            return DispatchStep("broadcast", "skipped", "no_broadcaster")
        summary = {
            "id": conversation.id,
            "tenant_id": conversation.tenant_id,
            "contact_jid": conversation.contact_id,
            "contact_name": conversation.contact_name,
            "is_muted": conversation.is_muted,
            "assigned_bot_id": conversation.assigned_bot_id,
            "last_message_at": datetime.now(UTC).isoformat(),
            "last_message_preview": persisted.content or MEDIA_PREVIEW,
            "unread_count": conversation.unread_count + 1,
        }
        try:
            await self._broadcaster.broadcast_new_message(
                conversation.id,
                persisted.to_broadcast(),
                is_muted=conversation.is_muted,
            )
            await self._broadcaster.broadcast_conversation_update(summary)
        except Exception as exc:
            logger.warning(
                "broadcast_failed",
                extra={"conversation_id": conversation.id, "error_type": type(exc).__name__},
            )
            return DispatchStep("broadcast", "failed", type(exc).__name__)
        return DispatchStep("broadcast", "ok")

    async def _relay_event(self, delivery: MessageDelivery, tenant: TenantContext) -> DispatchStep:
        if self._relay is None:
            return DispatchStep("relay", "skipped", "no_relay")
        event_type = (
            RELAY_EVENT_MESSAGE_RECEIVED
            if delivery.message.direction == "incoming"
            else RELAY_EVENT_MESSAGE_SENT
        )
        payload = {
            "type": str(WireEventType.MESSAGE),
            "event": dict(delivery.raw_event),
            "userID": tenant.tenant_id,
            "instanceName": tenant.instance_name or tenant.tenant_id,
            "timestamp": delivery.timestamp,
        }
        try:
            await self._relay.send_event(tenant.tenant_id, event_type, payload)
        except Exception as exc:
            logger.error(
                "relay_failed",
                extra={
                    "conversation_id": delivery.conversation.id,
                    "event_type": event_type,
                    "error_type": type(exc).__name__,
                },
            )
            return DispatchStep("relay", "failed", type(exc).__name__)
        return DispatchStep("relay", "ok")

    async def _run_bot(
        self,
        delivery: MessageDelivery,
        persisted: PersistedMessage,
        tenant: TenantContext,
    ) -> tuple[QuotaGate | None, list[DispatchStep]]:
        """Caminho do bot; devolve o gate de chamadas (None se não consultado)."""
        if self._bot is None:
            return None, [DispatchStep("bot_forward", "skipped", "no_bot_automation")]

        conversation = delivery.conversation
        bot_id = conversation.assigned_bot_id or ""
        gate: QuotaGate | None = None
        try:
            gate = await self._bot.check_call_quota(tenant.tenant_id)
            if not gate.allowed:
                logger.warning(
                    "bot_call_quota_exceeded",
                    extra={
                        "conversation_id": conversation.id,
                        "bot_id": bot_id,
                        "quota_type": gate.quota_type,
                        "usage": gate.usage,
                        "limit": gate.limit,
                    },
                )
                record_quota_denied(tenant.tenant_id, gate.quota_type)
                return gate, [DispatchStep("bot_forward", "skipped", "call_quota_exceeded")]

            await self._bot.increment_call_usage(tenant.tenant_id)
            response = await self._bot.forward(
                bot_id,
                persisted,
                conversation,
                {"rawEvent": dict(delivery.raw_event), "userToken": tenant.credential},
            )
            if response.tokens_used:
                await self._bot.track_token_usage(tenant.tenant_id, response.tokens_used)
        except Exception as exc:
            logger.error(
                "bot_forward_failed",
                extra={
                    "conversation_id": conversation.id,
                    "bot_id": bot_id,
                    "error_type": type(exc).__name__,
                },
            )
            return gate, [DispatchStep("bot_forward", "failed", type(exc).__name__)]

        steps = [DispatchStep("bot_forward", "ok")]
        logger.info(
            "bot_response_received",
            extra={
                "conversation_id": conversation.id,
                "bot_id": bot_id,
                "action": response.action,
                "tokens_used": response.tokens_used,
            },
        )
        if response.wants_reply:
            steps.append(await self._send_bot_reply(conversation, response.content or "", tenant))
        return gate, steps

    async def _send_bot_reply(
        self,
        conversation: Conversation,
        content: str,
        tenant: TenantContext,
    ) -> DispatchStep:
        if self._bot is None or self._reply_sender is None:
            return DispatchStep("bot_reply", "skipped", "no_reply_sender")
        try:
            gate = await self._bot.check_message_quota(tenant.tenant_id)
            if not gate.allowed:
                logger.warning(
                    "bot_message_quota_exceeded",
                    extra={
                        "conversation_id": conversation.id,
                        "quota_type": gate.quota_type,
                        "usage": gate.usage,
                        "limit": gate.limit,
                    },
                )
                record_quota_denied(tenant.tenant_id, gate.quota_type)
                return DispatchStep("bot_reply", "skipped", "message_quota_exceeded")
            await self._reply_sender.send_text(
                tenant.credential,
                phone_from_jid(conversation.contact_id),
                content,
            )
            await self._bot.increment_message_usage(tenant.tenant_id)
        except Exception as exc:
            logger.error(
                "bot_reply_failed",
                extra={"conversation_id": conversation.id, "error_type": type(exc).__name__},
            )
            return DispatchStep("bot_reply", "failed", type(exc).__name__)
        return DispatchStep("bot_reply", "ok")

