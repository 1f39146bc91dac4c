"""Use case de roteamento de eventos inbound do gateway WUZAPI.

Fluxo de um evento ``Message``:

    envelope -> MessageInfo + conteúdo
    -> decodificação (system: ignora) -> contato canônico -> nome do grupo
    -> conversa -> (protocolo: mutação)
    -> reply -> persistência + broadcast + relay + bot

ReadReceipt, MessageStatus, ChatPresence, GroupInfo e JoinedGroup têm
handlers próprios; demais tipos são reportados como não tratados.
Nenhuma exceção sai de ``execute``: todo evento vira InboundEventResult.
"""

from __future__ import annotations

import logging
import time
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from api.normalizers.wuzapi import (
    MalformedEventError,
    decode_message_content,
    parse_event_envelope,
    split_message_event,
)
from app.constants.wuzapi import MessageKind, NameSource, WireEventType
from app.domain.jid import format_participant_display, is_system_generated_id, jid_local_part
from app.observability import get_correlation_id, record_event_outcome, record_latency
from app.use_cases.wuzapi._group_handlers import handle_group_event, resolve_group_conversation
from app.use_cases.wuzapi._status_handlers import (
    handle_chat_presence,
    handle_message_status,
    handle_read_receipt,
)
from app.use_cases.wuzapi.dispatch import DownstreamDispatcher, MessageDelivery
from app.use_cases.wuzapi.presence_cache import PresenceCache
from app.use_cases.wuzapi.protocol_mutations import ProtocolStateMutator
from app.use_cases.wuzapi.reply_linker import ReplyLinker
from app.use_cases.wuzapi.results import DispatchStep, InboundEventResult
from app.use_cases.wuzapi.timestamps import to_local_timestamp
from config.logging import mask_identifier
from utils.errors import ConversationStoreError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.inbound_message import MessageInfo, NormalizedMessage
    from app.protocols.bot_automation import BotAutomationProtocol
    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import Conversation, ConversationStoreProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol
    from app.protocols.relay import RelayProtocol
    from app.protocols.reply_sender import ReplySenderProtocol
    from app.protocols.tenant_directory import TenantContext
    from app.services.contact_identity import ContactIdentityResolver
    from app.services.group_name_resolver import GroupNameResolver

logger = logging.getLogger(__name__)

REASON_SYSTEM_MESSAGE = "system_message"
REASON_PROTOCOL_TARGET_MISSING = "protocol_target_missing"
REASON_DUPLICATE_FALLBACK_ID = "duplicate_fallback_id"
REASON_UNHANDLED_EVENT_TYPE = "unhandled_event_type"


class RouteInboundEventUseCase:
    """Roteia um evento do gateway para o handler do seu tipo."""

    def __init__(
        self,
        *,
        store: ConversationStoreProtocol,
        contact_resolver: ContactIdentityResolver,
        group_name_resolver: GroupNameResolver,
        broadcaster: BroadcastProtocol | None = None,
        relay: RelayProtocol | None = None,
        bot_automation: BotAutomationProtocol | None = None,
        reply_sender: ReplySenderProtocol | None = None,
        dedupe: AsyncDedupeProtocol | None = None,
        presence_cache: PresenceCache | None = None,
        fallback_id_policy: str = "unique",
        dedupe_ttl_seconds: int = 86400,
        local_timezone: str = "America/Sao_Paulo",
    ) -> None:
        self._store = store
        self._contacts = contact_resolver
        self._group_names = group_name_resolver
        self._broadcaster = broadcaster
        self._dedupe = dedupe
        self._presence = presence_cache or PresenceCache()
        self._fallback_id_policy = fallback_id_policy
        self._dedupe_ttl = dedupe_ttl_seconds
        self._timezone = local_timezone
        self._mutator = ProtocolStateMutator(store=store, broadcaster=broadcaster)
        self._reply_linker = ReplyLinker(store=store)
        self._dispatcher = DownstreamDispatcher(
            store=store,
            broadcaster=broadcaster,
            relay=relay,
            bot_automation=bot_automation,
            reply_sender=reply_sender,
        )

    @property
    def presence_cache(self) -> PresenceCache:
        return self._presence

    async def execute(self, payload: Any, tenant: TenantContext) -> InboundEventResult:
        """Processa um evento; nunca levanta exceção para o transporte."""
        start = time.perf_counter()
        event_type: str | None = None
        try:
            envelope = parse_event_envelope(payload)
            event_type = envelope.event_type
            result = await self._route(event_type, envelope.data, envelope.timestamp, tenant)
        except MalformedEventError as exc:
            logger.warning(
                "inbound_event_malformed",
                extra={"event_type": event_type, "reason": exc.reason},
            )
            result = InboundEventResult.unhandled(event_type, exc.reason)
        except Exception as exc:
            logger.exception(
                "inbound_event_failed",
                extra={"event_type": event_type, "error_type": type(exc).__name__},
            )
            result = InboundEventResult.unhandled(event_type, type(exc).__name__)

        result = result.with_event_type(event_type)
        record_event_outcome(event_type or "unknown", _outcome(result), result.reason or result.error)
        record_latency(
            "inbound_router",
            event_type or "unknown",
            (time.perf_counter() - start) * 1000,
            get_correlation_id() or None,
        )
        return result

    async def _route(
        self,
        event_type: str,
        data: Mapping[str, Any],
        timestamp: Any,
        tenant: TenantContext,
    ) -> InboundEventResult:
        if event_type == WireEventType.MESSAGE:
            return await self._handle_message(data, timestamp, tenant)
        if event_type == WireEventType.READ_RECEIPT:
            return await handle_read_receipt(
                data, timestamp, tenant, store=self._store, broadcaster=self._broadcaster
            )
        if event_type == WireEventType.CHAT_PRESENCE:
            return await handle_chat_presence(
                data,
                timestamp,
                tenant,
                store=self._store,
                broadcaster=self._broadcaster,
                presence_cache=self._presence,
            )
        if event_type == WireEventType.MESSAGE_STATUS:
            return await handle_message_status(
                data, timestamp, tenant, store=self._store, broadcaster=self._broadcaster
            )
        if event_type in (WireEventType.GROUP_INFO, WireEventType.JOINED_GROUP):
            return await handle_group_event(
                data,
                tenant,
                store=self._store,
                resolver=self._group_names,
                broadcaster=self._broadcaster,
            )

        logger.info("inbound_event_unhandled_type", extra={"event_type": event_type})
        return InboundEventResult(handled=False, reason=REASON_UNHANDLED_EVENT_TYPE)

    async def _handle_message(
        self,
        data: Mapping[str, Any],
        timestamp: Any,
        tenant: TenantContext,
    ) -> InboundEventResult:
        info, content = split_message_event(
            data,
            fallback_id_policy=self._fallback_id_policy,
            envelope_timestamp=timestamp,
        )
        dedupe_key = self._fallback_dedupe_key(info, tenant)
        if dedupe_key and await self._is_duplicate_fallback(dedupe_key):
            logger.info(
                "fallback_id_duplicate_dropped",
                extra={"message_id": mask_identifier(info.wire_message_id, 16)},
            )
            return InboundEventResult.ignored_event(None, REASON_DUPLICATE_FALLBACK_ID)

        decoded = decode_message_content(content)
        if decoded.is_system:
            logger.debug("system_message_ignored", extra={"content_keys": sorted(content or {})[:5]})
            return InboundEventResult.ignored_event(None, REASON_SYSTEM_MESSAGE)

        contact = await self._contacts.resolve(info, tenant.credential)
        steps: list[DispatchStep] = []

        if contact.is_group:
            group = await resolve_group_conversation(
                tenant=tenant,
                group_id=contact.contact_id,
                webhook_data=data,
                store=self._store,
                resolver=self._group_names,
                broadcaster=self._broadcaster,
            )
            conversation = group.conversation
            steps.append(group.broadcast_step)
        else:
            conversation = await self._individual_conversation(tenant, contact.contact_id, info)

        if decoded.is_protocol:
            return await self._apply_protocol(conversation, decoded)

        message = await self._with_message_context(decoded, info, conversation, contact.is_group)
        delivery = MessageDelivery(
            conversation=conversation,
            wire_message_id=info.wire_message_id,
            message=message,
            timestamp=to_local_timestamp(info.wire_timestamp, self._timezone),
            is_external_bot=info.from_me and not is_system_generated_id(info.wire_message_id),
            raw_event=data,
        )
        if delivery.is_external_bot:
            logger.info(
                "external_bot_message_detected",
                extra={"conversation_id": conversation.id},
            )

        result = await self._dispatcher.dispatch(delivery, tenant)
        if dedupe_key and result.handled:
            await self._mark_fallback_processed(dedupe_key)
        return _prepend_steps(result, steps)

    async def _individual_conversation(
        self,
        tenant: TenantContext,
        contact_id: str,
        info: MessageInfo,
    ) -> Conversation:
        """Conversa 1:1; PushName atualiza o nome armazenado quando muda."""
        push_name = info.push_name.strip() if info.push_name else None
        stored = await self._store.find_conversation(tenant.tenant_id, contact_id)
        if stored is None:
            return await self._store.create_conversation(
                tenant.tenant_id,
                contact_id,
                push_name or jid_local_part(contact_id),
                name_source=NameSource.WEBHOOK if push_name else NameSource.FALLBACK,
            )
        # Mensagens enviadas por nós trazem o PushName do próprio tenant.
        if not push_name or info.from_me or push_name == stored.contact_name:
            return stored
        updated_at = to_local_timestamp(None, self._timezone)
        try:
            await self._store.update_conversation_name(
                stored.id, push_name, NameSource.WEBHOOK, updated_at
            )
        except ConversationStoreError as exc:
            logger.warning(
                "contact_name_update_failed",
                extra={"conversation_id": stored.id, "error_type": type(exc).__name__},
            )
            return stored
        return replace(
            stored,
            contact_name=push_name,
            name_source=NameSource.WEBHOOK,
            name_updated_at=updated_at,
        )

    async def _apply_protocol(
        self,
        conversation: Conversation,
        decoded: NormalizedMessage,
    ) -> InboundEventResult:
        target = decoded.target_wire_message_id
        if not target:
            return InboundEventResult.ignored_event(
                None,
                REASON_PROTOCOL_TARGET_MISSING,
                conversation_id=conversation.id,
            )
        if decoded.type is MessageKind.PROTOCOL_EDIT:
            result = await self._mutator.apply_edit(conversation.id, target, decoded.text_content)
        else:
            result = await self._mutator.apply_delete(conversation.id, target)
        if result.conversation_id is None:
            result = replace(result, conversation_id=conversation.id)
        return result

    async def _with_message_context(
        self,
        decoded: NormalizedMessage,
        info: MessageInfo,
        conversation: Conversation,
        is_group: bool,
    ) -> NormalizedMessage:
        changes: dict[str, Any] = {
            "direction": info.direction,
            "wire_timestamp": None if info.wire_timestamp is None else str(info.wire_timestamp),
            "reply_to_internal_id": await self._reply_linker.link(
                conversation.id,
                decoded.quoted_wire_message_id,
            ),
        }
        if is_group:
            participant = info.participant_id or info.sender_id
            changes["participant_id"] = participant
            changes["participant_name"] = (
                info.push_name.strip()
                if info.push_name and info.push_name.strip()
                else format_participant_display(participant)
            )
        return decoded.with_context(**changes)

    def _fallback_dedupe_key(self, info: MessageInfo, tenant: TenantContext) -> str | None:
        if self._dedupe is None or not info.has_fallback_id:
            return None
        if self._fallback_id_policy != "fingerprint":
            return None
        return f"wuzapi:{tenant.tenant_id}:{info.wire_message_id}"

    async def _is_duplicate_fallback(self, key: str) -> bool:
        try:
            return await self._dedupe.is_duplicate(key, self._dedupe_ttl)  # type: ignore[union-attr]
        except Exception as exc:
            logger.warning(
                "fallback_id_dedupe_unavailable",
                extra={"error_type": type(exc).__name__},
            )
            return False

    async def _mark_fallback_processed(self, key: str) -> None:
        try:
            await self._dedupe.mark_processed(key, self._dedupe_ttl)  # type: ignore[union-attr]
        except Exception as exc:
            logger.warning("fallback_id_mark_failed", extra={"error_type": type(exc).__name__})


def _prepend_steps(result: InboundEventResult, steps: list[DispatchStep]) -> InboundEventResult:
    if not steps:
        return result
    return replace(result, steps=(*steps, *result.steps))


def _outcome(result: InboundEventResult) -> str:
    if not result.handled:
        return "unhandled"
    if result.ignored:
        return "ignored"
    if result.failed_steps():
        return "partial"
    return "handled"
