"""Handlers de ReadReceipt, MessageStatus e ChatPresence."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from api.normalizers.wuzapi._casing import pick, pick_list, pick_str
from app.constants.wuzapi import MessageStatus, PresenceState
from app.use_cases.wuzapi.results import DispatchStep, InboundEventResult
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.tenant_directory import TenantContext
    from app.use_cases.wuzapi.presence_cache import PresenceCache

logger = logging.getLogger(__name__)

_KNOWN_STATUSES = frozenset(status.value for status in MessageStatus)
_KNOWN_PRESENCE = frozenset(state.value for state in PresenceState)


def map_message_status(raw: str | None) -> str | None:
    """Status conhecido normalizado; desconhecido passa adiante como veio."""
    if raw is None:
        return None
    lowered = raw.strip().lower()
    return lowered if lowered in _KNOWN_STATUSES else raw


def map_presence_state(raw: str | None) -> str:
    """Estado de presença; desconhecido ou ausente vira ``available``."""
    lowered = (raw or "").strip().lower()
    return lowered if lowered in _KNOWN_PRESENCE else PresenceState.AVAILABLE.value


async def handle_read_receipt(
    data: Mapping[str, Any],
    envelope_timestamp: Any,
    tenant: TenantContext,
    *,
    store: ConversationStoreProtocol,
    broadcaster: BroadcastProtocol | None,
) -> InboundEventResult:
    """Marca cada mensagem do recibo como lida e notifica o tempo real."""
    message_ids = [str(item) for item in pick_list(data, "MessageIds", "MessageIDs") if item]
    if not message_ids:
        logger.warning(
            "read_receipt_without_ids",
            extra={"data_keys": sorted(str(key) for key in data)[:20]},
        )
        return InboundEventResult.unhandled(None, "no_message_ids")

    timestamp = pick(data, "Timestamp")
    if timestamp is None:
        timestamp = envelope_timestamp

    updated = 0
    failed = 0
    for wire_id in message_ids:
        try:
            message = await store.find_tenant_message_by_wire_id(tenant.tenant_id, wire_id)
            if message is None:
                continue
            await store.update_message(message.id, {"status": MessageStatus.READ.value})
            if broadcaster is not None:
                await broadcaster.broadcast_message_status(
                    message.conversation_id,
                    message.id,
                    MessageStatus.READ.value,
                    timestamp,
                )
            updated += 1
        except Exception as exc:
            failed += 1
            logger.error(
                "read_receipt_update_failed",
                extra={"message_id": mask_identifier(wire_id, 16), "error_type": type(exc).__name__},
            )

    logger.info(
        "read_receipts_processed",
        extra={"count": len(message_ids), "updated": updated, "failed": failed},
    )
    steps = (DispatchStep("read_receipt", "failed" if failed else "ok"),)
    return InboundEventResult(
        handled=True,
        steps=steps,
        extra={"count": len(message_ids), "updated": updated},
    )


async def handle_message_status(
    data: Mapping[str, Any],
    envelope_timestamp: Any,
    tenant: TenantContext,
    *,
    store: ConversationStoreProtocol,
    broadcaster: BroadcastProtocol | None,
) -> InboundEventResult:
    """Atualiza o status de entrega de uma mensagem do tenant."""
    wire_id = pick_str(data, "MessageId", "MessageID", "Id")
    status = map_message_status(pick_str(data, "Status"))
    if not wire_id or not status:
        return InboundEventResult.unhandled(None, "missing_message_status_fields")

    try:
        message = await store.find_tenant_message_by_wire_id(tenant.tenant_id, wire_id)
        if message is None:
            return InboundEventResult.unhandled(None, "message_not_found")
        await store.update_message(message.id, {"status": status})
    except Exception as exc:
        logger.error(
            "message_status_update_failed",
            extra={"message_id": mask_identifier(wire_id, 16), "error_type": type(exc).__name__},
        )
        return InboundEventResult.unhandled(None, "status_update_failed")

    step = DispatchStep("broadcast_status", "skipped", "no_broadcaster")
    if broadcaster is not None:
        try:
            await broadcaster.broadcast_message_status(
                message.conversation_id,
                message.id,
                status,
                envelope_timestamp,
            )
            step = DispatchStep("broadcast_status", "ok")
        except Exception as exc:
            logger.warning(
                "message_status_broadcast_failed",
                extra={"message_id": message.id, "error_type": type(exc).__name__},
            )
            step = DispatchStep("broadcast_status", "failed", type(exc).__name__)

    logger.info("message_status_updated", extra={"message_id": message.id, "status": status})
    return InboundEventResult(
        handled=True,
        conversation_id=message.conversation_id,
        message_id=message.id,
        steps=(step,),
        extra={"status": status},
    )


async def handle_chat_presence(
    data: Mapping[str, Any],
    envelope_timestamp: Any,
    tenant: TenantContext,
    *,
    store: ConversationStoreProtocol,
    broadcaster: BroadcastProtocol | None,
    presence_cache: PresenceCache,
) -> InboundEventResult:
    """Atualiza o cache de presença e avisa a sala da conversa, se existir."""
    contact_id = pick_str(data, "Chat", "Sender")
    if not contact_id:
        return InboundEventResult.unhandled(None, "missing_chat")
    state = map_presence_state(pick_str(data, "State"))

    presence_cache.update(f"{tenant.tenant_id}:{contact_id}", state, envelope_timestamp)

    step = DispatchStep("broadcast_presence", "skipped", "no_conversation")
    conversation_id: str | None = None
    try:
        conversation = await store.find_conversation(tenant.tenant_id, contact_id)
        if conversation is not None:
            conversation_id = conversation.id
            if broadcaster is not None:
                await broadcaster.broadcast_presence(
                    conversation.id,
                    {
                        "conversationId": conversation.id,
                        "contactJid": contact_id,
                        "state": state,
                        "timestamp": envelope_timestamp,
                    },
                )
                step = DispatchStep("broadcast_presence", "ok")
    except Exception as exc:
        logger.warning(
            "presence_broadcast_failed",
            extra={"contact": mask_identifier(contact_id), "error_type": type(exc).__name__},
        )
        step = DispatchStep("broadcast_presence", "failed", type(exc).__name__)

    logger.debug("presence_processed", extra={"contact": mask_identifier(contact_id), "state": state})
    return InboundEventResult(
        handled=True,
        conversation_id=conversation_id,
        steps=(step,),
        extra={"contactJid": contact_id, "state": state},
    )
