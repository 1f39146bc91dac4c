"""Conversas de grupo: localizar/criar com nome resolvido e eventos de grupo."""

from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import TYPE_CHECKING, Any

from api.normalizers.wuzapi.group_payload import extract_group_jid
from app.domain.jid import is_group_jid
from app.use_cases.wuzapi.results import DispatchStep, InboundEventResult
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.domain.conversation_identity import GroupNameResolution
    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import Conversation, ConversationStoreProtocol
    from app.protocols.tenant_directory import TenantContext
    from app.services.group_name_resolver import GroupNameResolver

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class GroupConversation:
    conversation: Conversation
    resolution: GroupNameResolution
    broadcast_step: DispatchStep


async def resolve_group_conversation(
    *,
    tenant: TenantContext,
    group_id: str,
    webhook_data: Mapping[str, Any] | None,
    store: ConversationStoreProtocol,
    resolver: GroupNameResolver,
    broadcaster: BroadcastProtocol | None,
) -> GroupConversation:
    """Resolve o nome, localiza/cria a conversa e notifica se o nome mudou."""
    stored = await store.find_conversation(tenant.tenant_id, group_id)
    resolution = await resolver.resolve(
        tenant_id=tenant.tenant_id,
        group_id=group_id,
        webhook_data=webhook_data,
        credential=tenant.credential,
        stored=stored,
    )
    name_updated_at = resolution.resolved_at.isoformat()

    if stored is None:
        conversation = await store.create_conversation(
            tenant.tenant_id,
            group_id,
            resolution.name,
            name_source=resolution.source,
        )
    elif resolution.updated:
        conversation = replace(
            stored,
            contact_name=resolution.name,
            name_source=resolution.source,
            name_updated_at=name_updated_at,
        )
    else:
        conversation = stored

    step = DispatchStep("broadcast_name_update", "skipped", "name_unchanged")
    if resolution.updated and broadcaster is not None:
        try:
            await broadcaster.broadcast_conversation_update(
                {
                    "id": conversation.id,
                    "contact_name": resolution.name,
                    "name_source": str(resolution.source),
                    "name_updated_at": name_updated_at,
                }
            )
            step = DispatchStep("broadcast_name_update", "ok")
        except Exception as exc:
            logger.warning(
                "group_name_broadcast_failed",
                extra={"conversation_id": conversation.id, "error_type": type(exc).__name__},
            )
            step = DispatchStep("broadcast_name_update", "failed", type(exc).__name__)

    return GroupConversation(conversation=conversation, resolution=resolution, broadcast_step=step)


async def handle_group_event(
    data: Mapping[str, Any],
    tenant: TenantContext,
    *,
    store: ConversationStoreProtocol,
    resolver: GroupNameResolver,
    broadcaster: BroadcastProtocol | None,
) -> InboundEventResult:
    """GroupInfo / JoinedGroup: sincroniza nome e conversa do grupo."""
    group_id = extract_group_jid(data)
    if not group_id:
        logger.warning(
            "group_event_missing_jid",
            extra={"data_keys": sorted(str(key) for key in data)[:20]},
        )
        return InboundEventResult.unhandled(None, "missing_group_jid")
    if not is_group_jid(group_id):
        logger.warning("group_event_invalid_jid", extra={"group": mask_identifier(group_id)})
        return InboundEventResult.unhandled(None, "invalid_group_jid")

    group = await resolve_group_conversation(
        tenant=tenant,
        group_id=group_id,
        webhook_data=data,
        store=store,
        resolver=resolver,
        broadcaster=broadcaster,
    )
    return InboundEventResult(
        handled=True,
        conversation_id=group.conversation.id,
        steps=(group.broadcast_step,),
        extra={
            "groupJid": group_id,
            "name": group.resolution.name,
            "updated": group.resolution.updated,
        },
    )
