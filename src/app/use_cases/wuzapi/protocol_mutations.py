"""ProtocolStateMutator — edição e remoção de mensagens já persistidas.

A mensagem alvo é localizada pelo id do gateway dentro da conversa. Alvo
ausente não é erro: a mensagem original pode ser anterior à integração
ou ter falhado na decodificação. Nada é enfileirado por conversa; duas
entregas concorrentes do mesmo alvo podem competir.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.constants.wuzapi import DELETED_MESSAGE_TOMBSTONE
from app.domain.inbound_message import ProtocolMutation
from app.use_cases.wuzapi.results import DispatchStep, InboundEventResult
from config.logging import mask_identifier

if TYPE_CHECKING:
    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import ConversationStoreProtocol, PersistedMessage

logger = logging.getLogger(__name__)

REASON_TARGET_NOT_FOUND = "target_not_found"
REASON_ALREADY_DELETED = "already_deleted"


class ProtocolStateMutator:
    """Aplica ProtocolMutation sobre a mensagem alvo."""

    def __init__(
        self,
        *,
        store: ConversationStoreProtocol,
        broadcaster: BroadcastProtocol | None = None,
    ) -> None:
        self._store = store
        self._broadcaster = broadcaster

    async def apply_edit(
        self,
        conversation_id: str,
        target_wire_message_id: str,
        new_content: str,
    ) -> InboundEventResult:
        mutation = ProtocolMutation(target_wire_message_id, "edit", new_content)
        return await self.apply(conversation_id, mutation)

    async def apply_delete(
        self,
        conversation_id: str,
        target_wire_message_id: str,
    ) -> InboundEventResult:
        mutation = ProtocolMutation(target_wire_message_id, "delete", DELETED_MESSAGE_TOMBSTONE)
        return await self.apply(conversation_id, mutation)

    async def apply(self, conversation_id: str, mutation: ProtocolMutation) -> InboundEventResult:
        is_edit = mutation.action == "edit"
        try:
            target = await self._store.find_message_by_wire_id(
                conversation_id,
                mutation.target_wire_message_id,
            )
            if target is None:
                logger.warning(
                    "protocol_target_not_found",
                    extra={
                        "action": mutation.action,
                        "conversation_id": conversation_id,
                        "target": mask_identifier(mutation.target_wire_message_id, 16),
                    },
                )
                return _outcome(is_edit, applied=False, reason=REASON_TARGET_NOT_FOUND)

            if not is_edit and target.is_deleted:
                return _outcome(
                    is_edit,
                    applied=False,
                    reason=REASON_ALREADY_DELETED,
                    message_id=target.id,
                )

            fields = _mutation_fields(mutation)
            await self._store.update_message(target.id, fields)
        except Exception as exc:
            logger.exception(
                "protocol_mutation_failed",
                extra={
                    "action": mutation.action,
                    "conversation_id": conversation_id,
                    "error_type": type(exc).__name__,
                },
            )
            return InboundEventResult(handled=False, error=str(exc) or type(exc).__name__)

        step = await self._broadcast(conversation_id, target, fields)
        logger.info(
            "protocol_mutation_applied",
            extra={"action": mutation.action, "conversation_id": conversation_id},
        )
        return _outcome(is_edit, applied=True, message_id=target.id, steps=(step,))

    async def _broadcast(
        self,
        conversation_id: str,
        target: PersistedMessage,
        fields: dict[str, object],
    ) -> DispatchStep:
        if self._broadcaster is None:
            return DispatchStep("broadcast_message_update", "skipped", "no_broadcaster")
        try:
            await self._broadcaster.broadcast_message_update(
                conversation_id,
                {"id": target.id, **fields},
            )
        except Exception as exc:
            logger.warning(
                "protocol_broadcast_failed",
                extra={"conversation_id": conversation_id, "error_type": type(exc).__name__},
            )
            return DispatchStep("broadcast_message_update", "failed", type(exc).__name__)
        return DispatchStep("broadcast_message_update", "ok")


def _mutation_fields(mutation: ProtocolMutation) -> dict[str, object]:
    if mutation.action == "edit":
        return {"content": mutation.new_content or "", "is_edited": True}
    return {"content": DELETED_MESSAGE_TOMBSTONE, "is_deleted": True}


def _outcome(
    is_edit: bool,
    *,
    applied: bool,
    reason: str | None = None,
    message_id: str | None = None,
    steps: tuple[DispatchStep, ...] = (),
) -> InboundEventResult:
    return InboundEventResult(
        handled=True,
        message_id=message_id,
        reason=reason,
        edited=applied if is_edit else None,
        deleted=None if is_edit else applied,
        steps=steps,
    )
