"""ReplyLinker — id interno da mensagem citada em um reply."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from config.logging import mask_identifier

if TYPE_CHECKING:
    from app.protocols.conversation_store import ConversationStoreProtocol

logger = logging.getLogger(__name__)


class ReplyLinker:
    """Resolve wire id citado -> id interno na mesma conversa.

    Nunca bloqueia a persistência: alvo ausente ou falha na consulta
    resultam em mensagem sem vínculo de reply.
    """

    def __init__(self, *, store: ConversationStoreProtocol) -> None:
        self._store = store

    async def link(self, conversation_id: str, quoted_wire_id: str | None) -> str | None:
        if not quoted_wire_id:
            return None
        try:
            quoted = await self._store.find_message_by_wire_id(conversation_id, quoted_wire_id)
        except Exception as exc:
            logger.warning(
                "reply_link_lookup_failed",
                extra={"conversation_id": conversation_id, "error_type": type(exc).__name__},
            )
            return None
        if quoted is None:
            logger.debug(
                "reply_target_not_found",
                extra={
                    "conversation_id": conversation_id,
                    "quoted": mask_identifier(quoted_wire_id, 16),
                },
            )
            return None
        return quoted.id
