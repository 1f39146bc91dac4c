"""ContactIdentityResolver — contato canônico de uma mensagem.

Chats comuns (contato ou grupo) usam o JID do próprio evento. Chats
endereçados por linked device id (``@lid``) mascaram o número real e são
resolvidos nesta ordem:

1. SenderAlt / RecipientAlt do evento, normalizados para
   ``<dígitos>@s.whatsapp.net``
2. consulta ao gateway pelo id numérico do LID
3. Sender, se não for ele mesmo um LID
4. o próprio LID (resultado degradado, registrado em log)
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.domain.conversation_identity import ContactResolution
from app.domain.jid import canonical_contact_jid, is_group_jid, is_lid, lid_number
from config.logging import log_fallback, mask_identifier
from utils.errors import GatewayLookupError

if TYPE_CHECKING:
    from app.domain.inbound_message import MessageInfo
    from app.protocols.identity_lookup import IdentityLookupProtocol

logger = logging.getLogger(__name__)

METHOD_DIRECT = "direct"
METHOD_ALT_FIELD = "alt_field"
METHOD_GATEWAY_LOOKUP = "gateway_lookup"
METHOD_SENDER = "sender"
METHOD_UNRESOLVED_LID = "unresolved_lid"


class ContactIdentityResolver:
    """Resolve o contato canônico (chave da conversa) de um MessageInfo."""

    def __init__(self, *, identity_lookup: IdentityLookupProtocol | None = None) -> None:
        self._lookup = identity_lookup

    async def resolve(self, info: MessageInfo, credential: str) -> ContactResolution:
        chat_id = info.chat_id
        if not is_lid(chat_id):
            return ContactResolution(
                contact_id=chat_id,
                is_group=is_group_jid(chat_id),
                method=METHOD_DIRECT,
            )

        alt = info.sender_alt_id or info.recipient_alt_id
        if alt:
            contact_id = canonical_contact_jid(alt)
            logger.info(
                "lid_resolved_via_alt_field",
                extra={"lid": mask_identifier(chat_id), "contact": mask_identifier(contact_id)},
            )
            return ContactResolution(contact_id=contact_id, is_group=False, method=METHOD_ALT_FIELD)

        phone = await self._lookup_phone(lid_number(chat_id), credential)
        if phone:
            return ContactResolution(
                contact_id=canonical_contact_jid(phone),
                is_group=False,
                method=METHOD_GATEWAY_LOOKUP,
            )

        sender = info.sender_id
        if sender and not is_lid(sender):
            logger.warning(
                "lid_resolved_via_sender",
                extra={"lid": mask_identifier(chat_id), "sender": mask_identifier(sender)},
            )
            return ContactResolution(
                contact_id=sender,
                is_group=is_group_jid(sender),
                method=METHOD_SENDER,
            )

        logger.error("lid_unresolved", extra={"lid": mask_identifier(chat_id)})
        log_fallback(logger, "contact_identity", reason="lid_unresolved")
        return ContactResolution(
            contact_id=chat_id,
            is_group=False,
            method=METHOD_UNRESOLVED_LID,
            degraded=True,
        )

    async def _lookup_phone(self, lid: str, credential: str) -> str | None:
        if self._lookup is None or not credential:
            return None
        try:
            return await self._lookup.resolve_linked_device_id(lid, credential)
        except GatewayLookupError as exc:
            logger.warning(
                "lid_lookup_failed",
                extra={
                    "lid": mask_identifier(lid),
                    "status_code": exc.status_code,
                    "error_type": type(exc).__name__,
                },
            )
            return None
