"""GroupNameResolver — nome exibido de conversas de grupo.

Prioridade das fontes (da mais para a menos autoritativa):

    webhook (nome válido no evento) > nome já armazenado (se válido)
    > consulta ao gateway > fallback ``Grupo <8 dígitos>...``

Nomes inválidos (vazio, só dígitos, contém ``@g.us`` ou placeholder
``Grupo <dígitos>``) nunca vencem um nome válido. ``updated`` só é True
quando já existia conversa e o novo nome difere do armazenado
(comparação sem caixa e sem espaços nas bordas); apenas nesse caso o
nome é persistido e o chamador deve notificar o tempo real.
"""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from api.normalizers.wuzapi.group_payload import extract_webhook_group_name
from app.constants.wuzapi import NameSource
from app.domain.conversation_identity import GroupNameResolution
from app.domain.jid import fallback_group_name, is_invalid_group_name
from config.logging import log_fallback, mask_identifier
from utils.errors import ConversationStoreError, GatewayLookupError

if TYPE_CHECKING:
    from collections.abc import Mapping

    from app.protocols.conversation_store import Conversation, ConversationStoreProtocol
    from app.protocols.identity_lookup import IdentityLookupProtocol

logger = logging.getLogger(__name__)


def names_differ(previous: str | None, current: str) -> bool:
    """Compara nomes ignorando caixa e espaços nas bordas."""
    if previous is None:
        return True
    return previous.strip().lower() != current.strip().lower()


class GroupNameResolver:
    """Resolve e, quando muda, persiste o nome de uma conversa de grupo."""

    def __init__(
        self,
        *,
        store: ConversationStoreProtocol,
        identity_lookup: IdentityLookupProtocol | None = None,
    ) -> None:
        self._store = store
        self._lookup = identity_lookup

    async def resolve(
        self,
        *,
        tenant_id: str,
        group_id: str,
        webhook_data: Mapping[str, Any] | None,
        credential: str,
        stored: Conversation | None = None,
    ) -> GroupNameResolution:
        """Resolve o nome do grupo.

        Args:
            tenant_id: Tenant dono da conversa.
            group_id: JID do grupo (``...@g.us``).
            webhook_data: Campo ``data`` do evento (fonte de maior prioridade).
            credential: Credencial do tenant no gateway.
            stored: Conversa já carregada pelo chamador; consultada no
                store quando omitida.
        """
        if stored is None:
            stored = await self._store.find_conversation(tenant_id, group_id)
        previous = stored.contact_name if stored else None

        name, source = await self._select_name(group_id, webhook_data, previous, credential)
        updated = stored is not None and names_differ(previous, name)
        resolved_at = datetime.now(UTC)

        if updated and stored is not None:
            await self._persist(stored, name, source, resolved_at)

        logger.info(
            "group_name_resolved",
            extra={
                "group": mask_identifier(group_id),
                "source": str(source),
                "updated": updated,
                "had_previous": previous is not None,
            },
        )
        return GroupNameResolution(
            name=name,
            source=source,
            updated=updated,
            previous_name=previous,
            resolved_at=resolved_at,
        )

    async def _select_name(
        self,
        group_id: str,
        webhook_data: Mapping[str, Any] | None,
        previous: str | None,
        credential: str,
    ) -> tuple[str, NameSource]:
        webhook_name, field_name = extract_webhook_group_name(webhook_data)
        if webhook_name:
            logger.debug("group_name_from_webhook", extra={"field": field_name})
            return webhook_name, NameSource.WEBHOOK

        if previous and not is_invalid_group_name(previous):
            return previous, NameSource.STORED

        fetched = await self._fetch(group_id, credential)
        if fetched:
            return fetched, NameSource.GATEWAY_API

        log_fallback(logger, "group_name_resolver", reason="no_valid_group_name")
        return fallback_group_name(group_id), NameSource.FALLBACK

    async def _fetch(self, group_id: str, credential: str) -> str | None:
        if self._lookup is None or not credential:
            return None
        try:
            name = await self._lookup.fetch_group_name(group_id, credential)
        except GatewayLookupError as exc:
            logger.warning(
                "group_info_lookup_failed",
                extra={
                    "group": mask_identifier(group_id),
                    "status_code": exc.status_code,
                    "error_type": type(exc).__name__,
                },
            )
            return None
        if name is None or is_invalid_group_name(name):
            return None
        return name

    async def _persist(
        self,
        stored: Conversation,
        name: str,
        source: NameSource,
        resolved_at: datetime,
    ) -> None:
        try:
            await self._store.update_conversation_name(
                stored.id,
                name,
                source,
                resolved_at.isoformat(),
            )
        except ConversationStoreError as exc:
            # Nome resolvido continua válido para este evento.
            logger.warning(
                "group_name_persist_failed",
                extra={"conversation_id": stored.id, "error_type": type(exc).__name__},
            )
