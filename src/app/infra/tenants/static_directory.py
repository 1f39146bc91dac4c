"""Diretório de tenants a partir de configuração estática.

Mapeia token do gateway -> tenant. Em desenvolvimento, token desconhecido
pode ser aceito como o próprio tenant (``allow_unknown``).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from app.protocols.tenant_directory import TenantContext
from config.logging import mask_identifier

if TYPE_CHECKING:
    from collections.abc import Iterable

logger = logging.getLogger(__name__)


class StaticTenantDirectory:
    """TenantDirectoryProtocol sobre pares (token, tenant_id)."""

    def __init__(self, pairs: Iterable[tuple[str, str]] = (), *, allow_unknown: bool = False) -> None:
        self._tenants = {token: tenant_id for token, tenant_id in pairs if token and tenant_id}
        self._allow_unknown = allow_unknown

    async def resolve(self, credential: str) -> TenantContext | None:
        if not credential:
            return None
        tenant_id = self._tenants.get(credential)
        if tenant_id is not None:
            return TenantContext(tenant_id=tenant_id, credential=credential, instance_name=tenant_id)
        if self._allow_unknown:
            logger.debug("tenant_passthrough", extra={"token": mask_identifier(credential)})
            return TenantContext(tenant_id=credential, credential=credential)
        logger.warning("tenant_not_found", extra={"token": mask_identifier(credential)})
        return None
