"""Resolução do tenant a partir da credencial recebida no webhook."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol


@dataclass(frozen=True, slots=True)
class TenantContext:
    """Tenant dono do evento e credencial usada para chamar o gateway."""

    tenant_id: str
    credential: str
    instance_name: str | None = None


class TenantDirectoryProtocol(Protocol):
    """Mapeia credencial do gateway -> tenant."""

    async def resolve(self, credential: str) -> TenantContext | None: ...
