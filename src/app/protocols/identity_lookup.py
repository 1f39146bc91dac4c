"""Protocolo de consulta de identidade no gateway."""

from __future__ import annotations

from typing import Protocol


class IdentityLookupProtocol(Protocol):
    """Consultas síncronas ao gateway usadas na resolução de identidade.

    Ambas devolvem None quando o gateway não tem a informação; falhas de
    rede viram GatewayLookupError.
    """

    async def resolve_linked_device_id(self, lid: str, credential: str) -> str | None:
        """Telefone (apenas dígitos) por trás de um linked device id numérico."""
        ...

    async def fetch_group_name(self, group_id: str, credential: str) -> str | None:
        """Nome atual do grupo segundo o gateway."""
        ...
