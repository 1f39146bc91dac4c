"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.contact_identity import ContactIdentityResolver
from app.services.group_name_resolver import GroupNameResolver

__all__ = [
    "ContactIdentityResolver",
    "GroupNameResolver",
]
