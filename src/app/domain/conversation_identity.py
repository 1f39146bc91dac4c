"""Identidade de conversas: contato canônico e nome exibido de grupos."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime  # noqa: TC003 - usado em runtime nos dataclasses

from app.constants.wuzapi import NameSource


@dataclass(frozen=True, slots=True)
class ContactResolution:
    """Resultado da resolução do contato canônico de uma mensagem.

    degraded=True quando um LID não pôde ser resolvido e foi mantido.
    """

    contact_id: str
    is_group: bool
    method: str
    degraded: bool = False


@dataclass(frozen=True, slots=True)
class GroupNameResolution:
    """Nome de grupo resolvido em uma chamada (transiente)."""

    name: str
    source: NameSource
    updated: bool
    previous_name: str | None
    resolved_at: datetime


@dataclass(frozen=True, slots=True)
class ConversationIdentity:
    """Contato canônico e nome exibido de uma conversa."""

    contact_id: str
    is_group: bool
    resolved_display_name: str
    name_source: NameSource
