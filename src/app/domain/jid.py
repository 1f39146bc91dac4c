"""Regras puras sobre identificadores (JID) do gateway.

Formatos conhecidos:
- contato: ``5531994975641@s.whatsapp.net`` (legado: ``@c.us``)
- grupo: ``120363043775639115@g.us``
- linked device (LID): ``123456789012345@lid``; mascara o número real.
"""

from __future__ import annotations

import re

from app.constants.wuzapi import (
    CONTACT_DOMAIN,
    GROUP_SUFFIX,
    LEGACY_CONTACT_DOMAIN,
    LID_SUFFIX,
)

UNKNOWN_PARTICIPANT = "Participante desconhecido"
UNKNOWN_GROUP = "Grupo desconhecido"
FALLBACK_GROUP_PREFIX = "Grupo"
FALLBACK_GROUP_DIGITS = 8

_PARTICIPANT_PHONE = re.compile(r"^(\d+)@")
_PLACEHOLDER_GROUP_NAME = re.compile(r"^Grupo \d+")
_SYSTEM_GENERATED_ID = re.compile(r"^\d+_[a-z0-9]+$")


def is_group_jid(jid: str | None) -> bool:
    return bool(jid) and jid.endswith(GROUP_SUFFIX)  # type: ignore[union-attr]


def is_lid(jid: str | None) -> bool:
    return bool(jid) and jid.endswith(LID_SUFFIX)  # type: ignore[union-attr]


def jid_local_part(jid: str) -> str:
    """Parte antes do ``@`` (o próprio valor quando não há domínio)."""
    return jid.split("@", 1)[0]


def lid_number(jid: str) -> str:
    """Id numérico do linked device (``123@lid`` -> ``123``)."""
    return jid_local_part(jid)


def canonical_contact_jid(raw: str) -> str:
    """Normaliza telefone/JID para ``<dígitos>@s.whatsapp.net``.

    Remove ``+`` inicial e sufixos de domínio de contato conhecidos.

    Example:
        >>> canonical_contact_jid("+5531994975641")
        '5531994975641@s.whatsapp.net'
    """
    value = raw.strip().lstrip("+")
    for domain in (CONTACT_DOMAIN, LEGACY_CONTACT_DOMAIN):
        suffix = f"@{domain}"
        if value.endswith(suffix):
            value = value[: -len(suffix)]
    return f"{value}@{CONTACT_DOMAIN}"


def phone_from_jid(jid: str) -> str:
    """Número usado pelo endpoint de envio (sem ``@s.whatsapp.net``)."""
    suffix = f"@{CONTACT_DOMAIN}"
    return jid[: -len(suffix)] if jid.endswith(suffix) else jid


def is_invalid_group_name(name: str | None) -> bool:
    """Nome de grupo inutilizável para exibição.

    Inválido quando vazio, só dígitos (JID sem sufixo), contém ``@g.us``
    ou segue o placeholder ``Grupo <dígitos>`` de um fallback anterior.
    """
    if name is None or not name.strip():
        return True
    if name.isdigit():
        return True
    if GROUP_SUFFIX in name:
        return True
    return bool(_PLACEHOLDER_GROUP_NAME.match(name))


def fallback_group_name(group_jid: str | None) -> str:
    """``120363043775639115@g.us`` -> ``Grupo 12036304...``."""
    if not group_jid:
        return UNKNOWN_GROUP
    number = jid_local_part(group_jid)
    if len(number) > FALLBACK_GROUP_DIGITS:
        number = number[:FALLBACK_GROUP_DIGITS] + "..."
    return f"{FALLBACK_GROUP_PREFIX} {number}"


def format_participant_display(participant_jid: str | None) -> str:
    """Nome exibido de participante sem PushName.

    Números brasileiros (55 + DDD) ganham máscara ``+55 31 99497-5641``
    (9 dígitos) ou ``+55 31 3333-4444`` (8 dígitos); demais números viram
    ``+<dígitos>``.
    """
    match = _PARTICIPANT_PHONE.match(participant_jid or "")
    if match is None:
        return UNKNOWN_PARTICIPANT
    phone = match.group(1)
    if phone.startswith("55") and len(phone) >= 12:
        ddd = phone[2:4]
        number = phone[4:]
        if len(number) == 9:
            return f"+55 {ddd} {number[:5]}-{number[5:]}"
        if len(number) == 8:
            return f"+55 {ddd} {number[:4]}-{number[4:]}"
    return f"+{phone}"


def is_system_generated_id(wire_message_id: str) -> bool:
    """True para ids gerados pelo próprio sistema ao enviar (``<ts>_<hash>``)."""
    return bool(_SYSTEM_GENERATED_ID.match(wire_message_id))
