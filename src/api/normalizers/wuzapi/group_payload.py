"""Extração de dados de grupo dos eventos do gateway.

O nome do grupo aparece em campos diferentes conforme o tipo de evento
(Message, GroupInfo, JoinedGroup) e a versão do gateway; aqui ficam as
listas de campos e a ordem de prioridade.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from api.normalizers.wuzapi._casing import pick, pick_str
from app.domain.jid import is_invalid_group_name

GROUP_NAME_FIELDS: tuple[str, ...] = (
    "GroupName",
    "Name",
    "Subject",
    "GroupSubject",
    "ChatName",
    "Title",
    "GroupDescription",
)

NESTED_GROUP_NAME_PATHS: tuple[tuple[str, ...], ...] = (
    ("GroupInfo", "Name"),
    ("GroupInfo", "GroupName"),
    ("GroupInfo", "Subject"),
    ("Data", "GroupInfo", "Name"),
    ("Data", "GroupInfo", "GroupName"),
    ("Data", "Data", "Name"),
    ("Data", "Data", "GroupName"),
    ("Info", "GroupName"),
    ("Info", "Name"),
    ("Info", "Subject"),
)

GROUP_JID_FIELDS: tuple[str, ...] = ("GroupJID", "GroupJid")


def _dig(data: Any, path: tuple[str, ...]) -> Any:
    current = data
    for segment in path:
        current = pick(current, segment)
        if current is None:
            return None
    return current


def extract_webhook_group_name(data: Mapping[str, Any] | None) -> tuple[str | None, str | None]:
    """Primeiro nome de grupo válido presente no evento.

    Returns:
        (nome, campo de origem) ou (None, None) se nenhum campo for válido.
    """
    if not data:
        return None, None
    for field_name in GROUP_NAME_FIELDS:
        value = pick_str(data, field_name)
        if value and not is_invalid_group_name(value):
            return value, field_name
    for path in NESTED_GROUP_NAME_PATHS:
        value = _dig(data, path)
        if isinstance(value, str) and not is_invalid_group_name(value):
            return value, ".".join(path)
    return None, None


def extract_group_jid(data: Mapping[str, Any] | None) -> str | None:
    """JID do grupo em eventos GroupInfo/JoinedGroup (raiz ou ``data`` aninhado)."""
    if not data:
        return None
    found = pick_str(data, *GROUP_JID_FIELDS)
    if found:
        return found
    return pick_str(pick(data, "Data"), *GROUP_JID_FIELDS)
