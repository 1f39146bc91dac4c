"""Leitura tolerante a casing de payloads do gateway.

O gateway envia o mesmo campo em PascalCase (``Chat``) ou camelCase
(``chat``), às vezes no mesmo evento. Os helpers recebem o nome em
PascalCase e testam as duas variantes.
"""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def key_variants(key: str) -> tuple[str, ...]:
    """Retorna (PascalCase, camelCase) para um nome de campo."""
    camel = key[:1].lower() + key[1:]
    return (key,) if camel == key else (key, camel)


def pick(data: Any, *keys: str) -> Any:
    """Primeiro valor não-None entre as chaves (e suas variantes de casing).

    Valores falsy como ``0`` e ``False`` são válidos (ex.: ProtocolMessage
    com Type=0 é uma remoção).
    """
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        for variant in key_variants(key):
            value = data.get(variant)
            if value is not None:
                return value
    return None


def pick_str(data: Any, *keys: str) -> str | None:
    """Primeira string não vazia entre as chaves; ids numéricos viram str."""
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        for variant in key_variants(key):
            value = data.get(variant)
            if isinstance(value, bool):
                continue
            if isinstance(value, int | float):
                return str(value)
            if isinstance(value, str) and value:
                return value
    return None


def pick_mapping(data: Any, *keys: str) -> Mapping[str, Any] | None:
    """Primeiro objeto (dict) entre as chaves."""
    if not isinstance(data, Mapping):
        return None
    for key in keys:
        for variant in key_variants(key):
            value = data.get(variant)
            if isinstance(value, Mapping):
                return value
    return None


def pick_list(data: Any, *keys: str) -> list[Any]:
    """Primeira lista entre as chaves; lista vazia quando ausente."""
    if not isinstance(data, Mapping):
        return []
    for key in keys:
        for variant in key_variants(key):
            value = data.get(variant)
            if isinstance(value, list):
                return value
    return []


def pick_bool(data: Any, *keys: str) -> bool:
    """True se qualquer uma das chaves tiver valor verdadeiro."""
    return any(bool(pick(data, key)) for key in keys)


def pick_int(data: Any, *keys: str) -> int | None:
    """Primeiro valor numérico (aceita string de dígitos)."""
    value = pick(data, *keys)
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value)
    if isinstance(value, str) and value.strip().lstrip("-").isdigit():
        return int(value.strip())
    return None
