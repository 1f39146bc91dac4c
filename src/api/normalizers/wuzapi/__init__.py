"""Normalizer WUZAPI — eventos do gateway para o modelo interno.

Responsabilidades:
- Validar o envelope ``{type, data, timestamp}``
- Separar eventos de mensagem em MessageInfo + conteúdo (formatos
  aninhado e plano, PascalCase e camelCase)
- Decodificar o conteúdo em exatamente uma variante de NormalizedMessage
- Extrair nome/JID de grupo dos eventos
"""

from .decoder import decode_message_content, extract_quoted_wire_id, is_system_content
from .envelope import (
    MalformedEventError,
    MissingInfoError,
    RawEventEnvelope,
    parse_event_envelope,
    split_message_event,
    synthesize_fallback_id,
)
from .group_payload import extract_group_jid, extract_webhook_group_name

__all__ = [
    "MalformedEventError",
    "MissingInfoError",
    "RawEventEnvelope",
    "decode_message_content",
    "extract_group_jid",
    "extract_quoted_wire_id",
    "extract_webhook_group_name",
    "is_system_content",
    "parse_event_envelope",
    "split_message_event",
    "synthesize_fallback_id",
]
