"""Normalizers por canal — conversão de payloads externos para modelos internos.

Estrutura:
- wuzapi/: eventos do gateway WUZAPI (envelope, decodificador de conteúdo,
  dados de grupo)
"""

from .wuzapi import decode_message_content, parse_event_envelope, split_message_event

__all__ = [
    "decode_message_content",
    "parse_event_envelope",
    "split_message_event",
]
