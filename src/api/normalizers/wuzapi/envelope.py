"""Adaptador de formato dos eventos do gateway.

Converte o corpo ``{type, data, timestamp}`` em RawEventEnvelope e separa
eventos de mensagem em (MessageInfo, conteúdo), aceitando os dois formatos
estruturais enviados pelo gateway:

- aninhado: ``{"Info": {...}, "Message": {...}}``
- plano: ``{"Id": ..., "Chat": ..., "Sender": ..., "Message": {...}}``
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
import uuid
from collections.abc import Mapping
from typing import Any

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError

from api.normalizers.wuzapi._casing import pick, pick_bool, pick_mapping, pick_str
from app.domain.inbound_message import MessageInfo
from config.logging import mask_identifier

logger = logging.getLogger(__name__)

FALLBACK_ID_PREFIX = "wuzapi_"
FINGERPRINT_ID_PREFIX = "wuzapi_fp_"


class MalformedEventError(ValueError):
    """Evento sem a estrutura mínima esperada."""

    def __init__(self, reason: str) -> None:
        super().__init__(reason)
        self.reason = reason


class MissingInfoError(MalformedEventError):
    """Evento de mensagem sem Info nem campos de identificação."""


class RawEventEnvelope(BaseModel):
    """Evento bruto recebido do gateway (efêmero, um por chamada)."""

    model_config = ConfigDict(frozen=True, extra="ignore", populate_by_name=True)

    event_type: str = Field(validation_alias=AliasChoices("type", "Type", "event_type"))
    data: dict[str, Any] = Field(validation_alias=AliasChoices("data", "Data"))
    timestamp: str | int | float | None = Field(
        default=None,
        validation_alias=AliasChoices("timestamp", "Timestamp"),
    )


def parse_event_envelope(payload: Any) -> RawEventEnvelope:
    """Valida o corpo do evento.

    Raises:
        MalformedEventError: Se o payload não for objeto, não tiver tipo
            ou ``data`` não for um objeto.
    """
    if not isinstance(payload, Mapping):
        raise MalformedEventError("payload_not_object")
    try:
        return RawEventEnvelope.model_validate(dict(payload))
    except ValidationError as exc:
        fields = sorted({str(err["loc"][0]) for err in exc.errors() if err.get("loc")})
        raise MalformedEventError(f"invalid_envelope:{','.join(fields)}") from exc


def split_message_event(
    data: Mapping[str, Any],
    *,
    fallback_id_policy: str = "unique",
    envelope_timestamp: str | int | float | None = None,
) -> tuple[MessageInfo, Mapping[str, Any] | None]:
    """Separa um evento Message em (MessageInfo, conteúdo).

    Args:
        data: Campo ``data`` do envelope.
        fallback_id_policy: "unique" ou "fingerprint" (id ausente no fio).
        envelope_timestamp: Timestamp do envelope, usado quando Info não tem.

    Raises:
        MissingInfoError: Sem Info/campos de identificação ou sem chat.
    """
    info = pick_mapping(data, "Info")
    if info is None and pick(data, "Id", "Chat", "Sender") is not None:
        info = data
    if info is None:
        logger.warning(
            "message_event_missing_info",
            extra={"data_keys": sorted(str(key) for key in data)[:20]},
        )
        raise MissingInfoError("missing_info")

    content = pick_mapping(data, "Message")

    chat_id = pick_str(info, "Chat", "RemoteJid")
    sender_id = pick_str(info, "Sender")
    resolved_chat = chat_id or sender_id
    if not resolved_chat:
        logger.warning(
            "message_event_missing_chat",
            extra={"info_keys": sorted(str(key) for key in info)[:20]},
        )
        raise MissingInfoError("missing_contact_jid")

    timestamp = pick(info, "Timestamp")
    if timestamp is None:
        timestamp = envelope_timestamp

    wire_id = pick_str(info, "Id", "ID", "MessageId")
    has_fallback_id = wire_id is None
    if wire_id is None:
        wire_id = synthesize_fallback_id(
            fallback_id_policy,
            chat_id=resolved_chat,
            sender_id=sender_id,
            timestamp=timestamp,
            content=content,
        )
        logger.warning(
            "message_fallback_id_generated",
            extra={"policy": fallback_id_policy, "message_id": mask_identifier(wire_id, 16)},
        )

    message_info = MessageInfo(
        chat_id=resolved_chat,
        wire_message_id=wire_id,
        sender_id=sender_id,
        sender_alt_id=pick_str(info, "SenderAlt"),
        recipient_alt_id=pick_str(info, "RecipientAlt"),
        from_me=pick_bool(info, "FromMe", "IsFromMe"),
        push_name=pick_str(info, "PushName"),
        participant_id=pick_str(info, "Participant"),
        wire_timestamp=timestamp,
        has_fallback_id=has_fallback_id,
        raw=dict(info),
    )
    return message_info, content


def synthesize_fallback_id(
    policy: str,
    *,
    chat_id: str,
    sender_id: str | None,
    timestamp: Any,
    content: Mapping[str, Any] | None,
) -> str:
    """Gera id local para mensagens sem id do gateway.

    - unique: ``wuzapi_<epoch_ms>_<aleatório>``; toda reentrega vira mensagem nova.
    - fingerprint: hash determinístico de chat/remetente/timestamp/conteúdo;
      reentregas idênticas produzem o mesmo id (dedupe fica com o chamador).
    """
    if policy == "fingerprint":
        material = json.dumps(
            {
                "chat": chat_id,
                "sender": sender_id,
                "timestamp": timestamp,
                "content": content,
            },
            sort_keys=True,
            default=str,
            ensure_ascii=False,
        )
        digest = hashlib.sha256(material.encode("utf-8")).hexdigest()
        return f"{FINGERPRINT_ID_PREFIX}{digest[:32]}"
    return f"{FALLBACK_ID_PREFIX}{int(time.time() * 1000)}_{uuid.uuid4().hex[:6]}"
