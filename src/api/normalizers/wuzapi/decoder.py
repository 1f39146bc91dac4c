"""Decodificador do conteúdo de mensagens do gateway.

O conteúdo (campo ``Message``) é uma união solta de ~20 variantes. A
decodificação percorre CONTENT_VARIANTS em ordem fixa de prioridade; cada
entrada é uma função pura ``conteúdo -> NormalizedMessage | None`` e a
primeira que reconhece o conteúdo vence. Apenas uma variante é decodificada
por mensagem.

Regras de borda:
- Sem conteúdo, só metadados de transporte ou só distribuição de chave
  de criptografia -> SYSTEM (nunca persistido).
- Chave desconhecida -> UNKNOWN com rótulo derivado do nome da chave.
- ``EditedMessage`` decodifica a mensagem interna e marca is_edited.
- ProtocolMessage: 0 (REVOKE) -> remoção, 14 (MESSAGE_EDIT) -> edição,
  demais subtipos -> SYSTEM.

decode_message_content é total (não levanta) e idempotente.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Mapping
from dataclasses import dataclass, replace
from typing import Any

from api.normalizers.wuzapi._casing import pick, pick_mapping, pick_str
from api.normalizers.wuzapi._interactive_parsers import (
    parse_buttons,
    parse_buttons_response,
    parse_list,
    parse_list_response,
    parse_poll_creation,
    parse_template,
    parse_view_once,
)
from api.normalizers.wuzapi._media_parsers import (
    parse_audio,
    parse_contact,
    parse_document,
    parse_image,
    parse_location,
    parse_reaction,
    parse_sticker,
    parse_video,
)
from app.constants.wuzapi import (
    DELETED_MESSAGE_TOMBSTONE,
    PROTOCOL_TYPE_MESSAGE_EDIT,
    PROTOCOL_TYPE_REVOKE,
    MessageKind,
)
from app.domain.inbound_message import SYSTEM_MESSAGE, NormalizedMessage

TRANSPORT_METADATA_KEYS = frozenset({"messageContextInfo", "MessageContextInfo"})
KEY_DISTRIBUTION_KEYS = frozenset(
    {"senderKeyDistributionMessage", "SenderKeyDistributionMessage"}
)

POLL_VOTE_TEXT = "📊 Voto em enquete"
CHANNEL_COMMENT_TEXT = "💬 Comentário em canal"
UNKNOWN_PREFIX = "📩"

_PROTOCOL_TYPE_NAMES = {
    "REVOKE": PROTOCOL_TYPE_REVOKE,
    "MESSAGE_EDIT": PROTOCOL_TYPE_MESSAGE_EDIT,
}

Decoder = Callable[[Mapping[str, Any]], NormalizedMessage | None]


@dataclass(frozen=True, slots=True)
class ContentVariant:
    """Entrada da tabela de variantes."""

    name: str
    decode: Decoder


def content_keys(content: Mapping[str, Any]) -> list[str]:
    """Chaves de conteúdo, sem metadados de transporte."""
    return [key for key in content if key not in TRANSPORT_METADATA_KEYS]


def is_system_content(content: Mapping[str, Any] | None) -> bool:
    """True para tráfego de controle que nunca deve ser persistido."""
    if not content:
        return True
    keys = content_keys(content)
    if not keys:
        return True
    return len(keys) == 1 and keys[0] in KEY_DISTRIBUTION_KEYS


def unknown_type_label(key: str) -> str:
    """``FooBarMessage`` -> ``Foo Bar``."""
    base = re.sub(r"message$", "", key, flags=re.IGNORECASE)
    return re.sub(r"([A-Z])", r" \1", base).strip()


def _body(*keys: str) -> Callable[[Callable[[Mapping[str, Any]], NormalizedMessage]], Decoder]:
    """Adapta um parser de corpo de variante em um Decoder do conteúdo inteiro."""

    def wrap(parser: Callable[[Mapping[str, Any]], NormalizedMessage]) -> Decoder:
        def decode(content: Mapping[str, Any]) -> NormalizedMessage | None:
            body = pick_mapping(content, *keys)
            return parser(body) if body is not None else None

        return decode

    return wrap


def _protocol_discriminant(raw: Any) -> int | None:
    if isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, str):
        value = raw.strip().upper()
        if value.isdigit():
            return int(value)
        return _PROTOCOL_TYPE_NAMES.get(value)
    return None


def _edited_text(edited: Mapping[str, Any] | None) -> str:
    extended = pick_mapping(edited, "ExtendedTextMessage")
    return pick_str(edited, "Conversation") or pick_str(extended, "Text") or ""


def parse_protocol(body: Mapping[str, Any]) -> NormalizedMessage:
    """ProtocolMessage: remoção (0) ou edição (14) de mensagem anterior."""
    discriminant = _protocol_discriminant(pick(body, "Type"))
    target = pick_str(pick_mapping(body, "Key"), "ID", "Id")

    if discriminant == PROTOCOL_TYPE_REVOKE:
        return NormalizedMessage(
            type=MessageKind.PROTOCOL_DELETE,
            text_content=DELETED_MESSAGE_TOMBSTONE,
            target_wire_message_id=target,
            is_deleted=True,
        )
    if discriminant == PROTOCOL_TYPE_MESSAGE_EDIT:
        return NormalizedMessage(
            type=MessageKind.PROTOCOL_EDIT,
            text_content=_edited_text(pick_mapping(body, "EditedMessage")),
            target_wire_message_id=target,
            is_edited=True,
        )
    return SYSTEM_MESSAGE


def _decode_poll_vote(content: Mapping[str, Any]) -> NormalizedMessage | None:
    if pick_mapping(content, "PollUpdateMessage") is None:
        return None
    return NormalizedMessage(type=MessageKind.POLL_VOTE, text_content=POLL_VOTE_TEXT)


def _decode_channel_comment(content: Mapping[str, Any]) -> NormalizedMessage | None:
    if pick_mapping(content, "EncCommentMessage") is None:
        return None
    return NormalizedMessage(type=MessageKind.CHANNEL_COMMENT, text_content=CHANNEL_COMMENT_TEXT)


def _decode_edited_wrapper(content: Mapping[str, Any]) -> NormalizedMessage | None:
    inner = pick_mapping(pick_mapping(content, "EditedMessage"), "Message")
    if inner is None:
        return None
    decoded = decode_message_content(inner)
    if decoded.is_system:
        return decoded
    return replace(decoded, is_edited=True)


def _decode_conversation(content: Mapping[str, Any]) -> NormalizedMessage | None:
    text = pick_str(content, "Conversation")
    if text is None:
        return None
    return NormalizedMessage(type=MessageKind.TEXT, text_content=text)


def _decode_extended_text(content: Mapping[str, Any]) -> NormalizedMessage | None:
    extended = pick_mapping(content, "ExtendedTextMessage")
    if extended is None:
        return None
    return NormalizedMessage(type=MessageKind.TEXT, text_content=pick_str(extended, "Text") or "")


CONTENT_VARIANTS: tuple[ContentVariant, ...] = (
    ContentVariant("protocol", _body("ProtocolMessage")(parse_protocol)),
    ContentVariant("poll_creation", _body("PollCreationMessage")(parse_poll_creation)),
    ContentVariant("poll_update", _decode_poll_vote),
    ContentVariant(
        "view_once",
        _body("ViewOnceMessage", "ViewOnceMessageV2", "ViewOnceMessageV2Extension")(
            parse_view_once
        ),
    ),
    ContentVariant("buttons", _body("ButtonsMessage")(parse_buttons)),
    ContentVariant("buttons_response", _body("ButtonsResponseMessage")(parse_buttons_response)),
    ContentVariant("list", _body("ListMessage")(parse_list)),
    ContentVariant("list_response", _body("ListResponseMessage")(parse_list_response)),
    ContentVariant("template", _body("TemplateMessage")(parse_template)),
    ContentVariant("channel_comment", _decode_channel_comment),
    ContentVariant("edited", _decode_edited_wrapper),
    ContentVariant("conversation", _decode_conversation),
    ContentVariant("extended_text", _decode_extended_text),
    ContentVariant("image", _body("ImageMessage")(parse_image)),
    ContentVariant("video", _body("VideoMessage")(parse_video)),
    ContentVariant("audio", _body("AudioMessage")(parse_audio)),
    ContentVariant("document", _body("DocumentMessage")(parse_document)),
    ContentVariant("location", _body("LocationMessage")(parse_location)),
    ContentVariant("contact", _body("ContactMessage")(parse_contact)),
    ContentVariant("sticker", _body("StickerMessage")(parse_sticker)),
    ContentVariant("reaction", _body("ReactionMessage")(parse_reaction)),
)


def _decode_unknown(content: Mapping[str, Any]) -> NormalizedMessage:
    original = content_keys(content)[0]
    return NormalizedMessage(
        type=MessageKind.UNKNOWN,
        text_content=f"{UNKNOWN_PREFIX} {unknown_type_label(original)}",
        original_type=original,
    )


def extract_quoted_wire_id(content: Mapping[str, Any] | None) -> str | None:
    """Wire id da mensagem citada (reply), se houver.

    Procura em ``messageContextInfo.StanzaId`` e no ``ContextInfo`` da
    variante (ex.: ``ExtendedTextMessage.ContextInfo.StanzaID``).
    """
    if not content:
        return None
    context = pick_mapping(content, "MessageContextInfo")
    quoted = pick_str(context, "StanzaId", "StanzaID")
    if quoted:
        return quoted
    for key in content_keys(content):
        variant_context = pick_mapping(content.get(key), "ContextInfo")
        quoted = pick_str(variant_context, "StanzaId", "StanzaID")
        if quoted:
            return quoted
    return None


def decode_message_content(content: Mapping[str, Any] | None) -> NormalizedMessage:
    """Decodifica o conteúdo em exatamente uma variante de NormalizedMessage."""
    if content is None or is_system_content(content):
        return SYSTEM_MESSAGE

    decoded: NormalizedMessage | None = None
    for variant in CONTENT_VARIANTS:
        decoded = variant.decode(content)
        if decoded is not None:
            break
    if decoded is None:
        decoded = _decode_unknown(content)

    if decoded.is_system or decoded.is_protocol:
        return decoded
    quoted = extract_quoted_wire_id(content)
    if quoted and decoded.quoted_wire_message_id is None:
        decoded = replace(decoded, quoted_wire_message_id=quoted)
    return decoded

