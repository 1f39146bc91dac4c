"""Modelo canônico de mensagem inbound do gateway WUZAPI.

NormalizedMessage é a única representação que sai do decodificador e
segue para persistência, broadcast, relay e bot. Exatamente uma variante
de conteúdo (MessageKind) por mensagem; SYSTEM não carrega conteúdo
persistível.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

from app.constants.wuzapi import InteractiveKind, MessageKind

Direction = Literal["incoming", "outgoing"]


@dataclass(frozen=True, slots=True)
class MediaReference:
    """Ponteiro para mídia criptografada no CDN do gateway."""

    url: str | None = None
    media_key: str | None = None
    mime_type: str | None = None
    file_sha256: str | None = None
    file_enc_sha256: str | None = None
    file_length: int | None = None
    direct_path: str | None = None
    seconds: int | None = None
    ptt: bool | None = None
    height: int | None = None
    width: int | None = None
    jpeg_thumbnail: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Serializa no formato de metadados de mídia (chaves camelCase)."""
        data = {
            "url": self.url,
            "mediaKey": self.media_key,
            "mimetype": self.mime_type,
            "fileSha256": self.file_sha256,
            "fileEncSha256": self.file_enc_sha256,
            "fileLength": self.file_length,
            "directPath": self.direct_path,
            "seconds": self.seconds,
            "ptt": self.ptt,
            "height": self.height,
            "width": self.width,
            "jpegThumbnail": self.jpeg_thumbnail,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True, slots=True)
class PollData:
    """Estrutura de enquete (criação)."""

    question: str
    options: tuple[str, ...] = ()
    selectable_count: int = 1


@dataclass(frozen=True, slots=True)
class InteractiveData:
    """Mensagens com botões/listas e as respectivas respostas."""

    kind: InteractiveKind
    text: str = ""
    buttons: tuple[dict[str, str], ...] = ()
    button_text: str | None = None
    sections: tuple[dict[str, Any], ...] = ()
    selected_id: str | None = None
    selected_title: str | None = None


@dataclass(frozen=True, slots=True)
class NormalizedMessage:
    """Mensagem decodificada, independente do formato do fio."""

    type: MessageKind
    text_content: str = ""
    media: MediaReference | None = None
    media_mime_type: str | None = None
    media_filename: str | None = None
    reply_to_internal_id: str | None = None
    is_edited: bool = False
    is_deleted: bool = False
    poll_data: PollData | None = None
    interactive_data: InteractiveData | None = None
    participant_id: str | None = None
    participant_name: str | None = None
    direction: Direction = "incoming"
    wire_timestamp: str | None = None
    target_wire_message_id: str | None = None
    original_type: str | None = None
    reaction_key: str | None = None
    view_once_media: str | None = None
    quoted_wire_message_id: str | None = None

    @property
    def is_system(self) -> bool:
        """True para tráfego de controle que nunca é persistido."""
        return self.type is MessageKind.SYSTEM

    @property
    def is_protocol(self) -> bool:
        """True para edição/remoção de mensagem anterior."""
        return self.type in (MessageKind.PROTOCOL_EDIT, MessageKind.PROTOCOL_DELETE)

    def with_context(self, **changes: Any) -> NormalizedMessage:
        """Retorna cópia com campos de contexto (direção, participante, reply)."""
        return replace(self, **changes)


SYSTEM_MESSAGE = NormalizedMessage(type=MessageKind.SYSTEM)


@dataclass(frozen=True, slots=True)
class MessageInfo:
    """Campos de identificação de uma mensagem, já sem ambiguidade de casing.

    Invariante: chat_id sempre preenchido (eventos sem chat são rejeitados
    pelo adaptador de payload).
    """

    chat_id: str
    wire_message_id: str
    sender_id: str | None = None
    sender_alt_id: str | None = None
    recipient_alt_id: str | None = None
    from_me: bool = False
    push_name: str | None = None
    participant_id: str | None = None
    wire_timestamp: str | int | float | None = None
    has_fallback_id: bool = False
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    @property
    def direction(self) -> Direction:
        return "outgoing" if self.from_me else "incoming"


@dataclass(frozen=True, slots=True)
class ProtocolMutation:
    """Edição ou remoção aplicada a uma mensagem já persistida."""

    target_wire_message_id: str
    action: Literal["edit", "delete"]
    new_content: str | None = None
