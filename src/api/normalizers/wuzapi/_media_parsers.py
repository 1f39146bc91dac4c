"""Parsers das variantes de mídia, localização, contato e reação.

Separado de decoder.py; cada função recebe o corpo da variante
(ex.: o valor de ``ImageMessage``) e devolve NormalizedMessage.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from typing import Any

from api.normalizers.wuzapi._casing import pick, pick_int, pick_mapping, pick_str
from app.constants.wuzapi import MessageKind
from app.domain.inbound_message import MediaReference, NormalizedMessage

STICKER_MIME_TYPE = "image/webp"


def extract_media_reference(body: Mapping[str, Any]) -> MediaReference | None:
    """Extrai o bundle de mídia; None se não houver ponteiro utilizável.

    Útil = ao menos um entre url, media key, direct path ou thumbnail.
    """
    ptt = pick(body, "Ptt")
    reference = MediaReference(
        url=pick_str(body, "Url", "URL"),
        media_key=pick_str(body, "MediaKey"),
        mime_type=pick_str(body, "Mimetype", "MimeType"),
        file_sha256=pick_str(body, "FileSHA256", "FileSha256"),
        file_enc_sha256=pick_str(body, "FileEncSHA256", "FileEncSha256"),
        file_length=pick_int(body, "FileLength"),
        direct_path=pick_str(body, "DirectPath"),
        seconds=pick_int(body, "Seconds"),
        ptt=bool(ptt) if ptt is not None else None,
        height=pick_int(body, "Height"),
        width=pick_int(body, "Width"),
        jpeg_thumbnail=pick_str(body, "JpegThumbnail", "JPEGThumbnail"),
    )
    if not (
        reference.url
        or reference.media_key
        or reference.direct_path
        or reference.jpeg_thumbnail
    ):
        return None
    return reference


def _media_message(
    kind: MessageKind,
    body: Mapping[str, Any],
    *,
    caption: bool = True,
    filename: str | None = None,
    mime_type: str | None = None,
) -> NormalizedMessage:
    return NormalizedMessage(
        type=kind,
        text_content=(pick_str(body, "Caption") or "") if caption else "",
        media=extract_media_reference(body),
        media_mime_type=mime_type or pick_str(body, "Mimetype", "MimeType"),
        media_filename=filename,
    )


def parse_image(body: Mapping[str, Any]) -> NormalizedMessage:
    return _media_message(MessageKind.IMAGE, body)


def parse_video(body: Mapping[str, Any]) -> NormalizedMessage:
    return _media_message(MessageKind.VIDEO, body)


def parse_audio(body: Mapping[str, Any]) -> NormalizedMessage:
    return _media_message(MessageKind.AUDIO, body, caption=False)


def parse_document(body: Mapping[str, Any]) -> NormalizedMessage:
    return _media_message(
        MessageKind.DOCUMENT,
        body,
        filename=pick_str(body, "FileName", "Title"),
    )


def parse_sticker(body: Mapping[str, Any]) -> NormalizedMessage:
    return _media_message(
        MessageKind.STICKER,
        body,
        caption=False,
        mime_type=STICKER_MIME_TYPE,
    )


def parse_location(body: Mapping[str, Any]) -> NormalizedMessage:
    """Localização serializada como JSON compacto (latitude, longitude, name)."""
    location = {
        "latitude": pick(body, "DegreesLatitude"),
        "longitude": pick(body, "DegreesLongitude"),
        "name": pick_str(body, "Name") or "",
    }
    return NormalizedMessage(
        type=MessageKind.LOCATION,
        text_content=json.dumps(location, ensure_ascii=False, separators=(",", ":")),
    )


def parse_contact(body: Mapping[str, Any]) -> NormalizedMessage:
    """Cartão de contato: o vCard bruto é o conteúdo."""
    return NormalizedMessage(
        type=MessageKind.CONTACT,
        text_content=pick_str(body, "Vcard", "VCard") or "",
    )


def parse_reaction(body: Mapping[str, Any]) -> NormalizedMessage:
    """Reação: emoji como conteúdo e id da mensagem reagida em reaction_key."""
    key = pick_mapping(body, "Key")
    return NormalizedMessage(
        type=MessageKind.REACTION,
        text_content=pick_str(body, "Text") or "",
        reaction_key=pick_str(key, "ID", "Id"),
    )
