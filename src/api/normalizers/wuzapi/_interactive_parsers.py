"""Parsers de enquetes, visualização única, botões, listas e templates."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

from api.normalizers.wuzapi._casing import pick_int, pick_list, pick_mapping, pick_str
from app.constants.wuzapi import InteractiveKind, MessageKind
from app.domain.inbound_message import InteractiveData, NormalizedMessage, PollData

DEFAULT_POLL_QUESTION = "Enquete"
DEFAULT_BUTTON_LABEL = "Botão"
DEFAULT_LIST_BUTTON_TEXT = "Ver opções"
TEMPLATE_FALLBACK_TEXT = "📄 Mensagem de template"

# (chave da mídia interna, rótulo, tipo de mídia)
_VIEW_ONCE_MEDIA: tuple[tuple[str, str, str], ...] = (
    ("ImageMessage", "📷 Foto de visualização única", "image"),
    ("VideoMessage", "🎥 Vídeo de visualização única", "video"),
    ("AudioMessage", "🎵 Áudio de visualização única", "audio"),
)
_VIEW_ONCE_GENERIC = "⏱️ Mídia de visualização única"


def _option_label(option: Any) -> str:
    if isinstance(option, Mapping):
        return pick_str(option, "OptionName") or ""
    return str(option)


def parse_poll_creation(body: Mapping[str, Any]) -> NormalizedMessage:
    """Enquete renderizada como pergunta + opções numeradas a partir de 1."""
    question = pick_str(body, "Name") or DEFAULT_POLL_QUESTION
    options = tuple(_option_label(option) for option in pick_list(body, "Options"))
    rendered = "\n".join(f"{index}. {label}" for index, label in enumerate(options, start=1))
    return NormalizedMessage(
        type=MessageKind.POLL,
        text_content=f"📊 {question}\n\n{rendered}",
        poll_data=PollData(
            question=question,
            options=options,
            selectable_count=pick_int(body, "SelectableOptionsCount") or 1,
        ),
    )


def parse_view_once(body: Mapping[str, Any]) -> NormalizedMessage:
    """Wrapper de visualização única; o conteúdo da mídia não é exposto."""
    inner = pick_mapping(body, "Message")
    if inner is not None:
        for key, label, media_type in _VIEW_ONCE_MEDIA:
            if pick_mapping(inner, key) is not None:
                return NormalizedMessage(
                    type=MessageKind.VIEW_ONCE,
                    text_content=label,
                    view_once_media=media_type,
                )
    return NormalizedMessage(type=MessageKind.VIEW_ONCE, text_content=_VIEW_ONCE_GENERIC)


def parse_buttons(body: Mapping[str, Any]) -> NormalizedMessage:
    text = pick_str(body, "ContentText", "Text") or ""
    buttons: list[dict[str, str]] = []
    labels: list[str] = []
    for button in pick_list(body, "Buttons"):
        button_id = pick_str(button, "ButtonId") or ""
        display = pick_str(pick_mapping(button, "ButtonText"), "DisplayText") or ""
        buttons.append({"id": button_id, "text": display})
        labels.append(f"🔘 {display or button_id or DEFAULT_BUTTON_LABEL}")

    content = text + ("\n\n" + "\n".join(labels) if labels else "")
    return NormalizedMessage(
        type=MessageKind.INTERACTIVE,
        text_content=content,
        interactive_data=InteractiveData(
            kind=InteractiveKind.BUTTONS,
            text=text,
            buttons=tuple(buttons),
        ),
    )


def parse_buttons_response(body: Mapping[str, Any]) -> NormalizedMessage:
    selected_id = pick_str(body, "SelectedButtonId")
    selected_text = pick_str(body, "SelectedDisplayText") or selected_id or ""
    return NormalizedMessage(
        type=MessageKind.INTERACTIVE,
        text_content=f"🔘 {selected_text}",
        interactive_data=InteractiveData(
            kind=InteractiveKind.BUTTONS_RESPONSE,
            selected_id=selected_id,
            selected_title=selected_text,
        ),
    )


def parse_list(body: Mapping[str, Any]) -> NormalizedMessage:
    title = pick_str(body, "Title") or ""
    description = pick_str(body, "Description") or ""
    button_text = pick_str(body, "ButtonText") or DEFAULT_LIST_BUTTON_TEXT

    lines = [title + (f"\n{description}" if description else ""), "", f"📋 {button_text}"]
    sections: list[dict[str, Any]] = []
    for section in pick_list(body, "Sections"):
        section_title = pick_str(section, "Title")
        if section_title:
            lines.append(f"• {section_title}")
        sections.append(
            {
                "title": section_title,
                "rows": [
                    {
                        "id": pick_str(row, "RowId"),
                        "title": pick_str(row, "Title"),
                        "description": pick_str(row, "Description"),
                    }
                    for row in pick_list(section, "Rows")
                ],
            }
        )

    return NormalizedMessage(
        type=MessageKind.INTERACTIVE,
        text_content="\n".join(lines),
        interactive_data=InteractiveData(
            kind=InteractiveKind.LIST,
            text=f"{title}\n{description}".strip(),
            button_text=button_text,
            sections=tuple(sections),
        ),
    )


def parse_list_response(body: Mapping[str, Any]) -> NormalizedMessage:
    reply = pick_mapping(body, "SingleSelectReply")
    selected_row = pick_str(reply, "SelectedRowId")
    title = pick_str(body, "Title") or selected_row or ""
    return NormalizedMessage(
        type=MessageKind.INTERACTIVE,
        text_content=f"📋 {title}",
        interactive_data=InteractiveData(
            kind=InteractiveKind.LIST_RESPONSE,
            selected_id=selected_row,
            selected_title=title,
        ),
    )


def _template_button_label(button: Any) -> str:
    for key, icon in (("QuickReplyButton", "🔘"), ("UrlButton", "🔗"), ("CallButton", "📞")):
        inner = pick_mapping(button, key)
        if inner is not None:
            return f"{icon} {pick_str(inner, 'DisplayText') or ''}"
    return f"🔘 {DEFAULT_BUTTON_LABEL}"


def parse_template(body: Mapping[str, Any]) -> NormalizedMessage:
    """Template hidratado: *título*, corpo, _rodapé_ e botões."""
    hydrated = pick_mapping(body, "HydratedTemplate", "HydratedFourRowTemplate")
    if hydrated is None:
        return NormalizedMessage(type=MessageKind.TEMPLATE, text_content=TEMPLATE_FALLBACK_TEXT)

    title = pick_str(hydrated, "HydratedTitleText") or ""
    body_text = pick_str(hydrated, "HydratedContentText") or ""
    footer = pick_str(hydrated, "HydratedFooterText") or ""
    buttons = pick_list(hydrated, "HydratedButtons")

    content = ""
    if title:
        content += f"*{title}*\n"
    content += body_text
    if footer:
        content += f"\n\n_{footer}_"
    if buttons:
        content += "\n\n" + "\n".join(_template_button_label(button) for button in buttons)

    return NormalizedMessage(
        type=MessageKind.TEMPLATE,
        text_content=content.strip() or TEMPLATE_FALLBACK_TEXT,
    )
