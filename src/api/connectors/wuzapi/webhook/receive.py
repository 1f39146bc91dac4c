"""Parse inicial do webhook do gateway (sem PII).

O gateway entrega o mesmo evento em três formatos de corpo:

1. JSON atual: ``{"event": {...}, "type": "Message", "userID", "token"}``
2. JSON legado: ``{"data": {...}, "event": "Message"}``
3. Form: campos soltos com o evento serializado em ``jsonData``

Todos viram o envelope ``{type, data, timestamp}`` consumido pelo router.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any
from urllib.parse import parse_qsl

if TYPE_CHECKING:
    from collections.abc import Mapping

logger = logging.getLogger(__name__)

DEFAULT_EVENT_TYPE = "Message"
_TOKEN_HEADERS = ("token", "x-user-token")


class WebhookRequestError(ValueError):
    """Erro base para falhas de webhook."""


class InvalidJsonError(WebhookRequestError):
    """JSON inválido no payload do webhook."""


class InvalidEventStructureError(WebhookRequestError):
    """Corpo sem dados de evento reconhecíveis."""


@dataclass(frozen=True, slots=True)
class WebhookRequest:
    """Evento extraído do corpo e credencial do tenant (se houver)."""

    envelope: dict[str, Any]
    credential: str | None


def parse_webhook_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    content_type: str | None = None,
) -> WebhookRequest:
    """Parseia o corpo e extrai a credencial do tenant.

    Credencial por prioridade: header ``token``/``x-user-token``, campo
    ``token`` do corpo e, por último, ``userID``.

    Raises:
        InvalidJsonError: JSON inválido ou corpo que não é objeto
        InvalidEventStructureError: Nenhum dos formatos reconhecidos
    """
    body = _decode_body(raw_body, content_type)
    envelope = _extract_envelope(body)
    return WebhookRequest(envelope=envelope, credential=_extract_credential(body, headers))


def _decode_body(raw_body: bytes, content_type: str | None) -> dict[str, Any]:
    if content_type and "application/x-www-form-urlencoded" in content_type:
        return dict(parse_qsl(raw_body.decode("utf-8", errors="replace"), keep_blank_values=True))
    try:
        body = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise InvalidJsonError("invalid_json") from exc
    if not isinstance(body, dict):
        raise InvalidJsonError("payload_not_object")
    return body


def _extract_envelope(body: Mapping[str, Any]) -> dict[str, Any]:
    timestamp = body.get("timestamp")
    event = body.get("event")

    if isinstance(event, dict):
        return {"type": body.get("type") or DEFAULT_EVENT_TYPE, "data": event, "timestamp": timestamp}

    if isinstance(body.get("data"), dict):
        event_type = event if isinstance(event, str) and event else body.get("type")
        return {"type": event_type or DEFAULT_EVENT_TYPE, "data": body["data"], "timestamp": timestamp}

    raw_json = body.get("jsonData")
    if isinstance(raw_json, str) and raw_json:
        try:
            parsed = json.loads(raw_json)
        except json.JSONDecodeError:
            logger.warning("webhook_json_data_invalid")
            parsed = None
        if isinstance(parsed, dict):
            data = parsed.get("event") or parsed.get("data") or parsed
            event_type = parsed.get("type") or parsed.get("event")
            if isinstance(data, dict):
                return {
                    "type": event_type if isinstance(event_type, str) else DEFAULT_EVENT_TYPE,
                    "data": data,
                    "timestamp": parsed.get("timestamp", timestamp),
                }

    logger.warning(
        "webhook_invalid_structure",
        extra={"keys": sorted(str(key) for key in body)[:20]},
    )
    raise InvalidEventStructureError("invalid_event_structure")


def _extract_credential(body: Mapping[str, Any], headers: Mapping[str, str]) -> str | None:
    lowered = {key.lower(): value for key, value in headers.items()}
    for header in _TOKEN_HEADERS:
        if lowered.get(header):
            return lowered[header]
    for field in ("token", "userID", "userId"):
        value = body.get(field)
        if isinstance(value, str) and value:
            return value
    return None
