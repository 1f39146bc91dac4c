"""Relay de eventos para o webhook de saída configurado.

Payloads no formato do gateway (com ``event`` ou ``type == "Message"``)
seguem como vieram; os demais são embrulhados em
``{id, event, timestamp, data}``. Com segredo configurado, o corpo é
assinado em ``X-Webhook-Signature`` (``sha256=<hex>``).
"""

from __future__ import annotations

import hashlib
import hmac
import json
import logging
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.infra.http import HttpClient, HttpClientConfig, HttpError

if TYPE_CHECKING:
    from config.settings import RelaySettings

logger = logging.getLogger(__name__)


def sign_payload(body: bytes, secret: str) -> str:
    """Assinatura HMAC-SHA256 do corpo serializado."""
    digest = hmac.new(secret.encode("utf-8"), body, hashlib.sha256).hexdigest()
    return f"sha256={digest}"


def build_relay_body(event_type: str, payload: dict[str, Any], delivery_id: str) -> dict[str, Any]:
    if payload.get("event") or payload.get("type") == "Message":
        return payload
    return {
        "id": delivery_id,
        "event": event_type,
        "timestamp": datetime.now(UTC).isoformat(),
        "data": payload,
    }


class HttpRelay(HttpClient):
    """RelayProtocol via POST; 4xx não é repetido, 429/5xx sim."""

    def __init__(self, settings: RelaySettings, config: HttpClientConfig | None = None) -> None:
        super().__init__(
            config
            or HttpClientConfig(
                timeout_seconds=settings.timeout_seconds,
                max_retries=settings.max_retries,
                backoff_base_seconds=1.0,
            )
        )
        self._settings = settings

    async def send_event(self, tenant_id: str, event_type: str, payload: dict[str, Any]) -> None:
        if not self._settings.enabled:
            logger.debug("relay_disabled", extra={"event_type": event_type})
            return

        delivery_id = str(uuid.uuid4())
        body = build_relay_body(event_type, payload, delivery_id)
        headers = {
            "Content-Type": "application/json",
            "X-Delivery-Id": delivery_id,
            "X-Event-Type": event_type,
        }
        serialized = json.dumps(body, separators=(",", ":"), default=str).encode("utf-8")
        if self._settings.secret:
            headers["X-Webhook-Signature"] = sign_payload(serialized, self._settings.secret)

        response = await self.post(self._settings.url, headers=headers, content=serialized)
        if response.status_code >= 400:
            logger.warning(
                "relay_rejected",
                extra={
                    "tenant_id": tenant_id,
                    "event_type": event_type,
                    "status_code": response.status_code,
                },
            )
            raise HttpError("relay_rejected", status_code=response.status_code)

        logger.info(
            "relay_delivered",
            extra={
                "tenant_id": tenant_id,
                "event_type": event_type,
                "delivery_id": delivery_id,
                "status_code": response.status_code,
            },
        )
