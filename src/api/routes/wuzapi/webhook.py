"""Endpoint de webhook do gateway WUZAPI.

Endpoints:
- POST /webhook/wuzapi: recebimento de eventos inbound

Fluxo:
1. Parse do corpo (JSON atual, JSON legado ou form com jsonData)
2. Credencial do tenant (header ``token``/``x-user-token``, corpo)
3. Roteamento pelo use case; o resultado volta no corpo da resposta

Falhas de processamento nunca viram 5xx: o gateway reentregaria o evento.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse

from api.connectors.wuzapi.webhook import WebhookRequestError, parse_webhook_request
from app.bootstrap import get_route_inbound_event_use_case, get_tenant_directory
from app.observability import (
    bind_tenant,
    get_correlation_id,
    reset_correlation_id,
    reset_tenant,
    set_correlation_id,
)
from config.logging import mask_identifier

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", response_model=None)
async def receive_webhook(
    request: Request,
    use_case: Any = Depends(get_route_inbound_event_use_case),
    tenant_directory: Any = Depends(get_tenant_directory),
) -> Response | dict[str, Any]:
    """Recebimento de eventos do gateway.

    Returns:
        InboundEventResult serializado, ou 400 para corpo inválido.
    """
    token = set_correlation_id(request.headers.get("x-correlation-id"))
    try:
        raw_body = await request.body()
        try:
            webhook = parse_webhook_request(
                raw_body,
                dict(request.headers),
                request.headers.get("content-type"),
            )
        except WebhookRequestError as exc:
            logger.warning(
                "webhook_rejected",
                extra={"channel": "wuzapi", "reason": str(exc)},
            )
            return JSONResponse(
                content={"handled": False, "error": str(exc)},
                status_code=status.HTTP_400_BAD_REQUEST,
            )

        event_type = webhook.envelope.get("type")
        logger.info(
            "webhook_received",
            extra={
                "channel": "wuzapi",
                "event_type": event_type,
                "has_credential": bool(webhook.credential),
                "correlation_id": get_correlation_id(),
            },
        )

        tenant = await tenant_directory.resolve(webhook.credential or "")
        if tenant is None:
            logger.warning(
                "webhook_tenant_not_found",
                extra={"channel": "wuzapi", "token": mask_identifier(webhook.credential)},
            )
            return {"handled": False, "type": event_type, "error": "tenant_not_found"}

        tenant_token = bind_tenant(tenant.tenant_id)
        try:
            result = await use_case.execute(webhook.envelope, tenant)
        finally:
            reset_tenant(tenant_token)
        logger.info(
            "webhook_processed",
            extra={
                "channel": "wuzapi",
                "tenant_id": tenant.tenant_id,
                "event_type": result.event_type,
                "handled": result.handled,
                "conversation_id": result.conversation_id,
                "reason": result.reason,
            },
        )
        return result.to_dict()
    finally:
        reset_correlation_id(token)
