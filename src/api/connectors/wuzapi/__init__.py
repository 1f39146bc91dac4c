"""Conector WUZAPI — único ponto de IO com o gateway.

Responsabilidades:
- Webhook (parse dos formatos de corpo, credencial do tenant)
- Cliente HTTP da API REST (LID, info de grupo, envio de texto)
"""

from .gateway_client import WuzapiGatewayClient, create_wuzapi_gateway_client
from .webhook import (
    InvalidEventStructureError,
    InvalidJsonError,
    WebhookRequest,
    WebhookRequestError,
    parse_webhook_request,
)

__all__ = [
    "InvalidEventStructureError",
    "InvalidJsonError",
    "WebhookRequest",
    "WebhookRequestError",
    "WuzapiGatewayClient",
    "create_wuzapi_gateway_client",
    "parse_webhook_request",
]
