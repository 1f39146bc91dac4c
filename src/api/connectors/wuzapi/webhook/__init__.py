"""Recebimento de webhooks do gateway."""

from .receive import (
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
    "parse_webhook_request",
]
