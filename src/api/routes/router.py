"""Montagem das rotas HTTP do motor de inbox.

Health/readiness ficam na raiz; o webhook do gateway fica sob
``WUZAPI_WEBHOOK_PREFIX`` (o gateway é configurado para postar em
``/webhook/wuzapi/``).
"""

from __future__ import annotations

from fastapi import APIRouter

from api.routes.health.router import router as health_router
from api.routes.wuzapi.router import router as wuzapi_router

WUZAPI_WEBHOOK_PREFIX = "/webhook/wuzapi"


def create_api_router(*, webhook_prefix: str = WUZAPI_WEBHOOK_PREFIX) -> APIRouter:
    """Router raiz com health e webhook WUZAPI registrados."""
    api_router = APIRouter()
    api_router.include_router(health_router, tags=["health"])
    api_router.include_router(wuzapi_router, prefix=webhook_prefix, tags=["wuzapi"])
    return api_router
