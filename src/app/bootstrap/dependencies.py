"""Factories — criação de implementações concretas a partir das settings.

Este módulo centraliza o wiring do motor inbound: stores, gateway,
relay, broadcaster e o use case de roteamento.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from api.connectors.wuzapi import WuzapiGatewayClient, create_wuzapi_gateway_client
from app.bootstrap.clients import create_async_redis_client
from app.infra.broadcast import MemoryBroadcaster
from app.infra.relay import HttpRelay
from app.infra.stores import MemoryConversationStore, MemoryDedupeStore, RedisDedupeStore
from app.infra.tenants import StaticTenantDirectory
from app.services import ContactIdentityResolver, GroupNameResolver
from app.use_cases.wuzapi import PresenceCache, RouteInboundEventUseCase
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_inbound_settings,
    get_relay_settings,
    get_wuzapi_settings,
)

if TYPE_CHECKING:
    from app.protocols.bot_automation import BotAutomationProtocol
    from app.protocols.broadcast import BroadcastProtocol
    from app.protocols.conversation_store import ConversationStoreProtocol
    from app.protocols.dedupe import AsyncDedupeProtocol

logger = logging.getLogger(__name__)


def create_async_dedupe_store() -> AsyncDedupeProtocol:
    """Cria store de dedupe conforme DEDUPE_BACKEND (memory|redis)."""
    settings = get_dedupe_settings()

    if settings.backend == "redis":
        store: AsyncDedupeProtocol = RedisDedupeStore(create_async_redis_client())
        logger.info("dedupe_store_created", extra={"backend": "redis"})
        return store

    environment = get_base_settings().environment
    if environment != "development":
        logger.warning(
            "memory_store_in_non_dev",
            extra={"backend": "memory", "environment": environment},
        )
    logger.info("dedupe_store_created", extra={"backend": "memory"})
    return MemoryDedupeStore()


def create_tenant_directory() -> StaticTenantDirectory:
    """Diretório a partir de WUZAPI_TENANT_TOKENS; passthrough só em development."""
    wuzapi = get_wuzapi_settings()
    allow_unknown = get_base_settings().is_development
    logger.info(
        "tenant_directory_created",
        extra={"tenants": len(wuzapi.tenant_tokens), "allow_unknown": allow_unknown},
    )
    return StaticTenantDirectory(wuzapi.tenant_tokens, allow_unknown=allow_unknown)


def create_route_inbound_event_use_case(
    *,
    store: ConversationStoreProtocol | None = None,
    gateway: WuzapiGatewayClient | None = None,
    broadcaster: BroadcastProtocol | None = None,
    bot_automation: BotAutomationProtocol | None = None,
    dedupe: AsyncDedupeProtocol | None = None,
) -> RouteInboundEventUseCase:
    """Monta RouteInboundEventUseCase com as implementações configuradas.

    Colaboradores não informados usam os defaults do serviço: store e
    broadcaster em memória, gateway/relay HTTP e sem automação de bot.
    """
    inbound = get_inbound_settings()
    conversation_store = store or MemoryConversationStore()
    gateway_client = gateway or create_wuzapi_gateway_client()

    return RouteInboundEventUseCase(
        store=conversation_store,
        contact_resolver=ContactIdentityResolver(identity_lookup=gateway_client),
        group_name_resolver=GroupNameResolver(
            store=conversation_store,
            identity_lookup=gateway_client,
        ),
        broadcaster=broadcaster or MemoryBroadcaster(),
        relay=HttpRelay(get_relay_settings()),
        bot_automation=bot_automation,
        reply_sender=gateway_client,
        dedupe=dedupe or MemoryDedupeStore(),
        presence_cache=PresenceCache(max_entries=inbound.presence_cache_max_entries),
        fallback_id_policy=inbound.fallback_id_policy,
        dedupe_ttl_seconds=inbound.dedupe_ttl_seconds,
        local_timezone=inbound.local_timezone,
    )
