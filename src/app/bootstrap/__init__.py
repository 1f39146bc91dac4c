"""Bootstrap da aplicação — inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, get_route_inbound_event_use_case

    # Na inicialização do serviço
    initialize_app()

    # Use case compartilhado pelas requisições
    use_case = get_route_inbound_event_use_case()
"""

from __future__ import annotations

import logging
from functools import lru_cache

from app.observability import get_correlation_id, get_tenant_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_dedupe_settings,
    get_inbound_settings,
    get_relay_settings,
    get_wuzapi_settings,
)

STRICT_VALIDATION_ENVS = {"staging", "production"}

logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa logging estruturado JSON com correlation_id e tenant_id.

    Deve ser chamada uma vez no início do serviço.
    """
    settings = get_base_settings()
    configure_logging(
        level=settings.log_level,
        service_name=settings.service_name,
        correlation_id_getter=get_correlation_id,
        tenant_id_getter=get_tenant_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (nível DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{get_base_settings().service_name}_test",
        correlation_id_getter=get_correlation_id,
        tenant_id_getter=get_tenant_id,
    )


def collect_settings_errors() -> list[str]:
    """Erros de validação de todas as settings, prefixados pelo domínio."""
    base = get_base_settings()
    errors: list[str] = []
    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"dedupe: {error}" for error in get_dedupe_settings().validate(base))
    errors.extend(f"wuzapi: {error}" for error in get_wuzapi_settings().validate())
    errors.extend(f"inbound: {error}" for error in get_inbound_settings().validate())
    errors.extend(f"relay: {error}" for error in get_relay_settings().validate())
    return errors


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    environment = get_base_settings().environment
    strict_mode = environment in STRICT_VALIDATION_ENVS
    errors = collect_settings_errors()

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


# ──────────────────────────────────────────────────────────────────────────────
# Getters (lazy initialization com cache)
# ──────────────────────────────────────────────────────────────────────────────


@lru_cache(maxsize=1)
def get_async_dedupe_store():
    """Obtém store de dedupe assíncrono (singleton)."""
    from app.bootstrap.dependencies import create_async_dedupe_store

    return create_async_dedupe_store()


@lru_cache(maxsize=1)
def get_tenant_directory():
    """Obtém diretório de tenants (singleton)."""
    from app.bootstrap.dependencies import create_tenant_directory

    return create_tenant_directory()


@lru_cache(maxsize=1)
def get_route_inbound_event_use_case():
    """Obtém o use case de roteamento (singleton, mantém o cache de presença)."""
    from app.bootstrap.dependencies import create_route_inbound_event_use_case

    return create_route_inbound_event_use_case(dedupe=get_async_dedupe_store())
