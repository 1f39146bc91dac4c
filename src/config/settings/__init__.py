"""Agregador de settings do motor de inbox.

Re-exporta as settings de cada módulo. Organização por domínio
para isolamento de mudanças.
"""

from __future__ import annotations

from config.settings.base import (
    BaseSettings,
    DedupeBackend,
    DedupeSettings,
    Environment,
    get_base_settings,
    get_dedupe_settings,
)
from config.settings.inbound import (
    FallbackIdPolicy,
    InboundSettings,
    get_inbound_settings,
)
from config.settings.relay import RelaySettings, get_relay_settings
from config.settings.wuzapi import (
    WUZAPI_DEFAULT_BASE_URL,
    WuzapiSettings,
    get_wuzapi_settings,
)

__all__ = [
    "WUZAPI_DEFAULT_BASE_URL",
    "BaseSettings",
    "DedupeBackend",
    "DedupeSettings",
    "Environment",
    "FallbackIdPolicy",
    "InboundSettings",
    "RelaySettings",
    "WuzapiSettings",
    "get_base_settings",
    "get_dedupe_settings",
    "get_inbound_settings",
    "get_relay_settings",
    "get_wuzapi_settings",
]
