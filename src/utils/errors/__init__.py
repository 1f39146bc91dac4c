"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    ConversationStoreError,
    GatewayLookupError,
    InfrastructureError,
    RedisConnectionError,
)

__all__ = [
    "ConversationStoreError",
    "GatewayLookupError",
    "InfrastructureError",
    "RedisConnectionError",
]
