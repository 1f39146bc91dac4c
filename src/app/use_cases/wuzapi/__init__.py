"""Use cases do inbound WUZAPI."""

from .dispatch import DownstreamDispatcher, MessageDelivery
from .presence_cache import PresenceCache
from .protocol_mutations import ProtocolStateMutator
from .reply_linker import ReplyLinker
from .results import DispatchStep, InboundEventResult
from .route_inbound_event import RouteInboundEventUseCase

__all__ = [
    "DispatchStep",
    "DownstreamDispatcher",
    "InboundEventResult",
    "MessageDelivery",
    "PresenceCache",
    "ProtocolStateMutator",
    "ReplyLinker",
    "RouteInboundEventUseCase",
]
