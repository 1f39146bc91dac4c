"""Broadcast de tempo real."""

from .memory_broadcaster import BroadcastEvent, MemoryBroadcaster

__all__ = ["BroadcastEvent", "MemoryBroadcaster"]
