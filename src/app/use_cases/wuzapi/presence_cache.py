"""Cache de presença (digitando/online) por contato.

Único estado mutável compartilhado entre requisições. Limitado a
``max_entries`` com despejo LRU; cada atualização sobrescreve a anterior.
Informativo apenas: nenhuma decisão de persistência consulta este cache.
"""

from __future__ import annotations

from collections import OrderedDict
from dataclasses import dataclass

DEFAULT_MAX_ENTRIES = 10_000


@dataclass(frozen=True, slots=True)
class PresenceEntry:
    state: str
    timestamp: str | int | float | None = None


class PresenceCache:
    """Mapa contato -> último estado de presença conhecido (LRU)."""

    def __init__(self, max_entries: int = DEFAULT_MAX_ENTRIES) -> None:
        if max_entries < 1:
            raise ValueError("max_entries deve ser >= 1")
        self._max_entries = max_entries
        self._entries: OrderedDict[str, PresenceEntry] = OrderedDict()

    def update(self, key: str, state: str, timestamp: str | int | float | None = None) -> None:
        self._entries[key] = PresenceEntry(state=state, timestamp=timestamp)
        self._entries.move_to_end(key)
        while len(self._entries) > self._max_entries:
            self._entries.popitem(last=False)

    def get(self, key: str) -> PresenceEntry | None:
        entry = self._entries.get(key)
        if entry is not None:
            self._entries.move_to_end(key)
        return entry

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries
