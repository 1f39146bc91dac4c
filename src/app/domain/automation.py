"""Decisões de cota e respostas do bot de automação."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class QuotaGate:
    """Decisão de cota obtida do ledger externo (consumida, nunca alterada)."""

    allowed: bool
    quota_type: str
    usage: int = 0
    limit: int = 0
    remaining: int = 0
    resets_at: str | None = None

    def to_payload(self) -> dict[str, Any]:
        """Formato anexado ao resultado quando a cota é negada."""
        return {
            "quotaType": self.quota_type,
            "usage": self.usage,
            "limit": self.limit,
            "remaining": self.remaining,
            "resetsAt": self.resets_at,
        }


@dataclass(frozen=True, slots=True)
class BotResponse:
    """Instrução devolvida pelo bot após receber a mensagem."""

    action: str = "none"
    content: str | None = None
    tokens_used: int = 0

    @property
    def wants_reply(self) -> bool:
        return self.action == "reply" and bool(self.content)
