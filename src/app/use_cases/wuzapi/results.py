"""Resultados estruturados do processamento de eventos inbound.

Todo evento termina em um InboundEventResult; falhas de colaboradores
ficam registradas em ``steps`` em vez de subir como exceção.
"""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Literal

StepStatus = Literal["ok", "failed", "skipped"]


@dataclass(frozen=True, slots=True)
class DispatchStep:
    """Resultado de uma etapa de dispatch (persistência, broadcast, relay, bot)."""

    name: str
    status: StepStatus
    reason: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"name": self.name, "status": self.status}
        if self.reason:
            data["reason"] = self.reason
        return data


@dataclass(frozen=True, slots=True)
class InboundEventResult:
    """Resultado de um evento do gateway."""

    handled: bool
    event_type: str | None = None
    conversation_id: str | None = None
    message_id: str | None = None
    ignored: bool = False
    reason: str | None = None
    error: str | None = None
    edited: bool | None = None
    deleted: bool | None = None
    bot_skipped: bool = False
    quota_exceeded: dict[str, Any] | None = None
    steps: tuple[DispatchStep, ...] = ()
    extra: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def unhandled(cls, event_type: str | None, error: str, **extra: Any) -> InboundEventResult:
        return cls(handled=False, event_type=event_type, error=error, extra=dict(extra))

    @classmethod
    def ignored_event(cls, event_type: str | None, reason: str, **fields: Any) -> InboundEventResult:
        return cls(handled=True, event_type=event_type, ignored=True, reason=reason, **fields)

    def with_event_type(self, event_type: str | None) -> InboundEventResult:
        return replace(self, event_type=event_type)

    def failed_steps(self) -> list[DispatchStep]:
        return [step for step in self.steps if step.status == "failed"]

    def to_dict(self) -> dict[str, Any]:
        """Formato devolvido pela rota HTTP (campos vazios omitidos)."""
        data: dict[str, Any] = {"handled": self.handled}
        optional = {
            "type": self.event_type,
            "conversationId": self.conversation_id,
            "messageId": self.message_id,
            "reason": self.reason,
            "error": self.error,
            "edited": self.edited,
            "deleted": self.deleted,
            "quotaExceeded": self.quota_exceeded,
        }
        data.update({key: value for key, value in optional.items() if value is not None})
        if self.ignored:
            data["ignored"] = True
        if self.bot_skipped:
            data["botSkipped"] = True
        if self.steps:
            data["steps"] = [step.to_dict() for step in self.steps]
        data.update(self.extra)
        return data
