"""Protocolo de envio de respostas de texto pelo gateway."""

from __future__ import annotations

from typing import Any, Protocol


class ReplySenderProtocol(Protocol):
    """Envia texto para um telefone usando a credencial do tenant."""

    async def send_text(self, credential: str, phone: str, body: str) -> dict[str, Any]: ...
