"""Cliente HTTP da API REST do gateway WUZAPI.

Implementa as consultas usadas na resolução de identidade (linked device
id -> telefone, nome de grupo) e o envio de respostas de texto do bot.

- Consulta de LID: uma tentativa, cache por (credencial, lid) com TTL
- Info de grupo: até ``max_retries + 1`` tentativas com backoff
  exponencial, limitada por semáforo de consultas simultâneas
- Nenhum token ou telefone completo vai para os logs
"""

from __future__ import annotations

import asyncio
import json
import logging
import time
from typing import TYPE_CHECKING, Any

from app.domain.jid import is_invalid_group_name
from app.infra.http import HttpClient, HttpClientConfig, HttpError
from config.logging import mask_identifier
from utils.errors import GatewayLookupError

if TYPE_CHECKING:
    from collections.abc import Callable

    import httpx

    from config.settings import WuzapiSettings

logger: logging.Logger = logging.getLogger(__name__)

_JID_SUFFIXES = ("@s.whatsapp.net", "@c.us")


class WuzapiGatewayClient(HttpClient):
    """Consultas e envio de texto no gateway, autenticados pelo token do tenant."""

    def __init__(
        self,
        settings: WuzapiSettings,
        config: HttpClientConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        super().__init__(
            config
            or HttpClientConfig(
                timeout_seconds=settings.request_timeout_seconds,
                max_retries=0,
            )
        )
        self._settings = settings
        self._clock = clock
        self._lid_cache: dict[str, tuple[str, float]] = {}
        self._group_semaphore = asyncio.Semaphore(settings.max_concurrent_lookups)

    async def resolve_linked_device_id(self, lid: str, credential: str) -> str | None:
        """Resolve ``<digits>@lid`` para o telefone (apenas dígitos).

        Raises:
            GatewayLookupError: Falha de rede ou status HTTP de erro.
        """
        if not lid or not credential:
            return None

        cache_key = f"{credential}:{lid}"
        cached = self._lid_cache.get(cache_key)
        if cached is not None:
            phone, expires_at = cached
            if expires_at > self._clock():
                return phone
            del self._lid_cache[cache_key]

        url = self._settings.endpoint(f"/user/lid/{lid}")
        try:
            response = await self.get(url, headers={"token": credential})
        except HttpError as exc:
            raise GatewayLookupError("lid_lookup_failed", exc.status_code) from exc
        _raise_for_status(response, "lid_lookup_failed")

        body = _json_body(response)
        data = body.get("data") if isinstance(body.get("data"), dict) else body
        jid = data.get("jid") or data.get("Jid") or data.get("JID")
        if not jid or not isinstance(jid, str):
            logger.info("lid_lookup_empty", extra={"lid": mask_identifier(lid)})
            return None

        phone = _strip_jid_suffix(jid)
        self._lid_cache[cache_key] = (phone, self._clock() + self._settings.lid_cache_ttl_seconds)
        logger.debug(
            "lid_resolved",
            extra={"lid": mask_identifier(lid), "phone": mask_identifier(phone)},
        )
        return phone

    async def fetch_group_name(self, group_id: str, credential: str) -> str | None:
        """Nome do grupo segundo ``/group/info``.

        Resposta sem nome válido encerra sem nova tentativa.

        Raises:
            GatewayLookupError: Todas as tentativas falharam.
        """
        if not group_id or not credential:
            return None

        attempts = self._settings.max_retries + 1
        last_error: Exception | None = None
        async with self._group_semaphore:
            for attempt in range(1, attempts + 1):
                try:
                    return await self._request_group_name(group_id, credential)
                except (HttpError, GatewayLookupError) as exc:
                    last_error = exc
                    logger.warning(
                        "group_info_attempt_failed",
                        extra={
                            "group": mask_identifier(group_id),
                            "attempt": attempt,
                            "max_attempts": attempts,
                            "error_type": type(exc).__name__,
                        },
                    )
                    if attempt < attempts:
                        await asyncio.sleep(self._settings.retry_base_seconds * 2 ** (attempt - 1))

        status_code = getattr(last_error, "status_code", None)
        raise GatewayLookupError("group_info_failed", status_code) from last_error

    async def _request_group_name(self, group_id: str, credential: str) -> str | None:
        response = await self.get(
            self._settings.endpoint("/group/info"),
            params={"groupJID": group_id},
            json={"GroupJID": group_id},
            headers={"Token": credential},
        )
        _raise_for_status(response, "group_info_failed")

        body = _json_body(response)
        nested = body.get("data") if isinstance(body.get("data"), dict) else {}
        inner = nested.get("data") if isinstance(nested.get("data"), dict) else {}
        name = inner.get("Name") or nested.get("Name") or body.get("Name")
        if not isinstance(name, str) or is_invalid_group_name(name):
            logger.info("group_info_without_name", extra={"group": mask_identifier(group_id)})
            return None
        return name.strip()

    async def send_text(self, credential: str, phone: str, body: str) -> dict[str, Any]:
        """Envia texto simples para ``phone`` (apenas dígitos).

        Raises:
            ValueError: Credencial ausente.
            GatewayLookupError: Falha de rede ou status HTTP de erro.
        """
        if not credential or not credential.strip():
            raise ValueError("credential é obrigatória para envio de texto")

        try:
            response = await self.post(
                self._settings.endpoint("/chat/send/text"),
                json={"Phone": phone, "Body": body},
                headers={"token": credential, "Content-Type": "application/json"},
                timeout_seconds=self._settings.reply_timeout_seconds,
            )
        except HttpError as exc:
            raise GatewayLookupError("send_text_failed", exc.status_code) from exc
        _raise_for_status(response, "send_text_failed")

        logger.info(
            "gateway_text_sent",
            extra={"phone": mask_identifier(phone), "status_code": response.status_code},
        )
        return _json_body(response)


def _raise_for_status(response: httpx.Response, message: str) -> None:
    if response.status_code >= 400:
        raise GatewayLookupError(message, response.status_code)


def _json_body(response: httpx.Response) -> dict[str, Any]:
    try:
        body = response.json()
    except json.JSONDecodeError as exc:
        raise GatewayLookupError("invalid_gateway_json", response.status_code) from exc
    return body if isinstance(body, dict) else {}


def _strip_jid_suffix(jid: str) -> str:
    for suffix in _JID_SUFFIXES:
        if jid.endswith(suffix):
            return jid[: -len(suffix)]
    return jid


def create_wuzapi_gateway_client(settings: WuzapiSettings | None = None) -> WuzapiGatewayClient:
    """Factory com settings do ambiente."""
    from config.settings import get_wuzapi_settings

    return WuzapiGatewayClient(settings or get_wuzapi_settings())
