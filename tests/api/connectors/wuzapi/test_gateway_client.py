"""Testes do WuzapiGatewayClient com httpx.MockTransport."""

from __future__ import annotations

import json

import httpx
import pytest

from api.connectors.wuzapi import WuzapiGatewayClient
from app.infra.http import HttpClientConfig
from config.settings import WuzapiSettings
from utils.errors import GatewayLookupError

BASE_URL = "https://gw.example.com"
CREDENTIAL = "tok-abcdef123456"
GROUP_ID = "120363043775639115@g.us"


class FakeClock:
    def __init__(self) -> None:
        self.now = 1000.0

    def __call__(self) -> float:
        return self.now


def _client(handler, clock=None, **settings) -> WuzapiGatewayClient:
    defaults = {"base_url": BASE_URL, "retry_base_seconds": 0, "max_retries": 2}
    return WuzapiGatewayClient(
        WuzapiSettings(**{**defaults, **settings}),
        HttpClientConfig(max_retries=0, transport=httpx.MockTransport(handler)),
        clock=clock or FakeClock(),
    )


class TestResolveLinkedDeviceId:
    @pytest.mark.asyncio
    async def test_resolves_and_strips_suffix(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {"jid": "5531994975641@s.whatsapp.net"}})

        client = _client(handler)

        phone = await client.resolve_linked_device_id("123456789", CREDENTIAL)

        assert phone == "5531994975641"
        assert requests[0].url.path == "/user/lid/123456789"
        assert requests[0].headers["token"] == CREDENTIAL

    @pytest.mark.asyncio
    async def test_cache_hit_and_expiry(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"JID": "5531994975641@c.us"})

        clock = FakeClock()
        client = _client(handler, clock, lid_cache_ttl_seconds=60)

        await client.resolve_linked_device_id("123", CREDENTIAL)
        await client.resolve_linked_device_id("123", CREDENTIAL)
        clock.now += 61
        await client.resolve_linked_device_id("123", CREDENTIAL)

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_cache_is_per_credential(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"jid": "5531994975641@s.whatsapp.net"})

        client = _client(handler)

        await client.resolve_linked_device_id("123", CREDENTIAL)
        await client.resolve_linked_device_id("123", "outro-token")

        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_empty_answer_is_not_cached(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"data": {}})

        client = _client(handler)

        assert await client.resolve_linked_device_id("123", CREDENTIAL) is None
        assert await client.resolve_linked_device_id("123", CREDENTIAL) is None
        assert len(calls) == 2

    @pytest.mark.asyncio
    async def test_http_error_raises_lookup_error(self) -> None:
        client = _client(lambda request: httpx.Response(401))

        with pytest.raises(GatewayLookupError) as exc_info:
            await client.resolve_linked_device_id("123", CREDENTIAL)

        assert exc_info.value.status_code == 401

    @pytest.mark.asyncio
    async def test_dropped_connection_raises_lookup_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadError("connection reset", request=request)

        client = _client(handler)

        with pytest.raises(GatewayLookupError, match="lid_lookup_failed") as exc_info:
            await client.resolve_linked_device_id("123", CREDENTIAL)

        assert exc_info.value.status_code is None

    @pytest.mark.asyncio
    async def test_missing_inputs(self) -> None:
        client = _client(lambda request: httpx.Response(500))

        assert await client.resolve_linked_device_id("", CREDENTIAL) is None
        assert await client.resolve_linked_device_id("123", "") is None


class TestFetchGroupName:
    @pytest.mark.asyncio
    async def test_nested_name(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"data": {"data": {"Name": "  Time Comercial "}}})

        client = _client(handler)

        name = await client.fetch_group_name(GROUP_ID, CREDENTIAL)

        assert name == "Time Comercial"
        assert requests[0].url.params["groupJID"] == GROUP_ID
        assert requests[0].headers["Token"] == CREDENTIAL
        assert json.loads(requests[0].content) == {"GroupJID": GROUP_ID}

    @pytest.mark.asyncio
    async def test_invalid_name_returns_none_without_retry(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={"Name": "120363043775639115"})

        client = _client(handler)

        assert await client.fetch_group_name(GROUP_ID, CREDENTIAL) is None
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_then_succeeds(self) -> None:
        responses = iter(
            [httpx.Response(502), httpx.Response(200, json={"data": {"Name": "Suporte"}})]
        )
        client = _client(lambda request: next(responses))

        assert await client.fetch_group_name(GROUP_ID, CREDENTIAL) == "Suporte"

    @pytest.mark.asyncio
    async def test_all_attempts_fail(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(503)

        client = _client(handler, max_retries=1)

        with pytest.raises(GatewayLookupError) as exc_info:
            await client.fetch_group_name(GROUP_ID, CREDENTIAL)

        assert str(exc_info.value) == "group_info_failed"
        assert exc_info.value.status_code == 503
        assert len(calls) == 2


    @pytest.mark.asyncio
    async def test_dropped_connection_on_every_attempt(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            raise httpx.RemoteProtocolError("peer closed", request=request)

        client = _client(handler, max_retries=1)

        with pytest.raises(GatewayLookupError, match="group_info_failed"):
            await client.fetch_group_name(GROUP_ID, CREDENTIAL)

        assert len(calls) == 2

class TestSendText:
    @pytest.mark.asyncio
    async def test_posts_text(self) -> None:
        requests: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return httpx.Response(200, json={"success": True, "data": {"Id": "3EB0"}})

        client = _client(handler)

        result = await client.send_text(CREDENTIAL, "5531994975641", "Olá!")

        assert result["success"] is True
        assert requests[0].url.path == "/chat/send/text"
        assert json.loads(requests[0].content) == {"Phone": "5531994975641", "Body": "Olá!"}

    @pytest.mark.asyncio
    async def test_requires_credential(self) -> None:
        client = _client(lambda request: httpx.Response(200, json={}))

        with pytest.raises(ValueError):
            await client.send_text(" ", "5531994975641", "Olá!")

    @pytest.mark.asyncio
    async def test_rejection(self) -> None:
        client = _client(lambda request: httpx.Response(400, json={"error": "invalid phone"}))

        with pytest.raises(GatewayLookupError, match="send_text_failed"):
            await client.send_text(CREDENTIAL, "x", "Olá!")
