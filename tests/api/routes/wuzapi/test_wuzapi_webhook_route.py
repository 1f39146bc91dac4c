"""Testes do endpoint POST /webhook/wuzapi."""

from __future__ import annotations

import json
from urllib.parse import urlencode

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from api.routes import create_api_router
from app.bootstrap import get_route_inbound_event_use_case, get_tenant_directory
from app.infra.broadcast import MemoryBroadcaster
from app.infra.stores import MemoryConversationStore
from app.infra.tenants import StaticTenantDirectory
from app.services.contact_identity import ContactIdentityResolver
from app.services.group_name_resolver import GroupNameResolver
from app.use_cases.wuzapi import RouteInboundEventUseCase
from tests.fakes.fake_wuzapi_collaborators import FakeIdentityLookup, FakeRelay

WEBHOOK_PATH = "/webhook/wuzapi/"
TOKEN = "tok-abcdef123456"
EVENT = {
    "Info": {
        "ID": "MSG1",
        "Chat": "5511999999999@s.whatsapp.net",
        "Sender": "5511999999999@s.whatsapp.net",
        "IsFromMe": False,
        "PushName": "Ana",
        "Timestamp": "2024-01-01T12:00:00Z",
    },
    "Message": {"conversation": "Olá"},
}


@pytest.fixture
def store() -> MemoryConversationStore:
    return MemoryConversationStore()


@pytest.fixture
def relay() -> FakeRelay:
    return FakeRelay()


@pytest.fixture
def client(store: MemoryConversationStore, relay: FakeRelay) -> TestClient:
    lookup = FakeIdentityLookup()
    use_case = RouteInboundEventUseCase(
        store=store,
        contact_resolver=ContactIdentityResolver(identity_lookup=lookup),
        group_name_resolver=GroupNameResolver(store=store, identity_lookup=lookup),
        broadcaster=MemoryBroadcaster(),
        relay=relay,
    )
    directory = StaticTenantDirectory([(TOKEN, "tenant-1")])

    app = FastAPI()
    app.include_router(create_api_router())
    app.dependency_overrides[get_route_inbound_event_use_case] = lambda: use_case
    app.dependency_overrides[get_tenant_directory] = lambda: directory
    return TestClient(app)


class TestWuzapiWebhookRoute:
    def test_message_is_routed(self, client: TestClient, store, relay) -> None:
        response = client.post(
            WEBHOOK_PATH,
            json={"type": "Message", "event": EVENT},
            headers={"token": TOKEN},
        )

        assert response.status_code == 200
        body = response.json()
        assert body["type"] == "Message"
        assert body["conversationId"]
        assert body["messageId"]
        messages = store.list_messages(body["conversationId"])
        assert [message.content for message in messages] == ["Olá"]
        assert relay.events[0][0] == "tenant-1"

    def test_form_encoded_body(self, client: TestClient) -> None:
        body = urlencode(
            {"jsonData": json.dumps({"type": "Message", "event": EVENT}), "token": TOKEN}
        )

        response = client.post(
            WEBHOOK_PATH,
            content=body,
            headers={"content-type": "application/x-www-form-urlencoded"},
        )

        assert response.status_code == 200
        assert response.json()["type"] == "Message"

    def test_invalid_json_is_400(self, client: TestClient) -> None:
        response = client.post(
            WEBHOOK_PATH,
            content=b"{quebrado",
            headers={"content-type": "application/json", "token": TOKEN},
        )

        assert response.status_code == 400
        assert response.json() == {"handled": False, "error": "invalid_json"}

    def test_unknown_tenant(self, client: TestClient) -> None:
        response = client.post(
            WEBHOOK_PATH,
            json={"type": "Message", "event": EVENT},
            headers={"token": "desconhecido"},
        )

        assert response.status_code == 200
        assert response.json() == {
            "handled": False,
            "type": "Message",
            "error": "tenant_not_found",
        }

    def test_unhandled_type_is_still_200(self, client: TestClient) -> None:
        response = client.post(
            WEBHOOK_PATH,
            json={"type": "CallOffer", "event": {"From": "x"}},
            headers={"token": TOKEN},
        )

        assert response.status_code == 200
        assert response.json()["type"] == "CallOffer"
        assert response.json()["reason"] == "unhandled_event_type"
