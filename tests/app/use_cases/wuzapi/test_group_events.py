"""Testes de GroupInfo e JoinedGroup."""

from __future__ import annotations

import pytest

from app.constants.wuzapi import NameSource
from app.infra.broadcast import MemoryBroadcaster
from app.infra.stores import MemoryConversationStore
from app.services.contact_identity import ContactIdentityResolver
from app.services.group_name_resolver import GroupNameResolver
from app.use_cases.wuzapi import RouteInboundEventUseCase
from tests.fakes.fake_wuzapi_collaborators import TENANT, FakeIdentityLookup, message_event

GROUP_ID = "120363043775639115@g.us"


def _use_case(store, broadcaster, lookup=None) -> RouteInboundEventUseCase:
    return RouteInboundEventUseCase(
        store=store,
        contact_resolver=ContactIdentityResolver(identity_lookup=lookup),
        group_name_resolver=GroupNameResolver(store=store, identity_lookup=lookup),
        broadcaster=broadcaster,
    )


class TestGroupEvents:
    @pytest.mark.asyncio
    async def test_joined_group_creates_conversation(self) -> None:
        store = MemoryConversationStore()
        broadcaster = MemoryBroadcaster()
        use_case = _use_case(store, broadcaster)

        result = await use_case.execute(
            message_event({"GroupJID": GROUP_ID, "Name": "Parceiros"}, event_type="JoinedGroup"),
            TENANT,
        )

        assert result.handled is True
        assert result.extra == {"groupJid": GROUP_ID, "name": "Parceiros", "updated": False}
        conversation = await store.find_conversation(TENANT.tenant_id, GROUP_ID)
        assert conversation.contact_name == "Parceiros"
        assert broadcaster.events == []

    @pytest.mark.asyncio
    async def test_group_info_rename(self) -> None:
        store = MemoryConversationStore()
        broadcaster = MemoryBroadcaster()
        conversation = await store.create_conversation(
            TENANT.tenant_id, GROUP_ID, "Parceiros", name_source=NameSource.WEBHOOK
        )
        use_case = _use_case(store, broadcaster)

        result = await use_case.execute(
            message_event({"GroupJID": GROUP_ID, "Name": "Parceiros 2025"}, event_type="GroupInfo"),
            TENANT,
        )

        assert result.extra["updated"] is True
        assert store.get_conversation(conversation.id).contact_name == "Parceiros 2025"
        [event] = broadcaster.named("conversation_update")
        assert event.payload["contact_name"] == "Parceiros 2025"
        assert event.payload["name_source"] == "webhook"

    @pytest.mark.asyncio
    async def test_group_info_without_name_uses_gateway(self) -> None:
        store = MemoryConversationStore()
        lookup = FakeIdentityLookup(group_names={GROUP_ID: "Suporte"})
        use_case = _use_case(store, MemoryBroadcaster(), lookup)

        result = await use_case.execute(
            message_event({"GroupJID": GROUP_ID}, event_type="GroupInfo"), TENANT
        )

        assert result.extra["name"] == "Suporte"
        assert lookup.group_calls == [(GROUP_ID, TENANT.credential)]

    @pytest.mark.asyncio
    async def test_missing_group_jid(self) -> None:
        use_case = _use_case(MemoryConversationStore(), MemoryBroadcaster())

        result = await use_case.execute(message_event({"Name": "x"}, event_type="GroupInfo"), TENANT)

        assert result.handled is False
        assert result.error == "missing_group_jid"

    @pytest.mark.asyncio
    async def test_non_group_jid(self) -> None:
        use_case = _use_case(MemoryConversationStore(), MemoryBroadcaster())

        result = await use_case.execute(
            message_event({"GroupJID": "5511@s.whatsapp.net"}, event_type="GroupInfo"), TENANT
        )

        assert result.error == "invalid_group_jid"
