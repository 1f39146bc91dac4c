"""Testes do DownstreamDispatcher."""

from __future__ import annotations

from dataclasses import replace
from unittest.mock import AsyncMock

import pytest

from app.constants.wuzapi import (
    RELAY_EVENT_MESSAGE_RECEIVED,
    RELAY_EVENT_MESSAGE_SENT,
    MessageKind,
)
from app.domain.automation import BotResponse
from app.domain.inbound_message import NormalizedMessage
from app.infra.broadcast import MemoryBroadcaster
from app.infra.stores import MemoryConversationStore
from app.use_cases.wuzapi.dispatch import DownstreamDispatcher, MessageDelivery
from tests.fakes.fake_wuzapi_collaborators import (
    TENANT,
    FakeBotAutomation,
    FakeRelay,
    FakeReplySender,
)

CONTACT = "5511999999999@s.whatsapp.net"


async def _delivery(
    store: MemoryConversationStore,
    *,
    direction: str = "incoming",
    bot_id: str | None = None,
    text: str = "Olá",
) -> MessageDelivery:
    conversation = await store.create_conversation(TENANT.tenant_id, CONTACT, "Ana")
    if bot_id:
        store.set_assigned_bot(conversation.id, bot_id)
        conversation = store.get_conversation(conversation.id)
    return MessageDelivery(
        conversation=conversation,
        wire_message_id="MSG1",
        message=NormalizedMessage(type=MessageKind.TEXT, text_content=text, direction=direction),
        timestamp="2024-01-01T09:00:00",
        is_external_bot=False,
        raw_event={"Info": {"ID": "MSG1"}},
    )


class TestPersistAndNotify:
    @pytest.mark.asyncio
    async def test_incoming_message_flow(self) -> None:
        store = MemoryConversationStore()
        broadcaster = MemoryBroadcaster()
        relay = FakeRelay()
        dispatcher = DownstreamDispatcher(store=store, broadcaster=broadcaster, relay=relay)
        delivery = await _delivery(store)

        result = await dispatcher.dispatch(delivery, TENANT)

        assert result.handled is True
        assert result.message_id is not None
        [persisted] = store.list_messages(delivery.conversation.id)
        assert persisted.content == "Olá"
        assert persisted.timestamp == "2024-01-01T09:00:00"
        assert [event.name for event in broadcaster.events] == ["new_message", "conversation_update"]
        [(tenant_id, event_type, payload)] = relay.events
        assert tenant_id == TENANT.tenant_id
        assert event_type == RELAY_EVENT_MESSAGE_RECEIVED
        assert payload["userID"] == TENANT.tenant_id
        assert payload["instanceName"] == "inst-1"
        assert payload["event"] == {"Info": {"ID": "MSG1"}}

    @pytest.mark.asyncio
    async def test_outgoing_message_relays_sent(self) -> None:
        store = MemoryConversationStore()
        relay = FakeRelay()
        dispatcher = DownstreamDispatcher(store=store, relay=relay)

        await dispatcher.dispatch(await _delivery(store, direction="outgoing"), TENANT)

        assert relay.events[0][1] == RELAY_EVENT_MESSAGE_SENT

    @pytest.mark.asyncio
    async def test_store_failure_stops_dispatch(self) -> None:
        store = MemoryConversationStore()
        delivery = await _delivery(store)
        store.store_message = AsyncMock(side_effect=RuntimeError("db down"))
        broadcaster = MemoryBroadcaster()
        relay = FakeRelay()
        dispatcher = DownstreamDispatcher(store=store, broadcaster=broadcaster, relay=relay)

        result = await dispatcher.dispatch(delivery, TENANT)

        assert result.handled is False
        assert result.error == "store_failed"
        assert broadcaster.events == []
        assert relay.events == []

    @pytest.mark.asyncio
    async def test_relay_failure_is_partial(self) -> None:
        store = MemoryConversationStore()
        dispatcher = DownstreamDispatcher(store=store, relay=FakeRelay(fail=True))

        result = await dispatcher.dispatch(await _delivery(store), TENANT)

        assert result.handled is True
        assert [step.name for step in result.failed_steps()] == ["relay"]

    @pytest.mark.asyncio
    async def test_muted_conversation_does_not_notify(self) -> None:
        store = MemoryConversationStore()
        broadcaster = MemoryBroadcaster()
        delivery = await _delivery(store)
        muted = replace(delivery, conversation=replace(delivery.conversation, is_muted=True))
        dispatcher = DownstreamDispatcher(store=store, broadcaster=broadcaster)

        await dispatcher.dispatch(muted, TENANT)

        [event] = broadcaster.named("new_message")
        assert event.notify is False


class TestBotPath:
    @pytest.mark.asyncio
    async def test_no_bot_without_assignment(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation()
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot)

        await dispatcher.dispatch(await _delivery(store), TENANT)

        assert bot.calls == []

    @pytest.mark.asyncio
    async def test_outgoing_never_reaches_bot(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation()
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot)

        await dispatcher.dispatch(await _delivery(store, direction="outgoing", bot_id="bot-1"), TENANT)

        assert bot.calls == []

    @pytest.mark.asyncio
    async def test_bot_reply_flow(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation(response=BotResponse(action="reply", content="Oi, Ana!", tokens_used=42))
        sender = FakeReplySender()
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot, reply_sender=sender)

        result = await dispatcher.dispatch(await _delivery(store, bot_id="bot-1"), TENANT)

        assert bot.calls == [
            "check_call_quota",
            "increment_call_usage",
            "forward",
            "track_token_usage",
            "check_message_quota",
            "increment_message_usage",
        ]
        assert bot.tokens == [42]
        assert sender.sent == [(TENANT.credential, "5511999999999", "Oi, Ana!")]
        bot_id, _message, _conversation, context = bot.forwarded[0]
        assert bot_id == "bot-1"
        assert context["userToken"] == TENANT.credential
        assert result.bot_skipped is False

    @pytest.mark.asyncio
    async def test_call_quota_denied_skips_bot(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation(call_allowed=False)
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot)

        result = await dispatcher.dispatch(await _delivery(store, bot_id="bot-1"), TENANT)

        assert result.handled is True
        assert result.bot_skipped is True
        assert result.quota_exceeded == {
            "quotaType": "max_bot_calls_per_month",
            "usage": 100,
            "limit": 100,
            "remaining": 0,
            "resetsAt": None,
        }
        assert bot.calls == ["check_call_quota"]
        assert len(store.list_messages(result.conversation_id)) == 1

    @pytest.mark.asyncio
    async def test_message_quota_denied_skips_reply(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation(
            message_allowed=False,
            response=BotResponse(action="reply", content="resposta"),
        )
        sender = FakeReplySender()
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot, reply_sender=sender)

        result = await dispatcher.dispatch(await _delivery(store, bot_id="bot-1"), TENANT)

        assert sender.sent == []
        assert "increment_message_usage" not in bot.calls
        assert result.bot_skipped is False
        assert result.steps[-1].reason == "message_quota_exceeded"

    @pytest.mark.asyncio
    async def test_forward_failure_keeps_message(self) -> None:
        store = MemoryConversationStore()
        bot = FakeBotAutomation(forward_error=TimeoutError("bot"))
        dispatcher = DownstreamDispatcher(store=store, bot_automation=bot)

        result = await dispatcher.dispatch(await _delivery(store, bot_id="bot-1"), TENANT)

        assert result.handled is True
        assert [step.name for step in result.failed_steps()] == ["bot_forward"]
        assert len(store.list_messages(result.conversation_id)) == 1
