"""Testes do ReplyLinker."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest

from app.constants.wuzapi import MessageKind
from app.domain.inbound_message import NormalizedMessage
from app.infra.stores import MemoryConversationStore
from app.use_cases.wuzapi.reply_linker import ReplyLinker


class TestReplyLinker:
    @pytest.mark.asyncio
    async def test_links_to_internal_id(self) -> None:
        store = MemoryConversationStore()
        conversation = await store.create_conversation("t1", "5511@s.whatsapp.net", None)
        quoted = await store.store_message(
            conversation.id, "Q1", NormalizedMessage(type=MessageKind.TEXT, text_content="oi")
        )

        linked = await ReplyLinker(store=store).link(conversation.id, "Q1")

        assert linked == quoted.id

    @pytest.mark.asyncio
    async def test_other_conversation_is_not_linked(self) -> None:
        store = MemoryConversationStore()
        first = await store.create_conversation("t1", "5511@s.whatsapp.net", None)
        second = await store.create_conversation("t1", "5522@s.whatsapp.net", None)
        await store.store_message(first.id, "Q1", NormalizedMessage(type=MessageKind.TEXT))

        assert await ReplyLinker(store=store).link(second.id, "Q1") is None

    @pytest.mark.asyncio
    async def test_no_quoted_id(self) -> None:
        store = AsyncMock()

        assert await ReplyLinker(store=store).link("c1", None) is None
        store.find_message_by_wire_id.assert_not_called()

    @pytest.mark.asyncio
    async def test_lookup_failure_returns_none(self) -> None:
        store = AsyncMock()
        store.find_message_by_wire_id.side_effect = RuntimeError("timeout")

        assert await ReplyLinker(store=store).link("c1", "Q1") is None
