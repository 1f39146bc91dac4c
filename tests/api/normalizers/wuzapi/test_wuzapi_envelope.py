"""Testes do adaptador de formato dos eventos WUZAPI."""

from __future__ import annotations

import pytest

from api.normalizers.wuzapi import (
    MalformedEventError,
    MissingInfoError,
    parse_event_envelope,
    split_message_event,
    synthesize_fallback_id,
)
from api.normalizers.wuzapi.envelope import FALLBACK_ID_PREFIX, FINGERPRINT_ID_PREFIX


class TestParseEventEnvelope:
    def test_accepts_lowercase_envelope(self) -> None:
        envelope = parse_event_envelope({"type": "Message", "data": {"Info": {}}, "timestamp": 10})

        assert envelope.event_type == "Message"
        assert envelope.data == {"Info": {}}
        assert envelope.timestamp == 10

    def test_accepts_pascal_case_envelope(self) -> None:
        envelope = parse_event_envelope({"Type": "ReadReceipt", "Data": {"MessageIds": []}})

        assert envelope.event_type == "ReadReceipt"
        assert envelope.timestamp is None

    def test_rejects_non_object(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            parse_event_envelope(["not", "an", "object"])

        assert exc_info.value.reason == "payload_not_object"

    def test_rejects_missing_type(self) -> None:
        with pytest.raises(MalformedEventError) as exc_info:
            parse_event_envelope({"data": {}})

        assert exc_info.value.reason.startswith("invalid_envelope")

    def test_rejects_non_object_data(self) -> None:
        with pytest.raises(MalformedEventError):
            parse_event_envelope({"type": "Message", "data": "texto"})


class TestSplitMessageEvent:
    def test_nested_shape(self) -> None:
        data = {
            "Info": {
                "ID": "MSG1",
                "Chat": "5511999999999@s.whatsapp.net",
                "Sender": "5511999999999@s.whatsapp.net",
                "IsFromMe": False,
                "PushName": "Ana",
                "Timestamp": "2024-01-01T12:00:00Z",
            },
            "Message": {"conversation": "oi"},
        }

        info, content = split_message_event(data)

        assert info.wire_message_id == "MSG1"
        assert info.chat_id == "5511999999999@s.whatsapp.net"
        assert info.push_name == "Ana"
        assert info.direction == "incoming"
        assert info.has_fallback_id is False
        assert content == {"conversation": "oi"}

    def test_flat_camel_case_shape(self) -> None:
        data = {
            "id": "MSG2",
            "chat": "5511888888888@s.whatsapp.net",
            "fromMe": True,
            "message": {"conversation": "enviado"},
        }

        info, content = split_message_event(data)

        assert info.wire_message_id == "MSG2"
        assert info.from_me is True
        assert info.direction == "outgoing"
        assert content == {"conversation": "enviado"}

    def test_chat_falls_back_to_sender(self) -> None:
        info, _ = split_message_event({"Info": {"Id": "X", "Sender": "5511@s.whatsapp.net"}})

        assert info.chat_id == "5511@s.whatsapp.net"

    def test_envelope_timestamp_used_when_info_has_none(self) -> None:
        info, _ = split_message_event(
            {"Info": {"Id": "X", "Chat": "1@s.whatsapp.net"}},
            envelope_timestamp=1_700_000_000,
        )

        assert info.wire_timestamp == 1_700_000_000

    def test_missing_info_raises(self) -> None:
        with pytest.raises(MissingInfoError) as exc_info:
            split_message_event({"Message": {"conversation": "oi"}})

        assert exc_info.value.reason == "missing_info"

    def test_missing_chat_raises(self) -> None:
        with pytest.raises(MissingInfoError) as exc_info:
            split_message_event({"Info": {"Id": "X", "PushName": "Ana"}})

        assert exc_info.value.reason == "missing_contact_jid"

    def test_missing_id_generates_unique_fallback(self) -> None:
        data = {"Info": {"Chat": "1@s.whatsapp.net"}, "Message": {"conversation": "oi"}}

        first, _ = split_message_event(data)
        second, _ = split_message_event(data)

        assert first.has_fallback_id is True
        assert first.wire_message_id.startswith(FALLBACK_ID_PREFIX)
        assert first.wire_message_id != second.wire_message_id

    def test_missing_id_fingerprint_is_stable(self) -> None:
        data = {
            "Info": {"Chat": "1@s.whatsapp.net", "Timestamp": 1},
            "Message": {"conversation": "oi"},
        }

        first, _ = split_message_event(data, fallback_id_policy="fingerprint")
        second, _ = split_message_event(data, fallback_id_policy="fingerprint")

        assert first.wire_message_id == second.wire_message_id
        assert first.wire_message_id.startswith(FINGERPRINT_ID_PREFIX)


class TestSynthesizeFallbackId:
    def test_fingerprint_changes_with_content(self) -> None:
        base = {"chat_id": "1@s.whatsapp.net", "sender_id": None, "timestamp": 1}

        one = synthesize_fallback_id("fingerprint", content={"conversation": "a"}, **base)
        two = synthesize_fallback_id("fingerprint", content={"conversation": "b"}, **base)

        assert one != two
        assert len(one) == len(FINGERPRINT_ID_PREFIX) + 32
