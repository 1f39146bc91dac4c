"""Testes da conversão de timestamps para o fuso local."""

from __future__ import annotations

import re

import pytest

from app.use_cases.wuzapi.timestamps import to_local_timestamp

TZ = "America/Sao_Paulo"


class TestToLocalTimestamp:
    def test_epoch_seconds(self) -> None:
        assert to_local_timestamp(1_700_000_000, TZ) == "2023-11-14T19:13:20"

    def test_epoch_milliseconds(self) -> None:
        assert to_local_timestamp(1_700_000_000_000, TZ) == "2023-11-14T19:13:20"

    def test_numeric_string(self) -> None:
        assert to_local_timestamp("1700000000", TZ) == "2023-11-14T19:13:20"

    def test_iso_with_z(self) -> None:
        assert to_local_timestamp("2024-01-01T12:00:00Z", TZ) == "2024-01-01T09:00:00"

    def test_naive_iso_assumed_utc(self) -> None:
        assert to_local_timestamp("2024-01-01T12:00:00", "UTC") == "2024-01-01T12:00:00"

    @pytest.mark.parametrize("value", [None, "", "ontem", True])
    def test_unreadable_uses_now(self, value) -> None:
        result = to_local_timestamp(value, TZ)

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", result)

    @pytest.mark.parametrize(
        "value",
        [99999999999999999999, -99999999999999, "99999999999999999999", float("inf"), float("nan")],
    )
    def test_out_of_range_epoch_uses_now(self, value) -> None:
        result = to_local_timestamp(value, TZ)

        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}", result)

    def test_epoch_at_minimum_date_uses_now(self) -> None:
        result = to_local_timestamp(-62135596800, TZ)

        assert not result.startswith("0000")
