"""Conversão de timestamps do gateway para o fuso local do inbox."""

from __future__ import annotations

from datetime import UTC, datetime
from zoneinfo import ZoneInfo

LOCAL_FORMAT = "%Y-%m-%dT%H:%M:%S"

# Acima disto o número está em milissegundos
_MAX_EPOCH_SECONDS = 9_999_999_999


def to_local_timestamp(value: str | int | float | None, timezone: str) -> str:
    """Timestamp do evento -> ``YYYY-MM-DDTHH:MM:SS`` no fuso informado.

    Aceita epoch em segundos ou milissegundos e strings ISO-8601. Valor
    ausente, ilegível ou fora do intervalo suportado usa o horário atual.
    """
    tz = ZoneInfo(timezone)
    moment: datetime | None = None
    if isinstance(value, bool):
        value = None
    if isinstance(value, int | float):
        moment = _from_epoch(value)
    elif isinstance(value, str) and value.strip():
        moment = _parse_text(value.strip())
    if moment is not None:
        try:
            return moment.astimezone(tz).strftime(LOCAL_FORMAT)
        except (OverflowError, ValueError):
            pass
    return datetime.now(UTC).astimezone(tz).strftime(LOCAL_FORMAT)


def _from_epoch(value: int | float) -> datetime | None:
    seconds = value / 1000 if value > _MAX_EPOCH_SECONDS else value
    try:
        return datetime.fromtimestamp(seconds, tz=UTC)
    except (OverflowError, OSError, ValueError):
        return None


def _parse_text(value: str) -> datetime | None:
    if value.isdigit():
        return _from_epoch(int(value))
    try:
        parsed = datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=UTC)
    return parsed
