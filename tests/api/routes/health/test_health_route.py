"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health import router as health_module
from api.routes.health.router import health_check, readiness_check
from config.settings.base.dedupe import DedupeSettings


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.fixture
def dedupe_backend(monkeypatch: pytest.MonkeyPatch):
    def _set(backend: str) -> None:
        monkeypatch.setattr(
            health_module,
            "get_dedupe_settings",
            lambda: DedupeSettings(backend=backend),
        )

    return _set


@pytest.mark.asyncio
async def test_health_reports_service() -> None:
    response = await health_check()

    assert response.status == "healthy"
    assert response.service


@pytest.mark.asyncio
async def test_readiness_degraded_without_redis_on_memory_backend(dedupe_backend) -> None:
    dedupe_backend("memory")
    request = _build_request_with_state(SimpleNamespace(redis_client=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"] == {
        "redis": {"status": "degraded", "latency_ms": None, "error": "not_configured"}
    }


@pytest.mark.asyncio
async def test_readiness_not_ready_without_redis_on_redis_backend(dedupe_backend) -> None:
    dedupe_backend("redis")
    request = _build_request_with_state(SimpleNamespace(redis_client=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["redis"]["status"] == "failed"


@pytest.mark.asyncio
async def test_readiness_ready_when_redis_answers(dedupe_backend) -> None:
    dedupe_backend("redis")
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(return_value=True)
    request = _build_request_with_state(SimpleNamespace(redis_client=redis_client))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["checks"]["redis"]["status"] == "ok"
    assert payload["checks"]["redis"]["latency_ms"] is not None


@pytest.mark.asyncio
async def test_readiness_reports_ping_error(dedupe_backend) -> None:
    dedupe_backend("redis")
    redis_client = MagicMock()
    redis_client.ping = AsyncMock(side_effect=ConnectionError("down"))
    request = _build_request_with_state(SimpleNamespace(redis_client=redis_client))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["redis"]["error"] == "ConnectionError"
