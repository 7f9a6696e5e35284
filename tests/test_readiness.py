"""Readiness 체크 유틸 테스트."""

from __future__ import annotations

import asyncio

from app.core.config import get_settings
from app.core.readiness import collect_readiness_status


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("SERVICE_SECRET", "test-service-secret")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()


async def _fake_tcp_ok(*args, **kwargs):
    return {"status": "ok", "ok": True, "required": kwargs.get("required", True), "detail": "mock-ok"}


async def _fake_tcp_fail(*args, **kwargs):
    return {"status": "fail", "ok": False, "required": kwargs.get("required", True), "detail": "mock-fail"}


def test_collect_readiness_status_not_ready_when_database_url_missing(monkeypatch) -> None:
    _set_required_env(monkeypatch, DATABASE_URL="")
    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp_ok)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "not_ready"
    assert result["checks"]["db"]["status"] == "fail"


def test_collect_readiness_status_ready_with_sqlite_memory(monkeypatch) -> None:
    _set_required_env(monkeypatch, DATABASE_URL="sqlite:///:memory:")
    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp_ok)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "ready"
    assert result["checks"]["db"]["status"] == "ok"
    assert result["checks"]["weather"]["required"] is False


def test_collect_readiness_status_ready_with_sqlite_file(monkeypatch, tmp_path) -> None:
    _set_required_env(monkeypatch, DATABASE_URL=f"sqlite:///{tmp_path / 'tripwit.db'}")
    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp_ok)

    result = asyncio.run(collect_readiness_status())

    assert result["checks"]["db"]["status"] == "ok"


def test_weather_failure_does_not_block_readiness(monkeypatch) -> None:
    _set_required_env(monkeypatch, DATABASE_URL="sqlite:///:memory:")
    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp_fail)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "ready"
    assert result["checks"]["weather"]["ok"] is False


def test_database_tcp_failure_is_not_ready(monkeypatch) -> None:
    _set_required_env(monkeypatch, DATABASE_URL="postgresql://user:pw@db.internal:5432/tripwit")
    captured: list[tuple] = []

    async def _fake_tcp(host, port, timeout_seconds, label, *, required=True):
        captured.append((host, port, label))
        return await _fake_tcp_fail(required=required)

    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp)

    result = asyncio.run(collect_readiness_status())

    assert result["status"] == "not_ready"
    assert ("db.internal", 5432, "DB") in captured
