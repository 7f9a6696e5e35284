"""애플리케이션 진입점 최소 동작 테스트."""

from __future__ import annotations

import importlib

from fastapi.testclient import TestClient

from app.core.config import get_settings
from app.database import get_engine


def _set_required_env(monkeypatch, **overrides: str) -> None:
    monkeypatch.setenv("SERVICE_SECRET", "test-service-secret")
    monkeypatch.setenv("DATABASE_URL", "sqlite://")
    monkeypatch.setenv("DOCS_MODE", "disabled")
    for key, value in overrides.items():
        monkeypatch.setenv(key, value)
    get_settings.cache_clear()
    get_engine.cache_clear()


def _load_main_module():
    import app.main as main_module

    return importlib.reload(main_module)


def test_health_check_endpoint(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    with TestClient(main_module.app) as client:
        response = client.get("/")

    assert response.status_code == 200
    assert response.json() == {"status": "ok", "message": "TripWit API Server is running"}


def test_ready_endpoint_reports_status(monkeypatch) -> None:
    _set_required_env(monkeypatch, DATABASE_URL="sqlite:///:memory:")
    main_module = _load_main_module()

    async def _fake_tcp(*args, **kwargs):
        return {"status": "fail", "ok": False, "required": kwargs.get("required", True), "detail": "offline"}

    monkeypatch.setattr("app.core.readiness._check_tcp_connectivity", _fake_tcp)

    with TestClient(main_module.app) as client:
        response = client.get("/ready")

    assert response.status_code == 200
    assert response.json()["status"] == "ready"


def test_ready_endpoint_returns_503_without_database(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()
    monkeypatch.setenv("DATABASE_URL", "")
    get_settings.cache_clear()

    client = TestClient(main_module.app)
    response = client.get("/ready")

    assert response.status_code == 503
    assert response.json()["checks"]["db"]["status"] == "fail"


def test_docs_disabled_by_default(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    assert client.get("/docs").status_code == 404
    assert client.get("/redoc").status_code == 404
    assert client.get("/openapi.json").status_code == 404


def test_docs_public_mode_exposes_trip_routes(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="public")
    main_module = _load_main_module()

    schema = main_module.app.openapi()

    assert "/api/v1/trips" in schema["paths"]
    assert "/api/v1/trips/{trip_id}/weather" in schema["paths"]


def test_docs_secret_mode_requires_service_secret(monkeypatch) -> None:
    _set_required_env(monkeypatch, DOCS_MODE="secret")
    main_module = _load_main_module()

    client = TestClient(main_module.app)

    unauthorized = client.get("/docs")
    assert unauthorized.status_code == 401

    authorized = client.get("/docs", headers={"x-service-secret": "test-service-secret"})
    assert authorized.status_code == 200


def test_security_headers_are_attached(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/")

    assert response.headers["x-content-type-options"] == "nosniff"
    assert response.headers["x-frame-options"] == "DENY"
    assert response.headers["referrer-policy"] == "no-referrer"
    assert response.headers["permissions-policy"] == "geolocation=(), microphone=(), camera=()"


def test_cors_allowlist_from_env(monkeypatch) -> None:
    _set_required_env(
        monkeypatch,
        CORS_ALLOW_ORIGINS="https://example.com",
        CORS_ALLOW_METHODS="GET,POST,OPTIONS",
        CORS_ALLOW_HEADERS="Authorization,Content-Type",
    )
    main_module = _load_main_module()

    client = TestClient(main_module.app)
    response = client.get("/", headers={"Origin": "https://example.com"})

    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "https://example.com"


def test_unhandled_errors_are_hidden(monkeypatch) -> None:
    _set_required_env(monkeypatch)
    main_module = _load_main_module()

    @main_module.app.get("/_boom-test")
    def _boom_test() -> dict:
        raise RuntimeError("secret detail")

    client = TestClient(main_module.app, raise_server_exceptions=False)
    response = client.get("/_boom-test")

    assert response.status_code == 500
    assert response.json() == {"detail": "내부 서버 오류가 발생했습니다."}
