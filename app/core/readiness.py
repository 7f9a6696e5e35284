"""`/ready` 엔드포인트용 의존성 점검.

DB는 필수 항목이고, 날씨 API는 없어도 여행 관리가 동작하므로 선택 항목입니다.
"""

from __future__ import annotations

import asyncio
import socket
import sqlite3
from pathlib import Path
from urllib.parse import unquote, urlparse

from app.core.config import Settings, get_settings
from app.core.timeout_policy import get_timeout_policy

ReadinessCheck = dict[str, str | bool]

_DEFAULT_PORTS = {
    "postgres": 5432,
    "postgresql": 5432,
    "mysql": 3306,
    "mariadb": 3306,
    "http": 80,
    "https": 443,
}
_SQLITE_SCHEMES = {"sqlite", "sqlite3"}
_MEMORY = ":memory:"


def _result(ok: bool, detail: str, *, required: bool = True) -> ReadinessCheck:
    return {"status": "ok" if ok else "fail", "ok": ok, "required": required, "detail": detail}


def _scheme(url: str) -> str:
    return urlparse(url).scheme.split("+")[0].lower()


def _host_and_port(url: str) -> tuple[str, int] | None:
    parsed = urlparse(url)
    if not parsed.hostname:
        return None
    return parsed.hostname, int(parsed.port or _DEFAULT_PORTS.get(_scheme(url), 5432))


def _sqlite_target(database_url: str) -> str | None:
    """SQLite URL이면 파일 경로(또는 `:memory:`)를, 아니면 None을 반환합니다."""
    if _scheme(database_url) not in _SQLITE_SCHEMES:
        return None
    if database_url.endswith(_MEMORY) or database_url.rstrip("/") in {"sqlite:", "sqlite3:"}:
        return _MEMORY

    path = unquote(urlparse(database_url).path or "")
    # sqlite:///./tripwit.db 의 경로는 "/./tripwit.db"로 파싱된다
    if path.startswith(("/./", "/../")):
        path = path[1:]
    return path or None


def _probe_sqlite(path: str) -> None:
    if path != _MEMORY and not Path(path).parent.exists():
        raise FileNotFoundError(f"DB 경로 디렉터리가 존재하지 않습니다: {Path(path).parent}")
    connection = sqlite3.connect(path)
    try:
        connection.execute("SELECT 1")
    finally:
        connection.close()


async def _check_tcp_connectivity(
    host: str,
    port: int,
    timeout_seconds: int,
    label: str,
    *,
    required: bool = True,
) -> ReadinessCheck:
    def _connect() -> None:
        with socket.create_connection((host, port), timeout=timeout_seconds):
            pass

    try:
        await asyncio.to_thread(_connect)
    except OSError as exc:
        return _result(False, f"{label} 연결 실패 ({host}:{port}): {exc}", required=required)
    return _result(True, f"{label} 연결 가능 ({host}:{port})", required=required)


async def _check_database(settings: Settings) -> ReadinessCheck:
    database_url = (settings.DATABASE_URL or "").strip()
    if not database_url:
        return _result(False, "DATABASE_URL이 설정되지 않았습니다.")

    sqlite_path = _sqlite_target(database_url)
    if sqlite_path is not None:
        try:
            await asyncio.to_thread(_probe_sqlite, sqlite_path)
        except (OSError, sqlite3.Error) as exc:
            return _result(False, f"SQLite 연결 실패: {exc}")
        return _result(True, "SQLite 연결 확인 완료")

    target = _host_and_port(database_url)
    if target is None:
        return _result(False, "DATABASE_URL에서 DB 호스트를 파싱할 수 없습니다.")
    return await _check_tcp_connectivity(
        host=target[0],
        port=target[1],
        timeout_seconds=get_timeout_policy(settings).external_api_timeout_seconds,
        label="DB",
    )


async def _check_weather_api(settings: Settings) -> ReadinessCheck:
    target = _host_and_port(settings.WEATHER_API_BASE_URL or "")
    if target is None:
        return _result(False, "WEATHER_API_BASE_URL에서 호스트를 파싱할 수 없습니다.", required=False)
    return await _check_tcp_connectivity(
        host=target[0],
        port=target[1],
        timeout_seconds=get_timeout_policy(settings).weather_timeout_seconds,
        label="Weather API",
        required=False,
    )


async def collect_readiness_status() -> dict[str, object]:
    """필수 점검이 모두 통과하면 `ready`, 아니면 `not_ready`."""
    settings = get_settings()
    db_check, weather_check = await asyncio.gather(_check_database(settings), _check_weather_api(settings))

    checks = {"db": db_check, "weather": weather_check}
    ready = all(check["ok"] for check in checks.values() if check["required"])
    return {"status": "ready" if ready else "not_ready", "checks": checks}
