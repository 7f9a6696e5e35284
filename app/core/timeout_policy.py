"""요청/외부 API/날씨 조회 타임아웃 정책."""

from __future__ import annotations

from dataclasses import dataclass

from app.core.config import Settings, get_settings

_FLOOR_SECONDS = 1
_CONNECT_SHARE = 0.3
_CONNECT_CAP_SECONDS = 5.0


def _seconds(value: object, fallback: int, ceiling: int | None = None) -> int:
    """설정값을 1초 이상의 정수로 맞추고, 상위 타임아웃이 있으면 그 값을 넘지 않게 자릅니다."""
    try:
        seconds = int(value)
    except (TypeError, ValueError):
        seconds = fallback
    seconds = max(_FLOOR_SECONDS, seconds)
    return seconds if ceiling is None else min(seconds, ceiling)


@dataclass(frozen=True, slots=True)
class TimeoutPolicy:
    """요청 > 외부 API > 날씨 순으로 포함 관계를 갖는 타임아웃 묶음."""

    request_timeout_seconds: int
    external_api_timeout_seconds: int
    weather_timeout_seconds: int


def build_timeout_policy(settings: Settings) -> TimeoutPolicy:
    """외부 API 타임아웃은 요청 타임아웃을, 날씨 타임아웃은 외부 API 타임아웃을 넘지 않습니다."""
    request_timeout = _seconds(settings.REQUEST_TIMEOUT_SECONDS, 60)
    external_timeout = _seconds(settings.EXTERNAL_API_TIMEOUT_SECONDS, 15, ceiling=request_timeout)
    return TimeoutPolicy(
        request_timeout_seconds=request_timeout,
        external_api_timeout_seconds=external_timeout,
        weather_timeout_seconds=_seconds(settings.WEATHER_TIMEOUT_SECONDS, 10, ceiling=external_timeout),
    )


def get_timeout_policy(settings: Settings | None = None) -> TimeoutPolicy:
    return build_timeout_policy(settings or get_settings())


def to_requests_timeout(total_timeout_seconds: int) -> tuple[float, float]:
    """전체 타임아웃을 requests의 (connect, read) 튜플로 나눕니다.

    connect는 전체의 30%(1~5초)이고 read는 나머지입니다.
    """
    total = float(max(_FLOOR_SECONDS, int(total_timeout_seconds)))
    connect = min(_CONNECT_CAP_SECONDS, max(1.0, total * _CONNECT_SHARE))
    if total > connect:
        return connect, max(1.0, total - connect)
    return connect, max(0.5, total * 0.5)
