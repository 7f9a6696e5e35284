"""화면/텍스트 출력용 날짜·시각 포맷터."""

from __future__ import annotations

from datetime import date, datetime


def format_medium_date(value: date) -> str:
    """중간 길이 날짜 문자열 (예: "Mar 15, 2026")."""
    return f"{value:%b} {value.day}, {value.year}"


def format_short_time(value: datetime) -> str:
    """짧은 시각 문자열 (예: "9:30 AM")."""
    hour = value.hour % 12 or 12
    return f"{hour}:{value:%M} {'AM' if value.hour < 12 else 'PM'}"
