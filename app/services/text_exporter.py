"""메시지/이메일 공유용 일반 텍스트 일정 생성."""

from __future__ import annotations

from app.core.config import get_settings
from app.core.formatting import format_medium_date, format_short_time
from app.models import Stop, Trip


def _booking_line(stop: Stop) -> str:
    line = f"{stop.category.value.capitalize()}: {stop.name}"
    if stop.confirmation_code:
        line += f" ({stop.confirmation_code})"
    return f"  {line}"


def _stop_line(stop: Stop) -> str:
    line = f"  • {stop.name}"
    if stop.arrival_time is not None:
        line += f" ({format_short_time(stop.arrival_time)}"
        if stop.departure_time is not None:
            line += f" - {format_short_time(stop.departure_time)}"
        line += ")"
    return line


def generate_text(trip: Trip, footer: str | None = None) -> str:
    """여행 일정을 줄 단위 텍스트로 만듭니다."""
    lines: list[str] = [
        trip.name.upper(),
        trip.destination,
        f"{format_medium_date(trip.start_date)} - {format_medium_date(trip.end_date)} "
        f"({trip.duration_in_days} days)",
        "",
    ]

    days = trip.ordered_days
    bookings = [stop for day in days for stop in day.ordered_stops if stop.has_booking_details]
    if bookings:
        lines.append("FLIGHTS & HOTELS")
        lines.extend(_booking_line(stop) for stop in bookings)
        lines.append("")

    for day in days:
        header = f"DAY {day.day_number} — {format_medium_date(day.date)}"
        if day.location:
            header += f" — {day.location}"
        lines.append(header)

        if day.notes:
            lines.append(f"  {day.notes}")

        stops = day.ordered_stops
        if not stops:
            lines.append("  No stops planned")
        for stop in stops:
            lines.append(_stop_line(stop))
            if stop.notes:
                lines.append(f"    {stop.notes}")
        lines.append("")

    lines.append(footer if footer is not None else get_settings().SHARE_FOOTER)
    return "\n".join(lines)
