"""장소 행(row) 표시 데이터 생성."""

from __future__ import annotations

from app.core.formatting import format_short_time
from app.models import Day, Stop
from app.schemas.enums import StopCategory
from app.schemas.presentation import CategoryStyle, StopRow

VISITED_OPACITY = 0.6

CATEGORY_STYLES: dict[StopCategory, CategoryStyle] = {
    StopCategory.ACCOMMODATION: CategoryStyle(icon="bed.double.fill", color="purple"),
    StopCategory.RESTAURANT: CategoryStyle(icon="fork.knife", color="orange"),
    StopCategory.ATTRACTION: CategoryStyle(icon="star.fill", color="yellow"),
    StopCategory.TRANSPORT: CategoryStyle(icon="airplane", color="blue"),
    StopCategory.ACTIVITY: CategoryStyle(icon="figure.run", color="green"),
    StopCategory.OTHER: CategoryStyle(icon="mappin", color="gray"),
}


def category_style(category: StopCategory) -> CategoryStyle:
    return CATEGORY_STYLES[category]


def time_range_label(stop: Stop) -> str | None:
    """도착/출발 시각으로 만든 시간 라벨. 둘 다 없으면 None."""
    if stop.arrival_time is not None and stop.departure_time is not None:
        return f"{format_short_time(stop.arrival_time)} - {format_short_time(stop.departure_time)}"
    if stop.arrival_time is not None:
        return f"Arrives {format_short_time(stop.arrival_time)}"
    if stop.departure_time is not None:
        return f"Departs {format_short_time(stop.departure_time)}"
    return None


def booking_subtitle(stop: Stop) -> str | None:
    if stop.category == StopCategory.ACCOMMODATION:
        nights = stop.night_count
        if nights is not None:
            return f"{nights} night{'' if nights == 1 else 's'}"
    if stop.category == StopCategory.TRANSPORT and stop.departure_airport and stop.arrival_airport:
        return f"{stop.departure_airport} → {stop.arrival_airport}"
    return None


def present_stop(stop: Stop) -> StopRow:
    style = category_style(stop.category)
    return StopRow(
        stop_id=stop.id,
        name=stop.name,
        category=stop.category,
        icon=style.icon,
        color=style.color,
        is_visited=stop.is_visited,
        confirmation_code=stop.confirmation_code or None,
        time_range=time_range_label(stop),
        booking_subtitle=booking_subtitle(stop),
        opacity=VISITED_OPACITY if stop.is_visited else 1.0,
    )


def present_day(day: Day) -> list[StopRow]:
    return [present_stop(stop) for stop in day.ordered_stops]
