from __future__ import annotations

from datetime import date, datetime

from app.core.config import get_settings
from app.models import Day, Stop, Trip
from app.schemas.enums import StopCategory
from app.services.text_exporter import generate_text


def _make_trip() -> Trip:
    trip = Trip(name="Rome Trip", destination="Rome, Italy", start_date=date(2026, 3, 15), end_date=date(2026, 3, 16))
    first = Day(date=date(2026, 3, 15), day_number=1, notes="Ancient Rome", location="Rome")
    first.stops.append(
        Stop(
            name="Colosseum",
            sort_order=0,
            arrival_time=datetime(2026, 3, 15, 9, 30),
            departure_time=datetime(2026, 3, 15, 11, 0),
            notes="Book ahead",
        )
    )
    first.stops.append(
        Stop(
            name="Hotel Roma",
            sort_order=1,
            category=StopCategory.ACCOMMODATION,
            confirmation_code="ROM-1",
            check_out_date=date(2026, 3, 16),
        )
    )
    trip.days.append(first)
    trip.days.append(Day(date=date(2026, 3, 16), day_number=2))
    return trip


def test_generate_text_layout() -> None:
    text = generate_text(_make_trip(), footer="Shared from test")

    assert text.split("\n") == [
        "ROME TRIP",
        "Rome, Italy",
        "Mar 15, 2026 - Mar 16, 2026 (2 days)",
        "",
        "FLIGHTS & HOTELS",
        "  Accommodation: Hotel Roma (ROM-1)",
        "",
        "DAY 1 — Mar 15, 2026 — Rome",
        "  Ancient Rome",
        "  • Colosseum (9:30 AM - 11:00 AM)",
        "    Book ahead",
        "  • Hotel Roma",
        "",
        "DAY 2 — Mar 16, 2026",
        "  No stops planned",
        "",
        "Shared from test",
    ]


def test_generate_text_uses_configured_footer(monkeypatch) -> None:
    monkeypatch.setenv("SHARE_FOOTER", "Sent with love")
    get_settings.cache_clear()
    try:
        trip = Trip(name="Solo", destination="Oslo", start_date=date(2026, 1, 1), end_date=date(2026, 1, 1))
        trip.days.append(Day(date=date(2026, 1, 1), day_number=1))

        text = generate_text(trip)
    finally:
        get_settings.cache_clear()

    assert text.endswith("Sent with love")
    assert "FLIGHTS & HOTELS" not in text
