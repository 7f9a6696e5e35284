"""복제, 기간 충돌, 통계, 정렬/검색, CSV 내보내기 테스트."""

from __future__ import annotations

import csv
import io
from datetime import date, datetime

import pytest
from sqlalchemy import func, select

from app.models import Stop, Trip
from app.schemas.enums import ExpenseCategory, StopCategory, TripSortOrder, TripStatus
from app.services.trip_service import (
    TripManager,
    completion_score,
    export_expenses_csv,
    filter_stops,
    sort_trips,
    trip_statistics,
)
from tests.mocks.mock_database import make_session


def _make_manager() -> TripManager:
    return TripManager(make_session())


def _make_trip_with_stops(manager: TripManager) -> Trip:
    trip = manager.create_trip("Rome", "Rome, Italy", date(2026, 9, 1), date(2026, 9, 5), notes="Pasta")
    manager.update_trip(trip, budget_amount=900.0, budget_currency_code="EUR", status=TripStatus.ACTIVE)
    days = trip.ordered_days
    colosseum = manager.add_stop(
        days[0],
        "Colosseum",
        41.8902,
        12.4922,
        StopCategory.ATTRACTION,
        arrival_time=datetime(2026, 9, 1, 9, 0),
        departure_time=datetime(2026, 9, 1, 11, 0),
        notes="Skip the line",
    )
    hotel = manager.add_stop(days[0], "Hotel Roma", 41.9, 12.5, StopCategory.ACCOMMODATION)
    hotel.confirmation_code = "ROM-100"
    hotel.check_out_date = date(2026, 9, 5)
    manager.add_stop(days[2], "Vatican", 41.9029, 12.4534, StopCategory.ATTRACTION)
    manager.toggle_visited(colosseum)
    return trip


# 복제


def test_clone_trip_copies_structure_with_shifted_dates() -> None:
    manager = _make_manager()
    source = _make_trip_with_stops(manager)

    clone = manager.clone_trip(source, date(2026, 9, 15))

    assert clone.id != source.id
    assert clone.name == "Rome (Copy)"
    assert clone.destination == "Rome, Italy"
    assert clone.notes == "Pasta"
    assert clone.status == TripStatus.PLANNING
    assert (clone.start_date, clone.end_date) == (date(2026, 9, 15), date(2026, 9, 19))
    assert (clone.budget_amount, clone.budget_currency_code) == (900.0, "EUR")
    assert [day.date for day in clone.ordered_days][0] == date(2026, 9, 15)
    assert [len(day.stops) for day in clone.ordered_days] == [2, 0, 1, 0, 0]

    first = clone.ordered_days[0].ordered_stops[0]
    assert first.name == "Colosseum"
    assert first.is_visited is False
    assert first.visited_at is None
    assert first.arrival_time == datetime(2026, 9, 15, 9, 0)
    assert first.departure_time == datetime(2026, 9, 15, 11, 0)

    hotel = clone.ordered_days[0].ordered_stops[1]
    assert hotel.confirmation_code is None
    assert hotel.check_out_date == date(2026, 9, 19)
    assert clone.expenses == []


def test_clone_is_independent_of_source() -> None:
    manager = _make_manager()
    source = _make_trip_with_stops(manager)
    clone = manager.clone_trip(source, date(2026, 10, 1))

    manager.delete_trip(source)

    assert manager.get_trip(clone.id) is not None
    assert sum(len(day.stops) for day in clone.days) == 3
    assert manager.db.scalar(select(func.count()).select_from(Stop)) == 3


# 기간 충돌


def test_find_conflicting_trips_includes_edges() -> None:
    manager = _make_manager()
    june = manager.create_trip("June", "A", date(2026, 6, 1), date(2026, 6, 10))
    manager.create_trip("July", "B", date(2026, 7, 1), date(2026, 7, 5))

    assert [trip.name for trip in manager.find_conflicting_trips(date(2026, 6, 10), date(2026, 6, 12))] == ["June"]
    assert manager.find_conflicting_trips(date(2026, 6, 11), date(2026, 6, 30)) == []
    assert manager.has_conflicting_trips(date(2026, 5, 20), date(2026, 7, 2))
    assert manager.find_conflicting_trips(date(2026, 6, 2), date(2026, 6, 3), excluding=june) == []


# 통계


def test_completion_score_counts_four_criteria() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Empty", "Nowhere", date(2026, 6, 1), date(2026, 6, 2))
    assert completion_score(trip) == 0.0

    days = trip.ordered_days
    manager.add_stop(days[0], "A")
    assert completion_score(trip) == pytest.approx(0.25)

    manager.add_stop(days[1], "B")
    assert completion_score(trip) == pytest.approx(0.5)

    manager.update_trip(trip, budget_amount=100.0)
    assert completion_score(trip) == pytest.approx(0.75)

    days[1].stops[0].confirmation_code = "XYZ"
    assert completion_score(trip) == pytest.approx(1.0)


def test_trip_statistics_with_visited_and_budget() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Budget Trip", "Berlin", date(2026, 6, 1), date(2026, 6, 2))
    days = trip.ordered_days
    gate = manager.add_stop(days[0], "Gate", 52.51, 13.37, StopCategory.ATTRACTION)
    manager.add_stop(days[1], "Museum", 52.52, 13.39, StopCategory.ATTRACTION)
    manager.toggle_visited(gate)
    manager.update_trip(trip, budget_amount=500.0)
    manager.add_expense(trip, "Dinner", 45.50, ExpenseCategory.FOOD)
    manager.add_expense(trip, "Taxi", 22.00, ExpenseCategory.TRANSPORT)

    stats = trip_statistics(trip)

    assert stats.visited_stops == 1
    assert stats.completion_percentage == 0.5
    assert stats.total_expenses == pytest.approx(67.50)
    assert stats.budget_remaining == pytest.approx(432.50)
    assert stats.total_bookings == 0
    assert stats.category_breakdown == {StopCategory.ATTRACTION: 2}


def test_trip_statistics_empty_trip() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Empty", "Nowhere", date(2026, 6, 1), date(2026, 6, 3))

    stats = trip_statistics(trip)

    assert stats.total_stops == 0
    assert stats.total_days == 3
    assert stats.empty_days == 3
    assert stats.average_stops_per_day == 0.0
    assert stats.completion_percentage == 0.0
    assert stats.category_breakdown == {}
    assert stats.budget_remaining is None


def test_trip_statistics_counts_days_and_bookings() -> None:
    manager = _make_manager()
    trip = _make_trip_with_stops(manager)

    stats = trip_statistics(trip)

    assert stats.total_stops == 3
    assert stats.days_with_stops == 2
    assert stats.empty_days == 3
    assert stats.average_stops_per_day == pytest.approx(0.6)
    assert stats.total_bookings == 1
    assert stats.category_breakdown[StopCategory.ATTRACTION] == 2
    assert StopCategory.TRANSPORT not in stats.category_breakdown


# 정렬 / 검색


def _sortable_trips() -> list[Trip]:
    return [
        Trip(name="beta", destination="Oslo", start_date=date(2026, 3, 1), end_date=date(2026, 3, 2)),
        Trip(name="Alpha", destination="Zurich", start_date=date(2026, 5, 1), end_date=date(2026, 5, 10)),
        Trip(name="Gamma", destination="athens", start_date=date(2026, 1, 1), end_date=date(2026, 1, 4)),
    ]


@pytest.mark.parametrize(
    ("order", "expected"),
    [
        (TripSortOrder.START_DATE_DESCENDING, ["Alpha", "beta", "Gamma"]),
        (TripSortOrder.START_DATE_ASCENDING, ["Gamma", "beta", "Alpha"]),
        (TripSortOrder.NAME_ASCENDING, ["Alpha", "beta", "Gamma"]),
        (TripSortOrder.DESTINATION_ASCENDING, ["Gamma", "beta", "Alpha"]),
        (TripSortOrder.DURATION_DESCENDING, ["Alpha", "Gamma", "beta"]),
    ],
)
def test_sort_trips(order: TripSortOrder, expected: list[str]) -> None:
    assert [trip.name for trip in sort_trips(_sortable_trips(), order)] == expected


def test_filter_stops_by_query_and_category() -> None:
    manager = _make_manager()
    trip = _make_trip_with_stops(manager)
    trip.ordered_days[0].ordered_stops[1].address = "Via del Corso 1"

    assert [stop.name for stop in filter_stops(trip)] == ["Colosseum", "Hotel Roma", "Vatican"]
    assert [stop.name for stop in filter_stops(trip, "skip THE")] == ["Colosseum"]
    assert [stop.name for stop in filter_stops(trip, "corso")] == ["Hotel Roma"]
    assert [stop.name for stop in filter_stops(trip, category=StopCategory.ATTRACTION)] == ["Colosseum", "Vatican"]
    assert filter_stops(trip, "vatican", StopCategory.RESTAURANT) == []


# CSV


def test_export_expenses_csv() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Berlin", "Berlin", date(2026, 6, 1), date(2026, 6, 2))
    manager.update_trip(trip, budget_currency_code="EUR")
    manager.add_expense(trip, "Dinner", 45.5, ExpenseCategory.FOOD, date(2026, 6, 1), notes="Great view")
    manager.add_expense(trip, 'Museum "Pass", adult', 62.4, ExpenseCategory.ACTIVITY, date(2026, 6, 2))

    lines = export_expenses_csv(trip).splitlines()

    assert len(lines) == 5
    assert lines[0] == "Title,Amount,Currency,Category,Date,Notes"
    assert lines[1] == "Dinner,45.50,EUR,food,2026-06-01,Great view"
    assert lines[2] == '"Museum ""Pass"", adult",62.40,EUR,activity,2026-06-02,'
    assert lines[3] == ""
    assert lines[4] == "Total,107.90,EUR,,,"


def test_export_expenses_csv_empty_trip() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Empty", "Nowhere", date(2026, 6, 1), date(2026, 6, 1))

    lines = export_expenses_csv(trip).splitlines()

    assert lines == ["Title,Amount,Currency,Category,Date,Notes", "", "Total,0.00,USD,,,"]


def test_export_expenses_csv_parses_back_with_special_characters() -> None:
    manager = _make_manager()
    trip = manager.create_trip("Lisbon", "Lisbon", date(2026, 6, 1), date(2026, 6, 2))
    notes = ['line1\rline2', 'first\nsecond', 'say "hi", then leave', "crlf\r\nend"]
    for index, note in enumerate(notes):
        manager.add_expense(trip, f"Item, {index}", 10.0, ExpenseCategory.FOOD, date(2026, 6, 1), notes=note)

    rows = list(csv.reader(io.StringIO(export_expenses_csv(trip), newline="")))

    assert len(rows) == len(notes) + 3
    assert [row[0] for row in rows[1 : len(notes) + 1]] == [f"Item, {index}" for index in range(len(notes))]
    assert [row[5] for row in rows[1 : len(notes) + 1]] == notes
    assert rows[-2] == []
    assert rows[-1] == ["Total", "40.00", "USD", "", "", ""]
