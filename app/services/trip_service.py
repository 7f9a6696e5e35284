"""여행 데이터 관리 서비스.

`TripManager`는 SQLAlchemy 세션을 감싸 여행/일자/장소/지출의 생성·수정·삭제를 담당하고,
모듈 수준 함수는 세션 없이 여행 객체만으로 계산되는 통계·정렬·검색·CSV 내보내기를 제공합니다.
"""

from __future__ import annotations

import csv
import io
import uuid
from collections import Counter
from datetime import date, datetime, timedelta
from typing import Iterable

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.models import Day, Expense, Stop, Trip
from app.schemas.enums import ExpenseCategory, StopCategory, TripSortOrder, TripStatus
from app.schemas.trip import TripStatistics
from app.services.validation import validate_expense, validate_stop, validate_trip

logger = get_logger(__name__)

_UPDATABLE_TRIP_FIELDS = (
    "name",
    "destination",
    "start_date",
    "end_date",
    "status",
    "notes",
    "budget_amount",
    "budget_currency_code",
)


class TripManager:
    """여행 도메인 객체의 영속화 작업을 담당하는 서비스."""

    def __init__(self, db: Session) -> None:
        self._db = db

    @property
    def db(self) -> Session:
        return self._db

    # 조회

    def fetch_trips(self) -> list[Trip]:
        """시작일 내림차순으로 모든 여행을 반환합니다."""
        stmt = select(Trip).order_by(Trip.start_date.desc())
        return list(self._db.scalars(stmt))

    def get_trip(self, trip_id: uuid.UUID) -> Trip | None:
        return self._db.get(Trip, trip_id)

    def get_day(self, day_id: uuid.UUID) -> Day | None:
        return self._db.get(Day, day_id)

    def get_stop(self, stop_id: uuid.UUID) -> Stop | None:
        return self._db.get(Stop, stop_id)

    def get_expense(self, expense_id: uuid.UUID) -> Expense | None:
        return self._db.get(Expense, expense_id)

    # 여행

    def create_trip(
        self,
        name: str,
        destination: str,
        start_date: date,
        end_date: date,
        notes: str = "",
        status: TripStatus = TripStatus.PLANNING,
    ) -> Trip:
        """여행을 만들고 기간에 맞는 일자를 함께 생성합니다."""
        trip = Trip(
            name=name,
            destination=destination,
            start_date=start_date,
            end_date=end_date,
            notes=notes,
            status=status,
        )
        self._db.add(trip)
        self.generate_days(trip)
        self._db.commit()
        logger.info("Trip created: %s (%s ~ %s, %d days)", trip.name, start_date, end_date, len(trip.days))
        return trip

    def generate_days(self, trip: Trip) -> None:
        """시작일부터 종료일까지 하루씩 일자를 추가합니다 (day_number는 1부터)."""
        current = trip.start_date
        day_number = 1
        while current <= trip.end_date:
            trip.days.append(Day(date=current, day_number=day_number))
            current += timedelta(days=1)
            day_number += 1

    def sync_days(self, trip: Trip) -> None:
        """여행 기간이 바뀐 뒤 일자를 맞춥니다.

        기간 안에 남는 날짜의 일자는 장소와 함께 유지하고 번호만 다시 매기며,
        기간 밖 일자는 장소와 함께 삭제하고, 빠진 날짜는 새로 만듭니다.
        """
        target_dates = [
            trip.start_date + timedelta(days=offset) for offset in range(max(0, trip.duration_in_days))
        ]
        valid_dates = set(target_dates)

        kept: dict[date, Day] = {}
        for day in trip.ordered_days:
            if day.date in valid_dates and day.date not in kept:
                kept[day.date] = day
            else:
                trip.days.remove(day)

        for index, day_date in enumerate(target_dates, start=1):
            day = kept.get(day_date)
            if day is None:
                trip.days.append(Day(date=day_date, day_number=index))
            else:
                day.day_number = index

    def days_with_stops_outside_range(self, trip: Trip, new_start: date, new_end: date) -> int:
        """새 기간 밖으로 밀려나면서 장소를 잃게 될 일자 수."""
        return sum(1 for day in trip.days if (day.date < new_start or day.date > new_end) and day.stops)

    def update_trip(self, trip: Trip, **changes) -> Trip:
        """여행 필드를 수정합니다. 날짜가 바뀌면 일자를 동기화합니다."""
        unknown = set(changes) - set(_UPDATABLE_TRIP_FIELDS)
        if unknown:
            raise ValueError(f"수정할 수 없는 필드입니다: {', '.join(sorted(unknown))}")

        merged = {field: changes.get(field, getattr(trip, field)) for field in ("name", "destination")}
        start_date = changes.get("start_date") or trip.start_date
        end_date = changes.get("end_date") or trip.end_date
        validate_trip(merged["name"], merged["destination"], start_date, end_date)

        dates_changed = start_date != trip.start_date or end_date != trip.end_date
        for field in _UPDATABLE_TRIP_FIELDS:
            value = changes.get(field)
            if value is not None:
                setattr(trip, field, value)

        if dates_changed:
            self.sync_days(trip)
            logger.info("Trip dates changed, days synced: %s (%d days)", trip.name, len(trip.days))

        trip.touch()
        self._db.commit()
        return trip

    def delete_trip(self, trip: Trip) -> None:
        self._db.delete(trip)
        self._db.commit()
        logger.info("Trip deleted: %s", trip.name)

    # 장소

    def add_stop(
        self,
        day: Day,
        name: str,
        latitude: float = 0.0,
        longitude: float = 0.0,
        category: StopCategory = StopCategory.OTHER,
        arrival_time: datetime | None = None,
        departure_time: datetime | None = None,
        notes: str = "",
    ) -> Stop:
        """일자의 마지막 순서로 장소를 추가합니다."""
        stop = Stop(
            name=name,
            latitude=latitude,
            longitude=longitude,
            category=category,
            sort_order=len(day.stops),
            arrival_time=arrival_time,
            departure_time=departure_time,
            notes=notes,
        )
        day.stops.append(stop)
        self._touch_day_trip(day)
        self._db.commit()
        return stop

    def delete_stop(self, stop: Stop) -> None:
        day = stop.day
        if day is None:
            self._db.delete(stop)
        else:
            day.stops.remove(stop)
            _renumber_stops(day)
            self._touch_day_trip(day)
        self._db.commit()

    def toggle_visited(self, stop: Stop) -> Stop:
        """방문 여부를 뒤집고 방문 시각을 함께 갱신합니다."""
        _set_visited(stop, not stop.is_visited)
        self._touch_day_trip(stop.day)
        self._db.commit()
        return stop

    def move_stop(self, stop: Stop, target_day: Day) -> Stop:
        """장소를 다른 일자의 마지막 순서로 옮깁니다."""
        source_day = stop.day
        if source_day is target_day:
            return stop

        stop.sort_order = len(target_day.stops)
        stop.day = target_day
        if source_day is not None:
            _renumber_stops(source_day)
        self._touch_day_trip(target_day)
        self._db.commit()
        return stop

    def reorder_stops(self, day: Day, source_indices: Iterable[int], destination: int) -> list[Stop]:
        """하루 안에서 장소 순서를 바꿉니다.

        `source_indices` 위치의 장소들을 꺼내 이동 전 기준 `destination` 오프셋에 끼워 넣습니다.
        """
        ordered = day.ordered_stops
        indices = sorted(set(source_indices))
        if any(index < 0 or index >= len(ordered) for index in indices):
            raise IndexError("장소 인덱스가 범위를 벗어났습니다.")
        destination = max(0, min(destination, len(ordered)))

        moving = [ordered[index] for index in indices]
        selected = set(indices)
        before = [stop for index, stop in enumerate(ordered[:destination]) if index not in selected]
        after = [stop for index, stop in enumerate(ordered) if index >= destination and index not in selected]

        reordered = before + moving + after
        for index, stop in enumerate(reordered):
            stop.sort_order = index
        self._touch_day_trip(day)
        self._db.commit()
        return reordered

    def batch_set_visited(self, stops: Iterable[Stop], visited: bool) -> int:
        count = 0
        for stop in stops:
            _set_visited(stop, visited)
            self._touch_day_trip(stop.day)
            count += 1
        self._db.commit()
        return count

    def batch_set_day_visited(self, day: Day, visited: bool) -> int:
        return self.batch_set_visited(list(day.stops), visited)

    # 지출

    def add_expense(
        self,
        trip: Trip,
        title: str,
        amount: float,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        date_incurred: date | None = None,
        notes: str = "",
    ) -> Expense:
        """여행 예산 통화로 지출을 추가합니다."""
        expense = Expense(
            title=title,
            amount=amount,
            currency_code=trip.budget_currency_code,
            category=category,
            date_incurred=date_incurred or date.today(),
            notes=notes,
            sort_order=len(trip.expenses),
        )
        trip.expenses.append(expense)
        trip.touch()
        self._db.commit()
        return expense

    def delete_expense(self, expense: Expense) -> None:
        trip = expense.trip
        if trip is None:
            self._db.delete(expense)
        else:
            trip.expenses.remove(expense)
            trip.touch()
        self._db.commit()

    # 검증 포함 생성

    def create_validated_trip(
        self,
        name: str,
        destination: str,
        start_date: date,
        end_date: date,
        notes: str = "",
    ) -> Trip:
        validate_trip(name, destination, start_date, end_date)
        return self.create_trip(name.strip(), destination.strip(), start_date, end_date, notes=notes)

    def add_validated_stop(
        self,
        day: Day,
        name: str,
        latitude: float = 0.0,
        longitude: float = 0.0,
        category: StopCategory = StopCategory.OTHER,
        arrival_time: datetime | None = None,
        departure_time: datetime | None = None,
        notes: str = "",
    ) -> Stop:
        validate_stop(name, arrival_time, departure_time)
        return self.add_stop(
            day,
            name.strip(),
            latitude=latitude,
            longitude=longitude,
            category=category,
            arrival_time=arrival_time,
            departure_time=departure_time,
            notes=notes,
        )

    def add_validated_expense(
        self,
        trip: Trip,
        title: str,
        amount: float,
        category: ExpenseCategory = ExpenseCategory.OTHER,
        date_incurred: date | None = None,
        notes: str = "",
    ) -> Expense:
        validate_expense(title, amount)
        return self.add_expense(
            trip,
            title.strip(),
            amount,
            category=category,
            date_incurred=date_incurred,
            notes=notes,
        )

    # 복제 / 충돌

    def clone_trip(self, source: Trip, new_start_date: date) -> Trip:
        """여행을 새 시작일로 복제합니다.

        기간 길이는 유지하고, 방문 기록과 예약 확인 번호는 비우며, 지출은 복사하지 않습니다.
        """
        shift = new_start_date - source.start_date
        clone = Trip(
            name=f"{source.name} (Copy)",
            destination=source.destination,
            start_date=new_start_date,
            end_date=source.end_date + shift,
            status=TripStatus.PLANNING,
            notes=source.notes,
            has_custom_dates=source.has_custom_dates,
            budget_amount=source.budget_amount,
            budget_currency_code=source.budget_currency_code,
        )

        for day in source.ordered_days:
            cloned_day = Day(
                date=day.date + shift,
                day_number=day.day_number,
                notes=day.notes,
                location=day.location,
                location_latitude=day.location_latitude,
                location_longitude=day.location_longitude,
            )
            for stop in day.ordered_stops:
                cloned_day.stops.append(_clone_stop(stop, shift))
            clone.days.append(cloned_day)

        self._db.add(clone)
        self._db.commit()
        logger.info("Trip cloned: %s -> %s (start %s)", source.name, clone.name, new_start_date)
        return clone

    def find_conflicting_trips(
        self,
        start_date: date,
        end_date: date,
        excluding: Trip | None = None,
    ) -> list[Trip]:
        """기간이 겹치는 여행 목록 (양 끝 날짜 포함)."""
        excluded_id = excluding.id if excluding is not None else None
        return [
            trip
            for trip in self.fetch_trips()
            if trip.id != excluded_id and trip.start_date <= end_date and start_date <= trip.end_date
        ]

    def has_conflicting_trips(self, start_date: date, end_date: date, excluding: Trip | None = None) -> bool:
        return bool(self.find_conflicting_trips(start_date, end_date, excluding=excluding))

    # 샘플 데이터

    def load_sample_data_if_empty(self) -> bool:
        """여행이 하나도 없을 때 예시 여행 세 개를 만듭니다."""
        count = self._db.scalar(select(func.count()).select_from(Trip)) or 0
        if count:
            return False

        today = date.today()

        paris = self.create_trip(
            "Paris Getaway",
            "Paris, France",
            today - timedelta(days=1),
            today + timedelta(days=3),
            notes="A romantic few days exploring the City of Light",
            status=TripStatus.ACTIVE,
        )
        paris_days = paris.ordered_days
        paris_days[0].notes = "Explore the city center"
        self.add_stop(paris_days[0], "Eiffel Tower", 48.8584, 2.2945, StopCategory.ATTRACTION)
        self.add_stop(paris_days[0], "Le Jules Verne", 48.8583, 2.2944, StopCategory.RESTAURANT)
        hotel = self.add_stop(paris_days[0], "Hôtel Le Marais", 48.8590, 2.3580, StopCategory.ACCOMMODATION)
        hotel.address = "12 Rue des Archives, 75004 Paris"
        hotel.confirmation_code = "HLM-28491"
        hotel.check_out_date = paris.end_date
        paris_days[1].notes = "Art and culture"
        self.add_stop(paris_days[1], "Louvre Museum", 48.8606, 2.3376, StopCategory.ATTRACTION)
        self.add_stop(paris_days[1], "Café de Flore", 48.8540, 2.3325, StopCategory.RESTAURANT)

        japan = self.create_trip(
            "Japan Adventure",
            "Japan",
            today + timedelta(days=30),
            today + timedelta(days=37),
            notes="Cherry blossom season trip — Tokyo & Kyoto",
        )
        japan_days = japan.ordered_days
        for day in japan_days:
            day.location = "Tokyo, Japan" if day.day_number <= 4 else "Kyoto, Japan"
        japan_days[0].notes = "Arrival day"
        self.add_stop(japan_days[0], "Narita Airport", 35.7720, 140.3929, StopCategory.TRANSPORT)
        self.add_stop(japan_days[0], "Shinjuku Hotel", 35.6938, 139.7034, StopCategory.ACCOMMODATION)
        japan_days[1].notes = "Temple and garden visits"
        self.add_stop(japan_days[1], "Senso-ji Temple", 35.7148, 139.7967, StopCategory.ATTRACTION)
        self.add_stop(japan_days[1], "Tsukiji Outer Market", 35.6654, 139.7707, StopCategory.RESTAURANT)
        japan_days[4].notes = "Train to Kyoto, explore temples"
        self.add_stop(japan_days[4], "Shinkansen to Kyoto", 35.6812, 139.7671, StopCategory.TRANSPORT)
        self.add_stop(japan_days[4], "Fushimi Inari Shrine", 34.9671, 135.7727, StopCategory.ATTRACTION)

        self.create_trip(
            "New York City Weekend",
            "New York, USA",
            today - timedelta(days=18),
            today - timedelta(days=14),
            notes="Holiday shopping and sightseeing",
            status=TripStatus.COMPLETED,
        )

        self._db.commit()
        logger.info("Sample data loaded: 3 trips")
        return True

    def _touch_day_trip(self, day: Day | None) -> None:
        if day is not None and day.trip is not None:
            day.trip.touch()


def _set_visited(stop: Stop, visited: bool) -> None:
    stop.is_visited = visited
    stop.visited_at = datetime.now() if visited else None


def _renumber_stops(day: Day) -> None:
    for index, stop in enumerate(day.ordered_stops):
        stop.sort_order = index


def _clone_stop(stop: Stop, shift: timedelta) -> Stop:
    return Stop(
        name=stop.name,
        latitude=stop.latitude,
        longitude=stop.longitude,
        category_raw=stop.category_raw,
        sort_order=stop.sort_order,
        arrival_time=stop.arrival_time + shift if stop.arrival_time else None,
        departure_time=stop.departure_time + shift if stop.departure_time else None,
        notes=stop.notes,
        rating=stop.rating,
        address=stop.address,
        phone=stop.phone,
        website=stop.website,
        check_out_date=stop.check_out_date + shift if stop.check_out_date else None,
        airline=stop.airline,
        flight_number=stop.flight_number,
        departure_airport=stop.departure_airport,
        arrival_airport=stop.arrival_airport,
    )


def _all_stops(trip: Trip) -> list[Stop]:
    return [stop for day in trip.ordered_days for stop in day.ordered_stops]


def completion_score(trip: Trip) -> float:
    """계획 완성도 (0.0 ~ 1.0).

    장소 존재, 모든 일자에 장소 존재, 예산 설정, 예약 정보 존재의 네 기준 중 충족한 비율입니다.
    """
    stops = _all_stops(trip)
    criteria = (
        bool(stops),
        bool(trip.days) and all(day.stops for day in trip.days),
        trip.budget_amount > 0,
        any(stop.has_booking_details for stop in stops),
    )
    return sum(criteria) / len(criteria)


def trip_statistics(trip: Trip) -> TripStatistics:
    stops = _all_stops(trip)
    total_stops = len(stops)
    visited_stops = sum(1 for stop in stops if stop.is_visited)
    total_days = len(trip.days)
    days_with_stops = sum(1 for day in trip.days if day.stops)
    total_expenses = sum(expense.amount for expense in trip.expenses)

    return TripStatistics(
        total_stops=total_stops,
        visited_stops=visited_stops,
        total_days=total_days,
        days_with_stops=days_with_stops,
        empty_days=total_days - days_with_stops,
        average_stops_per_day=total_stops / total_days if total_days else 0.0,
        completion_percentage=visited_stops / total_stops if total_stops else 0.0,
        category_breakdown=dict(Counter(stop.category for stop in stops)),
        total_expenses=total_expenses,
        budget_remaining=trip.budget_amount - total_expenses if trip.budget_amount > 0 else None,
        total_bookings=sum(1 for stop in stops if stop.has_booking_details),
    )


def sort_trips(trips: Iterable[Trip], order: TripSortOrder) -> list[Trip]:
    trips = list(trips)
    if order == TripSortOrder.START_DATE_ASCENDING:
        return sorted(trips, key=lambda trip: trip.start_date)
    if order == TripSortOrder.NAME_ASCENDING:
        return sorted(trips, key=lambda trip: trip.name.casefold())
    if order == TripSortOrder.DESTINATION_ASCENDING:
        return sorted(trips, key=lambda trip: trip.destination.casefold())
    if order == TripSortOrder.DURATION_DESCENDING:
        return sorted(trips, key=lambda trip: trip.duration_in_days, reverse=True)
    return sorted(trips, key=lambda trip: trip.start_date, reverse=True)


def filter_stops(trip: Trip, query: str = "", category: StopCategory | None = None) -> list[Stop]:
    """이름/메모/주소에 검색어가 포함된 장소를 일자·순서대로 반환합니다 (대소문자 무시)."""
    needle = query.strip().casefold()
    results = []
    for stop in _all_stops(trip):
        if category is not None and stop.category != category:
            continue
        if needle:
            haystacks = (stop.name, stop.notes, stop.address or "")
            if not any(needle in text.casefold() for text in haystacks):
                continue
        results.append(stop)
    return results


def export_expenses_csv(trip: Trip) -> str:
    """지출 목록을 CSV 문자열로 내보냅니다. 마지막에 빈 줄과 합계 행이 붙습니다."""
    output = io.StringIO()
    writer = csv.writer(output)
    writer.writerow(["Title", "Amount", "Currency", "Category", "Date", "Notes"])

    total = 0.0
    for expense in trip.ordered_expenses:
        total += expense.amount
        writer.writerow(
            [
                expense.title,
                f"{expense.amount:.2f}",
                expense.currency_code,
                expense.category.value,
                expense.date_incurred.isoformat(),
                expense.notes,
            ]
        )

    writer.writerow([])
    writer.writerow(["Total", f"{total:.2f}", trip.budget_currency_code, "", "", ""])
    return output.getvalue()
