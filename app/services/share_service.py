"""여행 공유 파일(`.tripwit`) 내보내기/디코딩/가져오기."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.core.logger import get_logger
from app.models import Day, Expense, Stop, StopComment, Trip
from app.schemas.transfer import (
    CURRENT_SCHEMA_VERSION,
    CommentTransfer,
    DayTransfer,
    ExpenseTransfer,
    StopTransfer,
    TripTransfer,
)
from app.services.share_export import resolve_export_dir

logger = get_logger(__name__)

TRIP_FILE_EXTENSION = ".tripwit"


class TripFileError(ValueError):
    """공유 파일을 읽거나 해석할 수 없을 때 발생하는 예외."""


def sanitize_filename(name: str) -> str:
    """영숫자가 아닌 문자를 모두 `_`로 바꿉니다."""
    return "".join(char if char.isalnum() else "_" for char in name)


def build_transfer(trip: Trip) -> TripTransfer:
    return TripTransfer(
        schema_version=CURRENT_SCHEMA_VERSION,
        name=trip.name,
        destination=trip.destination,
        start_date=trip.start_date,
        end_date=trip.end_date,
        status_raw=trip.status_raw,
        notes=trip.notes,
        has_custom_dates=trip.has_custom_dates,
        budget_amount=trip.budget_amount,
        budget_currency_code=trip.budget_currency_code,
        days=[
            DayTransfer(
                date=day.date,
                day_number=day.day_number,
                notes=day.notes,
                location=day.location,
                location_latitude=day.location_latitude,
                location_longitude=day.location_longitude,
                stops=[_stop_transfer(stop) for stop in day.ordered_stops],
            )
            for day in trip.ordered_days
        ],
        expenses=[
            ExpenseTransfer(
                title=expense.title,
                amount=expense.amount,
                currency_code=expense.currency_code,
                date_incurred=expense.date_incurred,
                category_raw=expense.category_raw,
                notes=expense.notes,
                sort_order=expense.sort_order,
                created_at=expense.created_at,
            )
            for expense in trip.ordered_expenses
        ],
    )


def _stop_transfer(stop: Stop) -> StopTransfer:
    return StopTransfer(
        name=stop.name,
        latitude=stop.latitude,
        longitude=stop.longitude,
        arrival_time=stop.arrival_time,
        departure_time=stop.departure_time,
        category_raw=stop.category_raw,
        notes=stop.notes,
        sort_order=stop.sort_order,
        is_visited=stop.is_visited,
        visited_at=stop.visited_at,
        rating=stop.rating,
        address=stop.address,
        phone=stop.phone,
        website=stop.website,
        comments=[CommentTransfer(text=comment.text, created_at=comment.created_at) for comment in stop.comments],
        confirmation_code=stop.confirmation_code,
        check_out_date=stop.check_out_date,
        airline=stop.airline,
        flight_number=stop.flight_number,
        departure_airport=stop.departure_airport,
        arrival_airport=stop.arrival_airport,
    )


def encode_transfer(transfer: TripTransfer) -> str:
    """키를 정렬한 들여쓰기 JSON 문자열로 인코딩합니다."""
    payload = transfer.model_dump(by_alias=True, mode="json")
    return json.dumps(payload, ensure_ascii=False, indent=2, sort_keys=True)


def export_trip(trip: Trip, directory: str | Path | None = None) -> Path:
    """여행을 `<이름>.tripwit` 파일로 기록하고 경로를 반환합니다."""
    path = resolve_export_dir(directory) / f"{sanitize_filename(trip.name)}{TRIP_FILE_EXTENSION}"
    path.write_text(encode_transfer(build_transfer(trip)), encoding="utf-8")
    logger.info("Trip exported: %s -> %s", trip.name, path)
    return path


def decode_transfer(data: str | bytes) -> TripTransfer:
    try:
        return TripTransfer.model_validate_json(data)
    except ValidationError as exc:
        raise TripFileError(f"여행 파일을 해석할 수 없습니다: {exc.error_count()}개 오류") from exc


def decode_trip(path: str | Path) -> TripTransfer:
    """파일을 읽어 미리보기용 전송 모델로 디코딩합니다."""
    try:
        data = Path(path).read_bytes()
    except OSError as exc:
        raise TripFileError(f"여행 파일을 읽을 수 없습니다: {path}") from exc
    return decode_transfer(data)


def import_trip(db: Session, transfer: TripTransfer) -> Trip:
    """전송 모델로부터 새 여행 엔티티 전체를 만듭니다."""
    trip = Trip(
        name=transfer.name,
        destination=transfer.destination,
        start_date=transfer.start_date,
        end_date=transfer.end_date,
        notes=transfer.notes,
        status_raw=transfer.status_raw,
        has_custom_dates=transfer.has_custom_dates,
        budget_amount=transfer.budget_amount,
        budget_currency_code=transfer.budget_currency_code,
    )

    for day_t in transfer.days:
        day = Day(
            date=day_t.date,
            day_number=day_t.day_number,
            notes=day_t.notes,
            location=day_t.location,
            location_latitude=day_t.location_latitude,
            location_longitude=day_t.location_longitude,
        )
        for stop_t in day_t.stops:
            stop = Stop(
                name=stop_t.name,
                latitude=stop_t.latitude,
                longitude=stop_t.longitude,
                category_raw=stop_t.category_raw,
                arrival_time=stop_t.arrival_time,
                departure_time=stop_t.departure_time,
                sort_order=stop_t.sort_order,
                notes=stop_t.notes,
                is_visited=stop_t.is_visited,
                visited_at=stop_t.visited_at,
                rating=stop_t.rating,
                address=stop_t.address,
                phone=stop_t.phone,
                website=stop_t.website,
                confirmation_code=stop_t.confirmation_code,
                check_out_date=stop_t.check_out_date,
                airline=stop_t.airline,
                flight_number=stop_t.flight_number,
                departure_airport=stop_t.departure_airport,
                arrival_airport=stop_t.arrival_airport,
            )
            for comment_t in stop_t.comments:
                stop.comments.append(StopComment(text=comment_t.text, created_at=comment_t.created_at))
            day.stops.append(stop)
        trip.days.append(day)

    for expense_t in transfer.expenses:
        expense_kwargs = {
            "title": expense_t.title,
            "amount": expense_t.amount,
            "currency_code": expense_t.currency_code,
            "date_incurred": expense_t.date_incurred,
            "category_raw": expense_t.category_raw,
            "notes": expense_t.notes,
            "sort_order": expense_t.sort_order,
        }
        if expense_t.created_at is not None:
            expense_kwargs["created_at"] = expense_t.created_at
        trip.expenses.append(Expense(**expense_kwargs))

    db.add(trip)
    db.commit()
    logger.info(
        "Trip imported: %s (schema v%d, %d days, %d expenses)",
        trip.name,
        transfer.schema_version,
        len(trip.days),
        len(trip.expenses),
    )
    return trip
