"""여행/장소/지출 입력 검증."""

from __future__ import annotations

from datetime import date, datetime
from enum import StrEnum


class ValidationErrorCode(StrEnum):
    """입력 검증 실패 코드."""

    EMPTY_TRIP_NAME = "empty_trip_name"
    EMPTY_DESTINATION = "empty_destination"
    END_DATE_BEFORE_START_DATE = "end_date_before_start_date"
    EMPTY_STOP_NAME = "empty_stop_name"
    DEPARTURE_BEFORE_ARRIVAL = "departure_before_arrival"
    EMPTY_EXPENSE_TITLE = "empty_expense_title"
    NEGATIVE_EXPENSE_AMOUNT = "negative_expense_amount"


_MESSAGES = {
    ValidationErrorCode.EMPTY_TRIP_NAME: "여행 이름을 입력해야 합니다.",
    ValidationErrorCode.EMPTY_DESTINATION: "여행지를 입력해야 합니다.",
    ValidationErrorCode.END_DATE_BEFORE_START_DATE: "여행 종료일은 시작일과 같거나 이후여야 합니다.",
    ValidationErrorCode.EMPTY_STOP_NAME: "장소 이름을 입력해야 합니다.",
    ValidationErrorCode.DEPARTURE_BEFORE_ARRIVAL: "출발 시각은 도착 시각과 같거나 이후여야 합니다.",
    ValidationErrorCode.EMPTY_EXPENSE_TITLE: "지출 제목을 입력해야 합니다.",
    ValidationErrorCode.NEGATIVE_EXPENSE_AMOUNT: "지출 금액은 0 이상이어야 합니다.",
}


class TripValidationError(ValueError):
    """입력 검증 실패 시 발생하는 예외."""

    def __init__(self, code: ValidationErrorCode) -> None:
        self.code = code
        super().__init__(_MESSAGES[code])


def _is_blank(value: str | None) -> bool:
    return not (value or "").strip()


def validate_trip(name: str, destination: str, start_date: date, end_date: date) -> None:
    if _is_blank(name):
        raise TripValidationError(ValidationErrorCode.EMPTY_TRIP_NAME)
    if _is_blank(destination):
        raise TripValidationError(ValidationErrorCode.EMPTY_DESTINATION)
    if end_date < start_date:
        raise TripValidationError(ValidationErrorCode.END_DATE_BEFORE_START_DATE)


def validate_stop(
    name: str,
    arrival_time: datetime | None = None,
    departure_time: datetime | None = None,
) -> None:
    if _is_blank(name):
        raise TripValidationError(ValidationErrorCode.EMPTY_STOP_NAME)
    if arrival_time is not None and departure_time is not None and departure_time < arrival_time:
        raise TripValidationError(ValidationErrorCode.DEPARTURE_BEFORE_ARRIVAL)


def validate_expense(title: str, amount: float) -> None:
    if _is_blank(title):
        raise TripValidationError(ValidationErrorCode.EMPTY_EXPENSE_TITLE)
    if amount < 0:
        raise TripValidationError(ValidationErrorCode.NEGATIVE_EXPENSE_AMOUNT)
