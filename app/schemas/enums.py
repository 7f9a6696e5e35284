"""여행 도메인 열거형 정의.

모든 열거형은 문자열 기반이며 DB에는 원시 문자열(raw value)로 저장됩니다.
"""

from enum import StrEnum


class TripStatus(StrEnum):
    """여행 상태."""

    PLANNING = "planning"
    ACTIVE = "active"
    COMPLETED = "completed"


class StopCategory(StrEnum):
    """장소(stop) 카테고리."""

    ACCOMMODATION = "accommodation"
    RESTAURANT = "restaurant"
    ATTRACTION = "attraction"
    TRANSPORT = "transport"
    ACTIVITY = "activity"
    OTHER = "other"


class ExpenseCategory(StrEnum):
    """지출 카테고리."""

    ACCOMMODATION = "accommodation"
    FOOD = "food"
    TRANSPORT = "transport"
    ACTIVITY = "activity"
    SHOPPING = "shopping"
    OTHER = "other"


class TripSortOrder(StrEnum):
    """여행 목록 정렬 기준."""

    START_DATE_DESCENDING = "start_date_desc"
    START_DATE_ASCENDING = "start_date_asc"
    NAME_ASCENDING = "name_asc"
    DESTINATION_ASCENDING = "destination_asc"
    DURATION_DESCENDING = "duration_desc"


class MatchConfidence(StrEnum):
    """사진-장소 매칭 신뢰도."""

    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def rank(self) -> int:
        return _CONFIDENCE_RANK[self]


_CONFIDENCE_RANK = {
    MatchConfidence.NONE: 0,
    MatchConfidence.LOW: 1,
    MatchConfidence.MEDIUM: 2,
    MatchConfidence.HIGH: 3,
}


def parse_enum(enum_cls, raw: str | None, default):
    """원시 문자열을 열거형으로 변환하고, 알 수 없는 값은 기본값으로 대체합니다."""
    try:
        return enum_cls(raw)
    except ValueError:
        return default
