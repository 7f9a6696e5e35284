"""`.tripwit` 공유 파일 직렬화 스키마.

JSON 키는 camelCase, 날짜/시각은 ISO-8601 UTC 타임스탬프로 기록합니다.
스키마 v1 파일처럼 일부 필드가 없어도 기본값으로 디코딩됩니다.
"""

from datetime import date, datetime, timezone
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer
from pydantic.alias_generators import to_camel

CURRENT_SCHEMA_VERSION = 2


def _coerce_date(value):
    """타임스탬프 문자열("2026-06-01T00:00:00Z")에서 날짜 부분만 취합니다."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, str) and "T" in value:
        return value.split("T", 1)[0]
    return value


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


def _format_date(value: date) -> str:
    return f"{value.isoformat()}T00:00:00Z"


def _format_datetime(value: datetime) -> str:
    return f"{value.isoformat(timespec='seconds')}Z"


TransferDate = Annotated[
    date,
    BeforeValidator(_coerce_date),
    PlainSerializer(_format_date, return_type=str, when_used="json"),
]
TransferDateTime = Annotated[
    datetime,
    AfterValidator(to_naive_utc),
    PlainSerializer(_format_datetime, return_type=str, when_used="json"),
]


class TransferModel(BaseModel):
    """camelCase 별칭을 사용하는 전송 모델 기반 클래스."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class CommentTransfer(TransferModel):
    text: str
    created_at: TransferDateTime


class StopTransfer(TransferModel):
    name: str
    latitude: float = 0.0
    longitude: float = 0.0
    arrival_time: Optional[TransferDateTime] = None
    departure_time: Optional[TransferDateTime] = None
    category_raw: str = "other"
    notes: str = ""
    sort_order: int = 0
    is_visited: bool = False
    visited_at: Optional[TransferDateTime] = None
    rating: int = 0
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    comments: list[CommentTransfer] = Field(default_factory=list)
    # schema v2: 예약 필드
    confirmation_code: Optional[str] = None
    check_out_date: Optional[TransferDate] = None
    airline: Optional[str] = None
    flight_number: Optional[str] = None
    departure_airport: Optional[str] = None
    arrival_airport: Optional[str] = None


class DayTransfer(TransferModel):
    date: TransferDate
    day_number: int
    notes: str = ""
    location: str = ""
    location_latitude: float = 0.0
    location_longitude: float = 0.0
    stops: list[StopTransfer] = Field(default_factory=list)


class ExpenseTransfer(TransferModel):
    title: str
    amount: float
    currency_code: str = "USD"
    date_incurred: TransferDate
    category_raw: str = "other"
    notes: str = ""
    sort_order: int = 0
    created_at: Optional[TransferDateTime] = None


class TripTransfer(TransferModel):
    """여행 전체를 담는 최상위 전송 모델."""

    schema_version: int = CURRENT_SCHEMA_VERSION
    name: str
    destination: str
    start_date: TransferDate
    end_date: TransferDate
    status_raw: str = "planning"
    notes: str = ""
    has_custom_dates: bool = True
    budget_amount: float = 0.0
    budget_currency_code: str = "USD"
    days: list[DayTransfer] = Field(default_factory=list)
    expenses: list[ExpenseTransfer] = Field(default_factory=list)

    @property
    def transfer_id(self) -> str:
        """미리보기 목록에서 쓰는 식별자 (이름 + 시작일)."""
        return f"{self.name}-{self.start_date.isoformat()}"
