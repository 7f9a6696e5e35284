"""여행/일자/장소/지출 요청·응답 스키마."""

import uuid
from datetime import date, datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, field_validator

from app.schemas.enums import ExpenseCategory, StopCategory, TripStatus
from app.schemas.transfer import to_naive_utc

# 오프셋이 붙은 시각은 UTC로 바꾼 뒤 naive로 저장한다
UtcDateTime = Annotated[datetime, AfterValidator(to_naive_utc)]


class TripCreateRequest(BaseModel):
    """여행 생성 요청 모델."""

    name: str = Field(..., description="여행 이름")
    destination: str = Field(..., description="여행지")
    start_date: date = Field(..., description="여행 시작일 (YYYY-MM-DD)")
    end_date: date = Field(..., description="여행 종료일 (YYYY-MM-DD)")
    notes: str = Field("", description="메모")


class TripUpdateRequest(BaseModel):
    """여행 수정 요청 모델. 날짜가 바뀌면 일자(day)를 동기화합니다."""

    name: Optional[str] = Field(None, description="여행 이름")
    destination: Optional[str] = Field(None, description="여행지")
    start_date: Optional[date] = Field(None, description="여행 시작일")
    end_date: Optional[date] = Field(None, description="여행 종료일")
    status: Optional[TripStatus] = Field(None, description="여행 상태")
    notes: Optional[str] = Field(None, description="메모")
    budget_amount: Optional[float] = Field(None, ge=0, description="예산")
    budget_currency_code: Optional[str] = Field(None, min_length=3, max_length=3, description="예산 통화 코드")


class TripCloneRequest(BaseModel):
    """여행 복제 요청 모델."""

    new_start_date: date = Field(..., description="복제본의 시작일")


class StopCreateRequest(BaseModel):
    """장소 추가 요청 모델."""

    name: str = Field(..., description="장소 이름")
    latitude: float = Field(0.0, ge=-90, le=90, description="위도")
    longitude: float = Field(0.0, ge=-180, le=180, description="경도")
    category: StopCategory = Field(StopCategory.OTHER, description="장소 카테고리")
    arrival_time: Optional[UtcDateTime] = Field(None, description="도착 시각 (UTC)")
    departure_time: Optional[UtcDateTime] = Field(None, description="출발 시각 (UTC)")
    notes: str = Field("", description="메모")


class StopMoveRequest(BaseModel):
    """장소를 다른 일자로 옮기는 요청 모델."""

    target_day_id: uuid.UUID = Field(..., description="옮겨갈 일자 ID")


class StopReorderRequest(BaseModel):
    """하루 안의 장소 순서 변경 요청 모델 (리스트 move 의미론)."""

    source_indices: list[int] = Field(..., min_length=1, description="옮길 장소의 현재 인덱스 목록")
    destination: int = Field(..., ge=0, description="삽입 위치 (이동 전 기준 오프셋)")


class BatchVisitedRequest(BaseModel):
    """여러 장소의 방문 여부 일괄 변경 요청 모델."""

    stop_ids: list[uuid.UUID] = Field(..., description="대상 장소 ID 목록")
    visited: bool = Field(..., description="설정할 방문 여부")


class ExpenseCreateRequest(BaseModel):
    """지출 추가 요청 모델."""

    title: str = Field(..., description="지출 제목")
    amount: float = Field(..., description="금액")
    category: ExpenseCategory = Field(ExpenseCategory.OTHER, description="지출 카테고리")
    date_incurred: Optional[date] = Field(None, description="지출일 (기본값: 오늘)")
    notes: str = Field("", description="메모")


class StopResponse(BaseModel):
    """장소 응답 모델."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    latitude: float
    longitude: float
    category: StopCategory
    sort_order: int
    arrival_time: Optional[datetime] = None
    departure_time: Optional[datetime] = None
    notes: str = ""
    is_visited: bool = False
    visited_at: Optional[datetime] = None
    rating: int = 0
    address: Optional[str] = None
    phone: Optional[str] = None
    website: Optional[str] = None
    confirmation_code: Optional[str] = None
    check_out_date: Optional[date] = None
    airline: Optional[str] = None
    flight_number: Optional[str] = None
    departure_airport: Optional[str] = None
    arrival_airport: Optional[str] = None


class DayResponse(BaseModel):
    """일자 응답 모델."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    date: date
    day_number: int
    formatted_date: str
    notes: str = ""
    location: str = ""
    stops: list[StopResponse] = Field(default_factory=list)

    @field_validator("stops", mode="before")
    @classmethod
    def _sort_stops(cls, value):
        if isinstance(value, list):
            return sorted(value, key=lambda stop: getattr(stop, "sort_order", 0))
        return value


class ExpenseResponse(BaseModel):
    """지출 응답 모델."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    title: str
    amount: float
    currency_code: str
    date_incurred: date
    category: ExpenseCategory
    notes: str = ""
    sort_order: int = 0


class TripSummaryResponse(BaseModel):
    """여행 목록용 요약 응답 모델."""

    model_config = ConfigDict(from_attributes=True)

    id: uuid.UUID
    name: str
    destination: str
    start_date: date
    end_date: date
    status: TripStatus
    display_status: TripStatus
    duration_in_days: int


class TripResponse(TripSummaryResponse):
    """여행 상세 응답 모델."""

    notes: str = ""
    has_custom_dates: bool = True
    budget_amount: float = 0.0
    budget_currency_code: str = "USD"
    created_at: datetime
    updated_at: datetime
    days: list[DayResponse] = Field(default_factory=list)
    expenses: list[ExpenseResponse] = Field(default_factory=list)

    @field_validator("days", mode="before")
    @classmethod
    def _sort_days(cls, value):
        if isinstance(value, list):
            return sorted(value, key=lambda day: getattr(day, "day_number", 0))
        return value


class TripStatistics(BaseModel):
    """여행 통계 모델."""

    total_stops: int = Field(..., description="전체 장소 수")
    visited_stops: int = Field(..., description="방문 완료 장소 수")
    total_days: int = Field(..., description="전체 일수")
    days_with_stops: int = Field(..., description="장소가 있는 일수")
    empty_days: int = Field(..., description="장소가 없는 일수")
    average_stops_per_day: float = Field(..., description="일평균 장소 수")
    completion_percentage: float = Field(..., description="방문 완료 비율 (0.0 ~ 1.0)")
    category_breakdown: dict[StopCategory, int] = Field(default_factory=dict, description="카테고리별 장소 수")
    total_expenses: float = Field(0.0, description="총 지출")
    budget_remaining: Optional[float] = Field(None, description="남은 예산 (예산 미설정 시 None)")
    total_bookings: int = Field(0, description="예약 정보가 있는 장소 수")


class TripStatisticsResponse(TripStatistics):
    """여행 통계 + 계획 완성도 응답 모델."""

    completion_score: float = Field(..., description="계획 완성도 (0.0 ~ 1.0)")


class DayVisitedRequest(BaseModel):
    """하루 전체 장소의 방문 여부 일괄 변경 요청 모델."""

    visited: bool = Field(..., description="설정할 방문 여부")


class BatchVisitedResponse(BaseModel):
    """방문 여부 일괄 변경 결과."""

    updated: int = Field(..., description="변경된 장소 수")


class OutsideRangeResponse(BaseModel):
    """기간 변경 시 장소를 잃게 되는 일자 수."""

    count: int = Field(..., description="새 기간 밖에 있으면서 장소가 있는 일자 수")
