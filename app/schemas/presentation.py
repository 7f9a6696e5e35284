"""클라이언트가 그대로 그리는 표시용 데이터 스키마."""

import uuid
from typing import Optional

from pydantic import BaseModel, Field

from app.schemas.enums import StopCategory


class CategoryStyle(BaseModel):
    """카테고리별 아이콘/색상."""

    icon: str = Field(..., description="SF Symbols 아이콘 이름")
    color: str = Field(..., description="색상 이름")


class StopRow(BaseModel):
    """일정 목록의 장소 한 줄."""

    stop_id: uuid.UUID
    name: str
    category: StopCategory
    icon: str
    color: str
    is_visited: bool = Field(False, description="방문 체크 표시 여부")
    confirmation_code: Optional[str] = Field(None, description="예약 확인 번호 배지")
    time_range: Optional[str] = Field(None, description='시간 라벨 (예: "9:30 AM - 11:00 AM")')
    booking_subtitle: Optional[str] = Field(None, description='예약 부제 (예: "3 nights", "JFK → FCO")')
    opacity: float = Field(1.0, description="행 불투명도")

    @property
    def subtitle(self) -> Optional[str]:
        """예약 부제가 있으면 시간 라벨 대신 보여줍니다."""
        return self.booking_subtitle or self.time_range
