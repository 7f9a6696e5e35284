# app/models/stop.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.schemas.enums import StopCategory, parse_enum

if TYPE_CHECKING:
    from app.models.comment import StopComment
    from app.models.day import Day


# Stop 테이블 정의 (하루 일정 안의 방문 장소)
class Stop(Base):
    __tablename__ = "stops"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    day_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("days.id", ondelete="CASCADE"), index=True)

    # 장소 기본 정보
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    category_raw: Mapped[str] = mapped_column(String(20), nullable=False, default=StopCategory.OTHER.value)
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)  # 같은 날 안의 표시 순서
    arrival_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    departure_time: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")

    # 방문 여부 (is_visited가 False면 visited_at은 비어 있어야 함)
    is_visited: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    visited_at: Mapped[datetime | None] = mapped_column(DateTime, nullable=True)
    rating: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # 연락처
    address: Mapped[str | None] = mapped_column(String(300), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    website: Mapped[str | None] = mapped_column(String(300), nullable=True)

    # 예약 정보 (숙소/교통 stop에 사용)
    confirmation_code: Mapped[str | None] = mapped_column(String(100), nullable=True)
    check_out_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    airline: Mapped[str | None] = mapped_column(String(100), nullable=True)
    flight_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    departure_airport: Mapped[str | None] = mapped_column(String(10), nullable=True)
    arrival_airport: Mapped[str | None] = mapped_column(String(10), nullable=True)

    day: Mapped[Day | None] = relationship(back_populates="stops")
    comments: Mapped[list[StopComment]] = relationship(
        back_populates="stop",
        cascade="all, delete-orphan",
        order_by="StopComment.created_at",
    )

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("latitude", 0.0)
        kwargs.setdefault("longitude", 0.0)
        kwargs.setdefault("sort_order", 0)
        kwargs.setdefault("notes", "")
        kwargs.setdefault("is_visited", False)
        kwargs.setdefault("visited_at", None)
        kwargs.setdefault("rating", 0)
        if "category" not in kwargs:
            kwargs.setdefault("category_raw", StopCategory.OTHER.value)
        super().__init__(**kwargs)

    @property
    def category(self) -> StopCategory:
        return parse_enum(StopCategory, self.category_raw, StopCategory.OTHER)

    @category.setter
    def category(self, value: StopCategory | str) -> None:
        self.category_raw = StopCategory(value).value

    @property
    def has_booking_details(self) -> bool:
        """예약 수준의 정보가 붙어 있는지 여부."""
        return bool(self.confirmation_code or self.check_out_date or self.airline or self.flight_number)

    @property
    def is_multi_day_accommodation(self) -> bool:
        return self.category == StopCategory.ACCOMMODATION and self.check_out_date is not None

    @property
    def night_count(self) -> int | None:
        """여러 날 숙박의 박 수. 계산할 수 없거나 0 이하면 None."""
        if self.category != StopCategory.ACCOMMODATION or self.check_out_date is None or self.day is None:
            return None
        nights = (self.check_out_date - self.day.date).days
        return nights if nights > 0 else None

    def __repr__(self):
        return f"<Stop(name={self.name}, category={self.category_raw})>"
