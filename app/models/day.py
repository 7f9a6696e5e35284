# app/models/day.py
from __future__ import annotations

import datetime as dt
import uuid
from typing import TYPE_CHECKING

from sqlalchemy import Date, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.core.formatting import format_medium_date
from app.models.base import Base

if TYPE_CHECKING:
    from app.models.stop import Stop
    from app.models.trip import Trip


# Day 테이블 정의 (여행 기간의 하루 단위)
class Day(Base):
    __tablename__ = "days"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("trips.id", ondelete="CASCADE"), index=True)

    date: Mapped[dt.date] = mapped_column(Date, nullable=False)
    day_number: Mapped[int] = mapped_column(Integer, nullable=False)  # 1부터 시작
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    location: Mapped[str] = mapped_column(String(200), nullable=False, default="")
    location_latitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    location_longitude: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)

    trip: Mapped[Trip | None] = relationship(back_populates="days")
    stops: Mapped[list[Stop]] = relationship(
        back_populates="day",
        cascade="all, delete-orphan",
        order_by="Stop.sort_order",
    )

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("notes", "")
        kwargs.setdefault("location", "")
        kwargs.setdefault("location_latitude", 0.0)
        kwargs.setdefault("location_longitude", 0.0)
        super().__init__(**kwargs)

    @property
    def formatted_date(self) -> str:
        """화면 표시용 날짜 문자열 (예: "Mar 15, 2026")."""
        return format_medium_date(self.date)

    @property
    def ordered_stops(self) -> list[Stop]:
        return sorted(self.stops, key=lambda stop: stop.sort_order)

    def __repr__(self):
        return f"<Day(day_number={self.day_number}, date={self.date})>"
