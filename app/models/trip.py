# app/models/trip.py
from __future__ import annotations

import uuid
from datetime import date, datetime, timedelta
from typing import TYPE_CHECKING

from sqlalchemy import Boolean, Date, DateTime, Float, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.schemas.enums import TripStatus, parse_enum

if TYPE_CHECKING:
    from app.models.day import Day
    from app.models.expense import Expense


# Trip 테이블 정의
class Trip(Base):
    __tablename__ = "trips"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # 여행 기본 정보
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    destination: Mapped[str] = mapped_column(String(200), nullable=False)
    start_date: Mapped[date] = mapped_column(Date, index=True, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=False)

    # 상태는 원시 문자열로 저장 (planning / active / completed)
    status_raw: Mapped[str] = mapped_column(String(20), nullable=False, default=TripStatus.PLANNING.value)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    has_custom_dates: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # 예산
    budget_amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    budget_currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    # 관리용 타임스탬프
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)
    updated_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    days: Mapped[list[Day]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="Day.day_number",
    )
    expenses: Mapped[list[Expense]] = relationship(
        back_populates="trip",
        cascade="all, delete-orphan",
        order_by="Expense.sort_order",
    )

    def __init__(self, **kwargs) -> None:
        now = datetime.now()
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("notes", "")
        kwargs.setdefault("has_custom_dates", True)
        kwargs.setdefault("budget_amount", 0.0)
        kwargs.setdefault("budget_currency_code", "USD")
        kwargs.setdefault("created_at", now)
        kwargs.setdefault("updated_at", now)
        if "status" not in kwargs:
            kwargs.setdefault("status_raw", TripStatus.PLANNING.value)
        super().__init__(**kwargs)

    @property
    def status(self) -> TripStatus:
        return parse_enum(TripStatus, self.status_raw, TripStatus.PLANNING)

    @status.setter
    def status(self, value: TripStatus | str) -> None:
        self.status_raw = TripStatus(value).value

    @property
    def duration_in_days(self) -> int:
        """시작일과 종료일을 모두 포함한 여행 일수."""
        return (self.end_date - self.start_date).days + 1

    @property
    def is_active(self) -> bool:
        today = date.today()
        return self.start_date <= today < self.end_date + timedelta(days=1)

    @property
    def is_past(self) -> bool:
        return date.today() >= self.end_date + timedelta(days=1)

    @property
    def is_future(self) -> bool:
        return date.today() < self.start_date

    @property
    def display_status(self) -> TripStatus:
        """저장된 상태 대신 날짜로 계산한 표시용 상태."""
        if not self.has_custom_dates:
            return TripStatus.PLANNING
        if self.is_active:
            return TripStatus.ACTIVE
        if self.is_past:
            return TripStatus.COMPLETED
        return TripStatus.PLANNING

    @property
    def ordered_days(self) -> list[Day]:
        return sorted(self.days, key=lambda day: day.day_number)

    @property
    def ordered_expenses(self) -> list[Expense]:
        return sorted(self.expenses, key=lambda expense: expense.sort_order)

    def touch(self) -> None:
        self.updated_at = datetime.now()

    def __repr__(self):
        return f"<Trip(name={self.name}, destination={self.destination})>"
