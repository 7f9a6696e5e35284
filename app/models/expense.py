# app/models/expense.py
from __future__ import annotations

import uuid
from datetime import date, datetime
from typing import TYPE_CHECKING

from sqlalchemy import Date, DateTime, Float, ForeignKey, Integer, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.models.base import Base
from app.schemas.enums import ExpenseCategory, parse_enum

if TYPE_CHECKING:
    from app.models.trip import Trip


# Expense 테이블 정의 (여행 예산 대비 지출)
class Expense(Base):
    __tablename__ = "expenses"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    trip_id: Mapped[uuid.UUID | None] = mapped_column(ForeignKey("trips.id", ondelete="CASCADE"), index=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    amount: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    currency_code: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    date_incurred: Mapped[date] = mapped_column(Date, nullable=False)
    category_raw: Mapped[str] = mapped_column(String(20), nullable=False, default=ExpenseCategory.OTHER.value)
    notes: Mapped[str] = mapped_column(Text, nullable=False, default="")
    sort_order: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.now)

    trip: Mapped[Trip | None] = relationship(back_populates="expenses")

    def __init__(self, **kwargs) -> None:
        kwargs.setdefault("id", uuid.uuid4())
        kwargs.setdefault("currency_code", "USD")
        kwargs.setdefault("date_incurred", date.today())
        kwargs.setdefault("notes", "")
        kwargs.setdefault("sort_order", 0)
        kwargs.setdefault("created_at", datetime.now())
        if "category" not in kwargs:
            kwargs.setdefault("category_raw", ExpenseCategory.OTHER.value)
        super().__init__(**kwargs)

    @property
    def category(self) -> ExpenseCategory:
        return parse_enum(ExpenseCategory, self.category_raw, ExpenseCategory.OTHER)

    @category.setter
    def category(self, value: ExpenseCategory | str) -> None:
        self.category_raw = ExpenseCategory(value).value

    def __repr__(self):
        return f"<Expense(title={self.title}, amount={self.amount})>"
