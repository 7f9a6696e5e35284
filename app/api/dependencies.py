"""API 의존성 모음."""

import uuid

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.orm import Session

from app.core.config import get_settings
from app.database import get_db
from app.models import Day, Expense, Stop, Trip
from app.services.trip_service import TripManager


def get_trip_manager(db: Session = Depends(get_db)) -> TripManager:  # noqa: B008
    """요청 단위 세션을 감싼 `TripManager`를 제공합니다."""
    return TripManager(db)


def get_trip_or_404(trip_id: uuid.UUID, manager: TripManager = Depends(get_trip_manager)) -> Trip:  # noqa: B008
    trip = manager.get_trip(trip_id)
    if trip is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="여행을 찾을 수 없습니다.")
    return trip


def get_day_or_404(day_id: uuid.UUID, manager: TripManager = Depends(get_trip_manager)) -> Day:  # noqa: B008
    day = manager.get_day(day_id)
    if day is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="일자를 찾을 수 없습니다.")
    return day


def get_stop_or_404(stop_id: uuid.UUID, manager: TripManager = Depends(get_trip_manager)) -> Stop:  # noqa: B008
    stop = manager.get_stop(stop_id)
    if stop is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="장소를 찾을 수 없습니다.")
    return stop


def get_expense_or_404(
    expense_id: uuid.UUID,
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> Expense:
    expense = manager.get_expense(expense_id)
    if expense is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="지출을 찾을 수 없습니다.")
    return expense


def require_service_secret(
    x_service_secret: str | None = Header(default=None, alias="x-service-secret"),
) -> None:
    """서비스 간 인증을 위한 시크릿 헤더를 검증한다."""
    settings = get_settings()
    if not settings.SERVICE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="서비스 시크릿 설정이 없습니다.",
        )

    if x_service_secret != settings.SERVICE_SECRET:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="유효하지 않은 서비스 시크릿입니다.",
        )
