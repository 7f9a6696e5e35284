"""여행 CRUD / 복제 / 통계 API."""

import uuid
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query, Response, status

from app.api.dependencies import get_trip_manager, get_trip_or_404, require_service_secret
from app.core.logger import get_logger
from app.models import Trip
from app.schemas.enums import StopCategory, TripSortOrder
from app.schemas.trip import (
    OutsideRangeResponse,
    StopResponse,
    TripCloneRequest,
    TripCreateRequest,
    TripResponse,
    TripStatisticsResponse,
    TripSummaryResponse,
    TripUpdateRequest,
)
from app.services.trip_service import TripManager, completion_score, filter_stops, sort_trips, trip_statistics

router = APIRouter(prefix="/api/v1", tags=["trips"])
logger = get_logger(__name__)


@router.get("/trips", response_model=list[TripSummaryResponse])
def list_trips(
    sort: TripSortOrder = Query(TripSortOrder.START_DATE_DESCENDING, description="정렬 기준"),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> list[TripSummaryResponse]:
    """여행 목록을 정렬 기준에 맞춰 반환합니다."""
    trips = sort_trips(manager.fetch_trips(), sort)
    return [TripSummaryResponse.model_validate(trip) for trip in trips]


@router.post("/trips", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
def create_trip(
    request: TripCreateRequest,
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> TripResponse:
    """여행을 만들고 기간만큼 일자를 생성합니다."""
    logger.info("Trip create request received: name=%s destination=%s", request.name, request.destination)
    trip = manager.create_validated_trip(
        request.name,
        request.destination,
        request.start_date,
        request.end_date,
        notes=request.notes,
    )
    return TripResponse.model_validate(trip)


@router.get("/trips/conflicts", response_model=list[TripSummaryResponse])
def find_conflicts(
    start_date: date,
    end_date: date,
    exclude_trip_id: Optional[uuid.UUID] = None,
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> list[TripSummaryResponse]:
    """주어진 기간과 겹치는 여행을 반환합니다."""
    excluding = manager.get_trip(exclude_trip_id) if exclude_trip_id else None
    conflicts = manager.find_conflicting_trips(start_date, end_date, excluding=excluding)
    return [TripSummaryResponse.model_validate(trip) for trip in conflicts]


@router.post("/trips/sample-data", dependencies=[Depends(require_service_secret)])
def load_sample_data(manager: TripManager = Depends(get_trip_manager)) -> dict:  # noqa: B008
    """여행이 없을 때 예시 데이터를 채웁니다."""
    return {"loaded": manager.load_sample_data_if_empty()}


@router.get("/trips/{trip_id}", response_model=TripResponse)
def get_trip(trip: Trip = Depends(get_trip_or_404)) -> TripResponse:  # noqa: B008
    return TripResponse.model_validate(trip)


@router.patch("/trips/{trip_id}", response_model=TripResponse)
def update_trip(
    request: TripUpdateRequest,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> TripResponse:
    """여행을 수정합니다. 날짜가 바뀌면 일자가 동기화됩니다."""
    changes = request.model_dump(exclude_unset=True, exclude_none=True)
    logger.info("Trip update request received: trip_id=%s fields=%s", trip.id, sorted(changes))
    manager.update_trip(trip, **changes)
    return TripResponse.model_validate(trip)


@router.delete("/trips/{trip_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_trip(
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> Response:
    manager.delete_trip(trip)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/trips/{trip_id}/outside-range", response_model=OutsideRangeResponse)
def count_days_outside_range(
    start_date: date,
    end_date: date,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> OutsideRangeResponse:
    """기간을 바꾸면 장소와 함께 삭제될 일자 수를 미리 알려줍니다."""
    return OutsideRangeResponse(count=manager.days_with_stops_outside_range(trip, start_date, end_date))


@router.post("/trips/{trip_id}/clone", response_model=TripResponse, status_code=status.HTTP_201_CREATED)
def clone_trip(
    request: TripCloneRequest,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> TripResponse:
    clone = manager.clone_trip(trip, request.new_start_date)
    return TripResponse.model_validate(clone)


@router.get("/trips/{trip_id}/stats", response_model=TripStatisticsResponse)
def get_trip_stats(trip: Trip = Depends(get_trip_or_404)) -> TripStatisticsResponse:  # noqa: B008
    """여행 통계와 계획 완성도를 반환합니다."""
    stats = trip_statistics(trip)
    return TripStatisticsResponse(**stats.model_dump(), completion_score=completion_score(trip))


@router.get("/trips/{trip_id}/stops", response_model=list[StopResponse])
def search_stops(
    query: str = "",
    category: Optional[StopCategory] = None,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
) -> list[StopResponse]:
    """이름/메모/주소 검색어와 카테고리로 여행의 장소를 찾습니다."""
    return [StopResponse.model_validate(stop) for stop in filter_stops(trip, query=query, category=category)]
