"""일자별 장소 추가 / 이동 / 순서 변경 / 방문 체크 API."""

from fastapi import APIRouter, Depends, HTTPException, Response, status

from app.api.dependencies import get_day_or_404, get_stop_or_404, get_trip_manager
from app.core.logger import get_logger
from app.models import Day, Stop
from app.schemas.presentation import StopRow
from app.schemas.trip import (
    BatchVisitedRequest,
    BatchVisitedResponse,
    DayResponse,
    DayVisitedRequest,
    StopCreateRequest,
    StopMoveRequest,
    StopReorderRequest,
    StopResponse,
)
from app.services.stop_presenter import present_day, present_stop
from app.services.trip_service import TripManager

router = APIRouter(prefix="/api/v1", tags=["stops"])
logger = get_logger(__name__)


@router.post("/days/{day_id}/stops", response_model=StopResponse, status_code=status.HTTP_201_CREATED)
def add_stop(
    request: StopCreateRequest,
    day: Day = Depends(get_day_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> StopResponse:
    """일자의 마지막 순서로 장소를 추가합니다."""
    stop = manager.add_validated_stop(
        day,
        request.name,
        latitude=request.latitude,
        longitude=request.longitude,
        category=request.category,
        arrival_time=request.arrival_time,
        departure_time=request.departure_time,
        notes=request.notes,
    )
    return StopResponse.model_validate(stop)


@router.get("/days/{day_id}/rows", response_model=list[StopRow])
def list_stop_rows(day: Day = Depends(get_day_or_404)) -> list[StopRow]:  # noqa: B008
    """일정 화면에 그릴 장소 행 목록을 반환합니다."""
    return present_day(day)


@router.post("/days/{day_id}/reorder", response_model=DayResponse)
def reorder_stops(
    request: StopReorderRequest,
    day: Day = Depends(get_day_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> DayResponse:
    try:
        manager.reorder_stops(day, request.source_indices, request.destination)
    except IndexError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc
    return DayResponse.model_validate(day)


@router.post("/days/{day_id}/visited", response_model=BatchVisitedResponse)
def set_day_visited(
    request: DayVisitedRequest,
    day: Day = Depends(get_day_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> BatchVisitedResponse:
    return BatchVisitedResponse(updated=manager.batch_set_day_visited(day, request.visited))


@router.post("/stops/visited", response_model=BatchVisitedResponse)
def set_stops_visited(
    request: BatchVisitedRequest,
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> BatchVisitedResponse:
    """선택한 장소들의 방문 여부를 한 번에 바꿉니다. 없는 ID는 무시합니다."""
    stops = [stop for stop in (manager.get_stop(stop_id) for stop_id in request.stop_ids) if stop is not None]
    if len(stops) != len(request.stop_ids):
        logger.warning("Batch visited: %d of %d stops not found", len(request.stop_ids) - len(stops), len(request.stop_ids))
    return BatchVisitedResponse(updated=manager.batch_set_visited(stops, request.visited))


@router.get("/stops/{stop_id}/row", response_model=StopRow)
def get_stop_row(stop: Stop = Depends(get_stop_or_404)) -> StopRow:  # noqa: B008
    return present_stop(stop)


@router.post("/stops/{stop_id}/toggle-visited", response_model=StopResponse)
def toggle_visited(
    stop: Stop = Depends(get_stop_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> StopResponse:
    manager.toggle_visited(stop)
    return StopResponse.model_validate(stop)


@router.post("/stops/{stop_id}/move", response_model=StopResponse)
def move_stop(
    request: StopMoveRequest,
    stop: Stop = Depends(get_stop_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> StopResponse:
    """장소를 다른 일자의 마지막 순서로 옮깁니다."""
    target_day = manager.get_day(request.target_day_id)
    if target_day is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="일자를 찾을 수 없습니다.")
    manager.move_stop(stop, target_day)
    return StopResponse.model_validate(stop)


@router.delete("/stops/{stop_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_stop(
    stop: Stop = Depends(get_stop_or_404),  # noqa: B008
    manager: TripManager = Depends(get_trip_manager),  # noqa: B008
) -> Response:
    manager.delete_stop(stop)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
