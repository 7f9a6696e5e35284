"""사진-장소 매칭 API."""

from fastapi import APIRouter, Depends, HTTPException, status

from app.api.dependencies import get_trip_or_404
from app.core.logger import get_logger
from app.models import Trip
from app.schemas.photo import PhotoMatchRequest, PhotoMatchResult
from app.services.photo_matcher import PhotoMatcher, match_photos_for_stop

router = APIRouter(prefix="/api/v1", tags=["photos"])
logger = get_logger(__name__)


@router.post("/trips/{trip_id}/photos/match", response_model=list[PhotoMatchResult])
def match_trip_photos(
    request: PhotoMatchRequest,
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
) -> list[PhotoMatchResult]:
    """사진 위치/촬영 시각을 여행 장소와 매칭합니다.

    `stop_id`를 주면 그 장소에 medium 이상으로 매칭된 사진만 신뢰도 순으로 반환합니다.
    """
    matcher = PhotoMatcher.from_settings(request.radius_miles)
    stops = [stop for day in trip.ordered_days for stop in day.ordered_stops]
    logger.info(
        "Photo match request received: trip_id=%s photos=%d stops=%d radius_m=%.0f",
        trip.id,
        len(request.photos),
        len(stops),
        matcher.max_distance_meters,
    )

    if request.stop_id is None:
        return matcher.match_photos(request.photos, stops)

    target = next((stop for stop in stops if stop.id == request.stop_id), None)
    if target is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="장소를 찾을 수 없습니다.")
    return match_photos_for_stop(matcher, target, stops, request.photos, trip.start_date, trip.end_date)
