"""여행 기간 날씨 예보 API."""

from fastapi import APIRouter, Depends

from app.api.dependencies import get_trip_or_404
from app.core.logger import get_logger
from app.models import Trip
from app.schemas.weather import WeatherResponse
from app.services.weather_service import WeatherService, get_weather_service

router = APIRouter(prefix="/api/v1", tags=["weather"])
logger = get_logger(__name__)


@router.get("/trips/{trip_id}/weather", response_model=WeatherResponse)
async def get_trip_weather(
    trip: Trip = Depends(get_trip_or_404),  # noqa: B008
    weather_service: WeatherService = Depends(get_weather_service),  # noqa: B008
) -> WeatherResponse:
    """여행지의 일별 예보를 조회합니다. 조회 실패는 `error_message`로 전달됩니다."""
    logger.info("Weather request received: trip_id=%s destination=%s", trip.id, trip.destination)
    return await weather_service.fetch_trip_forecast(trip)
