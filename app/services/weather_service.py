"""Open-Meteo 일별 예보 조회 서비스 (API 키 불필요)."""

from __future__ import annotations

import asyncio
from datetime import date
from functools import lru_cache
from typing import Any

import requests

from app.core.config import get_settings
from app.core.geo import has_coordinates
from app.core.logger import get_logger
from app.core.timeout_policy import get_timeout_policy, to_requests_timeout
from app.models import Trip
from app.schemas.weather import DayForecast, WeatherResponse

logger = get_logger(__name__)

_DAILY_FIELDS = "temperature_2m_max,temperature_2m_min,weathercode,precipitation_probability_max"

MSG_LOCATION_NOT_FOUND = "Could not find location"
MSG_NO_CONNECTION = "No internet connection"
MSG_TIMED_OUT = "Request timed out"
MSG_LOAD_FAILED = "Could not load weather"

_ICONS: dict[int, str] = {
    0: "sun.max.fill",
    1: "cloud.sun.fill",
    2: "cloud.sun.fill",
    3: "cloud.fill",
    45: "cloud.fog.fill",
    48: "cloud.fog.fill",
    51: "cloud.drizzle.fill",
    53: "cloud.drizzle.fill",
    55: "cloud.drizzle.fill",
    56: "cloud.sleet.fill",
    57: "cloud.sleet.fill",
    61: "cloud.rain.fill",
    63: "cloud.rain.fill",
    65: "cloud.rain.fill",
    66: "cloud.sleet.fill",
    67: "cloud.sleet.fill",
    71: "cloud.snow.fill",
    73: "cloud.snow.fill",
    75: "cloud.snow.fill",
    77: "snowflake",
    80: "cloud.heavyrain.fill",
    81: "cloud.heavyrain.fill",
    82: "cloud.heavyrain.fill",
    85: "cloud.snow.fill",
    86: "cloud.snow.fill",
    95: "cloud.bolt.fill",
    96: "cloud.bolt.rain.fill",
    99: "cloud.bolt.rain.fill",
}

_DESCRIPTIONS: dict[int, str] = {
    0: "Clear",
    1: "Mostly Clear",
    2: "Partly Cloudy",
    3: "Overcast",
    45: "Foggy",
    48: "Foggy",
    51: "Drizzle",
    53: "Drizzle",
    55: "Drizzle",
    56: "Freezing Drizzle",
    57: "Freezing Drizzle",
    61: "Rain",
    63: "Rain",
    65: "Heavy Rain",
    66: "Freezing Rain",
    67: "Freezing Rain",
    71: "Snow",
    73: "Snow",
    75: "Heavy Snow",
    77: "Snow Grains",
    80: "Showers",
    81: "Showers",
    82: "Heavy Showers",
    85: "Snow Showers",
    86: "Snow Showers",
    95: "Thunderstorm",
    96: "Hail Storm",
    99: "Hail Storm",
}


def weather_icon(code: int) -> str:
    """WMO 날씨 코드를 SF Symbols 아이콘 이름으로 변환합니다."""
    return _ICONS.get(code, "cloud.fill")


def weather_description(code: int) -> str:
    return _DESCRIPTIONS.get(code, "Unknown")


def weather_color(code: int) -> str:
    if code == 0:
        return "yellow"
    if code in (1, 2):
        return "orange"
    if code in (3, 45, 48):
        return "gray"
    if 51 <= code <= 67:
        return "blue"
    if 71 <= code <= 86:
        return "cyan"
    if 95 <= code <= 99:
        return "purple"
    return "gray"


def format_temp(value: float) -> str:
    return f"{round(value)}°"


def resolve_trip_location(trip: Trip) -> tuple[float, float] | None:
    """예보 조회 좌표. 좌표가 있는 첫 일자 위치, 없으면 좌표가 있는 첫 장소를 사용합니다."""
    days = trip.ordered_days
    for day in days:
        if has_coordinates(day.location_latitude, day.location_longitude):
            return day.location_latitude, day.location_longitude
    for day in days:
        for stop in day.ordered_stops:
            if has_coordinates(stop.latitude, stop.longitude):
                return stop.latitude, stop.longitude
    return None


class WeatherService:
    """Open-Meteo 기반 날씨 예보 서비스."""

    def __init__(
        self,
        base_url: str = "https://api.open-meteo.com/v1/forecast",
        timeout_seconds: int = 10,
        temperature_unit: str = "celsius",
    ) -> None:
        self._base_url = base_url
        self._timeout_seconds = timeout_seconds
        self._temperature_unit = temperature_unit

    @property
    def temperature_unit(self) -> str:
        return self._temperature_unit

    @classmethod
    def from_settings(cls) -> WeatherService:
        settings = get_settings()
        timeout_policy = get_timeout_policy(settings)
        return cls(
            base_url=settings.WEATHER_API_BASE_URL,
            timeout_seconds=timeout_policy.weather_timeout_seconds,
            temperature_unit=settings.WEATHER_TEMPERATURE_UNIT,
        )

    async def fetch_forecast(
        self,
        location_name: str,
        latitude: float | None,
        longitude: float | None,
        start_date: date,
        end_date: date,
    ) -> WeatherResponse:
        """좌표와 기간으로 일별 예보를 조회합니다. 실패는 `error_message`로 돌려줍니다."""
        response = WeatherResponse(location_name=location_name, temperature_unit=self._temperature_unit)
        if latitude is None or longitude is None:
            response.error_message = MSG_LOCATION_NOT_FOUND
            return response

        params = {
            "latitude": latitude,
            "longitude": longitude,
            "daily": _DAILY_FIELDS,
            "temperature_unit": self._temperature_unit,
            "start_date": start_date.isoformat(),
            "end_date": end_date.isoformat(),
            "timezone": "auto",
        }
        data, error_message = await self._request(params)
        if error_message:
            response.error_message = error_message
            return response

        try:
            response.forecasts = self._map_daily((data or {}).get("daily") or {})
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            logger.error("Open-Meteo response parse failed: %s", exc)
            response.error_message = MSG_LOAD_FAILED
            return response

        logger.info(
            "Weather forecast loaded: location=%s days=%d unit=%s",
            location_name,
            len(response.forecasts),
            self._temperature_unit,
        )
        return response

    async def fetch_trip_forecast(self, trip: Trip) -> WeatherResponse:
        coordinates = resolve_trip_location(trip)
        latitude, longitude = coordinates if coordinates is not None else (None, None)
        return await self.fetch_forecast(trip.destination, latitude, longitude, trip.start_date, trip.end_date)

    async def _request(self, params: dict[str, Any]) -> tuple[dict[str, Any] | None, str | None]:
        request_timeout = to_requests_timeout(self._timeout_seconds)

        def _send() -> requests.Response:
            with requests.Session() as session:
                return session.request(method="GET", url=self._base_url, params=params, timeout=request_timeout)

        try:
            response = await asyncio.to_thread(_send)
            response.raise_for_status()
            return response.json(), None
        except requests.Timeout as exc:
            logger.warning("Open-Meteo request timed out: %s", exc)
            return None, MSG_TIMED_OUT
        except requests.ConnectionError as exc:
            logger.warning("Open-Meteo connection failed: %s", exc)
            return None, MSG_NO_CONNECTION
        except requests.HTTPError as exc:
            response = exc.response
            status_code = response.status_code if response is not None else None
            body = (response.text or "")[:200] if response is not None else ""
            logger.error("Open-Meteo API error: status=%s body=%s", status_code, body)
            return None, MSG_LOAD_FAILED
        except requests.RequestException as exc:
            logger.error("Open-Meteo request failed: %s", exc)
            return None, MSG_LOAD_FAILED
        except ValueError as exc:
            logger.error("Open-Meteo response parse failed: %s", exc)
            return None, MSG_LOAD_FAILED

    def _map_daily(self, daily: dict[str, Any]) -> list[DayForecast]:
        times = daily["time"]
        highs = daily["temperature_2m_max"]
        lows = daily["temperature_2m_min"]
        codes = daily["weathercode"]
        precip = daily.get("precipitation_probability_max") or []

        forecasts: list[DayForecast] = []
        for index, raw_date in enumerate(times):
            high, low, code = highs[index], lows[index], codes[index]
            if high is None or low is None or code is None:
                continue
            code = int(code)
            probability = precip[index] if index < len(precip) else None
            forecasts.append(
                DayForecast(
                    date=date.fromisoformat(raw_date),
                    high_temp=float(high),
                    low_temp=float(low),
                    condition_code=code,
                    precip_probability=int(probability or 0),
                    icon=weather_icon(code),
                    description=weather_description(code),
                    color=weather_color(code),
                )
            )
        return forecasts


@lru_cache(maxsize=1)
def get_weather_service() -> WeatherService:
    """설정 재사용을 위한 프로세스 단위 싱글톤을 반환합니다."""
    return WeatherService.from_settings()
