"""Open-Meteo 날씨 서비스 테스트."""

from __future__ import annotations

import asyncio
from datetime import date

import pytest
import requests

from app.models import Day, Stop, Trip
from app.services.weather_service import (
    MSG_LOAD_FAILED,
    MSG_LOCATION_NOT_FOUND,
    MSG_NO_CONNECTION,
    MSG_TIMED_OUT,
    WeatherService,
    format_temp,
    resolve_trip_location,
    weather_color,
    weather_description,
    weather_icon,
)
from tests.mocks.mock_weather import MockResponse, install_mock_request


def _fetch(service: WeatherService, latitude=48.85, longitude=2.35):
    return asyncio.run(
        service.fetch_forecast("Paris", latitude, longitude, date(2026, 6, 1), date(2026, 6, 3))
    )


@pytest.mark.parametrize(
    ("code", "icon", "description", "color"),
    [
        (0, "sun.max.fill", "Clear", "yellow"),
        (2, "cloud.sun.fill", "Partly Cloudy", "orange"),
        (45, "cloud.fog.fill", "Foggy", "gray"),
        (63, "cloud.rain.fill", "Rain", "blue"),
        (75, "cloud.snow.fill", "Heavy Snow", "cyan"),
        (96, "cloud.bolt.rain.fill", "Hail Storm", "purple"),
        (42, "cloud.fill", "Unknown", "gray"),
    ],
)
def test_weather_code_mapping(code: int, icon: str, description: str, color: str) -> None:
    assert weather_icon(code) == icon
    assert weather_description(code) == description
    assert weather_color(code) == color


def test_format_temp_rounds() -> None:
    assert format_temp(24.6) == "25°"
    assert format_temp(-0.4) == "0°"


def test_fetch_forecast_maps_daily_rows(monkeypatch) -> None:
    calls = install_mock_request(monkeypatch)
    service = WeatherService(base_url="https://weather.test/v1/forecast", timeout_seconds=10)

    result = _fetch(service)

    assert result.error_message is None
    assert result.location_name == "Paris"
    assert result.temperature_unit == "celsius"
    assert [forecast.date for forecast in result.forecasts] == [date(2026, 6, 1), date(2026, 6, 2)]

    first, second = result.forecasts
    assert (first.high_temp, first.low_temp, first.precip_probability) == (24.6, 15.1, 5)
    assert (first.icon, first.description) == ("sun.max.fill", "Clear")
    assert (second.condition_code, second.precip_probability, second.color) == (61, 80, "blue")

    assert len(calls) == 1
    params = calls[0]["params"]
    assert calls[0]["url"] == "https://weather.test/v1/forecast"
    assert params["start_date"] == "2026-06-01"
    assert params["end_date"] == "2026-06-03"
    assert params["timezone"] == "auto"
    assert params["temperature_unit"] == "celsius"
    assert calls[0]["timeout"] == (3.0, 7.0)


def test_fetch_forecast_passes_fahrenheit(monkeypatch) -> None:
    calls = install_mock_request(monkeypatch)
    service = WeatherService(temperature_unit="fahrenheit")

    result = _fetch(service)

    assert result.temperature_unit == "fahrenheit"
    assert calls[0]["params"]["temperature_unit"] == "fahrenheit"


@pytest.mark.parametrize(
    ("error", "message"),
    [
        (requests.Timeout("slow"), MSG_TIMED_OUT),
        (requests.ConnectionError("offline"), MSG_NO_CONNECTION),
        (requests.RequestException("boom"), MSG_LOAD_FAILED),
    ],
)
def test_fetch_forecast_request_errors(monkeypatch, error: Exception, message: str) -> None:
    install_mock_request(monkeypatch, error=error)

    result = _fetch(WeatherService())

    assert result.error_message == message
    assert result.forecasts == []


def test_fetch_forecast_http_error(monkeypatch) -> None:
    install_mock_request(monkeypatch, response=MockResponse(status_code=500, text="upstream down"))

    assert _fetch(WeatherService()).error_message == MSG_LOAD_FAILED


def test_fetch_forecast_invalid_payload(monkeypatch) -> None:
    install_mock_request(monkeypatch, response=MockResponse(payload={"daily": {"time": ["2026-06-01"]}}))

    assert _fetch(WeatherService()).error_message == MSG_LOAD_FAILED


def test_fetch_forecast_mismatched_daily_lengths(monkeypatch) -> None:
    payload = {
        "daily": {
            "time": ["2026-06-01", "2026-06-02"],
            "temperature_2m_max": [24.6],
            "temperature_2m_min": [15.1, 12.8],
            "weathercode": [0, 61],
        }
    }
    install_mock_request(monkeypatch, response=MockResponse(payload=payload))

    result = _fetch(WeatherService())

    assert result.error_message == MSG_LOAD_FAILED
    assert result.forecasts == []


def test_fetch_forecast_without_coordinates_skips_request(monkeypatch) -> None:
    calls = install_mock_request(monkeypatch)

    result = _fetch(WeatherService(), latitude=None, longitude=None)

    assert result.error_message == MSG_LOCATION_NOT_FOUND
    assert calls == []


def test_resolve_trip_location_prefers_day_location() -> None:
    trip = Trip(name="Paris", destination="Paris", start_date=date(2026, 6, 1), end_date=date(2026, 6, 2))
    first = Day(date=date(2026, 6, 1), day_number=1)
    second = Day(date=date(2026, 6, 2), day_number=2, location="Versailles", location_latitude=48.80, location_longitude=2.12)
    first.stops.append(Stop(name="Tower", latitude=48.8584, longitude=2.2945))
    trip.days.extend([first, second])

    assert resolve_trip_location(trip) == (48.80, 2.12)

    second.location_latitude = 0.0
    second.location_longitude = 0.0
    assert resolve_trip_location(trip) == (48.8584, 2.2945)

    first.stops[0].latitude = 0.0
    first.stops[0].longitude = 0.0
    assert resolve_trip_location(trip) is None


def test_fetch_trip_forecast_without_location(monkeypatch) -> None:
    calls = install_mock_request(monkeypatch)
    trip = Trip(name="Mystery", destination="Somewhere", start_date=date(2026, 6, 1), end_date=date(2026, 6, 1))
    trip.days.append(Day(date=date(2026, 6, 1), day_number=1))

    result = asyncio.run(WeatherService().fetch_trip_forecast(trip))

    assert result.location_name == "Somewhere"
    assert result.error_message == MSG_LOCATION_NOT_FOUND
    assert calls == []
