from __future__ import annotations

from datetime import date, datetime

import pytest

from app.core.config import get_settings
from app.core.geo import METERS_PER_MILE, BoundingBox, has_coordinates, haversine_meters
from app.models import Stop
from app.schemas.enums import MatchConfidence
from app.schemas.photo import PhotoMetadata
from app.services.photo_matcher import PhotoMatcher, match_photos_for_stop, time_offset_seconds

BASE_LAT = 48.8584
BASE_LNG = 2.2945


def _make_stop(name: str, lat: float = BASE_LAT, lng: float = BASE_LNG, **kwargs) -> Stop:
    return Stop(name=name, latitude=lat, longitude=lng, **kwargs)


def _make_photo(lat: float, lng: float, captured: datetime, asset: str = "IMG_0001") -> PhotoMetadata:
    return PhotoMetadata(asset_identifier=asset, latitude=lat, longitude=lng, capture_date=captured)


def test_haversine_known_distance() -> None:
    # 파리-런던 약 343km
    distance = haversine_meters(48.8566, 2.3522, 51.5074, -0.1278)
    assert distance == pytest.approx(343_500, rel=0.01)
    assert haversine_meters(BASE_LAT, BASE_LNG, BASE_LAT, BASE_LNG) == 0.0


def test_has_coordinates() -> None:
    assert has_coordinates(48.0, 2.0)
    assert has_coordinates(0.0, 2.0)
    assert not has_coordinates(0.0, 0.0)
    assert not has_coordinates(None, 2.0)


def test_bounding_box_around_point() -> None:
    box = BoundingBox.around(BASE_LAT, BASE_LNG, 1000)

    assert box.contains(BASE_LAT + 0.005, BASE_LNG)
    assert box.contains(BASE_LAT, BASE_LNG - 0.01)
    assert not box.contains(BASE_LAT + 0.05, BASE_LNG)
    assert not box.contains(BASE_LAT, BASE_LNG + 0.05)


def test_bounding_box_across_antimeridian() -> None:
    box = BoundingBox.around(-17.0, 179.995, 2000)

    assert box.wraps_antimeridian
    assert box.contains(-17.0, -179.99)
    assert not box.contains(-16.0, 179.995)


def test_time_offset_seconds() -> None:
    stop = _make_stop("Tower", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))

    assert time_offset_seconds(datetime(2026, 6, 1, 11), stop) == 0.0
    assert time_offset_seconds(datetime(2026, 6, 1, 9, 30), stop) == 1800.0
    assert time_offset_seconds(datetime(2026, 6, 1, 13), stop) == 3600.0
    assert time_offset_seconds(datetime(2026, 6, 1, 13), _make_stop("No times")) is None

    arrival_only = _make_stop("Arrival", arrival_time=datetime(2026, 6, 1, 10))
    assert time_offset_seconds(datetime(2026, 6, 1, 10, 10), arrival_only) == 600.0


def test_high_confidence_when_close_and_in_time() -> None:
    stop = _make_stop("Tower", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))
    photo = _make_photo(BASE_LAT + 0.001, BASE_LNG, datetime(2026, 6, 1, 11))

    result = PhotoMatcher().match_photo(photo, [stop])

    assert result.matched_stop_id == stop.id
    assert result.matched_stop_name == "Tower"
    assert result.confidence == MatchConfidence.HIGH
    assert result.time_offset_seconds == 0.0
    assert result.distance_meters == pytest.approx(111, abs=2)


def test_medium_confidence_without_stop_times() -> None:
    stop = _make_stop("Tower")
    photo = _make_photo(BASE_LAT + 0.001, BASE_LNG, datetime(2026, 6, 1, 11))

    assert PhotoMatcher().match_photo(photo, [stop]).confidence == MatchConfidence.MEDIUM


def test_medium_confidence_beyond_half_radius() -> None:
    stop = _make_stop("Tower", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))
    # 약 1.1km: 반경(1마일) 안, 반경 절반 밖
    photo = _make_photo(BASE_LAT + 0.01, BASE_LNG, datetime(2026, 6, 1, 11))

    assert PhotoMatcher().match_photo(photo, [stop]).confidence == MatchConfidence.MEDIUM


def test_low_confidence_outside_time_window() -> None:
    stop = _make_stop("Tower", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))
    photo = _make_photo(BASE_LAT + 0.001, BASE_LNG, datetime(2026, 6, 1, 18))

    result = PhotoMatcher().match_photo(photo, [stop])

    assert result.confidence == MatchConfidence.LOW
    assert result.time_offset_seconds == 6 * 3600


def test_no_match_outside_radius_or_without_coordinates() -> None:
    far = _make_stop("Far", BASE_LAT + 0.05, BASE_LNG)
    unplaced = _make_stop("Unplaced", 0.0, 0.0)
    photo = _make_photo(BASE_LAT, BASE_LNG, datetime(2026, 6, 1, 11))

    result = PhotoMatcher().match_photo(photo, [far, unplaced])

    assert result.confidence == MatchConfidence.NONE
    assert result.matched_stop_id is None


def test_photo_at_null_island_does_not_match_unplaced_stop() -> None:
    unplaced = _make_stop("Unplaced", 0.0, 0.0)
    photo = _make_photo(0.0, 0.0001, datetime(2026, 6, 1, 11))

    assert PhotoMatcher().match_photo(photo, [unplaced]).confidence == MatchConfidence.NONE


def test_nearest_stop_wins_and_time_breaks_ties() -> None:
    cafe = _make_stop("Cafe", BASE_LAT + 0.002, BASE_LNG)
    tower = _make_stop("Tower", BASE_LAT + 0.0005, BASE_LNG)
    photo = _make_photo(BASE_LAT, BASE_LNG, datetime(2026, 6, 1, 11))
    assert PhotoMatcher().match_photo(photo, [cafe, tower]).matched_stop_name == "Tower"

    morning = _make_stop("Morning", arrival_time=datetime(2026, 6, 1, 8), departure_time=datetime(2026, 6, 1, 9))
    midday = _make_stop("Midday", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))
    assert PhotoMatcher().match_photo(photo, [morning, midday]).matched_stop_name == "Midday"


def test_from_settings_uses_radius_override(monkeypatch) -> None:
    monkeypatch.setenv("PHOTO_MATCH_RADIUS_MILES", "-3")
    monkeypatch.setenv("PHOTO_MATCH_TIME_WINDOW_SECONDS", "600")
    get_settings.cache_clear()
    try:
        default_matcher = PhotoMatcher.from_settings()
        wide_matcher = PhotoMatcher.from_settings(radius_miles=5)
    finally:
        get_settings.cache_clear()

    assert default_matcher.max_distance_meters == pytest.approx(METERS_PER_MILE)
    assert default_matcher.max_time_window_seconds == 600
    assert wide_matcher.max_distance_meters == pytest.approx(5 * METERS_PER_MILE)


def test_match_photos_for_stop_filters_window_and_confidence() -> None:
    tower = _make_stop("Tower", arrival_time=datetime(2026, 6, 1, 10), departure_time=datetime(2026, 6, 1, 12))
    museum = _make_stop("Museum", BASE_LAT + 0.03, BASE_LNG)
    photos = [
        _make_photo(BASE_LAT, BASE_LNG, datetime(2026, 6, 1, 11), "in-time"),
        _make_photo(BASE_LAT + 0.01, BASE_LNG, datetime(2026, 6, 1, 11, 30), "medium"),
        _make_photo(BASE_LAT, BASE_LNG, datetime(2026, 6, 1, 20), "late"),
        _make_photo(BASE_LAT, BASE_LNG, datetime(2026, 5, 1, 11), "before-trip"),
        _make_photo(BASE_LAT + 0.03, BASE_LNG, datetime(2026, 6, 1, 15), "museum"),
    ]

    results = match_photos_for_stop(PhotoMatcher(), tower, [tower, museum], photos, date(2026, 6, 1), date(2026, 6, 3))

    assert [result.photo.asset_identifier for result in results] == ["in-time", "medium"]
    assert [result.confidence for result in results] == [MatchConfidence.HIGH, MatchConfidence.MEDIUM]
