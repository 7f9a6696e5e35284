"""사진 GPS/촬영 시각으로 여행 장소를 찾아 주는 매처.

각 사진마다 반경 안에서 가장 가까운 장소를 고르고, 거리와 체류 시간대로 신뢰도를 매깁니다.

- high: 반경의 절반 이내이고 촬영 시각이 (도착~출발 ± 허용 시간) 안
- medium: 반경 이내이고 시간이 맞거나 장소에 시간 정보가 없음
- low: 반경 이내지만 시간대를 벗어남
- none: 반경 안에 장소가 없음
"""

from __future__ import annotations

import math
from datetime import date, datetime, time, timedelta
from typing import Iterable

from app.core.config import get_settings
from app.core.geo import METERS_PER_MILE, BoundingBox, has_coordinates, haversine_meters
from app.core.logger import get_logger
from app.models import Stop
from app.schemas.enums import MatchConfidence
from app.schemas.photo import PhotoMatchResult, PhotoMetadata

logger = get_logger(__name__)

DEFAULT_MAX_DISTANCE_METERS = METERS_PER_MILE
DEFAULT_MAX_TIME_WINDOW_SECONDS = 7200


def time_offset_seconds(capture: datetime, stop: Stop) -> float | None:
    """촬영 시각이 장소 체류 구간에서 벗어난 초. 구간 안이면 0, 시간 정보가 없으면 None."""
    start = stop.arrival_time or stop.departure_time
    end = stop.departure_time or stop.arrival_time
    if start is None or end is None:
        return None
    if end < start:
        start, end = end, start
    if capture < start:
        return (start - capture).total_seconds()
    if capture > end:
        return (capture - end).total_seconds()
    return 0.0


class PhotoMatcher:
    """사진-장소 매칭기."""

    def __init__(
        self,
        max_distance_meters: float = DEFAULT_MAX_DISTANCE_METERS,
        max_time_window_seconds: float = DEFAULT_MAX_TIME_WINDOW_SECONDS,
    ) -> None:
        self.max_distance_meters = max_distance_meters if max_distance_meters > 0 else DEFAULT_MAX_DISTANCE_METERS
        self.max_time_window_seconds = max(0.0, float(max_time_window_seconds))

    @classmethod
    def from_settings(cls, radius_miles: float | None = None) -> PhotoMatcher:
        """설정값(반경 마일, 허용 시간)으로 매칭기를 만듭니다."""
        settings = get_settings()
        miles = radius_miles if radius_miles and radius_miles > 0 else settings.PHOTO_MATCH_RADIUS_MILES
        return cls(
            max_distance_meters=miles * METERS_PER_MILE,
            max_time_window_seconds=settings.PHOTO_MATCH_TIME_WINDOW_SECONDS,
        )

    def _search_area(self, photo: PhotoMetadata) -> BoundingBox:
        return BoundingBox.around(photo.latitude, photo.longitude, self.max_distance_meters)

    def match_photo(self, photo: PhotoMetadata, stops: Iterable[Stop]) -> PhotoMatchResult:
        area = self._search_area(photo)
        best: tuple[float, float, Stop, float | None] | None = None

        for stop in stops:
            if not has_coordinates(stop.latitude, stop.longitude):
                continue
            if not area.contains(stop.latitude, stop.longitude):
                continue
            distance = haversine_meters(photo.latitude, photo.longitude, stop.latitude, stop.longitude)
            if distance > self.max_distance_meters:
                continue
            offset = time_offset_seconds(photo.capture_date, stop)
            rank = (distance, offset if offset is not None else math.inf)
            if best is None or rank < best[:2]:
                best = (distance, rank[1], stop, offset)

        if best is None:
            return PhotoMatchResult(photo=photo)

        distance, _, stop, offset = best
        return PhotoMatchResult(
            photo=photo,
            matched_stop_id=stop.id,
            matched_stop_name=stop.name,
            distance_meters=distance,
            time_offset_seconds=offset,
            confidence=self._confidence(distance, offset),
        )

    def match_photos(self, photos: Iterable[PhotoMetadata], stops: Iterable[Stop]) -> list[PhotoMatchResult]:
        candidates = [stop for stop in stops if has_coordinates(stop.latitude, stop.longitude)]
        results = [self.match_photo(photo, candidates) for photo in photos]
        matched = sum(1 for result in results if result.confidence != MatchConfidence.NONE)
        logger.debug("Photo match: %d/%d photos matched against %d stops", matched, len(results), len(candidates))
        return results

    def _confidence(self, distance: float, offset: float | None) -> MatchConfidence:
        time_matches = offset is not None and offset <= self.max_time_window_seconds
        if distance <= self.max_distance_meters / 2 and time_matches:
            return MatchConfidence.HIGH
        if time_matches or offset is None:
            return MatchConfidence.MEDIUM
        return MatchConfidence.LOW


def _trip_window(trip_start: date, trip_end: date) -> tuple[datetime, datetime]:
    """여행 사진 검색 구간: 시작 하루 전 0시부터 종료 이틀 뒤 0시까지."""
    start = datetime.combine(trip_start - timedelta(days=1), time.min)
    end = datetime.combine(trip_end + timedelta(days=2), time.min)
    return start, end


def match_photos_for_stop(
    matcher: PhotoMatcher,
    stop: Stop,
    all_stops: Iterable[Stop],
    photos: Iterable[PhotoMetadata],
    trip_start: date,
    trip_end: date,
) -> list[PhotoMatchResult]:
    """특정 장소에 medium 이상으로 매칭된 사진을 신뢰도 내림차순으로 반환합니다."""
    window_start, window_end = _trip_window(trip_start, trip_end)
    in_window = sorted(
        (photo for photo in photos if window_start <= photo.capture_date <= window_end),
        key=lambda photo: photo.capture_date,
    )
    results = matcher.match_photos(in_window, all_stops)
    stop_results = [
        result
        for result in results
        if result.matched_stop_id == stop.id and result.confidence.rank >= MatchConfidence.MEDIUM.rank
    ]
    return sorted(stop_results, key=lambda result: result.confidence.rank, reverse=True)
