"""좌표 거리 계산과 반경 검색용 경계 상자."""

from __future__ import annotations

import math
from dataclasses import dataclass

EARTH_RADIUS_METERS = 6_371_000.0
METERS_PER_MILE = 1609.34

# 위도 1도 길이(m). 경도 1도는 여기에 cos(위도)를 곱한다.
_METERS_PER_DEGREE = math.pi * EARTH_RADIUS_METERS / 180.0
# 고위도에서 대권이 극 쪽으로 휘는 만큼 상자를 넓힌다.
_BOX_PADDING = 1.1
_POLE_GUARD = 1e-6


def haversine_meters(lat1: float, lng1: float, lat2: float, lng2: float) -> float:
    """두 좌표 사이의 대권 거리(m)를 반환합니다."""
    phi1 = math.radians(float(lat1))
    phi2 = math.radians(float(lat2))
    d_phi = phi2 - phi1
    d_lambda = math.radians(float(lng2) - float(lng1))

    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return 2 * EARTH_RADIUS_METERS * math.asin(min(1.0, math.sqrt(a)))


def has_coordinates(latitude: float | None, longitude: float | None) -> bool:
    """(0, 0)이나 None은 좌표 미지정으로 취급합니다."""
    if latitude is None or longitude is None:
        return False
    return not (float(latitude) == 0.0 and float(longitude) == 0.0)


@dataclass(frozen=True, slots=True)
class BoundingBox:
    """중심점 반경을 감싸는 위경도 상자.

    하버사인 계산 전에 후보를 빠르게 걸러내는 용도이므로 상자는 원보다 넉넉합니다.
    날짜 변경선을 넘는 상자는 경도 조건을 완화해 항상 통과시킵니다.
    """

    south: float
    west: float
    north: float
    east: float
    wraps_antimeridian: bool = False

    @classmethod
    def around(cls, latitude: float, longitude: float, radius_meters: float) -> BoundingBox:
        radius = max(0.0, float(radius_meters)) * _BOX_PADDING
        lat = float(latitude)
        lng = float(longitude)

        lat_delta = radius / _METERS_PER_DEGREE
        cos_lat = max(abs(math.cos(math.radians(lat))), _POLE_GUARD)
        lng_delta = radius / (_METERS_PER_DEGREE * cos_lat)

        west = lng - lng_delta
        east = lng + lng_delta
        return cls(
            south=max(-90.0, lat - lat_delta),
            west=west,
            north=min(90.0, lat + lat_delta),
            east=east,
            wraps_antimeridian=west < -180.0 or east > 180.0,
        )

    def contains(self, latitude: float, longitude: float) -> bool:
        """점이 상자 안(경계 포함)에 있는지 반환합니다."""
        if not self.south <= float(latitude) <= self.north:
            return False
        if self.wraps_antimeridian:
            return True
        return self.west <= float(longitude) <= self.east
