import math
from functools import lru_cache
from typing import Tuple

from busalert.core.config import WALKING_SPEED
from busalert.models.domain import Coordinate, WalkingRoute

EARTH_RADIUS = 6371000  # meters

# GPS 좌표는 요청마다 달라짐 => 최근 좌표 쌍만 보관
HAVERSINE_CACHE_SIZE = 4096


@lru_cache(maxsize=HAVERSINE_CACHE_SIZE)
def haversine_distance(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    """하버사인 공식으로 지구의 곡률 고려하여 두 좌표 간 거리 계산"""
    # radian convertion
    lat1, lon1, lat2, lon2 = map(math.radians, [lat1, lon1, lat2, lon2])

    # haversine formula
    dlat = lat2 - lat1
    dlon = lon2 - lon1
    a = (
        math.sin(dlat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(dlon / 2) ** 2
    )
    c = 2 * math.asin(math.sqrt(min(1.0, a)))
    return EARTH_RADIUS * c


class DistanceCalculator:
    EARTH_RADIUS = EARTH_RADIUS

    def calculate_distance(
        self, lat1: float, lon1: float, lat2: float, lon2: float
    ) -> float:
        """두 좌표 간 거리 계산(meter)"""
        return self.haversine((lat1, lon1), (lat2, lon2))

    def haversine(
        self, coord1: Tuple[float, float], coord2: Tuple[float, float]
    ) -> float:
        lat1, lon1 = coord1
        lat2, lon2 = coord2
        return haversine_distance(lat1, lon1, lat2, lon2)


_calculator = DistanceCalculator()


def great_circle_distance(a: Coordinate, b: Coordinate) -> float:
    """두 Coordinate 간 직선(대원) 거리 (meter)"""
    return _calculator.calculate_distance(
        a.latitude, a.longitude, b.latitude, b.longitude
    )


def walking_route_from_distance(distance: float) -> WalkingRoute:
    """거리 -> 도보 시간 (4km/h 고정)

    거리 출처(자동차 경로 / 직선 거리)와 무관하게 같은 환산식을 사용한다.
    """
    return WalkingRoute(distance=distance, duration=math.ceil(distance / WALKING_SPEED))
