"""
위도/경도 기반 지역 판별 및 TAGO 도시 코드 변환

경계 박스는 서로 겹치므로 정의된 순서대로 검사하고 처음 일치한 지역을 사용
"""

from typing import List, Optional, Tuple

from busalert.core.config import (
    CITY_CODES,
    DEFAULT_CITY_CODE,
    REGION_NAMES,
    DEFAULT_REGION_NAME,
)
from busalert.models.domain import Region, DEFAULT_REGION

# (지역, 최소 위도, 최대 위도, 최소 경도, 최대 경도) => 순서가 곧 우선순위
REGION_BOUNDS: List[Tuple[Region, float, float, float, float]] = [
    (Region.SEOUL, 37.4, 37.7, 126.8, 127.2),
    # 인천은 경기도 박스에 포함되므로 경기도보다 먼저 검사
    (Region.INCHEON, 37.4, 37.6, 126.5, 126.8),
    (Region.GYEONGGI, 37.0, 38.0, 126.5, 127.5),
    (Region.BUSAN, 35.0, 35.3, 129.0, 129.3),
    (Region.DAEGU, 35.7, 36.0, 128.4, 128.7),
    (Region.GWANGJU, 35.1, 35.2, 126.8, 126.9),
    (Region.DAEJEON, 36.3, 36.4, 127.3, 127.5),
]


def _is_valid_coordinate(lat: Optional[float], lon: Optional[float]) -> bool:
    if lat is None or lon is None:
        return False
    # 0 좌표는 위치 미수신으로 간주
    if not lat or not lon:
        return False
    return -90 <= lat <= 90 and -180 <= lon <= 180


def classify_region(lat: Optional[float] = None, lon: Optional[float] = None) -> Region:
    """좌표 -> 지역 (항상 값을 반환, 판별 불가 시 서울)"""
    if not _is_valid_coordinate(lat, lon):
        return DEFAULT_REGION

    for region, min_lat, max_lat, min_lon, max_lon in REGION_BOUNDS:
        if min_lat <= lat <= max_lat and min_lon <= lon <= max_lon:
            return region

    return DEFAULT_REGION


def city_code_of(region) -> str:
    """지역 -> TAGO 도시 코드 (기본값: 서울=11)"""
    key = region.value if isinstance(region, Region) else str(region)
    return CITY_CODES.get(key, DEFAULT_CITY_CODE)


def region_name(region) -> str:
    key = region.value if isinstance(region, Region) else str(region)
    return REGION_NAMES.get(key, DEFAULT_REGION_NAME)
