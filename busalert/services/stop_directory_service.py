import logging
from typing import Any, Dict, List, Optional

from busalert.algorithms.distance_calculator import great_circle_distance
from busalert.algorithms.region_classifier import city_code_of
from busalert.clients.bis import BisClient
from busalert.clients.kakao import KakaoClient
from busalert.clients.tago import TagoClient
from busalert.core.config import (
    DEFAULT_NEARBY_RADIUS,
    BUS_STOP_KEYWORD,
    REGIONAL_BIS_HOSTS,
)
from busalert.core.exceptions import BusAlertException
from busalert.models.domain import Coordinate, Region, Stop, StopRef

logger = logging.getLogger(__name__)

# 외부 API를 쓸 수 없을 때 보여주는 예시 정류장 (강남역 주변)
SAMPLE_STOPS = [
    Stop(id="1", name="강남역", latitude=37.4979, longitude=127.0276,
         number="12345", address="서울특별시 강남구 강남대로 396"),
    Stop(id="2", name="역삼역", latitude=37.5000, longitude=127.0364,
         number="12346", address="서울특별시 강남구 테헤란로 156"),
    Stop(id="3", name="선릉역", latitude=37.5045, longitude=127.0493,
         number="12347", address="서울특별시 강남구 테헤란로 340"),
    Stop(id="4", name="삼성역", latitude=37.5088, longitude=127.0633,
         number="12348", address="서울특별시 강남구 테헤란로 538"),
]

NEARBY_SOURCES = ("tago", "kakao")


def _to_float(value: Any) -> Optional[float]:
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def stop_from_tago(item: Dict[str, Any], origin: Optional[Coordinate] = None) -> Optional[Stop]:
    lat = _to_float(item.get("gpslati"))
    lon = _to_float(item.get("gpslong"))
    if lat is None or lon is None or not item.get("nodeid"):
        return None

    distance = None
    if origin is not None:
        distance = round(great_circle_distance(origin, Coordinate(lat, lon)))

    return Stop(
        id=str(item["nodeid"]),
        name=item.get("nodenm") or "",
        latitude=lat,
        longitude=lon,
        number=str(item["nodeno"]) if item.get("nodeno") is not None else None,
        distance=distance,
    )


def stop_from_kakao(document: Dict[str, Any], origin: Optional[Coordinate] = None) -> Optional[Stop]:
    """카카오 장소 document (x=경도, y=위도) -> Stop"""
    lat = _to_float(document.get("y"))
    lon = _to_float(document.get("x"))
    if lat is None or lon is None or not document.get("id"):
        return None

    distance = _to_float(document.get("distance")) if document.get("distance") else None
    if distance is None and origin is not None:
        distance = round(great_circle_distance(origin, Coordinate(lat, lon)))

    return Stop(
        id=str(document["id"]),
        name=document.get("place_name") or "",
        latitude=lat,
        longitude=lon,
        address=document.get("road_address_name") or document.get("address_name") or None,
        distance=distance,
    )


def sample_stops_near(origin: Coordinate) -> List[Stop]:
    stops = [
        Stop(
            id=stop.id,
            name=stop.name,
            latitude=stop.latitude,
            longitude=stop.longitude,
            number=stop.number,
            address=stop.address,
            distance=round(great_circle_distance(origin, stop.coordinate)),
        )
        for stop in SAMPLE_STOPS
    ]
    return sorted(stops, key=lambda stop: stop.distance)


class StopDirectory:
    """
    정류장 조회 서비스

    - 이름 -> provider별 정류장 ID (BIS 우선, TAGO 대체)
    - 좌표 주변 정류장 목록
    - 키워드 정류장 검색
    """

    def __init__(self, bis_client: BisClient, tago_client: TagoClient, kakao_client: KakaoClient):
        self.bis_client = bis_client
        self.tago_client = tago_client
        self.kakao_client = kakao_client

    async def find_stop_by_name(
        self, name: str, region: Region, provider: Optional[str] = None
    ) -> Optional[StopRef]:
        """
        Args:
            name: 정류장 이름
            region: 지역 (BIS 사용 여부, TAGO 도시 코드 결정)
            provider: "bis" / "tago"로 제한, None이면 BIS -> TAGO 순서

        Returns:
            첫 번째 검색 결과, 어느 provider에서도 못 찾으면 None
        """
        name = (name or "").strip()
        if not name:
            raise ValueError("정류장 이름이 비어 있습니다")

        if provider in (None, "bis"):
            stop_ref = await self._find_bis_stop(name, region)
            if stop_ref is not None or provider == "bis":
                return stop_ref

        return await self._find_tago_stop(name, region)

    async def _find_bis_stop(self, name: str, region: Region) -> Optional[StopRef]:
        if region.value not in REGIONAL_BIS_HOSTS or not self.bis_client.has_credential:
            return None

        try:
            items = await self.bis_client.find_stations_by_name(region.value, name)
        except BusAlertException as e:
            logger.warning(f"BIS 정류장 검색 실패 ({name}): {e.message}")
            return None

        for item in items:
            # 도착 정보 조회는 stId(정류소 ID) 기준, 없으면 arsId
            stop_id = item.get("stId") or item.get("stationId") or item.get("arsId")
            if stop_id:
                return StopRef(
                    stop_id=stop_id,
                    name=item.get("stNm") or item.get("stationNm") or name,
                    number=item.get("arsId") or None,
                    provider="bis",
                )

        logger.info(f"BIS 정류장 검색 결과 없음: {name}")
        return None

    async def _find_tago_stop(self, name: str, region: Region) -> Optional[StopRef]:
        if not self.tago_client.has_credential:
            return None

        city_code = city_code_of(region)
        try:
            items = await self.tago_client.find_stations_by_name(city_code, name)
        except BusAlertException as e:
            logger.warning(f"TAGO 정류장 검색 실패 ({name}, {city_code}): {e.message}")
            return None

        for item in items:
            if item.get("nodeid"):
                return StopRef(
                    stop_id=str(item["nodeid"]),
                    name=item.get("nodenm") or name,
                    number=str(item["nodeno"]) if item.get("nodeno") is not None else None,
                    provider="tago",
                )

        logger.info(f"TAGO 정류장 검색 결과 없음: {name} ({city_code})")
        return None

    async def find_stops_near(
        self,
        coordinate: Coordinate,
        radius: int = DEFAULT_NEARBY_RADIUS,
        source: str = "tago",
    ) -> List[Stop]:
        """
        좌표 주변 정류장 (가까운 순)

        provider 조회 실패 => 예시 정류장
        조회 성공 + 결과 없음 => 빈 리스트
        """
        if source not in NEARBY_SOURCES:
            raise ValueError(f"지원하지 않는 source: {source}")

        try:
            if source == "kakao":
                stops = await self._kakao_stops_near(coordinate, radius)
            else:
                stops = await self._tago_stops_near(coordinate)
        except BusAlertException as e:
            logger.warning(f"주변 정류장 조회 실패 ({source}), 예시 정류장 사용: {e.message}")
            return sample_stops_near(coordinate)

        stops = [stop for stop in stops if stop.distance is None or stop.distance <= radius]
        return sorted(stops, key=lambda stop: stop.distance if stop.distance is not None else float("inf"))

    async def _tago_stops_near(self, coordinate: Coordinate) -> List[Stop]:
        items = await self.tago_client.find_nearby_stations(coordinate.latitude, coordinate.longitude)
        stops = [stop_from_tago(item, coordinate) for item in items]
        return [stop for stop in stops if stop is not None]

    async def _kakao_stops_near(self, coordinate: Coordinate, radius: int) -> List[Stop]:
        documents = await self.kakao_client.search_keyword(
            BUS_STOP_KEYWORD,
            center=coordinate,
            radius=radius,
            sort_by_distance=True,
        )
        stops = [stop_from_kakao(document, coordinate) for document in documents]
        return [stop for stop in stops if stop is not None]

    async def search_stops(self, query: str) -> List[Stop]:
        """키워드 정류장 검색, 실패 시 이름/번호/주소가 일치하는 예시 정류장"""
        query = (query or "").strip()
        if not query:
            return []

        keyword = query if "정류장" in query else f"{query} {BUS_STOP_KEYWORD}"
        try:
            documents = await self.kakao_client.search_keyword(keyword)
        except BusAlertException as e:
            logger.warning(f"정류장 검색 실패, 예시 정류장 사용 ({query}): {e.message}")
            return [
                stop for stop in SAMPLE_STOPS
                if query in stop.name
                or query in (stop.number or "")
                or query in (stop.address or "")
            ]

        stops = [stop_from_kakao(document) for document in documents]
        return [stop for stop in stops if stop is not None]
