import logging
from typing import Dict, List, Optional

from busalert.algorithms.distance_calculator import DistanceCalculator
from busalert.algorithms.region_classifier import classify_region, region_name
from busalert.clients.tago import TagoClient
from busalert.core.config import ApiCredentials, REGIONAL_BIS_HOSTS
from busalert.core.exceptions import BusAlertException
from busalert.models.domain import Region

logger = logging.getLogger(__name__)


class GeoService:
    """지역 판별 / GPS 기반 도시 코드 조회 서비스"""

    def __init__(self, tago_client: TagoClient, credentials: ApiCredentials):
        self.tago_client = tago_client
        self.credentials = credentials
        self.distance_calc = DistanceCalculator()

    def classify_region(self, lat: Optional[float], lon: Optional[float]) -> Region:
        return classify_region(lat, lon)

    async def city_code_from_coordinate(self, lat: float, lon: float) -> Optional[str]:
        """
        GPS 근처 정류소들 중 가장 가까운 정류소의 도시 코드

        조회 실패 / 결과 없음 => None
        """
        try:
            items = await self.tago_client.find_nearby_stations(lat, lon, num_of_rows=10)
        except BusAlertException as e:
            logger.warning(f"GPS 기반 도시코드 조회 실패: {e.message}")
            return None

        closest_item = None
        closest_distance = float("inf")

        for item in items:
            try:
                item_lat = float(item.get("gpslati") or 0)
                item_lon = float(item.get("gpslong") or 0)
            except (TypeError, ValueError):
                continue

            distance = self.distance_calc.calculate_distance(lat, lon, item_lat, item_lon)
            if distance < closest_distance:
                closest_distance = distance
                closest_item = item

        if closest_item is None or not closest_item.get("citycode"):
            logger.warning(f"GPS 기반 정류소 조회 결과에 도시코드가 없습니다: ({lat}, {lon})")
            return None

        city_code = str(closest_item["citycode"])
        logger.debug(f"도시코드 조회: ({lat}, {lon}) -> {city_code}, {closest_distance:.0f}m")
        return city_code

    async def list_city_codes(self) -> List[Dict[str, str]]:
        try:
            items = await self.tago_client.get_city_codes()
        except BusAlertException as e:
            logger.warning(f"도시코드 목록 조회 실패: {e.message}")
            return []

        return [
            {"citycode": str(item.get("citycode", "")), "cityname": item.get("cityname") or ""}
            for item in items
        ]

    def region_support_message(
        self, lat: Optional[float] = None, lon: Optional[float] = None
    ) -> Optional[str]:
        """
        지원되지 않는 지역이면 안내 메시지, 지원되면 None

        공공데이터포털 키가 있으면 TAGO로 전국 지원
        """
        if self.credentials.national_transit_api_key:
            return None

        region = classify_region(lat, lon)
        if region.value in REGIONAL_BIS_HOSTS and self.credentials.regional_api_key:
            return None

        return (
            f"{region_name(region)} 지역의 버스 도착 정보는 현재 지원되지 않습니다.\n\n"
            "공공데이터포털 API 키를 설정하시면 전국 대부분의 도시에서 서비스를 이용하실 수 있습니다."
        )
