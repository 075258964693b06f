import logging
from typing import Optional

from busalert.algorithms.region_classifier import city_code_of
from busalert.models.domain import (
    ArrivalLookup,
    Coordinate,
    LookupStatus,
    StopRef,
)
from busalert.services.arrival_service import ArrivalAggregator
from busalert.services.geo_service import GeoService
from busalert.services.stop_directory_service import StopDirectory

logger = logging.getLogger(__name__)


class BusAlertService:
    """
    정류장 -> 도착 정보 조회 흐름

    1. 좌표로 지역 판별, 지원 지역 확인
    2. 이름만 있으면 정류장 ID 조회 (도착 정보 조회 전에 완료)
    3. provider 순서대로 도착 정보 조회
    """

    def __init__(self, geo_service: GeoService, directory: StopDirectory, aggregator: ArrivalAggregator):
        self.geo_service = geo_service
        self.directory = directory
        self.aggregator = aggregator

    async def lookup_arrivals(
        self,
        stop_id: Optional[str] = None,
        stop_name: Optional[str] = None,
        coordinate: Optional[Coordinate] = None,
    ) -> ArrivalLookup:
        if not stop_id and not (stop_name or "").strip():
            raise ValueError("stop_id 또는 stop_name이 필요합니다")

        lat = coordinate.latitude if coordinate else None
        lon = coordinate.longitude if coordinate else None
        region = self.geo_service.classify_region(lat, lon)
        city_code = city_code_of(region)

        message = self.geo_service.region_support_message(lat, lon)
        if message:
            logger.info(f"지원되지 않는 지역: {region.value}")
            return ArrivalLookup(
                status=LookupStatus.UNSUPPORTED_REGION,
                region=region,
                city_code=city_code,
                message=message,
            )

        if stop_id:
            stop_ref = StopRef(stop_id=stop_id, name=stop_name)
        else:
            stop_ref = await self.directory.find_stop_by_name(stop_name, region)
            if stop_ref is None:
                return ArrivalLookup(
                    status=LookupStatus.STOP_NOT_FOUND,
                    region=region,
                    city_code=city_code,
                    message=f"'{stop_name}' 정류장을 찾을 수 없습니다",
                )

        result = await self.aggregator.get_arrivals(stop_ref, region)
        return ArrivalLookup(
            status=LookupStatus.PLACEHOLDER if result.is_placeholder else LookupStatus.LIVE,
            region=region,
            city_code=city_code,
            stop=stop_ref,
            arrivals=result.arrivals,
        )
