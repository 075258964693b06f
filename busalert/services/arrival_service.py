"""
도착 정보 집계 서비스

provider 순서: BIS (서울/경기) -> TAGO (전국) -> 예시 데이터
먼저 비어 있지 않은 결과를 돌려준 provider가 응답
"""

import logging
from typing import List

from busalert.algorithms.arrival_normalizer import normalize_bis_items, normalize_tago_items
from busalert.algorithms.region_classifier import city_code_of
from busalert.clients.bis import BisClient
from busalert.clients.tago import TagoClient
from busalert.core.config import REGIONAL_BIS_HOSTS
from busalert.core.exceptions import BusAlertException, StopNotResolvedException
from busalert.models.domain import (
    PLACEHOLDER_SOURCE,
    ArrivalRecord,
    ArrivalResult,
    Region,
    StopRef,
)
from busalert.services.stop_directory_service import StopDirectory

logger = logging.getLogger(__name__)


def placeholder_arrivals() -> List[ArrivalRecord]:
    """모든 provider 실패 시 화면 구성을 위한 예시 도착 정보"""
    return [
        ArrivalRecord(
            route_id="146", route_name="146번", route_type="간선",
            arrival_time=180, arrival_time2=600,
            location_no1=2, location_no2=5,
        ),
        ArrivalRecord(
            route_id="241", route_name="241번", route_type="지선",
            arrival_time=420, arrival_time2=900,
            location_no1=1, location_no2=3,
            low_plate=True,
        ),
        ArrivalRecord(
            route_id="463", route_name="463번", route_type="광역",
            arrival_time=60, arrival_time2=480,
            location_no1=0, location_no2=4,
        ),
    ]


class ArrivalProvider:
    """도착 정보 provider 공통 인터페이스"""

    name = "provider"

    def __init__(self, directory: StopDirectory):
        self.directory = directory

    def supports(self, region: Region) -> bool:
        raise NotImplementedError

    async def fetch(self, stop_ref: StopRef, region: Region) -> List[ArrivalRecord]:
        raise NotImplementedError

    async def resolve_stop_id(self, stop_ref: StopRef, region: Region) -> str:
        """
        provider ID 체계의 정류장 ID

        - 같은 provider에서 나온 ID => 그대로
        - 호출자가 준 숫자 ID (provider 없음) => 그대로
        - 다른 provider의 ID 또는 그 외 => 이름으로 재조회
        """
        if stop_ref.provider == self.name:
            return stop_ref.stop_id
        if stop_ref.provider is None and stop_ref.stop_id and stop_ref.stop_id.isdigit():
            return stop_ref.stop_id

        if stop_ref.name:
            resolved = await self.directory.find_stop_by_name(
                stop_ref.name, region, provider=self.name
            )
            if resolved is not None:
                return resolved.stop_id

        raise StopNotResolvedException(
            f"{self.name} 정류장 ID를 찾을 수 없습니다: {stop_ref.name or stop_ref.stop_id}"
        )


class BisArrivalProvider(ArrivalProvider):
    name = "bis"

    def __init__(self, client: BisClient, directory: StopDirectory):
        super().__init__(directory)
        self.client = client

    def supports(self, region: Region) -> bool:
        return region.value in REGIONAL_BIS_HOSTS and self.client.has_credential

    async def fetch(self, stop_ref: StopRef, region: Region) -> List[ArrivalRecord]:
        stop_id = await self.resolve_stop_id(stop_ref, region)
        items = await self.client.get_arrivals(region.value, stop_id)
        return normalize_bis_items(items)


class TagoArrivalProvider(ArrivalProvider):
    name = "tago"

    def __init__(self, client: TagoClient, directory: StopDirectory):
        super().__init__(directory)
        self.client = client

    def supports(self, region: Region) -> bool:
        return self.client.has_credential

    async def fetch(self, stop_ref: StopRef, region: Region) -> List[ArrivalRecord]:
        stop_id = await self.resolve_stop_id(stop_ref, region)
        items = await self.client.get_arrivals(city_code_of(region), stop_id)
        return normalize_tago_items(items)


class ArrivalAggregator:
    def __init__(self, providers: List[ArrivalProvider]):
        self.providers = providers

    async def get_arrivals(self, stop_ref: StopRef, region: Region) -> ArrivalResult:
        """
        Args:
            stop_ref: 정류장 (ID + 이름)
            region: 지역

        Returns:
            ArrivalResult (source = 응답한 provider 또는 "placeholder")
        """
        for provider in self.providers:
            if not provider.supports(region):
                continue

            try:
                arrivals = await provider.fetch(stop_ref, region)
            except BusAlertException as e:
                logger.warning(f"{provider.name} 도착 정보 조회 실패 [{e.code}]: {e.message}")
                continue
            except Exception as e:
                logger.error(f"{provider.name} 도착 정보 처리 중 오류: {e}", exc_info=True)
                continue

            if arrivals:
                logger.info(
                    f"도착 정보 {len(arrivals)}개 노선 ({provider.name}, "
                    f"{stop_ref.name or stop_ref.stop_id})"
                )
                return ArrivalResult(arrivals=arrivals, source=provider.name)

            logger.info(f"{provider.name} 도착 정보 없음: {stop_ref.name or stop_ref.stop_id}")

        logger.warning(f"모든 provider 실패, 예시 데이터 사용: {stop_ref.name or stop_ref.stop_id}")
        return ArrivalResult(arrivals=placeholder_arrivals(), source=PLACEHOLDER_SOURCE)
